"""
UTC datetime utilities and lenient date parsing.

All datetime values in the system should be timezone-aware UTC.
Use these helpers instead of datetime.now() or datetime.utcnow().
"""

import re
from datetime import UTC, date, datetime, time

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_COMPACT_DATE_RE = re.compile(r"^\d{8}$")


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def utc_today() -> date:
    """Return the current UTC calendar date."""
    return utc_now().date()


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Use at repository/persistence boundaries to normalize datetimes.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def coerce_date(value: object) -> date:
    """
    Parse a date from the shapes callers send.

    Accepts date, datetime (its date part), ISO strings (YYYY-MM-DD or a
    full ISO datetime), compact YYYYMMDD strings and 8-digit integers.

    Raises:
        ValueError: If the value cannot be interpreted as a calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not a date: {value!r}")
    if isinstance(value, int):
        value = str(value)
        if not _COMPACT_DATE_RE.match(value):
            raise ValueError(f"Invalid numeric date {value!r}; expected YYYYMMDD")
    if not isinstance(value, str):
        raise ValueError(f"Not a date: {value!r}")

    text = value.strip()
    if _ISO_DATE_RE.match(text):
        return date.fromisoformat(text)
    if _COMPACT_DATE_RE.match(text):
        return datetime.strptime(text, "%Y%m%d").date()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError as e:
        raise ValueError(f"Invalid date {value!r}; expected YYYY-MM-DD") from e


def coerce_datetime(value: object) -> datetime:
    """
    Parse a UTC datetime; plain dates become midnight UTC.

    Raises:
        ValueError: If the value cannot be interpreted as a date or datetime.
    """
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, str) and "T" in value:
        try:
            return ensure_utc(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
        except ValueError as e:
            raise ValueError(f"Invalid datetime {value!r}") from e
    return datetime.combine(coerce_date(value), time.min, tzinfo=UTC)
