"""Shared utilities: datetime parsing and id generators."""

from workprofile.shared.utils.datetime import (
    coerce_date,
    coerce_datetime,
    ensure_utc,
    utc_now,
    utc_today,
)
from workprofile.shared.utils.generators import generate_cuid

__all__ = [
    "generate_cuid",
    "utc_now",
    "utc_today",
    "ensure_utc",
    "coerce_date",
    "coerce_datetime",
]
