"""Shared utilities: telemetry and cross-cutting helpers.

Used by domain, application, and infrastructure. No business logic.
"""

from workprofile.shared.utils import (
    coerce_date,
    coerce_datetime,
    ensure_utc,
    generate_cuid,
    utc_now,
    utc_today,
)

__all__ = [
    "generate_cuid",
    "utc_now",
    "utc_today",
    "ensure_utc",
    "coerce_date",
    "coerce_datetime",
]
