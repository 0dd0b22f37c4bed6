"""DTOs for subjects (teammates)."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class SubjectResult:
    """Subject read-model."""

    id: str
    company_id: str
    display_name: str
    first_employed_at: datetime | None = None
    last_terminated_at: datetime | None = None
