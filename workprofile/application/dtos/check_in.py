"""DTOs for check-ins and completion calls."""

from dataclasses import dataclass
from datetime import date, datetime

from workprofile.domain.enums import CompletionState


@dataclass(frozen=True)
class CheckInResult:
    """Check-in read-model (any scope)."""

    id: str
    subject_id: str
    scope: str
    scope_id: str
    check_in_started_on: date | None = None
    actual_energy_percentage: int | None = None
    employee_rating: str | None = None
    employee_personal_alignment: str | None = None
    employee_private_notes: str | None = None
    employee_completed_at: datetime | None = None
    manager_rating: str | None = None
    manager_private_notes: str | None = None
    manager_completed_at: datetime | None = None
    manager_completed_by_id: str | None = None
    official_rating: str | None = None
    shared_notes: str | None = None
    official_completed_at: datetime | None = None
    finalized_by_id: str | None = None


@dataclass(frozen=True)
class CompletionResult:
    """Outcome of a complete/uncomplete/finalize call."""

    check_in: CheckInResult
    state: CompletionState
    completion_detected: bool = True
