"""DTOs for assignment and employment tenures."""

from dataclasses import dataclass
from datetime import date, datetime

from workprofile.domain.enums import TenureAction


@dataclass(frozen=True)
class AssignmentTenureResult:
    """Assignment tenure read-model."""

    id: str
    subject_id: str
    assignment_id: str
    anticipated_energy_percentage: int
    started_at: date
    ended_at: date | None = None
    official_rating: str | None = None

    @property
    def is_active(self) -> bool:
        return self.ended_at is None


@dataclass(frozen=True)
class EmploymentTenureResult:
    """Employment tenure read-model."""

    id: str
    subject_id: str
    company_id: str
    position_id: str
    employment_type: str
    started_at: datetime
    manager_id: str | None = None
    seat_id: str | None = None
    ended_at: datetime | None = None
    official_position_rating: int | None = None

    @property
    def is_active(self) -> bool:
        return self.ended_at is None


# Sentinel for "parameter not supplied" (distinct from None meaning clear).
UNSET: object = object()


@dataclass(frozen=True)
class EmploymentTenureUpdate:
    """Parameters for an employment tenure update.

    Fields left as UNSET are not part of the change. manager_id and seat_id
    accept None or "" to clear; a blank employment_type counts as unset.
    termination_date accepts anything coerce_datetime understands.
    """

    manager_id: object = UNSET
    position_id: object = UNSET
    employment_type: object = UNSET
    seat_id: object = UNSET
    termination_date: object = UNSET

    def supplied(self, name: str) -> bool:
        return getattr(self, name) is not UNSET


@dataclass(frozen=True)
class TenureUpdateResult:
    """Which lifecycle policy applied and the tenures it touched."""

    action: TenureAction
    tenure: AssignmentTenureResult | EmploymentTenureResult | None = None
    ended_tenure: AssignmentTenureResult | EmploymentTenureResult | None = None

    @property
    def changed(self) -> bool:
        return self.action is not TenureAction.UNCHANGED
