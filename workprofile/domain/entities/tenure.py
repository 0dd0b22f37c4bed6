"""Tenure domain entities: assignment workload and employment position.

A tenure is a time-bounded allocation with at most one open (ended_at is
None) instance per subject and scope. Ending a tenure on the day its
successor starts is allowed.
"""

from dataclasses import dataclass
from datetime import date, datetime

from workprofile.domain.exceptions import ValidationException
from workprofile.domain.value_objects.core import EnergyPercentage


def _validate_span(started_at: date | datetime, ended_at: date | datetime | None) -> None:
    if ended_at is not None and ended_at < started_at:
        raise ValidationException(
            f"ended_at ({ended_at}) cannot precede started_at ({started_at})",
            field="ended_at",
        )


@dataclass
class AssignmentTenureEntity:
    """Energy allocation of one subject to one assignment."""

    id: str
    subject_id: str
    assignment_id: str
    anticipated_energy_percentage: int
    started_at: date
    ended_at: date | None = None
    official_rating: str | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not self.subject_id:
            raise ValidationException("Subject cannot be nil", field="subject_id")
        if not self.assignment_id:
            raise ValidationException("Assignment cannot be nil", field="assignment_id")
        try:
            EnergyPercentage(self.anticipated_energy_percentage)
        except ValueError as e:
            raise ValidationException(str(e), field="anticipated_energy_percentage") from e
        _validate_span(self.started_at, self.ended_at)

    @property
    def is_active(self) -> bool:
        return self.ended_at is None

    def end(self, on: date) -> None:
        """Close the tenure on the given date (same day as started_at is allowed)."""
        _validate_span(self.started_at, on)
        self.ended_at = on


@dataclass
class EmploymentTenureEntity:
    """Position held by one subject within one company."""

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

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not self.subject_id:
            raise ValidationException("Subject cannot be nil", field="subject_id")
        if not self.company_id:
            raise ValidationException("Company cannot be nil", field="company_id")
        if not self.position_id:
            raise ValidationException("Position cannot be nil", field="position_id")
        _validate_span(self.started_at, self.ended_at)

    @property
    def is_active(self) -> bool:
        return self.ended_at is None

    def end(self, at: datetime) -> None:
        _validate_span(self.started_at, at)
        self.ended_at = at
