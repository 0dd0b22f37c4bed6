"""Pydantic models for the proposed_state payload stored on a snapshot.

Every section is optional. A field that is absent from the payload is
"not part of this proposal"; a field that is present with null means
"clear this value". Use Proposal.provided(name) (backed by
model_fields_set) to tell the two apart.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from workprofile.domain.exceptions import ValidationException
from workprofile.shared.utils.datetime import coerce_date, coerce_datetime


def _optional(coerce):
    def _inner(value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return coerce(value)

    return _inner


def _to_identifier(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    return value


FlexibleDate = Annotated[date | None, BeforeValidator(_optional(coerce_date))]
FlexibleDateTime = Annotated[datetime | None, BeforeValidator(_optional(coerce_datetime))]
Identifier = Annotated[str, BeforeValidator(_to_identifier)]
OptionalIdentifier = Annotated[str | None, BeforeValidator(_to_identifier)]


class Proposal(BaseModel):
    """Base for proposal sections: unknown keys are ignored, presence is tracked."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    def provided(self, name: str) -> bool:
        """True when the payload carried this field (even as null)."""
        return name in self.model_fields_set

    def has_values(self) -> bool:
        """True when any provided field carries a non-blank value."""
        for name in self.model_fields_set:
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                continue
            return True
        return False


# Check-in sections (shared by employment, assignments and aspirations)


class EmployeeCheckInProposal(Proposal):
    actual_energy_percentage: int | None = None
    employee_rating: str | None = None
    personal_alignment: str | None = None
    employee_private_notes: str | None = None
    employee_completed_at: FlexibleDateTime = None


class ManagerCheckInProposal(Proposal):
    manager_rating: str | None = None
    manager_private_notes: str | None = None
    manager_completed_at: FlexibleDateTime = None
    manager_completed_by_id: OptionalIdentifier = None


class OfficialCheckInProposal(Proposal):
    official_rating: str | None = None
    shared_notes: str | None = None
    official_completed_at: FlexibleDateTime = None
    finalized_by_id: OptionalIdentifier = None


class CheckInSections(Proposal):
    employee_check_in: EmployeeCheckInProposal | None = None
    manager_check_in: ManagerCheckInProposal | None = None
    official_check_in: OfficialCheckInProposal | None = None


# Employment


class RatedPositionProposal(Proposal):
    """A finalized (officially rated) employment tenure."""

    position_id: OptionalIdentifier = None
    manager_id: OptionalIdentifier = None
    seat_id: OptionalIdentifier = None
    employment_type: str | None = None
    official_position_rating: int | None = None
    started_at: FlexibleDate = None
    ended_at: FlexibleDate = None


class EmploymentProposal(CheckInSections):
    position_id: OptionalIdentifier = None
    manager_id: OptionalIdentifier = None
    seat_id: OptionalIdentifier = None
    employment_type: str | None = None
    started_at: FlexibleDate = None
    termination_date: FlexibleDate = None
    official_position_rating: int | None = None
    rated_position: RatedPositionProposal | None = None


# Assignments


class TenureProposal(Proposal):
    anticipated_energy_percentage: int | None = Field(default=None, ge=0, le=100)
    started_at: FlexibleDate = None
    ended_at: FlexibleDate = None


class RatedAssignmentProposal(Proposal):
    """A finalized (officially rated) assignment tenure."""

    official_rating: str | None = None
    anticipated_energy_percentage: int | None = None
    started_at: FlexibleDate = None
    ended_at: FlexibleDate = None


class AssignmentProposal(CheckInSections):
    assignment_id: Identifier
    tenure: TenureProposal | None = None
    rated_assignment: RatedAssignmentProposal | None = None


# Milestones and aspirations


class MilestoneProposal(Proposal):
    ability_id: Identifier
    milestone_level: int | str | None = None
    certifying_subject_id: OptionalIdentifier = None
    attained_at: FlexibleDate = None


class AspirationProposal(CheckInSections):
    aspiration_id: Identifier
    official_rating: str | None = None


class ProposedState(Proposal):
    """Full proposed profile: employment plus per-assignment, milestone and aspiration entries."""

    employment: EmploymentProposal | None = None
    assignments: list[AssignmentProposal] = Field(default_factory=list)
    milestones: list[MilestoneProposal] = Field(default_factory=list)
    aspirations: list[AspirationProposal] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: ProposedState | dict[str, Any] | None) -> ProposedState:
        """Parse a stored or inbound payload.

        None yields an empty proposal. Null lists are treated as empty.

        Raises:
            ValidationException: If the payload does not match the schema.
        """
        if isinstance(payload, ProposedState):
            return payload
        if payload is None:
            return cls()
        data = dict(payload)
        for key in ("assignments", "milestones", "aspirations"):
            if data.get(key) is None:
                data.pop(key, None)
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationException(
                f"Invalid proposed state: {e.errors()[0]['msg']}",
                field=".".join(str(p) for p in e.errors()[0]["loc"]) or None,
            ) from e

    def to_payload(self) -> dict[str, Any]:
        """JSON-safe dict keeping only fields that were provided."""
        return self.model_dump(mode="json", exclude_unset=True)
