"""Check-in domain entity and its completion state machine.

A check-in is completed independently by the employee and by the manager;
the combined state drives whether it can be officially finalized. The
entity is persistence-free; use cases load it, call one transition and
save it inside one atomic unit.
"""

from dataclasses import dataclass
from datetime import date, datetime

from workprofile.domain.enums import (
    CheckInScope,
    CompletionState,
    DisplayMode,
    ViewerRole,
)
from workprofile.domain.exceptions import (
    FinalizationNotAllowedException,
    ValidationException,
)


@dataclass(frozen=True)
class CompletionOutcome:
    """Result of a completion call.

    completion_detected is False when the check-in was already complete on
    both sides before the call (the call changed nothing).
    """

    completion_detected: bool
    state: CompletionState


@dataclass
class CheckInEntity:
    """Position, assignment or aspiration check-in for one subject."""

    id: str
    subject_id: str
    scope: CheckInScope
    scope_id: str
    check_in_started_on: date | None = None

    # Employee side
    actual_energy_percentage: int | None = None
    employee_rating: str | None = None
    employee_personal_alignment: str | None = None
    employee_private_notes: str | None = None
    employee_completed_at: datetime | None = None

    # Manager side
    manager_rating: str | None = None
    manager_private_notes: str | None = None
    manager_completed_at: datetime | None = None
    manager_completed_by_id: str | None = None

    # Official (finalization)
    official_rating: str | None = None
    shared_notes: str | None = None
    official_completed_at: datetime | None = None
    finalized_by_id: str | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate check-in invariants. Raises ValidationException if invalid."""
        if not self.subject_id:
            raise ValidationException("Check-in subject is required", field="subject_id")
        if not self.scope_id:
            raise ValidationException("Check-in scope is required", field="scope_id")
        if self.official_completed_at is not None and not (
            self.employee_completed_at and self.manager_completed_at
        ):
            raise ValidationException(
                "A check-in can only be officially completed after both sides complete it",
                field="official_completed_at",
            )

    @property
    def employee_completed(self) -> bool:
        return self.employee_completed_at is not None

    @property
    def manager_completed(self) -> bool:
        return self.manager_completed_at is not None

    @property
    def officially_completed(self) -> bool:
        return self.official_completed_at is not None

    @property
    def is_open(self) -> bool:
        """Open check-ins (not yet officially completed) are the ones still being worked on."""
        return not self.officially_completed

    @property
    def completion_state(self) -> CompletionState:
        if self.employee_completed and self.manager_completed:
            return CompletionState.BOTH_COMPLETE
        if self.employee_completed:
            return CompletionState.EMPLOYEE_ONLY
        if self.manager_completed:
            return CompletionState.MANAGER_ONLY
        return CompletionState.BOTH_OPEN

    @property
    def ready_for_finalization(self) -> bool:
        return self.completion_state is CompletionState.BOTH_COMPLETE and self.is_open

    def complete_employee_side(self, at: datetime) -> CompletionOutcome:
        """Mark the employee side complete.

        No-op when both sides were already complete. An existing employee
        timestamp is kept so repeated submissions do not move it.
        """
        if self.completion_state is CompletionState.BOTH_COMPLETE:
            return CompletionOutcome(False, CompletionState.BOTH_COMPLETE)
        if self.employee_completed_at is None:
            self.employee_completed_at = at
        return CompletionOutcome(True, self.completion_state)

    def complete_manager_side(self, completed_by_id: str, at: datetime) -> CompletionOutcome:
        """Mark the manager side complete by completed_by_id. No-op when both sides were already complete."""
        if self.completion_state is CompletionState.BOTH_COMPLETE:
            return CompletionOutcome(False, CompletionState.BOTH_COMPLETE)
        if self.manager_completed_at is None:
            self.manager_completed_at = at
            self.manager_completed_by_id = completed_by_id
        return CompletionOutcome(True, self.completion_state)

    def uncomplete_employee_side(self) -> CompletionState:
        """Clear the employee completion (correction before finalization)."""
        self._ensure_not_finalized("employee_completed_at")
        self.employee_completed_at = None
        return self.completion_state

    def uncomplete_manager_side(self) -> CompletionState:
        """Clear the manager completion and the completing actor."""
        self._ensure_not_finalized("manager_completed_at")
        self.manager_completed_at = None
        self.manager_completed_by_id = None
        return self.completion_state

    def finalize(
        self,
        finalized_by_id: str,
        at: datetime,
        official_rating: str | None = None,
        shared_notes: str | None = None,
    ) -> bool:
        """Officially complete the check-in.

        Only allowed in both_complete. Returns False (and changes nothing)
        when the check-in was already finalized.

        Raises:
            FinalizationNotAllowedException: If either side is still open.
        """
        if self.officially_completed:
            return False
        if self.completion_state is not CompletionState.BOTH_COMPLETE:
            raise FinalizationNotAllowedException(self.id, self.completion_state.value)
        if official_rating is not None:
            self.official_rating = official_rating
        if shared_notes is not None:
            self.shared_notes = shared_notes
        self.official_completed_at = at
        self.finalized_by_id = finalized_by_id
        return True

    def viewer_display_mode(self, viewer: ViewerRole) -> DisplayMode:
        """Whether the viewer's own side is still editable or shown as a summary."""
        own_complete = (
            self.employee_completed if viewer is ViewerRole.EMPLOYEE else self.manager_completed
        )
        return DisplayMode.SHOW_COMPLETE_SUMMARY if own_complete else DisplayMode.SHOW_OPEN_FIELDS

    def other_participant_display_mode(self, viewer: ViewerRole) -> DisplayMode:
        """Whether the other side has completed, from the viewer's point of view."""
        other_complete = (
            self.manager_completed if viewer is ViewerRole.EMPLOYEE else self.employee_completed
        )
        if other_complete:
            return DisplayMode.SHOW_OTHER_PARTICIPANT_IS_COMPLETE
        return DisplayMode.SHOW_OTHER_PARTICIPANT_IS_INCOMPLETE

    def _ensure_not_finalized(self, field: str) -> None:
        if self.officially_completed:
            raise ValidationException(
                "Completion cannot be cleared on a finalized check-in", field=field
            )
