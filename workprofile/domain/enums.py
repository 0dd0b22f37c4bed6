"""Domain enumerations for work-profile snapshots, tenures and check-ins.

Enums represent fixed sets of domain values. String-valued so they
serialize unchanged into JSON payloads and database columns.
"""

from enum import Enum


class _ValuesMixin:
    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings (e.g. for validation or CHECK constraints)."""
        return [member.value for member in cls]  # type: ignore[attr-defined]


class ChangeType(_ValuesMixin, str, Enum):
    """What kind of change a snapshot proposes."""

    POSITION_TENURE = "position_tenure"
    ASSIGNMENT_MANAGEMENT = "assignment_management"
    MILESTONE_MANAGEMENT = "milestone_management"
    ASPIRATION_MANAGEMENT = "aspiration_management"
    BULK_UPDATE = "bulk_update"
    BULK_CHECK_IN_FINALIZATION = "bulk_check_in_finalization"


class CheckInScope(_ValuesMixin, str, Enum):
    """What a check-in reviews: the position (employment tenure), an assignment or an aspiration."""

    POSITION = "position"
    ASSIGNMENT = "assignment"
    ASPIRATION = "aspiration"


class CompletionState(_ValuesMixin, str, Enum):
    """Combined employee/manager completion of a check-in.

    both_complete is not terminal: clearing either timestamp moves the
    check-in back to employee_only, manager_only or both_open.
    """

    BOTH_OPEN = "both_open"
    EMPLOYEE_ONLY = "employee_only"
    MANAGER_ONLY = "manager_only"
    BOTH_COMPLETE = "both_complete"


class ViewerRole(_ValuesMixin, str, Enum):
    """Which side of a check-in is looking at it."""

    EMPLOYEE = "employee"
    MANAGER = "manager"


class DisplayMode(_ValuesMixin, str, Enum):
    """How a check-in side should be presented to a viewer."""

    SHOW_OPEN_FIELDS = "show_open_fields"
    SHOW_COMPLETE_SUMMARY = "show_complete_summary"
    SHOW_OTHER_PARTICIPANT_IS_COMPLETE = "show_other_participant_is_complete"
    SHOW_OTHER_PARTICIPANT_IS_INCOMPLETE = "show_other_participant_is_incomplete"


class FieldGroup(_ValuesMixin, str, Enum):
    """Groups of fields the authorization predicate is asked about."""

    EMPLOYEE_CHECK_IN = "employee_check_in"
    MANAGER_CHECK_IN = "manager_check_in"
    OFFICIAL_CHECK_IN = "official_check_in"
    MILESTONE = "milestone"


class Capability(_ValuesMixin, str, Enum):
    """Capabilities an actor can hold independent of the subject."""

    ADMIN_OVERRIDE = "admin_override"


class TenureAction(_ValuesMixin, str, Enum):
    """Which lifecycle policy a tenure call applied."""

    CREATED = "created"
    REPLACED = "replaced"
    ENDED = "ended"
    UNCHANGED = "unchanged"
    SEAT_UPDATED = "seat_updated"
    TERMINATED = "terminated"


class ChangeDomain(_ValuesMixin, str, Enum):
    """Top-level sections of a proposed state."""

    EMPLOYMENT = "employment"
    ASSIGNMENTS = "assignments"
    MILESTONES = "milestones"
    ASPIRATIONS = "aspirations"
