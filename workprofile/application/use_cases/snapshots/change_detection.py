"""Change detection: structured diff between a snapshot and its predecessor.

Diffing is pure. Fields absent from the proposing snapshot are not part of
the proposal and never produce a change. Missing sections on either side
are read as empty; the string "none" stands for "no value".
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from workprofile.application.dtos.change_report import (
    NONE_MARKER,
    ChangeCounts,
    ChangeReport,
    DomainChanges,
    EntryChanges,
    FieldChange,
)
from workprofile.application.dtos.snapshot import SnapshotResult
from workprofile.domain.value_objects.core import MilestoneLevel
from workprofile.schemas.proposed_state import (
    AspirationProposal,
    AssignmentProposal,
    CheckInSections,
    EmploymentProposal,
    MilestoneProposal,
    Proposal,
    ProposedState,
)
from workprofile.shared.telemetry.tracing import traced

if TYPE_CHECKING:
    from workprofile.application.use_cases.snapshots.snapshot_operations import SnapshotService

SnapshotLike = SnapshotResult | ProposedState | dict[str, Any] | None

NEW_CHECK_IN = "new check-in"
NEW_RATING = "new rating"
NEW_ASSIGNMENT = "new assignment"
EXISTING_RATING = "rating"

# (payload attribute, reported field name)
EMPLOYMENT_FIELDS = (
    ("position_id", "position"),
    ("manager_id", "manager"),
    ("seat_id", "seat"),
    ("employment_type", "employment_type"),
    ("started_at", "started_at"),
    ("termination_date", "termination_date"),
    ("official_position_rating", "official_position_rating"),
)
RATED_POSITION_FIELDS = (
    ("position_id", "rated_position"),
    ("manager_id", "rated_manager"),
    ("seat_id", "rated_seat"),
    ("employment_type", "rated_employment_type"),
    ("official_position_rating", "rated_official_position_rating"),
    ("started_at", "rated_started_at"),
    ("ended_at", "rated_ended_at"),
)
RATED_ASSIGNMENT_FIELDS = (
    ("official_rating", "rated_official_rating"),
    ("anticipated_energy_percentage", "rated_anticipated_energy_percentage"),
    ("started_at", "rated_started_at"),
    ("ended_at", "rated_ended_at"),
)
TENURE_FIELDS = (
    ("anticipated_energy_percentage", "anticipated_energy_percentage"),
    ("started_at", "started_at"),
    ("ended_at", "ended_at"),
)
MILESTONE_FIELDS = (
    ("milestone_level", "milestone_level"),
    ("certifying_subject_id", "certified_by"),
    ("attained_at", "attained_at"),
)
# section -> (new-section field name, ((attribute, reported name, compare as completion flag), ...))
CHECK_IN_SECTIONS = {
    "employee_check_in": (
        "new_employee_check_in",
        (
            ("actual_energy_percentage", "employee_actual_energy", False),
            ("employee_rating", "employee_rating", False),
            ("personal_alignment", "personal_alignment", False),
            ("employee_private_notes", "employee_private_notes", False),
            ("employee_completed_at", "employee_completion", True),
        ),
    ),
    "manager_check_in": (
        "new_manager_check_in",
        (
            ("manager_rating", "manager_rating", False),
            ("manager_private_notes", "manager_private_notes", False),
            ("manager_completed_at", "manager_completion", True),
        ),
    ),
    "official_check_in": (
        "new_official_check_in",
        (
            ("official_rating", "official_rating", False),
            ("shared_notes", "shared_notes", False),
            ("official_completed_at", "official_completion", True),
            ("finalized_by_id", "finalized_by", False),
        ),
    ),
}


def _state(source: SnapshotLike) -> ProposedState:
    if isinstance(source, SnapshotResult):
        return ProposedState.from_payload(source.proposed_state)
    return ProposedState.from_payload(source)


def _display(value: Any) -> Any:
    if value is None:
        return NONE_MARKER
    if isinstance(value, datetime | date):
        return value.isoformat()
    return value


def _populated(value: Any) -> bool:
    return value is not None and not (isinstance(value, str) and not value.strip())


def _compare(
    new: Proposal,
    old: Proposal | None,
    fields: tuple[tuple[str, str], ...],
    out: list[FieldChange],
) -> None:
    """Append a FieldChange for every provided field whose value differs from old."""
    for attr, name in fields:
        if not new.provided(attr):
            continue
        proposed = getattr(new, attr)
        current = getattr(old, attr) if old is not None else None
        if current != proposed:
            out.append(FieldChange(name, _display(current), _display(proposed)))


def _report_new(new: Proposal, fields: tuple[tuple[str, str], ...], out: list[FieldChange]) -> None:
    """Every populated field of a proposal with no predecessor, against "none"."""
    for attr, name in fields:
        value = getattr(new, attr)
        if new.provided(attr) and _populated(value):
            out.append(FieldChange(name, NONE_MARKER, _display(value)))


def _check_in_changes(
    new: CheckInSections, old: CheckInSections | None, out: list[FieldChange]
) -> None:
    for section, (new_field, fields) in CHECK_IN_SECTIONS.items():
        proposed = getattr(new, section)
        if proposed is None:
            continue
        current = getattr(old, section) if old is not None else None
        if current is None:
            if proposed.has_values():
                out.append(FieldChange(new_field, NONE_MARKER, NEW_CHECK_IN))
            continue
        for attr, name, is_flag in fields:
            if not proposed.provided(attr):
                continue
            p_value, c_value = getattr(proposed, attr), getattr(current, attr)
            if is_flag:
                p_value, c_value = p_value is not None, c_value is not None
            elif attr == "finalized_by_id":
                p_value = p_value or None
                c_value = c_value or None
            if p_value != c_value:
                out.append(FieldChange(name, _display(c_value), _display(p_value)))


def _rating_history_changes(
    new: Proposal,
    old: Proposal | None,
    attr: str,
    added: str,
    removed: str,
    fields: tuple[tuple[str, str], ...],
    out: list[FieldChange],
) -> None:
    if not new.provided(attr):
        return
    proposed = getattr(new, attr)
    current = getattr(old, attr) if old is not None else None
    if proposed is None or not proposed.has_values():
        if current is not None and current.has_values():
            out.append(FieldChange(removed, EXISTING_RATING, NONE_MARKER))
        return
    if current is None or not current.has_values():
        out.append(FieldChange(added, NONE_MARKER, NEW_RATING))
        return
    _compare(proposed, current, fields, out)


def _index(entries: list, key: str) -> dict[str, Any]:
    """First entry per id (later duplicates are ignored)."""
    indexed: dict[str, Any] = {}
    for entry in entries:
        indexed.setdefault(getattr(entry, key), entry)
    return indexed


def _energy(tenure: Any) -> int | None:
    return tenure.anticipated_energy_percentage if tenure is not None else None


def _level(value: Any) -> Any:
    try:
        return MilestoneLevel.parse(value).value
    except ValueError:
        return value


class ChangeDetectionService:
    """Diffs a snapshot against its predecessor across the four domains."""

    def __init__(self, snapshot_service: SnapshotService | None = None) -> None:
        self.snapshot_service = snapshot_service

    @traced("snapshot.diff")
    def diff(self, snapshot: SnapshotLike, previous: SnapshotLike = None) -> ChangeReport:
        """Return the ChangeReport of snapshot against previous (None means first-ever)."""
        new, old = _state(snapshot), _state(previous)
        return ChangeReport(
            employment=self.employment_changes(new.employment, old.employment),
            assignments=self.assignment_changes(new.assignments, old.assignments),
            milestones=self.milestone_changes(new.milestones, old.milestones),
            aspirations=self.aspiration_changes(new.aspirations, old.aspirations),
        )

    def change_counts(self, snapshot: SnapshotLike, previous: SnapshotLike = None) -> ChangeCounts:
        """Per-domain number of entries with at least one changed field."""
        return self.diff(snapshot, previous).counts()

    async def diff_with_previous(self, snapshot: SnapshotResult) -> ChangeReport:
        """Diff a stored snapshot against the latest earlier snapshot in its scope."""
        if self.snapshot_service is None:
            raise RuntimeError("diff_with_previous requires a SnapshotService")
        previous = await self.snapshot_service.find_previous(snapshot)
        return self.diff(snapshot, previous)

    def employment_changes(
        self, new: EmploymentProposal | None, old: EmploymentProposal | None
    ) -> DomainChanges:
        if new is None:
            return DomainChanges()
        changes: list[FieldChange] = []
        if old is None:
            _report_new(new, EMPLOYMENT_FIELDS, changes)
        else:
            _compare(new, old, EMPLOYMENT_FIELDS, changes)
        _rating_history_changes(
            new,
            old,
            "rated_position",
            "new_rated_position",
            "rated_position_removed",
            RATED_POSITION_FIELDS,
            changes,
        )
        _check_in_changes(new, old, changes)
        return DomainChanges((EntryChanges(None, tuple(changes)),))

    def assignment_changes(
        self, new: list[AssignmentProposal], old: list[AssignmentProposal]
    ) -> DomainChanges:
        proposed_by_id = _index(new, "assignment_id")
        previous_by_id = _index(old, "assignment_id")
        entries: list[EntryChanges] = []

        for assignment_id, proposed in proposed_by_id.items():
            previous = previous_by_id.get(assignment_id)
            changes: list[FieldChange] = []
            self._tenure_changes(proposed, previous, changes)
            _check_in_changes(proposed, previous, changes)
            _rating_history_changes(
                proposed,
                previous,
                "rated_assignment",
                "new_rated_assignment",
                "rated_assignment_removed",
                RATED_ASSIGNMENT_FIELDS,
                changes,
            )
            if previous is None and changes:
                changes.insert(0, FieldChange("new_assignment", NONE_MARKER, NEW_ASSIGNMENT))
            entries.append(EntryChanges(assignment_id, tuple(changes)))

        # Dropping an assignment is not tracked; dropping its rating history is.
        for assignment_id, previous in previous_by_id.items():
            if assignment_id in proposed_by_id:
                continue
            if previous.rated_assignment is not None and previous.rated_assignment.has_values():
                entries.append(
                    EntryChanges(
                        assignment_id,
                        (FieldChange("rated_assignment_removed", EXISTING_RATING, NONE_MARKER),),
                    )
                )
        return DomainChanges(tuple(entries))

    @staticmethod
    def _tenure_changes(
        proposed: AssignmentProposal,
        previous: AssignmentProposal | None,
        changes: list[FieldChange],
    ) -> None:
        tenure = proposed.tenure
        if tenure is None:
            return
        energy = _energy(tenure)
        prior = previous.tenure if previous is not None else None
        if prior is None:
            # Zero energy with nothing active only confirms the ended state.
            if energy:
                changes.append(FieldChange("new_tenure", NONE_MARKER, energy))
            return

        differences: list[FieldChange] = []
        _compare(tenure, prior, TENURE_FIELDS, differences)
        if not differences:
            return
        prior_active = bool(_energy(prior)) and prior.ended_at is None
        if not prior_active and energy and tenure.ended_at is None:
            # Reopening an ended tenure starts a new one.
            changes.append(FieldChange("new_tenure", NONE_MARKER, energy))
            return
        changes.extend(differences)

    def milestone_changes(
        self, new: list[MilestoneProposal], old: list[MilestoneProposal]
    ) -> DomainChanges:
        previous_by_id = _index(old, "ability_id")
        entries: list[EntryChanges] = []
        for ability_id, proposed in _index(new, "ability_id").items():
            previous = previous_by_id.get(ability_id)
            changes: list[FieldChange] = []
            if previous is None:
                if _level(proposed.milestone_level) in (0, None):
                    # Removing an attainment nobody recorded is not a change.
                    entries.append(EntryChanges(ability_id, ()))
                    continue
                _report_new(proposed, MILESTONE_FIELDS, changes)
            else:
                for attr, name in MILESTONE_FIELDS:
                    if not proposed.provided(attr):
                        continue
                    p_value, c_value = getattr(proposed, attr), getattr(previous, attr)
                    if attr == "milestone_level":
                        p_value, c_value = _level(p_value), _level(c_value)
                    if p_value != c_value:
                        changes.append(FieldChange(name, _display(c_value), _display(p_value)))
            entries.append(EntryChanges(ability_id, tuple(changes)))
        return DomainChanges(tuple(entries))

    def aspiration_changes(
        self, new: list[AspirationProposal], old: list[AspirationProposal]
    ) -> DomainChanges:
        previous_by_id = _index(old, "aspiration_id")
        entries: list[EntryChanges] = []
        for aspiration_id, proposed in _index(new, "aspiration_id").items():
            previous = previous_by_id.get(aspiration_id)
            changes: list[FieldChange] = []
            if previous is None:
                _report_new(proposed, (("official_rating", "official_rating"),), changes)
            else:
                _compare(proposed, previous, (("official_rating", "official_rating"),), changes)
            _check_in_changes(proposed, previous, changes)
            entries.append(EntryChanges(aspiration_id, tuple(changes)))
        return DomainChanges(tuple(entries))
