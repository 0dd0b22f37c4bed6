"""DTOs for the change report produced by diffing two snapshots."""

from dataclasses import dataclass, field
from typing import Any

# Marker for "no current value" in a FieldChange.
NONE_MARKER = "none"


@dataclass(frozen=True)
class FieldChange:
    """One differing field: what it is now and what the snapshot proposes."""

    field: str
    current: Any
    proposed: Any

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "current": self.current, "proposed": self.proposed}


@dataclass(frozen=True)
class EntryChanges:
    """Changes for one matched entry (an assignment, ability or aspiration id; None for employment)."""

    key: str | None
    changes: tuple[FieldChange, ...]

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.key, "changes": [c.to_dict() for c in self.changes]}


@dataclass(frozen=True)
class DomainChanges:
    entries: tuple[EntryChanges, ...] = ()

    @property
    def has_changes(self) -> bool:
        return any(entry.changes for entry in self.entries)

    @property
    def changed_entry_count(self) -> int:
        return sum(1 for entry in self.entries if entry.changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "has_changes": self.has_changes,
            "details": [e.to_dict() for e in self.entries if e.changes],
        }


@dataclass(frozen=True)
class ChangeCounts:
    """Per-domain number of entries with at least one changed field."""

    employment: int = 0
    assignments: int = 0
    milestones: int = 0
    aspirations: int = 0

    @property
    def total(self) -> int:
        return self.employment + self.assignments + self.milestones + self.aspirations


@dataclass(frozen=True)
class ChangeReport:
    """Structured diff across employment, assignments, milestones and aspirations."""

    employment: DomainChanges = field(default_factory=DomainChanges)
    assignments: DomainChanges = field(default_factory=DomainChanges)
    milestones: DomainChanges = field(default_factory=DomainChanges)
    aspirations: DomainChanges = field(default_factory=DomainChanges)

    @property
    def has_changes(self) -> bool:
        return any(
            d.has_changes
            for d in (self.employment, self.assignments, self.milestones, self.aspirations)
        )

    def counts(self) -> ChangeCounts:
        return ChangeCounts(
            employment=self.employment.changed_entry_count,
            assignments=self.assignments.changed_entry_count,
            milestones=self.milestones.changed_entry_count,
            aspirations=self.aspirations.changed_entry_count,
        )

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Plain nested structure: {domain: {has_changes, details}}."""
        return {
            "employment": self.employment.to_dict(),
            "assignments": self.assignments.to_dict(),
            "milestones": self.milestones.to_dict(),
            "aspirations": self.aspirations.to_dict(),
        }
