"""DTOs for profile snapshots (proposed full-profile state)."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any


@dataclass(frozen=True)
class SnapshotResult:
    """Profile snapshot read-model.

    proposed_state is the stored JSON payload; parse it with
    ProposedState.from_payload before diffing or executing.
    """

    id: str
    subject_id: str
    company_id: str
    creator_id: str
    change_type: str
    proposed_state: dict[str, Any]
    reason: str
    created_at: datetime
    effective_date: date | None = None
    acknowledged_at: datetime | None = None

    @property
    def executed(self) -> bool:
        return self.effective_date is not None

    @property
    def pending(self) -> bool:
        return self.effective_date is None


@dataclass(frozen=True)
class SnapshotCreate:
    """Input for creating a snapshot row (reason already defaulted)."""

    subject_id: str
    company_id: str
    creator_id: str
    change_type: str
    proposed_state: dict[str, Any]
    reason: str
