"""Snapshot store operations: create, look up, list, mark executed, acknowledge."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from workprofile.application.dtos.snapshot import SnapshotCreate, SnapshotResult
from workprofile.core.config import get_settings
from workprofile.domain.enums import ChangeType
from workprofile.domain.exceptions import ReferenceNotFoundException, ValidationException
from workprofile.schemas.proposed_state import ProposedState
from workprofile.shared.telemetry.logging import get_logger
from workprofile.shared.telemetry.tracing import traced
from workprofile.shared.utils.datetime import utc_now, utc_today

if TYPE_CHECKING:
    from workprofile.application.interfaces.repositories import (
        ISnapshotRepository,
        ISubjectRepository,
    )

logger = get_logger(__name__)


class SnapshotService:
    """Append-only snapshot store.

    Snapshots are never unique-constrained; many per subject are expected.
    Ordering is by created_at within (subject_id, company_id).
    """

    def __init__(
        self,
        snapshot_repo: ISnapshotRepository,
        subject_repo: ISubjectRepository,
        default_reason_template: str | None = None,
    ) -> None:
        self.snapshot_repo = snapshot_repo
        self.subject_repo = subject_repo
        self.default_reason_template = (
            default_reason_template or get_settings().snapshot_default_reason_template
        )

    @traced("snapshot.create")
    async def create(
        self,
        subject_id: str,
        company_id: str,
        creator_id: str,
        change_type: ChangeType | str,
        proposed_state: ProposedState | dict[str, Any] | None,
        reason: str | None = None,
    ) -> SnapshotResult:
        """Validate and persist a new snapshot.

        A blank or whitespace-only reason is replaced with the configured
        default ("Check-in finalization for {display_name}").

        Raises:
            ValidationException: Unknown change_type or malformed proposed_state.
            ReferenceNotFoundException: Subject does not exist.
        """
        try:
            change = ChangeType(change_type)
        except ValueError as e:
            raise ValidationException(
                f"Invalid change_type {change_type!r}. Allowed: {', '.join(ChangeType.values())}",
                field="change_type",
            ) from e
        state = ProposedState.from_payload(proposed_state)

        subject = await self.subject_repo.get_by_id(subject_id)
        if subject is None:
            raise ReferenceNotFoundException("subject", subject_id)
        if reason is None or not reason.strip():
            reason = self.default_reason_template.format(display_name=subject.display_name)

        snapshot = await self.snapshot_repo.create(
            SnapshotCreate(
                subject_id=subject_id,
                company_id=company_id,
                creator_id=creator_id,
                change_type=change.value,
                proposed_state=state.to_payload(),
                reason=reason.strip(),
            )
        )
        logger.info(
            "Snapshot %s created for subject %s (%s)", snapshot.id, subject_id, change.value
        )
        return snapshot

    async def get(self, snapshot_id: str) -> SnapshotResult:
        """Return snapshot by id or raise ReferenceNotFoundException."""
        snapshot = await self.snapshot_repo.get_by_id(snapshot_id)
        if snapshot is None:
            raise ReferenceNotFoundException("snapshot", snapshot_id)
        return snapshot

    async def find_previous(self, snapshot: SnapshotResult) -> SnapshotResult | None:
        """Latest snapshot for the same subject and company strictly before this one."""
        return await self.snapshot_repo.find_previous(
            snapshot.subject_id, snapshot.company_id, snapshot.created_at
        )

    async def list_for_subject(
        self, subject_id: str, company_id: str, skip: int = 0, limit: int = 100
    ) -> list[SnapshotResult]:
        """Snapshots for subject in company, newest first."""
        return await self.snapshot_repo.list_for_subject(subject_id, company_id, skip, limit)

    async def mark_executed(
        self, snapshot_id: str, effective_date: date | None = None
    ) -> SnapshotResult:
        """Set effective_date after a successful execution (defaults to today, UTC)."""
        await self.get(snapshot_id)
        return await self.snapshot_repo.set_effective_date(
            snapshot_id, effective_date or utc_today()
        )

    async def acknowledge(self, snapshot_id: str, at: datetime | None = None) -> SnapshotResult:
        """Record that the subject has seen the snapshot. Idempotent: the first timestamp wins."""
        snapshot = await self.get(snapshot_id)
        if snapshot.acknowledged_at is not None:
            return snapshot
        return await self.snapshot_repo.set_acknowledged_at(snapshot_id, at or utc_now())
