"""Profile snapshot repository (append-only; ordering by created_at)."""

from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workprofile.application.dtos.snapshot import SnapshotCreate, SnapshotResult
from workprofile.infrastructure.persistence.models.snapshot import ProfileSnapshot
from workprofile.infrastructure.persistence.repositories.base import BaseRepository
from workprofile.shared.utils.datetime import ensure_utc, utc_now


def _to_result(s: ProfileSnapshot) -> SnapshotResult:
    """Map ORM to DTO."""
    return SnapshotResult(
        id=s.id,
        subject_id=s.subject_id,
        company_id=s.company_id,
        creator_id=s.creator_id,
        change_type=s.change_type,
        proposed_state=s.proposed_state,
        reason=s.reason,
        created_at=ensure_utc(s.created_at),
        effective_date=s.effective_date,
        acknowledged_at=ensure_utc(s.acknowledged_at),
    )


class SnapshotRepository(BaseRepository[ProfileSnapshot]):
    """Snapshot repository. find_previous is strictly-before by created_at within (subject, company)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, ProfileSnapshot)

    async def create(self, data: SnapshotCreate) -> SnapshotResult:  # type: ignore[override]
        # created_at is set client-side: now() is fixed per transaction and
        # would give snapshots created in one transaction the same timestamp.
        snapshot = ProfileSnapshot(
            subject_id=data.subject_id,
            company_id=data.company_id,
            creator_id=data.creator_id,
            change_type=data.change_type,
            proposed_state=data.proposed_state,
            reason=data.reason,
            created_at=utc_now(),
        )
        created = await super().create(snapshot)
        return _to_result(created)

    async def get_by_id(self, snapshot_id: str) -> SnapshotResult | None:
        row = await self._get(snapshot_id)
        return _to_result(row) if row else None

    async def find_previous(
        self, subject_id: str, company_id: str, before: datetime
    ) -> SnapshotResult | None:
        result = await self.db.execute(
            select(ProfileSnapshot)
            .where(
                ProfileSnapshot.subject_id == subject_id,
                ProfileSnapshot.company_id == company_id,
                ProfileSnapshot.created_at < before,
            )
            .order_by(ProfileSnapshot.created_at.desc())
            .limit(1)
        )
        row = result.scalar_one_or_none()
        return _to_result(row) if row else None

    async def list_for_subject(
        self, subject_id: str, company_id: str, skip: int = 0, limit: int = 100
    ) -> list[SnapshotResult]:
        result = await self.db.execute(
            select(ProfileSnapshot)
            .where(
                ProfileSnapshot.subject_id == subject_id,
                ProfileSnapshot.company_id == company_id,
            )
            .order_by(ProfileSnapshot.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return [_to_result(row) for row in result.scalars().all()]

    async def set_effective_date(self, snapshot_id: str, effective_date: date) -> SnapshotResult:
        row = await self._get_or_raise(snapshot_id, "snapshot")
        row.effective_date = effective_date
        return _to_result(await self._save(row))

    async def set_acknowledged_at(self, snapshot_id: str, at: datetime) -> SnapshotResult:
        row = await self._get_or_raise(snapshot_id, "snapshot")
        row.acknowledged_at = at
        return _to_result(await self._save(row))
