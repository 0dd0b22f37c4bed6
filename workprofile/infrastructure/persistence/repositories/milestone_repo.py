"""Milestone attainment repository: upsert/delete per (subject, ability)."""

from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workprofile.application.dtos.milestone import MilestoneAttainmentResult
from workprofile.infrastructure.persistence.models.milestone_attainment import (
    MilestoneAttainment,
)
from workprofile.infrastructure.persistence.repositories.base import BaseRepository


def _to_result(m: MilestoneAttainment) -> MilestoneAttainmentResult:
    """Map ORM to DTO."""
    return MilestoneAttainmentResult(
        id=m.id,
        subject_id=m.subject_id,
        ability_id=m.ability_id,
        milestone_level=m.milestone_level,
        certifying_subject_id=m.certifying_subject_id,
        attained_at=m.attained_at,
    )


class MilestoneRepository(BaseRepository[MilestoneAttainment]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, MilestoneAttainment)

    async def _row(self, subject_id: str, ability_id: str) -> MilestoneAttainment | None:
        result = await self.db.execute(
            select(MilestoneAttainment).where(
                MilestoneAttainment.subject_id == subject_id,
                MilestoneAttainment.ability_id == ability_id,
            )
        )
        return result.scalar_one_or_none()

    async def get(self, subject_id: str, ability_id: str) -> MilestoneAttainmentResult | None:
        row = await self._row(subject_id, ability_id)
        return _to_result(row) if row else None

    async def upsert(
        self,
        subject_id: str,
        ability_id: str,
        milestone_level: int,
        certifying_subject_id: str | None,
        attained_at: date | None,
    ) -> MilestoneAttainmentResult:
        row = await self._row(subject_id, ability_id)
        if row is None:
            created = await self.create(
                MilestoneAttainment(
                    subject_id=subject_id,
                    ability_id=ability_id,
                    milestone_level=milestone_level,
                    certifying_subject_id=certifying_subject_id,
                    attained_at=attained_at,
                )
            )
            return _to_result(created)
        row.milestone_level = milestone_level
        row.certifying_subject_id = certifying_subject_id
        row.attained_at = attained_at
        return _to_result(await self._save(row))

    async def delete(self, subject_id: str, ability_id: str) -> bool:
        row = await self._row(subject_id, ability_id)
        if row is None:
            return False
        await self._delete(row)
        return True
