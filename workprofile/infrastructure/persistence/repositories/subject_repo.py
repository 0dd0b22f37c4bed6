"""Subject (teammate) repository."""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from workprofile.application.dtos.subject import SubjectResult
from workprofile.infrastructure.persistence.models.teammate import Teammate
from workprofile.infrastructure.persistence.repositories.base import BaseRepository
from workprofile.shared.utils.datetime import ensure_utc


def _to_result(t: Teammate) -> SubjectResult:
    """Map ORM to DTO."""
    return SubjectResult(
        id=t.id,
        company_id=t.company_id,
        display_name=t.display_name,
        first_employed_at=ensure_utc(t.first_employed_at),
        last_terminated_at=ensure_utc(t.last_terminated_at),
    )


class SubjectRepository(BaseRepository[Teammate]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Teammate)

    async def get_by_id(self, subject_id: str) -> SubjectResult | None:
        row = await self._get(subject_id)
        return _to_result(row) if row else None

    async def set_last_terminated_at(self, subject_id: str, at: datetime) -> SubjectResult:
        row = await self._get_or_raise(subject_id, "subject")
        row.last_terminated_at = at
        return _to_result(await self._save(row))
