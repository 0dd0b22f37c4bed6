"""Check-in repository (position, assignment and aspiration scopes)."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workprofile.application.dtos.check_in import CheckInResult
from workprofile.domain.entities.check_in import CheckInEntity
from workprofile.domain.enums import CheckInScope
from workprofile.infrastructure.persistence.models.check_in import CheckIn
from workprofile.infrastructure.persistence.repositories.base import BaseRepository
from workprofile.shared.utils.datetime import ensure_utc

# Columns copied verbatim between entity and row.
_FIELDS = (
    "check_in_started_on",
    "actual_energy_percentage",
    "employee_rating",
    "employee_personal_alignment",
    "employee_private_notes",
    "employee_completed_at",
    "manager_rating",
    "manager_private_notes",
    "manager_completed_at",
    "manager_completed_by_id",
    "official_rating",
    "shared_notes",
    "official_completed_at",
    "finalized_by_id",
)


def _to_result(c: CheckIn) -> CheckInResult:
    """Map ORM to DTO."""
    return CheckInResult(
        id=c.id,
        subject_id=c.subject_id,
        scope=c.scope_type,
        scope_id=c.scope_id,
        check_in_started_on=c.check_in_started_on,
        actual_energy_percentage=c.actual_energy_percentage,
        employee_rating=c.employee_rating,
        employee_personal_alignment=c.employee_personal_alignment,
        employee_private_notes=c.employee_private_notes,
        employee_completed_at=ensure_utc(c.employee_completed_at),
        manager_rating=c.manager_rating,
        manager_private_notes=c.manager_private_notes,
        manager_completed_at=ensure_utc(c.manager_completed_at),
        manager_completed_by_id=c.manager_completed_by_id,
        official_rating=c.official_rating,
        shared_notes=c.shared_notes,
        official_completed_at=ensure_utc(c.official_completed_at),
        finalized_by_id=c.finalized_by_id,
    )


class CheckInRepository(BaseRepository[CheckIn]):
    """Check-ins keyed by (subject, scope_type, scope_id); open means not officially completed."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, CheckIn)

    async def get_by_id(self, check_in_id: str) -> CheckInResult | None:
        row = await self._get(check_in_id)
        return _to_result(row) if row else None

    async def get_for_update(self, check_in_id: str) -> CheckInResult | None:
        row = await self._get(check_in_id, for_update=True)
        return _to_result(row) if row else None

    async def get_open(
        self, subject_id: str, scope: CheckInScope, scope_id: str
    ) -> CheckInResult | None:
        result = await self.db.execute(
            select(CheckIn)
            .where(
                CheckIn.subject_id == subject_id,
                CheckIn.scope_type == CheckInScope(scope).value,
                CheckIn.scope_id == scope_id,
                CheckIn.official_completed_at.is_(None),
            )
            .with_for_update()
        )
        row = result.scalar_one_or_none()
        return _to_result(row) if row else None

    async def save(self, entity: CheckInEntity) -> CheckInResult:
        """Insert the entity or copy its fields onto the existing row."""
        row = await self._get(entity.id)
        if row is None:
            row = CheckIn(
                id=entity.id,
                subject_id=entity.subject_id,
                scope_type=entity.scope.value,
                scope_id=entity.scope_id,
                **{name: getattr(entity, name) for name in _FIELDS},
            )
            return _to_result(await self.create(row))
        for name in _FIELDS:
            setattr(row, name, getattr(entity, name))
        return _to_result(await self._save(row))
