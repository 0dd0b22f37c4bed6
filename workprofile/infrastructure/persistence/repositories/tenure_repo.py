"""Assignment and employment tenure repositories."""

from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workprofile.application.dtos.tenure import AssignmentTenureResult, EmploymentTenureResult
from workprofile.infrastructure.persistence.models.tenure import (
    AssignmentTenure,
    EmploymentTenure,
)
from workprofile.infrastructure.persistence.repositories.base import BaseRepository
from workprofile.shared.utils.datetime import ensure_utc


def _assignment_result(t: AssignmentTenure) -> AssignmentTenureResult:
    """Map ORM to DTO."""
    return AssignmentTenureResult(
        id=t.id,
        subject_id=t.subject_id,
        assignment_id=t.assignment_id,
        anticipated_energy_percentage=t.anticipated_energy_percentage,
        started_at=t.started_at,
        ended_at=t.ended_at,
        official_rating=t.official_rating,
    )


def _employment_result(t: EmploymentTenure) -> EmploymentTenureResult:
    """Map ORM to DTO."""
    return EmploymentTenureResult(
        id=t.id,
        subject_id=t.subject_id,
        company_id=t.company_id,
        position_id=t.position_id,
        employment_type=t.employment_type,
        started_at=ensure_utc(t.started_at),
        manager_id=t.manager_id,
        seat_id=t.seat_id,
        ended_at=ensure_utc(t.ended_at),
        official_position_rating=t.official_position_rating,
    )


class AssignmentTenureRepository(BaseRepository[AssignmentTenure]):
    """Assignment tenures; the open row is the one with ended_at null."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AssignmentTenure)

    async def get_active(
        self, subject_id: str, assignment_id: str
    ) -> AssignmentTenureResult | None:
        """Return the open tenure, locking it for the rest of the unit."""
        result = await self.db.execute(
            select(AssignmentTenure)
            .where(
                AssignmentTenure.subject_id == subject_id,
                AssignmentTenure.assignment_id == assignment_id,
                AssignmentTenure.ended_at.is_(None),
            )
            .with_for_update()
        )
        row = result.scalar_one_or_none()
        return _assignment_result(row) if row else None

    async def create(  # type: ignore[override]
        self,
        subject_id: str,
        assignment_id: str,
        anticipated_energy_percentage: int,
        started_at: date,
    ) -> AssignmentTenureResult:
        tenure = AssignmentTenure(
            subject_id=subject_id,
            assignment_id=assignment_id,
            anticipated_energy_percentage=anticipated_energy_percentage,
            started_at=started_at,
        )
        return _assignment_result(await super().create(tenure))

    async def end(self, tenure_id: str, ended_at: date) -> AssignmentTenureResult:
        row = await self._get_or_raise(tenure_id, "assignment_tenure")
        row.ended_at = ended_at
        return _assignment_result(await self._save(row))

    async def list_for_subject(
        self, subject_id: str, assignment_id: str | None = None
    ) -> list[AssignmentTenureResult]:
        stmt = select(AssignmentTenure).where(AssignmentTenure.subject_id == subject_id)
        if assignment_id is not None:
            stmt = stmt.where(AssignmentTenure.assignment_id == assignment_id)
        result = await self.db.execute(
            stmt.order_by(AssignmentTenure.started_at, AssignmentTenure.created_at)
        )
        return [_assignment_result(row) for row in result.scalars().all()]


class EmploymentTenureRepository(BaseRepository[EmploymentTenure]):
    """Employment tenures; the open row is the one with ended_at null."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, EmploymentTenure)

    async def get_by_id(self, tenure_id: str) -> EmploymentTenureResult | None:
        row = await self._get(tenure_id, for_update=True)
        return _employment_result(row) if row else None

    async def get_active(
        self, subject_id: str, company_id: str
    ) -> EmploymentTenureResult | None:
        result = await self.db.execute(
            select(EmploymentTenure)
            .where(
                EmploymentTenure.subject_id == subject_id,
                EmploymentTenure.company_id == company_id,
                EmploymentTenure.ended_at.is_(None),
            )
            .with_for_update()
        )
        row = result.scalar_one_or_none()
        return _employment_result(row) if row else None

    async def create(  # type: ignore[override]
        self,
        subject_id: str,
        company_id: str,
        position_id: str,
        employment_type: str,
        started_at: datetime,
        manager_id: str | None = None,
        seat_id: str | None = None,
        official_position_rating: int | None = None,
    ) -> EmploymentTenureResult:
        tenure = EmploymentTenure(
            subject_id=subject_id,
            company_id=company_id,
            position_id=position_id,
            employment_type=employment_type,
            started_at=started_at,
            manager_id=manager_id,
            seat_id=seat_id,
            official_position_rating=official_position_rating,
        )
        return _employment_result(await super().create(tenure))

    async def end(self, tenure_id: str, ended_at: datetime) -> EmploymentTenureResult:
        row = await self._get_or_raise(tenure_id, "employment_tenure")
        row.ended_at = ended_at
        return _employment_result(await self._save(row))

    async def update_seat(self, tenure_id: str, seat_id: str | None) -> EmploymentTenureResult:
        row = await self._get_or_raise(tenure_id, "employment_tenure")
        row.seat_id = seat_id
        return _employment_result(await self._save(row))

    async def list_for_subject(
        self, subject_id: str, company_id: str | None = None
    ) -> list[EmploymentTenureResult]:
        stmt = select(EmploymentTenure).where(EmploymentTenure.subject_id == subject_id)
        if company_id is not None:
            stmt = stmt.where(EmploymentTenure.company_id == company_id)
        result = await self.db.execute(
            stmt.order_by(EmploymentTenure.started_at, EmploymentTenure.created_at)
        )
        return [_employment_result(row) for row in result.scalars().all()]
