"""Read-only catalog lookups by kind and id."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workprofile.application.dtos.reference import ReferenceResult
from workprofile.infrastructure.persistence.models.reference import CATALOG_MODELS


class ReferenceRepository:
    """Resolves position, assignment, ability and aspiration ids."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, kind: str, reference_id: Any) -> ReferenceResult | None:
        model: Any = CATALOG_MODELS.get(kind)
        if model is None:
            raise ValueError(f"Unknown reference kind: {kind!r}")
        result = await self.db.execute(select(model).where(model.id == str(reference_id)))
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return ReferenceResult(id=row.id, kind=kind, company_id=row.company_id, title=row.title)
