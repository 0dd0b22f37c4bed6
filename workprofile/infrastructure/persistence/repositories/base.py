"""Base repository: generic lookups and writes shared by all repositories."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workprofile.domain.exceptions import ReferenceNotFoundException
from workprofile.infrastructure.persistence.database import Base


ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id, create, save and delete.

    Writes flush but never commit; the unit of work belongs to the caller
    (SqlAlchemyTransactionManager or get_db_transactional).
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def _get(self, entity_id: str, *, for_update: bool = False) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        stmt = select(self.model).where(model.id == entity_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _get_or_raise(self, entity_id: str, resource_type: str) -> ModelType:
        obj = await self._get(entity_id)
        if obj is None:
            raise ReferenceNotFoundException(resource_type, entity_id)
        return obj

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def _save(self, obj: ModelType) -> ModelType:
        """Flush changes on an attached record and reload server-side values."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def _delete(self, obj: ModelType) -> None:
        await self.db.delete(obj)
        await self.db.flush()
