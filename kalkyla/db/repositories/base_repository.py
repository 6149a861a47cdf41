"""
Base repositories - generic CRUD and tenant-scoped access.
Challenge: Consistent data access, tenant isolation enforced in one place.
"""

from typing import Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kalkyla.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Generic async repository. Subclasses define model-specific methods."""

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    async def get_by_id(self, id: int) -> ModelType | None:
        result = await self.session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def add(self, entity: ModelType) -> ModelType:
        """Persist new entity. Caller commits session."""
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def save(self, entity: ModelType) -> ModelType:
        """Flush pending changes on an already-tracked entity and reload server defaults."""
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity: ModelType) -> None:
        await self.session.delete(entity)
        await self.session.flush()


class TenantRepository(BaseRepository[ModelType]):
    """Repository for models carrying an org_id column. Lookups never cross tenants."""

    async def get_in_org(self, id: int, org_id: int) -> ModelType | None:
        result = await self.session.execute(
            select(self.model).where(self.model.id == id, self.model.org_id == org_id)
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, org_id: int, name: str) -> ModelType | None:
        result = await self.session.execute(
            select(self.model).where(self.model.org_id == org_id, self.model.name == name)
        )
        return result.scalar_one_or_none()
