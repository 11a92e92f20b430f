"""
Base repository with common CRUD operations.

Feature repositories inherit from it and add their own queries.
Methods flush but never commit; the route owns the transaction.

Usage:
    class PhotoRepository(BaseRepository[Photo]):
        def __init__(self, db: AsyncSession):
            super().__init__(db, Photo)
"""

from typing import TypeVar, Generic, Type
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Generic async repository bound to one model class."""

    def __init__(self, db: AsyncSession, model: Type[T]):
        self.db = db
        self.model = model

    async def get_by_id(self, id: str) -> T | None:
        """Get entity by primary key, None if missing."""
        return await self.db.get(self.model, id)

    async def exists(self, id: str) -> bool:
        """Check whether an entity with this primary key exists."""
        result = await self.db.execute(
            select(func.count()).select_from(self.model).where(self.model.id == id)
        )
        return (result.scalar() or 0) > 0

    async def create(self, **values) -> T:
        """Insert a new entity and return it with generated fields loaded."""
        entity = self.model(**values)
        self.db.add(entity)
        await self.db.flush()
        await self.db.refresh(entity)
        return entity

    async def update(self, entity: T, **values) -> T:
        """Set fields on an entity and flush."""
        for key, value in values.items():
            setattr(entity, key, value)
        await self.db.flush()
        return entity

    async def delete(self, entity: T) -> None:
        """Delete entity (ORM cascades apply)."""
        await self.db.delete(entity)
        await self.db.flush()

