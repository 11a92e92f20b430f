"""
Field note repository.

Data access layer for FieldNote records.
"""

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import noload, selectinload

from app.shared.constants import SortOrder, TripType
from app.shared.repository import BaseRepository
from .models import FieldNote


class FieldNoteRepository(BaseRepository[FieldNote]):
    """Repository for FieldNote operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, FieldNote)

    async def search(
        self,
        search: str | None = None,
        trip_type: TripType | None = None,
        sort_order: SortOrder = SortOrder.RECENT
    ) -> list[FieldNote]:
        """
        List field notes with optional filters.

        Args:
            search: Case-insensitive substring of title or description
            trip_type: Exact trip type
            sort_order: recent (newest first), oldest, or name (title A-Z)

        Returns:
            Matching field notes without photos loaded
        """
        query = select(FieldNote).options(noload(FieldNote.photos))

        if search and search.strip():
            term = search.strip()
            query = query.where(or_(
                FieldNote.title.icontains(term, autoescape=True),
                FieldNote.description.icontains(term, autoescape=True),
            ))

        if trip_type is not None:
            query = query.where(FieldNote.trip_type == trip_type.value)

        if sort_order == SortOrder.OLDEST:
            query = query.order_by(FieldNote.date.asc())
        elif sort_order == SortOrder.NAME:
            query = query.order_by(FieldNote.title.asc())
        else:
            query = query.order_by(FieldNote.date.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_with_photos(self, field_note_id: str) -> FieldNote | None:
        """
        Get a field note with a freshly loaded photo collection.

        Args:
            field_note_id: Field note ID

        Returns:
            FieldNote if found, None otherwise
        """
        result = await self.db.execute(
            select(FieldNote)
            .where(FieldNote.id == field_note_id)
            .options(selectinload(FieldNote.photos))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_with_routes(self) -> list[FieldNote]:
        """Field notes that have stored GPX data, newest first."""
        result = await self.db.execute(
            select(FieldNote)
            .where(FieldNote.gpx_data.is_not(None))
            .options(noload(FieldNote.photos))
            .order_by(FieldNote.date.desc())
        )
        return list(result.scalars().all())
