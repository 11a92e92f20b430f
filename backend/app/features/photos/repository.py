"""
Photo repository.

Data access layer for Photo records.
"""

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.repository import BaseRepository
from .models import Photo
from .schemas import PhotoExifData

# Columns filled from EXIF metadata
EXIF_COLUMNS = (
    "latitude",
    "longitude",
    "elevation",
    "timestamp",
    "camera",
    "lens",
    "aperture",
    "shutter_speed",
    "iso",
    "focal_length",
    "file_size",
)


class PhotoRepository(BaseRepository[Photo]):
    """Repository for Photo operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Photo)

    async def list_for_field_note(self, field_note_id: str) -> list[Photo]:
        """Photos of one field note, oldest first."""
        result = await self.db.execute(
            select(Photo)
            .where(Photo.field_note_id == field_note_id)
            .order_by(Photo.created_at)
        )
        return list(result.scalars().all())

    async def list_all(self, field_note_id: str | None = None) -> list[Photo]:
        """All photos, optionally restricted to one field note."""
        query = select(Photo).order_by(Photo.created_at)
        if field_note_id:
            query = query.where(Photo.field_note_id == field_note_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_photo(
        self,
        field_note_id: str,
        filename: str,
        url: str,
        metadata: PhotoExifData | None = None
    ) -> Photo:
        """
        Create a photo for an existing field note.

        Args:
            field_note_id: Parent field note ID
            filename: Original filename
            url: Storage URL (already normalised)
            metadata: EXIF fields to store

        Returns:
            Created photo
        """
        values = {}
        if metadata is not None:
            values = {
                key: value
                for key, value in metadata.metadata_fields().items()
                if key in EXIF_COLUMNS
            }
        return await self.create(
            field_note_id=field_note_id,
            filename=filename,
            url=url,
            **values
        )

    async def apply_exif(self, photo: Photo, metadata: PhotoExifData) -> Photo:
        """Overwrite EXIF columns with the non-empty extracted values."""
        values = {
            key: value
            for key, value in metadata.metadata_fields().items()
            if key in EXIF_COLUMNS
        }
        return await self.update(photo, **values)

    async def delete_by_ids(self, photo_ids: list[str]) -> int:
        """Bulk delete photos, returns number removed."""
        if not photo_ids:
            return 0
        result = await self.db.execute(delete(Photo).where(Photo.id.in_(photo_ids)))
        await self.db.flush()
        return result.rowcount
