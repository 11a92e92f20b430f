"""
Data sync service.

Moves field notes and photos between databases as JSON and keeps photo
records consistent with the objects they point to.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urljoin

import httpx
from pydantic import ValidationError
from sqlalchemy import delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.features.field_notes import FieldNote, FieldNoteResponse
from app.features.photos import EXIF_COLUMNS, Photo, PhotoRepository, PhotoResponse, extract_exif
from app.features.storage import ObjectNotFoundError, ObjectStorageService

logger = logging.getLogger(__name__)


@dataclass
class ImportReport:
    """Counts of an import run."""
    imported_field_notes: int = 0
    skipped_field_notes: int = 0
    imported_photos: int = 0
    skipped_photos: int = 0


@dataclass
class OrphanedPhoto:
    """Photo whose url could not be fetched."""
    id: str
    filename: str
    url: str
    reason: str


@dataclass
class BackfillReport:
    """Counts of an EXIF backfill run."""
    checked: int = 0
    updated: int = 0
    missing: list[str] = field(default_factory=list)


class DataSyncService:
    """Export, import and maintenance operations over one session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # === Export ===

    async def export_data(self) -> dict:
        """
        Dump all field notes and photos.

        Returns:
            {"fieldNotes", "photos", "exportedAt", "totalFieldNotes", "totalPhotos"}
        """
        notes = (await self.db.execute(
            select(FieldNote).order_by(FieldNote.created_at)
        )).scalars().all()
        photos = await PhotoRepository(self.db).list_all()

        field_notes_data = [
            FieldNoteResponse.model_validate(note).model_dump(mode="json", by_alias=True)
            for note in notes
        ]
        photos_data = [
            PhotoResponse.model_validate(photo).model_dump(mode="json", by_alias=True)
            for photo in photos
        ]

        return {
            "fieldNotes": field_notes_data,
            "photos": photos_data,
            "exportedAt": datetime.now(timezone.utc).isoformat(),
            "totalFieldNotes": len(field_notes_data),
            "totalPhotos": len(photos_data),
        }

    # === Import ===

    async def clear_all(self) -> None:
        """Remove every photo, then every field note."""
        await self.db.execute(delete(Photo))
        await self.db.execute(delete(FieldNote))
        await self.db.commit()
        logger.info("Cleared existing field notes and photos")

    async def import_data(self, data: dict, merge: bool = False) -> ImportReport:
        """
        Load an export.

        Args:
            data: Export dict as written by export_data()
            merge: Keep existing rows and skip ids that already exist;
                otherwise existing data is cleared first

        Returns:
            ImportReport with imported/skipped counts
        """
        report = ImportReport()

        if not merge:
            await self.clear_all()

        for row in data.get("fieldNotes", []):
            if await self._import_field_note(row, merge):
                report.imported_field_notes += 1
            else:
                report.skipped_field_notes += 1

        for row in data.get("photos", []):
            if await self._import_photo(row, merge):
                report.imported_photos += 1
            else:
                report.skipped_photos += 1

        logger.info(
            f"Import finished: {report.imported_field_notes} field notes, "
            f"{report.imported_photos} photos"
        )
        return report

    async def _import_field_note(self, row: dict, merge: bool) -> bool:
        try:
            parsed = FieldNoteResponse.model_validate(row)
        except ValidationError as e:
            logger.warning(f"Skipped field note {row.get('id')}: {e.error_count()} invalid fields")
            return False

        if merge and await self.db.get(FieldNote, parsed.id) is not None:
            return False

        try:
            self.db.add(FieldNote(**parsed.model_dump()))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.warning(f"Skipped field note {parsed.id}: {e}")
            return False
        return True

    async def _import_photo(self, row: dict, merge: bool) -> bool:
        try:
            parsed = PhotoResponse.model_validate(row)
        except ValidationError as e:
            logger.warning(f"Skipped photo {row.get('id')}: {e.error_count()} invalid fields")
            return False

        if merge and await self.db.get(Photo, parsed.id) is not None:
            return False

        if await self.db.get(FieldNote, parsed.field_note_id) is None:
            logger.warning(f"Skipped photo {parsed.id}: field note {parsed.field_note_id} missing")
            return False

        try:
            self.db.add(Photo(**parsed.model_dump()))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.warning(f"Skipped photo {parsed.id}: {e}")
            return False
        return True

    # === Orphans ===

    async def find_orphans(
        self,
        client: httpx.AsyncClient,
        base_url: str
    ) -> list[OrphanedPhoto]:
        """
        HEAD-check every photo url.

        Relative urls are resolved against base_url. A 404 or a request
        error marks the photo as orphaned.
        """
        orphans = []
        for photo in await PhotoRepository(self.db).list_all():
            target = urljoin(base_url.rstrip("/") + "/", photo.url)
            try:
                response = await client.head(target)
            except httpx.HTTPError as e:
                orphans.append(OrphanedPhoto(photo.id, photo.filename, photo.url, str(e) or "unreachable"))
                continue
            if response.status_code == 404:
                orphans.append(OrphanedPhoto(photo.id, photo.filename, photo.url, "not found"))
        return orphans

    async def delete_photos(self, photo_ids: list[str]) -> int:
        removed = await PhotoRepository(self.db).delete_by_ids(photo_ids)
        await self.db.commit()
        return removed

    # === EXIF backfill ===

    async def backfill_exif(
        self,
        storage: ObjectStorageService,
        read_bytes: Optional[int] = None
    ) -> BackfillReport:
        """
        Fill EXIF columns of locally stored photos that have none.

        Returns:
            BackfillReport; missing lists photo ids whose object is gone
        """
        report = BackfillReport()
        read_bytes = read_bytes or settings.exif_read_bytes
        repo = PhotoRepository(self.db)

        no_exif = [
            getattr(Photo, column).is_(None)
            for column in EXIF_COLUMNS
            if column != "file_size"
        ]
        result = await self.db.execute(
            select(Photo).where(*no_exif).where(or_(
                Photo.url.startswith("/objects/"),
                Photo.url.contains("storage.googleapis.com"),
            ))
        )

        for photo in result.scalars().all():
            object_key = storage.object_key_from_path(
                storage.normalize_object_path(photo.url)
            )
            if object_key is None:
                continue
            report.checked += 1
            try:
                head = storage.read_object(object_key, limit=read_bytes)
                size = storage.object_size(object_key)
            except ObjectNotFoundError:
                report.missing.append(photo.id)
                continue

            metadata = extract_exif(head, size)
            if metadata.is_empty():
                continue
            await repo.apply_exif(photo, metadata)
            report.updated += 1

        await self.db.commit()
        logger.info(f"EXIF backfill: {report.updated}/{report.checked} photos updated")
        return report
