"""
Photo Routes

Endpoints for photo records, upload URLs and EXIF extraction.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, Response, UploadFile
from fastapi.concurrency import run_in_threadpool
from pydantic import Field
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.db.session import get_async_db
from app.features.field_notes import FieldNoteRepository
from app.features.photos import (
    PhotoCreate,
    PhotoExifData,
    PhotoRepository,
    PhotoResponse,
    extract_exif,
)
from app.features.storage import ObjectStorageService, get_storage_service
from app.schemas.common import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter()


class UploadUrlResponse(CamelModel):
    """Signed upload destination for a new photo."""

    upload_url: str = Field(serialization_alias="uploadURL")
    object_path: str


@router.get("", response_model=List[PhotoResponse])
async def list_photos(
    field_note_id: Optional[str] = Query(None, alias="fieldNoteId"),
    db: AsyncSession = Depends(get_async_db)
):
    """All photos, or the photos of one field note."""
    photos = await PhotoRepository(db).list_all(field_note_id=field_note_id)
    return [PhotoResponse.model_validate(photo) for photo in photos]


@router.post("/upload", response_model=UploadUrlResponse)
async def get_upload_url(
    request: Request,
    storage: ObjectStorageService = Depends(get_storage_service)
):
    """Issue a signed, expiring URL the client can PUT a photo to."""
    target = storage.create_upload(base_url=str(request.base_url))
    return UploadUrlResponse(upload_url=target.upload_url, object_path=target.object_path)


@router.post("/extract-exif", response_model=PhotoExifData, response_model_exclude_none=True)
async def extract_photo_exif(photo: UploadFile = File(...)):
    """
    Read EXIF metadata from an uploaded image.

    Only the head of the file is read. Images without metadata give an
    empty object.
    """
    if photo.size is not None and photo.size > settings.max_photo_bytes:
        raise HTTPException(status_code=400, detail="Photo too large")

    head = await photo.read(settings.exif_read_bytes)
    if not head:
        raise HTTPException(status_code=400, detail="File is empty")

    file_size = photo.size if photo.size is not None else len(head)
    metadata = await run_in_threadpool(extract_exif, head, file_size)
    logger.info(
        f"Extracted EXIF from {photo.filename}: "
        f"{len(metadata.metadata_fields())} fields"
    )
    return metadata


@router.post("", response_model=PhotoResponse, status_code=201)
async def create_photo(
    payload: PhotoCreate,
    db: AsyncSession = Depends(get_async_db)
):
    """Attach a photo to an existing field note."""
    if not await FieldNoteRepository(db).exists(payload.field_note_id):
        raise HTTPException(status_code=404, detail="Field note not found")

    photo = await PhotoRepository(db).create_photo(
        field_note_id=payload.field_note_id,
        filename=payload.filename,
        url=ObjectStorageService.normalize_object_path(payload.url),
        metadata=payload,
    )
    await db.commit()
    logger.info(f"Created photo {photo.id} for field note {payload.field_note_id}")
    return PhotoResponse.model_validate(photo)


@router.get("/{photo_id}", response_model=PhotoResponse)
async def get_photo(
    photo_id: str,
    db: AsyncSession = Depends(get_async_db)
):
    """Get a photo by ID."""
    photo = await PhotoRepository(db).get_by_id(photo_id)
    if not photo:
        raise HTTPException(status_code=404, detail="Photo not found")
    return PhotoResponse.model_validate(photo)


@router.delete("/{photo_id}", status_code=204)
async def delete_photo(
    photo_id: str,
    db: AsyncSession = Depends(get_async_db)
):
    """Delete a photo record."""
    repo = PhotoRepository(db)
    photo = await repo.get_by_id(photo_id)
    if not photo:
        raise HTTPException(status_code=404, detail="Photo not found")
    await repo.delete(photo)
    await db.commit()
    return Response(status_code=204)
