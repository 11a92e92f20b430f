"""
Object Routes

Signed uploads to, and downloads from, local object storage.
"""

import logging
import mimetypes
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse

from app.config import settings
from app.features.storage import (
    InvalidSignatureError,
    ObjectNotFoundError,
    ObjectStorageService,
    UPLOAD_PREFIX,
    get_storage_service,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.put(f"/{UPLOAD_PREFIX}/{{object_id}}")
async def upload_object(
    object_id: str,
    request: Request,
    expires: Optional[int] = Query(None),
    signature: Optional[str] = Query(None),
    storage: ObjectStorageService = Depends(get_storage_service)
):
    """Store the request body at a signed upload URL."""
    object_key = f"{UPLOAD_PREFIX}/{object_id}"

    try:
        if expires is None or not signature:
            raise InvalidSignatureError("Missing upload signature")
        storage.verify_signature(object_key, expires, signature)
    except InvalidSignatureError as e:
        logger.warning(f"Rejected upload to {object_key}: {e}")
        raise HTTPException(status_code=403, detail=str(e))

    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > settings.max_photo_bytes:
        raise HTTPException(status_code=400, detail="Upload too large")

    data = await request.body()
    if len(data) > settings.max_photo_bytes:
        raise HTTPException(status_code=400, detail="Upload too large")

    try:
        await run_in_threadpool(storage.write_object, object_key, data)
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail="Object not found")

    return {"objectPath": f"/objects/{object_key}", "size": len(data)}


@router.api_route("/{object_path:path}", methods=["GET", "HEAD"])
async def get_object(
    object_path: str,
    storage: ObjectStorageService = Depends(get_storage_service)
):
    """Serve a stored object."""
    try:
        path = await run_in_threadpool(storage.get_object_path, object_path)
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail="Object not found")

    media_type, _ = mimetypes.guess_type(path.name)
    return FileResponse(
        path,
        media_type=media_type or "application/octet-stream",
        headers={"Cache-Control": "private, max-age=3600"},
    )
