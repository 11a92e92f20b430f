"""
Object storage module.

Usage:
    from app.features.storage import ObjectStorageService, get_storage_service
"""

from .service import (
    ObjectStorageService,
    UploadTarget,
    ObjectNotFoundError,
    InvalidSignatureError,
    get_storage_service,
    warn_if_signing_key_missing,
    UPLOAD_PREFIX,
    OBJECTS_ROUTE,
)

__all__ = [
    "ObjectStorageService",
    "UploadTarget",
    "ObjectNotFoundError",
    "InvalidSignatureError",
    "get_storage_service",
    "warn_if_signing_key_missing",
    "UPLOAD_PREFIX",
    "OBJECTS_ROUTE",
]
