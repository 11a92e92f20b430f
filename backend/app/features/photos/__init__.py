"""
Photos module.

Usage:
    from app.features.photos import Photo, PhotoRepository, extract_exif

Components:
- Photo: SQLAlchemy model, belongs to a FieldNote
- PhotoRepository: CRUD operations for photos
- extract_exif: Read GPS/camera metadata from image bytes (never raises)
- PhotoExifData, PhotoInput, PhotoCreate, PhotoResponse: Pydantic schemas
"""

from .models import Photo
from .repository import PhotoRepository, EXIF_COLUMNS
from .exif import extract_exif, exif_from_tags
from .schemas import PhotoExifData, PhotoInput, PhotoCreate, PhotoResponse

__all__ = [
    # Model
    "Photo",
    # Repository
    "PhotoRepository",
    "EXIF_COLUMNS",
    # EXIF
    "extract_exif",
    "exif_from_tags",
    # Schemas
    "PhotoExifData",
    "PhotoInput",
    "PhotoCreate",
    "PhotoResponse",
]
