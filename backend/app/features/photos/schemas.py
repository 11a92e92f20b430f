"""
Photo schemas.

PhotoExifData is the metadata shape shared by EXIF extraction,
photo creation and photo responses.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from app.schemas.common import CamelModel, naive_utc


class PhotoExifData(CamelModel):
    """Metadata extracted from a photo. Every field is optional."""

    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    elevation: Optional[float] = None
    timestamp: Optional[datetime] = None
    camera: Optional[str] = None
    lens: Optional[str] = None
    aperture: Optional[str] = None
    shutter_speed: Optional[str] = None
    iso: Optional[int] = None
    focal_length: Optional[str] = None
    file_size: Optional[str] = None

    @field_validator("timestamp")
    @classmethod
    def to_naive_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return naive_utc(v)

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)

    def metadata_fields(self) -> dict:
        """Non-empty fields keyed by model attribute name."""
        return self.model_dump(exclude_none=True)


class PhotoInput(PhotoExifData):
    """
    Photo entry submitted with a field note.

    Entries with an id refer to existing photos to keep; entries without
    an id are created when they carry url and filename.
    """

    id: Optional[str] = None
    filename: Optional[str] = None
    url: Optional[str] = None


class PhotoCreate(PhotoExifData):
    """Request to attach a photo to an existing field note."""

    field_note_id: str = Field(min_length=1)
    filename: str = Field(min_length=1)
    url: str = Field(min_length=1)


class PhotoResponse(PhotoExifData):
    """Stored photo."""

    id: str
    field_note_id: str
    filename: str
    url: str
    created_at: datetime
