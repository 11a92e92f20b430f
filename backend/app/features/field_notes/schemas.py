"""
Field note schemas.

Request and response models for the field notes API.
"""

from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import Field, field_validator

from app.features.gpx.schemas import GpxPayload
from app.features.photos.schemas import PhotoInput, PhotoResponse
from app.schemas.common import CamelModel, naive_utc
from app.shared.constants import TripType


class FieldNoteWrite(CamelModel):
    """
    Body of create and update requests.

    gpx_data is either raw GPX XML (parsed server side) or an already
    parsed {"coordinates": [[lon, lat], ...]} payload.
    """

    title: str = Field(min_length=1, max_length=500)
    description: str
    trip_type: TripType
    date: Optional[datetime] = None
    distance: Optional[float] = Field(default=None, ge=0)  # miles
    elevation_gain: Optional[float] = Field(default=None, ge=0)  # feet
    gpx_data: Optional[Union[GpxPayload, str]] = None
    photos: Optional[List[PhotoInput]] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator("date")
    @classmethod
    def to_naive_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return naive_utc(v)


class FieldNoteResponse(CamelModel):
    """Field note as listed."""

    id: str
    title: str
    description: str
    trip_type: str
    date: datetime
    distance: Optional[float] = None
    elevation_gain: Optional[float] = None
    gpx_data: Optional[dict[str, Any]] = None
    created_at: datetime


class FieldNoteDetail(FieldNoteResponse):
    """Field note with its photos."""

    photos: List[PhotoResponse] = []


class FieldNoteSaveResponse(FieldNoteDetail):
    """Result of create/update; warnings list non-fatal problems (e.g. bad GPX)."""

    warnings: List[str] = []


class RouteSummary(CamelModel):
    """Sampled route of one field note for overview maps."""

    id: str
    title: str
    trip_type: str
    point_count: int
    coordinates: List[List[float]]


class RoutesOverview(CamelModel):
    """All routes plus their combined bounds [min_lon, min_lat, max_lon, max_lat]."""

    routes: List[RouteSummary]
    bounds: Optional[List[float]] = None
