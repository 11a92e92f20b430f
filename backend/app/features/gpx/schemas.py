"""
GPX-related schemas.

Pydantic models for parsed GPX statistics and the persisted payload.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import field_validator

from app.schemas.common import CamelModel


class ElevationPointSchema(CamelModel):
    """Single sample of the elevation profile."""

    distance: float  # miles from start
    elevation: float  # feet
    lon: float
    lat: float


class GpxPayload(CamelModel):
    """
    Parsed GPX data stored with a field note.

    Shape: {"coordinates": [[lon, lat], ...], "elevationProfile": [...]}
    """

    coordinates: List[List[float]]
    elevation_profile: Optional[List[ElevationPointSchema]] = None

    @field_validator("coordinates")
    @classmethod
    def check_pairs(cls, v: List[List[float]]) -> List[List[float]]:
        """Every coordinate must be a [lon, lat] pair within range."""
        for pair in v:
            if len(pair) != 2:
                raise ValueError("coordinates must be [longitude, latitude] pairs")
            lon, lat = pair
            if not (-180 <= lon <= 180 and -90 <= lat <= 90):
                raise ValueError(f"coordinate out of range: {pair}")
        return v


class GpxStatsResponse(CamelModel):
    """Result of parsing an uploaded GPX file."""

    filename: Optional[str] = None
    name: Optional[str] = None
    distance: float  # miles
    elevation_gain: float  # feet
    date: Optional[datetime] = None
    point_count: int
    coordinates: List[List[float]]
    elevation_profile: List[ElevationPointSchema] = []
