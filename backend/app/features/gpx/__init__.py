"""
GPX track handling module.

Usage:
    from app.features.gpx import parse_gpx, GpxParseError

Components:
- parse_gpx: Parse GPX XML into route statistics
- GpxStats: Distance (mi), elevation gain (ft), date, [lon, lat] coordinates
- GpxPayload: Pydantic schema of the gpx_data stored with a field note
"""

from .parser import parse_gpx, parse_gpx_time, GpxStats, ElevationPoint, GpxParseError
from .schemas import GpxPayload, GpxStatsResponse, ElevationPointSchema

__all__ = [
    # Parser
    "parse_gpx",
    "parse_gpx_time",
    "GpxStats",
    "ElevationPoint",
    "GpxParseError",
    # Schemas
    "GpxPayload",
    "GpxStatsResponse",
    "ElevationPointSchema",
]
