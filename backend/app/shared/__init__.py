"""
Shared utilities (NOT business logic).

Usage:
    from app.shared import haversine, dms_to_decimal
    from app.shared.formatters import format_file_size
"""
from .geo import (
    haversine,
    meters_to_feet,
    dms_to_decimal,
    bounding_box,
    EARTH_RADIUS_MI,
    FEET_PER_METER,
)
from .formatters import (
    format_number,
    format_file_size,
    format_aperture,
    format_shutter_speed,
    format_focal_length,
)
from .constants import TripType, SortOrder, MAX_ROUTE_POINTS
from .repository import BaseRepository

__all__ = [
    # Geo
    "haversine",
    "meters_to_feet",
    "dms_to_decimal",
    "bounding_box",
    "EARTH_RADIUS_MI",
    "FEET_PER_METER",
    # Formatters
    "format_number",
    "format_file_size",
    "format_aperture",
    "format_shutter_speed",
    "format_focal_length",
    # Constants
    "TripType",
    "SortOrder",
    "MAX_ROUTE_POINTS",
    # Repository
    "BaseRepository",
]
