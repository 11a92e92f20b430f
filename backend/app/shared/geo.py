"""
Geographic utility functions.

All route distances in this project are expressed in miles and
elevations in feet.
"""
import math

# Earth radius in miles
EARTH_RADIUS_MI = 3959.0

FEET_PER_METER = 3.28084


def haversine(
    lat1: float, lon1: float,
    lat2: float, lon2: float
) -> float:
    """
    Calculate great-circle distance between two points.

    Args:
        lat1, lon1: First point coordinates (degrees)
        lat2, lon2: Second point coordinates (degrees)

    Returns:
        Distance in miles
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) *
        math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_MI * c


def meters_to_feet(meters: float) -> float:
    """Convert meters to feet."""
    return meters * FEET_PER_METER


def dms_to_decimal(
    degrees: float,
    minutes: float,
    seconds: float,
    direction: str | None = None
) -> float:
    """
    Convert degrees/minutes/seconds to decimal degrees.

    Southern and western hemispheres ("S", "W") give negative values.
    """
    value = degrees + minutes / 60 + seconds / 3600
    if direction and direction.strip().upper() in ("S", "W"):
        value = -value
    return value


def bounding_box(
    coordinates: list[list[float]]
) -> tuple[float, float, float, float] | None:
    """
    Bounding box of [lon, lat] pairs.

    Returns:
        (min_lon, min_lat, max_lon, max_lat), or None for no coordinates
    """
    if not coordinates:
        return None
    lons = [c[0] for c in coordinates]
    lats = [c[1] for c in coordinates]
    return min(lons), min(lats), max(lons), max(lats)
