"""
GPX Parser

Extracts the route, distance, elevation gain and capture date from
GPX track points.

Parsing is done on the raw element tree so that a single malformed
track point is dropped instead of rejecting the whole file.
"""

import logging
import math
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterator, List, Optional

from app.shared.geo import haversine, meters_to_feet

logger = logging.getLogger(__name__)


class GpxParseError(ValueError):
    """Raised when GPX content has no usable track points."""


@dataclass
class ElevationPoint:
    """One sample of the elevation profile."""
    distance: float  # cumulative miles
    elevation: float  # feet
    lon: float
    lat: float


@dataclass
class GpxStats:
    """Statistics derived from a GPX track."""
    distance: float  # miles, 2 decimals
    elevation_gain: float  # feet, integer value
    date: Optional[datetime]
    coordinates: List[List[float]]  # [lon, lat]
    name: Optional[str] = None
    elevation_profile: List[ElevationPoint] = field(default_factory=list)

    @property
    def point_count(self) -> int:
        return len(self.coordinates)

    def to_payload(self) -> dict:
        """Shape persisted in FieldNote.gpx_data."""
        return {
            "coordinates": self.coordinates,
            "elevationProfile": [
                {
                    "distance": round(p.distance, 3),
                    "elevation": round(p.elevation, 1),
                    "lon": p.lon,
                    "lat": p.lat,
                }
                for p in self.elevation_profile
            ],
        }


def _local_name(tag) -> str:
    """Strip the XML namespace: '{http://...}trkpt' -> 'trkpt'."""
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _iter_named(element: ET.Element, name: str) -> Iterator[ET.Element]:
    """All descendants (including element itself) with the given local name."""
    for el in element.iter():
        if _local_name(el.tag) == name:
            yield el


def _first_named(element: ET.Element, name: str) -> Optional[ET.Element]:
    return next(_iter_named(element, name), None)


def _child_named(element: ET.Element, name: str) -> Optional[ET.Element]:
    """Direct child with the given local name."""
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _to_float(text: Optional[str]) -> Optional[float]:
    """Parse a numeric attribute/text; None for missing, non-numeric or NaN."""
    if text is None:
        return None
    try:
        value = float(text.strip())
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def parse_gpx_time(text: Optional[str]) -> Optional[datetime]:
    """
    Parse a GPX timestamp into naive UTC.

    Returns None for empty or unparsable values.
    """
    if not text or not text.strip():
        return None
    value = text.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _time_of(element: Optional[ET.Element]) -> Optional[datetime]:
    """First <time> under element, parsed."""
    if element is None:
        return None
    time_el = _first_named(element, "time")
    if time_el is None:
        return None
    return parse_gpx_time(time_el.text)


def _extract_date(root: ET.Element, track_points: List[ET.Element]) -> Optional[datetime]:
    """Metadata time, else first track point time, else first track time."""
    date = _time_of(_first_named(root, "metadata"))
    if date is None and track_points:
        date = _time_of(track_points[0])
    if date is None:
        date = _time_of(_first_named(root, "trk"))
    return date


def _extract_name(root: ET.Element) -> Optional[str]:
    trk = _first_named(root, "trk")
    candidates = []
    if trk is not None:
        candidates.append(_child_named(trk, "name"))
    metadata = _first_named(root, "metadata")
    if metadata is not None:
        candidates.append(_child_named(metadata, "name"))
    for el in candidates:
        if el is not None and el.text and el.text.strip():
            return el.text.strip()
    return None


def parse_gpx(content: str | bytes) -> GpxStats:
    """
    Parse GPX content and compute route statistics.

    Distance is the Haversine sum between consecutive valid points.
    Elevation gain sums only upward deltas between consecutive readings.

    Args:
        content: GPX XML as text or bytes

    Returns:
        GpxStats

    Raises:
        GpxParseError: malformed XML, no track points, or no valid points
    """
    if isinstance(content, bytes):
        content = content.decode("utf-8-sig", errors="replace")
    content = content.lstrip("\ufeff")

    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        logger.warning(f"Failed to parse GPX XML: {e}")
        raise GpxParseError(f"Invalid GPX file: {e}")

    track_points = list(_iter_named(root, "trkpt"))
    if not track_points:
        raise GpxParseError("No track points found in GPX file")

    coordinates: List[List[float]] = []
    profile: List[ElevationPoint] = []
    total_distance = 0.0
    total_gain_m = 0.0
    prev_lat: Optional[float] = None
    prev_lon: Optional[float] = None
    prev_ele: Optional[float] = None
    skipped = 0

    for point in track_points:
        lat = _to_float(point.get("lat"))
        lon = _to_float(point.get("lon"))
        if lat is None or lon is None or not (-90 <= lat <= 90 and -180 <= lon <= 180):
            skipped += 1
            continue

        coordinates.append([lon, lat])

        if prev_lat is not None and prev_lon is not None:
            total_distance += haversine(prev_lat, prev_lon, lat, lon)

        ele_el = _child_named(point, "ele")
        ele = _to_float(ele_el.text) if ele_el is not None else None
        if ele is not None:
            if prev_ele is not None and ele > prev_ele:
                total_gain_m += ele - prev_ele
            prev_ele = ele
            profile.append(ElevationPoint(
                distance=total_distance,
                elevation=meters_to_feet(ele),
                lon=lon,
                lat=lat,
            ))

        prev_lat = lat
        prev_lon = lon

    if not coordinates:
        raise GpxParseError("No valid track points found in GPX file")

    if skipped:
        logger.info(f"Skipped {skipped} invalid GPX track points")

    return GpxStats(
        distance=round(total_distance, 2),
        elevation_gain=float(round(meters_to_feet(total_gain_m))),
        date=_extract_date(root, track_points),
        coordinates=coordinates,
        name=_extract_name(root),
        elevation_profile=profile,
    )
