"""
EXIF Extraction

Reads GPS position, capture time and camera settings from image bytes.

EXIF is stored at the front of JPEG files, so callers may pass only the
first ~64KB of an upload together with the full file size.
Extraction never raises: missing or unreadable metadata gives an empty
PhotoExifData.
"""

import io
import logging
from datetime import datetime
from typing import Any, Optional

import exifread

from app.shared.formatters import (
    format_aperture,
    format_file_size,
    format_focal_length,
    format_shutter_speed,
)
from app.shared.geo import dms_to_decimal
from .schemas import PhotoExifData

logger = logging.getLogger(__name__)

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"

# First parseable wins
TIMESTAMP_TAGS = [
    "EXIF DateTimeOriginal",
    "Image DateTime",
    "EXIF DateTimeDigitized",
]

ISO_TAGS = ["EXIF ISOSpeedRatings", "EXIF PhotographicSensitivity"]


def _ratio_to_float(value: Any) -> Optional[float]:
    """Convert an exifread Ratio (or plain number) to float."""
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return None
    num = getattr(value, "num", None)
    den = getattr(value, "den", None)
    if num is not None and den is not None:
        if den == 0:
            return None
        return num / den
    try:
        return float(value)
    except (TypeError, ValueError, ZeroDivisionError):
        return None


def _values(tags: dict, key: str) -> Optional[list]:
    tag = tags.get(key)
    if tag is None:
        return None
    values = getattr(tag, "values", None)
    if values is None:
        return None
    if not isinstance(values, (list, tuple)):
        values = [values]
    return list(values)


def _text(tags: dict, key: str) -> Optional[str]:
    """Printable text of an ASCII tag, None when empty."""
    tag = tags.get(key)
    if tag is None:
        return None
    text = getattr(tag, "printable", None)
    if text is None:
        text = str(getattr(tag, "values", ""))
    text = str(text).replace("\x00", "").strip()
    return text or None


def _number(tags: dict, key: str) -> Optional[float]:
    values = _values(tags, key)
    if not values:
        return None
    return _ratio_to_float(values[0])


def _coordinate(tags: dict, value_key: str, ref_key: str) -> Optional[float]:
    """DMS GPS tag to signed decimal degrees."""
    values = _values(tags, value_key)
    if not values or len(values) < 3:
        return None
    parts = [_ratio_to_float(v) for v in values[:3]]
    if any(p is None for p in parts):
        return None
    degrees, minutes, seconds = parts
    return dms_to_decimal(degrees, minutes, seconds, _text(tags, ref_key))


def _gps(tags: dict) -> tuple[Optional[float], Optional[float]]:
    lat = _coordinate(tags, "GPS GPSLatitude", "GPS GPSLatitudeRef")
    lon = _coordinate(tags, "GPS GPSLongitude", "GPS GPSLongitudeRef")
    if lat is None or lon is None:
        return None, None
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        logger.warning(f"Ignoring out-of-range GPS position {lat}, {lon}")
        return None, None
    return lat, lon


def _elevation(tags: dict) -> Optional[float]:
    altitude = _number(tags, "GPS GPSAltitude")
    if altitude is None:
        return None
    ref = _values(tags, "GPS GPSAltitudeRef")
    # Ref 1 means below sea level
    if ref and _ratio_to_float(ref[0]) == 1:
        altitude = -altitude
    return altitude


def _timestamp(tags: dict) -> Optional[datetime]:
    for key in TIMESTAMP_TAGS:
        text = _text(tags, key)
        if not text:
            continue
        try:
            return datetime.strptime(text[:19], EXIF_DATETIME_FORMAT)
        except ValueError:
            continue
    return None


def _camera(tags: dict) -> Optional[str]:
    make = _text(tags, "Image Make")
    model = _text(tags, "Image Model")
    if make and model:
        if model.lower().startswith(make.lower()):
            return model
        return f"{make} {model}"
    return model


def _lens(tags: dict) -> Optional[str]:
    model = _text(tags, "EXIF LensModel")
    make = _text(tags, "EXIF LensMake")
    if model and make and make.lower() not in model.lower():
        return f"{make} {model}"
    return model


def _aperture(tags: dict) -> Optional[str]:
    f_number = _number(tags, "EXIF FNumber")
    if f_number and f_number > 0:
        return format_aperture(f_number)
    # APEX aperture value: N = 2^(Av/2)
    apex = _number(tags, "EXIF ApertureValue")
    if apex is not None:
        return format_aperture(round(2 ** (apex / 2), 1))
    return None


def _shutter_speed(tags: dict) -> Optional[str]:
    exposure = _number(tags, "EXIF ExposureTime")
    if exposure and exposure > 0:
        return format_shutter_speed(exposure)
    return None


def _iso(tags: dict) -> Optional[int]:
    for key in ISO_TAGS:
        value = _number(tags, key)
        if value:
            return int(value)
    return None


def _focal_length(tags: dict) -> Optional[str]:
    focal = _number(tags, "EXIF FocalLength")
    if focal and focal > 0:
        return format_focal_length(focal)
    return None


def exif_from_tags(tags: dict, file_size: Optional[int] = None) -> PhotoExifData:
    """
    Build PhotoExifData from an exifread tag dictionary.

    Args:
        tags: Result of exifread.process_file
        file_size: Total file size in bytes, if known

    Returns:
        PhotoExifData, empty when tags is empty
    """
    if not tags:
        return PhotoExifData()

    latitude, longitude = _gps(tags)
    return PhotoExifData(
        latitude=latitude,
        longitude=longitude,
        elevation=_elevation(tags),
        timestamp=_timestamp(tags),
        camera=_camera(tags),
        lens=_lens(tags),
        aperture=_aperture(tags),
        shutter_speed=_shutter_speed(tags),
        iso=_iso(tags),
        focal_length=_focal_length(tags),
        file_size=format_file_size(file_size) if file_size is not None else None,
    )


def extract_exif(data: bytes, file_size: Optional[int] = None) -> PhotoExifData:
    """
    Extract photo metadata from image bytes.

    Args:
        data: Image content, or just its leading bytes
        file_size: Full file size in bytes (defaults to len(data))

    Returns:
        PhotoExifData; empty when there is no metadata or parsing fails
    """
    if not data:
        return PhotoExifData()

    try:
        tags = exifread.process_file(io.BytesIO(data), details=False)
    except Exception as e:
        logger.warning(f"Failed to read EXIF data: {e}")
        return PhotoExifData()

    if not tags:
        logger.debug("No EXIF data found in image")
        return PhotoExifData()

    try:
        return exif_from_tags(tags, file_size if file_size is not None else len(data))
    except Exception as e:
        logger.warning(f"Failed to interpret EXIF data: {e}")
        return PhotoExifData()
