"""
Formatting utilities for display strings stored with photos.
"""

FILE_SIZE_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]


def format_number(value: float, decimals: int = 2) -> str:
    """
    Format a number without trailing zeros.

    Examples:
        8.0 -> '8', 1.78 -> '1.78', 2.80 -> '2.8'
    """
    text = f"{round(value, decimals):.{decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_file_size(size_bytes: int) -> str:
    """
    Format a byte count as a human readable size (base 1024).

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string (e.g., '0 Bytes', '512 Bytes', '2.4 MB')
    """
    if size_bytes <= 0:
        return "0 Bytes"

    value = float(size_bytes)
    index = 0
    while value >= 1024 and index < len(FILE_SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    return f"{format_number(value)} {FILE_SIZE_UNITS[index]}"


def format_aperture(f_number: float) -> str:
    """Format an f-number, e.g. 2.8 -> 'f/2.8'."""
    return f"f/{format_number(f_number)}"


def format_shutter_speed(exposure_seconds: float) -> str:
    """
    Format exposure time.

    Fractions of a second become '1/N', longer exposures 'Ns'.
    """
    if exposure_seconds < 1:
        return f"1/{round(1 / exposure_seconds)}"
    return f"{format_number(exposure_seconds)}s"


def format_focal_length(millimeters: float) -> str:
    """Format focal length, e.g. 35.0 -> '35mm'."""
    return f"{format_number(millimeters)}mm"
