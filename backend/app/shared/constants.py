"""
Shared enumerations for field notes.
"""

from enum import Enum


class TripType(str, Enum):
    """Category of a recorded trip."""
    HIKING = "hiking"
    CYCLING = "cycling"
    RUNNING = "running"
    BACKPACKING = "backpacking"
    MOTORCYCLE = "motorcycle"
    CLIMBING = "climbing"
    SKIING = "skiing"
    PHOTOGRAPHY = "photography"
    OTHER = "other"

    @classmethod
    def _missing_(cls, value):
        # Accept "Hiking", " HIKING " etc.
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class SortOrder(str, Enum):
    """Ordering of field note listings."""
    RECENT = "recent"
    OLDEST = "oldest"
    NAME = "name"


# Routes overview sampling
MAX_ROUTE_POINTS = 500
