"""
Declarative base shared by all ORM models.
"""

from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""
    pass


def utcnow() -> datetime:
    """Current time as naive UTC, the convention for stored timestamps."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
