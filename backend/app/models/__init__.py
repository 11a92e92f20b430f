"""
Database Models

Feature models live in their feature packages and are imported lazily
here to avoid circular imports (they import app.models.base).
Call import_models() before create_all()/autogenerate.
"""

from app.models.base import Base, utcnow


def import_models():
    """Import every model module so all tables are registered on Base.metadata."""
    from app.features.field_notes.models import FieldNote
    from app.features.photos.models import Photo
    return FieldNote, Photo


def __getattr__(name):
    if name == "FieldNote":
        return import_models()[0]
    if name == "Photo":
        return import_models()[1]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Base",
    "utcnow",
    "import_models",
    "FieldNote",
    "Photo",
]
