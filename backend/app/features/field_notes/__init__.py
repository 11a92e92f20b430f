"""
Field notes module.

Usage:
    from app.features.field_notes import FieldNote, FieldNoteService

Components:
- FieldNote: SQLAlchemy model, owns its photos
- FieldNoteRepository: search, detail and route queries
- FieldNoteService: create/update/delete with GPX parsing and photo sync
"""

from app.features.photos.models import Photo  # noqa: F401  (relationship target)

from .models import FieldNote
from .repository import FieldNoteRepository
from .service import (
    FieldNoteService,
    SaveResult,
    resolve_gpx,
    sample_route,
    build_routes_overview,
)
from .schemas import (
    FieldNoteWrite,
    FieldNoteResponse,
    FieldNoteDetail,
    FieldNoteSaveResponse,
    RouteSummary,
    RoutesOverview,
)

__all__ = [
    # Model
    "FieldNote",
    # Repository
    "FieldNoteRepository",
    # Service
    "FieldNoteService",
    "SaveResult",
    "resolve_gpx",
    "sample_route",
    "build_routes_overview",
    # Schemas
    "FieldNoteWrite",
    "FieldNoteResponse",
    "FieldNoteDetail",
    "FieldNoteSaveResponse",
    "RouteSummary",
    "RoutesOverview",
]
