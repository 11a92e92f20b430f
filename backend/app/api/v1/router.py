"""
API Router

Combines all route modules.
"""

from fastapi import APIRouter

from app.api.v1.routes import field_notes, photos, gpx

api_router = APIRouter()

api_router.include_router(field_notes.router, prefix="/field-notes", tags=["Field Notes"])
api_router.include_router(photos.router, prefix="/photos", tags=["Photos"])
api_router.include_router(gpx.router, prefix="/gpx", tags=["GPX"])
