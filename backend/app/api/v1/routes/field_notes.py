"""
Field Notes Routes

CRUD endpoints for field notes, their photos and route overviews.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.features.field_notes import (
    FieldNoteDetail,
    FieldNoteRepository,
    FieldNoteResponse,
    FieldNoteSaveResponse,
    FieldNoteService,
    FieldNoteWrite,
    RoutesOverview,
    SaveResult,
)
from app.features.photos import PhotoRepository, PhotoResponse
from app.shared.constants import SortOrder, TripType

router = APIRouter()


def _parse_trip_type(value: Optional[str]) -> Optional[TripType]:
    """'all' or empty means no filter."""
    if not value or value.lower() == "all":
        return None
    try:
        return TripType(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown trip type: {value}")


def _save_response(result: SaveResult) -> FieldNoteSaveResponse:
    detail = FieldNoteDetail.model_validate(result.field_note)
    return FieldNoteSaveResponse(**detail.model_dump(), warnings=result.warnings)


@router.get("", response_model=List[FieldNoteResponse])
async def list_field_notes(
    search: Optional[str] = Query(None),
    trip_type: Optional[str] = Query(None, alias="tripType"),
    sort_order: SortOrder = Query(SortOrder.RECENT, alias="sortOrder"),
    db: AsyncSession = Depends(get_async_db)
):
    """List field notes, optionally filtered by text and trip type."""
    repo = FieldNoteRepository(db)
    notes = await repo.search(
        search=search,
        trip_type=_parse_trip_type(trip_type),
        sort_order=sort_order,
    )
    return [FieldNoteResponse.model_validate(note) for note in notes]


@router.get("/routes", response_model=RoutesOverview)
async def get_routes(db: AsyncSession = Depends(get_async_db)):
    """Sampled routes of every field note with GPX data, plus overall bounds."""
    service = FieldNoteService(db)
    return await service.routes_overview()


@router.get("/{field_note_id}", response_model=FieldNoteDetail)
async def get_field_note(
    field_note_id: str,
    db: AsyncSession = Depends(get_async_db)
):
    """Get a field note with its photos."""
    repo = FieldNoteRepository(db)
    note = await repo.get_with_photos(field_note_id)
    if not note:
        raise HTTPException(status_code=404, detail="Field note not found")
    return FieldNoteDetail.model_validate(note)


@router.get("/{field_note_id}/photos", response_model=List[PhotoResponse])
async def get_field_note_photos(
    field_note_id: str,
    db: AsyncSession = Depends(get_async_db)
):
    """Photos of one field note, oldest first."""
    if not await FieldNoteRepository(db).exists(field_note_id):
        raise HTTPException(status_code=404, detail="Field note not found")
    photos = await PhotoRepository(db).list_for_field_note(field_note_id)
    return [PhotoResponse.model_validate(photo) for photo in photos]


@router.post("", response_model=FieldNoteSaveResponse, status_code=201)
async def create_field_note(
    payload: FieldNoteWrite,
    db: AsyncSession = Depends(get_async_db)
):
    """
    Create a field note.

    Raw GPX text in gpxData is parsed and fills distance, elevation gain
    and date when they are not given. Unparsable GPX is reported in
    warnings and the note is saved without a route.
    """
    service = FieldNoteService(db)
    result = await service.create(payload)
    await db.commit()
    return _save_response(result)


@router.put("/{field_note_id}", response_model=FieldNoteSaveResponse)
async def update_field_note(
    field_note_id: str,
    payload: FieldNoteWrite,
    db: AsyncSession = Depends(get_async_db)
):
    """Update a field note; a photos list replaces the note's photo set."""
    service = FieldNoteService(db)
    result = await service.update(field_note_id, payload)
    if result is None:
        raise HTTPException(status_code=404, detail="Field note not found")
    await db.commit()
    return _save_response(result)


@router.delete("/{field_note_id}", status_code=204)
async def delete_field_note(
    field_note_id: str,
    db: AsyncSession = Depends(get_async_db)
):
    """Delete a field note and all of its photos."""
    service = FieldNoteService(db)
    if not await service.delete(field_note_id):
        raise HTTPException(status_code=404, detail="Field note not found")
    await db.commit()
    return Response(status_code=204)
