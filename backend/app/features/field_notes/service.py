"""
Field Note Service

Creates and updates field notes from API payloads:
- raw GPX text is parsed once, and its statistics fill distance,
  elevation gain and date when the client did not supply them
- inline photo lists are synchronised with the stored photos

GPX parse failures do not block saving; they are returned as warnings.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.features.gpx import GpxPayload, GpxParseError, GpxStats, parse_gpx
from app.features.photos.models import Photo
from app.features.photos.repository import EXIF_COLUMNS
from app.features.photos.schemas import PhotoInput
from app.features.storage import ObjectStorageService
from app.models.base import utcnow
from app.shared.constants import MAX_ROUTE_POINTS
from app.shared.geo import bounding_box
from .models import FieldNote
from .repository import FieldNoteRepository
from .schemas import FieldNoteWrite, RouteSummary, RoutesOverview

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    """Saved field note and any non-fatal warnings."""
    field_note: FieldNote
    warnings: list[str] = field(default_factory=list)


@dataclass
class ResolvedGpx:
    """GPX input after parsing."""
    payload: Optional[dict] = None
    stats: Optional[GpxStats] = None
    warnings: list[str] = field(default_factory=list)


def resolve_gpx(gpx_data: GpxPayload | str | None) -> ResolvedGpx:
    """
    Turn the gpxData field of a request into the stored payload.

    Raw GPX text is parsed; an already parsed payload is stored as is.
    """
    if gpx_data is None:
        return ResolvedGpx()

    if isinstance(gpx_data, GpxPayload):
        return ResolvedGpx(payload=gpx_data.model_dump(by_alias=True, exclude_none=True))

    if not gpx_data.strip():
        return ResolvedGpx()

    try:
        stats = parse_gpx(gpx_data)
    except GpxParseError as e:
        logger.warning(f"Ignoring unparsable GPX data: {e}")
        return ResolvedGpx(warnings=[f"GPX data could not be parsed: {e}"])

    return ResolvedGpx(payload=stats.to_payload(), stats=stats)


def sample_route(
    coordinates: list[list[float]],
    max_points: int = MAX_ROUTE_POINTS
) -> list[list[float]]:
    """
    Thin a route to at most ~max_points by taking every n-th point.

    The last point is always kept.
    """
    if len(coordinates) <= max_points:
        return list(coordinates)
    rate = math.ceil(len(coordinates) / max_points)
    sampled = coordinates[::rate]
    if sampled[-1] != coordinates[-1]:
        sampled.append(coordinates[-1])
    return sampled


def _valid_coordinates(gpx_data: Optional[dict]) -> list[list[float]]:
    """[lon, lat] pairs of a stored payload, ignoring malformed entries."""
    if not isinstance(gpx_data, dict):
        return []
    coordinates = gpx_data.get("coordinates")
    if not isinstance(coordinates, list):
        return []
    return [
        [float(c[0]), float(c[1])]
        for c in coordinates
        if isinstance(c, (list, tuple)) and len(c) == 2
        and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in c)
    ]


def build_routes_overview(notes: list[FieldNote]) -> RoutesOverview:
    """Sampled routes of all notes with at least two coordinates."""
    routes = []
    all_points: list[list[float]] = []

    for note in notes:
        coordinates = _valid_coordinates(note.gpx_data)
        if len(coordinates) < 2:
            continue
        sampled = sample_route(coordinates)
        all_points.extend(sampled)
        routes.append(RouteSummary(
            id=note.id,
            title=note.title,
            trip_type=note.trip_type,
            point_count=len(coordinates),
            coordinates=sampled,
        ))

    bounds = bounding_box(all_points)
    return RoutesOverview(routes=routes, bounds=list(bounds) if bounds else None)


class FieldNoteService:
    """Create, update and delete field notes together with their photos."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = FieldNoteRepository(db)

    def _new_photo(self, data: PhotoInput) -> Photo:
        url = ObjectStorageService.normalize_object_path(data.url)
        exif = {
            key: value
            for key, value in data.metadata_fields().items()
            if key in EXIF_COLUMNS
        }
        return Photo(filename=data.filename, url=url, **exif)

    async def create(self, payload: FieldNoteWrite) -> SaveResult:
        """
        Create a field note and its inline photos.

        Args:
            payload: Validated request body

        Returns:
            SaveResult with the note reloaded with photos
        """
        gpx = resolve_gpx(payload.gpx_data)
        stats = gpx.stats

        note = FieldNote(
            title=payload.title,
            description=payload.description,
            trip_type=payload.trip_type.value,
            date=payload.date or (stats.date if stats else None) or utcnow(),
            distance=payload.distance if payload.distance is not None else (
                stats.distance if stats else None
            ),
            elevation_gain=payload.elevation_gain if payload.elevation_gain is not None else (
                stats.elevation_gain if stats else None
            ),
            gpx_data=gpx.payload,
        )

        added = 0
        for photo_input in payload.photos or []:
            if photo_input.id is None and photo_input.url and photo_input.filename:
                note.photos.append(self._new_photo(photo_input))
                added += 1
            else:
                logger.info("Skipping photo entry without url/filename on create")

        self.db.add(note)
        await self.db.flush()
        logger.info(f"Created field note {note.id} with {added} photos")

        saved = await self.repo.get_with_photos(note.id)
        return SaveResult(field_note=saved, warnings=gpx.warnings)

    async def update(self, field_note_id: str, payload: FieldNoteWrite) -> SaveResult | None:
        """
        Replace a field note's fields and, when given, its photo set.

        gpx_data omitted (or unparsable) keeps the stored route. Distance,
        elevation gain and date keep their stored values unless supplied
        or derived from newly submitted GPX text.

        Returns:
            SaveResult, or None if the note does not exist
        """
        note = await self.repo.get_with_photos(field_note_id)
        if note is None:
            return None

        gpx = resolve_gpx(payload.gpx_data)
        stats = gpx.stats

        values = {
            "title": payload.title,
            "description": payload.description,
            "trip_type": payload.trip_type.value,
        }
        if gpx.payload is not None:
            values["gpx_data"] = gpx.payload

        if payload.date is not None:
            values["date"] = payload.date
        elif stats and stats.date:
            values["date"] = stats.date

        if payload.distance is not None:
            values["distance"] = payload.distance
        elif stats:
            values["distance"] = stats.distance

        if payload.elevation_gain is not None:
            values["elevation_gain"] = payload.elevation_gain
        elif stats:
            values["elevation_gain"] = stats.elevation_gain

        await self.repo.update(note, **values)

        if payload.photos is not None:
            await self.sync_photos(note, payload.photos)

        saved = await self.repo.get_with_photos(note.id)
        return SaveResult(field_note=saved, warnings=gpx.warnings)

    async def sync_photos(self, note: FieldNote, photos: list[PhotoInput]) -> None:
        """
        Make the note's photos match the submitted list.

        Entries with a known id are kept, entries without id but with url
        and filename are created, stored photos not listed are deleted.
        """
        existing_ids = {photo.id for photo in note.photos}
        keep_ids = {p.id for p in photos if p.id and p.id in existing_ids}

        removed = 0
        for photo in list(note.photos):
            if photo.id not in keep_ids:
                note.photos.remove(photo)
                removed += 1

        added = 0
        for photo_input in photos:
            if photo_input.id is None and photo_input.url and photo_input.filename:
                note.photos.append(self._new_photo(photo_input))
                added += 1
            elif photo_input.id and photo_input.id not in existing_ids:
                logger.warning(
                    f"Ignoring unknown photo {photo_input.id} for field note {note.id}"
                )

        await self.db.flush()
        logger.info(
            f"Synced photos for field note {note.id}: "
            f"{len(keep_ids)} kept, {added} added, {removed} removed"
        )

    async def delete(self, field_note_id: str) -> bool:
        """
        Delete a field note and all of its photos.

        Returns:
            True if deleted, False if not found
        """
        note = await self.repo.get_with_photos(field_note_id)
        if note is None:
            return False
        photo_count = len(note.photos)
        await self.repo.delete(note)
        logger.info(f"Deleted field note {field_note_id} and {photo_count} photos")
        return True

    async def routes_overview(self) -> RoutesOverview:
        notes = await self.repo.list_with_routes()
        return build_routes_overview(notes)
