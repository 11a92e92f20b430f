"""
Tests for field note service helpers.

GPX resolution, route sampling, the routes overview and saving
through FieldNoteService on an async session.
"""

import asyncio

import pytest
from types import SimpleNamespace

from app.features.field_notes import (
    FieldNoteService,
    FieldNoteWrite,
    build_routes_overview,
    resolve_gpx,
    sample_route,
)
from app.features.gpx import GpxPayload


# =============================================================================
# Test GPX Resolution
# =============================================================================

class TestResolveGpx:
    """Tests for resolve_gpx function."""

    def test_none(self):
        resolved = resolve_gpx(None)
        assert resolved.payload is None
        assert resolved.stats is None
        assert resolved.warnings == []

    def test_blank_text(self):
        assert resolve_gpx("   ").payload is None

    def test_raw_gpx_is_parsed(self, sample_gpx):
        resolved = resolve_gpx(sample_gpx)
        assert len(resolved.payload["coordinates"]) == 4
        assert resolved.stats.elevation_gain > 0
        assert resolved.warnings == []

    def test_invalid_gpx_gives_warning(self):
        resolved = resolve_gpx("<gpx><oops>")
        assert resolved.payload is None
        assert resolved.stats is None
        assert len(resolved.warnings) == 1
        assert "could not be parsed" in resolved.warnings[0]

    def test_parsed_payload_stored_as_is(self):
        payload = GpxPayload(coordinates=[[-118.29, 36.57], [-118.28, 36.58]])
        resolved = resolve_gpx(payload)
        assert resolved.payload == {"coordinates": [[-118.29, 36.57], [-118.28, 36.58]]}
        assert resolved.stats is None


# =============================================================================
# Test Route Sampling
# =============================================================================

def make_route(n):
    return [[-118.0 + i * 0.001, 36.0 + i * 0.001] for i in range(n)]


class TestSampleRoute:
    """Tests for sample_route function."""

    def test_short_route_unchanged(self):
        route = make_route(10)
        assert sample_route(route) == route

    def test_limit_exact(self):
        route = make_route(500)
        assert sample_route(route) == route

    def test_long_route_thinned(self):
        route = make_route(1234)
        sampled = sample_route(route)
        assert len(sampled) <= 501
        assert sampled[0] == route[0]

    def test_last_point_kept(self):
        route = make_route(1001)
        sampled = sample_route(route)
        assert sampled[-1] == route[-1]
        assert sampled.count(route[-1]) == 1

    def test_stride(self):
        """1000 points -> every 2nd point."""
        route = make_route(1000)
        sampled = sample_route(route)
        assert sampled[1] == route[2]

    def test_custom_limit(self):
        sampled = sample_route(make_route(100), max_points=10)
        assert len(sampled) <= 11


# =============================================================================
# Test Routes Overview
# =============================================================================

def note(id, coordinates, title="Trip", trip_type="hiking"):
    gpx_data = {"coordinates": coordinates} if coordinates is not None else None
    return SimpleNamespace(id=id, title=title, trip_type=trip_type, gpx_data=gpx_data)


class TestRoutesOverview:
    """Tests for build_routes_overview function."""

    def test_empty(self):
        overview = build_routes_overview([])
        assert overview.routes == []
        assert overview.bounds is None

    def test_single_point_routes_skipped(self):
        overview = build_routes_overview([note("a", [[-118.0, 36.0]])])
        assert overview.routes == []

    def test_malformed_coordinates_ignored(self):
        coords = [[-118.0, 36.0], ["x", 1], [1], None, [-117.9, 36.1]]
        overview = build_routes_overview([note("a", coords)])
        assert overview.routes[0].point_count == 2

    def test_bounds_cover_all_routes(self):
        overview = build_routes_overview([
            note("a", [[-118.0, 36.0], [-117.5, 36.5]]),
            note("b", [[-120.0, 37.0], [-119.0, 38.0]]),
        ])
        assert [r.id for r in overview.routes] == ["a", "b"]
        assert overview.bounds == [-120.0, 36.0, -117.5, 38.0]

    def test_point_count_is_before_sampling(self):
        overview = build_routes_overview([note("a", make_route(2000))])
        route = overview.routes[0]
        assert route.point_count == 2000
        assert len(route.coordinates) <= 501


# =============================================================================
# Test Saving
# =============================================================================

def save(session_factory, payload):
    """Create a field note with a fresh async session."""
    async def runner():
        async with session_factory() as session:
            result = await FieldNoteService(session).create(payload)
            await session.commit()
            return result
    return asyncio.run(runner())


class TestCreate:
    """Tests for FieldNoteService.create."""

    def test_without_photos(self, session_factory):
        payload = FieldNoteWrite(title="Loop", description="", trip_type="hiking")
        result = save(session_factory, payload)
        assert result.field_note.id
        assert result.field_note.photos == []
        assert result.warnings == []

    def test_raw_gpx_without_photos(self, session_factory, sample_gpx):
        payload = FieldNoteWrite(
            title="Whitney", description="", trip_type="hiking", gpx_data=sample_gpx
        )
        result = save(session_factory, payload)
        assert result.field_note.photos == []
        assert len(result.field_note.gpx_data["coordinates"]) == 4

    def test_with_inline_photos(self, session_factory):
        payload = FieldNoteWrite(
            title="Loop",
            description="",
            trip_type="hiking",
            photos=[
                {"url": "/objects/uploads/a", "filename": "a.jpg"},
                {"filename": "no-url.jpg"},
            ],
        )
        result = save(session_factory, payload)
        assert [p.filename for p in result.field_note.photos] == ["a.jpg"]
