"""
Tests for health check and application-wide error handling.
"""

import pytest

from app.main import app


@pytest.fixture
def failing_route():
    path = "/api/__test_failure"

    @app.get(path)
    async def fail():
        raise RuntimeError("boom")

    yield path
    app.router.routes = [r for r in app.router.routes if getattr(r, "path", None) != path]


class TestHealth:
    """GET /health"""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "0.1.0"}


class TestErrorHandling:
    """Uniform error bodies."""

    def test_unknown_route(self, client):
        response = client.get("/api/nothing")
        assert response.status_code == 404
        assert response.json() == {"message": "Not Found"}

    def test_unhandled_error(self, client, failing_route):
        response = client.get(failing_route)
        assert response.status_code == 500
        assert response.json() == {"message": "Internal server error"}

    def test_malformed_json(self, client):
        response = client.post(
            "/api/field-notes",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request data"
