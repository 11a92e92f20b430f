"""
Tests for the photos API.
"""

import pytest


@pytest.fixture
def field_note(client):
    response = client.post("/api/field-notes", json={
        "title": "Bishop Pass",
        "description": "Granite and lakes",
        "tripType": "hiking",
    })
    assert response.status_code == 201
    return response.json()


def photo_payload(field_note_id, **overrides):
    payload = {
        "fieldNoteId": field_note_id,
        "filename": "lake.jpg",
        "url": "http://testserver/objects/uploads/lake-1?expires=1&signature=abc",
        "latitude": 37.1,
        "longitude": -118.55,
        "timestamp": "2024-08-20T09:12:00Z",
        "iso": 200,
    }
    payload.update(overrides)
    return payload


# =============================================================================
# Test Create / Read / Delete
# =============================================================================

class TestPhotoCrud:
    """CRUD on /api/photos"""

    def test_create(self, client, field_note):
        response = client.post("/api/photos", json=photo_payload(field_note["id"]))
        assert response.status_code == 201
        body = response.json()
        assert body["url"] == "/objects/uploads/lake-1"
        assert body["fieldNoteId"] == field_note["id"]
        assert body["timestamp"] == "2024-08-20T09:12:00"
        assert body["iso"] == 200

    def test_create_unknown_field_note(self, client):
        response = client.post("/api/photos", json=photo_payload("missing"))
        assert response.status_code == 404
        assert response.json() == {"message": "Field note not found"}

    def test_create_requires_url(self, client, field_note):
        payload = photo_payload(field_note["id"])
        del payload["url"]
        response = client.post("/api/photos", json=payload)
        assert response.status_code == 400
        assert any(e["field"] == "url" for e in response.json()["errors"])

    def test_invalid_latitude(self, client, field_note):
        response = client.post("/api/photos", json=photo_payload(field_note["id"], latitude=123))
        assert response.status_code == 400

    def test_get(self, client, field_note):
        created = client.post("/api/photos", json=photo_payload(field_note["id"])).json()
        response = client.get(f"/api/photos/{created['id']}")
        assert response.status_code == 200
        assert response.json()["filename"] == "lake.jpg"

    def test_get_missing(self, client):
        assert client.get("/api/photos/missing").status_code == 404

    def test_list_filtered_by_field_note(self, client, field_note):
        other = client.post("/api/field-notes", json={
            "title": "Other", "description": "", "tripType": "other",
        }).json()
        client.post("/api/photos", json=photo_payload(field_note["id"]))
        client.post("/api/photos", json=photo_payload(other["id"], filename="other.jpg"))

        assert len(client.get("/api/photos").json()) == 2
        body = client.get("/api/photos", params={"fieldNoteId": other["id"]}).json()
        assert [p["filename"] for p in body] == ["other.jpg"]

    def test_delete(self, client, field_note):
        created = client.post("/api/photos", json=photo_payload(field_note["id"])).json()
        assert client.delete(f"/api/photos/{created['id']}").status_code == 204
        assert client.get(f"/api/photos/{created['id']}").status_code == 404
        assert client.get(f"/api/field-notes/{field_note['id']}").json()["photos"] == []

    def test_delete_missing(self, client):
        assert client.delete("/api/photos/missing").status_code == 404


# =============================================================================
# Test Upload URL
# =============================================================================

class TestUploadUrl:
    """POST /api/photos/upload"""

    def test_returns_signed_url(self, client):
        response = client.post("/api/photos/upload")
        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"uploadURL", "objectPath"}
        assert body["uploadURL"].startswith("http://testserver/objects/uploads/")
        assert "signature=" in body["uploadURL"]
        assert body["objectPath"].startswith("/objects/uploads/")


# =============================================================================
# Test EXIF Extraction
# =============================================================================

class TestExtractExif:
    """POST /api/photos/extract-exif"""

    def test_jpeg_with_metadata(self, client, sample_jpeg):
        response = client.post(
            "/api/photos/extract-exif",
            files={"photo": ("whitney.jpg", sample_jpeg, "image/jpeg")},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["camera"] == "Canon EOS R5"
        assert body["latitude"] == pytest.approx(36.578)
        assert body["shutterSpeed"] == "1/250"
        assert body["focalLength"] == "35mm"

    def test_image_without_metadata(self, client):
        response = client.post(
            "/api/photos/extract-exif",
            files={"photo": ("plain.png", b"\x89PNG\r\n\x1a\n" + b"\x00" * 32, "image/png")},
        )
        assert response.status_code == 200
        assert response.json() == {}

    def test_missing_file(self, client):
        response = client.post("/api/photos/extract-exif")
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request data"

    def test_empty_file(self, client):
        response = client.post(
            "/api/photos/extract-exif",
            files={"photo": ("empty.jpg", b"", "image/jpeg")},
        )
        assert response.status_code == 400
