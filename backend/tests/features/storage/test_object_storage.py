"""
Tests for local object storage and signed upload URLs.
"""

import time

import pytest
from urllib.parse import parse_qs, urlsplit

from app.features.storage import (
    InvalidSignatureError,
    ObjectNotFoundError,
    ObjectStorageService,
    warn_if_signing_key_missing,
)


# =============================================================================
# Test Upload URLs
# =============================================================================

class TestUploadUrls:
    """Tests for create_upload and signature checks."""

    def test_upload_url_shape(self, storage):
        target = storage.create_upload(base_url="http://testserver/")
        parts = urlsplit(target.upload_url)
        query = parse_qs(parts.query)

        assert parts.netloc == "testserver"
        assert parts.path == target.object_path
        assert target.object_path.startswith("/objects/uploads/")
        assert int(query["expires"][0]) == target.expires_at
        assert len(query["signature"][0]) == 64

    def test_expiry_uses_ttl(self, storage):
        before = int(time.time())
        target = storage.create_upload()
        assert before + 900 <= target.expires_at <= int(time.time()) + 900

    def test_configured_base_url_wins(self, tmp_path):
        service = ObjectStorageService(tmp_path, "key", base_url="https://notes.example.com/")
        target = service.create_upload(base_url="http://internal:8000")
        assert target.upload_url.startswith("https://notes.example.com/objects/uploads/")

    def test_valid_signature(self, storage):
        expires = int(time.time()) + 60
        signature = storage.sign("uploads/abc", expires)
        storage.verify_signature("uploads/abc", expires, signature)

    def test_signature_bound_to_key(self, storage):
        expires = int(time.time()) + 60
        signature = storage.sign("uploads/abc", expires)
        with pytest.raises(InvalidSignatureError):
            storage.verify_signature("uploads/other", expires, signature)

    def test_signature_bound_to_expiry(self, storage):
        expires = int(time.time()) + 60
        signature = storage.sign("uploads/abc", expires)
        with pytest.raises(InvalidSignatureError):
            storage.verify_signature("uploads/abc", expires + 1, signature)

    def test_expired(self, storage):
        expires = 1_000
        signature = storage.sign("uploads/abc", expires)
        with pytest.raises(InvalidSignatureError, match="expired"):
            storage.verify_signature("uploads/abc", expires, signature, now=2_000)

    def test_different_signing_keys(self, tmp_path):
        a = ObjectStorageService(tmp_path, "key-a")
        b = ObjectStorageService(tmp_path, "key-b")
        assert a.sign("uploads/x", 100) != b.sign("uploads/x", 100)


# =============================================================================
# Test Signing Key Configuration
# =============================================================================

class TestSigningKeyConfiguration:
    """Tests for the fallback upload signing key."""

    def test_missing_key_warns(self, caplog):
        with caplog.at_level("WARNING"):
            assert warn_if_signing_key_missing(None) is True
        assert "UPLOAD_SIGNING_KEY is not set" in caplog.text

    def test_configured_key_is_quiet(self, caplog):
        with caplog.at_level("WARNING"):
            assert warn_if_signing_key_missing("secret") is False
        assert caplog.text == ""

    def test_fallback_key_stable_within_process(self, monkeypatch):
        from app.config import settings
        monkeypatch.setattr(settings, "upload_signing_key", None)
        first = ObjectStorageService.from_settings()
        second = ObjectStorageService.from_settings()
        assert first.sign("uploads/x", 100) == second.sign("uploads/x", 100)

    def test_configured_key_used(self, monkeypatch, tmp_path):
        from app.config import settings
        monkeypatch.setattr(settings, "upload_signing_key", "secret")
        configured = ObjectStorageService.from_settings()
        expected = ObjectStorageService(tmp_path, "secret")
        assert configured.sign("uploads/x", 100) == expected.sign("uploads/x", 100)


# =============================================================================
# Test Path Normalization
# =============================================================================

class TestNormalizeObjectPath:
    """Tests for normalize_object_path."""

    def test_signed_local_url(self):
        url = "http://localhost:8000/objects/uploads/abc-123?expires=1&signature=ff"
        assert ObjectStorageService.normalize_object_path(url) == "/objects/uploads/abc-123"

    def test_bucket_url(self):
        url = "https://storage.googleapis.com/my-bucket/.private/uploads/abc-123?X-Goog-Signature=x"
        assert ObjectStorageService.normalize_object_path(url) == "/objects/uploads/abc-123"

    def test_already_normalized(self):
        assert ObjectStorageService.normalize_object_path("/objects/uploads/abc") == "/objects/uploads/abc"

    def test_external_url_unchanged(self):
        url = "https://images.example.com/photo.jpg"
        assert ObjectStorageService.normalize_object_path(url) == url

    def test_other_bucket_path_unchanged(self):
        url = "https://storage.googleapis.com/my-bucket/public/photo.jpg"
        assert ObjectStorageService.normalize_object_path(url) == url

    def test_object_key_from_path(self):
        assert ObjectStorageService.object_key_from_path("/objects/uploads/a") == "uploads/a"
        assert ObjectStorageService.object_key_from_path("/static/a.jpg") is None


# =============================================================================
# Test Objects
# =============================================================================

class TestObjects:
    """Tests for reading and writing stored objects."""

    def test_write_and_read(self, storage):
        storage.write_object("uploads/one", b"jpeg bytes")
        assert storage.read_object("uploads/one") == b"jpeg bytes"
        assert storage.object_size("uploads/one") == 10
        assert storage.exists("uploads/one")

    def test_read_head_only(self, storage):
        storage.write_object("uploads/one", b"0123456789")
        assert storage.read_object("uploads/one", limit=4) == b"0123"

    def test_missing_object(self, storage):
        assert not storage.exists("uploads/missing")
        with pytest.raises(ObjectNotFoundError):
            storage.get_object_path("uploads/missing")

    def test_path_escape_rejected(self, storage):
        with pytest.raises(ObjectNotFoundError):
            storage.resolve("../secrets.txt")
        with pytest.raises(ObjectNotFoundError):
            storage.resolve("uploads/../../secrets.txt")

    def test_root_itself_rejected(self, storage):
        with pytest.raises(ObjectNotFoundError):
            storage.resolve("")

    def test_delete(self, storage):
        storage.write_object("uploads/one", b"x")
        assert storage.delete_object("uploads/one")
        assert not storage.delete_object("uploads/one")
