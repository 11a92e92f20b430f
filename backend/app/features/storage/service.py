"""
Object Storage Service

Local-disk object store with signed, expiring upload URLs.

Upload flow:
    1. POST /api/photos/upload -> create_upload() returns a signed PUT URL
    2. client PUTs the file to /objects/uploads/<id>?expires=..&signature=..
    3. the photo is saved with url /objects/uploads/<id> (normalize_object_path)
    4. GET /objects/uploads/<id> serves the stored bytes
"""

import hashlib
import hmac
import logging
import secrets
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import urlencode, urlsplit

from app.config import settings

logger = logging.getLogger(__name__)

UPLOAD_PREFIX = "uploads"
OBJECTS_ROUTE = "/objects"

# Used only when UPLOAD_SIGNING_KEY is unset; not shared between processes.
_PROCESS_SIGNING_KEY = secrets.token_urlsafe(32)


class ObjectNotFoundError(Exception):
    """Object does not exist or the path is outside the storage root."""


class InvalidSignatureError(Exception):
    """Upload URL signature is wrong or expired."""


@dataclass
class UploadTarget:
    """Signed upload destination issued to a client."""
    upload_url: str
    object_path: str  # e.g. /objects/uploads/<id>
    expires_at: int  # unix seconds


class ObjectStorageService:
    """Stores objects under a root directory and issues signed upload URLs."""

    def __init__(
        self,
        root: Path,
        signing_key: str,
        ttl_seconds: int = 900,
        base_url: Optional[str] = None
    ):
        self.root = Path(root)
        self.signing_key = signing_key.encode("utf-8")
        self.ttl_seconds = ttl_seconds
        self.base_url = base_url.rstrip("/") if base_url else None

    @classmethod
    def from_settings(cls) -> "ObjectStorageService":
        return cls(
            root=settings.object_storage_dir,
            signing_key=settings.upload_signing_key or _PROCESS_SIGNING_KEY,
            ttl_seconds=settings.upload_url_ttl_seconds,
            base_url=settings.public_base_url,
        )

    # === Signing ===

    def sign(self, object_key: str, expires: int) -> str:
        """HMAC-SHA256 over the method, object key and expiry."""
        message = f"PUT\n{object_key}\n{expires}".encode("utf-8")
        return hmac.new(self.signing_key, message, hashlib.sha256).hexdigest()

    def verify_signature(
        self,
        object_key: str,
        expires: int,
        signature: str,
        now: Optional[float] = None
    ) -> None:
        """
        Check an upload signature.

        Raises:
            InvalidSignatureError: if expired or not matching
        """
        current = time.time() if now is None else now
        if expires < current:
            raise InvalidSignatureError("Upload URL has expired")
        expected = self.sign(object_key, expires)
        if not hmac.compare_digest(expected, signature or ""):
            raise InvalidSignatureError("Invalid upload signature")

    def create_upload(self, base_url: Optional[str] = None) -> UploadTarget:
        """
        Issue a signed URL for uploading one new object.

        Args:
            base_url: Request base URL, used when no public base URL is configured

        Returns:
            UploadTarget with the PUT URL and the object path to store
        """
        object_key = f"{UPLOAD_PREFIX}/{uuid.uuid4()}"
        expires = int(time.time()) + self.ttl_seconds
        query = urlencode({"expires": expires, "signature": self.sign(object_key, expires)})
        base = self.base_url or (base_url.rstrip("/") if base_url else "")
        object_path = f"{OBJECTS_ROUTE}/{object_key}"
        return UploadTarget(
            upload_url=f"{base}{object_path}?{query}",
            object_path=object_path,
            expires_at=expires,
        )

    # === Paths ===

    def resolve(self, object_key: str) -> Path:
        """
        Map an object key (e.g. 'uploads/<id>') to a file under the root.

        Raises:
            ObjectNotFoundError: if the key escapes the storage root
        """
        root = self.root.resolve()
        path = (root / object_key.lstrip("/")).resolve()
        if path == root or root not in path.parents:
            raise ObjectNotFoundError(object_key)
        return path

    @staticmethod
    def object_key_from_path(object_path: str) -> Optional[str]:
        """'/objects/uploads/<id>' -> 'uploads/<id>', None for other paths."""
        prefix = f"{OBJECTS_ROUTE}/"
        if not object_path.startswith(prefix):
            return None
        return object_path[len(prefix):]

    @staticmethod
    def normalize_object_path(url: str) -> str:
        """
        Convert an upload URL into the path objects are served from.

        Signed local upload URLs and bucket URLs of the form
        https://storage.googleapis.com/<bucket>/.private/uploads/<id>
        become /objects/uploads/<id>. Anything else is returned unchanged.
        """
        if not url:
            return url
        parts = urlsplit(url)
        path = parts.path

        if path.startswith(f"{OBJECTS_ROUTE}/{UPLOAD_PREFIX}/"):
            return path

        if parts.netloc == "storage.googleapis.com":
            # /<bucket>/<object path>
            segments = path.lstrip("/").split("/", 1)
            if len(segments) == 2 and segments[1].startswith(f".private/{UPLOAD_PREFIX}/"):
                entity_id = segments[1][len(f".private/{UPLOAD_PREFIX}/"):]
                return f"{OBJECTS_ROUTE}/{UPLOAD_PREFIX}/{entity_id}"

        return url

    # === Objects ===

    def write_object(self, object_key: str, data: bytes) -> Path:
        """Store bytes under object_key, replacing any previous content."""
        path = self.resolve(object_key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info(f"Stored object {object_key} ({len(data)} bytes)")
        return path

    def get_object_path(self, object_key: str) -> Path:
        """
        File path of an existing object.

        Raises:
            ObjectNotFoundError: if missing
        """
        path = self.resolve(object_key)
        if not path.is_file():
            raise ObjectNotFoundError(object_key)
        return path

    def read_object(self, object_key: str, limit: Optional[int] = None) -> bytes:
        """Read an object, optionally only its first `limit` bytes."""
        path = self.get_object_path(object_key)
        with path.open("rb") as f:
            return f.read(limit) if limit else f.read()

    def object_size(self, object_key: str) -> int:
        return self.get_object_path(object_key).stat().st_size

    def exists(self, object_key: str) -> bool:
        try:
            self.get_object_path(object_key)
        except ObjectNotFoundError:
            return False
        return True

    def delete_object(self, object_key: str) -> bool:
        """Remove an object, False when it did not exist."""
        try:
            path = self.get_object_path(object_key)
        except ObjectNotFoundError:
            return False
        path.unlink()
        return True


def get_storage_service() -> ObjectStorageService:
    """Dependency returning the configured storage service."""
    return ObjectStorageService.from_settings()


def warn_if_signing_key_missing(signing_key: Optional[str]) -> bool:
    """
    Log a warning when no upload signing key is configured.

    Upload URLs are then signed with a per-process key, so they stop
    verifying after a restart or on another worker.

    Returns:
        True if the key is missing
    """
    if signing_key:
        return False
    logger.warning(
        "UPLOAD_SIGNING_KEY is not set; upload URLs are signed with a "
        "per-process key and fail after a restart or on another worker"
    )
    return True
