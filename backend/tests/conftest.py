"""
Shared test fixtures.

API tests run against a temporary SQLite database and a temporary
object storage directory.
"""

import struct

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.db.session import get_async_db
from app.features.storage import ObjectStorageService, get_storage_service
from app.main import app
from app.models import Base, import_models


# =============================================================================
# Database
# =============================================================================

@pytest.fixture
def session_factory(tmp_path):
    """Async session factory bound to a fresh SQLite file."""
    db_path = tmp_path / "test.db"

    import_models()
    sync_engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(bind=sync_engine)
    sync_engine.dispose()

    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    yield factory


@pytest.fixture
def storage(tmp_path):
    return ObjectStorageService(
        root=tmp_path / "objects",
        signing_key="test-signing-key",
        ttl_seconds=900,
    )


@pytest.fixture
def client(session_factory, storage):
    """TestClient with database and storage dependencies overridden."""

    async def override_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_db] = override_db
    app.dependency_overrides[get_storage_service] = lambda: storage
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()


# =============================================================================
# GPX
# =============================================================================

SAMPLE_GPX = """<?xml version="1.0" encoding="UTF-8"?>
<gpx version="1.1" creator="test" xmlns="http://www.topografix.com/GPX/1/1">
  <metadata><time>2024-06-01T07:30:00Z</time></metadata>
  <trk>
    <name>Whitney Portal</name>
    <trkseg>
      <trkpt lat="36.5780" lon="-118.2920"><ele>2500</ele></trkpt>
      <trkpt lat="36.5790" lon="-118.2910"><ele>2600</ele></trkpt>
      <trkpt lat="36.5800" lon="-118.2900"><ele>2580</ele></trkpt>
      <trkpt lat="36.5810" lon="-118.2890"><ele>2630</ele></trkpt>
    </trkseg>
  </trk>
</gpx>
"""


@pytest.fixture
def sample_gpx():
    return SAMPLE_GPX


# =============================================================================
# EXIF JPEG
# =============================================================================

BYTE, ASCII, SHORT, LONG, RATIONAL = 1, 2, 3, 4, 5


def ascii_entry(tag, text):
    payload = text.encode("ascii") + b"\x00"
    return (tag, ASCII, len(payload), payload)


def rational_entry(tag, *pairs):
    payload = b"".join(struct.pack(">II", num, den) for num, den in pairs)
    return (tag, RATIONAL, len(pairs), payload)


def short_entry(tag, value):
    return (tag, SHORT, 1, struct.pack(">H", value))


def long_entry(tag, value):
    return (tag, LONG, 1, struct.pack(">I", value))


def byte_entry(tag, value):
    return (tag, BYTE, 1, bytes([value]))


def ifd_size(entries):
    data = 0
    for _, _, _, payload in entries:
        if len(payload) > 4:
            data += len(payload) + len(payload) % 2
    return 2 + 12 * len(entries) + 4 + data


def build_ifd(entries, offset):
    """Big-endian IFD placed at `offset` within the TIFF block."""
    data_offset = offset + 2 + 12 * len(entries) + 4
    head = struct.pack(">H", len(entries))
    data = b""
    for tag, typ, count, payload in sorted(entries, key=lambda e: e[0]):
        if len(payload) <= 4:
            value = payload.ljust(4, b"\x00")
        else:
            value = struct.pack(">I", data_offset + len(data))
            data += payload
            if len(data) % 2:
                data += b"\x00"
        head += struct.pack(">HHI", tag, typ, count) + value
    return head + struct.pack(">I", 0) + data


def build_tiff(ifd0, exif=None, gps=None):
    """TIFF block with IFD0 and optional Exif and GPS sub-IFDs."""
    ifd0 = list(ifd0)
    if exif:
        ifd0.append(long_entry(0x8769, 0))
    if gps:
        ifd0.append(long_entry(0x8825, 0))

    offset = 8
    exif_offset = offset + ifd_size(ifd0)
    gps_offset = exif_offset + (ifd_size(exif) if exif else 0)

    resolved = []
    for entry in ifd0:
        if entry[0] == 0x8769:
            entry = long_entry(0x8769, exif_offset)
        elif entry[0] == 0x8825:
            entry = long_entry(0x8825, gps_offset)
        resolved.append(entry)

    tiff = b"MM\x00\x2a" + struct.pack(">I", offset) + build_ifd(resolved, offset)
    if exif:
        tiff += build_ifd(exif, exif_offset)
    if gps:
        tiff += build_ifd(gps, gps_offset)
    return tiff


def build_jpeg(tiff):
    """Minimal JPEG: SOI, APP1 Exif segment, EOI."""
    app1 = b"Exif\x00\x00" + tiff
    return b"\xff\xd8\xff\xe1" + struct.pack(">H", len(app1) + 2) + app1 + b"\xff\xd9"


def sample_jpeg_bytes():
    """Photo taken near Mt Whitney with a full set of camera settings."""
    ifd0 = [
        ascii_entry(0x010F, "Canon"),
        ascii_entry(0x0110, "Canon EOS R5"),
    ]
    exif = [
        rational_entry(0x829A, (1, 250)),
        rational_entry(0x829D, (28, 10)),
        short_entry(0x8827, 100),
        ascii_entry(0x9003, "2024:06:01 08:15:30"),
        rational_entry(0x920A, (35, 1)),
        ascii_entry(0xA434, "RF 35mm F1.8 MACRO IS STM"),
    ]
    gps = [
        ascii_entry(0x0001, "N"),
        rational_entry(0x0002, (36, 1), (34, 1), (4080, 100)),
        ascii_entry(0x0003, "W"),
        rational_entry(0x0004, (118, 1), (17, 1), (3120, 100)),
        byte_entry(0x0005, 0),
        rational_entry(0x0006, (4421, 1)),
    ]
    return build_jpeg(build_tiff(ifd0, exif, gps))


@pytest.fixture
def sample_jpeg():
    return sample_jpeg_bytes()
