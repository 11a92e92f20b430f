"""
GPX File Routes

Parse uploaded GPX files into route statistics.
"""

import logging

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from app.config import settings
from app.features.gpx import GpxParseError, GpxStatsResponse, parse_gpx

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/parse", response_model=GpxStatsResponse)
async def parse_gpx_file(file: UploadFile = File(...)):
    """
    Upload and parse a GPX file.

    Returns distance (miles), elevation gain (feet), date, coordinates
    and elevation profile. Nothing is stored.
    """
    content = await file.read()

    if len(content) == 0:
        raise HTTPException(status_code=400, detail="File is empty")

    if len(content) > settings.max_gpx_bytes:
        max_mb = settings.max_gpx_bytes // (1024 * 1024)
        raise HTTPException(status_code=400, detail=f"File too large (max {max_mb}MB)")

    try:
        stats = await run_in_threadpool(parse_gpx, content)
    except GpxParseError as e:
        logger.warning(f"Rejected GPX upload {file.filename}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(
        f"Parsed GPX {file.filename}: {stats.point_count} points, "
        f"{stats.distance} mi, {stats.elevation_gain} ft"
    )

    payload = stats.to_payload()
    return GpxStatsResponse(
        filename=file.filename,
        name=stats.name,
        distance=stats.distance,
        elevation_gain=stats.elevation_gain,
        date=stats.date,
        point_count=stats.point_count,
        coordinates=payload["coordinates"],
        elevation_profile=payload["elevationProfile"],
    )
