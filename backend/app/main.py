"""
Field Notes API

FastAPI application for trips with GPX routes and geotagged photos.
"""

from contextlib import asynccontextmanager
import logging
import sys

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.db.session import init_db
from app.api.v1.router import api_router
from app.api.v1.routes import objects
from app.features.storage import OBJECTS_ROUTE, warn_if_signing_key_missing
from app.schemas.common import ErrorResponse, FieldError


# === Logging Setup ===
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout),
    ]
)
logger = logging.getLogger(__name__)


# === Lifespan ===
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Starting Field Notes API...")
    init_db()
    settings.object_storage_dir.mkdir(parents=True, exist_ok=True)
    warn_if_signing_key_missing(settings.upload_signing_key)
    logger.info("Database initialized")

    yield

    logger.info("Shutting down...")


# === App Creation ===
app = FastAPI(
    title="Field Notes API",
    description="Outdoor trips with GPX tracks and geotagged photos",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# === Middleware ===
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# === Error Handlers ===
def _field_name(loc: tuple) -> str:
    # Drop the "body"/"query" prefix
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(p) for p in loc]
    return ".".join(parts)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        FieldError(field=_field_name(tuple(err.get("loc", ()))), message=err.get("msg", ""))
        for err in exc.errors()
    ]
    body = ErrorResponse(message="Invalid request data", errors=errors)
    return JSONResponse(status_code=400, content=body.model_dump())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# === Routes ===
app.include_router(api_router, prefix="/api")
app.include_router(objects.router, prefix=OBJECTS_ROUTE, tags=["Objects"])


# === Health Check ===
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}
