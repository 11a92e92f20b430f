"""
Application Configuration

Uses Pydantic Settings for type-safe configuration.
"""

from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator, ConfigDict

# Project root: field-notes/
PROJECT_ROOT = Path(__file__).parent.parent.parent
# Local object storage: field-notes/data/objects/
DEFAULT_OBJECT_STORAGE_DIR = PROJECT_ROOT / "data" / "objects"


class Settings(BaseSettings):
    """Application settings with validation."""

    # === Core ===
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    # === Database ===
    database_url: str = Field(
        default="sqlite:///./field_notes.db",
        description="Database connection URL"
    )

    # === CORS ===
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:5000"],
        description="Allowed CORS origins"
    )

    # === Object storage ===
    public_base_url: Optional[str] = Field(
        default=None,
        description="Absolute base URL used when issuing upload URLs"
    )
    object_storage_dir: Path = Field(
        default=DEFAULT_OBJECT_STORAGE_DIR,
        description="Directory holding uploaded objects"
    )
    upload_url_ttl_seconds: int = Field(default=900)
    upload_signing_key: Optional[str] = Field(
        default=None,
        description="HMAC key for signed upload URLs (per-process key when unset)"
    )

    # === Upload limits ===
    max_photo_bytes: int = Field(default=25 * 1024 * 1024)
    max_gpx_bytes: int = Field(default=20 * 1024 * 1024)
    exif_read_bytes: int = Field(
        default=64 * 1024,
        description="Bytes of an image read for EXIF extraction"
    )

    @field_validator('database_url')
    @classmethod
    def fix_postgres_url(cls, v: str) -> str:
        """Fix Render/Railway postgres:// URL to postgresql://"""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from comma-separated string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(',')]
        return v

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
settings = Settings()
