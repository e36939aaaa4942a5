"""
Configuration and settings for the profile backend.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).resolve().parent

# Settings the stores cannot work without, keyed by field name.
REQUIRED_SETTINGS = (
    "database_url",
    "profiles_collection",
    "storage_endpoint",
    "storage_bucket",
    "aws_access_key_id",
    "aws_secret_access_key",
)


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)
    log_level: str = Field(default="INFO")

    # Document store (any SQLAlchemy URL; Postgres expected)
    database_url: Optional[str] = Field(default=None)
    profiles_schema: Optional[str] = Field(default=None)
    profiles_collection: Optional[str] = Field(default="profiles")

    # S3-compatible object storage
    storage_endpoint: Optional[str] = Field(default=None)
    storage_region: Optional[str] = Field(default=None)
    storage_bucket: Optional[str] = Field(default=None)
    storage_public_base_url: Optional[str] = Field(default=None)
    storage_addressing_style: str = Field(
        default="virtual", pattern="^(virtual|path)$"
    )
    aws_access_key_id: Optional[str] = Field(default=None)
    aws_secret_access_key: Optional[str] = Field(default=None)

    # Uploads are rejected above this size (4 MiB).
    max_upload_bytes: int = Field(default=4 * 1024 * 1024, gt=0)

    # Page serving
    views_dir: Path = Field(default=PACKAGE_DIR / "views")
    static_dir: Path = Field(default=PACKAGE_DIR / "public")

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)
    strict_config: bool = Field(default=False)

    def missing_required(self) -> list[str]:
        """Return the environment variable names of unset required settings."""
        return [
            name.upper() for name in REQUIRED_SETTINGS if not getattr(self, name)
        ]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
