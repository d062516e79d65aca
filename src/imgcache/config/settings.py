"""Application settings.

Hey future me - every knob lives here, grouped the same way the code is
grouped (storage, processing, http, observability). Values come from
defaults, then a .env file, then IMGCACHE_* environment variables. Nested
groups use a double underscore:

    IMGCACHE_STORAGE__IMAGE_DIR=/data/images
    IMGCACHE_PROCESSING__MAX_WORKERS=8

Codec presets (quality/speed per format) are NOT settings - they are
constants in infrastructure/codecs, not something a request or deploy tweaks.
"""

import os
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from imgcache.domain.value_objects.image_format import ImageFormat


class StorageSettings(BaseModel):
    """Cache directory layout."""

    image_dir: Path = Field(
        default=Path("images"),
        description="Directory holding source blobs and transformed blobs",
    )


class ProcessingSettings(BaseModel):
    """Pipeline behaviour."""

    default_format: ImageFormat = Field(
        default=ImageFormat.AVIF,
        description="Output format used when a request omits 'format'",
    )
    max_workers: int = Field(
        default_factory=lambda: min(8, os.cpu_count() or 1),
        ge=1,
        description="Size of the CPU worker pool (decode/resize/encode)",
    )
    max_request_bytes: int = Field(
        default=1024,
        ge=1,
        description="Upper bound for a transform descriptor body",
    )
    single_flight: bool = Field(
        default=False,
        description="Share one computation between concurrent identical requests",
    )

    @field_validator("default_format", mode="before")
    @classmethod
    def _lowercase_format(cls, value: object) -> object:
        if isinstance(value, str):
            return value.lower()
        return value


class HttpSettings(BaseModel):
    """Shared HTTP client used for source downloads."""

    timeout: float = Field(default=30.0, gt=0)
    max_connections: int = Field(default=50, ge=1)
    max_keepalive: int = Field(default=20, ge=0)


class ObservabilitySettings(BaseModel):
    log_json_format: bool = False
    slow_transform_ms: int = Field(
        default=2000,
        ge=0,
        description="Transforms slower than this are logged as operation.slow",
    )


class Settings(BaseSettings):
    """Root settings object."""

    model_config = SettingsConfigDict(
        env_prefix="IMGCACHE_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    app_name: str = "imgcache"
    log_level: str = "INFO"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    processing: ProcessingSettings = Field(default_factory=ProcessingSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)


@lru_cache
def get_settings() -> Settings:
    """Get the process-wide settings (loaded once)."""
    return Settings()
