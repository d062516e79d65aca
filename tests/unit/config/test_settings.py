"""Tests for environment-driven settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from imgcache.config import ProcessingSettings, Settings
from imgcache.domain.value_objects.image_format import ImageFormat


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.chdir(Path(__file__).parent)
        settings = Settings()
        assert settings.storage.image_dir == Path("images")
        assert settings.processing.default_format is ImageFormat.AVIF
        assert settings.processing.max_request_bytes == 1024
        assert settings.processing.single_flight is False
        assert settings.processing.max_workers >= 1

    def test_nested_env_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("IMGCACHE_STORAGE__IMAGE_DIR", str(tmp_path))
        monkeypatch.setenv("IMGCACHE_PROCESSING__DEFAULT_FORMAT", "QOI")
        monkeypatch.setenv("IMGCACHE_PROCESSING__SINGLE_FLIGHT", "true")
        monkeypatch.setenv("IMGCACHE_HTTP__TIMEOUT", "5")

        settings = Settings()

        assert settings.storage.image_dir == tmp_path
        assert settings.processing.default_format is ImageFormat.QOI
        assert settings.processing.single_flight is True
        assert settings.http.timeout == 5.0

    def test_unknown_default_format_rejected(self):
        with pytest.raises(ValidationError):
            ProcessingSettings(default_format="bmp")
