"""Shared fixtures: synthetic source images, fake downloader, clean metrics."""

from collections.abc import Callable
from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from imgcache.infrastructure.observability.metrics import reset_transform_metrics
from imgcache.infrastructure.storage.cache_store import CacheStore


def make_png(width: int, height: int, mode: str = "RGB") -> bytes:
    """Encode a small gradient image as PNG."""
    image = Image.new(mode, (width, height))
    if mode in ("RGB", "RGBA"):
        pixels = image.load()
        for x in range(0, width, max(1, width // 16)):
            for y in range(0, height, max(1, height // 16)):
                value = (x * 255 // max(1, width - 1), y * 255 // max(1, height - 1), 128)
                pixels[x, y] = value + (200,) if mode == "RGBA" else value
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


class FakeDownloader:
    """Serves canned bytes per source and counts calls."""

    def __init__(self, payloads: dict[str, bytes] | None = None, default: bytes | None = None):
        self.payloads = payloads or {}
        self.default = default
        self.calls: list[str] = []

    async def download(self, source: str) -> bytes:
        self.calls.append(source)
        if source in self.payloads:
            return self.payloads[source]
        if self.default is not None:
            return self.default
        from imgcache.domain.exceptions import DownloadError

        raise DownloadError()


@pytest.fixture(autouse=True)
def _fresh_metrics():
    reset_transform_metrics()
    yield
    reset_transform_metrics()


@pytest.fixture
def png_factory() -> Callable[..., bytes]:
    return make_png


@pytest.fixture
def landscape_png() -> bytes:
    return make_png(1600, 1200)


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "images"


@pytest.fixture
def cache_store(cache_dir: Path) -> CacheStore:
    store = CacheStore(cache_dir)
    store.ensure_root()
    return store


@pytest.fixture
def fake_downloader() -> FakeDownloader:
    """Downloader that knows no sources yet; fill ``payloads`` per test."""
    return FakeDownloader()
