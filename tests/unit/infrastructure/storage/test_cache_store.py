"""Tests for the content-addressed CacheStore."""

import hashlib
from pathlib import Path

import pytest

from imgcache.domain.exceptions import (
    DirectoryCreationError,
    FileCorruptError,
    FileCreationError,
    FileReadError,
    FileWriteError,
)
from imgcache.domain.value_objects.image_format import ImageFormat
from imgcache.infrastructure.storage.cache_store import (
    CacheStore,
    compute_key,
    transformed_filename,
)


class TestKeys:
    def test_key_is_sha256_hex(self):
        source = "https://example.com/cat.png"
        assert compute_key(source) == hashlib.sha256(source.encode()).hexdigest()
        assert len(compute_key(source)) == 64

    def test_key_is_deterministic(self):
        assert compute_key("a") == compute_key("a")
        assert CacheStore.compute_key("a") == compute_key("a")

    def test_distinct_sources_get_distinct_keys(self):
        sources = [f"https://example.com/{i}.png" for i in range(500)]
        assert len({compute_key(s) for s in sources}) == len(sources)

    def test_transformed_filename(self):
        assert transformed_filename("abc", 800, ImageFormat.QOI) == "abc_800.qoi"
        assert transformed_filename("abc", 0, ImageFormat.AVIF) == "abc_0.avif"


class TestEnsureRoot:
    def test_creates_nested_directory(self, tmp_path: Path):
        store = CacheStore(tmp_path / "a" / "b")
        store.ensure_root()
        store.ensure_root()
        assert (tmp_path / "a" / "b").is_dir()

    def test_failure_maps_to_directory_creation_error(self, tmp_path: Path):
        blocker = tmp_path / "file"
        blocker.write_bytes(b"x")
        with pytest.raises(DirectoryCreationError):
            CacheStore(blocker / "sub").ensure_root()


class TestLookups:
    def test_missing_source_is_none(self, cache_store: CacheStore):
        assert cache_store.lookup_source(compute_key("nope")) is None

    def test_stored_source_reads_back(self, cache_store: CacheStore):
        key = compute_key("src")
        path = cache_store.store_source(key, b"payload")
        assert path == cache_store.root / key
        assert cache_store.lookup_source(key) == b"payload"

    def test_zero_length_source_is_corrupt_not_miss(self, cache_store: CacheStore):
        key = compute_key("empty")
        (cache_store.root / key).write_bytes(b"")
        with pytest.raises(FileCorruptError):
            cache_store.lookup_source(key)

    def test_unreadable_source_is_read_error(self, cache_store: CacheStore):
        key = compute_key("dir")
        (cache_store.root / key).mkdir()
        with pytest.raises(FileReadError):
            cache_store.lookup_source(key)

    def test_transformed_lookup_is_existence_only(self, cache_store: CacheStore):
        key = compute_key("src")
        assert not cache_store.lookup_transformed(key, 100, ImageFormat.QOI)
        (cache_store.root / f"{key}_100.qoi").write_bytes(b"")
        assert cache_store.lookup_transformed(key, 100, ImageFormat.QOI)
        assert not cache_store.lookup_transformed(key, 100, ImageFormat.AVIF)
        assert not cache_store.lookup_transformed(key, 101, ImageFormat.QOI)


class TestStores:
    def test_store_transformed_uses_naming_scheme(self, cache_store: CacheStore):
        key = compute_key("src")
        path = cache_store.store_transformed(key, 64, ImageFormat.JXL, b"jxl")
        assert path.name == f"{key}_64.jxl"
        assert path.read_bytes() == b"jxl"

    def test_create_failure(self, tmp_path: Path):
        store = CacheStore(tmp_path / "missing-root")
        with pytest.raises(FileCreationError):
            store.store_source("k", b"data")

    def test_write_failure(self, cache_store: CacheStore, mocker):
        handle = mocker.MagicMock()
        handle.__enter__.return_value = handle
        handle.write.side_effect = OSError(28, "No space left on device")
        mocker.patch.object(Path, "open", return_value=handle)

        with pytest.raises(FileWriteError):
            cache_store.store_source("k", b"data")


class TestAsyncWrappers:
    async def test_round_trip_off_loop(self, cache_store: CacheStore):
        key = compute_key("async")
        assert await cache_store.alookup_source(key) is None
        await cache_store.astore_source(key, b"abc")
        assert await cache_store.alookup_source(key) == b"abc"
        path = await cache_store.astore_transformed(key, 5, ImageFormat.QOI, b"q")
        assert path.exists()
