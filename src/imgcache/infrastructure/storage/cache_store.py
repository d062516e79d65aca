"""Content-addressed blob cache on the local filesystem.

Hey future me - this class OWNS the cache directory. Nobody else builds paths
into it or writes files there (the one exception is the HEIC encoder, which
writes to the path we hand it via transformed_path()).

Layout (flat, one directory):

    <root>/<key>                         raw source bytes
    <root>/<key>_<tallest_side>.<ext>    transformed output

where <key> is the SHA-256 hex digest of the source string.

Rules:
- A transformed blob's EXISTENCE is proof of a past successful transform.
  We never look inside it.
- A zero-length source blob is corruption, not a miss.
- Writes are plain create-then-write (no temp file + rename). A crash mid-write
  can leave a partial file - accepted, see DESIGN.md.
- Nothing here ever deletes. Duplicate writes are
  prevented upstream by the existence check, not by this class.
"""

import asyncio
import hashlib
import logging
from pathlib import Path

from imgcache.domain.exceptions import (
    DirectoryCreationError,
    FileCorruptError,
    FileCreationError,
    FileReadError,
    FileWriteError,
)
from imgcache.domain.value_objects.image_format import ImageFormat

logger = logging.getLogger(__name__)


def compute_key(source: str) -> str:
    """Deterministic cache key for a source identifier (64 hex chars)."""
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


def transformed_filename(key: str, tallest_side: int, fmt: ImageFormat) -> str:
    return f"{key}_{tallest_side}.{fmt.extension}"


class CacheStore:
    """Filesystem-backed content-addressed cache."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    # =========================================================================
    # KEYS & PATHS
    # =========================================================================

    compute_key = staticmethod(compute_key)
    transformed_filename = staticmethod(transformed_filename)

    def source_path(self, key: str) -> Path:
        return self.root / key

    def transformed_path(self, key: str, tallest_side: int, fmt: ImageFormat) -> Path:
        return self.root / transformed_filename(key, tallest_side, fmt)

    def ensure_root(self) -> None:
        """Create the cache directory if it doesn't exist yet."""
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Failed to create cache directory %s: %s", self.root, e)
            raise DirectoryCreationError() from e

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    def lookup_transformed(self, key: str, tallest_side: int, fmt: ImageFormat) -> bool:
        """Existence check only - content is never verified."""
        return self.transformed_path(key, tallest_side, fmt).exists()

    def lookup_source(self, key: str) -> bytes | None:
        """Read a cached source blob.

        Returns:
            The blob bytes, or None if no blob is stored under ``key``

        Raises:
            FileCorruptError: blob exists but is empty
            FileReadError: any other read failure
        """
        path = self.source_path(key)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.error("Failed to read cached source %s: %s", key, e)
            raise FileReadError() from e

        if not data:
            logger.error("Cached source %s is zero-length", key)
            raise FileCorruptError()
        return data

    # =========================================================================
    # STORES
    # =========================================================================

    def store_source(self, key: str, data: bytes) -> Path:
        return self._create_and_write(self.source_path(key), data)

    def store_transformed(
        self, key: str, tallest_side: int, fmt: ImageFormat, data: bytes
    ) -> Path:
        return self._create_and_write(self.transformed_path(key, tallest_side, fmt), data)

    def _create_and_write(self, path: Path, data: bytes) -> Path:
        # Create first, then write - the two failure modes map to different errors
        try:
            handle = path.open("wb")
        except OSError as e:
            logger.error("Failed to create %s: %s", path, e)
            raise FileCreationError() from e

        with handle:
            try:
                handle.write(data)
            except OSError as e:
                logger.error("Failed to write %d bytes to %s: %s", len(data), path, e)
                raise FileWriteError() from e

        logger.debug("Stored %s (%d bytes)", path.name, len(data))
        return path

    # =========================================================================
    # ASYNC WRAPPERS (blocking file I/O off the event loop)
    # =========================================================================

    async def alookup_source(self, key: str) -> bytes | None:
        return await asyncio.to_thread(self.lookup_source, key)

    async def astore_source(self, key: str, data: bytes) -> Path:
        return await asyncio.to_thread(self.store_source, key, data)

    async def astore_transformed(
        self, key: str, tallest_side: int, fmt: ImageFormat, data: bytes
    ) -> Path:
        return await asyncio.to_thread(
            self.store_transformed, key, tallest_side, fmt, data
        )
