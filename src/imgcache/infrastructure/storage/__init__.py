"""Filesystem storage for cached blobs."""

from imgcache.infrastructure.storage.cache_store import (
    CacheStore,
    compute_key,
    transformed_filename,
)

__all__ = ["CacheStore", "compute_key", "transformed_filename"]
