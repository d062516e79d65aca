"""Integrations with the outside world (network transport)."""

from imgcache.infrastructure.integrations.http_downloader import HttpImageDownloader
from imgcache.infrastructure.integrations.http_pool import HttpClientPool

__all__ = ["HttpClientPool", "HttpImageDownloader"]
