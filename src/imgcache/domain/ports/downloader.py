"""Downloader Port (Interface).

The pipeline only needs "give me the bytes behind this source". The HTTP
implementation lives in infrastructure/integrations/http_downloader.py; tests
swap in a fake that counts calls.
"""

from typing import Protocol


class ImageDownloader(Protocol):
    async def download(self, source: str) -> bytes:
        """Fetch the raw bytes for ``source`` with a single GET.

        Raises:
            DownloadError: transport failure or non-success HTTP status
        """
        ...
