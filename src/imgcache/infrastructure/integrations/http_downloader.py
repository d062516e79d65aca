"""HTTP implementation of the ImageDownloader port."""

import logging

import httpx

from imgcache.config import HttpSettings
from imgcache.domain.exceptions import DownloadError
from imgcache.infrastructure.integrations.http_pool import HttpClientPool

logger = logging.getLogger(__name__)


class HttpImageDownloader:
    """Fetch source images with a single GET through the shared client pool.

    No retries and no timeout on top of the client's own - a failed download
    fails the request.
    """

    def __init__(self, settings: HttpSettings | None = None) -> None:
        self.settings = settings or HttpSettings()

    async def _client(self) -> httpx.AsyncClient:
        return await HttpClientPool.get_client(
            timeout=self.settings.timeout,
            max_keepalive=self.settings.max_keepalive,
            max_connections=self.settings.max_connections,
        )

    async def download(self, source: str) -> bytes:
        """Download ``source`` and return the response body.

        Hey future me - a 404 page is NOT an image. We raise on non-2xx so the
        error body never lands in the source cache (where it would then fail
        to decode on every later request for the same source).

        Raises:
            DownloadError: invalid URL, transport failure or HTTP error status
        """
        client = await self._client()
        try:
            response = await client.get(source)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Error downloading image from %s: %s", source, e)
            raise DownloadError() from e

        return response.content
