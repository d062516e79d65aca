"""Application lifecycle management for startup and shutdown tasks.

Startup builds the whole service graph once and parks it on app.state:

    cache_store       CacheStore(settings.storage.image_dir)
    processing_pool   ProcessingPool(settings.processing.max_workers)
    codec_dispatcher  CodecDispatcher()  (fails fast if a format has no encoder)
    downloader        HttpImageDownloader unless one was injected
    transform_service TransformService wiring all of the above

Shutdown stops the worker pool and closes the shared HTTP client.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from imgcache.application.services.transform import TransformService
from imgcache.application.workers.processing_pool import ProcessingPool
from imgcache.config import Settings, get_settings
from imgcache.infrastructure.codecs.dispatcher import CodecDispatcher
from imgcache.infrastructure.integrations.http_downloader import HttpImageDownloader
from imgcache.infrastructure.integrations.http_pool import HttpClientPool
from imgcache.infrastructure.observability import configure_logging
from imgcache.infrastructure.storage.cache_store import CacheStore

logger = logging.getLogger(__name__)


# Listen future me, everything before `yield` runs at STARTUP, everything after
# at SHUTDOWN. The try/finally makes sure the pool and the HTTP client are shut
# down even if something between startup and shutdown blew up. A failing
# ensure_root() or CodecDispatcher() here means the app never starts - much
# better than failing on the first request.
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    app.state.settings = settings

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.observability.log_json_format,
        app_name=settings.app_name,
    )
    logger.info("Starting application: %s", settings.app_name)

    cache_store = CacheStore(settings.storage.image_dir)
    cache_store.ensure_root()
    logger.info("Cache directory: %s", cache_store.root.resolve())

    pool = ProcessingPool(settings.processing.max_workers)
    try:
        dispatcher = CodecDispatcher()
        downloader = getattr(app.state, "downloader", None) or HttpImageDownloader(
            settings.http
        )

        app.state.cache_store = cache_store
        app.state.processing_pool = pool
        app.state.codec_dispatcher = dispatcher
        app.state.downloader = downloader
        app.state.transform_service = TransformService(
            cache_store=cache_store,
            dispatcher=dispatcher,
            downloader=downloader,
            pool=pool,
            single_flight=settings.processing.single_flight,
            slow_threshold_ms=settings.observability.slow_transform_ms,
        )
        logger.info(
            "Ready (workers=%d, default_format=%s, single_flight=%s)",
            settings.processing.max_workers,
            settings.processing.default_format.value,
            settings.processing.single_flight,
        )

        yield
    finally:
        logger.info("Shutting down application")
        pool.shutdown(wait=True)
        await HttpClientPool.close()
