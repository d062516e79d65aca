"""Transform Service - the pipeline orchestrator.

Future me note:
This is where a validated TransformRequest becomes a file in the cache
directory. Stages run strictly in order, each one timed:

    Downloading -> Decoding -> Resizing -> Encoding -> Saving

- If <hash>_<side>.<fmt> already exists we stop right there and answer
  ALREADY_TRANSFORMED. No download, no decode, nothing.
- The raw source is cached under <hash>. A second size/format for the same
  source skips the download (its "Downloading" timing is 0.0).
- Decode/resize/encode run as ONE job on the ProcessingPool. The event loop
  only does the awaiting.
- The HEIC backend writes its destination itself (PathSink). For everything
  else we persist the encoded buffer afterwards ("Saving").

Every failure is terminal for the request. Nothing retries, nothing cleans up
a half-written file (see DESIGN.md).
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, cast

from imgcache.application.services.single_flight import InFlightRegistry
from imgcache.domain.dtos import (
    STEP_DECODING,
    STEP_DOWNLOADING,
    STEP_ENCODING,
    STEP_RESIZING,
    STEP_SAVING,
    PipelineMetrics,
    TransformRequest,
    TransformResult,
    TransformStatus,
)
from imgcache.domain.exceptions import (
    BadRequestError,
    ImageCacheError,
    ProcessingError,
    ResizeError,
)
from imgcache.domain.value_objects.dimensions import calculate_resized_dimensions
from imgcache.infrastructure.codecs.resampler import resample
from imgcache.infrastructure.codecs.sinks import BufferSink
from imgcache.infrastructure.observability.logger_template import log_slow_operation
from imgcache.infrastructure.observability.metrics import (
    TransformMetrics,
    get_transform_metrics,
)

if TYPE_CHECKING:
    from imgcache.application.workers.processing_pool import ProcessingPool
    from imgcache.domain.ports.codec import OutputSink
    from imgcache.domain.ports.downloader import ImageDownloader
    from imgcache.domain.value_objects.image_format import ImageFormat
    from imgcache.infrastructure.codecs.dispatcher import CodecDispatcher
    from imgcache.infrastructure.storage.cache_store import CacheStore

logger = logging.getLogger(__name__)


def _elapsed_ms(start: float) -> float:
    return (time.perf_counter() - start) * 1000


class TransformService:
    """Orchestrates one transform request end to end."""

    def __init__(
        self,
        cache_store: CacheStore,
        dispatcher: CodecDispatcher,
        downloader: ImageDownloader,
        pool: ProcessingPool,
        metrics: TransformMetrics | None = None,
        single_flight: bool = False,
        slow_threshold_ms: int = 2000,
    ) -> None:
        self.cache_store = cache_store
        self.dispatcher = dispatcher
        self.downloader = downloader
        self.pool = pool
        self.metrics = metrics or get_transform_metrics()
        self.slow_threshold_ms = slow_threshold_ms
        # Off by default: identical concurrent requests each run the full
        # pipeline and the last writer wins
        self._in_flight: InFlightRegistry[TransformResult] | None = (
            InFlightRegistry() if single_flight else None
        )

    async def transform(self, request: TransformRequest) -> TransformResult:
        """Produce (or find) the transformed blob for ``request``.

        Raises:
            ImageCacheError: any subclass, see domain/exceptions
        """
        key = self.cache_store.compute_key(request.source)
        start = time.perf_counter()

        try:
            if self._in_flight is not None:
                flight_key = (key, request.tallest_side, request.format)
                result = await self._in_flight.run(
                    flight_key, lambda: self._run_pipeline(request, key)
                )
            else:
                result = await self._run_pipeline(request, key)
        except ImageCacheError as e:
            self._record_failure(request, key, e)
            raise
        except Exception as e:
            # Anything unexpected on the event-loop side becomes ProcessingError,
            # like worker-side failures in ProcessingPool.run
            error = ProcessingError(str(e))
            self._record_failure(request, key, error, exc_info=True)
            raise error from e

        log_slow_operation(
            logger,
            "transform",
            int(_elapsed_ms(start)),
            threshold_ms=self.slow_threshold_ms,
            source=request.source,
            hash=key,
            format=request.format.value,
        )
        return result

    def _record_failure(
        self,
        request: TransformRequest,
        key: str,
        error: ImageCacheError,
        exc_info: bool = False,
    ) -> None:
        self.metrics.inc_errors_total(type(error).__name__)
        logger.error(
            "Transform failed: %s",
            error.reason,
            exc_info=exc_info,
            extra={
                "source": request.source,
                "hash": key,
                "tallest_side": request.tallest_side,
                "format": request.format.value,
                "error_type": type(error).__name__,
            },
        )

    async def _run_pipeline(self, request: TransformRequest, key: str) -> TransformResult:
        cache = self.cache_store
        fmt = request.format
        side = request.tallest_side
        filename = cache.transformed_filename(key, side, fmt)

        await asyncio.to_thread(cache.ensure_root)

        if await asyncio.to_thread(cache.lookup_transformed, key, side, fmt):
            self.metrics.inc_cache_hit("transformed")
            self.metrics.inc_transforms_total("already_transformed")
            logger.debug("Already transformed: %s", filename)
            return TransformResult(
                status=TransformStatus.ALREADY_TRANSFORMED,
                hash=key,
                filename=filename,
            )
        self.metrics.inc_cache_miss("transformed")

        download_ms = 0.0
        data = await cache.alookup_source(key)
        if data is None:
            self.metrics.inc_cache_miss("source")
            started = time.perf_counter()
            data = await self.downloader.download(request.source)
            download_ms = _elapsed_ms(started)
            if not data:
                # Nothing to transform - and an empty blob in the cache would
                # read back as FileCorruptError forever
                logger.warning("Source %s returned an empty body", request.source)
                raise BadRequestError()
            await cache.astore_source(key, data)
        else:
            self.metrics.inc_cache_hit("source")

        sink = self.dispatcher.sink_for(fmt, cache.transformed_path(key, side, fmt))
        pipeline = await self.pool.run(self._process, data, side, fmt, sink)

        if not sink.persisted:
            started = time.perf_counter()
            await cache.astore_transformed(key, side, fmt, cast(BufferSink, sink).getvalue())
            pipeline.record(STEP_SAVING, _elapsed_ms(started))

        pipeline.prepend(STEP_DOWNLOADING, download_ms)

        self.metrics.observe_pipeline(pipeline)
        self.metrics.inc_transforms_total("transformed")
        logger.info(
            "Transformed %s -> %s (%.1fms)\n%s",
            request.source,
            filename,
            pipeline.total_ms,
            pipeline.to_table(),
            extra={"hash": key, "format": fmt.value, "tallest_side": side},
        )

        return TransformResult(
            status=TransformStatus.TRANSFORMED,
            hash=key,
            filename=filename,
            metrics=pipeline,
        )

    # Hey future me - this runs on a WORKER THREAD, not the event loop. Keep it
    # free of awaits and shared mutable state; it owns the decoded image.
    def _process(
        self, data: bytes, tallest_side: int, fmt: ImageFormat, sink: OutputSink
    ) -> PipelineMetrics:
        pipeline = PipelineMetrics()

        started = time.perf_counter()
        image = self.dispatcher.decode(data)
        pipeline.record(STEP_DECODING, _elapsed_ms(started))

        started = time.perf_counter()
        dimensions = calculate_resized_dimensions(image.width, image.height, tallest_side)
        if dimensions.is_empty:
            raise ResizeError()
        image = resample(image, dimensions)
        pipeline.record(STEP_RESIZING, _elapsed_ms(started))

        started = time.perf_counter()
        self.dispatcher.encode(image, fmt, sink)
        pipeline.record(STEP_ENCODING, _elapsed_ms(started))

        return pipeline
