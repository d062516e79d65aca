"""Bounded worker pool for the CPU-heavy pipeline stages.

Hey future me - decode, resize and encode are pure CPU work (Pillow and the
codec plugins release the GIL for most of it). Running them on the event loop
would stall every other request, so the orchestrator ships them here as ONE
job per transform. The pool is bounded: with max_workers=4 at most four
images are being crunched at once, everything else waits in the executor
queue.
"""

import asyncio
import contextvars
import functools
import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar

from imgcache.domain.exceptions import ImageCacheError, ProcessingError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProcessingPool:
    """Thin async facade over a ThreadPoolExecutor."""

    def __init__(self, max_workers: int) -> None:
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="imgcache-worker"
        )
        self._closed = False

    async def run(self, fn: Callable[..., T], *args: Any) -> T:
        """Run ``fn(*args)`` on the pool and await its result.

        Domain errors (ImageDecodeError, ResizeError, ...) come back as-is.
        Anything else that escapes the job is a bug or a library surprise
        and is wrapped into ProcessingError so the API still answers with a
        proper error body.
        """
        if self._closed:
            raise ProcessingError("worker pool is shut down")

        loop = asyncio.get_running_loop()
        # Carry the correlation ID into the worker thread
        ctx = contextvars.copy_context()
        call = functools.partial(ctx.run, fn, *args)
        try:
            return await loop.run_in_executor(self._executor, call)
        except ImageCacheError:
            raise
        except Exception as e:
            logger.exception("Worker job %s crashed", getattr(fn, "__name__", fn))
            raise ProcessingError(str(e)) from e

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting jobs. Called once from the app lifespan."""
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=wait)
        logger.info("Processing pool stopped (%d workers)", self.max_workers)

    @property
    def is_running(self) -> bool:
        return not self._closed
