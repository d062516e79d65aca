"""Tests for the bounded processing pool."""

import threading

import pytest

from imgcache.application.workers.processing_pool import ProcessingPool
from imgcache.domain.exceptions import ImageDecodeError, ProcessingError
from imgcache.infrastructure.observability.logging import (
    get_correlation_id,
    set_correlation_id,
)


@pytest.fixture
def pool():
    pool = ProcessingPool(max_workers=2)
    yield pool
    pool.shutdown()


class TestProcessingPool:
    async def test_runs_off_the_event_loop(self, pool: ProcessingPool):
        loop_thread = threading.get_ident()
        worker_thread = await pool.run(threading.get_ident)
        assert worker_thread != loop_thread

    async def test_returns_result_with_args(self, pool: ProcessingPool):
        assert await pool.run(pow, 2, 10) == 1024

    async def test_domain_errors_pass_through(self, pool: ProcessingPool):
        def fail():
            raise ImageDecodeError()

        with pytest.raises(ImageDecodeError):
            await pool.run(fail)

    async def test_unexpected_errors_are_wrapped(self, pool: ProcessingPool):
        def fail():
            raise KeyError("boom")

        with pytest.raises(ProcessingError) as exc_info:
            await pool.run(fail)
        assert exc_info.value.reason.startswith("Internal processing error:")
        assert isinstance(exc_info.value.__cause__, KeyError)

    async def test_correlation_id_reaches_worker(self, pool: ProcessingPool):
        set_correlation_id("req-42")
        assert await pool.run(get_correlation_id) == "req-42"

    async def test_shutdown_rejects_new_jobs(self):
        pool = ProcessingPool(max_workers=1)
        pool.shutdown()
        assert not pool.is_running
        with pytest.raises(ProcessingError):
            await pool.run(int)
