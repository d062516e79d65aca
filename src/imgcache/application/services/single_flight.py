"""Share one in-flight computation between identical concurrent requests."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InFlightRegistry(Generic[T]):
    """Deduplicate concurrent work by key.

    The first caller for a key starts the work as a task; callers arriving
    while it runs await the same task and get the same result (or the same
    exception). The entry is dropped as soon as the task finishes, so a later
    request starts fresh and will usually hit the cache instead.

    Hey future me - the shared task is awaited through asyncio.shield(). If
    one client disconnects and its handler gets cancelled, the others keep
    waiting on a task that is still running.
    """

    def __init__(self) -> None:
        self._tasks: dict[Hashable, asyncio.Task[T]] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._tasks

    async def run(self, key: Hashable, work: Callable[[], Awaitable[T]]) -> T:
        task = self._tasks.get(key)
        if task is None:
            task = asyncio.ensure_future(work())
            self._tasks[key] = task
            task.add_done_callback(lambda _t, k=key: self._tasks.pop(k, None))
        else:
            logger.debug("Joining in-flight transform for %s", key)
        return await asyncio.shield(task)
