"""Duplicate suppression for concurrent upstream lookups."""

import asyncio
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


class SingleFlight:
    """Share one in-flight call between concurrent callers using the same key.

    The shared task is forgotten as soon as it finishes, so a later call for
    the same key starts a fresh lookup. Callers are shielded from each other:
    cancelling one waiter leaves the shared task running for the rest.
    """

    def __init__(self):
        self._calls: dict[str, asyncio.Task] = {}

    async def do(self, key: str, fn: Callable[[], Awaitable[Any]]) -> Any:
        task = self._calls.get(key)
        if task is None:
            task = asyncio.ensure_future(fn())
            self._calls[key] = task
            task.add_done_callback(lambda t: self._forget(key, t))
        else:
            logger.debug(f"Joining in-flight lookup for {key}")
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._calls.get(key) is task:
            del self._calls[key]
        # Mark the exception as retrieved when every waiter was cancelled
        if not task.cancelled():
            task.exception()

    def __len__(self) -> int:
        return len(self._calls)
