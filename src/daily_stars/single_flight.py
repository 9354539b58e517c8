"""Request coalescing for shared derived values.

Concurrent callers asking for the same key share one in-flight task. The
finished result stays cached until it is forgotten; failures are evicted so
the next caller starts a fresh attempt.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Generic, Hashable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """Table from request key to an in-progress or completed task.

    Usage
    -----
    flight = SingleFlight[str]()
    context = await flight.do("2026-10-19", lambda: fetch_context())
    """

    def __init__(self, is_failure: Callable[[T], bool] | None = None) -> None:
        self._tasks: dict[Hashable, asyncio.Task[T]] = {}
        self._is_failure = is_failure

    async def do(self, key: Hashable, factory: Callable[[], Awaitable[T]]) -> T:
        """Await the shared result for *key*, starting *factory* only if needed.

        Args:
            key: Identity of the requested value.
            factory: Zero-argument coroutine function producing the value.

        Returns:
            The value produced by the single factory call for this key.

        Raises:
            Exception: Whatever the factory raised; the entry is evicted first.
        """
        task = self._tasks.get(key)
        if task is None:
            logger.debug("Starting single-flight call for %r", key)
            task = asyncio.ensure_future(factory())
            self._tasks[key] = task
        else:
            logger.debug("Joining single-flight call for %r", key)

        try:
            # shield: one caller being cancelled must not cancel the shared task.
            result = await asyncio.shield(task)
        except BaseException:
            self._evict(key, task)
            raise

        if self._is_failure is not None and self._is_failure(result):
            self._evict(key, task)
        return result

    def _evict(self, key: Hashable, task: asyncio.Task[T]) -> None:
        if self._tasks.get(key) is task and task.done():
            del self._tasks[key]

    def peek(self, key: Hashable) -> T | None:
        """Return the completed, successful result for *key* without waiting."""
        task = self._tasks.get(key)
        if task is None or not task.done() or task.cancelled() or task.exception() is not None:
            return None
        return task.result()

    def is_pending(self, key: Hashable) -> bool:
        task = self._tasks.get(key)
        return task is not None and not task.done()

    def forget(self, key: Hashable) -> None:
        self._tasks.pop(key, None)

    def clear(self) -> None:
        self._tasks.clear()

    def __contains__(self, key: Hashable) -> bool:
        return key in self._tasks

    def __len__(self) -> int:
        return len(self._tasks)
