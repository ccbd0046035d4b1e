"""
RequestDeduplicator - shares one in-flight fetch between concurrent callers.

Off by default in SonubClient: without it two concurrent cached reads of the
same key each go to the network. Enable with ``dedupe_requests=True``.
"""

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

from loguru import logger

T = TypeVar("T")


class RequestDeduplicator:
    """
    Usage:
        dedup = RequestDeduplicator()
        data = await dedup.dedupe("categories", lambda: client.get(url))
    """

    def __init__(self, debug: bool = False):
        self._in_flight: dict[str, asyncio.Task[Any]] = {}
        self._debug = debug
        self.total = 0
        self.deduplicated = 0

    async def dedupe(self, key: str, request_fn: Callable[[], Awaitable[T]]) -> T:
        """Await the in-flight request for ``key`` or start a new one."""
        task = self._in_flight.get(key)
        if task is not None:
            self.deduplicated += 1
            self._log(f"DEDUPE: waiting for in-flight request: {key}")
        else:
            self.total += 1
            self._log(f"NEW: starting request: {key}")
            task = asyncio.ensure_future(self._execute_and_cleanup(key, request_fn))
            self._in_flight[key] = task
        return await asyncio.shield(task)

    async def _execute_and_cleanup(
        self, key: str, request_fn: Callable[[], Awaitable[T]]
    ) -> T:
        try:
            return await request_fn()
        finally:
            self._in_flight.pop(key, None)
            self._log(f"DONE: {key}")

    def get_in_flight_count(self) -> int:
        return len(self._in_flight)

    def _log(self, message: str) -> None:
        if self._debug:
            logger.debug(f"[Deduplicator] {message}")
