"""
Admission control for outbound HTTP requests.
"""

import asyncio
import logging
import time
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Limits how many requests run at once and how closely their starts are spaced.

    Blocking callables are run on the event loop's default executor so a slow
    request only suspends the coroutine that awaits it.
    """

    def __init__(self, name: str, max_concurrent: int, min_time_ms: int):
        self.name = name
        self.max_concurrent = max_concurrent
        self.min_time = min_time_ms / 1000.0
        self._semaphore: Optional[asyncio.Semaphore] = None
        self._start_lock: Optional[asyncio.Lock] = None
        self._last_start = 0.0

    def _primitives(self):
        # Created lazily so the limiter can be built before the event loop runs
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self.max_concurrent)
            self._start_lock = asyncio.Lock()
        return self._semaphore, self._start_lock

    async def _wait_for_slot(self, lock: asyncio.Lock) -> None:
        async with lock:
            wait = self._last_start + self.min_time - time.monotonic()
            if wait > 0:
                logger.debug(f"{self.name}: spacing request by {wait:.3f}s")
                await asyncio.sleep(wait)
            self._last_start = time.monotonic()

    async def run(self, func: Callable[..., Any], *args: Any) -> Any:
        """
        Run a blocking callable once admitted.

        Args:
            func: Blocking function to call
            *args: Positional arguments for func

        Returns:
            Whatever func returns; exceptions propagate to the caller
        """
        semaphore, lock = self._primitives()
        async with semaphore:
            await self._wait_for_slot(lock)
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(None, func, *args)
