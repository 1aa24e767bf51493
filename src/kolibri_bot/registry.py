"""
Registry of running contract watchers.

Owns one asyncio task per watched contract. A task runs a cycle, sleeps for
the poll interval and repeats; cycles of one watcher never overlap.
"""

import asyncio
import logging
from typing import Callable, Dict, List, Optional

from .config import NetworkConfig
from .errors import DuplicateWatcherError
from .state import ContractKind
from .watcher import ContractWatcher, CycleResult

logger = logging.getLogger(__name__)

WatcherFactory = Callable[[NetworkConfig, str, ContractKind], ContractWatcher]


def watcher_key(network: str, address: str) -> str:
    return f"{network}:{address}"


class WatcherRegistry:
    """At most one watcher per contract, each rescheduled until stop()."""

    def __init__(self, watcher_factory: WatcherFactory, interval_seconds: float):
        self.watcher_factory = watcher_factory
        self.interval_seconds = interval_seconds
        self._watchers: Dict[str, ContractWatcher] = {}
        self._tasks: Dict[str, asyncio.Task] = {}
        self._stopped: Optional[asyncio.Event] = None

    def __contains__(self, key: str) -> bool:
        return key in self._watchers

    def __len__(self) -> int:
        return len(self._watchers)

    def get(self, network: str, address: str) -> Optional[ContractWatcher]:
        return self._watchers.get(watcher_key(network, address))

    def watchers(self) -> List[ContractWatcher]:
        return list(self._watchers.values())

    async def spawn(self, network_config: NetworkConfig, address: str, kind: ContractKind) -> Optional[CycleResult]:
        """
        Build and start a watcher unless the contract is already watched.

        Returns:
            Result of the watcher's first cycle, or None if it was skipped or failed
        """
        if watcher_key(network_config.network, address) in self:
            logger.warning(f"Already watching {address} on {network_config.network}, not spawning again")
            return None
        return await self.start(self.watcher_factory(network_config, address, kind))

    async def start(self, watcher: ContractWatcher) -> Optional[CycleResult]:
        """
        Register a watcher, run its first cycle and schedule the following ones.

        Args:
            watcher: A watcher that is not registered yet

        Returns:
            Result of the first cycle, or None if it failed

        Raises:
            DuplicateWatcherError: If the contract is already watched
        """
        key = watcher_key(watcher.network, watcher.address)
        if key in self._watchers:
            raise DuplicateWatcherError(f"Already watching {watcher.address} on {watcher.network}")

        self._watchers[key] = watcher
        logger.info(f"Starting {watcher!r} ({len(self._watchers)} watchers)")

        result = await self.run_cycle(watcher)
        self._tasks[key] = asyncio.create_task(self._reschedule(watcher), name=f"watch-{key}")
        return result

    async def run_cycle(self, watcher: ContractWatcher) -> Optional[CycleResult]:
        """
        Run one cycle, then start watchers for any contracts it saw created.

        A failing cycle is logged and leaves the watcher's state untouched.

        Returns:
            CycleResult, or None if the cycle raised
        """
        try:
            result = await watcher.run_cycle()
        except Exception as e:
            logger.error(f"Cycle failed for {watcher!r}: {e}", exc_info=True)
            return None

        watcher.ready.set()

        if result.notifications_sent or result.notifications_failed:
            logger.info(
                f"Notification summary for {watcher.address}: "
                f"{result.notifications_sent} sent, {result.notifications_failed} failed"
            )

        for address in result.originations:
            logger.info(f"makeOven seen on {watcher.address}, adding {address} to the pool")
            await self.spawn(watcher.network_config, address, ContractKind.OVEN)

        return result

    async def _reschedule(self, watcher: ContractWatcher) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.run_cycle(watcher)

    async def wait_stopped(self) -> None:
        """Block until stop() is called."""
        if self._stopped is None:
            self._stopped = asyncio.Event()
        await self._stopped.wait()

    async def stop(self) -> None:
        """Cancel every watcher task."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

        if self._stopped is None:
            self._stopped = asyncio.Event()
        self._stopped.set()
        logger.info(f"Stopped {len(tasks)} watcher tasks")
