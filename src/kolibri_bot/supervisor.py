"""
Supervisor bootstrapping the watcher tree of each network.

For every network: start the oven factory watcher, wait for its first
successful cycle, then start one watcher per existing oven with a short
pause between starts.
"""

import asyncio
import logging
from typing import List, Optional

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from .api.client import AsyncExplorer, ExplorerClient
from .api.models import OvenRecord
from .api.rate_limit import RateLimiter
from .config import Config, NetworkConfig
from .errors import ExplorerAPIError
from .notifier import Notifier
from .ovens import OvenRegistryClient
from .registry import WatcherRegistry
from .state import ContractKind
from .watcher import ContractWatcher

logger = logging.getLogger(__name__)


class Supervisor:
    """Runs the factory and oven watchers of every configured network."""

    def __init__(
        self,
        network_configs: List[NetworkConfig],
        registry: WatcherRegistry,
        explorer: AsyncExplorer,
        start_delay_ms: int = 250
    ):
        self.network_configs = network_configs
        self.registry = registry
        self.explorer = explorer
        self.start_delay_ms = start_delay_ms

    @retry(
        stop=stop_after_attempt(5),
        wait=wait_exponential(multiplier=1, min=4, max=60),
        retry=retry_if_exception_type((requests.RequestException, ExplorerAPIError)),
        reraise=True
    )
    async def list_ovens(self, network_config: NetworkConfig) -> List[OvenRecord]:
        return await OvenRegistryClient(self.explorer, network_config).get_all_ovens()

    async def watch_network(self, network_config: NetworkConfig) -> None:
        """
        Bootstrap the watchers of one network.

        Args:
            network_config: Network to watch
        """
        network = network_config.network
        if not network_config.is_configured:
            logger.error(f"Contract addresses not configured for {network}, skipping network")
            return

        logger.info(f"Starting oven factory watcher for {network}")
        await self.registry.spawn(network_config, network_config.oven_factory, ContractKind.OVEN_FACTORY)

        factory = self.registry.get(network, network_config.oven_factory)
        await factory.ready.wait()

        try:
            ovens = await self.list_ovens(network_config)
        except Exception as e:
            logger.error(f"Could not enumerate ovens on {network}: {e}", exc_info=True)
            return

        for oven in ovens:
            # Spread out first polls so the explorer is not hit all at once
            await asyncio.sleep(self.start_delay_ms / 1000.0)
            await self.registry.spawn(network_config, oven.ovenAddress, ContractKind.OVEN)

        logger.info(f"Watching {len(ovens)} ovens on {network}")

    async def run(self) -> None:
        """Bootstrap every network concurrently."""
        await asyncio.gather(*(self.watch_network(nc) for nc in self.network_configs))

    async def run_forever(self) -> None:
        """Bootstrap, then keep watching until the registry is stopped."""
        try:
            await self.run()
            await self.registry.wait_stopped()
        finally:
            await self.registry.stop()


def build_supervisor(config: Optional[Config] = None) -> Supervisor:
    """
    Wire clients, limiters, notifier and registry from configuration.

    Raises:
        ConfigurationError: If required settings are missing
    """
    config = config or Config()
    config.validate()

    network_configs = config.network_configs()
    for nc in network_configs:
        if not nc.is_configured:
            prefix = f"{nc.tier.upper()}NET"
            logger.warning(
                f"Contract addresses for {nc.network} are not set; its webhook will stay silent until "
                f"{prefix}_OVEN_FACTORY and {prefix}_OVEN_REGISTRY are configured"
            )

    explorer = AsyncExplorer(
        ExplorerClient(config),
        RateLimiter("explorer", config.EXPLORER_MAX_CONCURRENT, config.EXPLORER_MIN_TIME_MS)
    )
    notifier = Notifier(
        {nc.tier: nc.webhook_url for nc in network_configs},
        RateLimiter("webhook", config.WEBHOOK_MAX_CONCURRENT, config.WEBHOOK_MIN_TIME_MS)
    )

    def make_watcher(network_config: NetworkConfig, address: str, kind: ContractKind) -> ContractWatcher:
        return ContractWatcher(network_config, address, kind, explorer, notifier)

    registry = WatcherRegistry(make_watcher, config.WATCH_INTERVAL_SECONDS)
    return Supervisor(network_configs, registry, explorer, config.WATCHER_START_DELAY_MS)
