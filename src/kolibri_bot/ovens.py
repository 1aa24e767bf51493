"""
Oven enumeration.
Collects every oven registered in a network's oven registry.
"""

import logging
from typing import Any, Dict, List, Optional

from .api.client import AsyncExplorer
from .api.models import OvenRecord
from .config import NetworkConfig
from .errors import DataShapeError
from .owner import find_storage_field

logger = logging.getLogger(__name__)

OVEN_MAP_FIELD = "ovenMap"
PAGE_SIZE = 10


def _key_address(entry: Dict[str, Any]) -> Optional[str]:
    """Extract the oven address from one big_map keys entry."""
    data = entry.get("data") or entry
    key = data.get("key")
    if isinstance(key, dict):
        return key.get("value")
    return key


class OvenRegistryClient:
    """Lists the ovens of one network."""

    def __init__(self, explorer: AsyncExplorer, network_config: NetworkConfig, page_size: int = PAGE_SIZE):
        self.explorer = explorer
        self.network_config = network_config
        self.page_size = page_size

    async def get_all_ovens(self) -> List[OvenRecord]:
        """
        Get all ovens known to the oven registry.

        Returns:
            List of OvenRecord, in registry order

        Raises:
            DataShapeError: If the registry storage has no oven map
        """
        network = self.network_config.network
        registry = self.network_config.oven_registry

        logger.info(f"Fetching all ovens from registry {registry} on {network}...")

        storage = await self.explorer.get_storage(network, registry)
        ptr = find_storage_field(storage, OVEN_MAP_FIELD)
        if ptr is None:
            raise DataShapeError(f"No {OVEN_MAP_FIELD} in storage of oven registry {registry}")

        ovens: List[OvenRecord] = []
        offset = 0
        while True:
            page = await self.explorer.get_bigmap_keys(network, int(ptr), offset, self.page_size)
            for entry in page:
                address = _key_address(entry)
                if not address:
                    logger.warning(f"Skipping malformed oven map entry: {entry}")
                    continue
                ovens.append(OvenRecord(ovenAddress=address))

            if len(page) < self.page_size:
                break
            offset += self.page_size

        logger.info(f"Found {len(ovens)} ovens on {network}")
        return ovens
