"""
Oven owner resolution.
"""

import logging
from typing import Any, List, Optional

from .api.client import AsyncExplorer
from .api.models import Operation
from .errors import OwnerResolutionError

logger = logging.getLogger(__name__)


def find_storage_field(storage: Any, name: str) -> Optional[Any]:
    """
    Read a named top-level field from an explorer storage tree.

    The explorer returns a list whose first element holds the storage
    record; its children are the record fields.

    Args:
        storage: Storage payload
        name: Field name

    Returns:
        The field's value, or None if the field is absent
    """
    if not isinstance(storage, list) or not storage:
        return None

    root = storage[0]
    if not isinstance(root, dict):
        return None

    for child in root.get("children") or []:
        if isinstance(child, dict) and child.get("name") == name:
            return child.get("value")
    return None


def owner_from_operations(operations: List[Operation]) -> Optional[str]:
    """Source of the makeOven call among operations, if one is present."""
    for operation in operations:
        if operation.entrypoint == "makeOven":
            return operation.source
    return None


async def resolve_owner(
    explorer: AsyncExplorer,
    network: str,
    address: str,
    operations: List[Operation]
) -> str:
    """
    Determine the owner of an oven.

    Uses the makeOven operation when the fetched batch contains it, and the
    oven's storage otherwise.

    Args:
        explorer: Explorer facade
        network: Explorer network name
        address: Oven address
        operations: Non-internal operations fetched this cycle

    Returns:
        Owner address

    Raises:
        OwnerResolutionError: If storage has no owner field
    """
    owner = owner_from_operations(operations)
    if owner:
        logger.debug(f"Owner of {address} taken from makeOven operation: {owner}")
        return owner

    logger.info(f"No makeOven operation for {address}, reading owner from storage")
    storage = await explorer.get_storage(network, address)
    owner = find_storage_field(storage, "owner")
    if not owner:
        raise OwnerResolutionError(f"Owner not found in storage of {address} on {network}")

    return owner
