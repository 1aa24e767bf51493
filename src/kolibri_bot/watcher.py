"""
Contract watching state machine.

A ContractWatcher polls one contract. Its first successful poll with
operations only establishes the watermark (and, for ovens, the owner);
every later poll notifies about operations newer than the watermark.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .api.client import AsyncExplorer
from .api.models import Operation
from .config import NetworkConfig
from .errors import DataShapeError
from .notifier import Notifier
from .owner import resolve_owner
from .state import ContractKind, WatcherState
from .utils.formatters import format_operation

logger = logging.getLogger(__name__)

# The explorer's "from" filter is inclusive, skip past the boundary operation
WATERMARK_OFFSET_MS = 1000


@dataclass
class CycleResult:
    """What one poll cycle did."""
    operations_found: int = 0
    notifications_sent: int = 0
    notifications_failed: int = 0
    bootstrapped: bool = False
    originations: List[str] = field(default_factory=list)


def select_new_operations(operations: List[Operation]) -> List[Operation]:
    """
    Drop internal operations and order the rest oldest to newest.

    Args:
        operations: Operations as returned by the explorer

    Returns:
        Non-internal operations sorted by timestamp
    """
    external = [op for op in operations if not op.internal]
    return sorted(external, key=lambda op: op.timestamp)


def latest_operation(operations: List[Operation]) -> Operation:
    return max(operations, key=lambda op: op.timestamp)


def should_notify(operation: Operation, kind: ContractKind, oven_owner: Optional[str]) -> bool:
    """
    Business rules deciding whether an operation is worth a notification.

    Args:
        operation: Candidate operation
        kind: Kind of the watched contract
        oven_owner: Owner of the watched oven (None for the factory)

    Returns:
        True if a notification should be sent
    """
    # makeOven only means something on the factory
    if operation.entrypoint == "makeOven" and kind is ContractKind.OVEN:
        return False
    # default calls from anyone but the owner are baker payouts and similar transfers
    if operation.entrypoint == "default" and operation.source != oven_owner:
        return False
    return True


class ContractWatcher:
    """
    Polls one contract and notifies about its new operations.

    The watcher does not schedule itself; WatcherRegistry calls run_cycle()
    and consumes the returned CycleResult.
    """

    def __init__(
        self,
        network_config: NetworkConfig,
        contract_address: str,
        kind: ContractKind,
        explorer: AsyncExplorer,
        notifier: Notifier
    ):
        self.network_config = network_config
        self.explorer = explorer
        self.notifier = notifier
        self.state = WatcherState(
            contract_address=contract_address,
            network=network_config.network,
            kind=kind
        )
        self.ready = asyncio.Event()
        # makeOven operation hashes whose created contract is not known yet
        self.pending_originations: List[str] = []

    @property
    def address(self) -> str:
        return self.state.contract_address

    @property
    def network(self) -> str:
        return self.state.network

    @property
    def kind(self) -> ContractKind:
        return self.state.kind

    def __repr__(self) -> str:
        return f"ContractWatcher({self.kind.name}, {self.network}, {self.address})"

    async def fetch_operations(self) -> List[Operation]:
        """Fetch non-internal operations newer than the watermark, oldest first."""
        since_ms = None
        if self.state.latest_operation_timestamp is not None:
            since_ms = self.state.latest_operation_timestamp + WATERMARK_OFFSET_MS

        logger.info(f"Fetching contract data for {self.address} on {self.network} (from={since_ms})")
        operations = await self.explorer.get_operations(self.network, self.address, since_ms)
        return select_new_operations(operations)

    async def run_cycle(self) -> CycleResult:
        """
        Run one poll cycle.

        The watcher's state is replaced only after the whole cycle succeeded,
        so an exception leaves the watermark and owner untouched.

        Returns:
            CycleResult describing the cycle

        Raises:
            Exception: Any upstream or data-shape failure of this cycle
        """
        operations = await self.fetch_operations()
        result = CycleResult(operations_found=len(operations))

        await self.retry_pending_originations(result)

        if not operations:
            logger.debug(f"No new operations for {self.address} on {self.network}")
            return result

        latest = latest_operation(operations)

        if self.state.is_bootstrapping:
            owner = None
            if self.kind is ContractKind.OVEN:
                owner = await resolve_owner(self.explorer, self.network, self.address, operations)
                logger.info(f"Resolved owner of oven {self.address}: {owner}")
            self.state = self.state.advance(latest.timestamp_ms, owner)
            result.bootstrapped = True
            logger.info(f"Watermark for {self.address} established at {latest.timestamp}")
            return result

        logger.info(f"New operations found for {self.address} on {self.network}: {len(operations)}")
        await self.notify_operations(operations, result)
        self.state = self.state.advance(latest.timestamp_ms)
        return result

    async def notify_operations(self, operations: List[Operation], result: CycleResult) -> None:
        """
        Notify about each operation that passes the business rules, oldest first.

        A failed delivery or origination lookup is logged and counted; the
        remaining operations are still processed.

        Args:
            operations: Non-internal operations newer than the watermark
            result: CycleResult updated in place
        """
        for operation in operations:
            if not should_notify(operation, self.kind, self.state.oven_owner):
                logger.debug(f"Skipping {operation.entrypoint} from {operation.source} on {self.address}")
                continue

            message = format_operation(self.kind, operation)
            if await self.notifier.notify(message, self.network_config.tier):
                result.notifications_sent += 1
            else:
                result.notifications_failed += 1
                logger.warning(f"Failed to send notification for operation {operation.hash}")

            if self.kind is ContractKind.OVEN_FACTORY and operation.entrypoint == "makeOven":
                logger.info(f"makeOven called in {operation.hash}, looking up the new oven")
                created = await self.lookup_origination(operation.hash)
                if created is None:
                    if operation.hash not in self.pending_originations:
                        self.pending_originations.append(operation.hash)
                    continue
                result.originations.append(created)

    async def retry_pending_originations(self, result: CycleResult) -> None:
        """Look up again the originations that failed in earlier cycles."""
        for op_hash in list(self.pending_originations):
            logger.info(f"Retrying lookup of contract created in {op_hash}")
            created = await self.lookup_origination(op_hash)
            if created is None:
                continue
            self.pending_originations.remove(op_hash)
            result.originations.append(created)

    async def lookup_origination(self, op_hash: str) -> Optional[str]:
        """
        Address created in an operation group, or None if the lookup failed.

        Failures are logged; the caller keeps the hash for a later retry.
        """
        try:
            created = await self.find_created_contract(op_hash)
        except Exception as e:
            logger.error(f"Could not find contract created by {op_hash}, will retry next cycle: {e}", exc_info=True)
            return None
        logger.info(f"Found newly created contract {created} on {self.network}")
        return created

    async def find_created_contract(self, op_hash: str) -> str:
        """
        Address of the contract originated in an operation group.

        Raises:
            DataShapeError: If the group contains no origination
        """
        entries = await self.explorer.get_operation_group(op_hash)
        for entry in entries:
            if entry.kind == "origination" and entry.destination:
                return entry.destination
        raise DataShapeError(f"No origination in operation group {op_hash}")
