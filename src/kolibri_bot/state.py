"""
In-memory watcher state.
Each ContractWatcher owns exactly one WatcherState; nothing is persisted.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class ContractKind(Enum):
    """Kind of contract a watcher follows."""
    OVEN_FACTORY = 1
    OVEN = 2


class WatcherPhase(Enum):
    BOOTSTRAPPING = "bootstrapping"
    STEADY = "steady"


@dataclass(frozen=True)
class WatcherState:
    """
    Watermark state of one watched contract.

    Instances are immutable; a cycle builds the next state with advance()
    and the watcher swaps it in only when the whole cycle succeeded.
    """
    contract_address: str
    network: str
    kind: ContractKind
    latest_operation_timestamp: Optional[int] = None  # milliseconds since epoch
    oven_owner: Optional[str] = None
    phase: WatcherPhase = WatcherPhase.BOOTSTRAPPING

    @property
    def is_bootstrapping(self) -> bool:
        return self.phase is WatcherPhase.BOOTSTRAPPING

    def advance(self, latest_timestamp: int, oven_owner: Optional[str] = None) -> "WatcherState":
        """
        Return the state after a cycle that saw operations up to latest_timestamp.

        The watermark never moves backwards and an owner, once set, is kept.

        Args:
            latest_timestamp: Timestamp (ms) of the newest operation fetched
            oven_owner: Owner resolved during bootstrap, if any

        Returns:
            New WatcherState in the steady phase
        """
        watermark = latest_timestamp
        if self.latest_operation_timestamp is not None:
            watermark = max(watermark, self.latest_operation_timestamp)

        owner = self.oven_owner
        if owner is None:
            owner = oven_owner
        elif oven_owner is not None and oven_owner != owner:
            logger.warning(
                f"Ignoring owner {oven_owner} for {self.contract_address}, already resolved as {owner}"
            )

        return replace(
            self,
            latest_operation_timestamp=watermark,
            oven_owner=owner,
            phase=WatcherPhase.STEADY
        )
