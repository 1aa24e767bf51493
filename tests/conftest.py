"""
Shared fixtures: in-memory explorer and notifier doubles.
"""

import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

os.environ.setdefault("DISCORD_WEBHOOK_MAINNET", "https://discord.com/api/webhooks/1/main")
os.environ.setdefault("DISCORD_WEBHOOK_TESTNET", "https://discord.com/api/webhooks/2/test")

from kolibri_bot.api.models import Operation, OperationGroupEntry
from kolibri_bot.config import NetworkConfig


def make_op(ts: int, entrypoint: str = "deposit", source: str = "tz1someone", **kwargs) -> Operation:
    """Operation at ts seconds since epoch."""
    data = {
        "timestamp": datetime.fromtimestamp(ts, tz=timezone.utc),
        "entrypoint": entrypoint,
        "source": source,
        "internal": False,
        "hash": f"oo{ts}",
        "network": "mainnet",
    }
    data.update(kwargs)
    return Operation(**data)


class FakeExplorer:
    """Serves canned responses and records every call."""

    def __init__(self):
        self.operations: Dict[str, List[List[Operation]]] = {}
        self.storage: Dict[str, Any] = {}
        self.groups: Dict[str, List[OperationGroupEntry]] = {}
        self.bigmap_pages: List[List[Dict[str, Any]]] = []
        self.calls: List[tuple] = []
        self.fail_operations: Dict[str, Exception] = {}

    def queue_operations(self, address: str, *batches: List[Operation]) -> None:
        self.operations.setdefault(address, []).extend(batches)

    async def get_operations(self, network: str, address: str, since_ms: Optional[int] = None) -> List[Operation]:
        self.calls.append(("operations", address, since_ms))
        if address in self.fail_operations:
            raise self.fail_operations.pop(address)
        batches = self.operations.get(address) or []
        if not batches:
            return []
        return batches.pop(0)

    async def get_storage(self, network: str, address: str) -> Any:
        self.calls.append(("storage", address))
        return self.storage.get(address, [])

    async def get_operation_group(self, op_hash: str) -> List[OperationGroupEntry]:
        self.calls.append(("opg", op_hash))
        return self.groups.get(op_hash, [])

    async def get_bigmap_keys(self, network: str, ptr: int, offset: int = 0, size: int = 10) -> List[Dict[str, Any]]:
        self.calls.append(("bigmap", ptr, offset, size))
        index = offset // size
        if index < len(self.bigmap_pages):
            return self.bigmap_pages[index]
        return []

    def count(self, kind: str, address: str = None) -> int:
        return len([c for c in self.calls if c[0] == kind and (address is None or c[1] == address)])


class FakeNotifier:
    """Collects messages; the next fail_next deliveries report failure."""

    def __init__(self):
        self.sent: List[tuple] = []
        self.fail_next = 0

    async def notify(self, message: str, tier: str) -> bool:
        if self.fail_next:
            self.fail_next -= 1
            return False
        self.sent.append((tier, message))
        return True


def owner_storage(owner: str) -> List[Dict[str, Any]]:
    return [{
        "prim": "pair",
        "type": "namedtuple",
        "children": [
            {"name": "borrowedTokens", "value": "0"},
            {"name": "owner", "type": "address", "value": owner},
        ],
    }]


@pytest.fixture
def network_config() -> NetworkConfig:
    return NetworkConfig(
        network="mainnet",
        tier="main",
        rpc_url="https://rpc.example",
        oven_factory="KT1factory",
        oven_registry="KT1registry",
        minter="KT1minter",
        webhook_url="https://discord.com/api/webhooks/1/main",
    )


@pytest.fixture
def explorer() -> FakeExplorer:
    return FakeExplorer()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()
