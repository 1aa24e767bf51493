"""Explorer API package for Kolibri Bot."""

from .client import AsyncExplorer, ExplorerClient
from .models import (
    Operation,
    OperationGroupEntry,
    OperationsResponse,
    OvenRecord
)
from .rate_limit import RateLimiter

__all__ = [
    "AsyncExplorer",
    "ExplorerClient",
    "Operation",
    "OperationGroupEntry",
    "OperationsResponse",
    "OvenRecord",
    "RateLimiter"
]
