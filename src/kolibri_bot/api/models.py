"""
Pydantic models for explorer API response validation and type safety.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel


class Operation(BaseModel):
    """Model for a contract operation as listed by the explorer."""
    timestamp: datetime
    hash: Optional[str] = None
    network: Optional[str] = None
    entrypoint: Optional[str] = None
    source: Optional[str] = None
    destination: Optional[str] = None
    internal: bool = False
    status: Optional[str] = None
    kind: Optional[str] = None
    amount: Optional[int] = None
    counter: Optional[int] = None

    @property
    def timestamp_ms(self) -> int:
        """Timestamp in milliseconds since epoch."""
        return int(self.timestamp.timestamp() * 1000)


class OperationsResponse(BaseModel):
    """Response model for contract operations."""
    operations: List[Operation] = []
    last_id: Optional[str] = None


class OperationGroupEntry(BaseModel):
    """One content of an operation group (transaction, origination, ...)."""
    kind: str
    hash: Optional[str] = None
    network: Optional[str] = None
    source: Optional[str] = None
    destination: Optional[str] = None
    internal: bool = False


class OvenRecord(BaseModel):
    """An oven known to the oven registry."""
    ovenAddress: str
