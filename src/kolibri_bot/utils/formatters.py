"""
Message formatting utilities.
Turns explorer operations into human-readable notification text.
"""

from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, Optional, Union

from ..api.models import Operation
from ..config import Config
from ..state import ContractKind

MUTEZ_PER_TEZ = Decimal(1_000_000)

# Human phrasing for known oven entrypoints
OVEN_ACTIONS = {
    "default": "deposited",
    "deposit": "deposited",
    "withdraw": "withdrew",
    "borrow": "borrowed kUSD from",
    "repay": "repaid kUSD to",
    "liquidate": "liquidated",
    "setDelegate": "changed the baker of",
    "updateState": "updated the state of",
}


def format_address(address: Optional[str], short: bool = True) -> str:
    """
    Format Tezos address for display.

    Args:
        address: tz1/KT1 address
        short: Whether to shorten the address

    Returns:
        Formatted address
    """
    if not address:
        return ""

    if short and len(address) > 12:
        return f"{address[:7]}...{address[-4:]}"

    return address


def format_xtz(mutez: Union[str, int, None], decimals: int = 2) -> str:
    """
    Format a mutez amount as XTZ.

    Args:
        mutez: Amount in mutez
        decimals: Number of decimal places

    Returns:
        Formatted amount, e.g. "12.50 XTZ"
    """
    try:
        value = Decimal(int(mutez)) / MUTEZ_PER_TEZ
        return f"{value:,.{decimals}f} XTZ"
    except (ValueError, TypeError):
        return "0.00 XTZ"


def format_timestamp(timestamp: datetime, format_str: str = "%Y-%m-%d %H:%M:%S UTC") -> str:
    """Format an operation timestamp for display."""
    return timestamp.strftime(format_str)


def oven_factory_operation_message(operation: Operation) -> str:
    """Message for an operation on the oven factory."""
    link = Config.get_operation_url(operation.network, operation.hash)
    if operation.entrypoint == "makeOven":
        return f"🆕 New oven created by {format_address(operation.source)}! {link}"
    return (
        f"🏭 Oven factory `{operation.entrypoint}` called by "
        f"{format_address(operation.source)} at {format_timestamp(operation.timestamp)}. {link}"
    )


def oven_operation_message(operation: Operation) -> str:
    """Message for an operation on a single oven."""
    link = Config.get_operation_url(operation.network, operation.hash)
    oven = format_address(operation.destination)
    action = OVEN_ACTIONS.get(operation.entrypoint)

    if action is None:
        return f"🔧 `{operation.entrypoint}` called on oven {oven} by {format_address(operation.source)}. {link}"

    if operation.entrypoint in ("default", "deposit") and operation.amount:
        return f"💰 {format_address(operation.source)} {action} {format_xtz(operation.amount)} into oven {oven}. {link}"

    return f"🔔 {format_address(operation.source)} {action} oven {oven}. {link}"


OPERATION_HANDLER_MAP: Dict[ContractKind, Callable[[Operation], str]] = {
    ContractKind.OVEN_FACTORY: oven_factory_operation_message,
    ContractKind.OVEN: oven_operation_message,
}


def format_operation(kind: ContractKind, operation: Operation) -> str:
    """Format an operation with the formatter for its contract kind."""
    return OPERATION_HANDLER_MAP[kind](operation)
