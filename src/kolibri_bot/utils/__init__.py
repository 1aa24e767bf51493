"""Utility functions for Kolibri Bot."""

from .formatters import (
    format_address,
    format_operation,
    format_timestamp,
    format_xtz,
    oven_factory_operation_message,
    oven_operation_message
)

__all__ = [
    "format_address",
    "format_operation",
    "format_timestamp",
    "format_xtz",
    "oven_factory_operation_message",
    "oven_operation_message"
]
