"""Printer discovery and printing models."""

from .printer import (
    ConnectionTestRequest,
    DiscoveredDevice,
    DiscoveryReport,
    OrderRef,
    PrintOutcome,
    PrinterTarget,
    PrintRequest,
)

__all__ = [
    "ConnectionTestRequest",
    "DiscoveredDevice",
    "DiscoveryReport",
    "OrderRef",
    "PrintOutcome",
    "PrinterTarget",
    "PrintRequest",
]
