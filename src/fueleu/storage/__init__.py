"""Storage adapters for the FuelEU compliance engine."""

from .memory import (
    InMemoryComplianceStore,
    InMemoryLedgerStore,
    InMemoryPoolStore,
    InMemoryRouteStore,
)

__all__ = [
    "InMemoryComplianceStore",
    "InMemoryLedgerStore",
    "InMemoryPoolStore",
    "InMemoryRouteStore",
]
