"""Core components of the FuelEU compliance engine."""

from .config import FuelEUConfig
from .compliance import ComplianceBalance, ComplianceCalculator, ComplianceStatus, classify
from .banking import BankEntry, BankLedger, BankRecord, EntryType
from .pooling import (
    Pool,
    PoolCreationRequest,
    PoolMember,
    PoolMemberRequest,
    PoolValidationResult,
    PoolValidator,
)
from .exceptions import ComplianceError, InvalidOperationError, NotFoundError, PoolValidationError
from .engine import ComplianceEngine

__all__ = [
    "FuelEUConfig",
    "ComplianceBalance",
    "ComplianceCalculator",
    "ComplianceStatus",
    "classify",
    "BankEntry",
    "BankLedger",
    "BankRecord",
    "EntryType",
    "Pool",
    "PoolCreationRequest",
    "PoolMember",
    "PoolMemberRequest",
    "PoolValidationResult",
    "PoolValidator",
    "ComplianceError",
    "InvalidOperationError",
    "NotFoundError",
    "PoolValidationError",
    "ComplianceEngine",
]
