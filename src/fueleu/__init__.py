"""FuelEU Compliance Engine - compliance balance, banking and pooling for ship GHG intensity."""

# Core engine and components
from .core.engine import ComplianceEngine
from .core.config import FuelEUConfig
from .core.compliance import ComplianceBalance, ComplianceCalculator, ComplianceStatus
from .core.banking import BankEntry, BankLedger, BankRecord, EntryType
from .core.pooling import Pool, PoolCreationRequest, PoolMemberRequest, PoolValidator, PoolValidationResult
from .core.exceptions import ComplianceError, NotFoundError, InvalidOperationError, PoolValidationError

# Route comparison
from .routes.comparison import Route, RouteComparator, RouteComparison

__version__ = "0.1.0"
__author__ = "FuelEU Compliance Engine Contributors"

__all__ = [
    # Core components
    "ComplianceEngine",
    "FuelEUConfig",
    "ComplianceBalance",
    "ComplianceCalculator",
    "ComplianceStatus",
    "BankEntry",
    "BankLedger",
    "BankRecord",
    "EntryType",
    "Pool",
    "PoolCreationRequest",
    "PoolMemberRequest",
    "PoolValidator",
    "PoolValidationResult",

    # Errors
    "ComplianceError",
    "NotFoundError",
    "InvalidOperationError",
    "PoolValidationError",

    # Routes
    "Route",
    "RouteComparator",
    "RouteComparison",
]
