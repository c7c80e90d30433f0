"""
Exceptions raised by the compliance accounting engine.

Every error is deterministic for a given input and is surfaced to the
caller verbatim; nothing here is retried.
"""

from typing import List, Optional


class ComplianceError(Exception):
    """Base exception for all compliance engine errors."""
    pass


class NotFoundError(ComplianceError):
    """Raised when no record exists for the requested key."""

    def __init__(self, ship_id: str, year: Optional[int] = None, what: str = "Compliance data"):
        self.ship_id = ship_id
        self.year = year

        msg = f"{what} not found for {ship_id}"
        if year is not None:
            msg += f"/{year}"
        super().__init__(msg)


class InvalidOperationError(ComplianceError):
    """Raised when a banking or pooling rule rejects a request."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class PoolValidationError(InvalidOperationError):
    """Raised when a pool fails validation; carries every violated rule."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Pool validation failed: " + "; ".join(self.errors))
