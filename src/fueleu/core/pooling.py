"""Pooling of compliance balances across ships."""

from datetime import datetime
from typing import Dict, List, Optional, Sequence
from pydantic import BaseModel, ConfigDict, Field
import logging
import math
import uuid

logger = logging.getLogger(__name__)


class PoolMemberRequest(BaseModel):
    """Proposed post-pool balance for one ship."""

    ship_id: str = Field(min_length=1)
    adjusted_cb: float = Field(allow_inf_nan=False)


class PoolCreationRequest(BaseModel):
    """Request to pool balances of several ships for one year."""

    name: Optional[str] = None
    year: int
    members: List[PoolMemberRequest] = Field(min_length=1)

    def ship_ids(self) -> List[str]:
        return [member.ship_id for member in self.members]


class PoolMember(BaseModel):
    """Snapshot of one ship's balance before and after pooling."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    pool_id: str
    ship_id: str
    cb_before: float
    cb_after: float
    created_at: datetime = Field(default_factory=datetime.now)


class Pool(BaseModel):
    """Immutable record of a completed pool."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: Optional[str] = None
    year: int
    created_at: datetime = Field(default_factory=datetime.now)
    members: List[PoolMember] = Field(default_factory=list)

    def total_cb_before(self) -> float:
        return math.fsum(m.cb_before for m in self.members)

    def total_cb_after(self) -> float:
        return math.fsum(m.cb_after for m in self.members)


class PoolValidationResult(BaseModel):
    """Outcome of validating a proposed pool."""

    valid: bool
    errors: List[str] = Field(default_factory=list)
    cb_before: Dict[str, float] = Field(default_factory=dict)
    cb_after: Dict[str, float] = Field(default_factory=dict)


class PoolValidator:
    """
    Validator for pool reallocations.

    Rules, all evaluated so that every violation is reported:
    1. Sum of adjusted CB must be >= 0
    2. A deficit ship cannot exit worse than it entered
    3. A surplus ship cannot exit with a negative balance
    Ships entering with exactly zero are exempt from rules 2 and 3.
    """

    def __init__(self):
        """Initialize validator."""
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def validate_pool(self, members: Sequence[PoolMemberRequest],
                      cb_before: Dict[str, float]) -> PoolValidationResult:
        """Validate members against their pre-pool balances.

        Performs no lookups; ``cb_before`` must already hold every member.
        """
        errors = []
        cb_after = {}

        non_finite = [m for m in members if not math.isfinite(m.adjusted_cb)]
        for member in non_finite:
            errors.append(f"Ship {member.ship_id}: adjusted CB must be finite ({member.adjusted_cb})")

        if not non_finite:
            sum_adjusted_cb = math.fsum(member.adjusted_cb for member in members)
            if sum_adjusted_cb < 0:
                errors.append(f"Sum of adjusted CB ({sum_adjusted_cb}) must be >= 0")

        for member in members:
            before = cb_before.get(member.ship_id, 0.0)
            after = member.adjusted_cb
            cb_after[member.ship_id] = after

            if before < 0 and after < before:
                errors.append(
                    f"Ship {member.ship_id}: deficit ship cannot exit worse ({before} -> {after})"
                )

            if before > 0 and after < 0:
                errors.append(
                    f"Ship {member.ship_id}: surplus ship cannot go negative ({before} -> {after})"
                )

        if errors:
            self.logger.debug(f"Pool validation found {len(errors)} violation(s)")

        return PoolValidationResult(
            valid=not errors,
            errors=errors,
            cb_before=dict(cb_before),
            cb_after=cb_after,
        )
