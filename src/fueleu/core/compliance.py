"""Compliance balance calculation for FuelEU GHG intensity targets."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
import logging
import math

from .config import FuelEUConfig
from .exceptions import InvalidOperationError

logger = logging.getLogger(__name__)


class ComplianceStatus(str, Enum):
    """Sign of a compliance balance."""

    SURPLUS = "surplus"      # Actual intensity below target
    DEFICIT = "deficit"      # Actual intensity above target
    COMPLIANT = "compliant"  # Exactly on target


class ComplianceBalance(BaseModel):
    """Compliance balance of one ship for one reporting year."""

    model_config = ConfigDict(frozen=True)

    ship_id: str = ""
    year: int = 0
    target_intensity: float = Field(description="Target GHG intensity (gCO2e/MJ)")
    actual_intensity: float = Field(description="Attained GHG intensity (gCO2e/MJ)")
    energy_in_scope: float = Field(ge=0, description="Energy in scope (MJ)")
    compliance_balance: float = Field(description="Signed CB, positive is surplus")

    @property
    def status(self) -> ComplianceStatus:
        return classify(self.compliance_balance)

    def for_ship(self, ship_id: str, year: int) -> "ComplianceBalance":
        """Return a copy keyed to the given ship and year."""
        return self.model_copy(update={"ship_id": ship_id, "year": year})


def classify(compliance_balance: float) -> ComplianceStatus:
    """Classify a compliance balance by its sign."""
    if compliance_balance > 0:
        return ComplianceStatus.SURPLUS
    if compliance_balance < 0:
        return ComplianceStatus.DEFICIT
    return ComplianceStatus.COMPLIANT


class ComplianceCalculator:
    """
    Compliance balance calculator.

    EnergyInScope = fuelConsumption x 41,000 MJ/t
    CB = (Target - Actual) x EnergyInScope
    """

    def __init__(self, config: Optional[FuelEUConfig] = None):
        """Initialize calculator with configuration."""
        self.config = config or FuelEUConfig.load_default()

    def energy_in_scope(self, fuel_consumption: float) -> float:
        """Calculate energy in scope (MJ) for a fuel mass in tonnes."""
        if not math.isfinite(fuel_consumption) or fuel_consumption < 0:
            raise InvalidOperationError(
                f"Fuel consumption must be non-negative, got {fuel_consumption}"
            )
        return fuel_consumption * self.config.energy_conversion_factor

    def compute_balance(self, fuel_consumption: float, actual_intensity: float,
                        target_intensity: Optional[float] = None,
                        ship_id: str = "", year: int = 0) -> ComplianceBalance:
        """Compute the compliance balance for one ship-year.

        When ``target_intensity`` is omitted the configured regulatory
        target is used. Zero fuel consumption yields a zero balance
        regardless of intensities.
        """
        if target_intensity is None:
            target_intensity = self.config.default_target_intensity

        energy = self.energy_in_scope(fuel_consumption)
        balance = (target_intensity - actual_intensity) * energy

        return ComplianceBalance(
            ship_id=ship_id,
            year=year,
            target_intensity=target_intensity,
            actual_intensity=actual_intensity,
            energy_in_scope=energy,
            compliance_balance=balance,
        )
