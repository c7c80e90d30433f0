"""Configuration management for the FuelEU compliance engine."""

from pathlib import Path
from typing import Any, Dict, Optional
import yaml
from pydantic import BaseModel, Field


class FuelEUConfig(BaseModel):
    """Regulatory constants and validation bounds."""

    energy_conversion_factor: float = Field(default=41000.0, gt=0, description="MJ per tonne of fuel")
    default_target_intensity: float = Field(default=89.3368, gt=0, description="gCO2e/MJ")
    target_intensities: Dict[int, float] = Field(default_factory=dict)
    validation: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def load_default(cls) -> "FuelEUConfig":
        """Load default configuration from package yaml file."""
        config_path = Path(__file__).parent.parent / "config.yaml"
        return cls.load_from_file(config_path)

    @classmethod
    def load_from_file(cls, config_path: Path) -> "FuelEUConfig":
        """Load configuration from YAML file."""
        with open(config_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}
        return cls(**config_data)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False, indent=2)

    def get_target_intensity(self, year: Optional[int] = None) -> float:
        """Get the GHG intensity target for a reporting year."""
        if year is not None and year in self.target_intensities:
            return self.target_intensities[year]
        return self.default_target_intensity

    def validate_voyage_data(self, fuel_consumption: float, actual_intensity: float,
                             year: Optional[int] = None) -> bool:
        """Validate raw voyage data against configured limits."""
        validation = self.validation

        min_fuel = validation.get("min_fuel_consumption", 0.0)
        max_fuel = validation.get("max_fuel_consumption", float("inf"))
        if not (min_fuel <= fuel_consumption <= max_fuel):
            return False

        min_intensity = validation.get("min_intensity", 0.0)
        max_intensity = validation.get("max_intensity", float("inf"))
        if not (min_intensity <= actual_intensity <= max_intensity):
            return False

        if year is not None:
            min_year = validation.get("min_year", 0)
            max_year = validation.get("max_year", 9999)
            if not (min_year <= year <= max_year):
                return False

        return True
