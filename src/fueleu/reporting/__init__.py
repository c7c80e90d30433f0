"""Reporting modules for the FuelEU compliance engine."""

from .fleet import FleetReport, FLEET_COLUMNS

__all__ = [
    "FleetReport",
    "FLEET_COLUMNS",
]
