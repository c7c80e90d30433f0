"""Comparison of route GHG intensities against a baseline route."""

from datetime import datetime
from typing import List
from pydantic import BaseModel, Field
import logging
import uuid

logger = logging.getLogger(__name__)


class Route(BaseModel):
    """A voyage route with its fuel and intensity figures."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    route_id: str
    vessel_type: str
    fuel_type: str
    year: int
    ghg_intensity: float = Field(ge=0, description="gCO2e/MJ")
    fuel_consumption: float = Field(ge=0, description="Tonnes")
    distance: float = Field(default=0, ge=0, description="Nautical miles")
    total_emissions: float = Field(default=0, ge=0, description="Tonnes CO2e")
    is_baseline: bool = False
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class RouteComparison(BaseModel):
    """One route compared with the baseline."""

    route_id: str
    vessel_type: str
    fuel_type: str
    year: int
    baseline: float
    comparison: float
    percent_diff: float
    compliant: bool


class RouteComparator:
    """Compares route intensities with a baseline route."""

    @staticmethod
    def percent_diff(baseline: float, comparison: float) -> float:
        """percentDiff = ((comparison / baseline) - 1) * 100, zero for a zero baseline."""
        if baseline == 0:
            return 0.0
        return ((comparison / baseline) - 1) * 100

    @staticmethod
    def is_compliant(baseline: float, comparison: float) -> bool:
        """A route complies when its intensity does not exceed the baseline."""
        return comparison <= baseline

    def compare_routes(self, baseline: Route, routes: List[Route]) -> List[RouteComparison]:
        """Compare every route except the baseline itself."""
        comparisons = [
            RouteComparison(
                route_id=route.route_id,
                vessel_type=route.vessel_type,
                fuel_type=route.fuel_type,
                year=route.year,
                baseline=baseline.ghg_intensity,
                comparison=route.ghg_intensity,
                percent_diff=self.percent_diff(baseline.ghg_intensity, route.ghg_intensity),
                compliant=self.is_compliant(baseline.ghg_intensity, route.ghg_intensity),
            )
            for route in routes
            if route.id != baseline.id
        ]

        logger.info(f"Compared {len(comparisons)} routes against baseline {baseline.route_id}")
        return comparisons
