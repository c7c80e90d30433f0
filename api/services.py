"""Services for the FuelEU Compliance Engine API."""

from typing import Any, Dict, List, Optional
import logging

from fueleu.core.config import FuelEUConfig
from fueleu.core.engine import ComplianceEngine
from fueleu.core.pooling import PoolCreationRequest, PoolMemberRequest
from fueleu.core.ports import RouteStore
from fueleu.routes.comparison import Route, RouteComparator
from fueleu.storage.memory import InMemoryRouteStore
from .models import (
    BankEntryResponse, BankRecordResponse, BankRequest, BaselineSummary,
    ComparisonResponse, ComplianceBalanceResponse, ComplianceRecordRequest,
    PoolCreatedResponse, PoolRequest, PoolResponse, RouteComparisonResponse,
    RouteData, RouteResponse
)

logger = logging.getLogger(__name__)


class ComplianceService:
    """Service translating API models to engine calls."""

    def __init__(self, engine: Optional[ComplianceEngine] = None,
                 route_store: Optional[RouteStore] = None,
                 config: Optional[FuelEUConfig] = None):
        self.config = config or FuelEUConfig.load_default()
        self.engine = engine or ComplianceEngine.in_memory(self.config)
        self.route_store = route_store or InMemoryRouteStore()
        self.route_comparator = RouteComparator()

    async def initialize(self):
        """Initialize the service."""
        logger.info(
            f"Compliance service initialized "
            f"(target {self.config.default_target_intensity} gCO2e/MJ, "
            f"{self.config.energy_conversion_factor:,.0f} MJ/t)"
        )

    # Compliance

    async def record_balance(self, request: ComplianceRecordRequest) -> ComplianceBalanceResponse:
        record = self.engine.record_balance(
            ship_id=request.ship_id,
            year=request.year,
            fuel_consumption=request.fuel_consumption,
            actual_intensity=request.actual_intensity,
            target_intensity=request.target_intensity,
        )
        return ComplianceBalanceResponse.model_validate(record.model_dump(mode="json"))

    async def get_balance(self, ship_id: str, year: int) -> ComplianceBalanceResponse:
        record = self.engine.get_balance(ship_id, year)
        return ComplianceBalanceResponse.model_validate(record.model_dump(mode="json"))

    async def adjusted_balances(self, year: int) -> List[ComplianceBalanceResponse]:
        return [
            ComplianceBalanceResponse.model_validate(r.model_dump(mode="json"))
            for r in self.engine.adjusted_balances(year)
        ]

    # Banking

    async def get_bank_record(self, ship_id: str, year: int) -> BankRecordResponse:
        record = self.engine.get_bank_record(ship_id, year)
        return BankRecordResponse.model_validate(record.model_dump(mode="json"))

    async def bank(self, request: BankRequest) -> BankEntryResponse:
        entry = self.engine.bank(request.ship_id, request.year, request.cb_amount, request.description)
        return BankEntryResponse.model_validate(entry.model_dump(mode="json"))

    async def apply(self, request: BankRequest) -> BankEntryResponse:
        entry = self.engine.apply(request.ship_id, request.year, request.cb_amount, request.description)
        return BankEntryResponse.model_validate(entry.model_dump(mode="json"))

    # Pooling

    async def create_pool(self, request: PoolRequest) -> PoolCreatedResponse:
        creation = self._convert_pool_request(request)
        pool = self.engine.create_pool(creation)

        data: Dict[str, Any] = pool.model_dump(mode="json")
        data["cb_before"] = {m.ship_id: m.cb_before for m in pool.members}
        data["cb_after"] = {m.ship_id: m.cb_after for m in pool.members}
        return PoolCreatedResponse.model_validate(data)

    async def list_pools(self, year: int) -> List[PoolResponse]:
        return [
            PoolResponse.model_validate(p.model_dump(mode="json"))
            for p in self.engine.list_pools(year)
        ]

    # Routes

    async def create_route(self, route_data: RouteData) -> RouteResponse:
        route = self.route_store.create(Route(**route_data.model_dump()))
        return RouteResponse.model_validate(route.model_dump(mode="json"))

    async def list_routes(self, vessel_type: Optional[str] = None, fuel_type: Optional[str] = None,
                          year: Optional[int] = None) -> List[RouteResponse]:
        return [
            RouteResponse.model_validate(r.model_dump(mode="json"))
            for r in self.route_store.find_all(vessel_type, fuel_type, year)
        ]

    async def set_baseline(self, route_id: str) -> RouteResponse:
        route = self.route_store.set_baseline(route_id)
        return RouteResponse.model_validate(route.model_dump(mode="json"))

    async def compare_routes(self, vessel_type: Optional[str] = None, fuel_type: Optional[str] = None,
                             year: Optional[int] = None) -> Optional[ComparisonResponse]:
        """Compare routes with the baseline; None when no baseline is set."""
        baseline = self.route_store.find_baseline()
        if baseline is None:
            return None

        routes = self.route_store.find_all(vessel_type, fuel_type, year)
        comparisons = self.route_comparator.compare_routes(baseline, routes)

        return ComparisonResponse(
            baseline=BaselineSummary(route_id=baseline.route_id, ghg_intensity=baseline.ghg_intensity),
            comparisons=[RouteComparisonResponse.model_validate(c.model_dump()) for c in comparisons],
        )

    def _convert_pool_request(self, request: PoolRequest) -> PoolCreationRequest:
        """Convert API pool request to core model."""
        return PoolCreationRequest(
            name=request.name,
            year=request.year,
            members=[
                PoolMemberRequest(ship_id=m.ship_id, adjusted_cb=m.adjusted_cb)
                for m in request.members
            ],
        )
