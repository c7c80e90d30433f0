"""Pydantic models for the FuelEU Compliance Engine API."""

from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import datetime


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ComplianceRecordRequest(CamelModel):
    """Raw voyage data for computing and storing a compliance balance."""

    ship_id: str = Field(min_length=1)
    year: int
    fuel_consumption: float = Field(ge=0, allow_inf_nan=False, description="Fuel consumption (t)")
    actual_intensity: float = Field(allow_inf_nan=False, description="Attained GHG intensity (gCO2e/MJ)")
    target_intensity: Optional[float] = Field(None, gt=0, description="Target GHG intensity (gCO2e/MJ)")


class ComplianceBalanceResponse(CamelModel):
    """Compliance balance of a ship-year."""

    ship_id: str
    year: int
    target_intensity: float
    actual_intensity: float
    energy_in_scope: float
    compliance_balance: float


class BankRequest(CamelModel):
    """Bank or apply request."""

    ship_id: str = Field(min_length=1)
    year: int
    cb_amount: float = Field(allow_inf_nan=False)
    description: Optional[str] = None


class BankEntryResponse(CamelModel):
    """Ledger entry."""

    id: str
    ship_id: str
    year: int
    cb_amount: float
    entry_type: str
    description: Optional[str] = None
    created_at: datetime


class BankRecordResponse(CamelModel):
    """Derived bank record of a ship-year."""

    ship_id: str
    year: int
    total_banked: float
    total_applied: float
    available_balance: float
    entries: List[BankEntryResponse]


class PoolMemberData(CamelModel):
    """Proposed post-pool balance of one ship."""

    ship_id: str = Field(min_length=1)
    adjusted_cb: float = Field(alias="adjustedCB", allow_inf_nan=False)


class PoolRequest(CamelModel):
    """Pool creation request."""

    name: Optional[str] = None
    year: int
    members: List[PoolMemberData] = Field(min_length=1)


class PoolMemberResponse(CamelModel):
    """Stored pool member."""

    id: str
    pool_id: str
    ship_id: str
    cb_before: float
    cb_after: float
    created_at: datetime


class PoolResponse(CamelModel):
    """Stored pool."""

    id: str
    name: Optional[str] = None
    year: int
    created_at: datetime
    members: List[PoolMemberResponse]


class PoolCreatedResponse(PoolResponse):
    """Stored pool together with the balances it was validated against."""

    cb_before: Dict[str, float]
    cb_after: Dict[str, float]


class RouteData(CamelModel):
    """Route submitted to the API."""

    route_id: str = Field(min_length=1)
    vessel_type: str
    fuel_type: str
    year: int
    ghg_intensity: float = Field(ge=0)
    fuel_consumption: float = Field(ge=0)
    distance: float = Field(default=0, ge=0)
    total_emissions: float = Field(default=0, ge=0)


class RouteResponse(RouteData):
    """Stored route."""

    id: str
    is_baseline: bool
    created_at: datetime
    updated_at: datetime


class BaselineSummary(CamelModel):
    """Baseline route reference."""

    route_id: str
    ghg_intensity: float


class RouteComparisonResponse(CamelModel):
    """One route compared with the baseline."""

    route_id: str
    vessel_type: str
    fuel_type: str
    year: int
    baseline: float
    comparison: float
    percent_diff: float
    compliant: bool


class ComparisonResponse(CamelModel):
    """Baseline comparison across routes."""

    baseline: BaselineSummary
    comparisons: List[RouteComparisonResponse]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    checks: Dict[str, str]
