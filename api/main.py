"""Main FastAPI application for the FuelEU Compliance Engine."""

from fastapi import Depends, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import Dict, List, Optional
import logging
from datetime import datetime

from fueleu.core.exceptions import InvalidOperationError, NotFoundError, PoolValidationError
from .models import (
    BankEntryResponse, BankRecordResponse, BankRequest, ComparisonResponse,
    ComplianceBalanceResponse, ComplianceRecordRequest, HealthResponse,
    PoolCreatedResponse, PoolRequest, PoolResponse, RouteData, RouteResponse
)
from .services import ComplianceService

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="FuelEU Compliance Engine API",
    description="Compliance balance, banking and pooling for ship GHG intensity",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify actual origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services
compliance_service = ComplianceService()


def get_service() -> ComplianceService:
    return compliance_service


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.get("/", response_model=Dict[str, str])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "FuelEU Compliance Engine API",
        "version": "0.1.0",
        "description": "Compliance accounting engine",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check(service: ComplianceService = Depends(get_service)):
    """Health check endpoint."""
    checks = {
        "api": "ok",
        "compliance_service": "ok" if service.engine else "error",
        "timestamp": datetime.now().isoformat()
    }
    status = "unhealthy" if "error" in checks.values() else "healthy"
    return HealthResponse(status=status, timestamp=datetime.now(), checks=checks)


# Compliance

@app.get("/compliance/cb", response_model=ComplianceBalanceResponse)
async def get_compliance_balance(ship_id: Optional[str] = Query(None, alias="shipId"),
                                 year: Optional[int] = None,
                                 service: ComplianceService = Depends(get_service)):
    """Get the compliance balance of a ship-year."""
    if not ship_id or not year:
        return _error(400, "shipId and year are required")
    return await service.get_balance(ship_id, year)


@app.post("/compliance/cb", response_model=ComplianceBalanceResponse, status_code=201)
async def record_compliance_balance(request: ComplianceRecordRequest,
                                    service: ComplianceService = Depends(get_service)):
    """Compute and store the compliance balance of a ship-year."""
    return await service.record_balance(request)


@app.get("/compliance/adjusted-cb", response_model=List[ComplianceBalanceResponse])
async def get_adjusted_balances(year: Optional[int] = None,
                                service: ComplianceService = Depends(get_service)):
    """Get all compliance balances of a year."""
    if not year:
        return _error(400, "year is required")
    return await service.adjusted_balances(year)


# Banking

@app.get("/banking/records", response_model=BankRecordResponse)
async def get_bank_records(ship_id: Optional[str] = Query(None, alias="shipId"),
                           year: Optional[int] = None,
                           service: ComplianceService = Depends(get_service)):
    """Get the bank record of a ship-year."""
    if not ship_id or not year:
        return _error(400, "shipId and year are required")
    return await service.get_bank_record(ship_id, year)


@app.post("/banking/bank", response_model=BankEntryResponse, status_code=201)
async def bank_surplus(request: BankRequest, service: ComplianceService = Depends(get_service)):
    """Bank a positive compliance balance."""
    entry = await service.bank(request)
    logger.info(f"Bank entry {entry.id} created for {request.ship_id}/{request.year}")
    return entry


@app.post("/banking/apply", response_model=BankEntryResponse, status_code=201)
async def apply_banked(request: BankRequest, service: ComplianceService = Depends(get_service)):
    """Apply previously banked surplus."""
    entry = await service.apply(request)
    logger.info(f"Apply entry {entry.id} created for {request.ship_id}/{request.year}")
    return entry


# Pooling

@app.post("/pools", response_model=PoolCreatedResponse, status_code=201)
async def create_pool(request: PoolRequest, service: ComplianceService = Depends(get_service)):
    """Validate and create a pool."""
    return await service.create_pool(request)


@app.get("/pools", response_model=List[PoolResponse])
async def list_pools(year: Optional[int] = None, service: ComplianceService = Depends(get_service)):
    """List pools of a year, newest first."""
    if not year:
        return _error(400, "year is required")
    return await service.list_pools(year)


# Routes

@app.get("/routes", response_model=List[RouteResponse])
async def list_routes(vessel_type: Optional[str] = Query(None, alias="vesselType"),
                      fuel_type: Optional[str] = Query(None, alias="fuelType"),
                      year: Optional[int] = None,
                      service: ComplianceService = Depends(get_service)):
    """List routes, optionally filtered."""
    return await service.list_routes(vessel_type, fuel_type, year)


@app.post("/routes", response_model=RouteResponse, status_code=201)
async def create_route(route: RouteData, service: ComplianceService = Depends(get_service)):
    """Register a route."""
    return await service.create_route(route)


@app.get("/routes/comparison", response_model=ComparisonResponse)
async def compare_routes(vessel_type: Optional[str] = Query(None, alias="vesselType"),
                         fuel_type: Optional[str] = Query(None, alias="fuelType"),
                         year: Optional[int] = None,
                         service: ComplianceService = Depends(get_service)):
    """Compare routes against the baseline route."""
    comparison = await service.compare_routes(vessel_type, fuel_type, year)
    if comparison is None:
        return _error(404, "No baseline route set")
    return comparison


@app.post("/routes/{route_id}/baseline", response_model=RouteResponse)
async def set_baseline(route_id: str, service: ComplianceService = Depends(get_service)):
    """Set the baseline route."""
    return await service.set_baseline(route_id)


# Error handlers
@app.exception_handler(NotFoundError)
async def not_found_handler(request, exc):
    """Handle missing compliance data."""
    logger.warning(f"NotFoundError: {str(exc)}")
    return _error(404, str(exc))


@app.exception_handler(PoolValidationError)
async def pool_validation_handler(request, exc):
    """Handle pool rule violations."""
    logger.warning(f"PoolValidationError: {exc.errors}")
    return JSONResponse(
        status_code=400,
        content={"error": "Pool validation failed", "details": exc.errors}
    )


@app.exception_handler(InvalidOperationError)
async def invalid_operation_handler(request, exc):
    """Handle rejected banking operations."""
    logger.warning(f"InvalidOperationError: {exc.reason}")
    return _error(400, exc.reason)


# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """Application startup tasks."""
    logger.info("FuelEU Compliance Engine API starting up...")
    await compliance_service.initialize()
    logger.info("FuelEU Compliance Engine API ready")


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown tasks."""
    logger.info("FuelEU Compliance Engine API shutdown complete")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
