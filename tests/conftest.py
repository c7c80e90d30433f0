"""Pytest configuration and shared fixtures."""

import pytest
import tempfile
from pathlib import Path

from fueleu.core.config import FuelEUConfig
from fueleu.core.compliance import ComplianceBalance
from fueleu.core.engine import ComplianceEngine
from fueleu.routes.comparison import Route
from fueleu.storage.memory import InMemoryRouteStore


@pytest.fixture(scope="session")
def test_config():
    """Test configuration fixture."""
    return FuelEUConfig.load_default()


@pytest.fixture
def temp_dir():
    """Temporary directory fixture."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def engine(test_config):
    """Engine over empty in-memory stores."""
    return ComplianceEngine.in_memory(test_config)


def make_balance(ship_id, year, compliance_balance, actual_intensity=88.0):
    """Compliance record with a fixed balance, bypassing the formula."""
    return ComplianceBalance(
        ship_id=ship_id,
        year=year,
        target_intensity=89.3368,
        actual_intensity=actual_intensity,
        energy_in_scope=205_000_000,
        compliance_balance=compliance_balance,
    )


@pytest.fixture
def seeded_engine(engine):
    """Engine with one surplus, one deficit and one on-target ship for 2025."""
    engine.compliance_store.upsert(make_balance("R001", 2025, 274_000_000))
    engine.compliance_store.upsert(make_balance("R002", 2025, -327_200_000, actual_intensity=91.0))
    engine.compliance_store.upsert(make_balance("R003", 2025, 0, actual_intensity=89.3368))
    return engine


@pytest.fixture
def seed_routes():
    """Seed voyage routes."""
    return [
        Route(route_id="R001", vessel_type="Container", fuel_type="HFO", year=2024,
              ghg_intensity=91.0, fuel_consumption=5000, distance=12000, total_emissions=4500),
        Route(route_id="R002", vessel_type="BulkCarrier", fuel_type="LNG", year=2024,
              ghg_intensity=88.0, fuel_consumption=4800, distance=11500, total_emissions=4200),
        Route(route_id="R003", vessel_type="Tanker", fuel_type="MGO", year=2024,
              ghg_intensity=93.5, fuel_consumption=5100, distance=12500, total_emissions=4700),
        Route(route_id="R004", vessel_type="RoRo", fuel_type="HFO", year=2025,
              ghg_intensity=89.2, fuel_consumption=4900, distance=11800, total_emissions=4300),
        Route(route_id="R005", vessel_type="Container", fuel_type="LNG", year=2025,
              ghg_intensity=90.5, fuel_consumption=4950, distance=11900, total_emissions=4400),
    ]


@pytest.fixture
def route_store(seed_routes):
    """Route store holding the seed routes."""
    store = InMemoryRouteStore()
    for route in seed_routes:
        store.create(route)
    return store


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "property: marks tests as property-based tests"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        # Mark property-based tests
        if "test_properties" in item.nodeid:
            item.add_marker(pytest.mark.property)

        # Mark integration tests
        if "test_api" in item.nodeid:
            item.add_marker(pytest.mark.integration)


# Custom assertion helpers
def assert_ledger_consistent(record):
    """Assert that a bank record matches the fold of its entries."""
    banked = sum(e.cb_amount for e in record.entries if e.entry_type.value == "BANK")
    applied = sum(-e.cb_amount for e in record.entries if e.entry_type.value == "APPLY")

    assert abs(record.total_banked - banked) < 1e-6, f"Banked total {record.total_banked} != {banked}"
    assert abs(record.total_applied - applied) < 1e-6, f"Applied total {record.total_applied} != {applied}"
    assert abs(record.available_balance - (banked - applied)) < 1e-6
