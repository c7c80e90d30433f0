"""
Example walking a small fleet through compliance, banking and pooling.

Uses the seed voyages of the reference data set: five routes across 2024
and 2025 with their fuel consumption and attained GHG intensity.
"""

from fueleu import ComplianceEngine, PoolCreationRequest, PoolMemberRequest, PoolValidationError
from fueleu.reporting import FleetReport


SEED_VOYAGES = [
    {"ship_id": "R001", "fuel_consumption": 5000, "actual_intensity": 91.0},
    {"ship_id": "R002", "fuel_consumption": 4800, "actual_intensity": 88.0},
    {"ship_id": "R003", "fuel_consumption": 5100, "actual_intensity": 93.5},
    {"ship_id": "R004", "fuel_consumption": 4900, "actual_intensity": 89.2},
    {"ship_id": "R005", "fuel_consumption": 4950, "actual_intensity": 90.5},
]


def main():
    """Run the fleet walkthrough."""

    print("FuelEU Compliance Engine - Fleet Walkthrough")
    print("=" * 60)

    engine = ComplianceEngine.in_memory()
    year = 2025

    # 1. Compliance balances
    print("\nComputing compliance balances...")
    for voyage in SEED_VOYAGES:
        record = engine.record_balance(year=year, **voyage)
        print(f"  {record.ship_id}: CB {record.compliance_balance:>16,.0f} ({record.status.value})")

    # 2. Banking
    print("\nBanking part of R002's surplus...")
    surplus = engine.get_balance("R002", year).compliance_balance
    engine.bank("R002", year, surplus / 2, description="Half of 2025 surplus")
    engine.apply("R002", year, surplus / 4, description="Offset against deficit")
    record = engine.get_bank_record("R002", year)
    print(f"  Banked: {record.total_banked:,.0f}")
    print(f"  Applied: {record.total_applied:,.0f}")
    print(f"  Available: {record.available_balance:,.0f}")

    # 3. Pooling
    print("\nPooling R002 and R004...")
    r002 = engine.get_balance("R002", year).compliance_balance
    r004 = engine.get_balance("R004", year).compliance_balance
    request = PoolCreationRequest(
        name="Example pool",
        year=year,
        members=[
            PoolMemberRequest(ship_id="R002", adjusted_cb=r002 + r004 - 1_000_000),
            PoolMemberRequest(ship_id="R004", adjusted_cb=1_000_000),
        ],
    )
    try:
        pool = engine.create_pool(request)
        print(f"  Pool {pool.id} created with {len(pool.members)} members")
    except PoolValidationError as e:
        for error in e.errors:
            print(f"  Rejected: {error}")

    # 4. Fleet report
    print("\nFleet positions:")
    report = FleetReport(engine)
    print(report.fleet_positions(year).to_string(index=False))

    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
