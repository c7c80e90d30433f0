"""Main compliance engine coordinating calculation, banking and pooling."""

from contextlib import ExitStack
from typing import Dict, List, Optional
import logging

from .config import FuelEUConfig
from .compliance import ComplianceBalance, ComplianceCalculator
from .banking import BankEntry, BankLedger, BankRecord
from .pooling import (
    Pool, PoolCreationRequest, PoolMember, PoolValidationResult, PoolValidator
)
from .exceptions import InvalidOperationError, NotFoundError, PoolValidationError
from .ports import ComplianceRecordStore, LedgerStore, PoolStore


logger = logging.getLogger(__name__)


class ComplianceEngine:
    """Compliance accounting engine over explicit storage collaborators."""

    def __init__(self, compliance_store: ComplianceRecordStore, ledger_store: LedgerStore,
                 pool_store: PoolStore, config: Optional[FuelEUConfig] = None):
        """Initialize engine with configuration and collaborators."""
        self.config = config or FuelEUConfig.load_default()
        self.compliance_store = compliance_store
        self.ledger_store = ledger_store
        self.pool_store = pool_store

        self.calculator = ComplianceCalculator(self.config)
        self.ledger = BankLedger(compliance_store, ledger_store)
        self.pool_validator = PoolValidator()

        logger.info("FuelEU compliance engine initialized")

    @classmethod
    def in_memory(cls, config: Optional[FuelEUConfig] = None) -> "ComplianceEngine":
        """Build an engine backed by fresh in-memory stores."""
        from ..storage.memory import (
            InMemoryComplianceStore, InMemoryLedgerStore, InMemoryPoolStore
        )
        return cls(InMemoryComplianceStore(), InMemoryLedgerStore(), InMemoryPoolStore(), config)

    # Compliance balance

    def compute_balance(self, fuel_consumption: float, actual_intensity: float,
                        target_intensity: Optional[float] = None) -> ComplianceBalance:
        """Compute a compliance balance without persisting it."""
        return self.calculator.compute_balance(fuel_consumption, actual_intensity, target_intensity)

    def record_balance(self, ship_id: str, year: int, fuel_consumption: float,
                       actual_intensity: float,
                       target_intensity: Optional[float] = None) -> ComplianceBalance:
        """Compute and store the compliance balance of a ship-year.

        Without an explicit target the year's configured target is used.
        Voyage data outside the configured bounds is rejected.
        """
        if not self.config.validate_voyage_data(fuel_consumption, actual_intensity, year):
            logger.warning(f"Rejected voyage data for {ship_id}/{year}")
            raise InvalidOperationError(
                f"Voyage data out of bounds for {ship_id}/{year}: "
                f"fuel={fuel_consumption}, intensity={actual_intensity}"
            )

        if target_intensity is None:
            target_intensity = self.config.get_target_intensity(year)

        record = self.calculator.compute_balance(
            fuel_consumption, actual_intensity, target_intensity, ship_id=ship_id, year=year
        )

        with self.ledger_store.locked(ship_id, year):
            stored = self.compliance_store.upsert(record)

        logger.info(f"Recorded CB {stored.compliance_balance:,.0f} for {ship_id}/{year}")
        return stored

    def get_balance(self, ship_id: str, year: int) -> ComplianceBalance:
        """Get the current compliance balance or raise NotFoundError."""
        record = self.compliance_store.find_by_ship_and_year(ship_id, year)
        if record is None:
            raise NotFoundError(ship_id, year)
        return record

    def adjusted_balances(self, year: int) -> List[ComplianceBalance]:
        """All compliance balances recorded for a year."""
        return self.compliance_store.find_all_by_year(year)

    # Banking

    def bank(self, ship_id: str, year: int, amount: float,
             description: Optional[str] = None) -> BankEntry:
        return self.ledger.bank(ship_id, year, amount, description)

    def apply(self, ship_id: str, year: int, amount: float,
              description: Optional[str] = None) -> BankEntry:
        return self.ledger.apply(ship_id, year, amount, description)

    def get_bank_record(self, ship_id: str, year: int) -> BankRecord:
        return self.ledger.get_record(ship_id, year)

    # Pooling

    def validate_pool(self, request: PoolCreationRequest) -> PoolValidationResult:
        """Look up every member's current CB and validate the request."""
        self._check_unique_members(request)
        cb_before = self._snapshot_cb_before(request)
        return self.pool_validator.validate_pool(request.members, cb_before)

    def create_pool(self, request: PoolCreationRequest) -> Pool:
        """Validate and persist a pool as one atomic transaction.

        All member keys are locked in sorted order before the balances are
        read, and stay locked until the pool is stored.
        """
        self._check_unique_members(request)

        with ExitStack() as stack:
            for ship_id in sorted(request.ship_ids()):
                stack.enter_context(self.ledger_store.locked(ship_id, request.year))

            cb_before = self._snapshot_cb_before(request)
            validation = self.pool_validator.validate_pool(request.members, cb_before)

            if not validation.valid:
                logger.warning(
                    f"Pool rejected for {request.year}: {len(validation.errors)} violation(s)"
                )
                raise PoolValidationError(validation.errors)

            pool = Pool(name=request.name, year=request.year)
            members = [
                PoolMember(
                    pool_id=pool.id,
                    ship_id=member.ship_id,
                    cb_before=cb_before[member.ship_id],
                    cb_after=member.adjusted_cb,
                )
                for member in request.members
            ]
            stored = self.pool_store.create(pool.model_copy(update={"members": members}))

        logger.info(f"Pool {stored.id} created for {request.year} with {len(members)} member(s)")
        return stored

    def list_pools(self, year: int) -> List[Pool]:
        return self.pool_store.find_all_by_year(year)

    def _snapshot_cb_before(self, request: PoolCreationRequest) -> Dict[str, float]:
        cb_before = {}
        for member in request.members:
            record = self.compliance_store.find_by_ship_and_year(member.ship_id, request.year)
            if record is None:
                logger.warning(f"Pool rejected: no compliance data for {member.ship_id}/{request.year}")
                raise NotFoundError(member.ship_id, request.year)
            cb_before[member.ship_id] = record.compliance_balance
        return cb_before

    @staticmethod
    def _check_unique_members(request: PoolCreationRequest) -> None:
        ship_ids = request.ship_ids()
        duplicates = sorted({s for s in ship_ids if ship_ids.count(s) > 1})
        if duplicates:
            raise InvalidOperationError(
                f"Ship(s) listed more than once in pool: {', '.join(duplicates)}"
            )
