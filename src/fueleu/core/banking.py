"""Banking ledger for compliance surpluses.

Banking reserves a current surplus for later use; applying consumes
previously banked surplus to offset a deficit. The ledger is an
append-only sequence of entries per (ship, year), and every balance is
derived by folding that sequence, so there is no stored running total
that could drift from the history.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Sequence
from pydantic import BaseModel, ConfigDict, Field
import logging
import math
import uuid

from .exceptions import InvalidOperationError, NotFoundError

if TYPE_CHECKING:
    from .ports import ComplianceRecordStore, LedgerStore

logger = logging.getLogger(__name__)


class EntryType(str, Enum):
    """Kinds of ledger entries."""

    BANK = "BANK"    # Stored as a positive amount
    APPLY = "APPLY"  # Stored as the negative of the applied amount


class BankEntry(BaseModel):
    """A single immutable ledger fact."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    ship_id: str
    year: int
    cb_amount: float
    entry_type: EntryType
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)


class BankRecord(BaseModel):
    """Balance derived from all ledger entries of one ship-year."""

    ship_id: str
    year: int
    total_banked: float = 0.0
    total_applied: float = 0.0
    available_balance: float = 0.0
    entries: List[BankEntry] = Field(default_factory=list)

    @classmethod
    def from_entries(cls, ship_id: str, year: int, entries: Sequence[BankEntry]) -> "BankRecord":
        """Fold entries into totals; entries are returned newest first."""
        total_banked = sum(e.cb_amount for e in entries if e.entry_type == EntryType.BANK)
        total_applied = sum(abs(e.cb_amount) for e in entries if e.entry_type == EntryType.APPLY)

        ordered = sorted(entries, key=lambda e: e.created_at, reverse=True)

        return cls(
            ship_id=ship_id,
            year=year,
            total_banked=total_banked,
            total_applied=total_applied,
            available_balance=total_banked - total_applied,
            entries=ordered,
        )


class BankLedger:
    """
    Legality rules for banking operations.

    Each (ship, year) moves through states described by the running pair
    (total_banked, total_applied). A transition is validated against the
    live compliance balance and the derived record before it is appended,
    all while holding the ledger store's lock for that key.
    """

    def __init__(self, compliance_store: "ComplianceRecordStore", ledger_store: "LedgerStore"):
        """Initialize ledger with its collaborators."""
        self.compliance_store = compliance_store
        self.ledger_store = ledger_store
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def bank(self, ship_id: str, year: int, amount: float,
             description: Optional[str] = None) -> BankEntry:
        """Bank part or all of a positive compliance balance."""
        with self.ledger_store.locked(ship_id, year):
            compliance = self.compliance_store.find_by_ship_and_year(ship_id, year)
            if compliance is None:
                self.logger.warning(f"Bank rejected: no compliance data for {ship_id}/{year}")
                raise NotFoundError(ship_id, year)

            current_cb = compliance.compliance_balance
            if current_cb <= 0:
                self._reject(ship_id, year, "only positive balance may be banked")

            if not math.isfinite(amount) or amount <= 0:
                self._reject(ship_id, year, f"Bank amount must be positive, got {amount}")

            if amount > current_cb:
                self._reject(
                    ship_id, year,
                    f"Cannot bank more than available compliance balance "
                    f"(balance: {current_cb}, requested: {amount})"
                )

            entry = self.ledger_store.append_entry(BankEntry(
                ship_id=ship_id,
                year=year,
                cb_amount=amount,
                entry_type=EntryType.BANK,
                description=description,
            ))

        self.logger.info(f"Banked {amount} for {ship_id}/{year}")
        return entry

    def apply(self, ship_id: str, year: int, amount: float,
              description: Optional[str] = None) -> BankEntry:
        """Apply banked surplus; legal regardless of the current CB sign."""
        with self.ledger_store.locked(ship_id, year):
            if not math.isfinite(amount) or amount <= 0:
                self._reject(ship_id, year, f"Apply amount must be positive, got {amount}")

            record = self.get_record(ship_id, year)
            if amount > record.available_balance:
                self._reject(
                    ship_id, year,
                    f"insufficient banked balance. Available: {record.available_balance}, "
                    f"Requested: {amount}"
                )

            entry = self.ledger_store.append_entry(BankEntry(
                ship_id=ship_id,
                year=year,
                cb_amount=-amount,
                entry_type=EntryType.APPLY,
                description=description,
            ))

        self.logger.info(f"Applied {amount} for {ship_id}/{year}")
        return entry

    def get_record(self, ship_id: str, year: int) -> BankRecord:
        """Derive the bank record for a ship-year from its entries."""
        entries = self.ledger_store.list_entries(ship_id, year)
        return BankRecord.from_entries(ship_id, year, entries)

    def _reject(self, ship_id: str, year: int, reason: str) -> None:
        self.logger.warning(f"Banking operation rejected for {ship_id}/{year}: {reason}")
        raise InvalidOperationError(reason)
