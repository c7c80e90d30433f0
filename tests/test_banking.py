"""Tests for the banking ledger."""

import threading

import pytest

from fueleu.core.banking import BankEntry, BankRecord, EntryType
from fueleu.core.exceptions import InvalidOperationError, NotFoundError

from conftest import assert_ledger_consistent, make_balance


class TestBank:
    """Test banking a surplus."""

    def test_bank_creates_positive_entry(self, seeded_engine):
        """A BANK entry stores the positive amount."""
        entry = seeded_engine.bank("R001", 2025, 100_000, description="Q1 surplus")

        assert entry.entry_type == EntryType.BANK
        assert entry.cb_amount == 100_000
        assert entry.description == "Q1 surplus"

    def test_bank_from_empty_ledger(self, seeded_engine):
        """Banking from empty gives total and available equal to the amount."""
        seeded_engine.bank("R001", 2025, 100_000)
        record = seeded_engine.get_bank_record("R001", 2025)

        assert record.total_banked == 100_000
        assert record.total_applied == 0
        assert record.available_balance == 100_000

    def test_bank_missing_record(self, seeded_engine):
        """Banking without compliance data is NotFound."""
        with pytest.raises(NotFoundError):
            seeded_engine.bank("R999", 2025, 100)

    def test_bank_missing_record_checked_first(self, seeded_engine):
        """NotFound wins over an invalid amount."""
        with pytest.raises(NotFoundError):
            seeded_engine.bank("R999", 2025, -5)

    def test_bank_deficit_rejected(self, seeded_engine):
        """A negative balance cannot be banked."""
        with pytest.raises(InvalidOperationError, match="only positive balance may be banked"):
            seeded_engine.bank("R002", 2025, 100_000)

    def test_bank_zero_balance_rejected(self, seeded_engine):
        """A zero balance cannot be banked."""
        with pytest.raises(InvalidOperationError, match="only positive balance may be banked"):
            seeded_engine.bank("R003", 2025, 100_000)

    def test_sign_checked_before_amount(self, seeded_engine):
        """The balance sign rule wins over an invalid amount."""
        with pytest.raises(InvalidOperationError, match="only positive balance may be banked"):
            seeded_engine.bank("R002", 2025, -1)

    @pytest.mark.parametrize("amount", [0, -1, -100_000])
    def test_non_positive_amount_rejected(self, seeded_engine, amount):
        """Amounts must be strictly positive."""
        with pytest.raises(InvalidOperationError):
            seeded_engine.bank("R001", 2025, amount)

    @pytest.mark.parametrize("amount", [float("nan"), float("inf")])
    def test_non_finite_amount_rejected(self, seeded_engine, amount):
        """NaN and infinity are never banked."""
        with pytest.raises(InvalidOperationError, match="must be positive"):
            seeded_engine.bank("R001", 2025, amount)

        assert seeded_engine.get_bank_record("R001", 2025).entries == []

    def test_bank_full_balance(self, seeded_engine):
        """Banking exactly the full balance is legal."""
        seeded_engine.bank("R001", 2025, 274_000_000)

        assert seeded_engine.get_bank_record("R001", 2025).available_balance == 274_000_000

    def test_bank_above_balance_rejected(self, seeded_engine):
        """Banking just above the balance is rejected."""
        with pytest.raises(InvalidOperationError, match="Cannot bank more"):
            seeded_engine.bank("R001", 2025, 274_000_000.001)

    def test_bank_reads_live_balance(self, seeded_engine):
        """Each bank is checked against the live CB, not a residual."""
        seeded_engine.bank("R001", 2025, 200_000_000)
        seeded_engine.bank("R001", 2025, 200_000_000)

        record = seeded_engine.get_bank_record("R001", 2025)
        assert record.total_banked == 400_000_000
        assert seeded_engine.get_balance("R001", 2025).compliance_balance == 274_000_000

    def test_failed_bank_appends_nothing(self, seeded_engine):
        """A rejected operation leaves the ledger untouched."""
        with pytest.raises(InvalidOperationError):
            seeded_engine.bank("R001", 2025, 300_000_000)

        assert seeded_engine.get_bank_record("R001", 2025).entries == []


class TestApply:
    """Test applying banked surplus."""

    @pytest.fixture
    def banked_engine(self, seeded_engine):
        """Engine with 100,000 banked for R001."""
        seeded_engine.bank("R001", 2025, 100_000)
        return seeded_engine

    def test_apply_stores_negative_amount(self, banked_engine):
        """An APPLY entry stores the negated amount."""
        entry = banked_engine.apply("R001", 2025, 40_000)

        assert entry.entry_type == EntryType.APPLY
        assert entry.cb_amount == -40_000

    def test_apply_exact_available(self, banked_engine):
        """Applying exactly the available balance leaves zero."""
        banked_engine.apply("R001", 2025, 100_000)

        record = banked_engine.get_bank_record("R001", 2025)
        assert record.available_balance == 0
        assert record.total_applied == 100_000

    def test_apply_available_plus_one(self, banked_engine):
        """Applying one more than available fails."""
        with pytest.raises(InvalidOperationError, match="insufficient banked balance"):
            banked_engine.apply("R001", 2025, 100_001)

    def test_apply_more_than_available(self, banked_engine):
        """Applying well over the available balance fails."""
        with pytest.raises(InvalidOperationError, match="Available: 100000"):
            banked_engine.apply("R001", 2025, 200_000)

    def test_multiple_applies_then_exhausted(self, banked_engine):
        """Two halves succeed and any further apply fails."""
        banked_engine.apply("R001", 2025, 50_000)
        banked_engine.apply("R001", 2025, 50_000)

        with pytest.raises(InvalidOperationError):
            banked_engine.apply("R001", 2025, 1)

    @pytest.mark.parametrize("amount", [0, -10])
    def test_non_positive_apply_rejected(self, banked_engine, amount):
        """Apply amounts must be strictly positive."""
        with pytest.raises(InvalidOperationError):
            banked_engine.apply("R001", 2025, amount)

    @pytest.mark.parametrize("amount", [float("nan"), float("inf")])
    def test_non_finite_apply_rejected(self, banked_engine, amount):
        """A non-finite apply is rejected and the available balance stays intact."""
        with pytest.raises(InvalidOperationError, match="must be positive"):
            banked_engine.apply("R001", 2025, amount)

        assert banked_engine.get_bank_record("R001", 2025).available_balance == 100_000
        with pytest.raises(InvalidOperationError, match="insufficient banked balance"):
            banked_engine.apply("R001", 2025, 1e15)

    def test_apply_against_deficit(self, seeded_engine):
        """Applying is legal whatever the current CB sign."""
        seeded_engine.ledger_store.append_entry(
            BankEntry(ship_id="R002", year=2025, cb_amount=500, entry_type=EntryType.BANK)
        )

        entry = seeded_engine.apply("R002", 2025, 500)
        assert entry.cb_amount == -500

    def test_apply_empty_ledger(self, seeded_engine):
        """Nothing can be applied from an empty ledger."""
        with pytest.raises(InvalidOperationError):
            seeded_engine.apply("R001", 2025, 1)

    def test_apply_without_compliance_record(self, engine):
        """Apply does not require a compliance record, only a banked balance."""
        with pytest.raises(InvalidOperationError):
            engine.apply("R999", 2025, 1)


class TestBankRecord:
    """Test the derived bank record."""

    def test_entries_newest_first(self, seeded_engine):
        """Entries are returned newest first."""
        first = seeded_engine.bank("R001", 2025, 1_000)
        second = seeded_engine.bank("R001", 2025, 2_000)
        third = seeded_engine.apply("R001", 2025, 500)

        record = seeded_engine.get_bank_record("R001", 2025)
        assert [e.id for e in record.entries] == [third.id, second.id, first.id]
        assert_ledger_consistent(record)

    def test_record_is_per_key(self, seeded_engine):
        """Entries of other years do not leak into a record."""
        seeded_engine.compliance_store.upsert(make_balance("R001", 2024, 1_000))
        seeded_engine.bank("R001", 2024, 1_000)
        seeded_engine.bank("R001", 2025, 2_000)

        assert seeded_engine.get_bank_record("R001", 2024).total_banked == 1_000
        assert seeded_engine.get_bank_record("R001", 2025).total_banked == 2_000

    def test_empty_record(self, engine):
        """An empty ledger folds to zeros."""
        record = engine.get_bank_record("R001", 2025)

        assert record.total_banked == 0
        assert record.total_applied == 0
        assert record.available_balance == 0
        assert record.entries == []

    def test_from_entries(self):
        """Totals fold BANK and APPLY amounts separately."""
        entries = [
            BankEntry(ship_id="S", year=2025, cb_amount=300, entry_type=EntryType.BANK),
            BankEntry(ship_id="S", year=2025, cb_amount=-120, entry_type=EntryType.APPLY),
            BankEntry(ship_id="S", year=2025, cb_amount=50, entry_type=EntryType.BANK),
        ]
        record = BankRecord.from_entries("S", 2025, entries)

        assert record.total_banked == 350
        assert record.total_applied == 120
        assert record.available_balance == 230

    def test_entries_are_immutable(self, seeded_engine):
        """Ledger entries cannot be edited after creation."""
        entry = seeded_engine.bank("R001", 2025, 1_000)

        with pytest.raises(Exception):
            entry.cb_amount = 5


class TestConcurrentApply:
    """Test per-key serialisation of read-then-append."""

    def test_concurrent_applies_never_overdraw(self, seeded_engine):
        """Concurrent applies cannot both spend the same balance."""
        seeded_engine.bank("R001", 2025, 100)
        results = []

        def worker():
            try:
                seeded_engine.apply("R001", 2025, 60)
                results.append("ok")
            except InvalidOperationError:
                results.append("rejected")

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count("ok") == 1
        assert seeded_engine.get_bank_record("R001", 2025).available_balance == 40
