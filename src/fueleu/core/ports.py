"""Storage collaborator interfaces consumed by the compliance engine."""

from typing import ContextManager, List, Optional, Protocol, Sequence

from .banking import BankEntry
from .compliance import ComplianceBalance
from .pooling import Pool
from ..routes.comparison import Route


class ComplianceRecordStore(Protocol):
    """Supplies the current compliance balance per (ship, year)."""

    def find_by_ship_and_year(self, ship_id: str, year: int) -> Optional[ComplianceBalance]:
        ...

    def upsert(self, record: ComplianceBalance) -> ComplianceBalance:
        ...

    def find_all_by_year(self, year: int) -> List[ComplianceBalance]:
        ...


class LedgerStore(Protocol):
    """Append-only storage of bank entries.

    ``locked`` must make read-then-append atomic for one (ship, year) key.
    """

    def append_entry(self, entry: BankEntry) -> BankEntry:
        ...

    def list_entries(self, ship_id: str, year: int) -> Sequence[BankEntry]:
        ...

    def locked(self, ship_id: str, year: int) -> ContextManager[None]:
        ...


class PoolStore(Protocol):
    """Storage of immutable pool history."""

    def create(self, pool: Pool) -> Pool:
        ...

    def find_by_id(self, pool_id: str) -> Optional[Pool]:
        ...

    def find_all_by_year(self, year: int) -> List[Pool]:
        ...


class RouteStore(Protocol):
    """Storage of voyage routes and the current baseline."""

    def find_all(self, vessel_type: Optional[str] = None, fuel_type: Optional[str] = None,
                 year: Optional[int] = None) -> List[Route]:
        ...

    def find_by_route_id(self, route_id: str) -> Optional[Route]:
        ...

    def create(self, route: Route) -> Route:
        ...

    def set_baseline(self, route_id: str) -> Route:
        ...

    def find_baseline(self) -> Optional[Route]:
        ...
