"""In-memory storage adapters.

These satisfy the collaborator ports of the engine for tests, examples
and the demo API. Every store is safe to share between threads; the
ledger store additionally hands out one re-entrant lock per (ship, year)
so that a read-then-append sequence is atomic for that key.
"""

from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple
import logging
import threading

from ..core.banking import BankEntry
from ..core.compliance import ComplianceBalance
from ..core.exceptions import NotFoundError
from ..core.pooling import Pool
from ..routes.comparison import Route

logger = logging.getLogger(__name__)

Key = Tuple[str, int]


class InMemoryComplianceStore:
    """One compliance record per (ship, year); upsert replaces."""

    def __init__(self) -> None:
        self._records: Dict[Key, ComplianceBalance] = {}
        self._mutex = threading.Lock()

    def find_by_ship_and_year(self, ship_id: str, year: int) -> Optional[ComplianceBalance]:
        with self._mutex:
            return self._records.get((ship_id, year))

    def upsert(self, record: ComplianceBalance) -> ComplianceBalance:
        with self._mutex:
            self._records[(record.ship_id, record.year)] = record
        return record

    def find_all_by_year(self, year: int) -> List[ComplianceBalance]:
        with self._mutex:
            records = [r for (_, y), r in self._records.items() if y == year]
        return sorted(records, key=lambda r: r.ship_id)


class InMemoryLedgerStore:
    """Append-only bank entries with per-key locking."""

    def __init__(self) -> None:
        self._entries: Dict[Key, List[BankEntry]] = {}
        self._key_locks: Dict[Key, threading.RLock] = {}
        self._mutex = threading.Lock()

    def _lock_for(self, key: Key) -> threading.RLock:
        with self._mutex:
            if key not in self._key_locks:
                self._key_locks[key] = threading.RLock()
            return self._key_locks[key]

    @contextmanager
    def locked(self, ship_id: str, year: int) -> Iterator[None]:
        """Hold the lock for one (ship, year) key."""
        lock = self._lock_for((ship_id, year))
        with lock:
            yield

    def append_entry(self, entry: BankEntry) -> BankEntry:
        with self._mutex:
            self._entries.setdefault((entry.ship_id, entry.year), []).append(entry)
        logger.debug(f"Appended {entry.entry_type.value} entry {entry.id}")
        return entry

    def list_entries(self, ship_id: str, year: int) -> List[BankEntry]:
        """Entries for a key, newest first."""
        with self._mutex:
            entries = list(self._entries.get((ship_id, year), []))
        entries.reverse()
        return entries


class InMemoryPoolStore:
    """Immutable pool history."""

    def __init__(self) -> None:
        self._pools: List[Pool] = []
        self._mutex = threading.Lock()

    def create(self, pool: Pool) -> Pool:
        with self._mutex:
            self._pools.append(pool)
        return pool

    def find_by_id(self, pool_id: str) -> Optional[Pool]:
        with self._mutex:
            return next((p for p in self._pools if p.id == pool_id), None)

    def find_all_by_year(self, year: int) -> List[Pool]:
        """Pools of a year, newest first."""
        with self._mutex:
            pools = [p for p in self._pools if p.year == year]
        pools.reverse()
        return pools


class InMemoryRouteStore:
    """Routes with a single baseline."""

    def __init__(self) -> None:
        self._routes: Dict[str, Route] = {}
        self._mutex = threading.Lock()

    def find_all(self, vessel_type: Optional[str] = None, fuel_type: Optional[str] = None,
                 year: Optional[int] = None) -> List[Route]:
        with self._mutex:
            routes = list(self._routes.values())

        if vessel_type:
            routes = [r for r in routes if r.vessel_type == vessel_type]
        if fuel_type:
            routes = [r for r in routes if r.fuel_type == fuel_type]
        if year is not None:
            routes = [r for r in routes if r.year == year]
        return routes

    def find_by_route_id(self, route_id: str) -> Optional[Route]:
        with self._mutex:
            return next((r for r in self._routes.values() if r.route_id == route_id), None)

    def create(self, route: Route) -> Route:
        with self._mutex:
            self._routes[route.id] = route
        return route

    def set_baseline(self, route_id: str) -> Route:
        """Mark one route as baseline and clear the flag on all others.

        Accepts either the storage id or the business route id.
        """
        with self._mutex:
            target = self._routes.get(route_id) or next(
                (r for r in self._routes.values() if r.route_id == route_id), None
            )
            if target is None:
                raise NotFoundError(route_id, what="Route")

            for key, route in self._routes.items():
                is_target = route.id == target.id
                if route.is_baseline != is_target:
                    self._routes[key] = route.model_copy(update={"is_baseline": is_target})

            baseline = self._routes[target.id]

        logger.info(f"Route {baseline.route_id} set as baseline")
        return baseline

    def find_baseline(self) -> Optional[Route]:
        with self._mutex:
            return next((r for r in self._routes.values() if r.is_baseline), None)
