"""
In-memory entity store for airports, airlines and routes.

Holds two snapshots of the OpenFlights tables:
- baseline: the bulk-loaded data, never edited after load
- working copy: a deep copy of the baseline that every query and edit
  operates on, so session edits can be thrown away with reset()

Each snapshot is an arena of records keyed by numeric id. The by-code
indices hold ids rather than records, so a record lives in exactly one
place and the two indices cannot drift apart. Routes are keyed by a
store-assigned sequence number that also preserves load order.

Thread safety:
One RLock guards the working copy. The services take the same lock for
the whole of a multi-step operation (for example a cascade delete), so a
reader never observes a half-applied edit.
"""

import copy
import dataclasses
import logging
import threading
import time
from typing import Dict, Iterable, Iterator, List, Optional, Set

from openflights.errors import NotFound
from openflights.models import Airline, Airport, Route, normalize_code

logger = logging.getLogger(__name__)


class Dataset:
    """
    One consistent snapshot of the three tables and their indices.

    Not thread-safe on its own; EntityStore serializes access.
    """

    def __init__(self):
        self.airports: Dict[int, Airport] = {}
        self.airport_ids_by_code: Dict[str, int] = {}
        self.airlines: Dict[int, Airline] = {}
        self.airline_ids_by_code: Dict[str, int] = {}
        self.routes: Dict[int, Route] = {}

        # Reverse indices backing cascade deletes: code -> route ids
        self.route_ids_by_airport: Dict[str, Set[int]] = {}
        self.route_ids_by_airline: Dict[str, Set[int]] = {}

        self._next_route_id = 1

    # -------------------------------------------------------------------------
    # Airports
    # -------------------------------------------------------------------------

    def airport_by_code(self, code: Optional[str]) -> Optional[Airport]:
        airport_id = self.airport_ids_by_code.get(code) if code else None
        if airport_id is None:
            return None
        return self.airports.get(airport_id)

    def put_airport(self, airport: Airport) -> None:
        """
        Insert or replace an airport in both indices.

        A record replacing an older one with the same id takes over its
        slot; the older record's code entry is dropped if it still points
        at that id. A later record with an already-indexed code takes the
        code over, matching how the bulk files are read (last row wins);
        the record it shadows keeps its slot but loses the code.
        """
        previous = self.airports.get(airport.id)
        if previous is not None and previous.iata:
            if self.airport_ids_by_code.get(previous.iata) == previous.id:
                del self.airport_ids_by_code[previous.iata]

        if airport.iata:
            owner_id = self.airport_ids_by_code.get(airport.iata)
            if owner_id is not None and owner_id != airport.id:
                shadowed = self.airports[owner_id]
                self.airports[owner_id] = dataclasses.replace(shadowed, iata=None)
                logger.debug(f'Airport code {airport.iata} moved from id {owner_id} to {airport.id}')
            self.airport_ids_by_code[airport.iata] = airport.id
        self.airports[airport.id] = airport

    def remove_airport(self, airport: Airport) -> int:
        """
        Remove an airport and every route that starts or ends at it.

        Returns count of routes removed.
        """
        self.airports.pop(airport.id, None)
        if airport.iata and self.airport_ids_by_code.get(airport.iata) == airport.id:
            del self.airport_ids_by_code[airport.iata]

        if not airport.iata:
            return 0
        route_ids = list(self.route_ids_by_airport.get(airport.iata, ()))
        for route_id in route_ids:
            self.remove_route(route_id)
        return len(route_ids)

    # -------------------------------------------------------------------------
    # Airlines
    # -------------------------------------------------------------------------

    def airline_by_code(self, code: Optional[str]) -> Optional[Airline]:
        airline_id = self.airline_ids_by_code.get(code) if code else None
        if airline_id is None:
            return None
        return self.airlines.get(airline_id)

    def put_airline(self, airline: Airline) -> None:
        """Insert or replace an airline in both indices. See put_airport."""
        previous = self.airlines.get(airline.id)
        if previous is not None and previous.iata:
            if self.airline_ids_by_code.get(previous.iata) == previous.id:
                del self.airline_ids_by_code[previous.iata]

        if airline.iata:
            owner_id = self.airline_ids_by_code.get(airline.iata)
            if owner_id is not None and owner_id != airline.id:
                shadowed = self.airlines[owner_id]
                self.airlines[owner_id] = dataclasses.replace(shadowed, iata=None)
                logger.debug(f'Airline code {airline.iata} moved from id {owner_id} to {airline.id}')
            self.airline_ids_by_code[airline.iata] = airline.id
        self.airlines[airline.id] = airline

    def remove_airline(self, airline: Airline) -> int:
        """
        Remove an airline and every route it operates.

        Returns count of routes removed.
        """
        self.airlines.pop(airline.id, None)
        if airline.iata and self.airline_ids_by_code.get(airline.iata) == airline.id:
            del self.airline_ids_by_code[airline.iata]

        if not airline.iata:
            return 0
        route_ids = list(self.route_ids_by_airline.get(airline.iata, ()))
        for route_id in route_ids:
            self.remove_route(route_id)
        return len(route_ids)

    # -------------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------------

    def add_route(self, route: Route) -> int:
        """Append a route and index it. Returns the assigned route id."""
        route_id = self._next_route_id
        self._next_route_id += 1

        self.routes[route_id] = route
        for code in {route.source_code, route.dest_code}:
            if code:
                self.route_ids_by_airport.setdefault(code, set()).add(route_id)
        if route.airline_code:
            self.route_ids_by_airline.setdefault(route.airline_code, set()).add(route_id)

        return route_id

    def remove_route(self, route_id: int) -> Optional[Route]:
        """Remove one route from the table and from both reverse indices."""
        route = self.routes.pop(route_id, None)
        if route is None:
            return None

        for code in {route.source_code, route.dest_code}:
            if code:
                _discard(self.route_ids_by_airport, code, route_id)
        if route.airline_code:
            _discard(self.route_ids_by_airline, route.airline_code, route_id)

        return route

    def route_ids_at_airport(self, code: str) -> List[int]:
        """Route ids touching an airport, in load order."""
        return sorted(self.route_ids_by_airport.get(code, ()))

    def route_ids_for_airline(self, code: str) -> List[int]:
        """Route ids operated by an airline, in load order."""
        return sorted(self.route_ids_by_airline.get(code, ()))

    def routes_from(self, code: str) -> List[Route]:
        """Routes whose source is the given airport, in load order."""
        return [
            self.routes[route_id]
            for route_id in self.route_ids_at_airport(code)
            if self.routes[route_id].source_code == code
        ]

    def copy(self) -> 'Dataset':
        """Deep copy; edits to the copy never reach the original."""
        return copy.deepcopy(self)

    @property
    def stats(self) -> dict:
        return {
            'airports': len(self.airports),
            'airports_with_code': len(self.airport_ids_by_code),
            'airlines': len(self.airlines),
            'airlines_with_code': len(self.airline_ids_by_code),
            'routes': len(self.routes),
        }


def _discard(index: Dict[str, Set[int]], code: str, route_id: int) -> None:
    ids = index.get(code)
    if ids is None:
        return
    ids.discard(route_id)
    if not ids:
        del index[code]


class EntityStore:
    """
    Thread-safe owner of the baseline and working-copy datasets.

    Lookups and listings read the working copy. The mutation, connectivity
    and reporting services hold `lock` while they work on `working`.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._baseline = Dataset()
        self._working = Dataset()
        self._loaded_at: float = 0
        self._session_started_at: float = 0

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def working(self) -> Dataset:
        """
        The mutable working copy.

        Only valid while holding `lock`; reset() swaps in a fresh dataset.
        """
        return self._working

    @property
    def baseline(self) -> Dataset:
        """The bulk-loaded snapshot. Read-only by contract."""
        return self._baseline

    def load(
        self,
        airports: Iterable[Airport],
        airlines: Iterable[Airline],
        routes: Iterable[Route],
    ) -> dict:
        """
        Replace the baseline with bulk-loaded records and start a new session.

        Returns the baseline's stats.
        """
        dataset = Dataset()
        for airport in airports:
            dataset.put_airport(airport)
        for airline in airlines:
            dataset.put_airline(airline)
        for route in routes:
            dataset.add_route(route)

        with self._lock:
            self._baseline = dataset
            self._loaded_at = time.time()
            self.begin_session()

        stats = dataset.stats
        logger.info(
            f"Baseline loaded: {stats['airports']} airports, "
            f"{stats['airlines']} airlines, {stats['routes']} routes"
        )
        return stats

    def begin_session(self) -> None:
        """Clone the baseline into a fresh working copy."""
        with self._lock:
            self._working = self._baseline.copy()
            self._session_started_at = time.time()

    def reset(self) -> dict:
        """
        Discard every edit made to the working copy.

        Returns the working copy's stats after the reset.
        """
        with self._lock:
            self.begin_session()
            stats = self._working.stats
        logger.info('Working copy reset to baseline')
        return stats

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def lookup_airport_by_code(self, code: Optional[str]) -> Airport:
        """Look up an airport by IATA code (case-insensitive)."""
        normalized = normalize_code(code)
        with self._lock:
            airport = self._working.airport_by_code(normalized)
        if airport is None:
            raise NotFound(f'Airport {normalized or code!r} not found')
        return airport

    def lookup_airline_by_code(self, code: Optional[str]) -> Airline:
        """Look up an airline by IATA code (case-insensitive)."""
        normalized = normalize_code(code)
        with self._lock:
            airline = self._working.airline_by_code(normalized)
        if airline is None:
            raise NotFound(f'Airline {normalized or code!r} not found')
        return airline

    def lookup_airport_by_id(self, airport_id: int) -> Airport:
        with self._lock:
            airport = self._working.airports.get(airport_id)
        if airport is None:
            raise NotFound(f'Airport id {airport_id} not found')
        return airport

    def lookup_airline_by_id(self, airline_id: int) -> Airline:
        with self._lock:
            airline = self._working.airlines.get(airline_id)
        if airline is None:
            raise NotFound(f'Airline id {airline_id} not found')
        return airline

    # -------------------------------------------------------------------------
    # Listings
    #
    # Each listing copies the current values under the lock and iterates
    # that copy, so a caller walking the sequence sees one snapshot even if
    # an edit lands midway.
    # -------------------------------------------------------------------------

    def all_airports(self) -> Iterator[Airport]:
        with self._lock:
            snapshot = list(self._working.airports.values())
        return iter(snapshot)

    def all_airlines(self) -> Iterator[Airline]:
        with self._lock:
            snapshot = list(self._working.airlines.values())
        return iter(snapshot)

    def all_routes(self) -> Iterator[Route]:
        with self._lock:
            snapshot = list(self._working.routes.values())
        return iter(snapshot)

    @property
    def stats(self) -> dict:
        """Get store statistics."""
        with self._lock:
            return {
                'working': self._working.stats,
                'baseline': self._baseline.stats,
                'loaded_at': self._loaded_at,
                'session_started_at': self._session_started_at,
            }
