"""
Connectivity engine - direct and one-stop route search.

Answers "how do I get from A to B" over the working copy's non-stop
routes:
- direct: every non-stop route A -> B
- one hop: every A -> X -> B pair of non-stop legs, ranked by total
  great-circle distance

Distances use the haversine formula on a spherical Earth of radius
3958.8 miles. Candidate distances are computed as one NumPy array and
ranked with a stable sort, so equal distances keep discovery order.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from openflights.errors import AirportNotFound
from openflights.models import UNKNOWN, Airport, Route, normalize_code
from openflights.store import Dataset, EntityStore

logger = logging.getLogger(__name__)

EARTH_RADIUS_MILES = 3958.8


def haversine_miles(lat1, lon1, lat2, lon2):
    """
    Calculate great-circle distance in miles between decimal-degree points.

    Accepts scalars or NumPy arrays (broadcast elementwise). Scalar inputs
    return a plain float.
    """
    lat1_rad = np.radians(lat1)
    lat2_rad = np.radians(lat2)
    delta_lat = np.radians(np.subtract(lat2, lat1))
    delta_lon = np.radians(np.subtract(lon2, lon1))

    a = (
        np.sin(delta_lat / 2) ** 2 +
        np.cos(lat1_rad) * np.cos(lat2_rad) *
        np.sin(delta_lon / 2) ** 2
    )
    # Clamp rounding error near antipodal points
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    distance = EARTH_RADIUS_MILES * c
    if np.ndim(distance) == 0:
        return float(distance)
    return distance


@dataclass(frozen=True)
class OperatingAirline:
    """Airline flying one leg. `name` is UNKNOWN when it cannot be resolved."""
    code: Optional[str]
    name: str = UNKNOWN

    @property
    def is_known(self) -> bool:
        return self.name != UNKNOWN

    def to_dict(self) -> dict:
        return {'code': self.code or UNKNOWN, 'name': self.name}


@dataclass(frozen=True)
class Itinerary:
    """One-stop itinerary source -> intermediate -> destination."""
    source: str
    intermediate: str
    destination: str
    first_airline: OperatingAirline
    second_airline: OperatingAirline
    first_leg_miles: float
    second_leg_miles: float

    @property
    def distance_miles(self) -> float:
        return self.first_leg_miles + self.second_leg_miles

    @property
    def display_distance(self) -> int:
        """Total distance truncated to whole miles."""
        return int(self.distance_miles)

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for API responses."""
        return {
            'path': [self.source, self.intermediate, self.destination],
            'intermediate': self.intermediate,
            'airlines': [self.first_airline.to_dict(), self.second_airline.to_dict()],
            'legs_miles': [round(self.first_leg_miles, 1), round(self.second_leg_miles, 1)],
            'distance_miles': self.display_distance,
        }


@dataclass
class ConnectionReport:
    """Everything known about getting from one airport to another."""
    source: Airport
    destination: Airport
    direct_routes: List[Route] = field(default_factory=list)
    itineraries: List[Itinerary] = field(default_factory=list)

    @property
    def has_direct_route(self) -> bool:
        return bool(self.direct_routes)

    @property
    def direct_miles(self) -> float:
        # Safe outside the store lock: source and destination are frozen records
        return haversine_miles(
            self.source.latitude, self.source.longitude,
            self.destination.latitude, self.destination.longitude,
        )

    def to_dict(self) -> dict:
        return {
            'source': self.source.iata,
            'destination': self.destination.iata,
            'direct': {
                'exists': self.has_direct_route,
                'distance_miles': int(self.direct_miles),
                'routes': [r.to_dict() for r in self.direct_routes],
            },
            'one_hop': [i.to_dict() for i in self.itineraries],
            'count': len(self.itineraries),
        }


class ConnectivityEngine:
    """
    Route search over a store's working copy.

    Each search holds the store lock while it reads, so it sees one
    consistent snapshot even while edits are being made.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    def direct_routes(self, source: str, destination: str) -> List[Route]:
        """Non-stop routes from source to destination, in load order."""
        with self.store.lock:
            dataset = self.store.working
            src, dst = self._resolve_endpoints(dataset, source, destination)
            return self._direct(dataset, src.iata, dst.iata)

    def has_direct_route(self, source: str, destination: str) -> bool:
        return bool(self.direct_routes(source, destination))

    def one_hop(self, source: str, destination: str) -> List[Itinerary]:
        """
        Find every one-stop itinerary from source to destination.

        Both legs must be non-stop routes. Results are sorted by total
        distance, shortest first. Raises AirportNotFound if either code
        does not resolve; an empty list means no itinerary exists.
        """
        with self.store.lock:
            dataset = self.store.working
            src, dst = self._resolve_endpoints(dataset, source, destination)
            return self._one_hop(dataset, src, dst)

    def search(self, source: str, destination: str) -> ConnectionReport:
        """Direct routes and one-hop itineraries in a single snapshot."""
        with self.store.lock:
            dataset = self.store.working
            src, dst = self._resolve_endpoints(dataset, source, destination)
            return ConnectionReport(
                source=src,
                destination=dst,
                direct_routes=self._direct(dataset, src.iata, dst.iata),
                itineraries=self._one_hop(dataset, src, dst),
            )

    @staticmethod
    def _resolve_endpoints(
        dataset: Dataset,
        source: str,
        destination: str,
    ) -> Tuple[Airport, Airport]:
        source_code = normalize_code(source)
        dest_code = normalize_code(destination)
        src = dataset.airport_by_code(source_code)
        dst = dataset.airport_by_code(dest_code)
        if src is None or dst is None:
            missing = [
                code or repr(raw)
                for code, raw, airport in (
                    (source_code, source, src),
                    (dest_code, destination, dst),
                )
                if airport is None
            ]
            raise AirportNotFound(f"Airport not found: {', '.join(missing)}")
        return src, dst

    @staticmethod
    def _direct(dataset: Dataset, source_code: str, dest_code: str) -> List[Route]:
        return [
            route for route in dataset.routes_from(source_code)
            if route.is_nonstop and route.dest_code == dest_code
        ]

    def _one_hop(self, dataset: Dataset, src: Airport, dst: Airport) -> List[Itinerary]:
        nonstop_out = [r for r in dataset.routes_from(src.iata) if r.is_nonstop]

        # Distinct intermediates, visited in code order
        intermediates = sorted({r.dest_code for r in nonstop_out if r.dest_code})

        # (intermediate airport, first leg airline, second leg airline)
        candidates: List[Tuple[Airport, OperatingAirline, OperatingAirline]] = []
        for code in intermediates:
            second_legs = [
                r for r in dataset.routes_from(code)
                if r.is_nonstop and r.dest_code == dst.iata
            ]
            if not second_legs:
                continue

            hub = dataset.airport_by_code(code)
            if hub is None:
                # No coordinates for a code that is not in the store
                logger.debug(f'Skipping intermediate {code}: airport not in store')
                continue

            first_leg = next((r for r in nonstop_out if r.dest_code == code), None)
            first_airline = self._operating_airline(dataset, first_leg)
            for leg in second_legs:
                candidates.append((hub, first_airline, self._operating_airline(dataset, leg)))

        if not candidates:
            return []

        hub_lats = np.array([hub.latitude for hub, _, _ in candidates], dtype=np.float64)
        hub_lons = np.array([hub.longitude for hub, _, _ in candidates], dtype=np.float64)
        first_miles = haversine_miles(src.latitude, src.longitude, hub_lats, hub_lons)
        second_miles = haversine_miles(hub_lats, hub_lons, dst.latitude, dst.longitude)

        order = np.argsort(first_miles + second_miles, kind='stable')

        itineraries = []
        for index in order:
            hub, first_airline, second_airline = candidates[index]
            itineraries.append(Itinerary(
                source=src.iata,
                intermediate=hub.iata,
                destination=dst.iata,
                first_airline=first_airline,
                second_airline=second_airline,
                first_leg_miles=float(first_miles[index]),
                second_leg_miles=float(second_miles[index]),
            ))

        logger.debug(f'{src.iata}->{dst.iata}: {len(itineraries)} one-hop itineraries')
        return itineraries

    @staticmethod
    def _operating_airline(dataset: Dataset, route: Optional[Route]) -> OperatingAirline:
        if route is None:
            return OperatingAirline(code=None)
        airline = dataset.airline_by_code(route.airline_code)
        if airline is None:
            return OperatingAirline(code=route.airline_code)
        return OperatingAirline(code=airline.iata, name=airline.name)
