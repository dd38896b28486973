"""
Reporting engine - aggregate views over the working copy.

Reports:
- airports served by an airline, ranked by non-stop route count
- airlines serving an airport, ranked by non-stop route count
- every coded airline / airport, ordered by IATA code
- table totals for the landing page

Counts only consider non-stop routes. A route whose source and
destination are the same airport counts that airport twice.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Union

from openflights.errors import NotFound
from openflights.models import UNKNOWN, Airline, Airport, normalize_code
from openflights.store import EntityStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RouteCount:
    """
    One row of a route-count report.

    `entity` is None when routes still mention a code the store no longer
    holds; such rows are reported as UNKNOWN rather than dropped.
    """
    code: str
    count: int
    entity: Optional[Union[Airport, Airline]] = None

    @property
    def name(self) -> str:
        return self.entity.name if self.entity is not None else UNKNOWN

    def to_dict(self) -> dict:
        row = {
            'code': self.code,
            'name': self.name,
            'routes': self.count,
        }
        if isinstance(self.entity, Airport):
            row['city'] = self.entity.city
            row['country'] = self.entity.country
        elif isinstance(self.entity, Airline):
            row['country'] = self.entity.country
        else:
            row['country'] = UNKNOWN
        return row


@dataclass
class RouteReport:
    """A ranked route-count report about one airline or airport."""
    subject: Union[Airport, Airline]
    rows: List[RouteCount]

    @property
    def total_routes(self) -> int:
        return sum(row.count for row in self.rows)

    def to_dict(self) -> dict:
        return {
            'subject': self.subject.to_summary_dict(),
            'rows': [row.to_dict() for row in self.rows],
            'count': len(self.rows),
        }


class ReportingEngine:
    """Aggregation queries against a store's working copy."""

    def __init__(self, store: EntityStore):
        self.store = store

    def airports_for_airline(self, code: str) -> RouteReport:
        """
        Airports on an airline's non-stop routes, busiest first.

        Each route adds one to its source and one to its destination.
        Raises NotFound if the airline code does not resolve.
        """
        airline_code = normalize_code(code)
        with self.store.lock:
            dataset = self.store.working
            airline = dataset.airline_by_code(airline_code)
            if airline is None:
                raise NotFound(f'Airline {airline_code or code!r} not found')

            counts: Counter = Counter()
            for route_id in dataset.route_ids_for_airline(airline_code):
                route = dataset.routes[route_id]
                if not route.is_nonstop:
                    continue
                if route.source_code:
                    counts[route.source_code] += 1
                if route.dest_code:
                    counts[route.dest_code] += 1

            rows = [
                RouteCount(code=airport_code, count=n, entity=dataset.airport_by_code(airport_code))
                for airport_code, n in counts.most_common()
            ]

        logger.debug(f'Airline {airline_code} serves {len(rows)} airports')
        return RouteReport(subject=airline, rows=rows)

    def airlines_for_airport(self, code: str) -> RouteReport:
        """
        Airlines flying non-stop routes into or out of an airport, busiest first.

        Raises NotFound if the airport code does not resolve.
        """
        airport_code = normalize_code(code)
        with self.store.lock:
            dataset = self.store.working
            airport = dataset.airport_by_code(airport_code)
            if airport is None:
                raise NotFound(f'Airport {airport_code or code!r} not found')

            counts: Counter = Counter()
            for route_id in dataset.route_ids_at_airport(airport_code):
                route = dataset.routes[route_id]
                if route.is_nonstop and route.airline_code:
                    counts[route.airline_code] += 1

            rows = [
                RouteCount(code=airline_code, count=n, entity=dataset.airline_by_code(airline_code))
                for airline_code, n in counts.most_common()
            ]

        logger.debug(f'Airport {airport_code} served by {len(rows)} airlines')
        return RouteReport(subject=airport, rows=rows)

    def airlines_by_code(self) -> List[Airline]:
        """Every airline that has an IATA code, ordered by code."""
        with self.store.lock:
            dataset = self.store.working
            airlines = [dataset.airlines[i] for i in dataset.airline_ids_by_code.values()]
        return sorted(airlines, key=lambda a: a.iata)

    def airports_by_code(self) -> List[Airport]:
        """Every airport that has an IATA code, ordered by code."""
        with self.store.lock:
            dataset = self.store.working
            airports = [dataset.airports[i] for i in dataset.airport_ids_by_code.values()]
        return sorted(airports, key=lambda a: a.iata)

    def summary(self) -> dict:
        """Table totals for the working copy and the baseline."""
        stats = self.store.stats
        working = stats['working']
        return {
            'airports': working['airports'],
            'airlines': working['airlines'],
            'routes': working['routes'],
            'baseline': stats['baseline'],
        }
