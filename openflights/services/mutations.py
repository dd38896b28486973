"""
Mutation layer - insert, modify and delete on the working copy.

Every operation runs start to finish under the store lock, so the by-id
and by-code indices and the route table change together:
- inserts land in both indices or in neither
- deleting an airline or airport removes its routes in the same step

Request payloads are plain mappings (JSON bodies or form data). Codes are
normalized exactly as lookups normalize them.
"""

import dataclasses
import logging
import math
from typing import Any, Callable, Dict, Mapping, Tuple

from openflights.errors import (
    DuplicateCode,
    DuplicateId,
    InvalidReference,
    NotFound,
    ValidationError,
)
from openflights.models import Airline, Airport, Route, normalize_code
from openflights.store import EntityStore

logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_int(name: str, value: Any) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f'{name} must be an integer, got {value!r}')


def _parse_float(name: str, value: Any) -> float:
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f'{name} must be a number, got {value!r}')
    if not math.isfinite(number):
        raise ValidationError(f'{name} must be a finite number, got {value!r}')
    return number


def _degrees(limit: float) -> Callable[[str, Any], float]:
    """Parser for a coordinate that must lie within [-limit, limit]."""
    def parse(name: str, value: Any) -> float:
        number = _parse_float(name, value)
        if not -limit <= number <= limit:
            raise ValidationError(f'{name} must be between -{limit:g} and {limit:g}, got {value!r}')
        return number
    return parse


def _parse_text(name: str, value: Any) -> str:
    return str(value).strip()


# Editable, non-key fields and how to parse each one from a request value
AIRPORT_FIELDS: Dict[str, Callable[[str, Any], Any]] = {
    'name': _parse_text,
    'city': _parse_text,
    'country': _parse_text,
    'icao': _parse_text,
    'latitude': _degrees(90),
    'longitude': _degrees(180),
    'altitude': _parse_int,
    'timezone': _parse_float,
    'dst': _parse_text,
    'tz_database': _parse_text,
    'type': _parse_text,
    'source': _parse_text,
}

AIRLINE_FIELDS: Dict[str, Callable[[str, Any], Any]] = {
    'name': _parse_text,
    'alias': _parse_text,
    'icao': _parse_text,
    'callsign': _parse_text,
    'country': _parse_text,
    'active': _parse_text,
}

AIRPORT_REQUIRED = ('id', 'iata', 'name', 'city', 'country')
AIRLINE_REQUIRED = ('id', 'iata', 'name', 'country')
ROUTE_REQUIRED = ('airline', 'source', 'dest')


def _require(payload: Mapping[str, Any], names: Tuple[str, ...]) -> None:
    """Raise ValidationError listing every required field that is missing or blank."""
    missing = [name for name in names if _is_blank(payload.get(name))]
    if missing:
        raise ValidationError(f"Missing required parameters: {', '.join(missing)}")


def _require_code(payload: Mapping[str, Any], name: str = 'iata') -> str:
    code = normalize_code(payload.get(name))
    if code is None:
        raise ValidationError(f'Missing {name} parameter')
    return code


def _changes(
    payload: Mapping[str, Any],
    fields: Dict[str, Callable[[str, Any], Any]],
) -> Dict[str, Any]:
    """Parse the non-blank editable fields present in a payload."""
    return {
        name: parse(name, payload[name])
        for name, parse in fields.items()
        if name in payload and not _is_blank(payload[name])
    }


class MutationService:
    """
    Create/update/delete operations against a store's working copy.

    All failures are raised as OpenFlightsError subclasses; nothing is
    written when an operation fails.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    # -------------------------------------------------------------------------
    # Airports
    # -------------------------------------------------------------------------

    def insert_airport(self, payload: Mapping[str, Any]) -> Airport:
        """
        Insert a new airport.

        Required: id, iata, name, city, country. Any other airport field
        may be supplied as well.
        """
        _require(payload, AIRPORT_REQUIRED)
        airport = Airport(
            id=_parse_int('id', payload['id']),
            iata=_require_code(payload),
            **_changes(payload, AIRPORT_FIELDS),
        )

        with self.store.lock:
            dataset = self.store.working
            if airport.id in dataset.airports:
                raise DuplicateId(f'Airport id {airport.id} already exists')
            if airport.iata in dataset.airport_ids_by_code:
                raise DuplicateCode(f'Airport {airport.iata} already exists')
            dataset.put_airport(airport)

        logger.info(f'Inserted airport {airport.iata} (id {airport.id})')
        return airport

    def modify_airport(self, payload: Mapping[str, Any]) -> Airport:
        """
        Update an airport identified by its IATA code.

        Omitted or blank fields keep their current value. The code and
        the id cannot be changed.
        """
        code = _require_code(payload)
        changes = _changes(payload, AIRPORT_FIELDS)

        with self.store.lock:
            dataset = self.store.working
            airport = dataset.airport_by_code(code)
            if airport is None:
                raise NotFound(f'Airport {code} not found')
            updated = dataclasses.replace(airport, **changes)
            dataset.put_airport(updated)

        logger.info(f"Modified airport {code}: {', '.join(changes) or 'no changes'}")
        return updated

    def delete_airport(self, payload: Mapping[str, Any]) -> int:
        """
        Delete an airport and every route that starts or ends there.

        Returns count of routes removed with it.
        """
        code = _require_code(payload)

        with self.store.lock:
            dataset = self.store.working
            airport = dataset.airport_by_code(code)
            if airport is None:
                raise NotFound(f'Airport {code} not found')
            removed = dataset.remove_airport(airport)

        logger.info(f'Deleted airport {code} and {removed} routes')
        return removed

    # -------------------------------------------------------------------------
    # Airlines
    # -------------------------------------------------------------------------

    def insert_airline(self, payload: Mapping[str, Any]) -> Airline:
        """
        Insert a new airline.

        Required: id, iata, name, country.
        """
        _require(payload, AIRLINE_REQUIRED)
        airline = Airline(
            id=_parse_int('id', payload['id']),
            iata=_require_code(payload),
            **_changes(payload, AIRLINE_FIELDS),
        )

        with self.store.lock:
            dataset = self.store.working
            if airline.id in dataset.airlines:
                raise DuplicateId(f'Airline id {airline.id} already exists')
            if airline.iata in dataset.airline_ids_by_code:
                raise DuplicateCode(f'Airline {airline.iata} already exists')
            dataset.put_airline(airline)

        logger.info(f'Inserted airline {airline.iata} (id {airline.id})')
        return airline

    def modify_airline(self, payload: Mapping[str, Any]) -> Airline:
        """Update an airline identified by its IATA code. Partial update."""
        code = _require_code(payload)
        changes = _changes(payload, AIRLINE_FIELDS)

        with self.store.lock:
            dataset = self.store.working
            airline = dataset.airline_by_code(code)
            if airline is None:
                raise NotFound(f'Airline {code} not found')
            updated = dataclasses.replace(airline, **changes)
            dataset.put_airline(updated)

        logger.info(f"Modified airline {code}: {', '.join(changes) or 'no changes'}")
        return updated

    def delete_airline(self, payload: Mapping[str, Any]) -> int:
        """
        Delete an airline and every route it operates.

        Returns count of routes removed with it.
        """
        code = _require_code(payload)

        with self.store.lock:
            dataset = self.store.working
            airline = dataset.airline_by_code(code)
            if airline is None:
                raise NotFound(f'Airline {code} not found')
            removed = dataset.remove_airline(airline)

        logger.info(f'Deleted airline {code} and {removed} routes')
        return removed

    # -------------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------------

    def insert_route(self, payload: Mapping[str, Any]) -> Route:
        """
        Insert a route between two existing airports for an existing airline.

        Required: airline, source, dest. Optional: stops (default 0),
        codeshare, equipment. Duplicate routes are allowed.
        """
        _require(payload, ROUTE_REQUIRED)
        airline_code, source_code, dest_code = self._route_key(payload)

        stops = 0
        if not _is_blank(payload.get('stops')):
            stops = _parse_int('stops', payload['stops'])
            if stops < 0:
                raise ValidationError('stops must be zero or greater')

        with self.store.lock:
            dataset = self.store.working
            airline = dataset.airline_by_code(airline_code)
            if airline is None:
                raise InvalidReference(f'Airline {airline_code} not found')
            source = dataset.airport_by_code(source_code)
            dest = dataset.airport_by_code(dest_code)
            if source is None or dest is None:
                missing = source_code if source is None else dest_code
                raise InvalidReference(f'Airport {missing} not found')

            route = Route(
                airline_code=airline_code,
                airline_id=airline.id,
                source_code=source_code,
                source_id=source.id,
                dest_code=dest_code,
                dest_id=dest.id,
                codeshare=_parse_text('codeshare', payload.get('codeshare') or ''),
                stops=stops,
                equipment=_parse_text('equipment', payload.get('equipment') or ''),
            )
            dataset.add_route(route)

        logger.info(f'Inserted route {airline_code} {source_code}->{dest_code}')
        return route

    def delete_route(self, payload: Mapping[str, Any]) -> int:
        """
        Delete every route matching (airline, source, dest).

        Returns count of routes removed (at least one).
        """
        _require(payload, ROUTE_REQUIRED)
        airline_code, source_code, dest_code = self._route_key(payload)

        with self.store.lock:
            dataset = self.store.working
            matching = [
                route_id
                for route_id in dataset.route_ids_for_airline(airline_code)
                if dataset.routes[route_id].matches(airline_code, source_code, dest_code)
            ]
            if not matching:
                raise NotFound(
                    f'No route {airline_code} {source_code}->{dest_code} found'
                )
            for route_id in matching:
                dataset.remove_route(route_id)

        logger.info(
            f'Deleted {len(matching)} route(s) {airline_code} {source_code}->{dest_code}'
        )
        return len(matching)

    @staticmethod
    def _route_key(payload: Mapping[str, Any]) -> Tuple[str, str, str]:
        return (
            _require_code(payload, 'airline'),
            _require_code(payload, 'source'),
            _require_code(payload, 'dest'),
        )
