"""
OpenFlights bulk loader.

Parses the comma-separated .dat files published by OpenFlights. Fields
may be double-quoted; NULL is written as a bare \\N.

Data quality issues are absorbed rather than raised:
- rows with too few columns are skipped
- numeric fields that fail to parse become 0
- a \\N or empty code means the entity has no code and is not indexed by it

Usage:
    from openflights.ingestion import load_into

    result = load_into(store)
    print(result.airports)  # 7698
"""

import csv
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from openflights.config import DataConfig, config
from openflights.models import Airline, Airport, Route, clean_text, normalize_code

logger = logging.getLogger(__name__)

# Minimum column counts per file
AIRPORT_COLUMNS = 14
AIRLINE_COLUMNS = 8
ROUTE_COLUMNS = 9


def safe_int(value: Optional[str], default: int = 0) -> int:
    """Parse an integer field, falling back to default ('\\N', '', junk)."""
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        return default


def safe_float(value: Optional[str], default: float = 0.0) -> float:
    """Parse a float field, falling back to default. NaN and infinities count as junk."""
    if value is None:
        return default
    try:
        number = float(value)
    except ValueError:
        return default
    return number if math.isfinite(number) else default


def _clean_fields(row: List[str]) -> List[str]:
    # Strip surrounding whitespace and any stray quote characters
    return [f.strip().strip('"').strip() for f in row]


def parse_record(line: str) -> List[str]:
    """Split one line into trimmed fields, honoring double quotes."""
    rows = list(csv.reader([line]))
    return _clean_fields(rows[0]) if rows else []


def _records(lines: Iterable[str]) -> Iterator[List[str]]:
    for row in csv.reader(lines):
        yield _clean_fields(row)


def parse_airports(lines: Iterable[str]) -> Iterator[Airport]:
    """
    Parse airports.dat lines.

    Columns: id, name, city, country, IATA, ICAO, latitude, longitude,
    altitude, timezone, DST, tz database, type, source
    """
    for fields in _records(lines):
        if len(fields) < AIRPORT_COLUMNS:
            logger.debug(f'Skipping short airport record ({len(fields)} fields)')
            continue

        yield Airport(
            id=safe_int(fields[0]),
            name=clean_text(fields[1]),
            city=clean_text(fields[2]),
            country=clean_text(fields[3]),
            iata=normalize_code(fields[4]),
            icao=clean_text(fields[5]),
            latitude=safe_float(fields[6]),
            longitude=safe_float(fields[7]),
            altitude=safe_int(fields[8]),
            timezone=safe_float(fields[9]),
            dst=clean_text(fields[10]),
            tz_database=clean_text(fields[11]),
            type=clean_text(fields[12]),
            source=clean_text(fields[13]),
        )


def parse_airlines(lines: Iterable[str]) -> Iterator[Airline]:
    """
    Parse airlines.dat lines.

    Columns: id, name, alias, IATA, ICAO, callsign, country, active
    """
    for fields in _records(lines):
        if len(fields) < AIRLINE_COLUMNS:
            logger.debug(f'Skipping short airline record ({len(fields)} fields)')
            continue

        yield Airline(
            id=safe_int(fields[0]),
            name=clean_text(fields[1]),
            alias=clean_text(fields[2]),
            iata=normalize_code(fields[3]),
            icao=clean_text(fields[4]),
            callsign=clean_text(fields[5]),
            country=clean_text(fields[6]),
            active=clean_text(fields[7]),
        )


def parse_routes(lines: Iterable[str]) -> Iterator[Route]:
    """
    Parse routes.dat lines.

    Columns: airline, airline id, source airport, source airport id,
    destination airport, destination airport id, codeshare, stops, equipment
    """
    for fields in _records(lines):
        if len(fields) < ROUTE_COLUMNS:
            logger.debug(f'Skipping short route record ({len(fields)} fields)')
            continue

        yield Route(
            airline_code=normalize_code(fields[0]),
            airline_id=safe_int(fields[1]),
            source_code=normalize_code(fields[2]),
            source_id=safe_int(fields[3]),
            dest_code=normalize_code(fields[4]),
            dest_id=safe_int(fields[5]),
            codeshare=clean_text(fields[6]),
            stops=safe_int(fields[7]),
            equipment=clean_text(fields[8]),
        )


@dataclass
class LoadResult:
    """Records read from the three bulk files."""
    airports: List[Airport] = field(default_factory=list)
    airlines: List[Airline] = field(default_factory=list)
    routes: List[Route] = field(default_factory=list)

    @property
    def counts(self) -> dict:
        return {
            'airports': len(self.airports),
            'airlines': len(self.airlines),
            'routes': len(self.routes),
        }


def _read_file(path: Path, parser) -> list:
    if not path.exists():
        logger.error(f'Data file not found: {path}')
        return []

    logger.info(f'Loading {path}')
    with open(path, 'r', encoding='utf-8', errors='ignore', newline='') as f:
        records = list(parser(f))
    logger.info(f'Loaded {len(records)} records from {path.name}')
    return records


def load_dataset(data_config: Optional[DataConfig] = None) -> LoadResult:
    """Read all three bulk files. Missing files load as empty tables."""
    data_config = data_config or config.data
    return LoadResult(
        airports=_read_file(data_config.airports_path, parse_airports),
        airlines=_read_file(data_config.airlines_path, parse_airlines),
        routes=_read_file(data_config.routes_path, parse_routes),
    )


def load_into(store, data_config: Optional[DataConfig] = None) -> LoadResult:
    """
    Load the bulk files into a store's baseline and start a session.

    Returns the LoadResult so callers can report what was read.
    """
    result = load_dataset(data_config)
    store.load(result.airports, result.airlines, result.routes)
    return result
