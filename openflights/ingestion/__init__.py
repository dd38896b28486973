"""
Data ingestion module for OpenFlights.

Reads the OpenFlights airports.dat, airlines.dat and routes.dat files and
loads them into the entity store as the baseline snapshot.
"""

from openflights.ingestion.loader import (
    LoadResult,
    load_dataset,
    load_into,
    parse_airlines,
    parse_airports,
    parse_record,
    parse_routes,
)

__all__ = [
    'LoadResult',
    'load_dataset',
    'load_into',
    'parse_airlines',
    'parse_airports',
    'parse_record',
    'parse_routes',
]
