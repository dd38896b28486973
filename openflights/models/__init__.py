"""
Entity models for OpenFlights.

Frozen dataclasses for the three OpenFlights tables. The entity store owns
every instance; edits swap in a new record instead of changing one in place.
"""

from openflights.models.base import NULL_TOKEN, UNKNOWN, normalize_code, clean_text
from openflights.models.airport import Airport
from openflights.models.airline import Airline
from openflights.models.route import Route

__all__ = [
    'NULL_TOKEN',
    'UNKNOWN',
    'normalize_code',
    'clean_text',
    'Airport',
    'Airline',
    'Route',
]
