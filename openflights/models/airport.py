"""
Airport record.

Fields mirror the OpenFlights airports.dat columns:
id, name, city, country, IATA, ICAO, latitude, longitude, altitude,
timezone, DST, tz database name, type, source.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Airport:
    """
    A single airport.

    Fields:
        id: OpenFlights numeric id, unique and immutable
        iata: 3-letter IATA code (uppercase), None when the airport has none
        latitude/longitude: decimal degrees
        altitude: feet
        timezone: hours offset from UTC
        dst: daylight saving rule (E, A, S, O, Z, N, U)
    """
    id: int
    name: str = ''
    city: str = ''
    country: str = ''
    iata: Optional[str] = None
    icao: str = ''
    latitude: float = 0.0
    longitude: float = 0.0
    altitude: int = 0
    timezone: float = 0.0
    dst: str = ''
    tz_database: str = ''
    type: str = ''
    source: str = ''

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for API responses."""
        return {
            'id': self.id,
            'name': self.name,
            'city': self.city,
            'country': self.country,
            'iata': self.iata,
            'icao': self.icao,
            'position': {
                'latitude': self.latitude,
                'longitude': self.longitude,
                'altitude_ft': self.altitude,
            },
            'time': {
                'utc_offset': self.timezone,
                'dst': self.dst,
                'tz_database': self.tz_database,
            },
            'type': self.type,
            'source': self.source,
        }

    def to_summary_dict(self) -> dict:
        """Minimal representation for report listings."""
        return {
            'iata': self.iata,
            'name': self.name,
            'city': self.city,
            'country': self.country,
        }
