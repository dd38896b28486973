"""
Airline record.

Fields mirror the OpenFlights airlines.dat columns:
id, name, alias, IATA, ICAO, callsign, country, active.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Airline:
    """A single airline. `active` is kept as the raw 'Y'/'N' token."""
    id: int
    name: str = ''
    alias: str = ''
    iata: Optional[str] = None
    icao: str = ''
    callsign: str = ''
    country: str = ''
    active: str = ''

    @property
    def is_active(self) -> bool:
        return self.active.upper() == 'Y'

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for API responses."""
        return {
            'id': self.id,
            'name': self.name,
            'alias': self.alias,
            'iata': self.iata,
            'icao': self.icao,
            'callsign': self.callsign,
            'country': self.country,
            'active': self.active,
        }

    def to_summary_dict(self) -> dict:
        """Minimal representation for report listings."""
        return {
            'iata': self.iata,
            'name': self.name,
            'country': self.country,
            'active': self.active,
        }
