"""
Route record.

Fields mirror the OpenFlights routes.dat columns:
airline, airline id, source airport, source airport id,
destination airport, destination airport id, codeshare, stops, equipment.

Routes reference airlines and airports by code. Bulk-loaded routes are not
checked against the other tables; routes inserted through the mutation
layer are.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Route:
    """A single airline route between two airports."""
    airline_code: Optional[str]
    source_code: Optional[str]
    dest_code: Optional[str]
    airline_id: int = 0
    source_id: int = 0
    dest_id: int = 0
    codeshare: str = ''
    stops: int = 0
    equipment: str = ''

    @property
    def is_nonstop(self) -> bool:
        """Direct flight with no intermediate stops."""
        return self.stops == 0

    def matches(self, airline_code: str, source_code: str, dest_code: str) -> bool:
        """Check whether this route carries the given (airline, source, dest) triple."""
        return (
            self.airline_code == airline_code and
            self.source_code == source_code and
            self.dest_code == dest_code
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for API responses."""
        return {
            'airline': self.airline_code,
            'airline_id': self.airline_id,
            'source': self.source_code,
            'source_id': self.source_id,
            'destination': self.dest_code,
            'destination_id': self.dest_id,
            'codeshare': self.codeshare,
            'stops': self.stops,
            'equipment': self.equipment,
        }
