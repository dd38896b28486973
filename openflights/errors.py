"""
Error kinds raised by the entity store and services.

Every error is a validation or lookup failure the caller can recover
from. Empty reports and empty itinerary lists are results, not errors.
"""


class OpenFlightsError(Exception):
    """Base class for all recoverable OpenFlights errors."""

    status_code = 400
    kind = 'error'

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for API responses."""
        return {
            'error': self.kind,
            'message': self.message,
        }


class NotFound(OpenFlightsError):
    """Lookup, modify or delete target does not exist."""
    status_code = 404
    kind = 'not_found'


class AirportNotFound(NotFound):
    """Connectivity search endpoint does not resolve to an airport."""
    kind = 'airport_not_found'


class DuplicateId(OpenFlightsError):
    """Insert collides with an existing numeric id."""
    status_code = 409
    kind = 'duplicate_id'


class DuplicateCode(OpenFlightsError):
    """Insert collides with an existing IATA code."""
    status_code = 409
    kind = 'duplicate_code'


class InvalidReference(OpenFlightsError):
    """Route insert points at an airline or airport that does not exist."""
    status_code = 422
    kind = 'invalid_reference'


class ValidationError(OpenFlightsError):
    """Missing, empty or malformed field in a mutation request."""
    status_code = 400
    kind = 'validation_error'
