"""
Core services operating on the shared entity store.

- MutationService: inserts, partial updates and cascading deletes
- ConnectivityEngine: direct and one-hop route search
- ReportingEngine: route-count reports and code-ordered listings
"""

from openflights.services.connectivity import (
    ConnectionReport,
    ConnectivityEngine,
    Itinerary,
    OperatingAirline,
    haversine_miles,
)
from openflights.services.mutations import MutationService
from openflights.services.reports import ReportingEngine, RouteCount, RouteReport

__all__ = [
    'ConnectionReport',
    'ConnectivityEngine',
    'Itinerary',
    'OperatingAirline',
    'haversine_miles',
    'MutationService',
    'ReportingEngine',
    'RouteCount',
    'RouteReport',
]
