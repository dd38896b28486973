"""
API module for OpenFlights.

Provides REST endpoints for:
- Airline and airport lookups
- Direct and one-hop connections
- Route-count reports and listings
- Session edits (insert, modify, delete, reset)
"""

from openflights.api.connections import connections_bp
from openflights.api.lookup import lookup_bp
from openflights.api.manage import manage_bp
from openflights.api.reports import reports_bp

__all__ = ['connections_bp', 'lookup_bp', 'manage_bp', 'reports_bp']
