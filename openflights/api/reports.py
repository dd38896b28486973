"""
Report API endpoints.

Provides endpoints for:
- GET /api/reports/summary - Table totals
- GET /api/reports/airlines - All coded airlines ordered by IATA
- GET /api/reports/airports - All coded airports ordered by IATA
- GET /api/reports/airline-routes?iata= - Airports served by an airline
- GET /api/reports/airport-routes?iata= - Airlines serving an airport
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request

from openflights.config import config
from openflights.errors import ValidationError

logger = logging.getLogger(__name__)

reports_bp = Blueprint('reports', __name__, url_prefix='/api/reports')


def _limit() -> int:
    max_rows = config.api.max_report_rows
    return max(0, min(request.args.get('limit', max_rows, type=int), max_rows))


def _iata() -> str:
    code = request.args.get('iata', '').strip()
    if not code:
        raise ValidationError('Missing IATA parameter')
    return code


@reports_bp.route('/summary', methods=['GET'])
def summary():
    """Totals for the working copy and the bulk-loaded baseline."""
    return jsonify({
        'summary': current_app.config['REPORTS'].summary(),
        'timestamp': datetime.now(timezone.utc).isoformat(),
    })


@reports_bp.route('/airlines', methods=['GET'])
def list_airlines():
    """
    List airlines ordered by IATA code.

    Query parameters:
    - limit: max rows to return (capped by MAX_REPORT_ROWS)
    """
    start_time = time.perf_counter()

    airlines = current_app.config['REPORTS'].airlines_by_code()
    rows = [a.to_summary_dict() for a in airlines[:_limit()]]

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'airlines': rows,
        'total': len(airlines),
        'count': len(rows),
        'query_time_ms': round(query_time_ms, 2),
    })


@reports_bp.route('/airports', methods=['GET'])
def list_airports():
    """List airports ordered by IATA code."""
    start_time = time.perf_counter()

    airports = current_app.config['REPORTS'].airports_by_code()
    rows = [a.to_summary_dict() for a in airports[:_limit()]]

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'airports': rows,
        'total': len(airports),
        'count': len(rows),
        'query_time_ms': round(query_time_ms, 2),
    })


@reports_bp.route('/airline-routes', methods=['GET'])
def airline_routes():
    """Airports on an airline's non-stop routes, busiest first."""
    start_time = time.perf_counter()

    report = current_app.config['REPORTS'].airports_for_airline(_iata())

    result = report.to_dict()
    result['query_time_ms'] = round((time.perf_counter() - start_time) * 1000, 2)
    return jsonify(result)


@reports_bp.route('/airport-routes', methods=['GET'])
def airport_routes():
    """Airlines flying non-stop into or out of an airport, busiest first."""
    start_time = time.perf_counter()

    report = current_app.config['REPORTS'].airlines_for_airport(_iata())

    result = report.to_dict()
    result['query_time_ms'] = round((time.perf_counter() - start_time) * 1000, 2)
    return jsonify(result)
