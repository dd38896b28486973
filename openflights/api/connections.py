"""
Connection search API endpoints.

Provides endpoints for:
- GET /api/connections/direct?source=&dest= - Non-stop routes A -> B
- GET /api/connections/onehop?source=&dest= - One-stop itineraries A -> X -> B
- GET /api/connections/search?source=&dest= - Both in one response

An unknown airport is a 404; no itinerary is a 200 with an empty list.
"""

import logging
import time
from typing import Tuple

from flask import Blueprint, current_app, jsonify, request

from openflights.errors import ValidationError

logger = logging.getLogger(__name__)

connections_bp = Blueprint('connections', __name__, url_prefix='/api/connections')


def _endpoints() -> Tuple[str, str]:
    source = request.args.get('source', '').strip()
    dest = request.args.get('dest', '').strip()
    if not source or not dest:
        raise ValidationError('source and dest query parameters are required')
    return source, dest


@connections_bp.route('/direct', methods=['GET'])
def direct_routes():
    """List non-stop routes from source to dest."""
    start_time = time.perf_counter()
    source, dest = _endpoints()

    routes = current_app.config['CONNECTIVITY'].direct_routes(source, dest)

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'source': source.upper(),
        'destination': dest.upper(),
        'exists': bool(routes),
        'routes': [r.to_dict() for r in routes],
        'count': len(routes),
        'query_time_ms': round(query_time_ms, 2),
    })


@connections_bp.route('/onehop', methods=['GET'])
def one_hop():
    """
    Find one-stop itineraries, shortest total distance first.

    Query parameters:
    - source: origin IATA code
    - dest: destination IATA code
    """
    start_time = time.perf_counter()
    source, dest = _endpoints()

    itineraries = current_app.config['CONNECTIVITY'].one_hop(source, dest)

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'source': source.upper(),
        'destination': dest.upper(),
        'itineraries': [i.to_dict() for i in itineraries],
        'count': len(itineraries),
        'query_time_ms': round(query_time_ms, 2),
    })


@connections_bp.route('/search', methods=['GET'])
def search():
    """Direct routes and one-stop itineraries together."""
    start_time = time.perf_counter()
    source, dest = _endpoints()

    report = current_app.config['CONNECTIVITY'].search(source, dest)

    result = report.to_dict()
    result['query_time_ms'] = round((time.perf_counter() - start_time) * 1000, 2)
    return jsonify(result)
