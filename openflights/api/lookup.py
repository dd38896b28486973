"""
Lookup API endpoints.

Provides endpoints for:
- GET /api/airlines/<iata> - Airline by IATA code
- GET /api/airlines/id/<id> - Airline by OpenFlights id
- GET /api/airports/<iata> - Airport by IATA code
- GET /api/airports/id/<id> - Airport by OpenFlights id

Codes are case-insensitive.
"""

import logging

from flask import Blueprint, current_app, jsonify

logger = logging.getLogger(__name__)

lookup_bp = Blueprint('lookup', __name__, url_prefix='/api')


@lookup_bp.route('/airlines/<code>', methods=['GET'])
def get_airline(code: str):
    """Get a single airline by IATA code."""
    airline = current_app.config['ENTITY_STORE'].lookup_airline_by_code(code)
    return jsonify({'airline': airline.to_dict()})


@lookup_bp.route('/airlines/id/<int:airline_id>', methods=['GET'])
def get_airline_by_id(airline_id: int):
    airline = current_app.config['ENTITY_STORE'].lookup_airline_by_id(airline_id)
    return jsonify({'airline': airline.to_dict()})


@lookup_bp.route('/airports/<code>', methods=['GET'])
def get_airport(code: str):
    """Get a single airport by IATA code."""
    airport = current_app.config['ENTITY_STORE'].lookup_airport_by_code(code)
    return jsonify({'airport': airport.to_dict()})


@lookup_bp.route('/airports/id/<int:airport_id>', methods=['GET'])
def get_airport_by_id(airport_id: int):
    airport = current_app.config['ENTITY_STORE'].lookup_airport_by_id(airport_id)
    return jsonify({'airport': airport.to_dict()})
