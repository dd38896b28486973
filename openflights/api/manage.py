"""
Data management API endpoints.

Edits apply to the session working copy only; the bulk-loaded baseline
is untouched and POST /api/manage/reset restores it.

Provides endpoints for:
- POST /api/manage/airline/{insert,modify,delete}
- POST /api/manage/airport/{insert,modify,delete}
- POST /api/manage/route/{insert,delete}
- POST /api/manage/reset

Bodies may be JSON or form-encoded. Modify only changes the fields that
are present and non-empty.
"""

import logging
from typing import Any, Mapping

from flask import Blueprint, current_app, jsonify, request

logger = logging.getLogger(__name__)

manage_bp = Blueprint('manage', __name__, url_prefix='/api/manage')


def _payload() -> Mapping[str, Any]:
    """Request body as a mapping, from JSON or form data."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form


def _mutations():
    return current_app.config['MUTATIONS']


# -----------------------------------------------------------------------------
# Airlines
# -----------------------------------------------------------------------------

@manage_bp.route('/airline/insert', methods=['POST'])
def insert_airline():
    airline = _mutations().insert_airline(_payload())
    return jsonify({
        'success': True,
        'airline': airline.to_dict(),
        'message': 'Airline inserted successfully',
    }), 201


@manage_bp.route('/airline/modify', methods=['POST'])
def modify_airline():
    airline = _mutations().modify_airline(_payload())
    return jsonify({
        'success': True,
        'airline': airline.to_dict(),
        'message': 'Airline modified successfully',
    })


@manage_bp.route('/airline/delete', methods=['POST'])
def delete_airline():
    removed = _mutations().delete_airline(_payload())
    return jsonify({
        'success': True,
        'routes_removed': removed,
        'message': 'Airline and all related routes deleted',
    })


# -----------------------------------------------------------------------------
# Airports
# -----------------------------------------------------------------------------

@manage_bp.route('/airport/insert', methods=['POST'])
def insert_airport():
    airport = _mutations().insert_airport(_payload())
    return jsonify({
        'success': True,
        'airport': airport.to_dict(),
        'message': 'Airport inserted successfully',
    }), 201


@manage_bp.route('/airport/modify', methods=['POST'])
def modify_airport():
    airport = _mutations().modify_airport(_payload())
    return jsonify({
        'success': True,
        'airport': airport.to_dict(),
        'message': 'Airport modified successfully',
    })


@manage_bp.route('/airport/delete', methods=['POST'])
def delete_airport():
    removed = _mutations().delete_airport(_payload())
    return jsonify({
        'success': True,
        'routes_removed': removed,
        'message': 'Airport and all related routes deleted',
    })


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------

@manage_bp.route('/route/insert', methods=['POST'])
def insert_route():
    route = _mutations().insert_route(_payload())
    return jsonify({
        'success': True,
        'route': route.to_dict(),
        'message': 'Route inserted successfully',
    }), 201


@manage_bp.route('/route/delete', methods=['POST'])
def delete_route():
    removed = _mutations().delete_route(_payload())
    return jsonify({
        'success': True,
        'routes_removed': removed,
        'message': 'Route deleted successfully',
    })


@manage_bp.route('/reset', methods=['POST'])
def reset_session():
    """Throw away every edit and restore the bulk-loaded data."""
    stats = current_app.config['ENTITY_STORE'].reset()
    return jsonify({
        'success': True,
        'working': stats,
        'message': 'Session data reset to baseline',
    })
