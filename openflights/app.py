"""
OpenFlights Flask Application.

Main entry point for the web service. Initializes:
- Entity store (bulk load + session working copy)
- Mutation, connectivity and reporting services
- API routes
- JSON error handlers

Usage:
    python -m openflights.app

Or with gunicorn:
    gunicorn 'openflights.app:create_app()'
"""

import logging
from typing import Optional

from flask import Flask, jsonify
from flask_cors import CORS

from openflights import __version__
from openflights.api import connections_bp, lookup_bp, manage_bp, reports_bp
from openflights.config import config
from openflights.errors import OpenFlightsError
from openflights.ingestion import load_into
from openflights.services import ConnectivityEngine, MutationService, ReportingEngine
from openflights.store import EntityStore

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


def create_app(
    store: Optional[EntityStore] = None,
    load_data: Optional[bool] = None,
) -> Flask:
    """
    Application factory for Flask.

    Args:
        store: Entity store to serve. A new one is created if None.
        load_data: Whether to bulk-load the configured data files into the
                   store. Defaults to LOAD_ON_STARTUP when a new store is
                   created, and to False when a store is passed in.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = config.secret_key
    app.json.sort_keys = False

    # Enable CORS for API endpoints
    CORS(app, resources={r'/api/*': {'origins': config.api.cors_origins}})

    if load_data is None:
        load_data = store is None and config.data.load_on_startup
    store = store or EntityStore()

    if load_data:
        logger.info(f'Loading OpenFlights data from {config.data.data_dir}/')
        result = load_into(store, config.data)
        logger.info(f'Bulk load complete: {result.counts}')

    # One store shared by every service
    app.config['ENTITY_STORE'] = store
    app.config['MUTATIONS'] = MutationService(store)
    app.config['CONNECTIVITY'] = ConnectivityEngine(store)
    app.config['REPORTS'] = ReportingEngine(store)

    # Register API blueprints
    app.register_blueprint(lookup_bp)
    app.register_blueprint(connections_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(manage_bp)

    @app.route('/')
    def index():
        """Service banner with table totals."""
        return {
            'service': 'OpenFlights',
            'version': __version__,
            'summary': app.config['REPORTS'].summary(),
        }

    @app.route('/health')
    def health():
        """Simple health check endpoint."""
        return {'status': 'ok'}

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(OpenFlightsError)
    def openflights_error(e: OpenFlightsError):
        logger.debug(f'{type(e).__name__}: {e.message}')
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Not found'}, 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return {'error': 'Method not allowed'}, 405

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f'Server error: {e}')
        return {'error': 'Internal server error'}, 500

    return app


def run_development_server():
    """Run the development server."""
    app = create_app()

    logger.info(f'Starting OpenFlights on http://localhost:{config.port}')

    app.run(
        host=config.host,
        port=config.port,
        debug=config.debug,
        use_reloader=False,  # Avoid loading the data files twice
    )


if __name__ == '__main__':
    run_development_server()
