"""
OpenFlights Backend Package.

In-memory airport, airline and route service built with Flask and NumPy.

Modules:
    api/         REST endpoints for lookups, connections, reports and edits
    models/      Airport, Airline and Route records
    ingestion/   OpenFlights .dat bulk loader
    services/    Mutation layer, connectivity engine and reporting engine
    store.py     Thread-safe entity store (baseline + working copy)
    errors.py    Error kinds shared by the core and the API
    config.py    Centralized configuration from environment variables
"""

__version__ = '1.0.0'
