"""
FlightBoard Backend Package.

Live airport arrival/departure board backend built with Flask and requests.

Modules:
    api/         REST endpoints for the board and system status
    models/      Upstream record and display schema (Flight, FlightData)
    ingestion/   Feed client, status inference, orchestrator and background polling
    cache.py     Thread-safe single-snapshot cache with TTL
    config.py    Centralized configuration from environment variables
    errors.py    FetchFailed / ParseFailed error taxonomy
"""

__version__ = '1.0.0'
