"""
FlightBoard Flask Application.

Main entry point for the board backend. Initializes:
- Feed client, snapshot cache and orchestrator
- Display refresh poll and cache sweeper
- API routes

Usage:
    python -m flightboard.app

Or with gunicorn:
    gunicorn "flightboard.app:create_app()"
"""

import atexit
import logging
import os
from typing import Optional

from flask import Flask
from flask_cors import CORS

from flightboard.api import board_bp, metrics_bp
from flightboard.cache import RefreshCache
from flightboard.config import config
from flightboard.ingestion import BoardOrchestrator, BoardScheduler, FeedClient

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


def create_app(
    start_polling: bool = True,
    orchestrator: Optional[BoardOrchestrator] = None,
) -> Flask:
    """
    Application factory for Flask.

    Args:
        start_polling: Whether to start the background poller and sweeper.
                       Set to False for testing.
        orchestrator: Pre-built orchestrator (built from config if None).

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = config.secret_key

    # Enable CORS for API endpoints
    CORS(app, resources={r'/api/*': {'origins': '*'}})

    if orchestrator is None:
        orchestrator = BoardOrchestrator(
            client=FeedClient.from_config(),
            cache=RefreshCache(config.cache.ttl_seconds),
            tz=config.airport.tzinfo,
        )

    scheduler = BoardScheduler.for_orchestrator(orchestrator)

    app.config['BOARD_ORCHESTRATOR'] = orchestrator
    app.config['BOARD_POLLER'] = scheduler.poller
    app.config['BOARD_SCHEDULER'] = scheduler

    # Register API blueprints
    app.register_blueprint(board_bp)
    app.register_blueprint(metrics_bp)

    if start_polling:
        scheduler.start()
        # Timers must not fire against a torn-down cache
        atexit.register(scheduler.stop)
        logger.info(
            f'Polling {config.upstream.airport_code.upper()} every '
            f'{config.polling.interval_seconds}s (cache TTL {config.cache.ttl_seconds}s)'
        )

    @app.route('/health')
    def health():
        """Simple health check endpoint."""
        return {'status': 'ok'}

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Not found'}, 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f'Server error: {e}')
        return {'error': 'Internal server error'}, 500

    return app


def run_development_server():
    """Run the development server."""
    app = create_app()

    port = int(os.environ.get('PORT', 5000))

    logger.info(f'Starting FlightBoard on http://localhost:{port}')
    logger.info(f'Board: http://localhost:{port}/api/board')

    try:
        app.run(
            host='0.0.0.0',
            port=port,
            debug=config.debug,
            use_reloader=False,  # Reloader would start a second poller
        )
    finally:
        app.config['BOARD_SCHEDULER'].stop()


if __name__ == '__main__':
    run_development_server()
