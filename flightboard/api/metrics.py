"""
Status API endpoints.

Provides endpoints for:
- GET /api/metrics/status - Refresh pipeline health and configuration
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

from flightboard.config import config

logger = logging.getLogger(__name__)

metrics_bp = Blueprint('metrics', __name__, url_prefix='/api/metrics')


@metrics_bp.route('/status', methods=['GET'])
def get_system_status():
    """
    Get system health and status information.

    Returns:
    - Poller status (last error, counts)
    - Orchestrator refresh counts
    - Cache statistics
    - Configuration info
    """
    start_time = time.perf_counter()

    orchestrator = current_app.config['BOARD_ORCHESTRATOR']
    poller = current_app.config.get('BOARD_POLLER')
    poller_stats = poller.stats if poller else {'running': False}

    cache_stats = orchestrator.cache.stats
    cache_stats['age_seconds'] = orchestrator.cache.age_seconds()

    healthy = poller_stats.get('running') and not poller_stats.get('last_error')

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'status': 'healthy' if healthy else 'degraded',
        'poller': poller_stats,
        'orchestrator': orchestrator.stats,
        'cache': cache_stats,
        'config': {
            'airport_code': config.upstream.airport_code.upper(),
            'locale': config.upstream.locale,
            'timezone': config.airport.timezone,
            'poll_interval': config.polling.interval_seconds,
            'cache_ttl': config.cache.ttl_seconds,
            'cache_sweep': config.cache.sweep_enabled,
        },
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'query_time_ms': round(query_time_ms, 2),
    })
