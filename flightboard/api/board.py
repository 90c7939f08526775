"""
Flight board API endpoints.

Provides endpoints for:
- GET /api/board - Both columns plus last-updated time
- GET /api/board/arrivals - Arrivals column only
- GET /api/board/departures - Departures column only
- POST /api/board/refresh - Refresh from upstream now

The board comes from the orchestrator (cached for one TTL). If upstream is
down, the last board the poller produced is served with stale=true.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Optional, Tuple

from flask import Blueprint, current_app, jsonify

from flightboard.errors import FetchFailed
from flightboard.models.flight import FlightData

logger = logging.getLogger(__name__)

board_bp = Blueprint('board', __name__, url_prefix='/api/board')

UNAVAILABLE_MESSAGE = 'Flight data is currently unavailable.'


def _current_board(force: bool = False) -> Tuple[Optional[FlightData], bool]:
    """
    Get the board to display.

    Returns (board, stale). board is None only when nothing has ever
    been fetched successfully.
    """
    orchestrator = current_app.config['BOARD_ORCHESTRATOR']
    poller = current_app.config.get('BOARD_POLLER')

    try:
        if force:
            return orchestrator.force_refresh(), False
        return orchestrator.get_flight_board(), False
    except FetchFailed as e:
        logger.warning(f'Serving last known board: {e}')
        fallback = poller.latest if poller else None
        return fallback, True


def _unavailable():
    return jsonify({'error': UNAVAILABLE_MESSAGE}), 503


@board_bp.route('', methods=['GET'])
def get_board():
    """
    Get the full board.

    Query time is included for monitoring cache effectiveness.
    """
    start_time = time.perf_counter()

    board, stale = _current_board()
    if board is None:
        return _unavailable()

    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'board': board.to_dict(),
        'stale': stale,
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'query_time_ms': round(query_time_ms, 2),
    })


@board_bp.route('/arrivals', methods=['GET'])
def get_arrivals():
    board, stale = _current_board()
    if board is None:
        return _unavailable()

    return jsonify({
        'flights': [f.to_dict() for f in board.arrivals],
        'count': len(board.arrivals),
        'last_updated': board.last_updated.isoformat() if board.last_updated else None,
        'stale': stale,
    })


@board_bp.route('/departures', methods=['GET'])
def get_departures():
    board, stale = _current_board()
    if board is None:
        return _unavailable()

    return jsonify({
        'flights': [f.to_dict() for f in board.departures],
        'count': len(board.departures),
        'last_updated': board.last_updated.isoformat() if board.last_updated else None,
        'stale': stale,
    })


@board_bp.route('/refresh', methods=['POST'])
def refresh_board():
    """
    Refresh the board from upstream immediately.

    On failure the previous snapshot stays cached and 502 is returned.
    """
    board, stale = _current_board(force=True)
    if stale:
        return jsonify({'error': UNAVAILABLE_MESSAGE}), 502

    return jsonify({
        'board': board.to_dict(),
        'stale': False,
    })
