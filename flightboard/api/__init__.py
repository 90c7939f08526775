"""
API module for FlightBoard.

Provides REST endpoints for:
- The arrivals/departures board
- System status
"""

from flightboard.api.board import board_bp
from flightboard.api.metrics import metrics_bp

__all__ = ['board_bp', 'metrics_bp']
