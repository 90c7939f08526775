"""
Data models for FlightBoard.

Two layers:
1. RawFlightRecord - the provider's schema, as received
2. Flight / FlightData - the display schema handed to the board
"""

from flightboard.models.flight import Direction, Flight, FlightData, FlightStatus
from flightboard.models.raw import RawFlightRecord

__all__ = [
    'Direction',
    'Flight',
    'FlightData',
    'FlightStatus',
    'RawFlightRecord',
]
