"""
Data refresh pipeline for FlightBoard.

Handles fetching both upstream feeds, normalizing records into board rows,
inferring display status, and scheduling periodic refreshes.
"""

from flightboard.ingestion.feed_client import FeedClient
from flightboard.ingestion.orchestrator import BoardOrchestrator
from flightboard.ingestion.scheduler import BoardPoller, BoardScheduler, CacheSweeper, PeriodicTask
from flightboard.ingestion.status import infer_status

__all__ = [
    'BoardOrchestrator',
    'BoardPoller',
    'BoardScheduler',
    'CacheSweeper',
    'FeedClient',
    'PeriodicTask',
    'infer_status',
]
