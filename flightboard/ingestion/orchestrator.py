"""
Board orchestrator - the single entry point for "get current board".

Pipeline stages on a cache miss:
1. Fetch: Both upstream feeds, concurrently
2. Normalize: Raw records to display rows, with status inference
3. Store: Replace the cached snapshot

Concurrent callers that find the cache invalid share one in-flight
refresh (single-flight) instead of each hitting the provider.
"""

import logging
import threading
from datetime import datetime, tzinfo
from typing import Optional

from flightboard.cache import Clock, RefreshCache, utc_now
from flightboard.config import config
from flightboard.errors import FlightBoardError
from flightboard.ingestion.feed_client import FeedClient
from flightboard.ingestion.normalizer import normalize_feed
from flightboard.models.flight import Direction, FlightData

logger = logging.getLogger(__name__)


class _InFlightRefresh:
    """Result slot shared between the refreshing thread and its waiters."""

    def __init__(self):
        self.done = threading.Event()
        self.result: Optional[FlightData] = None
        self.error: Optional[BaseException] = None


class BoardOrchestrator:
    """
    Coordinates feed client, normalizer and cache.

    Never mutates a snapshot directly; a refresh either stores a complete
    new FlightData or leaves the cache exactly as it was.
    """

    def __init__(
        self,
        client: Optional[FeedClient] = None,
        cache: Optional[RefreshCache] = None,
        clock: Clock = utc_now,
        tz: Optional[tzinfo] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            client: Upstream feed client (created from config if None)
            cache: Snapshot cache (created from config if None)
            clock: Source of the current instant
            tz: Airport timezone for naive upstream timestamps
        """
        self.client = client or FeedClient.from_config()
        self.cache = cache or RefreshCache(config.cache.ttl_seconds, clock=clock)
        self._clock = clock
        self.tz = tz or config.airport.tzinfo

        self._in_flight: Optional[_InFlightRefresh] = None

        # State tracking
        self._refresh_count = 0
        self._error_count = 0
        self._shared_waits = 0
        self._last_refresh: Optional[datetime] = None

    def get_flight_board(self, now: Optional[datetime] = None, force: bool = False) -> FlightData:
        """
        Return the current board, refreshing from upstream if the cache is stale.

        force skips the freshness check but still joins an in-flight refresh.

        Raises:
            FetchFailed if either feed fails (ParseFailed for bad bodies)
        """
        now = now or self._clock()

        with self.cache.lock:
            if not force and self.cache.is_valid(now):
                return self.cache.read()

            pending = self._in_flight
            leader = pending is None
            if leader:
                pending = self._in_flight = _InFlightRefresh()
            else:
                self._shared_waits += 1

        if not leader:
            logger.debug('Joining in-flight board refresh')
            pending.done.wait()
            if pending.error is not None:
                raise pending.error
            return pending.result

        try:
            pending.result = self._refresh(now)
            return pending.result
        except BaseException as e:
            pending.error = e
            raise
        finally:
            with self.cache.lock:
                self._in_flight = None
            pending.done.set()

    def _refresh(self, now: datetime) -> FlightData:
        """Fetch, normalize and store one complete board."""
        logger.info('Refreshing flight board from upstream')

        try:
            arrivals_raw, departures_raw = self.client.fetch_both()
        except FlightBoardError as e:
            self._error_count += 1
            logger.warning(f'Board refresh failed, keeping previous snapshot: {e}')
            raise

        data = FlightData(
            arrivals=tuple(normalize_feed(arrivals_raw, Direction.ARRIVAL, now, self.tz)),
            departures=tuple(normalize_feed(departures_raw, Direction.DEPARTURE, now, self.tz)),
            last_updated=now,
        )

        self.cache.store(data, now)
        self._refresh_count += 1
        self._last_refresh = now

        logger.info(
            f'Board refreshed: {len(data.arrivals)} arrivals, '
            f'{len(data.departures)} departures'
        )
        return data

    def force_refresh(self, now: Optional[datetime] = None) -> FlightData:
        """Fetch a new board regardless of cache age; a failure keeps the old snapshot."""
        return self.get_flight_board(now, force=True)

    @property
    def stats(self) -> dict:
        """Get orchestrator statistics."""
        return {
            'refresh_count': self._refresh_count,
            'error_count': self._error_count,
            'shared_waits': self._shared_waits,
            'last_refresh': self._last_refresh.isoformat() if self._last_refresh else None,
        }
