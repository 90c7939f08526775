"""
Single-snapshot cache for the flight board.

Holds exactly one FlightData plus the instant it was produced, enabling:
- Bounded request rate against the upstream provider
- Instant responses for every board client between refreshes
- Thread-safe operations for concurrent access

Invalidation rule:
A snapshot is fresh while now - timestamp < ttl. That predicate is the
only authority. Reads check it directly; the background sweeper calls
expire_if_stale(), which evicts only what the predicate already
considers expired, so the two mechanisms cannot disagree.

The clock is injected so tests can drive time explicitly.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from flightboard.models.flight import FlightData

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default wall clock (timezone-aware UTC)."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheSnapshot:
    """A FlightData and the instant it was stored."""
    data: FlightData
    timestamp: datetime


class RefreshCache:
    """
    Thread-safe holder of the current board snapshot.

    store() replaces the snapshot unconditionally (last writer wins).
    There is no eviction policy beyond the TTL since capacity is one.
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Clock = utc_now,
    ):
        if ttl_seconds <= 0:
            raise ValueError(f'ttl_seconds must be positive, got {ttl_seconds}')

        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock

        self._snapshot: Optional[CacheSnapshot] = None
        self._lock = threading.RLock()

        # Statistics
        self._hits = 0
        self._misses = 0
        self._stores = 0
        self._invalidations = 0

    @property
    def lock(self) -> threading.RLock:
        """Lock guarding the snapshot; hold it to make check-then-act sequences atomic."""
        return self._lock

    def read(self) -> Optional[FlightData]:
        """
        Return the cached FlightData, or None if nothing is cached.

        Does not check freshness; call is_valid() first.
        """
        with self._lock:
            return self._snapshot.data if self._snapshot else None

    def snapshot(self) -> Optional[CacheSnapshot]:
        with self._lock:
            return self._snapshot

    def _is_fresh(self, now: datetime) -> bool:
        return self._snapshot is not None and now - self._snapshot.timestamp < self.ttl

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """True iff a snapshot exists and is younger than the TTL."""
        now = now or self._clock()
        with self._lock:
            valid = self._is_fresh(now)
            if valid:
                self._hits += 1
            else:
                self._misses += 1
        logger.debug(f'Board cache {"hit" if valid else "miss"}')
        return valid

    def store(self, data: FlightData, now: Optional[datetime] = None) -> None:
        """Replace the snapshot with data, stamped at now."""
        now = now or self._clock()
        with self._lock:
            self._snapshot = CacheSnapshot(data=data, timestamp=now)
            self._stores += 1
        logger.debug(
            f'Board cache stored {len(data.arrivals)} arrivals, '
            f'{len(data.departures)} departures'
        )

    def invalidate(self) -> None:
        """Drop the snapshot unconditionally."""
        with self._lock:
            had_snapshot = self._snapshot is not None
            self._snapshot = None
            if had_snapshot:
                self._invalidations += 1
        if had_snapshot:
            logger.debug('Board cache invalidated')

    def expire_if_stale(self, now: Optional[datetime] = None) -> bool:
        """
        Drop the snapshot only if it is past its TTL.

        Returns True if a snapshot was evicted.
        """
        now = now or self._clock()
        with self._lock:
            if self._snapshot is None or self._is_fresh(now):
                return False
            self._snapshot = None
            self._invalidations += 1
        logger.info('Expired stale board snapshot')
        return True

    def age_seconds(self, now: Optional[datetime] = None) -> Optional[float]:
        """Age of the current snapshot, or None if empty."""
        now = now or self._clock()
        with self._lock:
            if self._snapshot is None:
                return None
            return (now - self._snapshot.timestamp).total_seconds()

    @property
    def stats(self) -> dict:
        """Get cache statistics."""
        with self._lock:
            lookups = self._hits + self._misses
            return {
                'has_snapshot': self._snapshot is not None,
                'ttl_seconds': self.ttl.total_seconds(),
                'hits': self._hits,
                'misses': self._misses,
                'hit_rate': self._hits / lookups if lookups > 0 else 0,
                'stores': self._stores,
                'invalidations': self._invalidations,
                'last_store': self._snapshot.timestamp.isoformat() if self._snapshot else None,
            }
