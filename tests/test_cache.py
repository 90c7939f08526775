"""Unit tests for the board snapshot cache."""

from datetime import timedelta

import pytest

from flightboard.cache import RefreshCache
from flightboard.models.flight import FlightData

from conftest import NOW

TTL = 600
ONE_MS = timedelta(milliseconds=1)


def _board() -> FlightData:
    return FlightData(arrivals=(), departures=(), last_updated=NOW)


class TestRefreshCache:
    """Tests for store / read / is_valid / invalidate."""

    def test_empty_cache(self, clock) -> None:
        cache = RefreshCache(TTL, clock=clock)
        assert cache.read() is None
        assert cache.is_valid(NOW) is False

    def test_round_trip_within_ttl(self, clock) -> None:
        cache = RefreshCache(TTL, clock=clock)
        data = _board()
        cache.store(data, NOW)

        assert cache.is_valid(NOW + timedelta(seconds=TTL) - ONE_MS) is True
        assert cache.read() is data

    def test_invalid_after_ttl(self, clock) -> None:
        cache = RefreshCache(TTL, clock=clock)
        cache.store(_board(), NOW)

        assert cache.is_valid(NOW + timedelta(seconds=TTL)) is False
        assert cache.is_valid(NOW + timedelta(seconds=TTL) + ONE_MS) is False

    def test_invalidate(self, clock) -> None:
        cache = RefreshCache(TTL, clock=clock)
        cache.store(_board(), NOW)
        cache.invalidate()

        assert cache.is_valid(NOW) is False
        assert cache.read() is None

    def test_store_replaces(self, clock) -> None:
        cache = RefreshCache(TTL, clock=clock)
        first, second = _board(), _board()
        cache.store(first, NOW)
        cache.store(second, NOW + timedelta(seconds=30))

        assert cache.read() is second
        assert cache.snapshot().timestamp == NOW + timedelta(seconds=30)

    def test_uses_injected_clock(self, clock) -> None:
        cache = RefreshCache(TTL, clock=clock)
        cache.store(_board())
        clock.advance(seconds=TTL - 1)
        assert cache.is_valid() is True
        clock.advance(seconds=1)
        assert cache.is_valid() is False

    def test_rejects_non_positive_ttl(self) -> None:
        with pytest.raises(ValueError):
            RefreshCache(0)


class TestExpireIfStale:
    """The sweeper only evicts what is_valid already considers expired."""

    def test_keeps_fresh_snapshot(self, clock) -> None:
        cache = RefreshCache(TTL, clock=clock)
        cache.store(_board(), NOW)
        assert cache.expire_if_stale(NOW + timedelta(seconds=TTL - 1)) is False
        assert cache.read() is not None

    def test_evicts_stale_snapshot(self, clock) -> None:
        cache = RefreshCache(TTL, clock=clock)
        cache.store(_board(), NOW)
        assert cache.expire_if_stale(NOW + timedelta(seconds=TTL)) is True
        assert cache.read() is None

    def test_empty_cache(self, clock) -> None:
        cache = RefreshCache(TTL, clock=clock)
        assert cache.expire_if_stale() is False


class TestStats:

    def test_hit_miss_counts(self, clock) -> None:
        cache = RefreshCache(TTL, clock=clock)
        cache.is_valid(NOW)
        cache.store(_board(), NOW)
        cache.is_valid(NOW)
        cache.is_valid(NOW)

        stats = cache.stats
        assert stats['hits'] == 2
        assert stats['misses'] == 1
        assert stats['stores'] == 1
        assert stats['has_snapshot'] is True
        assert stats['last_store'] == NOW.isoformat()

    def test_age_seconds(self, clock) -> None:
        cache = RefreshCache(TTL, clock=clock)
        assert cache.age_seconds() is None
        cache.store(_board(), NOW)
        clock.advance(seconds=90)
        assert cache.age_seconds() == 90
