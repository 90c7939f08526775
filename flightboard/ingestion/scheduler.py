"""
Background tasks for the board.

Two independent periodic tasks:
- BoardPoller: display refresh, asks the orchestrator for the board every
  poll interval and keeps the last-known-good result
- CacheSweeper: evicts the cached snapshot once it is past its TTL

BoardScheduler starts and cancels them together. Neither task retries;
a failed poll leaves the previous board in place until the next tick.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional

from flightboard.cache import RefreshCache, utc_now
from flightboard.config import config
from flightboard.errors import FlightBoardError
from flightboard.ingestion.orchestrator import BoardOrchestrator
from flightboard.models.flight import FlightData

logger = logging.getLogger(__name__)


class PeriodicTask:
    """
    Cancellable fixed-interval task on a daemon thread.

    cancel() wakes the thread immediately instead of waiting out the
    current interval, so nothing fires after shutdown returns.
    """

    def __init__(
        self,
        name: str,
        interval: float,
        target: Callable[[], object],
        run_immediately: bool = False,
    ):
        if interval <= 0:
            raise ValueError(f'interval must be positive, got {interval}')

        self.name = name
        self.interval = interval
        self.target = target
        self.run_immediately = run_immediately

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._run_count = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def run_count(self) -> int:
        return self._run_count

    def _tick(self) -> None:
        self._run_count += 1
        try:
            self.target()
        except Exception as e:
            logger.error(f'{self.name} task error: {e}')

    def _run(self) -> None:
        logger.info(f'Starting {self.name} task (interval={self.interval}s)')

        if self.run_immediately and not self._stop_event.is_set():
            self._tick()

        while not self._stop_event.wait(self.interval):
            self._tick()

        logger.info(f'{self.name} task stopped')

    def start(self) -> None:
        """Start the task in a background thread."""
        if self.running:
            logger.warning(f'{self.name} task already running')
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            name=self.name,
            daemon=True,
        )
        self._thread.start()

    def cancel(self, timeout: Optional[float] = 5) -> None:
        """Stop the task and wait for its thread to exit."""
        self._stop_event.set()
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)


class BoardPoller:
    """
    Periodically refreshes the board for display.

    Holds the last board that was produced successfully, so the
    presentation layer can keep showing it while upstream is down.
    """

    def __init__(
        self,
        orchestrator: BoardOrchestrator,
        interval: Optional[float] = None,
    ):
        self.orchestrator = orchestrator
        self.interval = interval or config.polling.interval_seconds

        self._lock = threading.Lock()
        self._latest: Optional[FlightData] = None
        self._last_error: Optional[str] = None
        self._last_error_time: Optional[datetime] = None
        self._poll_count = 0
        self._error_count = 0

        self._on_update_callbacks: List[Callable[[FlightData], None]] = []
        self._task = PeriodicTask('board-poll', self.interval, self.poll, run_immediately=True)

    def add_update_callback(self, callback: Callable[[FlightData], None]) -> None:
        """
        Register callback to be invoked after each successful poll.

        Callback receives the new FlightData.
        """
        self._on_update_callbacks.append(callback)

    @property
    def latest(self) -> Optional[FlightData]:
        """Last board produced successfully, or None before the first success."""
        with self._lock:
            return self._latest

    @property
    def last_error(self) -> Optional[str]:
        with self._lock:
            return self._last_error

    def poll(self) -> Optional[FlightData]:
        """
        Execute one display refresh.

        Returns the new board, or None if the refresh failed.
        """
        with self._lock:
            self._poll_count += 1

        try:
            data = self.orchestrator.get_flight_board()
        except FlightBoardError as e:
            with self._lock:
                self._error_count += 1
                self._last_error = str(e)
                self._last_error_time = utc_now()
            logger.error(f'Board poll failed: {e}')
            return None

        with self._lock:
            self._latest = data
            self._last_error = None

        for callback in self._on_update_callbacks:
            try:
                callback(data)
            except Exception as e:
                logger.error(f'Update callback error: {e}')

        return data

    def start(self) -> None:
        self._task.start()

    def stop(self) -> None:
        self._task.cancel()

    @property
    def running(self) -> bool:
        return self._task.running

    @property
    def stats(self) -> dict:
        """Get poller statistics."""
        with self._lock:
            return {
                'running': self.running,
                'interval_seconds': self.interval,
                'poll_count': self._poll_count,
                'error_count': self._error_count,
                'last_error': self._last_error,
                'last_error_time': self._last_error_time.isoformat() if self._last_error_time else None,
                'has_board': self._latest is not None,
            }


class CacheSweeper:
    """Evicts the board snapshot once it has outlived its TTL."""

    def __init__(self, cache: RefreshCache, interval: Optional[float] = None):
        self.cache = cache
        self.interval = interval or cache.ttl.total_seconds()
        self._task = PeriodicTask('cache-sweep', self.interval, self.sweep)

    def sweep(self) -> bool:
        return self.cache.expire_if_stale()

    def start(self) -> None:
        self._task.start()

    def stop(self) -> None:
        self._task.cancel()

    @property
    def running(self) -> bool:
        return self._task.running


class BoardScheduler:
    """Owns every background task so shutdown cancels them together."""

    def __init__(
        self,
        poller: BoardPoller,
        sweeper: Optional[CacheSweeper] = None,
    ):
        self.poller = poller
        self.sweeper = sweeper

    @classmethod
    def for_orchestrator(cls, orchestrator: BoardOrchestrator) -> 'BoardScheduler':
        """Build poller and (if enabled) sweeper from configuration."""
        sweeper = CacheSweeper(orchestrator.cache) if config.cache.sweep_enabled else None
        return cls(poller=BoardPoller(orchestrator), sweeper=sweeper)

    def start(self) -> None:
        self.poller.start()
        if self.sweeper:
            self.sweeper.start()
        logger.info('Board scheduler started')

    def stop(self) -> None:
        self.poller.stop()
        if self.sweeper:
            self.sweeper.stop()
        logger.info('Board scheduler stopped')

    @property
    def running(self) -> bool:
        return self.poller.running or bool(self.sweeper and self.sweeper.running)
