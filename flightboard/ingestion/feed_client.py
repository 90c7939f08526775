"""
Arrival-departure service client.

Handles communication with the upstream provider's REST API:
- GET {base}/{airport}/arrivals?locale={locale}
- GET {base}/{airport}/departures?locale={locale}

Response format (fields the board consumes):
    {
        "airportInfo": {"iataCode": "KYA", ...},
        "arrivals":   [ {flight record}, ... ],
        "departures": [ {flight record}, ... ] | null
    }

Each endpoint only populates its own array. A missing or null array is an
empty feed; anything else that isn't a list is a schema error.
"""

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Dict, List, Optional, Tuple

import requests

from flightboard.config import config
from flightboard.errors import FetchFailed, ParseFailed
from flightboard.models.flight import Direction
from flightboard.models.raw import RawFlightRecord

logger = logging.getLogger(__name__)

FEED_KEYS = {
    Direction.ARRIVAL: 'arrivals',
    Direction.DEPARTURE: 'departures',
}


class FeedClient:
    """
    Client for the upstream arrival-departure service.

    Handles:
    - GET requests for the two feeds of one fixed airport
    - Static request headers from configuration
    - Concurrent fetch of both feeds
    - Translating transport and schema errors into FetchFailed / ParseFailed

    No retries: the caller's next poll is the retry.
    """

    def __init__(
        self,
        base_url: str,
        airport_code: str,
        locale: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = 30,
    ):
        self.base_url = base_url.rstrip('/')
        self.airport_code = airport_code.lower()
        self.locale = locale
        self.timeout = timeout

        self.session = requests.Session()
        if headers:
            self.session.headers.update(headers)

        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix='feed')

        logger.info(f'Feed client initialized for airport {self.airport_code.upper()} ({self.locale})')

    @classmethod
    def from_config(cls) -> 'FeedClient':
        """Create client from application configuration."""
        return cls(
            base_url=config.upstream.base_url,
            airport_code=config.upstream.airport_code,
            locale=config.upstream.locale,
            headers=config.upstream.headers,
            timeout=config.upstream.timeout_seconds,
        )

    def feed_url(self, direction: Direction) -> str:
        return f'{self.base_url}/{self.airport_code}/{FEED_KEYS[direction]}'

    def get_feed(self, direction: Direction) -> List[Optional[RawFlightRecord]]:
        """
        Fetch one feed.

        Returns the parsed records in upstream order. Elements that are
        not objects are kept as None so the normalizer can skip them.

        Raises:
            FetchFailed on network errors or non-2xx responses
            ParseFailed if the body isn't the expected JSON document
        """
        key = FEED_KEYS[direction]
        url = self.feed_url(direction)
        params = {'locale': self.locale}

        logger.debug(f'Fetching {key}: {url} params={params}')

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            logger.error(f'Upstream {key} request timed out')
            raise FetchFailed(f'{key} request timed out', feed=key) from e
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            logger.error(f'Upstream {key} error: {status_code}')
            raise FetchFailed(f'{key} request returned {status_code}', feed=key) from e
        except requests.exceptions.RequestException as e:
            logger.error(f'Upstream {key} request failed: {e}')
            raise FetchFailed(f'{key} request failed', feed=key) from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f'Upstream {key} returned a non-JSON body')
            raise ParseFailed(f'{key} response is not JSON', feed=key) from e

        records = self._parse_body(data, key)
        logger.info(f'Received {len(records)} {key} from upstream')
        return records

    def _parse_body(self, data, key: str) -> List[Optional[RawFlightRecord]]:
        """Extract the flight array for key from a response document."""
        if not isinstance(data, dict):
            raise ParseFailed(f'{key} response is not an object', feed=key)

        items = data.get(key)
        if items is None:
            return []
        if not isinstance(items, list):
            raise ParseFailed(f'{key} field is not a list', feed=key)

        return [RawFlightRecord.from_dict(item) for item in items]

    def get_arrivals(self) -> List[Optional[RawFlightRecord]]:
        return self.get_feed(Direction.ARRIVAL)

    def get_departures(self) -> List[Optional[RawFlightRecord]]:
        return self.get_feed(Direction.DEPARTURE)

    def fetch_both(self) -> Tuple[List[Optional[RawFlightRecord]], List[Optional[RawFlightRecord]]]:
        """
        Fetch arrivals and departures concurrently.

        Both requests are in flight before either is awaited. The first
        failure is raised without waiting for the other request.

        Returns:
            Tuple of (arrivals, departures)
        """
        arrivals_future = self._executor.submit(self.get_arrivals)
        departures_future = self._executor.submit(self.get_departures)

        done, _ = wait([arrivals_future, departures_future], return_when=FIRST_EXCEPTION)

        for future in (arrivals_future, departures_future):
            if future in done and future.exception() is not None:
                raise future.exception()

        return arrivals_future.result(), departures_future.result()

    def close(self) -> None:
        """Release the HTTP session and worker threads."""
        self._executor.shutdown(wait=False)
        self.session.close()
