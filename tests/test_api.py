"""Tests for the board HTTP endpoints."""

from unittest.mock import MagicMock

import pytest

from flightboard.app import create_app
from flightboard.cache import RefreshCache
from flightboard.errors import FetchFailed
from flightboard.ingestion.orchestrator import BoardOrchestrator
from flightboard.models.raw import RawFlightRecord

from conftest import AIRPORT_TZ, make_item


@pytest.fixture
def feed_client():
    mock_client = MagicMock()
    mock_client.fetch_both.return_value = (
        [RawFlightRecord.from_dict(make_item(flight_number='TK2012'))],
        [
            RawFlightRecord.from_dict(make_item(flight_number='TK2013')),
            RawFlightRecord.from_dict(make_item(flight_number='AJ1401')),
        ],
    )
    return mock_client


@pytest.fixture
def app(feed_client, clock):
    orchestrator = BoardOrchestrator(
        client=feed_client,
        cache=RefreshCache(600, clock=clock),
        clock=clock,
        tz=AIRPORT_TZ,
    )
    return create_app(start_polling=False, orchestrator=orchestrator)


@pytest.fixture
def http(app):
    return app.test_client()


class TestBoardEndpoints:

    def test_get_board(self, http) -> None:
        resp = http.get('/api/board')
        assert resp.status_code == 200

        body = resp.get_json()
        assert body['stale'] is False
        assert [f['flight'] for f in body['board']['arrivals']] == ['TK2012']
        assert [f['flight'] for f in body['board']['departures']] == ['TK2013', 'AJ1401']
        assert body['board']['last_updated'] is not None

    def test_columns(self, http) -> None:
        arrivals = http.get('/api/board/arrivals').get_json()
        departures = http.get('/api/board/departures').get_json()

        assert arrivals['count'] == 1
        assert departures['count'] == 2
        assert departures['flights'][0]['location'] == 'Istanbul'

    def test_board_is_cached(self, http, feed_client) -> None:
        http.get('/api/board')
        http.get('/api/board/arrivals')
        http.get('/api/board/departures')
        feed_client.fetch_both.assert_called_once()

    def test_unavailable_without_any_board(self, http, feed_client) -> None:
        feed_client.fetch_both.side_effect = FetchFailed('arrivals request failed')
        resp = http.get('/api/board')

        assert resp.status_code == 503
        assert 'error' in resp.get_json()

    def test_stale_board_from_poller(self, app, http, feed_client) -> None:
        poller = app.config['BOARD_POLLER']
        assert poller.poll() is not None

        app.config['BOARD_ORCHESTRATOR'].cache.invalidate()
        feed_client.fetch_both.side_effect = FetchFailed('departures request failed')

        body = http.get('/api/board').get_json()
        assert body['stale'] is True
        assert len(body['board']['departures']) == 2

    def test_refresh(self, http, feed_client) -> None:
        http.get('/api/board')
        resp = http.post('/api/board/refresh')

        assert resp.status_code == 200
        assert feed_client.fetch_both.call_count == 2

    def test_refresh_failure(self, http, feed_client) -> None:
        http.get('/api/board')
        feed_client.fetch_both.side_effect = FetchFailed('arrivals request failed')
        resp = http.post('/api/board/refresh')

        assert resp.status_code == 502


class TestStatusEndpoints:

    def test_health(self, http) -> None:
        assert http.get('/health').get_json() == {'status': 'ok'}

    def test_status(self, http) -> None:
        http.get('/api/board')
        body = http.get('/api/metrics/status').get_json()

        assert body['status'] == 'degraded'  # Poller not started in tests
        assert body['cache']['has_snapshot'] is True
        assert body['orchestrator']['refresh_count'] == 1
        assert body['config']['airport_code']

    def test_not_found(self, http) -> None:
        assert http.get('/api/nope').status_code == 404
