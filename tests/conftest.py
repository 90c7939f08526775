"""Pytest configuration and fixtures."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

# Ensure the package is importable when running tests without installing it
root = Path(__file__).resolve().parent.parent
if str(root) not in sys.path:
    sys.path.insert(0, str(root))

AIRPORT_TZ = ZoneInfo('Europe/Istanbul')
NOW = datetime(2025, 1, 20, 12, 0, tzinfo=timezone.utc)  # 15:00 in Konya


class FakeClock:
    """Manually advanced clock for cache and orchestrator tests."""

    def __init__(self, start: datetime = NOW):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def local_iso(dt: datetime) -> str:
    """Naive airport-local ISO string, as the provider sends it."""
    return dt.astimezone(AIRPORT_TZ).replace(tzinfo=None).isoformat()


def make_item(
    flight_number: str = 'TK2013',
    airline_name: str = 'Turkish Airlines',
    airline_id: str = '-32672',
    scheduled_departure: datetime = NOW + timedelta(hours=2),
    estimated_departure: datetime = None,
    scheduled_arrival: datetime = NOW + timedelta(hours=3),
    estimated_arrival: datetime = None,
    status: str = 'SCHEDULED',
    departure_airport_name: str = 'Konya',
    arrival_airport_name: str = 'Istanbul',
) -> dict:
    """Flight record in the provider's JSON shape."""
    return {
        'airlineId': airline_id,
        'airlineName': airline_name,
        'arrivalAirportCode': 'IST',
        'departureAirportCode': 'KYA',
        'arrivalAirportName': arrival_airport_name,
        'departureAirportName': departure_airport_name,
        'flightNumber': flight_number,
        'scheduledArrivalTime': local_iso(scheduled_arrival),
        'localisedScheduledArrivalTime': local_iso(scheduled_arrival),
        'estimatedArrivalTime': local_iso(estimated_arrival) if estimated_arrival else None,
        'localisedEstimatedArrivalTime': local_iso(estimated_arrival) if estimated_arrival else None,
        'scheduledDepartureTime': local_iso(scheduled_departure),
        'localisedScheduledDepartureTime': local_iso(scheduled_departure),
        'estimatedDepartureTime': local_iso(estimated_departure) if estimated_departure else None,
        'localisedEstimatedDepartureTime': local_iso(estimated_departure) if estimated_departure else None,
        'status': status,
        'statusLocalised': None,
        'arrivalGate': None,
        'boardingGate': '3',
        'codeShare': False,
    }


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def airport_tz() -> ZoneInfo:
    return AIRPORT_TZ
