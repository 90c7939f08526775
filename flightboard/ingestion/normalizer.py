"""
Record normalizer - provider schema to display schema.

Picks the timestamp fields matching the feed direction, runs status
inference, and selects the "other end" of the flight:
- Departures show the arrival airport
- Arrivals show the departure airport

Individual malformed fields degrade to empty values; only an absent
record is skipped.
"""

import logging
from datetime import datetime, tzinfo
from typing import Iterable, List, Optional

from flightboard.ingestion.status import infer_status
from flightboard.models.flight import Direction, Flight
from flightboard.models.raw import RawFlightRecord

logger = logging.getLogger(__name__)


def parse_timestamp(value: Optional[str], tz: tzinfo) -> Optional[datetime]:
    """
    Parse an ISO 8601 timestamp from the provider.

    Naive values are airport-local and get tz attached. Returns None for
    missing or unparsable values.
    """
    if not value:
        return None

    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        logger.debug(f'Unparsable timestamp from upstream: {value!r}')
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def _display_time(localised: Optional[str], raw: Optional[datetime], tz: tzinfo) -> Optional[datetime]:
    """Airport-local wall time for the board, preferring the localised field."""
    local = parse_timestamp(localised, tz)
    if local is None:
        local = raw
    if local is None:
        return None
    return local.astimezone(tz)


def normalize_record(
    record: Optional[RawFlightRecord],
    direction: Direction,
    now: datetime,
    tz: tzinfo,
) -> Optional[Flight]:
    """Convert one raw record into a board row, or None if the record is absent."""
    if record is None:
        return None

    if direction == Direction.DEPARTURE:
        scheduled_raw = record.scheduled_departure
        scheduled_local = record.localised_scheduled_departure
        estimated_raw = record.estimated_departure
        location = record.arrival_airport_name
    else:
        scheduled_raw = record.scheduled_arrival
        scheduled_local = record.localised_scheduled_arrival
        estimated_raw = record.estimated_arrival
        location = record.departure_airport_name

    scheduled = parse_timestamp(scheduled_raw, tz)
    estimated = parse_timestamp(estimated_raw, tz)

    status = infer_status(record.status, scheduled, estimated, now)

    shown = _display_time(scheduled_local, scheduled, tz)

    return Flight(
        date=shown.date() if shown else None,
        time=shown.strftime('%H:%M') if shown else '',
        flight=record.flight_number,
        location=location or '',
        airline=record.airline_name or '',
        airline_id=record.airline_id or '',
        status=status,
        direction=direction,
    )


def normalize_feed(
    records: Iterable[Optional[RawFlightRecord]],
    direction: Direction,
    now: datetime,
    tz: tzinfo,
) -> List[Flight]:
    """Normalize a whole feed, preserving upstream order and skipping absent records."""
    flights = []
    skipped = 0
    for record in records:
        flight = normalize_record(record, direction, now, tz)
        if flight is None:
            skipped += 1
            continue
        flights.append(flight)

    if skipped:
        logger.debug(f'Skipped {skipped} empty {direction.value} records')

    return flights
