"""
Display models - what the board actually shows.

A new set of Flight records is built on every refresh cycle; nothing here
is ever mutated after creation. FlightData is both the unit of caching
and the unit handed to the presentation layer.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Tuple


class Direction(str, Enum):
    """Which feed a record came from."""
    ARRIVAL = 'arrival'
    DEPARTURE = 'departure'


class FlightStatus(str, Enum):
    """
    Derived display status.

    Closed set, unlike the upstream status vocabulary:
    - SCHEDULED: More than 30 minutes before scheduled time
    - GATE_CLOSING: From 30 minutes before to 15 minutes after scheduled time
    - IN_FLIGHT: Airborne, reported or presumed
    - DELAYED / CANCELLED / LANDED: Reported by upstream
    """
    SCHEDULED = 'scheduled'
    GATE_CLOSING = 'gate_closing'
    IN_FLIGHT = 'in_flight'
    DELAYED = 'delayed'
    CANCELLED = 'cancelled'
    LANDED = 'landed'

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    FlightStatus.SCHEDULED: 'Scheduled',
    FlightStatus.GATE_CLOSING: 'Gate Closing',
    FlightStatus.IN_FLIGHT: 'In Flight',
    FlightStatus.DELAYED: 'Delayed',
    FlightStatus.CANCELLED: 'Cancelled',
    FlightStatus.LANDED: 'Landed',
}


@dataclass(frozen=True)
class Flight:
    """One row on the board."""
    date: Optional[date]  # Provider-local calendar day
    time: str  # HH:MM, provider-local
    flight: str
    location: str  # Destination for departures, origin for arrivals
    airline: str
    airline_id: str  # Used by the presentation layer to find the logo
    status: FlightStatus
    direction: Direction

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict for API responses."""
        return {
            'date': self.date.isoformat() if self.date else None,
            'time': self.time,
            'flight': self.flight,
            'location': self.location,
            'airline': self.airline,
            'airline_id': self.airline_id,
            'status': self.status.value,
            'status_label': self.status.label,
            'direction': self.direction.value,
        }


@dataclass(frozen=True)
class FlightData:
    """Both board columns plus the time they were produced."""
    arrivals: Tuple[Flight, ...] = field(default_factory=tuple)
    departures: Tuple[Flight, ...] = field(default_factory=tuple)
    last_updated: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            'arrivals': [f.to_dict() for f in self.arrivals],
            'departures': [f.to_dict() for f in self.departures],
            'last_updated': self.last_updated.isoformat() if self.last_updated else None,
        }
