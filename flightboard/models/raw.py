"""
Upstream flight record, as returned by the arrival-departure service.

Field names on the wire (camelCase):
    flightNumber, airlineId, airlineName
    departureAirportCode, departureAirportName
    arrivalAirportCode, arrivalAirportName
    scheduledDepartureTime, localisedScheduledDepartureTime
    estimatedDepartureTime, localisedEstimatedDepartureTime   (nullable)
    scheduledArrivalTime, localisedScheduledArrivalTime
    estimatedArrivalTime, localisedEstimatedArrivalTime       (nullable)
    status, statusLocalised
    arrivalGate, boardingGate, codeShare

Timestamps are kept as the raw strings received; interpretation happens
in the normalizer.
"""

from dataclasses import dataclass
from typing import Any, Optional


def _text(item: dict, key: str) -> str:
    """String value for key, or '' when missing/null."""
    value = item.get(key)
    if value is None:
        return ''
    return str(value).strip()


def _optional_text(item: dict, key: str) -> Optional[str]:
    """String value for key, or None when missing/null/blank."""
    return _text(item, key) or None


@dataclass(frozen=True)
class RawFlightRecord:
    """
    One flight as the provider describes it.

    Every field may be missing upstream. Missing strings become '' and
    missing optional values become None so a single bad record never
    aborts a refresh.
    """
    flight_number: str
    airline_id: str
    airline_name: str
    departure_airport_code: str
    departure_airport_name: str
    arrival_airport_code: str
    arrival_airport_name: str
    scheduled_departure: Optional[str]
    localised_scheduled_departure: Optional[str]
    estimated_departure: Optional[str]
    localised_estimated_departure: Optional[str]
    scheduled_arrival: Optional[str]
    localised_scheduled_arrival: Optional[str]
    estimated_arrival: Optional[str]
    localised_estimated_arrival: Optional[str]
    status: Optional[str]
    status_localised: Optional[str] = None
    arrival_gate: Optional[str] = None
    boarding_gate: Optional[str] = None
    code_share: bool = False

    @classmethod
    def from_dict(cls, item: Any) -> Optional['RawFlightRecord']:
        """
        Parse one element of the provider's flight array.

        Returns None if the element is absent or not an object.
        """
        if not item or not isinstance(item, dict):
            return None

        return cls(
            flight_number=_text(item, 'flightNumber'),
            airline_id=_text(item, 'airlineId'),
            airline_name=_text(item, 'airlineName'),
            departure_airport_code=_text(item, 'departureAirportCode'),
            departure_airport_name=_text(item, 'departureAirportName'),
            arrival_airport_code=_text(item, 'arrivalAirportCode'),
            arrival_airport_name=_text(item, 'arrivalAirportName'),
            scheduled_departure=_optional_text(item, 'scheduledDepartureTime'),
            localised_scheduled_departure=_optional_text(item, 'localisedScheduledDepartureTime'),
            estimated_departure=_optional_text(item, 'estimatedDepartureTime'),
            localised_estimated_departure=_optional_text(item, 'localisedEstimatedDepartureTime'),
            scheduled_arrival=_optional_text(item, 'scheduledArrivalTime'),
            localised_scheduled_arrival=_optional_text(item, 'localisedScheduledArrivalTime'),
            estimated_arrival=_optional_text(item, 'estimatedArrivalTime'),
            localised_estimated_arrival=_optional_text(item, 'localisedEstimatedArrivalTime'),
            status=_optional_text(item, 'status'),
            status_localised=_optional_text(item, 'statusLocalised'),
            arrival_gate=_optional_text(item, 'arrivalGate'),
            boarding_gate=_optional_text(item, 'boardingGate'),
            code_share=bool(item.get('codeShare')),
        )
