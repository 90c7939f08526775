"""
Display status inference.

The upstream status code is frequently stale (a flight can sit at
SCHEDULED long after it departed), so the board reconciles it with the
scheduled and estimated timestamps.

Priority order, first match wins:
1. Estimated time present and already reached → IN_FLIGHT
2. Upstream code CANCELLED / DELAYED / IN_AIR / LANDED (case-insensitive)
3. Minutes since scheduled time:
   - >= 15        → IN_FLIGHT
   - -30 .. 14    → GATE_CLOSING
   - < -30        → SCHEDULED

SCHEDULED and any code we don't recognise fall through to step 3; the
provider's vocabulary is open-ended.
"""

from datetime import datetime, timedelta
from typing import Optional

from flightboard.models.flight import FlightStatus

GATE_CLOSING_BEFORE_MINUTES = 30
PRESUMED_AIRBORNE_AFTER_MINUTES = 15

UPSTREAM_STATUS_MAP = {
    'CANCELLED': FlightStatus.CANCELLED,
    'DELAYED': FlightStatus.DELAYED,
    'IN_AIR': FlightStatus.IN_FLIGHT,
    'LANDED': FlightStatus.LANDED,
}


def minutes_since(scheduled_time: datetime, now: datetime) -> int:
    """Whole minutes from scheduled_time to now, floored (negative if in the future)."""
    return (now - scheduled_time) // timedelta(minutes=1)


def infer_status(
    upstream_status: Optional[str],
    scheduled_time: Optional[datetime],
    estimated_time: Optional[datetime],
    now: datetime,
) -> FlightStatus:
    """
    Determine the display status for one flight.

    Pure function of its four arguments. An elapsed estimate overrides
    every upstream code, CANCELLED included.

    A missing scheduled time leaves no window to reason about, so an
    unrecognised code then yields SCHEDULED.
    """
    if estimated_time is not None and now >= estimated_time:
        return FlightStatus.IN_FLIGHT

    if upstream_status:
        mapped = UPSTREAM_STATUS_MAP.get(upstream_status.strip().upper())
        if mapped is not None:
            return mapped

    if scheduled_time is None:
        return FlightStatus.SCHEDULED

    diff_minutes = minutes_since(scheduled_time, now)

    if diff_minutes >= PRESUMED_AIRBORNE_AFTER_MINUTES:
        return FlightStatus.IN_FLIGHT
    elif diff_minutes >= -GATE_CLOSING_BEFORE_MINUTES:
        return FlightStatus.GATE_CLOSING
    else:
        return FlightStatus.SCHEDULED
