"""Time-derived state of flights and bookings.

Everything here is pure: callers pass ``now`` explicitly so the same rule is
used by the services, the maintenance script and the tests.
"""
from datetime import datetime, timedelta, timezone

from model import FlightStatus, utcnow

REFUND_WINDOW = timedelta(hours=24)


def to_utc_naive(value):
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def flight_status(departure, now=None):
    """``upcoming`` strictly before departure, ``passed`` from departure on."""
    now = now or utcnow()
    if to_utc_naive(departure) > now:
        return FlightStatus.UPCOMING
    return FlightStatus.PASSED


def hours_until(departure, now=None):
    now = now or utcnow()
    return (to_utc_naive(departure) - now).total_seconds() / 3600


def is_refund_eligible(departure, now=None):
    return hours_until(departure, now) >= REFUND_WINDOW.total_seconds() / 3600


def day_bounds(day):
    start = datetime(day.year, day.month, day.day)
    return start, start + timedelta(days=1)
