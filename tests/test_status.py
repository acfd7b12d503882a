from datetime import datetime, timedelta, timezone

from model import FlightStatus
from status import day_bounds, flight_status, hours_until, is_refund_eligible, to_utc_naive

NOW = datetime(2026, 10, 18, 12, 0, 0)


def test_future_departure_is_upcoming():
    assert flight_status(NOW + timedelta(seconds=1), NOW) is FlightStatus.UPCOMING


def test_departure_at_now_is_passed():
    assert flight_status(NOW, NOW) is FlightStatus.PASSED


def test_past_departure_is_passed():
    assert flight_status(NOW - timedelta(days=1), NOW) is FlightStatus.PASSED


def test_status_flips_once_clock_passes_departure():
    departure = NOW + timedelta(hours=1)
    assert flight_status(departure, NOW) is FlightStatus.UPCOMING
    assert flight_status(departure, NOW + timedelta(hours=2)) is FlightStatus.PASSED


def test_aware_departure_is_compared_in_utc():
    departure = datetime(2026, 10, 18, 17, 30, tzinfo=timezone(timedelta(hours=6)))  # 11:30 UTC
    assert to_utc_naive(departure) == datetime(2026, 10, 18, 11, 30)
    assert flight_status(departure, NOW) is FlightStatus.PASSED


def test_hours_until():
    assert hours_until(NOW + timedelta(hours=36), NOW) == 36
    assert hours_until(NOW - timedelta(hours=3), NOW) == -3


def test_refund_window_boundaries():
    assert is_refund_eligible(NOW + timedelta(hours=48), NOW)
    assert is_refund_eligible(NOW + timedelta(hours=24), NOW)
    assert not is_refund_eligible(NOW + timedelta(hours=23, minutes=59), NOW)
    assert not is_refund_eligible(NOW - timedelta(hours=5), NOW)


def test_day_bounds():
    start, end = day_bounds(datetime(2026, 10, 20, 15, 45))
    assert start == datetime(2026, 10, 20)
    assert end == datetime(2026, 10, 21)
