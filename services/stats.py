from datetime import timedelta

from errors import ValidationError
from model import Booking, BookingStatus, Flight, FlightStatus
from status import flight_status, utcnow

PERIODS = ("today", "week", "month", "all")


def period_start(period, now):
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "today":
        return today
    if period == "week":
        return today - timedelta(days=7)
    if period == "month":
        return today - timedelta(days=30)
    if period == "all":
        return None
    raise ValidationError(f"Unknown period. Must be one of: {', '.join(PERIODS)}", code="invalid_period", field="period")


def _summarise(flights, period, now):
    upcoming = sum(1 for f in flights if flight_status(f.departure_date, now) is FlightStatus.UPCOMING)
    flight_ids = [f.id for f in flights]
    bookings = Booking.query.filter(Booking.flight_id.in_(flight_ids)).all() if flight_ids else []

    by_status = {status.value: 0 for status in BookingStatus}
    for booking in bookings:
        by_status[booking.status] = by_status.get(booking.status, 0) + 1

    # refunded bookings give the money back
    revenue = sum(b.price for b in bookings if b.status != BookingStatus.REFUNDED.value)

    return {
        "period": period,
        "total_flights": len(flights),
        "upcoming": upcoming,
        "passed": len(flights) - upcoming,
        "total_bookings": len(bookings),
        "bookings_by_status": by_status,
        "total_revenue": revenue,
    }


def _flights(period, now, company_id=None):
    """Flights departing on or after the period start.

    There is no upper bound: "week" means everything from seven days ago on,
    upcoming flights included, so ``upcoming`` and ``passed`` split the same set.
    """
    start = period_start(period, now)
    query = Flight.query
    if company_id is not None:
        query = query.filter_by(company_id=company_id)
    if start is not None:
        query = query.filter(Flight.departure_date >= start)
    return query.all()


def platform_stats(period="all", now=None):
    now = now or utcnow()
    return _summarise(_flights(period, now), period, now)


def company_stats(company_id, period="all", now=None):
    now = now or utcnow()
    stats = _summarise(_flights(period, now, company_id=company_id), period, now)
    stats["company_id"] = company_id
    return stats
