from flask import current_app

from errors import ConflictError, NotFoundError, ValidationError
from model import Flight, SeatClass, db
from schemas import FlightCreate, FlightSearch, FlightUpdate, parse
from status import day_bounds, flight_status, utcnow


def _has_valid_seat_class(values):
    return any(
        (values.get(f"{seat.value}_price") or 0) > 0 and (values.get(f"{seat.value}_seats") or 0) > 0
        for seat in SeatClass
    )


def _current_values(flight):
    return {column.name: getattr(flight, column.name) for column in Flight.__table__.columns}


def _check_schedule(values, now, departure_changed=True):
    if departure_changed and values["departure_date"] < now:
        raise ValidationError("Departure date cannot be in the past", code="past_departure", field="departureDate")
    if values["arrival_date"] <= values["departure_date"]:
        raise ValidationError("Arrival date must be after departure date", code="invalid_arrival_time", field="arrivalDate")
    if values["origin"].lower() == values["destination"].lower():
        raise ValidationError("Origin and destination cannot be the same", code="same_origin_destination", field="destination")
    if not _has_valid_seat_class(values):
        raise ValidationError("At least one seat class must have both price and seats", code="no_valid_seat_class")
    if values.get("duration") is None or values["duration"] <= 0:
        raise ValidationError("Duration must be positive", code="invalid_duration", field="duration")


def _check_unique(flight_number, company_id, exclude_id=None):
    query = Flight.query.filter_by(flight_number=flight_number, company_id=company_id)
    if exclude_id is not None:
        query = query.filter(Flight.id != exclude_id)
    if query.first():
        raise ConflictError(
            f"Flight number {flight_number} already exists for this company", code="duplicate_flight"
        )


def _refresh(flights, now):
    changed = 0
    for flight in flights:
        status = flight_status(flight.departure_date, now).value
        if flight.status != status:
            flight.status = status
            changed += 1
    if changed:
        db.session.commit()
    return flights


def create_flight(data, now=None):
    now = now or utcnow()
    command = parse(FlightCreate, data)
    values = command.model_dump()
    _check_schedule(values, now)
    _check_unique(command.flight_number, command.company_id)

    flight = Flight(**values, status=flight_status(command.departure_date, now).value)
    db.session.add(flight)
    db.session.commit()
    current_app.logger.info("Flight %s created for company %s", flight.flight_number, flight.company_id)
    return flight


def list_flights(company_id=None, now=None):
    query = Flight.query
    if company_id is not None:
        query = query.filter_by(company_id=company_id)
    return _refresh(query.order_by(Flight.departure_date.asc()).all(), now or utcnow())


def search_flights(params, now=None):
    search = parse(FlightSearch, params)
    query = Flight.query.filter(Flight.is_active.is_(True))
    if search.origin:
        query = query.filter(Flight.origin.ilike(f"%{search.origin}%"))
    if search.destination:
        query = query.filter(Flight.destination.ilike(f"%{search.destination}%"))
    if search.departure_date:
        start, end = day_bounds(search.departure_date)
        query = query.filter(Flight.departure_date >= start, Flight.departure_date < end)
    if search.company_id is not None:
        query = query.filter(Flight.company_id == search.company_id)
    return _refresh(query.order_by(Flight.departure_date.asc()).all(), now or utcnow())


def get_flight(flight_id, now=None):
    flight = db.session.get(Flight, flight_id)
    if not flight:
        raise NotFoundError(f"Flight with ID {flight_id} not found")
    _refresh([flight], now or utcnow())
    return flight


def update_flight(flight_id, data, now=None):
    now = now or utcnow()
    flight = get_flight(flight_id, now)
    changes = parse(FlightUpdate, data, partial=True).changes()
    if not changes:
        return flight

    values = {**_current_values(flight), **changes}
    departure_changed = "departure_date" in changes and changes["departure_date"] != flight.departure_date
    _check_schedule(values, now, departure_changed=departure_changed)
    if "flight_number" in changes or "company_id" in changes:
        _check_unique(values["flight_number"], values["company_id"], exclude_id=flight.id)

    for key, value in changes.items():
        setattr(flight, key, value)
    flight.status = flight_status(flight.departure_date, now).value
    db.session.commit()
    current_app.logger.info("Flight %s updated: %s", flight.id, ", ".join(sorted(changes)))
    return flight


def delete_flight(flight_id):
    flight = db.session.get(Flight, flight_id)
    if not flight:
        raise NotFoundError(f"Flight with ID {flight_id} not found")
    db.session.delete(flight)
    db.session.commit()
    current_app.logger.info("Flight %s deleted", flight_id)
    return flight


def refresh_statuses(now=None):
    """Recompute every stored status, returning how many rows changed."""
    now = now or utcnow()
    flights = Flight.query.all()
    stale = [f for f in flights if f.status != flight_status(f.departure_date, now).value]
    _refresh(stale, now)
    return len(stale)
