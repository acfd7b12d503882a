import re
import secrets
import string

from flask import current_app

from errors import ConflictError, NotFoundError, ValidationError
from model import Booking, BookingStatus, Flight, SeatClass, User, db
from schemas import BookingCreate, BookingUpdate, parse
from status import is_refund_eligible, utcnow

CONFIRMATION_ALPHABET = string.ascii_uppercase + string.digits
CONFIRMATION_LENGTH = 8
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
ID_RE = re.compile(r"^[1-9][0-9]*$")


def generate_confirmation_id():
    # TODO: retry on a unique-index collision instead of surfacing a 409
    return "".join(secrets.choice(CONFIRMATION_ALPHABET) for _ in range(CONFIRMATION_LENGTH))


def _identity(value, label):
    if not ID_RE.match(value):
        raise ValidationError(f"Invalid {label} ID format: {value}", code="invalid_id", field=f"{label}Id")
    return int(value)


def _check_email(value):
    if not EMAIL_RE.match(value):
        raise ValidationError("Invalid email format", code="invalid_email", field="passengerEmail")


def create_booking(data):
    command = parse(BookingCreate, data)

    user_id = _identity(command.user_id, "user")
    flight_id = _identity(command.flight_id, "flight")
    if not db.session.get(User, user_id):
        raise NotFoundError(f"User with ID {user_id} not found", field="userId")
    flight = db.session.get(Flight, flight_id)
    if not flight:
        raise NotFoundError(f"Flight with ID {flight_id} not found", field="flightId")

    valid_classes = [seat.value for seat in SeatClass]
    if command.seat_class not in valid_classes:
        raise ValidationError(
            f"Invalid seat class. Must be one of: {', '.join(valid_classes)}",
            code="invalid_seat_class",
            field="seatClass",
        )
    sold = (flight.price_for(command.seat_class) or 0) > 0 and (flight.seats_for(command.seat_class) or 0) > 0
    if not sold:
        raise ValidationError(
            f"{command.seat_class.capitalize()} class is not available on this flight",
            code="invalid_seat_class",
            field="seatClass",
        )

    expected = flight.price_for(command.seat_class)
    if command.price != expected:
        raise ValidationError(
            f"Price mismatch. Expected {expected} for {command.seat_class} class",
            code="price_mismatch",
            field="price",
        )

    _check_email(command.passenger_email)

    # seat counts on the flight are display data and are not decremented
    booking = Booking(
        user_id=user_id,
        flight_id=flight_id,
        passenger_name=command.passenger_name,
        passenger_email=command.passenger_email,
        seat_class=command.seat_class,
        price=command.price,
        confirmation_id=generate_confirmation_id(),
        status=BookingStatus.CONFIRMED.value,
    )
    db.session.add(booking)
    db.session.commit()
    current_app.logger.info(
        "Booking %s confirmed on flight %s (%s)", booking.confirmation_id, flight.flight_number, booking.seat_class
    )
    return booking


def cancel_booking(booking_id, now=None):
    now = now or utcnow()
    booking = get_booking(booking_id)
    if booking.status != BookingStatus.CONFIRMED.value:
        raise ConflictError(f"Booking is already {booking.status}", code="booking_closed")
    flight = db.session.get(Flight, booking.flight_id)
    if not flight:
        raise NotFoundError("Flight not found")

    refundable = is_refund_eligible(flight.departure_date, now)
    booking.status = (BookingStatus.REFUNDED if refundable else BookingStatus.CANCELLED).value
    booking.cancelled_at = now
    booking.refunded_at = now if refundable else None
    db.session.commit()
    current_app.logger.info("Booking %s %s", booking.confirmation_id, booking.status)
    return booking


def list_bookings(user_id=None):
    query = Booking.query
    if user_id is not None:
        query = query.filter_by(user_id=user_id)
    return query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()


def list_bookings_for_company(company_id):
    flight_ids = db.select(Flight.id).where(Flight.company_id == company_id)
    return (
        Booking.query.filter(Booking.flight_id.in_(flight_ids))
        .order_by(Booking.created_at.desc(), Booking.id.desc())
        .all()
    )


def get_booking(booking_id):
    booking = db.session.get(Booking, booking_id)
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


def find_by_confirmation(confirmation_id):
    booking = Booking.query.filter_by(confirmation_id=confirmation_id.strip().upper()).first()
    if not booking:
        raise NotFoundError(f"Booking {confirmation_id} not found")
    return booking


def update_booking(booking_id, data):
    booking = get_booking(booking_id)
    changes = parse(BookingUpdate, data, partial=True).changes()
    if "passenger_email" in changes:
        _check_email(changes["passenger_email"])
    for key, value in changes.items():
        setattr(booking, key, value)
    db.session.commit()
    current_app.logger.info("Booking %s updated: %s", booking.confirmation_id, ", ".join(sorted(changes)))
    return booking


def delete_booking(booking_id):
    booking = get_booking(booking_id)
    db.session.delete(booking)
    db.session.commit()
    current_app.logger.info("Booking %s deleted", booking.confirmation_id)
    return booking
