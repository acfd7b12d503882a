import enum
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def utcnow():
    # stored datetimes are naive UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    return value.isoformat() + "Z" if value else None


class Role(str, enum.Enum):
    USER = "user"
    COMPANY_MANAGER = "company_manager"
    ADMIN = "admin"


class SeatClass(str, enum.Enum):
    ECONOMY = "economy"
    COMFORT = "comfort"
    BUSINESS = "business"


class FlightStatus(str, enum.Enum):
    UPCOMING = "upcoming"
    PASSED = "passed"


class BookingStatus(str, enum.Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class BannerType(str, enum.Enum):
    PROMOTION = "promotion"
    ADVERTISEMENT = "advertisement"


class GalleryCategory(str, enum.Enum):
    AIRCRAFT = "aircraft"
    DESTINATION = "destination"
    SERVICE = "service"
    EVENT = "event"


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def timestamps(self):
        return {"createdAt": isoformat(self.created_at), "updatedAt": isoformat(self.updated_at)}


class User(TimestampMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)  # werkzeug hash
    name = db.Column(db.String(100), nullable=False)
    role = db.Column(db.String(20), default=Role.USER.value, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "isActive": self.is_active,
            **self.timestamps(),
        }


class Company(TimestampMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    code = db.Column(db.String(3), unique=True, nullable=False)
    manager_id = db.Column(db.Integer, unique=True, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "code": self.code,
            "managerId": self.manager_id,
            "isActive": self.is_active,
            **self.timestamps(),
        }


class Flight(TimestampMixin, db.Model):
    __table_args__ = (db.UniqueConstraint("flight_number", "company_id", name="uq_flight_number_company"),)

    id = db.Column(db.Integer, primary_key=True)
    flight_number = db.Column(db.String(20), nullable=False)
    origin = db.Column(db.String(100), nullable=False)
    destination = db.Column(db.String(100), nullable=False)
    departure_date = db.Column(db.DateTime, nullable=False)
    arrival_date = db.Column(db.DateTime, nullable=False)
    duration = db.Column(db.Integer, nullable=False)  # minutes
    company_id = db.Column(db.Integer, nullable=False, index=True)
    economy_price = db.Column(db.Float, default=0, nullable=False)
    economy_seats = db.Column(db.Integer, default=0, nullable=False)
    comfort_price = db.Column(db.Float, default=0, nullable=False)
    comfort_seats = db.Column(db.Integer, default=0, nullable=False)
    business_price = db.Column(db.Float, default=0, nullable=False)
    business_seats = db.Column(db.Integer, default=0, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    status = db.Column(db.String(20), default=FlightStatus.UPCOMING.value, nullable=False)

    def price_for(self, seat_class):
        return getattr(self, f"{SeatClass(seat_class).value}_price")

    def seats_for(self, seat_class):
        return getattr(self, f"{SeatClass(seat_class).value}_seats")

    def to_dict(self):
        return {
            "id": self.id,
            "flightNumber": self.flight_number,
            "origin": self.origin,
            "destination": self.destination,
            "departureDate": isoformat(self.departure_date),
            "arrivalDate": isoformat(self.arrival_date),
            "duration": self.duration,
            "companyId": self.company_id,
            "economyPrice": self.economy_price,
            "economySeats": self.economy_seats,
            "comfortPrice": self.comfort_price,
            "comfortSeats": self.comfort_seats,
            "businessPrice": self.business_price,
            "businessSeats": self.business_seats,
            "isActive": self.is_active,
            "status": self.status,
            **self.timestamps(),
        }


class Booking(TimestampMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=False, index=True)
    flight_id = db.Column(db.Integer, nullable=False, index=True)
    passenger_name = db.Column(db.String(100), nullable=False)
    passenger_email = db.Column(db.String(255), nullable=False)
    seat_class = db.Column(db.String(20), nullable=False)
    price = db.Column(db.Float, nullable=False)
    confirmation_id = db.Column(db.String(8), unique=True, nullable=False)
    status = db.Column(db.String(20), default=BookingStatus.CONFIRMED.value, nullable=False)
    cancelled_at = db.Column(db.DateTime)
    refunded_at = db.Column(db.DateTime)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "flightId": self.flight_id,
            "passengerName": self.passenger_name,
            "passengerEmail": self.passenger_email,
            "seatClass": self.seat_class,
            "price": self.price,
            "confirmationId": self.confirmation_id,
            "status": self.status,
            "bookingDate": isoformat(self.created_at),
            "cancelledAt": isoformat(self.cancelled_at),
            "refundedAt": isoformat(self.refunded_at),
            **self.timestamps(),
        }


class Banner(TimestampMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(500), nullable=False)
    image_url = db.Column(db.String(1000), nullable=False)
    link = db.Column(db.String(1000))
    duration = db.Column(db.Integer, nullable=False)
    active = db.Column(db.Boolean, default=True, nullable=False)
    type = db.Column(db.String(20), nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "imageUrl": self.image_url,
            "link": self.link,
            "duration": self.duration,
            "active": self.active,
            "type": self.type,
            **self.timestamps(),
        }


class GalleryItem(TimestampMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(500), nullable=False)
    image_url = db.Column(db.String(1000), nullable=False)
    active = db.Column(db.Boolean, default=True, nullable=False)
    category = db.Column(db.String(20), nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "imageUrl": self.image_url,
            "active": self.active,
            "category": self.category,
            **self.timestamps(),
        }
