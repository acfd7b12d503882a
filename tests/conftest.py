from datetime import timedelta

import pytest
from werkzeug.security import generate_password_hash

from app import create_app
from config import TestConfig
from model import Company, Role, User, db
from services import auth, flights
from status import utcnow

PASSWORD = "secret123"


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def now():
    return utcnow().replace(microsecond=0)


def make_user(email, role=Role.USER, name="Test User", active=True):
    user = User(
        email=email,
        password=generate_password_hash(PASSWORD),
        name=name,
        role=role.value,
        is_active=active,
    )
    db.session.add(user)
    db.session.commit()
    return user


def headers_for(user):
    token = auth.issue_session(user)["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin(app):
    return make_user("admin@oshair.kg", Role.ADMIN, name="Admin")


@pytest.fixture
def manager(app):
    return make_user("manager@oshair.kg", Role.COMPANY_MANAGER, name="Manager")


@pytest.fixture
def traveller(app):
    return make_user("elina@oshair.kg", Role.USER, name="Elina")


@pytest.fixture
def company(manager):
    company = Company(name="Osh Avia", code="OSH", manager_id=manager.id)
    db.session.add(company)
    db.session.commit()
    return company


@pytest.fixture
def flight_data(company, now):
    departure = now + timedelta(hours=48)
    return {
        "flightNumber": "OA101",
        "origin": "Osh",
        "destination": "Bishkek",
        "departureDate": departure.isoformat(),
        "arrivalDate": (departure + timedelta(minutes=55)).isoformat(),
        "duration": 55,
        "companyId": company.id,
        "economyPrice": 100,
        "economySeats": 120,
        "comfortPrice": 150,
        "comfortSeats": 24,
        "businessPrice": 300,
        "businessSeats": 12,
    }


@pytest.fixture
def flight(flight_data, now):
    return flights.create_flight(flight_data, now=now)


def flight_departing(company, departure, number="OA900", now=None):
    """Create a flight departing at ``departure``, even in the past."""
    created_at = min(now or utcnow(), departure - timedelta(hours=1))
    return flights.create_flight({
        "flightNumber": number,
        "origin": "Osh",
        "destination": "Moscow",
        "departureDate": departure.isoformat(),
        "arrivalDate": (departure + timedelta(hours=4)).isoformat(),
        "duration": 240,
        "companyId": company.id,
        "economyPrice": 100,
        "economySeats": 50,
    }, now=created_at)
