"""Recompute stored flight statuses.

Run from the project root: ``python -m scripts.refresh_flight_statuses``.
Statuses are also refreshed lazily on every read, so this is only needed
before reporting straight off the database.
"""
from app import create_app
from model import Flight, FlightStatus
from services import flights

app = create_app()

with app.app_context():
    total = Flight.query.count()
    print("Flights:", total)
    changed = flights.refresh_statuses()
    print("Updated:", changed)
    for status in FlightStatus:
        print(f"  {status.value}: {Flight.query.filter_by(status=status.value).count()}")
