from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from model import Role


def _by_id(items):
    return {item["id"]: item for item in items}


@dataclass
class AppState:
    """Client-side cache of server entities.

    Nothing refreshes on its own: call the ``load_*`` methods to pull from the
    API, and the mutation helpers to push a change and merge the server's
    answer back in.
    """

    api: Any
    user: Optional[Dict[str, Any]] = None
    flights: Dict[int, dict] = field(default_factory=dict)
    bookings: Dict[int, dict] = field(default_factory=dict)
    companies: Dict[int, dict] = field(default_factory=dict)
    users: Dict[int, dict] = field(default_factory=dict)
    banners: Dict[int, dict] = field(default_factory=dict)
    gallery: Dict[int, dict] = field(default_factory=dict)

    @property
    def role(self):
        return Role(self.user["role"]) if self.user else None

    @property
    def is_authenticated(self):
        return self.user is not None

    def login(self, email, password):
        self.user = self.api.login(email, password)["user"]
        return self.user

    def logout(self):
        self.api.logout()
        self.user = None
        self.bookings.clear()
        self.users.clear()

    def load_flights(self, company_id=None):
        self.flights = _by_id(self.api.flights(company_id=company_id))
        return list(self.flights.values())

    def search_flights(self, origin=None, destination=None, departure_date=None) -> List[dict]:
        results = self.api.search_flights(origin=origin, destination=destination, departure_date=departure_date)
        self.flights.update(_by_id(results))
        return results

    def load_bookings(self):
        self.bookings = _by_id(self.api.bookings())
        return list(self.bookings.values())

    def load_companies(self):
        self.companies = _by_id(self.api.companies())
        return list(self.companies.values())

    def load_users(self):
        self.users = _by_id(self.api.users())
        return list(self.users.values())

    def load_banners(self, active=None):
        self.banners = _by_id(self.api.banners(active=active))
        return list(self.banners.values())

    def load_gallery(self, category=None):
        self.gallery = _by_id(self.api.gallery(category=category))
        return list(self.gallery.values())

    def load_all(self):
        self.load_flights()
        self.load_companies()
        self.load_banners()
        self.load_gallery()
        if self.is_authenticated:
            self.load_bookings()
            if self.role is Role.ADMIN:
                self.load_users()

    def book(self, flight_id, seat_class, passenger_name, passenger_email):
        flight = self.flights.get(flight_id) or self.api.flight(flight_id)
        booking = self.api.create_booking({
            "userId": self.user["id"],
            "flightId": flight_id,
            "passengerName": passenger_name,
            "passengerEmail": passenger_email,
            "seatClass": seat_class,
            "price": flight[f"{seat_class}Price"],
        })
        self.bookings[booking["id"]] = booking
        return booking

    def cancel(self, booking_id):
        booking = self.api.cancel_booking(booking_id)
        self.bookings[booking["id"]] = booking
        return booking

    def bookings_for_flight(self, flight_id):
        return [b for b in self.bookings.values() if b["flightId"] == flight_id]
