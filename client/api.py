"""
HTTP client for the booking API.

Error responses are mapped back onto the exceptions in ``errors`` so callers
handle a rejected booking the same way whether they run in-process or over
HTTP.
"""
import logging

import requests

from errors import ERRORS_BY_STATUS, AppError

logger = logging.getLogger(__name__)


class ApiClient:
    def __init__(self, base_url, token=None, timeout=30, session=None):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def request(self, method, path, json=None, params=None):
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        response = self.session.request(
            method,
            f"{self.base_url}{path}",
            json=json,
            params={k: v for k, v in (params or {}).items() if v is not None} or None,
            headers=headers,
            timeout=self.timeout,
        )
        if response.status_code >= 400:
            raise self._error(response)
        if not response.content:
            return None
        return response.json()

    def _error(self, response):
        try:
            body = response.json()
        except ValueError:
            body = {}
        message = body.get("error") or body.get("msg") or response.reason or "Request failed"
        error_cls = ERRORS_BY_STATUS.get(response.status_code, AppError)
        logger.warning("%s %s -> %s %s", response.request.method, response.url, response.status_code, message)
        return error_cls(message, code=body.get("code"), field=body.get("field"), status_code=response.status_code)

    def get(self, path, **params):
        return self.request("GET", path, params=params)

    def post(self, path, json=None):
        return self.request("POST", path, json=json)

    def patch(self, path, json=None):
        return self.request("PATCH", path, json=json)

    def put(self, path, json=None):
        return self.request("PUT", path, json=json)

    def delete(self, path):
        return self.request("DELETE", path)

    # Auth

    def login(self, email, password):
        session = self.post("/auth/login", {"email": email, "password": password})
        self.token = session["access_token"]
        return session

    def register(self, email, password, name):
        session = self.post("/auth/register", {"email": email, "password": password, "name": name})
        self.token = session.get("access_token", self.token)
        return session

    def logout(self):
        self.token = None

    def profile(self):
        return self.get("/auth/profile")

    # Flights

    def flights(self, company_id=None):
        return self.get("/flights", companyId=company_id)

    def search_flights(self, origin=None, destination=None, departure_date=None):
        return self.get("/flights", origin=origin, destination=destination, departureDate=departure_date)

    def flight(self, flight_id):
        return self.get(f"/flights/{flight_id}")

    def create_flight(self, data):
        return self.post("/flights", data)

    def update_flight(self, flight_id, data):
        return self.patch(f"/flights/{flight_id}", data)

    def delete_flight(self, flight_id):
        return self.delete(f"/flights/{flight_id}")

    # Bookings

    def bookings(self, user_id=None):
        return self.get("/bookings", userId=user_id)

    def booking(self, booking_id):
        return self.get(f"/bookings/{booking_id}")

    def booking_by_confirmation(self, confirmation_id):
        return self.get(f"/bookings/confirmation/{confirmation_id}")

    def create_booking(self, data):
        return self.post("/bookings", data)

    def cancel_booking(self, booking_id):
        return self.patch(f"/bookings/{booking_id}/cancel")

    # Companies, users, banners, gallery

    def companies(self):
        return self.get("/companies")

    def create_company(self, data):
        return self.post("/companies", data)

    def update_company(self, company_id, data):
        return self.patch(f"/companies/{company_id}", data)

    def users(self):
        return self.get("/admin/users")

    def block_user(self, user_id):
        return self.put(f"/admin/users/{user_id}/block")

    def unblock_user(self, user_id):
        return self.put(f"/admin/users/{user_id}/unblock")

    def banners(self, active=None):
        return self.get("/banners", active=None if active is None else str(active).lower())

    def create_banner(self, data):
        return self.post("/banners", data)

    def gallery(self, category=None):
        return self.get("/gallery", category=category)

    def create_gallery_item(self, data):
        return self.post("/gallery", data)
