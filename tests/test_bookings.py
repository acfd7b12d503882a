import re
from datetime import timedelta

import pytest

from conftest import flight_departing, headers_for, make_user
from errors import ConflictError, NotFoundError, ValidationError
from model import Booking, BookingStatus, Flight, db
from services import bookings


@pytest.fixture
def booking_data(traveller, flight):
    return {
        "userId": traveller.id,
        "flightId": flight.id,
        "passengerName": "Elina Aitbaeva",
        "passengerEmail": "elina@oshair.kg",
        "seatClass": "economy",
        "price": 100,
    }


@pytest.fixture
def booking(booking_data):
    return bookings.create_booking(booking_data)


def rejects(data, error_cls, code):
    with pytest.raises(error_cls) as exc:
        bookings.create_booking(data)
    assert exc.value.code == code
    return exc.value


class TestCreateBooking:
    def test_confirmed_with_confirmation_id(self, booking):
        assert booking.status == BookingStatus.CONFIRMED.value
        assert re.fullmatch(r"[A-Z0-9]{8}", booking.confirmation_id)
        assert booking.price == 100

    def test_string_ids_are_accepted(self, booking_data):
        booking_data["userId"] = str(booking_data["userId"])
        booking_data["flightId"] = str(booking_data["flightId"])
        assert bookings.create_booking(booking_data).id is not None

    @pytest.mark.parametrize("seat_class,price", [("economy", 100), ("comfort", 150), ("business", 300)])
    def test_price_must_match_seat_class(self, booking_data, seat_class, price):
        booking_data.update(seatClass=seat_class, price=price + 1)
        error = rejects(booking_data, ValidationError, "price_mismatch")
        assert error.field == "price"

        booking_data["price"] = price
        assert bookings.create_booking(booking_data).seat_class == seat_class

    def test_missing_field(self, booking_data):
        del booking_data["passengerEmail"]
        assert rejects(booking_data, ValidationError, "missing_field").field == "passengerEmail"

    @pytest.mark.parametrize("value", ["abc", "0", "-3", "1.5"])
    def test_malformed_ids(self, booking_data, value):
        booking_data["flightId"] = value
        assert rejects(booking_data, ValidationError, "invalid_id").field == "flightId"

    def test_unknown_user(self, booking_data):
        booking_data["userId"] = 999
        assert rejects(booking_data, NotFoundError, "not_found").field == "userId"

    def test_unknown_flight(self, booking_data):
        booking_data["flightId"] = 999
        assert rejects(booking_data, NotFoundError, "not_found").field == "flightId"

    def test_unknown_seat_class(self, booking_data):
        booking_data["seatClass"] = "first"
        rejects(booking_data, ValidationError, "invalid_seat_class")

    def test_class_not_sold_on_flight(self, booking_data, company, now):
        economy_only = flight_departing(company, now + timedelta(days=3), now=now)
        booking_data.update(flightId=economy_only.id, seatClass="business", price=0)
        assert rejects(booking_data, ValidationError, "invalid_seat_class").field == "seatClass"

    def test_bad_email(self, booking_data):
        booking_data["passengerEmail"] = "elina at oshair"
        rejects(booking_data, ValidationError, "invalid_email")

    def test_checks_run_in_order(self, booking_data):
        booking_data.update(seatClass="first", price=1, passengerEmail="nope")
        rejects(booking_data, ValidationError, "invalid_seat_class")
        booking_data["seatClass"] = "economy"
        rejects(booking_data, ValidationError, "price_mismatch")

    def test_seat_counts_are_left_alone(self, booking, flight):
        db.session.expire_all()
        assert db.session.get(Flight, flight.id).economy_seats == 120


class TestCancelBooking:
    def test_refund_more_than_a_day_out(self, booking, now):
        cancelled = bookings.cancel_booking(booking.id, now=now)
        assert cancelled.status == BookingStatus.REFUNDED.value
        assert cancelled.cancelled_at == now
        assert cancelled.refunded_at == now

    def test_exactly_a_day_out_is_refunded(self, booking, flight):
        now = flight.departure_date - timedelta(hours=24)
        assert bookings.cancel_booking(booking.id, now=now).status == BookingStatus.REFUNDED.value

    def test_no_refund_inside_a_day(self, booking, flight):
        now = flight.departure_date - timedelta(hours=12)
        cancelled = bookings.cancel_booking(booking.id, now=now)
        assert cancelled.status == BookingStatus.CANCELLED.value
        assert cancelled.refunded_at is None

    def test_departed_flight_is_not_refunded(self, traveller, company, now):
        flight = flight_departing(company, now - timedelta(hours=2), now=now)
        booking = Booking(
            user_id=traveller.id, flight_id=flight.id, passenger_name="Elina",
            passenger_email="elina@oshair.kg", seat_class="economy", price=100,
            confirmation_id="PAST0001", status=BookingStatus.CONFIRMED.value,
        )
        db.session.add(booking)
        db.session.commit()
        assert bookings.cancel_booking(booking.id, now=now).status == BookingStatus.CANCELLED.value

    def test_cannot_cancel_twice(self, booking, now):
        bookings.cancel_booking(booking.id, now=now)
        with pytest.raises(ConflictError) as exc:
            bookings.cancel_booking(booking.id, now=now)
        assert exc.value.code == "booking_closed"

    def test_missing_booking(self, app):
        with pytest.raises(NotFoundError):
            bookings.cancel_booking(404)

    def test_missing_flight(self, booking, now):
        booking.flight_id = 999
        db.session.commit()
        with pytest.raises(NotFoundError):
            bookings.cancel_booking(booking.id, now=now)


class TestReadBookings:
    def test_lookup_by_confirmation_ignores_case(self, booking):
        code = booking.confirmation_id
        assert bookings.find_by_confirmation(f" {code.lower()} ").id == booking.id

    def test_unknown_confirmation(self, app):
        with pytest.raises(NotFoundError):
            bookings.find_by_confirmation("ZZZZZZZZ")

    def test_list_by_user(self, booking, admin):
        assert [b.id for b in bookings.list_bookings(user_id=booking.user_id)] == [booking.id]
        assert bookings.list_bookings(user_id=admin.id) == []

    def test_list_for_company(self, booking, company):
        assert [b.id for b in bookings.list_bookings_for_company(company.id)] == [booking.id]
        assert bookings.list_bookings_for_company(company.id + 1) == []

    def test_update_passenger_details(self, booking):
        updated = bookings.update_booking(booking.id, {"passengerName": "Elina A.", "price": 1})
        assert updated.passenger_name == "Elina A."
        assert updated.price == 100

    def test_update_rejects_bad_email(self, booking):
        with pytest.raises(ValidationError) as exc:
            bookings.update_booking(booking.id, {"passengerEmail": "elina at oshair"})
        assert exc.value.code == "invalid_email"

    def test_update_keeps_email_as_given(self, booking):
        updated = bookings.update_booking(booking.id, {"passengerEmail": "Elina@OshAir.KG"})
        assert updated.passenger_email == "Elina@OshAir.KG"

    def test_delete(self, booking):
        bookings.delete_booking(booking.id)
        with pytest.raises(NotFoundError):
            bookings.get_booking(booking.id)


class TestBookingRoutes:
    def test_book_and_cancel(self, client, traveller, flight):
        headers = headers_for(traveller)
        response = client.post("/api/v1/bookings", headers=headers, json={
            "flightId": flight.id,
            "passengerName": "Elina",
            "passengerEmail": "elina@oshair.kg",
            "seatClass": "business",
            "price": 300,
        })
        assert response.status_code == 201
        body = response.get_json()
        assert body["userId"] == traveller.id
        assert body["status"] == "confirmed"

        response = client.patch(f"/api/v1/bookings/{body['id']}/cancel", headers=headers)
        assert response.status_code == 200
        assert response.get_json()["status"] == "refunded"

    def test_cannot_book_for_someone_else(self, client, booking_data, admin, traveller):
        other = make_user("other@oshair.kg")
        response = client.post("/api/v1/bookings", json=booking_data, headers=headers_for(other))
        assert response.status_code == 403

    def test_body_must_be_an_object(self, client, traveller):
        response = client.post("/api/v1/bookings", json=[1, 2], headers=headers_for(traveller))
        assert response.status_code == 400
        assert response.get_json()["code"] == "invalid_body"

    def test_anonymous_cannot_book(self, client, booking_data):
        assert client.post("/api/v1/bookings", json=booking_data).status_code == 401

    def test_price_mismatch_is_400(self, client, booking_data, traveller):
        booking_data["price"] = 99
        response = client.post("/api/v1/bookings", json=booking_data, headers=headers_for(traveller))
        assert response.status_code == 400
        assert response.get_json()["code"] == "price_mismatch"

    def test_users_only_see_their_own(self, client, booking, traveller, admin):
        other = make_user("other@oshair.kg")
        response = client.get("/api/v1/bookings", headers=headers_for(other))
        assert response.get_json() == []
        assert client.get(f"/api/v1/bookings/{booking.id}", headers=headers_for(other)).status_code == 403
        assert client.get(f"/api/v1/bookings/user/{traveller.id}", headers=headers_for(other)).status_code == 403

        response = client.get("/api/v1/bookings", headers=headers_for(admin))
        assert [b["id"] for b in response.get_json()] == [booking.id]

    def test_manager_sees_bookings_on_own_flights(self, client, booking, manager):
        response = client.get(f"/api/v1/bookings/{booking.id}", headers=headers_for(manager))
        assert response.status_code == 200

    def test_public_confirmation_lookup(self, client, booking):
        response = client.get(f"/api/v1/bookings/confirmation/{booking.confirmation_id}")
        assert response.status_code == 200
        assert response.get_json()["id"] == booking.id

    def test_other_user_cannot_cancel(self, client, booking):
        other = make_user("other@oshair.kg")
        response = client.patch(f"/api/v1/bookings/{booking.id}/cancel", headers=headers_for(other))
        assert response.status_code == 403

    def test_only_admin_deletes(self, client, booking, traveller, admin):
        assert client.delete(f"/api/v1/bookings/{booking.id}", headers=headers_for(traveller)).status_code == 403
        assert client.delete(f"/api/v1/bookings/{booking.id}", headers=headers_for(admin)).status_code == 200
