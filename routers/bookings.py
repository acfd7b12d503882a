from flask import Blueprint, jsonify, request

from errors import PermissionDenied
from model import Flight, Role
from routers.flights import json_object, managed_company_id
from routers.guards import can_view_booking, current_role, current_user_id, roles_required
from services import bookings

bookings_bp = Blueprint("bookings", __name__)

ANY_ROLE = tuple(Role)


def _managed_flight_ids():
    company_id = managed_company_id()
    if company_id is None:
        return set()
    return {f.id for f in Flight.query.filter_by(company_id=company_id).with_entities(Flight.id)}


def _visible(booking):
    if not can_view_booking(current_role(), current_user_id(), booking, _managed_flight_ids()):
        raise PermissionDenied("You cannot access this booking")
    return booking


@bookings_bp.route("", methods=["POST"])
@roles_required(*ANY_ROLE)
def create_booking():
    data = json_object()
    data.setdefault("userId", current_user_id())
    if current_role() is not Role.ADMIN and str(data["userId"]) != str(current_user_id()):
        raise PermissionDenied("You can only book for your own account")
    booking = bookings.create_booking(data)
    return jsonify(booking.to_dict()), 201


@bookings_bp.route("", methods=["GET"])
@roles_required(*ANY_ROLE)
def list_bookings():
    user_id = request.args.get("userId", type=int)
    if current_role() is not Role.ADMIN:
        user_id = current_user_id()
    return jsonify([b.to_dict() for b in bookings.list_bookings(user_id=user_id)])


@bookings_bp.route("/user/<int:user_id>", methods=["GET"])
@roles_required(*ANY_ROLE)
def list_user_bookings(user_id):
    if current_role() is not Role.ADMIN and user_id != current_user_id():
        raise PermissionDenied("You can only view your own bookings")
    return jsonify([b.to_dict() for b in bookings.list_bookings(user_id=user_id)])


# Anonymous lookup by the code given to the passenger
@bookings_bp.route("/confirmation/<confirmation_id>", methods=["GET"])
def find_by_confirmation(confirmation_id):
    return jsonify(bookings.find_by_confirmation(confirmation_id).to_dict())


@bookings_bp.route("/<int:booking_id>", methods=["GET"])
@roles_required(*ANY_ROLE)
def get_booking(booking_id):
    return jsonify(_visible(bookings.get_booking(booking_id)).to_dict())


@bookings_bp.route("/<int:booking_id>", methods=["PATCH"])
@roles_required(*ANY_ROLE)
def update_booking(booking_id):
    booking = bookings.get_booking(booking_id)
    if current_role() is not Role.ADMIN and booking.user_id != current_user_id():
        raise PermissionDenied("You can only change your own bookings")
    return jsonify(bookings.update_booking(booking_id, request.get_json(silent=True)).to_dict())


@bookings_bp.route("/<int:booking_id>/cancel", methods=["PATCH"])
@roles_required(*ANY_ROLE)
def cancel_booking(booking_id):
    booking = bookings.get_booking(booking_id)
    if current_role() is not Role.ADMIN and booking.user_id != current_user_id():
        raise PermissionDenied("You can only cancel your own bookings")
    return jsonify(bookings.cancel_booking(booking_id).to_dict())


@bookings_bp.route("/<int:booking_id>", methods=["DELETE"])
@roles_required(Role.ADMIN)
def delete_booking(booking_id):
    bookings.delete_booking(booking_id)
    return jsonify({"message": "Booking deleted", "id": booking_id}), 200
