from flask import Blueprint, jsonify, request

from errors import NotFoundError, PermissionDenied, ValidationError
from model import Role
from routers.guards import can_manage_flight, current_role, current_user_id, roles_required
from services import companies, flights

flights_bp = Blueprint("flights", __name__)

SEARCH_KEYS = ("origin", "destination", "departureDate")


def json_object():
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object", code="invalid_body")
    return data


def managed_company_id():
    if current_role() is not Role.COMPANY_MANAGER:
        return None
    try:
        return companies.get_company_for_manager(current_user_id()).id
    except NotFoundError:
        return None


def _ensure_can_manage(company_id):
    if not can_manage_flight(current_role(), company_id, managed_company_id()):
        raise PermissionDenied("You can only manage flights of your own company")


# Public list / search
@flights_bp.route("", methods=["GET"])
def list_flights():
    args = request.args.to_dict()
    if any(args.get(key) for key in SEARCH_KEYS):
        result = flights.search_flights(args)
    else:
        company_id = request.args.get("companyId", type=int)
        result = flights.list_flights(company_id=company_id)
    return jsonify([f.to_dict() for f in result])


@flights_bp.route("/<int:flight_id>", methods=["GET"])
def get_flight(flight_id):
    return jsonify(flights.get_flight(flight_id).to_dict())


@flights_bp.route("", methods=["POST"])
@roles_required(Role.ADMIN, Role.COMPANY_MANAGER)
def create_flight():
    data = json_object()
    if current_role() is Role.COMPANY_MANAGER and not data.get("companyId"):
        data["companyId"] = managed_company_id()
    if data.get("companyId"):
        _ensure_can_manage(_as_int(data["companyId"]))
    flight = flights.create_flight(data)
    return jsonify(flight.to_dict()), 201


@flights_bp.route("/<int:flight_id>", methods=["PATCH"])
@roles_required(Role.ADMIN, Role.COMPANY_MANAGER)
def update_flight(flight_id):
    data = json_object()
    flight = flights.get_flight(flight_id)
    _ensure_can_manage(flight.company_id)
    if "companyId" in data:
        _ensure_can_manage(_as_int(data["companyId"]))
    return jsonify(flights.update_flight(flight_id, data).to_dict())


@flights_bp.route("/<int:flight_id>", methods=["DELETE"])
@roles_required(Role.ADMIN, Role.COMPANY_MANAGER)
def delete_flight(flight_id):
    flight = flights.get_flight(flight_id)
    _ensure_can_manage(flight.company_id)
    flights.delete_flight(flight_id)
    return jsonify({"message": "Flight deleted", "id": flight_id}), 200


def _as_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        # left for the schema to report
        return value
