from flask import Blueprint, jsonify, request

from model import Role
from routers.guards import current_user_id, roles_required
from services import bookings, companies, flights, stats

company_bp = Blueprint("company", __name__)


def _my_company():
    return companies.get_company_for_manager(current_user_id())


@company_bp.route("", methods=["GET"])
@roles_required(Role.COMPANY_MANAGER)
def my_company():
    return jsonify(_my_company().to_dict())


# Flights of the manager's company
@company_bp.route("/flights", methods=["GET"])
@roles_required(Role.COMPANY_MANAGER)
def list_flights():
    return jsonify([f.to_dict() for f in flights.list_flights(company_id=_my_company().id)])


@company_bp.route("/bookings", methods=["GET"])
@roles_required(Role.COMPANY_MANAGER)
def list_bookings():
    return jsonify([b.to_dict() for b in bookings.list_bookings_for_company(_my_company().id)])


# Company statistics
@company_bp.route("/stats", methods=["GET"])
@roles_required(Role.COMPANY_MANAGER)
def company_stats():
    period = request.args.get("period", "all")  # today/week/month/all
    return jsonify(stats.company_stats(_my_company().id, period))
