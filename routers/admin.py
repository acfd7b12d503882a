from flask import Blueprint, jsonify, request

from model import Role
from routers.guards import roles_required
from services import companies, stats, users

admin_bp = Blueprint("admin", __name__)


# Users
@admin_bp.route("/users", methods=["GET"])
@roles_required(Role.ADMIN)
def list_users():
    return jsonify([u.to_dict() for u in users.list_users()])


@admin_bp.route("/users/<int:user_id>", methods=["GET"])
@roles_required(Role.ADMIN)
def get_user(user_id):
    return jsonify(users.get_user(user_id).to_dict())


@admin_bp.route("/users", methods=["POST"])
@roles_required(Role.ADMIN)
def create_user():
    return jsonify(users.create_user(request.get_json(silent=True)).to_dict()), 201


@admin_bp.route("/users/<int:user_id>", methods=["PATCH"])
@roles_required(Role.ADMIN)
def update_user(user_id):
    return jsonify(users.update_user(user_id, request.get_json(silent=True)).to_dict())


@admin_bp.route("/users/<int:user_id>/block", methods=["PUT"])
@roles_required(Role.ADMIN)
def block_user(user_id):
    users.set_user_active(user_id, False)
    return jsonify({"message": "User blocked", "id": user_id}), 200


@admin_bp.route("/users/<int:user_id>/unblock", methods=["PUT"])
@roles_required(Role.ADMIN)
def unblock_user(user_id):
    users.set_user_active(user_id, True)
    return jsonify({"message": "User unblocked", "id": user_id}), 200


@admin_bp.route("/users/<int:user_id>/change-password", methods=["PATCH"])
@roles_required(Role.ADMIN)
def change_password(user_id):
    users.change_password(user_id, request.get_json(silent=True))
    return jsonify({"message": "Password changed", "id": user_id}), 200


@admin_bp.route("/users/<int:user_id>", methods=["DELETE"])
@roles_required(Role.ADMIN)
def delete_user(user_id):
    users.delete_user(user_id)
    return jsonify({"message": "User deleted", "id": user_id}), 200


# Companies
@admin_bp.route("/companies/<int:company_id>/block", methods=["PUT"])
@roles_required(Role.ADMIN)
def block_company(company_id):
    companies.set_company_active(company_id, False)
    return jsonify({"message": "Company blocked", "id": company_id}), 200


@admin_bp.route("/companies/<int:company_id>/unblock", methods=["PUT"])
@roles_required(Role.ADMIN)
def unblock_company(company_id):
    companies.set_company_active(company_id, True)
    return jsonify({"message": "Company unblocked", "id": company_id}), 200


# Platform statistics
@admin_bp.route("/stats", methods=["GET"])
@roles_required(Role.ADMIN)
def admin_stats():
    period = request.args.get("period", "all")  # today/week/month/all
    return jsonify(stats.platform_stats(period))
