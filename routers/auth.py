from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from routers.guards import current_user_id
from services import auth, users

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
def register():
    return jsonify(auth.register(request.get_json(silent=True))), 201


@auth_bp.route("/login", methods=["POST"])
def login():
    return jsonify(auth.authenticate(request.get_json(silent=True))), 200


@auth_bp.route("/profile", methods=["GET"])
@jwt_required()
def profile():
    user = users.get_user(current_user_id())
    return jsonify(user.to_dict())
