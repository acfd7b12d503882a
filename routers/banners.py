from flask import Blueprint, jsonify, request

from model import Role
from routers.guards import roles_required
from services import banners

banners_bp = Blueprint("banners", __name__)


def active_filter():
    value = request.args.get("active")
    if value is None:
        return None
    return value.lower() in ("1", "true", "yes")


@banners_bp.route("", methods=["GET"])
def list_banners():
    return jsonify([b.to_dict() for b in banners.list_banners(active=active_filter())])


@banners_bp.route("/<int:banner_id>", methods=["GET"])
def get_banner(banner_id):
    return jsonify(banners.get_banner(banner_id).to_dict())


@banners_bp.route("", methods=["POST"])
@roles_required(Role.ADMIN)
def create_banner():
    return jsonify(banners.create_banner(request.get_json(silent=True)).to_dict()), 201


@banners_bp.route("/<int:banner_id>", methods=["PATCH"])
@roles_required(Role.ADMIN)
def update_banner(banner_id):
    return jsonify(banners.update_banner(banner_id, request.get_json(silent=True)).to_dict())


@banners_bp.route("/<int:banner_id>", methods=["DELETE"])
@roles_required(Role.ADMIN)
def delete_banner(banner_id):
    banners.delete_banner(banner_id)
    return jsonify({"message": "Banner deleted", "id": banner_id}), 200
