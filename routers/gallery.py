from flask import Blueprint, jsonify, request

from model import Role
from routers.banners import active_filter
from routers.guards import roles_required
from services import gallery

gallery_bp = Blueprint("gallery", __name__)


@gallery_bp.route("", methods=["GET"])
def list_gallery():
    items = gallery.list_gallery_items(category=request.args.get("category"), active=active_filter())
    return jsonify([item.to_dict() for item in items])


@gallery_bp.route("/<int:item_id>", methods=["GET"])
def get_gallery_item(item_id):
    return jsonify(gallery.get_gallery_item(item_id).to_dict())


@gallery_bp.route("", methods=["POST"])
@roles_required(Role.ADMIN)
def create_gallery_item():
    return jsonify(gallery.create_gallery_item(request.get_json(silent=True)).to_dict()), 201


@gallery_bp.route("/<int:item_id>", methods=["PATCH"])
@roles_required(Role.ADMIN)
def update_gallery_item(item_id):
    return jsonify(gallery.update_gallery_item(item_id, request.get_json(silent=True)).to_dict())


@gallery_bp.route("/<int:item_id>", methods=["DELETE"])
@roles_required(Role.ADMIN)
def delete_gallery_item(item_id):
    gallery.delete_gallery_item(item_id)
    return jsonify({"message": "Gallery item deleted", "id": item_id}), 200
