from flask import Blueprint, jsonify, request

from model import Role
from routers.guards import roles_required
from services import companies

companies_bp = Blueprint("companies", __name__)


@companies_bp.route("", methods=["GET"])
def list_companies():
    return jsonify([c.to_dict() for c in companies.list_companies()])


@companies_bp.route("/<int:company_id>", methods=["GET"])
def get_company(company_id):
    return jsonify(companies.get_company(company_id).to_dict())


@companies_bp.route("", methods=["POST"])
@roles_required(Role.ADMIN)
def create_company():
    company = companies.create_company(request.get_json(silent=True))
    return jsonify(company.to_dict()), 201


@companies_bp.route("/<int:company_id>", methods=["PATCH"])
@roles_required(Role.ADMIN)
def update_company(company_id):
    return jsonify(companies.update_company(company_id, request.get_json(silent=True)).to_dict())


@companies_bp.route("/<int:company_id>", methods=["DELETE"])
@roles_required(Role.ADMIN)
def delete_company(company_id):
    companies.delete_company(company_id)
    return jsonify({"message": "Company deleted", "id": company_id}), 200
