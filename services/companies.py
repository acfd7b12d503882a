from flask import current_app
from sqlalchemy import func

from errors import ConflictError, NotFoundError, ValidationError
from model import Company, Role, db
from schemas import CompanyCreate, CompanyUpdate, parse
from services.users import get_user


def _check_unique(column, value, label, exclude_id=None):
    query = Company.query.filter(func.lower(column) == value.lower())
    if exclude_id is not None:
        query = query.filter(Company.id != exclude_id)
    if query.first():
        raise ConflictError(
            f'Company with {label} "{value}" already exists', code=f"duplicate_company_{label}", field=label
        )


def _check_manager(manager_id, exclude_id=None):
    try:
        manager = get_user(manager_id)
    except NotFoundError:
        raise NotFoundError(f"Manager with ID {manager_id} not found", field="managerId") from None
    if manager.role != Role.COMPANY_MANAGER.value:
        raise ValidationError(
            "Manager must have the company_manager role", code="invalid_manager", field="managerId"
        )
    query = Company.query.filter_by(manager_id=manager_id)
    if exclude_id is not None:
        query = query.filter(Company.id != exclude_id)
    if query.first():
        raise ConflictError(
            "This manager already manages another company", code="manager_taken", field="managerId"
        )


def create_company(data):
    command = parse(CompanyCreate, data)
    _check_unique(Company.name, command.name, "name")
    _check_unique(Company.code, command.code, "code")
    _check_manager(command.manager_id)

    company = Company(**command.model_dump())
    db.session.add(company)
    db.session.commit()
    current_app.logger.info("Company %s (%s) created", company.name, company.code)
    return company


def list_companies():
    return Company.query.order_by(Company.name.asc()).all()


def get_company(company_id):
    company = db.session.get(Company, company_id)
    if not company:
        raise NotFoundError(f"Company with ID {company_id} not found")
    return company


def get_company_for_manager(user_id):
    company = Company.query.filter_by(manager_id=user_id).first()
    if not company:
        raise NotFoundError("No company is assigned to this manager")
    return company


def update_company(company_id, data):
    company = get_company(company_id)
    changes = parse(CompanyUpdate, data, partial=True).changes()
    if "name" in changes:
        _check_unique(Company.name, changes["name"], "name", exclude_id=company.id)
    if "code" in changes:
        _check_unique(Company.code, changes["code"], "code", exclude_id=company.id)
    if changes.get("manager_id", company.manager_id) != company.manager_id:
        _check_manager(changes["manager_id"], exclude_id=company.id)

    for key, value in changes.items():
        setattr(company, key, value)
    db.session.commit()
    current_app.logger.info("Company %s updated: %s", company.id, ", ".join(sorted(changes)))
    return company


def set_company_active(company_id, active):
    company = get_company(company_id)
    company.is_active = active
    db.session.commit()
    current_app.logger.info("Company %s %s", company.id, "unblocked" if active else "blocked")
    return company


def delete_company(company_id):
    company = get_company(company_id)
    db.session.delete(company)
    db.session.commit()
    current_app.logger.info("Company %s deleted", company_id)
    return company
