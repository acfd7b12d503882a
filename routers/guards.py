from functools import wraps

from flask import current_app, request
from flask_jwt_extended import get_jwt, get_jwt_identity, jwt_required

from errors import PermissionDenied
from model import Role


def current_user_id():
    return int(get_jwt_identity())


def current_role():
    try:
        return Role(get_jwt().get("role"))
    except ValueError:
        raise PermissionDenied("Access denied") from None


def roles_required(*roles):
    """jwt_required plus a check of the ``role`` claim against ``roles``."""
    def decorator(fn):
        @wraps(fn)
        @jwt_required()
        def wrapper(*args, **kwargs):
            role = current_role()
            if role not in roles:
                current_app.logger.warning(
                    "User %s (%s) denied access to %s", get_jwt_identity(), role.value, request.path
                )
                raise PermissionDenied("Access denied")
            return fn(*args, **kwargs)
        return wrapper
    return decorator


def can_manage_flight(role, company_id, managed_company_id):
    if role is Role.ADMIN:
        return True
    if role is Role.COMPANY_MANAGER:
        return managed_company_id is not None and company_id == managed_company_id
    if role is Role.USER:
        return False
    raise AssertionError(f"unhandled role {role}")


def can_view_booking(role, user_id, booking, managed_flight_ids=()):
    if role is Role.ADMIN:
        return True
    if role is Role.USER:
        return booking.user_id == user_id
    if role is Role.COMPANY_MANAGER:
        return booking.user_id == user_id or booking.flight_id in managed_flight_ids
    raise AssertionError(f"unhandled role {role}")
