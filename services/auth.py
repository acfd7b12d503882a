from flask import current_app
from flask_jwt_extended import create_access_token
from werkzeug.security import check_password_hash

from errors import AuthError, NotFoundError
from model import Role
from schemas import Login, Register, UserCreate, parse
from services import users


def validate_credentials(email, password):
    """Look the user up by email and check the password.

    Raises ``NotFoundError`` for an unknown email, ``AuthError`` when the
    account is blocked (checked before the password) or the password does not
    match. Returns the user's public fields, never the hash.
    """
    user = users.get_user_by_email(email)
    if not user:
        raise NotFoundError(f"User with email {email} not found", code="user_not_found")
    if not user.is_active:
        raise AuthError(
            "Account has been blocked. Please contact support.", code="account_blocked", status_code=403
        )
    if not check_password_hash(user.password, password):
        raise AuthError("Invalid email or password", code="invalid_credentials")
    return user.to_dict()


def issue_session(user):
    if not isinstance(user, dict):
        user = user.to_dict()
    token = create_access_token(
        identity=str(user["id"]),
        additional_claims={"email": user["email"], "role": user["role"]},
    )
    return {"access_token": token, "user": user}


def authenticate(data):
    command = parse(Login, data)
    try:
        user = validate_credentials(command.email, command.password)
    except NotFoundError:
        current_app.logger.warning("Login attempt for unknown email %s", command.email)
        raise AuthError("Invalid email or password", code="invalid_credentials") from None
    except AuthError as exc:
        current_app.logger.warning("Login rejected for %s: %s", command.email, exc.code)
        raise
    return issue_session(user)


def register(data):
    command = parse(Register, data)
    # public sign-up only ever creates travellers
    user = users.create_user(None, command=UserCreate(**command.model_dump(), role=Role.USER))
    if current_app.config.get("REGISTER_ISSUES_SESSION", True):
        return issue_session(user)
    return {"user": user.to_dict()}
