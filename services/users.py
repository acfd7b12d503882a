from flask import current_app
from werkzeug.security import check_password_hash, generate_password_hash

from errors import AuthError, ConflictError, NotFoundError
from model import User, db
from schemas import PasswordChange, UserCreate, UserUpdate, parse


def get_user_by_email(email):
    return User.query.filter_by(email=email).first()


def _check_email_free(email, exclude_id=None):
    existing = get_user_by_email(email)
    if existing and existing.id != exclude_id:
        raise ConflictError(f"User with email {email} already exists", code="email_taken", field="email")


def create_user(data, command=None):
    command = command or parse(UserCreate, data)
    _check_email_free(command.email)

    user = User(
        email=command.email,
        password=generate_password_hash(command.password),
        name=command.name,
        role=command.role.value,
        is_active=command.is_active,
    )
    db.session.add(user)
    db.session.commit()
    current_app.logger.info("User %s created with role %s", user.email, user.role)
    return user


def list_users():
    return User.query.order_by(User.id.asc()).all()


def get_user(user_id):
    user = db.session.get(User, user_id)
    if not user:
        raise NotFoundError(f"User with ID {user_id} not found")
    return user


def update_user(user_id, data):
    user = get_user(user_id)
    changes = parse(UserUpdate, data, partial=True).changes()
    if "email" in changes:
        _check_email_free(changes["email"], exclude_id=user.id)
    if "role" in changes:
        changes["role"] = changes["role"].value

    for key, value in changes.items():
        setattr(user, key, value)
    db.session.commit()
    current_app.logger.info("User %s updated: %s", user.id, ", ".join(sorted(changes)))
    return user


def set_user_active(user_id, active):
    user = get_user(user_id)
    user.is_active = active
    db.session.commit()
    current_app.logger.info("User %s %s", user.id, "unblocked" if active else "blocked")
    return user


def change_password(user_id, data):
    user = get_user(user_id)
    command = parse(PasswordChange, data)
    if not check_password_hash(user.password, command.current_password):
        raise AuthError("Current password is incorrect", code="invalid_credentials", field="currentPassword")
    user.password = generate_password_hash(command.new_password)
    db.session.commit()
    current_app.logger.info("Password changed for user %s", user.id)
    return user


def delete_user(user_id):
    user = get_user(user_id)
    db.session.delete(user)
    db.session.commit()
    current_app.logger.info("User %s deleted", user_id)
    return user
