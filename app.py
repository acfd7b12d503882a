import logging

from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from config import Config
from errors import AppError, AuthError
from model import User, db
from routers.admin import admin_bp
from routers.auth import auth_bp
from routers.banners import banners_bp
from routers.bookings import bookings_bp
from routers.companies import companies_bp
from routers.company import company_bp
from routers.flights import flights_bp
from routers.gallery import gallery_bp

jwt = JWTManager()

BLUEPRINTS = (
    (auth_bp, "/auth"),
    (flights_bp, "/flights"),
    (bookings_bp, "/bookings"),
    (companies_bp, "/companies"),
    (banners_bp, "/banners"),
    (gallery_bp, "/gallery"),
    (admin_bp, "/admin"),
    (company_bp, "/company"),
)


def _auth_error(message, code):
    return jsonify(AuthError(message, code=code).to_dict()), 401


@jwt.user_lookup_loader
def load_user(_jwt_header, jwt_data):
    user = db.session.get(User, int(jwt_data["sub"]))
    return user if user and user.is_active else None


@jwt.user_lookup_error_loader
def user_lookup_error(_jwt_header, jwt_data):
    return _auth_error("Account is blocked or no longer exists", "account_unavailable")


@jwt.expired_token_loader
def expired_token(_jwt_header, jwt_data):
    return _auth_error("Session has expired", "token_expired")


@jwt.invalid_token_loader
def invalid_token(reason):
    return _auth_error(f"Invalid token: {reason}", "invalid_token")


@jwt.unauthorized_loader
def missing_token(reason):
    return _auth_error(reason, "missing_token")


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(error):
        db.session.rollback()
        app.logger.exception("Integrity error")
        return jsonify({"error": "Record conflicts with existing data", "code": "conflict"}), 409

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({"error": error.description, "code": error.name.lower().replace(" ", "_")}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        db.session.rollback()
        app.logger.exception("Unhandled error")
        return jsonify({"error": "Internal server error", "code": "internal_error"}), 500


def create_app(config_object=Config):
    app = Flask(__name__)

    app.config.from_object(config_object)
    app.config.from_prefixed_env("AVIA")
    app.logger.setLevel(getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO))

    db.init_app(app)
    jwt.init_app(app)
    CORS(app, origins=app.config["CORS_ORIGINS"], supports_credentials=True)

    prefix = app.config["API_PREFIX"].rstrip("/")
    for blueprint, url_prefix in BLUEPRINTS:
        app.register_blueprint(blueprint, url_prefix=prefix + url_prefix)

    @app.route(prefix + "/health")
    def health():
        return jsonify({"status": "ok"})

    register_error_handlers(app)

    with app.app_context():
        db.create_all()

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
