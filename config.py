import os
from datetime import timedelta


def _flag(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///database.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "change-me-in-production")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.environ.get("JWT_EXPIRES_HOURS", "24")))

    API_PREFIX = os.environ.get("API_PREFIX", "/api/v1")
    CORS_ORIGINS = os.environ.get(
        "CORS_ORIGINS", "http://localhost:5173,http://localhost:3001"
    ).split(",")

    # register() also logs the new account in
    REGISTER_ISSUES_SESSION = _flag("REGISTER_ISSUES_SESSION", True)

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)
    REGISTER_ISSUES_SESSION = True
    LOG_LEVEL = "WARNING"
