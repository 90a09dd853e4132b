"""
Environment-aware configuration.
Values come from the process environment (and .env via python-dotenv);
each config class fixes the defaults for one environment.
"""
import os
import re
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()  # Read .env if present

DEV_JWT_SECRET = "dev-secret-change-me"

_DURATION = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$")
_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days", "w": "weeks"}


def parse_duration(value, default: timedelta) -> timedelta:
    """'24h' -> 24 hours, '7d' -> 7 days, '900' -> 900 seconds; anything else -> default."""
    if value is None:
        return default
    match = _DURATION.match(str(value).lower())
    if not match:
        return default
    amount, unit = match.groups()
    return timedelta(**{_UNITS[unit]: int(amount)})


def _bool(value, default=False):
    if value is None:
        return default
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _origins(value):
    if not value or value.strip() == "*":
        return "*"
    return [o.strip() for o in value.split(",") if o.strip()]


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    PORT = int(os.getenv("PORT", "8000"))
    HOST = os.getenv("HOST", "0.0.0.0")

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///pos-warehouse.db")
    SQLALCHEMY_ECHO = _bool(os.getenv("SQLALCHEMY_ECHO"))

    # comma-separated list in env, '*' for any
    CORS_ORIGINS = _origins(os.getenv("ALLOWED_ORIGINS", "*"))

    JWT_SECRET = os.getenv("JWT_SECRET", DEV_JWT_SECRET)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_ISSUER = os.getenv("JWT_ISSUER", "pos-warehouse-api")
    JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "pos-warehouse-client")
    JWT_ACCESS_TOKEN_EXPIRES = parse_duration(os.getenv("JWT_EXPIRES_IN"), timedelta(hours=24))
    JWT_REFRESH_TOKEN_EXPIRES = parse_duration(os.getenv("JWT_REFRESH_EXPIRES_IN"), timedelta(days=7))
    REFRESH_TOKEN_RETENTION = parse_duration(os.getenv("REFRESH_TOKEN_RETENTION"), timedelta(days=7))

    PAGINATION_MAX_LIMIT = int(os.getenv("PAGINATION_MAX_LIMIT", "100"))

    RATE_LIMIT_ENABLED = _bool(os.getenv("RATE_LIMIT_ENABLED"), default=True)
    RATE_LIMIT_WINDOW = int(os.getenv("RATE_LIMIT_WINDOW_MS", "900000")) / 1000.0
    RATE_LIMIT_MAX_REQUESTS = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "100"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite://"
    SQLALCHEMY_ECHO = False
    JWT_SECRET = "testing-secret-key-with-enough-length"
    RATE_LIMIT_ENABLED = False
    LOG_LEVEL = "WARNING"


class ProductionConfig(BaseConfig):
    DEBUG = False


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        if ProductionConfig.JWT_SECRET == DEV_JWT_SECRET:
            raise RuntimeError("JWT_SECRET must be set in production")
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig
