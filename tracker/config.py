"""
Program Tracker
Settings for the app factory, one class per environment.

    app.config.from_object(config[os.getenv("APP_ENV", "development")]())

Environment variables: SECRET_KEY, DATABASE_URL, TEST_DATABASE_URL,
CORS_ORIGINS, REDIS_URL, SESSION_COOKIE_SECURE, LOG_LEVEL.
"""

import os
import secrets
from datetime import timedelta

PROJECT_ROOT = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
XLS_MIMETYPE = "application/vnd.ms-excel"


def _database_url(env_var, fallback=None):
    """Read a database URL, accepting the legacy ``postgres://`` scheme."""
    url = os.getenv(env_var, "")
    if not url:
        return fallback
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


class Config:
    """Shared defaults."""

    # A per-process key logs everyone out on restart; set SECRET_KEY outside dev
    SECRET_KEY = os.getenv("SECRET_KEY") or secrets.token_hex(32)
    DEBUG = False
    TESTING = False

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True, "pool_recycle": 300}

    # Login state: signed cookie, valid for one day
    SESSION_COOKIE_NAME = "sessionId"
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"
    PERMANENT_SESSION_LIFETIME = timedelta(hours=24)

    REDIS_URL = os.getenv("REDIS_URL", "memory://")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # Spreadsheet uploads
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024
    IMPORT_ALLOWED_MIMETYPES = (XLSX_MIMETYPE, XLS_MIMETYPE)


class DevelopmentConfig(Config):
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = _database_url(
        "DATABASE_URL",
        f"sqlite:///{os.path.join(PROJECT_ROOT, 'instance', 'tracker_dev.db')}",
    )


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "testing-secret-key"
    SQLALCHEMY_DATABASE_URI = _database_url("TEST_DATABASE_URL", "sqlite:///:memory:")
    # In-memory SQLite runs on a static pool; pool tuning does not apply
    SQLALCHEMY_ENGINE_OPTIONS = {}
    RATELIMIT_ENABLED = False


class ProductionConfig(Config):
    SQLALCHEMY_DATABASE_URI = _database_url("DATABASE_URL")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")
    SESSION_COOKIE_SECURE = True
    SQLALCHEMY_ENGINE_OPTIONS = {
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_recycle": 300,
        "pool_timeout": 20,
        "connect_args": {"options": "-c statement_timeout=30000"},
    }

    def __init__(self):
        if not self.SQLALCHEMY_DATABASE_URI:
            raise RuntimeError("DATABASE_URL must be set in production")
        if not os.getenv("SECRET_KEY"):
            raise RuntimeError("SECRET_KEY must be set in production")


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}
