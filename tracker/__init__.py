"""
Program Tracker
Flask Application Factory.

Usage:
    from tracker import create_app
    app = create_app()           # defaults to "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

import click
from flask import Flask, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate

from tracker.config import config
from tracker.core.exceptions import ConflictError, NotFoundError, ValidationError
from tracker.middleware.logging_config import configure_logging
from tracker.middleware.rate_limiter import init_rate_limits
from tracker.middleware.security_headers import init_security_headers
from tracker.middleware.timing import init_request_timing
from tracker.models import db
from tracker.utils.errors import E, api_error

logger = logging.getLogger(__name__)

# ── SQLite FK enforcement (global engine event) ─────────────────────────
from sqlalchemy import event as _sa_event, engine as _sa_engine


@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],                     # no global limit, applied per-blueprint
    storage_uri=os.getenv("REDIS_URL", "memory://"),
)


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name]())

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(
            app,
            origins=[o.strip() for o in cors_origins.split(",") if o.strip()],
            supports_credentials=True,
        )
    else:
        CORS(app)

    # ── Security headers & request timing ────────────────────────────────
    init_security_headers(app)
    init_request_timing(app)

    # ── Request guard (upload size) ──────────────────────────────────────
    @app.before_request
    def _guard_request():
        max_len = app.config.get("MAX_CONTENT_LENGTH")
        if max_len and request.content_length and request.content_length > max_len:
            return api_error(E.PAYLOAD_TOO_LARGE, "File too large")
        return None

    # ── Import all models so Alembic can detect them ─────────────────────
    from tracker.models import auth as _auth_models                  # noqa: F401
    from tracker.models import program as _program_models            # noqa: F401
    from tracker.models import project as _project_models            # noqa: F401
    from tracker.models import import_record as _import_models       # noqa: F401

    # ── Auto-create tables (CREATE IF NOT EXISTS) ────────────────────────
    db_uri = app.config["SQLALCHEMY_DATABASE_URI"]
    if db_uri.startswith("sqlite:///") and ":memory:" not in db_uri:
        os.makedirs(os.path.dirname(db_uri[len("sqlite:///"):]) or ".", exist_ok=True)
    with app.app_context():
        db.create_all()
        app.logger.debug("db.create_all() completed")

    # ── Blueprints ───────────────────────────────────────────────────────
    from tracker.blueprints.auth_bp import auth_bp
    from tracker.blueprints.health_bp import health_bp
    from tracker.blueprints.import_bp import import_bp
    from tracker.blueprints.program_bp import program_bp
    from tracker.blueprints.statistics_bp import statistics_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(program_bp)
    app.register_blueprint(import_bp)
    app.register_blueprint(statistics_bp)
    app.register_blueprint(health_bp)

    _register_error_handlers(app)
    _register_cli(app)

    # ── Rate limiting (after blueprints registered) ──────────────────────
    init_rate_limits(app, limiter)

    return app


def _register_error_handlers(app):
    from tracker.services.user_service import UserServiceError

    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        logger.debug("Not found: %s (user=%s)", e, e.user_id)
        return api_error(E.NOT_FOUND, f"{e.resource} not found")

    @app.errorhandler(ValidationError)
    def handle_validation(e):
        return api_error(E.VALIDATION_INVALID, e.message, details=e.details)

    @app.errorhandler(ConflictError)
    def handle_conflict(e):
        return api_error(E.CONFLICT_DUPLICATE, str(e))

    @app.errorhandler(UserServiceError)
    def handle_user_error(e):
        return api_error(E.VALIDATION_INVALID, e.message, status=e.status_code)

    @app.errorhandler(404)
    def not_found(e):
        if request.path.startswith("/api/"):
            return {"error": "Not found", "path": request.path}, 404
        return e

    @app.errorhandler(405)
    def method_not_allowed(e):
        return {"error": "Method not allowed"}, 405

    @app.errorhandler(413)
    def payload_too_large(e):
        return api_error(E.PAYLOAD_TOO_LARGE, "File too large")

    @app.errorhandler(429)
    def rate_limited(e):
        return {"error": "Too many requests", "retry_after": e.description}, 429

    @app.errorhandler(500)
    def server_error(e):
        logger.error("500 error: %s", e, exc_info=True)
        return api_error(E.INTERNAL, "Internal server error")


def _register_cli(app):
    from tracker.services.user_service import UserServiceError, create_user, get_user_by_username

    @app.cli.command("create-user")
    @click.argument("username")
    @click.argument("password")
    @click.option("--email", default=None, help="Optional e-mail address.")
    def create_user_cmd(username, password, email):
        """Create a local user account."""
        try:
            user = create_user(username, password, email=email)
        except UserServiceError as e:
            raise click.ClickException(e.message)
        click.echo(f"Created user {user.username} (id={user.id})")

    @app.cli.command("create-admin")
    def create_admin_cmd():
        """Create the default admin/admin account if it does not exist."""
        if get_user_by_username("admin"):
            click.echo("Admin user already exists")
            return
        user = create_user("admin", "admin")
        logger.warning("Default admin account created; change its password")
        click.echo(f"Created user {user.username} (id={user.id})")
