"""
Task manager Flask application factory.

``create_app`` assembles the service: configuration, the SQLAlchemy
extension, the account service and auth gate (both built from explicit
configuration values), the JSON error handlers and the route blueprints.

Blueprints:
  * ``health_bp`` -- ``/api/health`` liveness probe.
  * ``auth_bp``   -- ``/api/auth`` signup, login, logout.
  * ``tasks_bp``  -- ``/api/tasks`` owner-scoped task CRUD.
"""

from __future__ import annotations

import logging
import os
from datetime import timedelta
from pathlib import Path

from flask import Flask
from flask_sqlalchemy import SQLAlchemy

from config import get_config, load_jwt_secret

db = SQLAlchemy()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _ensure_sqlite_db_parent_exists(database_uri: str) -> None:
    """Create parent directories for file-based SQLite URIs when missing."""
    sqlite_prefix = "sqlite:///"
    if not database_uri.startswith(sqlite_prefix):
        return

    sqlite_path = database_uri[len(sqlite_prefix) :].split("?", 1)[0]
    if sqlite_path == ":memory:":
        return

    Path(sqlite_path).parent.mkdir(parents=True, exist_ok=True)


def create_app(config_name: str | None = None) -> Flask:
    """
    Create and configure the task manager application.

    Args:
        config_name: ``"development"``, ``"testing"`` or ``"production"``.
            When ``None``, ``FLASK_ENV`` decides, defaulting to
            ``"development"``.

    Returns:
        A configured :class:`~flask.Flask` instance with its database
        tables created.

    Raises:
        RuntimeError: If no JWT secret is configured.
    """
    app = Flask(__name__, instance_relative_config=True)
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    secret = load_jwt_secret(testing=bool(app.config.get("TESTING")))

    logger.info("Creating task manager app with config: %s", config_class.__name__)

    os.makedirs(app.instance_path, exist_ok=True)
    _ensure_sqlite_db_parent_exists(app.config.get("SQLALCHEMY_DATABASE_URI", ""))

    db.init_app(app)

    # Imported here: these modules import ``db`` from this package.
    from .accounts import AccountService
    from .auth import AuthGate
    from .errors import register_error_handlers
    from .routes.auth import auth_bp
    from .routes.health import health_bp
    from .routes.tasks import tasks_bp

    app.extensions["accounts"] = AccountService(
        secret,
        token_ttl=timedelta(seconds=app.config["JWT_EXPIRY_SECONDS"]),
        bcrypt_rounds=app.config["BCRYPT_ROUNDS"],
    )
    app.extensions["auth_gate"] = AuthGate(
        secret,
        leeway=app.config["JWT_CLOCK_SKEW_SECONDS"],
    )

    register_error_handlers(app)
    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(tasks_bp, url_prefix="/api/tasks")

    with app.app_context():
        db.create_all()
        logger.info("Database tables created")

    return app
