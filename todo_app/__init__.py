"""
Todo API Flask application factory.

``create_app`` assembles the service: configuration, SQLAlchemy, the
stores and workflows (built once and kept on ``app.extensions``), the
identity middleware, the route blueprints and the JSON error handlers.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from flask import Flask
from flask_sqlalchemy import SQLAlchemy

from config import DEFAULT_JWT_SECRET, get_config

# Shared SQLAlchemy instance -- bound to a concrete app inside create_app()
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
    if sqlite_path in ("", ":memory:"):
        return

    Path(sqlite_path).parent.mkdir(parents=True, exist_ok=True)


def create_app(config_name: str | None = None) -> Flask:
    """
    Create and configure the todo API application.

    Args:
        config_name: ``"development"``, ``"testing"`` or ``"production"``.
            When ``None``, resolved from ``FLASK_ENV`` (default
            ``"development"``).

    Returns:
        A configured :class:`~flask.Flask` application with database tables
        created.
    """
    app = Flask(__name__, instance_relative_config=True)
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    logger.info("Creating todo API app with config: %s", config_class.__name__)
    if app.config["JWT_SECRET"] == DEFAULT_JWT_SECRET and not app.config.get("TESTING"):
        logger.warning(
            "JWT_SECRET is using the insecure built-in default; "
            "set JWT_SECRET before deploying"
        )

    os.makedirs(app.instance_path, exist_ok=True)
    _ensure_sqlite_db_parent_exists(app.config.get("SQLALCHEMY_DATABASE_URI", ""))

    db.init_app(app)

    # Imported here because these modules import ``db`` from this package
    from .auth import init_identity_middleware
    from .errors import register_error_handlers
    from .passwords import PasswordHasher
    from .routes.auth import auth_bp
    from .routes.health import health_bp
    from .routes.tasks import tasks_bp
    from .services import AppServices, AuthService, TaskService
    from .stores import TaskStore, UserStore
    from .tokens import TokenService

    tokens = TokenService(
        secret=app.config["JWT_SECRET"],
        expires_in=app.config.get("JWT_EXPIRES_IN"),
        leeway=int(app.config.get("JWT_CLOCK_SKEW_SECONDS", 30)),
    )
    app.extensions["todo_app"] = AppServices(
        auth=AuthService(
            users=UserStore(),
            hasher=PasswordHasher(app.config["PASSWORD_HASH_METHOD"]),
            tokens=tokens,
        ),
        tasks=TaskService(tasks=TaskStore()),
        tokens=tokens,
    )

    init_identity_middleware(app)
    register_error_handlers(app)

    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(tasks_bp, url_prefix="/tasks")
    app.register_blueprint(health_bp)

    # Production deployments would manage the schema with a migration tool
    with app.app_context():
        db.create_all()
        logger.info("Database tables created")

    return app
