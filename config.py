"""
Configuration for the todo API.

Provides environment-aware configuration classes: a shared ``Config`` base
class holds defaults, and environment-specific subclasses
(``DevelopmentConfig``, ``TestingConfig``, ``ProductionConfig``) override
only what differs.  ``get_config`` resolves the class at runtime from an
explicit name or the ``FLASK_ENV`` environment variable.

Token settings:
    - ``JWT_SECRET`` signs every bearer token (HS256).  The fallback value
      is a well-known weak default and must be overridden in deployment.
    - ``JWT_EXPIRES_IN`` is an optional lifetime such as ``"3600"``,
      ``"30m"``, ``"24h"`` or ``"7d"``.  Empty means tokens never expire.
    - ``JWT_CLOCK_SKEW_SECONDS`` is the tolerance applied to ``exp``/``iat``.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent

DEFAULT_JWT_SECRET = "your-secret-key"

_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def parse_duration(value: str | None) -> int | None:
    """
    Convert a duration string into whole seconds.

    Args:
        value: A bare integer (seconds) or an integer followed by one of
            ``s``, ``m``, ``h``, ``d``.  ``None`` or blank disables expiry.

    Returns:
        The number of seconds, or ``None`` when no duration is configured.

    Raises:
        ValueError: If the value is not a recognised duration.
    """
    if value is None or not str(value).strip():
        return None
    match = _DURATION_PATTERN.match(str(value).lower())
    if not match:
        raise ValueError(f"Invalid duration '{value}'. Use e.g. 3600, 30m, 24h or 7d.")
    amount, unit = match.groups()
    return int(amount) * _DURATION_UNITS[unit]


def _split_prefixes(raw: str) -> tuple[str, ...]:
    """Split a comma-separated list of path prefixes, dropping blanks."""
    return tuple(part.strip() for part in raw.split(",") if part.strip())


class Config:
    """
    Base configuration shared by all environments.

    Every setting can be controlled via an environment variable so that
    container orchestrators can inject secrets at deploy time.
    """

    SECRET_KEY: str = os.environ.get("SECRET_KEY", "todo-api-dev-secret-change-in-production")
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
    SQLALCHEMY_DATABASE_URI: str = os.environ.get(
        "DATABASE_URL",
        f"sqlite:///{BASE_DIR / 'instance' / 'todo.db'}",
    )

    JWT_SECRET: str = os.environ.get("JWT_SECRET", DEFAULT_JWT_SECRET)
    JWT_EXPIRES_IN: int | None = parse_duration(os.environ.get("JWT_EXPIRES_IN"))
    JWT_CLOCK_SKEW_SECONDS: int = int(os.environ.get("JWT_CLOCK_SKEW_SECONDS", "30"))

    # Werkzeug hash spec; the iteration count is the cost factor
    PASSWORD_HASH_METHOD: str = os.environ.get("PASSWORD_HASH_METHOD", "pbkdf2:sha256:600000")

    # Requests under these prefixes must carry a valid bearer token
    PROTECTED_PATH_PREFIXES: tuple[str, ...] = _split_prefixes(
        os.environ.get("PROTECTED_PATH_PREFIXES", "/tasks")
    )


class DevelopmentConfig(Config):
    """Local development: debug on, normal error handling."""

    DEBUG: bool = True
    TESTING: bool = False


class TestingConfig(Config):
    """
    Configuration for the automated test suite.

    Uses an in-memory SQLite database so every test starts from a clean
    schema.  Flask-SQLAlchemy pairs ``:memory:`` URLs with ``StaticPool`` by
    default, which shares the one connection across threads.  A cheap
    password hash keeps the suite fast.
    """

    DEBUG: bool = True
    TESTING: bool = True
    SQLALCHEMY_DATABASE_URI: str = os.environ.get(
        "TEST_DATABASE_URL", "sqlite:///:memory:"
    )
    SQLALCHEMY_ENGINE_OPTIONS: dict = {
        "connect_args": {"check_same_thread": False},
    }
    JWT_SECRET: str = os.environ.get("TEST_JWT_SECRET", "test-jwt-secret-for-local-tests-123456")
    JWT_EXPIRES_IN: int | None = None
    PASSWORD_HASH_METHOD: str = "pbkdf2:sha256:1000"


class ProductionConfig(Config):
    """
    Configuration for production deployments.

    All secrets **must** be supplied through environment variables; the
    defaults in ``Config`` are insecure and the app factory warns when the
    fallback ``JWT_SECRET`` is still in use.
    """

    DEBUG: bool = False
    TESTING: bool = False


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Resolve a configuration class by environment name.

    Args:
        env: One of ``"development"``, ``"testing"``, or ``"production"``.
            When ``None``, ``FLASK_ENV`` is consulted, falling back to
            ``"development"``.

    Returns:
        The configuration class (not an instance).  Unrecognised names
        resolve to ``DevelopmentConfig``.
    """
    if env is None:
        env = os.environ.get("FLASK_ENV", "development")
    return config.get(env, config["default"])
