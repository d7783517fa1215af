"""
Shared pytest fixtures for the todo API test suite.

Provides the Flask application, HTTP client, per-test database lifecycle,
and factories for users, tokens and tasks used by the unit, integration
and security suites.

Key Concepts Demonstrated:
- Session-scoped app vs function-scoped client and database
- Factory fixtures (user_factory, task_factory) for flexible test data
- Tokens minted by the real TokenService so tests exercise the wire format
"""

from __future__ import annotations

import os
from collections.abc import Callable

import pytest
from faker import Faker

# Set testing environment before importing the app
os.environ["FLASK_ENV"] = "testing"

from todo_app import create_app, db
from todo_app.models import Task, User
from todo_app.stores import TaskStore

fake = Faker()

DEFAULT_PASSWORD = "StrongPass123!"


def auth_headers(token: str) -> dict[str, str]:
    """Build JSON API headers with bearer token auth."""
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }


# -----------------------------------------------------------------------------
# Application Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(scope="session")
def app():
    """Provide one testing-config application for the whole session."""
    application = create_app("testing")
    yield application


@pytest.fixture(scope="function")
def client(app):
    """Provide a fresh test client per test so no request state leaks."""
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture(scope="function")
def db_session(app):
    """
    Provide a clean database for each test function.

    Creates all tables before the test, then rolls back anything
    uncommitted and drops all tables afterwards.
    """
    with app.app_context():
        db.create_all()
        yield db
        db.session.rollback()
        db.drop_all()


@pytest.fixture
def services(app):
    """The workflows and token service wired up by ``create_app``."""
    return app.extensions["todo_app"]


# -----------------------------------------------------------------------------
# Data Factories
# -----------------------------------------------------------------------------


@pytest.fixture
def user_factory(db_session, services) -> Callable[..., User]:
    """
    Factory that registers users through ``AuthService``.

    Defaults to a unique Faker email so several users can be created in a
    single test.
    """

    def _create_user(
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        name: str | None = None,
    ) -> User:
        return services.auth.register(
            email=email or fake.unique.email(),
            password=password,
            name=name or fake.name(),
        )

    return _create_user


@pytest.fixture
def token_for(services) -> Callable[[User], str]:
    """Return a callable that issues a bearer token for a ``User``."""

    def _token_for(user: User) -> str:
        return services.tokens.issue(user.id, user.email, user.name)

    return _token_for


@pytest.fixture
def task_factory(db_session) -> Callable[..., Task]:
    """Factory that inserts Task rows directly through the task store."""
    store = TaskStore()

    def _create_task(
        *,
        owner: User,
        title: str | None = None,
        description: str | None = None,
        completed: bool = False,
    ) -> Task:
        return store.create(
            user_id=owner.id,
            title=title or fake.sentence(nb_words=4),
            description=description if description is not None else fake.paragraph(),
            completed=completed,
        )

    return _create_task


# -----------------------------------------------------------------------------
# Authenticated Users
# -----------------------------------------------------------------------------


@pytest.fixture
def user_one(user_factory) -> User:
    return user_factory(email="user.one@example.com", name="User One")


@pytest.fixture
def user_two(user_factory) -> User:
    return user_factory(email="user.two@example.com", name="User Two")


@pytest.fixture
def api_headers(user_one, token_for) -> dict[str, str]:
    """Authorization + JSON headers for ``user_one``."""
    return auth_headers(token_for(user_one))


@pytest.fixture
def second_user_headers(user_two, token_for) -> dict[str, str]:
    """Authorization + JSON headers for ``user_two`` (tenant-isolation tests)."""
    return auth_headers(token_for(user_two))


@pytest.fixture
def sample_task(task_factory, user_one) -> Task:
    """A single task with known values owned by ``user_one``."""
    return task_factory(
        owner=user_one,
        title="Sample Task",
        description="This is a sample task for testing",
    )
