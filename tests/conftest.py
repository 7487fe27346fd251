"""
Shared pytest fixtures for the task manager test suite.

Provides the Flask application, test client, per-test database lifecycle,
user and task factories, and bearer-token headers for two distinct users
so ownership rules can be asserted from both sides.

Key Concepts Demonstrated:
- Session-scoped app vs. function-scoped client and database
- Factory fixtures for flexible test-data creation
- Environment set up before the application is imported
"""

from __future__ import annotations

import os
from collections.abc import Callable
from datetime import datetime
from typing import Any

import pytest
from faker import Faker

from shared.test_helpers import TEST_JWT_SECRET, auth_headers

# Set testing environment before importing the app
os.environ["FLASK_ENV"] = "testing"
os.environ["TEST_JWT_SECRET_KEY"] = TEST_JWT_SECRET

from taskman import create_app, db  # noqa: E402
from taskman.models import Task, User  # noqa: E402
from taskman.tokens import issue_token  # noqa: E402

fake = Faker()

DEFAULT_PASSWORD = "StrongPass123!"


# -----------------------------------------------------------------------------
# Application Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(scope="session")
def app():
    """
    Provide the Flask application for the whole test session.

    Built once with the 'testing' configuration and shared by every test.
    """
    application = create_app("testing")
    yield application


@pytest.fixture(scope="function")
def client(app, db_session):
    """
    Provide a fresh test client per test so request state never leaks.

    Depends on ``db_session`` so the tables exist before the first request
    and are dropped only after the client has closed.
    """
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture(scope="function")
def db_session(app):
    """
    Provide a clean database for each test function.

    Tables are created before the test and dropped afterwards.
    """
    with app.app_context():
        db.create_all()
        yield db
        db.session.rollback()
        db.drop_all()


# -----------------------------------------------------------------------------
# Test Data Factory Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def user_factory(app, db_session) -> Callable[..., User]:
    """
    Factory that creates and persists User records.

    Emails default to unique Faker values; the password defaults to
    ``DEFAULT_PASSWORD``.
    """

    def _create_user(
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        user = User(email=(email or fake.unique.email()).lower())
        user.set_password(password, rounds=app.config["BCRYPT_ROUNDS"])
        db_session.session.add(user)
        db_session.session.commit()
        return user

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """The primary test user."""
    return user_factory(email="owner@example.com")


@pytest.fixture
def other_user(user_factory) -> User:
    """A second user, used to check that tasks stay private to their owner."""
    return user_factory(email="intruder@example.com")


@pytest.fixture
def task_factory(db_session, user) -> Callable[..., Task]:
    """
    Factory that inserts Task rows directly, owned by ``user`` by default.
    """

    def _create_task(
        *,
        owner: User | None = None,
        title: str | None = None,
        description: str | None = None,
        due_date: datetime | None = None,
        completed: bool = False,
    ) -> Task:
        task = Task(
            user_id=(owner or user).id,
            title=title or fake.sentence(nb_words=4),
            description=description,
            due_date=due_date,
            completed=completed,
        )
        db_session.session.add(task)
        db_session.session.commit()
        return task

    return _create_task


@pytest.fixture
def sample_task(task_factory) -> Task:
    """A single task with known values, owned by ``user``."""
    return task_factory(title="Sample Task", description="This is a sample task for testing")


# -----------------------------------------------------------------------------
# Auth Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def token_for() -> Callable[[User], str]:
    """Return a callable that issues a valid token for a user."""

    def _token_for(account: User) -> str:
        return issue_token(account.id, TEST_JWT_SECRET)

    return _token_for


@pytest.fixture
def api_headers(user, token_for) -> dict[str, str]:
    """Authorization and JSON headers for ``user``."""
    return auth_headers(token_for(user))


@pytest.fixture
def other_user_headers(other_user, token_for) -> dict[str, str]:
    """Authorization and JSON headers for ``other_user``."""
    return auth_headers(token_for(other_user))


@pytest.fixture
def minimal_task_data() -> dict[str, Any]:
    """The smallest valid task payload (title only)."""
    return {"title": "Buy milk"}
