"""
Unit tests for the account service.

Runs ``AccountService`` against the test database without going through
HTTP, covering registration, duplicate detection and the login paths.
"""

from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy import func, select

from shared.test_helpers import TEST_JWT_SECRET
from taskman.accounts import AccountService
from taskman.errors import DuplicateEmail, InvalidCredentials
from taskman.models import User
from taskman.tokens import verify_token

pytestmark = pytest.mark.unit


@pytest.fixture
def accounts(db_session) -> AccountService:
    return AccountService(TEST_JWT_SECRET, bcrypt_rounds=4)


def _user_count(db_session) -> int:
    return db_session.session.scalar(select(func.count()).select_from(User))


def test_register_stores_hashed_password(accounts, db_session):
    """Test that registration persists the user with a bcrypt hash."""
    # Act
    user = accounts.register("new@example.com", "StrongPass123!")

    # Assert
    stored = db_session.session.get(User, user.id)
    assert stored.email == "new@example.com"
    assert stored.password_hash != "StrongPass123!"
    assert stored.check_password("StrongPass123!")


def test_register_duplicate_email_is_rejected(accounts, db_session):
    """Test that a second signup with the same email fails and stores nothing."""
    # Arrange
    accounts.register("dup@example.com", "first-password")

    # Act & Assert
    with pytest.raises(DuplicateEmail) as excinfo:
        accounts.register("dup@example.com", "second-password")
    assert excinfo.value.message == "User already exists"
    assert excinfo.value.status_code == 400
    assert _user_count(db_session) == 1


def test_login_returns_token_for_user(accounts):
    """Test that valid credentials produce a token naming the user."""
    # Arrange
    user = accounts.register("login@example.com", "StrongPass123!")

    # Act
    token = accounts.login("login@example.com", "StrongPass123!")

    # Assert
    assert verify_token(token, TEST_JWT_SECRET).user_id == user.id


def test_login_honours_configured_ttl(db_session):
    """Test that the token lifetime comes from the service configuration."""
    # Arrange
    service = AccountService(TEST_JWT_SECRET, token_ttl=timedelta(seconds=0), bcrypt_rounds=4)
    service.register("short@example.com", "StrongPass123!")

    # Act
    token = service.login("short@example.com", "StrongPass123!")

    # Assert
    assert not verify_token(token, TEST_JWT_SECRET).ok


@pytest.mark.parametrize(
    ("email", "password"),
    [
        ("login@example.com", "wrong-password"),
        ("nobody@example.com", "StrongPass123!"),
    ],
    ids=["wrong-password", "unknown-email"],
)
def test_login_failures_are_indistinguishable(accounts, email, password):
    """Test that unknown email and wrong password raise the same error."""
    # Arrange
    accounts.register("login@example.com", "StrongPass123!")

    # Act & Assert
    with pytest.raises(InvalidCredentials) as excinfo:
        accounts.login(email, password)
    assert excinfo.value.message == "Invalid credentials"
    assert excinfo.value.status_code == 401


def test_logout_is_a_no_op(accounts):
    """Test that logout succeeds without any server-side state."""
    assert accounts.logout() is None
