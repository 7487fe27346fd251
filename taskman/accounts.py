"""
Account service: signup, login and logout.

The service is built once per application with its configuration passed
in explicitly (signing secret, token lifetime, bcrypt cost) and is
registered on the app as ``app.extensions["accounts"]``.

Logout is stateless.  Tokens carry no server-side session, so a token
that was "logged out" keeps verifying until its ``exp``; there is no
revocation list.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from flask import current_app

from .errors import DuplicateEmail, InvalidCredentials
from .models import User
from .passwords import DEFAULT_ROUNDS, hash_password, verify_password
from .stores import CredentialStore
from .tokens import DEFAULT_TTL, issue_token

logger = logging.getLogger(__name__)


class AccountService:
    """
    Registers users and exchanges credentials for tokens.

    Args:
        secret: HS256 signing secret for issued tokens.
        token_ttl: Lifetime of an issued token.
        bcrypt_rounds: Cost factor for new password hashes.
        users: Credential store; a fresh :class:`CredentialStore` by default.
    """

    def __init__(
        self,
        secret: str,
        token_ttl: timedelta = DEFAULT_TTL,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
        users: CredentialStore | None = None,
    ) -> None:
        self._secret = secret
        self._token_ttl = token_ttl
        self._bcrypt_rounds = bcrypt_rounds
        self._users = users or CredentialStore()
        # Checked against when the email is unknown so both login failure
        # paths pay for one bcrypt verification.
        self._dummy_hash = hash_password("dummy-password", rounds=bcrypt_rounds)

    def register(self, email: str, password: str) -> User:
        """
        Create a user with a bcrypt-hashed password.

        Raises:
            DuplicateEmail: If the email is already registered.
        """
        if self._users.find_by_email(email) is not None:
            logger.info("Signup rejected: email already registered")
            raise DuplicateEmail()

        user = User(email=email)
        user.set_password(password, rounds=self._bcrypt_rounds)
        self._users.add(user)
        logger.info("Registered user %s", user.id)
        return user

    def login(self, email: str, password: str) -> str:
        """
        Verify credentials and issue a token for the user.

        Raises:
            InvalidCredentials: If the email is unknown or the password
                does not match.  Both cases are indistinguishable to the
                caller.
        """
        user = self._users.find_by_email(email)
        if user is None:
            verify_password(password, self._dummy_hash)
            logger.info("Login failed: unknown email")
            raise InvalidCredentials()

        if not user.check_password(password):
            logger.info("Login failed: wrong password for user %s", user.id)
            raise InvalidCredentials()

        return issue_token(user.id, self._secret, self._token_ttl)

    def logout(self) -> None:
        """Acknowledge a logout; nothing is invalidated server-side."""
        return None


def get_account_service() -> AccountService:
    """Return the account service registered on the current app."""
    return current_app.extensions["accounts"]
