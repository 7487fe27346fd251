"""
Password hashing and verification.

Uses bcrypt for hashing with automatic salting and a configurable work
factor.  Verification goes through ``bcrypt.checkpw`` so the comparison
is constant-time.
"""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes; longer inputs are rejected.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt at the given cost factor."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    """Constant-time comparison against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("ascii"))
    except (ValueError, TypeError):
        return False
