"""
Token codec: issuing and verifying bearer tokens.

Tokens are HS256-signed JSON Web Tokens produced with PyJWT.  They carry
no server-side state, so verification is purely a function of the token,
the shared secret and the current time.

Token structure (claims):
    - ``user_id`` -- opaque identifier of the authenticated user.
    - ``iat``     -- issued-at timestamp (UTC epoch seconds).
    - ``exp``     -- expiration timestamp; the token is rejected from this
      moment on.
    - ``nbf``     -- optional not-before timestamp.

``verify_token`` never raises for a bad token.  It returns a
:class:`Verification` whose ``error`` names exactly why the token was
refused, so callers branch on a value instead of on exception types.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

import jwt

ALGORITHM = "HS256"
REQUIRED_TOKEN_CLAIMS = ["user_id", "iat", "exp"]
DEFAULT_TTL = timedelta(hours=1)


class TokenError(str, Enum):
    """Reasons a token can fail verification."""

    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad_signature"
    NOT_YET_VALID = "not_yet_valid"
    EXPIRED = "expired"


@dataclass(frozen=True)
class Verification:
    """
    Outcome of :func:`verify_token`.

    Exactly one of ``user_id`` and ``error`` is set.  ``detail`` holds the
    underlying library message and is meant for server-side logs only.
    """

    user_id: str | None = None
    error: TokenError | None = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, user_id: str) -> Verification:
        return cls(user_id=user_id)

    @classmethod
    def failure(cls, error: TokenError, detail: str) -> Verification:
        return cls(error=error, detail=detail)


def issue_token(
    user_id: str,
    secret: str,
    ttl: timedelta = DEFAULT_TTL,
    *,
    not_before: datetime | None = None,
) -> str:
    """
    Create an HS256-signed token for *user_id* expiring ``now + ttl``.

    Args:
        user_id: Identifier of the authenticated user.  Must be a
            non-empty string.
        secret: Shared signing secret.
        ttl: Lifetime of the token.
        not_before: Optional moment before which the token is not valid.

    Returns:
        A compact JWS string suitable for an ``Authorization: Bearer``
        header.

    Raises:
        ValueError: If *user_id* is blank.
    """
    if not isinstance(user_id, str) or not user_id.strip():
        raise ValueError("user_id must be a non-empty string")

    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "user_id": user_id,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    if not_before is not None:
        payload["nbf"] = int(not_before.timestamp())
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def verify_token(token: str, secret: str, *, leeway: int = 0) -> Verification:
    """
    Verify *token* against *secret* and return the embedded user id.

    The signature is checked first, then ``exp`` and ``nbf`` (both with
    *leeway* seconds of tolerance), then the presence of the required
    claims.  A token whose ``exp`` equals the current second is already
    expired.

    Returns:
        A successful :class:`Verification` carrying ``user_id``, or a
        failed one tagged with the matching :class:`TokenError`.
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            options={"require": REQUIRED_TOKEN_CLAIMS},
            leeway=leeway,
        )
    except jwt.ExpiredSignatureError as exc:
        return Verification.failure(TokenError.EXPIRED, str(exc))
    except jwt.ImmatureSignatureError as exc:
        return Verification.failure(TokenError.NOT_YET_VALID, str(exc))
    except jwt.InvalidSignatureError as exc:
        return Verification.failure(TokenError.BAD_SIGNATURE, str(exc))
    except jwt.InvalidTokenError as exc:
        return Verification.failure(TokenError.MALFORMED, str(exc))

    user_id = payload.get("user_id")
    if not isinstance(user_id, str) or not user_id.strip():
        return Verification.failure(TokenError.MALFORMED, "Invalid user_id claim")
    return Verification.success(user_id)
