"""
Auth gate: bearer-token verification for protected endpoints.

:class:`AuthGate` turns the raw ``Authorization`` header into a verified
user id or a rejection.  It is constructed with its secret and leeway in
``create_app`` and stored as ``app.extensions["auth_gate"]``; the
``require_auth`` decorator looks it up per request and stores the
identity on ``flask.g``.

Rejections, in the order they are checked:

    ========================  ======  ================================
    Condition                 Status  Message
    ========================  ======  ================================
    no header                 401     No token, authorization denied
    no token after "Bearer"   401     Token format is invalid
    bad signature / garbage   401     Token is not valid
    ``nbf`` in the future     401     Token not active yet
    ``exp`` passed            401     Token expired
    anything unexpected       500     Server error
    ========================  ======  ================================

The precise reason is logged; the client only sees the message above.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import wraps

from flask import current_app, g, request

from .errors import AuthError, InternalError
from .tokens import TokenError, verify_token

logger = logging.getLogger(__name__)

_REJECTIONS = {
    TokenError.MALFORMED: "Token is not valid",
    TokenError.BAD_SIGNATURE: "Token is not valid",
    TokenError.NOT_YET_VALID: "Token not active yet",
    TokenError.EXPIRED: "Token expired",
}


class AuthGate:
    """
    Verifies bearer tokens with a fixed secret.

    Args:
        secret: HS256 secret the tokens were signed with.
        leeway: Seconds of clock-skew tolerance on ``exp``/``nbf``.
    """

    def __init__(self, secret: str, leeway: int = 0) -> None:
        self._secret = secret
        self._leeway = leeway

    def authenticate(self, authorization: str | None) -> str:
        """
        Return the user id carried by an ``Authorization`` header value.

        Raises:
            AuthError: For a missing, malformed, invalid or expired token.
            InternalError: If verification fails unexpectedly.
        """
        if not authorization:
            raise AuthError("No token, authorization denied")

        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise AuthError("Token format is invalid")

        try:
            result = verify_token(token.strip(), self._secret, leeway=self._leeway)
        except Exception as exc:
            logger.exception("Token verification error: %s", exc)
            raise InternalError("Server error") from exc

        if not result.ok:
            logger.warning("Rejected token (%s): %s", result.error.value, result.detail)
            raise AuthError(_REJECTIONS[result.error])
        return result.user_id


def require_auth(view_func: Callable):
    """
    Decorator that enforces bearer-token authentication on a view.

    On success ``g.user_id`` holds the verified identity for the rest of
    the request; on failure the view never runs.
    """

    @wraps(view_func)
    def wrapper(*args, **kwargs):
        gate: AuthGate = current_app.extensions["auth_gate"]
        g.user_id = gate.authenticate(request.headers.get("Authorization"))
        return view_func(*args, **kwargs)

    return wrapper
