"""
Error taxonomy for the task manager API.

Every foreseeable failure is raised as a subclass of :class:`ApiError` and
rendered by a single Flask error handler into the JSON envelope
``{"status": false, "message": ...}``.  Validation failures additionally
carry the full list of field-level violations.

Unexpected exceptions never reach the client verbatim: the catch-all
handler logs the traceback and answers with a generic 500.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldError:
    """A single validation violation."""

    field: str
    message: str
    location: str = "body"


class ApiError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"status": False, "message": self.message}


class ValidationError(ApiError):
    """Bad or missing input; lists every violation found."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: list[FieldError], message: str | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["errors"] = [asdict(error) for error in self.errors]
        return payload


class AuthError(ApiError):
    """Missing, invalid or expired credentials."""

    status_code = 401
    default_message = "Authorization denied"


class InvalidCredentials(AuthError):
    default_message = "Invalid credentials"


class NotFoundError(ApiError):
    """Record absent or owned by someone else."""

    status_code = 404
    default_message = "Resource not found"


class ConflictError(ApiError):
    status_code = 400
    default_message = "Resource already exists"


class DuplicateEmail(ConflictError):
    default_message = "User already exists"


class InternalError(ApiError):
    """Storage or other unexpected failure; detail stays server-side."""

    status_code = 500
    default_message = "Server error"


def _render(error: ApiError) -> tuple[Response, int]:
    return jsonify(error.to_dict()), error.status_code


def _handle_api_error(error: ApiError) -> tuple[Response, int]:
    if error.status_code >= 500:
        logger.error("%s: %s", type(error).__name__, error.message)
    return _render(error)


def _handle_http_error(error: HTTPException) -> tuple[Response, int]:
    """Render werkzeug's own errors (unknown route, bad JSON, 405) as JSON."""
    status_code = error.code or 500
    return jsonify({"status": False, "message": error.description}), status_code


def _handle_unexpected(error: Exception) -> tuple[Response, int]:
    logger.exception("Unhandled error: %s", error)
    return _render(InternalError())


def register_error_handlers(app: Flask) -> None:
    """Attach the JSON error handlers to *app*."""
    app.register_error_handler(ApiError, _handle_api_error)
    app.register_error_handler(HTTPException, _handle_http_error)
    app.register_error_handler(Exception, _handle_unexpected)
