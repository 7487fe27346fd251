"""
Route blueprints for the task manager API.

- health: public liveness probe
- auth: signup, login and logout
- tasks: owner-scoped task CRUD behind the auth gate
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from flask import request
from sqlalchemy.exc import SQLAlchemyError

from .. import db
from ..errors import InternalError

logger = logging.getLogger(__name__)


@contextmanager
def storage_guard(message: str) -> Iterator[None]:
    """
    Map storage failures inside the block to a 500 with *message*.

    The session is rolled back and the original error logged; the client
    only ever sees *message*.
    """
    try:
        yield
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("%s: %s", message, exc)
        raise InternalError(message) from exc


def json_body() -> dict[str, Any]:
    """Return the request's JSON object, or an empty dict if there is none."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
