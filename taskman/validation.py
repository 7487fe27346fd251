"""
Request validation for the auth and task endpoints.

Each validator walks the whole input and collects every violation before
returning, so a client sees all problems with a request at once.  The
validators only check structure; they never touch storage.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

from .errors import FieldError, ValidationError
from .passwords import MAX_PASSWORD_BYTES
from .stores import SORTABLE_FIELDS, TaskQuery

TITLE_MAX_LENGTH = 200
EMAIL_MAX_LENGTH = 254

_TASK_ID_PATTERN = re.compile(r"[0-9a-f]{32}")
_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_BOOLEAN_QUERY_VALUES = {"true": True, "false": False}


def raise_for(errors: list[FieldError]) -> None:
    if errors:
        raise ValidationError(errors)


def parse_due_date(value: str) -> datetime:
    """
    Parse an ISO-8601 date or datetime into an aware UTC datetime.

    Naive values are taken to be UTC; a trailing ``Z`` is accepted.

    Raises:
        ValueError: If *value* is not ISO-8601, or its UTC equivalent falls
            outside the representable datetime range.
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError as exc:
        raise ValueError(f"Due date out of range: {value}") from exc


def check_task_id(task_id: str) -> list[FieldError]:
    if not _TASK_ID_PATTERN.fullmatch(task_id or ""):
        return [FieldError("id", "Invalid task ID", location="params")]
    return []


def validate_task_payload(
    data: dict[str, Any], *, partial: bool
) -> tuple[dict[str, Any], list[FieldError]]:
    """
    Validate a task body and return the cleaned fields.

    Only ``title``, ``description``, ``due_date`` and ``completed`` are
    read; anything else in *data* is ignored.  With ``partial=False``
    (creation) a title is required.  With ``partial=True`` (update) only
    the fields present are checked and returned.

    Returns:
        ``(fields, errors)`` where *fields* is ready to be written to the
        store and *errors* lists every violation found.
    """
    fields: dict[str, Any] = {}
    errors: list[FieldError] = []

    if "title" in data or not partial:
        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            message = "Title cannot be empty" if partial else "Title is required"
            errors.append(FieldError("title", message))
        elif len(title.strip()) > TITLE_MAX_LENGTH:
            errors.append(
                FieldError("title", f"Title must be {TITLE_MAX_LENGTH} characters or less")
            )
        else:
            fields["title"] = title.strip()

    if "description" in data:
        description = data["description"]
        if description is not None and not isinstance(description, str):
            errors.append(FieldError("description", "Description must be a string"))
        else:
            fields["description"] = description

    if "due_date" in data:
        due_date = data["due_date"]
        if due_date is None:
            fields["due_date"] = None
        elif not isinstance(due_date, str):
            errors.append(FieldError("due_date", "Invalid due date"))
        else:
            try:
                fields["due_date"] = parse_due_date(due_date)
            except ValueError:
                errors.append(FieldError("due_date", "Invalid due date"))

    if "completed" in data:
        completed = data["completed"]
        if not isinstance(completed, bool):
            errors.append(FieldError("completed", "Completed must be a boolean"))
        else:
            fields["completed"] = completed

    return fields, errors


def validate_task_query(args: dict[str, str]) -> tuple[TaskQuery, list[FieldError]]:
    """Validate the list endpoint's ``completed``/``sort``/``order`` arguments."""
    errors: list[FieldError] = []

    completed = None
    raw_completed = args.get("completed")
    if raw_completed is not None:
        completed = _BOOLEAN_QUERY_VALUES.get(raw_completed.strip().lower())
        if completed is None:
            errors.append(
                FieldError("completed", "Completed must be 'true' or 'false'", location="query")
            )

    sort = args.get("sort", "created_at")
    if sort not in SORTABLE_FIELDS:
        errors.append(
            FieldError("sort", f"Sort must be one of: {', '.join(SORTABLE_FIELDS)}", location="query")
        )

    order = args.get("order", "asc").lower()
    if order not in {"asc", "desc"}:
        errors.append(FieldError("order", "Order must be 'asc' or 'desc'", location="query"))

    return TaskQuery(completed=completed, sort=sort, order=order), errors


def validate_signup(data: dict[str, Any]) -> tuple[str, str]:
    """
    Validate a signup body and return ``(normalised_email, password)``.

    Raises:
        ValidationError: Listing every problem with the email and password.
    """
    errors: list[FieldError] = []

    email = data.get("email")
    if not isinstance(email, str) or not email.strip():
        errors.append(FieldError("email", "Email is required"))
    elif len(email.strip()) > EMAIL_MAX_LENGTH or not _EMAIL_PATTERN.match(email.strip()):
        errors.append(FieldError("email", "Email is invalid"))

    password = data.get("password")
    if not isinstance(password, str) or not password:
        errors.append(FieldError("password", "Password is required"))
    elif len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        errors.append(
            FieldError("password", f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        )

    raise_for(errors)
    return normalise_email(email), password


def validate_login(data: dict[str, Any]) -> tuple[str, str]:
    """
    Validate a login body.

    Only the types are checked: any string password is accepted here and
    a wrong one is answered with invalid credentials, not a 400.
    """
    errors: list[FieldError] = []

    email = data.get("email")
    if not isinstance(email, str) or not email.strip():
        errors.append(FieldError("email", "Email is required"))

    password = data.get("password")
    if not isinstance(password, str):
        errors.append(FieldError("password", "Password is required"))

    raise_for(errors)
    return normalise_email(email), password


def normalise_email(email: str) -> str:
    return email.strip().lower()
