"""
Database models for the task manager.

Two SQLAlchemy models back the service: :class:`User` holds credentials
and :class:`Task` holds the to-do items, each owned by exactly one user
through ``Task.user_id``.  Identifiers are opaque 32-character hex UUIDs
assigned on the server.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from . import db
from .passwords import DEFAULT_ROUNDS, hash_password, verify_password


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc_iso(value: datetime | None) -> str | None:
    """
    Serialize a datetime to an ISO-8601 UTC string.

    SQLite does not store timezone information, so values read back from
    the database may be naive even though they were written as UTC.  Naive
    values are therefore assumed to be UTC; aware values are converted.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat()


class User(db.Model):
    """
    A registered account.

    Only a bcrypt hash of the password is persisted, and ``to_dict``
    leaves it out so the output is safe to return from the API.

    Attributes:
        id: Opaque hex identifier.
        email: Unique, normalised email address.  Indexed because both
            signup and login look users up by email.
        password_hash: bcrypt hash of the password.
        created_at: Account creation time, UTC.
    """

    __tablename__ = "users"

    __table_args__ = (
        db.CheckConstraint("length(email) <= 254", name="ck_users_email_len"),
    )

    id: str = db.Column(db.String(32), primary_key=True, default=_new_id)
    email: str = db.Column(db.String(254), unique=True, nullable=False, index=True)
    password_hash: str = db.Column(db.String(128), nullable=False)
    created_at: datetime = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    def set_password(self, password: str, rounds: int = DEFAULT_ROUNDS) -> None:
        """Hash and store a plain-text password."""
        self.password_hash = hash_password(password, rounds=rounds)

    def check_password(self, password: str) -> bool:
        """Return True if *password* matches the stored hash."""
        return verify_password(password, self.password_hash)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "created_at": to_utc_iso(self.created_at),
        }

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email}>"


class Task(db.Model):
    """
    A to-do item owned by a single user.

    Attributes:
        id: Opaque hex identifier.
        user_id: Owning user.  Set on creation and never changed; every
            query in the API layer filters on it.
        title: Short summary (max 200 characters).
        description: Optional free text.
        due_date: Optional deadline, stored as UTC.
        completed: Completion flag, false on creation.
        created_at: Creation time, UTC.
        updated_at: Last modification time, UTC.
    """

    __tablename__ = "tasks"

    id: str = db.Column(db.String(32), primary_key=True, default=_new_id)
    user_id: str = db.Column(
        db.String(32),
        db.ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    title: str = db.Column(db.String(200), nullable=False)
    description: str | None = db.Column(db.Text, nullable=True)
    due_date: datetime | None = db.Column(db.DateTime(timezone=True), nullable=True)
    completed: bool = db.Column(db.Boolean, nullable=False, default=False)
    created_at: datetime = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: datetime = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialise the task with datetimes as UTC ISO-8601 strings."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "due_date": to_utc_iso(self.due_date),
            "completed": bool(self.completed),
            "created_at": to_utc_iso(self.created_at),
            "updated_at": to_utc_iso(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<Task {self.id}: {self.title}>"
