"""
Persistence access for users and tasks.

``CredentialStore`` and ``TaskStore`` are thin wrappers around the
Flask-SQLAlchemy session.  Every ``TaskStore`` method takes the owner's id
and folds it into the same statement as the task id, so there is no code
path that reads or writes a task without the owner filter.

Store methods do not commit on failure paths and let ``SQLAlchemyError``
propagate; the route layer rolls back and maps it to a 500.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError

from . import db
from .errors import DuplicateEmail
from .models import Task, User

SORTABLE_FIELDS = ("created_at", "due_date", "title")


@dataclass(frozen=True)
class TaskQuery:
    """Filter and ordering options for listing tasks."""

    completed: bool | None = None
    sort: str = "created_at"
    order: str = "asc"


class CredentialStore:
    """Lookup and creation of :class:`User` records."""

    def find_by_email(self, email: str) -> User | None:
        return db.session.scalar(select(User).where(User.email == email))

    def add(self, user: User) -> User:
        """
        Persist *user*.

        Raises:
            DuplicateEmail: If another user committed the same email first;
                the unique constraint catches what the pre-check missed.
        """
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            raise DuplicateEmail() from exc
        return user


class TaskStore:
    """Owner-scoped CRUD for :class:`Task` records."""

    @staticmethod
    def _owned(owner_id: str):
        # Tenant isolation: the only way to reach a Task row.
        return select(Task).where(Task.user_id == owner_id)

    def create(self, owner_id: str, fields: dict[str, Any]) -> Task:
        task = Task(user_id=owner_id, **fields)
        db.session.add(task)
        db.session.commit()
        return task

    def list(self, owner_id: str, query: TaskQuery | None = None) -> list[Task]:
        query = query or TaskQuery()
        stmt = self._owned(owner_id)
        if query.completed is not None:
            stmt = stmt.where(Task.completed.is_(query.completed))

        column = getattr(Task, query.sort if query.sort in SORTABLE_FIELDS else "created_at")
        ordering = column.desc() if query.order == "desc" else column.asc()
        # Tie-break on id so tasks created in the same instant keep a stable order.
        stmt = stmt.order_by(ordering, Task.id.asc())
        return list(db.session.scalars(stmt).all())

    def get(self, owner_id: str, task_id: str) -> Task | None:
        return db.session.scalar(self._owned(owner_id).where(Task.id == task_id))

    def update(self, owner_id: str, task_id: str, changes: dict[str, Any]) -> Task | None:
        """
        Apply *changes* to the owner's task in a single UPDATE.

        Returns the refreshed task, or ``None`` when no row matched
        ``(task_id, owner_id)``.
        """
        values = dict(changes)
        values["updated_at"] = datetime.now(timezone.utc)
        result = db.session.execute(
            update(Task)
            .where(Task.id == task_id, Task.user_id == owner_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            db.session.rollback()
            return None
        db.session.commit()
        return self.get(owner_id, task_id)

    def delete(self, owner_id: str, task_id: str) -> bool:
        result = db.session.execute(
            delete(Task)
            .where(Task.id == task_id, Task.user_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            db.session.rollback()
            return False
        db.session.commit()
        return True
