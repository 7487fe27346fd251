"""
Task endpoints.

Every route is guarded by ``require_auth`` and every storage call is
scoped to ``g.user_id``.  A task owned by another user is reported as
"Task not found", exactly like a task that does not exist.

Endpoints:
    POST   /api/tasks        - Create a task
    GET    /api/tasks        - List the caller's tasks
    GET    /api/tasks/<id>   - Retrieve one task
    PUT    /api/tasks/<id>   - Update the supplied fields of a task
    DELETE /api/tasks/<id>   - Delete a task
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response, g, jsonify, request

from ..auth import require_auth
from ..errors import NotFoundError
from ..stores import TaskStore
from ..validation import (
    check_task_id,
    raise_for,
    validate_task_payload,
    validate_task_query,
)
from . import json_body, storage_guard

logger = logging.getLogger(__name__)

tasks_bp = Blueprint("tasks", __name__)

store = TaskStore()


@tasks_bp.route("", methods=["POST"])
@require_auth
def create_task() -> tuple[Response, int]:
    """
    Create a task owned by the caller.

    Expects a JSON body with ``title``; ``description``, ``due_date`` and
    ``completed`` are optional.
    """
    fields, errors = validate_task_payload(json_body(), partial=False)
    raise_for(errors)

    with storage_guard("Error creating task"):
        task = store.create(g.user_id, fields)
    logger.info("Created task %s for user %s", task.id, g.user_id)
    return (
        jsonify({"status": True, "message": "Task created successfully", "task": task.to_dict()}),
        201,
    )


@tasks_bp.route("", methods=["GET"])
@require_auth
def list_tasks() -> tuple[Response, int]:
    """
    List the caller's tasks.

    Query parameters: ``completed`` (true/false), ``sort`` (created_at,
    due_date, title) and ``order`` (asc/desc).
    """
    query, errors = validate_task_query(request.args)
    raise_for(errors)

    with storage_guard("Error fetching tasks"):
        tasks = store.list(g.user_id, query)
    return (
        jsonify(
            {
                "status": True,
                "message": "Tasks retrieved successfully",
                "tasks": [task.to_dict() for task in tasks],
            }
        ),
        200,
    )


@tasks_bp.route("/<task_id>", methods=["GET"])
@require_auth
def get_task(task_id: str) -> tuple[Response, int]:
    raise_for(check_task_id(task_id))

    with storage_guard("Error fetching task"):
        task = store.get(g.user_id, task_id)
    if task is None:
        raise NotFoundError("Task not found")
    return (
        jsonify({"status": True, "message": "Task retrieved successfully", "task": task.to_dict()}),
        200,
    )


@tasks_bp.route("/<task_id>", methods=["PUT"])
@require_auth
def update_task(task_id: str) -> tuple[Response, int]:
    """
    Update a task.

    Only the fields present in the body change (partial update despite
    PUT).  ``user_id`` and timestamps in the body are ignored.
    """
    errors = check_task_id(task_id)
    changes, body_errors = validate_task_payload(json_body(), partial=True)
    raise_for(errors + body_errors)

    with storage_guard("Error updating task"):
        task = store.update(g.user_id, task_id, changes)
    if task is None:
        raise NotFoundError("Task not found")
    return (
        jsonify({"status": True, "message": "Task updated successfully", "task": task.to_dict()}),
        200,
    )


@tasks_bp.route("/<task_id>", methods=["DELETE"])
@require_auth
def delete_task(task_id: str) -> tuple[Response, int]:
    raise_for(check_task_id(task_id))

    with storage_guard("Error deleting task"):
        deleted = store.delete(g.user_id, task_id)
    if not deleted:
        raise NotFoundError("Task not found")
    logger.info("Deleted task %s for user %s", task_id, g.user_id)
    return jsonify({"status": True, "message": "Task deleted successfully"}), 200
