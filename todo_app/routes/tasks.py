"""
Task endpoints.

Every route lives under ``/tasks``, so the identity middleware has already
rejected unauthenticated requests before these views run.  All access is
scoped to the caller: a task owned by someone else behaves exactly like a
task that does not exist.

Endpoints:
    POST   /tasks                   - Create a task
    GET    /tasks                   - List the caller's tasks (optional filters)
    GET    /tasks/count             - Count the caller's tasks (same filters)
    GET    /tasks/<id>              - Retrieve one task
    PATCH  /tasks/<id>              - Partial update
    PUT    /tasks/<id>              - Full replace
    DELETE /tasks/<id>              - Delete
    PATCH  /tasks/<id>/complete     - Mark completed
    PATCH  /tasks/<id>/uncomplete   - Mark not completed
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response, current_app, jsonify, request

from ..auth import current_identity
from ..schemas import json_body, parse_task_filters, validate_new_task, validate_task_patch

logger = logging.getLogger(__name__)

tasks_bp = Blueprint("tasks", __name__)


def _task_service():
    return current_app.extensions["todo_app"].tasks


def _no_content() -> tuple[str, int]:
    return "", 204


@tasks_bp.route("", methods=["POST"])
def create_task() -> tuple[Response, int]:
    """
    Create a task owned by the caller.

    Any owner field in the body is ignored.
    """
    data = validate_new_task(json_body())
    task = _task_service().create(current_identity(), data)
    return jsonify(task.to_dict()), 200


@tasks_bp.route("", methods=["GET"])
def list_tasks() -> tuple[Response, int]:
    identity = current_identity()
    filters = parse_task_filters(request.args)
    logger.info("GET /tasks - Fetching tasks for user_id=%s", identity.id)
    tasks = _task_service().list(identity, filters)
    return jsonify([task.to_dict() for task in tasks]), 200


@tasks_bp.route("/count", methods=["GET"])
def count_tasks() -> tuple[Response, int]:
    filters = parse_task_filters(request.args)
    filters.pop("sort", None)
    filters.pop("descending", None)
    filters.pop("limit", None)
    filters.pop("offset", None)
    return jsonify({"count": _task_service().count(current_identity(), filters)}), 200


@tasks_bp.route("/<task_id>", methods=["GET"])
def get_task(task_id: str) -> tuple[Response, int]:
    task = _task_service().get(current_identity(), task_id)
    return jsonify(task.to_dict()), 200


@tasks_bp.route("/<task_id>", methods=["PATCH"])
def update_task(task_id: str) -> tuple[str, int]:
    """Apply the fields present in the body; ownership cannot change."""
    changes = validate_task_patch(json_body())
    _task_service().update(current_identity(), task_id, changes)
    return _no_content()


@tasks_bp.route("/<task_id>", methods=["PUT"])
def replace_task(task_id: str) -> tuple[str, int]:
    """Replace title, description and completed; omitted fields reset to defaults."""
    data = validate_new_task(json_body())
    _task_service().replace(current_identity(), task_id, data)
    return _no_content()


@tasks_bp.route("/<task_id>", methods=["DELETE"])
def delete_task(task_id: str) -> tuple[str, int]:
    _task_service().delete(current_identity(), task_id)
    return _no_content()


@tasks_bp.route("/<task_id>/complete", methods=["PATCH"])
def complete_task(task_id: str) -> tuple[str, int]:
    _task_service().mark_completed(current_identity(), task_id)
    return _no_content()


@tasks_bp.route("/<task_id>/uncomplete", methods=["PATCH"])
def uncomplete_task(task_id: str) -> tuple[str, int]:
    _task_service().mark_uncompleted(current_identity(), task_id)
    return _no_content()
