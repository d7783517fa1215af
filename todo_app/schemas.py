"""
Request payload validation.

Each ``validate_*`` function takes the decoded JSON body and returns a clean
dict containing only the fields the workflow may use.  Server-assigned
fields (``id``, ``userId``, ``ownerId``, ``createdAt``, ``updatedAt``) and
unknown keys are dropped rather than bound.  Any malformed input raises
:class:`~todo_app.errors.ValidationError`.
"""

from __future__ import annotations

import re
from typing import Any

from flask import request

from .errors import ValidationError
from .stores import SORTABLE_TASK_FIELDS

TITLE_MAX_LENGTH = 200
PASSWORD_MIN_LENGTH = 6
MAX_PAGE_SIZE = 100

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


# =====================================================================
# Helper Functions
# =====================================================================


def json_body() -> dict[str, Any]:
    """Return the current request's JSON object body or raise ``ValidationError``."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _required_string(data: dict[str, Any], field: str) -> str:
    value = data.get(field)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"'{field}' is required")
    return value


def _optional_string(data: dict[str, Any], field: str) -> str | None:
    value = data.get(field)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"'{field}' must be a string")
    return value


def _title(data: dict[str, Any]) -> str:
    title = _required_string(data, "title").strip()
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f"'title' must be {TITLE_MAX_LENGTH} characters or less")
    return title


def _completed(data: dict[str, Any]) -> bool:
    value = data["completed"]
    if not isinstance(value, bool):
        raise ValidationError("'completed' must be a boolean")
    return value


def _parse_bool(raw: str, field: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValidationError(f"'{field}' must be true or false")


def _parse_int(raw: str, field: str, *, minimum: int, maximum: int | None = None) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"'{field}' must be an integer") from None
    if value < minimum or (maximum is not None and value > maximum):
        bound = f"between {minimum} and {maximum}" if maximum is not None else f">= {minimum}"
        raise ValidationError(f"'{field}' must be {bound}")
    return value


# =====================================================================
# Auth payloads
# =====================================================================


def validate_registration(data: dict[str, Any]) -> dict[str, str]:
    """Validate ``{email, password, name}`` for ``POST /auth/register``."""
    email = _required_string(data, "email").strip()
    password = _required_string(data, "password")
    name = _required_string(data, "name").strip()

    if not EMAIL_PATTERN.match(email):
        raise ValidationError("'email' must be a valid email address")
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"'password' must be at least {PASSWORD_MIN_LENGTH} characters"
        )
    return {"email": email, "password": password, "name": name}


def validate_login(data: dict[str, Any]) -> dict[str, str]:
    """Validate ``{email, password}`` for ``POST /auth/login``."""
    return {
        "email": _required_string(data, "email").strip(),
        "password": _required_string(data, "password"),
    }


# =====================================================================
# Task payloads
# =====================================================================


def validate_new_task(data: dict[str, Any]) -> dict[str, Any]:
    """
    Validate a full task body (create and replace).

    ``title`` is required; ``description`` and ``completed`` default to
    ``None`` and ``False``.
    """
    clean: dict[str, Any] = {
        "title": _title(data),
        "description": _optional_string(data, "description"),
        "completed": False,
    }
    if "completed" in data:
        clean["completed"] = _completed(data)
    return clean


def validate_task_patch(data: dict[str, Any]) -> dict[str, Any]:
    """Validate a partial task body; only fields present are returned."""
    clean: dict[str, Any] = {}
    if "title" in data:
        clean["title"] = _title(data)
    if "description" in data:
        clean["description"] = _optional_string(data, "description")
    if "completed" in data:
        clean["completed"] = _completed(data)
    return clean


def parse_task_filters(args) -> dict[str, Any]:
    """
    Parse list / count query-string filters.

    Supported keys: ``completed``, ``title`` (substring match), ``userId``,
    ``sort`` (``createdAt``, ``updatedAt``, ``title``, ``completed``),
    ``order`` (``asc``/``desc``), ``limit`` and ``offset``.
    """
    filters: dict[str, Any] = {}

    if args.get("completed"):
        filters["completed"] = _parse_bool(args["completed"], "completed")
    if args.get("title"):
        filters["title"] = args["title"]
    if args.get("userId"):
        filters["user_id"] = args["userId"]

    sort = args.get("sort")
    if sort:
        if sort not in SORTABLE_TASK_FIELDS:
            raise ValidationError(f"Cannot sort by '{sort}'")
        filters["sort"] = sort

    order = args.get("order")
    if order:
        if order.lower() not in ("asc", "desc"):
            raise ValidationError("'order' must be 'asc' or 'desc'")
        filters["descending"] = order.lower() == "desc"

    if args.get("limit"):
        filters["limit"] = _parse_int(args["limit"], "limit", minimum=1, maximum=MAX_PAGE_SIZE)
    if args.get("offset"):
        filters["offset"] = _parse_int(args["offset"], "offset", minimum=0)

    return filters
