"""
Authentication endpoints.

Endpoints:
    POST /auth/register  -- Create a new account.
    POST /auth/login     -- Exchange email and password for a bearer token.
    GET  /auth/me        -- Profile of the caller identified by the token.

The ``/auth`` prefix is public: the identity middleware never rejects these
requests.  ``/auth/me`` opts back in with ``require_identity``.
"""

from __future__ import annotations

from flask import Blueprint, Response, current_app, jsonify

from ..auth import current_identity, require_identity
from ..schemas import json_body, validate_login, validate_registration

auth_bp = Blueprint("auth", __name__)


def _auth_service():
    return current_app.extensions["todo_app"].auth


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple[Response, int]:
    """
    Register a new user.

    Returns:
        200 with ``message`` and the public ``user`` profile.
        400 if the email is already in use.
        422 if a required field is missing or malformed.
    """
    data = validate_registration(json_body())
    user = _auth_service().register(data["email"], data["password"], data["name"])
    return jsonify({"message": "User registered successfully", "user": user.to_dict()}), 200


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple[Response, int]:
    """
    Authenticate and issue a bearer token.

    Returns:
        200 with ``message``, ``token`` and ``user`` (``id``, ``email``, ``name``).
        401 with an identical body for an unknown email or a wrong password.
        422 if a required field is missing.
    """
    data = validate_login(json_body())
    user, token = _auth_service().login(data["email"], data["password"])
    return jsonify(
        {
            "message": "Login successful",
            "token": token,
            "user": {"id": user.id, "email": user.email, "name": user.name},
        }
    ), 200


@auth_bp.route("/me", methods=["GET"])
@require_identity
def me() -> tuple[Response, int]:
    """Return the stored profile of the authenticated caller."""
    user = _auth_service().get_user(current_identity().id)
    return jsonify(user.to_dict()), 200
