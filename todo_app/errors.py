"""
Error taxonomy and JSON error envelope for the todo API.

Domain code raises the typed failures defined here; the handlers installed
by ``register_error_handlers`` translate them into a uniform body::

    {"error": {"statusCode": 404, "name": "NotFoundError", "message": "..."}}

``InvalidToken`` and ``InvalidHash`` are internal kinds raised by the token
service and password hasher.  They never reach the client directly: the
identity middleware maps token failures to ``Unauthenticated`` and a
corrupt stored hash is an unexpected server error.
"""

from __future__ import annotations

import logging

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Base class for failures that map to a client-visible HTTP error."""

    status_code: int = 500
    name: str = "InternalServerError"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {
            "error": {
                "statusCode": self.status_code,
                "name": self.name,
                "message": self.message,
            }
        }


class ValidationError(ApiError):
    """Malformed or incomplete request payload."""

    status_code = 422
    name = "UnprocessableEntityError"
    default_message = "The request body is invalid."


class DuplicateEmail(ApiError):
    """Registration with an email that already has an account."""

    status_code = 400
    name = "BadRequestError"
    default_message = "Email already in use"


class InvalidCredentials(ApiError):
    """
    Login failure.

    The message is the same whether the email is unknown or the password is
    wrong, so the response cannot be used to enumerate accounts.
    """

    status_code = 401
    name = "UnauthorizedError"
    default_message = "Incorrect email or password"


class Unauthenticated(ApiError):
    """Missing, invalid or expired bearer token on a protected route."""

    status_code = 401
    name = "UnauthorizedError"
    default_message = "Authorization header not found."


class NotFound(ApiError):
    """Missing record, or a record owned by someone other than the caller."""

    status_code = 404
    name = "NotFoundError"
    default_message = "Entity not found"


class InvalidToken(Exception):
    """A bearer token failed signature, structure, claim or expiry checks."""


class InvalidHash(Exception):
    """A stored password hash could not be parsed."""


# Werkzeug exception names -> envelope names used by ApiError subclasses
_HTTP_ERROR_NAMES = {
    400: "BadRequestError",
    401: "UnauthorizedError",
    404: "NotFoundError",
    405: "MethodNotAllowedError",
    415: "UnsupportedMediaTypeError",
    422: "UnprocessableEntityError",
}


def error_response(status_code: int, name: str, message: str) -> tuple[Response, int]:
    """Build a ``(Response, status)`` tuple in the standard error envelope."""
    body = {"error": {"statusCode": status_code, "name": name, "message": message}}
    return jsonify(body), status_code


def register_error_handlers(app: Flask) -> None:
    """
    Install JSON error handlers on *app*.

    Handles ``ApiError`` subclasses, Werkzeug HTTP exceptions (unknown
    routes, wrong methods, unparseable JSON) and any other unexpected
    exception, which is logged and reported as a generic 500.
    """

    @app.errorhandler(ApiError)
    def handle_api_error(error: ApiError) -> tuple[Response, int]:
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException) -> tuple[Response, int]:
        status_code = error.code or 500
        name = _HTTP_ERROR_NAMES.get(status_code, type(error).__name__)
        return error_response(status_code, name, error.description or error.name)

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception) -> tuple[Response, int]:
        logger.exception("Internal server error: %s", error)
        return error_response(500, "InternalServerError", "Internal server error")
