"""
Request identity middleware.

Runs before every request and resolves the caller from an
``Authorization: Bearer <token>`` header:

    - Protected path (``/tasks`` by default) without a bearer token:
      ``Unauthenticated``, the view never runs.
    - Any path with a token: the token is verified.  On success the caller
      is stored on ``flask.g.identity``.  On failure a protected path is
      rejected with ``Unauthenticated`` and a public path continues
      anonymously, so a stale token never blocks login or registration.

Identity lives on ``flask.g`` and is discarded at the end of the request.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import wraps

from flask import Flask, current_app, g, request

from .errors import InvalidToken, Unauthenticated
from .services import Identity

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token() -> str | None:
    """
    Return the token from the current request's Authorization header.

    Returns ``None`` if the header is absent, not a Bearer header, or empty
    after stripping whitespace.
    """
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith(BEARER_PREFIX):
        return None
    token = auth_header[len(BEARER_PREFIX):].strip()
    return token or None


def is_protected_path(path: str, prefixes: tuple[str, ...]) -> bool:
    """True when *path* equals a prefix or lies beneath it (``/tasks``, ``/tasks/...``)."""
    for prefix in prefixes:
        prefix = prefix.rstrip("/")
        if path == prefix or path.startswith(prefix + "/"):
            return True
    return False


def resolve_identity() -> None:
    """``before_request`` hook that authenticates the caller."""
    g.identity = None
    protected = is_protected_path(request.path, current_app.config["PROTECTED_PATH_PREFIXES"])
    token = extract_bearer_token()

    if token is None:
        if protected:
            raise Unauthenticated("Authorization header not found.")
        return

    tokens = current_app.extensions["todo_app"].tokens
    try:
        payload = tokens.verify(token)
    except InvalidToken:
        if protected:
            logger.info("Rejected invalid token for %s %s", request.method, request.path)
            raise Unauthenticated("Invalid token.") from None
        return

    g.identity = Identity(id=payload.user_id, email=payload.email, name=payload.name)


def current_identity() -> Identity:
    """
    Return the caller resolved for this request.

    Raises:
        Unauthenticated: If no valid token accompanied the request.
    """
    identity = g.get("identity")
    if identity is None:
        raise Unauthenticated("Authorization header not found.")
    return identity


def require_identity(view_func: Callable):
    """Reject the request with ``Unauthenticated`` unless a caller was resolved."""

    @wraps(view_func)
    def wrapper(*args, **kwargs):
        current_identity()
        return view_func(*args, **kwargs)

    return wrapper


def init_identity_middleware(app: Flask) -> None:
    app.before_request(resolve_identity)
