"""
Bearer token issuance and verification.

Tokens are HS256-signed JSON Web Tokens: three dot-separated base64url
segments (header, payload, signature).  The payload carries:

    - ``userId`` -- id of the authenticated user.
    - ``email``  -- the user's email at login time.
    - ``name``   -- the user's display name at login time.
    - ``iat``    -- issued-at, UTC epoch seconds.
    - ``exp``    -- expiration, only when a lifetime is configured.

Verification pins the algorithm, requires every identity claim and maps any
failure to :class:`~todo_app.errors.InvalidToken`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from .errors import InvalidToken

ALGORITHM = "HS256"
REQUIRED_TOKEN_CLAIMS = ["userId", "email", "name", "iat"]


@dataclass(frozen=True)
class TokenPayload:
    """Identity claims recovered from a verified token."""

    user_id: str
    email: str
    name: str
    issued_at: int
    expires_at: int | None = None


class TokenService:
    """
    Sign and verify identity tokens with a process-wide secret.

    Args:
        secret: HMAC signing secret.
        expires_in: Token lifetime in seconds.  ``None`` issues tokens
            without an ``exp`` claim.
        leeway: Seconds of tolerance for clock differences when checking
            ``exp`` and ``iat``.
    """

    def __init__(self, secret: str, expires_in: int | None = None, leeway: int = 30) -> None:
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self.expires_in = expires_in
        self.leeway = leeway

    def issue(self, subject_id: str, email: str, name: str) -> str:
        """
        Create a signed token for the given identity.

        Raises:
            ValueError: If *subject_id* is blank.
        """
        if not isinstance(subject_id, str) or not subject_id.strip():
            raise ValueError("subject_id must be a non-empty string")

        now = datetime.now(timezone.utc)
        payload: dict[str, Any] = {
            "userId": subject_id,
            "email": email,
            "name": name,
            "iat": int(now.timestamp()),
        }
        if self.expires_in is not None:
            payload["exp"] = int((now + timedelta(seconds=self.expires_in)).timestamp())
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> TokenPayload:
        """
        Decode *token* and return its identity claims.

        Raises:
            InvalidToken: If the signature does not match, the token is
                malformed or expired, or an identity claim is missing or of
                the wrong type.
        """
        try:
            decoded = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": REQUIRED_TOKEN_CLAIMS},
                leeway=self.leeway,
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidToken("Invalid token") from exc

        user_id = decoded.get("userId")
        email = decoded.get("email")
        name = decoded.get("name")
        if not isinstance(user_id, str) or not user_id.strip():
            raise InvalidToken("Invalid token")
        if not isinstance(email, str) or not isinstance(name, str):
            raise InvalidToken("Invalid token")

        expires_at = decoded.get("exp")
        return TokenPayload(
            user_id=user_id,
            email=email,
            name=name,
            issued_at=int(decoded["iat"]),
            expires_at=int(expires_at) if expires_at is not None else None,
        )
