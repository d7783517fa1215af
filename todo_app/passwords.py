"""
Salted one-way password hashing.

Wraps Werkzeug's ``generate_password_hash`` / ``check_password_hash``.  The
hash string embeds the method, cost and salt (``method$salt$digest``), so
verification needs nothing but the stored value.
"""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

from .errors import InvalidHash

DEFAULT_METHOD = "pbkdf2:sha256:600000"


class PasswordHasher:
    """
    Hash and verify passwords with a fixed Werkzeug method.

    Args:
        method: Werkzeug hash specification, e.g. ``"pbkdf2:sha256:600000"``
            or ``"scrypt"``.  The iteration count is the cost factor.
    """

    def __init__(self, method: str = DEFAULT_METHOD) -> None:
        self.method = method

    def hash(self, plain: str) -> str:
        return generate_password_hash(plain, method=self.method)

    def verify(self, plain: str, hashed: str) -> bool:
        """
        Check *plain* against a stored hash.

        Returns ``False`` on mismatch.  Digest comparison is constant time.

        Raises:
            InvalidHash: If *hashed* is not a ``method$salt$digest`` string
                or names a method Werkzeug does not support.
        """
        if not isinstance(hashed, str) or hashed.count("$") < 2:
            raise InvalidHash("Stored password hash is malformed")
        try:
            return check_password_hash(hashed, plain)
        except (ValueError, TypeError) as exc:
            raise InvalidHash("Stored password hash is malformed") from exc
