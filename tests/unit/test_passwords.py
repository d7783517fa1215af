"""
Unit tests for the password hasher.

Pure tests with no database or HTTP layer: hashing is salted and one-way,
verification is a boolean, and a corrupt stored hash raises InvalidHash.
"""

from __future__ import annotations

import pytest

from todo_app.errors import InvalidHash
from todo_app.passwords import PasswordHasher

pytestmark = pytest.mark.unit

FAST_METHOD = "pbkdf2:sha256:1000"


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(FAST_METHOD)


def test_hash_does_not_store_plain_text(hasher):
    """Test that the hash never contains the original password."""
    # Act
    hashed = hasher.hash("Secret123!")

    # Assert
    assert "Secret123!" not in hashed
    assert hashed.startswith("pbkdf2:sha256:1000$")


def test_hash_is_salted(hasher):
    """Test that hashing the same password twice yields different strings."""
    # Act
    first = hasher.hash("Secret123!")
    second = hasher.hash("Secret123!")

    # Assert
    assert first != second
    assert hasher.verify("Secret123!", first)
    assert hasher.verify("Secret123!", second)


def test_verify_rejects_wrong_password(hasher):
    """Test that a mismatched password returns False instead of raising."""
    # Arrange
    hashed = hasher.hash("CorrectPass123!")

    # Act
    result = hasher.verify("WrongPass123!", hashed)

    # Assert
    assert result is False


def test_verify_accepts_hash_from_other_cost(hasher):
    """Test that the method embedded in the hash drives verification."""
    # Arrange
    hashed = PasswordHasher("pbkdf2:sha256:2000").hash("Secret123!")

    # Act & Assert
    assert hasher.verify("Secret123!", hashed) is True


@pytest.mark.parametrize("corrupt", ["", "not-a-hash", "plaintext$only"])
def test_verify_malformed_hash_raises_invalid_hash(hasher, corrupt):
    """Test that a hash without method$salt$digest structure is rejected."""
    # Act & Assert
    with pytest.raises(InvalidHash):
        hasher.verify("Secret123!", corrupt)


def test_verify_unknown_method_raises_invalid_hash(hasher):
    """Test that a hash naming an unsupported method is rejected."""
    # Act & Assert
    with pytest.raises(InvalidHash):
        hasher.verify("Secret123!", "rot13$salt$digest")
