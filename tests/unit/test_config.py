"""
Unit tests for configuration resolution and duration parsing.
"""

from __future__ import annotations

import pytest

from config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    get_config,
    parse_duration,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, None),
        ("", None),
        ("   ", None),
        ("3600", 3600),
        ("45s", 45),
        ("30m", 1800),
        ("24h", 86400),
        ("7d", 604800),
        ("2H", 7200),
    ],
)
def test_parse_duration(raw, expected):
    """Test that bare seconds and unit-suffixed durations are understood."""
    # Act & Assert
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["soon", "10w", "-5m", "1.5h"])
def test_parse_duration_rejects_unknown_formats(raw):
    """Test that unsupported duration strings raise ValueError."""
    # Act & Assert
    with pytest.raises(ValueError):
        parse_duration(raw)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("development", DevelopmentConfig),
        ("testing", TestingConfig),
        ("production", ProductionConfig),
        ("bogus", DevelopmentConfig),
    ],
)
def test_get_config_by_name(name, expected):
    """Test that names resolve to classes and unknown names fall back."""
    # Act & Assert
    assert get_config(name) is expected


def test_get_config_reads_flask_env(monkeypatch):
    """Test that FLASK_ENV selects the class when no name is given."""
    # Arrange
    monkeypatch.setenv("FLASK_ENV", "production")

    # Act & Assert
    assert get_config() is ProductionConfig


def test_testing_config_protects_task_routes():
    """Test that /tasks is protected by default."""
    # Act & Assert
    assert "/tasks" in TestingConfig.PROTECTED_PATH_PREFIXES
    assert TestingConfig.JWT_EXPIRES_IN is None
