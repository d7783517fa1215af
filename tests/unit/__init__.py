"""Unit tests: components exercised without the HTTP layer."""
