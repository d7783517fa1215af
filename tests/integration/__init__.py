"""Integration tests: HTTP round trips through the Flask test client."""
