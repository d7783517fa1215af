"""Security tests: tenant isolation, token tampering and mass assignment."""
