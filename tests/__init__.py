"""
Test suite for the todo API.

Subpackages:
- unit: components in isolation (hasher, tokens, schemas, stores, workflows)
- integration: HTTP round trips through the Flask test client
- security: tenant isolation, token tampering and mass assignment
"""
