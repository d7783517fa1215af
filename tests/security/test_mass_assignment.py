"""
Security tests for mass-assignment hardening on task endpoints.

Sends requests that include server-assigned fields (id, userId, ownerId,
createdAt, updatedAt) alongside legitimate task data and verifies the API
drops them rather than binding them.  Covers create, patch and replace
(OWASP A04 - Insecure Design).
"""

from __future__ import annotations

import pytest

pytestmark = pytest.mark.security

PROTECTED_FIELDS = {
    "id": "11111111-1111-1111-1111-111111111111",
    "createdAt": "1990-01-01T00:00:00+00:00",
    "updatedAt": "1990-01-01T00:00:00+00:00",
    "isAdmin": True,
}


def test_create_task_ignores_protected_fields(client, api_headers, user_one, user_two):
    """Test that creation ignores identity and system fields from the client."""
    # Arrange
    payload = {
        "title": "Mass assignment probe",
        "userId": user_two.id,
        "ownerId": user_two.id,
        **PROTECTED_FIELDS,
    }

    # Act
    response = client.post("/tasks", json=payload, headers=api_headers)

    # Assert
    assert response.status_code == 200
    body = response.get_json()
    assert body["id"] != PROTECTED_FIELDS["id"]
    assert body["userId"] == user_one.id
    assert body["createdAt"] != PROTECTED_FIELDS["createdAt"]
    assert body["updatedAt"] != PROTECTED_FIELDS["updatedAt"]
    assert "isAdmin" not in body
    assert "ownerId" not in body


@pytest.mark.parametrize("method", ["patch", "put"])
def test_update_cannot_reassign_owner(client, api_headers, second_user_headers, sample_task, user_one, user_two, method):
    """Test that neither PATCH nor PUT can transfer a task to another user."""
    # Act
    response = getattr(client, method)(
        f"/tasks/{sample_task.id}",
        json={"title": "Updated title", "userId": user_two.id, "ownerId": user_two.id},
        headers=api_headers,
    )

    # Assert
    assert response.status_code == 204
    body = client.get(f"/tasks/{sample_task.id}", headers=api_headers).get_json()
    assert body["title"] == "Updated title"
    assert body["userId"] == user_one.id
    assert client.get("/tasks/count", headers=second_user_headers).get_json() == {"count": 0}
