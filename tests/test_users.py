"""
Tests for the user profile endpoints
"""
from bson import ObjectId

from app.models.settings import SETTINGS
from tests.conftest import run


class TestUsers:
    """User listing and profile updates"""

    def test_list_requires_admin(self, client, alice):
        response = client.get("/users/", headers=alice[1])

        assert response.status_code == 403

    def test_admin_lists_paginated(self, client, alice, bob, admin):
        body = client.get("/users/", params={"limit": 2, "sortBy": "email", "sortDir": "asc"}, headers=admin[1]).json()

        assert body["total"] == 3
        assert body["totalPages"] == 2
        assert [user["email"] for user in body["items"]] == ["admin@example.com", "alice@example.com"]

    def test_get_self(self, client, alice):
        user, headers = alice

        body = client.get(f"/users/{user['_id']}", headers=headers).json()

        assert body["id"] == str(user["_id"])
        assert body["email"] == "alice@example.com"

    def test_get_other_forbidden_unless_admin(self, client, alice, bob, admin):
        url = f"/users/{alice[0]['_id']}"

        assert client.get(url, headers=bob[1]).status_code == 403
        assert client.get(url, headers=admin[1]).status_code == 200

    def test_admin_get_missing_user(self, client, admin):
        assert client.get(f"/users/{ObjectId()}", headers=admin[1]).status_code == 404

    def test_update_profile_lowercases_email(self, client, alice):
        user, headers = alice

        response = client.put(
            f"/users/{user['_id']}",
            json={"name": "Alice Liddell", "email": "Alice.L@Example.com"},
            headers=headers,
        )

        assert response.status_code == 200
        assert response.json()["email"] == "alice.l@example.com"
        assert response.json()["name"] == "Alice Liddell"

    def test_update_email_conflict(self, client, alice, bob):
        user, headers = alice

        response = client.put(f"/users/{user['_id']}", json={"email": "bob@example.com"}, headers=headers)

        assert response.status_code == 409
        assert response.json()["error"] == "Email already in use"

    def test_role_cannot_be_changed(self, client, alice):
        user, headers = alice

        response = client.put(f"/users/{user['_id']}", json={"role": "admin"}, headers=headers)

        assert response.status_code == 400
        assert "role" in response.json()["details"]["fieldErrors"]

    def test_update_other_forbidden(self, client, alice, bob):
        response = client.put(f"/users/{alice[0]['_id']}", json={"name": "Mallory"}, headers=bob[1])
        assert response.status_code == 403

    def test_email_change_keeps_settings(self, client, alice):
        user, headers = alice
        client.put("/settings/alice@example.com", json={"darkMode": True}, headers=headers)

        response = client.put(f"/users/{user['_id']}", json={"email": "alice2@example.com"}, headers=headers)

        assert response.status_code == 200
        assert client.get("/settings/alice2@example.com", headers=headers).json()["darkMode"] is True

    def test_previous_email_does_not_carry_settings(self, client, alice, make_user, db):
        user, headers = alice
        client.put("/settings/alice@example.com", json={"darkMode": True}, headers=headers)
        client.put(f"/users/{user['_id']}", json={"email": "alice2@example.com"}, headers=headers)

        _, newcomer = make_user("alice@example.com", "Another Alice")

        assert client.get("/settings/alice@example.com", headers=newcomer).json()["darkMode"] is False
        assert run(db[SETTINGS].count_documents({})) == 1
