"""
Tests for the per-user settings endpoints
"""
from app.models.settings import SETTINGS
from tests.conftest import run

DEFAULTS = {"darkMode": False, "emailNotifications": True, "notificationsFrequency": "daily"}


class TestSettings:
    def test_defaults_when_nothing_saved(self, client, alice):
        response = client.get("/settings/alice@example.com", headers=alice[1])

        assert response.status_code == 200
        assert response.json() == DEFAULTS

    def test_update_upserts_and_merges(self, client, alice, db):
        _, headers = alice

        first = client.put("/settings/alice@example.com", json={"darkMode": True}, headers=headers)
        second = client.put("/settings/alice@example.com", json={"notificationsFrequency": "weekly"}, headers=headers)

        assert first.json() == {**DEFAULTS, "darkMode": True}
        assert second.json() == {"darkMode": True, "emailNotifications": True, "notificationsFrequency": "weekly"}
        assert client.get("/settings/alice@example.com", headers=headers).json() == second.json()
        assert run(db[SETTINGS].count_documents({"username": "alice@example.com"})) == 1

    def test_invalid_frequency(self, client, alice):
        response = client.put(
            "/settings/alice@example.com",
            json={"notificationsFrequency": "hourly"},
            headers=alice[1],
        )

        assert response.status_code == 400
        assert "notificationsFrequency" in response.json()["details"]["fieldErrors"]

    def test_non_boolean_dark_mode(self, client, alice):
        response = client.put("/settings/alice@example.com", json={"darkMode": "yes"}, headers=alice[1])
        assert response.status_code == 400

    def test_other_users_settings_forbidden(self, client, alice, bob):
        assert client.get("/settings/alice@example.com", headers=bob[1]).status_code == 403
        assert client.put("/settings/alice@example.com", json={"darkMode": True}, headers=bob[1]).status_code == 403

    def test_admin_may_read_any(self, client, alice, admin):
        assert client.get("/settings/alice@example.com", headers=admin[1]).status_code == 200

    def test_username_is_case_insensitive(self, client, alice):
        assert client.get("/settings/Alice@Example.com", headers=alice[1]).status_code == 200
