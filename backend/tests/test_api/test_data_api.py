"""
Tests for Data, Bookmarks and Settings API endpoints.
"""
import json

API = "/api/v1"


class TestStateEndpoints:
    """Tests for /data export, import, reset and info"""

    def test_export_import_round_trip(self, client, store):
        with store.mutate() as state:
            state.progress_stats.total_points = 42
        exported = client.get(f"{API}/data/export")
        assert exported.status_code == 200
        assert exported.headers["content-type"].startswith("application/json")
        assert json.loads(exported.text)["progressStats"]["totalPoints"] == 42

        client.post(f"{API}/data/reset", json={"confirm": True})
        assert store.load().progress_stats.total_points == 0

        response = client.post(f"{API}/data/import", json={"data": exported.text})
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert store.load().progress_stats.total_points == 42

    def test_import_rejected(self, client):
        response = client.post(f"{API}/data/import", json={"data": '{"unknown": true}'})
        assert response.status_code == 400
        assert "Unrecognized" in response.json()["detail"]

    def test_reset_needs_confirm(self, client, store):
        with store.mutate() as state:
            state.progress_stats.total_points = 42
        assert client.post(f"{API}/data/reset", json={}).status_code == 400
        assert store.load().progress_stats.total_points == 42

    def test_info_and_flush(self, client, store):
        with store.mutate() as state:
            state.progress_stats.total_points = 1
        assert client.get(f"{API}/data/info").json()["pending_write"] is True

        data = client.post(f"{API}/data/flush").json()
        assert data == {"written": True, "memory_only": False}
        assert client.get(f"{API}/data/info").json()["pending_write"] is False


class TestSettingsEndpoints:
    """Tests for /data/settings"""

    def test_get(self, client):
        assert client.get(f"{API}/data/settings").json()["darkMode"] is True

    def test_patch(self, client):
        response = client.patch(f"{API}/data/settings", json={"updates": {"darkMode": False, "font_size": "large"}})
        assert response.status_code == 200
        assert response.json()["darkMode"] is False
        assert response.json()["fontSize"] == "large"

    def test_patch_unknown_key(self, client):
        response = client.patch(f"{API}/data/settings", json={"updates": {"volume": 3}})
        assert response.status_code == 400

    def test_reset(self, client):
        client.patch(f"{API}/data/settings", json={"updates": {"darkMode": False}})
        assert client.delete(f"{API}/data/settings").json()["darkMode"] is True


class TestBookmarkEndpoints:
    """Tests for /bookmarks"""

    def test_add_and_list(self, client):
        response = client.post(f"{API}/bookmarks/", json={"item_key": "Brave"})
        assert response.json() == {"added": True, "count": 1}

        bookmarks = client.get(f"{API}/bookmarks/").json()
        assert bookmarks[0]["id"] == "Brave"
        assert bookmarks[0]["wordData"]["definition"] == "Ready to face danger"

    def test_unknown_item(self, client):
        assert client.post(f"{API}/bookmarks/", json={"item_key": "Nothing"}).status_code == 404

    def test_toggle_and_remove(self, client):
        assert client.post(f"{API}/bookmarks/toggle", json={"item_key": "RBI", "mode": "acronym"}).json() == {"bookmarked": True}
        assert client.delete(f"{API}/bookmarks/RBI").status_code == 200
        assert client.delete(f"{API}/bookmarks/RBI").status_code == 404

    def test_review_and_notes(self, client):
        client.post(f"{API}/bookmarks/", json={"item_key": "Brave"})
        assert client.post(f"{API}/bookmarks/Brave/reviewed").json()["reviewCount"] == 1
        assert client.put(f"{API}/bookmarks/Brave/notes", json={"notes": "bold"}).json()["notes"] == "bold"
        assert client.post(f"{API}/bookmarks/Other/reviewed").status_code == 404

    def test_practice(self, client):
        for key in ("Brave", "Candid"):
            client.post(f"{API}/bookmarks/", json={"item_key": key})
        client.post(f"{API}/bookmarks/Brave/reviewed")
        practice = client.get(f"{API}/bookmarks/practice", params={"limit": 1}).json()
        assert [b["id"] for b in practice] == ["Candid"]

    def test_export_import_clear(self, client):
        client.post(f"{API}/bookmarks/", json={"item_key": "Brave"})
        exported = client.get(f"{API}/bookmarks/export").json()["data"]

        assert client.delete(f"{API}/bookmarks/").json() == {"status": "cleared"}
        assert client.post(f"{API}/bookmarks/import", json={"data": exported}).json() == {"imported": 1}
        assert client.get(f"{API}/bookmarks/").json()[0]["id"] == "Brave"


class TestHealthEndpoints:
    """Tests for / and /health"""

    def test_root(self, client):
        assert client.get("/").json()["status"] == "healthy"

    def test_health(self, client):
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["services"]["catalog"]["easy"] == 6
