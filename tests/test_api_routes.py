"""
tests/test_api_routes.py -- Integration tests for the /api routes.

These tests exercise the full stack: FastAPI routing -> request model ->
UserStore/ProductStore/SettingsStore -> response model serialization ->
exception handlers. Every test starts from an empty in-memory database.

Coverage:
  - Register: first user admin, later users not, duplicate 400, missing fields 400
  - Login: success, wrong password and unknown user give identical 401s
  - Products: create, list newest first, price as decimal string, bad input 400
  - Settings: list seeded rows
  - Error envelope: always {"error": "..."}
  - End-to-end walkthrough of the documented alice/bob/Widget scenario
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from core.database import settings as settings_table


def _register(client: TestClient, username: str, password: str):
    return client.post("/api/register", json={"username": username, "password": password})


def _login(client: TestClient, username: str, password: str):
    return client.post("/api/login", json={"username": username, "password": password})


class TestRegister:
    def test_first_user_is_admin(self, client: TestClient) -> None:
        resp = _register(client, "alice", "pw1")
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["success"] is True
        assert data["user"]["username"] == "alice"
        assert data["user"]["is_admin"] is True
        assert isinstance(data["user"]["id"], int)

    def test_second_user_is_not_admin(self, client: TestClient) -> None:
        _register(client, "alice", "pw1")
        data = _register(client, "bob", "pw2").json()
        assert data["user"]["is_admin"] is False

    def test_response_never_contains_password(self, client: TestClient) -> None:
        data = _register(client, "alice", "pw1").json()
        assert set(data["user"]) == {"id", "username", "is_admin"}
        assert "pw1" not in str(data)

    def test_duplicate_username_is_400(self, client: TestClient) -> None:
        _register(client, "alice", "pw1")
        resp = _register(client, "alice", "other")
        assert resp.status_code == 400
        error = resp.json()["error"]
        assert isinstance(error, str)
        assert "UNIQUE" in error.upper()

    def test_missing_password_is_400(self, client: TestClient) -> None:
        resp = client.post("/api/register", json={"username": "alice"})
        assert resp.status_code == 400
        assert "password" in resp.json()["error"]

    def test_empty_body_is_400(self, client: TestClient) -> None:
        resp = client.post("/api/register", json={})
        assert resp.status_code == 400
        assert "username" in resp.json()["error"]

    def test_empty_password_accepted(self, client: TestClient) -> None:
        """Any non-null password is valid, the empty string included."""
        resp = _register(client, "alice", "")
        assert resp.status_code == 200, resp.text
        assert resp.json()["user"]["username"] == "alice"
        assert _login(client, "alice", "").status_code == 200
        assert _login(client, "alice", "x").status_code == 401

    def test_null_password_is_400(self, client: TestClient) -> None:
        resp = client.post("/api/register", json={"username": "alice", "password": None})
        assert resp.status_code == 400
        assert "password" in resp.json()["error"]

    def test_non_json_body_is_400(self, client: TestClient) -> None:
        resp = client.post("/api/register", content=b"not json", headers={"Content-Type": "application/json"})
        assert resp.status_code == 400
        assert "error" in resp.json()


class TestLogin:
    def test_valid_credentials(self, client: TestClient) -> None:
        registered = _register(client, "alice", "pw1").json()["user"]
        resp = _login(client, "alice", "pw1")
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["success"] is True
        assert data["user"] == registered
        assert resp.headers["cache-control"] == "no-store"

    def test_wrong_password_and_unknown_user_identical(self, client: TestClient) -> None:
        _register(client, "alice", "pw1")
        wrong_pw = _login(client, "alice", "wrong")
        unknown = _login(client, "mallory", "pw1")
        assert wrong_pw.status_code == unknown.status_code == 401
        assert wrong_pw.json() == unknown.json() == {"error": "Invalid credentials"}

    def test_missing_fields_is_400(self, client: TestClient) -> None:
        resp = client.post("/api/login", json={"username": "alice"})
        assert resp.status_code == 400
        assert "error" in resp.json()


class TestProducts:
    def test_create_returns_row(self, client: TestClient) -> None:
        resp = client.post("/api/products", json={"name": "Widget", "price": 9.99, "description": "Blue"})
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert isinstance(data["id"], int)
        assert data["created_at"]
        assert data["name"] == "Widget"
        assert data["price"] == "9.99"
        assert data["description"] == "Blue"

    def test_price_accepts_string(self, client: TestClient) -> None:
        data = client.post("/api/products", json={"name": "Bolt", "price": "0.25"}).json()
        assert data["price"] == "0.25"
        assert data["description"] is None

    def test_list_newest_first(self, client: TestClient) -> None:
        for name in ("first", "second", "third"):
            client.post("/api/products", json={"name": name, "price": 1})
        resp = client.get("/api/products")
        assert resp.status_code == 200
        assert [p["name"] for p in resp.json()] == ["third", "second", "first"]

    def test_list_empty(self, client: TestClient) -> None:
        assert client.get("/api/products").json() == []

    def test_missing_price_is_400(self, client: TestClient) -> None:
        resp = client.post("/api/products", json={"name": "Widget"})
        assert resp.status_code == 400
        assert "price" in resp.json()["error"]

    def test_strings_stored_unchanged(self, client: TestClient) -> None:
        resp = client.post("/api/products", json={"name": "  Widget  ", "price": 9.99, "description": " blue "})
        assert resp.status_code == 200, resp.text
        data = resp.json()
        assert data["name"] == "  Widget  "
        assert data["description"] == " blue "
        listed = client.get("/api/products").json()[0]
        assert listed["name"] == "  Widget  "
        assert listed["description"] == " blue "

    def test_empty_name_stored(self, client: TestClient) -> None:
        """Only NOT NULL is enforced; an empty name is a valid value."""
        resp = client.post("/api/products", json={"name": "", "price": 1})
        assert resp.status_code == 200, resp.text
        assert resp.json()["name"] == ""

    def test_null_name_is_400(self, client: TestClient) -> None:
        resp = client.post("/api/products", json={"name": None, "price": 1})
        assert resp.status_code == 400
        assert "name" in resp.json()["error"]

    def test_unparseable_price_is_400(self, client: TestClient) -> None:
        resp = client.post("/api/products", json={"name": "Widget", "price": "cheap"})
        assert resp.status_code == 400
        assert "price" in resp.json()["error"]


class TestSettings:
    def test_list_settings(self, client: TestClient, engine) -> None:
        with engine.begin() as conn:
            conn.execute(settings_table.insert(), [{"key": "theme", "value": "dark"}, {"key": "motd", "value": None}])
        resp = client.get("/api/settings")
        assert resp.status_code == 200
        rows = {row["key"]: row for row in resp.json()}
        assert set(rows) == {"theme", "motd"}
        assert rows["theme"]["value"] == "dark"
        assert rows["motd"]["value"] is None
        assert rows["theme"]["updated_at"]

    def test_list_settings_empty(self, client: TestClient) -> None:
        assert client.get("/api/settings").json() == []


class TestErrorEnvelope:
    def test_unknown_api_post_uses_error_envelope(self, client: TestClient) -> None:
        resp = client.post("/api/nope", json={})
        assert resp.status_code in (404, 405)
        assert isinstance(resp.json()["error"], str)


def test_end_to_end_scenario(client: TestClient) -> None:
    """Register two users, fail and pass a login, add a product, list it first."""
    alice = _register(client, "alice", "pw1")
    assert alice.status_code == 200
    assert alice.json()["user"]["is_admin"] is True

    bob = _register(client, "bob", "pw2")
    assert bob.status_code == 200
    assert bob.json()["user"]["is_admin"] is False

    bad = _login(client, "alice", "wrong")
    assert bad.status_code == 401
    assert bad.json() == {"error": "Invalid credentials"}

    good = _login(client, "alice", "pw1")
    assert good.status_code == 200
    assert good.json()["user"]["id"] == alice.json()["user"]["id"]
    assert good.json()["user"]["is_admin"] is True

    client.post("/api/products", json={"name": "Gizmo", "price": 4.5})
    created = client.post("/api/products", json={"name": "Widget", "price": 9.99})
    assert created.status_code == 200
    widget = created.json()
    assert widget["id"] is not None
    assert widget["created_at"] is not None

    listed = client.get("/api/products").json()
    assert listed[0]["name"] == "Widget"
    assert listed[0]["id"] == widget["id"]
