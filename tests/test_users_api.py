"""Integration tests for the /users endpoints."""
import uuid


def _register(client, role="VIEWER", email=None):
    resp = client.post("/users/register", json={
        "name": f"{role.title()} User",
        "email": email or f"{uuid.uuid4().hex[:8]}@example.com",
        "role": role,
    })
    assert resp.status_code == 201, resp.text
    return resp.json()["id"]


def _auth(user_id):
    return {"X-User-Id": user_id}


def test_register_returns_201(client):
    resp = client.post("/users/register", json={"name": "Ada", "email": "Ada@Example.com"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["email"] == "ada@example.com"
    assert body["role"] == "VIEWER"
    assert body["is_active"] is True


def test_register_duplicate_email_returns_409(client):
    _register(client, email="dup@example.com")
    resp = client.post("/users/register", json={"name": "Again", "email": "dup@example.com"})
    assert resp.status_code == 409
    assert "already exists" in resp.json()["detail"]


def test_register_invalid_payload_returns_422(client):
    assert client.post("/users/register", json={"name": "", "email": "a@example.com"}).status_code == 422
    assert client.post("/users/register", json={"name": "Bob", "email": "not-an-email"}).status_code == 422


def test_me_requires_known_user(client):
    assert client.get("/users/me").status_code == 401
    assert client.get("/users/me", headers=_auth("nobody")).status_code == 401

    user_id = _register(client)
    resp = client.get("/users/me", headers=_auth(user_id))
    assert resp.status_code == 200
    assert resp.json()["id"] == user_id


def test_user_admin_endpoints_require_admin(client):
    viewer = _register(client)
    admin = _register(client, role="ADMIN")

    assert client.get("/users", headers=_auth(viewer)).status_code == 403
    resp = client.get("/users", headers=_auth(admin))
    assert resp.status_code == 200
    assert resp.json()["total"] == 2
    assert client.get(f"/users/{viewer}", headers=_auth(admin)).status_code == 200
    assert client.get("/users/missing", headers=_auth(admin)).status_code == 404


def test_admin_can_change_role(client):
    viewer = _register(client)
    admin = _register(client, role="ADMIN")

    resp = client.patch(f"/users/{viewer}", json={"role": "EDITOR"}, headers=_auth(admin))
    assert resp.status_code == 200
    assert resp.json()["role"] == "EDITOR"


def test_deactivated_or_deleted_user_cannot_authenticate(client):
    admin = _register(client, role="ADMIN")
    inactive = _register(client)
    deleted = _register(client)

    client.patch(f"/users/{inactive}", json={"is_active": False}, headers=_auth(admin))
    assert client.get("/users/me", headers=_auth(inactive)).status_code == 401

    resp = client.delete(f"/users/{deleted}", headers=_auth(admin))
    assert resp.status_code == 200
    assert client.get("/users/me", headers=_auth(deleted)).status_code == 401
    assert client.get(f"/users/{deleted}", headers=_auth(admin)).status_code == 404
