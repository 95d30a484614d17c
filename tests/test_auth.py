from datetime import datetime, timedelta, timezone

import jwt

from auth import issue_token, verify_token


def test_issue_and_verify_token():
    token = issue_token("secret", 7)
    claims = verify_token(f"Bearer {token}", "secret")
    assert claims is not None
    assert claims["role"] == "admin"


def test_verify_token_rejects_wrong_secret_and_garbage():
    token = issue_token("secret", 7)
    assert verify_token(f"Bearer {token}", "other") is None
    assert verify_token("Bearer not-a-jwt", "secret") is None
    assert verify_token(None, "secret") is None


def test_verify_token_rejects_expired():
    expired = jwt.encode(
        {"role": "admin", "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        "secret",
        algorithm="HS256",
    )
    assert verify_token(f"Bearer {expired}", "secret") is None


def test_login_returns_token(client, app):
    resp = client.post("/api/auth/login", json={"password": "test-password"})
    assert resp.status_code == 200
    token = resp.get_json()["token"]
    assert verify_token(f"Bearer {token}", app.config["JWT_SECRET"])["role"] == "admin"


def test_login_rejects_wrong_password(client):
    resp = client.post("/api/auth/login", json={"password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Invalid password"}


def test_login_rejects_missing_body(client):
    assert client.post("/api/auth/login").status_code == 401


def test_login_wrong_method(client):
    resp = client.get("/api/auth/login")
    assert resp.status_code == 405
    assert "POST" in resp.headers["Allow"]


def test_admin_routes_require_token(client):
    resp = client.get("/api/admin/blogs")
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "No token provided"}


def test_admin_routes_reject_invalid_token(client):
    resp = client.get("/api/admin/blogs", headers={"Authorization": "Bearer bogus"})
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Invalid token"}


def test_admin_routes_reject_non_admin_role(client, app):
    token = jwt.encode(
        {"role": "viewer", "exp": datetime.now(timezone.utc) + timedelta(days=1)},
        app.config["JWT_SECRET"],
        algorithm="HS256",
    )
    resp = client.get("/api/admin/blogs", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401
