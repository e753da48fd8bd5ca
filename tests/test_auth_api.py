from admin_console.core.auth import hash_password
from admin_console.core.rate_limit import login_rate_limiter
from admin_console.services.records import find_by_id
from admin_console.core import cache


def test_login_with_username_returns_token(client, admin_user) -> None:
    response = client.post(
        "/api/admin/auth/login",
        json={"username_or_email": "root", "password": "correct-horse"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["username"] == "root"
    assert response.headers["X-RateLimit-Limit"] == str(login_rate_limiter.max_requests)

    me = client.get("/api/admin/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["is_admin"] is True


def test_login_with_email_updates_last_login(client, admin_user) -> None:
    response = client.post(
        "/api/admin/auth/login",
        json={"username_or_email": "root@acme.io", "password": "correct-horse"},
    )

    assert response.status_code == 200
    assert find_by_id(cache.USERS, admin_user["user_id"])["last_login"] is not None


def test_login_wrong_password_is_401(client, admin_user) -> None:
    response = client.post(
        "/api/admin/auth/login",
        json={"username_or_email": "root", "password": "nope"},
    )
    assert response.status_code == 401


def test_login_unknown_user_is_401(client) -> None:
    response = client.post(
        "/api/admin/auth/login",
        json={"username_or_email": "ghost", "password": "whatever"},
    )
    assert response.status_code == 401


def test_login_non_admin_is_403(client, factory) -> None:
    factory.user(username="member", email="member@acme.io", password_hash=hash_password("password1"))
    response = client.post(
        "/api/admin/auth/login",
        json={"username_or_email": "member", "password": "password1"},
    )
    assert response.status_code == 403
    assert response.json()["detail"] == "Admin access required"


def test_login_blocked_admin_is_403(client, factory) -> None:
    factory.user(
        username="gone", email="gone@acme.io", password_hash=hash_password("password1"),
        is_admin=True, blocked=True,
    )
    response = client.post(
        "/api/admin/auth/login",
        json={"username_or_email": "gone", "password": "password1"},
    )
    assert response.status_code == 403


def test_login_rate_limited(client, admin_user, monkeypatch) -> None:
    monkeypatch.setattr(login_rate_limiter, "max_requests", 2)
    payload = {"username_or_email": "root", "password": "wrong"}

    assert client.post("/api/admin/auth/login", json=payload).status_code == 401
    assert client.post("/api/admin/auth/login", json=payload).status_code == 401

    response = client.post("/api/admin/auth/login", json=payload)
    assert response.status_code == 429
    assert response.json()["detail"] == "Too many requests. Please try again in 30 minutes."


def test_admin_routes_require_token(client) -> None:
    response = client.get("/api/admin/users")
    assert response.status_code == 401


def test_admin_routes_reject_garbage_token(client) -> None:
    response = client.get("/api/admin/users", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_admin_routes_reject_non_admin(client, user_headers) -> None:
    for path in ("/api/admin/users", "/api/admin/panels", "/api/admin/dashboard-stats", "/api/admin/settings"):
        assert client.get(path, headers=user_headers).status_code == 403


def test_panels_lists_tabs_in_order(client, admin_headers) -> None:
    response = client.get("/api/admin/panels", headers=admin_headers)
    assert response.status_code == 200
    keys = [panel["key"] for panel in response.json()]
    assert keys == ["dashboard", "users", "professionals", "companies", "jobs", "content", "payments", "settings"]


def test_root_reports_status(client) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
