import csv
import io
import json


# ============================================================
# SETTINGS
# ============================================================

def test_settings_upsert(client, admin_headers, admin_user) -> None:
    assert client.get("/api/admin/settings", headers=admin_headers).json() == []

    response = client.put(
        "/api/admin/settings",
        json={"settings": {"site_name": "L&D Market", "maintenance_mode": "false"}},
        headers=admin_headers,
    )
    assert response.status_code == 200
    values = {s["key"]: s["value"] for s in response.json()}
    assert values == {"maintenance_mode": "false", "site_name": "L&D Market"}

    response = client.put(
        "/api/admin/settings", json={"settings": {"maintenance_mode": "true"}}, headers=admin_headers
    )
    settings = {s["key"]: s for s in response.json()}
    assert settings["maintenance_mode"]["value"] == "true"
    assert settings["maintenance_mode"]["updated_by"] == admin_user["user_id"]
    assert settings["site_name"]["value"] == "L&D Market"


def test_settings_update_rejects_empty(client, admin_headers) -> None:
    response = client.put("/api/admin/settings", json={"settings": {}}, headers=admin_headers)
    assert response.status_code == 422


# ============================================================
# EXPORT
# ============================================================

def test_export_users_csv(client, admin_headers, factory) -> None:
    factory.user(username="ada", email="ada@acme.io")

    response = client.get("/api/admin/export/users?format=csv", headers=admin_headers)
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"].startswith('attachment; filename="users_')

    rows = list(csv.DictReader(io.StringIO(response.text)))
    assert [r["username"] for r in rows] == ["root", "ada"]
    assert "password_hash" not in rows[0]


def test_export_users_json(client, admin_headers) -> None:
    response = client.get("/api/admin/export/users?format=json", headers=admin_headers)
    assert response.status_code == 200
    rows = json.loads(response.text)
    assert rows[0]["email"] == "root@acme.io"


def test_export_unknown_format_is_400(client, admin_headers) -> None:
    response = client.get("/api/admin/export/users?format=xlsx", headers=admin_headers)
    assert response.status_code == 400


def test_export_revenue_date_range(client, admin_headers, factory) -> None:
    factory.payment("pi_feb", created_at="2025-02-10 09:00:00")
    factory.payment("pi_mar", created_at="2025-03-31 18:00:00")
    factory.payment("pi_apr", created_at="2025-04-01 08:00:00")

    response = client.get(
        "/api/admin/export/revenue?format=json&start_date=2025-03-01&end_date=2025-03-31",
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert [row["id"] for row in json.loads(response.text)] == ["pi_mar"]

    response = client.get("/api/admin/export/revenue?start_date=not-a-date", headers=admin_headers)
    assert response.status_code == 400
