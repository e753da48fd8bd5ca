from admin_console.db.postgres import execute_raw_sql


def test_list_users_search_filter_sort(client, admin_headers, factory) -> None:
    factory.user(username="zoe", email="zoe@acme.io", first_name="Zoe", user_type="company")
    factory.user(username="adam", email="adam@acme.io", first_name="Adam")
    factory.user(username="blocked-bob", email="bob@acme.io", blocked=True)

    response = client.get("/api/admin/users?sort=username&order=asc", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 4
    assert [u["username"] for u in body["items"]] == ["adam", "blocked-bob", "root", "zoe"]

    response = client.get("/api/admin/users?search=ZOE", headers=admin_headers)
    assert [u["username"] for u in response.json()["items"]] == ["zoe"]

    response = client.get("/api/admin/users?user_type=company", headers=admin_headers)
    assert [u["username"] for u in response.json()["items"]] == ["zoe"]

    response = client.get("/api/admin/users?status=blocked", headers=admin_headers)
    assert [u["username"] for u in response.json()["items"]] == ["blocked-bob"]


def test_list_users_pages(client, admin_headers, factory) -> None:
    for _ in range(5):
        factory.user()
    response = client.get("/api/admin/users?page=2&page_size=4", headers=admin_headers)
    body = response.json()
    assert body["total"] == 6
    assert body["page"] == 2
    assert len(body["items"]) == 2


def test_unknown_sort_field_is_400(client, admin_headers) -> None:
    response = client.get("/api/admin/users?sort=password_hash", headers=admin_headers)
    assert response.status_code == 400
    assert "Cannot sort by" in response.json()["detail"]


def test_create_user_and_duplicate(client, admin_headers, activity_collection) -> None:
    payload = {
        "username": "newbie",
        "email": "newbie@acme.io",
        "password": "long-enough",
        "first_name": "New",
        "last_name": "Bie",
        "user_type": "professional",
    }
    response = client.post("/api/admin/users", json=payload, headers=admin_headers)
    assert response.status_code == 201
    assert response.json()["username"] == "newbie"
    assert response.json()["is_admin"] is False

    actions = [d["action"] for d in activity_collection.docs if d["kind"] == "action"]
    assert actions == ["CREATE_USER"]

    response = client.post("/api/admin/users", json=payload, headers=admin_headers)
    assert response.status_code == 409


def test_create_user_validates_body(client, admin_headers) -> None:
    response = client.post(
        "/api/admin/users",
        json={"username": "x", "email": "not-an-email", "password": "short"},
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_created_user_visible_in_cached_list(client, admin_headers) -> None:
    # Prime the cache, then mutate: the next read must see the new row
    assert client.get("/api/admin/users", headers=admin_headers).json()["total"] == 1
    client.post(
        "/api/admin/users",
        json={
            "username": "fresh", "email": "fresh@acme.io", "password": "long-enough",
            "first_name": "F", "last_name": "R", "user_type": "company",
        },
        headers=admin_headers,
    )
    assert client.get("/api/admin/users", headers=admin_headers).json()["total"] == 2


def test_patch_user(client, admin_headers, factory) -> None:
    user_id = factory.user(username="pat")
    factory.user(username="taken", email="taken@acme.io")

    response = client.patch(f"/api/admin/users/{user_id}", json={"first_name": "Patricia"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["first_name"] == "Patricia"

    response = client.patch(f"/api/admin/users/{user_id}", json={"email": "taken@acme.io"}, headers=admin_headers)
    assert response.status_code == 409

    response = client.patch(f"/api/admin/users/{user_id}", json={}, headers=admin_headers)
    assert response.status_code == 400


def test_user_detail_includes_profile_and_activity(client, admin_headers, factory) -> None:
    user_id = factory.user(user_type="professional")
    factory.professional(user_id=user_id, title="Agile Coach")
    client.post(f"/api/admin/users/{user_id}/suspend", json={"reason": "spam"}, headers=admin_headers)

    response = client.get(f"/api/admin/users/{user_id}", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["blocked"] is True
    assert body["user"]["blocked_reason"] == "spam"
    assert body["profile"]["title"] == "Agile Coach"
    assert [a["action"] for a in body["activity"]] == ["SUSPEND_USER"]


def test_user_detail_404(client, admin_headers) -> None:
    assert client.get("/api/admin/users/999", headers=admin_headers).status_code == 404


def test_suspend_and_activate(client, admin_headers, factory) -> None:
    user_id = factory.user()

    response = client.post(f"/api/admin/users/{user_id}/suspend", json={"reason": "abuse"}, headers=admin_headers)
    assert response.status_code == 200
    listed = client.get("/api/admin/users?status=blocked", headers=admin_headers).json()
    assert [u["id"] for u in listed["items"]] == [user_id]

    response = client.post(f"/api/admin/users/{user_id}/activate", headers=admin_headers)
    assert response.status_code == 200
    listed = client.get("/api/admin/users?status=blocked", headers=admin_headers).json()
    assert listed["items"] == []


def test_admin_cannot_suspend_or_delete_self(client, admin_headers, admin_user) -> None:
    own_id = admin_user["user_id"]
    assert client.post(f"/api/admin/users/{own_id}/suspend", headers=admin_headers).status_code == 400
    assert client.delete(f"/api/admin/users/{own_id}", headers=admin_headers).status_code == 400


def test_suspended_admin_token_stops_working(client, admin_headers, factory, make_headers) -> None:
    other_id = factory.user(username="second", is_admin=True, user_type="admin")
    other_headers = make_headers(other_id, "second")
    assert client.get("/api/admin/users", headers=other_headers).status_code == 200

    client.post(f"/api/admin/users/{other_id}/suspend", headers=admin_headers)

    response = client.get("/api/admin/users", headers=other_headers)
    assert response.status_code == 403
    assert response.json()["detail"] == "Account suspended"


def test_make_admin(client, admin_headers, factory) -> None:
    user_id = factory.user()
    response = client.post(f"/api/admin/users/{user_id}/make-admin", headers=admin_headers)
    assert response.status_code == 200
    detail = client.get(f"/api/admin/users/{user_id}", headers=admin_headers).json()
    assert detail["user"]["is_admin"] is True


def test_user_transactions(client, admin_headers, factory) -> None:
    user_id = factory.user()
    factory.payment("pi_a", user_id=user_id, created_at="2025-03-01 10:00:00")
    factory.payment("pi_b", user_id=user_id, created_at="2025-03-05 10:00:00")
    factory.payment("pi_other")

    response = client.get(f"/api/admin/users/{user_id}/transactions", headers=admin_headers)
    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == ["pi_b", "pi_a"]


def test_delete_user_cascades(client, admin_headers, factory) -> None:
    user_id = factory.user(user_type="company")
    company_id = factory.company(user_id=user_id)
    factory.job(company_id=company_id)
    factory.resource(author_id=user_id)
    factory.plan()
    factory.subscription(user_id, "basic_professional")
    factory.payment("pi_kept", user_id=user_id)
    factory.page(last_edited_by=user_id)

    response = client.delete(f"/api/admin/users/{user_id}", headers=admin_headers)
    assert response.status_code == 200

    for table, column in (
        ("company_profiles", "user_id"),
        ("resources", "author_id"),
        ("subscriptions", "user_id"),
        ("users", "id"),
    ):
        rows = execute_raw_sql(f"SELECT COUNT(*) AS n FROM {table} WHERE {column} = :id", {"id": user_id})
        assert rows[0]["n"] == 0, table

    assert execute_raw_sql("SELECT COUNT(*) AS n FROM job_postings")[0]["n"] == 0
    assert execute_raw_sql("SELECT user_id FROM payments WHERE id = 'pi_kept'")[0]["user_id"] is None
    assert execute_raw_sql("SELECT last_edited_by FROM page_contents")[0]["last_edited_by"] is None
    assert client.get(f"/api/admin/users/{user_id}", headers=admin_headers).status_code == 404


def test_patch_user_refreshes_lists_that_embed_the_user(client, admin_headers, factory) -> None:
    user_id = factory.user(first_name="Old", last_name="Name", email="old@acme.io")
    factory.professional(user_id=user_id)
    factory.resource(user_id)
    factory.plan()
    factory.subscription(user_id, "basic_professional")

    # Warm every list that carries the user's name or email
    client.get("/api/admin/resources", headers=admin_headers)
    client.get("/api/admin/subscriptions", headers=admin_headers)
    client.get("/api/admin/professional-profiles", headers=admin_headers)

    response = client.patch(
        f"/api/admin/users/{user_id}",
        json={"first_name": "New", "email": "new@acme.io"},
        headers=admin_headers,
    )
    assert response.status_code == 200

    resources = client.get("/api/admin/resources", headers=admin_headers).json()["items"]
    assert [r["author_name"] for r in resources] == ["New Name"]

    subscriptions = client.get("/api/admin/subscriptions", headers=admin_headers).json()["items"]
    assert subscriptions[0]["user_name"] == "New Name"
    assert subscriptions[0]["user_email"] == "new@acme.io"

    professionals = client.get("/api/admin/professional-profiles", headers=admin_headers).json()["items"]
    assert professionals[0]["email"] == "new@acme.io"


def test_patch_user_type_admin_grants_admin_flag(client, admin_headers, factory) -> None:
    user_id = factory.user()

    response = client.patch(f"/api/admin/users/{user_id}", json={"user_type": "admin"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["user_type"] == "admin"
    assert response.json()["is_admin"] is True

    response = client.patch(
        f"/api/admin/users/{user_id}", json={"user_type": "admin", "is_admin": False}, headers=admin_headers
    )
    assert response.json()["is_admin"] is True
