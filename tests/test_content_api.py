from admin_console.api.routes.content_routes import meta_for


# ============================================================
# RESOURCES & CATEGORIES
# ============================================================

def test_create_resource_defaults_author_to_admin(client, admin_headers, admin_user, factory) -> None:
    category_id = factory.category("Leadership")
    response = client.post(
        "/api/admin/resources",
        json={
            "title": "Feedback Framework",
            "description": "How to give feedback",
            "content": "Situation, behaviour, impact",
            "resource_type": "article",
            "category_id": category_id,
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["author_id"] == admin_user["user_id"]
    assert body["category_name"] == "Leadership"
    assert body["author_name"] == "Test User1"


def test_create_resource_with_missing_category_is_400(client, admin_headers) -> None:
    response = client.post(
        "/api/admin/resources",
        json={
            "title": "Orphan", "description": "d", "content": "c",
            "resource_type": "video", "category_id": 99,
        },
        headers=admin_headers,
    )
    assert response.status_code == 400


def test_list_resources_filters(client, admin_headers, admin_user, factory) -> None:
    category_id = factory.category("Sales")
    author = admin_user["user_id"]
    factory.resource(author, title="Cold Calling", resource_type="video", category_id=category_id)
    factory.resource(author, title="Pitch Deck", resource_type="template", featured=True)

    response = client.get(f"/api/admin/resources?category_id={category_id}", headers=admin_headers)
    assert [r["title"] for r in response.json()["items"]] == ["Cold Calling"]

    response = client.get("/api/admin/resources?featured=true", headers=admin_headers)
    assert [r["title"] for r in response.json()["items"]] == ["Pitch Deck"]

    response = client.get("/api/admin/resources?sort=title&order=desc", headers=admin_headers)
    assert [r["title"] for r in response.json()["items"]] == ["Pitch Deck", "Cold Calling"]


def test_update_and_feature_resource(client, admin_headers, admin_user, factory) -> None:
    resource_id = factory.resource(admin_user["user_id"])

    response = client.patch(f"/api/admin/resources/{resource_id}", json={"title": "Renamed"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["title"] == "Renamed"

    response = client.put(f"/api/admin/resources/{resource_id}", json={"description": "New"}, headers=admin_headers)
    assert response.json()["description"] == "New"
    assert response.json()["title"] == "Renamed"

    response = client.put(
        f"/api/admin/resources/{resource_id}/featured", json={"featured": True}, headers=admin_headers
    )
    assert response.json()["featured"] is True


def test_delete_resource(client, admin_headers, admin_user, factory) -> None:
    resource_id = factory.resource(admin_user["user_id"])
    assert client.delete(f"/api/admin/resources/{resource_id}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/admin/resources/{resource_id}", headers=admin_headers).status_code == 404


def test_categories_with_counts(client, admin_headers, admin_user, factory) -> None:
    used = factory.category("Coaching")
    factory.category("Agile")
    factory.resource(admin_user["user_id"], category_id=used)
    factory.resource(admin_user["user_id"], category_id=used)

    response = client.get("/api/admin/resource-categories", headers=admin_headers)
    assert response.status_code == 200
    assert [(c["name"], c["resource_count"]) for c in response.json()] == [("Agile", 0), ("Coaching", 2)]


def test_create_category_duplicate_is_409(client, admin_headers, factory) -> None:
    factory.category("Coaching")
    response = client.post("/api/admin/resource-categories", json={"name": "coaching"}, headers=admin_headers)
    assert response.status_code == 409

    response = client.post("/api/admin/resource-categories", json={"name": "Mentoring"}, headers=admin_headers)
    assert response.status_code == 201
    assert response.json()["resource_count"] == 0


def test_delete_category_in_use_is_400(client, admin_headers, admin_user, factory) -> None:
    used = factory.category("Coaching")
    unused = factory.category("Agile")
    factory.resource(admin_user["user_id"], category_id=used)

    assert client.delete(f"/api/admin/resource-categories/{used}", headers=admin_headers).status_code == 400
    assert client.delete(f"/api/admin/resource-categories/{unused}", headers=admin_headers).status_code == 200
    assert client.delete(f"/api/admin/resource-categories/{unused}", headers=admin_headers).status_code == 404


# ============================================================
# PAGES
# ============================================================

def test_create_page_and_duplicate_slug(client, admin_headers, admin_user) -> None:
    payload = {"slug": "about-us", "title": "About Us", "content": "We connect companies with trainers."}
    response = client.post("/api/admin/page-contents", json=payload, headers=admin_headers)
    assert response.status_code == 201
    assert response.json()["last_edited_by"] == admin_user["user_id"]

    response = client.post("/api/admin/page-contents", json=payload, headers=admin_headers)
    assert response.status_code == 409


def test_page_slug_must_be_kebab_case(client, admin_headers) -> None:
    response = client.post(
        "/api/admin/page-contents",
        json={"slug": "About Us!", "title": "About", "content": "x"},
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_update_page_sets_editor(client, admin_headers, admin_user, factory) -> None:
    page_id = factory.page(slug="terms", updated_at="2024-01-01 00:00:00")
    factory.page(slug="privacy")

    response = client.patch(f"/api/admin/page-contents/{page_id}", json={"title": "Terms"}, headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Terms"
    assert body["last_edited_by"] == admin_user["user_id"]
    assert not body["updated_at"].startswith("2024-01-01")

    response = client.put(f"/api/admin/page-contents/{page_id}", json={"slug": "privacy"}, headers=admin_headers)
    assert response.status_code == 409


def test_list_and_delete_pages(client, admin_headers, factory) -> None:
    page_id = factory.page(slug="faq", content="Frequently asked")
    factory.page(slug="help")

    response = client.get("/api/admin/page-contents?search=frequently", headers=admin_headers)
    assert [p["slug"] for p in response.json()["items"]] == ["faq"]

    assert client.delete(f"/api/admin/page-contents/{page_id}", headers=admin_headers).status_code == 200
    assert client.get("/api/admin/page-contents", headers=admin_headers).json()["total"] == 1


def test_public_page_meta(client, factory) -> None:
    factory.page(slug="about", title="About", content="Short body", meta_title="About the marketplace")

    response = client.get("/api/pages/about")
    assert response.status_code == 200
    assert response.json()["meta"] == {"title": "About the marketplace", "description": "Short body"}

    assert client.get("/api/pages/missing").status_code == 404


def test_meta_falls_back_to_title_and_content() -> None:
    content = "Line one\n\n   line two " + "x" * 300
    meta = meta_for({"title": "Guide", "content": content, "meta_title": None, "meta_description": None})
    assert meta.title == "Guide"
    assert meta.description.startswith("Line one line two x")
    assert len(meta.description) == 160
