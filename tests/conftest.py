"""Test configuration and fixtures."""

import os

# Must be set before admin_console is imported: the engine is built at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from typing import Any, Dict, List

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from sqlalchemy import text

from admin_console.core.auth import create_access_token, hash_password
from admin_console.core.cache import list_cache
from admin_console.core.rate_limit import login_rate_limiter
from admin_console.db.postgres import engine, get_db_session
from admin_console.db.tables import init_db, drop_db
from admin_console.services import activity_service
from admin_console.services.activity_service import ActivityLogService


class _InsertResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class FakeCollection:
    """The slice of pymongo's Collection API the activity service uses."""

    def __init__(self):
        self.docs: List[Dict[str, Any]] = []
        self.indexes = []

    def _matches(self, doc, query):
        return all(doc.get(key) == value for key, value in (query or {}).items())

    def insert_one(self, doc):
        stored = dict(doc)
        stored["_id"] = ObjectId()
        self.docs.append(stored)
        return _InsertResult(stored["_id"])

    def find(self, query=None, sort=None, skip=0, limit=0):
        docs = [dict(d) for d in self.docs if self._matches(d, query)]
        for field, direction in reversed(sort or []):
            docs.sort(key=lambda d: d.get(field), reverse=direction < 0)
        docs = docs[skip:]
        return docs[:limit] if limit else docs

    def count_documents(self, query):
        return sum(1 for d in self.docs if self._matches(d, query))

    def create_index(self, keys, **kwargs):
        self.indexes.append(keys)
        return "_".join(f"{k}_{d}" for k, d in keys)


class Factory:
    """Inserts rows with sensible defaults; every method returns the new id."""

    def __init__(self):
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    def _insert(self, table: str, values: dict, key: str = "id"):
        columns = ", ".join(values)
        placeholders = ", ".join(f":{c}" for c in values)
        with get_db_session() as db:
            db.execute(text(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"), values)
            if key in values:
                return values[key]
            return db.execute(text(f"SELECT MAX({key}) FROM {table}")).fetchone()[0]

    def user(self, **overrides) -> int:
        n = self._next()
        values = {
            "username": f"user{n}",
            "password_hash": "not-a-hash",
            "email": f"user{n}@acme.io",
            "first_name": "Test",
            "last_name": f"User{n}",
            "user_type": "professional",
            "is_admin": False,
            "blocked": False,
        }
        values.update(overrides)
        return self._insert("users", values)

    def professional(self, user_id: int = None, **overrides) -> int:
        user_id = user_id or self.user(user_type="professional")
        values = {
            "user_id": user_id,
            "first_name": "Pat",
            "last_name": "Trainer",
            "title": "Leadership Coach",
            "bio": "Facilitator",
            "location": "Berlin",
            "rate_per_hour": 120,
            "years_experience": 8,
            "rating": 4,
            "review_count": 10,
            "featured": False,
            "verified": False,
        }
        values.update(overrides)
        return self._insert("professional_profiles", values)

    def company(self, user_id: int = None, **overrides) -> int:
        user_id = user_id or self.user(user_type="company")
        values = {
            "user_id": user_id,
            "company_name": "Acme Learning",
            "industry": "Technology",
            "description": "We build things",
            "size": "medium",
            "location": "London",
            "featured": False,
            "verified": False,
        }
        values.update(overrides)
        return self._insert("company_profiles", values)

    def job(self, company_id: int = None, **overrides) -> int:
        company_id = company_id or self.company()
        values = {
            "company_id": company_id,
            "title": "Sales Trainer",
            "description": "Run onboarding",
            "location": "Remote",
            "job_type": "contract",
            "requirements": "",
            "status": "open",
        }
        values.update(overrides)
        return self._insert("job_postings", values)

    def category(self, name: str = None, **overrides) -> int:
        values = {"name": name or f"Category {self._next()}"}
        values.update(overrides)
        return self._insert("resource_categories", values)

    def resource(self, author_id: int, **overrides) -> int:
        values = {
            "author_id": author_id,
            "title": "Onboarding Checklist",
            "description": "A checklist",
            "content": "Step one",
            "resource_type": "template",
        }
        values.update(overrides)
        return self._insert("resources", values)

    def page(self, **overrides) -> int:
        n = self._next()
        values = {"slug": f"page-{n}", "title": f"Page {n}", "content": "Body text"}
        values.update(overrides)
        return self._insert("page_contents", values)

    def plan(self, plan_id: str = "basic_professional", **overrides) -> str:
        values = {
            "id": plan_id,
            "name": "Basic Professional",
            "plan_type": "professional",
            "price_cents": 2999,
            "features": '["Profile visibility"]',
        }
        values.update(overrides)
        return self._insert("subscription_plans", values)

    def subscription(self, user_id: int, plan_id: str, **overrides) -> int:
        values = {"user_id": user_id, "plan_id": plan_id, "status": "active"}
        values.update(overrides)
        return self._insert("subscriptions", values)

    def payment(self, payment_id: str = None, **overrides) -> str:
        values = {
            "id": payment_id or f"pi_test{self._next()}",
            "payment_type": "subscription",
            "status": "succeeded",
            "amount_cents": 4999,
            "refunded_cents": 0,
        }
        values.update(overrides)
        return self._insert("payments", values)


@pytest.fixture(autouse=True)
def database():
    """Fresh schema and empty caches for every test."""
    init_db(engine)
    list_cache.clear()
    login_rate_limiter.reset()
    yield engine
    drop_db(engine)
    list_cache.clear()


@pytest.fixture(autouse=True)
def activity_collection(monkeypatch):
    collection = FakeCollection()
    monkeypatch.setattr(activity_service, "_activity_service", ActivityLogService(collection))
    return collection


@pytest.fixture
def factory():
    return Factory()


@pytest.fixture
def client():
    from admin_console.main import app
    return TestClient(app)


@pytest.fixture
def admin_user(factory):
    user_id = factory.user(
        username="root",
        email="root@acme.io",
        password_hash=hash_password("correct-horse"),
        user_type="admin",
        is_admin=True,
    )
    return {"user_id": user_id, "username": "root"}


def auth_headers(user_id: int, username: str) -> dict:
    token = create_access_token({"sub": str(user_id), "username": username})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user["user_id"], admin_user["username"])


@pytest.fixture
def user_headers(factory):
    user_id = factory.user(username="plain", email="plain@acme.io")
    return auth_headers(user_id, "plain")


@pytest.fixture
def make_headers():
    return auth_headers
