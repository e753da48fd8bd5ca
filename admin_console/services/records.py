"""
Panel list loaders.

One function per admin panel that fetches the panel's full list with a
single query. Panels read these through the list cache:

    rows = list_cache.get_or_load(cache.USERS, load_users)

Rows are plain dicts (column -> value); list filtering and sorting
happen in services.listing.
"""

import json
from typing import List

from admin_console.core import cache
from admin_console.core.cache import list_cache
from admin_console.db.postgres import execute_raw_sql


USER_COLUMNS = """
    u.id, u.username, u.email, u.first_name, u.last_name, u.user_type,
    u.is_admin, u.blocked, u.blocked_reason, u.created_at, u.last_login
"""


def load_users() -> List[dict]:
    return execute_raw_sql(f"SELECT {USER_COLUMNS} FROM users u ORDER BY u.id")


def load_professionals() -> List[dict]:
    return execute_raw_sql("""
        SELECT p.id, p.user_id, p.first_name, p.last_name, u.email, p.title, p.bio, p.location,
               p.rate_per_hour, p.years_experience, p.rating, p.review_count,
               p.featured, p.verified, p.created_at
        FROM professional_profiles p
        JOIN users u ON p.user_id = u.id
        ORDER BY p.id
    """)


def load_companies() -> List[dict]:
    return execute_raw_sql("""
        SELECT c.id, c.user_id, c.company_name, u.email, c.industry, c.description, c.website,
               c.size, c.location, c.featured, c.verified, c.created_at
        FROM company_profiles c
        JOIN users u ON c.user_id = u.id
        ORDER BY c.id
    """)


def load_jobs() -> List[dict]:
    return execute_raw_sql("""
        SELECT j.id, j.company_id, c.company_name, j.title, j.description, j.location, j.job_type,
               j.min_compensation, j.max_compensation, j.compensation_unit, j.requirements,
               j.remote, j.featured, j.archived, j.status, j.created_at, j.modified_at, j.expires_at
        FROM job_postings j
        JOIN company_profiles c ON j.company_id = c.id
        ORDER BY j.id
    """)


def load_resources() -> List[dict]:
    return execute_raw_sql("""
        SELECT r.id, r.author_id, u.first_name || ' ' || u.last_name AS author_name,
               r.title, r.description, r.content, r.content_url, r.resource_type,
               r.category_id, rc.name AS category_name, r.image_url, r.featured, r.created_at
        FROM resources r
        JOIN users u ON r.author_id = u.id
        LEFT JOIN resource_categories rc ON r.category_id = rc.id
        ORDER BY r.id
    """)


def load_categories() -> List[dict]:
    return execute_raw_sql("""
        SELECT rc.id, rc.name, rc.description, COUNT(r.id) AS resource_count
        FROM resource_categories rc
        LEFT JOIN resources r ON r.category_id = rc.id
        GROUP BY rc.id, rc.name, rc.description
        ORDER BY rc.name
    """)


def load_page_contents() -> List[dict]:
    return execute_raw_sql("""
        SELECT id, slug, title, content, meta_title, meta_description, last_edited_by,
               created_at, updated_at
        FROM page_contents
        ORDER BY slug
    """)


def plan_from_row(row: dict) -> dict:
    return {
        "id": row["id"],
        "name": row["name"],
        "plan_type": row["plan_type"],
        "price": row["price_cents"] / 100,
        "currency": row["currency"],
        "interval": row["billing_interval"],
        "features": json.loads(row["features"] or "[]"),
        "active": bool(row["active"]),
    }


def load_plans() -> List[dict]:
    rows = execute_raw_sql("""
        SELECT id, name, plan_type, price_cents, currency, billing_interval, features, active
        FROM subscription_plans
        ORDER BY plan_type, price_cents
    """)
    return [plan_from_row(r) for r in rows]


def load_subscriptions() -> List[dict]:
    return execute_raw_sql("""
        SELECT s.id, s.user_id, u.email AS user_email,
               u.first_name || ' ' || u.last_name AS user_name,
               s.plan_id, p.name AS plan_name, s.status, s.started_at,
               s.current_period_end, s.canceled_at
        FROM subscriptions s
        JOIN users u ON s.user_id = u.id
        JOIN subscription_plans p ON s.plan_id = p.id
        ORDER BY s.id
    """)


def payment_from_row(row: dict) -> dict:
    return {
        "id": row["id"],
        "user_id": row["user_id"],
        "user_email": row.get("user_email"),
        "payment_type": row["payment_type"],
        "status": row["status"],
        "amount": row["amount_cents"] / 100,
        "amount_cents": row["amount_cents"],
        "refunded_amount": (row["refunded_cents"] or 0) / 100,
        "refunded_cents": row["refunded_cents"] or 0,
        "currency": row["currency"],
        "description": row["description"],
        "created_at": row["created_at"],
    }


def load_payments() -> List[dict]:
    rows = execute_raw_sql("""
        SELECT p.id, p.user_id, u.email AS user_email, p.payment_type, p.status,
               p.amount_cents, p.refunded_cents, p.currency, p.description, p.created_at
        FROM payments p
        LEFT JOIN users u ON p.user_id = u.id
        ORDER BY p.created_at DESC
    """)
    return [payment_from_row(r) for r in rows]


def load_settings() -> List[dict]:
    return execute_raw_sql("""
        SELECT setting_key, value, description, updated_by, updated_at
        FROM system_settings
        ORDER BY setting_key
    """)


# namespace -> loader
LOADERS = {
    cache.USERS: load_users,
    cache.PROFESSIONALS: load_professionals,
    cache.COMPANIES: load_companies,
    cache.JOBS: load_jobs,
    cache.RESOURCES: load_resources,
    cache.RESOURCE_CATEGORIES: load_categories,
    cache.PAGE_CONTENTS: load_page_contents,
    cache.PLANS: load_plans,
    cache.SUBSCRIPTIONS: load_subscriptions,
    cache.PAYMENTS: load_payments,
    cache.SETTINGS: load_settings,
}


def cached(namespace: str) -> List[dict]:
    """Full list for a panel namespace, through the list cache."""
    return list_cache.get_or_load(namespace, LOADERS[namespace])


def find_by_id(namespace: str, record_id) -> dict:
    """Row from a cached panel list, or None."""
    for row in cached(namespace):
        if row["id"] == record_id:
            return row
    return None
