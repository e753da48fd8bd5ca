"""
Dashboard Service - summary cards, headline stats and daily analytics.

Counts come from the cached panel lists, so the dashboard shows exactly
what the panels show; every mutation invalidates the dashboard as well.
"""

from collections import Counter
from datetime import datetime, timedelta
from typing import Dict, List

from admin_console.core import cache
from admin_console.core.cache import list_cache
from admin_console.core.logging import get_logger
from admin_console.services import billing_service
from admin_console.services.activity_service import get_activity_service
from admin_console.services.records import cached
from admin_console.utils.dates import parse_datetime, utcnow, month_start, period_days

logger = get_logger(__name__)

OPEN_JOB_STATUSES = ("open", "active")


def format_money(amount: float) -> str:
    """45789.4 -> '$45,789'"""
    return f"${amount:,.0f}"


def _overview() -> dict:
    users = cached(cache.USERS)
    jobs = cached(cache.JOBS)
    resources = cached(cache.RESOURCES)
    payments = cached(cache.PAYMENTS)

    users_by_type = Counter(u["user_type"] for u in users)
    jobs_by_status = Counter(j["status"] for j in jobs)
    resources_by_category = Counter(r["category_name"] or "Uncategorized" for r in resources)

    return {
        "total_users": len(users),
        "total_professionals": len(cached(cache.PROFESSIONALS)),
        "total_companies": len(cached(cache.COMPANIES)),
        "total_jobs": len(jobs),
        "active_jobs": sum(1 for j in jobs if j["status"] in OPEN_JOB_STATUSES and not j["archived"]),
        "total_resources": len(resources),
        "total_revenue": billing_service.total_revenue(payments),
        "users_by_type": dict(users_by_type),
        "jobs_by_status": dict(jobs_by_status),
        "resources_by_category": dict(resources_by_category),
    }


def build_cards(overview: dict) -> List[dict]:
    return [
        {"title": "Total Users", "value": str(overview["total_users"]),
         "description": f"{overview['users_by_type'].get('admin', 0)} admins"},
        {"title": "Professionals", "value": str(overview["total_professionals"]),
         "description": "Active L&D experts"},
        {"title": "Companies", "value": str(overview["total_companies"]),
         "description": "Registered businesses"},
        {"title": "Job Postings", "value": str(overview["active_jobs"]),
         "description": "Active opportunities"},
        {"title": "Resources", "value": str(overview["total_resources"]),
         "description": "Published materials"},
        {"title": "Revenue", "value": format_money(overview["total_revenue"]),
         "description": "Total platform revenue"},
    ]


def recent_activity(limit: int = 10) -> List[dict]:
    try:
        return get_activity_service().feed(limit)
    except Exception as e:
        logger.warning("Recent activity unavailable: %s", e)
        return []


def dashboard_stats() -> dict:
    overview = list_cache.get_or_load(cache.DASHBOARD, _overview)
    return {
        "cards": build_cards(overview),
        "overview": overview,
        "recent_activity": recent_activity(),
    }


def growth_percent(current: int, previous: int) -> float:
    if previous <= 0:
        return 0.0
    return round((current - previous) / previous * 100, 1)


def admin_stats(now: datetime = None) -> dict:
    """Headline numbers: growth since last month, conversion, pending reviews."""
    now = now or utcnow()
    this_month = month_start(now)

    users = cached(cache.USERS)
    total_users = len(users)
    existing_before_month = sum(
        1 for u in users if (parse_datetime(u["created_at"]) or this_month) < this_month
    )

    active_subscriptions = billing_service.active_subscription_count()
    monthly_revenue = sum(
        billing_service.net_cents(p) for p in cached(cache.PAYMENTS)
        if (parse_datetime(p["created_at"]) or this_month) >= this_month
    ) / 100

    pending_content = (
        sum(1 for p in cached(cache.PROFESSIONALS) if not p["verified"])
        + sum(1 for c in cached(cache.COMPANIES) if not c["verified"])
    )

    conversion_rate = round(active_subscriptions / total_users * 100, 1) if total_users else 0.0

    return {
        "total_users": total_users,
        "active_subscriptions": active_subscriptions,
        "monthly_revenue": monthly_revenue,
        "pending_content": pending_content,
        "user_growth": growth_percent(total_users, existing_before_month),
        "conversion_rate": conversion_rate,
    }


def _daily_buckets(period: str, now: datetime) -> Dict[str, float]:
    days = period_days(period)
    today = now.date()
    return {(today - timedelta(days=offset)).isoformat(): 0 for offset in range(days - 1, -1, -1)}


def user_signups(period: str = "30d", now: datetime = None) -> List[dict]:
    """Daily sign-up counts for the period, oldest day first."""
    buckets = _daily_buckets(period, now or utcnow())
    for user in cached(cache.USERS):
        created = parse_datetime(user["created_at"])
        day = created.date().isoformat() if created else None
        if day in buckets:
            buckets[day] += 1
    return [{"date": day, "value": count} for day, count in buckets.items()]


def daily_revenue(period: str = "30d", now: datetime = None) -> List[dict]:
    """Daily net revenue for the period, oldest day first."""
    buckets = _daily_buckets(period, now or utcnow())
    for payment in cached(cache.PAYMENTS):
        created = parse_datetime(payment["created_at"])
        day = created.date().isoformat() if created else None
        if day in buckets:
            buckets[day] += billing_service.net_cents(payment)
    return [{"date": day, "value": cents / 100} for day, cents in buckets.items()]
