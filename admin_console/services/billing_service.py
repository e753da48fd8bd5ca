"""
Billing Service - subscription plans, refunds and revenue metrics.

Refunds and cancellations here are bookkeeping on our own tables; no
payment processor is called.
"""

import json
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import text

from admin_console.core.logging import get_logger
from admin_console.db.postgres import get_db_session, execute_raw_sql
from admin_console.utils.dates import (
    parse_datetime, utcnow, to_db_timestamp, last_n_months, month_label, month_start, shift_months
)

logger = get_logger(__name__)


# Plan catalog the console shipped with before plans were editable
DEFAULT_PLANS = [
    {
        "id": "basic_professional", "name": "Basic Professional", "plan_type": "professional",
        "price_cents": 2999, "billing_interval": "month",
        "features": ["Profile visibility", "Apply to jobs", "Basic analytics"],
    },
    {
        "id": "premium_professional", "name": "Premium Professional", "plan_type": "professional",
        "price_cents": 4999, "billing_interval": "month",
        "features": ["Featured profile", "Priority applications", "Advanced analytics", "Unlimited resources"],
    },
    {
        "id": "basic_company", "name": "Basic Company", "plan_type": "company",
        "price_cents": 9999, "billing_interval": "month",
        "features": ["Company profile", "Post up to 5 jobs", "Basic candidate search"],
    },
    {
        "id": "premium_company", "name": "Premium Company", "plan_type": "company",
        "price_cents": 19999, "billing_interval": "month",
        "features": ["Featured company profile", "Unlimited job postings",
                     "Advanced candidate search", "Priority support"],
    },
]

# Sample payment history; loaded only on request (CLI seed-samples)
SAMPLE_PAYMENTS = [
    ("pi_123456", "subscription", "succeeded", 4999, "2025-03-15 10:24:00", "Monthly professional subscription"),
    ("pi_123457", "subscription", "succeeded", 2999, "2025-03-14 14:56:00", "Monthly company basic subscription"),
    ("pi_123458", "consultation", "succeeded", 12500, "2025-03-13 11:32:00", "Consultation payment for 2-hour session"),
    ("pi_123459", "subscription", "failed", 4999, "2025-03-12 09:15:00", "Monthly professional subscription (failed)"),
    ("pi_123460", "consultation", "refunded", 7500, "2025-03-10 15:45:00", "Consultation payment refund"),
    ("pi_123461", "subscription", "succeeded", 9999, "2025-03-09 08:30:00", "Annual company premium subscription"),
]

# Payments that count towards revenue (net of refunds)
REVENUE_STATUSES = ("succeeded", "partially_refunded")
REFUNDABLE_STATUSES = ("succeeded", "partially_refunded")


class RefundError(ValueError):
    pass


def seed_default_plans() -> int:
    """Insert the default plans that are missing. Returns how many were added."""
    added = 0
    with get_db_session() as db:
        for plan in DEFAULT_PLANS:
            exists = db.execute(
                text("SELECT id FROM subscription_plans WHERE id = :id"), {"id": plan["id"]}
            ).fetchone()
            if exists:
                continue
            db.execute(
                text("""
                    INSERT INTO subscription_plans (id, name, plan_type, price_cents, currency, billing_interval, features, active)
                    VALUES (:id, :name, :plan_type, :price_cents, 'usd', :billing_interval, :features, TRUE)
                """),
                {**plan, "features": json.dumps(plan["features"])}
            )
            added += 1
    if added:
        logger.info("Seeded %d subscription plans", added)
    return added


def seed_sample_payments(user_ids: Optional[List[int]] = None) -> int:
    """Insert the sample payment history (skips ids that already exist)."""
    user_ids = user_ids or []
    added = 0
    with get_db_session() as db:
        for index, (payment_id, payment_type, status, cents, created_at, description) in enumerate(SAMPLE_PAYMENTS):
            if db.execute(text("SELECT id FROM payments WHERE id = :id"), {"id": payment_id}).fetchone():
                continue
            db.execute(
                text("""
                    INSERT INTO payments (id, user_id, payment_type, status, amount_cents, refunded_cents, currency, description, created_at)
                    VALUES (:id, :user_id, :payment_type, :status, :amount_cents, :refunded_cents, 'usd', :description, :created_at)
                """),
                {
                    "id": payment_id,
                    "user_id": user_ids[index % len(user_ids)] if user_ids else None,
                    "payment_type": payment_type,
                    "status": status,
                    "amount_cents": cents,
                    "refunded_cents": cents if status == "refunded" else 0,
                    "description": description,
                    "created_at": created_at,
                }
            )
            added += 1
    return added


def seed_sample_data(include_payments: bool = False) -> dict:
    """Default plans always; the sample payment history only when asked."""
    counts = {"plans": seed_default_plans(), "payments": 0}
    if include_payments:
        rows = execute_raw_sql("SELECT id FROM users WHERE is_admin = FALSE ORDER BY id")
        counts["payments"] = seed_sample_payments([r["id"] for r in rows])
    return counts


def to_cents(amount: float) -> int:
    return int(round(amount * 100))


def net_cents(payment: dict) -> int:
    """Revenue a payment contributes: amount minus refunds, 0 unless it went through."""
    if payment["status"] not in REVENUE_STATUSES:
        return 0
    return payment["amount_cents"] - (payment["refunded_cents"] or 0)


def refund_payment(payment_id: str, amount: Optional[float] = None) -> dict:
    """
    Refund all or part of a payment.

    Raises:
        LookupError: unknown payment
        RefundError: payment not refundable or amount out of range
    """
    with get_db_session() as db:
        row = db.execute(
            text("SELECT id, status, amount_cents, refunded_cents FROM payments WHERE id = :id"),
            {"id": payment_id}
        ).fetchone()
        if not row:
            raise LookupError(f"Payment {payment_id} not found")

        _, status, amount_cents, refunded_cents = row
        refunded_cents = refunded_cents or 0
        if status not in REFUNDABLE_STATUSES:
            raise RefundError(f"Payment with status '{status}' cannot be refunded")

        remaining = amount_cents - refunded_cents
        refund_cents = remaining if amount is None else to_cents(amount)
        if refund_cents <= 0:
            raise RefundError("Refund amount must be positive")
        if refund_cents > remaining:
            raise RefundError(f"Refund exceeds refundable amount {remaining / 100:.2f}")

        new_refunded = refunded_cents + refund_cents
        new_status = "refunded" if new_refunded == amount_cents else "partially_refunded"
        db.execute(
            text("UPDATE payments SET refunded_cents = :refunded, status = :status WHERE id = :id"),
            {"refunded": new_refunded, "status": new_status, "id": payment_id}
        )

    logger.info("Refunded %.2f on payment %s (%s)", refund_cents / 100, payment_id, new_status)
    return {"payment_id": payment_id, "refunded": refund_cents / 100, "status": new_status}


def cancel_subscription(subscription_id: int) -> None:
    """
    Raises:
        LookupError: unknown subscription
        ValueError: already canceled
    """
    with get_db_session() as db:
        row = db.execute(
            text("SELECT status FROM subscriptions WHERE id = :id"), {"id": subscription_id}
        ).fetchone()
        if not row:
            raise LookupError(f"Subscription {subscription_id} not found")
        if row[0] == "canceled":
            raise ValueError("Subscription is already canceled")
        db.execute(
            text("UPDATE subscriptions SET status = 'canceled', canceled_at = :now WHERE id = :id"),
            {"now": to_db_timestamp(utcnow()), "id": subscription_id}
        )


def revenue_by_month(payments: List[dict], months: List[datetime]) -> List[dict]:
    """Net revenue per month bucket split by payment type."""
    buckets: Dict[datetime, Dict[str, int]] = {m: {"subscription": 0, "consultation": 0} for m in months}
    for payment in payments:
        created = parse_datetime(payment["created_at"])
        bucket = buckets.get(month_start(created)) if created else None
        if bucket is None:
            continue
        bucket[payment["payment_type"]] = bucket.get(payment["payment_type"], 0) + net_cents(payment)

    result = []
    for month in months:
        subs = buckets[month]["subscription"] / 100
        consults = buckets[month]["consultation"] / 100
        result.append({
            "month": month_label(month),
            "subscriptions": round(subs, 2),
            "consultations": round(consults, 2),
            "total": round(subs + consults, 2),
        })
    return result


def subscriptions_by_month(subscriptions: List[dict], months: List[datetime]) -> List[dict]:
    """
    Per month: subscriptions alive at month end (active), canceled during
    the month, and started during the month (new).
    """
    result = []
    for month in months:
        next_month = shift_months(month, 1)
        active = canceled = new = 0
        for sub in subscriptions:
            started = parse_datetime(sub["started_at"])
            ended = parse_datetime(sub["canceled_at"])
            if started is None or started >= next_month:
                continue
            if started >= month:
                new += 1
            if ended is not None and month <= ended < next_month:
                canceled += 1
            if ended is None or ended >= next_month:
                active += 1
        result.append({"month": month_label(month), "active": active, "canceled": canceled, "new": new})
    return result


def revenue_metrics(payments: List[dict], subscriptions: List[dict], months: int = 6,
                    now: datetime = None) -> dict:
    buckets = last_n_months(now or utcnow(), months)
    revenue = revenue_by_month(payments, buckets)
    return {
        "revenue": revenue,
        "subscriptions": subscriptions_by_month(subscriptions, buckets),
        "total_revenue": round(sum(point["total"] for point in revenue), 2),
    }


def total_revenue(payments: List[dict]) -> float:
    return sum(net_cents(p) for p in payments) / 100


def active_subscription_count() -> int:
    rows = execute_raw_sql("SELECT COUNT(*) AS n FROM subscriptions WHERE status IN ('active', 'trialing')")
    return rows[0]["n"]
