"""
Billing Routes - plans, subscriptions, payments and revenue

GET /admin/subscription-plans - List plans
PUT /admin/subscription-plans/{plan_id} - Edit plan
GET /admin/subscriptions - List subscriptions
POST /admin/subscriptions/{id}/cancel - Cancel subscription
GET /admin/payments - List payments
GET /admin/payments/{id} - Get payment
POST /admin/payments/{id}/refund - Full or partial refund
GET /admin/revenue-metrics - Monthly revenue and subscription counts
"""

import json

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text
from typing import List, Optional

from admin_console.api.deps import list_params, list_page
from admin_console.core import cache
from admin_console.core.auth import get_current_admin
from admin_console.db.postgres import get_db_session
from admin_console.services import billing_service
from admin_console.services.activity_service import get_activity_service
from admin_console.services.listing import ListParams
from admin_console.services.records import cached, find_by_id
from admin_console.schemas.schemas import (
    PlanResponse, PlanUpdate, SubscriptionResponse, SubscriptionStatus, PaymentResponse,
    PaymentStatus, PaymentType, RefundRequest, RevenueMetricsResponse, MessageResponse, Page
)

router = APIRouter(tags=["Payments"])

SUBSCRIPTION_SEARCH_FIELDS = ("user_email", "user_name", "plan_name")
SUBSCRIPTION_SORT_KINDS = {
    "started_at": "date",
    "status": "text",
    "plan_id": "text",
}

PAYMENT_SEARCH_FIELDS = ("id", "description", "user_email")
PAYMENT_SORT_KINDS = {
    "created_at": "date",
    "amount": "number",
    "status": "text",
}


# ============================================================
# PLANS
# ============================================================

@router.get("/subscription-plans", response_model=List[PlanResponse])
async def list_plans(admin: dict = Depends(get_current_admin)):
    return cached(cache.PLANS)


@router.put("/subscription-plans/{plan_id}", response_model=PlanResponse)
async def update_plan(plan_id: str, data: PlanUpdate, admin: dict = Depends(get_current_admin)):
    """Edit plan name, price, features or availability."""
    if not find_by_id(cache.PLANS, plan_id):
        raise HTTPException(status_code=404, detail="Plan not found")

    updates = []
    params = {"id": plan_id}
    if data.name is not None:
        updates.append("name = :name")
        params["name"] = data.name
    if data.price is not None:
        updates.append("price_cents = :price_cents")
        params["price_cents"] = billing_service.to_cents(data.price)
    if data.features is not None:
        updates.append("features = :features")
        params["features"] = json.dumps(data.features)
    if data.active is not None:
        updates.append("active = :active")
        params["active"] = data.active

    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    with get_db_session() as db:
        db.execute(text(f"UPDATE subscription_plans SET {', '.join(updates)} WHERE id = :id"), params)

    cache.invalidate(cache.PLANS, cache.SUBSCRIPTIONS)
    get_activity_service().log_action(admin, "UPDATE_PLAN", "subscription_plan", plan_id,
                                      data.model_dump(exclude_none=True))
    return find_by_id(cache.PLANS, plan_id)


# ============================================================
# SUBSCRIPTIONS
# ============================================================

@router.get("/subscriptions", response_model=Page[SubscriptionResponse])
async def list_subscriptions(
    status: Optional[SubscriptionStatus] = Query(None),
    plan_id: Optional[str] = Query(None),
    params: ListParams = Depends(list_params),
    admin: dict = Depends(get_current_admin)
):
    return list_page(
        cached(cache.SUBSCRIPTIONS), params, SUBSCRIPTION_SEARCH_FIELDS, SUBSCRIPTION_SORT_KINDS,
        status=status.value if status else None, plan_id=plan_id,
    )


@router.post("/subscriptions/{subscription_id}/cancel", response_model=MessageResponse)
async def cancel_subscription(subscription_id: int, admin: dict = Depends(get_current_admin)):
    """Mark a subscription canceled (no processor call)."""
    try:
        billing_service.cancel_subscription(subscription_id)
    except LookupError:
        raise HTTPException(status_code=404, detail="Subscription not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    cache.invalidate(cache.SUBSCRIPTIONS)
    get_activity_service().log_action(admin, "CANCEL_SUBSCRIPTION", "subscription", subscription_id)
    return MessageResponse(message="Subscription canceled")


# ============================================================
# PAYMENTS
# ============================================================

@router.get("/payments", response_model=Page[PaymentResponse])
async def list_payments(
    status: Optional[PaymentStatus] = Query(None),
    payment_type: Optional[PaymentType] = Query(None),
    params: ListParams = Depends(list_params),
    admin: dict = Depends(get_current_admin)
):
    """Payments, newest first unless another sort is given."""
    return list_page(
        cached(cache.PAYMENTS), params, PAYMENT_SEARCH_FIELDS, PAYMENT_SORT_KINDS,
        status=status.value if status else None,
        payment_type=payment_type.value if payment_type else None,
    )


@router.get("/payments/{payment_id}", response_model=PaymentResponse)
async def get_payment(payment_id: str, admin: dict = Depends(get_current_admin)):
    payment = find_by_id(cache.PAYMENTS, payment_id)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return payment


@router.post("/payments/{payment_id}/refund", response_model=PaymentResponse)
async def refund_payment(
    payment_id: str,
    data: RefundRequest = None,
    admin: dict = Depends(get_current_admin)
):
    """
    Refund a payment. Without an amount the whole refundable remainder
    is refunded.
    """
    amount = data.amount if data else None
    try:
        result = billing_service.refund_payment(payment_id, amount)
    except LookupError:
        raise HTTPException(status_code=404, detail="Payment not found")
    except billing_service.RefundError as e:
        raise HTTPException(status_code=400, detail=str(e))

    cache.invalidate(cache.PAYMENTS)
    get_activity_service().log_action(admin, "REFUND_PAYMENT", "payment", payment_id,
                                      {"amount": result["refunded"], "status": result["status"]})
    return find_by_id(cache.PAYMENTS, payment_id)


@router.get("/revenue-metrics", response_model=RevenueMetricsResponse)
async def get_revenue_metrics(
    months: int = Query(6, ge=1, le=24),
    admin: dict = Depends(get_current_admin)
):
    """Net revenue by type and subscription movement for the last N months."""
    return billing_service.revenue_metrics(cached(cache.PAYMENTS), cached(cache.SUBSCRIPTIONS), months)
