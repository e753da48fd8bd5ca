"""
Dashboard & Audit Routes

GET /admin/dashboard-stats - Summary cards, counts and recent activity
GET /admin/stats - Headline stats (growth, conversion, pending reviews)
GET /admin/recent-activity - Activity feed
GET /admin/analytics/users - Daily sign-ups
GET /admin/analytics/revenue - Daily net revenue
GET /admin/audit-logs - Paged admin activity log
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from typing import List, Optional

from admin_console.core.auth import get_current_admin
from admin_console.core.logging import get_logger
from admin_console.services import dashboard_service
from admin_console.services.activity_service import get_activity_service
from admin_console.schemas.schemas import (
    DashboardResponse, AdminStatsResponse, RecentActivityItem, DailyPoint, AuditLogPage
)

logger = get_logger(__name__)

router = APIRouter(tags=["Dashboard"])

PERIOD_PATTERN = "^(7d|30d|90d)$"


@router.get("/dashboard-stats", response_model=DashboardResponse)
async def get_dashboard_stats(admin: dict = Depends(get_current_admin)):
    return dashboard_service.dashboard_stats()


@router.get("/stats", response_model=AdminStatsResponse)
async def get_admin_stats(admin: dict = Depends(get_current_admin)):
    return dashboard_service.admin_stats()


@router.get("/recent-activity", response_model=List[RecentActivityItem])
async def get_recent_activity(
    limit: int = Query(10, ge=1, le=100),
    admin: dict = Depends(get_current_admin)
):
    return dashboard_service.recent_activity(limit)


@router.get("/analytics/users", response_model=List[DailyPoint])
async def get_user_analytics(
    period: str = Query("30d", pattern=PERIOD_PATTERN),
    admin: dict = Depends(get_current_admin)
):
    return dashboard_service.user_signups(period)


@router.get("/analytics/revenue", response_model=List[DailyPoint])
async def get_revenue_analytics(
    period: str = Query("30d", pattern=PERIOD_PATTERN),
    admin: dict = Depends(get_current_admin)
):
    return dashboard_service.daily_revenue(period)


@router.get("/audit-logs", response_model=AuditLogPage)
async def get_audit_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    action: Optional[str] = Query(None),
    admin_id: Optional[int] = Query(None),
    admin: dict = Depends(get_current_admin)
):
    """Admin actions and mutating requests, newest first."""
    try:
        return get_activity_service().search(page=page, limit=limit, action=action, admin_id=admin_id)
    except Exception as e:
        logger.error("Audit log query failed: %s", e)
        raise HTTPException(status_code=503, detail="Activity log unavailable")
