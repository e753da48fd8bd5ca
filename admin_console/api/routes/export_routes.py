"""
Export Routes

GET /admin/export/users?format=csv|json - Download all users
GET /admin/export/revenue?format=&start_date=&end_date= - Download payments in a date range
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from fastapi.responses import Response
from typing import Optional

from admin_console.core import cache
from admin_console.core.auth import get_current_admin
from admin_console.services import export_service
from admin_console.services.records import cached
from admin_console.utils.dates import parse_datetime

router = APIRouter(prefix="/export", tags=["Export"])


def _download(rows, fields, fmt: str, name: str) -> Response:
    try:
        exported = export_service.export_rows(rows, fields, fmt, name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Response(
        content=exported["content"],
        media_type=exported["content_type"],
        headers={"Content-Disposition": f'attachment; filename="{exported["filename"]}"'},
    )


def _parse_bound(value: Optional[str], name: str):
    try:
        return parse_datetime(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {name} '{value}'")


@router.get("/users")
async def export_users(format: str = Query("csv"), admin: dict = Depends(get_current_admin)):
    return _download(cached(cache.USERS), export_service.USER_EXPORT_FIELDS, format, "users")


@router.get("/revenue")
async def export_revenue(
    format: str = Query("csv"),
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None),
    admin: dict = Depends(get_current_admin)
):
    """Payments created between start_date and end_date (inclusive, either optional)."""
    start = _parse_bound(start_date, "start_date")
    end = _parse_bound(end_date, "end_date")
    if end and len(end_date) <= 10:
        # Date-only end bound covers the whole day
        end = end.replace(hour=23, minute=59, second=59)
    rows = export_service.filter_by_date(cached(cache.PAYMENTS), start, end)
    return _download(rows, export_service.REVENUE_EXPORT_FIELDS, format, "revenue")
