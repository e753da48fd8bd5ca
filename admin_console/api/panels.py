"""
Admin console shell - the ordered tab list.

The console renders one tab per panel and lets the panel fetch its own
data from `endpoint`.
"""

from fastapi import APIRouter, Depends
from typing import List

from admin_console.core.auth import get_current_admin
from admin_console.schemas.schemas import PanelResponse

router = APIRouter(tags=["Admin Shell"])

PANELS = [
    {"key": "dashboard", "title": "Dashboard", "endpoint": "/api/admin/dashboard-stats"},
    {"key": "users", "title": "Users", "endpoint": "/api/admin/users"},
    {"key": "professionals", "title": "Professionals", "endpoint": "/api/admin/professional-profiles"},
    {"key": "companies", "title": "Companies", "endpoint": "/api/admin/company-profiles"},
    {"key": "jobs", "title": "Jobs", "endpoint": "/api/admin/job-postings"},
    {"key": "content", "title": "Content", "endpoint": "/api/admin/resources"},
    {"key": "payments", "title": "Payments", "endpoint": "/api/admin/payments"},
    {"key": "settings", "title": "Settings", "endpoint": "/api/admin/settings"},
]


@router.get("/panels", response_model=List[PanelResponse])
async def list_panels(admin: dict = Depends(get_current_admin)):
    return PANELS
