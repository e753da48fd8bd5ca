"""
API Routes - Combines all route modules into single router.

Everything except the public page endpoint sits under /admin.
"""

from fastapi import APIRouter

from admin_console.api.panels import router as panels_router
from admin_console.api.routes.auth_routes import router as auth_router
from admin_console.api.routes.user_routes import router as user_router
from admin_console.api.routes.professional_routes import router as professional_router
from admin_console.api.routes.company_routes import router as company_router
from admin_console.api.routes.job_routes import router as job_router
from admin_console.api.routes.resource_routes import router as resource_router
from admin_console.api.routes.content_routes import router as content_router, public_router as pages_router
from admin_console.api.routes.billing_routes import router as billing_router
from admin_console.api.routes.dashboard_routes import router as dashboard_router
from admin_console.api.routes.settings_routes import router as settings_router
from admin_console.api.routes.export_routes import router as export_router

# Admin router
admin_router = APIRouter(prefix="/admin")

admin_router.include_router(panels_router)
admin_router.include_router(auth_router)
admin_router.include_router(user_router)
admin_router.include_router(professional_router)
admin_router.include_router(company_router)
admin_router.include_router(job_router)
admin_router.include_router(resource_router)
admin_router.include_router(content_router)
admin_router.include_router(billing_router)
admin_router.include_router(dashboard_router)
admin_router.include_router(settings_router)
admin_router.include_router(export_router)

# Main API router
api_router = APIRouter()

api_router.include_router(admin_router)
api_router.include_router(pages_router)
