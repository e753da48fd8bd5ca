"""
Admin activity middleware.

Logs every /api/admin request with its duration. Mutating requests
(POST/PUT/PATCH/DELETE) by an authenticated admin are also stored as
request documents in the activity log. Login is excluded so failed
password attempts never reach the audit trail.
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from admin_console.core.auth import decode_token
from admin_console.core.logging import get_logger
from admin_console.services.activity_service import get_activity_service

logger = get_logger(__name__)

ADMIN_PREFIX = "/api/admin"
EXCLUDED_PATHS = ("/api/admin/auth/login",)
MUTATING_METHODS = ("POST", "PUT", "PATCH", "DELETE")


def _token_claims(request: Request) -> dict:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return {}
    return decode_token(token) or {}


class AdminActivityMiddleware(BaseHTTPMiddleware):
    """Times admin requests and records mutating ones."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if not path.startswith(ADMIN_PREFIX) or path in EXCLUDED_PATHS:
            return await call_next(request)

        start_time = time.time()
        logger.info("Admin request started: %s %s", request.method, path)

        response = await call_next(request)

        execution_ms = (time.time() - start_time) * 1000
        logger.info(
            "Admin request completed: %s %s -> %d (%.1fms)",
            request.method, path, response.status_code, execution_ms,
        )

        if request.method in MUTATING_METHODS:
            claims = _token_claims(request)
            if claims.get("sub"):
                get_activity_service().log_request(
                    admin_id=int(claims["sub"]),
                    admin_username=claims.get("username"),
                    method=request.method,
                    path=path,
                    status_code=response.status_code,
                    execution_ms=execution_ms,
                    ip_address=request.client.host if request.client else None,
                    user_agent=request.headers.get("user-agent"),
                )

        return response
