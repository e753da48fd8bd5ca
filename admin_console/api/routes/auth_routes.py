"""
Admin Authentication Routes

POST /admin/auth/login - Login and get JWT token (rate limited per IP)
GET /admin/auth/me - Get current admin info
"""

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import text

from admin_console.db.postgres import get_db_session
from admin_console.core.auth import verify_password, create_access_token, get_current_admin
from admin_console.core.logging import get_logger
from admin_console.core.rate_limit import limit_admin_login
from admin_console.core import cache
from admin_console.utils.dates import utcnow, to_db_timestamp
from admin_console.schemas.schemas import AdminLoginRequest, TokenResponse, AdminMeResponse

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Admin Authentication"])


@router.post("/login", response_model=TokenResponse, dependencies=[Depends(limit_admin_login)])
async def login(request: AdminLoginRequest):
    """
    Login with username or email and receive a JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    with get_db_session() as db:
        result = db.execute(
            text("""
                SELECT id, username, password_hash, is_admin, blocked FROM users
                WHERE username = :login OR email = :login
            """),
            {"login": request.username_or_email}
        )
        user = result.fetchone()

    if not user:
        raise HTTPException(status_code=401, detail="Invalid username/email or password")

    user_id, username, password_hash, is_admin, blocked = user

    if not verify_password(request.password, password_hash):
        logger.info("Failed admin login for %s", request.username_or_email)
        raise HTTPException(status_code=401, detail="Invalid username/email or password")

    if blocked:
        raise HTTPException(status_code=403, detail="Account suspended")

    if not is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")

    with get_db_session() as db:
        db.execute(
            text("UPDATE users SET last_login = :now WHERE id = :id"),
            {"now": to_db_timestamp(utcnow()), "id": user_id}
        )
    cache.invalidate(cache.USERS)

    token = create_access_token(data={"sub": str(user_id), "username": username})
    logger.info("Admin %s logged in", username)

    return TokenResponse(access_token=token, user_id=user_id, username=username)


@router.get("/me", response_model=AdminMeResponse)
async def get_me(admin: dict = Depends(get_current_admin)):
    """Get current authenticated admin's info."""
    return AdminMeResponse(**admin)
