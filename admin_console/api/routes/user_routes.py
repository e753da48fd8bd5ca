"""
User Management Routes

GET /admin/users - List users (search, filter, sort, page)
GET /admin/users/{id} - User detail with profile and activity
GET /admin/users/{id}/transactions - User's payments
POST /admin/users - Create user
PATCH /admin/users/{id} - Update user
POST /admin/users/{id}/suspend - Block user
POST /admin/users/{id}/activate - Unblock user
POST /admin/users/{id}/make-admin - Grant admin privileges
DELETE /admin/users/{id} - Delete user and owned records
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text
from typing import List, Optional

from admin_console.api.deps import list_params, list_page, build_update
from admin_console.core import cache
from admin_console.core.auth import get_current_admin, hash_password
from admin_console.core.logging import get_logger
from admin_console.db.postgres import get_db_session
from admin_console.services.activity_service import get_activity_service
from admin_console.services.listing import ListParams
from admin_console.services.records import cached, find_by_id
from admin_console.schemas.schemas import (
    UserCreate, UserUpdate, UserResponse, UserDetailResponse, SuspendRequest,
    UserType, UserStatus, PaymentResponse, MessageResponse, Page
)

logger = get_logger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])

SEARCH_FIELDS = ("id", "email", "username", "first_name", "last_name")
SORT_KINDS = {
    "username": "text",
    "email": "text",
    "user_type": "text",
    "created_at": "date",
    "last_login": "date",
}


def _get_user_or_404(user_id: int) -> dict:
    user = find_by_id(cache.USERS, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("", response_model=Page[UserResponse])
async def list_users(
    user_type: Optional[UserType] = Query(None),
    status: Optional[UserStatus] = Query(None),
    params: ListParams = Depends(list_params),
    admin: dict = Depends(get_current_admin)
):
    """List users. `status` is derived from the blocked flag."""
    blocked = None if status is None else status == UserStatus.blocked
    return list_page(
        cached(cache.USERS), params, SEARCH_FIELDS, SORT_KINDS,
        user_type=user_type.value if user_type else None,
        blocked=blocked,
    )


@router.get("/{user_id}", response_model=UserDetailResponse)
async def get_user(user_id: int, admin: dict = Depends(get_current_admin)):
    """User with their professional/company profile and recent admin activity."""
    user = _get_user_or_404(user_id)

    profile = None
    if user["user_type"] == "professional":
        profile = next((p for p in cached(cache.PROFESSIONALS) if p["user_id"] == user_id), None)
    elif user["user_type"] == "company":
        profile = next((c for c in cached(cache.COMPANIES) if c["user_id"] == user_id), None)

    try:
        activity = get_activity_service().for_entity("user", user_id)
    except Exception as e:
        logger.warning("Activity lookup failed for user %s: %s", user_id, e)
        activity = []

    return UserDetailResponse(user=user, profile=profile, activity=activity)


@router.get("/{user_id}/transactions", response_model=List[PaymentResponse])
async def get_user_transactions(user_id: int, admin: dict = Depends(get_current_admin)):
    """All payments made by this user, newest first."""
    _get_user_or_404(user_id)
    return [p for p in cached(cache.PAYMENTS) if p["user_id"] == user_id]


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(data: UserCreate, admin: dict = Depends(get_current_admin)):
    """Create a user account (any type)."""
    with get_db_session() as db:
        result = db.execute(
            text("SELECT id FROM users WHERE username = :username OR email = :email"),
            {"username": data.username, "email": data.email}
        )
        if result.fetchone():
            raise HTTPException(status_code=409, detail="Username or email already exists")

        db.execute(
            text("""
                INSERT INTO users (username, password_hash, email, first_name, last_name, user_type, is_admin, blocked)
                VALUES (:username, :password_hash, :email, :first_name, :last_name, :user_type, :is_admin, FALSE)
            """),
            {
                "username": data.username,
                "password_hash": hash_password(data.password),
                "email": data.email,
                "first_name": data.first_name,
                "last_name": data.last_name,
                "user_type": data.user_type.value,
                "is_admin": data.is_admin or data.user_type == UserType.admin,
            }
        )
        user_id = db.execute(
            text("SELECT id FROM users WHERE username = :username"), {"username": data.username}
        ).fetchone()[0]

    cache.invalidate(cache.USERS)
    get_activity_service().log_action(admin, "CREATE_USER", "user", user_id, {"username": data.username})
    return _get_user_or_404(user_id)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(user_id: int, data: UserUpdate, admin: dict = Depends(get_current_admin)):
    """Partial update of name, email, type and admin flag."""
    _get_user_or_404(user_id)
    updates, params = build_update(data)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    # Admin accounts always carry the admin flag, same as on create
    if params.get("user_type") == UserType.admin.value and not params.get("is_admin"):
        if "is_admin" not in params:
            updates.append("is_admin = :is_admin")
        params["is_admin"] = True
    params["id"] = user_id

    with get_db_session() as db:
        if "email" in params:
            result = db.execute(
                text("SELECT id FROM users WHERE email = :email AND id != :id"),
                {"email": params["email"], "id": user_id}
            )
            if result.fetchone():
                raise HTTPException(status_code=409, detail="Email already in use")
        db.execute(text(f"UPDATE users SET {', '.join(updates)} WHERE id = :id"), params)

    cache.invalidate(cache.USERS, cache.PROFESSIONALS, cache.COMPANIES, cache.RESOURCES,
                     cache.SUBSCRIPTIONS, cache.PAYMENTS)
    get_activity_service().log_action(admin, "UPDATE_USER", "user", user_id,
                                      {"fields": sorted(k for k in params if k != "id")})
    return _get_user_or_404(user_id)


@router.post("/{user_id}/suspend", response_model=MessageResponse)
async def suspend_user(
    user_id: int,
    data: SuspendRequest = None,
    admin: dict = Depends(get_current_admin)
):
    """Block a user. Admins cannot suspend themselves."""
    if user_id == admin["user_id"]:
        raise HTTPException(status_code=400, detail="You cannot suspend your own account")
    _get_user_or_404(user_id)
    reason = data.reason if data else None

    with get_db_session() as db:
        db.execute(
            text("UPDATE users SET blocked = TRUE, blocked_reason = :reason WHERE id = :id"),
            {"reason": reason, "id": user_id}
        )

    cache.invalidate(cache.USERS)
    get_activity_service().log_action(admin, "SUSPEND_USER", "user", user_id, {"reason": reason})
    return MessageResponse(message="User suspended")


@router.post("/{user_id}/activate", response_model=MessageResponse)
async def activate_user(user_id: int, admin: dict = Depends(get_current_admin)):
    """Unblock a user."""
    _get_user_or_404(user_id)

    with get_db_session() as db:
        db.execute(
            text("UPDATE users SET blocked = FALSE, blocked_reason = NULL WHERE id = :id"),
            {"id": user_id}
        )

    cache.invalidate(cache.USERS)
    get_activity_service().log_action(admin, "ACTIVATE_USER", "user", user_id)
    return MessageResponse(message="User activated")


@router.post("/{user_id}/make-admin", response_model=MessageResponse)
async def make_admin(user_id: int, admin: dict = Depends(get_current_admin)):
    """Grant admin privileges."""
    user = _get_user_or_404(user_id)
    if user["is_admin"]:
        return MessageResponse(message="User is already an admin")

    with get_db_session() as db:
        db.execute(text("UPDATE users SET is_admin = TRUE WHERE id = :id"), {"id": user_id})

    cache.invalidate(cache.USERS)
    get_activity_service().log_action(admin, "MAKE_ADMIN", "user", user_id)
    return MessageResponse(message="User is now an admin")


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: int, admin: dict = Depends(get_current_admin)):
    """
    Delete a user and everything they own: profiles, the company's job
    postings, authored resources and subscriptions. Payments and page
    edits are kept with the user reference cleared.
    """
    if user_id == admin["user_id"]:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    _get_user_or_404(user_id)

    params = {"id": user_id}
    with get_db_session() as db:
        db.execute(text("""
            DELETE FROM job_postings
            WHERE company_id IN (SELECT id FROM company_profiles WHERE user_id = :id)
        """), params)
        db.execute(text("DELETE FROM company_profiles WHERE user_id = :id"), params)
        db.execute(text("DELETE FROM professional_profiles WHERE user_id = :id"), params)
        db.execute(text("DELETE FROM resources WHERE author_id = :id"), params)
        db.execute(text("DELETE FROM subscriptions WHERE user_id = :id"), params)
        db.execute(text("UPDATE payments SET user_id = NULL WHERE user_id = :id"), params)
        db.execute(text("UPDATE page_contents SET last_edited_by = NULL WHERE last_edited_by = :id"), params)
        db.execute(text("DELETE FROM users WHERE id = :id"), params)

    cache.invalidate(
        cache.USERS, cache.PROFESSIONALS, cache.COMPANIES, cache.JOBS, cache.RESOURCES,
        cache.RESOURCE_CATEGORIES, cache.PAGE_CONTENTS, cache.SUBSCRIPTIONS, cache.PAYMENTS
    )
    get_activity_service().log_action(admin, "DELETE_USER", "user", user_id)
    return MessageResponse(message="User deleted")
