"""
Professional Profile Routes

GET /admin/professional-profiles - List profiles
GET /admin/professional-profiles/{id} - Get profile
PATCH /admin/professional-profiles/{id} - Update featured/verified
PUT /admin/professional-profiles/{id}/featured - Set featured flag
PUT /admin/professional-profiles/{id}/verify - Set verified flag
DELETE /admin/professional-profiles/{id} - Delete profile
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text
from typing import Optional

from admin_console.api.deps import list_params, list_page, build_update
from admin_console.core import cache
from admin_console.core.auth import get_current_admin
from admin_console.db.postgres import get_db_session
from admin_console.services.activity_service import get_activity_service
from admin_console.services.listing import ListParams
from admin_console.services.records import cached, find_by_id
from admin_console.schemas.schemas import (
    ProfessionalResponse, ProfessionalUpdate, FeaturedUpdate, VerifiedUpdate, MessageResponse, Page
)

router = APIRouter(prefix="/professional-profiles", tags=["Professionals"])

SEARCH_FIELDS = ("first_name", "last_name", "title", "location", "bio", "email")
SORT_KINDS = {
    "name": "text",
    "title": "text",
    "location": "text",
    "rate_per_hour": "number",
    "rating": "number",
    "years_experience": "number",
    "created_at": "date",
}


def _with_sort_name(rows):
    # "name" sorts by last name, then first name
    return [
        {**row, "name": f"{row['last_name'] or ''} {row['first_name'] or ''}".strip()}
        for row in rows
    ]


def _get_or_404(profile_id: int) -> dict:
    profile = find_by_id(cache.PROFESSIONALS, profile_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Professional profile not found")
    return profile


def _update_flags(profile_id: int, updates, params, admin: dict) -> dict:
    _get_or_404(profile_id)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    params["id"] = profile_id

    with get_db_session() as db:
        db.execute(text(f"UPDATE professional_profiles SET {', '.join(updates)} WHERE id = :id"), params)

    cache.invalidate(cache.PROFESSIONALS)
    get_activity_service().log_action(
        admin, "UPDATE_PROFESSIONAL", "professional_profile", profile_id,
        {k: v for k, v in params.items() if k != "id"}
    )
    return _get_or_404(profile_id)


@router.get("", response_model=Page[ProfessionalResponse])
async def list_professionals(
    featured: Optional[bool] = Query(None),
    verified: Optional[bool] = Query(None),
    params: ListParams = Depends(list_params),
    admin: dict = Depends(get_current_admin)
):
    """List professional profiles with the owner's email."""
    rows = cached(cache.PROFESSIONALS)
    if params.sort == "name":
        rows = _with_sort_name(rows)
    return list_page(rows, params, SEARCH_FIELDS, SORT_KINDS, featured=featured, verified=verified)


@router.get("/{profile_id}", response_model=ProfessionalResponse)
async def get_professional(profile_id: int, admin: dict = Depends(get_current_admin)):
    return _get_or_404(profile_id)


@router.patch("/{profile_id}", response_model=ProfessionalResponse)
async def update_professional(
    profile_id: int,
    data: ProfessionalUpdate,
    admin: dict = Depends(get_current_admin)
):
    """Update featured and/or verified."""
    updates, params = build_update(data)
    return _update_flags(profile_id, updates, params, admin)


@router.put("/{profile_id}/featured", response_model=ProfessionalResponse)
async def set_featured(profile_id: int, data: FeaturedUpdate, admin: dict = Depends(get_current_admin)):
    return _update_flags(profile_id, ["featured = :featured"], {"featured": data.featured}, admin)


@router.put("/{profile_id}/verify", response_model=ProfessionalResponse)
async def set_verified(profile_id: int, data: VerifiedUpdate, admin: dict = Depends(get_current_admin)):
    return _update_flags(profile_id, ["verified = :verified"], {"verified": data.verified}, admin)


@router.delete("/{profile_id}", response_model=MessageResponse)
async def delete_professional(profile_id: int, admin: dict = Depends(get_current_admin)):
    """Delete the profile; the user account stays."""
    _get_or_404(profile_id)

    with get_db_session() as db:
        db.execute(text("DELETE FROM professional_profiles WHERE id = :id"), {"id": profile_id})

    cache.invalidate(cache.PROFESSIONALS)
    get_activity_service().log_action(admin, "DELETE_PROFESSIONAL", "professional_profile", profile_id)
    return MessageResponse(message="Professional profile deleted")
