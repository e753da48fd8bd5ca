"""
Company Profile Routes

GET /admin/company-profiles - List companies
GET /admin/company-profiles/{id} - Get company
PATCH /admin/company-profiles/{id} - Update company
PUT /admin/company-profiles/{id}/featured - Set featured flag
PUT /admin/company-profiles/{id}/verify - Set verified flag
DELETE /admin/company-profiles/{id} - Delete company and its job postings
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
    CompanyResponse, CompanyUpdate, CompanySize, FeaturedUpdate, VerifiedUpdate, MessageResponse, Page
)

router = APIRouter(prefix="/company-profiles", tags=["Companies"])

SEARCH_FIELDS = ("company_name", "industry", "location", "description")
SORT_KINDS = {
    "company_name": "text",
    "industry": "text",
    "location": "text",
    "size": "rank:small,medium,large,enterprise",
    "created_at": "date",
}


def _get_or_404(company_id: int) -> dict:
    company = find_by_id(cache.COMPANIES, company_id)
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    return company


def _apply_update(company_id: int, updates, params, admin: dict) -> dict:
    _get_or_404(company_id)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    params["id"] = company_id

    with get_db_session() as db:
        db.execute(text(f"UPDATE company_profiles SET {', '.join(updates)} WHERE id = :id"), params)

    # Job rows carry the company name
    cache.invalidate(cache.COMPANIES, cache.JOBS)
    get_activity_service().log_action(
        admin, "UPDATE_COMPANY", "company_profile", company_id,
        {k: v for k, v in params.items() if k != "id"}
    )
    return _get_or_404(company_id)


@router.get("", response_model=Page[CompanyResponse])
async def list_companies(
    featured: Optional[bool] = Query(None),
    verified: Optional[bool] = Query(None),
    size: Optional[CompanySize] = Query(None),
    industry: Optional[str] = Query(None),
    params: ListParams = Depends(list_params),
    admin: dict = Depends(get_current_admin)
):
    """List companies. Size sorts small < medium < large < enterprise."""
    return list_page(
        cached(cache.COMPANIES), params, SEARCH_FIELDS, SORT_KINDS,
        featured=featured, verified=verified,
        size=size.value if size else None, industry=industry,
    )


@router.get("/{company_id}", response_model=CompanyResponse)
async def get_company(company_id: int, admin: dict = Depends(get_current_admin)):
    return _get_or_404(company_id)


@router.patch("/{company_id}", response_model=CompanyResponse)
async def update_company(company_id: int, data: CompanyUpdate, admin: dict = Depends(get_current_admin)):
    updates, params = build_update(data)
    return _apply_update(company_id, updates, params, admin)


@router.put("/{company_id}/featured", response_model=CompanyResponse)
async def set_featured(company_id: int, data: FeaturedUpdate, admin: dict = Depends(get_current_admin)):
    return _apply_update(company_id, ["featured = :featured"], {"featured": data.featured}, admin)


@router.put("/{company_id}/verify", response_model=CompanyResponse)
async def set_verified(company_id: int, data: VerifiedUpdate, admin: dict = Depends(get_current_admin)):
    return _apply_update(company_id, ["verified = :verified"], {"verified": data.verified}, admin)


@router.delete("/{company_id}", response_model=MessageResponse)
async def delete_company(company_id: int, admin: dict = Depends(get_current_admin)):
    """Delete the company profile together with its job postings."""
    _get_or_404(company_id)

    with get_db_session() as db:
        db.execute(text("DELETE FROM job_postings WHERE company_id = :id"), {"id": company_id})
        db.execute(text("DELETE FROM company_profiles WHERE id = :id"), {"id": company_id})

    cache.invalidate(cache.COMPANIES, cache.JOBS)
    get_activity_service().log_action(admin, "DELETE_COMPANY", "company_profile", company_id)
    return MessageResponse(message="Company deleted")
