"""
Page Content Routes

GET /admin/page-contents - List pages
GET /admin/page-contents/{id} - Get page
POST /admin/page-contents - Create page
PUT|PATCH /admin/page-contents/{id} - Edit page
DELETE /admin/page-contents/{id} - Delete page

GET /pages/{slug} - Public page with SEO meta (no auth)
"""

import re

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import text

from admin_console.api.deps import list_params, list_page, build_update
from admin_console.core import cache
from admin_console.core.auth import get_current_admin
from admin_console.db.postgres import get_db_session
from admin_console.services.activity_service import get_activity_service
from admin_console.services.listing import ListParams
from admin_console.services.records import cached, find_by_id
from admin_console.utils.dates import utcnow, to_db_timestamp
from admin_console.schemas.schemas import (
    PageContentCreate, PageContentUpdate, PageContentResponse, PublicPageResponse, PageMeta,
    MessageResponse, Page
)

router = APIRouter(prefix="/page-contents", tags=["Content"])
public_router = APIRouter(prefix="/pages", tags=["Public Pages"])

SEARCH_FIELDS = ("slug", "title", "content")
SORT_KINDS = {
    "slug": "text",
    "title": "text",
    "updated_at": "date",
}

META_DESCRIPTION_LENGTH = 160


def meta_for(page: dict) -> PageMeta:
    """SEO meta: explicit values, else the title and the start of the content."""
    description = page.get("meta_description")
    if not description:
        description = re.sub(r"\s+", " ", page.get("content") or "").strip()[:META_DESCRIPTION_LENGTH]
    return PageMeta(title=page.get("meta_title") or page["title"], description=description)


def _get_or_404(page_id: int) -> dict:
    page = find_by_id(cache.PAGE_CONTENTS, page_id)
    if not page:
        raise HTTPException(status_code=404, detail="Page not found")
    return page


def _check_slug_free(db, slug: str, page_id: int = None) -> None:
    result = db.execute(
        text("SELECT id FROM page_contents WHERE slug = :slug AND id != :id"),
        {"slug": slug, "id": page_id or 0}
    )
    if result.fetchone():
        raise HTTPException(status_code=409, detail=f"Slug '{slug}' is already in use")


@router.get("", response_model=Page[PageContentResponse])
async def list_pages(params: ListParams = Depends(list_params), admin: dict = Depends(get_current_admin)):
    return list_page(cached(cache.PAGE_CONTENTS), params, SEARCH_FIELDS, SORT_KINDS)


@router.get("/{page_id}", response_model=PageContentResponse)
async def get_page(page_id: int, admin: dict = Depends(get_current_admin)):
    return _get_or_404(page_id)


@router.post("", response_model=PageContentResponse, status_code=201)
async def create_page(data: PageContentCreate, admin: dict = Depends(get_current_admin)):
    now = to_db_timestamp(utcnow())
    with get_db_session() as db:
        _check_slug_free(db, data.slug)
        db.execute(
            text("""
                INSERT INTO page_contents (slug, title, content, meta_title, meta_description,
                    last_edited_by, created_at, updated_at)
                VALUES (:slug, :title, :content, :meta_title, :meta_description, :editor, :now, :now)
            """),
            {**data.model_dump(), "editor": admin["user_id"], "now": now}
        )
        page_id = db.execute(
            text("SELECT id FROM page_contents WHERE slug = :slug"), {"slug": data.slug}
        ).fetchone()[0]

    cache.invalidate(cache.PAGE_CONTENTS)
    get_activity_service().log_action(admin, "CREATE_PAGE", "page_content", page_id, {"slug": data.slug})
    return _get_or_404(page_id)


async def _update_page(page_id: int, data: PageContentUpdate, admin: dict) -> dict:
    _get_or_404(page_id)
    updates, params = build_update(data)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    params.update({"id": page_id, "editor": admin["user_id"], "now": to_db_timestamp(utcnow())})

    with get_db_session() as db:
        if "slug" in params:
            _check_slug_free(db, params["slug"], page_id)
        db.execute(
            text(f"""
                UPDATE page_contents SET {', '.join(updates)}, last_edited_by = :editor, updated_at = :now
                WHERE id = :id
            """),
            params
        )

    cache.invalidate(cache.PAGE_CONTENTS)
    get_activity_service().log_action(admin, "UPDATE_PAGE", "page_content", page_id,
                                      {"fields": sorted(data.model_dump(exclude_unset=True))})
    return _get_or_404(page_id)


@router.put("/{page_id}", response_model=PageContentResponse)
async def replace_page(page_id: int, data: PageContentUpdate, admin: dict = Depends(get_current_admin)):
    return await _update_page(page_id, data, admin)


@router.patch("/{page_id}", response_model=PageContentResponse)
async def update_page(page_id: int, data: PageContentUpdate, admin: dict = Depends(get_current_admin)):
    return await _update_page(page_id, data, admin)


@router.delete("/{page_id}", response_model=MessageResponse)
async def delete_page(page_id: int, admin: dict = Depends(get_current_admin)):
    _get_or_404(page_id)

    with get_db_session() as db:
        db.execute(text("DELETE FROM page_contents WHERE id = :id"), {"id": page_id})

    cache.invalidate(cache.PAGE_CONTENTS)
    get_activity_service().log_action(admin, "DELETE_PAGE", "page_content", page_id)
    return MessageResponse(message="Page deleted")


@public_router.get("/{slug}", response_model=PublicPageResponse)
async def get_public_page(slug: str):
    """Public page body with document metadata for the page head."""
    page = next((p for p in cached(cache.PAGE_CONTENTS) if p["slug"] == slug), None)
    if not page:
        raise HTTPException(status_code=404, detail="Page not found")
    return PublicPageResponse(slug=page["slug"], title=page["title"], content=page["content"], meta=meta_for(page))
