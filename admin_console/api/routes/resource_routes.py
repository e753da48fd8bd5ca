"""
Resource Library Routes

GET /admin/resources - List resources
GET /admin/resources/{id} - Get resource
POST /admin/resources - Publish resource
PUT|PATCH /admin/resources/{id} - Update resource
PUT /admin/resources/{id}/featured - Set featured flag
DELETE /admin/resources/{id} - Delete resource

GET /admin/resource-categories - List categories with resource counts
POST /admin/resource-categories - Add category
DELETE /admin/resource-categories/{id} - Remove unused category
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy import text
from typing import List, Optional

from admin_console.api.deps import list_params, list_page, build_update
from admin_console.core import cache
from admin_console.core.auth import get_current_admin
from admin_console.db.postgres import get_db_session
from admin_console.services.activity_service import get_activity_service
from admin_console.services.listing import ListParams
from admin_console.services.records import cached, find_by_id
from admin_console.schemas.schemas import (
    ResourceCreate, ResourceUpdate, ResourceResponse, ResourceType, FeaturedUpdate,
    CategoryCreate, CategoryResponse, MessageResponse, Page
)

router = APIRouter(tags=["Content"])

SEARCH_FIELDS = ("title", "description")
SORT_KINDS = {
    "title": "text",
    "resource_type": "text",
    "created_at": "date",
}


def _get_or_404(resource_id: int) -> dict:
    resource = find_by_id(cache.RESOURCES, resource_id)
    if not resource:
        raise HTTPException(status_code=404, detail="Resource not found")
    return resource


def _check_category(db, category_id: Optional[int]) -> None:
    if category_id is None:
        return
    result = db.execute(text("SELECT id FROM resource_categories WHERE id = :id"), {"id": category_id})
    if not result.fetchone():
        raise HTTPException(status_code=400, detail=f"Category {category_id} does not exist")


# ============================================================
# RESOURCES
# ============================================================

@router.get("/resources", response_model=Page[ResourceResponse])
async def list_resources(
    category_id: Optional[int] = Query(None),
    resource_type: Optional[ResourceType] = Query(None),
    featured: Optional[bool] = Query(None),
    params: ListParams = Depends(list_params),
    admin: dict = Depends(get_current_admin)
):
    return list_page(
        cached(cache.RESOURCES), params, SEARCH_FIELDS, SORT_KINDS,
        category_id=category_id,
        resource_type=resource_type.value if resource_type else None,
        featured=featured,
    )


@router.get("/resources/{resource_id}", response_model=ResourceResponse)
async def get_resource(resource_id: int, admin: dict = Depends(get_current_admin)):
    return _get_or_404(resource_id)


@router.post("/resources", response_model=ResourceResponse, status_code=201)
async def create_resource(data: ResourceCreate, admin: dict = Depends(get_current_admin)):
    """Publish a resource. Author defaults to the current admin."""
    author_id = data.author_id or admin["user_id"]

    with get_db_session() as db:
        if not db.execute(text("SELECT id FROM users WHERE id = :id"), {"id": author_id}).fetchone():
            raise HTTPException(status_code=400, detail=f"Author {author_id} does not exist")
        _check_category(db, data.category_id)

        db.execute(
            text("""
                INSERT INTO resources (author_id, title, description, content, content_url, resource_type,
                    category_id, image_url, featured)
                VALUES (:author_id, :title, :description, :content, :content_url, :resource_type,
                    :category_id, :image_url, :featured)
            """),
            {
                "author_id": author_id,
                "title": data.title,
                "description": data.description,
                "content": data.content,
                "content_url": data.content_url,
                "resource_type": data.resource_type.value,
                "category_id": data.category_id,
                "image_url": data.image_url,
                "featured": data.featured,
            }
        )
        resource_id = db.execute(
            text("SELECT MAX(id) FROM resources WHERE author_id = :author_id AND title = :title"),
            {"author_id": author_id, "title": data.title}
        ).fetchone()[0]

    cache.invalidate(cache.RESOURCES, cache.RESOURCE_CATEGORIES)
    get_activity_service().log_action(admin, "CREATE_RESOURCE", "resource", resource_id, {"title": data.title})
    return _get_or_404(resource_id)


async def _update_resource(resource_id: int, data: ResourceUpdate, admin: dict) -> dict:
    _get_or_404(resource_id)
    updates, params = build_update(data)
    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")
    params["id"] = resource_id

    with get_db_session() as db:
        _check_category(db, params.get("category_id"))
        db.execute(text(f"UPDATE resources SET {', '.join(updates)} WHERE id = :id"), params)

    cache.invalidate(cache.RESOURCES, cache.RESOURCE_CATEGORIES)
    get_activity_service().log_action(admin, "UPDATE_RESOURCE", "resource", resource_id,
                                      {"fields": sorted(k for k in params if k != "id")})
    return _get_or_404(resource_id)


@router.put("/resources/{resource_id}", response_model=ResourceResponse)
async def replace_resource(resource_id: int, data: ResourceUpdate, admin: dict = Depends(get_current_admin)):
    return await _update_resource(resource_id, data, admin)


@router.patch("/resources/{resource_id}", response_model=ResourceResponse)
async def update_resource(resource_id: int, data: ResourceUpdate, admin: dict = Depends(get_current_admin)):
    return await _update_resource(resource_id, data, admin)


@router.put("/resources/{resource_id}/featured", response_model=ResourceResponse)
async def set_featured(resource_id: int, data: FeaturedUpdate, admin: dict = Depends(get_current_admin)):
    return await _update_resource(resource_id, ResourceUpdate(featured=data.featured), admin)


@router.delete("/resources/{resource_id}", response_model=MessageResponse)
async def delete_resource(resource_id: int, admin: dict = Depends(get_current_admin)):
    _get_or_404(resource_id)

    with get_db_session() as db:
        db.execute(text("DELETE FROM resources WHERE id = :id"), {"id": resource_id})

    cache.invalidate(cache.RESOURCES, cache.RESOURCE_CATEGORIES)
    get_activity_service().log_action(admin, "DELETE_RESOURCE", "resource", resource_id)
    return MessageResponse(message="Resource deleted")


# ============================================================
# CATEGORIES
# ============================================================

@router.get("/resource-categories", response_model=List[CategoryResponse])
async def list_categories(admin: dict = Depends(get_current_admin)):
    """All categories, alphabetical, with how many resources use each."""
    return cached(cache.RESOURCE_CATEGORIES)


@router.post("/resource-categories", response_model=CategoryResponse, status_code=201)
async def create_category(data: CategoryCreate, admin: dict = Depends(get_current_admin)):
    with get_db_session() as db:
        result = db.execute(
            text("SELECT id FROM resource_categories WHERE LOWER(name) = LOWER(:name)"),
            {"name": data.name}
        )
        if result.fetchone():
            raise HTTPException(status_code=409, detail=f"Category '{data.name}' already exists")

        db.execute(
            text("INSERT INTO resource_categories (name, description) VALUES (:name, :description)"),
            {"name": data.name, "description": data.description}
        )
        category_id = db.execute(
            text("SELECT id FROM resource_categories WHERE name = :name"), {"name": data.name}
        ).fetchone()[0]

    cache.invalidate(cache.RESOURCE_CATEGORIES)
    get_activity_service().log_action(admin, "CREATE_CATEGORY", "resource_category", category_id,
                                      {"name": data.name})
    return CategoryResponse(id=category_id, name=data.name, description=data.description, resource_count=0)


@router.delete("/resource-categories/{category_id}", response_model=MessageResponse)
async def delete_category(category_id: int, admin: dict = Depends(get_current_admin)):
    """Remove a category. Refused while resources still reference it."""
    category = find_by_id(cache.RESOURCE_CATEGORIES, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    if category["resource_count"]:
        raise HTTPException(
            status_code=400,
            detail=f"Category is used by {category['resource_count']} resources"
        )

    with get_db_session() as db:
        db.execute(text("DELETE FROM resource_categories WHERE id = :id"), {"id": category_id})

    cache.invalidate(cache.RESOURCE_CATEGORIES)
    get_activity_service().log_action(admin, "DELETE_CATEGORY", "resource_category", category_id)
    return MessageResponse(message="Category deleted")
