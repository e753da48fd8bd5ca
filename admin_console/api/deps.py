"""
Shared route dependencies for the admin panels.
"""

from typing import Any, Dict, Sequence

from fastapi import HTTPException, Query

from admin_console.schemas.schemas import SortOrder
from admin_console.services.listing import ListParams, apply_list_params


def list_params(
    search: str = Query(None, description="Case-insensitive substring search"),
    sort: str = Query(None, description="Field to sort by"),
    order: SortOrder = Query(SortOrder.asc),
    page: int = Query(1, ge=1),
    page_size: int = Query(25, ge=1, le=200),
) -> ListParams:
    """Query parameters shared by every panel list endpoint."""
    return ListParams(search=search, sort=sort, order=order.value, page=page, page_size=page_size)


def list_page(
    rows,
    params: ListParams,
    search_fields: Sequence[str],
    sort_kinds: Dict[str, str],
    **equals: Any,
) -> dict:
    """Run the list pipeline and shape a Page body. Bad sort -> 400."""
    try:
        items, total = apply_list_params(rows, params, search_fields, sort_kinds, **equals)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"items": items, "total": total, "page": params.page, "page_size": params.page_size}


def build_update(data, fields: Sequence[str] = None):
    """
    SET clause parts and params from the fields a PATCH body actually sent.

    Returns ([], {}) when nothing (or only nulls) was sent; callers answer 400.
    """
    sent = data.model_dump(exclude_unset=True, exclude_none=True)
    updates = []
    params: Dict[str, Any] = {}
    for field, value in sent.items():
        if fields is not None and field not in fields:
            continue
        if hasattr(value, "value"):
            value = value.value
        updates.append(f"{field} = :{field}")
        params[field] = value
    return updates, params
