"""
Listing helpers - search, filter, sort and page a fully fetched collection.

Every admin panel loads its whole list once (see list_cache) and then
narrows it in memory:

    rows = list_cache.get_or_load("companies", load_companies)
    rows = filter_records(rows, params.search, SEARCH_FIELDS, verified=verified)
    rows = sort_records(rows, params.sort, params.order, SORT_KINDS)
    items, total = paginate(rows, params.page, params.page_size)

Sort kinds:
    text            case-insensitive, missing -> ""
    number          missing -> 0
    date            missing -> epoch
    rank:a,b,c      position in the given order, missing/unknown -> -1
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from admin_console.utils.dates import EPOCH, parse_datetime


SORT_ORDERS = ("asc", "desc")


@dataclass
class ListParams:
    """Query parameters shared by every list endpoint."""
    search: Optional[str] = None
    sort: Optional[str] = None
    order: str = "asc"
    page: int = 1
    page_size: int = 25


def matches_search(record: Dict[str, Any], term: Optional[str], fields: Iterable[str]) -> bool:
    """Case-insensitive substring match of `term` against any of `fields`."""
    if not term:
        return True
    needle = term.strip().lower()
    if not needle:
        return True
    for field in fields:
        value = record.get(field)
        if value is None:
            continue
        if needle in str(value).lower():
            return True
    return False


def filter_records(
    records: Iterable[Dict[str, Any]],
    term: Optional[str] = None,
    fields: Sequence[str] = (),
    **equals: Any,
) -> List[Dict[str, Any]]:
    """Search plus exact-match filters. A filter given as None is skipped."""
    active = {key: value for key, value in equals.items() if value is not None}
    result = []
    for record in records:
        if not matches_search(record, term, fields):
            continue
        if any(record.get(key) != value for key, value in active.items()):
            continue
        result.append(record)
    return result


def _sort_key(kind: str) -> Callable[[Any], Any]:
    if kind == "text":
        return lambda value: "" if value is None else str(value).lower()
    if kind == "number":
        return lambda value: 0 if value is None else value
    if kind == "date":
        return lambda value: parse_datetime(value) or EPOCH
    if kind.startswith("rank:"):
        order = [item.strip() for item in kind[len("rank:"):].split(",")]
        return lambda value: order.index(value) if value in order else -1
    raise ValueError(f"Unknown sort kind '{kind}'")


def sort_records(
    records: Iterable[Dict[str, Any]],
    field: Optional[str],
    direction: str = "asc",
    kinds: Optional[Dict[str, str]] = None,
) -> List[Dict[str, Any]]:
    """
    Stable sort by one field.

    `kinds` maps each sortable field to its sort kind; a field that is not
    in `kinds` is rejected so a typo in ?sort= is reported instead of
    silently ignored. No field keeps the incoming order.
    """
    records = list(records)
    if not field:
        return records
    kinds = kinds or {}
    if field not in kinds:
        raise ValueError(f"Cannot sort by '{field}'. Sortable fields: {', '.join(sorted(kinds))}")
    if direction not in SORT_ORDERS:
        raise ValueError(f"Sort order must be 'asc' or 'desc', got '{direction}'")

    key = _sort_key(kinds[field])
    return sorted(records, key=lambda record: key(record.get(field)), reverse=(direction == "desc"))


def paginate(records: Sequence[Any], page: int = 1, page_size: int = 25) -> Tuple[List[Any], int]:
    """Slice one page out of records. Pages are 1-based."""
    if page < 1 or page_size < 1:
        raise ValueError("page and page_size must be positive")
    total = len(records)
    start = (page - 1) * page_size
    return list(records[start:start + page_size]), total


def apply_list_params(
    records: Iterable[Dict[str, Any]],
    params: ListParams,
    search_fields: Sequence[str],
    sort_kinds: Dict[str, str],
    **equals: Any,
) -> Tuple[List[Dict[str, Any]], int]:
    """filter -> sort -> paginate in one call."""
    rows = filter_records(records, params.search, search_fields, **equals)
    rows = sort_records(rows, params.sort, params.order, sort_kinds)
    return paginate(rows, params.page, params.page_size)
