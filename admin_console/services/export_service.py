"""
Data export service for the admin console.

Supports CSV and JSON export formats.
"""

import csv
import io
import json
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from admin_console.core.logging import get_logger
from admin_console.utils.dates import parse_datetime, utcnow

logger = get_logger(__name__)

USER_EXPORT_FIELDS = [
    "id", "username", "email", "first_name", "last_name", "user_type",
    "is_admin", "blocked", "created_at", "last_login",
]

REVENUE_EXPORT_FIELDS = [
    "id", "created_at", "payment_type", "status", "amount", "refunded_amount",
    "currency", "user_email", "description",
]


def _plain(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def export_rows(rows: List[Dict[str, Any]], fields: Sequence[str], fmt: str, name: str) -> Dict[str, Any]:
    """
    Render rows as a downloadable file.

    Returns:
        Dict with filename, content and content_type
    Raises:
        ValueError for an unsupported format
    """
    records = [{field: _plain(row.get(field)) for field in fields} for row in rows]
    stamp = utcnow().strftime("%Y%m%d_%H%M%S")

    if fmt == "csv":
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=list(fields), extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
        content, content_type = output.getvalue(), "text/csv"
    elif fmt == "json":
        content, content_type = json.dumps(records, indent=2, default=str), "application/json"
    else:
        raise ValueError(f"Unsupported export format '{fmt}'")

    logger.info("Exported %d %s rows as %s", len(records), name, fmt)
    return {
        "filename": f"{name}_{stamp}.{fmt}",
        "content": content,
        "content_type": content_type,
    }


def filter_by_date(rows: List[dict], start: Optional[datetime], end: Optional[datetime],
                   field: str = "created_at") -> List[dict]:
    """Rows whose `field` falls in [start, end]; either bound may be None."""
    result = []
    for row in rows:
        value = parse_datetime(row.get(field))
        if value is None:
            continue
        if start and value < start:
            continue
        if end and value > end:
            continue
        result.append(row)
    return result
