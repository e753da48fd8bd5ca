"""
Activity Service - admin activity documents in MongoDB.

Two kinds of documents share the admin_activity collection:
1. action  - a named admin action (SUSPEND_USER, REFUND_PAYMENT, ...)
             written by the route that performed it
2. request - a mutating /api/admin request written by the activity
             middleware (method, path, status, duration)

Writes never raise: a Mongo outage must not fail the admin action that
triggered the log entry.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pymongo.collection import Collection

from admin_console.core.config import get_settings
from admin_console.core.logging import get_logger
from admin_console.db.mongodb import get_collection, COLLECTIONS
from admin_console.utils.dates import utcnow, time_ago

logger = get_logger(__name__)


# Messages for the dashboard feed, keyed by action name
ACTION_MESSAGES = {
    "CREATE_USER": "{admin} created user #{entity_id}",
    "UPDATE_USER": "{admin} updated user #{entity_id}",
    "SUSPEND_USER": "{admin} suspended user #{entity_id}",
    "ACTIVATE_USER": "{admin} reactivated user #{entity_id}",
    "MAKE_ADMIN": "{admin} granted admin privileges to user #{entity_id}",
    "DELETE_USER": "{admin} deleted user #{entity_id}",
    "UPDATE_PROFESSIONAL": "{admin} updated professional profile #{entity_id}",
    "DELETE_PROFESSIONAL": "{admin} deleted professional profile #{entity_id}",
    "UPDATE_COMPANY": "{admin} updated company profile #{entity_id}",
    "DELETE_COMPANY": "{admin} deleted company profile #{entity_id}",
    "MODERATE_JOB": "{admin} moderated job posting #{entity_id}",
    "DELETE_JOB": "{admin} deleted job posting #{entity_id}",
    "CREATE_RESOURCE": "{admin} published resource #{entity_id}",
    "UPDATE_RESOURCE": "{admin} updated resource #{entity_id}",
    "DELETE_RESOURCE": "{admin} deleted resource #{entity_id}",
    "CREATE_CATEGORY": "{admin} added resource category #{entity_id}",
    "DELETE_CATEGORY": "{admin} removed resource category #{entity_id}",
    "CREATE_PAGE": "{admin} created page #{entity_id}",
    "UPDATE_PAGE": "{admin} edited page #{entity_id}",
    "DELETE_PAGE": "{admin} deleted page #{entity_id}",
    "UPDATE_PLAN": "{admin} updated subscription plan {entity_id}",
    "CANCEL_SUBSCRIPTION": "{admin} canceled subscription #{entity_id}",
    "REFUND_PAYMENT": "{admin} refunded payment {entity_id}",
    "UPDATE_SETTINGS": "{admin} updated system settings",
}


def serialize_doc(doc: dict) -> dict:
    """Convert MongoDB document to JSON-serializable dict."""
    if doc is None:
        return None
    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return doc


def serialize_docs(docs) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def describe(doc: dict) -> str:
    """One-line human message for an activity document."""
    admin = doc.get("admin_username") or "An admin"
    template = ACTION_MESSAGES.get(doc.get("action"))
    if template:
        return template.format(admin=admin, entity_id=doc.get("entity_id"))
    if doc.get("kind") == "request":
        return f"{admin} called {doc.get('method')} {doc.get('path')}"
    return f"{admin}: {doc.get('action')}"


class ActivityLogService:
    """
    Handles admin activity document storage.
    """

    def __init__(self, collection: Collection = None):
        self.collection: Collection = (
            collection if collection is not None else get_collection(COLLECTIONS["admin_activity"])
        )
        self.enabled = get_settings().activity_log_enabled

    def _insert(self, doc: dict) -> Optional[str]:
        if not self.enabled:
            return None
        try:
            result = self.collection.insert_one(doc)
            return str(result.inserted_id)
        except Exception as e:
            logger.warning("Could not store admin activity %s: %s", doc.get("action"), e)
            return None

    def log_action(
        self,
        admin: Optional[dict],
        action: str,
        entity_type: str = None,
        entity_id: Any = None,
        details: Dict[str, Any] = None,
    ) -> Optional[str]:
        """
        Record a named admin action.

        Args:
            admin: the current admin dict from get_current_admin
            action: UPPER_SNAKE action name, see ACTION_MESSAGES
            entity_type / entity_id: what the action touched
            details: free-form payload (reason, new status, amount...)
        """
        doc = {
            "kind": "action",
            "action": action,
            "admin_id": admin["user_id"] if admin else None,
            "admin_username": admin["username"] if admin else None,
            "entity_type": entity_type,
            "entity_id": entity_id,
            "details": details or {},
            "timestamp": utcnow(),
        }
        logger.info("Admin action %s on %s #%s by %s", action, entity_type, entity_id, doc["admin_username"])
        return self._insert(doc)

    def log_request(
        self,
        admin_id: Optional[int],
        admin_username: Optional[str],
        method: str,
        path: str,
        status_code: int,
        execution_ms: float,
        ip_address: str = None,
        user_agent: str = None,
    ) -> Optional[str]:
        """Record a mutating admin request (written by the activity middleware)."""
        return self._insert({
            "kind": "request",
            "action": f"{method} {path}",
            "admin_id": admin_id,
            "admin_username": admin_username,
            "method": method,
            "path": path,
            "status_code": status_code,
            "execution_ms": round(execution_ms, 1),
            "ip_address": ip_address,
            "user_agent": user_agent,
            "timestamp": utcnow(),
        })

    def recent(self, limit: int = 10) -> List[dict]:
        """Latest named actions, newest first."""
        docs = self.collection.find({"kind": "action"}, sort=[("timestamp", -1)], limit=limit)
        return serialize_docs(docs)

    def for_entity(self, entity_type: str, entity_id: Any, limit: int = 20) -> List[dict]:
        docs = self.collection.find(
            {"entity_type": entity_type, "entity_id": entity_id},
            sort=[("timestamp", -1)],
            limit=limit,
        )
        return serialize_docs(docs)

    def search(self, page: int = 1, limit: int = 50, action: str = None, admin_id: int = None) -> dict:
        """Paged audit log query."""
        query: Dict[str, Any] = {}
        if action:
            query["action"] = action
        if admin_id is not None:
            query["admin_id"] = admin_id
        total = self.collection.count_documents(query)
        docs = self.collection.find(
            query,
            sort=[("timestamp", -1)],
            skip=(page - 1) * limit,
            limit=limit,
        )
        return {"items": serialize_docs(docs), "total": total, "page": page, "limit": limit}

    def feed(self, limit: int = 10, now: datetime = None) -> List[dict]:
        """Recent actions as dashboard feed items: {id, message, time}."""
        now = now or utcnow()
        return [
            {"id": doc["id"], "message": describe(doc), "time": time_ago(doc["timestamp"], now)}
            for doc in self.recent(limit)
        ]


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================

_activity_service: Optional[ActivityLogService] = None


def get_activity_service() -> ActivityLogService:
    """Get activity service instance."""
    global _activity_service
    if _activity_service is None:
        _activity_service = ActivityLogService()
    return _activity_service
