"""
Panel list cache.

Each admin panel reads its full list through the cache under a namespace
("users", "companies", ...). Mutations call invalidate() with every
namespace whose rows they change, so the next read goes back to the
database. Concurrent mutations simply invalidate in turn: the last
invalidation wins.
"""

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from admin_console.core.config import get_settings
from admin_console.core.logging import get_logger

logger = get_logger(__name__)


# Namespaces, one per panel list plus the dashboard aggregate
USERS = "users"
PROFESSIONALS = "professionals"
COMPANIES = "companies"
JOBS = "jobs"
RESOURCES = "resources"
RESOURCE_CATEGORIES = "resource_categories"
PAGE_CONTENTS = "page_contents"
PLANS = "plans"
SUBSCRIPTIONS = "subscriptions"
PAYMENTS = "payments"
SETTINGS = "settings"
DASHBOARD = "dashboard"


@dataclass
class _Entry:
    value: Any
    expires_at: float


class ListCache:
    """In-process TTL cache of full panel lists keyed by namespace."""

    def __init__(self, ttl_seconds: int = 60, clock: Callable[[], float] = time.monotonic):
        self._ttl = max(1, int(ttl_seconds))
        self._clock = clock
        self._items: Dict[str, _Entry] = {}
        self._generations: Dict[str, int] = {}
        self._epoch = 0
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get_or_load(self, namespace: str, loader: Callable[[], Any]) -> Any:
        with self._lock:
            entry = self._items.get(namespace)
            if entry and entry.expires_at > self._clock():
                self.hits += 1
                return entry.value
            self.misses += 1
            started = (self._epoch, self._generations.get(namespace, 0))
        # Load outside the lock; a slow query must not block other panels
        value = loader()
        with self._lock:
            # An invalidation during the load means the value may predate it
            if started == (self._epoch, self._generations.get(namespace, 0)):
                self._items[namespace] = _Entry(value, self._clock() + self._ttl)
        return value

    def invalidate(self, *namespaces: str) -> None:
        with self._lock:
            for namespace in namespaces:
                self._items.pop(namespace, None)
                self._generations[namespace] = self._generations.get(namespace, 0) + 1
        logger.debug("Invalidated list cache: %s", ", ".join(namespaces))

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
            self._epoch += 1

    def cached_namespaces(self) -> List[str]:
        now = self._clock()
        with self._lock:
            return sorted(key for key, entry in self._items.items() if entry.expires_at > now)


list_cache = ListCache(get_settings().list_cache_ttl_seconds)


def invalidate(*namespaces: str) -> None:
    """Invalidate the given namespaces and the dashboard aggregate."""
    list_cache.invalidate(*namespaces, DASHBOARD)
