"""
Fixed-window rate limiter for the admin login endpoint.

Each client key (IP address) gets `max_requests` per window. Going over
the limit blocks the key for `block_seconds`.
"""

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from fastapi import HTTPException, Request, Response

from admin_console.core.config import get_settings
from admin_console.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class _Window:
    count: int
    reset_at: float
    blocked_until: Optional[float] = None


class RateLimitExceeded(Exception):
    def __init__(self, retry_after_seconds: float):
        self.retry_after_seconds = retry_after_seconds
        super().__init__(f"Rate limited for {retry_after_seconds:.0f}s")

    @property
    def minutes(self) -> int:
        return max(1, math.ceil(self.retry_after_seconds / 60))


class RateLimiter:
    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        block_seconds: int,
        clock: Callable[[], float] = time.time,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.block_seconds = block_seconds
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> _Window:
        """
        Count one request for key.
        Returns the current window, raises RateLimitExceeded when blocked.
        """
        now = self._clock()
        with self._lock:
            window = self._windows.get(key) or _Window(count=0, reset_at=now + self.window_seconds)

            if window.blocked_until and now < window.blocked_until:
                raise RateLimitExceeded(window.blocked_until - now)

            if now > window.reset_at or window.blocked_until:
                window = _Window(count=0, reset_at=now + self.window_seconds)

            window.count += 1
            self._windows[key] = window

            if window.count > self.max_requests:
                window.blocked_until = now + self.block_seconds
                logger.warning("Rate limit exceeded for %s, blocked for %ss", key, self.block_seconds)
                raise RateLimitExceeded(self.block_seconds)

            return window

    def remaining(self, window: _Window) -> int:
        return max(0, self.max_requests - window.count)

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()


_settings = get_settings()
login_rate_limiter = RateLimiter(
    max_requests=_settings.login_rate_limit_max,
    window_seconds=_settings.login_rate_limit_window_seconds,
    block_seconds=_settings.login_block_seconds,
)


async def limit_admin_login(request: Request, response: Response) -> None:
    """FastAPI dependency - rate limit admin login by client IP."""
    key = request.client.host if request.client else "unknown"
    try:
        window = login_rate_limiter.hit(key)
    except RateLimitExceeded as exc:
        raise HTTPException(
            status_code=429,
            detail=f"Too many requests. Please try again in {exc.minutes} minutes.",
        )
    response.headers["X-RateLimit-Limit"] = str(login_rate_limiter.max_requests)
    response.headers["X-RateLimit-Remaining"] = str(login_rate_limiter.remaining(window))
    response.headers["X-RateLimit-Reset"] = str(math.ceil(window.reset_at))
