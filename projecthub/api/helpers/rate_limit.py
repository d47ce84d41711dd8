"""
Fixed-window request limiting per client IP.

Each key gets ``max_requests`` per window; the window starts with the first
request and resets once it has elapsed.
"""

import logging
import threading
import time

from fastapi import Request

from projecthub.api.helpers.responses import rate_limited_response
from projecthub.services.errors import RateLimited

logger = logging.getLogger(__name__)

EXEMPT_PATHS = frozenset({"/health"})


def request_rate_limit_key(request: Request) -> str:
    client_host = str(getattr(getattr(request, "client", None), "host", "") or "").strip()
    if client_host:
        return f"ip:{client_host}"
    return "ip:unknown"


class FixedWindowRateLimiter:
    def __init__(
        self,
        *,
        enabled: bool,
        max_requests: int,
        window_seconds: int,
        max_keys: int = 10000,
        clock=time.monotonic,
    ) -> None:
        self._enabled = bool(enabled)
        self._max_requests = max(1, int(max_requests))
        self._window_seconds = max(1, int(window_seconds))
        self._max_keys = max(128, int(max_keys))
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (window start, hits in window)
        self._windows: dict[str, tuple[float, int]] = {}

    @property
    def enabled(self) -> bool:
        return self._enabled

    def allow(self, key: str) -> tuple[bool, int]:
        """Count a hit for ``key``. Returns (allowed, retry_after_seconds)."""
        if not self._enabled:
            return True, 0
        now = self._clock()
        with self._lock:
            started, hits = self._windows.get(key, (now, 0))
            if now - started >= self._window_seconds:
                started, hits = now, 0

            if hits >= self._max_requests:
                retry_after = max(1, int(started + self._window_seconds - now))
                return False, retry_after

            self._windows[key] = (started, hits + 1)
            self._trim_locked(now)
            return True, 0

    def _trim_locked(self, now: float) -> None:
        if len(self._windows) <= self._max_keys:
            return
        expired = [
            key
            for key, (started, _) in self._windows.items()
            if now - started >= self._window_seconds
        ]
        for key in expired:
            del self._windows[key]
        while len(self._windows) > self._max_keys:
            oldest_key = min(self._windows, key=lambda k: self._windows[k][0])
            del self._windows[oldest_key]


async def rate_limit_middleware(request: Request, call_next):
    limiter: FixedWindowRateLimiter | None = getattr(
        request.app.state, "rate_limiter", None
    )
    if limiter is None or request.url.path in EXEMPT_PATHS:
        return await call_next(request)

    allowed, retry_after = limiter.allow(request_rate_limit_key(request))
    if not allowed:
        logger.warning(
            "Blocked request due to rate limit. method=%s path=%s retry_after=%s",
            request.method,
            request.url.path,
            retry_after,
        )
        return rate_limited_response(RateLimited(retry_after=retry_after))
    return await call_next(request)
