# core/rate_limit.py
import logging
import threading
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, Optional

from fastapi import Request

from core.errors import error_response

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """
    Per-key request counter over a sliding time window.

    Keys whose newest hit has left the window are swept every ``sweep_every``
    calls, and at least once per window, so idle client IPs do not pile up.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sweep_every: int = 1000,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.sweep_every = sweep_every
        self._clock = clock
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()
        self._calls = 0
        self._last_sweep = clock()

    def hit(self, key: str) -> tuple[bool, int]:
        """Record a request for ``key``; return (allowed, remaining)."""
        now = self._clock()
        cutoff = now - self.window_seconds
        with self._lock:
            self._calls += 1
            if self._calls >= self.sweep_every or now - self._last_sweep >= self.window_seconds:
                self._sweep(now, cutoff)

            hits = self._hits[key]
            while hits and hits[0] <= cutoff:
                hits.popleft()
            if len(hits) >= self.max_requests:
                return False, 0
            hits.append(now)
            return True, self.max_requests - len(hits)

    def _sweep(self, now: float, cutoff: float) -> None:
        # Caller holds the lock
        self._calls = 0
        self._last_sweep = now
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in stale:
            del self._hits[key]
        if stale:
            logger.debug("Rate limiter dropped %d idle key(s)", len(stale))

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self, key: Optional[str] = None) -> None:
        with self._lock:
            if key is None:
                self._hits.clear()
            else:
                self._hits.pop(key, None)


def rate_limit_middleware(limiter: SlidingWindowRateLimiter, prefix: str = "/api/"):
    """Build an HTTP middleware that applies ``limiter`` to every path under ``prefix``."""

    async def middleware(request: Request, call_next):
        if not request.url.path.startswith(prefix):
            return await call_next(request)

        key = request.client.host if request.client else "unknown"
        allowed, remaining = limiter.hit(key)
        headers = {
            "RateLimit-Limit": str(limiter.max_requests),
            "RateLimit-Remaining": str(remaining),
        }
        if not allowed:
            logger.warning("Rate limit exceeded for %s on %s", key, request.url.path)
            return error_response(429, "Too many requests, please try again later", headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response

    return middleware
