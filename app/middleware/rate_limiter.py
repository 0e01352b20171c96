"""Per-client sliding-window rate limiting middleware."""

import logging
import threading
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Iterable, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60
IDLE_EVICTION_SECONDS = 300


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Allows at most requests_per_minute requests per client IP in any
    rolling 60 second window. Paths in exempt_paths are never counted.
    """

    def __init__(
        self,
        app,
        requests_per_minute: int = 30,
        exempt_paths: Optional[Iterable[str]] = None,
    ):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.exempt_paths = frozenset(exempt_paths or ())
        self.request_history: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()
        self._last_cleanup = time.monotonic()

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.exempt_paths:
            return await call_next(request)

        client_ip = self._get_client_ip(request)
        if not self._try_acquire(client_ip):
            logger.warning("Rate limit exceeded for %s on %s", client_ip, request.url.path)
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "detail": (
                        f"Rate limit exceeded. Maximum {self.requests_per_minute} "
                        "requests per minute allowed."
                    )
                },
                headers={"Retry-After": str(WINDOW_SECONDS)},
            )

        return await call_next(request)

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP from proxy headers or the connection."""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip

        return request.client.host if request.client else "unknown"

    def _try_acquire(self, client_ip: str) -> bool:
        """Record the request if the client is under its limit. Check and record are atomic."""
        now = time.monotonic()
        with self._lock:
            history = self.request_history[client_ip]
            while history and history[0] < now - WINDOW_SECONDS:
                history.popleft()

            if len(history) >= self.requests_per_minute:
                return False

            history.append(now)
            if now - self._last_cleanup > WINDOW_SECONDS:
                self._evict_idle_clients(now)
                self._last_cleanup = now
            return True

    def _evict_idle_clients(self, now: float) -> None:
        """Drop clients with no requests in the last five minutes. Caller holds the lock."""
        idle = [
            ip
            for ip, history in self.request_history.items()
            if not history or history[-1] < now - IDLE_EVICTION_SECONDS
        ]
        for ip in idle:
            del self.request_history[ip]
