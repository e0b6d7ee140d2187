"""
In-memory sliding-window rate limiting.

Two tiers are installed on the app (see learnai.app):
- general: every /api/ request, keyed by client address
- ai: endpoints that call the reasoning service, keyed by authenticated user id
"""

from __future__ import annotations

import math
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, Request, WebSocket

from learnai.errors import RateLimitError
from learnai.schemas.auth_schemas import AuthenticatedUser
from learnai.utils.auth import get_current_user
from learnai.utils.logger import configure_logging

logger = configure_logging()

Clock = Callable[[], float]


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after: float = 0.0

    @property
    def retry_after_seconds(self) -> int:
        return max(1, math.ceil(self.retry_after))


class SlidingWindowRateLimiter:
    """
    At most `max_requests` hits per key within any `window_seconds` span.
    Rejected hits are not recorded, so hammering a full window does not extend it.
    Keys with no hit inside the window are dropped on a sweep at most once per window.
    """

    def __init__(self, max_requests: int, window_seconds: float, *, clock: Clock = time.monotonic, name: str = "default"):
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.name = name
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def __len__(self) -> int:
        """Number of keys currently tracked."""
        return len(self._hits)

    def _sweep(self, cutoff: float) -> None:
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in stale:
            del self._hits[key]
        if stale:
            logger.debug("rate limiter sweep limiter=%s dropped=%d kept=%d", self.name, len(stale), len(self._hits))

    def hit(self, key: str) -> RateLimitDecision:
        now = self._clock()
        cutoff = now - self.window_seconds
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now
            hits = self._hits.setdefault(key, deque())
            while hits and hits[0] <= cutoff:
                hits.popleft()
            if len(hits) >= self.max_requests:
                return RateLimitDecision(
                    allowed=False,
                    remaining=0,
                    retry_after=hits[0] + self.window_seconds - now,
                )
            hits.append(now)
            return RateLimitDecision(allowed=True, remaining=self.max_requests - len(hits))

    def check(self, key: str) -> RateLimitDecision:
        """Record a hit or raise RateLimitError."""
        decision = self.hit(key)
        if not decision.allowed:
            logger.warning("rate limited limiter=%s key=%s retry_after=%.1fs", self.name, key, decision.retry_after)
            raise RateLimitError(retry_after=decision.retry_after)
        return decision

    def reset(self, key: str | None = None) -> None:
        with self._lock:
            if key is None:
                self._hits.clear()
            else:
                self._hits.pop(key, None)


def client_key(request: Request, trusted_proxy_hops: int = 0) -> str:
    """
    Address the general tier is keyed on.

    The socket peer, unless `trusted_proxy_hops` proxies sit in front of the app:
    then the X-Forwarded-For entry appended by the outermost trusted proxy.
    Entries left of it are client-controlled and never used.
    """
    peer = request.client.host if request.client else "unknown"
    if trusted_proxy_hops <= 0:
        return peer
    forwarded = [part.strip() for part in request.headers.get("x-forwarded-for", "").split(",") if part.strip()]
    if len(forwarded) < trusted_proxy_hops:
        return peer
    return forwarded[-trusted_proxy_hops]


def ai_rate_limit(request: Request, current_user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
    """Dependency for endpoints that invoke the reasoning service. Returns the caller."""
    limiter: SlidingWindowRateLimiter = request.app.state.ai_limiter
    limiter.check(current_user.id)
    return current_user


def ai_rate_limit_ws(websocket: WebSocket, user_id: str) -> RateLimitDecision:
    limiter: SlidingWindowRateLimiter = websocket.app.state.ai_limiter
    decision = limiter.hit(user_id)
    if not decision.allowed:
        logger.warning("rate limited limiter=%s key=%s (ws)", limiter.name, user_id)
    return decision
