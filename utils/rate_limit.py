"""
In-process fixed-window rate limiting.

Counters live in this process only: with several workers or instances each
keeps its own map, so the effective limit multiplies. Move the counters to a
shared store before scaling out.
"""
from __future__ import annotations

import logging
import threading
import time
from functools import wraps
from typing import Callable, Dict, Hashable, Tuple

from flask import current_app, g

from utils.exceptions import TooManyRequestsError

logger = logging.getLogger(__name__)


class RateLimiter:
    """Allow at most `max_requests` hits per key within each `window` seconds."""

    def __init__(self, max_requests: int, window: float, clock: Callable[[], float] = time.monotonic):
        self.max_requests = max_requests
        self.window = window
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (count, reset_at)
        self._hits: Dict[Hashable, Tuple[int, float]] = {}
        self._next_sweep = clock() + window

    def hit(self, key: Hashable) -> bool:
        """Record a request for key; False once the key is over its limit."""
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)
            count, reset_at = self._hits.get(key, (0, 0.0))
            if now > reset_at:
                self._hits[key] = (1, now + self.window)
                return True
            if count >= self.max_requests:
                return False
            self._hits[key] = (count + 1, reset_at)
            return True

    def _sweep(self, now: float) -> None:
        """Drop keys whose window has closed; caller holds the lock."""
        for key in [k for k, (_, reset_at) in self._hits.items() if now > reset_at]:
            del self._hits[key]
        self._next_sweep = now + self.window

    def check(self, key: Hashable) -> None:
        if not self.hit(key):
            logger.warning("Rate limit exceeded for %s", key)
            raise TooManyRequestsError("Rate limit exceeded. Please try again later.")

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


def rate_limit_per_user(max_requests: int, window: float):
    """
    Limit an authenticated view per user id. Place it under jwt_required()
    so g.current_user is set; anonymous requests are not counted.
    """
    limiter = RateLimiter(max_requests, window)

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user = getattr(g, "current_user", None)
            if user is not None and current_app.config.get("RATE_LIMIT_ENABLED", True):
                limiter.check(user.id)
            return fn(*args, **kwargs)

        wrapper.limiter = limiter
        return wrapper

    return decorator
