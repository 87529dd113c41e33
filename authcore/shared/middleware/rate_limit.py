# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Per-client request throttling for the credential endpoints."""

from __future__ import annotations

import math
import time
from collections import deque
from collections.abc import Callable
from functools import wraps
from threading import Lock
from typing import Any, TypeVar, cast

from flask import jsonify, request

from authcore.shared.config import SecurityConfig
from authcore.shared.logging import logger
from authcore.shared.middleware.proxy import client_ip

F = TypeVar("F", bound=Callable[..., Any])


class SlidingWindowLimiter:
    """Allow at most ``limit`` hits per ``window`` seconds for each key.

    State is process-local; behind several workers each one counts separately.
    """

    def __init__(self, limit: int, window: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.limit = max(1, limit)
        self.window = max(0.1, window)
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._lock = Lock()
        self._next_sweep = clock() + self.window

    @property
    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._hits)

    def hit(self, key: str) -> float | None:
        """Record a hit. Returns None when allowed, else seconds until a slot frees up."""
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)
            hits = self._hits.setdefault(key, deque())
            while hits and now - hits[0] >= self.window:
                hits.popleft()
            if len(hits) >= self.limit:
                return self.window - (now - hits[0])
            hits.append(now)
            return None

    def _sweep(self, now: float) -> None:
        # Keys whose newest hit has left the window carry no state worth keeping
        stale = [key for key, hits in self._hits.items() if not hits or now - hits[-1] >= self.window]
        for key in stale:
            del self._hits[key]
        self._next_sweep = now + self.window


def _client_key() -> str:
    return f"{request.path}:{client_ip()}"


def rate_limit(
    security: SecurityConfig,
    limit: int | None = None,
    window_seconds: float | None = None,
) -> Callable[[F], F]:
    limiter = SlidingWindowLimiter(
        limit or security.rate_limit_requests,
        window_seconds or security.rate_limit_window,
    )

    def decorator(view: F) -> F:
        if not security.enable_rate_limit:
            return view

        @wraps(view)
        def limited(*args, **kwargs):
            key = _client_key()
            wait = limiter.hit(key)
            if wait is not None:
                logger.warning(f"rate limit: {key} over {limiter.limit}/{limiter.window:g}s")
                response = jsonify({"error": "rate_limited"})
                response.headers["Retry-After"] = str(max(1, math.ceil(wait)))
                return response, 429
            return view(*args, **kwargs)

        return cast(F, limited)

    return decorator


__all__ = ["SlidingWindowLimiter", "rate_limit"]
