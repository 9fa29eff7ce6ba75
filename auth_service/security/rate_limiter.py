"""In-memory sliding window rate limiter implementation."""

from __future__ import annotations

import time
from collections import deque
from threading import Lock
from typing import Deque, Protocol


class RateLimiter(Protocol):
    """Interface shared by the in-memory and Redis limiters."""

    @property
    def limit(self) -> int: ...

    @property
    def window_seconds(self) -> int: ...

    def allow(self, key: str) -> bool: ...


class SlidingWindowRateLimiter:
    """Thread-safe sliding window rate limiter keyed by client address.

    Keys with no request inside the window are dropped at most once per
    window, so state stays proportional to recently active clients.
    """

    def __init__(self, max_requests: int, window_seconds: int) -> None:
        """Initialise limiter parameters and per-key storage."""
        self._max_requests = max_requests
        self._window = window_seconds
        self._events: dict[str, Deque[float]] = {}
        self._last_sweep = time.monotonic()
        self._lock = Lock()

    @property
    def limit(self) -> int:
        return self._max_requests

    @property
    def window_seconds(self) -> int:
        return self._window

    def __len__(self) -> int:
        """Number of keys currently tracked."""
        with self._lock:
            return len(self._events)

    def allow(self, key: str) -> bool:
        """Return ``True`` when the request is within the configured rate limit."""
        now = time.monotonic()
        with self._lock:
            if now - self._last_sweep >= self._window:
                self._sweep(now)
            queue = self._events.setdefault(key, deque())
            self._prune(queue, now)
            if len(queue) >= self._max_requests:
                return False
            queue.append(now)
            return True

    def reset(self) -> None:
        """Forget every recorded request."""
        with self._lock:
            self._events.clear()

    def _prune(self, queue: Deque[float], now: float) -> None:
        while queue and now - queue[0] >= self._window:
            queue.popleft()

    def _sweep(self, now: float) -> None:
        for key in list(self._events):
            queue = self._events[key]
            self._prune(queue, now)
            if not queue:
                del self._events[key]
        self._last_sweep = now
