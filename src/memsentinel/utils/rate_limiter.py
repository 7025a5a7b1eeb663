"""Sliding-window rate limiter."""

from __future__ import annotations

import time
from collections import deque
from typing import Callable, Deque, Dict, Optional


class SlidingWindowRateLimiter:
    """Allow at most ``max_requests`` acquisitions within any ``window_seconds`` span."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests <= 0:
            raise ValueError(f"max_requests must be positive (received {max_requests})")
        if window_seconds <= 0:
            raise ValueError(f"window_seconds must be positive (received {window_seconds})")
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._clock = clock
        self._recent: Deque[float] = deque()
        self._total_allowed = 0
        self._total_rejected = 0

    def try_acquire(self, now: Optional[float] = None) -> bool:
        """Record a request and return True when it fits inside the window."""
        current = self._clock() if now is None else now
        self._prune(current)
        if len(self._recent) >= self._max_requests:
            self._total_rejected += 1
            return False
        self._recent.append(current)
        self._total_allowed += 1
        return True

    def remaining(self, now: Optional[float] = None) -> int:
        """Return how many requests would currently be allowed."""
        current = self._clock() if now is None else now
        self._prune(current)
        return self._max_requests - len(self._recent)

    def reset(self) -> None:
        """Forget every recorded request."""
        self._recent.clear()

    @property
    def stats(self) -> Dict[str, int]:
        return {
            "total_allowed": self._total_allowed,
            "total_rejected": self._total_rejected,
            "in_window": len(self._recent),
        }

    def _prune(self, now: float) -> None:
        """Remove requests that fall outside the sliding window."""
        while self._recent and now - self._recent[0] >= self._window_seconds:
            self._recent.popleft()


__all__ = ["SlidingWindowRateLimiter"]
