from __future__ import annotations

"""Per-signature alert throttling."""

import time
from typing import Callable, Dict, Optional

from memsentinel.utils import SlidingWindowRateLimiter


class SignatureThrottle:
    """
    Sliding-window throttle keyed by signature id.

    Each signature gets its own one-slot limiter, so a busy signature never
    consumes another signature's budget. A window of 0 disables throttling.
    """

    def __init__(self, window_seconds: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._window_seconds = window_seconds
        self._clock = clock
        self._limiters: Dict[str, SlidingWindowRateLimiter] = {}
        self.suppressed_count = 0

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def record(self, signature_id: str, now: Optional[float] = None) -> bool:
        """Record an alert and return True when it should be dispatched."""
        if self._window_seconds <= 0:
            return True
        limiter = self._limiters.get(signature_id)
        if limiter is None:
            limiter = SlidingWindowRateLimiter(1, self._window_seconds, clock=self._clock)
            self._limiters[signature_id] = limiter
        if limiter.try_acquire(now):
            return True
        self.suppressed_count += 1
        return False

    def forget(self, signature_id: str) -> None:
        self._limiters.pop(signature_id, None)

    def reset(self) -> None:
        self._limiters.clear()
        self.suppressed_count = 0
