"""Debounce and throttle primitives."""

from __future__ import annotations

import functools
import time
from typing import Any, Callable, Dict, Hashable, Optional, TypeVar

R = TypeVar("R")


class ConsecutiveDebouncer:
    """
    Gate that opens only after a condition held for N consecutive observations.

    Counters are tracked per key, so a reset on one key never disturbs another.
    """

    def __init__(self, required: int) -> None:
        if required <= 0:
            raise ValueError(f"required must be positive (received {required})")
        self._required = required
        self._streaks: Dict[Hashable, int] = {}

    @property
    def required(self) -> int:
        return self._required

    @required.setter
    def required(self, value: int) -> None:
        if value <= 0:
            raise ValueError(f"required must be positive (received {value})")
        self._required = value

    def observe(self, key: Hashable, condition: bool) -> bool:
        """Record one observation and return True once the streak is long enough."""
        if not condition:
            self._streaks.pop(key, None)
            return False
        streak = self._streaks.get(key, 0) + 1
        self._streaks[key] = streak
        return streak >= self._required

    def streak(self, key: Hashable) -> int:
        return self._streaks.get(key, 0)

    def reset(self, key: Optional[Hashable] = None) -> None:
        """Clear one key, or every key when ``key`` is None."""
        if key is None:
            self._streaks.clear()
        else:
            self._streaks.pop(key, None)


def throttle(
    min_interval_seconds: float,
    *,
    clock: Callable[[], float] = time.monotonic,
) -> Callable[[Callable[..., R]], Callable[..., Optional[R]]]:
    """
    Decorate a function so it runs at most once per ``min_interval_seconds``.

    Suppressed calls return None and increment ``wrapper.suppressed``.
    """

    def decorator(func: Callable[..., R]) -> Callable[..., Optional[R]]:
        last_call: Dict[str, float] = {}

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Optional[R]:
            now = clock()
            previous = last_call.get("at")
            if previous is not None and now - previous < min_interval_seconds:
                wrapper.suppressed += 1  # type: ignore[attr-defined]
                return None
            last_call["at"] = now
            return func(*args, **kwargs)

        wrapper.suppressed = 0  # type: ignore[attr-defined]
        return wrapper

    return decorator


__all__ = ["ConsecutiveDebouncer", "throttle"]
