"""Low-level building blocks shared by the engine components."""

from .clock import now_ms
from .debounce import ConsecutiveDebouncer, throttle
from .formatting import format_bytes, format_duration, parse_size
from .rate_limiter import SlidingWindowRateLimiter
from .ring_buffer import RingBuffer

__all__ = [
    "ConsecutiveDebouncer",
    "RingBuffer",
    "SlidingWindowRateLimiter",
    "format_bytes",
    "format_duration",
    "now_ms",
    "parse_size",
    "throttle",
]
