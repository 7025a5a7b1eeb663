"""Wall-clock helpers; engine timestamps are epoch milliseconds."""

import time


def now_ms() -> float:
    return time.time() * 1000.0


__all__ = ["now_ms"]
