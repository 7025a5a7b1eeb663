"""Jitter source for the backoff manager, kept separate so tests can monkeypatch it."""

from __future__ import annotations

import random as _random
from typing import Final

_JITTER_RANDOM: Final = _random.Random()


def uniform(a: float, b: float) -> float:
    return _JITTER_RANDOM.uniform(a, b)
