"""Leak event notification for in-process subscribers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List

from .trend_analyzer_helpers.signature_tracker import LeakSignature, SignatureChange

logger = logging.getLogger(__name__)

SUBSCRIBER_ERRORS = (RuntimeError, ValueError, TypeError, AttributeError, LookupError, ArithmeticError, OSError, Exception)


@dataclass(frozen=True)
class LeakEvent:
    """A change to a leak signature produced by one tick."""

    kind: SignatureChange
    signature: LeakSignature


LeakCallback = Callable[[LeakEvent], None]


class LeakEventBus:
    """Synchronous fan-out to subscribers in registration order."""

    def __init__(self, on_error: Callable[[BaseException], None]):
        self._subscribers: List[LeakCallback] = []
        self._on_error = on_error

    def subscribe(self, callback: LeakCallback) -> Callable[[], None]:
        """Register ``callback`` and return a function that removes it again."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: LeakEvent) -> None:
        for callback in list(self._subscribers):
            try:
                callback(event)
            except SUBSCRIBER_ERRORS as exc:
                logger.exception("Leak subscriber %r failed: %s", callback, exc)
                self._on_error(exc)

    def __len__(self) -> int:
        return len(self._subscribers)


__all__ = ["LeakCallback", "LeakEvent", "LeakEventBus", "SUBSCRIBER_ERRORS"]
