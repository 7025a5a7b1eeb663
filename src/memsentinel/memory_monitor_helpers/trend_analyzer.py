"""Leak detection over the sample history."""

from __future__ import annotations

import logging
from typing import List, Sequence

from memsentinel.config import EngineConfig

from .event_bus import LeakEvent
from .sample_collector import MemorySample
from .trend_analyzer_helpers import SignatureChange, SignatureTracker, WindowEvaluator
from .trend_analyzer_helpers.signature_tracker import LeakSignature

logger = logging.getLogger(__name__)


class TrendAnalyzer:
    """Analyzes heap trends and maintains the leak signature log."""

    def __init__(self, config: EngineConfig):
        """
        Initialize trend analyzer.

        Args:
            config: Engine configuration; only the detection and threshold sections are read
        """
        self.window_evaluator = WindowEvaluator(config.detection, config.threshold)
        self.signature_tracker = SignatureTracker(config.detection)
        self.enabled = config.detection.enabled

    def configure(self, config: EngineConfig) -> None:
        self.window_evaluator.configure(config.detection, config.threshold)
        self.signature_tracker.configure(config.detection)
        self.enabled = config.detection.enabled

    @property
    def potential_leaks(self) -> int:
        return self.window_evaluator.potential_leaks

    def analyze(self, samples: Sequence[MemorySample]) -> List[LeakEvent]:
        """
        Run detection after a committed sample.

        Every sustained detection yields an event: CREATED for a new signature,
        ESCALATED when it is confirmed and UPDATED otherwise. Signatures that
        went quiet come back as RESOLVED, and active signatures pushed out of
        the bounded log as EVICTED.
        """
        if not self.enabled or not samples:
            return []

        events: List[LeakEvent] = []
        for detection in self.window_evaluator.evaluate(samples):
            signature, change = self.signature_tracker.record(detection)
            events.append(LeakEvent(kind=change, signature=signature))

        for signature in self.signature_tracker.drain_evicted():
            events.append(LeakEvent(kind=SignatureChange.EVICTED, signature=signature))
        for signature in self.signature_tracker.resolve_stale(samples[-1].timestamp):
            events.append(LeakEvent(kind=SignatureChange.RESOLVED, signature=signature))
        return events

    def get_leaks(self) -> List[LeakSignature]:
        return self.signature_tracker.get_signatures()

    def reset(self) -> None:
        self.window_evaluator.reset()
        self.signature_tracker.clear()


__all__ = ["TrendAnalyzer"]
