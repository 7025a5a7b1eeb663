"""Per-window leak classification with debouncing."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from memsentinel.config import DetectionConfig, SensitivityPreset, ThresholdConfig, get_preset
from memsentinel.utils import ConsecutiveDebouncer

from ..sample_collector import MemorySample
from .recommendations import detect_patterns
from .trend_calculator import TrendCalculator, TrendFit

logger = logging.getLogger(__name__)

# Growing windows below the leak thresholds still count as potential leaks above this.
POTENTIAL_LEAK_PROBABILITY = 0.3


@dataclass(frozen=True)
class ClassificationThresholds:
    """Effective thresholds after applying explicit overrides to the preset."""

    min_growth_rate: float
    relative_growth: float
    confidence: float
    debounce_evaluations: int

    @classmethod
    def resolve(cls, detection: DetectionConfig) -> "ClassificationThresholds":
        preset: SensitivityPreset = get_preset(detection.sensitivity)
        overrides = detection.thresholds
        return cls(
            min_growth_rate=preset.min_growth_rate,
            relative_growth=preset.relative_growth if overrides.growth is None else overrides.growth,
            confidence=preset.confidence if overrides.confidence is None else overrides.confidence,
            debounce_evaluations=preset.debounce_evaluations,
        )


@dataclass(frozen=True)
class WindowDetection:
    """A window whose classification held long enough to report."""

    window_size: int
    fit: TrendFit
    confidence: float
    probability: float
    patterns: Tuple[str, ...]
    timestamp: float


class WindowEvaluator:
    """Classifies each configured window as suspected leak or normal churn."""

    def __init__(self, detection: DetectionConfig, threshold: ThresholdConfig):
        self._debouncer = ConsecutiveDebouncer(1)
        self.potential_leaks = 0
        self.configure(detection, threshold)

    def configure(self, detection: DetectionConfig, threshold: ThresholdConfig) -> None:
        self.windows: Tuple[int, ...] = tuple(sorted(set(detection.windows)))
        self.threshold = threshold
        self.thresholds = ClassificationThresholds.resolve(detection)
        self._debouncer.required = self.thresholds.debounce_evaluations

    def is_suspected(self, fit: TrendFit, confidence: float) -> bool:
        thresholds = self.thresholds
        return (
            fit.is_growing
            and fit.growth_rate >= thresholds.min_growth_rate
            and fit.relative_growth >= thresholds.relative_growth
            and confidence >= thresholds.confidence
        )

    def evaluate(self, samples: Sequence[MemorySample]) -> List[WindowDetection]:
        """
        Evaluate every window against the newest samples.

        Windows with fewer samples than their length abstain and keep their
        debounce streak untouched.
        """
        detections: List[WindowDetection] = []
        for window_size in self.windows:
            if len(samples) < window_size:
                continue
            window = samples[-window_size:]
            fit = TrendCalculator.fit(window)
            confidence = TrendCalculator.confidence(fit, window_size)
            probability = TrendCalculator.probability(confidence, fit.relative_growth, self.thresholds.relative_growth)
            suspected = self.is_suspected(fit, confidence)
            if not suspected and fit.is_growing and probability > POTENTIAL_LEAK_PROBABILITY:
                self.potential_leaks += 1
                logger.debug(
                    "Potential leak in %s-sample window (probability %.2f, confidence %.2f)",
                    window_size,
                    probability,
                    confidence,
                )
            if not self._debouncer.observe(window_size, suspected):
                continue
            detections.append(
                WindowDetection(
                    window_size=window_size,
                    fit=fit,
                    confidence=confidence,
                    probability=probability,
                    patterns=tuple(detect_patterns(fit, window, self.threshold)),
                    timestamp=window[-1].timestamp,
                )
            )
        return detections

    def streak(self, window_size: int) -> int:
        return self._debouncer.streak(window_size)

    def reset(self) -> None:
        self._debouncer.reset()
        self.potential_leaks = 0


__all__ = ["POTENTIAL_LEAK_PROBABILITY", "ClassificationThresholds", "WindowDetection", "WindowEvaluator"]
