"""Least-squares trend fitting over a window of samples."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..sample_collector import MemorySample

_MS_PER_SECOND = 1000.0
_MIN_FIT_SAMPLES = 2


@dataclass(frozen=True)
class TrendFit:
    """Linear fit of heap_used against time."""

    growth_rate: float  # bytes per second
    r_squared: float
    monotonic_fraction: float
    relative_growth: float
    sample_count: int

    @property
    def is_growing(self) -> bool:
        return self.growth_rate > 0


_EMPTY_FIT = TrendFit(growth_rate=0.0, r_squared=0.0, monotonic_fraction=0.0, relative_growth=0.0, sample_count=0)


def _clamp_unit(value: float) -> float:
    return float(min(1.0, max(0.0, value)))


class TrendCalculator:
    """Computes growth rate and goodness of fit for heap usage."""

    @staticmethod
    def fit(samples: Sequence[MemorySample]) -> TrendFit:
        """
        Fit heap usage over time with a first-degree polynomial.

        Args:
            samples: Samples ordered oldest first

        Returns:
            TrendFit; an empty fit when fewer than two distinct timestamps exist
        """
        if len(samples) < _MIN_FIT_SAMPLES:
            return _EMPTY_FIT

        timestamps = np.array([s.timestamp for s in samples], dtype=float)
        heap = np.array([s.heap_used for s in samples], dtype=float)
        seconds = (timestamps - timestamps[0]) / _MS_PER_SECOND
        if np.ptp(seconds) == 0:
            return _EMPTY_FIT

        slope, intercept = np.polyfit(seconds, heap, 1)
        residuals = heap - (slope * seconds + intercept)
        ss_res = float(np.sum(residuals**2))
        ss_tot = float(np.sum((heap - heap.mean()) ** 2))
        r_squared = _clamp_unit(1.0 - ss_res / ss_tot) if ss_tot > 0 else 0.0

        monotonic_fraction = float(np.mean(np.diff(heap) >= 0))
        baseline = max(heap[0], 1.0)
        relative_growth = float((heap[-1] - heap[0]) / baseline)

        return TrendFit(
            growth_rate=float(slope),
            r_squared=r_squared,
            monotonic_fraction=monotonic_fraction,
            relative_growth=relative_growth,
            sample_count=len(samples),
        )

    @staticmethod
    def confidence(fit: TrendFit, window_size: int) -> float:
        """Blend fit quality, window coverage and monotonicity; zero when not growing."""
        if not fit.is_growing:
            return 0.0
        coverage = min(1.0, fit.sample_count / window_size)
        return _clamp_unit(0.5 * fit.r_squared + 0.2 * coverage + 0.3 * fit.monotonic_fraction)

    @staticmethod
    def probability(confidence: float, relative_growth: float, growth_threshold: float) -> float:
        if growth_threshold <= 0:
            strength = 1.0 if relative_growth > 0 else 0.0
        else:
            strength = min(1.0, max(0.0, relative_growth) / (2 * growth_threshold))
        return _clamp_unit(0.6 * confidence + 0.4 * strength)


__all__ = ["TrendCalculator", "TrendFit"]
