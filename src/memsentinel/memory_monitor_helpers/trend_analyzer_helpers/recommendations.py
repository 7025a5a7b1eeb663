"""Contributing patterns and remediation hints attached to leak signatures."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from memsentinel.config import ThresholdConfig

from ..sample_collector import MemorySample
from .trend_calculator import TrendFit

_STEADY_R_SQUARED = 0.8
_MS_PER_MINUTE = 60_000.0
_SAW_TOOTH_MIN_COLLECTIONS = 3
_SAW_TOOTH_MAX_REDUCTION = 0.10

STEADY_GROWTH = "steady-growth"
RAPID_GROWTH = "rapid-growth"
MEMORY_THRESHOLD = "memory-threshold"
GC_PRESSURE = "gc-pressure"
SAW_TOOTH = "saw-tooth"

_FACTOR_LABELS: Dict[str, str] = {
    RAPID_GROWTH: "Rapid heap growth",
    STEADY_GROWTH: "Steady heap growth",
    GC_PRESSURE: "High GC frequency",
    SAW_TOOTH: "Ineffective garbage collection",
    MEMORY_THRESHOLD: "High memory usage",
}

_RECOMMENDATIONS: Dict[str, Tuple[str, ...]] = {
    RAPID_GROWTH: (
        "Check for unbounded data structures (lists, dicts, sets)",
        "Look for accumulating callbacks or listeners",
    ),
    STEADY_GROWTH: (
        "Investigate long-lived objects and closures",
        "Check for reference cycles kept alive by caches",
    ),
    GC_PRESSURE: (
        "Reduce object allocation rate",
        "Optimize hot code paths",
    ),
    SAW_TOOTH: (
        "Review object allocation patterns",
        "Consider object pooling for frequently created objects",
    ),
    MEMORY_THRESHOLD: (
        "Raise the memory limit if appropriate",
        "Implement memory usage limits and cleanup",
    ),
}


def _gc_per_minute(samples: Sequence[MemorySample]) -> Optional[float]:
    counted = [s for s in samples if s.gc_event_count is not None]
    if len(counted) < 2:
        return None
    span_minutes = (counted[-1].timestamp - counted[0].timestamp) / _MS_PER_MINUTE
    if span_minutes <= 0:
        return None
    return (counted[-1].gc_event_count - counted[0].gc_event_count) / span_minutes


def gc_reductions(samples: Sequence[MemorySample]) -> List[float]:
    """
    Fraction of heap freed across each pair of samples spanning a collection.

    Negative values mean the heap still grew although collections ran.
    """
    reductions: List[float] = []
    for before, after in zip(samples, samples[1:]):
        if before.gc_event_count is None or after.gc_event_count is None:
            continue
        if after.gc_event_count <= before.gc_event_count or before.heap_used <= 0:
            continue
        reductions.append((before.heap_used - after.heap_used) / before.heap_used)
    return reductions


def _is_saw_tooth(samples: Sequence[MemorySample]) -> bool:
    reductions = gc_reductions(samples)
    if len(reductions) < _SAW_TOOTH_MIN_COLLECTIONS:
        return False
    return sum(reductions) / len(reductions) < _SAW_TOOTH_MAX_REDUCTION


def detect_patterns(fit: TrendFit, samples: Sequence[MemorySample], threshold: ThresholdConfig) -> List[str]:
    """Return the pattern names that apply to a window, in a stable order."""
    patterns: List[str] = []
    if fit.is_growing and fit.relative_growth > threshold.growth:
        patterns.append(RAPID_GROWTH)
    if fit.is_growing and fit.r_squared > _STEADY_R_SQUARED:
        patterns.append(STEADY_GROWTH)
    if _is_saw_tooth(samples):
        patterns.append(SAW_TOOTH)
    gc_rate = _gc_per_minute(samples)
    if gc_rate is not None and gc_rate > threshold.gc_frequency:
        patterns.append(GC_PRESSURE)
    if samples and samples[-1].heap_fraction > threshold.heap:
        patterns.append(MEMORY_THRESHOLD)
    return patterns


def describe_factors(patterns: Sequence[str]) -> Tuple[str, ...]:
    return tuple(_FACTOR_LABELS[pattern] for pattern in patterns)


def build_recommendations(patterns: Sequence[str]) -> Tuple[str, ...]:
    """Recommendations for every pattern, deduplicated in first-seen order."""
    seen: Dict[str, None] = {}
    for pattern in patterns:
        for text in _RECOMMENDATIONS[pattern]:
            seen.setdefault(text, None)
    return tuple(seen)


__all__ = [
    "GC_PRESSURE",
    "MEMORY_THRESHOLD",
    "RAPID_GROWTH",
    "SAW_TOOTH",
    "STEADY_GROWTH",
    "build_recommendations",
    "describe_factors",
    "detect_patterns",
    "gc_reductions",
]
