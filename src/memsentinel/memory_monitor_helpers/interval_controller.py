"""Adaptive sampling interval.

The controller is a pure function over an explicit ``IntervalState`` value:
the monitoring loop feeds it the latest heap fraction and stores whatever
state comes back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from memsentinel.config import EngineConfig
from memsentinel.utils import format_duration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IntervalState:
    current_interval: int
    consecutive_high_ticks: int = 0
    consecutive_low_ticks: int = 0


@dataclass(frozen=True)
class IntervalPolicy:
    """Interval bounds and hysteresis taken from the engine configuration."""

    baseline: int
    min_interval: int
    max_interval: int
    heap_threshold: float
    high_ticks_to_shrink: int
    low_ticks_to_relax: int
    adaptive: bool = True

    @classmethod
    def from_config(cls, config: EngineConfig) -> "IntervalPolicy":
        monitoring = config.monitoring
        return cls(
            baseline=monitoring.interval,
            min_interval=monitoring.min_interval,
            max_interval=monitoring.max_interval,
            heap_threshold=config.threshold.heap,
            high_ticks_to_shrink=monitoring.high_ticks_to_shrink,
            low_ticks_to_relax=monitoring.low_ticks_to_relax,
            adaptive=monitoring.adaptive_interval,
        )

    @property
    def floor(self) -> int:
        return min(self.min_interval, self.baseline)

    def clamp(self, interval: int) -> int:
        return max(self.floor, min(self.max_interval, interval))


def initial_state(policy: IntervalPolicy) -> IntervalState:
    return IntervalState(current_interval=policy.clamp(policy.baseline))


def next_interval(state: IntervalState, heap_fraction: float, policy: IntervalPolicy) -> IntervalState:
    """
    Decide the interval for the next tick.

    Sustained pressure (heap fraction above the threshold for
    ``high_ticks_to_shrink`` ticks) halves the interval; sustained calm
    (``low_ticks_to_relax`` ticks) doubles it back toward the baseline.
    """
    if not policy.adaptive:
        return initial_state(policy)

    current = policy.clamp(state.current_interval)
    if heap_fraction > policy.heap_threshold:
        high_ticks = state.consecutive_high_ticks + 1
        if high_ticks >= policy.high_ticks_to_shrink:
            return IntervalState(current_interval=policy.clamp(current // 2))
        return IntervalState(current_interval=current, consecutive_high_ticks=high_ticks)

    low_ticks = state.consecutive_low_ticks + 1
    if low_ticks >= policy.low_ticks_to_relax and current < policy.baseline:
        return IntervalState(current_interval=policy.clamp(min(policy.baseline, current * 2)))
    return IntervalState(current_interval=current, consecutive_low_ticks=low_ticks)


def log_interval_change(previous: IntervalState, updated: IntervalState, heap_fraction: float) -> None:
    if previous.current_interval != updated.current_interval:
        logger.info(
            "Adaptive sampling interval: %s → %s (heap=%.1f%%)",
            format_duration(previous.current_interval),
            format_duration(updated.current_interval),
            heap_fraction * 100,
        )


__all__ = ["IntervalPolicy", "IntervalState", "initial_state", "log_interval_change", "next_interval"]
