"""One sampling tick: read, commit, analyze, dispatch, notify."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from memsentinel.alerting import AlertChannel, AlertDispatcher
from memsentinel.config import EngineConfig
from memsentinel.utils import format_bytes, throttle

from .error_counters import ErrorCounters
from .event_bus import LeakEvent, LeakEventBus
from .interval_controller import IntervalPolicy, IntervalState, initial_state, log_interval_change, next_interval
from .sample_collector import SAMPLING_ERRORS, MemorySample, SampleCollector
from .trend_analyzer import TrendAnalyzer
from .trend_analyzer_helpers import SignatureChange

logger = logging.getLogger(__name__)

ANALYSIS_ERRORS = (ValueError, ArithmeticError, TypeError, FloatingPointError)
_SAMPLING_LOG_INTERVAL_SECONDS = 60.0

_DISPATCHED_CHANGES = (SignatureChange.CREATED, SignatureChange.ESCALATED, SignatureChange.UPDATED)
_PUBLISHED_CHANGES = (SignatureChange.CREATED, SignatureChange.ESCALATED, SignatureChange.RESOLVED)
_FORGOTTEN_CHANGES = (SignatureChange.RESOLVED, SignatureChange.EVICTED)


@throttle(_SAMPLING_LOG_INTERVAL_SECONDS)
def _warn_sampling_failure(exc: BaseException) -> None:
    logger.warning("Memory sample skipped: %s", exc)


class TickPipeline:
    """Executes ticks one at a time against the current configuration."""

    def __init__(
        self,
        config: EngineConfig,
        collector: SampleCollector,
        analyzer: TrendAnalyzer,
        dispatcher: AlertDispatcher,
        event_bus: LeakEventBus,
        counters: ErrorCounters,
    ):
        self.config = config
        self.collector = collector
        self.analyzer = analyzer
        self.dispatcher = dispatcher
        self.event_bus = event_bus
        self.counters = counters
        self.policy = IntervalPolicy.from_config(config)
        self.interval_state: IntervalState = initial_state(self.policy)
        self.tick_in_flight = False

    @property
    def current_interval_ms(self) -> int:
        return self.interval_state.current_interval

    def configure(self, config: EngineConfig, channels: Optional[Sequence[AlertChannel]] = None) -> None:
        """Adopt a validated configuration; takes effect on the next tick."""
        self.collector.resize(config.monitoring.history_size)
        self.analyzer.configure(config)
        self.dispatcher.configure(config.alerting, channels)
        self.policy = IntervalPolicy.from_config(config)
        if config.monitoring.interval != self.config.monitoring.interval or not config.monitoring.adaptive_interval:
            self.interval_state = initial_state(self.policy)
        else:
            self.interval_state = IntervalState(current_interval=self.policy.clamp(self.interval_state.current_interval))
        self.config = config

    async def run_tick(self) -> Optional[MemorySample]:
        """
        Run one tick unless another is already running.

        Returns:
            The committed sample, or None when the tick was skipped
        """
        if self.tick_in_flight:
            logger.debug("Tick already in flight; skipping")
            return None

        self.tick_in_flight = True
        try:
            return await self._run_tick()
        finally:
            self.tick_in_flight = False

    async def _run_tick(self) -> Optional[MemorySample]:
        try:
            sample = await self.collector.read_sample()
        except SAMPLING_ERRORS as exc:
            self.counters.record_sampling_error()
            _warn_sampling_failure(exc)
            return None

        self.collector.commit(sample)
        self.counters.record_sampling_success()
        self._advance_interval(sample)
        if self.config.monitoring.detailed:
            logger.debug(
                "Memory sample: heap %s / %s (%.1f%%), rss %s",
                format_bytes(sample.heap_used),
                format_bytes(sample.heap_total),
                sample.heap_fraction * 100,
                format_bytes(sample.rss),
            )

        try:
            events = self.analyzer.analyze(self.collector.get_samples())
        except ANALYSIS_ERRORS as exc:
            self.counters.analysis_errors += 1
            logger.error("Leak analysis failed: %s", exc)
            return sample

        self._publish(events)
        return sample

    def _advance_interval(self, sample: MemorySample) -> None:
        previous = self.interval_state
        self.interval_state = next_interval(previous, sample.heap_fraction, self.policy)
        log_interval_change(previous, self.interval_state, sample.heap_fraction)

    def _publish(self, events: List[LeakEvent]) -> None:
        for event in events:
            if event.kind in _FORGOTTEN_CHANGES:
                self.dispatcher.forget(event.signature.id)
            elif event.kind in _DISPATCHED_CHANGES:
                self.dispatcher.dispatch(event.signature)
            if event.kind in _PUBLISHED_CHANGES:
                self.event_bus.publish(event)


__all__ = ["ANALYSIS_ERRORS", "TickPipeline"]
