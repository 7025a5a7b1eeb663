"""Side-effect-free metrics, leak and health queries."""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from memsentinel.alerting import AlertDispatcher
from memsentinel.config import EngineConfig
from memsentinel.utils import now_ms

from .engine_state import EngineState
from .error_counters import ErrorCounters
from .sample_collector import MemorySample, SampleCollector
from .trend_analyzer import TrendAnalyzer
from .trend_analyzer_helpers import TrendCalculator
from .trend_analyzer_helpers.signature_tracker import LeakSignature

_WARNING_HEAP_RATIO = 0.9


class HealthStatus(Enum):
    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


def _sample_to_dict(sample: MemorySample) -> Dict[str, Any]:
    return {
        "timestamp": sample.timestamp,
        "heap_used": sample.heap_used,
        "heap_total": sample.heap_total,
        "external": sample.external,
        "rss": sample.rss,
        "gc_event_count": sample.gc_event_count,
        "heap_fraction": sample.heap_fraction,
    }


def classify_health(
    heap_fraction: float,
    heap_threshold: float,
    signatures: List[LeakSignature],
    sampling_errors_since_success: int,
) -> HealthStatus:
    """Combine heap pressure, open signatures and sampling failures into one status."""
    active = [s for s in signatures if s.is_active]
    if heap_fraction >= heap_threshold or any(s.is_confirmed for s in active):
        return HealthStatus.CRITICAL
    if active or sampling_errors_since_success > 0 or heap_fraction >= _WARNING_HEAP_RATIO * heap_threshold:
        return HealthStatus.WARNING
    return HealthStatus.HEALTHY


class MetricsAggregator:
    """Answers queries from committed state only."""

    def __init__(
        self,
        collector: SampleCollector,
        analyzer: TrendAnalyzer,
        dispatcher: AlertDispatcher,
        counters: ErrorCounters,
        *,
        config: Callable[[], EngineConfig],
        interval_ms: Callable[[], int],
        state: Callable[[], EngineState],
        started_at: Callable[[], Optional[float]],
    ):
        self.collector = collector
        self.analyzer = analyzer
        self.dispatcher = dispatcher
        self.counters = counters
        self._config = config
        self._interval_ms = interval_ms
        self._state = state
        self._started_at = started_at

    def get_metrics(self) -> Dict[str, Any]:
        samples = self.collector.get_samples()
        metrics: Dict[str, Any] = {
            "latest": None,
            "sample_count": len(samples),
            "current_interval": self._interval_ms(),
            "heap_used_avg": 0.0,
            "heap_used_min": 0,
            "heap_used_max": 0,
            "growth": 0,
            "growth_rate": 0.0,
        }
        if not samples:
            return metrics

        heap_values = [s.heap_used for s in samples]
        metrics.update(
            latest=_sample_to_dict(samples[-1]),
            heap_used_avg=sum(heap_values) / len(heap_values),
            heap_used_min=min(heap_values),
            heap_used_max=max(heap_values),
            growth=heap_values[-1] - heap_values[0],
            growth_rate=TrendCalculator.fit(samples).growth_rate,
        )
        return metrics

    def get_leaks(self) -> List[LeakSignature]:
        return self.analyzer.get_leaks()

    def get_health(self) -> Dict[str, Any]:
        config = self._config()
        latest = self.collector.get_latest_sample()
        heap_fraction = latest.heap_fraction if latest is not None else 0.0
        signatures = self.analyzer.get_leaks()
        status = classify_health(
            heap_fraction,
            config.threshold.heap,
            signatures,
            self.counters.sampling_errors_since_success,
        )
        started_at = self._started_at()
        return {
            "status": status.value,
            "state": self._state().value,
            "uptime_ms": now_ms() - started_at if started_at is not None else 0.0,
            "heap_fraction": heap_fraction,
            "heap_threshold": config.threshold.heap,
            "active_leaks": sum(1 for s in signatures if s.is_active),
            "confirmed_leaks": sum(1 for s in signatures if s.is_confirmed),
            "potential_leaks": self.analyzer.potential_leaks,
            "errors": self.counters.as_dict(),
        }

    def get_alert_stats(self, recent: int = 20) -> Dict[str, Any]:
        return self.dispatcher.get_stats(recent)


__all__ = ["HealthStatus", "MetricsAggregator", "classify_health"]
