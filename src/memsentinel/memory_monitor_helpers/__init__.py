"""Helper modules for MemoryMonitor."""

from .engine_state import EngineState, EngineStateMachine
from .error_counters import ErrorCounters
from .event_bus import LeakEvent, LeakEventBus
from .factory import MemoryMonitorFactory, MonitorComponents
from .host_memory import HostMemoryProvider, HostMemoryReading, PsutilMemoryProvider, gc_collection_total
from .interval_controller import IntervalPolicy, IntervalState, next_interval
from .metrics_aggregator import HealthStatus, MetricsAggregator
from .monitoring_loop import MonitoringLoop
from .sample_collector import MemorySample, SampleCollector
from .tick_pipeline import TickPipeline
from .trend_analyzer import TrendAnalyzer

__all__ = [
    "EngineState",
    "EngineStateMachine",
    "ErrorCounters",
    "HealthStatus",
    "HostMemoryProvider",
    "HostMemoryReading",
    "IntervalPolicy",
    "IntervalState",
    "LeakEvent",
    "LeakEventBus",
    "MemoryMonitorFactory",
    "MemorySample",
    "MetricsAggregator",
    "MonitorComponents",
    "MonitoringLoop",
    "PsutilMemoryProvider",
    "SampleCollector",
    "TickPipeline",
    "TrendAnalyzer",
    "gc_collection_total",
    "next_interval",
]
