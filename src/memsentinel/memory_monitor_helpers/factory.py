"""Factory for creating MemoryMonitor components."""

import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from memsentinel.alerting import AlertChannel, AlertDispatcher, build_channels
from memsentinel.backoff_manager import BackoffManager
from memsentinel.config import EngineConfig

from .error_counters import ErrorCounters
from .event_bus import LeakEventBus
from .host_memory import HostMemoryProvider, PsutilMemoryProvider
from .sample_collector import SampleCollector
from .tick_pipeline import TickPipeline
from .trend_analyzer import TrendAnalyzer


@dataclass
class MonitorComponents:
    """Wired components shared by the monitor facade."""

    counters: ErrorCounters
    collector: SampleCollector
    analyzer: TrendAnalyzer
    dispatcher: AlertDispatcher
    event_bus: LeakEventBus
    pipeline: TickPipeline


class MemoryMonitorFactory:
    """Factory for creating and wiring MemoryMonitor components."""

    @staticmethod
    def create_components(
        config: EngineConfig,
        *,
        service_name: str,
        provider: Optional[HostMemoryProvider] = None,
        channels: Optional[Sequence[AlertChannel]] = None,
        backoff_manager: Optional[BackoffManager] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> MonitorComponents:
        """
        Create all components needed for memory monitoring.

        Args:
            config: Validated engine configuration
            service_name: Name used in log and alert messages
            provider: Host memory interface; defaults to the psutil provider
            channels: Alert channels; defaults to the channels named in the configuration
            backoff_manager: Retry bookkeeping for channel deliveries
            clock: Monotonic clock, in seconds, used by the alert throttle

        Returns:
            MonitorComponents with every piece wired together
        """
        counters = ErrorCounters()
        collector = SampleCollector(provider or PsutilMemoryProvider(), config.monitoring.history_size)
        analyzer = TrendAnalyzer(config)
        if channels is None:
            channels = build_channels(config.alerting, service_name=service_name)
        dispatcher = AlertDispatcher(
            config.alerting,
            channels,
            backoff_manager=backoff_manager,
            clock=clock,
            on_failure=counters.record_dispatch_error,
        )
        event_bus = LeakEventBus(on_error=counters.record_subscriber_error)
        pipeline = TickPipeline(config, collector, analyzer, dispatcher, event_bus, counters)
        return MonitorComponents(
            counters=counters,
            collector=collector,
            analyzer=analyzer,
            dispatcher=dispatcher,
            event_bus=event_bus,
            pipeline=pipeline,
        )
