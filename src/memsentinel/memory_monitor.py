"""Public entry point: the always-on memory monitor and leak detector."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Union

from .alerting import AlertChannel, build_channels
from .backoff_manager import BackoffManager
from .config import (
    DEFAULT_CONFIG,
    EngineConfig,
    config_from_env,
    load_config_file,
    merge_config,
    resolve_config_path,
    validate_config,
)
from .memory_monitor_helpers import (
    EngineState,
    EngineStateMachine,
    HostMemoryProvider,
    LeakEvent,
    MemoryMonitorFactory,
    MemorySample,
    MetricsAggregator,
    MonitoringLoop,
)
from .memory_monitor_helpers.trend_analyzer_helpers import LeakSignature
from .utils import now_ms

logger = logging.getLogger(__name__)

ConfigInput = Union[EngineConfig, Mapping[str, Any], None]


def _resolve_config(base: EngineConfig, config: ConfigInput) -> EngineConfig:
    if isinstance(config, EngineConfig):
        return validate_config(config)
    return merge_config(base, config)


class MemoryMonitor:
    """
    Samples host memory on a schedule, detects sustained growth and routes alerts.

    All mutation happens inside the tick pipeline; queries only read committed
    state, and ``configure`` swaps the whole configuration in one assignment.
    """

    def __init__(
        self,
        config: ConfigInput = None,
        *,
        provider: Optional[HostMemoryProvider] = None,
        channels: Optional[Sequence[AlertChannel]] = None,
        backoff_manager: Optional[BackoffManager] = None,
        service_name: str = "memsentinel",
    ):
        """
        Initialize the monitor.

        Args:
            config: Full ``EngineConfig`` or a partial mapping merged over the defaults
            provider: Host memory interface; defaults to the psutil provider
            channels: Alert channels; defaults to the channels named in the configuration
            backoff_manager: Retry bookkeeping for channel deliveries
            service_name: Name used in log and alert messages

        Raises:
            ConfigError: If the configuration is invalid
        """
        self.service_name = service_name
        self._config = _resolve_config(DEFAULT_CONFIG, config)
        self._channels_injected = channels is not None
        self._state_machine = EngineStateMachine()
        self._started_at: Optional[float] = None

        components = MemoryMonitorFactory.create_components(
            self._config,
            service_name=service_name,
            provider=provider,
            channels=channels,
            backoff_manager=backoff_manager,
        )
        self._components = components
        self._pipeline = components.pipeline
        self._loop = MonitoringLoop(
            self._pipeline.run_tick,
            lambda: self._pipeline.current_interval_ms,
            on_error=components.counters.record_tick_error,
        )
        self._aggregator = MetricsAggregator(
            components.collector,
            components.analyzer,
            components.dispatcher,
            components.counters,
            config=lambda: self._config,
            interval_ms=lambda: self._pipeline.current_interval_ms,
            state=lambda: self._state_machine.state,
            started_at=lambda: self._started_at,
        )

    @classmethod
    def from_environment(cls, config_path: Union[str, Path, None] = None, **kwargs: Any) -> "MemoryMonitor":
        """Build a monitor from a JSON config file (if any) overlaid with ``MEMSENTINEL_*`` variables."""
        path = resolve_config_path(config_path)
        file_config = load_config_file(path) if path is not None else None
        monitor = cls(file_config, **kwargs)
        env_config = config_from_env()
        if env_config:
            monitor.configure(env_config)
        return monitor

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def state(self) -> EngineState:
        return self._state_machine.state

    @property
    def is_running(self) -> bool:
        return self._state_machine.is_running

    @property
    def channels(self) -> List[AlertChannel]:
        """Alert channels currently receiving deliveries."""
        return self._components.dispatcher.channels

    async def start(self) -> None:
        """Begin sampling; a no-op when already running."""
        if not self._state_machine.transition(EngineState.RUNNING):
            return
        self._started_at = now_ms()
        await self._loop.start_monitoring()

    async def stop(self) -> None:
        """Stop sampling after any in-flight tick and pending alert deliveries finish."""
        if self._state_machine.state is not EngineState.RUNNING:
            return
        try:
            await self._loop.stop_monitoring()
            await self._components.dispatcher.flush()
        finally:
            self._state_machine.transition(EngineState.STOPPED)
            logger.info("Memory monitoring stopped")

    def configure(self, partial: ConfigInput) -> EngineConfig:
        """
        Validate and apply a configuration change.

        Returns:
            The newly effective configuration

        Raises:
            ConfigError: If the merged configuration is invalid; the previous
                configuration stays in effect
        """
        new_config = _resolve_config(self._config, partial)
        channels = None
        if not self._channels_injected and new_config.alerting != self._config.alerting:
            channels = build_channels(new_config.alerting, service_name=self.service_name)
        self._pipeline.configure(new_config, channels)
        self._config = new_config
        logger.debug("Configuration updated")
        return new_config

    def reset(self) -> None:
        """Clear history, signatures, debounce and throttle state; lifecycle state is untouched."""
        self._components.collector.clear()
        self._components.analyzer.reset()
        self._components.dispatcher.reset()

    async def sample_now(self) -> Optional[MemorySample]:
        """Run one tick immediately; returns None when it was skipped."""
        return await self._pipeline.run_tick()

    def subscribe(self, callback: Callable[[LeakEvent], None]) -> Callable[[], None]:
        """Register a leak event callback; returns a function that unsubscribes it."""
        return self._components.event_bus.subscribe(callback)

    def get_metrics(self) -> Dict[str, Any]:
        return self._aggregator.get_metrics()

    def get_leaks(self) -> List[LeakSignature]:
        return self._aggregator.get_leaks()

    def get_health(self) -> Dict[str, Any]:
        return self._aggregator.get_health()

    def get_alert_stats(self, recent: int = 20) -> Dict[str, Any]:
        return self._aggregator.get_alert_stats(recent)


__all__ = ["MemoryMonitor"]
