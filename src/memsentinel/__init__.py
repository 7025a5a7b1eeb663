"""Always-on memory monitoring and leak detection for long-running Python processes."""

from .alerting import AlertChannel, AlertRecord, AlertSeverity, DeliveryRequest, FileChannel, LoggingChannel, WebhookChannel
from .config import AlertRule, ConfigError, EngineConfig, SensitivityPreset
from .errors import DispatchError, MonitorError, SamplingError
from .logging_config import setup_logging
from .memory_monitor import MemoryMonitor
from .memory_monitor_helpers import (
    EngineState,
    HealthStatus,
    HostMemoryProvider,
    HostMemoryReading,
    LeakEvent,
    MemorySample,
    PsutilMemoryProvider,
)
from .memory_monitor_helpers.trend_analyzer_helpers import LeakSignature, SignatureChange, SignatureStatus

__all__ = [
    "AlertChannel",
    "AlertRecord",
    "AlertRule",
    "AlertSeverity",
    "ConfigError",
    "DeliveryRequest",
    "DispatchError",
    "EngineConfig",
    "EngineState",
    "FileChannel",
    "HealthStatus",
    "HostMemoryProvider",
    "HostMemoryReading",
    "LeakEvent",
    "LeakSignature",
    "LoggingChannel",
    "MemoryMonitor",
    "MemorySample",
    "MonitorError",
    "PsutilMemoryProvider",
    "SamplingError",
    "SensitivityPreset",
    "SignatureChange",
    "SignatureStatus",
    "WebhookChannel",
    "setup_logging",
]
