"""Typed engine configuration.

Every section is a frozen dataclass, so a validated ``EngineConfig`` can be
shared between the tick pipeline and the query surface and replaced with a
single assignment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

MIN_INTERVAL_MS = 1000
MAX_INTERVAL_MS = 300000


@dataclass(frozen=True)
class MonitoringConfig:
    """Sampling cadence and history sizing."""

    interval: int = 30000
    adaptive_interval: bool = True
    detailed: bool = False
    min_interval: int = 5000
    max_interval: int = MAX_INTERVAL_MS
    history_size: int = 120
    high_ticks_to_shrink: int = 2
    low_ticks_to_relax: int = 5


@dataclass(frozen=True)
class ThresholdConfig:
    """Absolute thresholds used by health and detection factors."""

    heap: float = 0.8
    growth: float = 0.1
    gc_frequency: float = 10.0


@dataclass(frozen=True)
class DetectionThresholds:
    """Explicit overrides for the sensitivity preset; ``None`` keeps the preset value."""

    growth: Optional[float] = None
    confidence: Optional[float] = None


@dataclass(frozen=True)
class DetectionConfig:
    """Leak detector tuning."""

    enabled: bool = True
    sensitivity: str = "medium"
    windows: Tuple[int, ...] = (5, 20)
    thresholds: DetectionThresholds = field(default_factory=DetectionThresholds)
    confirm_after: int = 3
    resolve_after_ms: int = 300000
    max_signatures: int = 100


@dataclass(frozen=True)
class AlertRule:
    """Delivery rule; a signature is delivered when it satisfies at least one rule."""

    name: str
    min_probability: float = 0.0
    severity_floor: str = "low"


@dataclass(frozen=True)
class AlertingConfig:
    """Alert routing and throttling."""

    enabled: bool = True
    channels: Tuple[str, ...] = ("console",)
    rules: Tuple[AlertRule, ...] = ()
    throttle_ms: int = 300000
    max_retries: int = 3
    history_size: int = 500
    file_path: Optional[str] = None
    webhook_url: Optional[str] = None
    webhook_timeout_ms: int = 5000


@dataclass(frozen=True)
class EngineConfig:
    """Complete, validated engine configuration."""

    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)
    threshold: ThresholdConfig = field(default_factory=ThresholdConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    alerting: AlertingConfig = field(default_factory=AlertingConfig)


DEFAULT_CONFIG = EngineConfig()

__all__ = [
    "AlertRule",
    "AlertingConfig",
    "DEFAULT_CONFIG",
    "DetectionConfig",
    "DetectionThresholds",
    "EngineConfig",
    "MAX_INTERVAL_MS",
    "MIN_INTERVAL_MS",
    "MonitoringConfig",
    "ThresholdConfig",
]
