"""
Validation for ``EngineConfig``.

Each guard focuses on a single check and raises ``ConfigError`` naming the
offending field, so ``validate_config`` reads as a flat list of rules.
"""

from __future__ import annotations

from typing import Any, Iterable
from urllib.parse import urlparse

from .engine_config import (
    MAX_INTERVAL_MS,
    MIN_INTERVAL_MS,
    AlertingConfig,
    DetectionConfig,
    EngineConfig,
    MonitoringConfig,
    ThresholdConfig,
)
from .errors import ConfigError
from .sensitivity import SENSITIVITY_PRESETS

KNOWN_CHANNELS = ("console", "file", "webhook")
SEVERITY_NAMES = ("low", "medium", "high")
MIN_WINDOW_SAMPLES = 3
_MAX_DURATION_MS = 86_400_000


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def require_bool(value: Any, field: str) -> None:
    """Ensure a flag is a real boolean."""
    if not isinstance(value, bool):
        raise ConfigError.invalid_type(field, value, "a boolean")


def require_range(value: Any, field: str, minimum: float, maximum: float, *, integer: bool = False) -> None:
    """Ensure a numeric value lies within [minimum, maximum]."""
    if not _is_number(value) or (integer and not isinstance(value, int)):
        raise ConfigError.invalid_type(field, value, "an integer" if integer else "a number")
    if value != value or not minimum <= value <= maximum:  # NaN fails the first comparison
        raise ConfigError.out_of_range(field, value, minimum, maximum)


def require_fraction(value: Any, field: str) -> None:
    """Ensure a value lies within [0, 1]."""
    require_range(value, field, 0.0, 1.0)


def require_choice(value: Any, field: str, choices: Iterable[str]) -> None:
    """Ensure a value is one of an enumerated set of names."""
    allowed = tuple(choices)
    if value not in allowed:
        raise ConfigError.invalid_choice(field, value, allowed)


def _validate_monitoring(monitoring: MonitoringConfig, max_window: int) -> None:
    require_range(monitoring.interval, "monitoring.interval", MIN_INTERVAL_MS, MAX_INTERVAL_MS, integer=True)
    require_bool(monitoring.adaptive_interval, "monitoring.adaptive_interval")
    require_bool(monitoring.detailed, "monitoring.detailed")
    require_range(monitoring.min_interval, "monitoring.min_interval", MIN_INTERVAL_MS, MAX_INTERVAL_MS, integer=True)
    require_range(monitoring.max_interval, "monitoring.max_interval", MIN_INTERVAL_MS, MAX_INTERVAL_MS, integer=True)
    if monitoring.min_interval > monitoring.max_interval:
        raise ConfigError.inconsistent(
            "monitoring.min_interval",
            monitoring.min_interval,
            f"Must not exceed monitoring.max_interval ({monitoring.max_interval})",
        )
    if monitoring.interval > monitoring.max_interval:
        raise ConfigError.inconsistent(
            "monitoring.interval",
            monitoring.interval,
            f"Must not exceed monitoring.max_interval ({monitoring.max_interval})",
        )
    require_range(monitoring.high_ticks_to_shrink, "monitoring.high_ticks_to_shrink", 1, 1000, integer=True)
    require_range(monitoring.low_ticks_to_relax, "monitoring.low_ticks_to_relax", 1, 1000, integer=True)
    require_range(monitoring.history_size, "monitoring.history_size", MIN_WINDOW_SAMPLES, 100_000, integer=True)
    if monitoring.history_size < max_window:
        raise ConfigError.inconsistent(
            "monitoring.history_size",
            monitoring.history_size,
            f"Must hold the largest detection window ({max_window} samples)",
        )


def _validate_threshold(threshold: ThresholdConfig) -> None:
    require_fraction(threshold.heap, "threshold.heap")
    require_fraction(threshold.growth, "threshold.growth")
    require_range(threshold.gc_frequency, "threshold.gc_frequency", 0, 10_000)


def _validate_detection(detection: DetectionConfig) -> None:
    require_bool(detection.enabled, "detection.enabled")
    require_choice(detection.sensitivity, "detection.sensitivity", SENSITIVITY_PRESETS)
    if not isinstance(detection.windows, tuple) or not detection.windows:
        raise ConfigError.invalid_type("detection.windows", detection.windows, "a non-empty list of window lengths")
    for window in detection.windows:
        require_range(window, "detection.windows", MIN_WINDOW_SAMPLES, 100_000, integer=True)
    if detection.thresholds.growth is not None:
        require_fraction(detection.thresholds.growth, "detection.thresholds.growth")
    if detection.thresholds.confidence is not None:
        require_fraction(detection.thresholds.confidence, "detection.thresholds.confidence")
    require_range(detection.confirm_after, "detection.confirm_after", 1, 1000, integer=True)
    require_range(detection.resolve_after_ms, "detection.resolve_after_ms", 0, _MAX_DURATION_MS, integer=True)
    require_range(detection.max_signatures, "detection.max_signatures", 1, 100_000, integer=True)


def _validate_webhook_url(url: Any) -> None:
    if not isinstance(url, str) or not url:
        raise ConfigError.inconsistent("alerting.webhook_url", url, "Required when the webhook channel is enabled")
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError.invalid_type("alerting.webhook_url", url, "an http(s) URL")


def _validate_alerting(alerting: AlertingConfig) -> None:
    require_bool(alerting.enabled, "alerting.enabled")
    for channel in alerting.channels:
        require_choice(channel, "alerting.channels", KNOWN_CHANNELS)
    if "file" in alerting.channels and not alerting.file_path:
        raise ConfigError.inconsistent("alerting.file_path", alerting.file_path, "Required when the file channel is enabled")
    if "webhook" in alerting.channels:
        _validate_webhook_url(alerting.webhook_url)
    for rule in alerting.rules:
        if not isinstance(rule.name, str) or not rule.name.strip():
            raise ConfigError.invalid_type("alerting.rules.name", rule.name, "a non-empty string")
        require_fraction(rule.min_probability, "alerting.rules.min_probability")
        require_choice(rule.severity_floor, "alerting.rules.severity_floor", SEVERITY_NAMES)
    require_range(alerting.throttle_ms, "alerting.throttle_ms", 0, _MAX_DURATION_MS, integer=True)
    require_range(alerting.max_retries, "alerting.max_retries", 0, 20, integer=True)
    require_range(alerting.history_size, "alerting.history_size", 1, 100_000, integer=True)
    require_range(alerting.webhook_timeout_ms, "alerting.webhook_timeout_ms", 100, 120_000, integer=True)


def validate_config(config: EngineConfig) -> EngineConfig:
    """Validate every section of ``config`` and return it unchanged."""
    _validate_detection(config.detection)
    _validate_monitoring(config.monitoring, max(config.detection.windows))
    _validate_threshold(config.threshold)
    _validate_alerting(config.alerting)
    return config


__all__ = [
    "KNOWN_CHANNELS",
    "SEVERITY_NAMES",
    "require_bool",
    "require_choice",
    "require_fraction",
    "require_range",
    "validate_config",
]
