"""Field-by-field merge of partial configuration mappings into ``EngineConfig``."""

from __future__ import annotations

import re
from dataclasses import fields, replace
from typing import Any, Dict, Mapping, Optional, Tuple, Type

from .engine_config import (
    AlertingConfig,
    AlertRule,
    DetectionConfig,
    DetectionThresholds,
    EngineConfig,
    MonitoringConfig,
    ThresholdConfig,
)
from .errors import ConfigError
from .validation import validate_config

_SECTIONS: Dict[str, Type[Any]] = {
    "monitoring": MonitoringConfig,
    "threshold": ThresholdConfig,
    "detection": DetectionConfig,
    "alerting": AlertingConfig,
}
_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _require_mapping(value: Any, field: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigError.invalid_type(field, value, "a mapping")
    return value


def _field_updates(section: str, section_cls: Type[Any], raw: Any) -> Dict[str, Any]:
    """Map the raw keys of one section onto dataclass field names."""
    mapping = _require_mapping(raw, section)
    known = {f.name for f in fields(section_cls)}
    updates: Dict[str, Any] = {}
    for key, value in mapping.items():
        name = _snake_case(str(key))
        if name not in known:
            raise ConfigError.unknown_field(f"{section}.{key}")
        updates[name] = value
    return updates


def _as_tuple(value: Any, field: str) -> Tuple[Any, ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        raise ConfigError.invalid_type(field, value, "a list")
    return tuple(value)


def _coerce_channels(value: Any) -> Tuple[str, ...]:
    # {"console": true, "webhook": false} is accepted alongside ["console"]
    if isinstance(value, Mapping):
        return tuple(name for name, enabled in value.items() if enabled)
    return _as_tuple(value, "alerting.channels")


def _coerce_rule(raw: Any) -> AlertRule:
    if isinstance(raw, AlertRule):
        return raw
    updates = _field_updates("alerting.rules", AlertRule, raw)
    if "name" not in updates:
        raise ConfigError.inconsistent("alerting.rules.name", None, "Every alert rule needs a name")
    return AlertRule(**updates)


def _merge_detection(current: DetectionConfig, updates: Dict[str, Any]) -> DetectionConfig:
    if "windows" in updates:
        updates["windows"] = _as_tuple(updates["windows"], "detection.windows")
    if "thresholds" in updates:
        threshold_updates = _field_updates("detection.thresholds", DetectionThresholds, updates["thresholds"])
        updates["thresholds"] = replace(current.thresholds, **threshold_updates)
    return replace(current, **updates)


def _merge_alerting(current: AlertingConfig, updates: Dict[str, Any]) -> AlertingConfig:
    if "channels" in updates:
        updates["channels"] = _coerce_channels(updates["channels"])
    if "rules" in updates:
        updates["rules"] = tuple(_coerce_rule(rule) for rule in _as_tuple(updates["rules"], "alerting.rules"))
    return replace(current, **updates)


def merge_config(base: EngineConfig, partial: Optional[Mapping[str, Any]]) -> EngineConfig:
    """
    Overlay ``partial`` onto ``base`` and validate the result.

    Args:
        base: Currently effective configuration
        partial: Nested mapping with any subset of the configuration sections

    Returns:
        A new validated ``EngineConfig``; ``base`` is never modified

    Raises:
        ConfigError: If a key is unknown or a merged value is invalid
    """
    if not partial:
        return validate_config(base)

    sections = _require_mapping(partial, "config")
    merged = base
    for section, raw in sections.items():
        section_cls = _SECTIONS.get(section)
        if section_cls is None:
            raise ConfigError.unknown_field(str(section))
        updates = _field_updates(section, section_cls, raw)
        current = getattr(merged, section)
        if section == "detection":
            new_section = _merge_detection(current, updates)
        elif section == "alerting":
            new_section = _merge_alerting(current, updates)
        else:
            new_section = replace(current, **updates)
        merged = replace(merged, **{section: new_section})

    return validate_config(merged)


__all__ = ["merge_config"]
