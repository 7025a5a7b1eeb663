"""Tests for merging partial configuration mappings."""

import pytest

from memsentinel.config import DEFAULT_CONFIG, AlertRule, ConfigError, merge_config


def test_merge_overwrites_only_present_fields():
    merged = merge_config(DEFAULT_CONFIG, {"monitoring": {"interval": 10000}})

    assert merged.monitoring.interval == 10000
    assert merged.monitoring.history_size == DEFAULT_CONFIG.monitoring.history_size
    assert merged.threshold == DEFAULT_CONFIG.threshold
    assert DEFAULT_CONFIG.monitoring.interval == 30000


def test_empty_partial_returns_base():
    assert merge_config(DEFAULT_CONFIG, {}) == DEFAULT_CONFIG
    assert merge_config(DEFAULT_CONFIG, None) == DEFAULT_CONFIG


def test_camel_case_aliases_accepted():
    merged = merge_config(
        DEFAULT_CONFIG,
        {"monitoring": {"adaptiveInterval": False}, "threshold": {"gcFrequency": 20}},
    )

    assert merged.monitoring.adaptive_interval is False
    assert merged.threshold.gc_frequency == 20


def test_unknown_section_rejected():
    with pytest.raises(ConfigError) as exc_info:
        merge_config(DEFAULT_CONFIG, {"profiling": {"enabled": True}})
    assert exc_info.value.field == "profiling"


def test_unknown_field_rejected():
    with pytest.raises(ConfigError) as exc_info:
        merge_config(DEFAULT_CONFIG, {"monitoring": {"intervall": 5000}})
    assert exc_info.value.field == "monitoring.intervall"


def test_detection_windows_and_thresholds_merge():
    merged = merge_config(
        DEFAULT_CONFIG,
        {"detection": {"windows": [4, 10], "thresholds": {"confidence": 0.9}}},
    )

    assert merged.detection.windows == (4, 10)
    assert merged.detection.thresholds.confidence == 0.9
    assert merged.detection.thresholds.growth is None


def test_channels_accept_mapping_form():
    merged = merge_config(
        DEFAULT_CONFIG,
        {"alerting": {"channels": {"console": True, "webhook": False}}},
    )
    assert merged.alerting.channels == ("console",)


def test_rules_built_from_mappings():
    merged = merge_config(
        DEFAULT_CONFIG,
        {"alerting": {"rules": [{"name": "pager", "minProbability": 0.8, "severityFloor": "high"}]}},
    )
    assert merged.alerting.rules == (AlertRule(name="pager", min_probability=0.8, severity_floor="high"),)


def test_rule_without_name_rejected():
    with pytest.raises(ConfigError) as exc_info:
        merge_config(DEFAULT_CONFIG, {"alerting": {"rules": [{"min_probability": 0.5}]}})
    assert exc_info.value.field == "alerting.rules.name"


def test_invalid_merge_leaves_base_untouched():
    with pytest.raises(ConfigError):
        merge_config(DEFAULT_CONFIG, {"threshold": {"heap": 1.5}})
    assert DEFAULT_CONFIG.threshold.heap == 0.8
