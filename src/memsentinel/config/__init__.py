"""Engine configuration: typed sections, validation, merging and loaders."""

from .engine_config import (
    DEFAULT_CONFIG,
    AlertingConfig,
    AlertRule,
    DetectionConfig,
    DetectionThresholds,
    EngineConfig,
    MonitoringConfig,
    ThresholdConfig,
)
from .errors import ConfigError
from .merge import merge_config
from .runtime import config_from_env, env_bool, env_float, env_int, env_str, load_config_file, resolve_config_path
from .sensitivity import SENSITIVITY_PRESETS, SensitivityPreset, get_preset
from .validation import validate_config

__all__ = [
    "AlertRule",
    "AlertingConfig",
    "ConfigError",
    "DEFAULT_CONFIG",
    "DetectionConfig",
    "DetectionThresholds",
    "EngineConfig",
    "MonitoringConfig",
    "SENSITIVITY_PRESETS",
    "SensitivityPreset",
    "ThresholdConfig",
    "config_from_env",
    "env_bool",
    "env_float",
    "env_int",
    "env_str",
    "get_preset",
    "load_config_file",
    "merge_config",
    "resolve_config_path",
    "validate_config",
]
