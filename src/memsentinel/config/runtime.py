from __future__ import annotations

"""Runtime helpers for environment- and file-backed configuration."""


import os
from pathlib import Path
from typing import Any, Dict, Optional

import orjson

from .errors import ConfigError

_TRUE_VALUES = {"1", "true", "t", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "f", "no", "n", "off"}

ENV_INTERVAL_MS = "MEMSENTINEL_INTERVAL_MS"
ENV_SENSITIVITY = "MEMSENTINEL_SENSITIVITY"
ENV_HEAP_THRESHOLD = "MEMSENTINEL_HEAP_THRESHOLD"
ENV_ALERTING_ENABLED = "MEMSENTINEL_ALERTING_ENABLED"


def env_str(name: str, or_value: str | None = None) -> str | None:
    """Fetch an environment variable as a stripped string; blank counts as unset."""
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return or_value
    return value.strip()


def env_int(name: str, or_value: int | None = None) -> int | None:
    """Fetch an environment variable and coerce it to ``int``."""
    raw = env_str(name)
    if raw is None:
        return or_value
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"Environment variable {name!r} must be an integer (got {raw!r})", field=name, value=raw) from exc


def env_float(name: str, or_value: float | None = None) -> float | None:
    """Fetch an environment variable and coerce it to ``float``."""
    raw = env_str(name)
    if raw is None:
        return or_value
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"Environment variable {name!r} must be a float (got {raw!r})", field=name, value=raw) from exc


def env_bool(name: str, or_value: bool | None = None) -> bool | None:
    """Fetch an environment variable and coerce it to ``bool``."""
    raw = env_str(name)
    if raw is None:
        return or_value

    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Environment variable {name!r} must be a boolean (got {raw!r})", field=name, value=raw)


def config_from_env() -> Dict[str, Any]:
    """Build a partial configuration mapping from ``MEMSENTINEL_*`` variables."""
    partial: Dict[str, Dict[str, Any]] = {}

    interval = env_int(ENV_INTERVAL_MS)
    if interval is not None:
        partial.setdefault("monitoring", {})["interval"] = interval

    heap = env_float(ENV_HEAP_THRESHOLD)
    if heap is not None:
        partial.setdefault("threshold", {})["heap"] = heap

    sensitivity = env_str(ENV_SENSITIVITY)
    if sensitivity is not None:
        partial.setdefault("detection", {})["sensitivity"] = sensitivity.lower()

    alerting_enabled = env_bool(ENV_ALERTING_ENABLED)
    if alerting_enabled is not None:
        partial.setdefault("alerting", {})["enabled"] = alerting_enabled

    return partial


def load_config_file(path: str | Path) -> Dict[str, Any]:
    """
    Load a JSON configuration file into a partial configuration mapping.

    Args:
        path: Location of the JSON document

    Returns:
        The decoded top-level mapping, ready for ``MemoryMonitor.configure``

    Raises:
        ConfigError: If the file is missing, unreadable or not a JSON object
    """
    config_path = Path(path)
    try:
        payload = orjson.loads(config_path.read_bytes())
    except FileNotFoundError as exc:
        raise ConfigError.load_failed(str(config_path), "file does not exist") from exc
    except orjson.JSONDecodeError as exc:
        raise ConfigError.load_failed(str(config_path), "invalid JSON") from exc
    except OSError as exc:
        raise ConfigError.load_failed(str(config_path), str(exc)) from exc

    if not isinstance(payload, dict):
        raise ConfigError.load_failed(str(config_path), "top level must be an object")
    return payload


def resolve_config_path(explicit: Optional[str | Path] = None) -> Optional[Path]:
    """Return the explicit path, else ``MEMSENTINEL_CONFIG`` when set."""
    if explicit is not None:
        return Path(explicit)
    configured = env_str("MEMSENTINEL_CONFIG")
    return Path(configured).expanduser() if configured else None


__all__ = [
    "ENV_ALERTING_ENABLED",
    "ENV_HEAP_THRESHOLD",
    "ENV_INTERVAL_MS",
    "ENV_SENSITIVITY",
    "config_from_env",
    "env_bool",
    "env_float",
    "env_int",
    "env_str",
    "load_config_file",
    "resolve_config_path",
]
