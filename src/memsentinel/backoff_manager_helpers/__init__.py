"""Helper modules for backoff management."""

from .types import DEFAULT_BACKOFF_CONFIGS, BackoffConfig, BackoffType

__all__ = ["BackoffConfig", "BackoffType", "DEFAULT_BACKOFF_CONFIGS"]
