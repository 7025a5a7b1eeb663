"""Exponential backoff with jitter for alert channel retries."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Optional, Protocol, cast

from memsentinel.backoff_manager_helpers import (
    DEFAULT_BACKOFF_CONFIGS,
    BackoffConfig,
    BackoffType,
)
from memsentinel.backoff_manager_helpers.delay_calculator import DelayCalculator
from memsentinel.backoff_manager_helpers.retry_checker import RetryChecker
from memsentinel.backoff_manager_helpers.state_manager import BackoffStateManager

__all__ = ["BackoffManager", "BackoffConfig", "BackoffType"]

logger = logging.getLogger(__name__)


class _BackoffBaseProtocol(Protocol):
    configs: Dict[BackoffType, BackoffConfig]
    state_manager: BackoffStateManager

    def get_config(self, backoff_type: BackoffType) -> BackoffConfig: ...


class _BackoffBase:
    def __init__(
        self,
        custom_configs: Optional[Dict[BackoffType, BackoffConfig]] = None,
        *,
        max_attempts: Optional[int] = None,
    ):
        self.configs = DEFAULT_BACKOFF_CONFIGS.copy()
        if custom_configs:
            self.configs.update(custom_configs)
        if max_attempts is not None:
            self.configs = {
                backoff_type: replace(config, max_attempts=max_attempts)
                for backoff_type, config in self.configs.items()
            }
        self.state_manager = BackoffStateManager()
        logger.debug("[BackoffManager] Initialized with %s configurations", len(self.configs))

    def get_config(self, backoff_type: BackoffType) -> BackoffConfig:
        return self.configs.get(backoff_type, self.configs[BackoffType.CHANNEL_FAILURE])

    @property
    def backoff_state(self) -> Dict[str, Dict[BackoffType, Dict[str, Any]]]:
        return self.state_manager.backoff_state


class _BackoffDelayMixin:
    def calculate_delay(
        self,
        channel_name: str,
        backoff_type: BackoffType,
        attempt: Optional[int] = None,
    ) -> float:
        """Return the next delay; records a failure unless ``attempt`` is given."""
        context = cast(_BackoffBaseProtocol, self)
        config = context.get_config(backoff_type)
        current_attempt = (
            attempt
            if attempt is not None
            else context.state_manager.update_failure_state(channel_name, backoff_type)
        )
        return DelayCalculator.calculate_full_delay(config, current_attempt, channel_name)


class _BackoffRetryMixin:
    def should_retry(self, channel_name: str, backoff_type: BackoffType) -> bool:
        context = cast(_BackoffBaseProtocol, self)
        config = context.get_config(backoff_type)
        return RetryChecker.should_retry(context.state_manager, channel_name, backoff_type, config)

    def reset_backoff(self, channel_name: str, backoff_type: Optional[BackoffType] = None):
        context = cast(_BackoffBaseProtocol, self)
        context.state_manager.reset_backoff(channel_name, backoff_type)

    def get_backoff_info(self, channel_name: str, backoff_type: BackoffType) -> Dict[str, Any]:
        context = cast(_BackoffBaseProtocol, self)
        return context.state_manager.get_backoff_info(
            channel_name, backoff_type, context.get_config(backoff_type)
        )

    def clear(self) -> None:
        cast(_BackoffBaseProtocol, self).state_manager.clear()


class BackoffManager(
    _BackoffBase,
    _BackoffDelayMixin,
    _BackoffRetryMixin,
):
    """Public entry point combining initialization, delay and retry bookkeeping."""

    pass
