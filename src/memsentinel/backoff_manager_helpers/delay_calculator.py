"""Delay calculation helpers for backoff management."""

import logging

from memsentinel.backoff_manager import random as backoff_random

from .types import BackoffConfig

logger = logging.getLogger(__name__)


class DelayCalculator:
    """Calculates exponential backoff delays with jitter."""

    @staticmethod
    def calculate_base_delay(config: BackoffConfig, attempt: int) -> float:
        """
        Calculate base exponential backoff delay.

        Args:
            config: Backoff configuration
            attempt: Attempt number, starting at 1

        Returns:
            Base delay in seconds
        """
        return min(config.initial_delay * (config.multiplier ** (max(attempt, 1) - 1)), config.max_delay)

    @staticmethod
    def apply_jitter(base_delay: float, config: BackoffConfig) -> float:
        jitter_amount = base_delay * config.jitter_range
        jitter = backoff_random.uniform(-jitter_amount, jitter_amount)
        return max(config.min_delay, base_delay + jitter)

    @classmethod
    def calculate_full_delay(cls, config: BackoffConfig, attempt: int, channel_name: str) -> float:
        base_delay = cls.calculate_base_delay(config, attempt)
        final_delay = cls.apply_jitter(base_delay, config)
        logger.debug(
            "[BackoffManager] Backoff for %s: attempt=%s, base_delay=%.2fs, final_delay=%.2fs",
            channel_name,
            attempt,
            base_delay,
            final_delay,
        )
        return final_delay
