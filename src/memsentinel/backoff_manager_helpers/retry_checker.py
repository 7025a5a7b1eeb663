"""Retry checking helpers for backoff management."""

import logging

from .state_manager import BackoffStateManager
from .types import BackoffConfig, BackoffType

logger = logging.getLogger(__name__)


class RetryChecker:
    """Checks whether another delivery attempt is allowed."""

    @staticmethod
    def should_retry(
        state_manager: BackoffStateManager,
        channel_name: str,
        backoff_type: BackoffType,
        config: BackoffConfig,
    ) -> bool:
        """
        Check if a retry should be attempted based on max attempts configuration.

        Returns:
            True if retry should be attempted, False if max attempts reached
        """
        info = state_manager.get_backoff_info(channel_name, backoff_type, config)
        if not info["can_retry"]:
            logger.warning(
                "[BackoffManager] Max attempts (%s) reached for %s/%s",
                config.max_attempts,
                channel_name,
                backoff_type.value,
            )
            return False
        return True
