"""Type definitions and configurations for delivery backoff."""

from dataclasses import dataclass
from enum import Enum

DEFAULT_BACKOFF_MAX_DELAY_SECONDS = 30.0
DEFAULT_BACKOFF_MAX_ATTEMPTS = 3


class BackoffType(Enum):
    """Failure categories that get their own retry schedule"""

    CHANNEL_FAILURE = "channel_failure"
    WEBHOOK_FAILURE = "webhook_failure"
    FILE_WRITE_FAILURE = "file_write_failure"


@dataclass
class BackoffConfig:
    """Configuration for exponential backoff behavior"""

    initial_delay: float = 0.5
    max_delay: float = DEFAULT_BACKOFF_MAX_DELAY_SECONDS
    multiplier: float = 2.0
    jitter_range: float = 0.1  # ±10% randomization
    min_delay: float = 0.05
    max_attempts: int = DEFAULT_BACKOFF_MAX_ATTEMPTS


DEFAULT_BACKOFF_CONFIGS = {
    BackoffType.CHANNEL_FAILURE: BackoffConfig(),
    BackoffType.WEBHOOK_FAILURE: BackoffConfig(
        initial_delay=1.0,
        max_delay=60.0,
        multiplier=2.0,
        jitter_range=0.2,
    ),
    BackoffType.FILE_WRITE_FAILURE: BackoffConfig(
        initial_delay=0.2,
        max_delay=5.0,
        multiplier=2.0,
        jitter_range=0.1,
    ),
}
