"""Per-channel failure state for backoff tracking."""

import logging
import time
from typing import Any, Dict, Optional

from .types import BackoffConfig, BackoffType

logger = logging.getLogger(__name__)


def _ensure_state(backoff_state: Dict, channel_name: str, backoff_type: BackoffType) -> Dict[str, Any]:
    bucket = backoff_state.setdefault(channel_name, {})
    return bucket.setdefault(
        backoff_type,
        {"attempt": 0, "last_failure_time": time.time(), "consecutive_failures": 0},
    )


def _info_for_state(state: Optional[Dict[str, Any]], config: BackoffConfig) -> Dict[str, Any]:
    if not state:
        return {
            "attempt": 0,
            "consecutive_failures": 0,
            "last_failure_time": None,
            "max_attempts": config.max_attempts,
            "can_retry": True,
        }
    return {
        "attempt": state["attempt"],
        "consecutive_failures": state["consecutive_failures"],
        "last_failure_time": state["last_failure_time"],
        "max_attempts": config.max_attempts,
        "can_retry": state["attempt"] < config.max_attempts,
    }


class BackoffStateManager:
    """Tracks failure attempts per channel and failure type."""

    def __init__(self):
        self.backoff_state: Dict[str, Dict[BackoffType, Dict[str, Any]]] = {}

    def update_failure_state(self, channel_name: str, backoff_type: BackoffType) -> int:
        state = _ensure_state(self.backoff_state, channel_name, backoff_type)
        state["attempt"] += 1
        state["consecutive_failures"] += 1
        state["last_failure_time"] = time.time()
        return state["attempt"]

    def reset_backoff(self, channel_name: str, backoff_type: Optional[BackoffType] = None):
        bucket = self.backoff_state.get(channel_name)
        if not bucket:
            return
        if backoff_type is not None:
            bucket.pop(backoff_type, None)
        if backoff_type is None or not bucket:
            self.backoff_state.pop(channel_name, None)
        logger.debug("[BackoffManager] Reset backoff state for %s", channel_name)

    def clear(self) -> None:
        self.backoff_state.clear()

    def get_backoff_info(self, channel_name: str, backoff_type: BackoffType, config: BackoffConfig) -> Dict[str, Any]:
        bucket = self.backoff_state.get(channel_name) or {}
        return _info_for_state(bucket.get(backoff_type), config)
