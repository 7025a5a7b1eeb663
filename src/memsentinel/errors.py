"""Error types used across the engine."""

from __future__ import annotations

from .config.errors import ConfigError


class MonitorError(RuntimeError):
    """Base class for recoverable engine failures."""


class SamplingError(MonitorError):
    """Raised when the host memory interface cannot produce a reading."""

    def __init__(self, message: str, *, provider: str = "host") -> None:
        super().__init__(message)
        self.provider = provider


class DispatchError(MonitorError):
    """Raised when an alert channel fails to deliver a request."""

    def __init__(self, message: str, *, channel: str) -> None:
        super().__init__(message)
        self.channel = channel

    @classmethod
    def rejected(cls, channel: str, reason: str = "") -> "DispatchError":
        """Create error for a channel that reported an unsuccessful delivery."""
        msg = f"Channel {channel!r} rejected the alert"
        if reason:
            msg += f": {reason}"
        return cls(msg, channel=channel)


__all__ = ["ConfigError", "DispatchError", "MonitorError", "SamplingError"]
