from __future__ import annotations

"""Exception types for configuration handling."""

from typing import Any, Iterable


class ConfigError(ValueError):
    """Raised when a configuration field is missing, unknown or out of range."""

    def __init__(self, message: str, *, field: str, value: Any = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value

    @classmethod
    def out_of_range(cls, field: str, value: Any, minimum: float, maximum: float) -> "ConfigError":
        """Create error for a numeric value outside its allowed range."""
        return cls(
            f"{field} must be between {minimum} and {maximum} (received {value!r})",
            field=field,
            value=value,
        )

    @classmethod
    def invalid_type(cls, field: str, value: Any, expected: str) -> "ConfigError":
        """Create error for a value of the wrong type."""
        return cls(f"{field} must be {expected} (received {value!r})", field=field, value=value)

    @classmethod
    def invalid_choice(cls, field: str, value: Any, choices: Iterable[str]) -> "ConfigError":
        """Create error for a value outside an enumerated set."""
        allowed = ", ".join(choices)
        return cls(f"{field} must be one of: {allowed} (received {value!r})", field=field, value=value)

    @classmethod
    def unknown_field(cls, field: str) -> "ConfigError":
        """Create error for a key that is not part of the schema."""
        return cls(f"Unknown configuration field {field!r}", field=field)

    @classmethod
    def inconsistent(cls, field: str, value: Any, reason: str) -> "ConfigError":
        """Create error for a value that conflicts with another field."""
        return cls(f"Invalid value for {field}: {value!r}. {reason}", field=field, value=value)

    @classmethod
    def load_failed(cls, resource: str, reason: str = "") -> "ConfigError":
        """Create error for a configuration source that cannot be read."""
        msg = f"Failed to load {resource}"
        if reason:
            msg += f": {reason}"
        return cls(msg, field=resource)


__all__ = ["ConfigError"]
