from __future__ import annotations

"""Shared data structures for leak alert delivery."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class AlertSeverity(Enum):
    """Alert severity levels, ordered from least to most urgent."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _SEVERITY_ORDER.index(self)

    @classmethod
    def from_rank(cls, rank: int) -> "AlertSeverity":
        return _SEVERITY_ORDER[max(0, min(rank, len(_SEVERITY_ORDER) - 1))]

    def at_least(self, other: "AlertSeverity") -> "AlertSeverity":
        return self if self.rank >= other.rank else other


_SEVERITY_ORDER = (AlertSeverity.LOW, AlertSeverity.MEDIUM, AlertSeverity.HIGH)


@dataclass(frozen=True)
class DeliveryRequest:
    """Payload handed to every alert channel."""

    signature_id: str
    severity: AlertSeverity
    growth_rate: float
    probability: float
    timestamp: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "signature_id": self.signature_id,
            "severity": self.severity.value,
            "growth_rate": self.growth_rate,
            "probability": self.probability,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class AlertRecord:
    """One successful delivery of an alert to a channel."""

    signature_id: str
    channel: str
    delivered_at: float
    severity: AlertSeverity
