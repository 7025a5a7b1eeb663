"""Leak signature lifecycle: creation, escalation, resolution and eviction."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple

from memsentinel.config import DetectionConfig
from memsentinel.utils import format_bytes

from .recommendations import build_recommendations, describe_factors
from .window_evaluator import WindowDetection

logger = logging.getLogger(__name__)

_BUCKET_TOLERANCE = 1


class SignatureStatus(Enum):
    SUSPECTED = "suspected"
    CONFIRMED = "confirmed"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class LeakSignature:
    """A sustained-growth pattern identified by its window and growth-rate bucket."""

    id: str
    window_size: int
    growth_bucket: int
    first_seen: float
    last_seen: float
    growth_rate: float
    confidence: float
    probability: float
    status: SignatureStatus
    detections: int = 1
    factors: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = ()

    @property
    def is_active(self) -> bool:
        return self.status is not SignatureStatus.RESOLVED

    @property
    def is_confirmed(self) -> bool:
        return self.status is SignatureStatus.CONFIRMED

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "window_size": self.window_size,
            "first_seen": self.first_seen,
            "last_seen": self.last_seen,
            "growth_rate": self.growth_rate,
            "confidence": self.confidence,
            "probability": self.probability,
            "status": self.status.value,
            "detections": self.detections,
            "factors": list(self.factors),
            "recommendations": list(self.recommendations),
        }


class SignatureChange(Enum):
    CREATED = "created"
    ESCALATED = "escalated"
    UPDATED = "updated"
    RESOLVED = "resolved"
    EVICTED = "evicted"


def growth_bucket(growth_rate: float) -> int:
    """Order-of-magnitude bucket (base 2) for a positive growth rate."""
    return math.floor(math.log2(max(growth_rate, 1.0)))


class SignatureTracker:
    """
    Keeps the bounded signature log.

    Signatures are replaced, never mutated, so a reader holding an earlier
    list keeps a consistent view.
    """

    def __init__(self, detection: DetectionConfig):
        self._signatures: List[LeakSignature] = []
        self._evicted: List[LeakSignature] = []
        self._sequence = 0
        self.configure(detection)

    def configure(self, detection: DetectionConfig) -> None:
        self.confirm_after = detection.confirm_after
        self.resolve_after_ms = detection.resolve_after_ms
        self.max_signatures = detection.max_signatures
        self._evict_overflow()

    def record(self, detection: WindowDetection) -> Tuple[LeakSignature, SignatureChange]:
        """Fold a window detection into the log, creating or updating its signature."""
        bucket = growth_bucket(detection.fit.growth_rate)
        index = self._find_active(detection.window_size, bucket)
        factors = describe_factors(detection.patterns)
        recommendations = build_recommendations(detection.patterns)

        if index is None:
            self._sequence += 1
            signature = LeakSignature(
                id=f"leak-w{detection.window_size}-b{bucket}-{self._sequence}",
                window_size=detection.window_size,
                growth_bucket=bucket,
                first_seen=detection.timestamp,
                last_seen=detection.timestamp,
                growth_rate=detection.fit.growth_rate,
                confidence=detection.confidence,
                probability=detection.probability,
                status=SignatureStatus.SUSPECTED,
                factors=factors,
                recommendations=recommendations,
            )
            if self.confirm_after <= 1:
                signature = replace(signature, status=SignatureStatus.CONFIRMED)
            self._signatures.append(signature)
            self._evict_overflow()
            logger.warning(
                "Leak suspected (%s): growing %s/s, confidence %.2f",
                signature.id,
                format_bytes(signature.growth_rate),
                signature.confidence,
            )
            return signature, SignatureChange.CREATED

        previous = self._signatures[index]
        detections = previous.detections + 1
        status = previous.status
        if status is SignatureStatus.SUSPECTED and detections >= self.confirm_after:
            status = SignatureStatus.CONFIRMED
        updated = replace(
            previous,
            growth_bucket=bucket,
            last_seen=detection.timestamp,
            growth_rate=detection.fit.growth_rate,
            confidence=detection.confidence,
            probability=detection.probability,
            status=status,
            detections=detections,
            factors=tuple(dict.fromkeys(previous.factors + factors)),
            recommendations=tuple(dict.fromkeys(previous.recommendations + recommendations)),
        )
        self._signatures[index] = updated
        if status is not previous.status:
            logger.error("Leak confirmed (%s) after %s detections", updated.id, detections)
            return updated, SignatureChange.ESCALATED
        return updated, SignatureChange.UPDATED

    def resolve_stale(self, now: float) -> List[LeakSignature]:
        """Mark signatures without growth for ``resolve_after_ms`` as resolved."""
        resolved: List[LeakSignature] = []
        for index, signature in enumerate(self._signatures):
            if signature.is_active and now - signature.last_seen >= self.resolve_after_ms and now > signature.last_seen:
                updated = replace(signature, status=SignatureStatus.RESOLVED)
                self._signatures[index] = updated
                resolved.append(updated)
                logger.info("Leak resolved (%s): no growth since %.0f", updated.id, signature.last_seen)
        return resolved

    def get_signatures(self) -> List[LeakSignature]:
        """Signatures oldest first."""
        return list(self._signatures)

    def get(self, signature_id: str) -> Optional[LeakSignature]:
        for signature in self._signatures:
            if signature.id == signature_id:
                return signature
        return None

    def drain_evicted(self) -> List[LeakSignature]:
        """Return and forget signatures dropped from the log since the last call."""
        evicted, self._evicted = self._evicted, []
        return evicted

    def active_count(self) -> int:
        return sum(1 for s in self._signatures if s.is_active)

    def confirmed_count(self) -> int:
        return sum(1 for s in self._signatures if s.is_confirmed)

    def clear(self) -> None:
        self._signatures.clear()
        self._evicted.clear()

    def _find_active(self, window_size: int, bucket: int) -> Optional[int]:
        best: Optional[int] = None
        best_distance = _BUCKET_TOLERANCE + 1
        for index, signature in enumerate(self._signatures):
            if not signature.is_active or signature.window_size != window_size:
                continue
            distance = abs(signature.growth_bucket - bucket)
            if distance < best_distance:
                best, best_distance = index, distance
        return best

    def _evict_overflow(self) -> None:
        while len(self._signatures) > self.max_signatures:
            victim = next(
                (i for i, s in enumerate(self._signatures) if s.status is SignatureStatus.RESOLVED),
                0,
            )
            evicted = self._signatures.pop(victim)
            if evicted.is_active:
                self._evicted.append(evicted)
            logger.debug("Evicted signature %s from the log", evicted.id)


__all__ = [
    "LeakSignature",
    "SignatureChange",
    "SignatureStatus",
    "SignatureTracker",
    "growth_bucket",
]
