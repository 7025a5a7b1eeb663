"""Named sensitivity presets for the leak detector.

Each preset bundles the thresholds a window must clear before it is treated as
a suspected leak. ``high`` flags growth sooner and tolerates noisier fits;
``low`` waits for strong, sustained growth.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

_BYTES_PER_KIB = 1024
_SECONDS_PER_MINUTE = 60.0


@dataclass(frozen=True)
class SensitivityPreset:
    """Thresholds applied by the trend analyzer for one sensitivity level."""

    name: str
    min_growth_rate: float  # bytes per second
    confidence: float
    relative_growth: float
    debounce_evaluations: int


LOW = SensitivityPreset(
    name="low",
    min_growth_rate=1024 * _BYTES_PER_KIB / _SECONDS_PER_MINUTE,
    confidence=0.85,
    relative_growth=0.25,
    debounce_evaluations=5,
)

MEDIUM = SensitivityPreset(
    name="medium",
    min_growth_rate=256 * _BYTES_PER_KIB / _SECONDS_PER_MINUTE,
    confidence=0.75,
    relative_growth=0.15,
    debounce_evaluations=3,
)

HIGH = SensitivityPreset(
    name="high",
    min_growth_rate=0.0,
    confidence=0.6,
    relative_growth=0.05,
    debounce_evaluations=2,
)

SENSITIVITY_PRESETS: Dict[str, SensitivityPreset] = {
    LOW.name: LOW,
    MEDIUM.name: MEDIUM,
    HIGH.name: HIGH,
}


def get_preset(name: str) -> SensitivityPreset:
    """Return the preset registered under ``name``."""
    return SENSITIVITY_PRESETS[name]


__all__ = ["SensitivityPreset", "SENSITIVITY_PRESETS", "LOW", "MEDIUM", "HIGH", "get_preset"]
