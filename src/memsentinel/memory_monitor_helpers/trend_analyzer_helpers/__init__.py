"""Helper modules for trend analysis."""

from .signature_tracker import LeakSignature, SignatureChange, SignatureStatus, SignatureTracker
from .trend_calculator import TrendCalculator, TrendFit
from .window_evaluator import ClassificationThresholds, WindowDetection, WindowEvaluator

__all__ = [
    "ClassificationThresholds",
    "LeakSignature",
    "SignatureChange",
    "SignatureStatus",
    "SignatureTracker",
    "TrendCalculator",
    "TrendFit",
    "WindowDetection",
    "WindowEvaluator",
]
