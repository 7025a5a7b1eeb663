"""Internal error bookkeeping surfaced through health queries."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict


@dataclass
class ErrorCounters:
    sampling_errors: int = 0
    dispatch_errors: int = 0
    subscriber_errors: int = 0
    analysis_errors: int = 0
    tick_errors: int = 0
    sampling_errors_since_success: int = 0

    def record_sampling_error(self) -> None:
        self.sampling_errors += 1
        self.sampling_errors_since_success += 1

    def record_sampling_success(self) -> None:
        self.sampling_errors_since_success = 0

    def record_dispatch_error(self, channel: str, exc: BaseException) -> None:
        self.dispatch_errors += 1

    def record_subscriber_error(self, exc: BaseException) -> None:
        self.subscriber_errors += 1

    def record_tick_error(self, exc: BaseException) -> None:
        self.tick_errors += 1

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


__all__ = ["ErrorCounters"]
