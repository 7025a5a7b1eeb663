"""Sample construction and the bounded sample history."""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import List, Optional

from memsentinel.errors import SamplingError
from memsentinel.utils import RingBuffer

from .host_memory import HostMemoryProvider, HostMemoryReading

logger = logging.getLogger(__name__)

SAMPLING_ERRORS = (
    SamplingError,
    OSError,
    RuntimeError,
    ValueError,
    TypeError,
    KeyError,
    AttributeError,
    asyncio.TimeoutError,
)


@dataclass(frozen=True)
class MemorySample:
    """Memory usage at a point in time; timestamps are epoch milliseconds."""

    timestamp: float
    heap_used: int
    heap_total: int
    external: int
    rss: int
    gc_event_count: Optional[int] = None

    @property
    def heap_fraction(self) -> float:
        if self.heap_total <= 0:
            return 0.0
        return self.heap_used / self.heap_total

    @classmethod
    def from_reading(cls, reading: HostMemoryReading) -> "MemorySample":
        for name in ("heap_used", "heap_total", "external", "rss"):
            value = getattr(reading, name)
            if not isinstance(value, (int, float)) or isinstance(value, bool) or value < 0:
                raise SamplingError(f"Host reading has invalid {name}: {value!r}")
        return cls(
            timestamp=float(reading.timestamp),
            heap_used=int(reading.heap_used),
            heap_total=int(reading.heap_total),
            external=int(reading.external),
            rss=int(reading.rss),
            gc_event_count=reading.gc_event_count,
        )


class SampleCollector:
    """Reads the host provider and keeps the most recent samples."""

    def __init__(self, provider: HostMemoryProvider, history_size: int):
        """
        Initialize sample collector.

        Args:
            provider: Host memory interface
            history_size: Maximum number of samples to retain
        """
        self.provider = provider
        self.history: RingBuffer[MemorySample] = RingBuffer(history_size)

    async def read_sample(self) -> MemorySample:
        """Read one sample from the provider without storing it."""
        reading = self.provider.read()
        if inspect.isawaitable(reading):
            reading = await reading
        return MemorySample.from_reading(reading)

    def commit(self, sample: MemorySample) -> None:
        self.history.push(sample)

    def get_samples(self) -> List[MemorySample]:
        """Samples oldest first."""
        return self.history.to_list()

    def get_latest_sample(self) -> Optional[MemorySample]:
        return self.history.latest()

    def resize(self, history_size: int) -> None:
        """Rebuild the history with a new capacity, keeping the newest samples."""
        if history_size == self.history.capacity:
            return
        resized: RingBuffer[MemorySample] = RingBuffer(history_size)
        for sample in self.history.to_list()[-history_size:]:
            resized.push(sample)
        self.history = resized

    def clear(self) -> None:
        self.history.clear()


__all__ = ["MemorySample", "SAMPLING_ERRORS", "SampleCollector"]
