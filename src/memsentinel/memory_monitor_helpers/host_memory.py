"""Host memory interface and the psutil-backed provider."""

from __future__ import annotations

import gc
import logging
from dataclasses import dataclass
from typing import Awaitable, Optional, Protocol, Union, runtime_checkable

import psutil

from memsentinel.errors import SamplingError
from memsentinel.utils import now_ms, parse_size

logger = logging.getLogger(__name__)

PSUTIL_ERRORS = (psutil.Error, OSError)


@dataclass(frozen=True)
class HostMemoryReading:
    """One raw reading from the host memory interface."""

    heap_used: int
    heap_total: int
    external: int
    rss: int
    timestamp: float
    gc_event_count: Optional[int] = None


@runtime_checkable
class HostMemoryProvider(Protocol):
    """Source of memory readings; ``read`` may be synchronous or a coroutine."""

    def read(self) -> Union[HostMemoryReading, Awaitable[HostMemoryReading]]: ...


def gc_collection_total() -> int:
    """Total number of garbage collections run across all generations."""
    return sum(generation["collections"] for generation in gc.get_stats())


class PsutilMemoryProvider:
    """
    Reads the current process's memory through psutil.

    ``heap_used`` is the process RSS and ``heap_total`` is the configured
    memory limit, so the heap fraction says how close the process is to
    that limit. Without a limit the total system memory is used.
    """

    def __init__(self, process: Optional[psutil.Process] = None, *, memory_limit: Union[int, str, None] = None):
        self.process = process or psutil.Process()
        if isinstance(memory_limit, str):
            memory_limit = parse_size(memory_limit)
        self.memory_limit = memory_limit

    def read(self) -> HostMemoryReading:
        try:
            memory_info = self.process.memory_info()
            heap_total = self.memory_limit or psutil.virtual_memory().total
        except PSUTIL_ERRORS as exc:
            raise SamplingError(f"Failed to read process memory: {exc}", provider="psutil") from exc

        shared = getattr(memory_info, "shared", 0)
        return HostMemoryReading(
            heap_used=memory_info.rss,
            heap_total=heap_total,
            external=shared,
            rss=memory_info.rss,
            timestamp=now_ms(),
            gc_event_count=gc_collection_total(),
        )


__all__ = [
    "HostMemoryProvider",
    "HostMemoryReading",
    "PSUTIL_ERRORS",
    "PsutilMemoryProvider",
    "gc_collection_total",
]
