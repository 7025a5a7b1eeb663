"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

from collections import deque
from typing import Callable, Iterable, List, Optional

import pytest

from memsentinel.alerting import DeliveryRequest
from memsentinel.backoff_manager import BackoffManager
from memsentinel.backoff_manager_helpers import BackoffConfig, BackoffType
from memsentinel.errors import DispatchError, SamplingError
from memsentinel.memory_monitor_helpers import HostMemoryReading, MemorySample

MB = 1024 * 1024
DEFAULT_HEAP_TOTAL = 1024 * MB


class FakeHostProvider:
    """Scripted host memory interface with a controllable clock."""

    def __init__(
        self,
        heap_values: Iterable[int] = (),
        *,
        heap_total: int = DEFAULT_HEAP_TOTAL,
        start_ms: float = 1_000_000.0,
        step_ms: float = 1000.0,
    ):
        self._values = deque(heap_values)
        self.heap_total = heap_total
        self.next_timestamp = start_ms
        self.step_ms = step_ms
        self.last_heap = self._values[0] if self._values else 10 * MB
        self.failures = 0
        self.calls = 0

    def queue(self, *values: int) -> None:
        self._values.extend(values)

    def fail_next(self, count: int = 1) -> None:
        self.failures += count

    def read(self) -> HostMemoryReading:
        self.calls += 1
        if self.failures:
            self.failures -= 1
            raise SamplingError("scripted host failure", provider="fake")
        if self._values:
            self.last_heap = self._values.popleft()
        timestamp = self.next_timestamp
        self.next_timestamp += self.step_ms
        return HostMemoryReading(
            heap_used=self.last_heap,
            heap_total=self.heap_total,
            external=0,
            rss=self.last_heap,
            timestamp=timestamp,
            gc_event_count=0,
        )


class AsyncHostProvider(FakeHostProvider):
    """Same script, exposed through a coroutine ``read``."""

    async def read(self) -> HostMemoryReading:  # type: ignore[override]
        return super().read()


class RecordingChannel:
    """Alert channel that records requests and can fail on demand."""

    def __init__(self, name: str = "recording", *, failures: int = 0, result: bool = True):
        self.name = name
        self.failures = failures
        self.result = result
        self.requests: List[DeliveryRequest] = []
        self.attempts = 0

    async def deliver(self, request: DeliveryRequest) -> bool:
        self.attempts += 1
        if self.failures:
            self.failures -= 1
            raise DispatchError.rejected(self.name, "scripted failure")
        if self.result:
            self.requests.append(request)
        return self.result


def build_samples(
    heap_values: Iterable[int],
    *,
    start_ms: float = 0.0,
    step_ms: float = 1000.0,
    heap_total: int = DEFAULT_HEAP_TOTAL,
    gc_counts: Optional[Iterable[int]] = None,
) -> List[MemorySample]:
    values = list(heap_values)
    counts = list(gc_counts) if gc_counts is not None else [None] * len(values)
    return [
        MemorySample(
            timestamp=start_ms + index * step_ms,
            heap_used=value,
            heap_total=heap_total,
            external=0,
            rss=value,
            gc_event_count=counts[index],
        )
        for index, value in enumerate(values)
    ]


@pytest.fixture
def fake_provider() -> FakeHostProvider:
    """Provide a fake host provider with no scripted values."""
    return FakeHostProvider()


@pytest.fixture
def provider_factory() -> Callable[..., FakeHostProvider]:
    return FakeHostProvider


@pytest.fixture
def async_provider_factory() -> Callable[..., AsyncHostProvider]:
    return AsyncHostProvider


@pytest.fixture
def recording_channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def channel_factory() -> Callable[..., RecordingChannel]:
    return RecordingChannel


@pytest.fixture
def make_samples() -> Callable[..., List[MemorySample]]:
    return build_samples


@pytest.fixture
def instant_backoff() -> BackoffManager:
    """Backoff manager whose retry delays are zero."""
    zero = BackoffConfig(initial_delay=0.0, max_delay=0.0, jitter_range=0.0, min_delay=0.0)
    return BackoffManager({backoff_type: zero for backoff_type in BackoffType})
