"""Fixed-capacity ring buffer."""

from __future__ import annotations

from typing import Generic, Iterator, List, Optional, TypeVar

T = TypeVar("T")


class RingBuffer(Generic[T]):
    """
    Insertion-ordered buffer that overwrites its oldest slot once full.

    The slot list is allocated once; ``push`` writes the item into its slot
    before advancing the cursor, so readers never observe a half-written entry.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive (received {capacity})")
        self._capacity = capacity
        self._slots: List[Optional[T]] = [None] * capacity
        self._cursor = 0
        self._count = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def push(self, item: T) -> None:
        """Append ``item``, evicting the oldest entry when at capacity."""
        self._slots[self._cursor] = item
        self._cursor = (self._cursor + 1) % self._capacity
        if self._count < self._capacity:
            self._count += 1

    def to_list(self) -> List[T]:
        """Return the stored items, oldest first."""
        if self._count < self._capacity:
            return [item for item in self._slots[: self._count] if item is not None]
        ordered = self._slots[self._cursor :] + self._slots[: self._cursor]
        return [item for item in ordered if item is not None]

    def latest(self) -> Optional[T]:
        """Return the most recently pushed item, if any."""
        if self._count == 0:
            return None
        return self._slots[(self._cursor - 1) % self._capacity]

    def clear(self) -> None:
        """Drop every item while keeping the allocated slots."""
        for index in range(self._capacity):
            self._slots[index] = None
        self._cursor = 0
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[T]:
        return iter(self.to_list())


__all__ = ["RingBuffer"]
