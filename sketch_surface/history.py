from __future__ import annotations

from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")

UNDO_CAPACITY = 20


class UndoHistory(Generic[T]):
    """Bounded LIFO of raster snapshots; pushing past capacity drops the oldest entry."""

    def __init__(self, capacity: int = UNDO_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("undo capacity must be positive")
        self.capacity = capacity
        self._stack: List[T] = []

    def push(self, snapshot: T) -> None:
        self._stack.append(snapshot)
        if len(self._stack) > self.capacity:
            self._stack.pop(0)

    def pop(self) -> Optional[T]:
        if not self._stack:
            return None
        return self._stack.pop()

    def clear(self) -> None:
        self._stack.clear()

    def __len__(self) -> int:
        return len(self._stack)

    def __bool__(self) -> bool:
        return bool(self._stack)
