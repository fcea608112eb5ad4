from __future__ import annotations
from typing import Generic, List, Tuple, TypeVar
import logging

logger = logging.getLogger(__name__)

S = TypeVar("S")


class History(Generic[S]):
    """
    Bounded stack of prior states. Oldest entries are evicted first.

    Usage:
        h = History(capacity=10)
        h.push(state)
        if h: previous = h.pop()
    """

    def __init__(self, capacity: int = 10) -> None:
        if capacity < 0:
            raise ValueError(f"History capacity must be >= 0, got {capacity}")
        self._capacity = capacity
        self._items: List[S] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    def push(self, state: S) -> None:
        self._items.append(state)
        evicted = len(self._items) - self._capacity
        if evicted > 0:
            del self._items[:evicted]
            logger.debug("history full (capacity=%d); evicted %d oldest", self._capacity, evicted)

    def pop(self) -> S:
        """Remove and return the most recent entry. Raises IndexError when empty."""
        if not self._items:
            raise IndexError("pop from empty history")
        return self._items.pop()

    def snapshot(self) -> Tuple[S, ...]:
        """Oldest first."""
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)
