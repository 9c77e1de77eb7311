#!/usr/bin/env python3
"""
Bounded histories of sampled values.

A History keeps the most recent values produced by a source callable (a body's
position or velocity). The stepping path appends while charts and the viewport
iterate, so appends and snapshots share a small lock.

Eviction is lazy: lowering the limit does not drop anything until the next
sample is added.
"""
import threading
from collections import deque
from typing import Callable, Deque, Generic, Iterator, List, Optional, TypeVar

from .constants import DEFAULT_HISTORY_LIMIT

T = TypeVar("T")


class History(Generic[T]):
    """
    Ordered buffer of at most ``limit`` recent samples (front = oldest).

    Args:
        source: Zero-argument callable returning the current value to sample.
        limit: Maximum number of samples kept once eviction has caught up.
    """

    def __init__(self, source: Callable[[], T], limit: int = DEFAULT_HISTORY_LIMIT):
        self._source = source
        self._values: Deque[T] = deque()
        self._lock = threading.Lock()
        self._limit = _check_limit(limit)

    @property
    def limit(self) -> int:
        return self._limit

    def set_limit(self, limit: int) -> None:
        """Change the ceiling; excess samples are evicted on the next add."""
        self._limit = _check_limit(limit)

    def current_value(self) -> T:
        return self._source()

    def add_current_value(self) -> None:
        """Sample the source and append it, evicting from the front first."""
        value = self._source()
        with self._lock:
            while len(self._values) >= self._limit:
                self._values.popleft()
            self._values.append(value)

    def values(self) -> List[T]:
        """Snapshot of the samples, oldest first."""
        with self._lock:
            return list(self._values)

    def last(self) -> Optional[T]:
        with self._lock:
            return self._values[-1] if self._values else None

    def clear(self) -> None:
        with self._lock:
            self._values.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def __iter__(self) -> Iterator[T]:
        return iter(self.values())


def _check_limit(limit: int) -> int:
    limit = int(limit)
    if limit < 1:
        raise ValueError(f"History limit must be at least 1, got {limit}")
    return limit
