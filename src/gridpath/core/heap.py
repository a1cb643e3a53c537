# src/gridpath/core/heap.py
#!/usr/bin/env python3
"""
Binary min-heap ordered by a caller-supplied comparator.

compare(a, b) < 0 means `a` comes out first. There is no decrease-key:
callers push a fresh entry when a cost improves and skip the stale one
when it surfaces.
"""

from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Optional, TypeVar

from gridpath.core.types import Position

T = TypeVar("T")
Comparator = Callable[[Any, Any], float]


@dataclass(frozen=True)
class QueueEntry:
    position: Position
    g: int        # cost from start when pushed
    f: int = 0    # g + heuristic (A* only)


def by_cost(a: QueueEntry, b: QueueEntry) -> int:
    return a.g - b.g


def by_estimate(a: QueueEntry, b: QueueEntry) -> int:
    return a.f - b.f


class PriorityQueue(Generic[T]):
    def __init__(self, compare: Comparator):
        self.compare = compare
        self.data: List[T] = []

    def __len__(self) -> int:
        return len(self.data)

    def is_empty(self) -> bool:
        return not self.data

    def peek(self) -> Optional[T]:
        return self.data[0] if self.data else None

    def push(self, item: T) -> None:
        self.data.append(item)
        self._bubble_up(len(self.data) - 1)

    def pop(self) -> Optional[T]:
        """Remove and return the minimum, or None when empty."""
        if not self.data:
            return None
        top = self.data[0]
        end = self.data.pop()
        if self.data:
            self.data[0] = end
            self._sink_down(0)
        return top

    # -------------------- internals --------------------

    def _bubble_up(self, n: int) -> None:
        element = self.data[n]
        while n > 0:
            parent_n = (n + 1) // 2 - 1
            parent = self.data[parent_n]
            if self.compare(element, parent) >= 0:
                break
            self.data[parent_n] = element
            self.data[n] = parent
            n = parent_n

    def _sink_down(self, n: int) -> None:
        length = len(self.data)
        element = self.data[n]
        while True:
            r_child = (n + 1) * 2
            l_child = r_child - 1
            swap_idx: Optional[int] = None
            if l_child < length and self.compare(self.data[l_child], element) < 0:
                swap_idx = l_child
            if r_child < length:
                right = self.data[r_child]
                if swap_idx is None:
                    if self.compare(right, element) < 0:
                        swap_idx = r_child
                elif self.compare(right, self.data[swap_idx]) < 0:
                    swap_idx = r_child
            if swap_idx is None:
                break
            self.data[n] = self.data[swap_idx]
            self.data[swap_idx] = element
            n = swap_idx
