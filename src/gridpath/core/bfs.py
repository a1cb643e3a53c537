# src/gridpath/core/bfs.py
#!/usr/bin/env python3
"""Breadth-first search: FIFO frontier, first discovery of a cell is final."""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Set

from gridpath.core.search import SearchAlgo
from gridpath.core.types import Position


@dataclass
class BFSAlgo(SearchAlgo):
    name: str = "BFS"

    queue: Deque[Position] = field(default_factory=deque)
    discovered: Set[Position] = field(default_factory=set)

    def _clear_frontier(self) -> None:
        self.queue.clear()
        self.discovered.clear()

    def _seed(self, start: Position) -> None:
        self.discovered.add(start)
        self.queue.append(start)

    def _pop(self) -> Optional[Position]:
        return self.queue.popleft() if self.queue else None

    def _expand(self, u: Position) -> List[Position]:
        opened_now: List[Position] = []
        for v in self.grid.neighbors(*u):
            if v in self.discovered:
                continue
            self.discovered.add(v)
            self.parent[v] = u
            self.queue.append(v)
            opened_now.append(v)
        return opened_now
