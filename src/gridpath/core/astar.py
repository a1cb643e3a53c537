# src/gridpath/core/astar.py
#!/usr/bin/env python3
"""
A*: one expansion per step() for animation.

Heuristic:
- Manhattan distance to the goal. With unit moves on a 4-connected grid it
  never overestimates, so the first visit of the goal is along a shortest path.

Ordering:
- Entries rank by f = g + h only. Equal f values come out in heap order,
  which is fixed for a fixed push sequence.
"""

from dataclasses import dataclass, field
from math import inf
from typing import Dict, List, Optional

from gridpath.core.heap import PriorityQueue, QueueEntry, by_estimate
from gridpath.core.search import SearchAlgo
from gridpath.core.types import Position, manhattan


@dataclass
class AStarAlgo(SearchAlgo):
    name: str = "A*"

    open_pq: PriorityQueue = field(default_factory=lambda: PriorityQueue(by_estimate))
    g: Dict[Position, int] = field(default_factory=dict)
    stale_pops: int = 0

    def _clear_frontier(self) -> None:
        self.open_pq = PriorityQueue(by_estimate)
        self.g.clear()
        self.stale_pops = 0

    def _h(self, c: Position) -> int:
        return manhattan(c, self.goal)

    def _seed(self, start: Position) -> None:
        self.g[start] = 0
        self.open_pq.push(QueueEntry(start, 0, self._h(start)))

    def _pop(self) -> Optional[Position]:
        while not self.open_pq.is_empty():
            entry = self.open_pq.pop()
            u = entry.position
            if u in self.closed_set or entry.g != self.g.get(u, inf):
                self.stale_pops += 1
                continue
            return u
        return None

    def _expand(self, u: Position) -> List[Position]:
        opened_now: List[Position] = []
        for v in self.grid.neighbors(*u):
            tentative = self.g[u] + 1
            if tentative < self.g.get(v, inf):
                self.g[v] = tentative
                self.parent[v] = u
                self.open_pq.push(QueueEntry(v, tentative, tentative + self._h(v)))
                opened_now.append(v)
        return opened_now

    def _metrics(self) -> dict:
        m = super()._metrics()
        m["stale_pops"] = self.stale_pops
        return m
