# src/gridpath/core/dijkstra.py
#!/usr/bin/env python3

from dataclasses import dataclass, field
from math import inf
from typing import Dict, List, Optional

from gridpath.core.heap import PriorityQueue, QueueEntry, by_cost
from gridpath.core.search import SearchAlgo
from gridpath.core.types import Position


@dataclass
class DijkstraAlgo(SearchAlgo):
    name: str = "Dijkstra"

    open_pq: PriorityQueue = field(default_factory=lambda: PriorityQueue(by_cost))
    dist: Dict[Position, int] = field(default_factory=dict)
    stale_pops: int = 0

    def _clear_frontier(self) -> None:
        self.open_pq = PriorityQueue(by_cost)
        self.dist.clear()
        self.stale_pops = 0

    def _seed(self, start: Position) -> None:
        self.dist[start] = 0
        self.open_pq.push(QueueEntry(start, 0))

    def _pop(self) -> Optional[Position]:
        while not self.open_pq.is_empty():
            entry = self.open_pq.pop()
            u = entry.position
            # Ignore stale pops
            if u in self.closed_set or entry.g != self.dist.get(u, inf):
                self.stale_pops += 1
                continue
            return u
        return None

    def _expand(self, u: Position) -> List[Position]:
        opened_now: List[Position] = []
        for v in self.grid.neighbors(*u):
            alt = self.dist[u] + 1
            if alt < self.dist.get(v, inf):
                self.dist[v] = alt
                self.parent[v] = u
                self.open_pq.push(QueueEntry(v, alt))
                opened_now.append(v)
        return opened_now

    def _metrics(self) -> dict:
        m = super()._metrics()
        m["stale_pops"] = self.stale_pops
        return m
