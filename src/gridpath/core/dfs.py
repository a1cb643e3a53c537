# src/gridpath/core/dfs.py
#!/usr/bin/env python3
"""
Depth-first search: LIFO frontier.

Cells are marked discovered when pushed, so each is stacked once and keeps
the predecessor it was first seen from. No shortest-path guarantee.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set

from gridpath.core.search import SearchAlgo
from gridpath.core.types import Position


@dataclass
class DFSAlgo(SearchAlgo):
    name: str = "DFS"

    stack: List[Position] = field(default_factory=list)
    discovered: Set[Position] = field(default_factory=set)

    def _clear_frontier(self) -> None:
        self.stack.clear()
        self.discovered.clear()

    def _seed(self, start: Position) -> None:
        self.discovered.add(start)
        self.stack.append(start)

    def _pop(self) -> Optional[Position]:
        return self.stack.pop() if self.stack else None

    def _expand(self, u: Position) -> List[Position]:
        opened_now: List[Position] = []
        for v in self.grid.neighbors(*u):
            if v in self.discovered:
                continue
            self.discovered.add(v)
            self.parent[v] = u
            self.stack.append(v)
            opened_now.append(v)
        return opened_now
