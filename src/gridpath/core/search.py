# src/gridpath/core/search.py
#!/usr/bin/env python3
"""
Shared lifecycle for the stepping searches: one visit per step() for animation.

Implements the Algorithm API expected by the runner and viewer:
- init(grid, start=None, goal=None) - reset() - step() -> StepResult

Subclasses own the frontier and provide three hooks:
- _seed(start)       put the start position on an empty frontier
- _pop()             next position to visit, or None when the frontier is empty
- _expand(u)         discover neighbors of u; return them in the order signalled
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from gridpath.core.types import Grid, Position, StepResult, reconstruct_path

log = logging.getLogger(__name__)


@dataclass
class SearchAlgo:
    name: str = "search"

    # Internal state
    grid: Optional[Grid] = None
    start: Optional[Position] = None
    goal: Optional[Position] = None
    parent: Dict[Position, Position] = field(default_factory=dict)
    open_set: Set[Position] = field(default_factory=set)     # for overlay
    closed_set: Set[Position] = field(default_factory=set)
    path: List[Position] = field(default_factory=list)
    popped_count: int = 0
    done: bool = False
    no_path: bool = False
    start_override: Optional[Position] = None
    goal_override: Optional[Position] = None

    # -------------------- lifecycle --------------------

    def init(self, grid: Grid, start: Optional[Tuple[int, int]] = None,
             goal: Optional[Tuple[int, int]] = None) -> None:
        """
        Attach to a grid; start/goal default to the grid's own endpoints.
        Overrides outside the grid are ignored, like Grid.set_start/set_goal.
        """
        self.grid = grid
        self.start_override = self._in_grid(start)
        self.goal_override = self._in_grid(goal)
        self.reset()

    def _in_grid(self, pos: Optional[Tuple[int, int]]) -> Optional[Position]:
        if pos is None:
            return None
        pos = Position(*pos)
        if not self.grid.in_bounds(*pos):
            log.debug("%s: ignoring out-of-bounds endpoint %s", self.name, tuple(pos))
            return None
        return pos

    def reset(self) -> None:
        """Clear all state and seed with the start node."""
        if self.grid is None:
            return
        self.start = self.start_override or self.grid.start
        self.goal = self.goal_override or self.grid.goal
        self.parent.clear()
        self.open_set.clear()
        self.closed_set.clear()
        self.path = []
        self.popped_count = 0
        self.done = False
        self.no_path = False
        self._clear_frontier()
        self._seed(self.start)
        self.open_set.add(self.start)

    # -------------------- hooks --------------------

    def _clear_frontier(self) -> None:
        raise NotImplementedError

    def _seed(self, start: Position) -> None:
        raise NotImplementedError

    def _pop(self) -> Optional[Position]:
        raise NotImplementedError

    def _expand(self, u: Position) -> List[Position]:
        raise NotImplementedError

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        """
        Run ONE visit:
          - Take the next position off the frontier.
          - If it is the goal, reconstruct and finish.
          - Else expand its walkable neighbors.
        """
        if self.grid is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            return StepResult(status="done", path=list(self.path),
                              metrics=self._metrics())

        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())

        u = self._pop()
        if u is None:
            self.no_path = True
            return StepResult(status="no_path", metrics=self._metrics())

        self.popped_count += 1
        self.open_set.discard(u)
        self.closed_set.add(u)

        if u == self.goal:
            self.done = True
            self.path = reconstruct_path(self.parent, self.goal, self.start)
            return StepResult(status="done", closed=[u], current=u,
                              path=list(self.path), metrics=self._metrics())

        opened_now = self._expand(u)
        self.open_set.update(opened_now)
        return StepResult(status="running", opened=opened_now, closed=[u],
                          current=u, metrics=self._metrics())

    # -------------------- metrics --------------------

    def _metrics(self) -> dict:
        total_cost = None
        if self.done:
            # moves at uniform cost; zero when start is the goal
            total_cost = len(self.path) + 1 if self.goal in self.parent else 0
        return {
            "algo": self.name,
            "popped": self.popped_count,
            "open_size": len(self.open_set),
            "closed_count": len(self.closed_set),
            "path_len": len(self.path),
            "total_cost": total_cost,
        }
