# src/gridpath/core/runner.py
#!/usr/bin/env python3
"""
Drives a Pathfinder and turns its steps into ordered events.

    run = SearchRun(make_algorithm("bfs"), grid, on_visited=..., on_frontier=...)
    while not run.finished:
        run.advance()        # one visit; on_visited then on_frontier per neighbor
        step_boundary()      # the only suspension point

run_search() is that loop with a sleeping boundary. The pygame viewer calls
advance() from its frame loop instead.
"""

import logging
import time
from typing import Callable, Dict, List, Optional, Tuple, Type

from gridpath import config
from gridpath.core.astar import AStarAlgo
from gridpath.core.bfs import BFSAlgo
from gridpath.core.dfs import DFSAlgo
from gridpath.core.dijkstra import DijkstraAlgo
from gridpath.core.search import SearchAlgo
from gridpath.core.types import Grid, Pathfinder, Position, StepResult

log = logging.getLogger(__name__)

PositionSink = Callable[[Position], None]

ALGORITHMS: Dict[str, Type[SearchAlgo]] = {
    "bfs": BFSAlgo,
    "dfs": DFSAlgo,
    "dijkstra": DijkstraAlgo,
    "astar": AStarAlgo,
}

ALGORITHM_DESCRIPTIONS: Dict[str, str] = {
    "astar": (
        "A* prioritizes nodes with the lowest f = g + h, where g is path cost so far "
        "and h is a Manhattan estimate to the goal. With this admissible heuristic on "
        "a 4-way grid, it returns an optimal path while typically expanding fewer "
        "nodes than Dijkstra."
    ),
    "dijkstra": (
        "Dijkstra explores nodes in increasing cumulative cost using a priority queue. "
        "With non-negative edge weights it is optimal but often expands more nodes "
        "than A* because it lacks a heuristic guide."
    ),
    "bfs": (
        "Breadth-First Search expands layer by layer using a queue. On an unweighted "
        "grid every move costs 1, so the first time it reaches the goal you have the "
        "shortest path by hop count."
    ),
    "dfs": (
        "Depth-First Search dives down a branch via a stack before backtracking. It is "
        "fast to implement and highlights exploration order differences, but it is "
        "not guaranteed to find the shortest path."
    ),
}


def resolve_algorithm(name: Optional[str]) -> str:
    """Canonical registry key; anything unrecognized falls back to A*."""
    key = (name or "").strip().lower()
    if key in ALGORITHMS:
        return key
    log.warning("Unknown algorithm %r, falling back to %s", name, config.DEFAULT_ALGORITHM)
    return config.DEFAULT_ALGORITHM


def make_algorithm(name: Optional[str]) -> SearchAlgo:
    return ALGORITHMS[resolve_algorithm(name)]()


def _ignore(_pos: Position) -> None:
    pass


class SearchRun:
    """One in-flight search over a grid, emitting events as it advances."""

    def __init__(self, algo: Pathfinder, grid: Grid, *,
                 start: Optional[Tuple[int, int]] = None,
                 goal: Optional[Tuple[int, int]] = None,
                 on_frontier: Optional[PositionSink] = None,
                 on_visited: Optional[PositionSink] = None,
                 on_path: Optional[PositionSink] = None,
                 on_finish: Optional[Callable[["SearchRun"], None]] = None):
        self.algo = algo
        self.grid = grid
        self.on_frontier = on_frontier or _ignore
        self.on_visited = on_visited or _ignore
        self.on_path = on_path or _ignore
        self.on_finish = on_finish
        self.status = "running"
        self.path: List[Position] = []
        self.visits = 0
        self.cancelled = False
        self.last: Optional[StepResult] = None
        algo.init(grid, start, goal)
        log.info("%s started: start=%s goal=%s", algo.name, algo.start, algo.goal)

    @property
    def finished(self) -> bool:
        return self.status in ("done", "no_path", "cancelled")

    @property
    def predecessors(self) -> Dict[Position, Position]:
        return self.algo.parent

    @property
    def metrics(self) -> dict:
        return self.last.metrics if self.last else {"algo": self.algo.name}

    def cancel(self) -> None:
        """Stop at the next step boundary; no path is emitted."""
        self.cancelled = True

    def advance(self) -> StepResult:
        """Run one visit and dispatch its events; a no-op once finished."""
        if self.finished:
            return self.last or StepResult(status=self.status)
        if self.cancelled:
            self.last = StepResult(status="cancelled", metrics=self.metrics)
            self._finish("cancelled")
            return self.last

        try:
            res = self.algo.step()
            self.last = res
            if res.current is not None:
                self.visits += 1
                self.on_visited(res.current)
            for p in res.opened:
                self.on_frontier(p)

            if res.status == "done":
                self.path = list(res.path or [])
                for p in self.path:
                    self.on_path(p)
                self._finish("done")
            elif res.status == "no_path":
                self._finish("no_path")
        except BaseException:
            # a failing sink ends the run so the owner is released
            if not self.finished:
                self._finish("cancelled")
            raise
        return res

    def _finish(self, status: str) -> None:
        self.status = status
        log.info("%s finished: status=%s visited=%d path_len=%d",
                 self.algo.name, status, self.visits, len(self.path))
        if self.on_finish is not None:
            self.on_finish(self)


def sleeper(delay_ms: int) -> Callable[[], None]:
    seconds = max(0, delay_ms) / 1000.0
    def _boundary() -> None:
        if seconds:
            time.sleep(seconds)
    return _boundary


def drive(run: SearchRun, step_boundary: Callable[[], None]) -> Dict[Position, Position]:
    """Advance to completion, suspending once after every non-final visit."""
    while not run.finished:
        run.advance()
        if not run.finished:
            step_boundary()
    return run.predecessors


def run_search(name: Optional[str], grid: Grid,
               start: Optional[Tuple[int, int]] = None,
               goal: Optional[Tuple[int, int]] = None,
               delay_ms: int = 0, *,
               on_frontier: Optional[PositionSink] = None,
               on_visited: Optional[PositionSink] = None,
               on_path: Optional[PositionSink] = None,
               step_boundary: Optional[Callable[[], None]] = None) -> Dict[Position, Position]:
    """Run one search to completion and return its predecessor map."""
    run = SearchRun(make_algorithm(name), grid, start=start, goal=goal,
                    on_frontier=on_frontier, on_visited=on_visited, on_path=on_path)
    return drive(run, step_boundary or sleeper(delay_ms))
