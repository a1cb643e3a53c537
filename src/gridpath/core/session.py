# src/gridpath/core/session.py
#!/usr/bin/env python3
"""
Session: the grid plus at most one search in flight.

The session paints cell states (frontier / visited / path) on its grid and
then forwards each event to the caller's callbacks. A second run requested
while one is in flight is ignored and returns None.
"""

import logging
import random
from typing import Callable, Dict, Optional, Tuple

from gridpath import config
from gridpath.core.runner import (
    PositionSink, SearchRun, drive, make_algorithm, resolve_algorithm, sleeper,
)
from gridpath.core.types import CellState, Grid, Position

log = logging.getLogger(__name__)


class Session:
    def __init__(self, grid: Optional[Grid] = None, algorithm: str = config.DEFAULT_ALGORITHM,
                 delay_ms: int = config.DEFAULT_DELAY_MS, rng: Optional[random.Random] = None):
        self.grid = grid or Grid.create()
        self.algorithm = resolve_algorithm(algorithm)
        self.delay_ms = config.clamp_delay(delay_ms)
        self.rng = rng or random.Random()
        self.current: Optional[SearchRun] = None

    @property
    def is_running(self) -> bool:
        return self.current is not None

    # -------------------- editing (ignored mid-run) --------------------

    def select(self, algorithm: str) -> None:
        if self.is_running:
            return
        self.algorithm = resolve_algorithm(algorithm)

    def set_delay(self, delay_ms: int) -> None:
        self.delay_ms = config.clamp_delay(delay_ms)

    def toggle_wall(self, r: int, c: int) -> None:
        if not self.is_running:
            self.grid.toggle_wall(r, c)

    def set_start(self, r: int, c: int) -> None:
        if not self.is_running:
            self.grid.set_start(r, c)

    def set_goal(self, r: int, c: int) -> None:
        if not self.is_running:
            self.grid.set_goal(r, c)

    def clear_visited(self) -> None:
        if not self.is_running:
            self.grid.clear_visited()

    def reset(self) -> None:
        if not self.is_running:
            self.grid.reset()

    def randomize_walls(self, density: float = config.WALL_DENSITY) -> None:
        if not self.is_running:
            self.grid.randomize_walls(density, self.rng)

    def replace_grid(self, grid: Grid) -> bool:
        if self.is_running:
            return False
        self.grid = grid
        return True

    # -------------------- runs --------------------

    def begin(self, algorithm: Optional[str] = None, *,
              start: Optional[Tuple[int, int]] = None,
              goal: Optional[Tuple[int, int]] = None,
              on_frontier: Optional[PositionSink] = None,
              on_visited: Optional[PositionSink] = None,
              on_path: Optional[PositionSink] = None) -> Optional[SearchRun]:
        """Start a cooperative run the caller advances itself; None when busy."""
        if self.is_running:
            log.debug("Run requested while another is in flight; ignored")
            return None
        name = resolve_algorithm(algorithm) if algorithm is not None else self.algorithm
        self.algorithm = name
        self.grid.clear_visited()

        def painter(state: CellState, forward: Optional[PositionSink]) -> PositionSink:
            def _sink(pos: Position) -> None:
                self.grid.set_state(pos, state)
                if forward is not None:
                    forward(pos)
            return _sink

        self.current = SearchRun(
            make_algorithm(name), self.grid, start=start, goal=goal,
            on_frontier=painter(CellState.FRONTIER, on_frontier),
            on_visited=painter(CellState.VISITED, on_visited),
            on_path=painter(CellState.PATH, on_path),
            on_finish=self._release,
        )
        return self.current

    def run(self, algorithm: Optional[str] = None, delay_ms: Optional[int] = None, *,
            start: Optional[Tuple[int, int]] = None,
            goal: Optional[Tuple[int, int]] = None,
            on_frontier: Optional[PositionSink] = None,
            on_visited: Optional[PositionSink] = None,
            on_path: Optional[PositionSink] = None,
            step_boundary: Optional[Callable[[], None]] = None,
            ) -> Optional[Dict[Position, Position]]:
        """Blocking run to completion; returns the predecessor map, or None when busy."""
        run = self.begin(algorithm, start=start, goal=goal, on_frontier=on_frontier,
                         on_visited=on_visited, on_path=on_path)
        if run is None:
            return None
        boundary = step_boundary or sleeper(self.delay_ms if delay_ms is None else delay_ms)
        try:
            return drive(run, boundary)
        finally:
            if self.current is run:
                self._release(run)

    def cancel(self) -> None:
        if self.current is not None:
            self.current.cancel()

    def _release(self, run: SearchRun) -> None:
        if self.current is run:
            self.current = None
