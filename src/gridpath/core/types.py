# src/gridpath/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Optional, Dict, Any, NamedTuple, Iterable, Protocol
import random

from gridpath import config


class Position(NamedTuple):
    row: int
    col: int


Offset = Tuple[int, int]

# down, up, right, left -- ties in every algorithm follow this order
OFFSETS: Tuple[Offset, ...] = ((1, 0), (-1, 0), (0, 1), (0, -1))


class CellState(str, Enum):
    NONE = ""
    FRONTIER = "frontier"
    VISITED = "visited"
    PATH = "path"


@dataclass
class Cell:
    row: int
    col: int
    is_wall: bool = False
    is_start: bool = False
    is_goal: bool = False
    state: CellState = CellState.NONE

    @property
    def is_endpoint(self) -> bool:
        return self.is_start or self.is_goal


@dataclass
class Grid:
    rows: int
    cols: int
    cells: List[List[Cell]]            # [row][col]
    start: Position
    goal: Position

    @classmethod
    def create(cls, rows: int = config.ROWS, cols: int = config.COLS,
               start: Optional[Tuple[int, int]] = None,
               goal: Optional[Tuple[int, int]] = None) -> "Grid":
        """Build an empty grid with start/goal placed (defaults clamped to the size)."""
        if rows < 1 or cols < 1:
            raise ValueError(f"grid must be at least 1x1, got {rows}x{cols}")
        cells = [[Cell(r, c) for c in range(cols)] for r in range(rows)]
        home_s, home_g = default_endpoints(rows, cols)
        s = Position(*start) if start is not None else home_s
        g = Position(*goal) if goal is not None else home_g
        if s == g:
            raise ValueError("start and goal must be different cells")
        grid = cls(rows, cols, cells, s, g)
        if not grid.in_bounds(*s) or not grid.in_bounds(*g):
            raise ValueError("start/goal out of bounds")
        grid.cell(s).is_start = True
        grid.cell(g).is_goal = True
        return grid

    # -------------------- queries --------------------

    def in_bounds(self, r: int, c: int) -> bool:
        return 0 <= r < self.rows and 0 <= c < self.cols

    def cell(self, pos: Tuple[int, int]) -> Cell:
        r, c = pos
        return self.cells[r][c]

    def is_wall(self, r: int, c: int) -> bool:
        return self.cells[r][c].is_wall

    def neighbors(self, r: int, c: int) -> List[Position]:
        """In-bounds, non-wall 4-neighbors in fixed down/up/right/left order."""
        out: List[Position] = []
        for dr, dc in OFFSETS:
            nr, nc = r + dr, c + dc
            if self.in_bounds(nr, nc) and not self.cells[nr][nc].is_wall:
                out.append(Position(nr, nc))
        return out

    def iter_cells(self) -> Iterable[Cell]:
        for row in self.cells:
            yield from row

    def walls(self) -> List[Position]:
        return [Position(n.row, n.col) for n in self.iter_cells() if n.is_wall]

    def count_state(self, state: CellState) -> int:
        return sum(1 for n in self.iter_cells() if n.state == state)

    def visited_count(self) -> int:
        return self.count_state(CellState.VISITED)

    # -------------------- editing --------------------

    def toggle_wall(self, r: int, c: int) -> None:
        if not self.in_bounds(r, c):
            return
        node = self.cells[r][c]
        if node.is_endpoint:
            return
        node.is_wall = not node.is_wall

    def set_start(self, r: int, c: int) -> None:
        if not self.in_bounds(r, c) or (r, c) == self.goal:
            return
        old = self.cell(self.start)
        old.is_start = False
        old.state = CellState.NONE
        self.start = Position(r, c)
        node = self.cells[r][c]
        node.is_wall = False
        node.is_start = True
        node.state = CellState.NONE

    def set_goal(self, r: int, c: int) -> None:
        if not self.in_bounds(r, c) or (r, c) == self.start:
            return
        old = self.cell(self.goal)
        old.is_goal = False
        old.state = CellState.NONE
        self.goal = Position(r, c)
        node = self.cells[r][c]
        node.is_wall = False
        node.is_goal = True
        node.state = CellState.NONE

    def set_state(self, pos: Tuple[int, int], state: CellState) -> None:
        """Paint exploration state; start and goal keep their own identity."""
        node = self.cell(pos)
        if node.is_endpoint:
            return
        node.state = state

    def clear_visited(self) -> None:
        for node in self.iter_cells():
            node.state = CellState.NONE

    def reset(self) -> None:
        for node in self.iter_cells():
            node.is_wall = False
            node.is_start = False
            node.is_goal = False
            node.state = CellState.NONE
        self.start, self.goal = default_endpoints(self.rows, self.cols)
        self.cell(self.start).is_start = True
        self.cell(self.goal).is_goal = True

    def randomize_walls(self, density: float = config.WALL_DENSITY,
                        rng: Optional[random.Random] = None) -> None:
        rng = rng or random.Random()
        self.clear_visited()
        for node in self.iter_cells():
            if node.is_endpoint:
                continue
            node.is_wall = rng.random() < density


def _clamp(pos: Tuple[int, int], rows: int, cols: int) -> Position:
    r, c = pos
    return Position(min(max(r, 0), rows - 1), min(max(c, 0), cols - 1))


def default_endpoints(rows: int, cols: int) -> Tuple[Position, Position]:
    """Home start/goal, clamped into the grid; corners when clamping makes them meet."""
    s = _clamp(config.DEFAULT_START, rows, cols)
    g = _clamp(config.DEFAULT_GOAL, rows, cols)
    if s == g:
        s, g = Position(0, 0), Position(rows - 1, cols - 1)
    return s, g


def manhattan(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def reconstruct_path(parent: Dict[Position, Position], goal: Position,
                     start: Position) -> List[Position]:
    """
    Walk predecessors back from goal and return the cells strictly between
    start and goal, in start -> goal order. Empty when goal was never reached.
    """
    if goal not in parent:
        return []
    path: List[Position] = []
    cur = parent[goal]
    while cur in parent and cur != start:
        path.append(cur)
        cur = parent[cur]
    path.reverse()
    return path


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "no_path" | "cancelled"
    opened: List[Position] = field(default_factory=list)
    closed: List[Position] = field(default_factory=list)
    current: Optional[Position] = None
    path: Optional[List[Position]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def finished(self) -> bool:
        return self.status in ("done", "no_path", "cancelled")


class Pathfinder(Protocol):
    """Stepping API shared by every search: init(grid) - reset() - step() -> StepResult."""

    name: str
    parent: Dict[Position, Position]

    def init(self, grid: Grid, start: Optional[Tuple[int, int]] = None,
             goal: Optional[Tuple[int, int]] = None) -> None: ...

    def reset(self) -> None: ...

    def step(self) -> StepResult: ...
