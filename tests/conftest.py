from typing import List, Sequence

from gridpath.core.types import Grid, Position, manhattan


def grid_from_rows(rows: Sequence[str]) -> Grid:
    """'S' start, 'G' goal, '#' wall, '.' open."""
    start = goal = None
    for r, line in enumerate(rows):
        for c, ch in enumerate(line):
            if ch == "S":
                start = (r, c)
            elif ch == "G":
                goal = (r, c)
    grid = Grid.create(len(rows), len(rows[0]), start=start, goal=goal)
    for r, line in enumerate(rows):
        for c, ch in enumerate(line):
            if ch == "#":
                grid.toggle_wall(r, c)
    return grid


CORRIDOR = [
    "S..#..G",
    "##.#.##",
    "##.#.##",
    "##...##",
    "#######",
]

CORRIDOR_ROUTE = [
    (0, 1), (0, 2), (1, 2), (2, 2), (3, 2), (3, 3),
    (3, 4), (2, 4), (1, 4), (0, 4), (0, 5),
]


def assert_valid_route(grid: Grid, start: Position, goal: Position,
                       path: List[Position]) -> None:
    cells = [start, *path, goal]
    for a, b in zip(cells, cells[1:]):
        assert manhattan(a, b) == 1
    for p in path:
        assert not grid.cell(p).is_wall
    assert len(set(cells)) == len(cells)
