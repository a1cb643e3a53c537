import logging
import random

import pytest

from gridpath.core.astar import AStarAlgo
from gridpath.core.bfs import BFSAlgo
from gridpath.core.runner import (
    ALGORITHM_DESCRIPTIONS, ALGORITHMS, SearchRun, make_algorithm, resolve_algorithm,
)
from gridpath.core.session import Session
from gridpath.core.types import CellState, Grid

from conftest import CORRIDOR, CORRIDOR_ROUTE, grid_from_rows


def _no_wait():
    pass


def test_registry_covers_four_algorithms():
    assert set(ALGORITHMS) == {"bfs", "dfs", "dijkstra", "astar"}
    assert set(ALGORITHM_DESCRIPTIONS) == set(ALGORITHMS)
    assert isinstance(make_algorithm("BFS"), BFSAlgo)


def test_unknown_algorithm_falls_back_to_astar(caplog):
    with caplog.at_level(logging.WARNING, logger="gridpath.core.runner"):
        assert resolve_algorithm("zigzag") == "astar"
    assert "zigzag" in caplog.text
    assert isinstance(make_algorithm(None), AStarAlgo)


def test_run_paints_grid_and_forwards_path():
    session = Session(grid_from_rows(CORRIDOR), algorithm="dijkstra", delay_ms=0)
    seen_path = []
    parent = session.run(on_path=seen_path.append, step_boundary=_no_wait)
    grid = session.grid
    assert grid.goal in parent
    assert seen_path == CORRIDOR_ROUTE
    for p in CORRIDOR_ROUTE:
        assert grid.cell(p).state == CellState.PATH
    assert grid.cell(grid.start).state == CellState.NONE
    assert grid.cell(grid.goal).state == CellState.NONE
    assert not session.is_running


def test_run_marks_each_cell_visited_at_most_once():
    grid = Grid.create(10, 14, start=(0, 0), goal=(9, 13))
    grid.randomize_walls(0.25, random.Random(9))
    session = Session(grid, delay_ms=0)
    visited = []
    session.run("astar", on_visited=visited.append, step_boundary=_no_wait)
    assert len(visited) == len(set(visited)) <= 10 * 14


def test_run_starts_from_a_clean_slate():
    session = Session(Grid.create(3, 3, start=(0, 0), goal=(2, 2)), delay_ms=0)
    session.grid.set_state((0, 2), CellState.PATH)
    session.run("bfs", start=(0, 0), goal=(0, 1), step_boundary=_no_wait)
    assert session.grid.count_state(CellState.PATH) == 0


def test_second_run_while_busy_is_ignored():
    session = Session(grid_from_rows(CORRIDOR), delay_ms=0)
    run = session.begin("bfs")
    assert isinstance(run, SearchRun)
    assert session.begin("dfs") is None
    assert session.run("dfs", step_boundary=_no_wait) is None
    while not run.finished:
        run.advance()
    assert not session.is_running
    assert session.begin("dfs") is not None


def test_nested_run_from_callback_is_ignored():
    session = Session(grid_from_rows(CORRIDOR), delay_ms=0)
    nested = []

    def on_visited(_pos):
        nested.append(session.run("bfs", step_boundary=_no_wait))

    session.run("astar", on_visited=on_visited, step_boundary=_no_wait)
    assert nested and all(r is None for r in nested)


def test_edits_are_ignored_mid_run():
    session = Session(Grid.create(3, 3, start=(0, 0), goal=(2, 2)), delay_ms=0)
    session.begin("bfs")
    session.toggle_wall(1, 1)
    session.set_start(0, 1)
    session.select("dfs")
    assert not session.grid.is_wall(1, 1)
    assert session.grid.start == (0, 0)
    assert session.algorithm == "bfs"


def test_cancel_stops_at_next_boundary():
    session = Session(grid_from_rows(CORRIDOR), delay_ms=0)
    visits = []

    def on_visited(pos):
        visits.append(pos)
        if len(visits) == 3:
            session.cancel()

    parent = session.run("bfs", on_visited=on_visited, step_boundary=_no_wait)
    assert len(visits) == 3
    assert session.grid.goal not in parent
    assert session.grid.count_state(CellState.PATH) == 0
    assert not session.is_running


def test_cooperative_cancel():
    session = Session(grid_from_rows(CORRIDOR), delay_ms=0)
    run = session.begin("dfs")
    run.advance()
    session.cancel()
    res = run.advance()
    assert res.status == "cancelled"
    assert run.finished and run.status == "cancelled"
    assert not session.is_running


def test_search_run_metrics_track_progress():
    grid = grid_from_rows(CORRIDOR)
    run = SearchRun(make_algorithm("astar"), grid)
    assert run.metrics == {"algo": "A*"}
    while not run.finished:
        run.advance()
    assert run.status == "done"
    assert run.metrics["path_len"] == len(CORRIDOR_ROUTE)
    assert run.metrics["total_cost"] == len(CORRIDOR_ROUTE) + 1
    assert run.advance().status == "done"


def test_delay_is_clamped():
    session = Session(delay_ms=-5)
    assert session.delay_ms == 0
    session.set_delay(10_000)
    assert session.delay_ms == 500


def test_session_randomize_uses_its_rng():
    a = Session(Grid.create(8, 8, start=(0, 0), goal=(7, 7)), rng=random.Random(3))
    b = Session(Grid.create(8, 8, start=(0, 0), goal=(7, 7)), rng=random.Random(3))
    a.randomize_walls()
    b.randomize_walls()
    assert a.grid.walls() == b.grid.walls()


def test_failing_callback_releases_the_session():
    session = Session(grid_from_rows(CORRIDOR), delay_ms=0)

    def on_visited(_pos):
        raise RuntimeError("sink broke")

    run = session.begin("bfs", on_visited=on_visited)
    with pytest.raises(RuntimeError, match="sink broke"):
        run.advance()
    assert run.status == "cancelled"
    assert not session.is_running
    assert session.begin("dfs") is not None


def test_failing_callback_in_run_propagates():
    session = Session(grid_from_rows(CORRIDOR), delay_ms=0)

    def on_path(_pos):
        raise RuntimeError("sink broke")

    with pytest.raises(RuntimeError):
        session.run("astar", on_path=on_path, step_boundary=_no_wait)
    assert not session.is_running
    session.toggle_wall(0, 1)
    assert session.grid.is_wall(0, 1)


def test_out_of_bounds_overrides_fall_back_to_grid_endpoints():
    grid = Grid.create(3, 3, start=(0, 0), goal=(2, 2))
    session = Session(grid, delay_ms=0)
    visited = []
    parent = session.run("bfs", start=(-1, 0), goal=(2, 5),
                         on_visited=visited.append, step_boundary=_no_wait)
    assert visited[0] == (0, 0)
    assert visited[-1] == (2, 2)
    assert grid.goal in parent
    assert all(grid.in_bounds(*p) for p in visited)
