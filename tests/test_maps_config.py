import json
from pathlib import Path

import pytest

from gridpath import config
from gridpath.core.maps import MapError, grid_from_dict, load_map

from conftest import CORRIDOR, grid_from_rows

MAPS_DIR = Path(__file__).resolve().parents[1] / "maps"


def test_sample_corridor_map_loads():
    grid = load_map(MAPS_DIR / "corridor.json")
    expected = grid_from_rows(CORRIDOR)
    assert (grid.rows, grid.cols) == (5, 7)
    assert grid.start == expected.start and grid.goal == expected.goal
    assert grid.walls() == expected.walls()


def test_walls_on_endpoints_are_dropped():
    grid = grid_from_dict({
        "rows": 1, "cols": 3, "start": [0, 0], "goal": [0, 2],
        "cells": [[1, 1, 1]],
    })
    assert grid.walls() == [(0, 1)]


def test_cells_are_optional():
    grid = grid_from_dict({"rows": 2, "cols": 2, "start": [0, 0], "goal": [1, 1]})
    assert grid.walls() == []


@pytest.mark.parametrize("data, message", [
    ({"cols": 2, "start": [0, 0], "goal": [1, 1]}, "rows"),
    ({"rows": 2, "cols": 2, "goal": [1, 1]}, "start"),
    ({"rows": 2, "cols": 2, "start": 5, "goal": [1, 1]}, "start"),
    ({"rows": 2, "cols": 2, "start": [0, 0], "goal": [0, 0]}, "different"),
    ({"rows": 2, "cols": 2, "start": [0, 0], "goal": [4, 4]}, "out of bounds"),
    ({"rows": 2, "cols": 2, "start": [0, 0], "goal": [1, 1], "cells": [[0, 0]]}, "mismatch"),
    ({"rows": 2, "cols": 2, "start": [0, 0], "goal": [1, 1], "cells": 5}, "list of rows"),
    ({"rows": 2, "cols": 2, "start": [0, 0], "goal": [1, 1], "cells": [5, 6]}, "list of rows"),
    ({"rows": 2, "cols": 2, "start": [0, 0], "goal": [1, 1],
      "cells": [["x", 0], [0, 0]]}, r"cells\[0\]\[0\]"),
    ({"rows": 2, "cols": 2, "start": [0, 0], "goal": [1, 1],
      "cells": [[0, 0], [0, None]]}, r"cells\[1\]\[1\]"),
    ({"rows": 2, "cols": 2, "start": [0, 0], "goal": [1, 1],
      "cells": [[0, 2], [0, 0]]}, "0 or 1"),
])
def test_bad_maps_raise(data, message):
    with pytest.raises(MapError, match=message):
        grid_from_dict(data)


def test_invalid_json_raises_map_error(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(MapError):
        load_map(path)


def test_non_utf8_file_raises_map_error(tmp_path):
    path = tmp_path / "latin.json"
    path.write_bytes(b"\xff\xfe{}")
    with pytest.raises(MapError, match="UTF-8"):
        load_map(path)


def test_top_level_must_be_object(tmp_path):
    path = tmp_path / "list.json"
    path.write_text(json.dumps([1, 2, 3]))
    with pytest.raises(MapError):
        load_map(path)


def test_settings_defaults():
    s = config.resolve_settings([], {})
    assert s.algorithm == config.DEFAULT_ALGORITHM
    assert s.delay_ms == config.DEFAULT_DELAY_MS
    assert s.map_path is None
    assert s.log_level == "INFO"


def test_settings_cli_beats_env():
    env = {"GRIDPATH_ALGO": "dfs", "GRIDPATH_DELAY_MS": "40", "GRIDPATH_MAP": "a.json"}
    s = config.resolve_settings(["--algo=BFS", "--delay=5", "--map=b.json",
                                 "--log-level=debug"], env)
    assert s.algorithm == "bfs"
    assert s.delay_ms == 5
    assert s.map_path == "b.json"
    assert s.log_level == "DEBUG"

    s = config.resolve_settings([], env)
    assert (s.algorithm, s.delay_ms, s.map_path) == ("dfs", 40, "a.json")


def test_bad_delay_keeps_previous_value():
    s = config.resolve_settings(["--delay=fast"], {"GRIDPATH_DELAY_MS": "70"})
    assert s.delay_ms == 70
    s = config.resolve_settings(["--delay=99999"], {})
    assert s.delay_ms == config.MAX_DELAY_MS
