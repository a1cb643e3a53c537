# src/gridpath/core/maps.py
#!/usr/bin/env python3
"""
JSON map files:

    {
      "rows": 5, "cols": 7,
      "start": [0, 0], "goal": [4, 6],
      "cells": [[0, 1, 0, ...], ...]     # 1 = wall, [row][col]
    }
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

from gridpath.core.types import Grid


class MapError(ValueError):
    """Map file is malformed or describes an impossible grid."""


def _pair(data: Dict[str, Any], key: str):
    try:
        r, c = data[key]
        return int(r), int(c)
    except KeyError:
        raise MapError(f"missing {key!r}") from None
    except (TypeError, ValueError):
        raise MapError(f"{key!r} must be a [row, col] pair") from None


def grid_from_dict(data: Dict[str, Any]) -> Grid:
    try:
        rows = int(data["rows"])
        cols = int(data["cols"])
    except KeyError as ex:
        raise MapError(f"missing {ex.args[0]!r}") from None
    except (TypeError, ValueError):
        raise MapError("rows/cols must be integers") from None
    start = _pair(data, "start")
    goal = _pair(data, "goal")
    cells = data.get("cells", [])

    if not isinstance(cells, list) or not all(isinstance(row, list) for row in cells):
        raise MapError("cells must be a list of rows")
    if cells and (len(cells) != rows or any(len(r) != cols for r in cells)):
        raise MapError("cells size mismatch")
    try:
        grid = Grid.create(rows, cols, start=start, goal=goal)
    except ValueError as ex:
        raise MapError(str(ex)) from ex

    for r, row in enumerate(cells):
        for c, v in enumerate(row):
            if v not in (0, 1) or isinstance(v, bool):
                raise MapError(f"cells[{r}][{c}] must be 0 or 1")
            if v == 1 and (r, c) not in (grid.start, grid.goal):
                grid.cells[r][c].is_wall = True
    return grid


def load_map(path: Union[str, Path]) -> Grid:
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as ex:
            raise MapError(f"{path}: invalid JSON ({ex.msg})") from ex
        except UnicodeDecodeError as ex:
            raise MapError(f"{path}: not UTF-8 text") from ex
    if not isinstance(data, dict):
        raise MapError(f"{path}: top level must be an object")
    return grid_from_dict(data)
