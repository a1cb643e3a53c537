# src/gridpath/config.py
"""
Defaults and runtime settings for the visualizer.

Settings resolve in this order (later wins):
1. module defaults below
2. environment: GRIDPATH_ALGO, GRIDPATH_DELAY_MS, GRIDPATH_MAP, GRIDPATH_LOG_LEVEL
3. CLI: --algo=<name> --delay=<ms> --map=<path> --log-level=<LEVEL>
"""
import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

log = logging.getLogger(__name__)

ROWS = 20
COLS = 40
DEFAULT_START = (10, 6)
DEFAULT_GOAL = (10, 32)
WALL_DENSITY = 0.26

DEFAULT_ALGORITHM = "astar"
DEFAULT_DELAY_MS = 20
MIN_DELAY_MS = 0
MAX_DELAY_MS = 500
DEFAULT_LOG_LEVEL = "INFO"


@dataclass
class Settings:
    algorithm: str = DEFAULT_ALGORITHM
    delay_ms: int = DEFAULT_DELAY_MS
    map_path: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL


def clamp_delay(ms: int) -> int:
    return max(MIN_DELAY_MS, min(MAX_DELAY_MS, int(ms)))


def _parse_delay(raw: str, fallback: int) -> int:
    try:
        return clamp_delay(int(raw))
    except ValueError:
        log.warning("Ignoring invalid delay %r, using %d ms", raw, fallback)
        return fallback


def resolve_settings(argv: Optional[Sequence[str]] = None,
                     environ: Optional[Mapping[str, str]] = None) -> Settings:
    argv = sys.argv[1:] if argv is None else argv
    environ = os.environ if environ is None else environ

    s = Settings()
    s.algorithm = environ.get("GRIDPATH_ALGO", s.algorithm).lower()
    if "GRIDPATH_DELAY_MS" in environ:
        s.delay_ms = _parse_delay(environ["GRIDPATH_DELAY_MS"], s.delay_ms)
    s.map_path = environ.get("GRIDPATH_MAP") or None
    s.log_level = environ.get("GRIDPATH_LOG_LEVEL", s.log_level).upper()

    for arg in argv:
        if arg.startswith("--algo="):
            s.algorithm = arg.split("=", 1)[1].lower()
        elif arg.startswith("--delay="):
            s.delay_ms = _parse_delay(arg.split("=", 1)[1], s.delay_ms)
        elif arg.startswith("--map="):
            s.map_path = arg.split("=", 1)[1] or None
        elif arg.startswith("--log-level="):
            s.log_level = arg.split("=", 1)[1].upper()
    return s
