# src/gridpath/app/viewer.py
#!/usr/bin/env python3
"""
Grid Pathfinding Viewer: Controls + Metrics

- Mouse:
    click                  -> toggle wall
    shift+click            -> move start
    alt/ctrl/cmd+click     -> move goal
- Keyboard:
    [1]/[2]/[3]/[4]  -> select algorithm (BFS / DFS / Dijkstra / A*)
    [SPACE]/[ENTER]  -> run/pause
    [N]              -> single step
    [X]              -> cancel the current run
    [C]              -> clear visited
    [R]              -> reset grid
    [W]              -> random walls
    [+]/[-]          -> faster / slower
    [Q]/[ESC]        -> quit

Settings:
- ENV: GRIDPATH_ALGO, GRIDPATH_DELAY_MS, GRIDPATH_MAP, GRIDPATH_LOG_LEVEL
- CLI: --algo=bfs|dfs|dijkstra|astar --delay=<ms> --map=<path> --log-level=<LEVEL>
"""

import logging
import sys
import time
import textwrap
from typing import Dict, List, Optional, Tuple

import pygame

from gridpath import config
from gridpath.core.maps import MapError, load_map
from gridpath.core.runner import ALGORITHM_DESCRIPTIONS, SearchRun
from gridpath.core.session import Session
from gridpath.core.types import CellState, Grid, Position

log = logging.getLogger(__name__)

# ---------- Layout ----------
PANEL_W = 380            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_SIZE_DEFAULT = 24
FONT_NAME = None  # default pygame font
DELAY_STEP_MS = 10

ALGO_KEYS = {
    pygame.K_1: "bfs",
    pygame.K_2: "dfs",
    pygame.K_3: "dijkstra",
    pygame.K_4: "astar",
}
ALGO_LABELS = {"bfs": "BFS", "dfs": "DFS", "dijkstra": "Dijkstra", "astar": "A*"}

# Colors
WHITE        = (255, 255, 255)
BLACK        = (  0,   0,   0)
WALL_DARK    = ( 30,  34,  42)
BLUE         = ( 70, 130, 180)
RED          = (220,  50,  47)
ASPHALT_GRAY = (200, 200, 200)
NEON_MINT    = (  0, 255, 200)

STATE_COLORS: Dict[CellState, Tuple[int, int, int]] = {
    CellState.FRONTIER: (120, 190, 255),
    CellState.VISITED:  (235, 120, 175),
    CellState.PATH:     NEON_MINT,
}

CARD_BG     = (24, 28, 36, 220)
CARD_HI     = (255, 255, 255, 18)
TEXT_LIGHT  = (230, 235, 240)
TEXT_DIM    = (160, 168, 180)
ACCENT_GOLD = (255, 210, 0)

GOAL_MODS = pygame.KMOD_ALT | pygame.KMOD_CTRL | pygame.KMOD_META


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, togglable: bool = False):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self.togglable = togglable
        self.active = False  # highlight state

    def set_active(self, value: bool):
        self.active = bool(value)

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bg_idle   = (36, 40, 48, 220)
        bg_hover  = (46, 50, 60, 230)
        bg_active = (58, 86, 160, 235)
        border_active = (120, 170, 255, 255)

        if self.active and self.togglable:
            bg = bg_active
        elif self.hover:
            bg = bg_hover
        else:
            bg = bg_idle

        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)
        hi = pygame.Surface((self.rect.width, 14), pygame.SRCALPHA)
        pygame.draw.rect(hi, (255, 255, 255, 20), hi.get_rect(), border_radius=10)
        base.blit(hi, (0, 0))
        screen.blit(base, self.rect.topleft)

        if self.active and self.togglable:
            pygame.draw.rect(screen, border_active, self.rect, width=2, border_radius=10)

        text = font.render(self.label, True, (235, 238, 242))
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        """Returns True when the click landed on this button."""
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.callback()
                return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, session: Session):
        pygame.init()

        self.session = session
        self.font_small = pygame.font.Font(FONT_NAME, 16)
        self.font = pygame.font.Font(FONT_NAME, 20)
        self.font_big = pygame.font.Font(FONT_NAME, 24)

        grid = session.grid
        self.cell_size = self._auto_cell_size(grid)
        grid_px_w = GRID_MARGIN * 2 + grid.cols * self.cell_size
        grid_px_h = GRID_MARGIN * 2 + grid.rows * self.cell_size
        win_w = grid_px_w + PANEL_W
        win_h = max(grid_px_h, 640)

        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption("Grid Pathfinding")

        self._buttons: List[UIButton] = []
        self._layout(win_w, win_h)

        self.run: Optional[SearchRun] = None
        self.running = False
        self.state = "Idle"
        self.clock = pygame.time.Clock()
        self._last_step_t = 0.0
        self._last_metrics: dict = {}

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and place the grid left of the panel."""
        grid = self.session.grid
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)
        self.cell_size = int(max(6, min(avail_w // grid.cols, avail_h // grid.rows)))

        plate_w = grid.cols * self.cell_size + 2 * GRID_MARGIN
        plate_h = grid.rows * self.cell_size + 2 * GRID_MARGIN
        left_x = max(0, (win_w - PANEL_W - plate_w) // 2)
        top_y = max(0, (win_h - plate_h) // 2)

        self.canvas_rect = pygame.Rect(left_x, top_y, plate_w, plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN, self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(max(self.canvas_rect.right, win_w - PANEL_W), 0,
                                       PANEL_W, win_h)
        self._build_buttons()

    def _auto_cell_size(self, grid: Grid) -> int:
        target_h = 720 - GRID_MARGIN * 2
        return max(10, min(CELL_SIZE_DEFAULT, target_h // grid.rows))

    def cell_at(self, pos: Tuple[int, int]) -> Optional[Position]:
        ox, oy = self._grid_origin
        x, y = pos
        if x < ox or y < oy:
            return None
        r, c = (y - oy) // self.cell_size, (x - ox) // self.cell_size
        return Position(r, c) if self.session.grid.in_bounds(r, c) else None

    # ---------- main loop ----------
    def loop(self):
        while True:
            for e in pygame.event.get():
                self.handle_event(e)
            if self.running:
                self._tick_algorithm()
            self._draw()
            self.clock.tick(60)

    def _tick_algorithm(self):
        t0 = time.time()
        if t0 - self._last_step_t >= self.session.delay_ms / 1000.0:
            self._last_step_t = t0
            self._do_step()

    def _ensure_run(self) -> Optional[SearchRun]:
        if self.run is None or self.run.finished:
            self.run = self.session.begin()
        return self.run

    def _do_step(self):
        run = self._ensure_run()
        if run is None:
            return
        res = run.advance()
        if res.metrics:
            self._last_metrics = res.metrics
        if run.finished:
            self.running = False
            self.state = {"done": "Done", "no_path": "No path",
                          "cancelled": "Cancelled"}[run.status]
        else:
            self.state = "Running" if self.running else "Paused"
        self._refresh_active_states()

    def handle_event(self, e: pygame.event.Event):
        if e.type == pygame.QUIT:
            self._quit()
        elif e.type == pygame.KEYDOWN:
            self._handle_key(e.key)
        elif e.type == pygame.VIDEORESIZE:
            self.screen = pygame.display.set_mode((e.w, e.h), pygame.RESIZABLE)
            self._layout(e.w, e.h)
        elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
            consumed = False
            for b in self._buttons:
                consumed = b.handle_mouse(e) or consumed
            if not consumed and e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                self.click_cell(e.pos, pygame.key.get_mods())

    def _handle_key(self, key: int):
        if key in (pygame.K_ESCAPE, pygame.K_q):
            self._quit()
        elif key in (pygame.K_SPACE, pygame.K_RETURN):
            self._toggle_run()
        elif key == pygame.K_n:
            self.running = False
            self._do_step()
        elif key == pygame.K_x:
            self._cancel()
        elif key == pygame.K_c:
            self._clear_visited()
        elif key == pygame.K_r:
            self._reset()
        elif key == pygame.K_w:
            self._randomize()
        elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            self._bump_delay(-DELAY_STEP_MS)
        elif key in (pygame.K_MINUS, pygame.K_UNDERSCORE, pygame.K_KP_MINUS):
            self._bump_delay(+DELAY_STEP_MS)
        elif key in ALGO_KEYS:
            self._switch_algo(ALGO_KEYS[key])

    def click_cell(self, pos: Tuple[int, int], mods: int = 0):
        cell = self.cell_at(pos)
        if cell is None:
            return
        if mods & pygame.KMOD_SHIFT:
            self.session.set_start(*cell)
        elif mods & GOAL_MODS:
            self.session.set_goal(*cell)
        else:
            self.session.toggle_wall(*cell)

    def _quit(self):
        pygame.quit()
        sys.exit(0)

    # ---------- actions ----------
    def _toggle_run(self):
        if self.session.is_running:
            self.running = not self.running
            self.state = "Running" if self.running else "Paused"
        elif self._ensure_run() is not None:
            self.running = True
            self.state = "Running"
            self._last_metrics = self.run.metrics
        self._refresh_active_states()

    def _cancel(self):
        if self.run is not None and not self.run.finished:
            self.session.cancel()
            self._do_step()

    def _clear_visited(self):
        self.session.clear_visited()
        self._reset_overlays()

    def _reset(self):
        self.session.reset()
        self._reset_overlays()

    def _randomize(self):
        self.session.randomize_walls()
        self._reset_overlays()

    def _switch_algo(self, name: str):
        if self.session.is_running:
            return
        self.session.select(name)
        self._reset_overlays()

    def _bump_delay(self, dv: int):
        self.session.set_delay(self.session.delay_ms + dv)

    def _reset_overlays(self):
        if self.session.is_running:
            return
        self.run = None
        self.running = False
        self.state = "Idle"
        self._last_metrics = {}
        self._refresh_active_states()

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        top = (24, 26, 32); bot = (36, 40, 48)
        for y in range(h):
            t = y / max(1, h - 1)
            c = (
                int(top[0] + (bot[0] - top[0]) * t),
                int(top[1] + (bot[1] - top[1]) * t),
                int(top[2] + (bot[2] - top[2]) * t),
            )
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin
        grid = self.session.grid

        for node in grid.iter_cells():
            rect = pygame.Rect(ox + node.col * cs, oy + node.row * cs, cs, cs)
            if node.is_start:
                color = BLUE
            elif node.is_goal:
                color = RED
            elif node.is_wall:
                color = WALL_DARK
            else:
                color = STATE_COLORS.get(node.state, ASPHALT_GRAY)
            pygame.draw.rect(self.screen, color, rect)
            pygame.draw.rect(self.screen, BLACK, rect, 1)

        for pos, label in ((grid.start, "S"), (grid.goal, "G")):
            cx = ox + pos.col * cs + cs // 2
            cy = oy + pos.row * cs + cs // 2
            txt = self.font_small.render(label, True, WHITE)
            self.screen.blit(txt, txt.get_rect(center=(cx, cy)))

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 300  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 34
        gap = 8
        half = (w - 8) // 2

        def add(label, cb, rect, *, togglable=False, store_as: Optional[str] = None):
            btn = UIButton(label, rect, cb, togglable=togglable)
            self._buttons.append(btn)
            if store_as:
                setattr(self, store_as, btn)

        add("Run / Pause", self._toggle_run, pygame.Rect(x, y, w, h),
            togglable=True, store_as="btn_run"); y += h + gap
        add("Step Once", lambda: self._handle_key(pygame.K_n), pygame.Rect(x, y, half, h))
        add("Cancel", self._cancel, pygame.Rect(x + half + 8, y, half, h)); y += h + gap
        add("Clear Visited", self._clear_visited, pygame.Rect(x, y, half, h))
        add("Reset", self._reset, pygame.Rect(x + half + 8, y, half, h)); y += h + gap
        add("Random Walls", self._randomize, pygame.Rect(x, y, w, h)); y += h + gap
        add("Slower", lambda: self._bump_delay(+DELAY_STEP_MS), pygame.Rect(x, y, half, h))
        add("Faster", lambda: self._bump_delay(-DELAY_STEP_MS),
            pygame.Rect(x + half + 8, y, half, h)); y += h + gap

        for i, name in enumerate(("bfs", "dfs", "dijkstra", "astar")):
            bx = x if i % 2 == 0 else x + half + 8
            add(f"Algo: {ALGO_LABELS[name]}", (lambda n=name: self._switch_algo(n)),
                pygame.Rect(bx, y, half, h), togglable=True, store_as=f"btn_algo_{name}")
            if i % 2 == 1:
                y += h + gap

        self._refresh_active_states()

    def _refresh_active_states(self):
        if hasattr(self, "btn_run"):
            self.btn_run.set_active(getattr(self, "running", False))
        for name in ALGO_LABELS:
            btn = getattr(self, f"btn_algo_{name}", None)
            if btn is not None:
                btn.set_active(self.session.algorithm == name)

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card_h = 280
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0, 0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, font=None, color=TEXT_LIGHT):
            nonlocal y0
            surf = (font or self.font).render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 4

        line("Metrics", self.font_big, ACCENT_GOLD)
        m = self._last_metrics
        line(f"Visited: {m.get('popped', 0)}   Open: {m.get('open_size', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        if m.get("total_cost") is not None:
            line(f"Moves: {m['total_cost']}")
        line(f"Algo: {ALGO_LABELS[self.session.algorithm]}   State: {self.state}")
        line(f"Delay: {self.session.delay_ms} ms/step")
        line("-" * 30)
        for text in textwrap.wrap(ALGORITHM_DESCRIPTIONS[self.session.algorithm], 44):
            line(text, self.font_small, TEXT_DIM)

        for b in self._buttons:
            b.draw(self.screen, self.font_small)


# ---------- main ----------
def initial_grid(settings: config.Settings) -> Grid:
    """The configured map, or the default empty grid when none loads."""
    if settings.map_path:
        try:
            grid = load_map(settings.map_path)
            log.info("Loaded map %s (%dx%d)", settings.map_path, grid.rows, grid.cols)
            return grid
        except (OSError, MapError) as ex:
            log.error("Failed to load map %s: %s", settings.map_path, ex)
    return Grid.create()


def main(argv: Optional[List[str]] = None):
    settings = config.resolve_settings(argv)
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    session = Session(initial_grid(settings), algorithm=settings.algorithm,
                      delay_ms=settings.delay_ms)
    Viewer(session).loop()


if __name__ == "__main__":
    main()
