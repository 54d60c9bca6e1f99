import time
from typing import Callable

from esper import World

from tilefall.components.game_state import GameMode
from tilefall.components.grid import Grid
from tilefall.components.session_state import SessionPhase
from tilefall.events.bus import (EventBus, EVENT_BOARD_RENDER, EVENT_INPUT_LOCK_CHANGED,
                                 EVENT_SESSION_COMPLETED, EVENT_SESSION_STARTED)
from tilefall.rendering.board_renderer import BoardRenderer
from tilefall.rendering.context import RenderContext, build_render_context
from tilefall.rendering.hud_renderer import HudRenderer, format_elapsed
from tilefall.systems.board_ops import get_grid, get_palette
from tilefall.ui.layout import compute_board_geometry
from tilefall.utils.game_state import get_game_mode
from tilefall.utils.session_state import get_or_create_session_state


class RenderSystem:
    """Draws the latest board snapshot plus in-flight transitions.

    The snapshot comes from EVENT_BOARD_RENDER; transitions are read from the
    animation components every frame.
    """
    def __init__(self, world: World, event_bus: EventBus, window, clock: Callable[[], float] | None = None):
        self.world = world
        self.event_bus = event_bus
        self.window = window
        self._clock = clock or time.monotonic
        self.event_bus.subscribe(EVENT_BOARD_RENDER, self.on_board_render)
        self.event_bus.subscribe(EVENT_INPUT_LOCK_CHANGED, self.on_lock_changed)
        self.event_bus.subscribe(EVENT_SESSION_STARTED, self.on_session_started)
        self.event_bus.subscribe(EVENT_SESSION_COMPLETED, self.on_session_completed)
        self.snapshot: Grid | None = None
        self.falls = []
        self.locked = False
        self.summary: tuple[float, int] | None = None
        self._render_ctx: RenderContext | None = None
        self._board_renderer = BoardRenderer()
        self._hud_renderer = HudRenderer()

    @property
    def last_draw_coords(self):
        return self._board_renderer.last_draw_coords

    def on_board_render(self, sender, **kwargs):
        self.snapshot = kwargs.get('grid')
        self.falls = list(kwargs.get('falls') or [])

    def on_lock_changed(self, sender, **kwargs):
        self.locked = bool(kwargs.get('locked'))

    def on_session_started(self, sender, **kwargs):
        self.summary = None
        self.locked = False

    def on_session_completed(self, sender, **kwargs):
        self.summary = (kwargs.get('elapsed', 0.0), kwargs.get('move_count', 0))

    def build_frame(self) -> RenderContext:
        grid = self.snapshot if self.snapshot is not None else get_grid(self.world)
        geometry = compute_board_geometry(self.window.width, self.window.height, grid.dimension())
        ctx = build_render_context(
            self.world,
            self.window.width,
            self.window.height,
            geometry,
            grid,
            locked=self.locked,
        )
        self._render_ctx = ctx
        return ctx

    def process(self, headless: bool | None = None):
        arcade = None
        if headless is not True:
            # Local import keeps tests headless without creating a window.
            import arcade
            if headless is None:
                try:
                    arcade.get_window()
                    headless = False
                except Exception:
                    headless = True
        ctx = self.build_frame()
        palette = get_palette(self.world)
        mode = get_game_mode(self.world)
        if mode is GameMode.TITLE:
            if not headless:
                self._hud_renderer.render_banner(arcade, ctx, "Tilefall", "Click to start")
            return
        self._board_renderer.render(arcade, ctx, palette, headless=headless)
        if headless:
            return
        state = get_or_create_session_state(self.world)
        self._hud_renderer.render_status(arcade, ctx, state.move_count, state.elapsed_at(self._clock()))
        self._hud_renderer.render_buttons(arcade, ctx)
        if state.phase is SessionPhase.COMPLETED and self.summary is not None:
            elapsed, moves = self.summary
            self._hud_renderer.render_banner(
                arcade,
                ctx,
                "Board cleared!",
                f"{moves} moves in {format_elapsed(elapsed)} - click for a new game",
            )
