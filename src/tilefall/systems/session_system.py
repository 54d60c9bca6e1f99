from __future__ import annotations

import logging
import random
import time
from typing import Callable, Iterable, List

from esper import World

from tilefall.config import GameConfig
from tilefall.components.grid import Grid, Position
from tilefall.components.rotation import RotationDirection
from tilefall.components.session_state import PendingStage, SessionPhase, SessionState
from tilefall.events.bus import (
    EventBus,
    EVENT_ANIMATION_CANCELLED,
    EVENT_ANIMATION_COMPLETE,
    EVENT_ANIMATION_START,
    EVENT_BOARD_RENDER,
    EVENT_BOARD_ROTATED,
    EVENT_CELL_CLICK,
    EVENT_GRAVITY_APPLIED,
    EVENT_INPUT_LOCK_CHANGED,
    EVENT_INTENT_IGNORED,
    EVENT_MOVE_COUNTED,
    EVENT_REGION_CLEARED,
    EVENT_REGION_FOUND,
    EVENT_ROTATE_REQUEST,
    EVENT_SESSION_COMPLETED,
    EVENT_SESSION_RESET,
    EVENT_SESSION_START,
    EVENT_SESSION_STARTED,
    EVENT_TICK,
)
from tilefall.systems.board_ops import (
    apply_gravity,
    clear_positions,
    connected_region,
    fall_payload,
    get_grid,
    get_palette,
    region_color,
    rotate_grid,
    set_grid,
)
from tilefall.utils.session_state import get_or_create_session_state

logger = logging.getLogger(__name__)

_STAGE_KINDS = {
    PendingStage.REMOVAL: 'fade',
    PendingStage.FALL: 'fall',
    PendingStage.ROTATION: 'rotate',
}


class GameSessionSystem:
    """Sequences player moves around asynchronous board transitions.

    Flow for a cell click:
      - lock and count the move, flood fill the region and request its fade;
      - once every faded cell has been acknowledged, empty the region and apply gravity;
      - request falls for the cells that moved and unlock when all of them landed.
    A rotation replaces the first stage with a whole-board rotate transition.
    Every settle ends with the completion check. Intents that arrive while the
    session is busy or completed are dropped.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        config: GameConfig | None = None,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.config = config or getattr(world, "config", None) or GameConfig()
        self._rng = rng or getattr(world, "random", None) or random.Random(self.config.random_seed)
        self._clock = clock or time.monotonic
        self.event_bus.subscribe(EVENT_SESSION_START, self.on_session_start)
        self.event_bus.subscribe(EVENT_SESSION_RESET, self.on_session_start)
        self.event_bus.subscribe(EVENT_CELL_CLICK, self.on_cell_click)
        self.event_bus.subscribe(EVENT_ROTATE_REQUEST, self.on_rotate_request)
        self.event_bus.subscribe(EVENT_ANIMATION_COMPLETE, self.on_animation_complete)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    @property
    def state(self) -> SessionState:
        return get_or_create_session_state(self.world)

    @property
    def grid(self) -> Grid:
        return get_grid(self.world)

    def elapsed(self) -> float:
        return self.state.elapsed_at(self._clock())

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------
    def start_session(self, grid: Grid | None = None) -> None:
        """Begin a fresh session, discarding any transition still in flight."""
        if grid is None:
            grid = Grid.random_fill(self.config.grid_size, get_palette(self.world).names, self._rng)
        set_grid(self.world, grid)
        state = self.state
        was_locked = state.locked
        state.started = True
        state.phase = SessionPhase.IDLE
        state.move_count = 0
        state.start_time = self._clock()
        state.last_elapsed = None
        self._clear_pending(state)
        logger.info("session started on %dx%d grid", grid.dimension(), grid.dimension())
        self.event_bus.emit(EVENT_SESSION_STARTED, dimension=grid.dimension())
        if was_locked:
            self.event_bus.emit(EVENT_INPUT_LOCK_CHANGED, locked=False)
        self.event_bus.emit(EVENT_BOARD_RENDER, grid=grid.copy(), falls=[])

    def on_session_start(self, sender, **kwargs):
        self.start_session(kwargs.get('grid'))

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------
    def on_cell_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        state = self.state
        if not self._accepting(state, 'cell_click'):
            return
        grid = self.grid
        if not grid.is_inside(row, col):
            self._ignore('cell_click', 'out_of_bounds')
            return
        if grid.get(row, col).is_empty:
            self._ignore('cell_click', 'empty_cell')
            return
        state.move_count += 1
        self._lock(state)
        self.event_bus.emit(EVENT_MOVE_COUNTED, move_count=state.move_count)
        region = connected_region(grid, row, col)
        state.region = list(region)
        logger.debug("move %d: region of %d cell(s) from (%d, %d)", state.move_count, len(region), row, col)
        self.event_bus.emit(EVENT_REGION_FOUND, positions=list(region), color=region_color(grid, region))
        self._await(state, PendingStage.REMOVAL, region)
        self.event_bus.emit(EVENT_ANIMATION_START, kind='fade', items=list(region))

    def on_rotate_request(self, sender, **kwargs):
        try:
            direction = RotationDirection(kwargs.get('direction'))
        except ValueError:
            self._ignore('rotate', 'bad_direction')
            return
        state = self.state
        if not self._accepting(state, 'rotate'):
            return
        self._lock(state)
        state.direction = direction
        logger.debug("rotating board %s", direction.value)
        self._await(state, PendingStage.ROTATION, [])
        self.event_bus.emit(EVENT_ANIMATION_START, kind='rotate', items=[], direction=direction)

    def _accepting(self, state: SessionState, intent: str) -> bool:
        if not state.started:
            self._ignore(intent, 'no_session')
            return False
        if state.phase is SessionPhase.BUSY:
            self._ignore(intent, 'busy')
            return False
        if state.phase is SessionPhase.COMPLETED:
            self._ignore(intent, 'completed')
            return False
        return True

    def _ignore(self, intent: str, reason: str) -> None:
        logger.debug("ignored %s intent: %s", intent, reason)
        self.event_bus.emit(EVENT_INTENT_IGNORED, intent=intent, reason=reason)

    def _lock(self, state: SessionState) -> None:
        state.phase = SessionPhase.BUSY
        self.event_bus.emit(EVENT_INPUT_LOCK_CHANGED, locked=True)

    # ------------------------------------------------------------------
    # Transition barrier
    # ------------------------------------------------------------------
    def _await(self, state: SessionState, stage: PendingStage, positions: Iterable[Position]) -> None:
        state.pending = stage
        state.outstanding = {tuple(pos) for pos in positions}
        state.busy_elapsed = 0.0

    def on_animation_complete(self, sender, **kwargs):
        state = self.state
        if state.pending is None or kwargs.get('kind') != _STAGE_KINDS[state.pending]:
            return
        items = kwargs.get('items')
        if state.pending is PendingStage.ROTATION or not items:
            # A whole-batch acknowledgement without item detail settles everything.
            state.outstanding.clear()
        else:
            state.outstanding.difference_update(self._settled_positions(items))
        if state.outstanding:
            return
        self._advance(state)

    @staticmethod
    def _settled_positions(items: Iterable) -> List[Position]:
        settled: List[Position] = []
        for item in items:
            if isinstance(item, dict):
                target = item.get('to')
                if target is not None:
                    settled.append(tuple(target))
            else:
                settled.append(tuple(item))
        return settled

    def on_tick(self, sender, **kwargs):
        state = self.state
        timeout = self.config.transition_timeout
        if state.pending is None or timeout is None:
            return
        state.busy_elapsed += kwargs.get('dt', 1/60)
        if state.busy_elapsed < timeout:
            return
        logger.warning(
            "no settle for %s stage after %.2fs; releasing %d outstanding transition(s)",
            state.pending.name.lower(), state.busy_elapsed, len(state.outstanding),
        )
        state.outstanding.clear()
        self.event_bus.emit(EVENT_ANIMATION_CANCELLED, kind=_STAGE_KINDS[state.pending])
        self._advance(state)

    def _advance(self, state: SessionState) -> None:
        stage = state.pending
        state.pending = None
        if stage is PendingStage.REMOVAL:
            self._after_removal(state)
        elif stage is PendingStage.ROTATION:
            self._after_rotation(state)
        elif stage is PendingStage.FALL:
            self._settle(state)

    # ------------------------------------------------------------------
    # Board mutation stages
    # ------------------------------------------------------------------
    def _after_removal(self, state: SessionState) -> None:
        grid = self.grid
        positions = sorted(state.region)
        color = region_color(grid, positions)
        cleared = clear_positions(grid, positions)
        self.event_bus.emit(EVENT_REGION_CLEARED, positions=positions, color=color)
        self._apply_gravity(state, cleared)

    def _after_rotation(self, state: SessionState) -> None:
        direction = state.direction
        rotated = rotate_grid(self.grid, direction)
        self.event_bus.emit(EVENT_BOARD_ROTATED, direction=direction)
        self._apply_gravity(state, rotated)

    def _apply_gravity(self, state: SessionState, grid: Grid) -> None:
        result = apply_gravity(grid)
        set_grid(self.world, result.grid)
        moved = result.moved
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, falls=result.falls, moved=len(moved))
        self.event_bus.emit(EVENT_BOARD_RENDER, grid=result.grid.copy(), falls=result.falls)
        if not moved:
            self._settle(state)
            return
        self._await(state, PendingStage.FALL, [fall.target for fall in moved])
        self.event_bus.emit(EVENT_ANIMATION_START, kind='fall', items=fall_payload(moved))

    def _settle(self, state: SessionState) -> None:
        self._clear_pending(state)
        if self.grid.is_cleared():
            elapsed = self._clock() - state.start_time
            state.phase = SessionPhase.COMPLETED
            state.last_elapsed = elapsed
            logger.info("board cleared in %d move(s), %.1fs", state.move_count, elapsed)
            self.event_bus.emit(EVENT_INPUT_LOCK_CHANGED, locked=False)
            self.event_bus.emit(EVENT_SESSION_COMPLETED, elapsed=elapsed, move_count=state.move_count)
            return
        state.phase = SessionPhase.IDLE
        self.event_bus.emit(EVENT_INPUT_LOCK_CHANGED, locked=False)

    @staticmethod
    def _clear_pending(state: SessionState) -> None:
        state.pending = None
        state.outstanding = set()
        state.region = []
        state.direction = None
        state.busy_elapsed = 0.0
