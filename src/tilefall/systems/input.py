from typing import Dict

from esper import World

from tilefall.components.game_state import GameMode
from tilefall.components.session_state import SessionPhase
from tilefall.events.bus import (
    EventBus,
    EVENT_CELL_CLICK,
    EVENT_KEY_PRESS,
    EVENT_MOUSE_PRESS,
    EVENT_ROTATE_REQUEST,
    EVENT_SESSION_RESET,
    EVENT_SESSION_START,
)
from tilefall.components.rotation import RotationDirection
from tilefall.systems.board_ops import get_grid
from tilefall.ui.layout import cell_at_point, compute_board_geometry, rotate_button_at_point
from tilefall.utils.game_state import get_game_mode, set_game_mode
from tilefall.utils.session_state import get_or_create_session_state

# arcade.MOUSE_BUTTON_LEFT
MOUSE_BUTTON_LEFT = 1


class InputSystem:
    """Turns presses into player intents; never touches the board itself.

    Whether an intent is honoured (lock, empty cell, completed board) is decided
    by the session, so presses are forwarded even while a transition runs.
    """
    def __init__(self, event_bus: EventBus, window, world: World,
                 key_bindings: Dict[int, RotationDirection] | None = None):
        self.event_bus = event_bus
        self.window = window
        self.world = world
        self.key_bindings = dict(key_bindings or {})
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)
        self.event_bus.subscribe(EVENT_KEY_PRESS, self.on_key_press)

    def on_mouse_press(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        button = kwargs.get('button')
        if x is None or y is None or button != MOUSE_BUTTON_LEFT:
            return
        if get_game_mode(self.world) is GameMode.TITLE:
            set_game_mode(self.world, GameMode.PLAYING)
            self.event_bus.emit(EVENT_SESSION_START)
            return
        if get_or_create_session_state(self.world).phase is SessionPhase.COMPLETED:
            self.event_bus.emit(EVENT_SESSION_RESET)
            return
        geometry = compute_board_geometry(self.window.width, self.window.height, get_grid(self.world).dimension())
        direction = rotate_button_at_point(geometry, x, y)
        if direction is not None:
            self.event_bus.emit(EVENT_ROTATE_REQUEST, direction=direction)
            return
        cell = cell_at_point(geometry, x, y)
        if cell is not None:
            self.event_bus.emit(EVENT_CELL_CLICK, row=cell[0], col=cell[1])

    def on_key_press(self, sender, **kwargs):
        if get_game_mode(self.world) is not GameMode.PLAYING:
            return
        direction = self.key_bindings.get(kwargs.get('symbol'))
        if direction is not None:
            self.event_bus.emit(EVENT_ROTATE_REQUEST, direction=direction)
