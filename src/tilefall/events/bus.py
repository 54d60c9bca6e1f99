from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems nobody else references alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"


# ============================================================================
# INPUT & INTERACTION
# ============================================================================
EVENT_MOUSE_PRESS_RAW = "mouse_press_raw"  # payload: x, y, button, modifiers
EVENT_MOUSE_PRESS = "mouse_press"          # payload: x, y, button, press_id
EVENT_KEY_PRESS = "key_press"              # payload: symbol, modifiers


# ============================================================================
# PLAYER INTENTS
# ============================================================================
EVENT_CELL_CLICK = "cell_click"            # payload: row, col
EVENT_ROTATE_REQUEST = "rotate_request"    # payload: direction=RotationDirection
EVENT_INTENT_IGNORED = "intent_ignored"    # payload: intent=str, reason=str


# ============================================================================
# BOARD MECHANICS
# ============================================================================
EVENT_REGION_FOUND = "region_found"        # payload: positions=[(r,c),...], color=str
EVENT_REGION_CLEARED = "region_cleared"    # payload: positions=[(r,c),...], color=str
EVENT_GRAVITY_APPLIED = "gravity_applied"  # payload: falls=list[FallRecord], moved=int
EVENT_BOARD_ROTATED = "board_rotated"      # payload: direction=RotationDirection
EVENT_BOARD_RENDER = "board_render"        # payload: grid=Grid, falls=list[FallRecord]


# ============================================================================
# ANIMATION
# ============================================================================
EVENT_ANIMATION_START = "animation_start"          # payload: kind=str, items=list, direction=RotationDirection|None
EVENT_ANIMATION_COMPLETE = "animation_complete"    # payload: kind=str, items=list
EVENT_ANIMATION_CANCELLED = "animation_cancelled"  # payload: kind=str


# ============================================================================
# SESSION
# ============================================================================
EVENT_SESSION_START = "session_start"              # payload: None
EVENT_SESSION_RESET = "session_reset"              # payload: None
EVENT_SESSION_STARTED = "session_started"          # payload: dimension=int
EVENT_SESSION_COMPLETED = "session_completed"      # payload: elapsed=float, move_count=int
EVENT_MOVE_COUNTED = "move_counted"                # payload: move_count=int
EVENT_INPUT_LOCK_CHANGED = "input_lock_changed"    # payload: locked=bool
