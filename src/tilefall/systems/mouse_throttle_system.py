from __future__ import annotations

from typing import Any

from tilefall.events.bus import (
    EVENT_MOUSE_PRESS,
    EVENT_MOUSE_PRESS_RAW,
    EVENT_SESSION_STARTED,
    EventBus,
)
from tilefall.utils.input_throttle import MouseThrottle


class MouseThrottleSystem:
    """Bridges raw mouse input to throttled presses shared by all systems."""

    def __init__(
        self,
        event_bus: EventBus,
        *,
        throttle: MouseThrottle | None = None,
    ) -> None:
        self.event_bus = event_bus
        self._throttle = throttle or MouseThrottle()
        self.event_bus.subscribe(EVENT_MOUSE_PRESS_RAW, self._on_mouse_press_raw)
        self.event_bus.subscribe(EVENT_SESSION_STARTED, self._on_session_started)

    @property
    def throttle(self) -> MouseThrottle:
        return self._throttle

    def _on_session_started(self, sender: Any, **payload: Any) -> None:
        # The press that started the session must not also land on the fresh board.
        self._throttle.block(self._throttle.min_interval)

    def _on_mouse_press_raw(self, sender: Any, **payload: Any) -> None:
        x = payload.get("x")
        y = payload.get("y")
        button = payload.get("button")
        if x is None or y is None or button is None:
            return
        try:
            xf = float(x)
            yf = float(y)
            button_int = int(button)
        except (TypeError, ValueError):
            return
        if not self._throttle.allow(xf, yf, button_int):
            return
        self.event_bus.emit(
            EVENT_MOUSE_PRESS,
            x=xf,
            y=yf,
            button=button_int,
            press_id=self._throttle.sequence,
        )
