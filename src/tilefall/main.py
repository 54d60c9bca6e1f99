"""Entry point for the Tilefall puzzle.

Sets up the ECS world, event bus, systems, and the arcade window.
"""
import logging

import arcade
from arcade import Window, run, set_background_color, color

from tilefall.config import GameConfig
from tilefall.events.bus import EVENT_TICK, EventBus, EVENT_KEY_PRESS, EVENT_MOUSE_PRESS_RAW
from tilefall.systems.animation import AnimationSystem
from tilefall.components.rotation import RotationDirection
from tilefall.systems.input import InputSystem
from tilefall.systems.mouse_throttle_system import MouseThrottleSystem
from tilefall.systems.render import RenderSystem
from tilefall.systems.session_system import GameSessionSystem
from tilefall.world import create_world

KEY_BINDINGS = {
    arcade.key.LEFT: RotationDirection.LEFT,
    arcade.key.Q: RotationDirection.LEFT,
    arcade.key.RIGHT: RotationDirection.RIGHT,
    arcade.key.E: RotationDirection.RIGHT,
}


class TilefallWindow(Window):
    def __init__(self, config: GameConfig | None = None):
        super().__init__(800, 600, "Tilefall", resizable=True)
        self.set_update_rate(1/60)
        self.config = config or GameConfig()
        self.event_bus = EventBus()
        self.world = create_world(self.event_bus, self.config)
        self.mouse_throttle_system = MouseThrottleSystem(self.event_bus)
        self.session_system = GameSessionSystem(self.world, self.event_bus, self.config)
        self.animation_system = AnimationSystem(self.world, self.event_bus, self.config)
        self.render_system = RenderSystem(self.world, self.event_bus, self)
        self.input_system = InputSystem(self.event_bus, self, self.world, key_bindings=KEY_BINDINGS)
        set_background_color(color.BLACK)

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_PRESS_RAW, x=x, y=y, button=button, modifiers=modifiers)

    def on_key_press(self, symbol: int, modifiers: int):
        self.event_bus.emit(EVENT_KEY_PRESS, symbol=symbol, modifiers=modifiers)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    TilefallWindow()
    run()

if __name__ == "__main__":
    main()
