from __future__ import annotations

from typing import Sequence

from tilefall.config import GameConfig
from tilefall.components.grid import Grid
from tilefall.events.bus import EVENT_TICK, EventBus
from tilefall.systems.session_system import GameSessionSystem
from tilefall.world import create_world


class FakeClock:
    def __init__(self) -> None:
        self.value = 0.0

    def advance(self, amount: float) -> None:
        self.value += amount

    def __call__(self) -> float:
        return self.value


class EventRecorder:
    """Collects payloads per event name so tests can assert on emitted sequences."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict]] = []

    def listen(self, bus: EventBus, *names: str) -> "EventRecorder":
        for name in names:
            bus.subscribe(name, self._handler_for(name))
        return self

    def _handler_for(self, name: str):
        def handler(sender, **kwargs):
            self.events.append((name, kwargs))
        return handler

    def payloads(self, name: str) -> list[dict]:
        return [payload for event, payload in self.events if event == name]

    def names(self) -> list[str]:
        return [event for event, _ in self.events]

    def clear(self) -> None:
        self.events.clear()


def drive_ticks(bus: EventBus, count: int = 1, dt: float = 0.02) -> None:
    for _ in range(count):
        bus.emit(EVENT_TICK, dt=dt)


def build_session(
    rows: Sequence[Sequence[str | None]] | None = None,
    *,
    config: GameConfig | None = None,
    clock=None,
):
    """Wire a bus, world and session; start it on ``rows`` when given."""
    bus = EventBus()
    config = config or GameConfig(grid_size=len(rows) if rows else 5, random_seed=7)
    world = create_world(bus, config)
    session = GameSessionSystem(world, bus, config, clock=clock)
    if rows is not None:
        session.start_session(Grid.from_rows(rows))
    return bus, world, session
