import random

from esper import World

from tilefall.config import GameConfig
from tilefall.components.game_state import GameMode, GameState
from tilefall.components.grid import Grid
from tilefall.components.palette import Palette
from tilefall.components.session_state import SessionState
from tilefall.events.bus import EventBus


def create_world(
    event_bus: EventBus,
    config: GameConfig | None = None,
    *,
    initial_mode: GameMode = GameMode.TITLE,
    rng: random.Random | None = None,
) -> World:
    """Create the world singletons: game mode, the board (grid + palette) and session state.

    The grid starts empty; GameSessionSystem fills it when a session starts.
    """
    config = config or GameConfig()
    world = World()
    setattr(world, "config", config)
    setattr(world, "random", rng or random.Random(config.random_seed))

    world.create_entity(GameState(mode=initial_mode))

    palette = Palette(
        names=list(config.palette),
        colors={name: config.colors[name] for name in config.palette},
    )
    world.create_entity(Grid(size=config.grid_size), palette)

    world.create_entity(SessionState())
    return world
