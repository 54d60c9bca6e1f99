from __future__ import annotations

from esper import World

from tilefall.components.game_state import GameMode, GameState


def get_game_mode(world: World) -> GameMode | None:
    for _, state in world.get_component(GameState):
        return state.mode
    return None


def set_game_mode(world: World, mode: GameMode) -> None:
    """Update the global game mode, creating the GameState singleton if absent."""
    for _, state in world.get_component(GameState):
        state.mode = mode
        return
    world.create_entity(GameState(mode=mode))
