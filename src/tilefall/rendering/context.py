from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple

from esper import World

from tilefall.components.animation_fade import FadeAnimation
from tilefall.components.animation_fall import FallAnimation
from tilefall.components.animation_rotate import RotateAnimation
from tilefall.components.grid import Grid
from tilefall.ui.layout import BoardGeometry

BoardPos = Tuple[int, int]


@dataclass(slots=True)
class RenderContext:
    """Frame-scoped rendering data shared across renderer subcomponents."""

    window_width: int
    window_height: int
    geometry: BoardGeometry
    grid: Grid
    locked: bool = False
    fall_by_dst: Dict[BoardPos, FallAnimation] = field(default_factory=dict)
    fade_by_pos: Dict[BoardPos, FadeAnimation] = field(default_factory=dict)
    rotation: RotateAnimation | None = None

    @property
    def angle(self) -> float:
        return self.rotation.angle if self.rotation is not None else 0.0


def collect_animation_maps(world: World):
    fall_by_dst: Dict[BoardPos, FallAnimation] = {}
    for _, fall in world.get_component(FallAnimation):
        fall_by_dst[fall.dst] = fall
    fade_by_pos: Dict[BoardPos, FadeAnimation] = {}
    for _, fade in world.get_component(FadeAnimation):
        fade_by_pos[fade.pos] = fade
    rotation = None
    for _, rotate in world.get_component(RotateAnimation):
        rotation = rotate
    return fall_by_dst, fade_by_pos, rotation


def build_render_context(
    world: World,
    window_width: int,
    window_height: int,
    geometry: BoardGeometry,
    grid: Grid,
    *,
    locked: bool = False,
) -> RenderContext:
    """Populate a RenderContext for the current frame."""
    fall_by_dst, fade_by_pos, rotation = collect_animation_maps(world)
    return RenderContext(
        window_width=window_width,
        window_height=window_height,
        geometry=geometry,
        grid=grid,
        locked=locked,
        fall_by_dst=fall_by_dst,
        fade_by_pos=fade_by_pos,
        rotation=rotation,
    )
