from esper import World
from tilefall.components.animation_fade import FadeAnimation
from tilefall.components.animation_fall import FallAnimation
from tilefall.components.animation_rotate import RotateAnimation
from tilefall.components.duration import Duration
from tilefall.components.rotation import RotationDirection
from typing import Dict, Optional, Tuple, List

class AnimationFactory:
    def __init__(self, world: World):
        self.world = world

    def create_fade_group(
        self,
        positions: List[Tuple[int,int]],
        duration: float = 0.2,
        colors: Optional[Dict[Tuple[int,int], str]] = None,
    ) -> List[int]:
        ents = []
        colors = colors or {}
        for pos in positions:
            pos = tuple(pos)
            ents.append(self.world.create_entity(FadeAnimation(pos=pos, color=colors.get(pos)), Duration(duration)))
        return ents

    def create_fall_group(self, moves: List[dict], duration: float = 0.25) -> List[int]:
        ents = []
        for m in moves:
            fall = FallAnimation(src=tuple(m['from']), dst=tuple(m['to']), color=m.get('color'))
            ents.append(self.world.create_entity(fall, Duration(duration)))
        return ents

    def create_rotation(self, direction: RotationDirection, duration: float = 0.3) -> int:
        return self.world.create_entity(RotateAnimation(direction=direction), Duration(duration))
