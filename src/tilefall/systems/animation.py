from tilefall.config import GameConfig
from tilefall.events.bus import (EVENT_TICK, EventBus, EVENT_ANIMATION_START, EVENT_ANIMATION_COMPLETE,
                                 EVENT_ANIMATION_CANCELLED, EVENT_SESSION_STARTED)
from tilefall.components.animation_fade import FadeAnimation
from tilefall.components.animation_fall import FallAnimation
from tilefall.components.animation_rotate import RotateAnimation
from tilefall.components.duration import Duration
from tilefall.components.rotation import RotationDirection
from tilefall.factories.animation_factory import AnimationFactory
from tilefall.systems.board_ops import get_grid
from esper import World

_KIND_COMPONENTS = {
    'fade': FadeAnimation,
    'fall': FallAnimation,
    'rotate': RotateAnimation,
}


class AnimationSystem:
    """Drives timing of board transitions; each animation is its own component instance.

    A batch (all fades, all falls, or the single rotation) reports completion with
    one EVENT_ANIMATION_COMPLETE once every member has finished. Batches started
    while a tick is being processed begin advancing on the next tick.
    """
    def __init__(self, world: World, event_bus: EventBus, config: GameConfig | None = None):
        self.world = world
        self.event_bus = event_bus
        self.config = config or getattr(world, "config", None) or GameConfig()
        self.factory = AnimationFactory(world)
        event_bus.subscribe(EVENT_TICK, self.on_tick)
        event_bus.subscribe(EVENT_ANIMATION_START, self.on_animation_start)
        event_bus.subscribe(EVENT_ANIMATION_CANCELLED, self.on_animation_cancelled)
        event_bus.subscribe(EVENT_SESSION_STARTED, self.on_session_started)

    def on_animation_start(self, sender, **kwargs):
        kind = kwargs.get('kind'); items = kwargs.get('items') or []
        if kind == 'fade':
            grid = get_grid(self.world)
            colors = {}
            for row, col in items:
                if grid.is_inside(row, col):
                    colors[(row, col)] = grid.get(row, col).color
            self.factory.create_fade_group(items, self.config.fade_duration, colors)
        elif kind == 'fall':
            # items carry 'from'/'to'/'color'; grid already holds the landed state
            self.factory.create_fall_group(items, self.config.fall_duration)
        elif kind == 'rotate':
            direction = RotationDirection(kwargs.get('direction'))
            self.factory.create_rotation(direction, self.config.rotate_duration)

    def on_animation_cancelled(self, sender, **kwargs):
        comp_type = _KIND_COMPONENTS.get(kwargs.get('kind'))
        if comp_type is not None:
            self._remove_component(comp_type)

    def on_session_started(self, sender, **kwargs):
        # Stale transitions from an abandoned session must never report completion.
        for comp_type in _KIND_COMPONENTS.values():
            self._remove_component(comp_type)

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 1/60)
        # Completions below can start the next batch synchronously; only entities
        # alive at the start of this tick advance now.
        fade_ents = self._entities(FadeAnimation)
        fall_ents = self._entities(FallAnimation)
        rotate_ents = self._entities(RotateAnimation)
        # Fade progression
        fades = self._live(FadeAnimation, fade_ents)
        if fades:
            for ent, fade in fades:
                if fade.alpha > 0.0:
                    fade.alpha = max(0.0, fade.alpha - self._step(ent, dt))
            if all(fade.alpha <= 0.0 for _, fade in fades):
                positions = [fade.pos for _, fade in fades]
                for ent, _ in fades:
                    self._delete_animation_entity(ent)
                self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind='fade', items=positions)
        # Fall progression
        falls = self._live(FallAnimation, fall_ents)
        if falls:
            for ent, fall in falls:
                if fall.linear < 1.0:
                    fall.linear = min(1.0, fall.linear + self._step(ent, dt))
            if all(fall.linear >= 1.0 for _, fall in falls):
                items = [{'from': fall.src, 'to': fall.dst} for _, fall in falls]
                for ent, _ in falls:
                    self._delete_animation_entity(ent)
                self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind='fall', items=items)
        # Rotation progression
        rotations = self._live(RotateAnimation, rotate_ents)
        if rotations:
            for ent, rotation in rotations:
                if rotation.progress < 1.0:
                    rotation.progress = min(1.0, rotation.progress + self._step(ent, dt))
            if all(rotation.progress >= 1.0 for _, rotation in rotations):
                directions = [rotation.direction for _, rotation in rotations]
                for ent, _ in rotations:
                    self._delete_animation_entity(ent)
                self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind='rotate', items=[], direction=directions[-1])

    def _entities(self, comp_type) -> set:
        return {ent for ent, _ in self.world.get_component(comp_type)}

    def _live(self, comp_type, ents: set) -> list:
        return [(ent, comp) for ent, comp in self.world.get_component(comp_type) if ent in ents]

    def _step(self, ent: int, dt: float) -> float:
        duration = self.world.component_for_entity(ent, Duration)
        if duration.value <= 0.0:
            return 1.0
        return dt / duration.value

    def _remove_component(self, comp_type):
        ents = [ent for ent, _ in self.world.get_component(comp_type)]
        for ent in ents:
            self._delete_animation_entity(ent)

    def _delete_animation_entity(self, ent: int):
        if self.world.entity_exists(ent):
            self.world.delete_entity(ent, immediate=True)
