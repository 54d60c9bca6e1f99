import logging

import pytest

from tilefall.components.animation_fade import FadeAnimation
from tilefall.components.animation_fall import FallAnimation
from tilefall.components.animation_rotate import RotateAnimation
from tilefall.components.grid import Grid
from tilefall.components.rotation import RotationDirection
from tilefall.components.session_state import PendingStage, SessionPhase
from tilefall.config import GameConfig
from tilefall.events.bus import (
    EVENT_ANIMATION_CANCELLED,
    EVENT_ANIMATION_COMPLETE,
    EVENT_CELL_CLICK,
    EVENT_ROTATE_REQUEST,
    EVENT_SESSION_RESET,
    EVENT_TICK,
)
from tilefall.systems.animation import AnimationSystem
from tests.helpers import build_session, drive_ticks

A, B, C = 'A', 'B', 'C'


def _with_animations(rows, config=None):
    bus, world, session = build_session(rows, config=config)
    animations = AnimationSystem(world, bus, session.config)
    return bus, world, session, animations


def test_fade_batch_reports_once_when_every_cell_faded(recorder):
    bus, world, session, _ = _with_animations([[A, A, B], [A, C, C], [B, B, C]])
    recorder.listen(bus, EVENT_ANIMATION_COMPLETE)
    bus.emit(EVENT_CELL_CLICK, row=0, col=0)

    fades = [fade for _, fade in world.get_component(FadeAnimation)]
    assert sorted(fade.pos for fade in fades) == [(0, 0), (0, 1), (1, 0)]
    assert {fade.color for fade in fades} == {A}

    drive_ticks(bus, 3)
    assert all(0.0 < fade.alpha < 1.0 for _, fade in world.get_component(FadeAnimation))
    assert not recorder.payloads(EVENT_ANIMATION_COMPLETE)

    drive_ticks(bus, 20)
    (done,) = recorder.payloads(EVENT_ANIMATION_COMPLETE)
    assert done['kind'] == 'fade'
    assert sorted(done['items']) == [(0, 0), (0, 1), (1, 0)]
    assert not list(world.get_component(FadeAnimation))
    assert session.state.phase is SessionPhase.IDLE


def test_fade_then_fall_cycle_runs_to_idle():
    bus, world, session, _ = _with_animations([[B, A], [A, A]])
    bus.emit(EVENT_CELL_CLICK, row=1, col=1)

    drive_ticks(bus, 12)
    assert session.state.pending is PendingStage.FALL
    ((_, fall),) = list(world.get_component(FallAnimation))
    assert (fall.src, fall.dst, fall.color) == ((0, 0), (1, 0), B)
    assert 0.0 < fall.linear < 1.0

    drive_ticks(bus, 30)
    assert session.state.phase is SessionPhase.IDLE
    assert not list(world.get_component(FallAnimation))
    assert session.grid.to_rows() == [[None, None], [B, None]]


def test_rotation_progress_and_completion(recorder):
    bus, world, session, _ = _with_animations([[A, None], [B, None]])
    recorder.listen(bus, EVENT_ANIMATION_COMPLETE)
    bus.emit(EVENT_ROTATE_REQUEST, direction=RotationDirection.RIGHT)

    drive_ticks(bus, 5, dt=0.03)
    ((_, rotation),) = list(world.get_component(RotateAnimation))
    assert rotation.angle == pytest.approx(45.0)
    assert session.grid.to_rows() == [[A, None], [B, None]]

    drive_ticks(bus, 60)
    assert recorder.payloads(EVENT_ANIMATION_COMPLETE)[0] == {
        'kind': 'rotate', 'items': [], 'direction': RotationDirection.RIGHT,
    }
    assert session.grid.to_rows() == [[None, None], [B, A]]
    assert session.state.phase is SessionPhase.IDLE


def test_left_rotation_angle_is_counter_clockwise():
    bus, world, session, _ = _with_animations([[A, B], [B, A]])
    bus.emit(EVENT_ROTATE_REQUEST, direction=RotationDirection.LEFT)
    drive_ticks(bus, 5, dt=0.03)
    ((_, rotation),) = list(world.get_component(RotateAnimation))
    assert rotation.angle == pytest.approx(-45.0)


def test_zero_durations_finish_one_batch_per_tick():
    config = GameConfig(grid_size=2, fade_duration=0.0, fall_duration=0.0, rotate_duration=0.0)
    bus, world, session, _ = _with_animations([[B, A], [A, A]], config=config)
    bus.emit(EVENT_CELL_CLICK, row=1, col=1)
    drive_ticks(bus, 1)
    assert session.state.pending is PendingStage.FALL
    ((_, fall),) = list(world.get_component(FallAnimation))
    assert fall.linear == 0.0
    drive_ticks(bus, 1)
    assert session.state.phase is SessionPhase.IDLE
    assert session.grid.to_rows() == [[None, None], [B, None]]


def test_new_session_discards_in_flight_animations(recorder):
    bus, world, session, _ = _with_animations([[A, A], [B, B]])
    bus.emit(EVENT_CELL_CLICK, row=0, col=0)
    drive_ticks(bus, 2)
    recorder.listen(bus, EVENT_ANIMATION_COMPLETE)

    bus.emit(EVENT_SESSION_RESET, grid=Grid.from_rows([[C, C], [C, C]]))
    assert not list(world.get_component(FadeAnimation))
    drive_ticks(bus, 30)
    assert not recorder.payloads(EVENT_ANIMATION_COMPLETE)
    assert session.grid.to_rows() == [[C, C], [C, C]]


def test_full_game_until_board_cleared():
    bus, world, session, _ = _with_animations([[A, B, A], [B, B, A], [A, A, A]])
    bus.emit(EVENT_CELL_CLICK, row=2, col=2)
    drive_ticks(bus, 60)
    assert session.grid.to_rows() == [[None, None, None], [None, B, None], [None, B, None]]
    bus.emit(EVENT_CELL_CLICK, row=2, col=1)
    drive_ticks(bus, 60)
    assert session.state.phase is SessionPhase.COMPLETED
    assert session.state.move_count == 2


def test_cancelled_kind_is_purged(recorder):
    bus, world, session, _ = _with_animations([[A, B], [C, A]])
    recorder.listen(bus, EVENT_ANIMATION_COMPLETE)
    bus.emit(EVENT_ROTATE_REQUEST, direction=RotationDirection.RIGHT)
    drive_ticks(bus, 2)

    bus.emit(EVENT_ANIMATION_CANCELLED, kind='fade')
    assert list(world.get_component(RotateAnimation))
    bus.emit(EVENT_ANIMATION_CANCELLED, kind='rotate')
    assert not list(world.get_component(RotateAnimation))
    drive_ticks(bus, 30)
    assert not recorder.payloads(EVENT_ANIMATION_COMPLETE)


def test_forced_release_leaves_no_stale_rotation(caplog):
    config = GameConfig(grid_size=2, transition_timeout=1.0)
    bus, world, session, animations = _with_animations([[A, B], [C, A]], config=config)
    bus.emit(EVENT_ROTATE_REQUEST, direction=RotationDirection.RIGHT)
    # Presentation stops advancing, so only the session timeout can settle the rotation.
    bus.unsubscribe(EVENT_TICK, animations.on_tick)
    with caplog.at_level(logging.WARNING, logger="tilefall.systems.session_system"):
        drive_ticks(bus, 4, dt=0.25)
        assert session.state.phase is SessionPhase.IDLE
        assert session.grid.to_rows() == [[C, A], [A, B]]
        assert not list(world.get_component(RotateAnimation))

        bus.subscribe(EVENT_TICK, animations.on_tick)
        bus.emit(EVENT_ROTATE_REQUEST, direction=RotationDirection.LEFT)
        drive_ticks(bus, 16, dt=0.02)

    assert session.state.phase is SessionPhase.IDLE
    assert session.grid.to_rows() == [[A, B], [C, A]]
    assert not list(world.get_component(RotateAnimation))
    assert sum('releasing' in record.getMessage() for record in caplog.records) == 1
