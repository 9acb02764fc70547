from __future__ import annotations

import pytest

from infinipaper.core.gesture import (
    InteractionMode,
    PenSettings,
    PointerButton,
    PointerEvent,
    PointerGestureStateMachine,
    PointerKind,
    WheelEvent,
)
from infinipaper.core.raster_buffer import GrowableRasterBuffer
from infinipaper.core.style import BLACK, WHITE
from infinipaper.core.viewport import ViewportController


def _machine(**buffer_kwargs) -> PointerGestureStateMachine:
    buffer = GrowableRasterBuffer(100, 100, **buffer_kwargs)
    viewport = ViewportController(buffer)
    return PointerGestureStateMachine(buffer, viewport, pen=PenSettings())


def _touch(pid: int, x: float, y: float) -> PointerEvent:
    return PointerEvent(pointer_id=pid, screen_x=x, screen_y=y, kind=PointerKind.TOUCH)


def _mouse(x: float, y: float, button: PointerButton = PointerButton.PRIMARY) -> PointerEvent:
    return PointerEvent(pointer_id=1, screen_x=x, screen_y=y, kind=PointerKind.MOUSE, button=button)


def _buffer(gesture: PointerGestureStateMachine) -> GrowableRasterBuffer:
    return gesture._buffer


def _viewport_of(gesture: PointerGestureStateMachine) -> ViewportController:
    return gesture._viewport


def test_starts_idle_without_pointers():
    gesture = _machine()
    assert gesture.mode is InteractionMode.IDLE
    assert gesture.pointer_ids == ()
    assert gesture.last_logical_point is None
    assert gesture.pinch_state is None


@pytest.mark.parametrize(
    ("kind", "button", "expected"),
    [
        (PointerKind.TOUCH, PointerButton.NONE, InteractionMode.DRAWING),
        (PointerKind.MOUSE, PointerButton.PRIMARY, InteractionMode.DRAWING),
        (PointerKind.PEN, PointerButton.PRIMARY, InteractionMode.DRAWING),
        (PointerKind.MOUSE, PointerButton.MIDDLE, InteractionMode.PANNING),
        (PointerKind.MOUSE, PointerButton.SECONDARY, InteractionMode.ERASING),
        (PointerKind.MOUSE, PointerButton.NONE, InteractionMode.IDLE),
    ],
)
def test_first_pointer_selects_mode(kind, button, expected):
    gesture = _machine()
    gesture.on_pointer_down(PointerEvent(1, 10.0, 10.0, kind=kind, button=button))
    assert gesture.mode is expected


def test_drawing_writes_line_in_logical_coordinates():
    gesture = _machine(background="white")
    buffer = _buffer(gesture)

    gesture.on_pointer_down(_mouse(10.0, 10.0))
    assert gesture.on_pointer_move(_mouse(50.0, 10.0)) is True

    assert buffer.sample(30, 10) == BLACK
    assert buffer.sample(30, 40) == WHITE
    assert gesture.last_logical_point == (50.0, 10.0)


def test_drawing_respects_viewport_transform():
    gesture = _machine(background="white")
    buffer = _buffer(gesture)
    viewport = _viewport_of(gesture)
    viewport.apply_pan((100.0, 0.0))

    gesture.on_pointer_down(_mouse(100.0, 20.0))
    gesture.on_pointer_move(_mouse(140.0, 20.0))

    # スクリーン x=100..140 は論理 x=0..40。
    assert buffer.sample(20, 20) == BLACK


def test_erasing_paints_background_color():
    gesture = _machine(background="white")
    buffer = _buffer(gesture)

    gesture.on_pointer_down(_mouse(10.0, 10.0))
    gesture.on_pointer_move(_mouse(60.0, 10.0))
    gesture.on_pointer_up(_mouse(60.0, 10.0))
    assert buffer.sample(35, 10) == BLACK

    gesture.on_pointer_down(_mouse(10.0, 10.0, PointerButton.SECONDARY))
    assert gesture.mode is InteractionMode.ERASING
    gesture.on_pointer_move(_mouse(60.0, 10.0, PointerButton.NONE))

    assert buffer.sample(35, 10) == WHITE


def test_middle_button_pans_without_touching_pixels():
    gesture = _machine()
    buffer = _buffer(gesture)
    viewport = _viewport_of(gesture)
    revision = buffer.revision

    gesture.on_pointer_down(_mouse(0.0, 0.0, PointerButton.MIDDLE))
    assert gesture.on_pointer_move(_mouse(15.0, -5.0, PointerButton.NONE)) is True
    gesture.on_pointer_move(_mouse(20.0, 0.0, PointerButton.NONE))

    assert viewport.offset == (20.0, 0.0)
    assert viewport.scale == 1.0
    assert buffer.revision == revision


def test_two_finger_pinch_zooms_without_drawing():
    gesture = _machine()
    buffer = _buffer(gesture)
    viewport = _viewport_of(gesture)

    gesture.on_pointer_down(_touch(1, 10.0, 10.0))
    gesture.on_pointer_move(_touch(1, 20.0, 20.0))
    gesture.on_pointer_down(_touch(2, 100.0, 100.0))
    assert gesture.mode is InteractionMode.PINCH_PAN
    assert gesture.last_logical_point is None
    revision = buffer.revision

    gesture.on_pointer_move(_touch(1, 30.0, 30.0))
    gesture.on_pointer_move(_touch(2, 120.0, 120.0))

    assert buffer.revision == revision
    # 距離 80√2 → 70√2 → 90√2 なので累積倍率は 90/80。
    assert viewport.scale == pytest.approx(1.125)


@pytest.mark.parametrize(
    ("button", "first_mode"),
    [
        (PointerButton.PRIMARY, InteractionMode.DRAWING),
        (PointerButton.MIDDLE, InteractionMode.PANNING),
        (PointerButton.SECONDARY, InteractionMode.ERASING),
        (PointerButton.NONE, InteractionMode.IDLE),
    ],
)
def test_second_pointer_switches_any_mode_to_pinch(button, first_mode):
    gesture = _machine()
    buffer = _buffer(gesture)

    gesture.on_pointer_down(_mouse(10.0, 10.0, button))
    assert gesture.mode is first_mode
    gesture.on_pointer_down(_touch(2, 100.0, 100.0))

    assert gesture.mode is InteractionMode.PINCH_PAN
    assert gesture.last_logical_point is None
    assert gesture.pinch_state is not None

    revision = buffer.revision
    gesture.on_pointer_move(_mouse(30.0, 30.0, PointerButton.NONE))
    gesture.on_pointer_move(_touch(2, 140.0, 120.0))
    assert buffer.revision == revision


def test_pinch_pairs_pointers_by_id_regardless_of_arrival_order():
    first = _machine()
    second = _machine()

    first.on_pointer_down(_touch(1, 0.0, 0.0))
    first.on_pointer_down(_touch(2, 100.0, 0.0))
    second.on_pointer_down(_touch(2, 100.0, 0.0))
    second.on_pointer_down(_touch(1, 0.0, 0.0))

    for g in (first, second):
        g.on_pointer_move(_touch(2, 200.0, 0.0))

    assert _viewport_of(first).scale == pytest.approx(_viewport_of(second).scale)
    assert _viewport_of(first).offset == pytest.approx(_viewport_of(second).offset)
    assert first.pinch_state == second.pinch_state


def test_wheel_zooms_around_cursor():
    gesture = _machine()
    viewport = _viewport_of(gesture)
    before = viewport.screen_to_logical((50.0, 50.0))

    assert gesture.on_wheel(WheelEvent(delta_y=-100.0, screen_x=50.0, screen_y=50.0)) is True

    assert viewport.scale > 1.0
    assert viewport.screen_to_logical((50.0, 50.0)) == pytest.approx(before)


def test_untracked_pointer_events_are_ignored():
    gesture = _machine()

    assert gesture.on_pointer_move(_touch(9, 1.0, 1.0)) is False
    assert gesture.on_pointer_up(_touch(9, 1.0, 1.0)) is False
    assert gesture.on_pointer_cancel(_touch(9, 1.0, 1.0)) is False
    assert gesture.mode is InteractionMode.IDLE
    assert gesture.pointer_ids == ()


def test_repeated_down_only_updates_position():
    gesture = _machine()
    gesture.on_pointer_down(_mouse(10.0, 10.0))
    gesture.on_pointer_down(_mouse(30.0, 10.0, PointerButton.MIDDLE))

    assert gesture.mode is InteractionMode.DRAWING
    assert gesture.pointer_ids == (1,)


@pytest.mark.parametrize("release_order", [(1, 2), (2, 1)])
def test_pinch_ends_idle_whichever_pointer_leaves_first(release_order):
    gesture = _machine()
    viewport = _viewport_of(gesture)
    gesture.on_pointer_down(_touch(1, 0.0, 0.0))
    gesture.on_pointer_down(_touch(2, 50.0, 0.0))

    gesture.on_pointer_up(_touch(release_order[0], 0.0, 0.0))
    assert gesture.pinch_state is None

    # 1 本残った状態の move ではパンもズームもしない。
    scale, offset = viewport.scale, viewport.offset
    assert gesture.on_pointer_move(_touch(release_order[1], 80.0, 80.0)) is False
    assert (viewport.scale, viewport.offset) == (scale, offset)

    gesture.on_pointer_up(_touch(release_order[1], 0.0, 0.0))
    assert gesture.mode is InteractionMode.IDLE
    assert gesture.pointer_ids == ()


def test_cancel_behaves_like_up():
    gesture = _machine()
    gesture.on_pointer_down(_touch(4, 0.0, 0.0))
    gesture.on_pointer_cancel(_touch(4, 0.0, 0.0))

    assert gesture.mode is InteractionMode.IDLE
    assert gesture.last_logical_point is None


def test_third_pointer_is_tracked_but_pinch_waits_for_two():
    gesture = _machine()
    viewport = _viewport_of(gesture)
    gesture.on_pointer_down(_touch(1, 0.0, 0.0))
    gesture.on_pointer_down(_touch(2, 100.0, 0.0))
    gesture.on_pointer_down(_touch(3, 50.0, 50.0))

    assert gesture.mode is InteractionMode.PINCH_PAN
    assert gesture.pointer_ids == (1, 2, 3)
    assert gesture.on_pointer_move(_touch(1, -50.0, 0.0)) is False
    assert viewport.scale == 1.0

    # 3 本目が離れたら残り 2 本で前回値を取り直し、次の move から再開する。
    gesture.on_pointer_up(_touch(3, 50.0, 50.0))
    assert gesture.pinch_state is not None
    assert gesture.pinch_state.distance == pytest.approx(150.0)

    gesture.on_pointer_move(_touch(2, 250.0, 0.0))
    assert viewport.scale == pytest.approx(2.0)


def test_new_gesture_after_idle_starts_fresh():
    gesture = _machine(background="white")
    buffer = _buffer(gesture)
    gesture.on_pointer_down(_touch(1, 0.0, 0.0))
    gesture.on_pointer_down(_touch(2, 50.0, 0.0))
    gesture.on_pointer_up(_touch(1, 0.0, 0.0))
    gesture.on_pointer_up(_touch(2, 50.0, 0.0))

    gesture.on_pointer_down(_touch(7, 10.0, 70.0))
    assert gesture.mode is InteractionMode.DRAWING
    gesture.on_pointer_move(_touch(7, 40.0, 70.0))

    assert buffer.sample(25, 70) == BLACK
