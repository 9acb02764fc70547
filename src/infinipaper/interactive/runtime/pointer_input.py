# どこで: `src/infinipaper/interactive/runtime/pointer_input.py`。
# 何を: pyglet のマウスコールバックを PointerEvent / WheelEvent へ変換し、ジェスチャ状態機械へ流す。
# なぜ: pyglet 固有の座標系（左下原点）とボタン表現を、core 側の入力モデルから隔離するため。

from __future__ import annotations

from typing import Callable

from pyglet.window import mouse

from infinipaper.core.gesture import (
    PointerButton,
    PointerEvent,
    PointerGestureStateMachine,
    PointerKind,
    WheelEvent,
)

# pyglet のマウスは 1 つだけなので id は固定。
MOUSE_POINTER_ID = 1

_BUTTONS = {
    mouse.LEFT: PointerButton.PRIMARY,
    mouse.MIDDLE: PointerButton.MIDDLE,
    mouse.RIGHT: PointerButton.SECONDARY,
}


class PygletPointerAdapter:
    """pyglet window のマウスイベントハンドラ群。

    `window.push_handlers(adapter)` で登録する。表示は毎フレーム描き直すため、
    状態機械が返す「再描画要否」はここでは使わない。
    """

    def __init__(
        self,
        gesture: PointerGestureStateMachine,
        *,
        window_height: Callable[[], int],
        wheel_step_delta: float,
    ) -> None:
        self._gesture = gesture
        self._window_height = window_height
        self._wheel_step_delta = float(wheel_step_delta)
        # ジェスチャを開始したボタン。マウスは 1 ポインタなので、これ以外の release は無視する。
        self._active_button: int | None = None

    def _screen_y(self, y: float) -> float:
        return float(self._window_height()) - float(y)

    def _event(self, x: float, y: float, button: PointerButton) -> PointerEvent:
        return PointerEvent(
            pointer_id=MOUSE_POINTER_ID,
            screen_x=float(x),
            screen_y=self._screen_y(y),
            kind=PointerKind.MOUSE,
            button=button,
        )

    def on_mouse_press(self, x: int, y: int, button: int, modifiers: int) -> None:
        if self._active_button is None:
            self._active_button = button
        pointer_button = _BUTTONS.get(button, PointerButton.NONE)
        self._gesture.on_pointer_down(self._event(x, y, pointer_button))

    def on_mouse_drag(self, x: int, y: int, dx: int, dy: int, buttons: int, modifiers: int) -> None:
        self._gesture.on_pointer_move(self._event(x, y, PointerButton.NONE))

    def on_mouse_release(self, x: int, y: int, button: int, modifiers: int) -> None:
        if button != self._active_button:
            return
        self._active_button = None
        pointer_button = _BUTTONS.get(button, PointerButton.NONE)
        self._gesture.on_pointer_up(self._event(x, y, pointer_button))

    def on_mouse_scroll(self, x: int, y: int, scroll_x: float, scroll_y: float) -> None:
        # pyglet は上スクロールが正。ブラウザの deltaY（下スクロールが正）へ合わせる。
        event = WheelEvent(
            delta_y=-float(scroll_y) * self._wheel_step_delta,
            screen_x=float(x),
            screen_y=self._screen_y(y),
        )
        self._gesture.on_wheel(event)
