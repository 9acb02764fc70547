"""
どこで: `src/infinipaper/core/gesture.py`。
何を: ポインタ / ホイールイベントから操作モード（描画・消しゴム・パン・ピンチ）を決め、バッファとビューポートへ命令を出す状態機械を提供する。
なぜ: 1 本指 / 2 本指 / マウスボタンの組み合わせを、到着・離脱の順序に依らず決定的に解釈するため。

Notes
-----
- ポインタは id をキーに保持し、2 点を組み合わせる計算では常に id 昇順で並べる。
- 追跡していない id の move/up/cancel は無視する（状態は変わらず、例外も出さない）。
- 各ハンドラは「再描画が必要か」を bool で返す。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from infinipaper.core.raster_buffer import GrowableRasterBuffer
from infinipaper.core.style import RGBA, BLACK, DrawStyle
from infinipaper.core.viewport import PinchState, Point, ViewportController, distance, midpoint

_logger = logging.getLogger(__name__)

DEFAULT_DRAW_WIDTH = 5.0
DEFAULT_ERASE_WIDTH = 40.0


class InteractionMode(Enum):
    IDLE = "idle"
    DRAWING = "drawing"
    ERASING = "erasing"
    PANNING = "panning"
    PINCH_PAN = "pinch_pan"


class PointerKind(Enum):
    MOUSE = "mouse"
    PEN = "pen"
    TOUCH = "touch"


class PointerButton(Enum):
    PRIMARY = 0
    MIDDLE = 1
    SECONDARY = 2
    NONE = -1


@dataclass(frozen=True, slots=True)
class PointerEvent:
    """入力層から届くポインタイベント（スクリーン座標、左上原点）。"""

    pointer_id: int
    screen_x: float
    screen_y: float
    kind: PointerKind = PointerKind.MOUSE
    button: PointerButton = PointerButton.PRIMARY

    @property
    def position(self) -> Point:
        return (float(self.screen_x), float(self.screen_y))


@dataclass(frozen=True, slots=True)
class WheelEvent:
    """ホイールイベント。delta_y > 0 が縮小方向。"""

    delta_y: float
    screen_x: float
    screen_y: float


@dataclass(slots=True)
class PointerState:
    position: Point
    kind: PointerKind
    button: PointerButton


@dataclass(frozen=True, slots=True)
class PenSettings:
    """描画 / 消しゴムのストローク設定。"""

    color: RGBA = BLACK
    draw_width: float = DEFAULT_DRAW_WIDTH
    erase_width: float = DEFAULT_ERASE_WIDTH


def _initial_mode(kind: PointerKind, button: PointerButton) -> InteractionMode:
    if kind is PointerKind.TOUCH:
        return InteractionMode.DRAWING
    if button is PointerButton.PRIMARY:
        return InteractionMode.DRAWING
    if button is PointerButton.MIDDLE:
        return InteractionMode.PANNING
    if button is PointerButton.SECONDARY:
        return InteractionMode.ERASING
    return InteractionMode.IDLE


class PointerGestureStateMachine:
    """ポインタ集合と操作モードを保持し、イベントごとに 1 ステップ進める。"""

    def __init__(
        self,
        buffer: GrowableRasterBuffer,
        viewport: ViewportController,
        *,
        pen: PenSettings | None = None,
    ) -> None:
        self._buffer = buffer
        self._viewport = viewport
        self._pen = pen if pen is not None else PenSettings()
        self._draw_style = DrawStyle().with_stroke(self._pen.color, self._pen.draw_width)

        self._pointers: dict[int, PointerState] = {}
        self._mode = InteractionMode.IDLE
        self._last_logical_point: Point | None = None
        self._last_pan_point: Point | None = None
        self._pinch: PinchState | None = None

    # ---------- 状態 ----------
    @property
    def mode(self) -> InteractionMode:
        return self._mode

    @property
    def pointer_ids(self) -> tuple[int, ...]:
        return tuple(sorted(self._pointers))

    @property
    def last_logical_point(self) -> Point | None:
        return self._last_logical_point

    @property
    def pinch_state(self) -> PinchState | None:
        return self._pinch

    def _set_mode(self, mode: InteractionMode) -> None:
        if mode is not self._mode:
            _logger.debug("gesture mode: %s -> %s", self._mode.value, mode.value)
        self._mode = mode

    def _two_points(self) -> tuple[Point, Point]:
        first, second = sorted(self._pointers)[:2]
        return self._pointers[first].position, self._pointers[second].position

    def _erase_style(self) -> DrawStyle:
        # 背景色は後から変わりうるので毎回引く。
        return self._draw_style.with_stroke(self._buffer.erase_color, self._pen.erase_width)

    # ---------- イベント ----------
    def on_pointer_down(self, event: PointerEvent) -> bool:
        pid = int(event.pointer_id)
        if pid in self._pointers:
            # 再到着は位置の上書きのみ。
            self._pointers[pid].position = event.position
            return False

        self._pointers[pid] = PointerState(position=event.position, kind=event.kind, button=event.button)
        count = len(self._pointers)

        if count == 1:
            mode = _initial_mode(event.kind, event.button)
            self._set_mode(mode)
            if mode in (InteractionMode.DRAWING, InteractionMode.ERASING):
                self._last_logical_point = self._viewport.screen_to_logical(event.position)
            elif mode is InteractionMode.PANNING:
                self._last_pan_point = event.position
            return False

        if count == 2:
            # 2 本目が来たら描画/消しゴムを打ち切ってピンチへ。
            self._last_logical_point = None
            self._last_pan_point = None
            a, b = self._two_points()
            self._pinch = PinchState(distance=distance(a, b), midpoint=midpoint(a, b))
            self._set_mode(InteractionMode.PINCH_PAN)
        return False

    def on_pointer_move(self, event: PointerEvent) -> bool:
        pid = int(event.pointer_id)
        state = self._pointers.get(pid)
        if state is None:
            return False
        state.position = event.position

        mode = self._mode
        if mode in (InteractionMode.DRAWING, InteractionMode.ERASING):
            return self._stroke_to(event.position)
        if mode is InteractionMode.PANNING:
            return self._pan_to(event.position)
        if mode is InteractionMode.PINCH_PAN:
            return self._pinch_step()
        return False

    def on_pointer_up(self, event: PointerEvent) -> bool:
        pid = int(event.pointer_id)
        if pid not in self._pointers:
            return False
        del self._pointers[pid]

        count = len(self._pointers)
        if count < 2:
            self._pinch = None
        elif count == 2 and self._mode is InteractionMode.PINCH_PAN:
            # 3 本以上から 2 本へ戻ったときは、残った 2 点で前回値を取り直す。
            a, b = self._two_points()
            self._pinch = PinchState(distance=distance(a, b), midpoint=midpoint(a, b))
        if count == 0:
            self._last_logical_point = None
            self._last_pan_point = None
            self._set_mode(InteractionMode.IDLE)
        return False

    def on_pointer_cancel(self, event: PointerEvent) -> bool:
        return self.on_pointer_up(event)

    def on_wheel(self, event: WheelEvent) -> bool:
        return self._viewport.apply_wheel(event.delta_y, (event.screen_x, event.screen_y))

    # ---------- モード別の処理 ----------
    def _stroke_to(self, screen_point: Point) -> bool:
        current = self._viewport.screen_to_logical(screen_point)
        last = self._last_logical_point
        self._last_logical_point = current
        if last is None:
            return False
        style = self._erase_style() if self._mode is InteractionMode.ERASING else self._draw_style
        self._buffer.line(last[0], last[1], current[0], current[1], style)
        return True

    def _pan_to(self, screen_point: Point) -> bool:
        last = self._last_pan_point
        self._last_pan_point = screen_point
        if last is None:
            return False
        self._viewport.apply_pan((screen_point[0] - last[0], screen_point[1] - last[1]))
        return True

    def _pinch_step(self) -> bool:
        if len(self._pointers) != 2 or self._pinch is None:
            return False
        a, b = self._two_points()
        self._pinch = self._viewport.apply_pinch(a, b, self._pinch)
        return True


__all__ = [
    "DEFAULT_DRAW_WIDTH",
    "DEFAULT_ERASE_WIDTH",
    "InteractionMode",
    "PenSettings",
    "PointerButton",
    "PointerEvent",
    "PointerGestureStateMachine",
    "PointerKind",
    "PointerState",
    "WheelEvent",
]
