"""
どこで: `src/infinipaper/core/__init__.py`。
何を: ヘッドレスなコア（バッファ / ビューポート / ジェスチャ / 設定）の公開名をまとめる。
なぜ: interactive 層や利用者が、内部モジュール構成を意識せずに import できるようにするため。
"""

from __future__ import annotations

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
from infinipaper.core.style import DrawStyle
from infinipaper.core.viewport import ViewportController

__all__ = [
    "DrawStyle",
    "GrowableRasterBuffer",
    "InteractionMode",
    "PenSettings",
    "PointerButton",
    "PointerEvent",
    "PointerGestureStateMachine",
    "PointerKind",
    "ViewportController",
    "WheelEvent",
]
