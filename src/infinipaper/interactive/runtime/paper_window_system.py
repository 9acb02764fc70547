# どこで: `src/infinipaper/interactive/runtime/paper_window_system.py`。
# 何を: 紙（GrowableRasterBuffer）をウィンドウへ表示し、マウス / キー入力を状態機械へ配線するサブシステムを提供する。
# なぜ: `src/infinipaper/api/runner.py` の `run()` を「配線」に寄せ、描画と入力の責務を独立させるため。

from __future__ import annotations

import logging
from pathlib import Path

from pyglet.window import key

from infinipaper.core.gesture import PointerGestureStateMachine
from infinipaper.core.raster_buffer import GrowableRasterBuffer
from infinipaper.core.viewport import ViewportController
from infinipaper.export.image import default_png_output_path, save_png
from infinipaper.interactive.draw_window import create_paper_window
from infinipaper.interactive.gl.paper_renderer import PaperRenderer
from infinipaper.interactive.render_settings import RenderSettings
from infinipaper.interactive.runtime.pointer_input import PygletPointerAdapter

_logger = logging.getLogger(__name__)


class PaperWindowSystem:
    """紙表示（メインウィンドウ）のサブシステム。"""

    def __init__(
        self,
        *,
        buffer: GrowableRasterBuffer,
        viewport: ViewportController,
        gesture: PointerGestureStateMachine,
        settings: RenderSettings,
        wheel_step_delta: float,
    ) -> None:
        """window/renderer を初期化し、入力ハンドラを登録する。"""

        self._buffer = buffer
        self._viewport = viewport
        self._settings = settings

        self.window = create_paper_window(settings)
        self._renderer = PaperRenderer(self.window)

        self._pointer_input = PygletPointerAdapter(
            gesture,
            window_height=lambda: int(self.window.height),
            wheel_step_delta=wheel_step_delta,
        )
        self.window.push_handlers(self._pointer_input)
        self.window.push_handlers(on_key_press=self._on_key_press)

    def _on_key_press(self, symbol: int, _modifiers: int) -> None:
        if symbol == key.S:
            try:
                path = self.save_png()
            except (OSError, ValueError):
                _logger.exception("Failed to save PNG")
                return
            _logger.info("Saved PNG: %s", path)
            return
        if symbol == key.C:
            self._buffer.clear()
            return
        if symbol == key.R:
            self._viewport.reset()

    def save_png(self, path: str | Path | None = None) -> Path:
        """紙の物理ストアを PNG として保存し、保存先パスを返す。"""

        out = default_png_output_path() if path is None else Path(path)
        return save_png(self._buffer, out)

    def _framebuffer_size(self) -> tuple[int, int]:
        getter = getattr(self.window, "get_framebuffer_size", None)
        if callable(getter):
            w, h = getter()
            return int(w), int(h)
        return int(self.window.width), int(self.window.height)

    def draw_frame(self) -> None:
        """1 フレーム分の描画を行う（`flip()` は呼ばない）。"""

        # GL の viewport はフレームバッファ解像度、射影はウィンドウ（論理）解像度で組む。
        fb_w, fb_h = self._framebuffer_size()
        self._renderer.viewport(fb_w, fb_h)
        self._renderer.clear(self._settings.clear_color)
        self._renderer.sync(self._buffer)
        self._renderer.draw(self._viewport, (int(self.window.width), int(self.window.height)))

    def close(self) -> None:
        """GPU / window 資源を解放する。"""

        self._renderer.release()
        self.window.close()
