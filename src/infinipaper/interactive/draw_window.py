# どこで: `src/infinipaper/interactive/draw_window.py`。
# 何を: 紙を表示する pyglet ウィンドウ生成を行う。
# なぜ: interactive 依存をこの層に閉じ込め、core/export をヘッドレスに保つため。

from __future__ import annotations

import pyglet
from pyglet.gl import Config
from pyglet.window import Window

from infinipaper.interactive.render_settings import RenderSettings


def create_paper_window(settings: RenderSettings) -> Window:
    """設定に基づき描画ウィンドウを生成する。"""
    config = Config(double_buffer=True, major_version=4, minor_version=1, forward_compatible=True)  # type: ignore[abstract]
    width, height = settings.window_size
    window = pyglet.window.Window(  # type: ignore[abstract]
        width=int(width),
        height=int(height),
        resizable=True,
        caption=settings.caption,
        config=config,
    )
    return window
