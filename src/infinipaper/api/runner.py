"""
どこで: `src/infinipaper/api/runner.py`。公開 API のランナー実装。
何を: pyglet + ModernGL を使い、無限に広がる紙をウィンドウに表示して描画 / パン / ズームできるランナーを提供する。
なぜ: `python -m infinipaper` で実際に紙へ描ける経路を用意するため。
"""

from __future__ import annotations

import logging
from pathlib import Path

import pyglet

from infinipaper.api.paper import create_paper_session
from infinipaper.core.runtime_config import runtime_config, set_config_path
from infinipaper.interactive.render_settings import RenderSettings
from infinipaper.interactive.runtime.paper_window_system import PaperWindowSystem
from infinipaper.interactive.runtime.window_loop import WindowLoop, WindowTask


def run(
    *,
    config_path: str | Path | None = None,
    window_size: tuple[int, int] | None = None,
    greeting: bool = True,
    fps: float = 60.0,
) -> None:
    """pyglet ウィンドウを生成し、紙への描画操作を受け付ける。

    Parameters
    ----------
    config_path : str | Path | None
        設定ファイル（config.yaml）のパス。指定した場合は探索より優先する。
    window_size : tuple[int, int] | None
        ウィンドウと紙の初期サイズ。None の場合は config の `ui.window_size`。
    greeting : bool
        True の場合、起動時の紙に案内文を描く。
    fps : float
        目標フレームレート。`<=0` の場合はスロットリングしない。

    Returns
    -------
    None
        ウィンドウを閉じると制御を返す。

    Notes
    -----
    左ドラッグ: 描画 / 中ドラッグ: パン / 右ドラッグ: 消しゴム / ホイール: ズーム。
    S: PNG 保存、C: 紙をクリア、R: 表示位置と倍率を戻す。
    """

    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO)

    set_config_path(config_path)
    cfg = runtime_config()

    # pyglet の Window 作成前にオプションを設定する。
    pyglet.options["vsync"] = False

    size = window_size if window_size is not None else cfg.window_size
    session = create_paper_session(cfg, size=size, greeting=greeting)

    settings = RenderSettings(window_size=size, fps=float(fps))
    paper_window = PaperWindowSystem(
        buffer=session.buffer,
        viewport=session.viewport,
        gesture=session.gesture,
        settings=settings,
        wheel_step_delta=cfg.wheel_step_delta,
    )
    paper_window.window.set_location(*cfg.window_pos)

    loop = WindowLoop(
        WindowTask(window=paper_window.window, draw_frame=paper_window.draw_frame),
        fps=fps,
    )
    try:
        loop.run()
    finally:
        # 例外でも確実に後始末する。
        paper_window.close()
