# どこで: `src/infinipaper/interactive/runtime/window_loop.py`。
# 何を: 紙ウィンドウを pyglet の app loop（`pyglet.app.run()`）で回す最小ランナーを提供する。
# なぜ: OS 依存のイベント配送を pyglet に任せ、入力イベントを 1 件ずつ処理し切ってから描画するため。

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import pyglet


@dataclass(frozen=True, slots=True)
class WindowTask:
    """1つの pyglet window と「flip しない描画関数」を束ねる。"""

    # 注: pyglet の Window 型は環境/バージョン差があるため Any に寄せる。
    window: Any

    # 1フレーム分の描画処理（back buffer へ描くだけ）。
    # `switch_to()` / `flip()` は pyglet（`Window.draw()`）が担当する前提。
    draw_frame: Callable[[], None]


class WindowLoop:
    """ウィンドウを固定 fps で再描画するループ。"""

    def __init__(self, task: WindowTask, *, fps: float) -> None:
        """ループを初期化する。

        Parameters
        ----------
        task : WindowTask
            1 フレームごとに描画したいウィンドウと描画処理。
        fps : float
            目標フレームレート。`<=0` の場合はスロットリングしない。
        """

        self._task = task
        self._fps = float(fps)

    def run(self) -> None:
        """ウィンドウが閉じられるまでループを実行する。"""

        task = self._task

        def request_exit(*_: object) -> None:
            # pyglet の on_close から呼ばれるコールバックは引数が来る場合があるため *args を受ける。
            pyglet.app.exit()

        task.window.push_handlers(on_close=request_exit)
        task.window.push_handlers(on_draw=task.draw_frame)

        def draw(dt: float) -> None:
            # 閉じられたウィンドウへ draw すると例外になり得る。
            if task.window not in pyglet.app.windows:
                return
            task.window.draw(dt)

        if self._fps <= 0:
            pyglet.clock.schedule(draw)
        else:
            pyglet.clock.schedule_interval(draw, 1.0 / float(self._fps))

        try:
            pyglet.app.run(interval=None)
        finally:
            pyglet.clock.unschedule(draw)
