"""
どこで: `src/infinipaper/api/paper.py`。
何を: 実行時設定から紙（GrowableRasterBuffer / ViewportController / 状態機械）一式を組み立てる。
なぜ: ウィンドウを開かずに同じ構成を作れるようにし、run() とテストで組み立て手順を共有するため。
"""

from __future__ import annotations

from dataclasses import dataclass

from infinipaper.core.gesture import PenSettings, PointerGestureStateMachine
from infinipaper.core.raster_buffer import GrowableRasterBuffer
from infinipaper.core.runtime_config import RuntimeConfig
from infinipaper.core.style import BLACK, DrawStyle
from infinipaper.core.viewport import ViewportController

GREETING_LINES = ("Infinity Paper", "Draw something")


@dataclass(frozen=True, slots=True)
class PaperSession:
    """1 枚の紙と、それを操作する viewport / gesture の組。"""

    buffer: GrowableRasterBuffer
    viewport: ViewportController
    gesture: PointerGestureStateMachine


def write_greeting(buffer: GrowableRasterBuffer, width: int, height: int, *, font: str) -> None:
    """起動直後の紙に中央寄せの案内文を 2 行描く。"""

    style = DrawStyle(fill_color=BLACK, font=font, text_align="center", text_baseline="middle")
    title, hint = GREETING_LINES
    buffer.fill_text(title, width / 2, height / 3, style)
    buffer.fill_text(hint, width / 2, height / 2, style)


def create_paper_session(
    cfg: RuntimeConfig,
    *,
    size: tuple[int, int] | None = None,
    greeting: bool = True,
) -> PaperSession:
    """設定値に従って紙一式を生成する。

    Parameters
    ----------
    cfg : RuntimeConfig
        背景色 / 成長マージン / ペン設定 / ホイール係数 / フォントの取得元。
    size : tuple[int, int] | None
        紙の初期サイズ。None の場合は `cfg.window_size`。
    greeting : bool
        True の場合、案内文を描いた状態で返す。
    """

    width, height = size if size is not None else cfg.window_size
    buffer = GrowableRasterBuffer(
        width,
        height,
        background=cfg.background_color,
        growth_margin=cfg.growth_margin,
    )
    if greeting:
        write_greeting(buffer, width, height, font=cfg.font)

    viewport = ViewportController(buffer, wheel_zoom_base=cfg.wheel_zoom_base)
    pen = PenSettings(color=cfg.pen_color, draw_width=cfg.draw_width, erase_width=cfg.erase_width)
    gesture = PointerGestureStateMachine(buffer, viewport, pen=pen)
    return PaperSession(buffer=buffer, viewport=viewport, gesture=gesture)


__all__ = ["GREETING_LINES", "PaperSession", "create_paper_session", "write_greeting"]
