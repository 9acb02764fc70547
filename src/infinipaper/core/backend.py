"""
どこで: `src/infinipaper/core/backend.py`。
何を: 物理座標で受け取ったプリミティブをピクセルへ書き込むレンダリングバックエンドを定義する。
なぜ: 容量確保（GrowableRasterBuffer）と実ピクセル書き込みを分離し、Pillow 以外の実装にも差し替えられるようにするため。
"""

from __future__ import annotations

import math
from typing import Literal, Protocol

from PIL import Image, ImageDraw

from infinipaper.core.style import RGBA
from infinipaper.core.text_metrics import load_font, measure_text

LineCap = Literal["butt", "round"]


class RenderBackend(Protocol):
    """原点平行移動済みの物理座標で描くプリミティブ群。"""

    def stroke_line(
        self,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        *,
        color: RGBA,
        width: float,
        cap: LineCap = "round",
    ) -> None: ...

    def stroke_rect(self, x: float, y: float, w: float, h: float, *, color: RGBA, width: float) -> None: ...

    def fill_rect(self, x: float, y: float, w: float, h: float, *, color: RGBA) -> None: ...

    def stroke_circle(self, cx: float, cy: float, r: float, *, color: RGBA, width: float) -> None: ...

    def fill_circle(self, cx: float, cy: float, r: float, *, color: RGBA) -> None: ...

    def fill_text(self, text: str, x: float, y: float, *, color: RGBA, font: str) -> None: ...

    def blit_image(
        self,
        image: Image.Image,
        dx: float,
        dy: float,
        dw: float,
        dh: float,
        *,
        src_rect: tuple[int, int, int, int] | None = None,
    ) -> None: ...

    def measure_text(self, text: str, font: str) -> float: ...


def _pixel_width(width: float) -> int:
    return max(1, int(round(float(width))))


def _span(a: float, length: float) -> tuple[float, float]:
    """`[a, a+length)` を Pillow の閉区間 `[lo, hi]` へ変換する。"""

    lo, hi = min(a, a + length), max(a, a + length)
    return lo, max(lo, hi - 1)


class PillowBackend:
    """`PIL.ImageDraw` でプリミティブを描くバックエンド。

    Notes
    -----
    キャンバスの線は辺の中心に乗るため、stroke 系は bbox を線幅の半分だけ外側へ広げてから描く。
    """

    def __init__(self, image: Image.Image) -> None:
        self._image = image
        self._draw = ImageDraw.Draw(image)

    def stroke_line(
        self,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        *,
        color: RGBA,
        width: float,
        cap: LineCap = "round",
    ) -> None:
        lw = _pixel_width(width)
        self._draw.line([(x0, y0), (x1, y1)], fill=color, width=lw)
        if cap == "round":
            # Pillow の line は butt 端なので、両端に円を置いて丸める。
            r = lw / 2.0
            for cx, cy in ((x0, y0), (x1, y1)):
                self._draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=color)
        elif cap != "butt":
            raise ValueError(f"未対応の line cap: {cap!r}")

    def stroke_rect(self, x: float, y: float, w: float, h: float, *, color: RGBA, width: float) -> None:
        lw = _pixel_width(width)
        half = lw / 2.0
        x_lo, x_hi = _span(x, w)
        y_lo, y_hi = _span(y, h)
        self._draw.rectangle(
            [x_lo - half, y_lo - half, x_hi + half, y_hi + half],
            outline=color,
            width=lw,
        )

    def fill_rect(self, x: float, y: float, w: float, h: float, *, color: RGBA) -> None:
        x_lo, x_hi = _span(x, w)
        y_lo, y_hi = _span(y, h)
        self._draw.rectangle([x_lo, y_lo, x_hi, y_hi], fill=color)

    def stroke_circle(self, cx: float, cy: float, r: float, *, color: RGBA, width: float) -> None:
        lw = _pixel_width(width)
        outer = abs(r) + lw / 2.0
        self._draw.ellipse([cx - outer, cy - outer, cx + outer, cy + outer], outline=color, width=lw)

    def fill_circle(self, cx: float, cy: float, r: float, *, color: RGBA) -> None:
        rr = abs(r)
        self._draw.ellipse([cx - rr, cy - rr, cx + rr, cy + rr], fill=color)

    def fill_text(self, text: str, x: float, y: float, *, color: RGBA, font: str) -> None:
        # (x, y) は占有矩形の左上。既定アンカー "la"（左 / ascender）がそれに対応する。
        self._draw.text((x, y), text, fill=color, font=load_font(font))

    def blit_image(
        self,
        image: Image.Image,
        dx: float,
        dy: float,
        dw: float,
        dh: float,
        *,
        src_rect: tuple[int, int, int, int] | None = None,
    ) -> None:
        src = image.convert("RGBA")
        if src_rect is not None:
            sx, sy, sw, sh = src_rect
            src = src.crop((sx, sy, sx + sw, sy + sh))
        size = (max(1, int(round(abs(dw)))), max(1, int(round(abs(dh)))))
        if src.size != size:
            src = src.resize(size)
        left = math.floor(min(dx, dx + dw))
        top = math.floor(min(dy, dy + dh))
        self._image.alpha_composite(src, dest=(left, top))

    def measure_text(self, text: str, font: str) -> float:
        return measure_text(text, font)


__all__ = ["LineCap", "PillowBackend", "RenderBackend"]
