"""
どこで: `src/infinipaper/core/raster_buffer.py`。
何を: 必要に応じて物理ストアを拡張しながら論理座標で描ける GrowableRasterBuffer（“無限に広がりうる紙”）を提供する。
なぜ: 論理平面は無限でも、確保するピクセルは描いた範囲 + 余白だけに抑えるため。

Notes
-----
- 論理座標 = 物理座標 + origin。origin は負方向へ成長したときだけ動く。
- 描画系メソッドは「bbox 計算 → ensure_capacity → 物理座標で backend へ委譲」の順で進む。
- `sizing_only=True` を渡すと容量確保だけを行い、ピクセルは書かない。
"""

from __future__ import annotations

import logging
import math
from typing import Callable

from PIL import Image

from infinipaper.core.backend import RenderBackend
from infinipaper.core.raster_store import PillowRasterStore, RasterStore
from infinipaper.core.rect import PixelRect
from infinipaper.core.style import RGBA, WHITE, DrawStyle, coerce_rgba
from infinipaper.core.text_metrics import parse_font_size, text_bounding_box

_logger = logging.getLogger(__name__)

DEFAULT_GROWTH_MARGIN = 256

StoreFactory = Callable[[int, int, "RGBA | None"], RasterStore]


def _pillow_store(width: int, height: int, fill: RGBA | None) -> RasterStore:
    return PillowRasterStore(width, height, fill=fill)


class GrowableRasterBuffer:
    """論理座標で描画でき、描画範囲に合わせて自動で広がるラスタバッファ。"""

    def __init__(
        self,
        width: int = 1,
        height: int = 1,
        *,
        background: object | None = WHITE,
        growth_margin: int = DEFAULT_GROWTH_MARGIN,
        store_factory: StoreFactory = _pillow_store,
    ) -> None:
        if growth_margin < 0:
            raise ValueError(f"growth_margin は 0 以上である必要がある: got={growth_margin}")
        self._background: RGBA | None = None if background is None else coerce_rgba(background)
        self._growth_margin = int(growth_margin)
        self._store_factory = store_factory
        self._store = store_factory(1, 1, self._background)
        self._origin_x = 0
        self._origin_y = 0
        # ピクセル内容が変わるたびに進む世代番号（GPU テクスチャの再転送判定用）。
        self._revision = 0
        self.set_size(width, height)

    # ---------- 状態 ----------
    @property
    def physical_width(self) -> int:
        return self._store.size[0]

    @property
    def physical_height(self) -> int:
        return self._store.size[1]

    @property
    def origin_x(self) -> int:
        return self._origin_x

    @property
    def origin_y(self) -> int:
        return self._origin_y

    @property
    def origin(self) -> tuple[int, int]:
        return self._origin_x, self._origin_y

    @property
    def background_fill(self) -> RGBA | None:
        return self._background

    @property
    def erase_color(self) -> RGBA:
        """消しゴムに使う色（背景色、未設定なら白）。"""

        return self._background or WHITE

    @property
    def growth_margin(self) -> int:
        return self._growth_margin

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def bounds(self) -> PixelRect:
        """現在確保済みの論理範囲を返す。"""

        w, h = self._store.size
        return PixelRect(
            left=self._origin_x,
            top=self._origin_y,
            right=self._origin_x + w,
            bottom=self._origin_y + h,
        )

    def contains(self, x: float, y: float, w: float, h: float) -> bool:
        """論理矩形が確保済み範囲に収まっているかを返す。"""

        return self.bounds.contains(PixelRect.enclosing(x, y, w, h))

    def sample(self, x: float, y: float) -> RGBA | None:
        """論理座標 (x, y) のピクセル値を返す。確保範囲外なら None。"""

        px = math.floor(x) - self._origin_x
        py = math.floor(y) - self._origin_y
        w, h = self._store.size
        if not (0 <= px < w and 0 <= py < h):
            return None
        return self._store.pixel(px, py)

    def to_image(self) -> Image.Image:
        """物理ストアの内容を（コピーとして）返す。確保範囲外の論理内容は存在しない。"""

        return self._store.to_image()

    # ---------- サイズ ----------
    def set_size(self, width: int, height: int) -> GrowableRasterBuffer:
        """物理ストアを指定サイズで確保し直して背景で埋める。非正のサイズは no-op。"""

        if width <= 0 or height <= 0:
            return self
        self._store = self._store_factory(int(width), int(height), self._background)
        self._revision += 1
        return self

    def clear(self) -> GrowableRasterBuffer:
        """サイズと origin を保ったまま、全体を背景（未設定なら透明）で埋める。"""

        self._store.clear(self._background)
        self._revision += 1
        return self

    def ensure_capacity(self, x: float, y: float, w: float, h: float) -> bool:
        """論理矩形 `(x, y, w, h)` が確保範囲に収まるよう物理ストアを拡張する。

        Parameters
        ----------
        x, y, w, h : float
            論理矩形。w/h は負でもよい（角は min/max で正規化する）。

        Returns
        -------
        bool
            ストアを拡張した場合 True。既に収まっている / 退化矩形の場合 False。

        Notes
        -----
        はみ出した辺だけを「要求端 + growth_margin」まで広げる。
        旧内容は論理座標を保ったまま新ストアへコピーされ、新たに露出した領域は背景で埋まる。
        """

        if w == 0 or h == 0:
            return False
        requested = PixelRect.enclosing(x, y, w, h)
        if requested.is_empty:
            return False

        current = self.bounds
        if current.contains(requested):
            return False

        grown = current.grown_to_cover(requested, margin=self._growth_margin)
        dx = current.left - grown.left
        dy = current.top - grown.top
        self._store.resize_and_copy(grown.width, grown.height, dx, dy, fill=self._background)
        self._origin_x = grown.left
        self._origin_y = grown.top
        self._revision += 1
        _logger.debug(
            "paper grown: %s -> %s (requested=%s)",
            current,
            grown,
            requested,
        )
        return True

    # ---------- 描画 ----------
    def _write(self, sizing_only: bool, op: str) -> RenderBackend | None:
        if sizing_only:
            _logger.debug("sizing-only %s: skipped pixel write", op)
            return None
        self._revision += 1
        return self._store.backend()

    def line(
        self,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        style: DrawStyle,
        *,
        sizing_only: bool = False,
    ) -> GrowableRasterBuffer:
        """線分を丸端で描く。"""

        lw = float(style.line_width)
        self.ensure_capacity(
            min(x0, x1) - lw,
            min(y0, y1) - lw,
            abs(x1 - x0) + lw * 2,
            abs(y1 - y0) + lw * 2,
        )
        backend = self._write(sizing_only, "line")
        if backend is not None:
            ox, oy = self.origin
            backend.stroke_line(
                x0 - ox,
                y0 - oy,
                x1 - ox,
                y1 - oy,
                color=style.stroke_color,
                width=lw,
                cap="round",
            )
        return self

    def stroke_rect(
        self, x: float, y: float, w: float, h: float, style: DrawStyle, *, sizing_only: bool = False
    ) -> GrowableRasterBuffer:
        lw = float(style.line_width)
        # 反転した角は正規化してから線幅分を膨らませる。
        left, top = min(x, x + w), min(y, y + h)
        self.ensure_capacity(left - lw, top - lw, abs(w) + lw * 2, abs(h) + lw * 2)
        backend = self._write(sizing_only, "stroke_rect")
        if backend is not None:
            ox, oy = self.origin
            backend.stroke_rect(x - ox, y - oy, w, h, color=style.stroke_color, width=lw)
        return self

    def fill_rect(
        self, x: float, y: float, w: float, h: float, style: DrawStyle, *, sizing_only: bool = False
    ) -> GrowableRasterBuffer:
        self.ensure_capacity(x, y, w, h)
        backend = self._write(sizing_only, "fill_rect")
        if backend is not None:
            ox, oy = self.origin
            backend.fill_rect(x - ox, y - oy, w, h, color=style.fill_color)
        return self

    def stroke_circle(
        self, cx: float, cy: float, radius: float, style: DrawStyle, *, sizing_only: bool = False
    ) -> GrowableRasterBuffer:
        lw = float(style.line_width)
        r = abs(radius) + lw
        self.ensure_capacity(cx - r, cy - r, r * 2, r * 2)
        backend = self._write(sizing_only, "stroke_circle")
        if backend is not None:
            ox, oy = self.origin
            backend.stroke_circle(cx - ox, cy - oy, radius, color=style.stroke_color, width=lw)
        return self

    def fill_circle(
        self, cx: float, cy: float, radius: float, style: DrawStyle, *, sizing_only: bool = False
    ) -> GrowableRasterBuffer:
        r = abs(radius)
        self.ensure_capacity(cx - r, cy - r, r * 2, r * 2)
        backend = self._write(sizing_only, "fill_circle")
        if backend is not None:
            ox, oy = self.origin
            backend.fill_circle(cx - ox, cy - oy, radius, color=style.fill_color)
        return self

    def text_box(self, text: str, x: float, y: float, style: DrawStyle) -> tuple[float, float, float, float]:
        """`fill_text` が確保する論理矩形 `(x, y, w, h)` を返す。"""

        width = self._store.backend().measure_text(text, style.font)
        return text_bounding_box(
            x,
            y,
            text_width=width,
            font_size=parse_font_size(style.font),
            align=style.text_align,
            baseline=style.text_baseline,
        )

    def fill_text(
        self, text: str, x: float, y: float, style: DrawStyle, *, sizing_only: bool = False
    ) -> GrowableRasterBuffer:
        """アンカー (x, y) と style の align/baseline に従ってテキストを描く。"""

        bx, by, bw, bh = self.text_box(text, x, y, style)
        self.ensure_capacity(bx, by, bw, bh)
        backend = self._write(sizing_only, "fill_text")
        if backend is not None:
            ox, oy = self.origin
            backend.fill_text(text, bx - ox, by - oy, color=style.fill_color, font=style.font)
        return self

    def draw_image(
        self,
        image: Image.Image | GrowableRasterBuffer,
        dx: float,
        dy: float,
        dw: float | None = None,
        dh: float | None = None,
        *,
        src_rect: tuple[int, int, int, int] | None = None,
        sizing_only: bool = False,
    ) -> GrowableRasterBuffer:
        """画像（または別の GrowableRasterBuffer の物理ストア）を論理座標へ貼る。

        dw/dh を省略すると src_rect（未指定なら画像全体）のサイズで貼る。
        """

        src = image.to_image() if isinstance(image, GrowableRasterBuffer) else image
        if src_rect is not None:
            natural_w, natural_h = src_rect[2], src_rect[3]
        else:
            natural_w, natural_h = src.size
        w = float(natural_w if dw is None else dw)
        h = float(natural_h if dh is None else dh)

        self.ensure_capacity(dx, dy, w, h)
        backend = self._write(sizing_only, "draw_image")
        if backend is not None:
            ox, oy = self.origin
            backend.blit_image(src, dx - ox, dy - oy, w, h, src_rect=src_rect)
        return self


__all__ = ["DEFAULT_GROWTH_MARGIN", "GrowableRasterBuffer", "StoreFactory"]
