# どこで: `src/infinipaper/core/viewport.py`。
# 何を: スクリーン座標と論理座標の相互変換、パン / アンカー固定ズーム / ピンチ、バッファのスクリーン描画を提供する。
# なぜ: 入力側（gesture）と表示側（renderer）が同じ scale/offset を共有し、座標系のずれを起こさないため。

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from PIL import Image

from infinipaper.core.raster_buffer import GrowableRasterBuffer

_logger = logging.getLogger(__name__)

Point = tuple[float, float]

DEFAULT_WHEEL_ZOOM_BASE = 0.999


def distance(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def midpoint(a: Point, b: Point) -> Point:
    return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


@dataclass(frozen=True, slots=True)
class PinchState:
    """ピンチ 1 ステップ分の「前回値」。"""

    distance: float
    midpoint: Point


class ViewportController:
    """論理座標 → スクリーン座標の写像 `p * scale + offset` を保持する。"""

    def __init__(
        self,
        buffer: GrowableRasterBuffer,
        *,
        scale: float = 1.0,
        offset: Point = (0.0, 0.0),
        wheel_zoom_base: float = DEFAULT_WHEEL_ZOOM_BASE,
    ) -> None:
        if not (scale > 0 and math.isfinite(scale)):
            raise ValueError(f"scale は正の有限値である必要がある: got={scale}")
        if wheel_zoom_base <= 0:
            raise ValueError(f"wheel_zoom_base は正の値である必要がある: got={wheel_zoom_base}")
        self._buffer = buffer
        self._scale = float(scale)
        self._offset_x = float(offset[0])
        self._offset_y = float(offset[1])
        self._wheel_zoom_base = float(wheel_zoom_base)

    @property
    def buffer(self) -> GrowableRasterBuffer:
        return self._buffer

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def offset(self) -> Point:
        return self._offset_x, self._offset_y

    # ---------- 座標変換 ----------
    def logical_to_screen(self, p: Point) -> Point:
        return (p[0] * self._scale + self._offset_x, p[1] * self._scale + self._offset_y)

    def screen_to_logical(self, p: Point) -> Point:
        return ((p[0] - self._offset_x) / self._scale, (p[1] - self._offset_y) / self._scale)

    # ---------- 操作 ----------
    def apply_anchored_zoom(self, anchor: Point, factor: float) -> bool:
        """anchor（スクリーン座標）の下の論理点を固定したまま scale を factor 倍する。

        結果の scale が正の有限値にならない場合は何もせず False を返す。
        """

        new_scale = self._scale * float(factor)
        if not (new_scale > 0 and math.isfinite(new_scale)):
            _logger.debug("zoom rejected: scale=%s factor=%s", self._scale, factor)
            return False
        ax, ay = anchor
        self._offset_x = ax - (ax - self._offset_x) * factor
        self._offset_y = ay - (ay - self._offset_y) * factor
        self._scale = new_scale
        return True

    def apply_pan(self, delta: Point) -> None:
        self._offset_x += delta[0]
        self._offset_y += delta[1]

    def apply_pinch(self, a: Point, b: Point, previous: PinchState) -> PinchState:
        """2 点ピンチの 1 ステップを適用し、次ステップ用の前回値を返す。

        Notes
        -----
        - 前回距離 0 は「このステップはズームしない」（factor=1）として扱う。
        - 現在の中点を基準にズームしてから、中点の移動量だけパンする。
        - ズームが拒否された場合（現在距離 0 など）は scale / offset とも変えない。
        """

        current_distance = distance(a, b)
        current_mid = midpoint(a, b)
        factor = 1.0 if previous.distance == 0 else current_distance / previous.distance
        nxt = PinchState(distance=current_distance, midpoint=current_mid)
        if not self.apply_anchored_zoom(current_mid, factor):
            # 拒否されたステップはパンもしない。前回値だけ進める。
            return nxt
        self.apply_pan(
            (current_mid[0] - previous.midpoint[0], current_mid[1] - previous.midpoint[1])
        )
        return nxt

    def apply_wheel(self, delta_y: float, anchor: Point) -> bool:
        """ホイール量 delta_y をカーソル位置基準のズームへ変換する（delta_y > 0 で縮小）。

        倍率がオーバーフローする量は拒否されたズームとして扱い、False を返す。
        """

        try:
            factor = self._wheel_zoom_base ** float(delta_y)
        except OverflowError:
            factor = math.inf
        return self.apply_anchored_zoom(anchor, factor)

    def reset(self) -> None:
        self._scale = 1.0
        self._offset_x = 0.0
        self._offset_y = 0.0

    # ---------- 表示 ----------
    def screen_to_physical_affine(self) -> tuple[float, float, float, float, float, float]:
        """スクリーン座標 → バッファ物理座標のアフィン係数 `(a, b, c, d, e, f)` を返す。

        `x_phys = a*x + b*y + c`, `y_phys = d*x + e*y + f`（Pillow の AFFINE と同じ並び）。
        """

        inv = 1.0 / self._scale
        ox, oy = self._buffer.origin
        return (
            inv,
            0.0,
            -self._offset_x * inv - ox,
            0.0,
            inv,
            -self._offset_y * inv - oy,
        )

    def render(self, target: Image.Image) -> Image.Image:
        """現在の scale/offset でバッファの物理ストアを target へ合成する。

        Parameters
        ----------
        target : PIL.Image.Image
            RGBA の描画先（スクリーン）。その場で更新される。

        Returns
        -------
        PIL.Image.Image
            target 自身。
        """

        source = self._buffer.to_image()
        resample = Image.Resampling.NEAREST if self._scale >= 1.0 else Image.Resampling.BILINEAR
        layer = source.transform(
            target.size,
            Image.Transform.AFFINE,
            self.screen_to_physical_affine(),
            resample=resample,
            fillcolor=(0, 0, 0, 0),
        )
        target.alpha_composite(layer)
        return target


__all__ = [
    "DEFAULT_WHEEL_ZOOM_BASE",
    "PinchState",
    "Point",
    "ViewportController",
    "distance",
    "midpoint",
]
