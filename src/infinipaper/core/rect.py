# どこで: `src/infinipaper/core/rect.py`。
# 何を: 論理座標の矩形を正規化し、整数ピクセル境界へ外向き丸めする小さな値型を提供する。
# なぜ: 容量確保と描画の bbox 計算で同じ丸め規則を共有するため。

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PixelRect:
    """半開区間 `[left, right) × [top, bottom)` の整数矩形。"""

    left: int
    top: int
    right: int
    bottom: int

    @classmethod
    def enclosing(cls, x: float, y: float, w: float, h: float) -> PixelRect:
        """`(x, y, w, h)` を包む最小の整数矩形を返す。

        負の w/h（反転した角）も受け付ける。最小側は floor、最大側は ceil で丸める。
        """

        x0, x1 = min(x, x + w), max(x, x + w)
        y0, y1 = min(y, y + h), max(y, y + h)
        return cls(
            left=math.floor(x0),
            top=math.floor(y0),
            right=math.ceil(x1),
            bottom=math.ceil(y1),
        )

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def contains(self, other: PixelRect) -> bool:
        return (
            other.left >= self.left
            and other.right <= self.right
            and other.top >= self.top
            and other.bottom <= self.bottom
        )

    def grown_to_cover(self, other: PixelRect, *, margin: int) -> PixelRect:
        """other を覆うよう、はみ出した辺だけを広げた矩形を返す。

        はみ出した辺は要求された端からさらに margin だけ外側へ置く。
        はみ出していない辺は動かさない。
        """

        left = other.left - margin if other.left < self.left else self.left
        right = other.right + margin if other.right > self.right else self.right
        top = other.top - margin if other.top < self.top else self.top
        bottom = other.bottom + margin if other.bottom > self.bottom else self.bottom
        return PixelRect(left=left, top=top, right=right, bottom=bottom)


__all__ = ["PixelRect"]
