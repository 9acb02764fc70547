"""
どこで: `src/infinipaper/core/raster_store.py`。
何を: 物理ピクセルストアのインターフェイス（サイズ / リサイズ+コピー / 書き込み口）と Pillow 実装を提供する。
なぜ: GrowableRasterBuffer の成長アルゴリズムを、具体的なピクセル配列の持ち方から切り離すため。
"""

from __future__ import annotations

from typing import Protocol

import numpy as np
from PIL import Image

from infinipaper.core.backend import PillowBackend, RenderBackend
from infinipaper.core.style import RGBA, TRANSPARENT


class RasterStore(Protocol):
    """GrowableRasterBuffer が必要とする最小のピクセルストア。"""

    @property
    def size(self) -> tuple[int, int]: ...

    def resize_and_copy(self, width: int, height: int, dx: int, dy: int, *, fill: RGBA | None) -> None:
        """新サイズで確保し直し、旧内容を (dx, dy) に置き、残りを fill で埋める。"""
        ...

    def clear(self, fill: RGBA | None) -> None: ...

    def backend(self) -> RenderBackend: ...

    def pixel(self, px: int, py: int) -> RGBA: ...

    def to_image(self) -> Image.Image: ...


class PillowRasterStore:
    """RGBA の `PIL.Image` を実体とするピクセルストア。"""

    def __init__(self, width: int, height: int, *, fill: RGBA | None = None) -> None:
        self._image = Image.new("RGBA", (int(width), int(height)), fill or TRANSPARENT)
        self._backend: PillowBackend | None = None

    @property
    def size(self) -> tuple[int, int]:
        return self._image.size

    def resize_and_copy(self, width: int, height: int, dx: int, dy: int, *, fill: RGBA | None) -> None:
        old = np.asarray(self._image)
        old_h, old_w = old.shape[:2]
        if dx < 0 or dy < 0 or dx + old_w > width or dy + old_h > height:
            raise ValueError(
                "resize_and_copy は旧内容を全て含むサイズである必要がある: "
                f"old={(old_w, old_h)} new={(width, height)} offset={(dx, dy)}"
            )

        # 新しい配列の確保に失敗した場合（MemoryError）はそのまま送出する。
        arr = np.empty((int(height), int(width), 4), dtype=np.uint8)
        arr[...] = fill or TRANSPARENT
        arr[dy : dy + old_h, dx : dx + old_w] = old

        # 確保とコピーが全て終わってから差し替える。
        self._image = Image.fromarray(arr)
        self._backend = None

    def clear(self, fill: RGBA | None) -> None:
        self._image.paste(fill or TRANSPARENT, (0, 0, *self._image.size))

    def backend(self) -> RenderBackend:
        if self._backend is None:
            self._backend = PillowBackend(self._image)
        return self._backend

    def pixel(self, px: int, py: int) -> RGBA:
        value = self._image.getpixel((int(px), int(py)))
        return tuple(value)  # type: ignore[arg-type,return-value]

    def to_image(self) -> Image.Image:
        return self._image.copy()

    def as_array(self) -> np.ndarray:
        """ストア内容を `(height, width, 4)` の uint8 配列として返す（コピー）。"""

        return np.array(self._image, dtype=np.uint8)


__all__ = ["PillowRasterStore", "RasterStore"]
