"""
どこで: `src/infinipaper/export/image.py`。
何を: GrowableRasterBuffer の物理ストアを PNG へエンコード / 保存する関数を提供する。
なぜ: 画面表示（ビューポート）とは独立に、紙に描かれた内容そのものを書き出せるようにするため。

Notes
-----
書き出されるのは確保済みの物理ストアだけで、無限平面そのものではない。
"""

from __future__ import annotations

import io
import time
from pathlib import Path

from infinipaper.core.raster_buffer import GrowableRasterBuffer
from infinipaper.core.runtime_config import output_root_dir

PNG_NAME_PREFIX = "infinity-paper"


def encode_png(buffer: GrowableRasterBuffer) -> bytes:
    """バッファの物理ストアを PNG バイト列として返す。"""

    out = io.BytesIO()
    buffer.to_image().save(out, format="PNG")
    return out.getvalue()


def save_png(buffer: GrowableRasterBuffer, path: str | Path) -> Path:
    """バッファの物理ストアを PNG として保存し、保存先パスを返す。"""

    _path = Path(path)
    if _path.suffix.lower() != ".png":
        raise ValueError(f"未対応の画像フォーマット: {_path.suffix!r}")
    _path.parent.mkdir(parents=True, exist_ok=True)
    _path.write_bytes(encode_png(buffer))
    return _path


def default_png_output_path(*, now_ms: int | None = None) -> Path:
    """PNG の既定保存パスを返す。

    Notes
    -----
    パスは `{output_root}/png/infinity-paper-{epoch_ms}.png`。
    """

    stamp = int(time.time() * 1000) if now_ms is None else int(now_ms)
    return output_root_dir() / "png" / f"{PNG_NAME_PREFIX}-{stamp}.png"


__all__ = ["PNG_NAME_PREFIX", "default_png_output_path", "encode_png", "save_png"]
