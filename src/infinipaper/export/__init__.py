# どこで: `src/infinipaper/export/__init__.py`。
# 何を: 紙の物理ストアを書き出す export 関数を再エクスポートする。
# なぜ: interactive 層に依存せず、ヘッドレスに PNG を得られるようにするため。

from __future__ import annotations

from infinipaper.export.image import default_png_output_path, encode_png, save_png

__all__ = ["default_png_output_path", "encode_png", "save_png"]
