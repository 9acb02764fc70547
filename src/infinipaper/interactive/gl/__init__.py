# どこで: `src/infinipaper/interactive/gl/__init__.py`。
# 何を: ModernGL による紙の GPU 描画をまとめるパッケージ定義。

from __future__ import annotations

__all__: list[str] = []
