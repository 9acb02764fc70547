# どこで: `src/infinipaper/interactive/__init__.py`。
# 何を: pyglet / ModernGL に依存する interactive 層のパッケージ定義。
# なぜ: GUI 依存を core/export から切り離しておくため。

from __future__ import annotations

__all__: list[str] = []
