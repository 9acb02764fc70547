# どこで: `src/infinipaper/interactive/runtime/__init__.py`。
# 何を: interactive 実行時の「ループ/サブシステム/入力変換」実装をまとめるパッケージ定義。
# なぜ: `src/infinipaper/api/runner.py` の肥大化を防ぎ、責務ごとの実装差し替えを容易にするため。

from __future__ import annotations

__all__: list[str] = []
