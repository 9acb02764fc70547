# どこで: `src/infinipaper/interactive/render_settings.py`。
# 何を: interactive 描画設定の束を表すデータクラスを定義する。
# なぜ: `run` の引数を簡潔に保ちつつ、interactive 側の設定を一元管理するため。

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RenderSettings:
    """リアルタイム描画に用いる設定値の集合。"""

    # 紙の外側（未確保領域）の塗り色。RGB 0..1。
    clear_color: tuple[float, float, float] = (0.85, 0.85, 0.85)
    window_size: tuple[int, int] = (1024, 768)
    caption: str = "Infinity Paper"
    fps: float = 60.0
