"""
どこで: `src/infinipaper/core/style.py`。
何を: 描画スタイル（線色 / 塗り色 / 線幅 / フォント / 配置）と色の正規化ユーティリティを定義する。
なぜ: 描画呼び出しごとにスタイルを明示的に渡し、Paper 側に可変な描画状態を持たせないため。
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Literal, cast

from PIL import ImageColor

RGBA = tuple[int, int, int, int]

TextAlign = Literal["left", "right", "center", "start", "end"]
TextBaseline = Literal["top", "hanging", "middle", "alphabetic", "ideographic", "bottom"]

TRANSPARENT: RGBA = (0, 0, 0, 0)
WHITE: RGBA = (255, 255, 255, 255)
BLACK: RGBA = (0, 0, 0, 255)


def coerce_rgba(value: object) -> RGBA:
    """値を RGBA タプル `(r, g, b, a)`（0..255）に正規化して返す。

    Parameters
    ----------
    value : object
        `(r, g, b)` / `(r, g, b, a)` のシーケンス、または Pillow が解釈できる色文字列
        （`"white"`, `"#000"` など）。

    Returns
    -------
    tuple[int, int, int, int]
        `int()` 化 + 0..255 clamp 済みの RGBA。alpha 省略時は 255。

    Raises
    ------
    ValueError
        長さ 3/4 のシーケンスでも色文字列でもない場合。
    """

    if isinstance(value, str):
        try:
            rgb = ImageColor.getcolor(value, "RGBA")
        except ValueError as exc:
            raise ValueError(f"unknown color string: {value!r}") from exc
        return cast(RGBA, tuple(rgb))

    try:
        items = list(value)  # type: ignore[call-overload]
    except TypeError as exc:
        raise ValueError(f"color must be a string or a length-3/4 sequence: {value!r}") from exc
    if len(items) not in (3, 4):
        raise ValueError(f"color must be a string or a length-3/4 sequence: {value!r}")

    def _clamp(v: object) -> int:
        iv = int(cast(Any, v))
        return 0 if iv < 0 else 255 if iv > 255 else iv

    if len(items) == 3:
        items.append(255)
    r, g, b, a = (_clamp(v) for v in items)
    return r, g, b, a


@dataclass(frozen=True, slots=True)
class DrawStyle:
    """1 回の描画呼び出しに使うスタイル。"""

    stroke_color: RGBA = BLACK
    fill_color: RGBA = BLACK
    line_width: float = 1.0
    font: str = "16px sans-serif"
    text_align: TextAlign = "left"
    text_baseline: TextBaseline = "alphabetic"

    def with_stroke(self, color: object, width: float) -> DrawStyle:
        """線色と線幅だけを差し替えたコピーを返す。"""

        return replace(self, stroke_color=coerce_rgba(color), line_width=float(width))


__all__ = [
    "BLACK",
    "RGBA",
    "TRANSPARENT",
    "WHITE",
    "DrawStyle",
    "TextAlign",
    "TextBaseline",
    "coerce_rgba",
]
