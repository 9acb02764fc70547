# どこで: `src/infinipaper/core/text_metrics.py`。
# 何を: CSS 風フォント指定（"20px sans-serif"）の解釈、Pillow フォントのロード、テキスト bbox 計算を提供する。
# なぜ: 描画前に容量確保するため、テキストの占有矩形をピクセル書き込みより先に求める必要があるため。

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Union

from PIL import ImageFont

from infinipaper.core.style import TextAlign, TextBaseline

_logger = logging.getLogger(__name__)

DEFAULT_FONT_SIZE = 16.0
# 行送り相当の余裕（bbox 高さ = font_size * この値）。
LINE_HEIGHT_RATIO = 1.2

_FONT_SIZE_RE = re.compile(r"(\d+(?:\.\d+)?)(px|pt|em|rem|vh|vw|dvh|dvw)")

PillowFont = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]


def parse_font_size(font: str) -> float:
    """フォント指定文字列から数値サイズを取り出す。

    単位は見ずに数値だけを使う。解釈できない場合と、サイズが 0 以下（`"0px"` など）の場合は
    `DEFAULT_FONT_SIZE` を返す。
    """

    m = _FONT_SIZE_RE.search(str(font))
    if m is None:
        return DEFAULT_FONT_SIZE
    size = float(m.group(1))
    if size <= 0:
        return DEFAULT_FONT_SIZE
    return size


def parse_font_family(font: str) -> str:
    """フォント指定文字列からサイズ以降のファミリ名（またはフォントファイルパス）を返す。"""

    text = str(font)
    m = _FONT_SIZE_RE.search(text)
    if m is None:
        return text.strip()
    return text[m.end() :].strip()


@lru_cache(maxsize=32)
def load_font(font: str) -> PillowFont:
    """フォント指定に対応する Pillow フォントを返す（キャッシュ）。

    Notes
    -----
    ファミリ名を TrueType ファイルとして開けない場合は、同サイズの Pillow 既定フォントを使う。
    """

    size = parse_font_size(font)
    family = parse_font_family(font)
    if family:
        try:
            return ImageFont.truetype(family, size)
        except OSError:
            _logger.debug("TrueType font not found, using Pillow default: %r", family)
    return ImageFont.load_default(size=size)


def measure_text(text: str, font: str) -> float:
    """現在のフォント指定で描いたときのテキスト幅を返す。"""

    if not text:
        return 0.0
    return float(load_font(font).getlength(text))


def text_bounding_box(
    x: float,
    y: float,
    *,
    text_width: float,
    font_size: float,
    align: TextAlign,
    baseline: TextBaseline,
) -> tuple[float, float, float, float]:
    """アンカー点 (x, y) に置いたテキストの占有矩形 `(x, y, w, h)` を返す。"""

    offset_x = 0.0
    if align == "center":
        offset_x = -text_width / 2.0
    elif align in ("right", "end"):
        offset_x = -text_width

    offset_y = -font_size
    if baseline == "top":
        offset_y = 0.0
    elif baseline == "middle":
        offset_y = -font_size / 2.0

    return (x + offset_x, y + offset_y, text_width, font_size * LINE_HEIGHT_RATIO)


__all__ = [
    "DEFAULT_FONT_SIZE",
    "LINE_HEIGHT_RATIO",
    "PillowFont",
    "load_font",
    "measure_text",
    "parse_font_family",
    "parse_font_size",
    "text_bounding_box",
]
