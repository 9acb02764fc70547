# どこで: `src/infinipaper/__init__.py`。
# 何を: ルート `infinipaper` パッケージを定義する。
# なぜ: import 起点を `infinipaper` に統一するため。

from __future__ import annotations

from infinipaper.api import create_paper_session, run
from infinipaper.core import (
    DrawStyle,
    GrowableRasterBuffer,
    PointerGestureStateMachine,
    ViewportController,
)

__all__ = [
    "DrawStyle",
    "GrowableRasterBuffer",
    "PointerGestureStateMachine",
    "ViewportController",
    "create_paper_session",
    "run",
]
