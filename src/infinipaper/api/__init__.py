# どこで: `src/infinipaper/api/__init__.py`。
# 何を: 公開 API パッケージのエントリポイントとして run / create_paper_session を再エクスポートする。
# なぜ: ユーザーコードからシンプルに API を import できるようにするため。

from __future__ import annotations

from .paper import PaperSession, create_paper_session

__all__ = ["PaperSession", "create_paper_session", "run"]


def run(*args, **kwargs):
    """公開 run API へのラッパ（遅延インポートで GUI 依存を後回しにする）。"""

    from .runner import run as _run

    return _run(*args, **kwargs)
