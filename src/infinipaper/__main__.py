"""
どこで: `src/infinipaper/__main__.py`。
何を: `python -m infinipaper` のエントリポイント。
なぜ: スクリプトを書かずに紙を開けるようにするため。
"""

from __future__ import annotations

import argparse
from pathlib import Path

from infinipaper.api import run


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="infinipaper")
    p.add_argument("--config", type=Path, default=None, help="config.yaml のパス")
    p.add_argument("--size", type=int, nargs=2, metavar=("W", "H"), default=None, help="初期サイズ")
    p.add_argument("--fps", type=float, default=60.0)
    p.add_argument("--no-greeting", action="store_true", help="起動時の案内文を描かない")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    run(
        config_path=args.config,
        window_size=None if args.size is None else (int(args.size[0]), int(args.size[1])),
        greeting=not args.no_greeting,
        fps=float(args.fps),
    )


if __name__ == "__main__":
    main()
