"""依存境界（core/export/interactive）の破りを検出するテスト。"""

from __future__ import annotations

import ast
from pathlib import Path

import pytest

_SRC = Path(__file__).resolve().parents[2] / "src"
_PACKAGE = _SRC / "infinipaper"

_GUI_MODULES = ("pyglet", "moderngl")


def _imported_modules(path: Path) -> set[str]:
    """ファイル中の import 先を絶対モジュール名で返す（相対 import は解決する）。"""

    rel = path.relative_to(_SRC).with_suffix("")
    # `__init__.py` でも通常モジュールでも、相対 import の基準はファイルのあるパッケージ。
    package_parts = list(rel.parts[:-1])

    modules: set[str] = set()
    for node in ast.walk(ast.parse(path.read_text(encoding="utf-8"))):
        if isinstance(node, ast.Import):
            modules.update(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom):
            level = int(node.level or 0)
            if level == 0:
                base = str(node.module or "")
            else:
                base_parts = package_parts[: len(package_parts) - (level - 1)]
                base = ".".join(base_parts + ([node.module] if node.module else []))
            modules.add(base)
            modules.update(f"{base}.{a.name}" for a in node.names if a.name != "*")
    return modules


def _violations(root: Path, forbidden: tuple[str, ...]) -> list[str]:
    out: list[str] = []
    for path in sorted(root.rglob("*.py")):
        bad = sorted(m for m in _imported_modules(path) if m.startswith(forbidden))
        if bad:
            out.append(f"{path.relative_to(_SRC)}: {', '.join(bad)}")
    return out


@pytest.mark.parametrize(
    ("subpackage", "forbidden"),
    [
        ("core", ("infinipaper.export", "infinipaper.interactive", "infinipaper.api", *_GUI_MODULES)),
        ("export", ("infinipaper.interactive", "infinipaper.api", *_GUI_MODULES)),
    ],
)
def test_headless_layers_do_not_import_gui(subpackage: str, forbidden: tuple[str, ...]) -> None:
    violations = _violations(_PACKAGE / subpackage, forbidden)
    assert not violations, "依存境界違反の import を検出:\n" + "\n".join(violations)


def test_api_paper_module_stays_headless() -> None:
    bad = sorted(m for m in _imported_modules(_PACKAGE / "api" / "paper.py") if m.startswith(_GUI_MODULES))
    assert bad == []


def test_relative_imports_are_resolved_against_the_package() -> None:
    modules = _imported_modules(_PACKAGE / "api" / "__init__.py")
    assert "infinipaper.api.paper" in modules
    assert "infinipaper.api.paper.create_paper_session" in modules
