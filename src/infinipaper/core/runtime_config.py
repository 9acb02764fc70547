# どこで: `src/infinipaper/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: 成長マージンや消しゴム幅などの定数を、コードを触らずにユーザーが調整できるようにするため。

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from infinipaper.core.style import RGBA, coerce_rgba


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """infinipaper の実行時設定。"""

    config_path: Path | None
    output_dir: Path
    background_color: RGBA | None
    growth_margin: int
    pen_color: RGBA
    draw_width: float
    erase_width: float
    wheel_zoom_base: float
    wheel_step_delta: float
    window_size: tuple[int, int]
    window_pos: tuple[int, int]
    font: str


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    p = Path(str(path)).expanduser()
    _EXPLICIT_CONFIG_PATH = p
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".infinipaper" / "config.yaml",
        home / ".config" / "infinipaper" / "config.yaml",
    )


def _expand_path_text(text: str) -> str:
    return os.path.expandvars(os.path.expanduser(str(text)))


def _as_optional_path(value: Any) -> Path | None:
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    return Path(_expand_path_text(s))


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_int_pair(value: Any, *, key: str) -> tuple[int, int] | None:
    if value is None:
        return None
    try:
        seq = list(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}") from exc
    if len(seq) != 2:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}")
    try:
        x = int(seq[0])
        y = int(seq[1])
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の整数配列である必要があります: got={value!r}") from exc
    return (x, y)


def _as_float(value: Any, *, key: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _as_color(value: Any, *, key: str) -> RGBA | None:
    if value is None:
        return None
    try:
        return coerce_rgba(value)
    except ValueError as exc:
        raise RuntimeError(f"{key} は色として解釈できません: got={value!r}") from exc


def _require(value: Any, *, key: str) -> Any:
    if value is None:
        raise RuntimeError(
            f"{key} が未設定です（同梱 default_config.yaml を確認してください）"
        )
    return value


def _require_positive(value: float, *, key: str) -> float:
    if value <= 0:
        raise ValueError(f"{key} は正の値である必要があります: got={value}")
    return value


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    import yaml  # type: ignore[import-untyped]

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")

    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    return _load_yaml_text(text, source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    try:
        blob = (
            resources.files("infinipaper")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except OSError as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="infinipaper/resource/default_config.yaml")


def _merge_payload(base: dict[str, Any], override: dict[str, Any]) -> None:
    """override を base へ 1 段だけ深くマージする（セクション単位の部分上書きを許す）。"""

    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged = dict(current)
            merged.update(value)
            base[key] = merged
        else:
            base[key] = value


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。"""

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        _merge_payload(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        _merge_payload(payload, _load_yaml_config(explicit_path))

    version = _require(payload.get("version"), key="version")
    try:
        version_i = int(version)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    paths = _as_mapping(payload.get("paths"), key="paths")
    output_dir = _require(_as_optional_path(paths.get("output_dir")), key="paths.output_dir")

    paper = _as_mapping(payload.get("paper"), key="paper")
    # background_color は null（透明）を許すため _require しない。
    background_color = _as_color(paper.get("background_color"), key="paper.background_color")
    growth_margin = _require(
        _as_float(paper.get("growth_margin"), key="paper.growth_margin"),
        key="paper.growth_margin",
    )
    if growth_margin < 0:
        raise ValueError(f"paper.growth_margin は 0 以上である必要があります: got={growth_margin}")

    pen = _as_mapping(payload.get("pen"), key="pen")
    pen_color = _require(_as_color(pen.get("color"), key="pen.color"), key="pen.color")
    draw_width = _require_positive(
        _require(_as_float(pen.get("draw_width"), key="pen.draw_width"), key="pen.draw_width"),
        key="pen.draw_width",
    )
    erase_width = _require_positive(
        _require(_as_float(pen.get("erase_width"), key="pen.erase_width"), key="pen.erase_width"),
        key="pen.erase_width",
    )

    input_ = _as_mapping(payload.get("input"), key="input")
    wheel_zoom_base = _require_positive(
        _require(
            _as_float(input_.get("wheel_zoom_base"), key="input.wheel_zoom_base"),
            key="input.wheel_zoom_base",
        ),
        key="input.wheel_zoom_base",
    )
    wheel_step_delta = _require(
        _as_float(input_.get("wheel_step_delta"), key="input.wheel_step_delta"),
        key="input.wheel_step_delta",
    )

    ui = _as_mapping(payload.get("ui"), key="ui")
    window_size = _require(_as_int_pair(ui.get("window_size"), key="ui.window_size"), key="ui.window_size")
    window_pos = _require(_as_int_pair(ui.get("window_pos"), key="ui.window_pos"), key="ui.window_pos")

    text = _as_mapping(payload.get("text"), key="text")
    font = str(_require(text.get("font"), key="text.font"))

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        output_dir=output_dir,
        background_color=background_color,
        growth_margin=int(growth_margin),
        pen_color=pen_color,
        draw_width=float(draw_width),
        erase_width=float(erase_width),
        wheel_zoom_base=float(wheel_zoom_base),
        wheel_step_delta=float(wheel_step_delta),
        window_size=window_size,
        window_pos=window_pos,
        font=font,
    )
    _CONFIG_CACHE = cfg
    return cfg


def output_root_dir() -> Path:
    """出力ファイルを保存する既定ルートディレクトリを返す。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.infinipaper/config.yaml` / `~/.config/infinipaper/config.yaml`
    3) `run(..., config_path=...)` の `config_path`
    """

    cfg = runtime_config()
    return Path(cfg.output_dir)


__all__ = ["RuntimeConfig", "output_root_dir", "runtime_config", "set_config_path"]
