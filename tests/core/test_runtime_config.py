from pathlib import Path

import pytest

from infinipaper.core.runtime_config import output_root_dir, runtime_config, set_config_path


@pytest.fixture(autouse=True)
def _reset_runtime_config() -> None:
    set_config_path(None)
    yield
    set_config_path(None)


def _isolate_config_discovery(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


def _write_discovered(tmp_path: Path, text: str) -> Path:
    discovered = tmp_path / ".infinipaper" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text(text, encoding="utf-8")
    return discovered


def test_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    assert output_root_dir() == Path("data") / "output"
    cfg = runtime_config()
    assert cfg.config_path is None
    assert cfg.background_color == (255, 255, 255, 255)
    assert cfg.growth_margin == 256
    assert cfg.pen_color == (0, 0, 0, 255)
    assert cfg.draw_width == 5.0
    assert cfg.erase_width == 40.0
    assert cfg.wheel_zoom_base == 0.999
    assert cfg.wheel_step_delta == 100.0
    assert cfg.window_size == (1024, 768)
    assert cfg.window_pos == (25, 25)
    assert cfg.font == "20px sans-serif"


def test_runtime_config_is_cached(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    assert runtime_config() is runtime_config()


def test_discovered_config_overrides_only_given_keys(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    discovered = _write_discovered(
        tmp_path,
        'paths:\n  output_dir: "./out_discovered"\npen:\n  erase_width: 64\n',
    )

    cfg = runtime_config()
    assert cfg.config_path == discovered
    assert cfg.output_dir == Path("out_discovered")
    assert cfg.erase_width == 64.0
    # 同じセクションの未指定キーは同梱デフォルトのまま。
    assert cfg.draw_width == 5.0
    assert cfg.pen_color == (0, 0, 0, 255)


def test_home_config_is_discovered(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    home_cfg = tmp_path / ".config" / "infinipaper" / "config.yaml"
    home_cfg.parent.mkdir(parents=True)
    home_cfg.write_text("paper:\n  growth_margin: 32\n", encoding="utf-8")

    cfg = runtime_config()
    assert cfg.config_path == home_cfg
    assert cfg.growth_margin == 32


def test_explicit_config_overrides_discovered_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    _write_discovered(tmp_path, 'paths:\n  output_dir: "./out_discovered"\n')

    explicit = tmp_path / "explicit.yaml"
    explicit.write_text('paths:\n  output_dir: "./out_explicit"\n', encoding="utf-8")

    set_config_path(explicit)
    cfg = runtime_config()
    assert cfg.config_path == explicit
    assert output_root_dir() == Path("out_explicit")


def test_missing_explicit_config_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    set_config_path(tmp_path / "missing.yaml")

    with pytest.raises(FileNotFoundError):
        runtime_config()


def test_null_background_means_transparent(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    _write_discovered(tmp_path, "paper:\n  background_color: null\n")

    assert runtime_config().background_color is None


def test_color_strings_are_accepted(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    _write_discovered(tmp_path, 'pen:\n  color: "#ff0000"\n')

    assert runtime_config().pen_color == (255, 0, 0, 255)


@pytest.mark.parametrize(
    "text",
    [
        "pen:\n  draw_width: 0\n",
        "pen:\n  erase_width: -3\n",
        "input:\n  wheel_zoom_base: 0\n",
        "paper:\n  growth_margin: -1\n",
    ],
)
def test_non_positive_values_are_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, text: str):
    _isolate_config_discovery(tmp_path, monkeypatch)
    _write_discovered(tmp_path, text)

    with pytest.raises(ValueError):
        runtime_config()


@pytest.mark.parametrize(
    "text",
    [
        "version: 2\n",
        "pen:\n  color: not-a-color\n",
        "ui:\n  window_size: [1, 2, 3]\n",
        "paths:\n  output_dir: null\n",
        "paper: [1, 2]\n",
        "- just\n- a list\n",
        "paths: {output_dir: [\n",
    ],
)
def test_invalid_config_raises_runtime_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, text: str):
    _isolate_config_discovery(tmp_path, monkeypatch)
    _write_discovered(tmp_path, text)

    with pytest.raises(RuntimeError):
        runtime_config()
