import io
from pathlib import Path

import pytest
from PIL import Image

from infinipaper.core.raster_buffer import GrowableRasterBuffer
from infinipaper.core.runtime_config import set_config_path
from infinipaper.core.style import DrawStyle
from infinipaper.export.image import default_png_output_path, encode_png, save_png

RED = (255, 0, 0, 255)


@pytest.fixture(autouse=True)
def _reset_runtime_config() -> None:
    set_config_path(None)
    yield
    set_config_path(None)


def _grown_buffer() -> GrowableRasterBuffer:
    buffer = GrowableRasterBuffer(8, 8, background="white", growth_margin=0)
    buffer.fill_rect(-4, -4, 2, 2, DrawStyle(fill_color=RED))
    return buffer


def test_encode_png_writes_the_physical_store():
    buffer = _grown_buffer()

    with Image.open(io.BytesIO(encode_png(buffer))) as img:
        img.load()
        assert img.format == "PNG"
        assert img.size == (buffer.physical_width, buffer.physical_height)
        # 物理 (0,0) は論理 origin。
        assert img.convert("RGBA").getpixel((0, 0)) == RED


def test_save_png_creates_parent_directories(tmp_path: Path):
    out = tmp_path / "nested" / "dir" / "paper.png"

    assert save_png(_grown_buffer(), out) == out
    assert out.is_file()
    assert out.read_bytes().startswith(b"\x89PNG")


def test_save_png_rejects_other_suffixes(tmp_path: Path):
    with pytest.raises(ValueError):
        save_png(_grown_buffer(), tmp_path / "paper.jpg")
    assert not (tmp_path / "paper.jpg").exists()


def test_default_png_output_path_uses_output_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))

    path = default_png_output_path(now_ms=1700000000123)

    assert path == Path("data") / "output" / "png" / "infinity-paper-1700000000123.png"
