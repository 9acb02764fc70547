"""interactive.gl.utils の `build_view_projection` をテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from infinipaper.core.raster_buffer import GrowableRasterBuffer
from infinipaper.core.viewport import ViewportController
from infinipaper.interactive.gl.utils import build_view_projection


def _to_clip(proj: np.ndarray, p: tuple[float, float]) -> tuple[float, float]:
    # ModernGL へは転置して渡しているので、列ベクトル演算には .T を戻して使う。
    v = proj.T @ np.array([p[0], p[1], 0.0, 1.0], dtype=np.float32)
    return float(v[0]), float(v[1])


def test_projection_matches_viewport_mapping() -> None:
    vp = ViewportController(GrowableRasterBuffer(1, 1), scale=1.5, offset=(40.0, -20.0))
    width, height = 800.0, 600.0
    proj = build_view_projection(width, height, scale=vp.scale, offset=vp.offset)

    for p in [(0.0, 0.0), (100.0, 50.0), (-30.0, 400.0)]:
        sx, sy = vp.logical_to_screen(p)
        expected = (2.0 * sx / width - 1.0, 1.0 - 2.0 * sy / height)
        assert _to_clip(proj, p) == pytest.approx(expected, abs=1e-5)


def test_projection_corners_at_identity() -> None:
    proj = build_view_projection(200.0, 100.0, scale=1.0, offset=(0.0, 0.0))
    assert proj.dtype == np.float32
    assert _to_clip(proj, (0.0, 0.0)) == pytest.approx((-1.0, 1.0))
    assert _to_clip(proj, (200.0, 100.0)) == pytest.approx((1.0, -1.0))
