from __future__ import annotations

# どこで: `src/infinipaper/interactive/gl/utils.py`。
# 何を: 論理座標 → クリップ座標の射影行列を生成する。
# なぜ: ViewportController の scale/offset と GPU 側の変換を一箇所で一致させるため。

import numpy as np


def build_view_projection(
    screen_width: float,
    screen_height: float,
    *,
    scale: float,
    offset: tuple[float, float],
) -> "np.ndarray":
    """論理座標を受け取る正射影行列（ModernGL 用の転置済み）を返す。

    論理 p → スクリーン `p*scale + offset`（左上原点）→ クリップ座標、を 1 つの行列にまとめる。
    """
    sx = 2.0 * scale / screen_width
    sy = -2.0 * scale / screen_height
    tx = 2.0 * offset[0] / screen_width - 1.0
    ty = 1.0 - 2.0 * offset[1] / screen_height
    proj = np.array(
        [
            [sx, 0, 0, tx],
            [0, sy, 0, ty],
            [0, 0, -1, 0],
            [0, 0, 0, 1],
        ],
        dtype="f4",
    ).T
    return proj
