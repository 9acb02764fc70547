# どこで: `src/infinipaper/interactive/gl/paper_renderer.py`。
# 何を: GrowableRasterBuffer の物理ストアをテクスチャとして転送し、ビューポート変換付きで描画する ModernGL レンダラー。
# なぜ: コンテキスト生成・テクスチャ再確保・描画を window system から分離し、責務を明確にするため。

from __future__ import annotations

import moderngl
import numpy as np
from pyglet.window import Window

from infinipaper.core.raster_buffer import GrowableRasterBuffer
from infinipaper.core.viewport import ViewportController
from infinipaper.interactive.gl.shader import Shader
from infinipaper.interactive.gl.utils import build_view_projection


class PaperRenderer:
    """紙 1 枚を textured quad として描くレンダラー。"""

    def __init__(self, window: Window) -> None:
        window.switch_to()
        self.ctx = moderngl.create_context(require=410)
        self.ctx.enable(moderngl.BLEND)
        self.ctx.blend_func = moderngl.SRC_ALPHA, moderngl.ONE_MINUS_SRC_ALPHA
        self.program = Shader.create_shader(self.ctx)
        # 6 頂点 × (xy + uv) × float32
        self._vbo = self.ctx.buffer(reserve=6 * 4 * 4, dynamic=True)
        self._vao = self.ctx.vertex_array(
            self.program, [(self._vbo, "2f 2f", "in_vert", "in_uv")]
        )
        self._texture: moderngl.Texture | None = None
        self._texture_size = (0, 0)
        # 最後に転送したバッファの revision。-1 は未転送。
        self._uploaded_revision = -1

    def viewport(self, width: int, height: int) -> None:
        """ビューポートをフレームバッファサイズに合わせて更新する。"""
        self.ctx.viewport = (0, 0, int(width), int(height))

    def clear(self, color: tuple[float, float, float]) -> None:
        """紙の外側の色でクリアする。"""
        self.ctx.clear(*color, 1.0)

    def sync(self, buffer: GrowableRasterBuffer) -> None:
        """バッファ内容が変わっていればテクスチャと矩形頂点を更新する。"""
        if buffer.revision == self._uploaded_revision and self._texture is not None:
            return

        size = (buffer.physical_width, buffer.physical_height)
        if self._texture is None or size != self._texture_size:
            # TODO: GL_MAX_TEXTURE_SIZE を超える紙はタイル分割して転送する。
            if self._texture is not None:
                self._texture.release()
            self._texture = self.ctx.texture(size, 4)
            self._texture.filter = (moderngl.LINEAR, moderngl.NEAREST)
            self._texture_size = size

        self._texture.write(buffer.to_image().tobytes())

        # 頂点は論理座標で置く（origin から物理サイズ分）。
        left, top = buffer.origin
        right, bottom = left + size[0], top + size[1]
        quad = np.array(
            [
                [left, top, 0.0, 0.0],
                [right, top, 1.0, 0.0],
                [left, bottom, 0.0, 1.0],
                [right, top, 1.0, 0.0],
                [right, bottom, 1.0, 1.0],
                [left, bottom, 0.0, 1.0],
            ],
            dtype=np.float32,
        )
        self._vbo.write(quad.tobytes())
        self._uploaded_revision = buffer.revision

    def draw(self, viewport: ViewportController, screen_size: tuple[int, int]) -> None:
        """現在の scale/offset で紙を描く。"""
        if self._texture is None:
            return
        screen_w, screen_h = screen_size
        projection = build_view_projection(
            float(screen_w),
            float(screen_h),
            scale=viewport.scale,
            offset=viewport.offset,
        )
        self.program["projection"].write(projection.tobytes())
        self._texture.use(location=0)
        self.program["paper"].value = 0
        self._vao.render(mode=moderngl.TRIANGLES, vertices=6)

    def release(self) -> None:
        """GPU リソースを解放する。"""
        if self._texture is not None:
            self._texture.release()
            self._texture = None
        self._vao.release()
        self._vbo.release()
        self.program.release()
        self.ctx.release()
