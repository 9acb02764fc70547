# どこで: `src/infinipaper/interactive/gl/shader.py`。
# 何を: 紙テクスチャを 1 枚の矩形として描くシェーダプログラムを生成する。
# なぜ: GLSL ソースを renderer から分離し、見通しを良くするため。

from __future__ import annotations

from typing import Any

_VERTEX_SHADER = """
#version 410
uniform mat4 projection;
in vec2 in_vert;
in vec2 in_uv;
out vec2 v_uv;
void main() {
    v_uv = in_uv;
    gl_Position = projection * vec4(in_vert, 0.0, 1.0);
}
"""

_FRAGMENT_SHADER = """
#version 410
uniform sampler2D paper;
in vec2 v_uv;
out vec4 f_color;
void main() {
    f_color = texture(paper, v_uv);
}
"""


class Shader:
    """シェーダ生成の名前空間。"""

    @staticmethod
    def create_shader(ctx: Any) -> Any:
        """紙描画用の program を返す。"""
        return ctx.program(vertex_shader=_VERTEX_SHADER, fragment_shader=_FRAGMENT_SHADER)
