import pytest

from infinipaper.core.style import BLACK, DrawStyle, coerce_rgba


def test_coerce_rgba_accepts_sequences_and_strings():
    assert coerce_rgba((1, 2, 3)) == (1, 2, 3, 255)
    assert coerce_rgba([10, 20, 30, 40]) == (10, 20, 30, 40)
    assert coerce_rgba("white") == (255, 255, 255, 255)
    assert coerce_rgba("#00ff00") == (0, 255, 0, 255)


def test_coerce_rgba_clamps_components():
    assert coerce_rgba((-5, 300, 12.7, 999)) == (0, 255, 12, 255)


@pytest.mark.parametrize("value", [(1, 2), (1, 2, 3, 4, 5), 7, "no-such-color"])
def test_coerce_rgba_rejects_invalid_values(value):
    with pytest.raises(ValueError):
        coerce_rgba(value)


def test_with_stroke_replaces_only_stroke_fields():
    base = DrawStyle(fill_color=(1, 2, 3, 255), font="10px serif")
    style = base.with_stroke("red", 7)

    assert style.stroke_color == (255, 0, 0, 255)
    assert style.line_width == 7.0
    assert style.fill_color == (1, 2, 3, 255)
    assert style.font == "10px serif"
    assert base.stroke_color == BLACK
