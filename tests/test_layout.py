import pytest

from seekbar_timer.layout import Rect, edge_rect, fill_box, is_vertical


@pytest.mark.parametrize(
    "edge, expected",
    [
        ("top", Rect(0, 0, 1920, 8)),
        ("bottom", Rect(0, 1072, 1920, 8)),
        ("left", Rect(0, 0, 8, 1080)),
        ("right", Rect(1912, 0, 8, 1080)),
    ],
)
def test_edge_rect(edge, expected):
    assert edge_rect(edge, 1920, 1080, 8) == expected


def test_geometry_string():
    assert edge_rect("bottom", 1920, 1080, 8).geometry() == "1920x8+0+1072"


def test_unknown_edge():
    with pytest.raises(ValueError):
        edge_rect("middle", 100, 100, 8)


def test_horizontal_fill_grows_left_to_right():
    assert fill_box("bottom", 1000, 8, 0.0) == (0, 0, 0, 8)
    assert fill_box("bottom", 1000, 8, 0.25) == (0, 0, 250, 8)
    assert fill_box("top", 1000, 8, 1.5) == (0, 0, 1000, 8)


def test_vertical_fill_grows_bottom_up():
    assert is_vertical("right")
    assert fill_box("right", 8, 1000, 0.25) == (0, 750, 8, 1000)
    assert fill_box("left", 8, 1000, -1.0) == (0, 1000, 8, 1000)
