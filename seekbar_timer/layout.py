"""Geometry for a bar docked along one edge of the screen."""

from typing import NamedTuple

EDGES = ("top", "bottom", "left", "right")


class Rect(NamedTuple):
    x: int
    y: int
    width: int
    height: int

    def geometry(self) -> str:
        """Tk geometry string ``WxH+X+Y``."""
        return f"{self.width}x{self.height}+{self.x}+{self.y}"


def is_vertical(edge: str) -> bool:
    return edge in ("left", "right")


def edge_rect(edge: str, screen_width: int, screen_height: int, thickness: int) -> Rect:
    """Window rectangle spanning the whole of ``edge``."""
    if edge == "top":
        return Rect(0, 0, screen_width, thickness)
    if edge == "bottom":
        return Rect(0, screen_height - thickness, screen_width, thickness)
    if edge == "left":
        return Rect(0, 0, thickness, screen_height)
    if edge == "right":
        return Rect(screen_width - thickness, 0, thickness, screen_height)
    raise ValueError(f"unknown edge {edge!r}, expected one of {', '.join(EDGES)}")


def fill_box(edge: str, width: int, height: int, fraction: float) -> tuple[int, int, int, int]:
    """Canvas box ``(x0, y0, x1, y1)`` covered by the progress fill.

    Horizontal bars fill left to right, vertical bars bottom to top.
    """
    fraction = min(max(fraction, 0.0), 1.0)
    if is_vertical(edge):
        filled = int(height * fraction)
        return (0, height - filled, width, height)
    return (0, 0, int(width * fraction), height)
