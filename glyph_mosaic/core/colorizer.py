"""Cell colors from the generator point's distance to the canvas center."""

import colorsys
import math
from typing import NamedTuple, Tuple

SATURATION = 70
BASE_HUE = 200
HUE_SPAN = 160
BASE_LIGHTNESS = 20
LIGHTNESS_SPAN = 50


class CellColor(NamedTuple):
    """HSL color; hue in degrees, saturation and lightness in percent."""
    hue: int
    saturation: int
    lightness: float

    def to_rgb(self) -> Tuple[int, int, int]:
        """Convert to an 8-bit RGB tuple."""
        r, g, b = colorsys.hls_to_rgb(self.hue / 360.0, self.lightness / 100.0, self.saturation / 100.0)
        return (round(r * 255), round(g * 255), round(b * 255))

    def to_css(self) -> str:
        return f"hsl({self.hue}deg {self.saturation}% {self.lightness:g}%)"


def colorize_point(x: float, y: float, center: Tuple[float, float], half_diagonal: float) -> CellColor:
    """
    Color for a cell whose generator sits at (x, y).

    t = min(1, distance_to_center / half_diagonal) picks a hue from 200
    (near the center) through violet towards red at the corners, and a
    lightness from 20% to 70%.

    Args:
        x, y: Generator point
        center: Canvas center
        half_diagonal: Half the canvas diagonal

    Returns:
        CellColor
    """
    d = math.hypot(x - center[0], y - center[1])
    t = min(1.0, d / half_diagonal) if half_diagonal > 0 else 0.0
    hue = math.floor(BASE_HUE + t * HUE_SPAN) % 360
    return CellColor(hue=hue, saturation=SATURATION, lightness=BASE_LIGHTNESS + t * LIGHTNESS_SPAN)


def canvas_geometry(width: float, height: float) -> Tuple[Tuple[float, float], float]:
    """Center and half diagonal of a width x height canvas."""
    return (width / 2, height / 2), math.hypot(width, height) / 2
