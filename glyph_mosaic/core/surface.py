"""
Raster drawing surface backed by a Pillow image.

Drawing calls take logical units. The device pixel ratio is applied here,
once, when coordinates are converted to image pixels. The backing image is
opaque RGB; translucent colors are blended over what is already drawn.
"""

import io
import math
from typing import Sequence, Tuple

import structlog
from PIL import Image, ImageColor, ImageDraw

from ..errors import SurfaceUnavailableError

logger = structlog.get_logger()

Color = Tuple[int, int, int, int]
Pixel = Tuple[int, int, int]
CLEAR_RGB = (0, 0, 0)
MAX_PIXELS = 64_000_000


def parse_color(color) -> Color:
    """
    Parse a color into an RGBA tuple.

    Accepts RGB/RGBA tuples, CSS hex strings and ``rgba(r,g,b,a)`` strings
    where alpha is a float in [0, 1].
    """
    if isinstance(color, tuple):
        if len(color) == 3:
            return (*color, 255)
        return tuple(color)

    text = color.strip().lower().replace(" ", "")
    if text.startswith("rgba(") and text.endswith(")"):
        r, g, b, a = text[5:-1].split(",")
        return (int(r), int(g), int(b), round(float(a) * 255))

    rgba = ImageColor.getcolor(color, "RGBA")
    return tuple(rgba)


class RasterSurface:
    """A 2D drawing target with a logical size and a device pixel ratio."""

    def __init__(self, width: int, height: int, device_pixel_ratio: float = 1.0):
        if not (math.isfinite(device_pixel_ratio) and device_pixel_ratio > 0):
            raise SurfaceUnavailableError(f"Invalid device pixel ratio: {device_pixel_ratio}")
        if width <= 0 or height <= 0:
            raise SurfaceUnavailableError(f"Invalid surface size: {width}x{height}")

        self.width = width
        self.height = height
        self.device_pixel_ratio = device_pixel_ratio
        self.pixel_width = max(1, round(width * device_pixel_ratio))
        self.pixel_height = max(1, round(height * device_pixel_ratio))

        if self.pixel_width * self.pixel_height > MAX_PIXELS:
            raise SurfaceUnavailableError(
                f"Surface of {self.pixel_width}x{self.pixel_height} pixels is too large"
            )

        try:
            self._image = Image.new("RGB", (self.pixel_width, self.pixel_height), CLEAR_RGB)
        except (ValueError, MemoryError) as e:
            raise SurfaceUnavailableError(f"Cannot allocate surface: {e}") from e
        self._draw = ImageDraw.Draw(self._image, "RGBA")
        logger.debug("Surface created", width=width, height=height,
                     pixel_width=self.pixel_width, pixel_height=self.pixel_height)

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def _px(self, x: float, y: float) -> Tuple[float, float]:
        return (x * self.device_pixel_ratio, y * self.device_pixel_ratio)

    def _box(self, x: float, y: float, w: float, h: float) -> Tuple[int, int, int, int]:
        x0, y0 = self._px(x, y)
        x1, y1 = self._px(x + w, y + h)
        return (round(x0), round(y0), round(x1), round(y1))

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None:
        """Reset a rectangle to black, without blending."""
        self._image.paste(CLEAR_RGB, self._box(x, y, w, h))

    def fill_rect(self, x: float, y: float, w: float, h: float, color) -> None:
        x0, y0, x1, y1 = self._box(x, y, w, h)
        if x1 <= x0 or y1 <= y0:
            return
        self._draw.rectangle((x0, y0, x1 - 1, y1 - 1), fill=parse_color(color))

    def fill_path(self, vertices: Sequence[Sequence[float]], color) -> None:
        """Fill the closed path through ``vertices``."""
        if len(vertices) < 3:
            return
        self._draw.polygon([self._px(x, y) for x, y in vertices], fill=parse_color(color))

    def stroke_path(self, vertices: Sequence[Sequence[float]], color, line_width: float = 1.0) -> None:
        """Stroke the closed path through ``vertices``."""
        if len(vertices) < 2:
            return
        path = [self._px(x, y) for x, y in vertices]
        path.append(path[0])
        width = max(1, round(line_width * self.device_pixel_ratio))
        self._draw.line(path, fill=parse_color(color), width=width)

    def fill_circle(self, cx: float, cy: float, radius: float, color) -> None:
        x, y = self._px(cx, cy)
        r = radius * self.device_pixel_ratio
        self._draw.ellipse((x - r, y - r, x + r, y + r), fill=parse_color(color))

    def get_pixel(self, x: float, y: float) -> Pixel:
        """RGB of the image pixel under logical point (x, y)."""
        px, py = self._px(x, y)
        px = min(self.pixel_width - 1, max(0, int(px)))
        py = min(self.pixel_height - 1, max(0, int(py)))
        return self._image.getpixel((px, py))

    def to_image(self) -> Image.Image:
        """Copy of the current frame."""
        return self._image.copy()

    def to_png_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self._image.save(buffer, format="PNG")
        return buffer.getvalue()
