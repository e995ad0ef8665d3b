"""
Text rasterization into a fixed-size glyph mask.

The text is drawn white on an opaque black canvas in the sampling space
(900x300 by default). The font size shrinks until the text fits the canvas
width minus the margin, and the text is anchored left at half the margin,
vertically centered.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
import structlog
from PIL import Image, ImageDraw, ImageFont

from ..config import Settings, settings as default_settings
from ..errors import RenderingError

logger = structlog.get_logger()

BACKGROUND_RGBA = (0, 0, 0, 255)
GLYPH_RGBA = (255, 255, 255, 255)


@dataclass
class GlyphMask:
    """Per-pixel channels of the rasterized text.

    Both arrays have shape (height, width) and dtype uint8.
    """
    luminance: np.ndarray  # red channel
    alpha: np.ndarray
    font_size: int = 0

    @property
    def width(self) -> int:
        return self.luminance.shape[1]

    @property
    def height(self) -> int:
        return self.luminance.shape[0]

    def foreground(self, luminance_threshold: int = 180, alpha_threshold: int = 10) -> np.ndarray:
        """Boolean mask of pixels that belong to the glyphs."""
        return (self.luminance > luminance_threshold) & (self.alpha > alpha_threshold)

    @classmethod
    def blank(cls, width: int, height: int) -> "GlyphMask":
        """A mask with no foreground pixels."""
        return cls(
            luminance=np.zeros((height, width), dtype=np.uint8),
            alpha=np.full((height, width), 255, dtype=np.uint8),
        )


def load_serif_font(size: int, config: Optional[Settings] = None) -> ImageFont.FreeTypeFont:
    """
    Load a serif display font at the given size.

    An explicit ``font_path`` must load; otherwise the configured serif
    candidates are tried in order, then Pillow's bundled scalable font.

    Raises:
        RenderingError: if no usable font can be loaded.
    """
    config = config or default_settings

    if config.font_path:
        try:
            return ImageFont.truetype(config.font_path, size)
        except OSError as e:
            raise RenderingError(f"Cannot load font {config.font_path!r}: {e}") from e

    for candidate in config.serif_font_candidates:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue

    try:
        return ImageFont.load_default(size=size)
    except (OSError, TypeError, ImportError) as e:
        raise RenderingError(f"No scalable font available: {e}") from e


def fit_font_size(draw: ImageDraw.ImageDraw, text: str, max_width: float,
                  config: Optional[Settings] = None) -> Tuple[int, ImageFont.FreeTypeFont]:
    """
    Shrink the font size until the text fits in ``max_width``.

    Starts at ``start_font_size`` and steps down by ``font_size_step`` until
    the measured width fits or the size reaches ``min_font_size``. Each size
    is loaded once.

    Returns:
        The chosen font size and the font loaded at that size
    """
    config = config or default_settings
    size = config.start_font_size
    font = load_serif_font(size, config)
    while size > config.min_font_size and measure_text(draw, text, font) > max_width:
        size -= config.font_size_step
        font = load_serif_font(size, config)
    return size, font


def measure_text(draw: ImageDraw.ImageDraw, text: str, font: ImageFont.FreeTypeFont) -> float:
    """Advance width of ``text`` in pixels."""
    try:
        return draw.textlength(text, font=font)
    except (OSError, ValueError) as e:
        raise RenderingError(f"Text measurement failed: {e}") from e


def rasterize_text(text: str, config: Optional[Settings] = None) -> GlyphMask:
    """
    Render ``text`` into a GlyphMask of the configured sampling size.

    Args:
        text: String to draw. Empty text produces a blank mask.
        config: Settings; the module settings when omitted

    Returns:
        GlyphMask with luminance and alpha channels

    Raises:
        RenderingError: if font loading, measuring or drawing fails
    """
    config = config or default_settings
    width, height = config.sample_width, config.sample_height

    if not text:
        return GlyphMask.blank(width, height)

    image = Image.new("RGBA", (width, height), BACKGROUND_RGBA)
    draw = ImageDraw.Draw(image)

    font_size, font = fit_font_size(draw, text, width - config.text_margin, config)

    try:
        draw.text((config.text_margin / 2, height / 2), text,
                  font=font, fill=GLYPH_RGBA, anchor="lm")
    except (OSError, ValueError) as e:
        raise RenderingError(f"Drawing text failed: {e}") from e

    pixels = np.asarray(image)
    mask = GlyphMask(
        luminance=pixels[:, :, 0].copy(),
        alpha=pixels[:, :, 3].copy(),
        font_size=font_size,
    )

    logger.info("Rasterized text",
                length=len(text), font_size=font_size,
                foreground_pixels=int(np.count_nonzero(mask.foreground())))
    return mask


def list_available_fonts(config: Optional[Settings] = None) -> List[str]:
    """Serif candidates from the settings that can actually be loaded."""
    config = config or default_settings
    available = []
    for candidate in config.serif_font_candidates:
        try:
            ImageFont.truetype(candidate, 12)
        except OSError:
            continue
        available.append(candidate)
    return available
