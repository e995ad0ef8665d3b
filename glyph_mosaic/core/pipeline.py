"""
Text-to-mosaic pipeline.

rasterize -> sample -> scale -> tessellate -> colorize + render, run fresh
and synchronously for every (text, density, size) combination.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
import structlog
from pydantic import BaseModel, Field, field_validator

from ..config import Settings, settings as default_settings
from ..utils.random import new_prng
from .alea_prng import AleaPRNG
from .renderer import render_frame
from .sampler import sample_text
from .scaling import scale_factors, scale_points
from .surface import RasterSurface
from .tessellation import Tessellation, compute_tessellation

logger = structlog.get_logger()


class RenderConfig(BaseModel):
    """Inputs of one render pass.

    Out-of-range values are clamped to the nearest valid bound instead of
    being rejected.
    """

    text: str = Field(default="", description="Text to render")
    density: float = Field(default=default_settings.default_density, description="Sampling density")
    output_width: int = Field(default=default_settings.sample_width, description="Output width in logical units")
    output_height: int = Field(default=default_settings.sample_height, description="Output height in logical units")
    device_pixel_ratio: float = Field(default=1.0, description="Surface pixels per logical unit")

    @field_validator("density", mode="before")
    @classmethod
    def clamp_density(cls, value):
        value = float(value)
        if math.isnan(value):
            return default_settings.default_density
        return min(default_settings.max_density, max(default_settings.min_density, value))

    @field_validator("output_width", "output_height", mode="before")
    @classmethod
    def clamp_size(cls, value):
        value = float(value)
        if math.isnan(value):
            return 1
        if math.isinf(value):
            return 1 if value < 0 else default_settings.max_output_width
        return max(1, int(round(value)))

    @field_validator("device_pixel_ratio", mode="before")
    @classmethod
    def clamp_device_pixel_ratio(cls, value):
        value = float(value)
        if not math.isfinite(value) or value <= 0:
            return 1.0
        return value


@dataclass
class RenderResult:
    """Outcome of one render pass."""
    surface: RasterSurface
    points: np.ndarray  # output units
    glyph_count: int
    cells_painted: int
    tessellation: Optional[Tessellation] = None
    seed: Optional[str] = None

    @property
    def point_count(self) -> int:
        return len(self.points)


def render_mosaic(config: RenderConfig, prng: Optional[AleaPRNG] = None,
                  settings: Optional[Settings] = None) -> RenderResult:
    """
    Render ``config.text`` as a Voronoi mosaic.

    The surface is acquired first, so a SurfaceUnavailableError aborts the
    pass before anything is drawn. Empty text, or text with no sampled
    points, produces a background-only frame.

    Args:
        config: Text, density and output size
        prng: Random source; a freshly seeded one when omitted
        settings: Settings; the module settings when omitted

    Returns:
        RenderResult holding the painted surface

    Raises:
        SurfaceUnavailableError: if the output surface cannot be created
        RenderingError: if text measurement or drawing fails
    """
    settings = settings or default_settings
    prng = prng or new_prng()
    width, height = config.output_width, config.output_height

    logger.info("Render requested",
                text_length=len(config.text), density=config.density,
                width=width, height=height, dpr=config.device_pixel_ratio)

    surface = RasterSurface(width, height, config.device_pixel_ratio)

    point_set = sample_text(config.text, config.density, prng, settings)
    if len(point_set) == 0:
        render_frame(surface, None, settings)
        return RenderResult(surface=surface, points=point_set.points, glyph_count=0,
                            cells_painted=0, seed=str(prng.seed))

    factors = scale_factors((settings.sample_width, settings.sample_height), (width, height))
    points = scale_points(point_set.points, factors)

    tessellation = compute_tessellation(points, width, height)
    painted = render_frame(surface, tessellation, settings)

    logger.info("Render complete",
                points=len(points), glyph_points=point_set.glyph_count, cells=painted)

    return RenderResult(
        surface=surface,
        points=points,
        glyph_count=point_set.glyph_count,
        cells_painted=painted,
        tessellation=tessellation,
        seed=str(prng.seed),
    )
