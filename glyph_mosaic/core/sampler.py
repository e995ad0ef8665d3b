"""
Point sampling from a glyph mask.

Foreground pixels are visited on a regular grid whose step shrinks as the
density grows. Each accepted pixel becomes a jittered point, and a fixed
number of uniform coverage points is appended so the tessellation reaches
every edge of the canvas.
"""

import math
from typing import NamedTuple, Optional

import numpy as np
import structlog

from ..config import Settings, settings as default_settings
from .alea_prng import AleaPRNG
from .rasterizer import GlyphMask, rasterize_text

logger = structlog.get_logger()

DENSITY_EPSILON = 0.001
JITTER = 1.0


class PointSet(NamedTuple):
    """Sampled points in sampling space.

    Glyph points come first (row-major order), coverage points last.
    """
    points: np.ndarray  # shape (n, 2)
    glyph_count: int

    @property
    def coverage_count(self) -> int:
        return len(self.points) - self.glyph_count

    @property
    def glyph_points(self) -> np.ndarray:
        return self.points[:self.glyph_count]

    @property
    def coverage_points(self) -> np.ndarray:
        return self.points[self.glyph_count:]

    def __len__(self) -> int:
        return len(self.points)

    @classmethod
    def empty(cls) -> "PointSet":
        return cls(points=np.empty((0, 2), dtype=np.float64), glyph_count=0)


def grid_step(density: float) -> int:
    """Sampling grid step for a density: max(1, floor(4 / density))."""
    return max(1, math.floor(4 / max(DENSITY_EPSILON, density)))


def sample_points(mask: GlyphMask, density: float, prng: AleaPRNG,
                  config: Optional[Settings] = None) -> PointSet:
    """
    Sample glyph points and coverage points from a mask.

    Per candidate pixel that passes the luminance/alpha test, the random
    source is drawn in this order: acceptance (when Bernoulli acceptance is
    enabled), x jitter, y jitter. Coverage points then draw x, y each.

    Args:
        mask: Rasterized text
        density: Sampling density; controls grid step and acceptance rate
        prng: Random source
        config: Settings; the module settings when omitted

    Returns:
        PointSet with glyph points followed by coverage points
    """
    config = config or default_settings
    step = grid_step(density)

    foreground = mask.foreground(config.luminance_threshold, config.alpha_threshold)
    # Row-major over the grid, matching the scan order of the mask
    ys, xs = np.nonzero(foreground[::step, ::step])
    ys = ys * step
    xs = xs * step

    points = []
    for x, y in zip(xs.tolist(), ys.tolist()):
        if config.bernoulli_acceptance and not prng.bernoulli(density):
            continue
        points.append([
            x + prng.uniform(-JITTER, JITTER),
            y + prng.uniform(-JITTER, JITTER),
        ])
    glyph_count = len(points)

    for _ in range(config.coverage_points):
        points.append([
            prng.uniform(0, mask.width),
            prng.uniform(0, mask.height),
        ])

    logger.info("Points sampled",
                step=step, candidates=len(xs),
                glyph_points=glyph_count, coverage_points=config.coverage_points)

    return PointSet(points=np.array(points, dtype=np.float64).reshape(-1, 2),
                    glyph_count=glyph_count)


def sample_text(text: str, density: float, prng: AleaPRNG,
                config: Optional[Settings] = None) -> PointSet:
    """
    Rasterize and sample ``text`` in one step.

    Empty text short-circuits to an empty PointSet without rasterizing.
    """
    if not text:
        logger.info("Empty text, nothing to sample")
        return PointSet.empty()
    mask = rasterize_text(text, config)
    return sample_points(mask, density, prng, config)
