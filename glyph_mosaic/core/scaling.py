"""Linear mapping from the sampling space to output surface units."""

from typing import NamedTuple, Tuple

import numpy as np


class ScaleFactors(NamedTuple):
    """Independent per-axis scale factors."""
    sx: float
    sy: float

    def inverse(self) -> "ScaleFactors":
        return ScaleFactors(1.0 / self.sx, 1.0 / self.sy)


def scale_factors(sample_size: Tuple[float, float], output_size: Tuple[float, float]) -> ScaleFactors:
    """
    Scale factors taking sample space onto the output surface.

    Args:
        sample_size: (width, height) of the sampling canvas
        output_size: (width, height) of the output surface in logical units

    Returns:
        ScaleFactors(sx=W/W0, sy=H/H0)
    """
    sample_w, sample_h = sample_size
    out_w, out_h = output_size
    if sample_w <= 0 or sample_h <= 0:
        raise ValueError(f"Sample size must be positive, got {sample_size}")
    return ScaleFactors(out_w / sample_w, out_h / sample_h)


def scale_points(points: np.ndarray, factors: ScaleFactors) -> np.ndarray:
    """Return a new (n, 2) array with x multiplied by sx and y by sy."""
    points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    return points * np.array([factors.sx, factors.sy])
