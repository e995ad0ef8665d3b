"""
Core mosaic generation functionality.
"""

from .rasterizer import GlyphMask, rasterize_text
from .sampler import PointSet, sample_points, sample_text, grid_step
from .scaling import ScaleFactors, scale_factors, scale_points
from .tessellation import Tessellation, compute_tessellation
from .colorizer import CellColor, colorize_point
from .surface import RasterSurface
from .renderer import render_frame
from .pipeline import RenderConfig, RenderResult, render_mosaic

__all__ = ['GlyphMask', 'rasterize_text',
           'PointSet', 'sample_points', 'sample_text', 'grid_step',
           'ScaleFactors', 'scale_factors', 'scale_points',
           'Tessellation', 'compute_tessellation',
           'CellColor', 'colorize_point',
           'RasterSurface', 'render_frame',
           'RenderConfig', 'RenderResult', 'render_mosaic']
