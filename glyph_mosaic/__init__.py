"""Glyph Mosaic - text rendered as a tessellated Voronoi mosaic."""

__version__ = "0.1.0"
