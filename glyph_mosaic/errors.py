"""Exceptions raised by the mosaic rendering pipeline."""


class GlyphMosaicError(Exception):
    """Base class for all glyph mosaic errors."""


class RenderingError(GlyphMosaicError):
    """Text measurement or drawing failed on the raster backend."""


class SurfaceUnavailableError(GlyphMosaicError):
    """The output drawing surface could not be acquired."""
