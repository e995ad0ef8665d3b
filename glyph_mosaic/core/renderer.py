"""Frame rendering: background, colored cells, then point markers."""

from typing import Optional

import structlog

from ..config import Settings, settings as default_settings
from .colorizer import canvas_geometry, colorize_point
from .surface import RasterSurface
from .tessellation import Tessellation

logger = structlog.get_logger()

BACKGROUND_COLOR = "#111"
CELL_STROKE_COLOR = "rgba(0,0,0,0.2)"
MARKER_COLOR = "rgba(0,0,0,0.8)"


def paint_background(surface: RasterSurface) -> None:
    """Clear the surface and fill it with the background color."""
    surface.clear_rect(0, 0, surface.width, surface.height)
    surface.fill_rect(0, 0, surface.width, surface.height, BACKGROUND_COLOR)


def render_frame(surface: RasterSurface, tessellation: Optional[Tessellation],
                 config: Optional[Settings] = None) -> int:
    """
    Paint a full frame.

    Cells are filled and stroked in point index order; markers for every
    point, coverage points included, are drawn after all cells.

    Args:
        surface: Target surface
        tessellation: Cells to paint; None paints the background only
        config: Settings; the module settings when omitted

    Returns:
        Number of cells painted
    """
    config = config or default_settings
    paint_background(surface)

    if tessellation is None or len(tessellation.points) == 0:
        return 0

    center, half_diagonal = canvas_geometry(surface.width, surface.height)
    points = tessellation.points
    painted = 0

    for i, (x, y) in enumerate(points):
        cell = tessellation.cell_polygon(i)
        if cell is None:
            continue
        color = colorize_point(x, y, center, half_diagonal)
        surface.fill_path(cell, color.to_rgb())
        surface.stroke_path(cell, CELL_STROKE_COLOR)
        painted += 1

    for x, y in points:
        surface.fill_circle(x, y, config.marker_radius, MARKER_COLOR)

    logger.info("Frame rendered", cells=painted, markers=len(points))
    return painted
