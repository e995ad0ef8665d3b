"""FastAPI preview application."""

import logging
from typing import Optional

import structlog
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field

from .. import __version__
from ..config import settings
from ..core.pipeline import RenderConfig, RenderResult, render_mosaic
from ..core.rasterizer import list_available_fonts
from ..errors import RenderingError, SurfaceUnavailableError
from ..utils.random import new_prng


def configure_logging(level: str = "INFO") -> None:
    """Route structlog through the stdlib logger and render JSON."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper(), logging.INFO))
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging(settings.log_level)

logger = structlog.get_logger()

app = FastAPI(
    title="Glyph Mosaic API",
    description="Renders text as a tessellated Voronoi mosaic",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


class MosaicStats(BaseModel):
    """Counts describing one rendered frame."""

    seed: str
    width: int
    height: int
    density: float
    points: int = Field(description="All sampled points, coverage points included")
    glyph_points: int
    coverage_points: int
    cells_painted: int


def _render(text: str, density: float, width: int, height: int,
            dpr: float, seed: Optional[str]) -> RenderResult:
    """Run one render pass, mapping pipeline errors to HTTP errors."""
    config = RenderConfig(
        text=text,
        density=density,
        output_width=width,
        output_height=height,
        device_pixel_ratio=dpr,
    )
    try:
        return render_mosaic(config, prng=new_prng(seed))
    except SurfaceUnavailableError as e:
        logger.error("Surface unavailable", error=str(e))
        raise HTTPException(status_code=503, detail=str(e))
    except RenderingError as e:
        logger.error("Rendering failed", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "message": "Glyph Mosaic API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "serif_fonts": list_available_fonts()}


@app.get("/mosaic.png")
def mosaic_png(
    text: str = Query("", description="Text to render"),
    density: float = Query(settings.default_density, description="Sampling density, clamped to [0.2, 3.0]"),
    width: int = Query(settings.sample_width, ge=1, le=settings.max_output_width),
    height: int = Query(settings.sample_height, ge=1, le=settings.max_output_height),
    dpr: float = Query(1.0, gt=0, le=4.0, description="Device pixel ratio"),
    seed: Optional[str] = Query(None, description="Seed for a reproducible mosaic"),
):
    """Render a frame and return it as PNG."""
    result = _render(text, density, width, height, dpr, seed)
    return Response(
        content=result.surface.to_png_bytes(),
        media_type="image/png",
        headers={"X-Mosaic-Seed": result.seed or ""},
    )


@app.get("/mosaic/stats", response_model=MosaicStats)
def mosaic_stats(
    text: str = Query(""),
    density: float = Query(settings.default_density),
    width: int = Query(settings.sample_width, ge=1, le=settings.max_output_width),
    height: int = Query(settings.sample_height, ge=1, le=settings.max_output_height),
    seed: Optional[str] = Query(None),
):
    """Render a frame and return its point and cell counts."""
    result = _render(text, density, width, height, 1.0, seed)
    return MosaicStats(
        seed=result.seed or "",
        width=result.surface.width,
        height=result.surface.height,
        density=RenderConfig(density=density).density,
        points=result.point_count,
        glyph_points=result.glyph_count,
        coverage_points=result.point_count - result.glyph_count,
        cells_painted=result.cells_painted,
    )
