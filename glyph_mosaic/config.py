"""Configuration management."""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GLYPH_MOSAIC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Sampling space
    sample_width: int = Field(default=900, description="Width of the text sampling canvas")
    sample_height: int = Field(default=300, description="Height of the text sampling canvas")

    # Text rasterization
    start_font_size: int = Field(default=220, description="Initial font size before fitting")
    font_size_step: int = Field(default=4, description="Font size decrement while fitting")
    min_font_size: int = Field(default=10, description="Smallest font size tried while fitting")
    text_margin: int = Field(default=40, description="Total horizontal margin around the text")
    font_path: Optional[str] = Field(default=None, description="Explicit font file to use")
    serif_font_candidates: List[str] = Field(
        default=[
            "DejaVuSerif.ttf",
            "/usr/share/fonts/truetype/dejavu/DejaVuSerif.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationSerif-Regular.ttf",
            "/usr/share/fonts/liberation/LiberationSerif-Regular.ttf",
            "/Library/Fonts/Times New Roman.ttf",
            "C:/Windows/Fonts/times.ttf",
            "Times New Roman.ttf",
        ],
        description="Serif fonts tried in order when no font_path is set",
    )

    # Point sampling
    luminance_threshold: int = Field(default=180, description="Minimum red channel for a glyph pixel")
    alpha_threshold: int = Field(default=10, description="Minimum alpha for a glyph pixel")
    coverage_points: int = Field(default=30, description="Uniform random points added per render")
    bernoulli_acceptance: bool = Field(
        default=True, description="Gate each glyph pixel by a draw with probability = density"
    )

    # Density bounds
    default_density: float = Field(default=1.2, description="Density used when none is usable")
    min_density: float = Field(default=0.2, description="Lowest accepted density")
    max_density: float = Field(default=3.0, description="Highest accepted density")

    # Frame rendering
    marker_radius: float = Field(default=0.8, description="Radius of the sample point markers")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    max_output_width: int = Field(default=4096, description="Max allowed output width")
    max_output_height: int = Field(default=4096, description="Max allowed output height")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")


settings = Settings()
