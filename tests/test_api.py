"""Tests for the preview API."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from glyph_mosaic.api.main import app
from glyph_mosaic.config import settings
from glyph_mosaic.errors import RenderingError, SurfaceUnavailableError


class TestMosaicAPI:
    """Test the HTTP preview endpoints."""

    def setup_method(self):
        """Set up test client."""
        self.client = TestClient(app)

    def test_root(self):
        """Test the root endpoint."""
        response = self.client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self):
        """Test the health endpoint."""
        response = self.client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert isinstance(data["serif_fonts"], list)

    def test_mosaic_png(self):
        """Test that a PNG frame of the requested size comes back."""
        response = self.client.get("/mosaic.png", params={
            "text": "Hi", "density": 1.2, "width": 300, "height": 100, "seed": "api"
        })
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.headers["x-mosaic-seed"] == "api"
        assert response.content.startswith(b"\x89PNG")

    def test_seeded_png_reproducible(self):
        """Test that a seed pins the image."""
        params = {"text": "Hi", "width": 150, "height": 50, "seed": "same"}
        first = self.client.get("/mosaic.png", params=params)
        second = self.client.get("/mosaic.png", params=params)
        assert first.content == second.content

    def test_stats_empty_text(self):
        """Test that empty text reports an empty frame."""
        response = self.client.get("/mosaic/stats", params={"text": "", "width": 90, "height": 30})
        assert response.status_code == 200
        data = response.json()
        assert data["points"] == 0
        assert data["cells_painted"] == 0

    def test_stats_text(self):
        """Test point and cell counts for real text."""
        response = self.client.get("/mosaic/stats", params={
            "text": "Hi", "density": 9, "width": 300, "height": 100, "seed": "stats"
        })
        assert response.status_code == 200
        data = response.json()
        assert data["density"] == 3.0
        assert data["coverage_points"] == 30
        assert data["glyph_points"] > 0
        assert 1 <= data["cells_painted"] <= data["points"]

    def test_stats_default_size(self):
        """Test that omitted sizes fall back to the sampling canvas size."""
        response = self.client.get("/mosaic/stats", params={"text": "", "seed": "size"})
        assert response.status_code == 200
        data = response.json()
        assert data["width"] == settings.sample_width
        assert data["height"] == settings.sample_height

    @pytest.mark.parametrize("params", [
        {"width": 0}, {"height": -5}, {"width": "wide"}, {"dpr": 0}
    ])
    def test_invalid_query(self, params):
        """Test that malformed queries are rejected."""
        response = self.client.get("/mosaic.png", params=params)
        assert response.status_code == 422

    @patch("glyph_mosaic.api.main.render_mosaic")
    def test_surface_unavailable(self, mock_render):
        """Test that surface failures map to 503."""
        mock_render.side_effect = SurfaceUnavailableError("no surface")
        response = self.client.get("/mosaic.png", params={"text": "Hi"})
        assert response.status_code == 503

    @patch("glyph_mosaic.api.main.render_mosaic")
    def test_rendering_error(self, mock_render):
        """Test that rendering failures map to 500."""
        mock_render.side_effect = RenderingError("font missing")
        response = self.client.get("/mosaic/stats", params={"text": "Hi"})
        assert response.status_code == 500
