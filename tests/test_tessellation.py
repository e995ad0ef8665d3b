"""Tests for the Voronoi tessellation engine."""

import numpy as np
import pytest
from shapely.geometry import Point, Polygon, box

from glyph_mosaic.core.tessellation import compute_tessellation, get_guard_points, polygon_area


def total_area(tessellation):
    return sum(tessellation.cell_area(i) for i in range(len(tessellation.points)))


@pytest.fixture
def random_points():
    rng = np.random.default_rng(42)
    return rng.uniform([0, 0], [300, 100], size=(250, 2))


class TestCellGeometry:
    """Test cell polygons."""

    def test_cells_inside_clip_rectangle(self, random_points):
        """Test that no cell vertex leaves the rectangle."""
        tess = compute_tessellation(random_points, 300, 100)
        for cell in tess.cells:
            if cell is None:
                continue
            assert np.all(cell[:, 0] >= -1e-9) and np.all(cell[:, 0] <= 300 + 1e-9)
            assert np.all(cell[:, 1] >= -1e-9) and np.all(cell[:, 1] <= 100 + 1e-9)

    def test_cells_partition_rectangle(self, random_points):
        """Test that cell areas add up to the rectangle."""
        tess = compute_tessellation(random_points, 300, 100)
        assert tess.cell_count == len(random_points)
        assert total_area(tess) == pytest.approx(300 * 100, rel=1e-6)

    def test_cell_contains_generator(self, random_points):
        """Test that each cell holds its own point."""
        tess = compute_tessellation(random_points, 300, 100)
        for i, (x, y) in enumerate(random_points[:50]):
            polygon = Polygon(tess.cells[i])
            assert polygon.buffer(1e-6).contains(Point(x, y))

    def test_nearest_generator_property(self, random_points):
        """Test that cell centroids are closest to their own generator."""
        tess = compute_tessellation(random_points, 300, 100)
        for i in range(0, 250, 10):
            centroid = np.array(Polygon(tess.cells[i]).centroid.coords[0])
            distances = np.hypot(*(random_points - centroid).T)
            assert np.argmin(distances) == i

    def test_cell_count_never_exceeds_points(self, random_points):
        """Test the painted cell bound."""
        tess = compute_tessellation(random_points, 300, 100)
        assert len(tess.cells) == len(random_points)
        assert tess.cell_count <= len(random_points)


class TestDegenerateInput:
    """Test degenerate point sets."""

    def test_empty(self):
        """Test that no points give no cells."""
        tess = compute_tessellation(np.empty((0, 2)), 100, 100)
        assert tess.cells == []
        assert tess.cell_count == 0

    def test_single_point_owns_rectangle(self):
        """Test that one point gets the whole rectangle."""
        tess = compute_tessellation(np.array([[10.0, 20.0]]), 300, 100)
        assert tess.cell_count == 1
        assert tess.cell_area(0) == pytest.approx(30000)

    def test_two_points_split(self):
        """Test that two points split the rectangle at their bisector."""
        tess = compute_tessellation(np.array([[25.0, 50.0], [75.0, 50.0]]), 100, 100)
        assert tess.cell_area(0) == pytest.approx(5000)
        assert tess.cell_area(1) == pytest.approx(5000)

    def test_collinear_points(self):
        """Test that collinear points all get strip cells."""
        points = np.column_stack([np.linspace(10, 90, 5), np.full(5, 50.0)])
        tess = compute_tessellation(points, 100, 100)
        assert tess.cell_count == 5
        assert total_area(tess) == pytest.approx(10000)

    def test_duplicate_points(self):
        """Test that coincident points do not crash and keep the partition."""
        points = np.array([[20.0, 20.0], [20.0, 20.0], [70.0, 60.0], [50.0, 10.0]])
        tess = compute_tessellation(points, 100, 100)
        assert len(tess.cells) == 4
        assert tess.cell_count == 3
        assert total_area(tess) == pytest.approx(10000, rel=1e-6)

    def test_points_outside_rectangle(self):
        """Test that points off the canvas only lose their clipped cells."""
        points = np.array([[50.0, 50.0], [-500.0, 50.0], [50.0, 10.0]])
        tess = compute_tessellation(points, 100, 100)
        assert tess.cells[1] is None
        assert total_area(tess) == pytest.approx(10000)

    def test_non_finite_rejected(self):
        """Test that NaN coordinates are rejected."""
        with pytest.raises(ValueError):
            compute_tessellation(np.array([[np.nan, 1.0]]), 10, 10)


class TestNeighbors:
    """Test ridge-derived adjacency."""

    def test_neighbors_symmetric(self, random_points):
        """Test that ridge adjacency is symmetric."""
        tess = compute_tessellation(random_points, 300, 100)
        for i in range(len(random_points)):
            for j in tess.neighbors(i):
                assert i in tess.neighbors(j)

    def test_neighbors_exclude_guards(self, random_points):
        """Test that guard points never show up as neighbors."""
        tess = compute_tessellation(random_points, 300, 100)
        assert all(0 <= j < len(random_points) for i in range(len(random_points))
                   for j in tess.neighbors(i))
        assert all(tess.neighbors(i) for i in range(len(random_points)))

    def test_lattice_neighbors(self):
        """Test that a lattice point borders at least its four axis neighbors."""
        xs, ys = np.meshgrid(15.0 + 30.0 * np.arange(10), 10.0 + 20.0 * np.arange(5))
        points = np.column_stack([xs.ravel(), ys.ravel()])
        tess = compute_tessellation(points, 300, 100)
        # Row-major: index 12 is (x=75, y=30)
        assert {2, 11, 13, 22} <= set(tess.neighbors(12))

    def test_guard_points_enclose(self, random_points):
        """Test that guards sit far outside the rectangle."""
        guards = get_guard_points(random_points, (0, 0, 300, 100))
        assert len(guards) == 12
        hull = Polygon(guards)
        assert hull.contains(box(0, 0, 300, 100).buffer(300))


class TestVoronoiRegions:
    """Test cells taken from Qhull's Voronoi regions."""

    def test_lattice_partition(self):
        """Test that a cocircular lattice splits the rectangle into equal cells."""
        xs, ys = np.meshgrid(15.0 + 30.0 * np.arange(10), 10.0 + 20.0 * np.arange(5))
        points = np.column_stack([xs.ravel(), ys.ravel()])
        tess = compute_tessellation(points, 300, 100)
        assert tess.cell_count == 50
        areas = [tess.cell_area(i) for i in range(50)]
        np.testing.assert_allclose(areas, 600.0, rtol=1e-6)

    def test_duplicate_gets_no_cell(self):
        """Test that exactly one of two coincident points owns the shared cell."""
        points = np.array([[20.0, 20.0], [20.0, 20.0], [70.0, 60.0], [50.0, 10.0]])
        tess = compute_tessellation(points, 100, 100)
        assert tess.cell_count == 3
        assert (tess.cells[0] is None) != (tess.cells[1] is None)
        assert tess.cells[2] is not None and tess.cells[3] is not None

    @pytest.mark.parametrize("generator", [(0.5, 0.5), (299.5, 99.5), (150.0, 0.0)])
    def test_cell_vertices_wind_around_generator(self, generator):
        """Test that region vertices form a simple polygon even at the corners."""
        points = np.array([generator, (150.0, 50.0), (80.0, 70.0)])
        tess = compute_tessellation(points, 300, 100)
        polygon = Polygon(tess.cells[0])
        assert polygon.is_valid
        assert polygon.buffer(1e-6).contains(Point(*generator))


class TestHelpers:
    """Test geometry helpers."""

    def test_polygon_area(self):
        """Test the shoelace area."""
        square = np.array([[0, 0], [4, 0], [4, 4], [0, 4]], dtype=float)
        assert polygon_area(square) == pytest.approx(16)
        assert polygon_area(square[:2]) == 0.0
