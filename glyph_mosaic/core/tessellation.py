"""Voronoi cells for sampled points, clipped to the output rectangle."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
import structlog
from scipy.spatial import Voronoi
from shapely.geometry import Polygon, box

logger = structlog.get_logger()

GUARD_POINT_COUNT = 12
MIN_CELL_AREA = 1e-9


@dataclass
class Tessellation:
    """Voronoi partition of a point set, clipped to a rectangle.

    ``cells[i]`` is the (k, 2) polygon owned by ``points[i]``, or None when
    the point's region vanished (clipped away, zero area, or a duplicate
    whose region is already owned by an earlier point).
    """
    points: np.ndarray
    bounds: Tuple[float, float, float, float]  # (x0, y0, x1, y1)
    cells: List[Optional[np.ndarray]]
    point_neighbors: List[List[int]] = field(default_factory=list)

    @property
    def cell_count(self) -> int:
        """Number of points that own a polygon."""
        return sum(1 for cell in self.cells if cell is not None)

    def cell_polygon(self, index: int) -> Optional[np.ndarray]:
        return self.cells[index]

    def cell_area(self, index: int) -> float:
        cell = self.cells[index]
        if cell is None:
            return 0.0
        return polygon_area(cell)

    def neighbors(self, index: int) -> List[int]:
        """Indices of points whose cells share a Voronoi ridge with ``index``."""
        if not self.point_neighbors:
            return []
        return self.point_neighbors[index]


def polygon_area(vertices: np.ndarray) -> float:
    """Unsigned polygon area by the shoelace formula."""
    if len(vertices) < 3:
        return 0.0
    x = vertices[:, 0]
    y = vertices[:, 1]
    return 0.5 * abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))


def get_guard_points(points: np.ndarray, bounds: Tuple[float, float, float, float],
                     count: int = GUARD_POINT_COUNT) -> np.ndarray:
    """
    Generate guard points on a circle far outside the points and the rectangle.

    Every input point ends up strictly inside the guards' convex hull, so its
    Voronoi region is bounded, and no guard is ever the nearest generator for
    a location inside the rectangle.

    Args:
        points: Input points, shape (n, 2)
        bounds: Clip rectangle (x0, y0, x1, y1)
        count: Number of guard points

    Returns:
        Array of guard point coordinates
    """
    x0, y0, x1, y1 = bounds
    if len(points):
        x0 = min(x0, float(points[:, 0].min()))
        y0 = min(y0, float(points[:, 1].min()))
        x1 = max(x1, float(points[:, 0].max()))
        y1 = max(y1, float(points[:, 1].max()))

    cx = (x0 + x1) / 2
    cy = (y0 + y1) / 2
    half_diagonal = np.hypot(x1 - x0, y1 - y0) / 2
    radius = 4 * half_diagonal + 1.0

    angles = np.linspace(0, 2 * np.pi, count, endpoint=False)
    return np.column_stack([cx + radius * np.cos(angles), cy + radius * np.sin(angles)])


def build_point_neighbors(vor: Voronoi, n_points: int) -> List[List[int]]:
    """Neighbor lists from ridge_points, ignoring ridges that touch guard points."""
    neighbors = [set() for _ in range(n_points)]
    for p1, p2 in vor.ridge_points:
        if p1 < n_points and p2 < n_points:
            neighbors[p1].add(int(p2))
            neighbors[p2].add(int(p1))
    return [sorted(n) for n in neighbors]


def region_polygon(vor: Voronoi, region: List[int], generator: np.ndarray) -> Optional[Polygon]:
    """Polygon of a finite Voronoi region, vertices ordered around the generator."""
    if not region or -1 in region or len(region) < 3:
        return None
    vertices = vor.vertices[region]
    angles = np.arctan2(vertices[:, 1] - generator[1], vertices[:, 0] - generator[0])
    polygon = Polygon(vertices[np.argsort(angles)])
    if not polygon.is_valid:
        polygon = polygon.buffer(0)
    return polygon


def _to_vertices(geometry) -> Optional[np.ndarray]:
    """Polygon exterior without the closing vertex, or None for degenerate output."""
    if not isinstance(geometry, Polygon) or geometry.is_empty:
        return None
    if geometry.area <= MIN_CELL_AREA:
        return None
    return np.asarray(geometry.exterior.coords)[:-1]


def compute_tessellation(points: np.ndarray, width: float, height: float) -> Tessellation:
    """
    Compute the Voronoi cell of every point, clipped to [0, 0, width, height].

    Qhull builds the Voronoi diagram from the Delaunay triangulation of the
    points plus a ring of guard points, so every input region is finite.
    Each region is then clipped to the rectangle.

    Args:
        points: Point coordinates in output units, shape (n, 2)
        width: Clip rectangle width
        height: Clip rectangle height

    Returns:
        Tessellation with one entry per input point

    Raises:
        ValueError: if any coordinate is not finite
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    bounds = (0.0, 0.0, float(width), float(height))
    n_points = len(points)

    if not np.all(np.isfinite(points)):
        raise ValueError("Point coordinates must be finite")

    if n_points == 0:
        return Tessellation(points=points, bounds=bounds, cells=[])

    guard_points = get_guard_points(points, bounds)
    vor = Voronoi(np.vstack([points, guard_points]))

    logger.info("Voronoi diagram calculated",
                points=n_points, guard_points=len(guard_points),
                vertices=len(vor.vertices), ridges=len(vor.ridge_points))

    clip = box(*bounds)
    cells: List[Optional[np.ndarray]] = []
    claimed = set()

    for i in range(n_points):
        region_idx = vor.point_region[i]
        # Coincident duplicates share one region; the first point owns it
        if region_idx == -1 or region_idx in claimed:
            cells.append(None)
            continue
        claimed.add(region_idx)

        polygon = region_polygon(vor, vor.regions[region_idx], points[i])
        cells.append(_to_vertices(polygon.intersection(clip)) if polygon is not None else None)

    tessellation = Tessellation(
        points=points,
        bounds=bounds,
        cells=cells,
        point_neighbors=build_point_neighbors(vor, n_points),
    )

    logger.info("Voronoi cells clipped",
                cells=tessellation.cell_count, skipped=n_points - tessellation.cell_count)
    return tessellation
