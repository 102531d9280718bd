"""Voronoi partitioning of a panel rectangle."""

from dataclasses import dataclass
from typing import List

import numpy as np
import structlog
from scipy.spatial import QhullError, Voronoi

from .errors import PartitionError

logger = structlog.get_logger()


@dataclass(frozen=True, eq=False)
class VoronoiCell:
    """One seed point's region, clipped to the panel rectangle.

    Vertices are ordered counter-clockwise with no repeated or collinear
    vertices.
    """
    index: int
    seed: np.ndarray      # [x, y] seed point
    vertices: np.ndarray  # (k, 2) boundary polygon

    @property
    def area(self) -> float:
        return polygon_area(self.vertices)

    @property
    def centroid(self) -> np.ndarray:
        return compute_polygon_centroid(self.vertices)

    def contains(self, point, tolerance: float = 1e-9) -> bool:
        """Check whether a 2D point lies inside or on the cell boundary."""
        edges = np.roll(self.vertices, -1, axis=0) - self.vertices
        rel = np.asarray(point, dtype=float) - self.vertices
        cross = edges[:, 0] * rel[:, 1] - edges[:, 1] * rel[:, 0]
        return bool(np.all(cross >= -tolerance))


@dataclass(frozen=True, eq=False)
class VoronoiPartition:
    """All clipped cells of one panel plus their adjacency."""
    width: float
    height: float
    cells: List[VoronoiCell]
    cell_neighbors: List[List[int]]  # cell_neighbors[i] = sorted ids of cells sharing an edge with i


def polygon_area(vertices: np.ndarray) -> float:
    """Signed shoelace area; positive for counter-clockwise polygons."""
    x = vertices[:, 0]
    y = vertices[:, 1]
    return float(0.5 * np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))


def compute_polygon_centroid(vertices: np.ndarray) -> np.ndarray:
    """Compute the centroid of a polygon.

    Args:
        vertices: Array of [x, y] vertex coordinates

    Returns:
        [x, y] centroid coordinates
    """
    if len(vertices) < 3:
        return np.mean(vertices, axis=0)

    x = vertices[:, 0]
    y = vertices[:, 1]
    x_next = np.roll(x, -1)
    y_next = np.roll(y, -1)
    a = x * y_next - x_next * y
    area = a.sum() * 0.5

    if abs(area) < 1e-12:
        return np.mean(vertices, axis=0)

    cx = np.sum((x + x_next) * a) / (6.0 * area)
    cy = np.sum((y + y_next) * a) / (6.0 * area)
    return np.array([cx, cy])


def get_mirrored_points(points: np.ndarray, width: float, height: float) -> np.ndarray:
    """
    Reflect points across the four edges of the rectangle.

    The bisector between a point and its reflection is the rectangle edge
    itself, so appending these reflections clips every original Voronoi
    region to [0, width] x [0, height] exactly.

    Args:
        points: (n, 2) points inside the rectangle
        width: Rectangle width
        height: Rectangle height

    Returns:
        (4n, 2) reflected points
    """
    x = points[:, 0]
    y = points[:, 1]
    return np.vstack([
        np.column_stack([-x, y]),
        np.column_stack([2.0 * width - x, y]),
        np.column_stack([x, -y]),
        np.column_stack([x, 2.0 * height - y]),
    ])


def order_polygon(vertices: np.ndarray, tolerance: float) -> np.ndarray:
    """
    Sort convex polygon vertices counter-clockwise and drop degenerate ones.

    Coincident vertices (Qhull reports one per circumcircle when several seeds
    are cocircular) and vertices lying on a straight edge are removed.

    Args:
        vertices: Unordered (k, 2) vertices of a convex polygon
        tolerance: Absolute distance below which vertices are merged

    Returns:
        Ordered (m, 2) vertices, m <= k
    """
    center = vertices.mean(axis=0)
    angles = np.arctan2(vertices[:, 1] - center[1], vertices[:, 0] - center[0])
    ordered = vertices[np.argsort(angles, kind="stable")]

    # Merge coincident neighbours
    kept = [ordered[0]]
    for v in ordered[1:]:
        if np.linalg.norm(v - kept[-1]) > tolerance:
            kept.append(v)
    if len(kept) > 1 and np.linalg.norm(kept[0] - kept[-1]) <= tolerance:
        kept.pop()

    # Remove vertices in the middle of a straight run
    changed = True
    while changed and len(kept) > 3:
        changed = False
        for i in range(len(kept)):
            prev_v = kept[i - 1]
            next_v = kept[(i + 1) % len(kept)]
            e1 = kept[i] - prev_v
            e2 = next_v - kept[i]
            cross = e1[0] * e2[1] - e1[1] * e2[0]
            if abs(cross) <= tolerance * (np.linalg.norm(e1) + np.linalg.norm(e2)):
                kept.pop(i)
                changed = True
                break

    return np.array(kept)


def build_cell_connectivity(vor: Voronoi, n_cells: int) -> List[List[int]]:
    """
    Build cell adjacency from the ridges between original seeds.

    Ridges towards reflected points are panel edges and are ignored.

    Args:
        vor: scipy Voronoi diagram over seeds + reflections
        n_cells: Number of original seeds

    Returns:
        Sorted neighbor id lists, one per cell
    """
    cell_neighbors = [set() for _ in range(n_cells)]
    for p1, p2 in vor.ridge_points:
        if p1 < n_cells and p2 < n_cells:
            cell_neighbors[p1].add(int(p2))
            cell_neighbors[p2].add(int(p1))
    return [sorted(neighbors) for neighbors in cell_neighbors]


def compute_voronoi_cells(points: np.ndarray, width: float, height: float) -> VoronoiPartition:
    """
    Compute the Voronoi diagram of ``points`` clipped to the panel rectangle.

    Args:
        points: (n, 2) seed points strictly inside [0, width] x [0, height]
        width: Panel width
        height: Panel height

    Returns:
        VoronoiPartition with one cell per seed, in seed order

    Raises:
        PartitionError: If Qhull rejects the input or a cell is degenerate
    """
    points = np.asarray(points, dtype=float)
    n_cells = len(points)
    logger.debug("Computing Voronoi cells", cells=n_cells, width=width, height=height)

    if n_cells == 0:
        return VoronoiPartition(width=width, height=height, cells=[], cell_neighbors=[])

    inside = ((points[:, 0] > 0) & (points[:, 0] < width) &
              (points[:, 1] > 0) & (points[:, 1] < height))
    if not np.all(inside):
        raise PartitionError(f"{int(np.sum(~inside))} seed points lie outside the panel rectangle")
    if len(np.unique(points, axis=0)) != n_cells:
        raise PartitionError("Seed points contain duplicates")

    all_points = np.vstack([points, get_mirrored_points(points, width, height)])
    try:
        vor = Voronoi(all_points)
    except (QhullError, ValueError) as e:
        raise PartitionError(f"Voronoi partition failed for {n_cells} seed points: {e}") from e

    # Qhull folds near-coincident seeds into a single region
    region_ids = vor.point_region[:n_cells]
    if np.any(region_ids < 0) or len(np.unique(region_ids)) != n_cells:
        raise PartitionError("Seed points are too close to be partitioned")

    tolerance = 1e-9 * max(width, height)
    cells = []
    for i in range(n_cells):
        region = vor.regions[region_ids[i]]
        if not region or -1 in region:
            raise PartitionError(f"Cell {i} has an unbounded Voronoi region")

        vertices = vor.vertices[region]
        vertices = np.column_stack([
            np.clip(vertices[:, 0], 0.0, width),
            np.clip(vertices[:, 1], 0.0, height),
        ])
        vertices = order_polygon(vertices, tolerance)
        if len(vertices) < 3:
            raise PartitionError(f"Cell {i} collapsed to {len(vertices)} vertices")

        cells.append(VoronoiCell(index=i, seed=points[i].copy(), vertices=vertices))

    cell_neighbors = build_cell_connectivity(vor, n_cells)

    logger.debug("Voronoi cells computed", cells=len(cells), vertices=len(vor.vertices))
    return VoronoiPartition(width=width, height=height, cells=cells, cell_neighbors=cell_neighbors)
