"""Delaunay triangulation of cell polygons and boundary edge detection."""

from collections import defaultdict
from typing import Dict, List, Tuple

import numpy as np
from scipy.spatial import Delaunay, QhullError

from .errors import TriangulationError


def triangle_areas(vertices: np.ndarray, triangles: np.ndarray) -> np.ndarray:
    """Signed areas of index triples; positive means counter-clockwise."""
    a = vertices[triangles[:, 0]]
    b = vertices[triangles[:, 1]]
    c = vertices[triangles[:, 2]]
    ab = b - a
    ac = c - a
    return 0.5 * (ab[:, 0] * ac[:, 1] - ab[:, 1] * ac[:, 0])


def triangulate_cell(vertices: np.ndarray) -> np.ndarray:
    """
    Delaunay-triangulate a convex cell polygon using only its own vertices.

    Every returned triangle is wound clockwise in the panel plane. The
    extrusion step relies on this single orientation to decide which face
    points away from the shard.

    Args:
        vertices: (k, 2) cell boundary, k >= 3

    Returns:
        (m, 3) int array of indices into ``vertices``

    Raises:
        TriangulationError: On too few, duplicate or collinear vertices, or
            when the triangles do not cover the polygon
    """
    vertices = np.asarray(vertices, dtype=float)
    if len(vertices) < 3:
        raise TriangulationError(f"Cell polygon needs at least 3 vertices, got {len(vertices)}")

    try:
        tri = Delaunay(vertices)
    except (QhullError, ValueError) as e:
        raise TriangulationError(f"Delaunay triangulation failed: {e}") from e

    triangles = tri.simplices.astype(np.int64)
    areas = triangle_areas(vertices, triangles)

    scale = np.ptp(vertices, axis=0).max()
    keep = np.abs(areas) > 1e-14 * scale * scale
    triangles = triangles[keep]
    areas = areas[keep]
    if len(triangles) == 0:
        raise TriangulationError("Cell polygon is degenerate (zero area)")

    # Flip counter-clockwise triangles
    ccw = areas > 0
    triangles[ccw] = triangles[ccw][:, [0, 2, 1]]

    x = vertices[:, 0]
    y = vertices[:, 1]
    polygon_area = 0.5 * abs(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))
    covered = np.abs(areas).sum()
    if not np.isclose(covered, polygon_area, rtol=1e-6, atol=1e-12):
        raise TriangulationError(
            f"Triangulation covers area {covered:.6g} of a {polygon_area:.6g} cell"
        )

    return triangles


def find_boundary_edges(triangles: np.ndarray) -> List[Tuple[int, int]]:
    """
    Find the edges that belong to exactly one triangle.

    Each directed edge (a, b) adds one to its own counter and subtracts one
    from the reversed edge, so interior diagonals cancel out. An edge left
    with a count of exactly +1 is on the outline and keeps the traversal
    direction of its triangle.

    Args:
        triangles: (m, 3) consistently wound index triples

    Returns:
        Directed boundary edges in first-seen order
    """
    edge_count: Dict[Tuple[int, int], int] = defaultdict(int)
    for t0, t1, t2 in triangles:
        for a, b in ((t0, t1), (t1, t2), (t2, t0)):
            edge_count[(int(a), int(b))] += 1
            edge_count[(int(b), int(a))] -= 1

    return [edge for edge, count in edge_count.items() if count == 1]
