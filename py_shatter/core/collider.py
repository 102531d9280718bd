"""Convex collision shapes for shards and template panels."""

from dataclasses import dataclass

import numpy as np
from scipy.spatial import ConvexHull, QhullError

from .errors import ColliderError


@dataclass(frozen=True, eq=False)
class ConvexCollider:
    """Convex hull handed to the physics engine.

    ``faces`` index into ``vertices`` and wind outward. ``planes`` holds one
    ``[nx, ny, nz, d]`` row per face with ``n . p + d <= 0`` inside.
    """
    vertices: np.ndarray  # (k, 3)
    faces: np.ndarray     # (f, 3)
    planes: np.ndarray    # (f, 4)
    volume: float
    centroid: np.ndarray  # (3,)

    @classmethod
    def from_points(cls, points: np.ndarray, min_volume: float = 0.0) -> "ConvexCollider":
        return build_convex_collider(points, min_volume)

    @classmethod
    def cuboid(cls, size_x: float, size_y: float, size_z: float) -> "ConvexCollider":
        """Box centered at the origin with the given full side lengths."""
        half = np.array([size_x, size_y, size_z]) / 2.0
        corners = np.array([[sx, sy, sz] for sx in (-1, 1) for sy in (-1, 1) for sz in (-1, 1)],
                           dtype=float)
        return build_convex_collider(corners * half)

    def contains(self, point, tolerance: float = 1e-9) -> bool:
        p = np.asarray(point, dtype=float)
        return bool(np.all(self.planes[:, :3] @ p + self.planes[:, 3] <= tolerance))


def build_convex_collider(points: np.ndarray, min_volume: float = 0.0) -> ConvexCollider:
    """
    Build the convex hull of a shard's vertices.

    Exact triangle-mesh colliders are slow and unstable for many thin shards,
    so each shard collides as its hull.

    Args:
        points: (n, 3) vertex positions
        min_volume: Smallest accepted hull volume

    Returns:
        ConvexCollider

    Raises:
        ColliderError: If the points are degenerate (flat, too few) or the
            hull volume is not above ``min_volume``
    """
    points = np.asarray(points, dtype=float)
    if len(points) < 4:
        raise ColliderError(f"Convex hull needs at least 4 points, got {len(points)}")

    try:
        hull = ConvexHull(points)
    except (QhullError, ValueError) as e:
        raise ColliderError(f"Convex hull failed: {e}") from e

    if not hull.volume > min_volume:
        raise ColliderError(f"Convex hull volume {hull.volume:.3g} is below {min_volume:.3g}")

    # Re-index faces onto the hull's own vertex list
    remap = np.full(len(points), -1, dtype=np.int64)
    remap[hull.vertices] = np.arange(len(hull.vertices))
    faces = remap[hull.simplices]
    vertices = points[hull.vertices]

    # Qhull does not orient simplices; align them with the outward plane normals
    tri = vertices[faces]
    winding = np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])
    inward = np.einsum("ij,ij->i", winding, hull.equations[:, :3]) < 0
    faces[inward] = faces[inward][:, [0, 2, 1]]

    # Volume-weighted centroid of the tetrahedra fanned from the mean vertex
    apex = vertices.mean(axis=0)
    tri = vertices[faces]
    tet_volumes = np.einsum("ij,ij->i", tri[:, 0] - apex,
                            np.cross(tri[:, 1] - apex, tri[:, 2] - apex)) / 6.0
    tet_centroids = (tri.sum(axis=1) + apex) / 4.0
    centroid = (tet_volumes[:, None] * tet_centroids).sum(axis=0) / tet_volumes.sum()

    return ConvexCollider(
        vertices=vertices,
        faces=faces,
        planes=hull.equations.copy(),
        volume=float(hull.volume),
        centroid=centroid,
    )
