"""Extrusion of flat cell polygons into closed shard solids and render meshes."""

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np


@dataclass(frozen=True, eq=False)
class ExtrudedSolid:
    """Closed, indexed shard volume with shared vertices.

    The first half of ``positions`` is the face at z=0, the second half the
    face at z=-thickness, in the same order.
    """
    positions: np.ndarray  # (2n, 3) float
    indices: np.ndarray    # (m, 3) uint32, outward winding

    @property
    def face_vertex_count(self) -> int:
        return len(self.positions) // 2


@dataclass(frozen=True, eq=False)
class ShardMesh:
    """Render-ready triangle list with one vertex copy per triangle corner."""
    positions: np.ndarray  # (3m, 3) float32
    indices: np.ndarray    # (m, 3) uint32
    normals: np.ndarray    # (3m, 3) float32, flat per triangle

    @property
    def triangle_count(self) -> int:
        return len(self.indices)

    @property
    def vertex_count(self) -> int:
        return len(self.positions)


def extrude_cell(vertices: np.ndarray, triangles: np.ndarray,
                 boundary_edges: Sequence[Tuple[int, int]], thickness: float) -> ExtrudedSolid:
    """
    Extrude a triangulated cell into a closed solid.

    Args:
        vertices: (n, 2) cell polygon
        triangles: (m, 3) clockwise index triples into ``vertices``
        boundary_edges: Directed outline edges from find_boundary_edges
        thickness: Extrusion depth along -z

    Returns:
        ExtrudedSolid with 2n vertices and 2m + 2 * len(boundary_edges) triangles
    """
    vertices = np.asarray(vertices, dtype=float)
    triangles = np.asarray(triangles, dtype=np.int64)
    n = len(vertices)

    bottom = np.column_stack([vertices, np.zeros(n)])
    top = np.column_stack([vertices, np.full(n, -thickness)])
    positions = np.vstack([bottom, top])

    # z=0 face winds reversed, the z=-thickness face keeps the triangulation's winding
    bottom_faces = triangles[:, ::-1]
    top_faces = triangles + n

    edges = np.asarray(boundary_edges, dtype=np.int64).reshape(-1, 2)
    a = edges[:, 0]
    b = edges[:, 1]
    side_faces = np.vstack([
        np.column_stack([a, b, b + n]),
        np.column_stack([b + n, a + n, a]),
    ])

    indices = np.vstack([bottom_faces, top_faces, side_faces]).astype(np.uint32)
    return ExtrudedSolid(positions=positions, indices=indices)


def compute_flat_normals(positions: np.ndarray, indices: np.ndarray) -> np.ndarray:
    """Unit normal of every triangle, (m, 3)."""
    tri = positions[indices]
    normals = np.cross(tri[:, 1] - tri[:, 0], tri[:, 2] - tri[:, 0])
    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    return np.divide(normals, lengths, out=np.zeros_like(normals), where=lengths > 0)


def finalize_mesh(solid: ExtrudedSolid) -> ShardMesh:
    """
    Turn an indexed solid into a flat-shaded render mesh.

    A shared vertex cannot carry one normal per adjacent face, so every
    triangle gets its own three vertex copies.

    Args:
        solid: Closed shard volume

    Returns:
        ShardMesh with duplicated vertices and flat normals
    """
    indices = solid.indices.astype(np.int64)
    positions = solid.positions[indices.ravel()]
    face_normals = compute_flat_normals(solid.positions, indices)
    normals = np.repeat(face_normals, 3, axis=0)

    return ShardMesh(
        positions=positions.astype(np.float32),
        indices=np.arange(len(positions), dtype=np.uint32).reshape(-1, 3),
        normals=normals.astype(np.float32),
    )
