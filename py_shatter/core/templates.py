"""Shared placeholder geometry for panels that have not been shattered yet."""

from dataclasses import dataclass
from functools import lru_cache

import numpy as np
import structlog

from ..utils.arrays import freeze
from .collider import ConvexCollider
from .extrusion import ShardMesh, extrude_cell, finalize_mesh
from .triangulation import find_boundary_edges, triangulate_cell

logger = structlog.get_logger()


@dataclass(frozen=True, eq=False)
class TemplateAssets:
    """Unit cuboid mesh and collider, scaled per panel by its placement."""
    mesh: ShardMesh
    collider: ConvexCollider


def build_unit_cuboid_mesh() -> ShardMesh:
    """1x1x1 cube centered at the origin, built with the shard extruder."""
    square = np.array([[-0.5, -0.5], [0.5, -0.5], [0.5, 0.5], [-0.5, 0.5]])
    triangles = triangulate_cell(square)
    solid = extrude_cell(square, triangles, find_boundary_edges(triangles), thickness=1.0)
    mesh = finalize_mesh(solid)
    return ShardMesh(
        positions=mesh.positions + np.array([0.0, 0.0, 0.5], dtype=np.float32),
        indices=mesh.indices,
        normals=mesh.normals,
    )


@lru_cache(maxsize=None)
def get_template_assets() -> TemplateAssets:
    """
    Process-wide template assets, built on first use.

    Every array is read-only; the same objects are handed to every panel.
    """
    mesh = build_unit_cuboid_mesh()
    collider = ConvexCollider.cuboid(1.0, 1.0, 1.0)
    freeze(mesh.positions, mesh.indices, mesh.normals,
           collider.vertices, collider.faces, collider.planes, collider.centroid)

    logger.info("Template assets created", triangles=mesh.triangle_count)
    return TemplateAssets(mesh=mesh, collider=collider)
