"""
Core shattering functionality.
"""

from .errors import (ShatterError, ConfigurationError, PartitionError, TriangulationError,
                     ColliderError, PanelStateError)
from .sampling import EPSILON, CellGrid, get_jittered_points, grid_from_density
from .voronoi_cells import VoronoiCell, VoronoiPartition, compute_voronoi_cells
from .triangulation import triangulate_cell, find_boundary_edges
from .extrusion import ExtrudedSolid, ShardMesh, extrude_cell, finalize_mesh
from .collider import ConvexCollider, build_convex_collider
from .transform import Placement
from .templates import TemplateAssets, get_template_assets
from .panel import Panel, PanelState, PanelInstance, spawn_panel
from .shatter import (Shatterer, ShatterConfig, ShatterResult, ShardRecord, ShardRegistry,
                      SourcePanelAction, shatter_panel)

__all__ = ['ShatterError', 'ConfigurationError', 'PartitionError', 'TriangulationError',
           'ColliderError', 'PanelStateError',
           'EPSILON', 'CellGrid', 'get_jittered_points', 'grid_from_density',
           'VoronoiCell', 'VoronoiPartition', 'compute_voronoi_cells',
           'triangulate_cell', 'find_boundary_edges',
           'ExtrudedSolid', 'ShardMesh', 'extrude_cell', 'finalize_mesh',
           'ConvexCollider', 'build_convex_collider', 'Placement',
           'TemplateAssets', 'get_template_assets',
           'Panel', 'PanelState', 'PanelInstance', 'spawn_panel',
           'Shatterer', 'ShatterConfig', 'ShatterResult', 'ShardRecord', 'ShardRegistry',
           'SourcePanelAction', 'shatter_panel']
