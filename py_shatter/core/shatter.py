"""
Shatter orchestration.

Runs the whole pipeline for one panel: seed sampling, Voronoi partitioning,
per-cell triangulation, extrusion and collider construction. A shatter is
all-or-nothing: if any step fails, no shard is returned, no hook fires and
the panel stays intact.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

import numpy as np
import structlog

from ..config import settings
from ..utils.arrays import freeze
from ..utils.random import Seed, make_rng, spawn_rng
from .collider import ConvexCollider, build_convex_collider
from .errors import ConfigurationError, PanelStateError, ShatterError
from .extrusion import ExtrudedSolid, ShardMesh, extrude_cell, finalize_mesh
from .panel import Panel, PanelInstance
from .sampling import get_jittered_points
from .transform import Placement
from .triangulation import find_boundary_edges, triangulate_cell
from .voronoi_cells import VoronoiCell, compute_voronoi_cells

logger = structlog.get_logger()


class SourcePanelAction(str, Enum):
    """What the caller should do with the panel after it shattered."""

    HIDE = "hide"
    REMOVE = "remove"


@dataclass
class ShatterConfig:
    """Per-shatterer settings."""

    epsilon: float = 0.001
    max_cells: int = 100_000
    collider_min_volume: float = 1e-12
    source_policy: SourcePanelAction = SourcePanelAction.HIDE

    @classmethod
    def from_settings(cls) -> "ShatterConfig":
        return cls(
            epsilon=settings.epsilon,
            max_cells=settings.max_cells,
            collider_min_volume=settings.collider_min_volume,
            source_policy=SourcePanelAction(settings.source_policy),
        )


@dataclass(frozen=True, eq=False)
class ShardRecord:
    """One fragment of a shattered panel.

    ``position`` is the cell's seed point in panel-local 2D coordinates
    measured from the bottom-left corner.
    """
    index: int
    panel_id: str
    mesh: ShardMesh
    solid: ExtrudedSolid
    collider: ConvexCollider
    position: np.ndarray
    cell: VoronoiCell
    placement: Placement
    material: Any = None

    def distance_to(self, point) -> float:
        """Planar distance from the seed point to a panel-local 2D point."""
        return float(np.linalg.norm(self.position - np.asarray(point, dtype=float)))


@dataclass(frozen=True, eq=False)
class ShatterResult:
    """Everything produced by one shatter call."""
    panel_id: str
    shards: List[ShardRecord]
    source_action: SourcePanelAction
    impact_point: Optional[np.ndarray] = None
    cell_neighbors: List[List[int]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.shards)

    def __iter__(self) -> Iterator[ShardRecord]:
        return iter(self.shards)

    def _reference(self, point) -> np.ndarray:
        if point is None:
            point = self.impact_point
        if point is None:
            raise ValueError("No point given and the shatter had no impact point")
        return np.asarray(point, dtype=float)

    def nearest(self, point=None, count: int = 1) -> List[ShardRecord]:
        """Shards ordered by distance to ``point`` (default: the impact point)."""
        ref = self._reference(point)
        return sorted(self.shards, key=lambda s: s.distance_to(ref))[:count]

    def within(self, radius: float, point=None) -> List[ShardRecord]:
        """Shards whose seed lies within ``radius`` of ``point`` (default: the impact point)."""
        ref = self._reference(point)
        return [s for s in self.shards if s.distance_to(ref) <= radius]


ShardHook = Callable[[ShardRecord], None]
ShatterHook = Callable[[ShatterResult], None]


class ShardRegistry:
    """Keeps track of which shards came from which panel."""

    def __init__(self):
        self._shards: Dict[str, List[ShardRecord]] = defaultdict(list)

    def __call__(self, result: ShatterResult) -> None:
        self.register(result)

    def __contains__(self, panel_id: str) -> bool:
        return panel_id in self._shards

    def register(self, result: ShatterResult) -> None:
        self._shards[result.panel_id].extend(result.shards)

    def shards_of(self, panel_id: str) -> List[ShardRecord]:
        return list(self._shards.get(panel_id, []))

    def release(self, panel_id: str) -> List[ShardRecord]:
        """Forget a panel's shards and return them."""
        return self._shards.pop(panel_id, [])

    def panels(self) -> List[str]:
        return list(self._shards)


def build_shard_geometry(cell: VoronoiCell, thickness: float,
                         min_volume: float = 0.0) -> Tuple[ShardMesh, ExtrudedSolid, ConvexCollider]:
    """
    Build the render mesh, closed solid and collider for one cell.

    Args:
        cell: Clipped Voronoi cell
        thickness: Panel thickness
        min_volume: Smallest accepted collider volume

    Returns:
        Tuple of (mesh, solid, collider), all arrays read-only
    """
    triangles = triangulate_cell(cell.vertices)
    boundary_edges = find_boundary_edges(triangles)
    solid = extrude_cell(cell.vertices, triangles, boundary_edges, thickness)
    collider = build_convex_collider(solid.positions, min_volume)
    mesh = finalize_mesh(solid)
    freeze(mesh.positions, mesh.indices, mesh.normals, solid.positions, solid.indices,
           collider.vertices, collider.faces, collider.planes, collider.centroid)
    return mesh, solid, collider


class Shatterer:
    """
    Shatters panels into shards.

    Holds no per-panel state: each call to ``shatter`` works on local data
    only. Hooks run synchronously once a shatter has fully succeeded.
    """

    def __init__(self, config: Optional[ShatterConfig] = None,
                 rng: Optional[np.random.Generator] = None, seed: Seed = None):
        """
        Initialize the shatterer.

        Args:
            config: Settings (defaults to values from the environment)
            rng: Generator for seed jitter (a fresh one is spawned if omitted)
            seed: Seed for a new generator when ``rng`` is not given
        """
        self.config = config or ShatterConfig.from_settings()
        if rng is not None:
            self.rng = rng
        elif seed is not None:
            self.rng = make_rng(seed)
        else:
            self.rng = spawn_rng()
        self._shard_hooks: List[ShardHook] = []
        self._shatter_hooks: List[ShatterHook] = []

    def add_shard_hook(self, hook: ShardHook) -> None:
        """Call ``hook`` with every shard created."""
        self._shard_hooks.append(hook)

    def add_shatter_hook(self, hook: ShatterHook) -> None:
        """Call ``hook`` once per completed shatter."""
        self._shatter_hooks.append(hook)

    def shatter(self, panel: Panel, placement: Optional[Placement] = None, material: Any = None,
                impact_point=None, world_impact_point=None,
                seed_points: Optional[np.ndarray] = None) -> ShatterResult:
        """
        Shatter a panel.

        Args:
            panel: Intact panel
            placement: World placement of the panel center (identity if omitted)
            material: Opaque handle copied onto every shard
            impact_point: Panel-local 2D impact point
            world_impact_point: World-space impact point, projected onto the panel
            seed_points: Use these seeds instead of sampling new ones

        Returns:
            ShatterResult with one shard per grid cell (none for an empty grid)

        Raises:
            PanelStateError: If the panel was already shattered
            ConfigurationError: For grids that cannot be sampled or seed points
                that do not match the grid
            PartitionError, TriangulationError, ColliderError: If geometry
                generation fails; the panel stays intact
        """
        if not panel.is_intact:
            raise PanelStateError(f"Panel {panel.id} is already shattered")

        if placement is None:
            placement = Placement()
        if impact_point is None and world_impact_point is not None:
            impact_point = placement.world_to_panel(world_impact_point, panel.width, panel.height)
        if impact_point is not None:
            impact_point = np.asarray(impact_point, dtype=float).reshape(2)

        source_action = self.config.source_policy
        if panel.grid.is_empty:
            logger.warning("Shatter skipped for empty grid", panel_id=panel.id,
                           nx=panel.grid.nx, ny=panel.grid.ny)
            return ShatterResult(panel_id=panel.id, shards=[], source_action=source_action,
                                 impact_point=impact_point)

        panel.validate(self.config.epsilon, self.config.max_cells)
        if seed_points is not None:
            seed_points = np.asarray(seed_points, dtype=float)
            if seed_points.shape != (panel.grid.count, 2):
                raise ConfigurationError(
                    f"Expected {panel.grid.count} seed points of shape (n, 2) for a "
                    f"{panel.grid.nx}x{panel.grid.ny} grid, got shape {seed_points.shape}"
                )

        logger.info("Shattering panel", panel_id=panel.id, width=panel.width, height=panel.height,
                    thickness=panel.thickness, nx=panel.grid.nx, ny=panel.grid.ny)

        try:
            if seed_points is None:
                seed_points = get_jittered_points(panel.width, panel.height, panel.grid.nx,
                                                  panel.grid.ny, self.rng, self.config.epsilon)
            partition = compute_voronoi_cells(seed_points, panel.width, panel.height)

            shard_placement = placement.shard_placement(panel.width, panel.height, panel.thickness)
            shards = []
            for cell in partition.cells:
                mesh, solid, collider = build_shard_geometry(
                    cell, panel.thickness, self.config.collider_min_volume
                )
                position = cell.seed.copy()
                freeze(cell.seed, cell.vertices, position)
                shards.append(ShardRecord(
                    index=cell.index,
                    panel_id=panel.id,
                    mesh=mesh,
                    solid=solid,
                    collider=collider,
                    position=position,
                    cell=cell,
                    placement=shard_placement,
                    material=material,
                ))
        except ShatterError as e:
            logger.error("Shatter failed", panel_id=panel.id, error=str(e))
            raise

        panel.mark_shattered()
        result = ShatterResult(
            panel_id=panel.id,
            shards=shards,
            source_action=source_action,
            impact_point=impact_point,
            cell_neighbors=partition.cell_neighbors,
        )
        logger.info("Panel shattered", panel_id=panel.id, shards=len(shards),
                    source_action=source_action.value)

        for shard in shards:
            for hook in self._shard_hooks:
                hook(shard)
        for hook in self._shatter_hooks:
            hook(result)

        return result

    def shatter_instance(self, instance: PanelInstance, world_impact_point=None) -> ShatterResult:
        """Shatter a panel created by ``spawn_panel``."""
        return self.shatter(instance.panel, instance.placement, instance.material,
                            world_impact_point=world_impact_point)


def shatter_panel(panel: Panel, placement: Optional[Placement] = None, material: Any = None,
                  impact_point=None, seed: Seed = None) -> ShatterResult:
    """One-off shatter with a fresh Shatterer."""
    return Shatterer(seed=seed).shatter(panel, placement, material, impact_point=impact_point)
