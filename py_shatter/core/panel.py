"""Glass panels and the helper that spawns them with placeholder geometry."""

import math
import numbers
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Sequence

import structlog

from ..config import settings
from .collider import ConvexCollider
from .errors import ConfigurationError, PanelStateError
from .extrusion import ShardMesh
from .sampling import EPSILON, CellGrid, grid_from_density, validate_jitter_range
from .templates import get_template_assets
from .transform import Placement

logger = structlog.get_logger()


class PanelState(str, Enum):
    """Lifecycle of a panel. The only transition is INTACT -> SHATTERED."""

    INTACT = "intact"
    SHATTERED = "shattered"


@dataclass
class Panel:
    """A flat rectangular solid that can be shattered once.

    Width runs along local x, height along local y and thickness along
    local z.
    """
    width: float
    height: float
    thickness: float
    grid: CellGrid
    state: PanelState = PanelState.INTACT
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        for name in ("width", "height", "thickness"):
            value = getattr(self, name)
            if not (isinstance(value, numbers.Real) and math.isfinite(value) and value > 0):
                raise ConfigurationError(f"Panel {name} must be a positive number, got {value!r}")
        nx, ny = self.grid
        for count in (nx, ny):
            if isinstance(count, bool) or not isinstance(count, numbers.Real) \
                    or not float(count).is_integer():
                raise ConfigurationError(f"Grid counts must be whole numbers, got {nx!r}x{ny!r}")
        if nx < 0 or ny < 0:
            raise ConfigurationError(f"Grid counts must be non-negative, got {nx}x{ny}")
        self.grid = CellGrid(int(nx), int(ny))

    @classmethod
    def with_grid(cls, width: float, height: float, nx: int, ny: int,
                  thickness: Optional[float] = None) -> "Panel":
        """Panel with an explicit number of cells along each side."""
        if thickness is None:
            thickness = settings.default_thickness
        return cls(width=width, height=height, thickness=thickness, grid=CellGrid(nx, ny))

    @classmethod
    def with_density(cls, width: float, height: float, cells_per_unit: float,
                     thickness: Optional[float] = None) -> "Panel":
        """Panel whose grid is derived from a cells-per-unit density."""
        nx, ny = grid_from_density(width, height, cells_per_unit)
        return cls.with_grid(width, height, nx, ny, thickness)

    @property
    def is_intact(self) -> bool:
        return self.state is PanelState.INTACT

    @property
    def shard_count(self) -> int:
        """Number of shards a shatter will produce."""
        return self.grid.count

    def validate(self, epsilon: float = EPSILON, max_cells: Optional[int] = None) -> None:
        """
        Reject grids that cannot be shattered.

        An empty grid is valid (shattering it is a no-op).

        Raises:
            ConfigurationError: If the grid is too large or too fine
        """
        if self.grid.is_empty:
            return
        if max_cells is not None and self.grid.count > max_cells:
            raise ConfigurationError(
                f"Grid {self.grid.nx}x{self.grid.ny} exceeds the {max_cells} cell limit"
            )
        validate_jitter_range(self.width, self.height, self.grid.nx, self.grid.ny, epsilon)

    def mark_shattered(self) -> None:
        if self.state is PanelState.SHATTERED:
            raise PanelStateError(f"Panel {self.id} is already shattered")
        self.state = PanelState.SHATTERED


@dataclass
class PanelInstance:
    """A panel ready to render and collide before it is shattered.

    ``placement.scale`` is ``(width, height, thickness)`` so the shared unit
    template mesh and collider take the panel's size.
    """
    panel: Panel
    placement: Placement
    mesh: ShardMesh
    collider: ConvexCollider
    material: Any = None


def spawn_panel(width: float, height: float, thickness: Optional[float] = None,
                cells_per_unit: Optional[float] = None, grid: Optional[Sequence[int]] = None,
                translation=(0.0, 0.0, 0.0), rotation=(0.0, 0.0, 0.0, 1.0),
                material: Any = None) -> PanelInstance:
    """
    Create a panel together with its placeholder geometry.

    Exactly one of ``cells_per_unit`` and ``grid`` must be given. No rigid
    body is attached; physics is left to the caller.

    Args:
        width, height, thickness: Panel dimensions
        cells_per_unit: Seed density
        grid: Explicit (nx, ny)
        translation: World position of the panel center
        rotation: Quaternion (x, y, z, w)
        material: Opaque handle passed through to the shards

    Returns:
        PanelInstance sharing the template mesh and collider
    """
    if (cells_per_unit is None) == (grid is None):
        raise ConfigurationError("Pass exactly one of cells_per_unit or grid")

    if thickness is None:
        thickness = settings.default_thickness
    if grid is not None:
        panel = Panel.with_grid(width, height, grid[0], grid[1], thickness)
    else:
        panel = Panel.with_density(width, height, cells_per_unit, thickness)

    assets = get_template_assets()
    placement = Placement(translation=translation, rotation=rotation,
                          scale=(width, height, thickness))

    logger.debug("Panel spawned", panel_id=panel.id, nx=panel.grid.nx, ny=panel.grid.ny)
    return PanelInstance(panel=panel, placement=placement, mesh=assets.mesh,
                         collider=assets.collider, material=material)
