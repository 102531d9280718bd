"""Jittered seed point sampling over a panel surface."""

from typing import NamedTuple, Optional, Tuple

import numpy as np
import structlog

from .errors import ConfigurationError

logger = structlog.get_logger()

# Minimum distance kept between a seed point and the edge of its grid cell
EPSILON = 0.001


class CellGrid(NamedTuple):
    """Number of seed points along the panel width and height."""
    nx: int
    ny: int

    @property
    def count(self) -> int:
        return self.nx * self.ny

    @property
    def is_empty(self) -> bool:
        return self.nx * self.ny == 0


def grid_from_density(width: float, height: float, cells_per_unit: float) -> CellGrid:
    """
    Derive grid counts from a cells-per-unit density.

    Args:
        width: Panel width
        height: Panel height
        cells_per_unit: Seed points per unit of distance

    Returns:
        CellGrid with floor(density * width), floor(density * height)
    """
    if cells_per_unit < 0:
        raise ConfigurationError(f"cells_per_unit must be non-negative, got {cells_per_unit}")
    return CellGrid(int(np.floor(cells_per_unit * width)), int(np.floor(cells_per_unit * height)))


def validate_jitter_range(width: float, height: float, nx: int, ny: int,
                          epsilon: float = EPSILON) -> Tuple[float, float]:
    """
    Check that every grid cell leaves room for a jittered point.

    Args:
        width, height: Panel dimensions
        nx, ny: Grid counts (both >= 1)
        epsilon: Margin kept from the cell edges

    Returns:
        Maximum (x, y) offset from a cell center

    Raises:
        ConfigurationError: If half the pitch does not exceed epsilon
    """
    half_x = width / nx / 2.0
    half_y = height / ny / 2.0
    if half_x <= epsilon or half_y <= epsilon:
        raise ConfigurationError(
            f"grid {nx}x{ny} is too fine for a {width}x{height} panel: "
            f"half pitch ({half_x:.6g}, {half_y:.6g}) must exceed epsilon {epsilon}"
        )
    return half_x - epsilon, half_y - epsilon


def get_jittered_points(width: float, height: float, nx: int, ny: int,
                        rng: Optional[np.random.Generator] = None,
                        epsilon: float = EPSILON) -> np.ndarray:
    """
    Generate one randomly offset point per grid cell.

    Points are ordered row-major from the bottom-left corner (x fastest).
    Each point is placed at a uniform offset from its cell center, bounded so
    it stays at least ``epsilon`` away from the cell edges; neighbouring
    points therefore never coincide.

    Args:
        width: Panel width
        height: Panel height
        nx: Cells along the width
        ny: Cells along the height
        rng: Random generator (a fresh unseeded one if omitted)
        epsilon: Margin kept from the cell edges

    Returns:
        Array of shape (nx * ny, 2)
    """
    if nx == 0 or ny == 0:
        return np.empty((0, 2))

    max_dx, max_dy = validate_jitter_range(width, height, nx, ny, epsilon)
    if rng is None:
        rng = np.random.default_rng()

    pitch = np.array([width / nx, height / ny])
    xs, ys = np.meshgrid(np.arange(nx), np.arange(ny))
    centers = (np.column_stack([xs.ravel(), ys.ravel()]) + 0.5) * pitch

    offsets = rng.uniform(-1.0, 1.0, size=centers.shape) * np.array([max_dx, max_dy])
    points = centers + offsets

    logger.debug("Seed points sampled", nx=nx, ny=ny, pitch_x=pitch[0], pitch_y=pitch[1])
    return points
