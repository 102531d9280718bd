"""World placement of panels and shards."""

from dataclasses import dataclass, field

import numpy as np
from scipy.spatial.transform import Rotation


def _vec3(values) -> np.ndarray:
    arr = np.array(values, dtype=float).reshape(3)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class Placement:
    """Translation, rotation and scale, applied as scale -> rotate -> translate.

    ``rotation`` is a unit quaternion in scalar-last ``(x, y, z, w)`` order.
    """
    translation: np.ndarray = field(default_factory=lambda: _vec3((0.0, 0.0, 0.0)))
    rotation: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 0.0, 1.0]))
    scale: np.ndarray = field(default_factory=lambda: _vec3((1.0, 1.0, 1.0)))

    def __post_init__(self):
        quat = np.array(self.rotation, dtype=float).reshape(4)
        norm = np.linalg.norm(quat)
        if norm == 0:
            raise ValueError("rotation quaternion must be non-zero")
        quat = quat / norm
        quat.setflags(write=False)
        object.__setattr__(self, "translation", _vec3(self.translation))
        object.__setattr__(self, "rotation", quat)
        object.__setattr__(self, "scale", _vec3(self.scale))

    @classmethod
    def from_euler(cls, seq: str, angles, degrees: bool = False, translation=(0.0, 0.0, 0.0),
                   scale=(1.0, 1.0, 1.0)) -> "Placement":
        quat = Rotation.from_euler(seq, angles, degrees=degrees).as_quat()
        return cls(translation=translation, rotation=quat, scale=scale)

    @property
    def rotator(self) -> Rotation:
        return Rotation.from_quat(self.rotation)

    def with_scale(self, scale) -> "Placement":
        return Placement(translation=self.translation, rotation=self.rotation, scale=scale)

    def as_matrix(self) -> np.ndarray:
        """4x4 affine matrix."""
        matrix = np.eye(4)
        matrix[:3, :3] = self.rotator.as_matrix() * self.scale
        matrix[:3, 3] = self.translation
        return matrix

    def transform_points(self, points) -> np.ndarray:
        """Map local points (n, 3) or (3,) to world space."""
        points = np.asarray(points, dtype=float)
        return self.rotator.apply(points * self.scale) + self.translation

    def inverse_transform_points(self, points) -> np.ndarray:
        """Map world points (n, 3) or (3,) to local space."""
        points = np.asarray(points, dtype=float)
        return self.rotator.inv().apply(points - self.translation) / self.scale

    def mul(self, other: "Placement") -> "Placement":
        """Placement equivalent to applying ``other`` first, then ``self``."""
        return Placement(
            translation=self.transform_points(other.translation),
            rotation=(self.rotator * other.rotator).as_quat(),
            scale=self.scale * other.scale,
        )

    def world_to_panel(self, point, width: float, height: float) -> np.ndarray:
        """
        Project a world-space point onto the panel plane.

        The panel is centered on this placement, so the result is shifted by
        half the panel size to measure from its bottom-left corner. Scale is
        ignored; panel dimensions come from ``width`` and ``height``.

        Args:
            point: World-space [x, y, z]
            width: Panel width
            height: Panel height

        Returns:
            Panel-local [x, y]
        """
        local = self.rotator.inv().apply(np.asarray(point, dtype=float) - self.translation)
        return np.array([local[0] + width / 2.0, local[1] + height / 2.0])

    def shard_placement(self, width: float, height: float, thickness: float) -> "Placement":
        """
        Placement shared by every shard of a panel.

        Shard vertices stay in panel-local coordinates (x in [0, width],
        y in [0, height], z in [-thickness, 0]), so the shard origin sits at
        the panel's bottom-left corner on its z=+thickness/2 face, at unit scale.
        """
        corner = Placement(translation=(-width / 2.0, -height / 2.0, thickness / 2.0))
        return self.with_scale((1.0, 1.0, 1.0)).mul(corner)
