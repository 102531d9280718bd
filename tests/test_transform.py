"""Tests for panel and shard placement."""

import pytest
import numpy as np
from py_shatter.core.transform import Placement


class TestPlacement:
    """Test placement math."""

    def test_identity(self):
        """Test that the default placement leaves points unchanged."""
        points = np.array([[1.0, 2.0, 3.0], [-1.0, 0.5, 0.0]])

        np.testing.assert_allclose(Placement().transform_points(points), points)

    def test_round_trip(self):
        """Test that inverse_transform_points undoes transform_points."""
        placement = Placement.from_euler("xyz", [30, 45, 10], degrees=True,
                                         translation=(1.0, -2.0, 3.0), scale=(2.0, 1.0, 0.5))
        points = np.array([[0.3, 0.2, 0.1], [5.0, -1.0, 2.0]])

        np.testing.assert_allclose(
            placement.inverse_transform_points(placement.transform_points(points)), points
        )

    def test_matrix_matches_points(self):
        """Test that as_matrix agrees with transform_points."""
        placement = Placement.from_euler("z", 90, degrees=True, translation=(1.0, 2.0, 3.0),
                                         scale=(2.0, 2.0, 2.0))
        point = np.array([1.0, 0.0, 0.0])
        homogeneous = placement.as_matrix() @ np.append(point, 1.0)

        np.testing.assert_allclose(homogeneous[:3], placement.transform_points(point))
        np.testing.assert_allclose(homogeneous[:3], [1.0, 4.0, 3.0], atol=1e-12)

    def test_quaternion_normalized(self):
        """Test that rotations are stored as unit quaternions."""
        placement = Placement(rotation=(0.0, 0.0, 0.0, 2.0))

        np.testing.assert_allclose(placement.rotation, [0.0, 0.0, 0.0, 1.0])

    def test_zero_quaternion(self):
        """Test that a zero quaternion is rejected."""
        with pytest.raises(ValueError):
            Placement(rotation=(0.0, 0.0, 0.0, 0.0))

    def test_mul(self):
        """Test composition order."""
        parent = Placement(translation=(10.0, 0.0, 0.0), scale=(2.0, 2.0, 2.0))
        child = Placement(translation=(1.0, 0.0, 0.0))
        point = np.array([0.5, 0.5, 0.5])

        np.testing.assert_allclose(
            parent.mul(child).transform_points(point),
            parent.transform_points(child.transform_points(point)),
        )


class TestPanelProjection:
    """Test world to panel projection."""

    def test_center_maps_to_middle(self):
        """Test that the panel center projects to (w/2, h/2)."""
        placement = Placement(translation=(0.0, 3.0, -10.0))

        np.testing.assert_allclose(placement.world_to_panel((0.0, 3.0, -10.0), 20.0, 5.0), [10.0, 2.5])

    def test_rotated_panel(self):
        """Test projection onto a panel rotated 90 degrees around z."""
        placement = Placement.from_euler("z", 90, degrees=True, translation=(1.0, 1.0, 0.0))

        projected = placement.world_to_panel((1.0, 2.0, 0.0), 4.0, 2.0)

        np.testing.assert_allclose(projected, [3.0, 1.0], atol=1e-12)

    def test_scale_is_ignored(self):
        """Test that a panel placement scaled to its size projects the same way."""
        plain = Placement(translation=(0.0, 1.0, 0.0))
        scaled = plain.with_scale((20.0, 5.0, 0.1))

        np.testing.assert_allclose(
            scaled.world_to_panel((3.0, 2.0, 0.0), 20.0, 5.0),
            plain.world_to_panel((3.0, 2.0, 0.0), 20.0, 5.0),
        )


class TestShardPlacement:
    """Test the placement shared by all shards."""

    def test_corner_offset(self):
        """Test that the shard origin is the panel's bottom-left front corner."""
        placement = Placement(translation=(0.0, 3.0, -10.0), scale=(20.0, 5.0, 0.1))
        shard = placement.shard_placement(20.0, 5.0, 0.1)

        np.testing.assert_allclose(shard.translation, [-10.0, 0.5, -9.95])
        np.testing.assert_allclose(shard.scale, [1.0, 1.0, 1.0])

    def test_shard_center_is_panel_center(self):
        """Test that the middle of the shard volume maps to the panel center."""
        placement = Placement.from_euler("xy", [20, -35], degrees=True, translation=(4.0, 1.0, 2.0))
        shard = placement.shard_placement(6.0, 2.0, 0.2)

        np.testing.assert_allclose(shard.transform_points([3.0, 1.0, -0.1]), [4.0, 1.0, 2.0])
