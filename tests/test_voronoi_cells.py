"""Tests for Voronoi partitioning of the panel rectangle."""

import pytest
import numpy as np
from py_shatter.core.errors import PartitionError
from py_shatter.core.sampling import get_jittered_points
from py_shatter.core.voronoi_cells import (
    compute_voronoi_cells, compute_polygon_centroid, get_mirrored_points, polygon_area
)
from py_shatter.utils.random import make_rng


@pytest.fixture
def partition():
    """Partition of a 6 x 4 panel with a 6 x 4 grid."""
    points = get_jittered_points(6.0, 4.0, 6, 4, make_rng("test_seed"))
    return compute_voronoi_cells(points, 6.0, 4.0)


class TestSingleCell:
    """Test the 1 x 1 grid boundary case."""

    def test_single_cell_is_rectangle(self):
        """Test that one seed owns the full rectangle."""
        result = compute_voronoi_cells(np.array([[1.2, 0.7]]), 3.0, 2.0)

        assert len(result.cells) == 1
        cell = result.cells[0]
        corners = {tuple(np.round(v, 9)) for v in cell.vertices}
        assert corners == {(0.0, 0.0), (3.0, 0.0), (3.0, 2.0), (0.0, 2.0)}
        assert cell.area == pytest.approx(6.0)
        assert result.cell_neighbors == [[]]


class TestPartition:
    """Test partition properties."""

    def test_one_cell_per_seed(self, partition):
        """Test that cells are returned in seed order."""
        assert len(partition.cells) == 24
        for i, cell in enumerate(partition.cells):
            assert cell.index == i

    def test_cells_tile_rectangle(self, partition):
        """Test that cell areas add up to the panel area."""
        total = sum(cell.area for cell in partition.cells)

        assert total == pytest.approx(24.0, rel=1e-9)

    def test_cells_inside_rectangle(self, partition):
        """Test that every vertex lies within the panel."""
        for cell in partition.cells:
            assert np.all(cell.vertices >= 0.0)
            assert np.all(cell.vertices[:, 0] <= 6.0)
            assert np.all(cell.vertices[:, 1] <= 4.0)

    def test_no_overlap_or_gap(self, partition):
        """Test that random points fall in exactly one cell, the nearest seed's."""
        samples = make_rng("samples").uniform((0.0, 0.0), (6.0, 4.0), size=(500, 2))
        seeds = np.array([cell.seed for cell in partition.cells])

        for point in samples:
            owners = [cell.index for cell in partition.cells if cell.contains(point, 1e-12)]
            nearest = int(np.argmin(np.linalg.norm(seeds - point, axis=1)))
            assert owners == [nearest]

    def test_seed_inside_own_cell(self, partition):
        """Test that every seed lies in its own polygon."""
        for cell in partition.cells:
            assert cell.contains(cell.seed)

    def test_counter_clockwise(self, partition):
        """Test that polygons are ordered counter-clockwise."""
        for cell in partition.cells:
            assert polygon_area(cell.vertices) > 0

    def test_no_repeated_vertices(self, partition):
        """Test that no polygon repeats a vertex."""
        for cell in partition.cells:
            assert len(np.unique(np.round(cell.vertices, 9), axis=0)) == len(cell.vertices)

    def test_neighbors_symmetric(self, partition):
        """Test that cell adjacency is symmetric."""
        for i, neighbors in enumerate(partition.cell_neighbors):
            assert i not in neighbors
            for neighbor in neighbors:
                assert i in partition.cell_neighbors[neighbor]

    def test_determinism(self):
        """Test that the same seeds give identical polygons."""
        points = get_jittered_points(5.0, 3.0, 5, 3, make_rng("det"))
        first = compute_voronoi_cells(points, 5.0, 3.0)
        second = compute_voronoi_cells(points.copy(), 5.0, 3.0)

        for a, b in zip(first.cells, second.cells):
            np.testing.assert_array_equal(a.vertices, b.vertices)


class TestPartitionFailures:
    """Test degenerate input handling."""

    def test_duplicate_points(self):
        """Test that duplicate seeds abort the partition."""
        points = np.array([[0.5, 0.5], [1.5, 0.5], [0.5, 0.5]])

        with pytest.raises(PartitionError):
            compute_voronoi_cells(points, 2.0, 1.0)

    def test_point_outside_rectangle(self):
        """Test that seeds outside the panel are rejected."""
        points = np.array([[0.5, 0.5], [2.5, 0.5]])

        with pytest.raises(PartitionError):
            compute_voronoi_cells(points, 2.0, 1.0)

    def test_empty_input(self):
        """Test that no seeds produce no cells."""
        result = compute_voronoi_cells(np.empty((0, 2)), 2.0, 1.0)

        assert result.cells == []


class TestHelpers:
    """Test polygon helpers."""

    def test_mirrored_points(self):
        """Test reflections across the four edges."""
        mirrored = get_mirrored_points(np.array([[1.0, 0.5]]), 4.0, 2.0)

        np.testing.assert_allclose(mirrored, [[-1.0, 0.5], [7.0, 0.5], [1.0, -0.5], [1.0, 3.5]])

    def test_centroid_of_square(self):
        """Test centroid of an axis aligned square."""
        square = np.array([[0.0, 0.0], [2.0, 0.0], [2.0, 2.0], [0.0, 2.0]])

        np.testing.assert_allclose(compute_polygon_centroid(square), [1.0, 1.0])

    def test_signed_area(self):
        """Test that clockwise polygons have negative area."""
        square = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 1.0], [1.0, 0.0]])

        assert polygon_area(square) == pytest.approx(-1.0)
