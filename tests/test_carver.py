"""Tests for cellular automata cave carving."""

import numpy as np

from cavegen.carver import (
    apply_edge_padding,
    carve_cave,
    count_solid_neighbors,
    initialize_grid,
    smooth_grid,
)
from cavegen.rng import SeededRandom


class TestInitializeGrid:
    """Tests for random initial fill."""

    def test_shape(self) -> None:
        grid = initialize_grid(7, 5, 0.5, SeededRandom(1))
        assert grid.shape == (5, 7)
        assert grid.dtype == np.bool_

    def test_fill_extremes(self) -> None:
        assert not initialize_grid(8, 8, 0.0, SeededRandom(1)).any()
        assert initialize_grid(8, 8, 1.0, SeededRandom(1)).all()

    def test_one_draw_per_cell(self) -> None:
        rng = SeededRandom(1)
        initialize_grid(6, 4, 0.45, rng)
        assert rng.calls == 24


class TestNeighborCount:
    """Tests for count_solid_neighbors."""

    def test_out_of_bounds_counts_solid(self) -> None:
        """On an open grid, only off-grid neighbours count."""
        counts = count_solid_neighbors(np.zeros((3, 3), dtype=bool))
        assert counts[0, 0] == 5
        assert counts[0, 1] == 3
        assert counts[1, 1] == 0

    def test_centre_excluded(self) -> None:
        grid = np.zeros((5, 5), dtype=bool)
        grid[2, 2] = True
        counts = count_solid_neighbors(grid)
        assert counts[2, 2] == 0
        assert counts[1, 1] == 1
        assert counts[2, 3] == 1


class TestSmoothGrid:
    """Tests for a single automata pass."""

    def test_isolated_solid_dies(self) -> None:
        grid = np.zeros((5, 5), dtype=bool)
        grid[2, 2] = True
        assert not smooth_grid(grid, 4, 3)[2, 2]

    def test_open_cell_surrounded_fills(self) -> None:
        grid = np.ones((5, 5), dtype=bool)
        grid[2, 2] = False
        assert smooth_grid(grid, 4, 3)[2, 2]

    def test_uses_snapshot(self) -> None:
        """The input grid is not modified."""
        grid = np.zeros((5, 5), dtype=bool)
        grid[2, 2] = True
        smooth_grid(grid, 4, 3)
        assert grid[2, 2]


class TestEdgePadding:
    """Tests for the solid border."""

    def test_border_solid(self) -> None:
        grid = np.zeros((6, 8), dtype=bool)
        padded = apply_edge_padding(grid, 2)

        assert padded[:2, :].all()
        assert padded[-2:, :].all()
        assert padded[:, :2].all()
        assert padded[:, -2:].all()
        assert not padded[2:-2, 2:-2].any()
        assert not grid.any()

    def test_zero_padding(self) -> None:
        grid = np.zeros((4, 4), dtype=bool)
        np.testing.assert_array_equal(apply_edge_padding(grid, 0), grid)


class TestCarveCave:
    """Tests for the full carving pipeline."""

    def test_deterministic(self) -> None:
        a = carve_cave(30, 20, 0.45, 5, 4, 3, 1, SeededRandom(42))
        b = carve_cave(30, 20, 0.45, 5, 4, 3, 1, SeededRandom(42))
        np.testing.assert_array_equal(a, b)

    def test_zero_fill_leaves_open_interior(self) -> None:
        grid = carve_cave(10, 10, 0.0, 5, 4, 3, 1, SeededRandom(42))

        assert grid[0, :].all() and grid[-1, :].all()
        assert grid[:, 0].all() and grid[:, -1].all()
        assert not grid[1:-1, 1:-1].any()
