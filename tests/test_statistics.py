"""Tests for terrain and resource statistics."""

import math

import numpy as np
import pytest

from cavegen.statistics import (
    compute_average_spacing,
    compute_quadrant_balance,
    compute_terrain_stats,
    quadrant_index,
)
from cavegen.types import Resource, ResourceKind


def _crystal(x: int, y: int) -> Resource:
    return Resource(x, y, ResourceKind.CRYSTAL)


class TestQuadrantIndex:
    """Tests for quadrant assignment."""

    @pytest.mark.parametrize(
        ("x", "y", "expected"),
        [(4, 4, 0), (5, 4, 1), (4, 5, 2), (5, 5, 3), (0, 9, 2), (9, 0, 1)],
    )
    def test_even_grid(self, x: int, y: int, expected: int) -> None:
        assert quadrant_index(x, y, 10, 10) == expected

    def test_odd_grid_midline(self) -> None:
        """Midlines belong to the east and south quadrants."""
        assert quadrant_index(4, 4, 9, 9) == 3
        assert quadrant_index(3, 3, 9, 9) == 0


class TestTerrainStats:
    """Tests for compute_terrain_stats."""

    def test_open_room(self, open_room: np.ndarray) -> None:
        stats = compute_terrain_stats(open_room)

        assert stats.solid_percent == pytest.approx(36.0)
        assert stats.cave_count == 1
        assert stats.largest_cave_size == 64
        assert stats.cave_sizes == (64,)
        assert stats.open_tiles_per_quadrant == (16, 16, 16, 16)

    def test_all_rock(self, rock_grid: np.ndarray) -> None:
        stats = compute_terrain_stats(rock_grid)
        assert stats.solid_percent == pytest.approx(100.0)
        assert stats.cave_count == 0
        assert stats.largest_cave_size == 0


class TestResourceStats:
    """Tests for spacing and quadrant helpers."""

    def test_spacing_needs_two(self) -> None:
        assert compute_average_spacing([]) == 0.0
        assert compute_average_spacing([_crystal(3, 3)]) == 0.0

    def test_spacing_mean_of_pairs(self) -> None:
        resources = [_crystal(0, 0), _crystal(3, 0), _crystal(0, 4)]
        assert compute_average_spacing(resources) == pytest.approx(4.0)

    def test_spacing_pair(self) -> None:
        assert math.isclose(
            compute_average_spacing([_crystal(0, 0), _crystal(3, 4)]), 5.0
        )

    def test_quadrant_balance(self) -> None:
        resources = [_crystal(1, 1), _crystal(8, 1), _crystal(8, 8), _crystal(9, 9)]
        assert compute_quadrant_balance(resources, 10, 10) == (1, 1, 0, 2)
