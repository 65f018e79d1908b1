"""Terrain and resource statistics."""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .connectivity import find_caves, open_mask
from .types import Resource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TerrainStats:
    """Summary of a generated tile grid."""

    solid_percent: float
    cave_count: int
    largest_cave_size: int
    cave_sizes: tuple[int, ...] = ()
    # Open tiles per quadrant: NW, NE, SW, SE
    open_tiles_per_quadrant: tuple[int, int, int, int] = (0, 0, 0, 0)


@dataclass(frozen=True)
class ResourceStats:
    """Summary of a resource placement."""

    total_crystals: int = 0
    total_ore: int = 0
    ore_deposits: int = 0
    total_recharge: int = 0
    average_spacing: float = 0.0
    quadrant_balance: tuple[int, int, int, int] = (0, 0, 0, 0)


def quadrant_index(x: int, y: int, width: int, height: int) -> int:
    """Quadrant of (x, y): 0 NW, 1 NE, 2 SW, 3 SE.

    The grid is split at ``width // 2`` and ``height // 2``; the midlines
    belong to the east and south quadrants.
    """
    return (1 if x >= width // 2 else 0) + (2 if y >= height // 2 else 0)


def compute_terrain_stats(tiles: NDArray[np.uint8]) -> TerrainStats:
    """Compute solidity, cave and quadrant statistics for a tile grid.

    Args:
        tiles: Tile-ID grid.

    Returns:
        TerrainStats for the grid.
    """
    height, width = tiles.shape
    total = tiles.size
    mask = open_mask(tiles)
    solid_count = total - int(np.sum(mask))

    caves = find_caves(tiles)

    mid_x, mid_y = width // 2, height // 2
    quadrants = (
        int(np.sum(mask[:mid_y, :mid_x])),
        int(np.sum(mask[:mid_y, mid_x:])),
        int(np.sum(mask[mid_y:, :mid_x])),
        int(np.sum(mask[mid_y:, mid_x:])),
    )

    return TerrainStats(
        solid_percent=solid_count / total * 100 if total else 0.0,
        cave_count=caves.count,
        largest_cave_size=caves.largest,
        cave_sizes=tuple(caves.sizes),
        open_tiles_per_quadrant=quadrants,
    )


def compute_average_spacing(resources: Sequence[Resource]) -> float:
    """Mean pairwise Euclidean distance between resources.

    Quadratic in the number of resources. Fewer than two resources
    have spacing 0.
    """
    n = len(resources)
    if n < 2:
        return 0.0

    total = 0.0
    pairs = 0
    for i in range(n - 1):
        a = resources[i]
        for j in range(i + 1, n):
            b = resources[j]
            total += math.sqrt((a.x - b.x) ** 2 + (a.y - b.y) ** 2)
            pairs += 1

    return total / pairs


def compute_quadrant_balance(
    resources: Sequence[Resource], width: int, height: int
) -> tuple[int, int, int, int]:
    """Count resources per quadrant (NW, NE, SW, SE)."""
    counts = [0, 0, 0, 0]
    for resource in resources:
        counts[quadrant_index(resource.x, resource.y, width, height)] += 1
    return (counts[0], counts[1], counts[2], counts[3])


def log_terrain_stats(stats: TerrainStats) -> None:
    """Log terrain statistics."""
    logger.info(
        f"Terrain stats: {stats.solid_percent:.1f}% solid, "
        f"{stats.cave_count} caves, largest {stats.largest_cave_size} tiles"
    )
    logger.debug(f"  Open tiles per quadrant: {list(stats.open_tiles_per_quadrant)}")


def log_resource_stats(stats: ResourceStats) -> None:
    """Log resource placement statistics."""
    logger.info(
        f"Resource stats: {stats.total_crystals} crystals, "
        f"{stats.ore_deposits} ore deposits ({stats.total_ore} ore), "
        f"{stats.total_recharge} recharge seams"
    )
    logger.debug(
        f"  Average spacing: {stats.average_spacing:.2f}, "
        f"quadrants: {list(stats.quadrant_balance)}"
    )
