"""Connectivity analysis: cave components via iterative flood fill."""

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from .tile_types import WALKABLE_TILE_VALUES, WALL_TILE_VALUES
from .types import NEIGHBOR_DELTAS, ORTHOGONAL_DELTAS


@dataclass
class CaveComponents:
    """Labelled 4-connected open regions of a tile grid.

    ``labels`` holds 0 for wall tiles and the 1-based component index for
    open tiles. ``sizes[i]`` is the tile count of component ``i + 1``;
    components are numbered in row-major order of their first tile.
    """

    labels: NDArray[np.int32]
    sizes: list[int]

    @property
    def count(self) -> int:
        return len(self.sizes)

    @property
    def largest(self) -> int:
        return max(self.sizes, default=0)


def open_mask(tiles: NDArray[np.uint8]) -> NDArray[np.bool_]:
    """Boolean mask of open (non-wall) tiles."""
    return ~np.isin(tiles, WALL_TILE_VALUES)


def walkable_mask(tiles: NDArray[np.uint8]) -> NDArray[np.bool_]:
    """Boolean mask of walkable floor tiles (ground, power path, dirt)."""
    return np.isin(tiles, WALKABLE_TILE_VALUES)


def flood_fill(
    mask: NDArray[np.bool_],
    labels: NDArray[np.int32],
    start_x: int,
    start_y: int,
    label: int,
) -> int:
    """Label the 4-connected open region containing (start_x, start_y).

    Uses an explicit stack so region size is not limited by recursion depth.

    Args:
        mask: Open-tile mask.
        labels: Label grid, updated in place; 0 means unvisited.
        start_x: Seed column.
        start_y: Seed row.
        label: Label to write.

    Returns:
        Number of tiles labelled.
    """
    height, width = mask.shape
    stack = [(start_x, start_y)]
    count = 0

    while stack:
        x, y = stack.pop()

        if x < 0 or x >= width or y < 0 or y >= height:
            continue
        if labels[y, x] != 0 or not mask[y, x]:
            continue

        labels[y, x] = label
        count += 1

        for dx, dy in ORTHOGONAL_DELTAS:
            stack.append((x + dx, y + dy))

    return count


def find_caves(tiles: NDArray[np.uint8]) -> CaveComponents:
    """Find all caves (maximal 4-connected open regions).

    Args:
        tiles: Tile-ID grid.

    Returns:
        CaveComponents with labels and per-cave sizes.
    """
    mask = open_mask(tiles)
    height, width = mask.shape
    labels = np.zeros((height, width), dtype=np.int32)
    sizes: list[int] = []

    for y in range(height):
        for x in range(width):
            if mask[y, x] and labels[y, x] == 0:
                sizes.append(flood_fill(mask, labels, x, y, len(sizes) + 1))

    return CaveComponents(labels=labels, sizes=sizes)


def has_neighbor(mask: NDArray[np.bool_], x: int, y: int) -> bool:
    """Whether any of the 8 neighbours of (x, y) is set in ``mask``."""
    height, width = mask.shape
    for dx, dy in NEIGHBOR_DELTAS:
        nx, ny = x + dx, y + dy
        if 0 <= nx < width and 0 <= ny < height and mask[ny, nx]:
            return True
    return False
