"""Tile IDs and their terrain properties.

The numeric values are the level-file contract shared with exporters and
must never be renumbered.
"""

from enum import IntEnum

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .exceptions import InvalidGridError


class TileType(IntEnum):
    """Level tile IDs."""

    GROUND = 1
    LAVA = 6
    EROSION = 7
    WATER = 11
    SLUG_HOLE = 12
    POWER_PATH = 14
    DIRT = 26
    LOOSE_ROCK = 30
    HARD_ROCK = 34
    SOLID_ROCK = 38
    CRYSTAL_SEAM = 42
    ORE_SEAM = 46
    RECHARGE_SEAM = 50


ROCK_TILES = frozenset({
    TileType.LOOSE_ROCK,
    TileType.HARD_ROCK,
    TileType.SOLID_ROCK,
})

SEAM_TILES = frozenset({
    TileType.CRYSTAL_SEAM,
    TileType.ORE_SEAM,
    TileType.RECHARGE_SEAM,
})

# Walls are solid for connectivity; everything else is open cave space
WALL_TILES = ROCK_TILES | SEAM_TILES

# Floor units can stand on; hazards are open but not walkable
WALKABLE_TILES = frozenset({
    TileType.GROUND,
    TileType.POWER_PATH,
    TileType.DIRT,
})

ROCK_TILE_VALUES = tuple(int(t) for t in ROCK_TILES)
WALL_TILE_VALUES = tuple(int(t) for t in WALL_TILES)
WALKABLE_TILE_VALUES = tuple(int(t) for t in WALKABLE_TILES)

_MAX_TILE_ID = 255


def as_tile_grid(tiles: ArrayLike) -> NDArray[np.uint8]:
    """Coerce a tile grid to a 2D uint8 array.

    Args:
        tiles: Array or row-major nested sequence of tile IDs.

    Returns:
        The grid as a (height, width) uint8 array.

    Raises:
        InvalidGridError: If the grid is empty, ragged or not 2D, or holds
            values that are not tile IDs in [0, 255].
    """
    if isinstance(tiles, (list, tuple)) and all(
        isinstance(row, (list, tuple)) for row in tiles
    ):
        row_lengths = {len(row) for row in tiles}
        if len(row_lengths) > 1:
            raise InvalidGridError(
                f"Tile grid rows differ in length: {sorted(row_lengths)}"
            )

    try:
        grid = np.asarray(tiles)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidGridError(f"Tile grid is not a rectangular array: {e}") from e

    if grid.ndim != 2:
        raise InvalidGridError(f"Tile grid must be 2D, got {grid.ndim} dimensions")
    if grid.size == 0:
        raise InvalidGridError("Tile grid is empty")
    if grid.dtype.kind not in "iu":
        raise InvalidGridError(f"Tile IDs must be integers, got {grid.dtype}")

    low, high = int(np.min(grid)), int(np.max(grid))
    if low < 0 or high > _MAX_TILE_ID:
        raise InvalidGridError(
            f"Tile IDs must be in [0, {_MAX_TILE_ID}], got values in [{low}, {high}]"
        )

    return grid.astype(np.uint8, copy=False)
