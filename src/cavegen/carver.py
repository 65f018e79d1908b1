"""Cave carving: random fill, cellular automata smoothing, solid border."""

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

from .rng import SeededRandom

# 3x3 kernel for counting neighbours, 8-connected, excluding centre
_NEIGHBOR_KERNEL = np.array([[1, 1, 1], [1, 0, 1], [1, 1, 1]], dtype=np.int32)


def initialize_grid(
    width: int,
    height: int,
    fill_probability: float,
    rng: SeededRandom,
) -> NDArray[np.bool_]:
    """Fill a grid with random solid cells.

    One draw per cell in row-major order.

    Args:
        width: Grid width.
        height: Grid height.
        fill_probability: Chance each cell starts solid.
        rng: Random source.

    Returns:
        Boolean occupancy grid, True = solid.
    """
    grid = np.zeros((height, width), dtype=np.bool_)
    for y in range(height):
        for x in range(width):
            grid[y, x] = rng.next() < fill_probability
    return grid


def count_solid_neighbors(grid: NDArray[np.bool_]) -> NDArray[np.int32]:
    """Count solid cells among each cell's 8 neighbours.

    Cells outside the grid count as solid, which pulls the borders toward rock.
    """
    return ndimage.convolve(
        grid.astype(np.int32), _NEIGHBOR_KERNEL, mode="constant", cval=1
    )


def smooth_grid(
    grid: NDArray[np.bool_],
    birth_limit: int,
    death_limit: int,
) -> NDArray[np.bool_]:
    """Apply one cellular automata pass.

    Solid cells survive with at least ``death_limit`` solid neighbours;
    open cells fill with more than ``birth_limit``. Every cell is decided
    from the same snapshot.

    Args:
        grid: Occupancy grid, True = solid.
        birth_limit: Neighbour count an open cell must exceed to fill.
        death_limit: Neighbour count a solid cell needs to survive.

    Returns:
        New occupancy grid.
    """
    neighbors = count_solid_neighbors(grid)
    survive = grid & (neighbors >= death_limit)
    born = ~grid & (neighbors > birth_limit)
    return survive | born


def apply_edge_padding(grid: NDArray[np.bool_], padding: int) -> NDArray[np.bool_]:
    """Force a solid border ``padding`` cells wide.

    Args:
        grid: Occupancy grid.
        padding: Border width; 0 leaves the grid unchanged.

    Returns:
        Grid with a solid border.
    """
    result = grid.copy()
    if padding <= 0:
        return result

    result[:padding, :] = True
    result[-padding:, :] = True
    result[:, :padding] = True
    result[:, -padding:] = True

    return result


def carve_cave(
    width: int,
    height: int,
    fill_probability: float,
    smoothing_iterations: int,
    birth_limit: int,
    death_limit: int,
    edge_padding: int,
    rng: SeededRandom,
) -> NDArray[np.bool_]:
    """Carve a base cavern shape.

    Returns:
        Boolean occupancy grid of shape (height, width), True = solid.
    """
    grid = initialize_grid(width, height, fill_probability, rng)

    for _ in range(smoothing_iterations):
        grid = smooth_grid(grid, birth_limit, death_limit)

    return apply_edge_padding(grid, edge_padding)
