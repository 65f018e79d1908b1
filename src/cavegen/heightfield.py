"""Height field synthesis."""

import numpy as np
from numpy.typing import NDArray
from scipy import ndimage

from .config import Biome
from .rng import SeededRandom

# Open-floor elevation span per biome: ice is the most dramatic, lava the flattest
OPEN_HEIGHT_SPAN: dict[Biome, int] = {
    Biome.ROCK: 6,
    Biome.ICE: 8,
    Biome.LAVA: 4,
}

# Every non-open cell draws from [9, 15)
SOLID_HEIGHT_BASE = 9
SOLID_HEIGHT_SPAN = 6


def smooth_heights(heights: NDArray[np.int16]) -> NDArray[np.int16]:
    """Apply a 3x3 box blur, averaging only in-bounds cells.

    Border cells average their 4 or 6 real neighbours rather than padding
    values. The mean is floored.

    Args:
        heights: Raw height field.

    Returns:
        Smoothed height field.
    """
    kernel = np.ones((3, 3), dtype=np.int64)
    values = heights.astype(np.int64)
    sums = ndimage.convolve(values, kernel, mode="constant", cval=0)
    counts = ndimage.convolve(
        np.ones_like(values), kernel, mode="constant", cval=0
    )
    return np.floor_divide(sums, counts).astype(np.int16)


def synthesize_heights(
    state: NDArray[np.uint8],
    biome: Biome,
    rng: SeededRandom,
) -> NDArray[np.int16]:
    """Draw an elevation for every cell and smooth it once.

    Open cells take a biome-tuned low elevation; everything else is raised.
    One draw per cell in row-major order.

    Args:
        state: Painted cell-state grid (0 = open).
        biome: Level biome.
        rng: Random source.

    Returns:
        Height field aligned with the grid.
    """
    height, width = state.shape
    open_span = OPEN_HEIGHT_SPAN[biome]
    heights = np.zeros((height, width), dtype=np.int16)

    for y in range(height):
        for x in range(width):
            if state[y, x] == 0:
                heights[y, x] = rng.randint(open_span)
            else:
                heights[y, x] = rng.randint(SOLID_HEIGHT_SPAN) + SOLID_HEIGHT_BASE

    return smooth_heights(heights)
