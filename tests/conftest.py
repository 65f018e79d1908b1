"""Shared test fixtures for cavegen tests."""

import numpy as np
import pytest
from numpy.typing import NDArray

from cavegen.config import GenerationOptions
from cavegen.generator import generate
from cavegen.tile_types import TileType


@pytest.fixture
def open_room() -> NDArray[np.uint8]:
    """10x10 grid: solid rock border around an open ground floor."""
    tiles = np.full((10, 10), TileType.SOLID_ROCK, dtype=np.uint8)
    tiles[1:-1, 1:-1] = TileType.GROUND
    return tiles


@pytest.fixture
def rock_grid() -> NDArray[np.uint8]:
    """20x20 grid of solid rock."""
    return np.full((20, 20), TileType.SOLID_ROCK, dtype=np.uint8)


@pytest.fixture
def cave_tiles() -> NDArray[np.uint8]:
    """Terrain tiles of a generated 40x40 rock cave."""
    return generate(GenerationOptions(width=40, height=40, seed=7)).tiles
