"""Main level generation orchestration."""

import logging

import numpy as np
from numpy.typing import NDArray

from .carver import carve_cave
from .config import GenerationOptions
from .features import (
    add_wall_detail,
    convert_to_tiles,
    identify_features,
    paint_features,
    scatter_hazards,
)
from .heightfield import synthesize_heights
from .resources import ResourceMap, apply_resources_to_tiles, place_resources
from .rng import SeededRandom
from .statistics import TerrainStats, compute_terrain_stats, log_terrain_stats

logger = logging.getLogger(__name__)


class GenerationResult:
    """Result of terrain generation."""

    def __init__(
        self,
        tiles: NDArray[np.uint8],
        height: NDArray[np.int16],
        stats: TerrainStats,
        options: GenerationOptions,
        features: list[str],
    ):
        self.tiles = tiles
        self.height = height
        self.stats = stats
        self.options = options
        self.features = features


class Level:
    """A generated level: terrain plus resources."""

    def __init__(
        self,
        terrain: GenerationResult,
        resources: ResourceMap,
        tiles: NDArray[np.uint8],
        features: list[str],
    ):
        self.terrain = terrain
        self.resources = resources
        # Terrain tiles with crystal, ore and recharge seams stamped in
        self.tiles = tiles
        self.features = features

    @property
    def options(self) -> GenerationOptions:
        return self.terrain.options

    @property
    def height(self) -> NDArray[np.int16]:
        return self.terrain.height


def generate(options: GenerationOptions) -> GenerationResult:
    """Generate cave terrain and its height field.

    Args:
        options: Generation options.

    Returns:
        GenerationResult with tile grid, height field and statistics.
    """
    rng = SeededRandom(options.seed)
    width, height = options.width, options.height

    logger.info(
        f"Generating {options.biome.value} cave {width}x{height} "
        f"({options.complexity.value}) with seed {options.seed}"
    )

    # Stage A: Cellular automata carving
    logger.info("Stage A: Carving cave...")
    occupancy = carve_cave(
        width,
        height,
        options.fill_probability,
        options.smoothing_iterations,
        options.birth_limit,
        options.death_limit,
        options.edge_padding,
        rng,
    )
    logger.debug(f"Carved solid fraction: {np.mean(occupancy):.2%}")

    # Stage B: Biome features
    logger.info("Stage B: Painting biome features...")
    state = paint_features(
        occupancy,
        options.biome,
        options.complexity,
        options.edge_padding,
        rng,
    )

    # Stage C: Height field
    logger.info("Stage C: Synthesizing heights...")
    heights = synthesize_heights(state, options.biome, rng)

    # Stage D: Tiles, wall hardness and hazards
    tiles = convert_to_tiles(state, options.biome)
    tiles = add_wall_detail(
        tiles, options.loose_rock_chance, options.hard_rock_chance, rng
    )
    tiles = scatter_hazards(tiles, options.biome, options.hazard_density, rng)

    stats = compute_terrain_stats(tiles)
    log_terrain_stats(stats)

    return GenerationResult(
        tiles=tiles,
        height=heights,
        stats=stats,
        options=options,
        features=identify_features(tiles, options.biome),
    )


def generate_level(options: GenerationOptions) -> Level:
    """Generate terrain, then place resources on it.

    Args:
        options: Generation options.

    Returns:
        Level with terrain, resources and seam-stamped tiles.
    """
    terrain = generate(options)
    resources = place_resources(terrain.tiles, options)
    tiles = apply_resources_to_tiles(terrain.tiles, resources)

    return Level(
        terrain=terrain,
        resources=resources,
        tiles=tiles,
        features=identify_features(tiles, options.biome),
    )
