"""Biome feature painting: tunnels, chambers, cracks, flows and tile conversion."""

import logging
import math
from collections import Counter
from enum import IntEnum

import numpy as np
from numpy.typing import NDArray

from .config import BIOME_PATTERNS, Biome, Complexity
from .connectivity import has_neighbor, walkable_mask
from .rng import SeededRandom
from .tile_types import TileType

logger = logging.getLogger(__name__)


class CellState(IntEnum):
    """Extended cell states used while painting, before tile conversion."""

    OPEN = 0
    SOLID = 1
    LAVA = 3
    WATER = 4
    RUBBLE = 5
    ICE_FORMATION = 6
    EROSION = 7


_BASE_TILE_TABLE: dict[CellState, TileType] = {
    CellState.OPEN: TileType.GROUND,
    CellState.SOLID: TileType.SOLID_ROCK,
    CellState.LAVA: TileType.LAVA,
    CellState.WATER: TileType.WATER,
    CellState.RUBBLE: TileType.LOOSE_ROCK,
    CellState.ICE_FORMATION: TileType.HARD_ROCK,
    CellState.EROSION: TileType.DIRT,
}

BIOME_TILE_TABLES: dict[Biome, dict[CellState, TileType]] = {
    Biome.ROCK: dict(_BASE_TILE_TABLE),
    Biome.ICE: dict(_BASE_TILE_TABLE),
    Biome.LAVA: {**_BASE_TILE_TABLE, CellState.EROSION: TileType.EROSION},
}

BIOME_HAZARDS: dict[Biome, tuple[TileType, ...]] = {
    Biome.ROCK: (TileType.SLUG_HOLE,),
    Biome.ICE: (TileType.WATER,),
    Biome.LAVA: (TileType.LAVA, TileType.EROSION),
}


def _in_interior(grid: NDArray[np.uint8], x: int, y: int) -> bool:
    """Whether (x, y) lies inside the grid's outermost ring."""
    height, width = grid.shape
    return 1 <= x < width - 1 and 1 <= y < height - 1


def _random_coord(rng: SeededRandom, size: int, margin: int) -> int:
    """Pick a coordinate at least ``margin`` cells from either edge.

    The margin shrinks on small grids so the range never collapses.
    """
    margin = min(margin, size // 4)
    span = max(size - 2 * margin, 1)
    return rng.randint(span) + margin


def _fill_circle(
    grid: NDArray[np.uint8],
    cx: int,
    cy: int,
    radius: int,
    state: CellState,
    interior_only: bool = True,
) -> None:
    """Set every cell within ``radius`` of (cx, cy) to ``state`` in place."""
    height, width = grid.shape
    for y in range(cy - radius, cy + radius + 1):
        for x in range(cx - radius, cx + radius + 1):
            if interior_only:
                if not _in_interior(grid, x, y):
                    continue
            elif not (0 <= x < width and 0 <= y < height):
                continue
            if math.sqrt((x - cx) ** 2 + (y - cy) ** 2) <= radius:
                grid[y, x] = state


def carve_tunnel(
    grid: NDArray[np.uint8],
    start: tuple[int, int],
    end: tuple[int, int],
    rng: SeededRandom,
) -> NDArray[np.uint8]:
    """Carve a 3-wide random-walk tunnel from ``start`` toward ``end``.

    Each axis steps toward the target with 70% probability, otherwise
    one cell in a random direction. The walk stops once it is within one
    cell of the target on both axes.

    Args:
        grid: Cell-state grid.
        start: (x, y) start point.
        end: (x, y) target point.
        rng: Random source.

    Returns:
        New grid with the tunnel carved.
    """
    result = grid.copy()
    height, width = result.shape
    x, y = start
    x2, y2 = end
    max_steps = 10 * (width + height)

    steps = 0
    while (abs(x - x2) > 1 or abs(y - y2) > 1) and steps < max_steps:
        for dy in (-1, 0, 1):
            for dx in (-1, 0, 1):
                if _in_interior(result, x + dx, y + dy):
                    result[y + dy, x + dx] = CellState.OPEN

        if rng.chance(0.7):
            if x < x2:
                x += 1
            elif x > x2:
                x -= 1
        else:
            x += -1 if rng.chance(0.5) else 1

        if rng.chance(0.7):
            if y < y2:
                y += 1
            elif y > y2:
                y -= 1
        else:
            y += -1 if rng.chance(0.5) else 1

        steps += 1

    if steps >= max_steps:
        logger.debug(f"Tunnel from {start} to {end} hit the step cap")

    return result


def add_tunnels(grid: NDArray[np.uint8], rng: SeededRandom) -> NDArray[np.uint8]:
    """Carve 1-3 connecting tunnels between random interior points."""
    height, width = grid.shape
    result = grid
    tunnel_count = rng.randint(3) + 1

    for _ in range(tunnel_count):
        start_x = _random_coord(rng, width, 10)
        start_y = _random_coord(rng, height, 10)
        end_x = _random_coord(rng, width, 10)
        end_y = _random_coord(rng, height, 10)
        result = carve_tunnel(result, (start_x, start_y), (end_x, end_y), rng)

    return result


def add_chambers(grid: NDArray[np.uint8], rng: SeededRandom) -> NDArray[np.uint8]:
    """Carve 1-3 circular chambers of radius 3-8."""
    height, width = grid.shape
    result = grid.copy()
    chamber_count = rng.randint(3) + 1

    for _ in range(chamber_count):
        cx = _random_coord(rng, width, 10)
        cy = _random_coord(rng, height, 10)
        radius = rng.randint(6) + 3
        _fill_circle(result, cx, cy, radius, CellState.OPEN)

    return result


def add_crack(grid: NDArray[np.uint8], rng: SeededRandom) -> NDArray[np.uint8]:
    """Dig a hairline crack along a noisy heading for 10-29 steps."""
    result = grid.copy()
    height, width = result.shape

    x = float(rng.randint(width))
    y = float(rng.randint(height))
    length = rng.randint(20) + 10
    direction = rng.next() * math.pi * 2

    for _ in range(length):
        if 1 <= x < width - 1 and 1 <= y < height - 1:
            cx, cy = math.floor(x), math.floor(y)
            result[cy, cx] = CellState.OPEN

            # Occasionally widen by one neighbour
            if rng.chance(0.3):
                nx = cx + rng.randint(3) - 1
                ny = cy + rng.randint(3) - 1
                if _in_interior(result, nx, ny):
                    result[ny, nx] = CellState.OPEN

        x += math.cos(direction) + (rng.next() - 0.5) * 0.5
        y += math.sin(direction) + (rng.next() - 0.5) * 0.5

    return result


def add_rubble_zones(grid: NDArray[np.uint8], rng: SeededRandom) -> NDArray[np.uint8]:
    """Scatter 1-3 rubble blobs of radius 2-6 over solid rock."""
    result = grid.copy()
    height, width = result.shape
    zone_count = rng.randint(3) + 1

    for _ in range(zone_count):
        cx = _random_coord(rng, width, 5)
        cy = _random_coord(rng, height, 5)
        size = rng.randint(5) + 2

        for dy in range(-size, size + 1):
            for dx in range(-size, size + 1):
                x, y = cx + dx, cy + dy
                if (
                    _in_interior(result, x, y)
                    and result[y, x] == CellState.SOLID
                    and rng.chance(0.6)
                ):
                    result[y, x] = CellState.RUBBLE

    return result


def add_ice_flow(grid: NDArray[np.uint8], rng: SeededRandom) -> NDArray[np.uint8]:
    """Lay an axis-aligned water channel across the interior."""
    result = grid.copy()
    height, width = result.shape

    if rng.chance(0.5):
        y = rng.randint(height - 2) + 1
        for x in range(1, width - 1):
            if rng.chance(0.7):
                result[y, x] = CellState.WATER
                if rng.chance(0.3) and y > 1:
                    result[y - 1, x] = CellState.WATER
                if rng.chance(0.3) and y < height - 2:
                    result[y + 1, x] = CellState.WATER
    else:
        x = rng.randint(width - 2) + 1
        for y in range(1, height - 1):
            if rng.chance(0.7):
                result[y, x] = CellState.WATER
                if rng.chance(0.3) and x > 1:
                    result[y, x - 1] = CellState.WATER
                if rng.chance(0.3) and x < width - 2:
                    result[y, x + 1] = CellState.WATER

    return result


def add_frozen_caverns(grid: NDArray[np.uint8], rng: SeededRandom) -> NDArray[np.uint8]:
    """Grow 2-5 six-rayed ice formations."""
    result = grid.copy()
    height, width = result.shape
    formation_count = rng.randint(4) + 2

    for _ in range(formation_count):
        cx = _random_coord(rng, width, 5)
        cy = _random_coord(rng, height, 5)

        for ray in range(6):
            angle = ray * math.pi / 3
            length = rng.randint(5) + 3
            for dist in range(length):
                x = math.floor(cx + math.cos(angle) * dist)
                y = math.floor(cy + math.sin(angle) * dist)
                if _in_interior(result, x, y):
                    result[y, x] = CellState.ICE_FORMATION

    return result


def add_lava_flow(grid: NDArray[np.uint8], rng: SeededRandom) -> NDArray[np.uint8]:
    """Run a lava flow from the top row down with horizontal drift."""
    result = grid.copy()
    height, width = result.shape

    x = rng.randint(width)
    for y in range(height - 1):
        if 1 <= x < width - 1:
            result[y, x] = CellState.LAVA

            if rng.chance(0.4):
                if x > 1:
                    result[y, x - 1] = CellState.LAVA
                if x < width - 2:
                    result[y, x + 1] = CellState.LAVA

        x += rng.randint(3) - 1
        x = max(1, min(width - 2, x))

    return result


def add_volcanic_chambers(grid: NDArray[np.uint8], rng: SeededRandom) -> NDArray[np.uint8]:
    """Carve 1-2 round chambers with a lava pool at the centre."""
    result = grid.copy()
    height, width = result.shape
    chamber_count = rng.randint(2) + 1

    for _ in range(chamber_count):
        cx = _random_coord(rng, width, 7)
        cy = _random_coord(rng, height, 7)
        radius = rng.randint(4) + 4

        _fill_circle(result, cx, cy, radius, CellState.OPEN)
        _fill_circle(result, cx, cy, 2, CellState.LAVA, interior_only=False)

    return result


def add_erosion_zones(grid: NDArray[np.uint8], rng: SeededRandom) -> NDArray[np.uint8]:
    """Erode solid rock inside 1-3 circles of radius 3-7."""
    result = grid.copy()
    height, width = result.shape
    zone_count = rng.randint(3) + 1

    for _ in range(zone_count):
        cx = _random_coord(rng, width, 5)
        cy = _random_coord(rng, height, 5)
        radius = rng.randint(5) + 3

        for y in range(cy - radius, cy + radius + 1):
            for x in range(cx - radius, cx + radius + 1):
                if not _in_interior(result, x, y):
                    continue
                dist = math.sqrt((x - cx) ** 2 + (y - cy) ** 2)
                if (
                    dist <= radius
                    and result[y, x] == CellState.SOLID
                    and rng.chance(0.7)
                ):
                    result[y, x] = CellState.EROSION

    return result


def add_rock_features(
    grid: NDArray[np.uint8], complexity: Complexity, rng: SeededRandom
) -> NDArray[np.uint8]:
    """Earthquake cracks, plus rubble at complex level."""
    if complexity != Complexity.SIMPLE:
        crack_count = rng.randint(3) + 1
        for _ in range(crack_count):
            grid = add_crack(grid, rng)

    if complexity == Complexity.COMPLEX:
        grid = add_rubble_zones(grid, rng)

    return grid


def add_ice_features(
    grid: NDArray[np.uint8], complexity: Complexity, rng: SeededRandom
) -> NDArray[np.uint8]:
    """Ice flows, plus frozen caverns at complex level."""
    if complexity != Complexity.SIMPLE:
        flow_count = rng.randint(2) + 1
        for _ in range(flow_count):
            grid = add_ice_flow(grid, rng)

    if complexity == Complexity.COMPLEX:
        grid = add_frozen_caverns(grid, rng)

    return grid


def add_lava_features(
    grid: NDArray[np.uint8], complexity: Complexity, rng: SeededRandom
) -> NDArray[np.uint8]:
    """Lava flows always; volcanic chambers and erosion with complexity."""
    flow_count = rng.randint(4) + 2
    for _ in range(flow_count):
        grid = add_lava_flow(grid, rng)

    if complexity != Complexity.SIMPLE:
        grid = add_volcanic_chambers(grid, rng)

    if complexity == Complexity.COMPLEX:
        grid = add_erosion_zones(grid, rng)

    return grid


_BIOME_PAINTERS = {
    Biome.ROCK: add_rock_features,
    Biome.ICE: add_ice_features,
    Biome.LAVA: add_lava_features,
}


def seal_border(grid: NDArray[np.uint8], padding: int) -> NDArray[np.uint8]:
    """Reset a border ``padding`` cells wide to solid rock."""
    result = grid.copy()
    if padding <= 0:
        return result

    result[:padding, :] = CellState.SOLID
    result[-padding:, :] = CellState.SOLID
    result[:, :padding] = CellState.SOLID
    result[:, -padding:] = CellState.SOLID

    return result


def paint_features(
    occupancy: NDArray[np.bool_],
    biome: Biome,
    complexity: Complexity,
    edge_padding: int,
    rng: SeededRandom,
) -> NDArray[np.uint8]:
    """Layer tunnels, chambers and biome structures onto a carved cave.

    Args:
        occupancy: Carved occupancy grid, True = solid.
        biome: Level biome.
        complexity: Feature complexity.
        edge_padding: Border width to keep solid.
        rng: Random source.

    Returns:
        Cell-state grid (uint8 values of CellState).
    """
    grid = np.where(occupancy, CellState.SOLID, CellState.OPEN).astype(np.uint8)
    height, width = grid.shape

    # Nothing fits inside the outer ring
    if width < 3 or height < 3:
        return seal_border(grid, edge_padding)

    pattern = BIOME_PATTERNS[biome]

    if rng.chance(pattern.tunnel_chance):
        grid = add_tunnels(grid, rng)
        logger.debug("Carved connecting tunnels")

    if rng.chance(pattern.chamber_chance):
        grid = add_chambers(grid, rng)
        logger.debug("Carved chambers")

    grid = _BIOME_PAINTERS[biome](grid, complexity, rng)

    return seal_border(grid, edge_padding)


def convert_to_tiles(state: NDArray[np.uint8], biome: Biome) -> NDArray[np.uint8]:
    """Map cell states to tile IDs using the biome's lookup table.

    Args:
        state: Cell-state grid.
        biome: Level biome.

    Returns:
        Tile-ID grid of the same shape.
    """
    lut = np.full(256, TileType.SOLID_ROCK, dtype=np.uint8)
    for cell_state, tile in BIOME_TILE_TABLES[biome].items():
        lut[cell_state] = tile
    return lut[state]


def add_wall_detail(
    tiles: NDArray[np.uint8],
    loose_rock_chance: float,
    hard_rock_chance: float,
    rng: SeededRandom,
) -> NDArray[np.uint8]:
    """Vary the hardness of cave walls that face walkable floor.

    Each interior solid-rock tile with a walkable 8-neighbour draws once:
    below ``loose_rock_chance`` it becomes loose rock, below
    ``loose_rock_chance + hard_rock_chance`` hard rock, otherwise it stays
    solid. Buried rock and the outer ring are left alone.

    Args:
        tiles: Tile-ID grid.
        loose_rock_chance: Chance a face tile becomes loose rock.
        hard_rock_chance: Chance a face tile becomes hard rock.
        rng: Random source.

    Returns:
        New tile grid.
    """
    result = tiles.copy()
    if loose_rock_chance <= 0 and hard_rock_chance <= 0:
        return result

    height, width = result.shape
    floor = walkable_mask(tiles)

    for y in range(1, height - 1):
        for x in range(1, width - 1):
            if result[y, x] != TileType.SOLID_ROCK or not has_neighbor(floor, x, y):
                continue
            roll = rng.next()
            if roll < loose_rock_chance:
                result[y, x] = TileType.LOOSE_ROCK
            elif roll < loose_rock_chance + hard_rock_chance:
                result[y, x] = TileType.HARD_ROCK

    return result


def scatter_hazards(
    tiles: NDArray[np.uint8],
    biome: Biome,
    density: float,
    rng: SeededRandom,
) -> NDArray[np.uint8]:
    """Turn a fraction of interior ground tiles into biome hazards.

    Each ground tile becomes a hazard with probability ``density * 0.01``.

    Args:
        tiles: Tile-ID grid.
        biome: Level biome.
        density: Hazard density in [0, 1]; 0 leaves the grid untouched.
        rng: Random source.

    Returns:
        New tile grid.
    """
    result = tiles.copy()
    if density <= 0:
        return result

    height, width = result.shape
    hazards = BIOME_HAZARDS[biome]

    for y in range(1, height - 1):
        for x in range(1, width - 1):
            if result[y, x] == TileType.GROUND and rng.chance(density * 0.01):
                result[y, x] = rng.choice(hazards)

    return result


def identify_features(tiles: NDArray[np.uint8], biome: Biome) -> list[str]:
    """Name a level's notable features for descriptions.

    Args:
        tiles: Tile-ID grid.
        biome: Level biome.

    Returns:
        Feature names, possibly empty.
    """
    counts = Counter(int(v) for v in np.asarray(tiles).ravel())
    features: list[str] = []

    if biome == Biome.ROCK:
        if counts[TileType.SLUG_HOLE] > 5:
            features.append("slug holes")
        if counts[TileType.CRYSTAL_SEAM] > 10:
            features.append("crystal-rich")
    elif biome == Biome.ICE:
        if counts[TileType.WATER] > 50:
            features.append("frozen lakes")
        features.append("slippery surfaces")
    elif biome == Biome.LAVA:
        if counts[TileType.LAVA] > 20:
            features.append("lava flows")
        if counts[TileType.EROSION] > 10:
            features.append("erosion zones")
        features.append("extreme heat")

    return features
