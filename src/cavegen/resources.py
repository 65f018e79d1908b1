"""Resource placement: crystals, ore and recharge seams in cave walls."""

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config import Distribution, GenerationOptions
from .connectivity import has_neighbor, walkable_mask
from .rng import SeededRandom
from .statistics import (
    ResourceStats,
    compute_average_spacing,
    compute_quadrant_balance,
    log_resource_stats,
    quadrant_index,
)
from .tile_types import ROCK_TILE_VALUES, TileType, as_tile_grid
from .types import (
    ORE_AMOUNT_MAX,
    ORTHOGONAL_DELTAS,
    Location,
    Resource,
    ResourceKind,
)

logger = logging.getLogger(__name__)

# Placement order shared by every strategy
KIND_ORDER = (ResourceKind.CRYSTAL, ResourceKind.ORE, ResourceKind.RECHARGE)

CLUSTER_RADIUS = 3

# Target tiles per vein, used to decide how many veins to start
VEIN_NOMINAL_LENGTH: dict[ResourceKind, int] = {
    ResourceKind.CRYSTAL: 5,
    ResourceKind.ORE: 3,
    ResourceKind.RECHARGE: 2,
}

SEAM_TILES: dict[ResourceKind, TileType] = {
    ResourceKind.CRYSTAL: TileType.CRYSTAL_SEAM,
    ResourceKind.ORE: TileType.ORE_SEAM,
    ResourceKind.RECHARGE: TileType.RECHARGE_SEAM,
}


@dataclass(frozen=True)
class ResourceMap:
    """Final resource placement for a level."""

    crystals: tuple[Resource, ...]
    ore: tuple[Resource, ...]
    recharge: tuple[Resource, ...]
    stats: ResourceStats

    @property
    def all(self) -> tuple[Resource, ...]:
        """Every resource, crystals first, then ore, then recharge."""
        return self.crystals + self.ore + self.recharge

    def __len__(self) -> int:
        return len(self.crystals) + len(self.ore) + len(self.recharge)


def compute_targets(
    total_tiles: int, options: GenerationOptions
) -> dict[ResourceKind, int]:
    """Target count per kind: floor(total_tiles * density / 100)."""
    return {
        ResourceKind.CRYSTAL: math.floor(total_tiles * options.crystal_density / 100),
        ResourceKind.ORE: math.floor(total_tiles * options.ore_density / 100),
        ResourceKind.RECHARGE: math.floor(total_tiles * options.recharge_density / 100),
    }


def find_candidates(
    tiles: NDArray[np.uint8],
    wall_adjacency_required: bool,
) -> list[Location]:
    """Collect rock tiles that may host a seam, in row-major order.

    Args:
        tiles: Tile-ID grid.
        wall_adjacency_required: Only keep rock with a walkable 8-neighbour.

    Returns:
        Candidate locations.
    """
    rock = np.isin(tiles, ROCK_TILE_VALUES)
    floor = walkable_mask(tiles)

    candidates: list[Location] = []
    for y, x in zip(*np.nonzero(rock)):
        x, y = int(x), int(y)
        if wall_adjacency_required and not has_neighbor(floor, x, y):
            continue
        candidates.append(Location(x, y))

    return candidates


def make_resource(location: Location, kind: ResourceKind, rng: SeededRandom) -> Resource:
    """Create a resource; ore draws its amount (1-3) from ``rng``."""
    if kind == ResourceKind.ORE:
        return Resource(location.x, location.y, kind, rng.randint(ORE_AMOUNT_MAX) + 1)
    return Resource(location.x, location.y, kind)


def place_randomly(
    candidates: Sequence[Location],
    targets: dict[ResourceKind, int],
    rng: SeededRandom,
) -> list[Resource]:
    """Shuffle candidates once and deal them out kind by kind.

    Args:
        candidates: Candidate locations.
        targets: Target count per kind.
        rng: Random source.

    Returns:
        Placed resources in placement order.
    """
    shuffled = rng.shuffle(candidates)
    resources: list[Resource] = []
    index = 0

    for kind in KIND_ORDER:
        for _ in range(targets[kind]):
            if index >= len(shuffled):
                break
            resources.append(make_resource(shuffled[index], kind, rng))
            index += 1

    return resources


def _place_clusters(
    resources: list[Resource],
    candidates: Sequence[Location],
    used: set[Location],
    kind: ResourceKind,
    target: int,
    cluster_size: int,
    rng: SeededRandom,
) -> None:
    """Place clusters of one kind until ``target`` is met or candidates run out."""
    placed = 0

    while placed < target:
        pool = [loc for loc in candidates if loc not in used]
        if not pool:
            break

        center = rng.choice(pool)
        cluster = [center]
        used.add(center)

        for i in range(1, cluster_size):
            if placed + i >= target:
                break
            nearby = [
                loc
                for loc in candidates
                if loc not in used and loc.manhattan_to(center) <= CLUSTER_RADIUS
            ]
            if nearby:
                member = rng.choice(nearby)
                cluster.append(member)
                used.add(member)

        for loc in cluster:
            resources.append(make_resource(loc, kind, rng))
            placed += 1


def place_clustered(
    candidates: Sequence[Location],
    targets: dict[ResourceKind, int],
    rng: SeededRandom,
) -> list[Resource]:
    """Group resources into small clusters around random centres.

    Cluster sizes are drawn once per call: crystals 3-5, ore 2-3, recharge 1.
    Members sit within Manhattan distance 3 of their centre.

    Args:
        candidates: Candidate locations.
        targets: Target count per kind.
        rng: Random source.

    Returns:
        Placed resources in placement order.
    """
    cluster_sizes = {
        ResourceKind.CRYSTAL: 3 + rng.randint(3),
        ResourceKind.ORE: 2 + rng.randint(2),
        ResourceKind.RECHARGE: 1,
    }

    resources: list[Resource] = []
    used: set[Location] = set()

    for kind in KIND_ORDER:
        _place_clusters(
            resources, candidates, used, kind, targets[kind], cluster_sizes[kind], rng
        )

    return resources


def _roll_vein_length(kind: ResourceKind, rng: SeededRandom) -> int:
    if kind == ResourceKind.CRYSTAL:
        return 5 + rng.randint(5)
    if kind == ResourceKind.ORE:
        return 3 + rng.randint(3)
    return 1 + rng.randint(2)


def grow_vein(
    rock: NDArray[np.bool_],
    candidates: Sequence[Location],
    used: set[Location],
    kind: ResourceKind,
    length: int,
    rng: SeededRandom,
) -> list[Resource]:
    """Grow one vein from a random unused candidate.

    Each step moves to a random unused rock tile orthogonally adjacent to
    the previous one. The vein ends early when the tip has no such tile.

    Args:
        rock: Mask of rock tiles a vein may run through.
        candidates: Candidate start locations.
        used: Tiles already holding a resource; updated in place.
        kind: Resource kind.
        length: Maximum vein length.
        rng: Random source.

    Returns:
        The vein in growth order; empty if no start tile is left.
    """
    pool = [loc for loc in candidates if loc not in used]
    if not pool or length <= 0:
        return []

    height, width = rock.shape
    current = rng.choice(pool)
    vein = [make_resource(current, kind, rng)]
    used.add(current)

    for _ in range(1, length):
        adjacent = []
        for dx, dy in ORTHOGONAL_DELTAS:
            x, y = current.x + dx, current.y + dy
            if 0 <= x < width and 0 <= y < height and rock[y, x]:
                loc = Location(x, y)
                if loc not in used:
                    adjacent.append(loc)

        if not adjacent:
            break

        current = rng.choice(adjacent)
        vein.append(make_resource(current, kind, rng))
        used.add(current)

    return vein


def place_veins(
    tiles: NDArray[np.uint8],
    candidates: Sequence[Location],
    targets: dict[ResourceKind, int],
    rng: SeededRandom,
) -> list[list[Resource]]:
    """Lay resources out as orthogonally connected veins.

    Each kind starts ``ceil(target / nominal)`` veins. A vein's length is
    drawn per kind (crystal 5-9, ore 3-5, recharge 1-2) and capped at what
    remains of the kind's target.

    Args:
        tiles: Tile-ID grid.
        candidates: Candidate start locations.
        targets: Target count per kind.
        rng: Random source.

    Returns:
        Veins in placement order.
    """
    rock = np.isin(tiles, ROCK_TILE_VALUES)
    used: set[Location] = set()
    veins: list[list[Resource]] = []

    for kind in KIND_ORDER:
        target = targets[kind]
        remaining = target
        vein_count = math.ceil(target / VEIN_NOMINAL_LENGTH[kind])

        for _ in range(vein_count):
            length = min(_roll_vein_length(kind, rng), remaining)
            if length <= 0:
                break

            vein = grow_vein(rock, candidates, used, kind, length, rng)
            if not vein:
                break

            veins.append(vein)
            remaining -= len(vein)

    return veins


def _place_near_point(
    resources: list[Resource],
    candidates: Sequence[Location],
    used: set[Location],
    point: tuple[float, float],
    kind: ResourceKind,
    count: int,
    radius: float,
    rng: SeededRandom,
) -> None:
    """Place up to ``count`` resources on unused candidates within ``radius``."""
    if count <= 0:
        return

    px, py = point
    nearby = [
        loc
        for loc in candidates
        if loc not in used and math.sqrt((loc.x - px) ** 2 + (loc.y - py) ** 2) <= radius
    ]

    for loc in rng.shuffle(nearby)[:count]:
        resources.append(make_resource(loc, kind, rng))
        used.add(loc)


def place_strategically(
    tiles: NDArray[np.uint8],
    candidates: Sequence[Location],
    targets: dict[ResourceKind, int],
    rng: SeededRandom,
) -> list[Resource]:
    """Weight resources toward gameplay regions.

    Crystals: 20% near the start area, 40% around the centre, the rest
    split over the three far corners. Ore: an even share near each
    quadrant centre. Recharge: one seam near each of up to four points
    between quadrants.

    Args:
        tiles: Tile-ID grid.
        candidates: Candidate locations.
        targets: Target count per kind.
        rng: Random source.

    Returns:
        Placed resources in placement order.
    """
    height, width = tiles.shape
    resources: list[Resource] = []
    used: set[Location] = set()

    start_area = (math.floor(width * 0.2), math.floor(height * 0.2))
    center_area = (math.floor(width * 0.5), math.floor(height * 0.5))
    far_areas = [
        (math.floor(width * 0.8), math.floor(height * 0.2)),
        (math.floor(width * 0.2), math.floor(height * 0.8)),
        (math.floor(width * 0.8), math.floor(height * 0.8)),
    ]

    crystals = targets[ResourceKind.CRYSTAL]
    starting = math.floor(crystals * 0.2)
    mid_game = math.floor(crystals * 0.4)
    late_game = crystals - starting - mid_game

    _place_near_point(
        resources, candidates, used, start_area, ResourceKind.CRYSTAL, starting, 10, rng
    )
    _place_near_point(
        resources, candidates, used, center_area, ResourceKind.CRYSTAL, mid_game, 15, rng
    )
    for area in far_areas:
        _place_near_point(
            resources,
            candidates,
            used,
            area,
            ResourceKind.CRYSTAL,
            late_game // len(far_areas),
            10,
            rng,
        )

    quadrant_centers = [
        (width * 0.25, height * 0.25),
        (width * 0.75, height * 0.25),
        (width * 0.25, height * 0.75),
        (width * 0.75, height * 0.75),
    ]
    ore_per_quadrant = targets[ResourceKind.ORE] // 4
    for quad in quadrant_centers:
        _place_near_point(
            resources, candidates, used, quad, ResourceKind.ORE, ore_per_quadrant, 12, rng
        )

    recharge_points = [
        (width * 0.5, height * 0.25),
        (width * 0.25, height * 0.5),
        (width * 0.75, height * 0.5),
        (width * 0.5, height * 0.75),
    ]
    for point in recharge_points[: targets[ResourceKind.RECHARGE]]:
        _place_near_point(
            resources, candidates, used, point, ResourceKind.RECHARGE, 1, 8, rng
        )

    return resources


def enforce_min_distance(
    resources: Sequence[Resource], min_distance: float
) -> list[Resource]:
    """Greedily drop resources closer than ``min_distance`` to a kept one.

    Resources are visited in placement order; rejected ones are not moved.
    """
    kept: list[Resource] = []

    for resource in resources:
        if all(resource.distance_to(other) >= min_distance for other in kept):
            kept.append(resource)

    return kept


def balance_quadrants(
    resources: Sequence[Resource],
    width: int,
    height: int,
    rng: SeededRandom,
) -> list[Resource]:
    """Trim quadrants holding more than their share of resources.

    All kinds are pooled. Each quadrant above ``floor(total / 4)`` keeps a
    random ``floor(total / 4)`` of its resources; the others keep all of
    theirs. The result is grouped by quadrant (NW, NE, SW, SE).
    """
    quadrants: list[list[Resource]] = [[], [], [], []]
    for resource in resources:
        quadrants[quadrant_index(resource.x, resource.y, width, height)].append(
            resource
        )

    target_per_quadrant = len(resources) // 4
    balanced: list[Resource] = []

    for quadrant in quadrants:
        if len(quadrant) > target_per_quadrant:
            balanced.extend(rng.shuffle(quadrant)[:target_per_quadrant])
        else:
            balanced.extend(quadrant)

    return balanced


def _place_by_strategy(
    tiles: NDArray[np.uint8],
    candidates: list[Location],
    targets: dict[ResourceKind, int],
    distribution: Distribution,
    rng: SeededRandom,
) -> list[Resource]:
    if distribution == Distribution.RANDOM:
        return place_randomly(candidates, targets, rng)
    if distribution == Distribution.CLUSTERED:
        return place_clustered(candidates, targets, rng)
    if distribution == Distribution.VEINS:
        veins = place_veins(tiles, candidates, targets, rng)
        return [resource for vein in veins for resource in vein]
    if distribution == Distribution.STRATEGIC:
        return place_strategically(tiles, candidates, targets, rng)
    raise ValueError(f"Unknown distribution: {distribution}")


def place_resources(
    tiles: ArrayLike,
    options: GenerationOptions,
    compute_spacing: bool = True,
) -> ResourceMap:
    """Place crystals, ore and recharge seams on a finished tile grid.

    Placement never exceeds the density targets. When candidates run out,
    fewer resources are placed and the true counts are reported.

    Args:
        tiles: Tile-ID grid, as an array or nested rows.
        options: Generation options; only resource fields and seed are used.
        compute_spacing: Whether to compute the quadratic average spacing.

    Returns:
        ResourceMap with per-kind resources and statistics.

    Raises:
        InvalidGridError: If ``tiles`` is empty or not rectangular.
    """
    grid = as_tile_grid(tiles)
    height, width = grid.shape
    rng = SeededRandom(options.seed)

    targets = compute_targets(grid.size, options)
    candidates = find_candidates(grid, options.wall_adjacency_required)

    logger.info(
        f"Placing resources ({options.distribution.value}): "
        f"targets {targets[ResourceKind.CRYSTAL]} crystals, "
        f"{targets[ResourceKind.ORE]} ore, {targets[ResourceKind.RECHARGE]} recharge "
        f"from {len(candidates)} candidates"
    )

    resources = _place_by_strategy(
        grid, candidates, targets, options.distribution, rng
    )
    placed = len(resources)

    if options.min_distance_between > 0:
        resources = enforce_min_distance(resources, options.min_distance_between)
        logger.debug(
            f"Minimum distance {options.min_distance_between} dropped "
            f"{placed - len(resources)} resources"
        )

    if options.balance_quadrants:
        before = len(resources)
        resources = balance_quadrants(resources, width, height, rng)
        logger.debug(f"Quadrant balancing dropped {before - len(resources)} resources")

    resource_map = build_resource_map(resources, width, height, compute_spacing)
    log_resource_stats(resource_map.stats)
    return resource_map


def build_resource_map(
    resources: Sequence[Resource],
    width: int,
    height: int,
    compute_spacing: bool = True,
) -> ResourceMap:
    """Split resources by kind and compute their statistics."""
    crystals = tuple(r for r in resources if r.kind == ResourceKind.CRYSTAL)
    ore = tuple(r for r in resources if r.kind == ResourceKind.ORE)
    recharge = tuple(r for r in resources if r.kind == ResourceKind.RECHARGE)

    stats = ResourceStats(
        total_crystals=len(crystals),
        total_ore=sum(r.amount or 0 for r in ore),
        ore_deposits=len(ore),
        total_recharge=len(recharge),
        average_spacing=compute_average_spacing(resources) if compute_spacing else 0.0,
        quadrant_balance=compute_quadrant_balance(resources, width, height),
    )

    return ResourceMap(crystals=crystals, ore=ore, recharge=recharge, stats=stats)


def apply_resources_to_tiles(
    tiles: ArrayLike,
    resource_map: ResourceMap,
) -> NDArray[np.uint8]:
    """Stamp seam tiles for every resource onto a copy of the grid.

    Resources outside the grid are skipped.

    Args:
        tiles: Tile-ID grid; left unchanged.
        resource_map: Resources to stamp.

    Returns:
        New tile grid with crystal, ore and recharge seams.
    """
    result = as_tile_grid(tiles).copy()
    height, width = result.shape

    for resource in resource_map.all:
        if 0 <= resource.x < width and 0 <= resource.y < height:
            result[resource.y, resource.x] = SEAM_TILES[resource.kind]

    return result
