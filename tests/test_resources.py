"""Tests for resource placement."""

import itertools

import numpy as np
import pytest

from cavegen.config import Distribution, GenerationOptions
from cavegen.exceptions import InvalidGridError
from cavegen.resources import (
    apply_resources_to_tiles,
    balance_quadrants,
    build_resource_map,
    compute_targets,
    enforce_min_distance,
    find_candidates,
    grow_vein,
    place_clustered,
    place_randomly,
    place_resources,
    place_strategically,
    place_veins,
)
from cavegen.rng import SeededRandom
from cavegen.statistics import quadrant_index
from cavegen.tile_types import ROCK_TILE_VALUES, TileType
from cavegen.types import Location, Resource, ResourceKind


def _counts(resources: list[Resource]) -> dict[ResourceKind, int]:
    counts = dict.fromkeys(ResourceKind, 0)
    for resource in resources:
        counts[resource.kind] += 1
    return counts


def _assert_unique(resources: list[Resource]) -> None:
    positions = [(r.x, r.y) for r in resources]
    assert len(positions) == len(set(positions))


class TestTargets:
    """Tests for density targets."""

    def test_default_densities(self) -> None:
        targets = compute_targets(1600, GenerationOptions())
        assert targets == {
            ResourceKind.CRYSTAL: 32,
            ResourceKind.ORE: 24,
            ResourceKind.RECHARGE: 8,
        }

    def test_floors(self) -> None:
        options = GenerationOptions(
            crystal_density=1.0, ore_density=0.5, recharge_density=0.1
        )
        targets = compute_targets(150, options)
        assert targets == {
            ResourceKind.CRYSTAL: 1,
            ResourceKind.ORE: 0,
            ResourceKind.RECHARGE: 0,
        }


class TestCandidates:
    """Tests for candidate selection."""

    def test_room_walls(self, open_room: np.ndarray) -> None:
        """Every border tile of a room touches the floor, corners diagonally."""
        candidates = find_candidates(open_room, wall_adjacency_required=True)
        assert len(candidates) == 36
        assert Location(0, 0) in candidates
        assert candidates == sorted(candidates, key=lambda loc: (loc.y, loc.x))

    def test_buried_rock_excluded(self, rock_grid: np.ndarray) -> None:
        assert find_candidates(rock_grid, wall_adjacency_required=True) == []
        assert len(find_candidates(rock_grid, wall_adjacency_required=False)) == 400

    @pytest.mark.parametrize("hazard", [TileType.LAVA, TileType.WATER, TileType.SLUG_HOLE])
    def test_hazard_facing_rock_excluded(self, hazard: TileType) -> None:
        """Rock that only faces a hazard is not a seam candidate."""
        tiles = np.full((5, 5), TileType.SOLID_ROCK, dtype=np.uint8)
        tiles[2, 2] = hazard
        assert find_candidates(tiles, wall_adjacency_required=True) == []

    def test_floor_facing_rock_included(self) -> None:
        tiles = np.full((5, 5), TileType.SOLID_ROCK, dtype=np.uint8)
        tiles[2, 2] = TileType.POWER_PATH
        candidates = find_candidates(tiles, wall_adjacency_required=True)
        assert len(candidates) == 8
        assert Location(2, 2) not in candidates

    def test_seams_not_candidates(self, open_room: np.ndarray) -> None:
        tiles = open_room.copy()
        tiles[0, 3] = TileType.CRYSTAL_SEAM
        assert Location(3, 0) not in find_candidates(tiles, True)


class TestStrategies:
    """Tests for individual distribution strategies."""

    @pytest.fixture
    def candidates(self, rock_grid: np.ndarray) -> list[Location]:
        return find_candidates(rock_grid, wall_adjacency_required=False)

    @pytest.fixture
    def targets(self) -> dict[ResourceKind, int]:
        return {ResourceKind.CRYSTAL: 10, ResourceKind.ORE: 5, ResourceKind.RECHARGE: 2}

    def test_random_meets_targets(self, candidates, targets) -> None:
        resources = place_randomly(candidates, targets, SeededRandom(1))
        assert _counts(resources) == targets
        _assert_unique(resources)

    def test_random_runs_out(self) -> None:
        candidates = [Location(i, 0) for i in range(5)]
        targets = {ResourceKind.CRYSTAL: 3, ResourceKind.ORE: 3, ResourceKind.RECHARGE: 3}
        resources = place_randomly(candidates, targets, SeededRandom(1))

        assert [r.kind for r in resources] == [ResourceKind.CRYSTAL] * 3 + [ResourceKind.ORE] * 2

    def test_clustered_meets_targets(self, candidates, targets) -> None:
        resources = place_clustered(candidates, targets, SeededRandom(2))
        assert _counts(resources) == targets
        _assert_unique(resources)

    def test_clustered_runs_out(self) -> None:
        candidates = [Location(i, 0) for i in range(4)]
        targets = {ResourceKind.CRYSTAL: 3, ResourceKind.ORE: 3, ResourceKind.RECHARGE: 3}
        resources = place_clustered(candidates, targets, SeededRandom(2))

        assert len(resources) == 4
        _assert_unique(resources)

    def test_strategic_within_targets(self, candidates, targets) -> None:
        resources = place_strategically(
            np.full((20, 20), TileType.SOLID_ROCK, dtype=np.uint8),
            candidates,
            targets,
            SeededRandom(3),
        )
        counts = _counts(resources)
        for kind, target in targets.items():
            assert counts[kind] <= target
        assert counts[ResourceKind.CRYSTAL] > 0
        _assert_unique(resources)

    def test_ore_amounts(self, candidates, targets) -> None:
        resources = place_randomly(candidates, targets, SeededRandom(4))
        for resource in resources:
            if resource.kind == ResourceKind.ORE:
                assert 1 <= resource.amount <= 3
            else:
                assert resource.amount is None


class TestVeins:
    """Tests for vein growth."""

    def test_veins_connected(self, rock_grid: np.ndarray) -> None:
        candidates = find_candidates(rock_grid, wall_adjacency_required=False)
        targets = {ResourceKind.CRYSTAL: 12, ResourceKind.ORE: 6, ResourceKind.RECHARGE: 3}
        veins = place_veins(rock_grid, candidates, targets, SeededRandom(6))

        assert veins
        for vein in veins:
            assert len({r.kind for r in vein}) == 1
            for a, b in itertools.pairwise(vein):
                assert abs(a.x - b.x) + abs(a.y - b.y) == 1

        flat = [r for vein in veins for r in vein]
        _assert_unique(flat)
        counts = _counts(flat)
        for kind, target in targets.items():
            assert counts[kind] <= target

    def test_vein_length_cap(self, rock_grid: np.ndarray) -> None:
        rock = rock_grid == TileType.SOLID_ROCK
        candidates = [Location(10, 10)]
        vein = grow_vein(rock, candidates, set(), ResourceKind.CRYSTAL, 5, SeededRandom(1))

        assert len(vein) == 5
        assert vein[0].location == Location(10, 10)

    def test_vein_stops_when_boxed_in(self) -> None:
        rock = np.zeros((3, 3), dtype=bool)
        rock[1, 1] = True
        vein = grow_vein(
            rock, [Location(1, 1)], set(), ResourceKind.ORE, 4, SeededRandom(1)
        )
        assert len(vein) == 1

    def test_no_start(self, rock_grid: np.ndarray) -> None:
        rock = rock_grid == TileType.SOLID_ROCK
        used = {Location(0, 0)}
        assert grow_vein(rock, [Location(0, 0)], used, ResourceKind.CRYSTAL, 5, SeededRandom(1)) == []


class TestFilters:
    """Tests for spacing and quadrant filters."""

    def test_min_distance_greedy(self) -> None:
        resources = [
            Resource(0, 0, ResourceKind.CRYSTAL),
            Resource(1, 0, ResourceKind.CRYSTAL),
            Resource(5, 0, ResourceKind.CRYSTAL),
        ]
        kept = enforce_min_distance(resources, 3)
        assert [(r.x, r.y) for r in kept] == [(0, 0), (5, 0)]

    def test_min_distance_zero_keeps_all(self) -> None:
        resources = [Resource(0, 0, ResourceKind.CRYSTAL), Resource(0, 0, ResourceKind.RECHARGE)]
        assert enforce_min_distance(resources, 0) == resources

    def test_balance_trims_heavy_quadrant(self) -> None:
        resources = [Resource(i, 0, ResourceKind.CRYSTAL) for i in range(5)]
        resources += [
            Resource(8, 1, ResourceKind.CRYSTAL),
            Resource(1, 8, ResourceKind.CRYSTAL),
            Resource(8, 8, ResourceKind.CRYSTAL),
        ]
        balanced = balance_quadrants(resources, 10, 10, SeededRandom(1))

        quadrants = [quadrant_index(r.x, r.y, 10, 10) for r in balanced]
        assert quadrants == [0, 0, 1, 2, 3]
        assert set(balanced) <= set(resources)

    def test_balance_even_unchanged(self) -> None:
        resources = [
            Resource(1, 1, ResourceKind.CRYSTAL),
            Resource(8, 1, ResourceKind.CRYSTAL),
            Resource(1, 8, ResourceKind.CRYSTAL),
            Resource(8, 8, ResourceKind.CRYSTAL),
        ]
        assert balance_quadrants(resources, 10, 10, SeededRandom(1)) == resources


class TestPlaceResources:
    """Tests for the full placement pipeline."""

    @pytest.mark.parametrize("distribution", list(Distribution))
    def test_invariants(self, cave_tiles: np.ndarray, distribution: Distribution) -> None:
        options = GenerationOptions(width=40, height=40, seed=7, distribution=distribution)
        resource_map = place_resources(cave_tiles, options)
        resources = list(resource_map.all)
        targets = compute_targets(cave_tiles.size, options)

        assert len(resource_map.crystals) <= targets[ResourceKind.CRYSTAL]
        assert len(resource_map.ore) <= targets[ResourceKind.ORE]
        assert len(resource_map.recharge) <= targets[ResourceKind.RECHARGE]
        _assert_unique(resources)

        for resource in resources:
            assert cave_tiles[resource.y, resource.x] in ROCK_TILE_VALUES

        for a, b in itertools.combinations(resources, 2):
            assert a.distance_to(b) >= options.min_distance_between

        stats = resource_map.stats
        assert stats.total_crystals == len(resource_map.crystals)
        assert stats.ore_deposits == len(resource_map.ore)
        assert stats.total_ore == sum(r.amount for r in resource_map.ore)
        assert sum(stats.quadrant_balance) == len(resource_map)

        unbalanced = place_resources(
            cave_tiles, options.model_copy(update={"balance_quadrants": False})
        )
        cap = len(unbalanced) // 4
        assert all(count <= cap for count in stats.quadrant_balance)

    def test_deterministic(self, cave_tiles: np.ndarray) -> None:
        options = GenerationOptions(width=40, height=40, seed=3, distribution=Distribution.VEINS)
        assert place_resources(cave_tiles, options) == place_resources(cave_tiles, options)

    def test_zero_density(self, cave_tiles: np.ndarray) -> None:
        options = GenerationOptions(
            crystal_density=0,
            ore_density=0,
            recharge_density=0,
            distribution=Distribution.RANDOM,
        )
        resource_map = place_resources(cave_tiles, options)

        assert len(resource_map) == 0
        assert resource_map.stats.average_spacing == 0.0
        assert resource_map.stats.quadrant_balance == (0, 0, 0, 0)

    def test_nested_lists_accepted(self, open_room: np.ndarray) -> None:
        options = GenerationOptions(crystal_density=5.0, ore_density=0, recharge_density=0)
        resource_map = place_resources(open_room.tolist(), options)
        assert len(resource_map.crystals) <= 5

    def test_ragged_grid_rejected(self) -> None:
        with pytest.raises(InvalidGridError):
            place_resources([[38, 38, 38], [38, 1]], GenerationOptions())

    def test_wall_adjacency(self, cave_tiles: np.ndarray) -> None:
        options = GenerationOptions(seed=11, distribution=Distribution.RANDOM)
        resource_map = place_resources(cave_tiles, options)
        candidates = set(find_candidates(cave_tiles, wall_adjacency_required=True))

        for resource in resource_map.all:
            assert resource.location in candidates

    def test_skip_spacing(self, cave_tiles: np.ndarray) -> None:
        resource_map = place_resources(cave_tiles, GenerationOptions(), compute_spacing=False)
        assert resource_map.stats.average_spacing == 0.0


class TestApplyResources:
    """Tests for stamping seams onto tiles."""

    def test_stamps_seams(self, open_room: np.ndarray) -> None:
        resource_map = build_resource_map(
            [
                Resource(0, 3, ResourceKind.CRYSTAL),
                Resource(9, 3, ResourceKind.ORE, 2),
                Resource(3, 0, ResourceKind.RECHARGE),
                Resource(50, 50, ResourceKind.CRYSTAL),
            ],
            10,
            10,
        )
        stamped = apply_resources_to_tiles(open_room, resource_map)

        assert stamped[3, 0] == TileType.CRYSTAL_SEAM
        assert stamped[3, 9] == TileType.ORE_SEAM
        assert stamped[0, 3] == TileType.RECHARGE_SEAM
        assert open_room[3, 0] == TileType.SOLID_ROCK
        assert int(np.sum(stamped != open_room)) == 3
