"""Tests for level validation."""

import numpy as np
import pytest

from cavegen.config import GenerationOptions
from cavegen.resources import build_resource_map
from cavegen.tile_types import TileType
from cavegen.types import Resource, ResourceKind
from cavegen.validation import validate_level


@pytest.fixture
def room_options() -> GenerationOptions:
    """Options matching the 10x10 room with two crystals requested."""
    return GenerationOptions(
        width=10, height=10, crystal_density=2.0, ore_density=0, recharge_density=0
    )


def _resource_map(*resources: Resource):
    return build_resource_map(list(resources), 10, 10)


class TestValidateLevel:
    """Tests for validate_level."""

    def test_valid_room(self, open_room: np.ndarray, room_options: GenerationOptions) -> None:
        resource_map = _resource_map(
            Resource(0, 2, ResourceKind.CRYSTAL), Resource(9, 7, ResourceKind.CRYSTAL)
        )
        result = validate_level(open_room, resource_map, room_options)

        assert result.passed
        assert result.errors == []
        assert result.warnings == []

    def test_dimension_mismatch(self, open_room: np.ndarray) -> None:
        result = validate_level(open_room, _resource_map(), GenerationOptions(width=12, height=10))
        assert not result.passed
        assert any("expected 12x10" in e for e in result.errors)

    def test_open_border(self, open_room: np.ndarray, room_options: GenerationOptions) -> None:
        tiles = open_room.copy()
        tiles[0, 5] = TileType.GROUND
        result = validate_level(tiles, _resource_map(), room_options)
        assert not result.passed
        assert any("Border" in e for e in result.errors)

    def test_resource_on_floor(self, open_room: np.ndarray, room_options: GenerationOptions) -> None:
        result = validate_level(
            open_room, _resource_map(Resource(5, 5, ResourceKind.CRYSTAL)), room_options
        )
        assert not result.passed
        assert any("non-wall" in e for e in result.errors)

    def test_stacked_resources(self, open_room: np.ndarray, room_options: GenerationOptions) -> None:
        resource_map = _resource_map(
            Resource(0, 4, ResourceKind.CRYSTAL), Resource(0, 4, ResourceKind.CRYSTAL)
        )
        result = validate_level(
            open_room, resource_map, room_options.model_copy(update={"min_distance_between": 0})
        )
        assert any("more than one resource" in e for e in result.errors)

    def test_too_close(self, open_room: np.ndarray, room_options: GenerationOptions) -> None:
        resource_map = _resource_map(
            Resource(0, 1, ResourceKind.CRYSTAL), Resource(0, 2, ResourceKind.CRYSTAL)
        )
        result = validate_level(open_room, resource_map, room_options)
        assert not result.passed
        assert any("closer than" in e for e in result.errors)

    def test_above_target(self, open_room: np.ndarray, room_options: GenerationOptions) -> None:
        resource_map = _resource_map(Resource(0, 2, ResourceKind.RECHARGE))
        result = validate_level(open_room, resource_map, room_options)
        assert any("above target" in e for e in result.errors)

    def test_shortfall_warns(self, open_room: np.ndarray, room_options: GenerationOptions) -> None:
        result = validate_level(open_room, _resource_map(), room_options)
        assert result.passed
        assert any("placed 0 of 2" in w for w in result.warnings)

    def test_fragmented_caves_warn(self, open_room: np.ndarray) -> None:
        tiles = open_room.copy()
        tiles[:, 3] = TileType.SOLID_ROCK
        tiles[:, 6] = TileType.SOLID_ROCK
        options = GenerationOptions(
            width=10, height=10, crystal_density=0, ore_density=0, recharge_density=0
        )
        result = validate_level(tiles, _resource_map(), options)

        assert result.passed
        assert any("Fragmented" in w for w in result.warnings)
