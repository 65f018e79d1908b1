"""Procedural mine-cavern level generation.

This package carves caves with cellular automata, paints biome features
(tunnels, chambers, water, lava), synthesizes a height field and places
crystal, ore and recharge seams in the cave walls.
"""

from .batch import generate_batch, seed_range
from .config import (
    Biome,
    Complexity,
    Distribution,
    GenerationOptions,
    load_options,
)
from .exceptions import CavegenError, InvalidGridError
from .generator import GenerationResult, Level, generate, generate_level
from .resources import ResourceMap, place_resources
from .rng import SeededRandom
from .tile_types import TileType
from .types import Location, Resource, ResourceKind
from .validation import ValidationResult, validate_level

__all__ = [
    "Biome",
    "CavegenError",
    "Complexity",
    "Distribution",
    "GenerationOptions",
    "GenerationResult",
    "InvalidGridError",
    "Level",
    "Location",
    "Resource",
    "ResourceKind",
    "ResourceMap",
    "SeededRandom",
    "TileType",
    "ValidationResult",
    "generate",
    "generate_batch",
    "generate_level",
    "load_options",
    "place_resources",
    "seed_range",
    "validate_level",
]
