"""Generation options and biome presets."""

import tomllib
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class Biome(str, Enum):
    """Level biomes."""

    ROCK = "rock"
    ICE = "ice"
    LAVA = "lava"


class Complexity(str, Enum):
    """How many optional biome features are painted."""

    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


class Distribution(str, Enum):
    """Resource distribution strategies."""

    RANDOM = "random"
    CLUSTERED = "clustered"
    VEINS = "veins"
    STRATEGIC = "strategic"


class BiomePattern(BaseModel, frozen=True):
    """Biome-tuned carving parameters."""

    fill_probability: float
    smoothing_iterations: int
    tunnel_chance: float
    chamber_chance: float


BIOME_PATTERNS: dict[Biome, BiomePattern] = {
    Biome.ROCK: BiomePattern(
        fill_probability=0.45,
        smoothing_iterations=5,
        tunnel_chance=0.3,
        chamber_chance=0.2,
    ),
    # Less smoothing for jagged ice, more tunnels
    Biome.ICE: BiomePattern(
        fill_probability=0.40,
        smoothing_iterations=3,
        tunnel_chance=0.4,
        chamber_chance=0.15,
    ),
    # More smoothing for flowing lava, more chambers
    Biome.LAVA: BiomePattern(
        fill_probability=0.50,
        smoothing_iterations=7,
        tunnel_chance=0.2,
        chamber_chance=0.3,
    ),
}


class GenerationOptions(BaseModel, frozen=True, extra="forbid"):
    """Complete level generation configuration."""

    width: int = Field(default=40, gt=0, description="Level width in tiles")
    height: int = Field(default=40, gt=0, description="Level height in tiles")

    # Cave carving
    fill_probability: float = Field(
        default=0.45, ge=0.0, le=1.0, description="Initial solid fill chance"
    )
    smoothing_iterations: int = Field(
        default=5, ge=0, description="Cellular automata passes"
    )
    birth_limit: int = Field(
        default=4, ge=0, le=8, description="Open cell turns solid above this many solid neighbours"
    )
    death_limit: int = Field(
        default=3, ge=0, le=8, description="Solid cell stays solid with at least this many solid neighbours"
    )
    edge_padding: int = Field(default=1, ge=0, description="Solid border width")

    # Biome painting
    biome: Biome = Field(default=Biome.ROCK, description="Level biome")
    complexity: Complexity = Field(
        default=Complexity.MEDIUM, description="Biome feature complexity"
    )
    hazard_density: float = Field(
        default=0.0, ge=0.0, le=1.0, description="Hazard scatter on ground tiles"
    )
    loose_rock_chance: float = Field(
        default=0.15, ge=0.0, le=1.0, description="Chance a floor-facing wall is loose rock"
    )
    hard_rock_chance: float = Field(
        default=0.3, ge=0.0, le=1.0, description="Chance a floor-facing wall is hard rock"
    )

    # Resource placement
    crystal_density: float = Field(
        default=2.0, ge=0.0, description="Crystals per 100 tiles"
    )
    ore_density: float = Field(default=1.5, ge=0.0, description="Ore per 100 tiles")
    recharge_density: float = Field(
        default=0.5, ge=0.0, description="Recharge seams per 100 tiles"
    )
    distribution: Distribution = Field(
        default=Distribution.CLUSTERED, description="Resource distribution strategy"
    )
    min_distance_between: float = Field(
        default=3, ge=0.0, description="Minimum Euclidean spacing between resources"
    )
    wall_adjacency_required: bool = Field(
        default=True, description="Only place seams in walls facing open space"
    )
    balance_quadrants: bool = Field(
        default=True, description="Trim resource-heavy quadrants to the mean"
    )

    seed: int = Field(default=42, description="Random seed for reproducibility")

    @property
    def pattern(self) -> BiomePattern:
        """Carving preset for this biome."""
        return BIOME_PATTERNS[self.biome]

    @property
    def total_tiles(self) -> int:
        return self.width * self.height

    @classmethod
    def for_biome(cls, biome: Biome | str, **overrides: Any) -> "GenerationOptions":
        """Build options using a biome's preset fill and smoothing.

        Args:
            biome: Biome to preset for.
            **overrides: Any other option values; these win over the preset.

        Returns:
            Validated GenerationOptions.
        """
        biome = Biome(biome)
        pattern = BIOME_PATTERNS[biome]
        values: dict[str, Any] = {
            "biome": biome,
            "fill_probability": pattern.fill_probability,
            "smoothing_iterations": pattern.smoothing_iterations,
        }
        values.update(overrides)
        return cls.model_validate(values)


def load_options(config_path: Path) -> GenerationOptions:
    """Load generation options from a TOML file.

    Keys may sit at the top level or under a ``[generation]`` table.

    Args:
        config_path: Path to the TOML file.

    Returns:
        Parsed GenerationOptions.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        pydantic.ValidationError: If an option is unknown or out of range.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return GenerationOptions.model_validate(data.get("generation", data))


def _configs_dir() -> Path:
    return Path(__file__).parent.parent.parent / "configs"


def find_config(name: str) -> Path:
    """Find an options file by name.

    Searches in the following order:
    1. Exact path if name contains path separator or ends with .toml
    2. configs/{name}.toml

    Args:
        name: Preset name or path.

    Returns:
        Path to the config file.

    Raises:
        FileNotFoundError: If config file is not found.
    """
    if "/" in name or name.endswith(".toml"):
        path = Path(name)
        if path.exists():
            return path
        raise FileNotFoundError(f"Config file not found: {name}")

    config_path = _configs_dir() / f"{name}.toml"
    if config_path.exists():
        return config_path

    raise FileNotFoundError(
        f"Config '{name}' not found in {_configs_dir()}. "
        f"Available configs: {list_configs()}"
    )


def list_configs() -> list[str]:
    """List available preset names."""
    configs_dir = _configs_dir()
    if not configs_dir.exists():
        return []
    return sorted(p.stem for p in configs_dir.glob("*.toml"))
