"""Command-line interface for level generation."""

import argparse
import logging
import time
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from .generator import Level


def main() -> None:
    """CLI entry point for level generation."""
    parser = argparse.ArgumentParser(
        description="Generate procedural mine-cavern levels"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Options TOML file or preset name under configs/",
    )
    parser.add_argument("--width", type=int, default=None, help="Level width")
    parser.add_argument("--height", type=int, default=None, help="Level height")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--biome", choices=["rock", "ice", "lava"], default=None, help="Level biome"
    )
    parser.add_argument(
        "--complexity",
        choices=["simple", "medium", "complex"],
        default=None,
        help="Biome feature complexity",
    )
    parser.add_argument(
        "--distribution",
        choices=["random", "clustered", "veins", "strategic"],
        default=None,
        help="Resource distribution strategy",
    )
    parser.add_argument(
        "--count", type=int, default=1, help="Levels to generate with consecutive seeds"
    )
    parser.add_argument(
        "--workers", type=int, default=4, help="Worker threads for --count > 1"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )

    args = parser.parse_args()

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
    logger = structlog.get_logger()

    # Import here to avoid slow startup for --help
    from pydantic import ValidationError

    from .batch import generate_batch, seed_range
    from .config import GenerationOptions, find_config, load_options
    from .generator import generate_level
    from .validation import validate_level

    overrides = {
        key: value
        for key, value in {
            "width": args.width,
            "height": args.height,
            "seed": args.seed,
            "complexity": args.complexity,
            "distribution": args.distribution,
        }.items()
        if value is not None
    }

    try:
        if args.config:
            config_path = find_config(args.config)
            base = load_options(config_path)
            logger.info("config_loaded", path=str(config_path))
            if args.biome:
                overrides["biome"] = args.biome
            options = GenerationOptions.model_validate(
                {**base.model_dump(), **overrides}
            )
        else:
            options = GenerationOptions.for_biome(args.biome or "rock", **overrides)
    except FileNotFoundError as e:
        logger.error("config_not_found", error=str(e))
        raise SystemExit(1)
    except ValidationError as e:
        logger.error("invalid_options", error=str(e))
        raise SystemExit(2)

    start_time = time.time()
    if args.count > 1:
        levels = generate_batch(seed_range(options, args.count), args.workers)
    else:
        levels = [generate_level(options)]
    gen_time = time.time() - start_time

    failed = 0
    for generated in levels:
        _print_level(generated)
        validation = validate_level(
            generated.tiles, generated.resources, generated.options
        )
        if validation.passed:
            print("  Validation: passed")
        else:
            failed += 1
            print(f"  Validation: FAILED ({len(validation.errors)} errors)")
        for warning in validation.warnings:
            print(f"    warning: {warning}")
        print()

    print(f"Generated {len(levels)} level(s) in {gen_time:.2f}s")
    if failed:
        raise SystemExit(1)


def _print_level(level: "Level") -> None:
    """Print a level's terrain and resource statistics."""
    options = level.options
    terrain = level.terrain.stats
    resources = level.resources.stats

    print(
        f"Level {options.width}x{options.height} {options.biome.value} "
        f"({options.complexity.value}, {options.distribution.value}) "
        f"seed {options.seed}"
    )
    print(f"  Solid: {terrain.solid_percent:.1f}%")
    print(f"  Caves: {terrain.cave_count}, largest {terrain.largest_cave_size} tiles")
    print(f"  Crystals: {resources.total_crystals}")
    print(f"  Ore: {resources.total_ore} in {resources.ore_deposits} deposits")
    print(f"  Recharge: {resources.total_recharge}")
    print(f"  Avg spacing: {resources.average_spacing:.2f} tiles")
    print(f"  Quadrants: {list(resources.quadrant_balance)}")
    if level.features:
        print(f"  Features: {', '.join(level.features)}")


if __name__ == "__main__":
    main()
