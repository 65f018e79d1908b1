"""Post-generation level validation."""

import logging
from collections import Counter

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import ndimage

from .config import GenerationOptions
from .connectivity import open_mask
from .resources import ResourceMap, compute_targets
from .tile_types import WALL_TILE_VALUES, as_tile_grid
from .types import ResourceKind

logger = logging.getLogger(__name__)


class ValidationResult:
    """Result of level validation."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.passed = True

    def add_error(self, message: str) -> None:
        """Add validation error."""
        self.errors.append(message)
        self.passed = False

    def add_warning(self, message: str) -> None:
        """Add validation warning."""
        self.warnings.append(message)


def validate_level(
    tiles: ArrayLike,
    resource_map: ResourceMap,
    options: GenerationOptions,
) -> ValidationResult:
    """Validate a generated level against its options.

    Args:
        tiles: Tile-ID grid, with or without seams stamped in.
        resource_map: Placed resources.
        options: Options the level was generated with.

    Returns:
        ValidationResult with any errors/warnings.
    """
    grid = as_tile_grid(tiles)
    result = ValidationResult()

    # Check 1: Dimensions match the options
    if grid.shape != (options.height, options.width):
        result.add_error(
            f"Grid is {grid.shape[1]}x{grid.shape[0]}, "
            f"expected {options.width}x{options.height}"
        )

    # Check 2: Border is solid
    _check_border(grid, options.edge_padding, result)

    # Check 3: Cave connectivity
    _check_caves(grid, result)

    # Check 4: Resources sit on wall tiles, one per tile
    _check_resource_tiles(grid, resource_map, result)

    # Check 5: Spacing
    _check_min_distance(resource_map, options.min_distance_between, result)

    # Check 6: Density shortfall
    _check_targets(grid, resource_map, options, result)

    if result.passed:
        logger.info("Level validation passed")
    else:
        logger.warning(f"Level validation failed with {len(result.errors)} errors")
        for error in result.errors:
            logger.error(f"  - {error}")

    for warning in result.warnings:
        logger.warning(f"  - {warning}")

    return result


def _check_border(
    grid: NDArray[np.uint8],
    padding: int,
    result: ValidationResult,
) -> None:
    """Check that the edge border is wall."""
    if padding <= 0:
        return

    border = np.zeros(grid.shape, dtype=bool)
    border[:padding, :] = True
    border[-padding:, :] = True
    border[:, :padding] = True
    border[:, -padding:] = True

    non_wall = int(np.sum(border & open_mask(grid)))
    if non_wall > 0:
        result.add_error(f"Border has {non_wall} open cells")


def _check_caves(grid: NDArray[np.uint8], result: ValidationResult) -> None:
    """Warn about levels without open space or with fragmented caves."""
    mask = open_mask(grid)
    open_count = int(np.sum(mask))

    if open_count == 0:
        result.add_warning("No open cave space")
        return

    structure = ndimage.generate_binary_structure(2, 1)  # 4-connected
    labeled, num_features = ndimage.label(mask, structure=structure)
    if num_features > 1:
        sizes = ndimage.sum(mask, labeled, range(1, num_features + 1))
        largest_frac = float(np.max(sizes)) / open_count
        if largest_frac < 0.5:
            result.add_warning(
                f"Fragmented caves: {num_features} components, "
                f"largest is {largest_frac:.1%} of open space"
            )


def _check_resource_tiles(
    grid: NDArray[np.uint8],
    resource_map: ResourceMap,
    result: ValidationResult,
) -> None:
    """Check resources are on-grid, on wall tiles and not stacked."""
    height, width = grid.shape
    off_grid = 0
    not_on_wall = 0

    for resource in resource_map.all:
        if not (0 <= resource.x < width and 0 <= resource.y < height):
            off_grid += 1
        elif grid[resource.y, resource.x] not in WALL_TILE_VALUES:
            not_on_wall += 1

    if off_grid > 0:
        result.add_error(f"{off_grid} resources outside the grid")
    if not_on_wall > 0:
        result.add_error(f"{not_on_wall} resources on non-wall tiles")

    positions = Counter((r.x, r.y) for r in resource_map.all)
    stacked = sum(1 for count in positions.values() if count > 1)
    if stacked > 0:
        result.add_error(f"{stacked} tiles hold more than one resource")


def _check_min_distance(
    resource_map: ResourceMap,
    min_distance: float,
    result: ValidationResult,
) -> None:
    """Check no two resources are closer than the minimum distance."""
    if min_distance <= 0:
        return

    resources = resource_map.all
    violations = 0
    for i in range(len(resources) - 1):
        for j in range(i + 1, len(resources)):
            if resources[i].distance_to(resources[j]) < min_distance:
                violations += 1

    if violations > 0:
        result.add_error(
            f"{violations} resource pairs closer than {min_distance} tiles"
        )


def _check_targets(
    grid: NDArray[np.uint8],
    resource_map: ResourceMap,
    options: GenerationOptions,
    result: ValidationResult,
) -> None:
    """Warn when fewer resources were placed than requested."""
    targets = compute_targets(grid.size, options)
    placed = {
        ResourceKind.CRYSTAL: len(resource_map.crystals),
        ResourceKind.ORE: len(resource_map.ore),
        ResourceKind.RECHARGE: len(resource_map.recharge),
    }

    for kind, target in targets.items():
        if placed[kind] > target:
            result.add_error(
                f"{placed[kind]} {kind.value} placed, above target {target}"
            )
        elif placed[kind] < target:
            result.add_warning(f"{kind.value}: placed {placed[kind]} of {target}")
