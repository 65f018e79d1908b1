"""Concurrent generation of independent levels."""

import time
from collections.abc import Sequence
from concurrent import futures

import structlog

from .config import GenerationOptions
from .generator import Level, generate_level

logger = structlog.get_logger()

DEFAULT_MAX_WORKERS = 4


def seed_range(options: GenerationOptions, count: int) -> list[GenerationOptions]:
    """Copies of ``options`` with consecutive seeds starting at its seed."""
    return [
        options.model_copy(update={"seed": options.seed + i}) for i in range(count)
    ]


def generate_batch(
    options_list: Sequence[GenerationOptions],
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[Level]:
    """Generate several levels on a thread pool.

    Each level owns its random source and grids, so calls share nothing.
    Results come back in input order; the first failure is re-raised.

    Args:
        options_list: One options record per level.
        max_workers: Thread pool size.

    Returns:
        Generated levels, aligned with ``options_list``.
    """
    if max_workers < 1:
        raise ValueError(f"max_workers must be at least 1, got {max_workers}")

    start = time.perf_counter()
    logger.info("batch_started", levels=len(options_list), max_workers=max_workers)

    with futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        pending = [executor.submit(generate_level, opts) for opts in options_list]
        levels = []
        for opts, future in zip(options_list, pending):
            try:
                levels.append(future.result())
            except Exception:
                logger.error("level_failed", seed=opts.seed, biome=opts.biome.value)
                raise

    logger.info(
        "batch_finished",
        levels=len(levels),
        duration_s=round(time.perf_counter() - start, 3),
    )
    return levels
