"""Voronoi pre-pass deciding which cells start out as open ground."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import numpy as np

from modules.tilemap.gen.params import WfcParams
from modules.tilemap.gen.random import RandomSource


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VoronoiSeed:
    """Seed point of one Voronoi region."""

    x: float
    y: float
    is_grass: bool


def scatter_seeds(
    width: int,
    height: int,
    seed_count: int,
    random_source: RandomSource,
    *,
    grass_probability: float = WfcParams.DEFAULT_GRASS_PROBABILITY,
) -> List[VoronoiSeed]:
    """Draw ``seed_count`` seeds; each consumes three draws (x, y, class)."""

    if seed_count < 0:
        raise ValueError("seed_count cannot be negative")

    seeds: List[VoronoiSeed] = []
    for _ in range(seed_count):
        x = random_source() * width
        y = random_source() * height
        is_grass = random_source() < grass_probability
        seeds.append(VoronoiSeed(x, y, is_grass))
    return seeds


def classify_cells(width: int, height: int, seeds: List[VoronoiSeed]) -> np.ndarray:
    """Return a ``(height, width)`` bool mask taking each cell's nearest seed class.

    Distances are squared Euclidean.  ``argmin`` keeps the first minimal seed,
    so equal-distance ties resolve to the earliest seed drawn.  Without seeds
    no cell is grass.
    """

    if not seeds:
        return np.zeros((height, width), dtype=bool)

    seed_x = np.array([seed.x for seed in seeds], dtype=np.float64)
    seed_y = np.array([seed.y for seed in seeds], dtype=np.float64)
    seed_grass = np.array([seed.is_grass for seed in seeds], dtype=bool)

    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    dx = xs[..., np.newaxis] - seed_x
    dy = ys[..., np.newaxis] - seed_y
    nearest = np.argmin(dx * dx + dy * dy, axis=-1)
    return seed_grass[nearest]


def generate_grass_mask(
    width: int,
    height: int,
    seed_count: int,
    random_source: RandomSource,
    *,
    grass_probability: float = WfcParams.DEFAULT_GRASS_PROBABILITY,
) -> np.ndarray:
    """Scatter seeds and classify every cell of a ``width`` x ``height`` grid."""

    checks = width * height * seed_count
    if checks > WfcParams.SCALE_WARNING_THRESHOLD:
        logger.warning(
            "Voronoi pass performs %d distance checks (%dx%d grid, %d seeds)",
            checks,
            width,
            height,
            seed_count,
        )

    seeds = scatter_seeds(
        width,
        height,
        seed_count,
        random_source,
        grass_probability=grass_probability,
    )
    mask = classify_cells(width, height, seeds)
    logger.debug(
        "Voronoi mask: %d seeds (%d grass), %d grass cells",
        len(seeds),
        sum(1 for seed in seeds if seed.is_grass),
        int(mask.sum()),
    )
    return mask


__all__ = [
    "VoronoiSeed",
    "classify_cells",
    "generate_grass_mask",
    "scatter_seeds",
]
