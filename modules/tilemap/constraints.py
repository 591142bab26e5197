"""High-level layout descriptions turned into cell pre-constraints.

A language model (or a human) describes the wanted map with four fields:
building density, clustering, grass ratio and building size.  The helpers
here parse such a description out of free text and derive concrete
``(x, y, tile)`` pins which the generator honours before collapsing.
"""
from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import ClassVar, Iterable, Literal, Protocol

from modules.tilemap.gen.random import RandomSource
from modules.tilemap.tile_types import TileVariant


logger = logging.getLogger(__name__)

BuildingDensity = Literal["sparse", "medium", "dense"]
Clustering = Literal["clustered", "distributed", "random"]
BuildingSize = Literal["small", "medium", "large"]

PreConstraint = tuple[int, int, TileVariant]

_DENSITIES = ("sparse", "medium", "dense")
_CLUSTERINGS = ("clustered", "distributed", "random")
_SIZES = ("small", "medium", "large")

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_DENSITY_PATTERN = re.compile(r'buildingDensity["\s:]+(sparse|medium|dense)', re.IGNORECASE)
_CLUSTERING_PATTERN = re.compile(r'clustering["\s:]+(clustered|distributed|random)', re.IGNORECASE)
_GRASS_PATTERN = re.compile(r'grassRatio["\s:]+([\d.]+)', re.IGNORECASE)
_SIZE_PATTERN = re.compile(r'buildingSizeHint["\s:]+(small|medium|large)', re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class LayoutConstraints:
    """Coarse description of a layout."""

    #: Buildings placed for each density label.
    BUILDING_COUNTS: ClassVar[dict[str, int]] = {"sparse": 3, "medium": 6, "dense": 10}

    building_density: BuildingDensity = "medium"
    clustering: Clustering = "random"
    grass_ratio: float = 0.3
    building_size_hint: BuildingSize = "medium"

    def __post_init__(self) -> None:
        if self.building_density not in _DENSITIES:
            raise ValueError(f"unknown building density '{self.building_density}'")
        if self.clustering not in _CLUSTERINGS:
            raise ValueError(f"unknown clustering '{self.clustering}'")
        if self.building_size_hint not in _SIZES:
            raise ValueError(f"unknown building size '{self.building_size_hint}'")
        if not 0.0 <= self.grass_ratio <= 1.0:
            raise ValueError("grass_ratio must lie between 0 and 1")

    @property
    def building_count(self) -> int:
        return self.BUILDING_COUNTS[self.building_density]


def _from_json(text: str) -> LayoutConstraints | None:
    match = _JSON_OBJECT.search(text)
    if match is None:
        return None
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None

    density = payload.get("buildingDensity")
    clustering = payload.get("clustering")
    grass_ratio = payload.get("grassRatio")
    size = payload.get("buildingSizeHint")

    if density not in _DENSITIES or clustering not in _CLUSTERINGS or size not in _SIZES:
        return None
    if isinstance(grass_ratio, bool) or not isinstance(grass_ratio, (int, float)):
        return None
    if not 0.0 <= grass_ratio <= 1.0:
        return None
    return LayoutConstraints(
        building_density=density,
        clustering=clustering,
        grass_ratio=float(grass_ratio),
        building_size_hint=size,
    )


def _from_patterns(text: str) -> LayoutConstraints:
    density = _DENSITY_PATTERN.search(text)
    clustering = _CLUSTERING_PATTERN.search(text)
    grass = _GRASS_PATTERN.search(text)
    size = _SIZE_PATTERN.search(text)

    grass_ratio = 0.3
    if grass is not None:
        try:
            grass_ratio = float(grass.group(1))
        except ValueError:
            grass_ratio = 0.3

    return LayoutConstraints(
        building_density=density.group(1).lower() if density else "medium",
        clustering=clustering.group(1).lower() if clustering else "random",
        grass_ratio=min(1.0, max(0.0, grass_ratio)),
        building_size_hint=size.group(1).lower() if size else "medium",
    )


def parse_layout_constraints(text: str) -> LayoutConstraints:
    """Extract :class:`LayoutConstraints` from model output.

    The first ``{...}`` block is tried as JSON and accepted only when all four
    fields are valid.  Otherwise each field is searched for individually,
    falling back to ``medium`` / ``random`` / ``0.3`` / ``medium``.
    """

    parsed = _from_json(text)
    if parsed is not None:
        return parsed
    logger.debug("No valid JSON layout description found; using field patterns")
    return _from_patterns(text)


def _scatter(random_source: RandomSource, extent: int) -> int:
    return math.floor(random_source() * extent)


def _building_seeds(
    constraints: LayoutConstraints,
    width: int,
    height: int,
    random_source: RandomSource,
) -> list[tuple[int, int]]:
    count = constraints.building_count
    seeds: list[tuple[int, int]] = []
    if constraints.clustering == "clustered":
        clusters = max(1, count // 3)
        per_cluster = count // clusters
        for _ in range(clusters):
            centre_x = _scatter(random_source, width - 10) + 5
            centre_y = _scatter(random_source, height - 10) + 5
            for _ in range(per_cluster):
                seeds.append(
                    (
                        centre_x + math.floor((random_source() - 0.5) * 8),
                        centre_y + math.floor((random_source() - 0.5) * 8),
                    )
                )
    else:
        for _ in range(count):
            seeds.append((_scatter(random_source, width), _scatter(random_source, height)))
    return seeds


def constraints_to_pre_constraints(
    constraints: LayoutConstraints,
    width: int,
    height: int,
    random_source: RandomSource,
) -> list[PreConstraint]:
    """Derive grass regions and building floor pins from ``constraints``.

    Grass seeds claim every cell within ``diag * (1 - grass_ratio)`` of the
    nearest seed.  Building seeds then pin floor tiles wherever they land
    inside the grid on a cell not already claimed by grass.
    """

    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive")

    grass_seed_count = math.floor(width * height * constraints.grass_ratio / 100)
    grass_seeds = [
        (_scatter(random_source, width), _scatter(random_source, height))
        for _ in range(grass_seed_count)
    ]

    pins: list[PreConstraint] = []
    grass_cells: set[tuple[int, int]] = set()
    if grass_seeds:
        reach = math.hypot(width, height) * (1 - constraints.grass_ratio)
        for y in range(height):
            for x in range(width):
                nearest = min(math.hypot(x - sx, y - sy) for sx, sy in grass_seeds)
                if nearest < reach:
                    pins.append((x, y, TileVariant.GRASS))
                    grass_cells.add((x, y))

    for x, y in _building_seeds(constraints, width, height, random_source):
        if 0 <= x < width and 0 <= y < height and (x, y) not in grass_cells:
            pins.append((x, y, TileVariant.FLOOR))

    logger.debug(
        "Layout description produced %d pins (%d grass seeds)",
        len(pins),
        grass_seed_count,
    )
    return pins


class _AcceptsPreConstraints(Protocol):
    def set_pre_constraint(self, x: int, y: int, tile: TileVariant) -> bool:
        ...


def apply_pre_constraints(target: _AcceptsPreConstraints, pins: Iterable[PreConstraint]) -> int:
    """Push ``pins`` into ``target`` and return how many were accepted."""

    accepted = 0
    for x, y, tile in pins:
        if target.set_pre_constraint(x, y, tile):
            accepted += 1
    return accepted


__all__ = [
    "LayoutConstraints",
    "PreConstraint",
    "apply_pre_constraints",
    "constraints_to_pre_constraints",
    "parse_layout_constraints",
]
