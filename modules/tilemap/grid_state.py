"""Wave Function Collapse over a fixed-size tile grid.

:class:`GridState` owns three parallel ``height x width`` arrays:

* ``resolved`` - the tile each cell collapsed to, or ``None``;
* ``wave`` - a :class:`~modules.tilemap.wave.WaveCell` per cell;
* ``pre_constraints`` - tiles forced by the caller before generation.

Generation resets the first two, seeds open ground from a Voronoi pass,
pins pre-constrained cells and then repeatedly collapses the lowest-entropy
cell, narrowing neighbours after every collapse.  Contradictions never
escape: a cell left without candidates is forced to the default tile.

The class is not thread-safe; callers sharing one instance must serialise
access (see :class:`~modules.tilemap.systems.wfc_generator.WfcBoundary`).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from modules.tilemap.gen.params import WfcParams
from modules.tilemap.gen.random import RandomSource, as_random_source, get_rng
from modules.tilemap.gen.voronoi import generate_grass_mask
from modules.tilemap.layout import UNRESOLVED, TileLayout
from modules.tilemap.tile_types import Direction, TileVariant, compatible, facing_edge
from modules.tilemap.wave import WaveCell


logger = logging.getLogger(__name__)

# Neighbour visiting order used by propagation.
_PROPAGATION_ORDER: tuple[Direction, ...] = (
    Direction.NORTH,
    Direction.SOUTH,
    Direction.EAST,
    Direction.WEST,
)


@dataclass(slots=True)
class GenerationReport:
    """Counters describing one :meth:`GridState.generate_layout` run."""

    pre_collapsed: int = 0
    collapsed: int = 0
    contradictions: int = 0

    @property
    def total(self) -> int:
        return self.pre_collapsed + self.collapsed + self.contradictions


class GridState:
    """Owner of the resolved grid, the wave and the pre-constraints."""

    def __init__(
        self,
        width: int = WfcParams.DEFAULT_SIZE[0],
        height: int = WfcParams.DEFAULT_SIZE[1],
        *,
        random_source: Optional[RandomSource] = None,
        seed_count: int = WfcParams.DEFAULT_SEED_COUNT,
        grass_probability: float = WfcParams.DEFAULT_GRASS_PROBABILITY,
        default_tile: TileVariant = TileVariant.FLOOR,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be positive")
        if seed_count < 0:
            raise ValueError("seed_count cannot be negative")
        if not 0.0 <= grass_probability <= 1.0:
            raise ValueError("grass_probability must lie between 0 and 1")

        self.width = width
        self.height = height
        self.seed_count = seed_count
        self.grass_probability = grass_probability
        self.default_tile = TileVariant(default_tile)
        self._random = as_random_source(random_source)

        self._resolved: list[list[Optional[TileVariant]]] = []
        self._wave: list[list[WaveCell]] = []
        self._pre_constraints: list[list[Optional[TileVariant]]] = [
            [None for _ in range(width)] for _ in range(height)
        ]
        self.reset()

    @classmethod
    def from_params(
        cls,
        params: WfcParams,
        *,
        random_source: Optional[RandomSource] = None,
    ) -> "GridState":
        """Build a grid sized and tuned by ``params``.

        When no ``random_source`` is supplied a generator seeded with
        ``params.seed`` is used.
        """

        if random_source is None:
            random_source = get_rng(params.seed).random
        return cls(
            params.width,
            params.height,
            random_source=random_source,
            seed_count=params.seed_count,
            grass_probability=params.grass_probability,
        )

    # ------------------------------------------------------------------
    # Query & mutation surface
    # ------------------------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_at(self, x: int, y: int) -> Optional[TileVariant]:
        """Return the resolved tile, or ``None`` when out of bounds or unresolved."""

        if not self.in_bounds(x, y):
            return None
        return self._resolved[y][x]

    def entropy_at(self, x: int, y: int) -> Optional[int]:
        if not self.in_bounds(x, y):
            return None
        return self._wave[y][x].entropy()

    def candidates_at(self, x: int, y: int) -> tuple[TileVariant, ...]:
        if not self.in_bounds(x, y):
            return ()
        return self._wave[y][x].candidates

    def pre_constraint_at(self, x: int, y: int) -> Optional[TileVariant]:
        if not self.in_bounds(x, y):
            return None
        return self._pre_constraints[y][x]

    def pre_constraints(self) -> list[tuple[int, int, TileVariant]]:
        """Return every recorded constraint as ``(x, y, tile)`` in row-major order."""

        return [
            (x, y, tile)
            for y, row in enumerate(self._pre_constraints)
            for x, tile in enumerate(row)
            if tile is not None
        ]

    def set_pre_constraint(self, x: int, y: int, tile: TileVariant) -> bool:
        """Pin ``(x, y)`` to ``tile`` for the next generation run.

        Returns ``False`` without touching anything when the coordinates lie
        outside the grid.
        """

        if not self.in_bounds(x, y):
            return False
        self._pre_constraints[y][x] = TileVariant(tile)
        return True

    def clear_pre_constraints(self) -> None:
        self._pre_constraints = [[None for _ in range(self.width)] for _ in range(self.height)]

    def reset(self) -> None:
        """Wipe resolved tiles and the wave; pre-constraints survive."""

        self._resolved = [[None for _ in range(self.width)] for _ in range(self.height)]
        self._wave = [[WaveCell() for _ in range(self.width)] for _ in range(self.height)]

    clear = reset

    def is_complete(self) -> bool:
        return all(tile is not None for row in self._resolved for tile in row)

    def snapshot(self) -> TileLayout:
        """Copy the resolved grid into a :class:`TileLayout`."""

        tiles = [
            [UNRESOLVED if tile is None else int(tile) for tile in row]
            for row in self._resolved
        ]
        return TileLayout(width=self.width, height=self.height, tiles=tiles)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def generate_layout(self) -> GenerationReport:
        """Regenerate the whole grid; every cell is resolved afterwards."""

        self.reset()
        report = GenerationReport()

        grass_mask = generate_grass_mask(
            self.width,
            self.height,
            self.seed_count,
            self._random,
            grass_probability=self.grass_probability,
        )

        seeded: list[tuple[int, int]] = []
        for y in range(self.height):
            for x in range(self.width):
                pinned = self._pre_constraints[y][x]
                if pinned is not None:
                    self._resolve(x, y, pinned)
                    seeded.append((x, y))
                elif grass_mask[y][x]:
                    self._resolve(x, y, TileVariant.GRASS)
                    seeded.append((x, y))
                else:
                    self._wave[y][x].remove_variant(TileVariant.GRASS)
        report.pre_collapsed = len(seeded)

        for x, y in seeded:
            self.propagate(x, y)

        while True:
            position = self.find_lowest_entropy()
            if position is None:
                report.contradictions += self._patch_contradictions()
                break

            x, y = position
            tile = self._wave[y][x].collapse(self._random)
            if tile is None:
                self._force_default(x, y)
                report.contradictions += 1
                continue
            self._resolved[y][x] = tile
            report.collapsed += 1
            self.propagate(x, y)

        logger.debug(
            "Generated %dx%d layout: %d pre-collapsed, %d collapsed, %d contradictions patched",
            self.width,
            self.height,
            report.pre_collapsed,
            report.collapsed,
            report.contradictions,
        )
        return report

    def find_lowest_entropy(self) -> Optional[tuple[int, int]]:
        """Return the first unresolved cell (row-major) with the smallest positive entropy."""

        best: Optional[tuple[int, int]] = None
        best_entropy = 0
        for y in range(self.height):
            resolved_row = self._resolved[y]
            wave_row = self._wave[y]
            for x in range(self.width):
                if resolved_row[x] is not None:
                    continue
                entropy = wave_row[x].entropy()
                if entropy == 0:
                    continue
                if best is None or entropy < best_entropy:
                    best = (x, y)
                    best_entropy = entropy
                    if entropy == 1:
                        # Nothing positive is lower; later ties lose anyway.
                        return best
        return best

    def propagate(self, x: int, y: int) -> int:
        """Narrow unresolved neighbours outward from ``(x, y)``.

        A resolved cell offers the single edge of its tile; an unresolved cell
        offers the edges of every candidate it still holds.  A neighbour whose
        candidate set shrank is pushed onto the work stack and narrows its own
        neighbours in turn.  Resolved cells are never narrowed, and a cell left
        without candidates does not spread its contradiction.

        Returns the number of candidates removed.
        """

        removed = 0
        stack: list[tuple[int, int]] = [(x, y)]
        while stack:
            cx, cy = stack.pop()
            sources = self._offered_tiles(cx, cy)
            if not sources:
                continue

            for direction in _PROPAGATION_ORDER:
                nx, ny = cx + direction.dx, cy + direction.dy
                if not self.in_bounds(nx, ny) or self._resolved[ny][nx] is not None:
                    continue

                offered = {facing_edge(tile, direction) for tile in sources}
                neighbour = self._wave[ny][nx]
                changed = False
                for candidate in neighbour.candidates:
                    touching = facing_edge(candidate, direction.opposite)
                    if not any(compatible(touching, edge) for edge in offered):
                        neighbour.remove_variant(candidate)
                        removed += 1
                        changed = True
                if changed:
                    stack.append((nx, ny))
        return removed

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _offered_tiles(self, x: int, y: int) -> Sequence[TileVariant]:
        tile = self._resolved[y][x]
        if tile is not None:
            return (tile,)
        return self._wave[y][x].candidates

    def _resolve(self, x: int, y: int, tile: TileVariant) -> None:
        self._resolved[y][x] = tile
        self._wave[y][x].restrict_to(tile)

    def _force_default(self, x: int, y: int) -> None:
        logger.debug("Contradiction at (%d, %d); forcing %s", x, y, self.default_tile.name)
        self._resolve(x, y, self.default_tile)
        self.propagate(x, y)

    def _patch_contradictions(self) -> int:
        patched = 0
        for y in range(self.height):
            for x in range(self.width):
                if self._resolved[y][x] is None:
                    self._force_default(x, y)
                    patched += 1
        return patched


__all__ = [
    "GenerationReport",
    "GridState",
]
