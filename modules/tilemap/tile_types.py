"""Tile variant definitions and the edge catalog used for adjacency."""
from __future__ import annotations

import numbers
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, Optional


class TileVariant(IntEnum):
    """Every tile a layout cell can resolve to, keyed by its integer code."""

    GRASS = 0
    FLOOR = 1
    WALL_NORTH = 2
    WALL_SOUTH = 3
    WALL_EAST = 4
    WALL_WEST = 5
    CORNER_NE = 6
    CORNER_NW = 7
    CORNER_SE = 8
    CORNER_SW = 9
    DOOR = 10


class EdgeLabel(IntEnum):
    """Classification of a tile side; equal labels may touch."""

    EMPTY = 0
    WALL = 1
    FLOOR = 2
    GRASS = 3
    DOOR = 4


class Direction(Enum):
    """Cardinal directions with their grid offsets (north is ``y - 1``)."""

    NORTH = (0, -1)
    SOUTH = (0, 1)
    EAST = (1, 0)
    WEST = (-1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]


_OPPOSITES: Dict[Direction, Direction] = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}


@dataclass(frozen=True, slots=True)
class TileEdgeProfile:
    """Edge labels of a tile's four sides."""

    north: EdgeLabel
    south: EdgeLabel
    east: EdgeLabel
    west: EdgeLabel

    def facing(self, direction: Direction) -> EdgeLabel:
        """Return the label of the side pointing towards ``direction``."""

        if direction is Direction.NORTH:
            return self.north
        if direction is Direction.SOUTH:
            return self.south
        if direction is Direction.EAST:
            return self.east
        return self.west


_E, _W, _F, _G, _D = (
    EdgeLabel.EMPTY,
    EdgeLabel.WALL,
    EdgeLabel.FLOOR,
    EdgeLabel.GRASS,
    EdgeLabel.DOOR,
)

# Single source of truth for which tiles may sit next to each other.
TILE_EDGE_CATALOG: Dict[TileVariant, TileEdgeProfile] = {
    TileVariant.GRASS: TileEdgeProfile(_G, _G, _G, _G),
    TileVariant.FLOOR: TileEdgeProfile(_F, _F, _F, _F),
    TileVariant.WALL_NORTH: TileEdgeProfile(_E, _W, _W, _W),
    TileVariant.WALL_SOUTH: TileEdgeProfile(_W, _E, _W, _W),
    TileVariant.WALL_EAST: TileEdgeProfile(_W, _W, _E, _W),
    TileVariant.WALL_WEST: TileEdgeProfile(_W, _W, _W, _E),
    TileVariant.CORNER_NE: TileEdgeProfile(_E, _W, _E, _W),
    TileVariant.CORNER_NW: TileEdgeProfile(_E, _W, _W, _E),
    TileVariant.CORNER_SE: TileEdgeProfile(_W, _E, _E, _W),
    TileVariant.CORNER_SW: TileEdgeProfile(_W, _E, _W, _E),
    TileVariant.DOOR: TileEdgeProfile(_D, _D, _D, _D),
}

ALL_VARIANTS: tuple[TileVariant, ...] = tuple(TileVariant)


def edge_profile(variant: TileVariant) -> TileEdgeProfile:
    """Return the edge profile of ``variant``."""

    return TILE_EDGE_CATALOG[variant]


def facing_edge(variant: TileVariant, direction: Direction) -> EdgeLabel:
    """Return the edge of ``variant`` that faces ``direction``."""

    return TILE_EDGE_CATALOG[variant].facing(direction)


def compatible(a: EdgeLabel, b: EdgeLabel) -> bool:
    """Two touching edges are legal only when their labels match."""

    return a == b


def tile_from_code(code: object) -> Optional[TileVariant]:
    """Translate an integer tile code into a :class:`TileVariant`.

    Returns ``None`` for anything outside ``0..10``, including booleans and
    non-integer values, so callers can report a rejection instead of raising.
    """

    if isinstance(code, bool) or not isinstance(code, numbers.Integral):
        return None
    try:
        return TileVariant(int(code))
    except ValueError:
        return None


__all__ = [
    "ALL_VARIANTS",
    "Direction",
    "EdgeLabel",
    "TILE_EDGE_CATALOG",
    "TileEdgeProfile",
    "TileVariant",
    "compatible",
    "edge_profile",
    "facing_edge",
    "tile_from_code",
]
