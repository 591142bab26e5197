"""Snapshot and JSON serialization of generated tile layouts."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from modules.tilemap.tile_types import Direction, TileVariant, compatible, facing_edge, tile_from_code


UNRESOLVED = -1
"""Code stored for cells that hold no tile yet."""

_LAYOUT_VERSION = 1


@dataclass(slots=True)
class TileLayout:
    """Immutable-by-convention copy of a grid's resolved tile codes."""

    width: int
    height: int
    tiles: list[list[int]]

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be positive")
        if len(self.tiles) != self.height:
            raise ValueError("tiles height does not match height")

        rows: list[list[int]] = []
        for row in self.tiles:
            if len(row) != self.width:
                raise ValueError("tiles width does not match width")
            normalised: list[int] = []
            for code in row:
                if isinstance(code, bool):
                    raise TypeError("tile codes must be integers")
                value = int(code)
                if value != UNRESOLVED and tile_from_code(value) is None:
                    raise ValueError(f"unknown tile code {value}")
                normalised.append(value)
            rows.append(normalised)
        self.tiles = rows

    def tile_at(self, x: int, y: int) -> Optional[TileVariant]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return None
        code = self.tiles[y][x]
        return None if code == UNRESOLVED else TileVariant(code)

    def is_complete(self) -> bool:
        return all(code != UNRESOLVED for row in self.tiles for code in row)

    def count(self, variant: TileVariant) -> int:
        return sum(row.count(int(variant)) for row in self.tiles)

    def histogram(self) -> dict[TileVariant, int]:
        counts = {variant: 0 for variant in TileVariant}
        for row in self.tiles:
            for code in row:
                if code != UNRESOLVED:
                    counts[TileVariant(code)] += 1
        return counts

    def edge_violations(self) -> list[tuple[tuple[int, int], tuple[int, int]]]:
        """Return adjacent resolved pairs whose touching edges differ.

        Each pair is reported once, scanning east and south neighbours in
        row-major order.
        """

        violations: list[tuple[tuple[int, int], tuple[int, int]]] = []
        for y in range(self.height):
            for x in range(self.width):
                here = self.tile_at(x, y)
                if here is None:
                    continue
                for direction in (Direction.EAST, Direction.SOUTH):
                    nx, ny = x + direction.dx, y + direction.dy
                    there = self.tile_at(nx, ny)
                    if there is None:
                        continue
                    if not compatible(
                        facing_edge(here, direction),
                        facing_edge(there, direction.opposite),
                    ):
                        violations.append(((x, y), (nx, ny)))
        return violations

    def to_dict(self) -> dict:
        return {
            "version": _LAYOUT_VERSION,
            "width": self.width,
            "height": self.height,
            "tiles": [row[:] for row in self.tiles],
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "TileLayout":
        version = payload.get("version", _LAYOUT_VERSION)
        if version != _LAYOUT_VERSION:
            raise ValueError(f"unsupported layout version {version}")
        try:
            return cls(
                width=int(payload["width"]),
                height=int(payload["height"]),
                tiles=[list(row) for row in payload["tiles"]],
            )
        except KeyError as exc:
            raise ValueError(f"layout payload is missing '{exc.args[0]}'") from exc

    def save_json(self, path: str | Path) -> None:
        save_json(self, path)

    @staticmethod
    def load_json(path: str | Path) -> "TileLayout":
        return load_json(path)


def save_json(layout: TileLayout, path: str | Path) -> None:
    """Write ``layout`` to ``path`` as JSON."""

    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        json.dump(layout.to_dict(), handle)


def load_json(path: str | Path) -> TileLayout:
    """Read a :class:`TileLayout` previously written by :func:`save_json`."""

    with Path(path).open("r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        raise ValueError("layout JSON must contain an object")
    return TileLayout.from_dict(payload)


__all__ = ["TileLayout", "UNRESOLVED", "load_json", "save_json"]
