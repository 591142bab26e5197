"""Superposition of still-possible tiles for a single grid cell."""
from __future__ import annotations

from typing import Iterable, Iterator, Optional

from modules.tilemap.gen.random import RandomSource, rand_choice
from modules.tilemap.tile_types import ALL_VARIANTS, TileVariant


class WaveCell:
    """Ordered set of tile variants a cell may still resolve to.

    Candidates keep catalog order, so a draw of ``0.0`` always picks the first
    remaining variant.
    """

    __slots__ = ("_candidates",)

    def __init__(self, candidates: Iterable[TileVariant] | None = None) -> None:
        source = ALL_VARIANTS if candidates is None else candidates
        self._candidates: list[TileVariant] = []
        for variant in source:
            if variant not in self._candidates:
                self._candidates.append(TileVariant(variant))

    def __iter__(self) -> Iterator[TileVariant]:
        return iter(tuple(self._candidates))

    def __len__(self) -> int:
        return len(self._candidates)

    def __contains__(self, variant: object) -> bool:
        return variant in self._candidates

    def __repr__(self) -> str:
        names = ", ".join(variant.name for variant in self._candidates)
        return f"WaveCell([{names}])"

    @property
    def candidates(self) -> tuple[TileVariant, ...]:
        return tuple(self._candidates)

    def entropy(self) -> int:
        """Number of variants still possible."""

        return len(self._candidates)

    def is_contradiction(self) -> bool:
        return not self._candidates

    def remove_variant(self, variant: TileVariant) -> bool:
        """Drop ``variant``; returns whether anything was removed."""

        try:
            self._candidates.remove(variant)
        except ValueError:
            return False
        return True

    def restrict_to(self, variant: TileVariant) -> None:
        """Force the cell to the singleton ``{variant}``."""

        self._candidates = [TileVariant(variant)]

    def collapse(self, random_source: RandomSource) -> Optional[TileVariant]:
        """Pick one remaining variant at random and keep only that one.

        Returns ``None`` when nothing is left to pick.
        """

        if not self._candidates:
            return None
        chosen = rand_choice(random_source, self._candidates)
        self._candidates = [chosen]
        return chosen


__all__ = ["WaveCell"]
