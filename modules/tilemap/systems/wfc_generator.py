from __future__ import annotations

import logging
import random
import threading
from typing import Callable, Mapping, Optional, Protocol

from core.event_bus import Topic
from modules.tilemap.events import (
    ClearPreConstraints,
    ClearTileLayout,
    GenerateTileLayout,
    PreConstraintRejected,
    SetPreConstraint,
    TileLayoutGenerated,
)
from modules.tilemap.gen.params import WfcParams
from modules.tilemap.gen.random import RandomSource
from modules.tilemap.grid_state import GenerationReport, GridState
from modules.tilemap.layout import UNRESOLVED, TileLayout
from modules.tilemap.tile_types import tile_from_code
from utils.logger import log_calls


logger = logging.getLogger(__name__)


class _EventBus(Protocol):
    def subscribe(self, event_type: Topic, callback: Callable[..., None]) -> None:
        ...

    def publish(
        self, event_type: Topic, payload: Mapping[str, object] | None = None, /, **kwargs: object
    ) -> None:
        ...


class WfcBoundary:
    """Host-facing facade over one :class:`GridState`.

    Tiles travel as integer codes (``-1`` for "nothing here") and every
    operation holds the instance lock for its full duration, so concurrent
    hosts never observe a half-propagated grid.
    """

    def __init__(
        self,
        state: Optional[GridState] = None,
        *,
        random_source: Optional[RandomSource] = None,
    ) -> None:
        if state is None:
            state = GridState(random_source=random_source or random.random)
        elif random_source is not None:
            raise ValueError("pass random_source to the GridState when supplying one")
        self._state = state
        self._lock = threading.Lock()

    @classmethod
    def from_params(
        cls,
        params: WfcParams,
        *,
        random_source: Optional[RandomSource] = None,
    ) -> "WfcBoundary":
        return cls(GridState.from_params(params, random_source=random_source))

    @property
    def width(self) -> int:
        return self._state.width

    @property
    def height(self) -> int:
        return self._state.height

    @log_calls
    def generate_layout(self) -> GenerationReport:
        with self._lock:
            return self._state.generate_layout()

    def get_tile_at(self, x: int, y: int) -> int:
        """Return the tile code at ``(x, y)`` or ``-1`` when out of bounds/unresolved."""

        with self._lock:
            tile = self._state.tile_at(x, y)
        return UNRESOLVED if tile is None else int(tile)

    def clear_layout(self) -> None:
        with self._lock:
            self._state.reset()

    def set_pre_constraint(self, x: int, y: int, tile_code: int) -> bool:
        """Pin ``(x, y)``; ``False`` for bad coordinates or unknown codes."""

        tile = tile_from_code(tile_code)
        if tile is None:
            logger.debug("Rejected pre-constraint with unknown tile code %r", tile_code)
            return False
        with self._lock:
            return self._state.set_pre_constraint(x, y, tile)

    def clear_pre_constraints(self) -> None:
        with self._lock:
            self._state.clear_pre_constraints()

    def snapshot(self) -> TileLayout:
        with self._lock:
            return self._state.snapshot()


class WfcGeneratorSystem:
    """Serve layout requests arriving on the event bus."""

    def __init__(self, boundary: WfcBoundary, *, event_bus: _EventBus) -> None:
        self._boundary = boundary
        self._bus = event_bus
        self._bus.subscribe(GenerateTileLayout.topic, self._on_generate_requested)
        self._bus.subscribe(SetPreConstraint.topic, self._on_set_pre_constraint)
        self._bus.subscribe(ClearPreConstraints.topic, self._on_clear_pre_constraints)
        self._bus.subscribe(ClearTileLayout.topic, self._on_clear_layout)

    @property
    def boundary(self) -> WfcBoundary:
        return self._boundary

    def _on_generate_requested(self, **_: object) -> None:
        try:
            report = self._boundary.generate_layout()
        except Exception:
            logger.exception(
                "Layout generation failed for %dx%d grid",
                self._boundary.width,
                self._boundary.height,
            )
            raise
        TileLayoutGenerated(layout=self._boundary.snapshot(), report=report).publish(self._bus)

    def _on_set_pre_constraint(self, *, x: int, y: int, tile_code: int, **_: object) -> None:
        if not self._boundary.set_pre_constraint(x, y, tile_code):
            PreConstraintRejected(x=x, y=y, tile_code=tile_code).publish(self._bus)

    def _on_clear_pre_constraints(self, **_: object) -> None:
        self._boundary.clear_pre_constraints()

    def _on_clear_layout(self, **_: object) -> None:
        self._boundary.clear_layout()


__all__ = ["WfcBoundary", "WfcGeneratorSystem"]
