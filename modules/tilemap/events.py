"""Event definitions for requesting and announcing tile layouts."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

from core.events.topics import EventTopic
from modules.tilemap.layout import TileLayout

if TYPE_CHECKING:  # pragma: no cover
    from modules.tilemap.grid_state import GenerationReport


@runtime_checkable
class _PublishesEvents(Protocol):
    """Protocol capturing the subset of the event bus used here."""

    def publish(self, event_type: str, **payload: object) -> None:
        """Publish an event to all subscribers."""


@dataclass(frozen=True, slots=True)
class GenerateTileLayout:
    """Request a full regeneration of the layout."""

    topic: ClassVar[EventTopic] = EventTopic.GENERATE_LAYOUT

    def publish(self, bus: _PublishesEvents) -> None:
        bus.publish(self.topic)


@dataclass(frozen=True, slots=True)
class TileLayoutGenerated:
    """Notification carrying the freshly generated :class:`TileLayout`."""

    layout: TileLayout
    report: "GenerationReport"

    topic: ClassVar[EventTopic] = EventTopic.LAYOUT_GENERATED

    def publish(self, bus: _PublishesEvents) -> None:
        bus.publish(self.topic, layout=self.layout, report=self.report)


@dataclass(frozen=True, slots=True)
class SetPreConstraint:
    """Pin one cell by integer tile code before the next generation."""

    x: int
    y: int
    tile_code: int

    topic: ClassVar[EventTopic] = EventTopic.SET_PRE_CONSTRAINT

    def publish(self, bus: _PublishesEvents) -> None:
        bus.publish(self.topic, x=self.x, y=self.y, tile_code=self.tile_code)


@dataclass(frozen=True, slots=True)
class PreConstraintRejected:
    """Emitted when a :class:`SetPreConstraint` request could not be recorded."""

    x: int
    y: int
    tile_code: int

    topic: ClassVar[EventTopic] = EventTopic.PRE_CONSTRAINT_REJECTED

    def publish(self, bus: _PublishesEvents) -> None:
        bus.publish(self.topic, x=self.x, y=self.y, tile_code=self.tile_code)


@dataclass(frozen=True, slots=True)
class ClearPreConstraints:
    topic: ClassVar[EventTopic] = EventTopic.CLEAR_PRE_CONSTRAINTS

    def publish(self, bus: _PublishesEvents) -> None:
        bus.publish(self.topic)


@dataclass(frozen=True, slots=True)
class ClearTileLayout:
    topic: ClassVar[EventTopic] = EventTopic.CLEAR_LAYOUT

    def publish(self, bus: _PublishesEvents) -> None:
        bus.publish(self.topic)


__all__ = [
    "ClearPreConstraints",
    "ClearTileLayout",
    "GenerateTileLayout",
    "PreConstraintRejected",
    "SetPreConstraint",
    "TileLayoutGenerated",
]
