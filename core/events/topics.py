"""Canonical registry of event bus topics used by the tile layout systems.

Each entry documents the producer, the intended consumers and the payload
guarantees for the associated event.  Importing modules should rely on the
enum members (e.g. ``topics.EventTopic.GENERATE_LAYOUT``) rather than raw
strings.
"""

from __future__ import annotations

from enum import Enum

__all__ = ["EventTopic"]


class EventTopic(str, Enum):
    """Enumeration of every topic published on the event bus."""

    GENERATE_LAYOUT = "tilemap.generate"
    """Published by hosts asking for a fresh layout.

    Subscribers: :class:`modules.tilemap.systems.wfc_generator.WfcGeneratorSystem`.
    Guarantees: no payload.
    """

    LAYOUT_GENERATED = "tilemap.generated"
    """Published once a layout has been generated.

    Subscribers: renderers, exporters, tests.
    Guarantees: carries ``layout`` (a ``TileLayout``) and ``report``.
    """

    SET_PRE_CONSTRAINT = "tilemap.set_pre_constraint"
    """Published by text-to-layout front ends to pin one cell.

    Subscribers: the generator system.
    Guarantees: carries integer ``x``, ``y`` and ``tile_code``.
    """

    PRE_CONSTRAINT_REJECTED = "tilemap.pre_constraint_rejected"
    """Published when a pin had invalid coordinates or an unknown tile code.

    Subscribers: front ends surfacing the rejection.
    Guarantees: echoes ``x``, ``y`` and ``tile_code``.
    """

    CLEAR_PRE_CONSTRAINTS = "tilemap.clear_pre_constraints"
    """Published to drop every pin before the next generation.

    Subscribers: the generator system.
    Guarantees: no payload.
    """

    CLEAR_LAYOUT = "tilemap.clear"
    """Published to wipe the resolved layout while keeping pins.

    Subscribers: the generator system.
    Guarantees: no payload.
    """
