"""Command line entry point generating one tile layout."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from config.config_loader import DEFAULT_CONFIG_FILE, ConfigLoader
from core.event_bus import EventBus
from core.events.topics import EventTopic
from modules.tilemap.constraints import (
    apply_pre_constraints,
    constraints_to_pre_constraints,
    parse_layout_constraints,
)
from modules.tilemap.events import GenerateTileLayout, SetPreConstraint
from modules.tilemap.gen.params import WfcParams
from modules.tilemap.gen.random import get_rng
from modules.tilemap.grid_state import GridState
from modules.tilemap.layout import TileLayout
from modules.tilemap.systems.wfc_generator import WfcBoundary, WfcGeneratorSystem
from utils.logger import configure_module_logging


def _parse_constraint(value: str) -> tuple[int, int, int]:
    parts = value.split(",")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError("constraints look like X,Y,CODE")
    try:
        x, y, code = (int(part) for part in parts)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid constraint '{value}'") from exc
    return x, y, code


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a WFC tile layout.")
    parser.add_argument("--config", default=DEFAULT_CONFIG_FILE, help="YAML settings file")
    parser.add_argument("--width", type=int, help="grid width (overrides config)")
    parser.add_argument("--height", type=int, help="grid height (overrides config)")
    parser.add_argument("--seeds", type=int, help="Voronoi seed count (overrides config)")
    parser.add_argument("--seed", type=int, help="random seed for a reproducible run")
    parser.add_argument(
        "--constraint",
        action="append",
        default=[],
        type=_parse_constraint,
        metavar="X,Y,CODE",
        help="pin a cell to a tile code before generating (repeatable)",
    )
    parser.add_argument(
        "--describe",
        metavar="TEXT",
        help="layout description (JSON or key: value text) turned into pins",
    )
    parser.add_argument("--json", metavar="PATH", help="write the layout snapshot to PATH")
    parser.add_argument("-v", "--verbose", action="store_true", help="log generation details")
    return parser


def _resolve_params(args: argparse.Namespace, loader: ConfigLoader) -> WfcParams:
    params = WfcParams.from_config(loader)
    return WfcParams(
        width=args.width if args.width is not None else params.width,
        height=args.height if args.height is not None else params.height,
        seed_count=args.seeds if args.seeds is not None else params.seed_count,
        grass_probability=params.grass_probability,
        seed=args.seed if args.seed is not None else params.seed,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    loader = ConfigLoader(args.config)
    level = logging.DEBUG if args.verbose else loader.get("logging", "level", default="WARNING")
    configure_module_logging(level)
    log = logging.getLogger("tilemap.cli")

    try:
        params = _resolve_params(args, loader)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    rng = get_rng(params.seed)
    boundary = WfcBoundary(GridState.from_params(params, random_source=rng.random))
    bus = EventBus()
    WfcGeneratorSystem(boundary, event_bus=bus)

    rejected: list[tuple[int, int, int]] = []

    def _collect_rejected(*, x: int, y: int, tile_code: int) -> None:
        rejected.append((x, y, tile_code))

    if args.describe:
        description = parse_layout_constraints(args.describe)
        pins = constraints_to_pre_constraints(description, params.width, params.height, rng.random)
        accepted = apply_pre_constraints(boundary, pins)
        log.info("Description %s produced %d pins", description, accepted)

    bus.subscribe(EventTopic.PRE_CONSTRAINT_REJECTED, _collect_rejected)
    for x, y, code in args.constraint:
        SetPreConstraint(x=x, y=y, tile_code=code).publish(bus)
    bus.unsubscribe(EventTopic.PRE_CONSTRAINT_REJECTED, _collect_rejected)
    for x, y, code in rejected:
        print(f"warning: ignored constraint {x},{y},{code}", file=sys.stderr)

    generated: list[TileLayout] = []
    bus.subscribe(EventTopic.LAYOUT_GENERATED, lambda *, layout, report: generated.append(layout))
    GenerateTileLayout().publish(bus)
    layout = generated[-1]

    histogram = layout.histogram()
    summary = ", ".join(f"{tile.name.lower()}={count}" for tile, count in histogram.items() if count)
    print(f"{layout.width}x{layout.height} layout: {summary}")
    violations = len(layout.edge_violations())
    if violations:
        print(f"{violations} adjacent pairs were patched after contradictions")

    if args.json:
        layout.save_json(args.json)
        print(f"wrote {args.json}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
