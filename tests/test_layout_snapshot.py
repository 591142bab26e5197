"""Tests for layout snapshots and their JSON form."""
from __future__ import annotations

import json

import pytest

from modules.tilemap.layout import UNRESOLVED, TileLayout, load_json, save_json
from modules.tilemap.tile_types import TileVariant


def test_snapshot_reports_unresolved_cells():
    layout = TileLayout(width=2, height=1, tiles=[[1, UNRESOLVED]])
    assert layout.tile_at(0, 0) is TileVariant.FLOOR
    assert layout.tile_at(1, 0) is None
    assert layout.tile_at(2, 0) is None
    assert not layout.is_complete()


@pytest.mark.parametrize(
    "width, height, tiles, error",
    [
        (0, 1, [[]], ValueError),
        (2, 1, [[1]], ValueError),
        (1, 2, [[1]], ValueError),
        (1, 1, [[11]], ValueError),
        (1, 1, [[True]], TypeError),
    ],
)
def test_invalid_layouts_are_rejected(width, height, tiles, error):
    with pytest.raises(error):
        TileLayout(width=width, height=height, tiles=tiles)


def test_edge_violations_report_mismatched_neighbours():
    layout = TileLayout(
        width=3,
        height=2,
        tiles=[
            [int(TileVariant.FLOOR), int(TileVariant.FLOOR), int(TileVariant.GRASS)],
            [int(TileVariant.FLOOR), UNRESOLVED, int(TileVariant.GRASS)],
        ],
    )
    assert layout.edge_violations() == [((1, 0), (2, 0))]


def test_histogram_and_count():
    layout = TileLayout(width=3, height=1, tiles=[[0, 0, 10]])
    assert layout.count(TileVariant.GRASS) == 2
    histogram = layout.histogram()
    assert histogram[TileVariant.DOOR] == 1
    assert sum(histogram.values()) == 3


def test_json_file_roundtrip(tmp_path):
    layout = TileLayout(width=2, height=2, tiles=[[0, 1], [10, UNRESOLVED]])
    path = tmp_path / "nested" / "layout.json"

    save_json(layout, path)
    assert json.loads(path.read_text(encoding="utf-8"))["version"] == 1
    assert load_json(path) == layout
    assert TileLayout.load_json(path) == layout


def test_load_rejects_foreign_payloads(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_json(path)

    path.write_text(json.dumps({"version": 2, "width": 1, "height": 1, "tiles": [[0]]}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_json(path)

    path.write_text(json.dumps({"width": 1, "height": 1}), encoding="utf-8")
    with pytest.raises(ValueError, match="tiles"):
        load_json(path)
