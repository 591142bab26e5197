"""Tests for the WFC grid state machine."""
from __future__ import annotations

import pytest

from modules.tilemap.gen.params import WfcParams
from modules.tilemap.gen.random import get_rng
from modules.tilemap.grid_state import GridState
from modules.tilemap.tile_types import Direction, TileVariant, facing_edge
from modules.tilemap.wave import WaveCell


def _all_tiles(state: GridState) -> list[list[TileVariant | None]]:
    return [[state.tile_at(x, y) for x in range(state.width)] for y in range(state.height)]


# ----------------------------------------------------------------------
# Construction & query surface
# ----------------------------------------------------------------------
def test_fresh_state_is_unresolved_full_superposition(scripted):
    state = GridState(4, 3, random_source=scripted(0.0))
    assert (state.width, state.height) == (4, 3)
    for y in range(3):
        for x in range(4):
            assert state.tile_at(x, y) is None
            assert state.entropy_at(x, y) == 11
    assert not state.is_complete()


def test_defaults_match_reference_grid():
    state = GridState()
    assert (state.width, state.height, state.seed_count) == (50, 50, 10)


@pytest.mark.parametrize("width, height", [(0, 5), (5, 0), (-1, 3)])
def test_non_positive_dimensions_are_rejected(width, height):
    with pytest.raises(ValueError):
        GridState(width, height)


def test_tile_at_out_of_bounds_returns_none(scripted):
    state = GridState(3, 3, random_source=scripted(0.0))
    state.generate_layout()
    for x, y in ((-1, 0), (0, -1), (3, 0), (0, 3)):
        assert state.tile_at(x, y) is None
        assert state.entropy_at(x, y) is None


def test_set_pre_constraint_bounds(scripted):
    state = GridState(5, 4, random_source=scripted(0.0))
    assert state.set_pre_constraint(4, 3, TileVariant.DOOR) is True
    for x, y in ((-1, 0), (5, 0), (0, -1), (0, 4)):
        assert state.set_pre_constraint(x, y, TileVariant.FLOOR) is False
    assert state.pre_constraints() == [(4, 3, TileVariant.DOOR)]
    # Recording a constraint does not resolve anything by itself.
    assert state.tile_at(4, 3) is None


def test_pre_constraints_survive_reset_but_not_their_own_clear(scripted):
    state = GridState(3, 3, random_source=scripted(0.5))
    state.set_pre_constraint(1, 1, TileVariant.FLOOR)
    state.generate_layout()
    state.reset()
    assert state.pre_constraint_at(1, 1) is TileVariant.FLOOR
    state.clear_pre_constraints()
    assert state.pre_constraint_at(1, 1) is None
    assert state.pre_constraints() == []


def test_clear_pre_constraints_keeps_the_resolved_grid(scripted):
    state = GridState(3, 3, random_source=scripted(0.5))
    state.set_pre_constraint(0, 0, TileVariant.DOOR)
    state.generate_layout()
    before = _all_tiles(state)
    state.clear_pre_constraints()
    assert _all_tiles(state) == before


def test_reset_is_idempotent(scripted):
    state = GridState(4, 4, random_source=scripted(0.0))
    state.generate_layout()
    state.reset()
    once = _all_tiles(state)
    state.reset()
    assert _all_tiles(state) == once
    assert all(tile is None for row in once for tile in row)
    assert all(state.entropy_at(x, y) == 11 for y in range(4) for x in range(4))


# ----------------------------------------------------------------------
# Entropy selection & propagation
# ----------------------------------------------------------------------
def test_lowest_entropy_prefers_first_cell_in_row_major_order(scripted):
    state = GridState(3, 2, random_source=scripted(0.0))
    assert state.find_lowest_entropy() == (0, 0)

    state._wave[1][0].remove_variant(TileVariant.GRASS)
    state._wave[0][2].remove_variant(TileVariant.GRASS)
    assert state.find_lowest_entropy() == (2, 0)


def test_lowest_entropy_skips_contradictions_and_resolved_cells(scripted):
    state = GridState(2, 1, random_source=scripted(0.0))
    state._wave[0][0] = WaveCell([])
    assert state.find_lowest_entropy() == (1, 0)
    state._resolve(1, 0, TileVariant.FLOOR)
    assert state.find_lowest_entropy() is None


def test_propagation_cascades_through_unresolved_cells(scripted):
    state = GridState(3, 1, random_source=scripted(0.0))
    state._resolve(0, 0, TileVariant.FLOOR)

    removed = state.propagate(0, 0)

    assert removed == 20
    assert state.candidates_at(1, 0) == (TileVariant.FLOOR,)
    assert state.candidates_at(2, 0) == (TileVariant.FLOOR,)
    # Narrowing is not resolving.
    assert state.tile_at(1, 0) is None
    assert state.tile_at(2, 0) is None


def test_propagation_keeps_only_matching_facing_edges(scripted):
    state = GridState(3, 3, random_source=scripted(0.0))
    state._resolve(1, 1, TileVariant.WALL_NORTH)
    state.propagate(1, 1)

    north = state.candidates_at(1, 0)
    assert north
    assert all(facing_edge(tile, Direction.SOUTH) == facing_edge(TileVariant.WALL_NORTH, Direction.NORTH) for tile in north)
    east = state.candidates_at(2, 1)
    assert all(facing_edge(tile, Direction.WEST) == facing_edge(TileVariant.WALL_NORTH, Direction.EAST) for tile in east)


def test_propagation_never_narrows_resolved_neighbours(scripted):
    state = GridState(2, 1, random_source=scripted(0.0))
    state._resolve(0, 0, TileVariant.GRASS)
    state._resolve(1, 0, TileVariant.DOOR)
    assert state.propagate(0, 0) == 0
    assert state.candidates_at(1, 0) == (TileVariant.DOOR,)


def test_contradictions_do_not_spread(scripted):
    state = GridState(3, 1, random_source=scripted(0.0))
    state._wave[0][1].remove_variant(TileVariant.GRASS)
    state._resolve(0, 0, TileVariant.GRASS)

    state.propagate(0, 0)

    assert state.entropy_at(1, 0) == 0
    assert state.entropy_at(2, 0) == 11


# ----------------------------------------------------------------------
# Full generation
# ----------------------------------------------------------------------
def test_three_by_three_with_zero_draws_is_all_grass(scripted):
    state = GridState(3, 3, random_source=scripted(0.0))
    report = state.generate_layout()

    assert state.is_complete()
    assert _all_tiles(state) == [[TileVariant.GRASS] * 3 for _ in range(3)]
    assert (report.pre_collapsed, report.collapsed, report.contradictions) == (9, 0, 0)
    assert state.snapshot().edge_violations() == []


def test_door_in_corner_spreads_door_to_compatible_neighbours(scripted):
    state = GridState(3, 3, random_source=scripted(0.5))
    assert state.set_pre_constraint(0, 0, TileVariant.DOOR)

    report = state.generate_layout()

    assert state.tile_at(0, 0) is TileVariant.DOOR
    for x, y, direction in ((1, 0, Direction.WEST), (0, 1, Direction.NORTH)):
        neighbour = state.tile_at(x, y)
        assert facing_edge(neighbour, direction) == facing_edge(TileVariant.DOOR, direction.opposite)
    assert report.contradictions == 0
    assert state.snapshot().edge_violations() == []


def test_contradictions_are_patched_with_floor(scripted):
    # Draws of 0.5 put every Voronoi seed in the plain class, so only the
    # pinned grass tile is pre-collapsed; its neighbour cannot match it.
    state = GridState(3, 1, random_source=scripted(0.5))
    state.set_pre_constraint(0, 0, TileVariant.GRASS)

    report = state.generate_layout()

    assert _all_tiles(state) == [[TileVariant.GRASS, TileVariant.FLOOR, TileVariant.CORNER_NE]]
    assert (report.pre_collapsed, report.collapsed, report.contradictions) == (1, 1, 1)
    assert state.candidates_at(1, 0) == (TileVariant.FLOOR,)
    assert len(state.snapshot().edge_violations()) == 2


def test_failed_collapse_falls_back_to_default_tile(scripted, monkeypatch):
    monkeypatch.setattr(WaveCell, "collapse", lambda self, source: None)
    state = GridState(2, 2, random_source=scripted(0.5), grass_probability=0.0)

    report = state.generate_layout()

    assert _all_tiles(state) == [[TileVariant.FLOOR] * 2 for _ in range(2)]
    assert report.contradictions == 4


def test_custom_default_tile_is_used_for_patching(scripted):
    state = GridState(3, 1, random_source=scripted(0.5), default_tile=TileVariant.DOOR)
    state.set_pre_constraint(0, 0, TileVariant.GRASS)
    report = state.generate_layout()
    assert report.contradictions == 1
    assert _all_tiles(state) == [[TileVariant.GRASS, TileVariant.DOOR, TileVariant.CORNER_NE]]


def test_non_grass_cells_never_resolve_to_grass():
    state = GridState(10, 10, random_source=get_rng(11).random, grass_probability=0.0)
    state.generate_layout()
    assert state.snapshot().count(TileVariant.GRASS) == 0


def test_pre_constraints_take_precedence_over_grass(scripted):
    state = GridState(4, 4, random_source=scripted(0.0))
    state.set_pre_constraint(2, 2, TileVariant.FLOOR)
    state.generate_layout()
    assert state.tile_at(2, 2) is TileVariant.FLOOR
    assert state.tile_at(0, 0) is TileVariant.GRASS


def test_generation_is_deterministic_for_identical_draws():
    first = GridState(16, 12, random_source=get_rng(1234).random)
    second = GridState(16, 12, random_source=get_rng(1234).random)
    first.set_pre_constraint(3, 4, TileVariant.DOOR)
    second.set_pre_constraint(3, 4, TileVariant.DOOR)

    first.generate_layout()
    second.generate_layout()

    assert first.snapshot() == second.snapshot()


def test_regeneration_reuses_pre_constraints():
    state = GridState(10, 10, random_source=get_rng(5).random)
    state.set_pre_constraint(9, 9, TileVariant.WALL_EAST)
    for _ in range(3):
        state.generate_layout()
        assert state.tile_at(9, 9) is TileVariant.WALL_EAST


@pytest.mark.parametrize("seed", range(8))
def test_every_cell_is_resolved_and_pins_are_honoured(seed):
    rng = get_rng(seed)
    state = GridState(20, 20, random_source=rng.random)
    pins = {
        (rng.randrange(20), rng.randrange(20)): TileVariant(rng.randrange(11))
        for _ in range(5)
    }
    for (x, y), tile in pins.items():
        assert state.set_pre_constraint(x, y, tile)

    report = state.generate_layout()

    assert state.is_complete()
    assert report.total == 400
    for (x, y), tile in pins.items():
        assert state.tile_at(x, y) is tile


@pytest.mark.parametrize("seed", range(6))
def test_layouts_without_contradictions_have_matching_edges(seed):
    state = GridState(12, 12, random_source=get_rng(seed).random, grass_probability=0.0)
    report = state.generate_layout()
    if report.contradictions == 0:
        assert state.snapshot().edge_violations() == []


def test_all_grass_layout_has_matching_edges():
    state = GridState(12, 8, random_source=get_rng(3).random, grass_probability=1.0)
    report = state.generate_layout()
    assert report.contradictions == 0
    assert state.snapshot().count(TileVariant.GRASS) == 96
    assert state.snapshot().edge_violations() == []


def test_reference_grid_is_fully_covered():
    state = GridState.from_params(WfcParams(seed=42))
    state.generate_layout()
    layout = state.snapshot()
    assert (layout.width, layout.height) == (50, 50)
    assert layout.is_complete()
