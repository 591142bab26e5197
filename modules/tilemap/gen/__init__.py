"""Generation parameters, random sources and the Voronoi grass pre-pass."""

from .params import WfcParams
from .random import RandomSource, ScriptedRandom, as_random_source, get_rng, pick_index, rand_choice
from .voronoi import VoronoiSeed, classify_cells, generate_grass_mask, scatter_seeds

__all__ = [
    "RandomSource",
    "ScriptedRandom",
    "VoronoiSeed",
    "WfcParams",
    "as_random_source",
    "classify_cells",
    "generate_grass_mask",
    "get_rng",
    "pick_index",
    "rand_choice",
    "scatter_seeds",
]
