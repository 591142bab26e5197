"""Random sources consumed by layout generation."""
from __future__ import annotations

import random
from typing import Iterable, Protocol, Sequence, TypeVar, Union, runtime_checkable

_T = TypeVar("_T")


@runtime_checkable
class RandomSource(Protocol):
    """Zero-argument callable returning a uniform float in ``[0, 1)``."""

    def __call__(self) -> float:
        ...


def get_rng(seed: int | None = None) -> random.Random:
    """Return a :class:`random.Random` instance optionally seeded."""

    rng = random.Random()
    if seed is not None:
        rng.seed(seed)
    return rng


def as_random_source(source: Union[random.Random, RandomSource, None]) -> RandomSource:
    """Adapt ``source`` to the plain ``() -> float`` contract.

    ``None`` falls back to the module-level :func:`random.random`.
    """

    if source is None:
        return random.random
    if isinstance(source, random.Random):
        return source.random
    if not callable(source):
        raise TypeError("random source must be callable or a random.Random instance")
    return source


def pick_index(source: RandomSource, length: int) -> int:
    """Map one draw from ``source`` onto an index of a ``length`` sequence."""

    if length <= 0:
        raise IndexError("cannot pick from an empty sequence")
    index = int(source() * length)
    return min(max(index, 0), length - 1)


def rand_choice(source: RandomSource, sequence: Sequence[_T]) -> _T:
    """Return a uniformly chosen element from ``sequence`` using ``source``."""

    if not sequence:
        raise IndexError("cannot choose from an empty sequence")
    return sequence[pick_index(source, len(sequence))]


class ScriptedRandom:
    """Replay a fixed sequence of draws.

    Useful to make a generation run reproducible: every call returns the next
    value, wrapping around when ``cycle`` is enabled.
    """

    def __init__(self, values: Iterable[float], *, cycle: bool = True) -> None:
        self._values = [float(value) for value in values]
        if not self._values:
            raise ValueError("ScriptedRandom needs at least one value")
        for value in self._values:
            if not 0.0 <= value < 1.0:
                raise ValueError(f"scripted value {value!r} lies outside [0, 1)")
        self._cycle = cycle
        self._position = 0

    @property
    def calls(self) -> int:
        """Number of draws served so far."""

        return self._position

    def __call__(self) -> float:
        if self._position >= len(self._values) and not self._cycle:
            raise IndexError("scripted random sequence exhausted")
        value = self._values[self._position % len(self._values)]
        self._position += 1
        return value


__all__ = [
    "RandomSource",
    "ScriptedRandom",
    "as_random_source",
    "get_rng",
    "pick_index",
    "rand_choice",
]
