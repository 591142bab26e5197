"""User-facing parameters for tile layout generation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:  # pragma: no cover - import only used for annotations
    from config.config_loader import ConfigLoader


@dataclass(slots=True)
class WfcParams:
    """Configuration bundle describing the grid and its grass pre-pass."""

    #: Reference dimensions of the layout grid.
    DEFAULT_SIZE: ClassVar[tuple[int, int]] = (50, 50)
    DEFAULT_SEED_COUNT: ClassVar[int] = 10
    DEFAULT_GRASS_PROBABILITY: ClassVar[float] = 0.4
    #: Above this many seed-distance checks the Voronoi pass gets noticeably slow.
    SCALE_WARNING_THRESHOLD: ClassVar[int] = 4_000_000

    width: int = DEFAULT_SIZE[0]
    height: int = DEFAULT_SIZE[1]
    seed_count: int = DEFAULT_SEED_COUNT
    grass_probability: float = DEFAULT_GRASS_PROBABILITY
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be positive")
        if self.seed_count < 0:
            raise ValueError("seed_count cannot be negative")
        if not 0.0 <= self.grass_probability <= 1.0:
            raise ValueError("grass_probability must lie between 0 and 1")

    @property
    def dimensions(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def distance_checks(self) -> int:
        """Number of squared-distance evaluations one Voronoi pass performs."""

        return self.width * self.height * self.seed_count

    @classmethod
    def from_config(cls, loader: "ConfigLoader") -> "WfcParams":
        """Build parameters from the ``tilemap`` section of a YAML config."""

        default_width, default_height = cls.DEFAULT_SIZE
        seed = loader.get("tilemap", "seed") if loader.has("tilemap", "seed") else None
        return cls(
            width=int(loader.get("tilemap", "width", default=default_width)),
            height=int(loader.get("tilemap", "height", default=default_height)),
            seed_count=int(loader.get("tilemap", "seed_count", default=cls.DEFAULT_SEED_COUNT)),
            grass_probability=float(
                loader.get("tilemap", "grass_probability", default=cls.DEFAULT_GRASS_PROBABILITY)
            ),
            seed=None if seed is None else int(seed),
        )


__all__ = ["WfcParams"]
