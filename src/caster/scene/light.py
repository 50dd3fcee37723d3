"""Point light sources."""

from __future__ import annotations

from dataclasses import dataclass

from src.caster.core.color import Color
from src.caster.core.vector import Tuple4


@dataclass(frozen=True)
class PointLight:
    """A light with no size that emits equally in all directions.

    Intensity does not fall off with distance.

    Attributes:
        intensity: Color and brightness of the light.
        position: World-space point the light sits at.
    """

    intensity: Color
    position: Tuple4

    def __post_init__(self) -> None:
        if not self.position.is_point():
            raise ValueError(f"Light position must be a point, got {self.position!r}")
