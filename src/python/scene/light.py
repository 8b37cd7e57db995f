"""Point lights."""

from __future__ import annotations

from dataclasses import dataclass, field

from src.python.core.vector import Vector3
from src.python.materials.color import Color


@dataclass(eq=False)
class Light:
    """A point light.

    Lights compare by identity so that a scene can hold two lights at the
    same position and remove exactly the one it was given.

    Attributes:
        location: World-space position.
        color: Emitted color.
    """

    location: Vector3 = field(default_factory=Vector3)
    color: Color = field(default_factory=Color.white)

    def __post_init__(self) -> None:
        self.location = self.location.copy()
