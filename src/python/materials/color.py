"""Floating point RGB color.

Components are nominally in [0, 1] but arithmetic does not clamp, so sums of
light contributions may exceed 1 until ``clipped()`` is applied.

Example:
    >>> Color(0.5, 0.5, 0.5) * 2.0
    Color(r=1.0, g=1.0, b=1.0)
    >>> (Color(0.8, 0.2, 0.2) + Color(0.5, 0.0, 0.0)).clipped()
    Color(r=1.0, g=0.2, b=0.2)
"""

from __future__ import annotations

from dataclasses import dataclass

from src.python.core.mathutil import clip


@dataclass(frozen=True)
class Color:
    """An immutable RGB triple.

    Attributes:
        r: Red component.
        g: Green component.
        b: Blue component.
    """

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0

    @classmethod
    def white(cls) -> Color:
        return cls(1.0, 1.0, 1.0)

    @classmethod
    def black(cls) -> Color:
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def from_24bit(cls, r: int, g: int, b: int) -> Color:
        """Color from 8-bit channel values (0-255)."""
        return cls(r / 255.0, g / 255.0, b / 255.0)

    def to_24bit(self) -> tuple[int, int, int]:
        """8-bit channel values, clamped to [0, 255]."""
        c = self.clipped()
        return int(c.r * 255.0), int(c.g * 255.0), int(c.b * 255.0)

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.r, self.g, self.b)

    def clipped(self) -> Color:
        """Copy with every component clamped to [0, 1]."""
        return Color(clip(self.r, 0.0, 1.0), clip(self.g, 0.0, 1.0), clip(self.b, 0.0, 1.0))

    def __add__(self, other: Color) -> Color:
        return Color(self.r + other.r, self.g + other.g, self.b + other.b)

    def __sub__(self, other: Color) -> Color:
        return Color(self.r - other.r, self.g - other.g, self.b - other.b)

    def __mul__(self, other: Color | float) -> Color:
        # Color * Color modulates component-wise
        if isinstance(other, Color):
            return Color(self.r * other.r, self.g * other.g, self.b * other.b)
        return Color(self.r * other, self.g * other, self.b * other)

    def __rmul__(self, n: float) -> Color:
        return self * n


def max_abs_component_delta(a: Color, b: Color) -> float:
    """Largest absolute per-channel difference between two colors."""
    return max(abs(a.r - b.r), abs(a.g - b.g), abs(a.b - b.b))
