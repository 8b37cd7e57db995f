"""Three-component vector used by all Python-side geometric code.

``Vector3`` is a small mutable value type. Arithmetic operators return new
vectors; the in-place operators and ``normalize()`` modify the receiver.
Copy with ``copy()`` before mutating a vector that other code may hold.

Example:
    >>> a = Vector3(1.0, 0.0, 0.0)
    >>> b = Vector3(0.0, 1.0, 0.0)
    >>> a.cross(b)
    Vector3(0.0, 0.0, 1.0)
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from typing import TYPE_CHECKING

from src.python.core.errors import MatrixSizeError

if TYPE_CHECKING:
    from src.python.core.matrix import Matrix


class Vector3:
    """A 3D vector of floats.

    Equality is exact component comparison; use
    ``mathutil.vectors_almost_equal`` for tolerant comparisons.

    Attributes:
        x: X component.
        y: Y component.
        z: Z component.
    """

    __slots__ = ("x", "y", "z")

    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> None:
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    # =========================================================================
    # Construction helpers
    # =========================================================================

    @classmethod
    def from_line_string(cls, text: str) -> Vector3:
        """Parse three whitespace separated numbers.

        Raises:
            ValueError: If the text does not hold exactly three numbers.
        """
        parts = text.split()
        if len(parts) != 3:
            raise ValueError(f"Expected 3 components, got {len(parts)}: {text!r}")
        return cls(float(parts[0]), float(parts[1]), float(parts[2]))

    @classmethod
    def from_matrix(cls, m: Matrix) -> Vector3:
        """Build a vector from the first three rows of a column matrix.

        Raises:
            MatrixSizeError: If the matrix has fewer than 3 rows or no columns.
        """
        if m.rows < 3 or m.cols < 1:
            raise MatrixSizeError("vector conversion", m.shape)
        return cls(m.get(0, 0), m.get(1, 0), m.get(2, 0))

    def to_matrix(self) -> Matrix:
        """Return the 4x1 homogeneous column matrix ``[x, y, z, 1]``."""
        from src.python.core.matrix import Matrix

        out = Matrix(4, 1)
        out.set(0, 0, self.x)
        out.set(1, 0, self.y)
        out.set(2, 0, self.z)
        out.set(3, 0, 1.0)
        return out

    def copy(self) -> Vector3:
        return Vector3(self.x, self.y, self.z)

    def assign(self, x: float, y: float, z: float) -> None:
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    # =========================================================================
    # Length and direction
    # =========================================================================

    def magnitude_squared(self) -> float:
        return self.x * self.x + self.y * self.y + self.z * self.z

    def magnitude(self) -> float:
        return math.hypot(self.x, self.y, self.z)

    def normalize(self) -> None:
        """Scale to unit length in place.

        A zero vector is left unchanged, so the result is not guaranteed to
        have unit length.
        """
        mag = self.magnitude()
        if mag != 0.0:
            self /= mag

    def unit(self) -> Vector3:
        """Return a normalized copy (zero stays zero)."""
        v = self.copy()
        v.normalize()
        return v

    def is_nan(self) -> bool:
        return math.isnan(self.x) or math.isnan(self.y) or math.isnan(self.z)

    # =========================================================================
    # Products
    # =========================================================================

    def dot(self, other: Vector3) -> float:
        return dot_product(self, other)

    def cross(self, other: Vector3) -> Vector3:
        return cross_product(self, other)

    # =========================================================================
    # Operators
    # =========================================================================

    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, n: float) -> Vector3:
        return Vector3(self.x * n, self.y * n, self.z * n)

    __rmul__ = __mul__

    def __truediv__(self, n: float) -> Vector3:
        v = self.copy()
        v /= n
        return v

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __iadd__(self, other: Vector3) -> Vector3:
        self.x += other.x
        self.y += other.y
        self.z += other.z
        return self

    def __isub__(self, other: Vector3) -> Vector3:
        self.x -= other.x
        self.y -= other.y
        self.z -= other.z
        return self

    def __imul__(self, n: float) -> Vector3:
        self.x *= n
        self.y *= n
        self.z *= n
        return self

    def __itruediv__(self, n: float) -> Vector3:
        if n == 0.0:
            raise ZeroDivisionError("Vector3 division by zero")
        inverse = 1.0 / n
        self.x *= inverse
        self.y *= inverse
        self.z *= inverse
        return self

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.x == other.x and self.y == other.y and self.z == other.z

    # Mutable, so not hashable.
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Vector3({self.x!r}, {self.y!r}, {self.z!r})"

    def __str__(self) -> str:
        return f"[{self.x:g}, {self.y:g}, {self.z:g}]"


def dot_product(a: Vector3, b: Vector3) -> float:
    return a.x * b.x + a.y * b.y + a.z * b.z


def cross_product(a: Vector3, b: Vector3) -> Vector3:
    """Right-handed cross product ``a x b``."""
    return Vector3(
        a.y * b.z - a.z * b.y,
        -(a.x * b.z - a.z * b.x),
        a.x * b.y - a.y * b.x,
    )
