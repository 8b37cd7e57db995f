"""Axis-aligned bounding box with ray slab intersection.

The box is stored as a ``min``/``max`` corner pair with ``min <= max`` on
every axis. That invariant is checked whenever both corners are assigned and
is preserved by ``union``.

Ray intersection uses the slab test: for each axis the ray is clipped
against the two planes bounding the box on that axis, and the parametric
entry/exit ranges are intersected across axes. Zero direction components
are handled with IEEE semantics (see ``mathutil.ieee_divide``) so that rays
parallel to a slab are accepted or rejected based on whether the origin
lies between its planes.

Example:
    >>> box = BoundingBox(Vector3(1, -1, -1), Vector3(2, 1, 1))
    >>> box.intersect(Ray(Vector3(0, 0, 0), Vector3(1, 0, 0)))
    (True, 1.0, 2.0)
"""

from __future__ import annotations

from collections.abc import Iterable

from src.python.core.errors import InvalidBoundsError
from src.python.core.mathutil import ieee_divide, tmax, tmax3, tmin, tmin3
from src.python.core.ray import Ray
from src.python.core.vector import Vector3


class BoundingBox:
    """An axis-aligned box given by its minimum and maximum corners."""

    __slots__ = ("_min", "_max")

    def __init__(self, min_corner: Vector3, max_corner: Vector3) -> None:
        self._min = Vector3()
        self._max = Vector3()
        self.set(min_corner, max_corner)

    @classmethod
    def from_points(cls, points: Iterable[Vector3]) -> BoundingBox:
        """Smallest box containing every point.

        Raises:
            ValueError: If no points are given.
        """
        it = iter(points)
        try:
            first = next(it)
        except StopIteration:
            raise ValueError("Cannot bound an empty set of points") from None
        lo = first.copy()
        hi = first.copy()
        for p in it:
            lo.assign(tmin(lo.x, p.x), tmin(lo.y, p.y), tmin(lo.z, p.z))
            hi.assign(tmax(hi.x, p.x), tmax(hi.y, p.y), tmax(hi.z, p.z))
        return cls(lo, hi)

    @property
    def min(self) -> Vector3:
        return self._min.copy()

    @property
    def max(self) -> Vector3:
        return self._max.copy()

    def set(self, min_corner: Vector3, max_corner: Vector3) -> None:
        """Assign both corners together.

        Raises:
            InvalidBoundsError: If ``min_corner`` exceeds ``max_corner`` on
                any axis.
        """
        if min_corner.x > max_corner.x or min_corner.y > max_corner.y or min_corner.z > max_corner.z:
            raise InvalidBoundsError(f"Box min {min_corner} exceeds max {max_corner}")
        self._min = min_corner.copy()
        self._max = max_corner.copy()

    def copy(self) -> BoundingBox:
        return BoundingBox(self._min, self._max)

    def intersect(self, ray: Ray) -> tuple[bool, float, float]:
        """Intersect a ray with the box.

        Args:
            ray: The ray to test. A zero direction component is allowed.

        Returns:
            ``(hit, t_near, t_far)``. ``t_near``/``t_far`` are the parameters
            where the ray enters and leaves the box; they are returned even
            on a miss. The ray hits when ``t_far >= t_near`` and
            ``t_far >= 0``, so a ray starting inside the box reports
            ``t_near <= 0``.
        """
        o = ray.origin
        d = ray.direction
        lo = self._min
        hi = self._max

        x1 = ieee_divide(lo.x - o.x, d.x)
        x2 = ieee_divide(hi.x - o.x, d.x)
        y1 = ieee_divide(lo.y - o.y, d.y)
        y2 = ieee_divide(hi.y - o.y, d.y)
        z1 = ieee_divide(lo.z - o.z, d.z)
        z2 = ieee_divide(hi.z - o.z, d.z)

        t_near = tmax3(tmin(x1, x2), tmin(y1, y2), tmin(z1, z2))
        t_far = tmin3(tmax(x1, x2), tmax(y1, y2), tmax(z1, z2))

        hit = t_far >= t_near and t_far >= 0.0
        return hit, t_near, t_far

    def union(self, other: BoundingBox) -> None:
        """Grow this box in place to also enclose ``other``."""
        a_lo, a_hi = self._min, self._max
        b_lo, b_hi = other._min, other._max
        self._min = Vector3(tmin(a_lo.x, b_lo.x), tmin(a_lo.y, b_lo.y), tmin(a_lo.z, b_lo.z))
        self._max = Vector3(tmax(a_hi.x, b_hi.x), tmax(a_hi.y, b_hi.y), tmax(a_hi.z, b_hi.z))

    def merged(self, other: BoundingBox) -> BoundingBox:
        """Return the union of this box and ``other`` without modifying either."""
        box = self.copy()
        box.union(other)
        return box

    def contains(self, point: Vector3) -> bool:
        lo, hi = self._min, self._max
        return lo.x <= point.x <= hi.x and lo.y <= point.y <= hi.y and lo.z <= point.z <= hi.z

    def center(self) -> Vector3:
        return (self._min + self._max) * 0.5

    def extent(self) -> Vector3:
        return self._max - self._min

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundingBox):
            return NotImplemented
        return self._min == other._min and self._max == other._max

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"BoundingBox(min={self._min!r}, max={self._max!r})"
