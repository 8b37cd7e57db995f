"""Ray data structure for Python-side intersection queries.

A ray is an origin point and a direction vector. The direction is not
required to be unit length, so the ray parameter ``t`` measures distance in
units of ``|direction|``.

Example:
    >>> ray = Ray(Vector3(0.0, 0.0, 0.0), Vector3(0.0, 0.0, -1.0))
    >>> ray.point_at(5.0)
    Vector3(0.0, 0.0, -5.0)
"""

from __future__ import annotations

from src.python.core.vector import Vector3


class Ray:
    """An immutable ray.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction vector of the ray.
    """

    __slots__ = ("_origin", "_direction")

    def __init__(self, origin: Vector3, direction: Vector3) -> None:
        self._origin = origin.copy()
        self._direction = direction.copy()

    @classmethod
    def from_points(cls, start: Vector3, through: Vector3) -> Ray:
        """Create a ray starting at ``start`` passing through ``through`` at t=1."""
        return cls(start, through - start)

    @property
    def origin(self) -> Vector3:
        return self._origin.copy()

    @property
    def direction(self) -> Vector3:
        return self._direction.copy()

    def point_at(self, t: float) -> Vector3:
        """Compute the point ``origin + direction * t``.

        Args:
            t: The parameter value. Positive values are in front of the origin.

        Returns:
            The point along the ray.
        """
        return self._origin + self._direction * t

    def __repr__(self) -> str:
        return f"Ray(origin={self._origin!r}, direction={self._direction!r})"
