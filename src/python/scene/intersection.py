"""Ray intersection records and nearest-hit accumulation.

A ``HitInfo`` describes one ray/object intersection. A ``ShadingInfo``
collects the hits found for a single ray: it always remembers the most
recent one and keeps the closest one seen so far (smallest ``t``).

Example:
    >>> shading = intersect_scene(scene, Ray(eye, direction))
    >>> if shading.has_hit:
    ...     hit = shading.closest_hit
    ...     print(hit.obj.id, hit.t, hit.part_index)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from src.python.core.errors import NoHitError
from src.python.core.vector import Vector3

if TYPE_CHECKING:
    from src.python.core.ray import Ray
    from src.python.scene.objects import SceneObject
    from src.python.scene.scene import Scene


@dataclass
class HitInfo:
    """Record of a ray-object intersection.

    Attributes:
        t: The ray parameter at the intersection.
        point: World-space hit point, ``ray.point_at(t)``.
        normal: Unit surface normal at the hit point.
        obj: The object that was hit.
        part_index: Index of the part that was hit, or -1 when the object is
            not divided into parts.
        u: First surface coordinate. For triangle meshes this is the
            barycentric weight of the triangle's second vertex.
        v: Second surface coordinate. For triangle meshes this is the
            barycentric weight of the triangle's third vertex.
    """

    t: float
    point: Vector3 = field(default_factory=Vector3)
    normal: Vector3 = field(default_factory=Vector3)
    obj: SceneObject | None = None
    part_index: int = -1
    u: float = 0.0
    v: float = 0.0


class ShadingInfo:
    """Accumulates the hits of a single ray.

    ``add_hit`` always replaces the latest hit. It replaces the closest hit
    when none has been recorded yet or when the new hit is strictly nearer,
    so among hits at equal ``t`` the first one recorded is kept.
    """

    def __init__(self) -> None:
        self._latest: HitInfo | None = None
        self._closest: HitInfo | None = None

    def add_hit(self, hit: HitInfo) -> None:
        self._latest = hit
        if self._closest is None or hit.t < self._closest.t:
            self._closest = hit

    @property
    def has_hit(self) -> bool:
        return self._closest is not None

    @property
    def closest_hit(self) -> HitInfo:
        """The hit with the smallest ``t`` recorded so far.

        Raises:
            NoHitError: If no hit has been recorded.
        """
        if self._closest is None:
            raise NoHitError("No hit has been recorded")
        return self._closest

    @property
    def latest_hit(self) -> HitInfo:
        """The most recently recorded hit.

        Raises:
            NoHitError: If no hit has been recorded.
        """
        if self._latest is None:
            raise NoHitError("No hit has been recorded")
        return self._latest

    def clear(self) -> None:
        self._latest = None
        self._closest = None

    def __repr__(self) -> str:
        return f"ShadingInfo(closest={self._closest!r})"


def intersect_scene(scene: Scene, ray: Ray, shading: ShadingInfo | None = None) -> ShadingInfo:
    """Test a ray against every object in a scene.

    Objects are visited in ascending id order and each whole-object hit is
    added to the accumulator, so ties in ``t`` resolve to the lower id.

    Args:
        scene: The scene to test.
        ray: The ray to trace.
        shading: Accumulator to add hits to. A new one is created when None.

    Returns:
        The accumulator holding every hit found.
    """
    if shading is None:
        shading = ShadingInfo()

    def _test(obj: SceneObject) -> None:
        hit = obj.hit(ray)
        if hit is not None:
            shading.add_hit(hit)

    scene.run_on_objects(_test)
    return shading
