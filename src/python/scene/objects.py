"""Scene object contract and identity allocation.

Every object placed in a scene exposes a whole-object capability set:

    hit(ray), get_bbox(), get_centroid()

Objects that can be broken into independently testable parts (a mesh into
its triangles) derive from ``DivisibleSceneObject`` and additionally expose:

    num_parts(), get_part_bbox(i), get_part_centroid(i), part_hit(ray, i)

An external spatial structure checks ``obj.divisible`` and, for divisible
objects, works at part granularity without touching whole-object geometry.
Non-divisible objects report zero parts and reject per-part queries with
``NotDivisibleError`` rather than answering with whole-object data.

Identity:
    Each object takes a unique, increasing integer id from an
    ``IdAllocator`` when it is constructed. Pass ``id_allocator=`` to control
    the sequence (tests, or one allocator per ``Scene``); otherwise the
    module-level default allocator is used.

Surfaces:
    ``surface`` is a shared reference. Several objects may hold the same
    ``Surface``, and changing it through any of them changes it for all.
"""

from __future__ import annotations

import abc
import itertools
import threading
from typing import TYPE_CHECKING, ClassVar

from src.python.core.errors import NotDivisibleError, PartIndexError

if TYPE_CHECKING:
    from src.python.core.ray import Ray
    from src.python.core.vector import Vector3
    from src.python.geometry.bbox import BoundingBox
    from src.python.materials.surface import Surface
    from src.python.scene.intersection import HitInfo


class IdAllocator:
    """Hands out unique, monotonically increasing object ids.

    Ids start at ``start`` (default 1) so that 0 never names an object.
    Allocation is guarded by a lock; everything else about scene
    construction still assumes a single writer.
    """

    def __init__(self, start: int = 1) -> None:
        self._start = start
        self._counter = itertools.count(start)
        self._next = start
        self._lock = threading.Lock()

    def allocate(self) -> int:
        with self._lock:
            value = next(self._counter)
            self._next = value + 1
            return value

    def peek(self) -> int:
        """The id the next ``allocate()`` call will return."""
        return self._next

    def reset(self) -> None:
        with self._lock:
            self._counter = itertools.count(self._start)
            self._next = self._start


_default_allocator = IdAllocator()


def default_id_allocator() -> IdAllocator:
    """The allocator used by objects constructed without ``id_allocator``."""
    return _default_allocator


class SceneObject(abc.ABC):
    """Base class for anything that can be placed in a scene.

    Subclasses implement ``hit``, ``get_bbox`` and ``get_centroid``.

    Attributes:
        surface: Shared reflectance description, or None.
        type_name: Human-readable object type.
        divisible: Whether per-part queries are supported.
    """

    type_name: ClassVar[str] = "SceneObject"
    divisible: ClassVar[bool] = False

    def __init__(
        self,
        surface: Surface | None = None,
        *,
        id_allocator: IdAllocator | None = None,
    ) -> None:
        allocator = id_allocator if id_allocator is not None else _default_allocator
        self._id = allocator.allocate()
        self.surface = surface

    @property
    def id(self) -> int:
        return self._id

    @abc.abstractmethod
    def hit(self, ray: Ray) -> HitInfo | None:
        """Closest intersection of ``ray`` with the whole object, or None."""

    @abc.abstractmethod
    def get_bbox(self) -> BoundingBox:
        """Axis-aligned box enclosing the whole object."""

    @abc.abstractmethod
    def get_centroid(self) -> Vector3:
        """Representative center point of the whole object."""

    # Part queries: a non-divisible object has no parts.

    def num_parts(self) -> int:
        return 0

    def get_part_bbox(self, part_index: int) -> BoundingBox:
        raise NotDivisibleError(f"{self.type_name} {self._id} is not divisible into parts")

    def get_part_centroid(self, part_index: int) -> Vector3:
        raise NotDivisibleError(f"{self.type_name} {self._id} is not divisible into parts")

    def part_hit(self, ray: Ray, part_index: int) -> HitInfo | None:
        raise NotDivisibleError(f"{self.type_name} {self._id} is not divisible into parts")

    def __repr__(self) -> str:
        return f"<{self.type_name} id={self._id}>"


class DivisibleSceneObject(SceneObject):
    """A scene object made of independently testable parts.

    Every part index in ``[0, num_parts())`` must support
    ``get_part_bbox``, ``get_part_centroid`` and ``part_hit``.
    """

    divisible: ClassVar[bool] = True

    @abc.abstractmethod
    def num_parts(self) -> int:
        """Number of parts."""

    @abc.abstractmethod
    def get_part_bbox(self, part_index: int) -> BoundingBox:
        """Axis-aligned box enclosing one part."""

    @abc.abstractmethod
    def get_part_centroid(self, part_index: int) -> Vector3:
        """Center point of one part."""

    @abc.abstractmethod
    def part_hit(self, ray: Ray, part_index: int) -> HitInfo | None:
        """Intersection of ``ray`` with one part, or None."""

    def check_part_index(self, part_index: int) -> None:
        """Raise ``PartIndexError`` unless ``0 <= part_index < num_parts()``."""
        count = self.num_parts()
        if not 0 <= part_index < count:
            raise PartIndexError(
                f"Part index {part_index} out of range for {self.type_name} with {count} parts"
            )
