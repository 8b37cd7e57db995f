"""Scene container for the camera, objects and lights.

The scene owns everything added to it:

- at most one ``Camera``
- scene objects keyed by their integer id
- point lights, kept in insertion order with no de-duplication

Objects are enumerated in ascending id order, which is also creation order
for objects built from the same allocator.

Example:
    >>> scene = Scene()
    >>> mesh = TriangleMesh.from_smf("cube.smf", id_allocator=scene.id_allocator)
    >>> scene.add_object(mesh)
    >>> scene.find_object(mesh.id) is mesh
    True
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

from src.python.geometry.bbox import BoundingBox
from src.python.scene.light import Light
from src.python.scene.objects import IdAllocator, SceneObject

if TYPE_CHECKING:
    from src.python.camera.pinhole import Camera

logger = logging.getLogger(__name__)


class Scene:
    """Owns and indexes the contents of a scene.

    Attributes:
        id_allocator: Allocator for objects built for this scene. Objects
            created with another allocator can still be added as long as
            their ids do not collide.
    """

    def __init__(self, id_allocator: IdAllocator | None = None) -> None:
        self.id_allocator = id_allocator if id_allocator is not None else IdAllocator()
        self._camera: Camera | None = None
        self._objects: dict[int, SceneObject] = {}
        self._lights: list[Light] = []

    # =========================================================================
    # Camera
    # =========================================================================

    @property
    def camera(self) -> Camera | None:
        return self._camera

    def set_camera(self, camera: Camera | None) -> None:
        """Replace the scene camera. Passing None removes it."""
        self._camera = camera

    # =========================================================================
    # Objects
    # =========================================================================

    def add_object(self, obj: SceneObject) -> None:
        """Add an object under its id.

        Raises:
            ValueError: If an object with the same id is already present.
        """
        if obj.id in self._objects:
            raise ValueError(f"Scene already holds an object with id {obj.id}")
        self._objects[obj.id] = obj
        logger.debug("Added %r", obj)

    def delete_object(self, obj_or_id: SceneObject | int) -> SceneObject | None:
        """Remove an object given the object itself or its id.

        Returns:
            The removed object, or None if it was not in the scene.
        """
        object_id = obj_or_id if isinstance(obj_or_id, int) else obj_or_id.id
        removed = self._objects.pop(object_id, None)
        if removed is not None:
            logger.debug("Deleted %r", removed)
        return removed

    def find_object(self, object_id: int) -> SceneObject | None:
        return self._objects.get(object_id)

    def run_on_objects(self, fn: Callable[[SceneObject], object]) -> None:
        """Call ``fn`` on every object in ascending id order.

        ``fn`` must not add or delete scene objects.
        """
        for object_id in sorted(self._objects):
            fn(self._objects[object_id])

    def objects(self) -> list[SceneObject]:
        """Every object, in ascending id order."""
        return [self._objects[object_id] for object_id in sorted(self._objects)]

    def bbox(self) -> BoundingBox | None:
        """Union of every object's bounding box, or None for an empty scene."""
        box: BoundingBox | None = None
        for obj in self.objects():
            obj_box = obj.get_bbox()
            if box is None:
                box = obj_box.copy()
            else:
                box.union(obj_box)
        return box

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, SceneObject):
            return self._objects.get(item.id) is item
        if isinstance(item, int):
            return item in self._objects
        return False

    def __iter__(self) -> Iterator[SceneObject]:
        return iter(self.objects())

    # =========================================================================
    # Lights
    # =========================================================================

    def add_light(self, light: Light) -> None:
        self._lights.append(light)

    def delete_light(self, light: Light) -> bool:
        """Remove the first occurrence of exactly this light object.

        Returns:
            True if the light was found and removed.
        """
        for index, held in enumerate(self._lights):
            if held is light:
                del self._lights[index]
                return True
        return False

    @property
    def lights(self) -> tuple[Light, ...]:
        """Lights in insertion order."""
        return tuple(self._lights)

    def __repr__(self) -> str:
        return f"<Scene objects={len(self._objects)} lights={len(self._lights)}>"
