"""Scene module for object ownership and hit accumulation.

Components:
    objects: SceneObject contract, divisible objects and id allocation
    intersection: HitInfo records, ShadingInfo accumulator, intersect_scene
    light: Point lights
    scene: Scene container holding the camera, objects and lights

Objects are keyed by their integer id. Each Scene carries its own
IdAllocator so that ids are deterministic per scene:

    >>> scene = Scene()
    >>> mesh = TriangleMesh(id_allocator=scene.id_allocator)
    >>> scene.add_object(mesh)
"""

from .intersection import HitInfo, ShadingInfo, intersect_scene
from .light import Light
from .objects import DivisibleSceneObject, IdAllocator, SceneObject, default_id_allocator
from .scene import Scene

__all__ = [
    "SceneObject",
    "DivisibleSceneObject",
    "IdAllocator",
    "default_id_allocator",
    "HitInfo",
    "ShadingInfo",
    "intersect_scene",
    "Light",
    "Scene",
]
