"""Geometry module for bounding volumes, triangles and meshes.

Components:
    bbox: Axis-aligned bounding box with slab intersection and union
    triangle: Triangle index triple, normals, centroids, ray-triangle test
    smf: Reader/writer for the v/f line mesh format
    mesh: TriangleMesh scene object (flat or smooth normals, per-part hits)
    kernels: Taichi kernels casting batches of rays against triangles/boxes

Ray-triangle intersection follows the pattern:
    t, beta, gamma = intersect_triangle(ray, v1, v2, v3)
"""

from .bbox import BoundingBox
from .kernels import RayCastResult, cast_rays_against_triangles, intersect_box_batch
from .mesh import MeshBuffers, MeshState, TriangleMesh
from .smf import format_smf, parse_smf, read_smf
from .triangle import (
    Triangle,
    add_triangle_fan_end_caps,
    generate_triangle_fan,
    generate_triangle_indexes,
    intersect_triangle,
    triangle_bbox,
    triangle_centroid,
    triangle_normal,
)

__all__ = [
    "BoundingBox",
    # Triangles
    "Triangle",
    "triangle_normal",
    "triangle_centroid",
    "triangle_bbox",
    "intersect_triangle",
    "generate_triangle_indexes",
    "generate_triangle_fan",
    "add_triangle_fan_end_caps",
    # Mesh format
    "parse_smf",
    "read_smf",
    "format_smf",
    # Meshes
    "TriangleMesh",
    "MeshState",
    "MeshBuffers",
    # Batched ray casting
    "RayCastResult",
    "cast_rays_against_triangles",
    "intersect_box_batch",
]
