"""Geometric core of a ray-tracing scene representation.

This package provides the spatial primitives and scene-object model a ray
tracer is built on:
- Vectors, matrices and homogeneous transforms
- Axis-aligned bounding boxes with slab intersection
- Triangle meshes with flat or smooth normals and per-triangle hit testing
- A scene container keyed by object id, with nearest-hit accumulation
- Batched ray casting with Taichi kernels

Subpackages:
    core: Vector, matrix, ray, transforms, tolerant math and errors
    geometry: Bounding boxes, triangles, mesh loading, meshes and kernels
    materials: Colors, surfaces and shared materials
    scene: Scene objects, hit records, lights and the scene container
    camera: Pinhole camera with primary ray generation
    preview: Depth/normal visualisation and PNG export
"""

__version__ = "0.1.0"
