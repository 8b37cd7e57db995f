"""Data-parallel ray casting against triangle meshes and boxes.

This module provides Taichi counterparts of the scalar intersection code in
``triangle.py`` and ``bbox.py``. Each ray is an independent task, so a batch
of rays (for example every primary ray of an image) is tested in parallel
while the triangles of a mesh are scanned serially per ray, keeping the
closest hit exactly as ``TriangleMesh.hit`` does.

Arrays cross the Python/Taichi boundary as NumPy ndarrays:

- vertices: (N, 3) float32
- triangles: (M, 3) int32, 0-based vertex indices
- origins, directions: (R, 3) float32
- bbox: (2, 3) float32, min corner then max corner

The caller initialises Taichi (``ti.init``) before using anything here.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> result = cast_rays_against_triangles(vertices, triangles, origins, directions)
    >>> result.t[result.hit_mask]
"""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.python.config import EPSILON
from src.python.geometry.bbox import BoundingBox

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


# =============================================================================
# Intersection records
# =============================================================================


@ti.dataclass
class TriangleHit:
    """Result of a single ray-triangle test inside a kernel.

    Attributes:
        hit: 1 if the ray hit the triangle, 0 otherwise.
        t: Ray parameter of the hit. Only valid if hit == 1.
        beta: Barycentric weight of the second vertex. Only valid if hit == 1.
        gamma: Barycentric weight of the third vertex. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    beta: ti.f32
    gamma: ti.f32


@ti.dataclass
class SlabHit:
    """Result of a ray-box slab test inside a kernel.

    Attributes:
        hit: 1 if the ray hit the box, 0 otherwise.
        t_near: Ray parameter where the ray enters the box.
        t_far: Ray parameter where the ray leaves the box.
    """

    hit: ti.i32
    t_near: ti.f32
    t_far: ti.f32


# =============================================================================
# Taichi functions
# =============================================================================


# Stands in for +-inf: fast-math kernels may not honour IEEE infinities
_FAR = 1.0e30


@ti.func
def _slab_axis(origin: ti.f32, direction: ti.f32, lo: ti.f32, hi: ti.f32):
    """Entry and exit parameters of a ray against one slab.

    A zero direction component is resolved without dividing by it: inside
    the slab the axis never limits the ray, outside it the ray misses.
    """
    entry = -_FAR
    leave = _FAR
    if direction != 0.0:
        t1 = (lo - origin) / direction
        t2 = (hi - origin) / direction
        entry = ti.min(t1, t2)
        leave = ti.max(t1, t2)
    elif origin < lo or origin > hi:
        entry = _FAR
        leave = -_FAR
    return entry, leave


@ti.func
def intersect_triangle_ti(
    ray_origin: vec3,
    ray_direction: vec3,
    v1: vec3,
    v2: vec3,
    v3: vec3,
    epsilon: ti.f32,
) -> TriangleHit:
    """Cramer's rule ray-triangle intersection.

    Same system and rejection rules as ``triangle.intersect_triangle``.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        v1: First triangle vertex.
        v2: Second triangle vertex.
        v3: Third triangle vertex.
        epsilon: Smallest accepted ray parameter.

    Returns:
        A TriangleHit. Check the hit field to determine if intersection occurred.
    """
    did_hit = 0
    hit_t = 0.0
    hit_beta = 0.0
    hit_gamma = 0.0

    a = v1[0] - v2[0]
    b = v1[0] - v3[0]
    c = ray_direction[0]

    d = v1[1] - v2[1]
    e = v1[1] - v3[1]
    f = ray_direction[1]

    g = v1[2] - v2[2]
    h = v1[2] - v3[2]
    i = ray_direction[2]

    ei_fh = e * i - f * h
    di_fg = d * i - f * g
    dh_eg = d * h - e * g

    det_a = a * ei_fh - b * di_fg + c * dh_eg

    # A ray parallel to the triangle plane never hits
    if det_a != 0.0:
        inv_det = 1.0 / det_a
        rh = v1 - ray_origin

        beta = (rh[0] * ei_fh - b * (rh[1] * i - f * rh[2]) + c * (rh[1] * h - e * rh[2])) * inv_det
        gamma = (a * (rh[1] * i - f * rh[2]) - rh[0] * di_fg + c * (d * rh[2] - rh[1] * g)) * inv_det
        t = (a * (e * rh[2] - rh[1] * h) - b * (d * rh[2] - rh[1] * g) + rh[0] * dh_eg) * inv_det

        if beta >= 0.0 and gamma >= 0.0 and beta + gamma <= 1.0 and t >= epsilon:
            did_hit = 1
            hit_t = t
            hit_beta = beta
            hit_gamma = gamma

    return TriangleHit(hit=did_hit, t=hit_t, beta=hit_beta, gamma=hit_gamma)


@ti.func
def slab_intersect_ti(ray_origin: vec3, ray_direction: vec3, box_min: vec3, box_max: vec3) -> SlabHit:
    """Slab test of a ray against an axis-aligned box.

    Agrees with ``BoundingBox.intersect`` except for an origin lying exactly
    on a face plane of an axis the ray runs parallel to, which counts as
    inside here.
    """
    x_in, x_out = _slab_axis(ray_origin[0], ray_direction[0], box_min[0], box_max[0])
    y_in, y_out = _slab_axis(ray_origin[1], ray_direction[1], box_min[1], box_max[1])
    z_in, z_out = _slab_axis(ray_origin[2], ray_direction[2], box_min[2], box_max[2])

    t_near = ti.max(ti.max(x_in, y_in), z_in)
    t_far = ti.min(ti.min(x_out, y_out), z_out)

    did_hit = 0
    if t_far >= t_near and t_far >= 0.0:
        did_hit = 1

    return SlabHit(hit=did_hit, t_near=t_near, t_far=t_far)


# =============================================================================
# Kernels
# =============================================================================


@ti.kernel
def _cast_rays_kernel(
    vertices: ti.types.ndarray(dtype=ti.f32, ndim=2),
    triangles: ti.types.ndarray(dtype=ti.i32, ndim=2),
    origins: ti.types.ndarray(dtype=ti.f32, ndim=2),
    directions: ti.types.ndarray(dtype=ti.f32, ndim=2),
    box: ti.types.ndarray(dtype=ti.f32, ndim=2),
    use_box: ti.i32,
    epsilon: ti.f32,
    out_t: ti.types.ndarray(dtype=ti.f32, ndim=1),
    out_part: ti.types.ndarray(dtype=ti.i32, ndim=1),
    out_beta: ti.types.ndarray(dtype=ti.f32, ndim=1),
    out_gamma: ti.types.ndarray(dtype=ti.f32, ndim=1),
):
    for r in range(origins.shape[0]):
        o = vec3(origins[r, 0], origins[r, 1], origins[r, 2])
        ray_dir = vec3(directions[r, 0], directions[r, 1], directions[r, 2])

        best_part = -1
        best_t = 0.0
        best_beta = 0.0
        best_gamma = 0.0

        candidate = 1
        if use_box != 0:
            box_min = vec3(box[0, 0], box[0, 1], box[0, 2])
            box_max = vec3(box[1, 0], box[1, 1], box[1, 2])
            slab = slab_intersect_ti(o, ray_dir, box_min, box_max)
            candidate = slab.hit

        if candidate != 0:
            for k in range(triangles.shape[0]):
                i0 = triangles[k, 0]
                i1 = triangles[k, 1]
                i2 = triangles[k, 2]
                v1 = vec3(vertices[i0, 0], vertices[i0, 1], vertices[i0, 2])
                v2 = vec3(vertices[i1, 0], vertices[i1, 1], vertices[i1, 2])
                v3 = vec3(vertices[i2, 0], vertices[i2, 1], vertices[i2, 2])

                rec = intersect_triangle_ti(o, ray_dir, v1, v2, v3, epsilon)
                # Strictly nearer only, so the lowest index wins a tie
                if rec.hit == 1 and (best_part < 0 or rec.t < best_t):
                    best_part = k
                    best_t = rec.t
                    best_beta = rec.beta
                    best_gamma = rec.gamma

        out_part[r] = best_part
        out_t[r] = best_t
        out_beta[r] = best_beta
        out_gamma[r] = best_gamma


@ti.kernel
def _box_batch_kernel(
    box: ti.types.ndarray(dtype=ti.f32, ndim=2),
    origins: ti.types.ndarray(dtype=ti.f32, ndim=2),
    directions: ti.types.ndarray(dtype=ti.f32, ndim=2),
    out_hit: ti.types.ndarray(dtype=ti.i32, ndim=1),
    out_t_near: ti.types.ndarray(dtype=ti.f32, ndim=1),
    out_t_far: ti.types.ndarray(dtype=ti.f32, ndim=1),
):
    box_min = vec3(box[0, 0], box[0, 1], box[0, 2])
    box_max = vec3(box[1, 0], box[1, 1], box[1, 2])
    for r in range(origins.shape[0]):
        o = vec3(origins[r, 0], origins[r, 1], origins[r, 2])
        ray_dir = vec3(directions[r, 0], directions[r, 1], directions[r, 2])
        slab = slab_intersect_ti(o, ray_dir, box_min, box_max)
        out_hit[r] = slab.hit
        out_t_near[r] = slab.t_near
        out_t_far[r] = slab.t_far


# =============================================================================
# Python-side API
# =============================================================================


@dataclass
class RayCastResult:
    """Closest hit per ray for a batch of rays.

    Attributes:
        t: (R,) float32 ray parameters, ``inf`` where the ray missed.
        part_index: (R,) int32 index of the triangle hit, -1 on a miss.
        beta: (R,) float32 barycentric weight of the second vertex.
        gamma: (R,) float32 barycentric weight of the third vertex.
    """

    t: npt.NDArray[np.float32]
    part_index: npt.NDArray[np.int32]
    beta: npt.NDArray[np.float32]
    gamma: npt.NDArray[np.float32]

    @property
    def hit_mask(self) -> npt.NDArray[np.bool_]:
        return self.part_index >= 0

    def __len__(self) -> int:
        return int(self.t.shape[0])

    @classmethod
    def empty(cls, num_rays: int) -> "RayCastResult":
        """A result where every ray missed."""
        return cls(
            t=np.full(num_rays, np.inf, dtype=np.float32),
            part_index=np.full(num_rays, -1, dtype=np.int32),
            beta=np.zeros(num_rays, dtype=np.float32),
            gamma=np.zeros(num_rays, dtype=np.float32),
        )


def _as_rows(array: npt.ArrayLike, dtype, name: str) -> np.ndarray:
    out = np.ascontiguousarray(array, dtype=dtype)
    if out.ndim == 1 and out.shape[0] == 3:
        out = out.reshape(1, 3)
    if out.ndim != 2 or out.shape[1] != 3:
        raise ValueError(f"{name} must have shape (n, 3), got {out.shape}")
    return out


def _box_array(bbox: BoundingBox) -> np.ndarray:
    return np.array([bbox.min.to_tuple(), bbox.max.to_tuple()], dtype=np.float32)


def cast_rays_against_triangles(
    vertices: npt.ArrayLike,
    triangles: npt.ArrayLike,
    origins: npt.ArrayLike,
    directions: npt.ArrayLike,
    bbox: BoundingBox | None = None,
    epsilon: float = EPSILON,
) -> RayCastResult:
    """Find the closest triangle hit for every ray in a batch.

    Args:
        vertices: (N, 3) vertex positions.
        triangles: (M, 3) 0-based vertex indices.
        origins: (R, 3) ray origins.
        directions: (R, 3) ray directions (need not be normalized).
        bbox: Optional bounding box of the triangles. Rays that miss it
            skip the triangle scan.
        epsilon: Smallest accepted ray parameter.

    Returns:
        The closest hit per ray.

    Raises:
        ValueError: If an array has the wrong shape, origins and directions
            differ in length, or a triangle index is out of range.
    """
    verts = _as_rows(vertices, np.float32, "vertices")
    tris = np.ascontiguousarray(triangles, dtype=np.int32).reshape(-1, 3)
    orig = _as_rows(origins, np.float32, "origins")
    dirs = _as_rows(directions, np.float32, "directions")

    if orig.shape[0] != dirs.shape[0]:
        raise ValueError(f"Got {orig.shape[0]} origins but {dirs.shape[0]} directions")

    num_rays = orig.shape[0]
    result = RayCastResult.empty(num_rays)
    if num_rays == 0 or tris.shape[0] == 0:
        return result

    if tris.min() < 0 or tris.max() >= verts.shape[0]:
        raise ValueError(f"Triangle index out of range for {verts.shape[0]} vertices")

    if bbox is not None:
        box = _box_array(bbox)
        use_box = 1
    else:
        box = np.zeros((2, 3), dtype=np.float32)
        use_box = 0

    _cast_rays_kernel(
        verts,
        tris,
        orig,
        dirs,
        box,
        use_box,
        epsilon,
        result.t,
        result.part_index,
        result.beta,
        result.gamma,
    )

    # Kernel writes 0 for misses
    result.t[~result.hit_mask] = np.inf
    return result


def intersect_box_batch(
    bbox: BoundingBox,
    origins: npt.ArrayLike,
    directions: npt.ArrayLike,
) -> tuple[npt.NDArray[np.bool_], npt.NDArray[np.float32], npt.NDArray[np.float32]]:
    """Slab-test a batch of rays against one box.

    Returns:
        ``(hit, t_near, t_far)`` arrays of length R. Entry and exit are
        clamped to +-1e30 where an axis does not bound the ray.
    """
    orig = _as_rows(origins, np.float32, "origins")
    dirs = _as_rows(directions, np.float32, "directions")
    if orig.shape[0] != dirs.shape[0]:
        raise ValueError(f"Got {orig.shape[0]} origins but {dirs.shape[0]} directions")

    num_rays = orig.shape[0]
    hit = np.zeros(num_rays, dtype=np.int32)
    t_near = np.zeros(num_rays, dtype=np.float32)
    t_far = np.zeros(num_rays, dtype=np.float32)
    if num_rays > 0:
        _box_batch_kernel(_box_array(bbox), orig, dirs, hit, t_near, t_far)

    return hit.astype(bool), t_near, t_far
