"""Triangle primitives and the scalar ray-triangle intersection.

Ray-triangle intersection solves for the barycentric weights (beta, gamma)
and the ray parameter t in

    v1 + beta * (v2 - v1) + gamma * (v3 - v1) = o + t * d

Rearranged, this is the 3x3 linear system

    | v1.x-v2.x  v1.x-v3.x  d.x |   | beta  |   | v1.x-o.x |
    | v1.y-v2.y  v1.y-v3.y  d.y | * | gamma | = | v1.y-o.y |
    | v1.z-v2.z  v1.z-v3.z  d.z |   | t     |   | v1.z-o.z |

which is solved with Cramer's rule: each unknown is the determinant of the
coefficient matrix with one column replaced by the right-hand side, divided
by the determinant of the coefficient matrix. The hit point lies inside the
triangle when beta >= 0, gamma >= 0 and beta + gamma <= 1. The weight of the
first vertex is alpha = 1 - beta - gamma.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from src.python.core.mathutil import EPSILON, tmax3, tmin3
from src.python.core.ray import Ray
from src.python.core.vector import Vector3, cross_product
from src.python.geometry.bbox import BoundingBox

_ONE_THIRD = 1.0 / 3.0


@dataclass(frozen=True)
class Triangle:
    """Three 0-based vertex indices into a mesh's vertex list.

    Attributes:
        v0: Index of the first vertex.
        v1: Index of the second vertex.
        v2: Index of the third vertex.
    """

    v0: int
    v1: int
    v2: int

    @property
    def vertex(self) -> tuple[int, int, int]:
        return (self.v0, self.v1, self.v2)

    def __iter__(self) -> Iterator[int]:
        return iter(self.vertex)


def triangle_normal(v0: Vector3, v1: Vector3, v2: Vector3) -> Vector3:
    """Unit normal of a counter-clockwise triangle in a right-handed system.

    A degenerate triangle yields the zero vector.
    """
    normal = cross_product(v1 - v0, v2 - v0)
    normal.normalize()
    return normal


def triangle_centroid(v0: Vector3, v1: Vector3, v2: Vector3) -> Vector3:
    c = v0 + v1 + v2
    c *= _ONE_THIRD
    return c


def triangle_bbox(v0: Vector3, v1: Vector3, v2: Vector3) -> BoundingBox:
    return BoundingBox(
        Vector3(tmin3(v0.x, v1.x, v2.x), tmin3(v0.y, v1.y, v2.y), tmin3(v0.z, v1.z, v2.z)),
        Vector3(tmax3(v0.x, v1.x, v2.x), tmax3(v0.y, v1.y, v2.y), tmax3(v0.z, v1.z, v2.z)),
    )


def intersect_triangle(
    ray: Ray,
    v1: Vector3,
    v2: Vector3,
    v3: Vector3,
    epsilon: float = EPSILON,
) -> tuple[float, float, float] | None:
    """Intersect a ray with a single triangle.

    Args:
        ray: The ray to test (direction need not be normalized).
        v1: First triangle vertex.
        v2: Second triangle vertex.
        v3: Third triangle vertex.
        epsilon: Smallest accepted ray parameter. Hits closer to the origin,
            or behind it, are rejected.

    Returns:
        ``(t, beta, gamma)`` for a hit, or None. A ray parallel to the
        triangle plane (determinant exactly zero) never hits.
    """
    o = ray.origin
    d = ray.direction

    #         | a b c |
    # mat A = | d e f |
    #         | g h i |
    a = v1.x - v2.x
    b = v1.x - v3.x
    c = d.x

    dd = v1.y - v2.y
    e = v1.y - v3.y
    f = d.y

    g = v1.z - v2.z
    h = v1.z - v3.z
    i = d.z

    ei_fh = e * i - f * h
    di_fg = dd * i - f * g
    dh_eg = dd * h - e * g

    det_a = a * ei_fh - b * di_fg + c * dh_eg
    if det_a == 0.0:
        return None
    inv_det = 1.0 / det_a

    rh = v1 - o

    # rh replaces the first column
    det1 = rh.x * ei_fh - b * (rh.y * i - f * rh.z) + c * (rh.y * h - e * rh.z)
    beta = det1 * inv_det
    if beta < 0.0:
        return None

    # rh replaces the second column
    det2 = a * (rh.y * i - f * rh.z) - rh.x * di_fg + c * (dd * rh.z - rh.y * g)
    gamma = det2 * inv_det
    if gamma < 0.0:
        return None
    if beta + gamma > 1.0:
        return None

    # rh replaces the third column
    det3 = a * (e * rh.z - rh.y * h) - b * (dd * rh.z - rh.y * g) + rh.x * dh_eg
    t = det3 * inv_det
    if t < epsilon:
        return None

    return t, beta, gamma


def generate_triangle_indexes(
    u_num_points: int,
    v_num_points: int,
    wrap_ends_of_row: bool = False,
) -> list[Triangle]:
    """Triangulate a grid of control points laid out row by row.

    Vertex ``(i, j)`` has index ``j * u_num_points + i``. Each grid cell is
    split into two counter-clockwise triangles. With ``wrap_ends_of_row`` the
    last point of each row connects back to the first, closing surfaces of
    revolution.

    Args:
        u_num_points: Points per row.
        v_num_points: Number of rows.
        wrap_ends_of_row: Connect the end of each row to its start.

    Returns:
        The triangle list.
    """
    triangles: list[Triangle] = []
    row_max = u_num_points if wrap_ends_of_row else u_num_points - 1

    for j in range(v_num_points - 1):
        for i in range(row_max):
            i_next = i + 1
            if i_next >= u_num_points:
                i_next = 0
            here = j * u_num_points + i
            above = (j + 1) * u_num_points + i
            here_next = j * u_num_points + i_next
            above_next = (j + 1) * u_num_points + i_next
            triangles.append(Triangle(here, above, here_next))
            triangles.append(Triangle(above, above_next, here_next))

    return triangles


def generate_triangle_fan(n_row_points: int, center_index: int, row_start: int) -> list[Triangle]:
    """Fan of triangles joining one center vertex to a closed row of points.

    Triangle ``i`` is ``(center, row_start + i, row_start + i + 1)``, with the
    last triangle wrapping back to ``row_start``.
    """
    triangles: list[Triangle] = []
    for i in range(n_row_points):
        second = i + 1
        if second >= n_row_points:
            second = 0
        triangles.append(Triangle(center_index, row_start + i, row_start + second))
    return triangles


def add_triangle_fan_end_caps(
    points: list[Vector3],
    triangles: list[Triangle],
    n_row_points: int,
    begin_center: Vector3,
    end_center: Vector3,
) -> None:
    """Close both ends of a surface of revolution with triangle fans.

    ``begin_center`` is inserted as vertex 0 and ``end_center`` appended as
    the last vertex, so every existing triangle index moves up by one. A fan
    around the first row is prepended to ``triangles`` and a fan around the
    last row, wound the other way so it faces out of the far end, is
    appended. Both lists are modified in place.

    Args:
        points: Surface points laid out row by row, ``n_row_points`` per row.
        triangles: Triangles over ``points``, typically from
            ``generate_triangle_indexes`` with ``wrap_ends_of_row=True``.
        n_row_points: Points per row.
        begin_center: Cap point joined to the first row.
        end_center: Cap point joined to the last row.

    Raises:
        ValueError: If ``points`` holds less than one row.
    """
    old_count = len(points)
    if n_row_points < 1 or old_count < n_row_points:
        raise ValueError(f"Need at least one row of {n_row_points} points, got {old_count}")

    begin_fan = generate_triangle_fan(n_row_points, 0, 1)
    end_fan = generate_triangle_fan(n_row_points, old_count + 1, old_count - n_row_points + 1)

    points.insert(0, begin_center.copy())
    points.append(end_center.copy())

    shifted = [Triangle(t.v0 + 1, t.v1 + 1, t.v2 + 1) for t in triangles]
    triangles[:] = begin_fan + shifted + [Triangle(t.v2, t.v1, t.v0) for t in end_fan]
