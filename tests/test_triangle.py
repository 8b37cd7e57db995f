"""Unit tests for triangle helpers.

Tests cover:
- Triangle index records
- Normal, centroid and bounding box of a triangle
- Cramer's rule ray-triangle intersection and its rejection rules
- Grid triangulation
- Triangle fans closing the ends of a surface of revolution
"""

import dataclasses

import pytest


def _corners():
    from src.python.core.vector import Vector3

    return Vector3(0.0, 0.0, 0.0), Vector3(1.0, 0.0, 0.0), Vector3(1.0, 1.0, 0.0)


class TestTriangleRecord:
    """Tests for the Triangle index triple."""

    def test_equality_is_ordered(self):
        """Test equality compares indices in order."""
        from src.python.geometry.triangle import Triangle

        assert Triangle(0, 1, 2) == Triangle(0, 1, 2)
        assert Triangle(0, 1, 2) != Triangle(0, 2, 1)

    def test_frozen(self):
        """Test indices cannot be reassigned."""
        from src.python.geometry.triangle import Triangle

        tri = Triangle(0, 1, 2)
        with pytest.raises(dataclasses.FrozenInstanceError):
            tri.v0 = 5

    def test_vertex_and_iteration(self):
        """Test the indices as a tuple and by unpacking."""
        from src.python.geometry.triangle import Triangle

        tri = Triangle(3, 4, 5)
        assert tri.vertex == (3, 4, 5)
        a, b, c = tri
        assert (a, b, c) == (3, 4, 5)


class TestTriangleGeometry:
    """Tests for normal, centroid and bounds."""

    def test_normal(self):
        """Test the counter-clockwise triangle in z=0 faces +z."""
        from src.python.core.mathutil import vectors_almost_equal
        from src.python.core.vector import Vector3
        from src.python.geometry.triangle import triangle_normal

        assert vectors_almost_equal(Vector3(0.0, 0.0, 1.0), triangle_normal(*_corners()))

    def test_reversed_winding_flips_normal(self):
        """Test swapping two corners points the normal the other way."""
        from src.python.core.vector import Vector3
        from src.python.geometry.triangle import triangle_normal

        v0, v1, v2 = _corners()
        assert triangle_normal(v0, v2, v1) == Vector3(0.0, 0.0, -1.0)

    def test_degenerate_normal_is_zero(self):
        """Test collinear corners give the zero vector, not NaN."""
        from src.python.core.vector import Vector3
        from src.python.geometry.triangle import triangle_normal

        n = triangle_normal(Vector3(0.0, 0.0, 0.0), Vector3(1.0, 0.0, 0.0), Vector3(2.0, 0.0, 0.0))
        assert n == Vector3()
        assert not n.is_nan()

    def test_centroid(self):
        """Test the centroid is the corner average."""
        from src.python.core.mathutil import vectors_almost_equal
        from src.python.core.vector import Vector3
        from src.python.geometry.triangle import triangle_centroid

        assert vectors_almost_equal(Vector3(2.0 / 3.0, 1.0 / 3.0, 0.0), triangle_centroid(*_corners()))

    def test_bbox(self):
        """Test the box spans the per-axis extremes of the corners."""
        from src.python.core.vector import Vector3
        from src.python.geometry.bbox import BoundingBox
        from src.python.geometry.triangle import triangle_bbox

        box = triangle_bbox(Vector3(-1.0, 0.0, 3.0), Vector3(1.0, -2.0, 0.0), Vector3(0.0, 2.0, -3.0))
        assert box == BoundingBox(Vector3(-1.0, -2.0, -3.0), Vector3(1.0, 2.0, 3.0))


class TestIntersectTriangle:
    """Tests for intersect_triangle."""

    def test_hit_inside(self):
        """Test a ray through the interior reports t and barycentrics."""
        from src.python.core.ray import Ray
        from src.python.core.vector import Vector3
        from src.python.geometry.triangle import intersect_triangle

        ray = Ray(Vector3(0.6, 0.5, 1.0), Vector3(0.0, 0.0, -1.0))
        result = intersect_triangle(ray, *_corners())
        assert result is not None
        t, beta, gamma = result
        assert t == pytest.approx(1.0)
        assert beta == pytest.approx(0.1)
        assert gamma == pytest.approx(0.5)

    def test_barycentrics_reconstruct_point(self):
        """Test v1 + beta (v2 - v1) + gamma (v3 - v1) is the hit point."""
        from src.python.core.mathutil import vectors_almost_equal
        from src.python.core.ray import Ray
        from src.python.core.vector import Vector3
        from src.python.geometry.triangle import intersect_triangle

        v1, v2, v3 = _corners()
        ray = Ray(Vector3(0.9, 0.3, 2.0), Vector3(-0.1, 0.05, -1.0))
        t, beta, gamma = intersect_triangle(ray, v1, v2, v3)
        on_plane = v1 + (v2 - v1) * beta + (v3 - v1) * gamma
        assert vectors_almost_equal(ray.point_at(t), on_plane)

    def test_miss_outside(self):
        """Test a ray past the edge misses."""
        from src.python.core.ray import Ray
        from src.python.core.vector import Vector3
        from src.python.geometry.triangle import intersect_triangle

        ray = Ray(Vector3(0.2, 0.5, 1.0), Vector3(0.0, 0.0, -1.0))
        assert intersect_triangle(ray, *_corners()) is None

    def test_miss_behind_origin(self):
        """Test a triangle behind the ray is not hit."""
        from src.python.core.ray import Ray
        from src.python.core.vector import Vector3
        from src.python.geometry.triangle import intersect_triangle

        ray = Ray(Vector3(0.6, 0.5, -1.0), Vector3(0.0, 0.0, -1.0))
        assert intersect_triangle(ray, *_corners()) is None

    def test_parallel_ray(self):
        """Test a ray in a plane parallel to the triangle misses."""
        from src.python.core.ray import Ray
        from src.python.core.vector import Vector3
        from src.python.geometry.triangle import intersect_triangle

        ray = Ray(Vector3(0.0, 0.0, 1.0), Vector3(1.0, 0.0, 0.0))
        assert intersect_triangle(ray, *_corners()) is None

    def test_origin_on_plane_rejected(self):
        """Test a hit at t=0 falls below epsilon."""
        from src.python.core.ray import Ray
        from src.python.core.vector import Vector3
        from src.python.geometry.triangle import intersect_triangle

        ray = Ray(Vector3(0.6, 0.5, 0.0), Vector3(0.0, 0.0, -1.0))
        assert intersect_triangle(ray, *_corners()) is None

    def test_epsilon_is_configurable(self):
        """Test a larger epsilon rejects a near hit."""
        from src.python.core.ray import Ray
        from src.python.core.vector import Vector3
        from src.python.geometry.triangle import intersect_triangle

        ray = Ray(Vector3(0.6, 0.5, 0.01), Vector3(0.0, 0.0, -1.0))
        assert intersect_triangle(ray, *_corners()) is not None
        assert intersect_triangle(ray, *_corners(), epsilon=0.1) is None


class TestGenerateTriangleIndexes:
    """Tests for grid triangulation."""

    def test_open_rows(self):
        """Test a 3x2 grid makes two cells of two triangles."""
        from src.python.geometry.triangle import Triangle, generate_triangle_indexes

        assert generate_triangle_indexes(3, 2) == [
            Triangle(0, 3, 1),
            Triangle(3, 4, 1),
            Triangle(1, 4, 2),
            Triangle(4, 5, 2),
        ]

    def test_wrapped_rows(self):
        """Test wrapping closes each row back to its first point."""
        from src.python.geometry.triangle import Triangle, generate_triangle_indexes

        triangles = generate_triangle_indexes(3, 2, wrap_ends_of_row=True)
        assert len(triangles) == 6
        assert triangles[-2:] == [Triangle(2, 5, 0), Triangle(5, 3, 0)]

    def test_single_row_has_no_triangles(self):
        """Test fewer than two rows produce nothing."""
        from src.python.geometry.triangle import generate_triangle_indexes

        assert generate_triangle_indexes(4, 1) == []


def _cylinder_rows(u_points, v_points, clockwise=False):
    """Rows of points on a radius-2 cylinder along +z, 5 units per row."""
    import math

    from src.python.core.vector import Vector3

    sign = -1.0 if clockwise else 1.0
    points = []
    for j in range(v_points):
        for i in range(u_points):
            theta = sign * 2.0 * math.pi * i / u_points
            points.append(Vector3(2.0 * math.cos(theta), 2.0 * math.sin(theta), 5.0 * j))
    return points


class TestTriangleFans:
    """Tests for triangle fans and end caps."""

    def test_fan(self):
        """Test a fan around four points wraps back to the first."""
        from src.python.geometry.triangle import Triangle, generate_triangle_fan

        assert generate_triangle_fan(4, 0, 1) == [
            Triangle(0, 1, 2),
            Triangle(0, 2, 3),
            Triangle(0, 3, 4),
            Triangle(0, 4, 1),
        ]

    def test_end_caps(self):
        """Test caps add two points, shift old indices and wind the far fan backwards."""
        from src.python.core.vector import Vector3
        from src.python.geometry.triangle import (
            Triangle,
            add_triangle_fan_end_caps,
            generate_triangle_indexes,
        )

        points = _cylinder_rows(4, 3)
        ring_points = [p.copy() for p in points]
        triangles = generate_triangle_indexes(4, 3)
        grid_triangles = list(triangles)
        begin, end = Vector3(0.0, 0.0, 0.0), Vector3(0.0, 0.0, 5.0)

        add_triangle_fan_end_caps(points, triangles, 4, begin, end)

        assert points == [begin] + ring_points + [end]
        assert len(triangles) == len(grid_triangles) + 8
        assert triangles[:4] == [
            Triangle(0, 1, 2),
            Triangle(0, 2, 3),
            Triangle(0, 3, 4),
            Triangle(0, 4, 1),
        ]
        for before, after in zip(grid_triangles, triangles[4:16]):
            assert after == Triangle(before.v0 + 1, before.v1 + 1, before.v2 + 1)
        assert triangles[16:] == [
            Triangle(10, 9, 13),
            Triangle(11, 10, 13),
            Triangle(12, 11, 13),
            Triangle(9, 12, 13),
        ]

    def test_end_caps_need_a_row(self):
        """Test capping fewer points than one row raises."""
        from src.python.core.vector import Vector3
        from src.python.geometry.triangle import add_triangle_fan_end_caps

        with pytest.raises(ValueError):
            add_triangle_fan_end_caps(_cylinder_rows(4, 1)[:3], [], 4, Vector3(), Vector3())

    def test_capped_cylinder_is_closed(self, id_allocator):
        """Test rays along the axis hit outward-facing caps at both ends."""
        from src.python.core.ray import Ray
        from src.python.core.vector import Vector3
        from src.python.geometry.mesh import TriangleMesh
        from src.python.geometry.triangle import add_triangle_fan_end_caps, generate_triangle_indexes

        points = _cylinder_rows(8, 3, clockwise=True)
        triangles = generate_triangle_indexes(8, 3, wrap_ends_of_row=True)
        add_triangle_fan_end_caps(points, triangles, 8, Vector3(0.0, 0.0, 0.0), Vector3(0.0, 0.0, 10.0))
        mesh = TriangleMesh(id_allocator=id_allocator)
        mesh.set_geometry(points, triangles)
        mesh.calc_normals(flat=True)

        top = mesh.hit(Ray(Vector3(0.3, 0.2, 20.0), Vector3(0.0, 0.0, -1.0)))
        assert top is not None
        assert top.t == pytest.approx(10.0)
        assert top.normal.z == pytest.approx(1.0)

        bottom = mesh.hit(Ray(Vector3(0.3, 0.2, -4.0), Vector3(0.0, 0.0, 1.0)))
        assert bottom is not None
        assert bottom.t == pytest.approx(4.0)
        assert bottom.normal.z == pytest.approx(-1.0)

        side = mesh.hit(Ray(Vector3(10.0, 0.3, 2.5), Vector3(-1.0, 0.0, 0.0)))
        assert side is not None
        assert side.normal.x > 0.9
