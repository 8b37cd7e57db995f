"""Unit tests for the pinhole camera.

Tests cover:
- Parameter validation
- Orthonormal basis construction
- Single-pixel and whole-image primary rays
"""

import math

import numpy as np
import pytest


class TestCameraSetup:
    """Tests for camera parameters and basis."""

    def test_defaults(self):
        """Test the default camera looks down -z from the origin."""
        from src.python.camera.pinhole import Camera
        from src.python.core.vector import Vector3

        camera = Camera()
        assert camera.eye_point == Vector3()
        assert camera.view_direction == Vector3(0.0, 0.0, -1.0)
        assert camera.horiz_camera_angle == pytest.approx(math.pi / 3.0)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"image_plane_distance": 0.0},
            {"horiz_camera_angle": 0.0},
            {"horiz_camera_angle": math.pi},
        ],
    )
    def test_invalid_parameters(self, kwargs):
        """Test bad distances and angles are rejected."""
        from src.python.camera.pinhole import Camera

        with pytest.raises(ValueError):
            Camera(**kwargs)

    def test_basis(self):
        """Test the default basis is the world axes."""
        from src.python.camera.pinhole import Camera
        from src.python.core.vector import Vector3

        u, v, w = Camera().basis()
        assert u == Vector3(1.0, 0.0, 0.0)
        assert v == Vector3(0.0, 1.0, 0.0)
        assert w == Vector3(0.0, 0.0, 1.0)

    def test_basis_is_orthonormal(self):
        """Test an oblique camera still gets an orthonormal frame."""
        from src.python.camera.pinhole import Camera
        from src.python.core.vector import Vector3

        camera = Camera(view_direction=Vector3(1.0, -2.0, 0.5), view_up=Vector3(0.0, 1.0, 0.2))
        u, v, w = camera.basis()
        for a in (u, v, w):
            assert a.magnitude() == pytest.approx(1.0)
        assert u.dot(v) == pytest.approx(0.0, abs=1e-12)
        assert u.dot(w) == pytest.approx(0.0, abs=1e-12)
        assert v.dot(w) == pytest.approx(0.0, abs=1e-12)

    def test_degenerate_views(self):
        """Test a zero direction or an up vector along the view raises."""
        from src.python.camera.pinhole import Camera
        from src.python.core.vector import Vector3

        with pytest.raises(ValueError):
            Camera(view_direction=Vector3()).basis()
        with pytest.raises(ValueError):
            Camera(view_direction=Vector3(0.0, 2.0, 0.0)).basis()

    def test_image_plane_size(self):
        """Test plane size follows the field of view and aspect ratio."""
        from src.python.camera.pinhole import Camera

        camera = Camera(horiz_camera_angle=math.pi / 2.0)
        w, h = camera.image_plane_size(640, 480)
        assert w == pytest.approx(2.0)
        assert h == pytest.approx(1.5)


class TestPrimaryRays:
    """Tests for ray generation."""

    def test_center_pixel(self):
        """Test the middle pixel of an odd-sized image looks straight ahead."""
        from src.python.camera.pinhole import Camera
        from src.python.core.mathutil import vectors_almost_equal
        from src.python.core.vector import Vector3

        camera = Camera(eye_point=Vector3(0.0, 0.0, 5.0))
        ray = camera.ray_for_pixel(1, 1, 3, 3)
        assert ray.origin == Vector3(0.0, 0.0, 5.0)
        assert vectors_almost_equal(Vector3(0.0, 0.0, -1.0), ray.direction)

    def test_top_left_pixel(self):
        """Test pixel (0, 0) is up and to the left."""
        from src.python.camera.pinhole import Camera

        d = Camera().ray_for_pixel(0, 0, 4, 4).direction
        assert d.x < 0.0
        assert d.y > 0.0
        assert d.magnitude() == pytest.approx(1.0)

    def test_batch_layout(self):
        """Test ray k passes through pixel (k % width, k // width)."""
        from src.python.camera.pinhole import Camera
        from src.python.core.vector import Vector3

        camera = Camera(eye_point=Vector3(1.0, 2.0, 3.0), view_direction=Vector3(0.0, -1.0, -1.0))
        origins, directions = camera.primary_rays(4, 2)

        assert origins.shape == (8, 3)
        assert directions.dtype == np.float32
        np.testing.assert_allclose(origins, np.tile([1.0, 2.0, 3.0], (8, 1)))
        np.testing.assert_allclose(np.linalg.norm(directions, axis=1), 1.0, atol=1e-6)

        expected = camera.ray_for_pixel(1, 1, 4, 2).direction
        np.testing.assert_allclose(directions[5], expected.to_tuple(), atol=1e-6)

    def test_bad_size(self):
        """Test a zero-sized image is rejected."""
        from src.python.camera.pinhole import Camera

        with pytest.raises(ValueError):
            Camera().primary_rays(0, 10)

    def test_rays_see_mesh(self, quad_mesh):
        """Test a camera over the quad sees it in the image center."""
        from src.python.camera.pinhole import Camera
        from src.python.core.vector import Vector3

        camera = Camera(eye_point=Vector3(0.5, 0.5, 2.0))
        origins, directions = camera.primary_rays(5, 5)
        result = quad_mesh.cast_rays(origins, directions)
        assert result.hit_mask[12]
        assert result.t[12] == pytest.approx(2.0, abs=1e-5)
