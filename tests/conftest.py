"""Pytest configuration for scene core tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import io

import pytest
import taichi as ti

QUAD_SMF = """\
v 0.00000 0.00000 0.000000
v 0.00000 1.00000 0.000000
v 1.00000 1.00000 0.000000
v 1.00000 0.00000 0.000000
f 1 3 2
f 1 4 3
"""


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture
def id_allocator():
    """A fresh id allocator so ids are deterministic within a test."""
    from src.python.scene.objects import IdAllocator

    return IdAllocator()


@pytest.fixture
def quad_smf():
    """Unit square in the z=0 plane split into two triangles."""
    return QUAD_SMF


@pytest.fixture
def quad_mesh(id_allocator):
    """The unit square mesh, loaded with smooth normals."""
    from src.python.geometry.mesh import TriangleMesh

    mesh = TriangleMesh(id_allocator=id_allocator)
    assert mesh.load_smf_stream(io.StringIO(QUAD_SMF))
    mesh.calc_normals()
    return mesh
