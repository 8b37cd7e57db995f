"""Triangle mesh scene object.

A ``TriangleMesh`` owns a vertex list and a list of ``Triangle`` index
triples. It moves through three states:

    EMPTY             no geometry
    LOADED            vertices and triangles present, no normals
    NORMALS_COMPUTED  flat or smooth normals present

Hit testing needs normals, so ``calc_normals`` must run after loading (and
again after ``transform_points``, which discards them).

Normals:
    Every triangle gets a unit geometric normal. A smooth mesh also keeps one
    normal per vertex, the normalized sum of the normals of the triangles
    that share it, and interpolates those across a triangle at hit time. The
    mesh is flat when it has no per-vertex normals.

Parts:
    A mesh is divisible; part ``i`` is triangle ``i``. ``hit`` scans every
    triangle and keeps the nearest, ``part_hit`` tests one triangle. Both
    fill ``HitInfo.part_index`` with the triangle index and ``u``/``v`` with
    the barycentric weights of the triangle's second and third vertices.

Example:
    >>> mesh = TriangleMesh.from_smf("models/bunny.smf")
    >>> hit = mesh.hit(Ray(Vector3(0, 0, 5), Vector3(0, 0, -1)))
    >>> if hit is not None:
    ...     print(hit.t, hit.part_index)
"""

from __future__ import annotations

import enum
import io
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from os import PathLike
from typing import TYPE_CHECKING, ClassVar, TextIO

import numpy as np
import numpy.typing as npt

from src.python.config import EPSILON
from src.python.core.errors import CentroidUndefinedError, MeshLoadError, MeshStateError
from src.python.core.matrix import Matrix
from src.python.core.ray import Ray
from src.python.core.transform import transform_point
from src.python.core.vector import Vector3
from src.python.geometry.bbox import BoundingBox
from src.python.geometry.kernels import RayCastResult, cast_rays_against_triangles
from src.python.geometry.smf import format_smf, read_smf
from src.python.geometry.triangle import (
    Triangle,
    intersect_triangle,
    triangle_bbox,
    triangle_centroid,
    triangle_normal,
)
from src.python.scene.intersection import HitInfo
from src.python.scene.objects import DivisibleSceneObject, IdAllocator

if TYPE_CHECKING:
    from src.python.materials.surface import Surface

logger = logging.getLogger(__name__)


class MeshState(enum.Enum):
    EMPTY = "empty"
    LOADED = "loaded"
    NORMALS_COMPUTED = "normals_computed"


@dataclass
class MeshBuffers:
    """Flat arrays ready for vertex-buffer upload.

    Attributes:
        vertices: (3N,) float32 positions, x y z per vertex.
        normals: (3N,) float32 per-vertex normals. Empty for flat meshes and
            meshes without normals.
        indices: (3M,) uint32 vertex indices, three per triangle.
    """

    vertices: npt.NDArray[np.float32]
    normals: npt.NDArray[np.float32]
    indices: npt.NDArray[np.uint32]

    @property
    def vertex_count(self) -> int:
        return self.vertices.shape[0] // 3

    @property
    def index_count(self) -> int:
        return int(self.indices.shape[0])


class TriangleMesh(DivisibleSceneObject):
    """A scene object made of triangles.

    Attributes:
        load_error: Message of the most recent failed load, or None.
    """

    type_name: ClassVar[str] = "TriangleMesh"

    def __init__(
        self,
        surface: Surface | None = None,
        *,
        id_allocator: IdAllocator | None = None,
    ) -> None:
        super().__init__(surface, id_allocator=id_allocator)
        self._vertices: list[Vector3] = []
        self._triangles: list[Triangle] = []
        self._vertex_normals: list[Vector3] = []
        self._triangle_normals: list[Vector3] = []
        self._state = MeshState.EMPTY
        self.load_error: str | None = None

    @classmethod
    def from_smf(
        cls,
        path: str | PathLike,
        flat: bool = False,
        surface: Surface | None = None,
        *,
        id_allocator: IdAllocator | None = None,
    ) -> TriangleMesh:
        """Load a mesh file and compute its normals.

        Raises:
            MeshLoadError: If the file is malformed or holds no vertices.
            OSError: If the file cannot be read.
        """
        with open(path, encoding="utf-8") as stream:
            vertices, triangles = read_smf(stream)
        return cls._from_parsed(vertices, triangles, flat, surface, id_allocator)

    @classmethod
    def from_smf_string(
        cls,
        text: str,
        flat: bool = False,
        surface: Surface | None = None,
        *,
        id_allocator: IdAllocator | None = None,
    ) -> TriangleMesh:
        """Like ``from_smf`` but parses mesh text held in memory."""
        vertices, triangles = read_smf(io.StringIO(text))
        return cls._from_parsed(vertices, triangles, flat, surface, id_allocator)

    @classmethod
    def _from_parsed(
        cls,
        vertices: list[Vector3],
        triangles: list[Triangle],
        flat: bool,
        surface: Surface | None,
        id_allocator: IdAllocator | None,
    ) -> TriangleMesh:
        if not vertices:
            raise MeshLoadError("mesh has no vertices")
        mesh = cls(surface, id_allocator=id_allocator)
        mesh.set_geometry(vertices, triangles)
        mesh.calc_normals(flat)
        return mesh

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load_smf(self, path: str | PathLike) -> bool:
        """Replace the mesh with the contents of a mesh file.

        On failure the error is logged, stored in ``load_error`` and the mesh
        is left EMPTY.

        Returns:
            True if the file was read and parsed.
        """
        try:
            with open(path, encoding="utf-8") as stream:
                vertices, triangles = read_smf(stream)
        except (OSError, UnicodeDecodeError, MeshLoadError) as exc:
            return self._fail_load(f"Error loading mesh {path}: {exc}")
        self.set_geometry(vertices, triangles)
        logger.debug("Loaded %s: %d vertices, %d triangles", path, len(vertices), len(triangles))
        return True

    def load_smf_stream(self, stream: TextIO) -> bool:
        """Replace the mesh with mesh text read from an open stream.

        Returns:
            True if the stream was parsed.
        """
        try:
            vertices, triangles = read_smf(stream)
        except MeshLoadError as exc:
            return self._fail_load(f"Error loading mesh: {exc}")
        self.set_geometry(vertices, triangles)
        return True

    def _fail_load(self, message: str) -> bool:
        logger.error(message)
        self.clear()
        self.load_error = message
        return False

    def set_geometry(self, vertices: Iterable[Vector3], triangles: Iterable[Triangle]) -> None:
        """Replace vertices and triangles, discarding any normals.

        Raises:
            MeshLoadError: If a triangle refers to a missing vertex.
        """
        verts = [v.copy() for v in vertices]
        tris = list(triangles)
        for index, tri in enumerate(tris):
            if any(not 0 <= i < len(verts) for i in tri):
                raise MeshLoadError(f"triangle {index} {tri.vertex} refers to a missing vertex")

        self._vertices = verts
        self._triangles = tris
        self._vertex_normals = []
        self._triangle_normals = []
        self._state = MeshState.LOADED if verts else MeshState.EMPTY
        self.load_error = None

    def clear(self) -> None:
        """Drop all geometry and normals."""
        self._vertices = []
        self._triangles = []
        self._vertex_normals = []
        self._triangle_normals = []
        self._state = MeshState.EMPTY

    def to_smf(self) -> str:
        return format_smf(self._vertices, self._triangles)

    # -------------------------------------------------------------------------
    # Normals
    # -------------------------------------------------------------------------

    def calc_normals(self, flat: bool = False) -> None:
        """Compute triangle normals, plus per-vertex normals unless ``flat``.

        A degenerate triangle has a zero normal and is logged. A vertex whose
        adjacent triangles are all degenerate keeps a zero normal.

        Raises:
            MeshStateError: If the mesh has no geometry.
        """
        if self._state is MeshState.EMPTY:
            raise MeshStateError("Cannot compute normals of an empty mesh")

        vertex_normals = [] if flat else [Vector3() for _ in self._vertices]
        triangle_normals: list[Vector3] = []

        for index, tri in enumerate(self._triangles):
            v0, v1, v2 = tri.vertex
            normal = triangle_normal(self._vertices[v0], self._vertices[v1], self._vertices[v2])
            if normal.magnitude_squared() == 0.0:
                logger.warning("Triangle %d %s is degenerate", index, tri.vertex)
            triangle_normals.append(normal)
            if not flat:
                vertex_normals[v0] += normal
                vertex_normals[v1] += normal
                vertex_normals[v2] += normal

        for n in vertex_normals:
            n.normalize()

        self._vertex_normals = vertex_normals
        self._triangle_normals = triangle_normals
        self._state = MeshState.NORMALS_COMPUTED

    def _smooth_normal(self, index: int, beta: float, gamma: float) -> Vector3:
        v0, v1, v2 = self._triangles[index].vertex
        alpha = 1.0 - beta - gamma
        normal = (
            self._vertex_normals[v0] * alpha
            + self._vertex_normals[v1] * beta
            + self._vertex_normals[v2] * gamma
        )
        normal.normalize()
        return normal

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def state(self) -> MeshState:
        return self._state

    @property
    def is_flat(self) -> bool:
        return not self._vertex_normals

    @property
    def vertices(self) -> Sequence[Vector3]:
        return tuple(self._vertices)

    @property
    def triangles(self) -> Sequence[Triangle]:
        return tuple(self._triangles)

    @property
    def vertex_normals(self) -> Sequence[Vector3]:
        return tuple(self._vertex_normals)

    @property
    def triangle_normals(self) -> Sequence[Vector3]:
        return tuple(self._triangle_normals)

    def _corners(self, index: int) -> tuple[Vector3, Vector3, Vector3]:
        v0, v1, v2 = self._triangles[index].vertex
        return self._vertices[v0], self._vertices[v1], self._vertices[v2]

    # -------------------------------------------------------------------------
    # Scene object contract
    # -------------------------------------------------------------------------

    def _require_normals(self) -> None:
        if self._state is not MeshState.NORMALS_COMPUTED:
            raise MeshStateError(f"Mesh {self.id} is {self._state.value}; call calc_normals() first")

    def _make_hit(self, ray: Ray, index: int, t: float, beta: float, gamma: float) -> HitInfo:
        if self.is_flat:
            normal = self._triangle_normals[index].copy()
        else:
            normal = self._smooth_normal(index, beta, gamma)
        return HitInfo(
            t=t,
            point=ray.point_at(t),
            normal=normal,
            obj=self,
            part_index=index,
            u=beta,
            v=gamma,
        )

    def hit(self, ray: Ray) -> HitInfo | None:
        """Nearest triangle hit along ``ray``, or None.

        Raises:
            MeshStateError: If normals have not been computed.
        """
        self._require_normals()

        best_index = -1
        best_t = best_beta = best_gamma = 0.0
        for index in range(len(self._triangles)):
            found = intersect_triangle(ray, *self._corners(index), epsilon=EPSILON)
            if found is None:
                continue
            t, beta, gamma = found
            if best_index == -1 or t < best_t:
                best_index, best_t, best_beta, best_gamma = index, t, beta, gamma

        if best_index == -1:
            return None
        return self._make_hit(ray, best_index, best_t, best_beta, best_gamma)

    def part_hit(self, ray: Ray, part_index: int) -> HitInfo | None:
        """Hit of ``ray`` with triangle ``part_index`` alone, or None.

        Raises:
            PartIndexError: If ``part_index`` is out of range.
            MeshStateError: If normals have not been computed.
        """
        self.check_part_index(part_index)
        self._require_normals()
        found = intersect_triangle(ray, *self._corners(part_index), epsilon=EPSILON)
        if found is None:
            return None
        t, beta, gamma = found
        return self._make_hit(ray, part_index, t, beta, gamma)

    def num_parts(self) -> int:
        return len(self._triangles)

    def get_part_bbox(self, part_index: int) -> BoundingBox:
        self.check_part_index(part_index)
        return triangle_bbox(*self._corners(part_index))

    def get_part_centroid(self, part_index: int) -> Vector3:
        self.check_part_index(part_index)
        return triangle_centroid(*self._corners(part_index))

    def get_bbox(self) -> BoundingBox:
        """Union of every triangle's bounding box.

        Raises:
            MeshStateError: If the mesh has no triangles.
        """
        if not self._triangles:
            raise MeshStateError(f"Mesh {self.id} has no triangles to bound")
        box = triangle_bbox(*self._corners(0))
        for index in range(1, len(self._triangles)):
            box.union(triangle_bbox(*self._corners(index)))
        return box

    def get_centroid(self) -> Vector3:
        """A mesh is only ever queried per triangle.

        Raises:
            CentroidUndefinedError: Always. Use ``get_part_centroid``.
        """
        raise CentroidUndefinedError(
            f"{self.type_name} {self.id} has no whole-object centroid; use get_part_centroid()"
        )

    # -------------------------------------------------------------------------
    # Transforms and export
    # -------------------------------------------------------------------------

    def transform_points(self, matrix: Matrix) -> None:
        """Apply a 4x4 homogeneous transform to every vertex.

        Normals no longer match the moved vertices, so they are discarded
        and the mesh returns to LOADED.

        Raises:
            MatrixSizeError: If ``matrix`` cannot multiply a 4x1 column.
        """
        self._vertices = [transform_point(matrix, v) for v in self._vertices]
        if self._state is MeshState.NORMALS_COMPUTED:
            self._vertex_normals = []
            self._triangle_normals = []
            self._state = MeshState.LOADED

    def copy(self, *, id_allocator: IdAllocator | None = None) -> TriangleMesh:
        """Deep copy of the geometry and normals under a new id.

        The copy shares this mesh's ``surface``.
        """
        other = TriangleMesh(self.surface, id_allocator=id_allocator)
        other._vertices = [v.copy() for v in self._vertices]
        other._triangles = list(self._triangles)
        other._vertex_normals = [n.copy() for n in self._vertex_normals]
        other._triangle_normals = [n.copy() for n in self._triangle_normals]
        other._state = self._state
        return other

    def vertex_array(self) -> npt.NDArray[np.float64]:
        """(N, 3) float64 vertex positions."""
        if not self._vertices:
            return np.zeros((0, 3), dtype=np.float64)
        return np.array([v.to_tuple() for v in self._vertices], dtype=np.float64)

    def triangle_array(self) -> npt.NDArray[np.int32]:
        """(M, 3) int32 vertex indices."""
        if not self._triangles:
            return np.zeros((0, 3), dtype=np.int32)
        return np.array([t.vertex for t in self._triangles], dtype=np.int32)

    def to_buffers(self) -> MeshBuffers:
        """Flatten the mesh into vertex, normal and index arrays."""
        normals = (
            np.array([n.to_tuple() for n in self._vertex_normals], dtype=np.float32).reshape(-1)
            if self._vertex_normals
            else np.zeros(0, dtype=np.float32)
        )
        return MeshBuffers(
            vertices=self.vertex_array().astype(np.float32).reshape(-1),
            normals=normals,
            indices=self.triangle_array().astype(np.uint32).reshape(-1),
        )

    def cast_rays(
        self,
        origins: npt.ArrayLike,
        directions: npt.ArrayLike,
        use_bbox: bool = True,
    ) -> RayCastResult:
        """Closest triangle hit for each ray of a batch, computed with Taichi.

        Args:
            origins: (R, 3) ray origins.
            directions: (R, 3) ray directions.
            use_bbox: Skip the triangle scan for rays that miss the mesh box.

        Returns:
            The per-ray result. ``part_index`` matches what ``hit`` reports
            for the same ray, up to float32 precision.
        """
        bbox = self.get_bbox() if use_bbox and self._triangles else None
        return cast_rays_against_triangles(
            self.vertex_array(),
            self.triangle_array(),
            origins,
            directions,
            bbox=bbox,
            epsilon=EPSILON,
        )

    def hit_normals(self, result: RayCastResult) -> npt.NDArray[np.float32]:
        """Surface normal for every ray of a batch result.

        Flat meshes use the triangle normal; smooth meshes blend the vertex
        normals with the hit's barycentric weights, as ``hit`` does.

        Returns:
            (R, 3) float32 unit normals, zero where the ray missed.

        Raises:
            MeshStateError: If normals have not been computed.
        """
        self._require_normals()
        normals = np.zeros((len(result), 3), dtype=np.float64)
        mask = result.hit_mask
        if not mask.any():
            return normals.astype(np.float32)

        parts = result.part_index[mask]
        if self.is_flat:
            tri_normals = np.array([n.to_tuple() for n in self._triangle_normals], dtype=np.float64)
            normals[mask] = tri_normals[parts]
        else:
            vert_normals = np.array([n.to_tuple() for n in self._vertex_normals], dtype=np.float64)
            corners = self.triangle_array()[parts]
            beta = result.beta[mask].astype(np.float64)[:, np.newaxis]
            gamma = result.gamma[mask].astype(np.float64)[:, np.newaxis]
            alpha = 1.0 - beta - gamma
            blended = (
                vert_normals[corners[:, 0]] * alpha
                + vert_normals[corners[:, 1]] * beta
                + vert_normals[corners[:, 2]] * gamma
            )
            lengths = np.linalg.norm(blended, axis=1, keepdims=True)
            normals[mask] = np.divide(blended, lengths, out=np.zeros_like(blended), where=lengths > 0.0)
        return normals.astype(np.float32)

    def __repr__(self) -> str:
        return (
            f"<TriangleMesh id={self.id} vertices={len(self._vertices)} "
            f"triangles={len(self._triangles)} state={self._state.value}>"
        )
