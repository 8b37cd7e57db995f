"""Reader for the simple line-oriented triangle mesh format (SMF).

Format, one record per line::

    # a comment
    v 0.0 0.0 0.0      vertex, declared in file order
    v 1.0 0.0 0.0
    v 1.0 1.0 0.0
    f 1 2 3            triangle, 1-based vertex indices

Leading/trailing whitespace is ignored and blank lines are skipped. A
trailing ``# comment`` after a record is ignored. Face indices must refer to
vertices declared earlier (``1 <= index <= vertex count so far``) and are
converted to 0-based. All vertices must precede the first face. Any other
record type is an error.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TextIO

from src.python.core.errors import MeshLoadError
from src.python.core.vector import Vector3
from src.python.geometry.triangle import Triangle

logger = logging.getLogger(__name__)


def _strip_comment(body: str) -> str:
    hash_pos = body.find("#")
    if hash_pos != -1:
        body = body[:hash_pos]
    return body


def _parse_numbers(
    body: str, cast: Callable[[str], float], line_number: int, line: str, what: str
) -> list[float]:
    parts = _strip_comment(body).split()
    if len(parts) != 3:
        raise MeshLoadError(f"{what} needs exactly 3 values, got {len(parts)}", line_number, line)
    try:
        return [cast(p) for p in parts]
    except ValueError:
        raise MeshLoadError(f"malformed {what} value", line_number, line) from None


def parse_smf(lines: Iterable[str]) -> tuple[list[Vector3], list[Triangle]]:
    """Parse SMF records.

    Args:
        lines: The text lines of the mesh description.

    Returns:
        ``(vertices, triangles)`` with 0-based triangle indices.

    Raises:
        MeshLoadError: On the first malformed line, with its line number.
    """
    vertices: list[Vector3] = []
    triangles: list[Triangle] = []
    seen_faces = False

    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue

        kind = line[0]
        body = line[1:]

        if kind == "#":
            continue

        if kind == "v":
            if seen_faces:
                raise MeshLoadError("vertex seen while reading faces", line_number, line)
            x, y, z = _parse_numbers(body, float, line_number, line, "vertex")
            vertices.append(Vector3(x, y, z))

        elif kind == "f":
            seen_faces = True
            indices = _parse_numbers(body, int, line_number, line, "face")
            if any(idx < 1 for idx in indices):
                raise MeshLoadError("vertex index less than 1", line_number, line)
            if any(idx > len(vertices) for idx in indices):
                raise MeshLoadError("vertex index greater than vertex count", line_number, line)
            triangles.append(Triangle(indices[0] - 1, indices[1] - 1, indices[2] - 1))

        else:
            raise MeshLoadError(f"unknown line type {kind!r}", line_number, line)

    logger.debug("Parsed SMF: %d vertices, %d triangles", len(vertices), len(triangles))
    return vertices, triangles


def read_smf(stream: TextIO) -> tuple[list[Vector3], list[Triangle]]:
    """Parse SMF records from an open text stream."""
    return parse_smf(stream)


def format_smf(vertices: Iterable[Vector3], triangles: Iterable[Triangle]) -> str:
    """Serialize a mesh back to SMF text (1-based face indices)."""
    out = [f"v {v.x:g} {v.y:g} {v.z:g}" for v in vertices]
    out.extend(f"f {t.v0 + 1} {t.v1 + 1} {t.v2 + 1}" for t in triangles)
    return "\n".join(out) + "\n"
