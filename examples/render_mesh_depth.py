#!/usr/bin/env python3
"""Render a depth (or normal) image of a triangle mesh.

This script loads a mesh from an SMF file (or builds a sphere of revolution
when no file is given), places a pinhole camera in front of its bounding
box, casts one primary ray per pixel with the Taichi kernels and writes the
result as a PNG.

Usage:
    python -m examples.render_mesh_depth [options] [MESH]

Options:
    --width WIDTH       Image width in pixels (default: 320)
    --height HEIGHT     Image height in pixels (default: 240)
    --flat              Use flat instead of smooth normals
    --normals           Write a normal image instead of a depth image
    --output OUTPUT     Output file path (default: mesh_depth.png)
    --arch ARCH         Taichi backend, cpu or gpu (default: from config)
    --quiet             Suppress progress output

Example:
    python -m examples.render_mesh_depth examples/data/pyramid.smf --normals
"""

from __future__ import annotations

import argparse
import logging
import math
import sys
import time
from pathlib import Path

import taichi as ti

from src.python.config import TAICHI_ARCH
from src.python.logging_config import setup_logging

logger = logging.getLogger("examples.render_mesh_depth")


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render a depth image of a triangle mesh.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "mesh",
        nargs="?",
        default=None,
        help="SMF mesh file (default: a generated sphere)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=320,
        help="Image width in pixels (default: 320)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=240,
        help="Image height in pixels (default: 240)",
    )
    parser.add_argument(
        "--flat",
        action="store_true",
        help="Use flat instead of smooth normals",
    )
    parser.add_argument(
        "--normals",
        action="store_true",
        help="Write a normal image instead of a depth image",
    )
    parser.add_argument(
        "--output",
        type=str,
        default="mesh_depth.png",
        help="Output file path (default: mesh_depth.png)",
    )
    parser.add_argument(
        "--arch",
        choices=["cpu", "gpu"],
        default=TAICHI_ARCH,
        help=f"Taichi backend (default: {TAICHI_ARCH})",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def build_sphere(u_points: int = 32, v_points: int = 16):
    """Closed sphere of revolution with outward-facing triangles."""
    from src.python.core.vector import Vector3
    from src.python.geometry.mesh import TriangleMesh
    from src.python.geometry.triangle import add_triangle_fan_end_caps, generate_triangle_indexes

    vertices = []
    for j in range(v_points):
        # Keep the rings off the poles; the end caps close them
        phi = math.pi * (j + 0.5) / v_points
        for i in range(u_points):
            # Decreasing theta winds the grid triangles outward
            theta = -2.0 * math.pi * i / u_points
            vertices.append(
                Vector3(math.sin(phi) * math.cos(theta), math.cos(phi), math.sin(phi) * math.sin(theta))
            )

    triangles = generate_triangle_indexes(u_points, v_points, wrap_ends_of_row=True)
    add_triangle_fan_end_caps(vertices, triangles, u_points, Vector3(0.0, 1.0, 0.0), Vector3(0.0, -1.0, 0.0))

    mesh = TriangleMesh()
    mesh.set_geometry(vertices, triangles)
    return mesh


def render_mesh(
    mesh_path: str | None,
    width: int = 320,
    height: int = 240,
    flat: bool = False,
    normals: bool = False,
    output_path: str = "mesh_depth.png",
    quiet: bool = False,
) -> Path:
    """Render a mesh and save the image.

    Args:
        mesh_path: SMF file to load, or None for the generated sphere.
        width: Image width in pixels.
        height: Image height in pixels.
        flat: Use flat normals.
        normals: Write a normal image instead of a depth image.
        output_path: Output file path (PNG).
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.
    """
    # Lazy imports to allow Taichi initialization first
    from src.python.camera.pinhole import Camera
    from src.python.core.vector import Vector3
    from src.python.geometry.mesh import TriangleMesh
    from src.python.preview.export import depth_to_image, normals_to_image, save_png_from_array

    if mesh_path is None:
        mesh = build_sphere()
        mesh.calc_normals(flat)
    else:
        mesh = TriangleMesh.from_smf(mesh_path, flat=flat)

    if not quiet:
        print(f"Mesh: {len(mesh.vertices)} vertices, {mesh.num_parts()} triangles")

    # Frame the bounding box from +z
    box = mesh.get_bbox()
    center = box.center()
    radius = box.extent().magnitude() / 2.0
    fov = math.radians(60.0)
    distance = radius / math.tan(fov / 2.0) + radius
    camera = Camera(
        eye_point=center + Vector3(0.0, 0.0, distance),
        view_direction=Vector3(0.0, 0.0, -1.0),
        view_up=Vector3(0.0, 1.0, 0.0),
        image_plane_distance=1.0,
        horiz_camera_angle=fov,
    )

    start_time = time.time()
    origins, directions = camera.primary_rays(width, height)
    result = mesh.cast_rays(origins, directions)
    elapsed = time.time() - start_time

    if not quiet:
        hits = int(result.hit_mask.sum())
        print(f"Cast {len(result)} rays in {elapsed:.2f}s ({hits} hits)")

    if normals:
        image = normals_to_image(mesh.hit_normals(result), result.hit_mask, width, height)
    else:
        image = depth_to_image(result, width, height)

    output_file = Path(output_path)
    save_png_from_array(image, output_file)
    if not quiet:
        print(f"Saved to: {output_file.absolute()}")

    return output_file


def main() -> int:
    """Main entry point."""
    args = parse_args()
    setup_logging()

    ti.init(arch=ti.gpu if args.arch == "gpu" else ti.cpu)

    try:
        render_mesh(
            args.mesh,
            width=args.width,
            height=args.height,
            flat=args.flat,
            normals=args.normals,
            output_path=args.output,
            quiet=args.quiet,
        )
        return 0
    except Exception as e:
        logger.error("Render failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
