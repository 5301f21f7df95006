#!/usr/bin/env python3
"""Render frames of the animated first-hit scene.

Creates the demo scene (two bobbing spheres, a tetrahedron and a reflective
floor), renders a run of frames with the orbiting camera and writes them as
numbered PNG files.

Usage:
    python -m examples.render_first_hit [options]

Options:
    --width WIDTH         Image width in pixels (default: 600)
    --height HEIGHT       Image height in pixels (default: 600)
    --frames FRAMES       Number of frames to render (default: 1)
    --dt DT               Seconds between frames (default: 1/30)
    --orthographic        Use orthographic projection
    --output-dir DIR      Output directory (default: frames)
    --scene FILE          Load the scene from a JSON file instead
    --quiet               Suppress progress output

Example:
    python -m examples.render_first_hit --frames 90 --output-dir frames
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

import taichi as ti

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Render the animated first-hit scene.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--width",
        type=int,
        default=600,
        help="Image width in pixels (default: 600)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=600,
        help="Image height in pixels (default: 600)",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=1,
        help="Number of frames to render (default: 1)",
    )
    parser.add_argument(
        "--dt",
        type=float,
        default=1.0 / 30.0,
        help="Seconds between frames (default: 1/30)",
    )
    parser.add_argument(
        "--orthographic",
        action="store_true",
        help="Use orthographic projection",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="frames",
        help="Output directory (default: frames)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene file; the camera still orbits the origin",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser.parse_args()


def render_first_hit(
    width: int = 600,
    height: int = 600,
    num_frames: int = 1,
    dt: float = 1.0 / 30.0,
    orthographic: bool = False,
    output_dir: str = "frames",
    scene_file: str | None = None,
    quiet: bool = False,
) -> list[Path]:
    """Render the scene and save every frame.

    Returns:
        Paths of the saved frames.
    """
    # Lazy imports to allow Taichi initialization first
    from src.firsthit.camera.view import Projection
    from src.firsthit.core.animation import AnimatedRenderer
    from src.firsthit.preview.export import save_frame_sequence
    from src.firsthit.scene.animation import FrameContext, SceneAnimation
    from src.firsthit.scene.first_hit import create_first_hit_scene
    from src.firsthit.scene.manager import SceneManager

    if scene_file is None:
        scene, animation = create_first_hit_scene()
    else:
        scene = SceneManager()
        scene.from_dict(json.loads(Path(scene_file).read_text()))
        animation = SceneAnimation()

    if not quiet:
        print(
            f"Scene: {scene.get_sphere_count()} spheres, "
            f"{scene.get_triangle_count()} triangles ({width}x{height})"
        )

    renderer = AnimatedRenderer(width, height, scene, animation)
    projection = Projection.ORTHOGRAPHIC if orthographic else Projection.PERSPECTIVE
    start = FrameContext(projection=projection)

    start_time = time.time()
    paths = save_frame_sequence(renderer, output_dir, num_frames, dt, start=start)

    total_time = time.time() - start_time
    if not quiet:
        fps = num_frames / total_time if total_time > 0 else 0
        print(f"Saved {len(paths)} frames to: {Path(output_dir).absolute()}")
        print(f"Total time: {total_time:.2f}s ({fps:.1f} frames/s)")

    return paths


def main() -> int:
    """Main entry point."""
    args = parse_args()
    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Use GPU if available, fall back to CPU
    try:
        ti.init(arch=ti.gpu)
        if not args.quiet:
            print("Using GPU backend")
    except Exception:
        ti.init(arch=ti.cpu)
        if not args.quiet:
            print("Using CPU backend")

    try:
        render_first_hit(
            width=args.width,
            height=args.height,
            num_frames=args.frames,
            dt=args.dt,
            orthographic=args.orthographic,
            output_dir=args.output_dir,
            scene_file=args.scene,
            quiet=args.quiet,
        )
        return 0
    except (ValueError, RuntimeError, OSError) as e:
        logger.error("Render failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
