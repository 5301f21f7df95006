#!/usr/bin/env python3
"""Interactive first-hit renderer.

Opens a window showing the animated scene: two bobbing spheres, a magenta
tetrahedron and a reflective floor, viewed by a camera orbiting the origin.

Usage:
    python -m examples.interactive_first_hit

Controls:
    - P: Toggle perspective / orthographic projection
    - S: Save the current frame with a timestamp
    - Escape: Quit
"""

from __future__ import annotations

import logging
import platform
import sys
from pathlib import Path

# Ensure the project root is in the Python path for direct execution
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import taichi as ti  # noqa: E402

WINDOW_WIDTH = 600
WINDOW_HEIGHT = 600


def initialize_taichi() -> str:
    """Initialize Taichi with the best available backend.

    On macOS, prefers Metal. Falls back to CPU if GPU is unavailable.

    Returns:
        Name of the backend being used.
    """
    system = platform.system()

    if system == "Darwin":
        try:
            ti.init(arch=ti.metal)
            return "Metal (GPU)"
        except Exception:
            pass

    try:
        ti.init(arch=ti.gpu)
        return "GPU"
    except Exception:
        pass

    ti.init(arch=ti.cpu)
    return "CPU"


def main() -> int:
    """Main entry point for the interactive renderer.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    # Initialize Taichi first (before importing modules that use ti.kernel)
    backend = initialize_taichi()
    print(f"Taichi backend: {backend}")

    from src.firsthit.core.animation import AnimatedRenderer
    from src.firsthit.preview.interactive import InteractivePreview
    from src.firsthit.scene.first_hit import create_first_hit_scene

    if not InteractivePreview.is_display_available():
        print("Error: No display available. Cannot run interactive preview.")
        print("This script requires a graphical display environment.")
        return 1

    scene, animation = create_first_hit_scene()
    renderer = AnimatedRenderer(WINDOW_WIDTH, WINDOW_HEIGHT, scene, animation)

    print(f"Creating interactive preview window ({WINDOW_WIDTH}x{WINDOW_HEIGHT})...")
    preview = InteractivePreview(WINDOW_WIDTH, WINDOW_HEIGHT)

    print("Starting interactive rendering...")
    print("  - Press P to toggle perspective / orthographic")
    print("  - Press S to save the current frame")
    print("  - Press Escape or close the window to exit")
    print()

    try:
        preview.run_animated(renderer)
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
    finally:
        preview.close()
        print("Preview window closed.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
