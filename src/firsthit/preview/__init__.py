"""Preview module for output and visualization.

Components:
    display: Matplotlib-based frame display and projection comparison
    export: PNG export, numbered frame sequences and image comparison
    interactive: Taichi GGUI-based interactive animation window

Example:
    >>> from src.firsthit.preview import save_png, show_frame
    >>> from src.firsthit.core.animation import AnimatedRenderer
    >>> from src.firsthit.scene.animation import FrameContext
    >>> from src.firsthit.scene.first_hit import create_first_hit_scene
    >>>
    >>> scene, animation = create_first_hit_scene()
    >>> renderer = AnimatedRenderer(600, 600, scene, animation)
    >>> renderer.render(FrameContext())
    >>> show_frame(renderer)
    >>> save_png(renderer, "output.png")

For the interactive window:
    >>> from src.firsthit.preview import InteractivePreview
    >>> preview = InteractivePreview(600, 600)
    >>> preview.run_animated(renderer)
"""

from src.firsthit.preview.display import (
    compare_projections,
    show_comparison,
    show_frame,
    to_display_image,
)
from src.firsthit.preview.export import (
    FRAME_PATTERN,
    compute_rmse,
    image_to_uint8,
    load_png,
    save_frame_sequence,
    save_png,
)
from src.firsthit.preview.interactive import InteractivePreview

__all__ = [
    # Interactive preview
    "InteractivePreview",
    # Display functions
    "show_frame",
    "show_comparison",
    "compare_projections",
    "to_display_image",
    # Export functions
    "save_png",
    "save_frame_sequence",
    "load_png",
    "image_to_uint8",
    "compute_rmse",
    "FRAME_PATTERN",
]
