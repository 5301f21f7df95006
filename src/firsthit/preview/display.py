"""Matplotlib-based display of rendered frames.

Frames are already clamped display values in [0, 1], so there is no tone
mapping or gamma step; images are shown as traced.

Example:
    >>> from src.firsthit.preview.display import show_frame, compare_projections
    >>> from src.firsthit.core.animation import AnimatedRenderer
    >>> from src.firsthit.scene.animation import FrameContext
    >>> from src.firsthit.scene.first_hit import create_first_hit_scene
    >>>
    >>> scene, animation = create_first_hit_scene()
    >>> renderer = AnimatedRenderer(400, 400, scene, animation)
    >>> renderer.render(FrameContext())
    >>> show_frame(renderer)
    >>> perspective, orthographic = compare_projections(renderer, FrameContext())
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from src.firsthit.camera.view import Projection

if TYPE_CHECKING:
    from src.firsthit.core.animation import AnimatedRenderer
    from src.firsthit.scene.animation import FrameContext


def to_display_image(image: npt.NDArray[np.generic]) -> npt.NDArray[np.float32]:
    """Convert a frame to float32 in [0, 1] for display.

    uint8 frames are scaled by 1/255; float frames are clamped.
    """
    if image.dtype == np.uint8:
        return (image.astype(np.float32) / 255.0).astype(np.float32)
    return np.clip(image, 0.0, 1.0).astype(np.float32)


def show_frame(
    source: AnimatedRenderer | npt.NDArray[np.generic],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 8),
    block: bool = True,
) -> None:
    """Display a frame as a Matplotlib figure.

    Args:
        source: An AnimatedRenderer (its current frame is shown) or an
            (H, W, 3) image with the top row first.
        title: Custom title (default shows the frame count for renderers).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until figure is closed.
    """
    import matplotlib.pyplot as plt

    if isinstance(source, np.ndarray):
        display_image = to_display_image(source)
        title_text = title if title is not None else "Frame"
    else:
        display_image = to_display_image(source.get_image_numpy())
        title_text = title if title is not None else f"Frame {source.frame_count}"

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(display_image)
    ax.axis("off")
    ax.set_title(title_text)

    plt.tight_layout()
    plt.show(block=block)


def show_comparison(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
    *,
    labels: tuple[str, str] = ("A", "B"),
    diff_scale: float = 10.0,
    figsize: tuple[float, float] = (16, 6),
    block: bool = True,
) -> float:
    """Display side-by-side comparison of two frames with difference view.

    Args:
        image_a: First image array (H, W, 3).
        image_b: Second image array (H, W, 3).
        labels: Labels for the two images.
        diff_scale: Scale factor for difference amplification.
        figsize: Figure size in inches.
        block: Whether to block execution until figure is closed.

    Returns:
        RMSE between the two images in display space.
    """
    import matplotlib.pyplot as plt

    display_a = to_display_image(image_a)
    display_b = to_display_image(image_b)

    diff = display_a.astype(np.float64) - display_b.astype(np.float64)
    rmse = float(np.sqrt(np.mean(diff**2)))

    diff_amplified = np.clip(np.abs(diff) * diff_scale, 0.0, 1.0)

    fig, axes = plt.subplots(1, 3, figsize=figsize)

    axes[0].imshow(display_a)
    axes[0].set_title(labels[0])
    axes[0].axis("off")

    axes[1].imshow(display_b)
    axes[1].set_title(labels[1])
    axes[1].axis("off")

    axes[2].imshow(diff_amplified)
    axes[2].set_title(f"Difference ({diff_scale}x) - RMSE: {rmse:.6f}")
    axes[2].axis("off")

    plt.tight_layout()
    plt.show(block=block)

    return rmse


def compare_projections(
    renderer: AnimatedRenderer,
    context: FrameContext,
    *,
    show: bool = False,
    block: bool = True,
) -> tuple[npt.NDArray[np.uint8], npt.NDArray[np.uint8]]:
    """Render one frame in both projection modes.

    Args:
        renderer: The renderer to drive.
        context: Frame context; its projection is overridden.
        show: If True, display the two frames with show_comparison().
        block: Passed to show_comparison().

    Returns:
        (perspective_frame, orthographic_frame) as uint8 arrays.
    """
    renderer.render(replace(context, projection=Projection.PERSPECTIVE))
    perspective = renderer.get_frame_array()
    renderer.render(replace(context, projection=Projection.ORTHOGRAPHIC))
    orthographic = renderer.get_frame_array()

    if show:
        show_comparison(
            perspective,
            orthographic,
            labels=("Perspective", "Orthographic"),
            block=block,
        )

    return perspective, orthographic
