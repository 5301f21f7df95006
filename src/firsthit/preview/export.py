"""Image export utilities for rendered frames.

Frames are written as 8-bit RGB PNG files via Pillow. Linear float images
are quantized the same way as the frame buffer (clamp, then round half up),
so a saved PNG holds exactly the bytes of get_frame_bytes().

Example:
    >>> from src.firsthit.preview.export import save_png, save_frame_sequence
    >>> from src.firsthit.core.animation import AnimatedRenderer
    >>> from src.firsthit.scene.first_hit import create_first_hit_scene
    >>>
    >>> scene, animation = create_first_hit_scene()
    >>> renderer = AnimatedRenderer(600, 600, scene, animation)
    >>> save_frame_sequence(renderer, "frames", num_frames=60, dt=1.0 / 30.0)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.firsthit.core.renderer import quantize

if TYPE_CHECKING:
    from src.firsthit.core.animation import AnimatedRenderer
    from src.firsthit.scene.animation import FrameContext

logger = logging.getLogger(__name__)

# File name pattern for exported animation frames
FRAME_PATTERN = "frame_%04d.png"


def image_to_uint8(image: npt.NDArray[np.generic]) -> npt.NDArray[np.uint8]:
    """Convert an image to uint8 for export.

    uint8 input is returned unchanged; float input is treated as linear
    color in [0, 1] and quantized.

    Args:
        image: Image array of shape (H, W, 3).

    Raises:
        ValueError: If the array is not (H, W, 3).
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")
    if image.dtype == np.uint8:
        return image
    return quantize(image)


def save_png(
    source: AnimatedRenderer | npt.NDArray[np.generic],
    filepath: str | Path,
) -> None:
    """Save a frame as a PNG file.

    Args:
        source: An AnimatedRenderer (its current frame is saved) or an
            (H, W, 3) image array with the top row first.
        filepath: Output file path (should end in .png).
    """
    if isinstance(source, np.ndarray):
        image_uint8 = image_to_uint8(source)
    else:
        image_uint8 = source.get_frame_array()

    pil_image = PILImage.fromarray(image_uint8, mode="RGB")
    pil_image.save(filepath)


def save_frame_sequence(
    renderer: AnimatedRenderer,
    directory: str | Path,
    num_frames: int,
    dt: float,
    *,
    start: FrameContext | None = None,
    pattern: str = FRAME_PATTERN,
) -> list[Path]:
    """Render an animation and write every frame as a numbered PNG.

    Args:
        renderer: The renderer to drive.
        directory: Output directory, created if missing.
        num_frames: Number of frames to render.
        dt: Time step between frames in seconds.
        start: Context of the first frame (default FrameContext()).
        pattern: printf-style file name pattern taking the frame index.

    Returns:
        Paths of the written files, in frame order.
    """
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for index, _ in renderer.frames(num_frames, dt, start):
        path = out_dir / (pattern % index)
        save_png(renderer, path)
        paths.append(path)
        logger.debug("Wrote %s", path)

    logger.info("Wrote %d frames to %s", len(paths), out_dir)
    return paths


def load_png(filepath: str | Path) -> npt.NDArray[np.uint8]:
    """Load an RGB PNG as an (H, W, 3) uint8 array."""
    with PILImage.open(filepath) as pil_image:
        return np.asarray(pil_image.convert("RGB"), dtype=np.uint8)


def compute_rmse(
    image_a: npt.NDArray[np.generic],
    image_b: npt.NDArray[np.generic],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
