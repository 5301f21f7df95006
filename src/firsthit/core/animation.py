"""Animated renderer: per-frame animation step followed by the frame kernel.

A frame is produced in two strictly ordered phases:

    1. SceneAnimation.apply(scene, context) moves the bobbing spheres and
       returns the camera for the frame.
    2. The frame kernel traces every pixel against the frozen scene.

AnimatedRenderer wraps both phases together with the render target. The
frame state types live in scene.animation.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.firsthit.core.animation import AnimatedRenderer
    >>> from src.firsthit.scene.animation import FrameContext
    >>> from src.firsthit.scene.first_hit import create_first_hit_scene
    >>>
    >>> scene, animation = create_first_hit_scene()
    >>> renderer = AnimatedRenderer(320, 240, scene, animation)
    >>> context = FrameContext()
    >>> for _ in range(10):
    ...     renderer.render(context)
    ...     context = context.advance(1.0 / 30.0)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from src.firsthit.camera.view import setup_camera
from src.firsthit.core.renderer import (
    get_frame_array,
    get_frame_bytes,
    get_frame_count,
    get_image_numpy,
    render_frame,
    setup_render_target,
)
from src.firsthit.scene.animation import FrameContext

if TYPE_CHECKING:
    from src.firsthit.scene.animation import SceneAnimation
    from src.firsthit.scene.manager import SceneManager

logger = logging.getLogger(__name__)

# Callback receives (frame_index, total_frames)
FrameCallback = Callable[[int, int], None]


class AnimatedRenderer:
    """Renders frames of an animated scene into the shared render target.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        scene: The scene being animated.
        animation: The animation applied before each frame.
    """

    def __init__(
        self,
        width: int,
        height: int,
        scene: SceneManager,
        animation: SceneAnimation,
    ) -> None:
        """Initialize the renderer and its render target.

        The animation's aspect ratio is overwritten with width / height.

        Raises:
            ValueError: If dimensions exceed maximum supported size.
        """
        self._width = width
        self._height = height
        self.scene = scene
        self.animation = animation
        self.animation.aspect_ratio = width / height
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def frame_count(self) -> int:
        """Number of frames rendered so far."""
        return get_frame_count()

    def resize(self, width: int, height: int) -> None:
        """Resize the render target.

        Raises:
            ValueError: If dimensions exceed maximum supported size.
        """
        self._width = width
        self._height = height
        self.animation.aspect_ratio = width / height
        setup_render_target(width, height)

    def render(self, context: FrameContext) -> None:
        """Apply the animation for context and trace one frame."""
        camera = self.animation.apply(self.scene, context)
        setup_camera(camera)
        render_frame()
        logger.debug(
            "Frame at t=%.3fs angle=%.3f (%s)",
            context.elapsed,
            context.orbit_angle,
            context.projection.name.lower(),
        )

    def frames(
        self,
        num_frames: int,
        dt: float,
        start: FrameContext | None = None,
    ) -> Generator[tuple[int, FrameContext], None, None]:
        """Render num_frames frames dt seconds apart, yielding after each.

        The frame is in the render target when the generator yields, so
        callers read it with get_frame_bytes() / get_image_numpy().

        Yields:
            Tuple of (frame_index, context used for the frame).
        """
        context = start if start is not None else FrameContext()
        for index in range(num_frames):
            self.render(context)
            yield index, context
            context = context.advance(dt)

    def render_sequence(
        self,
        num_frames: int,
        dt: float,
        start: FrameContext | None = None,
        callback: FrameCallback | None = None,
    ) -> FrameContext:
        """Render a run of frames, calling callback after each.

        Returns:
            The context following the last rendered frame.
        """
        context = start if start is not None else FrameContext()
        for index, used in self.frames(num_frames, dt, context):
            context = used.advance(dt)
            if callback is not None:
                callback(index + 1, num_frames)
        return context

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Linear colors of the current frame, (height, width, 3), top row first."""
        return get_image_numpy()

    def get_frame_array(self, top_down: bool = True) -> npt.NDArray[np.uint8]:
        """Quantized current frame, (height, width, 3) uint8."""
        return get_frame_array(top_down=top_down)

    def get_frame_bytes(self, top_down: bool = True) -> bytes:
        """Current frame as a width * height * 3 RGB byte buffer."""
        return get_frame_bytes(top_down=top_down)

    def save_image(self, filepath: str) -> None:
        """Save the current frame to an image file."""
        from PIL import Image as PILImage

        PILImage.fromarray(self.get_frame_array(), mode="RGB").save(filepath)

    def __repr__(self) -> str:
        return (
            f"AnimatedRenderer(width={self.width}, height={self.height}, "
            f"frames={self.frame_count})"
        )
