"""Interactive preview window using Taichi GGUI.

Renders the animated scene continuously into a ti.ui.Window. Each loop
iteration advances the frame context by the wall-clock time since the
previous frame, renders one frame and presents it.

Keys:
    P: toggle between perspective and orthographic projection
    S: export the current frame to a timestamped PNG
    Escape: close the window

The window is created lazily, so the class can be constructed and its
key handling exercised without a display.

Example:
    >>> from src.firsthit.preview.interactive import InteractivePreview
    >>> from src.firsthit.core.animation import AnimatedRenderer
    >>> from src.firsthit.scene.first_hit import create_first_hit_scene
    >>>
    >>> scene, animation = create_first_hit_scene()
    >>> renderer = AnimatedRenderer(600, 600, scene, animation)
    >>> preview = InteractivePreview(600, 600)
    >>> preview.run_animated(renderer)  # Blocks until window closed
"""

import logging
import os
import time
from datetime import datetime
from typing import TYPE_CHECKING, Any

import numpy as np
import taichi as ti

from src.firsthit.scene.animation import FrameContext

if TYPE_CHECKING:
    import numpy.typing as npt

    from src.firsthit.core.animation import AnimatedRenderer

logger = logging.getLogger(__name__)

# Key bindings (GGUI reports letter keys lowercase)
KEY_TOGGLE_PROJECTION = "p"
KEY_EXPORT = "s"
KEY_QUIT = "Escape"


# Lazy kernel holder - kernel is created on first use after Taichi is initialized
_copy_region_kernel: Any = None


def _get_copy_region_kernel() -> Any:
    """Get or create the region copy kernel.

    The kernel is created lazily to ensure Taichi is initialized first.
    """
    global _copy_region_kernel
    if _copy_region_kernel is None:

        @ti.kernel
        def _kernel(src: ti.template(), dst: ti.template(), width: ti.i32, height: ti.i32):
            for i, j in ti.ndrange(width, height):
                dst[i, j] = src[i, j]

        _copy_region_kernel = _kernel
    return _copy_region_kernel


class InteractivePreview:
    """Interactive preview window using Taichi GGUI.

    Attributes:
        width: Window width in pixels.
        height: Window height in pixels.
        display_image: Taichi field storing the display image (RGB float),
            indexed (x, y) with y = 0 at the bottom.
        context: Frame context of the most recent frame.
    """

    def __init__(
        self,
        width: int,
        height: int,
        *,
        title: str = "First Hit - Interactive Preview",
    ) -> None:
        """Initialize the preview.

        Args:
            width: Window width in pixels.
            height: Window height in pixels.
            title: Window title.

        Note:
            The window is not created until it is first needed.
        """
        self.width = width
        self.height = height
        self._title = title
        self._is_initialized = False

        self._window: "ti.ui.Window | None" = None
        self._canvas: "ti.ui.Canvas | None" = None

        self.display_image: "ti.MatrixField" = ti.Vector.field(
            3, dtype=ti.f32, shape=(width, height)
        )
        self.context = FrameContext()
        self._running = True

    def _initialize_window(self) -> None:
        if self._is_initialized:
            return

        self._window = ti.ui.Window(
            name=self._title,
            res=(self.width, self.height),
            vsync=True,
        )
        self._canvas = self._window.get_canvas()
        self._is_initialized = True

    @property
    def window(self) -> "ti.ui.Window":
        """Get the Taichi GGUI window, initializing if needed."""
        if self._window is None:
            self._initialize_window()
        assert self._window is not None
        return self._window

    @property
    def canvas(self) -> "ti.ui.Canvas":
        """Get the canvas for rendering."""
        if self._canvas is None:
            self._initialize_window()
        assert self._canvas is not None
        return self._canvas

    def update_image(self, image: "npt.NDArray[np.float32]") -> None:
        """Update the display image from a numpy array.

        Args:
            image: Array of shape (height, width, 3), top row first, values
                in [0, 1].

        Raises:
            ValueError: If image shape doesn't match (height, width, 3).
        """
        expected_shape = (self.height, self.width, 3)
        if image.shape != expected_shape:
            raise ValueError(
                f"Image shape {image.shape} doesn't match expected {expected_shape}"
            )

        # NumPy (row, col) top-down -> Taichi (x, y) bottom-up
        image_transposed = np.ascontiguousarray(
            np.transpose(np.flipud(image), (1, 0, 2)), dtype=np.float32
        )
        self.display_image.from_numpy(image_transposed)

    def update_image_from_field(self, field: "ti.MatrixField") -> None:
        """Copy the active region of a (x, y) color field into the display image.

        The source may be larger than the window (the renderer's buffer is
        preallocated at its maximum size).
        """
        kernel = _get_copy_region_kernel()
        kernel(field, self.display_image, self.width, self.height)

    def handle_key(self, key: str) -> None:
        """Apply one key press to the preview state."""
        if key == KEY_TOGGLE_PROJECTION:
            self.context = self.context.toggle_projection()
            logger.info("Projection: %s", self.context.projection.name.lower())
        elif key == KEY_QUIT:
            self._running = False

    def _process_events(self, renderer: "AnimatedRenderer | None" = None) -> None:
        for event in self.window.get_events(ti.ui.PRESS):
            if event.key == KEY_EXPORT and renderer is not None:
                self._export_png(renderer)
            else:
                self.handle_key(event.key)

    def is_running(self) -> bool:
        """Check if the window is still open and Escape has not been pressed."""
        return self._running and self.window.running

    def show_frame(self) -> None:
        """Present the current display image."""
        self.canvas.set_image(self.display_image)
        self.window.show()

    def step(self, renderer: "AnimatedRenderer", dt: float) -> None:
        """Advance the context by dt, render a frame and load it for display."""
        from src.firsthit.core.renderer import get_image

        self.context = self.context.advance(dt)
        renderer.render(self.context)
        self.update_image_from_field(get_image())

    def run_animated(self, renderer: "AnimatedRenderer", *, fixed_dt: float | None = None) -> None:
        """Run the animation loop until the window is closed.

        Args:
            renderer: Renderer sized like this window.
            fixed_dt: Time step per frame; None uses wall-clock time.

        Raises:
            ValueError: If the renderer size differs from the window size.
        """
        if (renderer.width, renderer.height) != (self.width, self.height):
            raise ValueError(
                f"Renderer is {renderer.width}x{renderer.height}, "
                f"window is {self.width}x{self.height}"
            )

        self._initialize_window()
        renderer.render(self.context)
        last = time.perf_counter()

        while self.is_running():
            self._process_events(renderer)
            now = time.perf_counter()
            dt = fixed_dt if fixed_dt is not None else now - last
            last = now
            self.step(renderer, dt)
            self.show_frame()

    def close(self) -> None:
        """Close the preview window."""
        self._running = False
        if self._window is not None:
            self._window.running = False

    @staticmethod
    def is_display_available() -> bool:
        """Check if a display is available for GUI rendering.

        Returns:
            True if a display is available, False for headless environments.
        """
        display = os.environ.get("DISPLAY")
        wayland = os.environ.get("WAYLAND_DISPLAY")

        if os.name == "nt":
            return True

        if os.uname().sysname == "Darwin":
            # SSH session without X forwarding
            ssh_connection = os.environ.get("SSH_CONNECTION")
            if ssh_connection and not display:
                return False
            return True

        return bool(display or wayland)

    def _export_png(self, renderer: "AnimatedRenderer") -> None:
        """Export the current frame to first_hit_YYYYMMDD_HHMMSS.png."""
        from src.firsthit.preview.export import save_png

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"first_hit_{timestamp}.png"
        save_png(renderer, filename)
        logger.info("Exported %s (frame %d)", filename, renderer.frame_count)
