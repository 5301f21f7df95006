"""Frame driver: trace every pixel once and produce the RGB frame buffer.

Each call to render_frame() runs one Taichi kernel over all pixels. Every
pixel builds its camera ray, traces it at depth 0 and writes exactly one
slot of the color buffer. Scene and camera fields are only read during the
kernel, so pixels are independent and run in parallel.

The caller must finish all per-frame updates (sphere animation, camera
setup) before calling render_frame().

Buffer layout:
    The color buffer is indexed (i, j) with i = 0 the left column and
    j = 0 the bottom row. get_image_numpy() and get_frame_array() return
    (height, width, 3) arrays with the top row first unless top_down=False.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.firsthit.core.renderer import (
    ...     setup_render_target, render_frame, get_frame_bytes
    ... )
    >>> from src.firsthit.scene.first_hit import create_first_hit_scene
    >>> from src.firsthit.camera.view import setup_camera
    >>>
    >>> from src.firsthit.scene.animation import FrameContext
    >>>
    >>> scene, animation = create_first_hit_scene()
    >>> setup_camera(animation.apply(scene, FrameContext()))
    >>> setup_render_target(600, 600)
    >>> render_frame()
    >>> data = get_frame_bytes()  # 600 * 600 * 3 bytes
"""

import logging

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.firsthit.camera.view import get_pixel_ray
from src.firsthit.core.tracer import trace

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 1024
MAX_IMAGE_HEIGHT = 1024

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Linear color buffer, one traced color per pixel
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Number of frames traced into the buffer since the last setup
_frame_count = ti.field(dtype=ti.i32, shape=())

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions and clears the buffers.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()
    logger.info("Render target set to %dx%d", width, height)


def clear_render_target() -> None:
    """Clear the color buffer and frame counter."""
    _color_buffer.fill(0.0)
    _frame_count[None] = 0


def reset_render_target() -> None:
    """Clear the buffers and mark the render target as not set up."""
    clear_render_target()
    _image_width[None] = 0
    _image_height[None] = 0
    _render_target_initialized[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def get_frame_count() -> int:
    """Number of frames rendered since the render target was set up."""
    return int(_frame_count[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def get_image() -> "ti.MatrixField":
    """Get the raw color buffer field.

    This is the full preallocated buffer; use get_image_dimensions() for the
    active region.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    return _color_buffer


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_frame_kernel(width: ti.i32, height: ti.i32):
    for i, j in ti.ndrange(width, height):
        ray = get_pixel_ray(i, j, width, height)
        _color_buffer[i, j] = trace(ray.origin, ray.direction, 0)


@ti.kernel
def _render_single_pixel(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    ray = get_pixel_ray(pixel_i, pixel_j, width, height)
    return trace(ray.origin, ray.direction, 0)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_frame() -> None:
    """Trace every pixel of the render target once.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    _render_frame_kernel(width, height)
    _frame_count[None] += 1
    logger.debug("Rendered frame %d (%dx%d)", _frame_count[None], width, height)


def render_pixel(pixel_i: int, pixel_j: int) -> tuple[float, float, float]:
    """Trace a single pixel and return its color without touching the buffer.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    color = _render_single_pixel(pixel_i, pixel_j, width, height)
    return (float(color[0]), float(color[1]), float(color[2]))


# =============================================================================
# Frame Buffer Output
# =============================================================================


def quantize(colors: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert linear colors to bytes with round(clamp(c, 0, 1) * 255).

    Halves round up. NaN from degenerate geometry (zero-radius spheres,
    zero-length normals) has no meaningful color and becomes 0.
    """
    finite = np.nan_to_num(colors.astype(np.float64), nan=0.0)
    clamped = np.clip(finite, 0.0, 1.0)
    return np.floor(clamped * 255.0 + 0.5).astype(np.uint8)


def get_image_numpy(top_down: bool = True) -> npt.NDArray[np.float32]:
    """Get the traced colors as a (height, width, 3) float32 array.

    Args:
        top_down: If True the first row is the top of the image, otherwise
            the bottom (texture upload order).

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    full_image = _color_buffer.to_numpy()

    # (width, height, 3) -> (height, width, 3), bottom row first
    image = np.transpose(full_image[:width, :height, :], (1, 0, 2))
    if top_down:
        image = np.flipud(image)

    return np.ascontiguousarray(image, dtype=np.float32)


def get_frame_array(top_down: bool = True) -> npt.NDArray[np.uint8]:
    """Get the quantized frame as a (height, width, 3) uint8 array."""
    return quantize(get_image_numpy(top_down=top_down))


def get_frame_bytes(top_down: bool = True) -> bytes:
    """Get the frame as a row-major, RGB-interleaved byte buffer.

    The buffer holds width * height * 3 bytes and is the hand-off format for
    display collaborators (texture upload, image writers).

    Args:
        top_down: Row order; pass False for bottom-up order as expected by
            OpenGL texture uploads.
    """
    return get_frame_array(top_down=top_down).tobytes()
