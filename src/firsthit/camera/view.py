"""Look-at camera with perspective and orthographic ray generation.

The camera builds an orthonormal basis from the eye position and the target:
- forward: normalize(target - eye)
- right: normalize(forward x world_up)
- up: right x forward (unit, since right and forward are unit and orthogonal)

Pixels are sampled at their centers. A pixel index i in [0, n) maps to
normalized device coordinates ((i + 0.5) / n) * 2 - 1 in (-1, 1).

Perspective rays all start at the eye and diverge through an image plane
at unit distance whose half-height is tan(vfov / 2). Orthographic rays all
travel along forward and start on the plane through the eye, spread by
ortho_scale.

The projection mode is part of the camera configuration; nothing in this
module reads global input state.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.firsthit.camera.view import ViewCamera, Projection, setup_camera
    >>> camera = ViewCamera(eye=(0.0, 1.0, 4.0), target=(0.0, 0.0, 0.0))
    >>> setup_camera(camera)
    >>> setup_camera(camera.with_projection(Projection.ORTHOGRAPHIC))
"""

import math
from dataclasses import dataclass, replace
from enum import IntEnum

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.firsthit.core.ray import Ray, make_ray, np_normalize, to_vec3, vec3

# =============================================================================
# Camera Data Structures
# =============================================================================


class Projection(IntEnum):
    """Camera projection mode."""

    PERSPECTIVE = 0
    ORTHOGRAPHIC = 1


@dataclass
class ViewCamera:
    """Configuration for the look-at camera.

    Attributes:
        eye: Camera position in world space.
        target: Point the camera looks at.
        world_up: Reference up direction used to build the basis.
        vfov: Vertical field of view in degrees (perspective only).
        ortho_scale: Half-height of the view in world units (orthographic only).
        aspect_ratio: Image width divided by height.
        projection: Perspective or orthographic.
    """

    eye: tuple[float, float, float]
    target: tuple[float, float, float] = (0.0, 0.0, 0.0)
    world_up: tuple[float, float, float] = (0.0, 1.0, 0.0)
    vfov: float = 60.0
    ortho_scale: float = 2.0
    aspect_ratio: float = 1.0
    projection: Projection = Projection.PERSPECTIVE

    def with_projection(self, projection: Projection) -> "ViewCamera":
        """Return a copy of this camera using another projection."""
        return replace(self, projection=projection)


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_eye = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_up = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_forward = ti.Vector.field(3, dtype=ti.f32, shape=())

_aspect_ratio = ti.field(dtype=ti.f32, shape=())
_perspective_scale = ti.field(dtype=ti.f32, shape=())
_ortho_scale = ti.field(dtype=ti.f32, shape=())
_projection = ti.field(dtype=ti.i32, shape=())


# =============================================================================
# Camera Setup (Python scope, once per frame)
# =============================================================================


def build_view_basis(
    eye: tuple[float, float, float],
    target: tuple[float, float, float],
    world_up: tuple[float, float, float] = (0.0, 1.0, 0.0),
) -> tuple[npt.NDArray[np.float32], npt.NDArray[np.float32], npt.NDArray[np.float32]]:
    """Build the camera's orthonormal basis.

    Args:
        eye: Camera position.
        target: Look-at point.
        world_up: Reference up direction (must not be parallel to the view).

    Returns:
        A tuple (right, up, forward) of unit float32 vectors.
    """
    forward = np_normalize(to_vec3(target) - to_vec3(eye))
    right = np_normalize(np.cross(forward, to_vec3(world_up)).astype(np.float32))
    up = np.cross(right, forward).astype(np.float32)
    return right, up, forward


def pixel_to_ndc(index: float, resolution: int) -> float:
    """Map a pixel index to its center in normalized device coordinates."""
    return ((index + 0.5) / resolution) * 2.0 - 1.0


def orbit_eye(angle: float, radius: float, height: float) -> tuple[float, float, float]:
    """Eye position on a horizontal circle around the y axis.

    angle = 0 places the eye on the +z axis.
    """
    return (radius * math.sin(angle), height, radius * math.cos(angle))


def setup_camera(camera: ViewCamera) -> None:
    """Write the camera basis, scales and projection mode to Taichi fields.

    Must be called before rendering and whenever the camera moves.

    Args:
        camera: Camera configuration.
    """
    right, up, forward = build_view_basis(camera.eye, camera.target, camera.world_up)

    _camera_eye[None] = [float(c) for c in camera.eye]
    _camera_right[None] = right.tolist()
    _camera_up[None] = up.tolist()
    _camera_forward[None] = forward.tolist()

    _aspect_ratio[None] = camera.aspect_ratio
    _perspective_scale[None] = math.tan(math.radians(camera.vfov) * 0.5)
    _ortho_scale[None] = camera.ortho_scale
    _projection[None] = int(camera.projection)


# =============================================================================
# Ray Generation (Taichi scope)
# =============================================================================


@ti.func
def get_ray(ndc_x: ti.f32, ndc_y: ti.f32) -> Ray:
    """Generate the camera ray for a point in normalized device coordinates.

    Args:
        ndc_x: Horizontal coordinate in [-1, 1] (left to right).
        ndc_y: Vertical coordinate in [-1, 1] (bottom to top).

    Returns:
        Perspective: a ray from the eye with a unit direction through the
        image plane. Orthographic: a ray along forward whose origin is
        offset across the view plane.
    """
    eye = _camera_eye[None]
    right = _camera_right[None]
    up = _camera_up[None]
    forward = _camera_forward[None]
    aspect = _aspect_ratio[None]

    origin = eye
    direction = forward

    if _projection[None] == int(Projection.PERSPECTIVE):
        scale = _perspective_scale[None]
        px = ndc_x * aspect * scale
        py = ndc_y * scale
        direction = tm.normalize(right * px + up * py + forward)
    else:
        scale = _ortho_scale[None]
        px = ndc_x * aspect * scale
        py = ndc_y * scale
        origin = eye + right * px + up * py

    return make_ray(origin, direction)


@ti.func
def get_pixel_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the ray through the center of pixel (i, j).

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        width: Image width in pixels.
        height: Image height in pixels.
    """
    ndc_x = ((ti.cast(pixel_i, ti.f32) + 0.5) / ti.cast(width, ti.f32)) * 2.0 - 1.0
    ndc_y = ((ti.cast(pixel_j, ti.f32) + 0.5) / ti.cast(height, ti.f32)) * 2.0 - 1.0
    return get_ray(ndc_x, ndc_y)


@ti.kernel
def _ray_kernel(ndc_x: ti.f32, ndc_y: ti.f32, out: ti.types.ndarray()):
    ray = get_ray(ndc_x, ndc_y)
    for k in ti.static(range(3)):
        out[k] = ray.origin[k]
        out[k + 3] = ray.direction[k]


def generate_ray(
    ndc_x: float, ndc_y: float
) -> tuple[tuple[float, float, float], tuple[float, float, float]]:
    """Generate a camera ray from Python scope.

    Returns:
        A tuple (origin, direction).
    """
    out = np.zeros(6, dtype=np.float32)
    _ray_kernel(ndc_x, ndc_y, out)
    return (
        (float(out[0]), float(out[1]), float(out[2])),
        (float(out[3]), float(out[4]), float(out[5])),
    )


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, object]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with eye, right, up, forward, scales and projection.
    """

    def _as_tuple(field) -> tuple[float, float, float]:
        v = field[None]
        return (float(v[0]), float(v[1]), float(v[2]))

    return {
        "eye": _as_tuple(_camera_eye),
        "right": _as_tuple(_camera_right),
        "up": _as_tuple(_camera_up),
        "forward": _as_tuple(_camera_forward),
        "aspect_ratio": float(_aspect_ratio[None]),
        "perspective_scale": float(_perspective_scale[None]),
        "ortho_scale": float(_ortho_scale[None]),
        "projection": Projection(int(_projection[None])),
    }
