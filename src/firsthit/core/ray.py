"""Ray data structure and vector utilities.

This module provides the Ray dataclass and the vector helpers shared by the
intersection, shading and camera code. The Taichi functions are meant to be
called from inside kernels; the NumPy helpers at the bottom cover the
Python-side setup work (camera basis, scene validation, tests).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 5.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 4.0)  # (0, 0, 1)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Camera and
            reflection rays are unit length; this is not enforced.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction inside a kernel."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    A zero vector yields NaN components; callers are expected to pass
    non-degenerate input.
    """
    return v / tm.length(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    return tm.cross(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Mirror an incoming direction about a surface normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction, I - 2 (I . N) N.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def reflect_about(to_light: vec3, normal: vec3) -> vec3:
    """Reflect a surface-to-light vector about the normal for specular shading.

    Unlike reflect(), the input points away from the surface, so the result
    is 2 (N . L) N - L, renormalized.
    """
    return normalize(2.0 * tm.dot(normal, to_light) * normal - to_light)


# =============================================================================
# NumPy Helpers (Python scope)
# =============================================================================


def to_vec3(values) -> npt.NDArray[np.float32]:
    """Convert a 3-sequence to a float32 NumPy vector."""
    arr = np.asarray(values, dtype=np.float32)
    if arr.shape != (3,):
        raise ValueError(f"Expected 3 components, got shape {arr.shape}")
    return arr


def np_normalize(v: npt.NDArray[np.float32]) -> npt.NDArray[np.float32]:
    """Normalize a NumPy vector. Zero vectors are returned unchanged."""
    norm = float(np.linalg.norm(v))
    if norm == 0.0:
        return v
    return (v / norm).astype(np.float32)


def np_reflect(
    incident: npt.NDArray[np.float32], normal: npt.NDArray[np.float32]
) -> npt.NDArray[np.float32]:
    """NumPy counterpart of reflect(): I - 2 (I . N) N."""
    return (incident - 2.0 * np.dot(incident, normal) * normal).astype(np.float32)
