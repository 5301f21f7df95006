"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with analytic ray-sphere intersection
    triangle: Triangle primitive with Moller-Trumbore intersection
    plane: Infinite plane used as the reflective floor

All intersection routines are Taichi functions (@ti.func) and share one
contract: report only the nearest forward hit, never one behind the ray
origin or at the origin itself.

    hit, t = intersect_shape(ray_origin, ray_direction, *shape_data)
"""

from .plane import (
    PLANE_EPSILON,
    PLANE_PARALLEL_EPSILON,
    intersect_plane,
)
from .sphere import SPHERE_EPSILON, intersect_sphere, sphere_normal
from .triangle import (
    TRIANGLE_EPSILON,
    intersect_triangle,
    triangle_normal,
)

__all__ = [
    "intersect_sphere",
    "sphere_normal",
    "SPHERE_EPSILON",
    "intersect_triangle",
    "triangle_normal",
    "TRIANGLE_EPSILON",
    "intersect_plane",
    "PLANE_EPSILON",
    "PLANE_PARALLEL_EPSILON",
]
