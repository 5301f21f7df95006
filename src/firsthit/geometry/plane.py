"""Infinite plane primitive.

The plane is given by a point on it and a unit normal. Solving
dot(origin + t * direction - point, normal) = 0 gives

    t = dot(point - origin, normal) / dot(direction, normal)

Rays within PLANE_PARALLEL_EPSILON of parallel never hit, and hits at or
below PLANE_EPSILON are rejected so reflection rays leaving the plane do not
hit it again.
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

PLANE_PARALLEL_EPSILON = 1e-6
PLANE_EPSILON = 1e-3


@ti.func
def intersect_plane(ray_origin: vec3, ray_direction: vec3, point: vec3, normal: vec3):
    """Test for ray-plane intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        point: A point on the plane.
        normal: The plane's unit normal.

    Returns:
        A tuple (hit, t) where hit is 1 for a forward hit and 0 otherwise.
    """
    denom = tm.dot(ray_direction, normal)

    did_hit = 0
    hit_t = 0.0

    if ti.abs(denom) >= PLANE_PARALLEL_EPSILON:
        t = tm.dot(point - ray_origin, normal) / denom
        if t > PLANE_EPSILON:
            did_hit = 1
            hit_t = t

    return did_hit, hit_t
