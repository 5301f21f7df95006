"""Sphere primitive with analytic ray-sphere intersection.

The ray-sphere intersection is found by solving:
    |ray_origin + t * ray_direction - center|^2 = radius^2

which expands to the quadratic a*t^2 + b*t + c = 0 with:
    a = dot(direction, direction)
    b = 2 * dot(direction, oc)
    c = dot(oc, oc) - radius^2
    oc = origin - center

Only the nearest root beyond SPHERE_EPSILON is reported. The epsilon keeps
shadow and reflection rays that start on a surface from hitting that surface
again.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.firsthit.geometry.sphere import intersect_sphere, vec3
    >>> # hit, t = intersect_sphere(origin, direction, vec3(0, 0, 0), 1.0)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Roots at or below this distance are treated as self-intersections
SPHERE_EPSILON = 1e-3


@ti.func
def intersect_sphere(ray_origin: vec3, ray_direction: vec3, center: vec3, radius: ti.f32):
    """Test for ray-sphere intersection.

    Of the two roots, the smaller one is returned if it lies beyond
    SPHERE_EPSILON, otherwise the larger one if it does. A negative
    discriminant, or two roots at or behind the epsilon, is a miss.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        center: The sphere center.
        radius: The sphere radius.

    Returns:
        A tuple (hit, t) where hit is 1 for a forward hit and 0 otherwise.
        t is only meaningful when hit == 1.
    """
    oc = ray_origin - center
    a = tm.dot(ray_direction, ray_direction)
    b = 2.0 * tm.dot(ray_direction, oc)
    c = tm.dot(oc, oc) - radius * radius
    discriminant = b * b - 4.0 * a * c

    did_hit = 0
    hit_t = 0.0

    if discriminant >= 0.0:
        sq = ti.sqrt(discriminant)
        t0 = (-b - sq) / (2.0 * a)
        t1 = (-b + sq) / (2.0 * a)
        if t0 > SPHERE_EPSILON:
            did_hit = 1
            hit_t = t0
        elif t1 > SPHERE_EPSILON:
            did_hit = 1
            hit_t = t1

    return did_hit, hit_t


@ti.func
def sphere_normal(center: vec3, point: vec3) -> vec3:
    """Outward unit normal of a sphere at a surface point."""
    return tm.normalize(point - center)
