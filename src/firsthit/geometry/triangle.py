"""Triangle primitive with Moller-Trumbore ray intersection.

A triangle is defined by its three vertices v0, v1, v2. The geometric normal
is normalize((v1 - v0) x (v2 - v0)), so winding order decides which side the
normal faces. Intersection is two-sided.

The Moller-Trumbore test solves

    origin + t * direction = (1 - u - v) * v0 + u * v1 + v * v2

directly for (t, u, v) without first computing the plane equation. A hit
requires u >= 0, v >= 0 and u + v <= 1, so rays crossing exactly on an
edge count as hits.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.firsthit.geometry.triangle import intersect_triangle
    >>> # hit, t = intersect_triangle(origin, direction, v0, v1, v2)
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Determinant magnitude below which the ray counts as parallel, also the
# minimum accepted hit distance
TRIANGLE_EPSILON = 1e-7


@ti.func
def intersect_triangle(ray_origin: vec3, ray_direction: vec3, v0: vec3, v1: vec3, v2: vec3):
    """Test for ray-triangle intersection using Moller-Trumbore.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        v0: First vertex.
        v1: Second vertex.
        v2: Third vertex.

    Returns:
        A tuple (hit, t) where hit is 1 for a forward hit and 0 otherwise.
    """
    edge1 = v1 - v0
    edge2 = v2 - v0
    h = tm.cross(ray_direction, edge2)
    det = tm.dot(edge1, h)

    did_hit = 0
    hit_t = 0.0

    # Parallel or degenerate
    if ti.abs(det) >= TRIANGLE_EPSILON:
        f = 1.0 / det
        s = ray_origin - v0
        u = f * tm.dot(s, h)
        if u >= 0.0 and u <= 1.0:
            q = tm.cross(s, edge1)
            v = f * tm.dot(ray_direction, q)
            if v >= 0.0 and u + v <= 1.0:
                t = f * tm.dot(edge2, q)
                if t > TRIANGLE_EPSILON:
                    did_hit = 1
                    hit_t = t

    return did_hit, hit_t


@ti.func
def triangle_normal(v0: vec3, v1: vec3, v2: vec3) -> vec3:
    """Geometric unit normal following the v0 -> v1 -> v2 winding."""
    return tm.normalize(tm.cross(v1 - v0, v2 - v0))
