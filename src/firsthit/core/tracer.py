"""Whitted-style tracer with one partially reflective plane.

For each ray the tracer finds the closest hit over all primitives and then:
    - plane hit: spawns a mirror ray off the plane and returns
      PLANE_BASE_WEIGHT * planeColor + PLANE_REFLECT_WEIGHT * trace(mirror, depth + 1)
    - sphere or triangle hit: returns the local shading result
    - miss: returns BACKGROUND_COLOR

Calls with depth > MAX_TRACE_DEPTH return BACKGROUND_COLOR immediately,
without any intersection tests.

Taichi functions cannot call themselves, so the bounded recursion is run as
a loop over (ray, depth) that carries the product of reflection weights.
Unrolling c = 0.3 b0 + 0.7 (0.3 b1 + 0.7 (...)) this way gives the same
color as the recursive definition.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.firsthit.core.tracer import trace_color
    >>> trace_color((0, 0, 5), (0, 0, -1))  # background if the scene is empty
    (0.1, 0.1, 0.1)
"""

import taichi as ti
import taichi.math as tm

from src.firsthit.core.ray import normalize, reflect
from src.firsthit.core.shading import object_color, shade
from src.firsthit.scene.intersection import intersect_closest

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Tracing Constants
# =============================================================================

# Deepest recursion level that still intersects the scene
MAX_TRACE_DEPTH = 2

# Color of rays that escape the scene or exceed the depth limit
BACKGROUND_COLOR = vec3(0.1, 0.1, 0.1)

# The plane is a partial mirror
PLANE_BASE_WEIGHT = 0.3
PLANE_REFLECT_WEIGHT = 0.7

# Offset along the plane normal for reflected ray origins
REFLECTION_BIAS = 1e-3


@ti.func
def trace(ray_origin: vec3, ray_direction: vec3, depth: ti.i32) -> vec3:
    """Trace a ray through the scene and return its color.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        depth: Current reflection depth; primary rays start at 0.

    Returns:
        RGB color of the ray.
    """
    color = vec3(0.0, 0.0, 0.0)
    weight = 1.0
    origin = ray_origin
    direction = ray_direction
    level = depth
    active = 1

    # One pass per reflection level plus the terminating pass
    for _ in range(MAX_TRACE_DEPTH + 2):
        if active == 1:
            if level > MAX_TRACE_DEPTH:
                color += weight * BACKGROUND_COLOR
                active = 0
            else:
                hit = intersect_closest(origin, direction)

                if hit.hit == 0:
                    color += weight * BACKGROUND_COLOR
                    active = 0
                elif hit.is_plane == 1:
                    color += weight * PLANE_BASE_WEIGHT * object_color(hit)
                    weight *= PLANE_REFLECT_WEIGHT
                    direction = normalize(reflect(direction, hit.normal))
                    origin = hit.position + hit.normal * REFLECTION_BIAS
                    level += 1
                else:
                    color += weight * shade(hit, origin)
                    active = 0

    return color


@ti.kernel
def _trace_kernel(origin: vec3, direction: vec3, depth: ti.i32) -> vec3:
    return trace(origin, direction, depth)


def trace_color(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
) -> tuple[float, float, float]:
    """Trace a single ray from Python scope.

    This is a convenience wrapper for tests and tools; frame rendering
    traces all pixels in one kernel instead.

    Args:
        origin: Ray origin.
        direction: Ray direction (should be unit length).
        depth: Starting reflection depth.

    Returns:
        Tuple of (R, G, B).
    """
    color = _trace_kernel(vec3(*origin), vec3(*direction), depth)
    return (float(color[0]), float(color[1]), float(color[2]))
