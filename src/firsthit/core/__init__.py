"""Core rendering module.

This module contains the building blocks for first-hit ray tracing:

Components:
    ray: Ray data structure and vector utilities
    shading: Phong shading with hard shadows from one point light
    tracer: Color of a ray, with reflection off the floor plane
    renderer: Frame driver producing the RGB byte buffer
    animation: Frame context, sphere bobbing and the animated renderer

All compute-intensive operations use Taichi kernels.
"""

from .ray import (
    Ray,
    cross,
    dot,
    length,
    length_squared,
    make_ray,
    normalize,
    np_normalize,
    np_reflect,
    ray_at,
    reflect,
    reflect_about,
    to_vec3,
    vec3,
)

# Note: shading, tracer, renderer and animation are NOT imported here because
# they pull in the scene fields. Import them directly, e.g.
#   from src.firsthit.core.animation import AnimatedRenderer

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "reflect_about",
    "to_vec3",
    "np_normalize",
    "np_reflect",
]
