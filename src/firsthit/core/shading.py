"""Local shading model: ambient + diffuse + specular with hard shadows.

For a surface hit, the shading model:
    1. Builds a unit vector and distance from the hit point to the light.
    2. Casts a shadow ray from the hit point, offset by SHADOW_BIAS along the
       normal, toward the light.
    3. If any sphere or triangle blocks the shadow ray before the light,
       returns objectColor * AMBIENT_COLOR.
    4. Otherwise returns

           objectColor * AMBIENT_COLOR
           + objectColor * lightColor * max(N . L, 0) * DIFFUSE_WEIGHT
           + lightColor * max(V . R, 0)^SHININESS * SPECULAR_WEIGHT

       with each channel clamped to at most 1.

objectColor is the primitive's byte triple divided by 255, V points from the
hit toward the ray origin and R is L reflected about N.

The shading function reads scene fields but never writes them, so shading the
same hit twice gives the same color.
"""

import taichi as ti
import taichi.math as tm

from src.firsthit.core.ray import normalize, reflect_about
from src.firsthit.scene.intersection import (
    HitInfo,
    is_occluded,
    light_color,
    light_position,
)

# Type alias for 3D vectors
vec3 = tm.vec3

AMBIENT_COLOR = vec3(0.1, 0.1, 0.1)
DIFFUSE_WEIGHT = 0.7
SPECULAR_WEIGHT = 0.2
SHININESS = 32

# Offset along the normal for shadow ray origins
SHADOW_BIAS = 1e-3


@ti.func
def object_color(hit: HitInfo) -> vec3:
    """Convert the hit's byte color to [0, 1] floats."""
    return hit.color / 255.0


@ti.func
def shade(hit: HitInfo, ray_origin: vec3) -> vec3:
    """Compute the radiance leaving a surface hit toward the viewer.

    Args:
        hit: The surface hit (hit == 1 is assumed).
        ray_origin: Origin of the ray that produced the hit; the view vector
            points from the hit back toward it.

    Returns:
        RGB in [0, 1]^3.
    """
    base = object_color(hit)
    light_pos = light_position[None]
    light_rgb = light_color[None]

    to_light = light_pos - hit.position
    dist_to_light = tm.length(to_light)
    light_dir = to_light / dist_to_light

    shadow_origin = hit.position + hit.normal * SHADOW_BIAS
    ambient = base * AMBIENT_COLOR
    result = ambient

    if is_occluded(shadow_origin, light_dir, dist_to_light) == 0:
        diff = tm.max(tm.dot(hit.normal, light_dir), 0.0)
        diffuse = base * light_rgb * diff * DIFFUSE_WEIGHT

        view_dir = normalize(ray_origin - hit.position)
        reflect_dir = reflect_about(light_dir, hit.normal)
        spec = tm.max(tm.dot(view_dir, reflect_dir), 0.0) ** SHININESS
        specular = light_rgb * spec * SPECULAR_WEIGHT

        result = tm.min(ambient + diffuse + specular, vec3(1.0, 1.0, 1.0))

    return result

