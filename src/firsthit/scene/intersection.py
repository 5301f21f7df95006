"""Scene-level primitive storage and intersection queries.

Spheres and triangles are stored in Structure-of-Arrays Taichi fields and
scanned linearly; there is no acceleration structure. The scene also holds
at most one infinite plane (the reflective floor) and exactly one point
light in 0-d fields.

Two queries are provided for use inside kernels:
    intersect_closest: nearest hit over spheres, triangles and the plane
    is_occluded: shadow query over spheres and triangles only

is_occluded skips the plane, so the floor never casts shadows.

Primitive colors are RGB byte triples (0-255). They are stored as integers
and converted to floats in the hit record; shading divides by 255.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.firsthit.scene.intersection import (
    ...     add_sphere, add_triangle, set_plane, set_light, clear_scene
    ... )
    >>> clear_scene()
    >>> add_sphere((0, 0, 0), 1.0, (255, 0, 0))
    >>> set_plane((0, -2, 0), (0, 1, 0), (200, 200, 200))
    >>> set_light((5, 5, 5), (1, 1, 1))
"""

import taichi as ti
import taichi.math as tm

from src.firsthit.geometry.plane import intersect_plane
from src.firsthit.geometry.sphere import intersect_sphere, sphere_normal
from src.firsthit.geometry.triangle import intersect_triangle, triangle_normal

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Initial closest-hit distance; any real hit is nearer
T_SENTINEL = 1e20


@ti.dataclass
class HitInfo:
    """Record of the closest ray-scene intersection.

    Attributes:
        hit: 1 if any primitive was hit, 0 otherwise.
        t: Distance along the ray to the hit. Only valid if hit == 1.
        position: World-space hit point.
        normal: Unit surface normal at the hit point (outward for spheres,
            winding-order for triangles, the stored normal for the plane).
        color: The primitive's RGB byte triple as floats in [0, 255].
        is_plane: 1 if the winning hit is the reflective plane.
    """

    hit: ti.i32
    t: ti.f32
    position: vec3
    normal: vec3
    color: vec3
    is_plane: ti.i32


# Maximum number of primitives supported in the scene
MAX_SPHERES = 256
MAX_TRIANGLES = 1024

# Sphere storage
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_colors = ti.Vector.field(3, dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Triangle storage
triangle_v0 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_v1 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_v2 = ti.Vector.field(3, dtype=ti.f32, shape=MAX_TRIANGLES)
triangle_colors = ti.Vector.field(3, dtype=ti.i32, shape=MAX_TRIANGLES)
num_triangles = ti.field(dtype=ti.i32, shape=())

# Single reflective plane
plane_enabled = ti.field(dtype=ti.i32, shape=())
plane_point = ti.Vector.field(3, dtype=ti.f32, shape=())
plane_normal = ti.Vector.field(3, dtype=ti.f32, shape=())
plane_color = ti.Vector.field(3, dtype=ti.i32, shape=())

# Single point light (color is unclamped radiance)
light_position = ti.Vector.field(3, dtype=ti.f32, shape=())
light_color = ti.Vector.field(3, dtype=ti.f32, shape=())


def _check_color(color: tuple[int, int, int]) -> list[int]:
    """Validate an RGB byte triple and return it as a list of ints."""
    if len(color) != 3:
        raise ValueError(f"Color must have 3 components, got {len(color)}")
    values = [int(c) for c in color]
    for i, component in enumerate(values):
        if component < 0 or component > 255:
            raise ValueError(f"Color component {i} = {component} is outside [0, 255].")
    return values


def clear_scene() -> None:
    """Remove all primitives and the plane, and reset the light to black at the origin.

    The field data is not zeroed; counts are reset and entries are
    overwritten as new primitives are added.
    """
    num_spheres[None] = 0
    num_triangles[None] = 0
    plane_enabled[None] = 0
    light_position[None] = [0.0, 0.0, 0.0]
    light_color[None] = [0.0, 0.0, 0.0]


def add_sphere(
    center: tuple[float, float, float],
    radius: float,
    color: tuple[int, int, int],
) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (not validated).
        color: RGB byte triple.

    Returns:
        The index of the added sphere.

    Raises:
        ValueError: If a color component is outside [0, 255].
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    rgb = _check_color(color)
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = [float(c) for c in center]
    sphere_radii[idx] = radius
    sphere_colors[idx] = rgb
    num_spheres[None] = idx + 1
    return idx


def set_sphere_center(index: int, center: tuple[float, float, float]) -> None:
    """Move an existing sphere. Used by the per-frame animation step.

    Raises:
        IndexError: If index does not refer to an existing sphere.
    """
    if index < 0 or index >= num_spheres[None]:
        raise IndexError(f"Sphere index {index} out of range")
    sphere_centers[index] = [float(c) for c in center]


def add_triangle(
    v0: tuple[float, float, float],
    v1: tuple[float, float, float],
    v2: tuple[float, float, float],
    color: tuple[int, int, int],
) -> int:
    """Add a triangle to the scene.

    Args:
        v0: First vertex.
        v1: Second vertex.
        v2: Third vertex.
        color: RGB byte triple.

    Returns:
        The index of the added triangle.

    Raises:
        ValueError: If a color component is outside [0, 255].
        RuntimeError: If the maximum number of triangles is exceeded.
    """
    rgb = _check_color(color)
    idx = num_triangles[None]
    if idx >= MAX_TRIANGLES:
        raise RuntimeError(f"Maximum number of triangles ({MAX_TRIANGLES}) exceeded")
    triangle_v0[idx] = [float(c) for c in v0]
    triangle_v1[idx] = [float(c) for c in v1]
    triangle_v2[idx] = [float(c) for c in v2]
    triangle_colors[idx] = rgb
    num_triangles[None] = idx + 1
    return idx


def set_plane(
    point: tuple[float, float, float],
    normal: tuple[float, float, float],
    color: tuple[int, int, int],
) -> None:
    """Set the scene's single reflective plane, replacing any previous one.

    The normal must already be unit length; it is stored as given.
    """
    rgb = _check_color(color)
    plane_point[None] = [float(c) for c in point]
    plane_normal[None] = [float(c) for c in normal]
    plane_color[None] = rgb
    plane_enabled[None] = 1


def disable_plane() -> None:
    """Remove the plane from the scene."""
    plane_enabled[None] = 0


def has_plane() -> bool:
    return bool(plane_enabled[None])


def set_light(
    position: tuple[float, float, float],
    color: tuple[float, float, float],
) -> None:
    """Set the scene's point light.

    Args:
        position: Light position in world space.
        color: RGB radiance; not clamped.
    """
    light_position[None] = [float(c) for c in position]
    light_color[None] = [float(c) for c in color]


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_triangle_count() -> int:
    """Get the number of triangles in the scene."""
    return int(num_triangles[None])


@ti.func
def _make_miss_record() -> HitInfo:
    return HitInfo(
        hit=0,
        t=T_SENTINEL,
        position=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        color=vec3(0.0, 0.0, 0.0),
        is_plane=0,
    )


@ti.func
def intersect_closest(ray_origin: vec3, ray_direction: vec3) -> HitInfo:
    """Find the nearest hit along a ray over every primitive in the scene.

    Scans all spheres, then all triangles, keeping the smallest valid t.
    The plane is tested last and overrides when nearer than the current
    closest hit.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.

    Returns:
        A HitInfo for the closest intersection, or a miss record (hit == 0).
    """
    result = _make_miss_record()
    closest_t = T_SENTINEL

    for i in range(num_spheres[None]):
        hit, t = intersect_sphere(ray_origin, ray_direction, sphere_centers[i], sphere_radii[i])
        if hit == 1 and t < closest_t:
            closest_t = t
            position = ray_origin + t * ray_direction
            result = HitInfo(
                hit=1,
                t=t,
                position=position,
                normal=sphere_normal(sphere_centers[i], position),
                color=ti.cast(sphere_colors[i], ti.f32),
                is_plane=0,
            )

    for i in range(num_triangles[None]):
        v0 = triangle_v0[i]
        v1 = triangle_v1[i]
        v2 = triangle_v2[i]
        hit, t = intersect_triangle(ray_origin, ray_direction, v0, v1, v2)
        if hit == 1 and t < closest_t:
            closest_t = t
            result = HitInfo(
                hit=1,
                t=t,
                position=ray_origin + t * ray_direction,
                normal=triangle_normal(v0, v1, v2),
                color=ti.cast(triangle_colors[i], ti.f32),
                is_plane=0,
            )

    if plane_enabled[None] == 1:
        hit, t = intersect_plane(ray_origin, ray_direction, plane_point[None], plane_normal[None])
        if hit == 1 and t < closest_t:
            closest_t = t
            result = HitInfo(
                hit=1,
                t=t,
                position=ray_origin + t * ray_direction,
                normal=plane_normal[None],
                color=ti.cast(plane_color[None], ti.f32),
                is_plane=1,
            )

    return result


@ti.func
def is_occluded(ray_origin: vec3, ray_direction: vec3, max_distance: ti.f32) -> ti.i32:
    """Test whether any sphere or triangle blocks a ray before max_distance.

    This is the shadow query. The plane is not tested.

    Args:
        ray_origin: The starting point of the shadow ray (already biased).
        ray_direction: Unit direction toward the light.
        max_distance: Distance to the light.

    Returns:
        1 if an occluder was found, 0 otherwise.
    """
    occluded = 0

    for i in range(num_spheres[None]):
        if occluded == 0:
            hit, t = intersect_sphere(
                ray_origin, ray_direction, sphere_centers[i], sphere_radii[i]
            )
            if hit == 1 and t < max_distance:
                occluded = 1

    for i in range(num_triangles[None]):
        if occluded == 0:
            hit, t = intersect_triangle(
                ray_origin, ray_direction, triangle_v0[i], triangle_v1[i], triangle_v2[i]
            )
            if hit == 1 and t < max_distance:
                occluded = 1

    return occluded
