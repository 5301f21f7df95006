"""Scene module for primitive storage, hit records and scene building.

Components:
    intersection: Taichi fields for spheres, triangles, the plane and the
        light, plus the closest-hit and shadow queries
    manager: SceneManager keeping a Python record of the scene with
        dictionary (JSON) round trips
    animation: FrameContext and the per-frame sphere and camera animation
    first_hit: Factory for the default animated demo scene

Scene data is organized for linear scans inside kernels:
    - Structure-of-Arrays layout for geometric data
    - 0-d fields for the single plane and single light
"""

from .intersection import (
    MAX_SPHERES,
    MAX_TRIANGLES,
    HitInfo,
    add_sphere,
    add_triangle,
    clear_scene,
    disable_plane,
    get_sphere_count,
    get_triangle_count,
    has_plane,
    intersect_closest,
    is_occluded,
    set_light,
    set_plane,
    set_sphere_center,
)
from .manager import (
    LightInfo,
    PlaneInfo,
    SceneConfig,
    SceneManager,
    SphereInfo,
    TriangleInfo,
)
from .animation import ORBIT_SPEED, FrameContext, SceneAnimation, SphereBob
from .first_hit import FirstHitParams, create_first_hit_scene

__all__ = [
    # Intersection module
    "HitInfo",
    "add_sphere",
    "add_triangle",
    "set_sphere_center",
    "set_plane",
    "disable_plane",
    "has_plane",
    "set_light",
    "clear_scene",
    "get_sphere_count",
    "get_triangle_count",
    "intersect_closest",
    "is_occluded",
    "MAX_SPHERES",
    "MAX_TRIANGLES",
    # Manager module
    "SceneManager",
    "SphereInfo",
    "TriangleInfo",
    "PlaneInfo",
    "LightInfo",
    "SceneConfig",
    # Animation module
    "FrameContext",
    "SphereBob",
    "SceneAnimation",
    "ORBIT_SPEED",
    # Demo scene
    "FirstHitParams",
    "create_first_hit_scene",
]
