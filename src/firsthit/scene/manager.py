"""Scene manager keeping a Python-side record of the GPU scene.

The Taichi fields in scene.intersection hold what kernels read. The
SceneManager wraps the add/set functions and keeps a Python record of every
primitive, the plane and the light, so scenes can be inspected, moved
between frames and saved to or loaded from plain dictionaries (JSON).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.firsthit.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> idx = scene.add_sphere((0, 0, 0), 1.0, (255, 0, 0))
    >>> scene.set_plane((0, -2, 0), (0, 1, 0), (200, 200, 200))
    >>> scene.set_light((5, 5, 5), (1, 1, 1))
    >>> data = scene.to_dict()
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from src.firsthit.scene.intersection import (
    MAX_SPHERES,
    MAX_TRIANGLES,
    add_sphere,
    add_triangle,
    clear_scene,
    disable_plane,
    get_sphere_count,
    get_triangle_count,
    set_light,
    set_plane,
    set_sphere_center,
)

logger = logging.getLogger(__name__)

Vec3Tuple = tuple[float, float, float]
ColorTuple = tuple[int, int, int]


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        color: RGB byte triple.
    """

    sphere_index: int
    center: Vec3Tuple
    radius: float
    color: ColorTuple


@dataclass
class TriangleInfo:
    """Information about a triangle in the scene.

    Attributes:
        triangle_index: The index in the triangle storage arrays.
        v0: First vertex.
        v1: Second vertex.
        v2: Third vertex.
        color: RGB byte triple.
    """

    triangle_index: int
    v0: Vec3Tuple
    v1: Vec3Tuple
    v2: Vec3Tuple
    color: ColorTuple


@dataclass
class PlaneInfo:
    """The scene's reflective plane."""

    point: Vec3Tuple
    normal: Vec3Tuple
    color: ColorTuple


@dataclass
class LightInfo:
    """The scene's point light. color is unclamped RGB radiance."""

    position: Vec3Tuple
    color: Vec3Tuple = (1.0, 1.0, 1.0)


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        spheres: List of sphere configurations.
        triangles: List of triangle configurations.
        plane: Plane configuration, or None for no plane.
        light: Light configuration, or None for a black light.
    """

    spheres: list[dict[str, Any]] = field(default_factory=list)
    triangles: list[dict[str, Any]] = field(default_factory=list)
    plane: dict[str, Any] | None = None
    light: dict[str, Any] | None = None


def _as_vec3(values: Any, name: str) -> Vec3Tuple:
    if values is None or len(values) != 3:
        raise ValueError(f"'{name}' must have 3 components, got {values!r}")
    return (float(values[0]), float(values[1]), float(values[2]))


def _as_color(values: Any, name: str) -> ColorTuple:
    if values is None or len(values) != 3:
        raise ValueError(f"'{name}' must have 3 components, got {values!r}")
    return (int(values[0]), int(values[1]), int(values[2]))


class SceneManager:
    """Scene builder and record for spheres, triangles, one plane and one light.

    Creating a SceneManager clears the GPU scene; there is one scene per
    process.

    Attributes:
        spheres: SphereInfo for all spheres in the scene.
        triangles: TriangleInfo for all triangles in the scene.
        plane: The reflective plane, or None.
        light: The point light, or None.
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.spheres: list[SphereInfo] = []
        self.triangles: list[TriangleInfo] = []
        self.plane: PlaneInfo | None = None
        self.light: LightInfo | None = None
        self._clear_all()

    def _clear_all(self) -> None:
        clear_scene()
        self.spheres.clear()
        self.triangles.clear()
        self.plane = None
        self.light = None

    def clear(self) -> None:
        """Clear the entire scene, including the plane and light."""
        self._clear_all()

    # =========================================================================
    # Primitives
    # =========================================================================

    def add_sphere(self, center: Vec3Tuple, radius: float, color: ColorTuple) -> int:
        """Add a sphere.

        Args:
            center: Sphere center.
            radius: Sphere radius.
            color: RGB byte triple.

        Returns:
            The sphere index.

        Raises:
            ValueError: If a color component is outside [0, 255].
            RuntimeError: If the maximum number of spheres is exceeded.
        """
        idx = add_sphere(center, radius, color)
        self.spheres.append(
            SphereInfo(
                sphere_index=idx,
                center=_as_vec3(center, "center"),
                radius=float(radius),
                color=_as_color(color, "color"),
            )
        )
        return idx

    def move_sphere(self, sphere_index: int, center: Vec3Tuple) -> None:
        """Move a sphere to a new center.

        Only call this between frames.

        Raises:
            IndexError: If sphere_index does not refer to an existing sphere.
        """
        set_sphere_center(sphere_index, center)
        self.spheres[sphere_index].center = _as_vec3(center, "center")

    def add_triangle(self, v0: Vec3Tuple, v1: Vec3Tuple, v2: Vec3Tuple, color: ColorTuple) -> int:
        """Add a triangle.

        Returns:
            The triangle index.

        Raises:
            ValueError: If a color component is outside [0, 255].
            RuntimeError: If the maximum number of triangles is exceeded.
        """
        idx = add_triangle(v0, v1, v2, color)
        self.triangles.append(
            TriangleInfo(
                triangle_index=idx,
                v0=_as_vec3(v0, "v0"),
                v1=_as_vec3(v1, "v1"),
                v2=_as_vec3(v2, "v2"),
                color=_as_color(color, "color"),
            )
        )
        return idx

    def add_mesh(
        self,
        vertices: list[Vec3Tuple],
        faces: list[tuple[int, int, int]],
        color: ColorTuple,
    ) -> list[int]:
        """Add an indexed triangle mesh as individual triangles.

        Args:
            vertices: Vertex positions.
            faces: Vertex index triples.
            color: RGB byte triple shared by all faces.

        Returns:
            The triangle indices, in face order.
        """
        return [
            self.add_triangle(vertices[a], vertices[b], vertices[c], color)
            for a, b, c in faces
        ]

    def set_plane(self, point: Vec3Tuple, normal: Vec3Tuple, color: ColorTuple) -> None:
        """Set the reflective plane. normal must be unit length."""
        set_plane(point, normal, color)
        self.plane = PlaneInfo(
            point=_as_vec3(point, "point"),
            normal=_as_vec3(normal, "normal"),
            color=_as_color(color, "color"),
        )

    def remove_plane(self) -> None:
        """Remove the plane from the scene."""
        disable_plane()
        self.plane = None

    def set_light(self, position: Vec3Tuple, color: Vec3Tuple = (1.0, 1.0, 1.0)) -> None:
        """Set the point light."""
        set_light(position, color)
        self.light = LightInfo(
            position=_as_vec3(position, "position"),
            color=_as_vec3(color, "color"),
        )

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_triangle_count(self) -> int:
        """Get the number of triangles in the scene."""
        return get_triangle_count()

    def get_primitive_count(self) -> int:
        """Get the number of spheres and triangles (the plane is not counted)."""
        return self.get_sphere_count() + self.get_triangle_count()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object."""
        config = SceneConfig()

        for sphere in self.spheres:
            config.spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "color": list(sphere.color),
                }
            )

        for tri in self.triangles:
            config.triangles.append(
                {
                    "v0": list(tri.v0),
                    "v1": list(tri.v1),
                    "v2": list(tri.v2),
                    "color": list(tri.color),
                }
            )

        if self.plane is not None:
            config.plane = {
                "point": list(self.plane.point),
                "normal": list(self.plane.normal),
                "color": list(self.plane.color),
            }

        if self.light is not None:
            config.light = {
                "position": list(self.light.position),
                "color": list(self.light.color),
            }

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene first.

        Raises:
            ValueError: If an entry is malformed or a color is out of range.
        """
        self.clear()

        for sphere_config in config.spheres:
            self.add_sphere(
                _as_vec3(sphere_config.get("center"), "center"),
                float(sphere_config.get("radius", 1.0)),
                _as_color(sphere_config.get("color"), "color"),
            )

        for tri_config in config.triangles:
            self.add_triangle(
                _as_vec3(tri_config.get("v0"), "v0"),
                _as_vec3(tri_config.get("v1"), "v1"),
                _as_vec3(tri_config.get("v2"), "v2"),
                _as_color(tri_config.get("color"), "color"),
            )

        if config.plane is not None:
            self.set_plane(
                _as_vec3(config.plane.get("point"), "point"),
                _as_vec3(config.plane.get("normal"), "normal"),
                _as_color(config.plane.get("color"), "color"),
            )

        if config.light is not None:
            self.set_light(
                _as_vec3(config.light.get("position"), "position"),
                _as_vec3(config.light.get("color", [1.0, 1.0, 1.0]), "color"),
            )

        logger.info(
            "Loaded scene: %d spheres, %d triangles, plane=%s",
            len(self.spheres),
            len(self.triangles),
            self.plane is not None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization)."""
        config = self.to_config()
        return {
            "spheres": config.spheres,
            "triangles": config.triangles,
            "plane": config.plane,
            "light": config.light,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary with 'spheres', 'triangles', 'plane', 'light' keys."""
        config = SceneConfig(
            spheres=data.get("spheres", []),
            triangles=data.get("triangles", []),
            plane=data.get("plane"),
            light=data.get("light"),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        return MAX_SPHERES

    @staticmethod
    def get_max_triangles() -> int:
        return MAX_TRIANGLES
