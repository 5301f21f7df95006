"""Per-frame animation state: frame context, bobbing spheres, orbit camera.

All time-varying state lives in an explicit FrameContext value that is
passed to the animation step; nothing is read from globals. Applying a
SceneAnimation moves the bobbing spheres and returns the camera for the
frame; it must finish before the frame kernel starts.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.firsthit.scene.animation import FrameContext
    >>> from src.firsthit.scene.first_hit import create_first_hit_scene
    >>>
    >>> scene, animation = create_first_hit_scene()
    >>> camera = animation.apply(scene, FrameContext().advance(0.5))
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from src.firsthit.camera.view import Projection, ViewCamera, orbit_eye

if TYPE_CHECKING:
    from src.firsthit.scene.manager import SceneManager

# Orbit angular speed in radians per second
ORBIT_SPEED = 0.5


@dataclass(frozen=True)
class FrameContext:
    """Animation state for one frame.

    Attributes:
        elapsed: Seconds since the animation started; drives sphere motion.
        orbit_angle: Camera angle around the y axis in radians.
        projection: Projection mode for the frame.
    """

    elapsed: float = 0.0
    orbit_angle: float = 0.0
    projection: Projection = Projection.PERSPECTIVE

    def advance(self, dt: float) -> FrameContext:
        """Return the context dt seconds later."""
        return replace(
            self,
            elapsed=self.elapsed + dt,
            orbit_angle=self.orbit_angle + dt * ORBIT_SPEED,
        )

    def toggle_projection(self) -> FrameContext:
        """Return the context with the other projection mode."""
        if self.projection == Projection.PERSPECTIVE:
            return replace(self, projection=Projection.ORTHOGRAPHIC)
        return replace(self, projection=Projection.PERSPECTIVE)


@dataclass
class SphereBob:
    """Vertical oscillation of one sphere.

    The sphere center is base_center with y replaced by
    base_center.y + amplitude * sin(elapsed + phase).
    """

    sphere_index: int
    base_center: tuple[float, float, float]
    amplitude: float = 0.5
    phase: float = 0.0

    def center_at(self, elapsed: float) -> tuple[float, float, float]:
        x, y, z = self.base_center
        return (x, y + self.amplitude * math.sin(elapsed + self.phase), z)


@dataclass
class SceneAnimation:
    """Animated parts of a scene: bobbing spheres and an orbiting camera.

    Attributes:
        bobs: Sphere oscillations applied every frame.
        orbit_radius: Distance of the camera from the y axis.
        orbit_height: Camera height.
        target: Point the camera looks at.
        vfov: Vertical field of view in degrees.
        ortho_scale: Orthographic half-height in world units.
        aspect_ratio: Image width divided by height.
    """

    bobs: list[SphereBob] = field(default_factory=list)
    orbit_radius: float = 4.0
    orbit_height: float = 1.0
    target: tuple[float, float, float] = (0.0, 0.0, 0.0)
    vfov: float = 60.0
    ortho_scale: float = 2.0
    aspect_ratio: float = 1.0

    def camera_for(self, context: FrameContext) -> ViewCamera:
        """Build the camera for a frame without touching the scene."""
        return ViewCamera(
            eye=orbit_eye(context.orbit_angle, self.orbit_radius, self.orbit_height),
            target=self.target,
            vfov=self.vfov,
            ortho_scale=self.ortho_scale,
            aspect_ratio=self.aspect_ratio,
            projection=context.projection,
        )

    def apply(self, scene: SceneManager, context: FrameContext) -> ViewCamera:
        """Move the animated spheres for this frame and return its camera.

        Must complete before the frame kernel starts.
        """
        for bob in self.bobs:
            scene.move_sphere(bob.sphere_index, bob.center_at(context.elapsed))
        return self.camera_for(context)
