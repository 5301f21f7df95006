"""Default animated demo scene.

Two bobbing spheres, a magenta tetrahedron and a grey reflective floor,
lit by one white point light and viewed by a camera orbiting the origin.

Scene contents:
- Blue sphere at (-0.5, 0, 0), radius 0.4
- Green sphere at (0.5, 0, 0), radius 0.3, bobbing in counter-phase
- Magenta tetrahedron to the right of the spheres (4 triangles)
- Floor plane at y = -0.6 with upward normal
- White light at (2, 5, 5)

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.firsthit.scene.animation import FrameContext
    >>> from src.firsthit.camera.view import setup_camera
    >>> from src.firsthit.scene.first_hit import create_first_hit_scene
    >>>
    >>> scene, animation = create_first_hit_scene()
    >>> setup_camera(animation.apply(scene, FrameContext()))
"""

from dataclasses import dataclass

from src.firsthit.scene.animation import SceneAnimation, SphereBob
from src.firsthit.scene.manager import SceneManager

# =============================================================================
# Scene Parameters
# =============================================================================


@dataclass
class FirstHitParams:
    """Parameters for the demo scene.

    Attributes:
        bob_amplitude: Vertical travel of each sphere above and below its
            rest height.
        orbit_radius: Camera distance from the y axis.
        orbit_height: Camera height.
        vfov: Vertical field of view in degrees.
        ortho_scale: Orthographic half-height in world units.
        include_plane: Whether to add the reflective floor.
        light_position: Position of the point light.
        light_color: RGB radiance of the point light.

    Example:
        >>> params = FirstHitParams(include_plane=False, orbit_radius=6.0)
        >>> scene, animation = create_first_hit_scene(params)
    """

    bob_amplitude: float = 0.5
    orbit_radius: float = 4.0
    orbit_height: float = 1.0
    vfov: float = 60.0
    ortho_scale: float = 2.0
    include_plane: bool = True
    light_position: tuple[float, float, float] = (2.0, 5.0, 5.0)
    light_color: tuple[float, float, float] = (1.0, 1.0, 1.0)


# =============================================================================
# Scene Constants
# =============================================================================

BLUE_SPHERE_CENTER = (-0.5, 0.0, 0.0)
BLUE_SPHERE_RADIUS = 0.4
BLUE_SPHERE_COLOR = (0, 0, 255)
BLUE_SPHERE_PHASE = 0.0

GREEN_SPHERE_CENTER = (0.5, 0.0, 0.0)
GREEN_SPHERE_RADIUS = 0.3
GREEN_SPHERE_COLOR = (0, 255, 0)
GREEN_SPHERE_PHASE = 3.1415

TETRAHEDRON_VERTICES = [
    (1.5, 0.5, 0.0),  # Apex
    (1.0, -0.5, 0.5),
    (2.0, -0.5, 0.5),
    (1.5, -0.5, -0.5),
]
TETRAHEDRON_FACES = [(0, 1, 2), (0, 2, 3), (0, 3, 1), (1, 3, 2)]
TETRAHEDRON_COLOR = (255, 0, 255)

FLOOR_POINT = (0.0, -0.6, 0.0)
FLOOR_NORMAL = (0.0, 1.0, 0.0)
FLOOR_COLOR = (200, 200, 200)


# =============================================================================
# Scene Factory
# =============================================================================


def create_first_hit_scene(
    params: FirstHitParams | None = None,
) -> tuple[SceneManager, SceneAnimation]:
    """Create the demo scene and its animation.

    Args:
        params: Optional FirstHitParams. If None, uses FirstHitParams().

    Returns:
        A tuple of (SceneManager, SceneAnimation). Apply the animation with a
        FrameContext to position the spheres and obtain the frame's camera.

    Example:
        >>> scene, animation = create_first_hit_scene()
        >>> scene.get_sphere_count(), scene.get_triangle_count()
        (2, 4)
    """
    if params is None:
        params = FirstHitParams()

    scene = SceneManager()

    blue = scene.add_sphere(BLUE_SPHERE_CENTER, BLUE_SPHERE_RADIUS, BLUE_SPHERE_COLOR)
    green = scene.add_sphere(GREEN_SPHERE_CENTER, GREEN_SPHERE_RADIUS, GREEN_SPHERE_COLOR)

    scene.add_mesh(TETRAHEDRON_VERTICES, TETRAHEDRON_FACES, TETRAHEDRON_COLOR)

    if params.include_plane:
        scene.set_plane(FLOOR_POINT, FLOOR_NORMAL, FLOOR_COLOR)

    scene.set_light(params.light_position, params.light_color)

    animation = SceneAnimation(
        bobs=[
            SphereBob(blue, BLUE_SPHERE_CENTER, params.bob_amplitude, BLUE_SPHERE_PHASE),
            SphereBob(green, GREEN_SPHERE_CENTER, params.bob_amplitude, GREEN_SPHERE_PHASE),
        ],
        orbit_radius=params.orbit_radius,
        orbit_height=params.orbit_height,
        vfov=params.vfov,
        ortho_scale=params.ortho_scale,
    )

    return scene, animation
