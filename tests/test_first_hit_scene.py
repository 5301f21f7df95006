"""Tests for the default animated demo scene."""

import math

import pytest


class TestFirstHitScene:
    """Tests for create_first_hit_scene."""

    def test_primitive_counts(self):
        from src.firsthit.scene.first_hit import create_first_hit_scene

        scene, _ = create_first_hit_scene()

        assert scene.get_sphere_count() == 2
        assert scene.get_triangle_count() == 4

    def test_spheres(self):
        from src.firsthit.scene.first_hit import create_first_hit_scene

        scene, _ = create_first_hit_scene()
        blue, green = scene.spheres

        assert blue.center == (-0.5, 0.0, 0.0)
        assert blue.radius == pytest.approx(0.4)
        assert blue.color == (0, 0, 255)
        assert green.center == (0.5, 0.0, 0.0)
        assert green.radius == pytest.approx(0.3)
        assert green.color == (0, 255, 0)

    def test_tetrahedron(self):
        from src.firsthit.scene.first_hit import TETRAHEDRON_VERTICES, create_first_hit_scene

        scene, _ = create_first_hit_scene()

        assert all(tri.color == (255, 0, 255) for tri in scene.triangles)
        apex = TETRAHEDRON_VERTICES[0]
        assert sum(1 for tri in scene.triangles if tri.v0 == apex) == 3

    def test_floor_and_light(self):
        from src.firsthit.scene.first_hit import create_first_hit_scene
        from src.firsthit.scene.intersection import has_plane

        scene, _ = create_first_hit_scene()

        assert has_plane()
        assert scene.plane.point == (0.0, -0.6, 0.0)
        assert scene.plane.normal == (0.0, 1.0, 0.0)
        assert scene.plane.color == (200, 200, 200)
        assert scene.light.position == (2.0, 5.0, 5.0)
        assert scene.light.color == (1.0, 1.0, 1.0)

    def test_animation(self):
        from src.firsthit.scene.first_hit import create_first_hit_scene

        _, animation = create_first_hit_scene()

        assert [bob.sphere_index for bob in animation.bobs] == [0, 1]
        assert [bob.phase for bob in animation.bobs] == pytest.approx([0.0, 3.1415])
        assert all(bob.amplitude == 0.5 for bob in animation.bobs)
        assert animation.orbit_radius == 4.0
        assert animation.orbit_height == 1.0

    def test_spheres_bob_in_counter_phase(self):
        from src.firsthit.scene.animation import FrameContext
        from src.firsthit.scene.first_hit import create_first_hit_scene

        scene, animation = create_first_hit_scene()
        animation.apply(scene, FrameContext(elapsed=math.pi / 2))

        blue, green = scene.spheres
        assert blue.center[1] == pytest.approx(0.5)
        assert green.center[1] == pytest.approx(-0.5, abs=1e-4)

    def test_without_plane(self):
        from src.firsthit.scene.first_hit import FirstHitParams, create_first_hit_scene
        from src.firsthit.scene.intersection import has_plane

        scene, _ = create_first_hit_scene(FirstHitParams(include_plane=False))

        assert scene.plane is None
        assert not has_plane()

    def test_custom_params(self):
        from src.firsthit.scene.first_hit import FirstHitParams, create_first_hit_scene

        params = FirstHitParams(bob_amplitude=0.25, orbit_radius=6.0, vfov=45.0)
        _, animation = create_first_hit_scene(params)

        assert animation.orbit_radius == 6.0
        assert animation.vfov == 45.0
        assert all(bob.amplitude == 0.25 for bob in animation.bobs)

    def test_scene_round_trips_through_dict(self):
        from src.firsthit.scene.first_hit import create_first_hit_scene
        from src.firsthit.scene.manager import SceneManager

        scene, _ = create_first_hit_scene()
        data = scene.to_dict()

        loaded = SceneManager()
        loaded.from_dict(data)

        assert loaded.get_primitive_count() == 6
        assert loaded.to_dict() == data
