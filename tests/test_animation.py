"""Unit tests for per-frame animation.

Tests cover:
- FrameContext advancing and projection toggling
- Sphere bobbing and the per-frame scene update
- AnimatedRenderer frames, sequences and output
"""

import math

import pytest


@pytest.fixture
def small_renderer():
    """A 16x16 AnimatedRenderer over the demo scene."""
    from src.firsthit.core.animation import AnimatedRenderer
    from src.firsthit.scene.first_hit import create_first_hit_scene

    scene, animation = create_first_hit_scene()
    return AnimatedRenderer(16, 16, scene, animation)


class TestFrameContext:
    """Tests for FrameContext."""

    def test_defaults(self):
        from src.firsthit.camera.view import Projection
        from src.firsthit.scene.animation import FrameContext

        context = FrameContext()
        assert context.elapsed == 0.0
        assert context.orbit_angle == 0.0
        assert context.projection == Projection.PERSPECTIVE

    def test_advance_returns_new_context(self):
        from src.firsthit.scene.animation import ORBIT_SPEED, FrameContext

        context = FrameContext()
        later = context.advance(0.5)

        assert later.elapsed == pytest.approx(0.5)
        assert later.orbit_angle == pytest.approx(0.5 * ORBIT_SPEED)
        assert context.elapsed == 0.0

    def test_context_is_frozen(self):
        from dataclasses import FrozenInstanceError

        from src.firsthit.scene.animation import FrameContext

        with pytest.raises(FrozenInstanceError):
            FrameContext().elapsed = 1.0

    def test_toggle_projection(self):
        from src.firsthit.camera.view import Projection
        from src.firsthit.scene.animation import FrameContext

        context = FrameContext(elapsed=2.0)
        toggled = context.toggle_projection()

        assert toggled.projection == Projection.ORTHOGRAPHIC
        assert toggled.elapsed == 2.0
        assert toggled.toggle_projection().projection == Projection.PERSPECTIVE


class TestSphereBob:
    """Tests for SphereBob."""

    def test_center_at_rest(self):
        from src.firsthit.scene.animation import SphereBob

        bob = SphereBob(0, (0.5, 0.0, 0.0), amplitude=0.5, phase=0.0)
        assert bob.center_at(0.0) == pytest.approx((0.5, 0.0, 0.0))

    def test_center_at_peak(self):
        from src.firsthit.scene.animation import SphereBob

        bob = SphereBob(0, (0.5, 0.0, 0.0), amplitude=0.5, phase=0.0)
        assert bob.center_at(math.pi / 2) == pytest.approx((0.5, 0.5, 0.0))

    def test_phase_shift(self):
        from src.firsthit.scene.animation import SphereBob

        bob = SphereBob(0, (0.0, 1.0, 0.0), amplitude=0.5, phase=math.pi / 2)
        assert bob.center_at(0.0) == pytest.approx((0.0, 1.5, 0.0))


class TestSceneAnimation:
    """Tests for SceneAnimation.apply."""

    def test_apply_moves_spheres(self):
        from src.firsthit.scene.animation import FrameContext, SceneAnimation, SphereBob
        from src.firsthit.scene.intersection import sphere_centers
        from src.firsthit.scene.manager import SceneManager

        scene = SceneManager()
        idx = scene.add_sphere((0, 0, 0), 0.5, (255, 0, 0))
        animation = SceneAnimation(bobs=[SphereBob(idx, (0.0, 0.0, 0.0), 0.5, 0.0)])

        animation.apply(scene, FrameContext(elapsed=math.pi / 2))

        assert scene.spheres[idx].center == pytest.approx((0.0, 0.5, 0.0))
        assert list(sphere_centers[idx].to_numpy()) == pytest.approx([0.0, 0.5, 0.0])

    def test_apply_returns_orbit_camera(self):
        from src.firsthit.camera.view import Projection
        from src.firsthit.scene.animation import FrameContext, SceneAnimation
        from src.firsthit.scene.manager import SceneManager

        animation = SceneAnimation(orbit_radius=4.0, orbit_height=1.0)
        context = FrameContext(orbit_angle=math.pi / 2, projection=Projection.ORTHOGRAPHIC)

        camera = animation.apply(SceneManager(), context)

        assert camera.eye == pytest.approx((4.0, 1.0, 0.0), abs=1e-9)
        assert camera.target == (0.0, 0.0, 0.0)
        assert camera.projection == Projection.ORTHOGRAPHIC
        assert camera.vfov == 60.0
        assert camera.ortho_scale == 2.0


class TestAnimatedRenderer:
    """Tests for AnimatedRenderer."""

    def test_sets_aspect_ratio(self):
        from src.firsthit.core.animation import AnimatedRenderer
        from src.firsthit.scene.animation import SceneAnimation
        from src.firsthit.scene.manager import SceneManager

        renderer = AnimatedRenderer(8, 4, SceneManager(), SceneAnimation())
        assert renderer.animation.aspect_ratio == pytest.approx(2.0)
        assert (renderer.width, renderer.height) == (8, 4)

    def test_resize(self, small_renderer):
        from src.firsthit.core.renderer import get_image_dimensions

        small_renderer.resize(12, 6)
        assert get_image_dimensions() == (12, 6)
        assert small_renderer.animation.aspect_ratio == pytest.approx(2.0)

    def test_render_produces_frame(self, small_renderer):
        from src.firsthit.scene.animation import FrameContext

        small_renderer.render(FrameContext())

        data = small_renderer.get_frame_bytes()
        assert small_renderer.frame_count == 1
        assert len(data) == 16 * 16 * 3
        # Something other than background is visible
        assert data != bytes([26]) * len(data)

    def test_frames_differ_over_time(self, small_renderer):
        from src.firsthit.scene.animation import FrameContext

        context = FrameContext()
        small_renderer.render(context)
        first = small_renderer.get_frame_bytes()
        small_renderer.render(context.advance(1.0))
        assert small_renderer.get_frame_bytes() != first

    def test_projection_changes_frame(self, small_renderer):
        from src.firsthit.scene.animation import FrameContext

        context = FrameContext()
        small_renderer.render(context)
        perspective = small_renderer.get_frame_bytes()
        small_renderer.render(context.toggle_projection())
        assert small_renderer.get_frame_bytes() != perspective

    def test_same_context_same_frame(self, small_renderer):
        from src.firsthit.scene.animation import FrameContext

        context = FrameContext(elapsed=1.3, orbit_angle=0.65)
        small_renderer.render(context)
        first = small_renderer.get_frame_bytes()
        small_renderer.render(FrameContext())
        small_renderer.render(context)
        assert small_renderer.get_frame_bytes() == first

    def test_frames_generator(self, small_renderer):
        contexts = [context for _, context in small_renderer.frames(3, 0.1)]

        assert [c.elapsed for c in contexts] == pytest.approx([0.0, 0.1, 0.2])
        assert small_renderer.frame_count == 3

    def test_render_sequence_callback(self, small_renderer):
        calls = []

        final = small_renderer.render_sequence(
            3, 0.1, callback=lambda current, total: calls.append((current, total))
        )

        assert calls == [(1, 3), (2, 3), (3, 3)]
        assert final.elapsed == pytest.approx(0.3)
        assert small_renderer.frame_count == 3

    def test_save_image(self, small_renderer, tmp_path):
        from PIL import Image as PILImage

        from src.firsthit.scene.animation import FrameContext

        small_renderer.render(FrameContext())
        path = tmp_path / "frame.png"
        small_renderer.save_image(str(path))

        with PILImage.open(path) as image:
            assert image.size == (16, 16)
            assert image.mode == "RGB"

    def test_repr(self, small_renderer):
        assert repr(small_renderer) == "AnimatedRenderer(width=16, height=16, frames=0)"
