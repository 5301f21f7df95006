"""Unit tests for scene-level intersection.

Tests cover:
- Primitive storage, color validation and capacity errors
- Closest hit across spheres, triangles and the plane
- Hit records (position, normal, color, plane flag)
- Shadow queries ignore the plane
- Scene clearing
"""

import pytest
import taichi as ti


def _closest(origin, direction):
    """Run intersect_closest in a kernel and return the record as a dict."""
    from src.firsthit.scene.intersection import intersect_closest, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    position = ti.field(dtype=ti.math.vec3, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())
    color = ti.field(dtype=ti.math.vec3, shape=())
    is_plane = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3):
        rec = intersect_closest(o, d)
        hit[None] = rec.hit
        t_val[None] = rec.t
        position[None] = rec.position
        normal[None] = rec.normal
        color[None] = rec.color
        is_plane[None] = rec.is_plane

    test_kernel(vec3(*origin), vec3(*direction))
    return {
        "hit": hit[None],
        "t": t_val[None],
        "position": tuple(position[None].to_numpy().tolist()),
        "normal": tuple(normal[None].to_numpy().tolist()),
        "color": tuple(color[None].to_numpy().tolist()),
        "is_plane": is_plane[None],
    }


def _occluded(origin, direction, max_distance):
    from src.firsthit.scene.intersection import is_occluded, vec3

    result = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, m: ti.f32):
        result[None] = is_occluded(o, d, m)

    test_kernel(vec3(*origin), vec3(*direction), max_distance)
    return result[None]


class TestMissRecord:
    """Tests for the miss record."""

    def test_miss_record(self):
        from src.firsthit.scene.intersection import T_SENTINEL, _make_miss_record

        result_hit = ti.field(dtype=ti.i32, shape=())
        result_t = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            rec = _make_miss_record()
            result_hit[None] = rec.hit
            result_t[None] = rec.t

        test_kernel()
        assert result_hit[None] == 0
        assert result_t[None] == pytest.approx(T_SENTINEL, rel=1e-6)

    def test_empty_scene_misses(self):
        rec = _closest((0, 0, 5), (0, 0, -1))
        assert rec["hit"] == 0


class TestScenePrimitiveStorage:
    """Tests for scene primitive storage and management."""

    def test_add_sphere(self):
        from src.firsthit.scene.intersection import add_sphere, get_sphere_count

        assert get_sphere_count() == 0
        idx = add_sphere((1.0, 2.0, 3.0), 0.5, (255, 0, 0))
        assert idx == 0
        assert get_sphere_count() == 1

    def test_add_triangle(self):
        from src.firsthit.scene.intersection import add_triangle, get_triangle_count

        assert get_triangle_count() == 0
        idx = add_triangle((0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 255, 0))
        assert idx == 0
        assert get_triangle_count() == 1

    def test_invalid_color_rejected(self):
        from src.firsthit.scene.intersection import add_sphere, get_sphere_count

        with pytest.raises(ValueError, match="outside"):
            add_sphere((0, 0, 0), 1.0, (256, 0, 0))
        with pytest.raises(ValueError, match="outside"):
            add_sphere((0, 0, 0), 1.0, (0, -1, 0))
        assert get_sphere_count() == 0

    def test_color_needs_three_components(self):
        from src.firsthit.scene.intersection import add_triangle

        with pytest.raises(ValueError, match="3 components"):
            add_triangle((0, 0, 0), (1, 0, 0), (0, 1, 0), (255, 0))

    def test_sphere_capacity(self):
        from src.firsthit.scene.intersection import MAX_SPHERES, add_sphere

        for i in range(MAX_SPHERES):
            add_sphere((float(i), 0.0, 0.0), 0.1, (10, 10, 10))
        with pytest.raises(RuntimeError, match="Maximum number of spheres"):
            add_sphere((0.0, 0.0, 0.0), 0.1, (10, 10, 10))

    def test_set_sphere_center_out_of_range(self):
        from src.firsthit.scene.intersection import add_sphere, set_sphere_center

        add_sphere((0, 0, 0), 1.0, (255, 0, 0))
        with pytest.raises(IndexError):
            set_sphere_center(1, (0, 0, 0))

    def test_plane_toggle(self):
        from src.firsthit.scene.intersection import disable_plane, has_plane, set_plane

        assert not has_plane()
        set_plane((0, -1, 0), (0, 1, 0), (200, 200, 200))
        assert has_plane()
        disable_plane()
        assert not has_plane()

    def test_clear_scene(self):
        from src.firsthit.scene.intersection import (
            add_sphere,
            add_triangle,
            clear_scene,
            get_sphere_count,
            get_triangle_count,
            has_plane,
            set_plane,
        )

        add_sphere((0, 0, 0), 1.0, (255, 0, 0))
        add_triangle((0, 0, 0), (1, 0, 0), (0, 1, 0), (0, 255, 0))
        set_plane((0, -1, 0), (0, 1, 0), (200, 200, 200))

        clear_scene()

        assert get_sphere_count() == 0
        assert get_triangle_count() == 0
        assert not has_plane()
        assert _closest((0, 0, 5), (0, 0, -1))["hit"] == 0


class TestClosestHit:
    """Tests for intersect_closest."""

    def test_single_sphere_record(self):
        from src.firsthit.scene.intersection import add_sphere

        add_sphere((0, 0, 0), 1.0, (255, 0, 0))
        rec = _closest((0, 0, 5), (0, 0, -1))

        assert rec["hit"] == 1
        assert rec["t"] == pytest.approx(4.0, abs=1e-5)
        assert rec["position"] == pytest.approx((0.0, 0.0, 1.0), abs=1e-5)
        assert rec["normal"] == pytest.approx((0.0, 0.0, 1.0), abs=1e-5)
        assert rec["color"] == pytest.approx((255.0, 0.0, 0.0))
        assert rec["is_plane"] == 0

    def test_nearest_sphere_wins(self):
        from src.firsthit.scene.intersection import add_sphere

        add_sphere((0, 0, -5), 1.0, (0, 0, 255))
        add_sphere((0, 0, 0), 1.0, (255, 0, 0))
        rec = _closest((0, 0, 5), (0, 0, -1))

        assert rec["t"] == pytest.approx(4.0, abs=1e-5)
        assert rec["color"] == pytest.approx((255.0, 0.0, 0.0))

    def test_triangle_in_front_of_sphere(self):
        from src.firsthit.scene.intersection import add_sphere, add_triangle

        add_sphere((0, 0, 0), 1.0, (255, 0, 0))
        add_triangle((-1, -1, 2), (1, -1, 2), (0, 1, 2), (0, 255, 0))
        rec = _closest((0, 0, 5), (0, 0, -1))

        assert rec["t"] == pytest.approx(3.0, abs=1e-5)
        assert rec["color"] == pytest.approx((0.0, 255.0, 0.0))
        # Counter-clockwise seen from +z
        assert rec["normal"] == pytest.approx((0.0, 0.0, 1.0), abs=1e-5)

    def test_plane_hit_flagged(self):
        from src.firsthit.scene.intersection import set_plane

        set_plane((0, -1, 0), (0, 1, 0), (200, 200, 200))
        rec = _closest((0, 0, 0), (0, -1, 0))

        assert rec["hit"] == 1
        assert rec["is_plane"] == 1
        assert rec["t"] == pytest.approx(1.0, abs=1e-5)
        assert rec["normal"] == pytest.approx((0.0, 1.0, 0.0))
        assert rec["color"] == pytest.approx((200.0, 200.0, 200.0))

    def test_sphere_in_front_of_plane(self):
        from src.firsthit.scene.intersection import add_sphere, set_plane

        add_sphere((0, -3, 0), 1.0, (255, 0, 0))
        set_plane((0, -1, 0), (0, 1, 0), (200, 200, 200))
        rec = _closest((0, 5, 0), (0, -1, 0))

        # Plane at t=6 is nearer than the sphere top at t=7
        assert rec["is_plane"] == 1
        assert rec["t"] == pytest.approx(6.0, abs=1e-5)

    def test_plane_behind_sphere(self):
        from src.firsthit.scene.intersection import add_sphere, set_plane

        add_sphere((0, 0, 0), 1.0, (255, 0, 0))
        set_plane((0, -5, 0), (0, 1, 0), (200, 200, 200))
        rec = _closest((0, 5, 0), (0, -1, 0))

        assert rec["is_plane"] == 0
        assert rec["t"] == pytest.approx(4.0, abs=1e-5)


class TestOcclusion:
    """Tests for the shadow query."""

    def test_sphere_blocks(self):
        from src.firsthit.scene.intersection import add_sphere

        add_sphere((0, 2, 0), 0.5, (255, 0, 0))
        assert _occluded((0, 0, 0), (0, 1, 0), 10.0) == 1

    def test_blocker_beyond_light(self):
        from src.firsthit.scene.intersection import add_sphere

        add_sphere((0, 20, 0), 0.5, (255, 0, 0))
        assert _occluded((0, 0, 0), (0, 1, 0), 10.0) == 0

    def test_triangle_blocks(self):
        from src.firsthit.scene.intersection import add_triangle

        add_triangle((-1, 2, -1), (1, 2, -1), (0, 2, 1), (0, 255, 0))
        assert _occluded((0, 0, 0), (0, 1, 0), 10.0) == 1

    def test_plane_never_occludes(self):
        from src.firsthit.scene.intersection import set_plane

        set_plane((0, 2, 0), (0, 1, 0), (200, 200, 200))
        assert _occluded((0, 0, 0), (0, 1, 0), 10.0) == 0
