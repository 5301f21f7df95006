"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside
- Ray missing sphere
- Ray starting inside sphere (far root)
- Sphere behind the ray and the self-intersection epsilon
- Outward normals
"""

import taichi as ti


def _intersect(origin, direction, center, radius):
    """Run intersect_sphere in a kernel and return (hit, t)."""
    from src.firsthit.geometry.sphere import intersect_sphere, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, c: vec3, r: ti.f32):
        h, t = intersect_sphere(o, d, c, r)
        hit[None] = h
        t_val[None] = t

    test_kernel(vec3(*origin), vec3(*direction), vec3(*center), radius)
    return hit[None], t_val[None]


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_direct_hit(self):
        """Ray from z=5 toward a unit sphere at the origin hits at t=4."""
        hit, t = _intersect((0, 0, 5), (0, 0, -1), (0, 0, 0), 1.0)
        assert hit == 1
        assert abs(t - 4.0) < 1e-5

    def test_miss(self):
        hit, _ = _intersect((5, 0, 0), (0, 0, -1), (0, 0, 0), 1.0)
        assert hit == 0

    def test_inside_returns_far_root(self):
        """Ray starting at the center hits the far side at t=radius."""
        hit, t = _intersect((0, 0, 0), (0, 0, 1), (0, 0, 0), 2.0)
        assert hit == 1
        assert abs(t - 2.0) < 1e-5

    def test_sphere_behind_ray(self):
        hit, _ = _intersect((0, 0, 5), (0, 0, 1), (0, 0, 0), 1.0)
        assert hit == 0

    def test_unnormalized_direction(self):
        """t is measured in units of the direction vector."""
        hit, t = _intersect((0, 0, 5), (0, 0, -2), (0, 0, 0), 1.0)
        assert hit == 1
        assert abs(t - 2.0) < 1e-5

    def test_origin_on_surface_skips_near_root(self):
        """A ray leaving the surface outward does not re-hit the sphere."""
        hit, _ = _intersect((0, 0, 1), (0, 0, 1), (0, 0, 0), 1.0)
        assert hit == 0

    def test_origin_on_surface_inward_hits_far_side(self):
        hit, t = _intersect((0, 0, 1), (0, 0, -1), (0, 0, 0), 1.0)
        assert hit == 1
        assert abs(t - 2.0) < 1e-4


class TestSphereNormal:
    """Tests for sphere_normal."""

    def test_outward_normal(self):
        from src.firsthit.geometry.sphere import sphere_normal, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = sphere_normal(vec3(1.0, 1.0, 1.0), vec3(1.0, 3.0, 1.0))

        test_kernel()
        n = result[None]
        assert abs(n[0]) < 1e-6
        assert abs(n[1] - 1.0) < 1e-6
        assert abs(n[2]) < 1e-6
