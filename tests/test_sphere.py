"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside
- Ray missing sphere
- Ray starting inside sphere (far root)
- Ray tangent to sphere
- Hits outside the accepted distance range
- Numerical stability for huge spheres
- Normals and oriented normals
"""

import pytest
import taichi as ti


def _intersect(origin, direction, center, radius, t_min=1e-4, t_max=1e20):
    """Run intersect_sphere in a kernel and return the distance."""
    from src.pathtracer.core.ray import vec3
    from src.pathtracer.geometry.sphere import intersect_sphere

    t_val = ti.field(dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, c: vec3, r: ti.f64, lo: ti.f64, hi: ti.f64):
        t_val[None] = intersect_sphere(o, d, c, r, lo, hi)

    test_kernel(vec3(*origin), vec3(*direction), vec3(*center), radius, t_min, t_max)
    return t_val[None]


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_direct_hit(self):
        """Ray from z=5 toward a unit sphere at the origin hits at t=4."""
        t = _intersect((0, 0, 5), (0, 0, -1), (0, 0, 0), 1.0)
        assert t == pytest.approx(4.0, abs=1e-12)

    def test_miss(self):
        from src.pathtracer.geometry.sphere import NO_HIT

        t = _intersect((5, 0, 0), (0, 0, -1), (0, 0, 0), 1.0)
        assert t == NO_HIT

    def test_pointing_away(self):
        from src.pathtracer.geometry.sphere import NO_HIT

        t = _intersect((0, 0, 5), (0, 0, 1), (0, 0, 0), 1.0)
        assert t == NO_HIT

    def test_inside_returns_far_root(self):
        t = _intersect((0, 0, 0), (0, 0, 1), (0, 0, 0), 2.0)
        assert t == pytest.approx(2.0, abs=1e-12)

    def test_tangent_ray(self):
        """A grazing ray touches the sphere once at the tangent point."""
        t = _intersect((1, 0, 5), (0, 0, -1), (0, 0, 0), 1.0)
        assert t == pytest.approx(5.0, abs=1e-6)

    def test_unnormalized_direction(self):
        t = _intersect((0, 0, 5), (0, 0, -2), (0, 0, 0), 1.0)
        assert t == pytest.approx(2.0, abs=1e-12)

    def test_respects_t_max(self):
        from src.pathtracer.geometry.sphere import NO_HIT

        t = _intersect((0, 0, 5), (0, 0, -1), (0, 0, 0), 1.0, t_max=3.0)
        assert t == NO_HIT

    def test_near_root_below_t_min_gives_far_root(self):
        """A ray starting on the surface skips its own surface."""
        t = _intersect((0, 0, 1), (0, 0, -1), (0, 0, 0), 1.0)
        assert t == pytest.approx(2.0, abs=1e-9)

    def test_huge_sphere_is_stable(self):
        """Wall-sized spheres seen from close by give accurate distances."""
        r = 1e5
        eye = (50.0, 40.8, 81.6)

        # The box interior lies inside the wall spheres; rays exit at the wall
        t = _intersect(eye, (-1, 0, 0), (r + 1.0, 40.8, 81.6), r)
        assert t == pytest.approx(49.0, abs=1e-6)

        t = _intersect(eye, (1, 0, 0), (-r + 99.0, 40.8, 81.6), r)
        assert t == pytest.approx(49.0, abs=1e-6)

        # From outside, the near root is the wall
        t = _intersect(eye, (1, 0, 0), (r + 99.0, 40.8, 81.6), r)
        assert t == pytest.approx(49.0, abs=1e-6)


class TestSphereNormals:
    """Tests for sphere_normal and oriented_normal."""

    def test_outward_normal(self):
        from src.pathtracer.core.ray import vec3
        from src.pathtracer.geometry.sphere import sphere_normal

        n = ti.Vector.field(3, dtype=ti.f64, shape=())

        @ti.kernel
        def test_kernel():
            n[None] = sphere_normal(vec3(0.0, 3.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        assert n[None].to_numpy().tolist() == pytest.approx([0.0, 1.0, 0.0])

    def test_oriented_normal_faces_ray(self):
        from src.pathtracer.core.ray import vec3
        from src.pathtracer.geometry.sphere import oriented_normal

        n = ti.Vector.field(3, dtype=ti.f64, shape=2)

        @ti.kernel
        def test_kernel():
            # Entering: normal already opposes the ray
            n[0] = oriented_normal(vec3(0.0, 0.0, 1.0), vec3(0.0, 0.0, -1.0))
            # Leaving: normal is flipped
            n[1] = oriented_normal(vec3(0.0, 0.0, 1.0), vec3(0.0, 0.0, 1.0))

        test_kernel()
        assert n[0].to_numpy().tolist() == pytest.approx([0.0, 0.0, 1.0])
        assert n[1].to_numpy().tolist() == pytest.approx([0.0, 0.0, -1.0])
