"""Unit tests for hypersphere intersection.

Tests cover:
- Head-on hits along different axes
- Misses
- Rays starting inside or past the hypersphere
- Non-unit ray directions
"""

import taichi as ti


class TestHypersphereBasics:
    """Tests for the Hypersphere dataclass."""

    def test_make_hypersphere(self):
        from hyperray.geometry.hypersphere import make_hypersphere, vec3, vec4

        center_result = ti.field(dtype=ti.math.vec4, shape=())
        radius_result = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = make_hypersphere(vec4(1.0, 2.0, 3.0, 4.0), vec3(1.0, 0.0, 0.0), 0.5)
            center_result[None] = sphere.position
            radius_result[None] = sphere.radius

        test_kernel()
        c = center_result[None]
        assert abs(c[0] - 1.0) < 1e-6
        assert abs(c[3] - 4.0) < 1e-6
        assert abs(radius_result[None] - 0.5) < 1e-6

    def test_make_miss(self):
        from hyperray.geometry.hypersphere import make_miss

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            hit[None] = make_miss().hit

        hit[None] = 7
        test_kernel()
        assert hit[None] == 0


class TestHypersphereIntersection:
    """Tests for ray-hypersphere intersection."""

    def _run(self, origin, direction, center=(0.0, 0.0, 0.0, 0.0), radius=1.0):
        from hyperray.core.ray import Ray
        from hyperray.geometry.hypersphere import Hypersphere, intersect_hypersphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        distance = ti.field(dtype=ti.f32, shape=())
        position = ti.field(dtype=ti.math.vec4, shape=())
        normal = ti.field(dtype=ti.math.vec4, shape=())
        color = ti.field(dtype=ti.math.vec3, shape=())

        ray_origin = ti.field(dtype=ti.math.vec4, shape=())
        ray_direction = ti.field(dtype=ti.math.vec4, shape=())
        sphere_center = ti.field(dtype=ti.math.vec4, shape=())
        ray_origin[None] = origin
        ray_direction[None] = direction
        sphere_center[None] = center

        @ti.kernel
        def test_kernel(r: ti.f32):
            ray = Ray(origin=ray_origin[None], direction=ray_direction[None])
            sphere = Hypersphere(position=sphere_center[None], color=vec3(0.2, 0.4, 0.6), radius=r)
            rec = intersect_hypersphere(ray, sphere)
            hit[None] = rec.hit
            distance[None] = rec.distance
            position[None] = rec.position
            normal[None] = rec.normal
            color[None] = rec.color

        test_kernel(radius)
        return hit[None], distance[None], position[None], normal[None], color[None]

    def test_direct_hit(self):
        """Ray from z=-5 toward the origin hits the unit hypersphere at t=4."""
        hit, distance, position, normal, color = self._run((0.0, 0.0, -5.0, 0.0), (0.0, 0.0, 1.0, 0.0))
        assert hit == 1
        assert abs(distance - 4.0) < 1e-5
        assert abs(position[2] + 1.0) < 1e-5
        # Normal is anti-parallel to the ray
        assert abs(normal[2] + 1.0) < 1e-5
        assert abs(normal[0]) < 1e-5
        assert abs(normal[1]) < 1e-5
        assert abs(normal[3]) < 1e-5
        assert abs(color[0] - 0.2) < 1e-6
        assert abs(color[2] - 0.6) < 1e-6

    def test_hit_along_w(self):
        hit, distance, position, normal, _ = self._run(
            (0.0, 0.0, 0.0, 10.0), (0.0, 0.0, 0.0, -1.0), center=(0.0, 0.0, 0.0, 1.0), radius=2.0
        )
        assert hit == 1
        assert abs(distance - 7.0) < 1e-5
        assert abs(position[3] - 3.0) < 1e-5
        assert abs(normal[3] - 1.0) < 1e-5

    def test_distance_is_center_distance_minus_radius(self):
        hit, distance, _, _, _ = self._run(
            (1.0, 2.0, 3.0, 4.0), (0.0, -1.0, 0.0, 0.0), center=(1.0, -6.0, 3.0, 4.0), radius=1.5
        )
        assert hit == 1
        assert abs(distance - 6.5) < 1e-5

    def test_miss(self):
        hit, _, _, _, _ = self._run((0.0, 2.0, -5.0, 0.0), (0.0, 0.0, 1.0, 0.0))
        assert hit == 0

    def test_miss_offset_in_w(self):
        """A ray that passes the sphere in xyz but is displaced along w misses."""
        hit, _, _, _, _ = self._run((0.0, 0.0, -5.0, 1.5), (0.0, 0.0, 1.0, 0.0))
        assert hit == 0

    def test_sphere_behind_ray(self):
        hit, _, _, _, _ = self._run((0.0, 0.0, -5.0, 0.0), (0.0, 0.0, -1.0, 0.0))
        assert hit == 0

    def test_origin_inside_reports_miss(self):
        hit, _, _, _, _ = self._run((0.0, 0.0, 0.0, 0.0), (0.0, 0.0, 1.0, 0.0))
        assert hit == 0

    def test_non_unit_direction(self):
        """Distance is measured in units of the direction vector."""
        hit, distance, position, _, _ = self._run((0.0, 0.0, -5.0, 0.0), (0.0, 0.0, 2.0, 0.0))
        assert hit == 1
        assert abs(distance - 2.0) < 1e-5
        assert abs(position[2] + 1.0) < 1e-5

    def test_normal_is_unit(self):
        hit, _, _, normal, _ = self._run(
            (-4.0, 0.3, 0.2, -0.1), (1.0, 0.0, 0.0, 0.0), center=(0.0, 0.0, 0.0, 0.0), radius=2.0
        )
        assert hit == 1
        length = sum(normal[k] * normal[k] for k in range(4)) ** 0.5
        assert abs(length - 1.0) < 1e-5
