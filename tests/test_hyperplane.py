"""Unit tests for hyperplane slab intersection.

Tests cover:
- Hits from either side with the normal facing the ray origin
- Clipping against the three in-plane extents
- Parallel rays and rays moving away
- Translated and rotated slabs
"""

import math

import pytest
import taichi as ti

from hyperray.algebra import motors


def run_hyperplane(origin, direction, transform=None, extents=(2.0, 2.0, 2.0)):
    """Intersect one ray with one slab and return (hit, distance, position, normal)."""
    from hyperray.core.ray import Ray
    from hyperray.geometry.hyperplane import Hyperplane, intersect_hyperplane, vec3

    if transform is None:
        transform = motors.identity()

    hit = ti.field(dtype=ti.i32, shape=())
    distance = ti.field(dtype=ti.f32, shape=())
    position = ti.field(dtype=ti.math.vec4, shape=())
    normal = ti.field(dtype=ti.math.vec4, shape=())

    ray_origin = ti.field(dtype=ti.math.vec4, shape=())
    ray_direction = ti.field(dtype=ti.math.vec4, shape=())
    motor = ti.Vector.field(16, dtype=ti.f32, shape=())
    ray_origin[None] = origin
    ray_direction[None] = direction
    motor[None] = [float(v) for v in transform]

    width, height, depth = extents

    @ti.kernel
    def test_kernel():
        ray = Ray(origin=ray_origin[None], direction=ray_direction[None])
        plane = Hyperplane(
            transform=motor[None], color=vec3(0.5, 0.5, 0.5), width=width, height=height, depth=depth
        )
        rec = intersect_hyperplane(ray, plane)
        hit[None] = rec.hit
        distance[None] = rec.distance
        position[None] = rec.position
        normal[None] = rec.normal

    test_kernel()
    return hit[None], distance[None], position[None], normal[None]


class TestHyperplaneIntersection:
    """Tests for a slab at the origin in the y = 0 hyperplane."""

    def test_hit_from_above(self):
        hit, distance, position, normal = run_hyperplane((0.0, 5.0, 0.0, 0.0), (0.0, -1.0, 0.0, 0.0))
        assert hit == 1
        assert abs(distance - 5.0) < 1e-5
        assert abs(position[1]) < 1e-5
        assert abs(normal[1] - 1.0) < 1e-5

    def test_hit_from_below(self):
        """The normal faces the side the ray came from."""
        hit, distance, _, normal = run_hyperplane((0.0, -3.0, 0.0, 0.0), (0.0, 1.0, 0.0, 0.0))
        assert hit == 1
        assert abs(distance - 3.0) < 1e-5
        assert abs(normal[1] + 1.0) < 1e-5

    def test_oblique_hit(self):
        hit, distance, position, _ = run_hyperplane((0.0, 2.0, 0.0, 0.0), (0.0, -0.5, 0.25, 0.25))
        assert hit == 1
        assert abs(distance - 4.0) < 1e-5
        assert abs(position[2] - 1.0) < 1e-5
        assert abs(position[3] - 1.0) < 1e-5

    def test_moving_away_misses(self):
        hit, _, _, _ = run_hyperplane((0.0, 5.0, 0.0, 0.0), (0.0, 1.0, 0.0, 0.0))
        assert hit == 0

    def test_parallel_misses(self):
        hit, _, _, _ = run_hyperplane((-5.0, 1.0, 0.0, 0.0), (1.0, 0.0, 0.0, 0.0))
        assert hit == 0

    def test_origin_on_slab(self):
        hit, distance, position, normal = run_hyperplane((0.5, 0.0, 0.0, 0.0), (0.0, -1.0, 0.0, 0.0))
        assert hit == 1
        assert distance == 0.0
        assert abs(position[0] - 0.5) < 1e-6
        for k in range(4):
            assert normal[k] == 0.0

    @pytest.mark.parametrize(
        "origin,expected",
        [
            ((0.9, 5.0, 0.0, 0.0), 1),
            ((1.1, 5.0, 0.0, 0.0), 0),
            ((0.0, 5.0, 0.9, 0.0), 1),
            ((0.0, 5.0, 1.1, 0.0), 0),
            ((0.0, 5.0, 0.0, -0.9), 1),
            ((0.0, 5.0, 0.0, -1.1), 0),
        ],
    )
    def test_clipping(self, origin, expected):
        hit, _, _, _ = run_hyperplane(origin, (0.0, -1.0, 0.0, 0.0))
        assert hit == expected

    def test_extents_per_axis(self):
        """height bounds local x, width bounds local z, depth bounds local w."""
        extents = (6.0, 2.0, 10.0)
        assert run_hyperplane((1.5, 5.0, 0.0, 0.0), (0.0, -1.0, 0.0, 0.0), extents=extents)[0] == 0
        assert run_hyperplane((0.0, 5.0, 2.5, 0.0), (0.0, -1.0, 0.0, 0.0), extents=extents)[0] == 1
        assert run_hyperplane((0.0, 5.0, 0.0, 4.5), (0.0, -1.0, 0.0, 0.0), extents=extents)[0] == 1


class TestTransformedHyperplane:
    """Tests for slabs placed by a non-identity motor."""

    def test_translated(self):
        transform = motors.translation((0.0, -1.0, 0.0, 0.0))
        hit, distance, position, normal = run_hyperplane(
            (0.0, 5.0, 0.0, 0.0), (0.0, -1.0, 0.0, 0.0), transform=transform
        )
        assert hit == 1
        assert abs(distance - 6.0) < 1e-4
        assert abs(position[1] + 1.0) < 1e-4
        assert abs(normal[1] - 1.0) < 1e-5

    def test_translation_moves_extents(self):
        transform = motors.translation((0.0, 0.0, 3.0, 0.0))
        assert run_hyperplane((0.0, 5.0, 3.5, 0.0), (0.0, -1.0, 0.0, 0.0), transform=transform)[0] == 1
        assert run_hyperplane((0.0, 5.0, 0.0, 0.0), (0.0, -1.0, 0.0, 0.0), transform=transform)[0] == 0

    def test_rotated_into_x(self):
        """A quarter turn in xy stands the slab in the x = 0 hyperplane."""
        transform = motors.rotation("xy", math.pi / 2)
        hit, distance, position, normal = run_hyperplane(
            (5.0, 0.0, 0.0, 0.0), (-1.0, 0.0, 0.0, 0.0), transform=transform
        )
        assert hit == 1
        assert abs(distance - 5.0) < 1e-4
        assert abs(position[0]) < 1e-4
        # Faces the ray origin on the +x side
        assert abs(normal[0] - 1.0) < 1e-5
        assert abs(normal[1]) < 1e-5

    def test_rotated_slab_parallel_to_ray(self):
        """After a quarter turn in yw the slab lies in w = 0 and a ray along y runs parallel."""
        transform = motors.rotation("yw", math.pi / 2)
        hit, _, _, _ = run_hyperplane((0.0, 5.0, 0.0, 0.5), (0.0, -1.0, 0.0, 0.0), transform=transform)
        assert hit == 0
