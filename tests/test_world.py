"""Unit tests for the world.

Tests cover:
- The default world
- Intersecting a ray with every shape
- Precomputed hit state (eye, normal, inside, offset points)
- Shadows and hit shading
- Upload capacity and serialization
"""

import json
import math

import pytest

from whitted.core.color import BLACK, Color
from whitted.core.ray import Ray
from whitted.core.transform import scaling, translation
from whitted.core.tuples import EPSILON, point, vector
from whitted.geometry.intersection import Intersection
from whitted.geometry.plane import Plane
from whitted.geometry.shape import MAX_SHAPES
from whitted.geometry.sphere import Sphere, glass_sphere
from whitted.materials.material import Material

H = math.sqrt(2) / 2


class TestDefaultWorld:
    """Tests for the world construction helpers."""

    def test_empty_world(self):
        from whitted.scene.world import World

        world = World()
        assert world.shapes == []
        assert world.light is None

    def test_default_world(self):
        from whitted.scene.world import default_world

        world = default_world()
        assert world.light.position == point(-10, 10, -10)
        assert world.light.intensity == Color(1, 1, 1)
        assert len(world.shapes) == 2
        outer, inner = world.shapes
        assert outer.material.color == Color(0.8, 1.0, 0.6)
        assert outer.material.diffuse == 0.7
        assert outer.material.specular == 0.2
        assert inner.transform == scaling(0.5, 0.5, 0.5)

    def test_add(self):
        from whitted.scene.world import World

        world = World()
        a, b = Sphere(), Plane()
        world.add(a, b)
        assert world.shapes == [a, b]

    def test_add_rejects_shape_already_present(self):
        from whitted.scene.world import World

        a, b = Sphere(), Plane()
        world = World([a])
        with pytest.raises(ValueError):
            world.add(b, a)
        # Nothing from the rejected call is kept
        assert world.shapes == [a]

    def test_add_rejects_repeated_argument(self):
        from whitted.scene.world import World

        world = World()
        a = Sphere()
        with pytest.raises(ValueError):
            world.add(a, a)
        assert world.shapes == []

    def test_construction_rejects_duplicates(self):
        from whitted.scene.world import World

        a = Sphere()
        with pytest.raises(ValueError):
            World([a, Plane(), a])

    def test_equal_but_distinct_shapes_accepted(self):
        from whitted.scene.world import World

        world = World([Sphere(), Sphere()])
        world.upload()
        assert [world.slot_of(s) for s in world.shapes] == [0, 1]


class TestWorldIntersect:
    """Tests for World.intersect."""

    def test_intersect_default_world(self):
        """Test a ray through both spheres gives four sorted roots."""
        from whitted.scene.world import default_world

        world = default_world()
        xs = world.intersect(Ray(point(0, 0, -5), vector(0, 0, 1)))
        assert [round(i.t, 4) for i in xs] == [4.0, 4.5, 5.5, 6.0]
        assert xs[0].shape is world.shapes[0]
        assert xs[1].shape is world.shapes[1]

    def test_empty_world_has_no_intersections(self):
        from whitted.scene.world import World

        assert World().intersect(Ray(point(0, 0, -5), vector(0, 0, 1))) == []


class TestPrepareComputations:
    """Tests for the precomputed hit state."""

    def test_outside_hit(self):
        from whitted.scene.world import World

        shape = Sphere()
        world = World([shape])
        comps = world.prepare_computations(Intersection(4, shape), Ray(point(0, 0, -5), vector(0, 0, 1)))
        assert comps.t == 4
        assert comps.point == point(0, 0, -1)
        assert comps.eyev == vector(0, 0, -1)
        assert comps.normalv == vector(0, 0, -1)
        assert not comps.inside

    def test_inside_hit(self):
        """Test the normal is flipped toward the eye when the hit is from inside."""
        from whitted.scene.world import World

        shape = Sphere()
        world = World([shape])
        comps = world.prepare_computations(Intersection(1, shape), Ray(point(0, 0, 0), vector(0, 0, 1)))
        assert comps.point == point(0, 0, 1)
        assert comps.eyev == vector(0, 0, -1)
        assert comps.inside
        assert comps.normalv == vector(0, 0, -1)

    def test_over_point(self):
        """Test the over point lies just above the surface."""
        from whitted.scene.world import World

        shape = Sphere(transform=translation(0, 0, 1))
        world = World([shape])
        comps = world.prepare_computations(Intersection(5, shape), Ray(point(0, 0, -5), vector(0, 0, 1)))
        assert comps.over_point.z < -EPSILON / 2
        assert comps.point.z > comps.over_point.z

    def test_under_point(self):
        """Test the under point lies just below the surface."""
        from whitted.scene.world import World

        shape = glass_sphere(transform=translation(0, 0, 1))
        world = World([shape])
        comps = world.prepare_computations(Intersection(5, shape), Ray(point(0, 0, -5), vector(0, 0, 1)))
        assert comps.under_point.z > EPSILON / 2
        assert comps.point.z < comps.under_point.z

    def test_reflect_vector(self):
        from whitted.scene.world import World

        shape = Plane()
        world = World([shape])
        ray = Ray(point(0, 1, -1), vector(0, -H, H))
        comps = world.prepare_computations(Intersection(math.sqrt(2), shape), ray)
        assert abs(comps.reflectv.x) < 1e-5
        assert abs(comps.reflectv.y - H) < 1e-5
        assert abs(comps.reflectv.z - H) < 1e-5

    def test_unknown_shape(self):
        from whitted.scene.world import World

        world = World([Sphere()])
        with pytest.raises(KeyError):
            world.prepare_computations(Intersection(4, Sphere()), Ray(point(0, 0, -5), vector(0, 0, 1)))


class TestShadows:
    """Tests for World.is_shadowed."""

    @pytest.mark.parametrize(
        "p, expected",
        [
            (point(0, 10, 0), False),
            (point(10, -10, 10), True),
            (point(-20, 20, -20), False),
            (point(-2, 2, -2), False),
        ],
        ids=["not-collinear", "object-between", "behind-light", "object-behind-point"],
    )
    def test_default_world(self, p, expected):
        from whitted.scene.world import default_world

        assert default_world().is_shadowed(p) is expected

    def test_no_light_means_no_shadow(self):
        from whitted.scene.world import default_world

        world = default_world()
        world.light = None
        assert world.is_shadowed(point(10, -10, 10)) is False


class TestShading:
    """Tests for shade_hit and color_at."""

    def test_shade_hit(self):
        from whitted.scene.world import default_world

        world = default_world()
        ray = Ray(point(0, 0, -5), vector(0, 0, 1))
        c = world.shade_hit(Intersection(4, world.shapes[0]), ray)
        assert c.is_close(Color(0.38066, 0.47583, 0.2855), 1e-4)

    def test_shade_hit_from_inside(self):
        from whitted.scene.light import PointLight
        from whitted.scene.world import default_world

        world = default_world()
        world.light = PointLight(point(0, 0.25, 0), Color(1, 1, 1))
        ray = Ray(point(0, 0, 0), vector(0, 0, 1))
        c = world.shade_hit(Intersection(0.5, world.shapes[1]), ray)
        assert c.is_close(Color(0.90498, 0.90498, 0.90498), 1e-4)

    def test_shade_hit_in_shadow(self):
        from whitted.scene.light import PointLight
        from whitted.scene.world import World

        s2 = Sphere(transform=translation(0, 0, 10))
        world = World([Sphere(), s2], PointLight(point(0, 0, -10), Color(1, 1, 1)))
        ray = Ray(point(0, 0, 5), vector(0, 0, 1))
        c = world.shade_hit(Intersection(4, s2), ray)
        assert c.is_close(Color(0.1, 0.1, 0.1), 1e-5)

    def test_color_at_miss(self):
        from whitted.scene.world import default_world

        assert default_world().color_at(Ray(point(0, 0, -5), vector(0, 1, 0))) == BLACK

    def test_color_at_hit(self):
        from whitted.scene.world import default_world

        c = default_world().color_at(Ray(point(0, 0, -5), vector(0, 0, 1)))
        assert c.is_close(Color(0.38066, 0.47583, 0.2855), 1e-4)

    def test_color_at_hit_behind_ray(self):
        """Test the inner sphere is seen from between the two spheres."""
        from whitted.scene.world import default_world

        world = default_world()
        outer, inner = world.shapes
        outer.material = Material(color=outer.material.color, ambient=1.0, diffuse=0.7, specular=0.2)
        inner.material = Material(ambient=1.0)
        c = world.color_at(Ray(point(0, 0, 0.75), vector(0, 0, -1)))
        assert c.is_close(inner.material.color, 1e-5)

    def test_no_light_renders_black(self):
        from whitted.scene.world import default_world

        world = default_world()
        world.light = None
        assert world.color_at(Ray(point(0, 0, -5), vector(0, 0, 1))) == BLACK


class TestUploadAndSerialization:
    """Tests for upload limits and dictionary round trips."""

    def test_capacity_exceeded(self):
        from whitted.scene.world import World

        world = World([Sphere() for _ in range(MAX_SHAPES + 1)])
        with pytest.raises(RuntimeError):
            world.upload()

    def test_slots_follow_shape_order(self):
        from whitted.scene.world import default_world

        world = default_world()
        world.upload()
        assert world.slot_of(world.shapes[0]) == 0
        assert world.slot_of(world.shapes[1]) == 1

    def test_dict_round_trip_through_json(self):
        from whitted.scene.world import World, default_world

        world = default_world()
        world.add(Plane(transform=translation(0, -1, 0)))
        loaded = World.from_dict(json.loads(json.dumps(world.to_dict())))
        assert [type(s) for s in loaded.shapes] == [Sphere, Sphere, Plane]
        assert loaded.shapes[1].transform == world.shapes[1].transform
        assert loaded.light.position == world.light.position
        ray = Ray(point(0, 0, -5), vector(0, 0, 1))
        assert loaded.color_at(ray).is_close(world.color_at(ray), 1e-6)

    def test_unknown_shape_type(self):
        from whitted.scene.world import World

        with pytest.raises(ValueError):
            World.from_dict({"shapes": [{"type": "torus"}], "light": None})
