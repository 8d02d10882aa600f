"""Unit tests for the ray module.

Tests cover:
- Host Ray construction, position and transformation
- Device ray_at, point/vector transforms and ray transforms
- Device reflect and refract helpers
"""

import math

import pytest
import taichi as ti

from whitted.core.ray import Ray
from whitted.core.transform import scaling, translation
from whitted.core.tuples import point, vector


class TestHostRay:
    """Tests for the host-side Ray."""

    def test_create(self):
        """Test a ray keeps its origin and direction."""
        r = Ray(point(1, 2, 3), vector(4, 5, 6))
        assert r.origin == point(1, 2, 3)
        assert r.direction == vector(4, 5, 6)

    def test_position(self):
        """Test points along a ray at several t values."""
        r = Ray(point(2, 3, 4), vector(1, 0, 0))
        assert r.position(0) == point(2, 3, 4)
        assert r.position(1) == point(3, 3, 4)
        assert r.position(-1) == point(1, 3, 4)
        assert r.position(2.5) == point(4.5, 3, 4)

    def test_translate(self):
        """Test translating a ray moves only the origin."""
        r = Ray(point(1, 2, 3), vector(0, 1, 0)).transform(translation(3, 4, 5))
        assert r.origin == point(4, 6, 8)
        assert r.direction == vector(0, 1, 0)

    def test_scale(self):
        """Test scaling a ray scales both parts, leaving the direction unnormalized."""
        r = Ray(point(1, 2, 3), vector(0, 1, 0)).transform(scaling(2, 3, 4))
        assert r.origin == point(2, 6, 12)
        assert r.direction == vector(0, 3, 0)

    def test_tags_are_checked(self):
        """Test a ray rejects swapped point and vector."""
        with pytest.raises(TypeError):
            Ray(vector(0, 0, 0), vector(0, 0, 1))
        with pytest.raises(TypeError):
            Ray(point(0, 0, 0), point(0, 0, 1))


class TestDeviceRay:
    """Tests for ray helpers inside kernels."""

    def test_ray_at(self):
        """Test ray_at computes origin + t * direction."""
        from whitted.core.ray import DeviceRay, ray_at, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            ray = DeviceRay(origin=vec3(2.0, 3.0, 4.0), direction=vec3(1.0, 0.0, 0.0))
            result[None] = ray_at(ray, 2.5)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 4.5) < 1e-6
        assert abs(r[1] - 3.0) < 1e-6
        assert abs(r[2] - 4.0) < 1e-6

    def test_transform_point_and_vector(self):
        """Test translation affects points but not vectors."""
        from whitted.core.ray import transform_point, transform_vector, vec3

        m = ti.Matrix(translation(5, -3, 2).to_list())
        p_result = ti.field(dtype=ti.math.vec3, shape=())
        v_result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel(m: ti.math.mat4):
            p_result[None] = transform_point(m, vec3(-3.0, 4.0, 5.0))
            v_result[None] = transform_vector(m, vec3(-3.0, 4.0, 5.0))

        test_kernel(m)
        p = p_result[None]
        v = v_result[None]
        assert abs(p[0] - 2.0) < 1e-5
        assert abs(p[1] - 1.0) < 1e-5
        assert abs(p[2] - 7.0) < 1e-5
        assert abs(v[0] + 3.0) < 1e-5
        assert abs(v[1] - 4.0) < 1e-5
        assert abs(v[2] - 5.0) < 1e-5

    def test_transform_ray(self):
        """Test scaling a device ray matches the host result."""
        from whitted.core.ray import DeviceRay, transform_ray, vec3

        m = ti.Matrix(scaling(2, 3, 4).to_list())
        origin = ti.field(dtype=ti.math.vec3, shape=())
        direction = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel(m: ti.math.mat4):
            ray = DeviceRay(origin=vec3(1.0, 2.0, 3.0), direction=vec3(0.0, 1.0, 0.0))
            moved = transform_ray(ray, m)
            origin[None] = moved.origin
            direction[None] = moved.direction

        test_kernel(m)
        assert [round(float(c), 5) for c in origin.to_numpy()] == [2.0, 6.0, 12.0]
        assert [round(float(c), 5) for c in direction.to_numpy()] == [0.0, 3.0, 0.0]


class TestVectorUtilities:
    """Tests for reflect and refract inside kernels."""

    def test_reflect_45_degrees(self):
        """Test reflecting a vector approaching at 45 degrees."""
        from whitted.core.ray import reflect, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = reflect(vec3(1.0, -1.0, 0.0), vec3(0.0, 1.0, 0.0))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 1.0) < 1e-6
        assert abs(r[2]) < 1e-6

    def test_reflect_slanted_surface(self):
        """Test reflecting off a slanted surface."""
        from whitted.core.ray import reflect, vec3

        h = math.sqrt(2) / 2
        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel(h: ti.f32):
            result[None] = reflect(vec3(0.0, -1.0, 0.0), vec3(h, h, 0.0))

        test_kernel(h)
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-5
        assert abs(r[1]) < 1e-5
        assert abs(r[2]) < 1e-5

    def test_refract_into_glass(self):
        """Test Snell's law bends a ray toward the normal entering glass."""
        from whitted.core.ray import refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())
        refracted = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            incident = ti.math.normalize(vec3(1.0, -1.0, 0.0))
            direction, ok = refract(incident, vec3(0.0, 1.0, 0.0), 1.0 / 1.5)
            result[None] = direction
            refracted[None] = ok

        test_kernel()
        assert refracted[None] == 1
        r = result[None]
        assert abs(r[0] - 0.4714) < 1e-3
        assert abs(r[1] + 0.8819) < 1e-3
        assert abs(r[2]) < 1e-6

    def test_refract_total_internal_reflection(self):
        """Test a steep exit from glass reports total internal reflection."""
        from whitted.core.ray import refract, vec3

        result = ti.field(dtype=ti.math.vec3, shape=())
        refracted = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            incident = ti.math.normalize(vec3(1.0, -1.0, 0.0))
            direction, ok = refract(incident, vec3(0.0, 1.0, 0.0), 1.5)
            result[None] = direction
            refracted[None] = ok

        test_kernel()
        assert refracted[None] == 0
        assert all(abs(c) < 1e-6 for c in result.to_numpy())
