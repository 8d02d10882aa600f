"""Unit tests for patterns and materials.

Tests cover:
- Stripe, gradient, ring and checkers evaluation in pattern space
- Object and pattern transforms when sampling a pattern on a shape
- Lighting with a pattern applied
- Material validation and dictionary round trips
"""

import json

import pytest
import taichi as ti

from whitted.core.color import BLACK, WHITE, Color
from whitted.core.transform import scaling, translation
from whitted.core.tuples import point, vector
from whitted.geometry.sphere import Sphere
from whitted.materials.material import Material
from whitted.materials.pattern import (
    CheckersPattern,
    GradientPattern,
    PatternKind,
    RingPattern,
    StripePattern,
    pattern_from_dict,
)


def _sample(kind, a, b, p):
    """Evaluate pattern_at in a kernel and return the color."""
    from whitted.materials.pattern import pattern_at, vec3

    result = ti.Vector.field(3, dtype=ti.f32, shape=())

    @ti.kernel
    def test_kernel(kind: ti.i32, a: ti.math.vec3, b: ti.math.vec3, px: ti.f32, py: ti.f32, pz: ti.f32):
        result[None] = pattern_at(kind, a, b, vec3(px, py, pz))

    test_kernel(int(kind), ti.math.vec3(*a.as_tuple()), ti.math.vec3(*b.as_tuple()), *p)
    return Color.from_sequence(result.to_numpy())


class TestStripePattern:
    """Tests for stripes alternating in x."""

    def test_constant_in_y_and_z(self):
        for p in ((0, 0, 0), (0, 1, 0), (0, 2, 0), (0, 0, 1), (0, 0, 2)):
            assert _sample(PatternKind.STRIPE, WHITE, BLACK, p) == WHITE

    @pytest.mark.parametrize(
        "x, expected",
        [(0.0, WHITE), (0.9, WHITE), (1.0, BLACK), (-0.1, BLACK), (-1.0, BLACK), (-1.1, WHITE)],
    )
    def test_alternates_in_x(self, x, expected):
        assert _sample(PatternKind.STRIPE, WHITE, BLACK, (x, 0, 0)) == expected


class TestOtherPatterns:
    """Tests for gradient, ring and checkers."""

    @pytest.mark.parametrize(
        "x, level",
        [(0.0, 1.0), (0.25, 0.75), (0.5, 0.5), (0.75, 0.25)],
    )
    def test_gradient_interpolates(self, x, level):
        c = _sample(PatternKind.GRADIENT, WHITE, BLACK, (x, 0, 0))
        assert c.is_close(Color(level, level, level), 1e-5)

    @pytest.mark.parametrize(
        "p, expected",
        [((0, 0, 0), WHITE), ((1, 0, 0), BLACK), ((0, 0, 1), BLACK), ((0.708, 0, 0.708), BLACK)],
    )
    def test_ring_extends_in_x_and_z(self, p, expected):
        assert _sample(PatternKind.RING, WHITE, BLACK, p) == expected

    @pytest.mark.parametrize(
        "p, expected",
        [
            ((0, 0, 0), WHITE),
            ((0.99, 0, 0), WHITE),
            ((1.01, 0, 0), BLACK),
            ((0, 0.99, 0), WHITE),
            ((0, 1.01, 0), BLACK),
            ((0, 0, 0.99), WHITE),
            ((0, 0, 1.01), BLACK),
        ],
    )
    def test_checkers_repeat_in_each_axis(self, p, expected):
        assert _sample(PatternKind.CHECKERS, WHITE, BLACK, p) == expected

    def test_none_returns_first_color(self):
        assert _sample(PatternKind.NONE, WHITE, BLACK, (1.5, 0, 0)) == WHITE


class TestPatternOnShape:
    """Tests for sampling patterns through shape and pattern transforms."""

    def test_object_transformation(self):
        """Test the shape transform scales the pattern with it."""
        from whitted.materials.phong import pattern_at_shape

        shape = Sphere(transform=scaling(2, 2, 2))
        material = Material(pattern=StripePattern(WHITE, BLACK))
        assert pattern_at_shape(material, shape, point(1.5, 0, 0)) == WHITE

    def test_pattern_transformation(self):
        """Test the pattern transform applies on its own."""
        from whitted.materials.phong import pattern_at_shape

        material = Material(pattern=StripePattern(WHITE, BLACK, transform=scaling(2, 2, 2)))
        assert pattern_at_shape(material, Sphere(), point(1.5, 0, 0)) == WHITE

    def test_both_transformations(self):
        """Test shape and pattern transforms compose."""
        from whitted.materials.phong import pattern_at_shape

        shape = Sphere(transform=scaling(2, 2, 2))
        material = Material(pattern=StripePattern(WHITE, BLACK, transform=translation(0.5, 0, 0)))
        assert pattern_at_shape(material, shape, point(2.5, 0, 0)) == WHITE

    def test_flat_color_without_pattern(self):
        from whitted.materials.phong import pattern_at_shape

        material = Material(color=Color(0.2, 0.4, 0.6))
        c = pattern_at_shape(material, None, point(3, 4, 5))
        assert c.is_close(Color(0.2, 0.4, 0.6), 1e-6)

    def test_lighting_with_pattern(self):
        """Test lighting uses the pattern color instead of the material color."""
        from whitted.materials.phong import lighting
        from whitted.scene.light import PointLight

        material = Material(
            ambient=1.0, diffuse=0.0, specular=0.0, pattern=StripePattern(WHITE, BLACK)
        )
        eyev = vector(0, 0, -1)
        normalv = vector(0, 0, -1)
        light = PointLight(point(0, 0, -10), WHITE)
        c1 = lighting(material, light, point(0.9, 0, 0), eyev, normalv, False)
        c2 = lighting(material, light, point(1.1, 0, 0), eyev, normalv, False)
        assert c1.is_close(WHITE, 1e-5)
        assert c2.is_close(BLACK, 1e-5)


class TestMaterial:
    """Tests for material defaults, validation and serialization."""

    def test_defaults(self):
        m = Material()
        assert m.color == WHITE
        assert (m.ambient, m.diffuse, m.specular, m.shininess) == (0.1, 0.9, 0.9, 200.0)
        assert (m.reflective, m.transparency, m.refractive_index) == (0.0, 0.0, 1.0)
        assert m.pattern is None

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"ambient": -0.1},
            {"diffuse": -1.0},
            {"specular": -0.5},
            {"shininess": 0.0},
            {"reflective": 1.5},
            {"transparency": -0.1},
            {"refractive_index": 0.5},
        ],
    )
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            Material(**kwargs)

    def test_dict_round_trip_through_json(self):
        m = Material(
            color=Color(0.1, 0.2, 0.3),
            reflective=0.5,
            pattern=RingPattern(WHITE, BLACK, transform=scaling(0.5)),
        )
        loaded = Material.from_dict(json.loads(json.dumps(m.to_dict())))
        assert loaded.color == m.color
        assert loaded.reflective == 0.5
        assert isinstance(loaded.pattern, RingPattern)
        assert loaded.pattern.transform == scaling(0.5)

    def test_missing_keys_take_defaults(self):
        assert Material.from_dict({}) == Material()

    def test_pattern_from_dict(self):
        pattern = pattern_from_dict(GradientPattern(WHITE, BLACK).to_dict())
        assert isinstance(pattern, GradientPattern)
        assert pattern.b == BLACK

    def test_unknown_pattern_rejected(self):
        data = CheckersPattern(WHITE, BLACK).to_dict()
        data["type"] = "spiral"
        with pytest.raises(ValueError):
            pattern_from_dict(data)
