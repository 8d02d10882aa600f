"""Unit tests for Phong lighting and point lights.

Tests cover:
- The classic eye / light configurations
- Shadowed points keeping only ambient light
- Scenes without a light
- Point light construction and serialization
"""

import math

import pytest

from whitted.core.color import BLACK, WHITE, Color
from whitted.core.tuples import point, vector
from whitted.materials.material import Material

H = math.sqrt(2) / 2


def _light(x, y, z):
    from whitted.scene.light import PointLight

    return PointLight(point(x, y, z), WHITE)


class TestPhongLighting:
    """Tests for lighting() with the default material at the origin."""

    @pytest.mark.parametrize(
        "eyev, light_position, expected",
        [
            (vector(0, 0, -1), (0, 0, -10), 1.9),
            (vector(0, H, -H), (0, 0, -10), 1.0),
            (vector(0, 0, -1), (0, 10, -10), 0.7364),
            (vector(0, -H, -H), (0, 10, -10), 1.6364),
            (vector(0, 0, -1), (0, 0, 10), 0.1),
        ],
        ids=["eye-between", "eye-offset-45", "light-offset-45", "eye-in-reflection", "light-behind"],
    )
    def test_configurations(self, eyev, light_position, expected):
        from whitted.materials.phong import lighting

        c = lighting(Material(), _light(*light_position), point(0, 0, 0), eyev, vector(0, 0, -1))
        assert c.is_close(Color(expected, expected, expected), 1e-4)

    def test_in_shadow(self):
        """Test a shadowed point receives ambient light only."""
        from whitted.materials.phong import lighting

        c = lighting(
            Material(), _light(0, 0, -10), point(0, 0, 0), vector(0, 0, -1), vector(0, 0, -1), True
        )
        assert c.is_close(Color(0.1, 0.1, 0.1), 1e-5)

    def test_no_light_is_black(self):
        """Test a scene without a light shades black."""
        from whitted.materials.phong import lighting

        c = lighting(Material(), None, point(0, 0, 0), vector(0, 0, -1), vector(0, 0, -1))
        assert c == BLACK

    def test_light_color_tints(self):
        """Test the light intensity multiplies the surface color."""
        from whitted.materials.phong import lighting
        from whitted.scene.light import PointLight

        light = PointLight(point(0, 0, -10), Color(1.0, 0.0, 0.0))
        material = Material(specular=0.0)
        c = lighting(material, light, point(0, 0, 0), vector(0, 0, -1), vector(0, 0, -1))
        assert c.is_close(Color(1.0, 0.0, 0.0), 1e-5)


class TestPointLight:
    """Tests for the PointLight value."""

    def test_fields(self):
        from whitted.scene.light import PointLight

        light = PointLight(point(0, 0, 0), Color(1, 1, 1))
        assert light.position == point(0, 0, 0)
        assert light.intensity == Color(1, 1, 1)

    def test_position_must_be_point(self):
        from whitted.scene.light import PointLight

        with pytest.raises(TypeError):
            PointLight(vector(0, 0, 0), WHITE)

    def test_dict_round_trip(self):
        from whitted.scene.light import PointLight

        light = PointLight(point(-10, 10, -10), Color(0.5, 0.6, 0.7))
        loaded = PointLight.from_dict(light.to_dict())
        assert loaded.position == light.position
        assert loaded.intensity == light.intensity
