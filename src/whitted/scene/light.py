"""Point light source and its device-side storage.

A world has at most one point light. Its position and intensity are kept in
0-d Taichi fields read by the shading kernels; ``light_enabled`` is 0 when
the world has no light, in which case surfaces shade black and nothing is
shadowed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import taichi as ti
import taichi.math as tm

from whitted.core.color import Color
from whitted.core.tuples import Tuple, point

vec3 = tm.vec3


@dataclass(frozen=True)
class PointLight:
    """A light with no size, radiating equally in all directions.

    Attributes:
        position: World-space position (a point).
        intensity: Light color and brightness.

    Raises:
        TypeError: If position is not a point.
    """

    position: Tuple
    intensity: Color

    def __post_init__(self) -> None:
        if not self.position.is_point:
            raise TypeError(f"Light position must be a point, got {self.position!r}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": list(self.position.xyz()),
            "intensity": list(self.intensity.as_tuple()),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PointLight:
        return cls(point(*data["position"]), Color.from_sequence(data["intensity"]))


light_position = ti.Vector.field(3, dtype=ti.f32, shape=())
light_intensity = ti.Vector.field(3, dtype=ti.f32, shape=())
light_enabled = ti.field(dtype=ti.i32, shape=())


def setup_light(light: PointLight | None) -> None:
    """Copy a light into the device fields, or disable lighting for None."""
    if light is None:
        disable_light()
        return
    light_position[None] = vec3(*light.position.xyz())
    light_intensity[None] = vec3(*light.intensity.as_tuple())
    light_enabled[None] = 1


def disable_light() -> None:
    light_enabled[None] = 0
