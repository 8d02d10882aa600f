"""World: the collection of shapes and the light to render.

The world is a host-side description. ``upload`` copies it into the device
arena (shapes and materials by slot) and the light fields; every query
method uploads first, so edits made to shapes or materials between queries
are always seen. A render reads the uploaded data only.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.ray import Ray
    >>> from whitted.core.tuples import point, vector
    >>> world = default_world()
    >>> color = world.color_at(Ray(point(0, 0, -5), vector(0, 0, 1)))  # ~(0.38066, 0.47583, 0.2855)
"""

from __future__ import annotations

import logging
from typing import Any

from whitted.core.color import Color
from whitted.core.integrator import (
    DEFAULT_REMAINING,
    HitComputations,
    color_at_uploaded,
    prepare_computations_uploaded,
    shade_hit_uploaded,
)
from whitted.core.matrix import Matrix
from whitted.core.ray import Ray
from whitted.core.transform import scaling
from whitted.core.tuples import Tuple, point
from whitted.geometry.intersection import Intersection
from whitted.geometry.plane import Plane
from whitted.geometry.shape import MAX_SHAPES, Shape
from whitted.geometry.sphere import Sphere
from whitted.materials.material import Material
from whitted.scene.intersection import (
    add_shape,
    clear_scene,
    intersect_uploaded,
    is_shadowed_uploaded,
)
from whitted.scene.light import PointLight, setup_light

logger = logging.getLogger(__name__)

SHAPE_TYPES: dict[str, type[Shape]] = {
    "sphere": Sphere,
    "plane": Plane,
}


class World:
    """An ordered list of shapes and an optional point light.

    A shape object may appear only once, since each shape owns one arena slot.

    Args:
        shapes: Initial shapes, in upload order.
        light: The light; None renders every surface black.

    Raises:
        ValueError: If the same shape object is given twice.
    """

    def __init__(self, shapes: list[Shape] | None = None, light: PointLight | None = None) -> None:
        self.shapes: list[Shape] = []
        self.light = light
        self._slots: dict[Shape, int] = {}
        if shapes is not None:
            self.add(*shapes)

    def __repr__(self) -> str:
        return f"World(shapes={len(self.shapes)}, light={self.light!r})"

    def add(self, *shapes: Shape) -> None:
        """Append shapes in order.

        Raises:
            ValueError: If a shape is already in the world or given twice.
        """
        seen = {id(shape) for shape in self.shapes}
        for shape in shapes:
            if id(shape) in seen:
                raise ValueError(f"{shape!r} is already in the world")
            seen.add(id(shape))
        self.shapes.extend(shapes)

    def upload(self) -> None:
        """Copy the shapes and light into the device fields.

        Raises:
            RuntimeError: If the world holds more than MAX_SHAPES shapes.
        """
        if len(self.shapes) > MAX_SHAPES:
            raise RuntimeError(f"Maximum number of shapes ({MAX_SHAPES}) exceeded")
        clear_scene()
        self._slots = {shape: add_shape(shape) for shape in self.shapes}
        setup_light(self.light)
        logger.debug("Uploaded %d shapes (light=%s)", len(self._slots), self.light is not None)

    def slot_of(self, shape: Shape) -> int:
        """The arena slot a shape was uploaded to.

        Raises:
            KeyError: If the shape is not part of the last upload.
        """
        return self._slots[shape]

    def intersect(self, ray: Ray) -> list[Intersection]:
        """All intersections of a ray with the world, sorted by t."""
        self.upload()
        return [Intersection(t, self.shapes[slot]) for t, slot in intersect_uploaded(ray)]

    def is_shadowed(self, position: Tuple) -> bool:
        """Whether a shape lies between a point and the light."""
        self.upload()
        return is_shadowed_uploaded(position)

    def prepare_computations(self, hit: Intersection, ray: Ray) -> HitComputations:
        """Hit state for an intersection of ``ray`` with a shape of this world."""
        self.upload()
        return prepare_computations_uploaded(ray, hit.t, self.slot_of(hit.shape))

    def shade_hit(self, hit: Intersection, ray: Ray, remaining: int = DEFAULT_REMAINING) -> Color:
        """Color of a given hit, including reflected and refracted light."""
        self.upload()
        return shade_hit_uploaded(ray, hit.t, self.slot_of(hit.shape), remaining)

    def color_at(self, ray: Ray, remaining: int = DEFAULT_REMAINING) -> Color:
        """Color seen along a ray; black when it misses everything."""
        self.upload()
        return color_at_uploaded(ray, remaining)

    def to_dict(self) -> dict[str, Any]:
        """Export the world to a dictionary (for JSON serialization)."""
        return {
            "light": self.light.to_dict() if self.light is not None else None,
            "shapes": [shape.to_dict() for shape in self.shapes],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> World:
        """Load a world from a dictionary produced by ``to_dict``.

        Raises:
            ValueError: If a shape type is unknown.
        """
        shapes = []
        for item in data.get("shapes", []):
            name = item.get("type")
            if name not in SHAPE_TYPES:
                raise ValueError(f"Unknown shape type: {name!r}")
            transform = Matrix(item["transform"]) if "transform" in item else None
            material = Material.from_dict(item.get("material", {}))
            shapes.append(SHAPE_TYPES[name](transform=transform, material=material))
        light_data = data.get("light")
        light = PointLight.from_dict(light_data) if light_data is not None else None
        return cls(shapes, light)


def default_world() -> World:
    """Two concentric spheres lit from the upper left front.

    The outer unit sphere is green-yellow with a matte finish; the inner
    sphere is half its size with the default material.
    """
    outer = Sphere(
        material=Material(color=Color(0.8, 1.0, 0.6), diffuse=0.7, specular=0.2),
    )
    inner = Sphere(transform=scaling(0.5, 0.5, 0.5))
    light = PointLight(point(-10, 10, -10), Color(1.0, 1.0, 1.0))
    return World([outer, inner], light)
