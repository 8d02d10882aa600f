"""Demo scene factories.

Each factory builds a world and a camera for one showcase scene, all viewed
from the same vantage point. ``DEMO_SCENES`` maps the scene names accepted
by the command-line renderer to their factories.

Scenes:
    spheres: three spheres in a room whose floor and walls are flattened
        spheres.
    planes: the three spheres on a plane floor with a plane backdrop.
    patterns: striped, ringed, checkered and gradient surfaces.
    reflections: a mirror-like checkered floor, a glass sphere and a
        chrome sphere.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.demos import DemoParams, create_reflections_scene
    >>> world, camera = create_reflections_scene(DemoParams(width=200, height=100))
    >>> canvas = camera.render(world)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable

from whitted.camera.pinhole import Camera
from whitted.core.color import Color
from whitted.core.transform import (
    chain,
    rotation_x,
    rotation_y,
    rotation_z,
    scaling,
    translation,
    view_transform,
)
from whitted.core.tuples import point, vector
from whitted.geometry.plane import Plane
from whitted.geometry.sphere import Sphere, glass_sphere
from whitted.materials.material import Material
from whitted.materials.pattern import (
    CheckersPattern,
    GradientPattern,
    RingPattern,
    StripePattern,
)
from whitted.scene.light import PointLight
from whitted.scene.world import World

# =============================================================================
# Demo Parameters
# =============================================================================


@dataclass
class DemoParams:
    """Parameters shared by all demo scenes.

    Attributes:
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        field_of_view: Camera field of view in radians.
        light_position: Position of the point light.
        light_color: RGB intensity of the point light.

    Example:
        >>> params = DemoParams()
        >>> params.width, params.height
        (300, 150)
    """

    width: int = 300
    height: int = 150
    field_of_view: float = math.pi / 3
    light_position: tuple[float, float, float] = (-10.0, 10.0, -10.0)
    light_color: tuple[float, float, float] = (1.0, 1.0, 1.0)


# Room surfaces
FLOOR_COLOR = Color(1.0, 0.9, 0.9)

# Camera placement shared by every demo
CAMERA_FROM = (0.0, 1.5, -5.0)
CAMERA_TO = (0.0, 1.0, 0.0)


def _camera(params: DemoParams) -> Camera:
    return Camera(
        hsize=params.width,
        vsize=params.height,
        field_of_view=params.field_of_view,
        transform=view_transform(point(*CAMERA_FROM), point(*CAMERA_TO), vector(0, 1, 0)),
    )


def _light(params: DemoParams) -> PointLight:
    return PointLight(point(*params.light_position), Color(*params.light_color))


def _three_spheres(middle: Material | None = None) -> list[Sphere]:
    """The large, medium and small spheres every scene is built around."""
    if middle is None:
        middle = Material(color=Color(0.1, 1.0, 0.5), diffuse=0.7, specular=0.3)
    return [
        Sphere(transform=translation(-0.5, 1.0, 0.5), material=middle),
        Sphere(
            transform=chain(scaling(0.5), translation(1.5, 0.5, -0.5)),
            material=Material(color=Color(0.5, 1.0, 0.1), diffuse=0.7, specular=0.3),
        ),
        Sphere(
            transform=chain(scaling(0.33), translation(-1.5, 0.33, -0.75)),
            material=Material(color=Color(1.0, 0.8, 0.1), diffuse=0.7, specular=0.3),
        ),
    ]


# =============================================================================
# Scene Factories
# =============================================================================


def create_spheres_scene(params: DemoParams | None = None) -> tuple[World, Camera]:
    """Three spheres in a corner made of very flat spheres."""
    if params is None:
        params = DemoParams()

    flat = scaling(10.0, 0.01, 10.0)
    room = Material(color=FLOOR_COLOR, specular=0.0)
    floor = Sphere(transform=flat, material=room)
    left_wall = Sphere(
        transform=chain(flat, rotation_x(math.pi / 2), rotation_y(-math.pi / 4), translation(0, 0, 5)),
        material=room,
    )
    right_wall = Sphere(
        transform=chain(flat, rotation_x(math.pi / 2), rotation_y(math.pi / 4), translation(0, 0, 5)),
        material=room,
    )

    world = World([floor, left_wall, right_wall, *_three_spheres()], _light(params))
    return world, _camera(params)


def create_planes_scene(params: DemoParams | None = None) -> tuple[World, Camera]:
    """The three spheres on an infinite floor in front of a backdrop."""
    if params is None:
        params = DemoParams()

    floor = Plane(material=Material(color=FLOOR_COLOR, specular=0.0))
    backdrop = Plane(
        transform=chain(rotation_x(math.pi / 2), translation(0, 0, 10)),
        material=Material(color=Color(0.6, 0.7, 0.9), specular=0.0),
    )

    world = World([floor, backdrop, *_three_spheres()], _light(params))
    return world, _camera(params)


def create_patterns_scene(params: DemoParams | None = None) -> tuple[World, Camera]:
    """Every pattern kind: checkered floor, gradient wall, striped and ringed spheres."""
    if params is None:
        params = DemoParams()

    floor = Plane(
        material=Material(
            specular=0.0,
            pattern=CheckersPattern(
                Color(1.0, 0.9, 0.9), Color(0.9, 0.7, 0.7), transform=scaling(0.5)
            ),
        )
    )
    wall = Plane(
        transform=chain(rotation_x(math.pi / 2), translation(15, 15, 15)),
        material=Material(
            specular=0.0,
            pattern=GradientPattern(
                Color(0.1, 0.1, 0.1), Color(0.2, 0.2, 0.2), transform=scaling(2.0, 1.0, 1.0)
            ),
        ),
    )
    striped = Material(
        diffuse=0.7,
        specular=0.3,
        pattern=StripePattern(
            Color(0.0, 1.0, 0.0),
            Color(0.3, 0.6, 0.0),
            transform=chain(rotation_x(2.0), rotation_y(2.0), rotation_z(2.0), scaling(0.2)),
        ),
    )
    spheres = _three_spheres(middle=striped)
    spheres[1].material = Material(
        diffuse=0.7,
        specular=0.3,
        pattern=RingPattern(Color(0.2, 1.0, 0.9), Color(0.1, 0.4, 0.5), transform=scaling(0.15)),
    )

    world = World([floor, wall, *spheres], _light(params))
    return world, _camera(params)


def create_reflections_scene(params: DemoParams | None = None) -> tuple[World, Camera]:
    """A reflective checkered floor, a glass sphere and a chrome sphere."""
    if params is None:
        params = DemoParams()

    floor = Plane(
        material=Material(
            specular=0.0,
            reflective=0.4,
            pattern=CheckersPattern(Color(0.35, 0.35, 0.35), Color(0.65, 0.65, 0.65)),
        )
    )
    backdrop = Plane(
        transform=chain(rotation_x(math.pi / 2), translation(0, 0, 10)),
        material=Material(color=Color(0.5, 0.6, 0.8), specular=0.0),
    )
    glass = glass_sphere(transform=translation(-0.5, 1.0, 0.5))
    glass.material = Material(
        color=Color(0.1, 0.1, 0.1),
        diffuse=0.1,
        specular=1.0,
        shininess=300.0,
        reflective=0.9,
        transparency=0.9,
        refractive_index=1.5,
    )
    chrome = Sphere(
        transform=chain(scaling(0.5), translation(1.5, 0.5, -0.5)),
        material=Material(
            color=Color(0.2, 0.2, 0.2), diffuse=0.3, specular=1.0, shininess=300.0, reflective=0.8
        ),
    )
    small = Sphere(
        transform=chain(scaling(0.33), translation(-1.5, 0.33, -0.75)),
        material=Material(color=Color(1.0, 0.3, 0.2), diffuse=0.7, specular=0.3),
    )

    world = World([floor, backdrop, glass, chrome, small], _light(params))
    return world, _camera(params)


DEMO_SCENES: dict[str, Callable[[DemoParams | None], tuple[World, Camera]]] = {
    "spheres": create_spheres_scene,
    "planes": create_planes_scene,
    "patterns": create_patterns_scene,
    "reflections": create_reflections_scene,
}


# =============================================================================
# Scene Files
# =============================================================================


def scene_to_dict(world: World, camera: Camera) -> dict[str, Any]:
    """Export a world and camera to a dictionary (for JSON serialization)."""
    return {"world": world.to_dict(), "camera": camera.to_dict()}


def scene_from_dict(data: dict[str, Any]) -> tuple[World, Camera]:
    """Load a world and camera from a dictionary produced by ``scene_to_dict``.

    Raises:
        ValueError: If a shape or pattern type is unknown.
        KeyError: If the world or camera section is missing.
    """
    return World.from_dict(data["world"]), Camera.from_dict(data["camera"])
