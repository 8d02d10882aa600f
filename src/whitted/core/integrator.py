"""Whitted-style recursive ray tracing integrator.

This module implements the shading pipeline: precomputing the hit state of
an intersection, evaluating direct Phong lighting with a shadow test, and
resolving the recursive reflection and refraction tree, plus the render
kernel that runs it for every pixel in parallel.

Taichi functions cannot recurse, so ``trace`` walks the ray tree with an
explicit LIFO stack. Each entry holds a ray, the weight its color carries
into the pixel (the product of the reflective / transparency factors along
the way) and the remaining recursion budget. A popped entry adds
``weight * local_color`` and pushes at most one reflected and one refracted
child with ``remaining - 1``; depth-first order keeps at most one pending
sibling per level, so ``MAX_RECURSION_DEPTH + 2`` entries always suffice.

Key features:
    - Phong lighting evaluated at the over point (no shadow acne)
    - Hard shadows from a single point light
    - Mirror reflection and Snell refraction with total internal reflection
    - Refractive indices from the shapes containing the hit

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.scene.demos import create_spheres_scene
    >>> from whitted.core.integrator import render
    >>> world, camera = create_spheres_scene()
    >>> canvas = render(camera, world)
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import taichi as ti
import taichi.math as tm

from whitted.camera.pinhole import get_ray_for_pixel, setup_camera
from whitted.core.color import Color
from whitted.core.ray import DeviceRay, Ray, ray_at, reflect, refract
from whitted.core.tuples import Tuple, point, vector
from whitted.materials.phong import get_material, phong_lighting, surface_color
from whitted.preview.canvas import Canvas
from whitted.scene.intersection import (
    SceneHitRecord,
    intersect_scene,
    is_shadowed_at,
    normal_at_slot,
    refractive_indices_at,
)
from whitted.scene.light import light_enabled, light_intensity, light_position

if TYPE_CHECKING:
    from whitted.camera.pinhole import Camera
    from whitted.scene.world import World

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Default recursion budget for reflection and refraction
DEFAULT_REMAINING = 5

# Largest accepted recursion budget
MAX_RECURSION_DEPTH = 8

# Work stack capacity for the iterative ray tree walk
STACK_SIZE = MAX_RECURSION_DEPTH + 2

# Offset of the over / under points along the normal
RAY_EPSILON = 1e-4

# Color of rays that escape the scene
BACKGROUND_COLOR = vec3(0.0, 0.0, 0.0)


def check_remaining(remaining: int) -> None:
    """Validate a recursion budget.

    Raises:
        ValueError: If remaining is outside 0..MAX_RECURSION_DEPTH.
    """
    if not 0 <= remaining <= MAX_RECURSION_DEPTH:
        raise ValueError(f"remaining must be in [0, {MAX_RECURSION_DEPTH}], got {remaining}")


# =============================================================================
# Hit State
# =============================================================================


@ti.dataclass
class Computations:
    """Precomputed state of a ray-surface hit.

    Attributes:
        t: Ray parameter of the hit.
        slot: Arena slot of the hit shape.
        point: World-space hit point.
        eyev: Vector toward the eye (the negated ray direction).
        normalv: Unit surface normal, flipped to face the eye.
        inside: 1 if the hit is on the inside of the surface.
        reflectv: The ray direction reflected about the normal.
        over_point: Point nudged off the surface toward the eye; origin of
            shadow and reflected rays.
        under_point: Point nudged below the surface; origin of refracted rays.
        n1: Refractive index of the medium being exited.
        n2: Refractive index of the medium being entered.
    """

    t: ti.f32
    slot: ti.i32
    point: vec3
    eyev: vec3
    normalv: vec3
    inside: ti.i32
    reflectv: vec3
    over_point: vec3
    under_point: vec3
    n1: ti.f32
    n2: ti.f32


@ti.func
def prepare_computations(ray: DeviceRay, t: ti.f32, slot: ti.i32) -> Computations:
    """Build the hit state for the intersection of a ray at t with a slot."""
    position = ray_at(ray, t)
    eyev = -ray.direction
    normalv = normal_at_slot(slot, position)
    inside = 0
    if tm.dot(normalv, eyev) < 0.0:
        inside = 1
        normalv = -normalv
    n1, n2 = refractive_indices_at(ray, t, slot)
    return Computations(
        t=t,
        slot=slot,
        point=position,
        eyev=eyev,
        normalv=normalv,
        inside=inside,
        reflectv=reflect(ray.direction, normalv),
        over_point=position + normalv * RAY_EPSILON,
        under_point=position - normalv * RAY_EPSILON,
        n1=n1,
        n2=n2,
    )


@ti.func
def shade_local(comps: Computations) -> vec3:
    """Direct Phong lighting of a hit, with the shadow test.

    Returns:
        The local color; black when the world has no light.
    """
    color = BACKGROUND_COLOR
    if light_enabled[None] == 1:
        color = phong_lighting(
            get_material(comps.slot),
            surface_color(comps.slot, comps.over_point),
            light_position[None],
            light_intensity[None],
            comps.over_point,
            comps.eyev,
            comps.normalv,
            is_shadowed_at(comps.over_point),
        )
    return color


# =============================================================================
# Ray Tree Traversal
# =============================================================================


@ti.func
def trace(ray: DeviceRay, first: SceneHitRecord, remaining: ti.i32) -> vec3:
    """Resolve the color seen along a ray, including reflection and refraction.

    Args:
        ray: The world-space ray.
        first: The ray's hit against the scene (intersect_scene(ray), or a
            specific hit to shade).
        remaining: Recursion budget; 0 disables reflection and refraction.

    Returns:
        The accumulated color.
    """
    origins = ti.Matrix.zero(ti.f32, STACK_SIZE, 3)
    directions = ti.Matrix.zero(ti.f32, STACK_SIZE, 3)
    weights = ti.Vector.zero(ti.f32, STACK_SIZE)
    budgets = ti.Vector.zero(ti.i32, STACK_SIZE)

    for c in ti.static(range(3)):
        origins[0, c] = ray.origin[c]
        directions[0, c] = ray.direction[c]
    weights[0] = 1.0
    budgets[0] = remaining
    top = 1
    is_first = 1

    color = vec3(0.0, 0.0, 0.0)
    while top > 0:
        top -= 1
        current = DeviceRay(
            origin=vec3(origins[top, 0], origins[top, 1], origins[top, 2]),
            direction=vec3(directions[top, 0], directions[top, 1], directions[top, 2]),
        )
        weight = weights[top]
        budget = budgets[top]

        rec = first
        if is_first == 0:
            rec = intersect_scene(current)
        is_first = 0

        if rec.hit == 1:
            comps = prepare_computations(current, rec.t, rec.slot)
            color += weight * shade_local(comps)

            mat = get_material(rec.slot)
            if budget > 0 and mat.reflective > 0.0 and top < STACK_SIZE:
                for c in ti.static(range(3)):
                    origins[top, c] = comps.over_point[c]
                    directions[top, c] = comps.reflectv[c]
                weights[top] = weight * mat.reflective
                budgets[top] = budget - 1
                top += 1

            if budget > 0 and mat.transparency > 0.0 and top < STACK_SIZE:
                eta = comps.n1 / comps.n2
                direction, refracted = refract(tm.normalize(current.direction), comps.normalv, eta)
                if refracted == 1:
                    for c in ti.static(range(3)):
                        origins[top, c] = comps.under_point[c]
                        directions[top, c] = direction[c]
                    weights[top] = weight * mat.transparency
                    budgets[top] = budget - 1
                    top += 1
        else:
            color += weight * BACKGROUND_COLOR

    return color


@ti.func
def color_at(ray: DeviceRay, remaining: ti.i32) -> vec3:
    """The color seen along a world-space ray."""
    return trace(ray, intersect_scene(ray), remaining)


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Color buffer indexed [x, y] (preallocated to max size)
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))


@ti.kernel
def _render_kernel(width: ti.i32, height: ti.i32, remaining: ti.i32):
    """Trace one primary ray per pixel into the color buffer.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        remaining: Recursion budget for every primary ray.
    """
    for x, y in ti.ndrange(width, height):
        _color_buffer[x, y] = color_at(get_ray_for_pixel(x, y), remaining)


# =============================================================================
# Python-scope Wrappers
# =============================================================================


_color_result = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _color_at_kernel(
    ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32, remaining: ti.i32
):
    # Single iteration outer loop keeps the scene loops serial
    for _ in range(1):
        ray = DeviceRay(origin=vec3(ox, oy, oz), direction=vec3(dx, dy, dz))
        _color_result[None] = color_at(ray, remaining)


@ti.kernel
def _shade_hit_kernel(
    ox: ti.f32,
    oy: ti.f32,
    oz: ti.f32,
    dx: ti.f32,
    dy: ti.f32,
    dz: ti.f32,
    t: ti.f32,
    slot: ti.i32,
    remaining: ti.i32,
):
    for _ in range(1):
        ray = DeviceRay(origin=vec3(ox, oy, oz), direction=vec3(dx, dy, dz))
        _color_result[None] = trace(ray, SceneHitRecord(hit=1, t=t, slot=slot), remaining)


_comps_vectors = ti.Vector.field(3, dtype=ti.f32, shape=6)
_comps_scalars = ti.field(dtype=ti.f32, shape=3)


@ti.kernel
def _computations_kernel(
    ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32, t: ti.f32, slot: ti.i32
):
    for _ in range(1):
        ray = DeviceRay(origin=vec3(ox, oy, oz), direction=vec3(dx, dy, dz))
        comps = prepare_computations(ray, t, slot)
        _comps_vectors[0] = comps.point
        _comps_vectors[1] = comps.eyev
        _comps_vectors[2] = comps.normalv
        _comps_vectors[3] = comps.reflectv
        _comps_vectors[4] = comps.over_point
        _comps_vectors[5] = comps.under_point
        _comps_scalars[0] = ti.cast(comps.inside, ti.f32)
        _comps_scalars[1] = comps.n1
        _comps_scalars[2] = comps.n2


@dataclass(frozen=True)
class HitComputations:
    """Host copy of the precomputed hit state (see ``Computations``)."""

    t: float
    point: Tuple
    eyev: Tuple
    normalv: Tuple
    inside: bool
    reflectv: Tuple
    over_point: Tuple
    under_point: Tuple
    n1: float
    n2: float


def _color(values) -> Color:
    return Color(float(values[0]), float(values[1]), float(values[2]))


def color_at_uploaded(ray: Ray, remaining: int = DEFAULT_REMAINING) -> Color:
    """Color along a ray through the currently uploaded world.

    Raises:
        ValueError: If remaining is outside 0..MAX_RECURSION_DEPTH.
    """
    check_remaining(remaining)
    _color_at_kernel(*ray.origin.xyz(), *ray.direction.xyz(), remaining)
    return _color(_color_result.to_numpy())


def shade_hit_uploaded(ray: Ray, t: float, slot: int, remaining: int = DEFAULT_REMAINING) -> Color:
    """Shade a given hit of the uploaded world, recursing from there.

    Raises:
        ValueError: If remaining is outside 0..MAX_RECURSION_DEPTH.
    """
    check_remaining(remaining)
    _shade_hit_kernel(*ray.origin.xyz(), *ray.direction.xyz(), t, slot, remaining)
    return _color(_color_result.to_numpy())


def prepare_computations_uploaded(ray: Ray, t: float, slot: int) -> HitComputations:
    """Hit state of the uploaded shape in ``slot`` hit by ``ray`` at ``t``."""
    _computations_kernel(*ray.origin.xyz(), *ray.direction.xyz(), t, slot)
    vectors = _comps_vectors.to_numpy().astype(np.float64)
    scalars = _comps_scalars.to_numpy().astype(np.float64)
    return HitComputations(
        t=t,
        point=point(*vectors[0]),
        eyev=vector(*vectors[1]),
        normalv=vector(*vectors[2]),
        inside=bool(scalars[0]),
        reflectv=vector(*vectors[3]),
        over_point=point(*vectors[4]),
        under_point=point(*vectors[5]),
        n1=float(scalars[1]),
        n2=float(scalars[2]),
    )


def render(camera: "Camera", world: "World", remaining: int = DEFAULT_REMAINING) -> Canvas:
    """Render a world through a camera.

    Uploads the world and camera, traces every pixel in one parallel kernel
    launch and copies the result into a canvas.

    Args:
        camera: The camera; its hsize x vsize is the canvas size.
        world: The world to render.
        remaining: Recursion budget for reflection and refraction.

    Returns:
        A canvas of camera.hsize x camera.vsize pixels.

    Raises:
        ValueError: If the image exceeds MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT
            or remaining is outside 0..MAX_RECURSION_DEPTH.
    """
    width, height = camera.hsize, camera.vsize
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )
    check_remaining(remaining)

    world.upload()
    setup_camera(camera)
    logger.debug("Rendering %dx%d with remaining=%d", width, height, remaining)
    _render_kernel(width, height, remaining)

    # (width, height, 3) buffer to (height, width, 3) image, row 0 at the top
    image = _color_buffer.to_numpy()[:width, :height, :]
    return Canvas.from_array(np.transpose(image, (1, 0, 2)))
