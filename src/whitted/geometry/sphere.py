"""Unit sphere primitive with robust ray-sphere intersection.

In object space the sphere is centered at the origin with radius 1; position
and size come from the shape transform.

The intersection uses the robust quadratic formula from Ray Tracing Gems to
avoid catastrophic cancellation when b^2 is nearly equal to 4ac.

Example:
    >>> from whitted.core.transform import scaling
    >>> from whitted.geometry.sphere import Sphere
    >>> s = Sphere(transform=scaling(2, 2, 2))
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import DeviceRay
from whitted.geometry.shape import Shape, ShapeKind
from whitted.materials.material import Material

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class Sphere(Shape):
    """A sphere: the unit sphere at the origin, moved by its transform."""

    kind = ShapeKind.SPHERE


def glass_sphere(transform=None, refractive_index: float = 1.5) -> Sphere:
    """A fully transparent sphere, the usual fixture for refraction scenes."""
    return Sphere(
        transform=transform,
        material=Material(transparency=1.0, refractive_index=refractive_index),
    )


@ti.func
def _solve_quadratic_robust(h: ti.f32, a: ti.f32, c: ti.f32, sqrt_d: ti.f32):
    """Solve quadratic equation using robust formula from Ray Tracing Gems.

    Solves a*t^2 + 2*h*t + c = 0 using a numerically stable method.

    Args:
        h: Half of the linear coefficient.
        a: Quadratic coefficient.
        c: Constant term.
        sqrt_d: Square root of discriminant (h^2 - a*c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    # q = -(h + sign(h) * sqrt(discriminant))
    sign_h = ti.select(h < 0.0, -1.0, 1.0)
    q = -(h + sign_h * sqrt_d)

    t0 = 0.0
    t1 = 0.0

    if ti.abs(q) < 1e-10:
        # Fall back to standard formula for edge cases
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        temp = t0
        t0 = t1
        t1 = temp

    return t0, t1


@ti.func
def sphere_local_intersect(ray: DeviceRay):
    """Intersect an object-space ray with the unit sphere.

    Expanding |origin + t * direction|^2 = 1 gives
        a*t^2 + 2*h*t + c = 0
    with a = dot(d, d), h = dot(d, o), c = dot(o, o) - 1.

    A tangent ray (zero discriminant) reports the repeated root twice.

    Args:
        ray: The ray in the sphere's object space.

    Returns:
        A tuple (count, t0, t1) where count is 0 or 2 and t0 <= t1.
    """
    a = tm.dot(ray.direction, ray.direction)
    h = tm.dot(ray.direction, ray.origin)
    c = tm.dot(ray.origin, ray.origin) - 1.0

    discriminant = h * h - a * c

    count = 0
    t0 = 0.0
    t1 = 0.0
    if discriminant >= 0.0:
        t0, t1 = _solve_quadratic_robust(h, a, c, ti.sqrt(discriminant))
        count = 2

    return count, t0, t1


@ti.func
def sphere_local_normal(object_point: vec3) -> vec3:
    """Outward normal of the unit sphere: the point minus the center."""
    return tm.normalize(object_point)
