"""Infinite plane primitive.

In object space the plane is the xz-plane through the origin with normal
(0, 1, 0). A ray parallel to it (or lying in it) has no intersection.
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import DeviceRay
from whitted.core.tuples import EPSILON
from whitted.geometry.shape import Shape, ShapeKind

vec3 = tm.vec3


class Plane(Shape):
    """The xz-plane, moved by its transform."""

    kind = ShapeKind.PLANE


@ti.func
def plane_local_intersect(ray: DeviceRay):
    """Intersect an object-space ray with the xz-plane.

    Returns:
        A tuple (count, t0, t1): count is 0 for a parallel or coplanar ray,
        otherwise 1 with the root in t0 (t1 mirrors it).
    """
    count = 0
    t = 0.0
    if ti.abs(ray.direction.y) >= EPSILON:
        t = -ray.origin.y / ray.direction.y
        count = 1
    return count, t, t


@ti.func
def plane_local_normal(object_point: vec3) -> vec3:
    return vec3(0.0, 1.0, 0.0)
