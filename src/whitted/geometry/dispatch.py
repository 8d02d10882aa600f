"""Kind-tagged dispatch to the local shape routines.

Shapes are stored on the device as a kind tag plus matrices, so the choice
of intersection and normal algorithm is a branch on the tag rather than a
virtual call. Adding a primitive means adding a ``ShapeKind`` member and
one branch in each function below.
"""

import taichi as ti
import taichi.math as tm

from whitted.core.ray import DeviceRay
from whitted.geometry.plane import plane_local_intersect, plane_local_normal
from whitted.geometry.shape import ShapeKind
from whitted.geometry.sphere import sphere_local_intersect, sphere_local_normal

vec3 = tm.vec3


@ti.func
def local_intersect(kind: ti.i32, ray: DeviceRay):
    """Intersect an object-space ray with a primitive of the given kind.

    Returns:
        A tuple (count, t0, t1) with count in {0, 1, 2} and t0 <= t1.
    """
    count = 0
    t0 = 0.0
    t1 = 0.0
    if kind == int(ShapeKind.SPHERE):
        count, t0, t1 = sphere_local_intersect(ray)
    elif kind == int(ShapeKind.PLANE):
        count, t0, t1 = plane_local_intersect(ray)
    return count, t0, t1


@ti.func
def local_normal_at(kind: ti.i32, object_point: vec3) -> vec3:
    """Object-space normal of a primitive of the given kind."""
    normal = vec3(0.0, 0.0, 0.0)
    if kind == int(ShapeKind.SPHERE):
        normal = sphere_local_normal(object_point)
    elif kind == int(ShapeKind.PLANE):
        normal = plane_local_normal(object_point)
    return normal
