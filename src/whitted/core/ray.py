"""Rays on the host and on the device, plus device-side vector utilities.

The host ``Ray`` is an immutable pair of a point and a vector used while
building and querying scenes from Python. ``DeviceRay`` is its Taichi
counterpart used inside kernels, where points and vectors are plain
``vec3`` values and the tag is implied by the function applied
(``transform_point`` versus ``transform_vector``).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, -5.0)
    >>> direction = ti.math.vec3(0.0, 0.0, 1.0)
    >>> ray = DeviceRay(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # (0, 0, 0), inside a kernel
"""

from dataclasses import dataclass

import taichi as ti
import taichi.math as tm

from whitted.core.matrix import Matrix
from whitted.core.tuples import Tuple

# Type aliases using Taichi's math module
vec3 = tm.vec3
vec4 = tm.vec4
mat4 = tm.mat4


@dataclass(frozen=True)
class Ray:
    """A ray with an origin point and a direction vector.

    Attributes:
        origin: The starting point (w = 1).
        direction: The direction vector (w = 0). Not required to be unit
            length; transformed rays generally are not.

    Raises:
        TypeError: If origin is not a point or direction is not a vector.
    """

    origin: Tuple
    direction: Tuple

    def __post_init__(self) -> None:
        if not self.origin.is_point:
            raise TypeError(f"Ray origin must be a point, got {self.origin!r}")
        if not self.direction.is_vector:
            raise TypeError(f"Ray direction must be a vector, got {self.direction!r}")

    def position(self, t: float) -> Tuple:
        """The point at parameter ``t`` along the ray."""
        return self.origin + self.direction * t

    def transform(self, matrix: Matrix) -> "Ray":
        """Return a new ray with both origin and direction transformed."""
        return Ray(matrix @ self.origin, matrix @ self.direction)


@ti.dataclass
class DeviceRay:
    """A ray inside Taichi kernels.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3).
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: DeviceRay, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t."""
    return ray.origin + t * ray.direction


@ti.func
def transform_point(m: mat4, p: vec3) -> vec3:
    """Apply a 4x4 matrix to a point (w = 1)."""
    r = m @ vec4(p[0], p[1], p[2], 1.0)
    return vec3(r[0], r[1], r[2])


@ti.func
def transform_vector(m: mat4, v: vec3) -> vec3:
    """Apply a 4x4 matrix to a vector (w = 0), ignoring translation."""
    r = m @ vec4(v[0], v[1], v[2], 0.0)
    return vec3(r[0], r[1], r[2])


@ti.func
def transform_ray(ray: DeviceRay, m: mat4) -> DeviceRay:
    """Transform a ray by a matrix, returning a new ray."""
    return DeviceRay(
        origin=transform_point(m, ray.origin),
        direction=transform_vector(m, ray.direction),
    )


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, eta: ti.f32):
    """Refract an incident vector through a surface using Snell's law.

    Args:
        incident: The incoming direction vector (should be normalized).
        normal: The surface normal on the incident side (should be normalized).
        eta: The ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        A tuple of (direction, refracted) where refracted is 0 under total
        internal reflection, in which case direction is the zero vector.
    """
    cos_i = -tm.dot(incident, normal)
    sin2_t = eta * eta * (1.0 - cos_i * cos_i)
    result = vec3(0.0, 0.0, 0.0)
    refracted = 0
    if sin2_t <= 1.0:
        cos_t = ti.sqrt(1.0 - sin2_t)
        result = eta * incident + (eta * cos_i - cos_t) * normal
        refracted = 1
    return result, refracted
