"""Core building blocks: algebra, transforms and rays.

Components:
    tuples: Points and vectors with approximate comparison
    color: RGB colors
    matrix: 4x4 matrices with cofactor inversion
    transform: Translation, scaling, rotation, shearing and view transforms
    ray: Host and device rays, device vector utilities
    integrator: Shading, recursive color resolution and the render kernel

All compute-intensive operations use Taichi kernels.
"""

from .color import BLACK, WHITE, Color
from .matrix import Matrix, NotInvertibleError
from .ray import (
    DeviceRay,
    Ray,
    ray_at,
    reflect,
    refract,
    transform_point,
    transform_ray,
    transform_vector,
    vec3,
)
from .transform import (
    chain,
    rotation_x,
    rotation_y,
    rotation_z,
    scaling,
    shearing,
    translation,
    view_transform,
)
from .tuples import EPSILON, Tuple, cross, dot, magnitude, normalize, point, vector

# Note: integrator is NOT imported here; it declares Taichi fields and imports
# the scene modules. Import it directly from whitted.core.integrator.

__all__ = [
    "EPSILON",
    "Tuple",
    "point",
    "vector",
    "dot",
    "cross",
    "magnitude",
    "normalize",
    "Color",
    "BLACK",
    "WHITE",
    "Matrix",
    "NotInvertibleError",
    "translation",
    "scaling",
    "rotation_x",
    "rotation_y",
    "rotation_z",
    "shearing",
    "view_transform",
    "chain",
    "Ray",
    "DeviceRay",
    "ray_at",
    "transform_point",
    "transform_vector",
    "transform_ray",
    "reflect",
    "refract",
    "vec3",
]
