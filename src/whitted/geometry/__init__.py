"""Geometry module for shape primitives.

Components:
    shape: Shape base class, kind tags and arena limits
    sphere: Unit sphere with robust quadratic intersection
    plane: Infinite xz-plane
    dispatch: Kind-tagged local intersection and normals for kernels
    intersection: Host intersection records, hit selection and
        refractive indices
"""

from .intersection import Intersection, hit, intersections, refractive_indices
from .plane import Plane
from .shape import MAX_SHAPES, Shape, ShapeKind
from .sphere import Sphere, glass_sphere

__all__ = [
    "Shape",
    "ShapeKind",
    "MAX_SHAPES",
    "Sphere",
    "glass_sphere",
    "Plane",
    "Intersection",
    "intersections",
    "hit",
    "refractive_indices",
]
