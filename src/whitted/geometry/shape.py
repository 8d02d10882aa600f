"""Base class shared by all shape primitives.

A shape owns a transform matrix, the inverse of that matrix (computed once,
at construction), and a material. Shapes compare and hash by identity, so a
shape can be used as a dictionary key and intersections can tell which
object they belong to.

Each concrete shape declares a ``kind`` tag. The tag selects the local
intersection and normal routines on the device (see
``whitted.geometry.dispatch``); the host class carries no geometry code.
"""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Any, ClassVar

from whitted.core.matrix import Matrix
from whitted.materials.material import Material

if TYPE_CHECKING:
    from whitted.core.ray import Ray
    from whitted.core.tuples import Tuple
    from whitted.geometry.intersection import Intersection


# Maximum number of shapes a world can upload
MAX_SHAPES = 256
# Extra arena slot used to evaluate a single shape or material outside a world
SCRATCH_SLOT = MAX_SHAPES
ARENA_SIZE = MAX_SHAPES + 1


class ShapeKind(IntEnum):
    """Enumeration of supported primitive kinds.

    Used for shape dispatch inside kernels.
    """

    SPHERE = 0
    PLANE = 1


class Shape:
    """A transformed geometric primitive with a material.

    Args:
        transform: Object-to-world matrix. Defaults to the identity.
        material: Surface material. Defaults to ``Material()``.

    Raises:
        NotInvertibleError: If the transform is singular.
    """

    kind: ClassVar[ShapeKind]

    def __init__(self, transform: Matrix | None = None, material: Material | None = None) -> None:
        self._transform = transform if transform is not None else Matrix.identity()
        # Fails fast on a singular transform, before the shape reaches a world
        self._inverse = self._transform.inverse()
        self.material = material if material is not None else Material()

    @property
    def transform(self) -> Matrix:
        return self._transform

    @property
    def inverse(self) -> Matrix:
        """The cached inverse of the transform (world-to-object)."""
        return self._inverse

    def __repr__(self) -> str:
        return f"{type(self).__name__}(transform={self._transform!r})"

    def intersect(self, ray: Ray) -> list[Intersection]:
        """Intersect a world-space ray with this shape.

        Returns:
            One Intersection per root, in ascending t order (possibly empty).
        """
        from whitted.scene.intersection import intersect_shape

        return intersect_shape(self, ray)

    def normal_at(self, world_point: Tuple) -> Tuple:
        """The unit surface normal at a world-space point on the shape."""
        from whitted.scene.intersection import shape_normal_at

        return shape_normal_at(self, world_point)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind.name.lower(),
            "transform": self._transform.to_list(),
            "material": self.material.to_dict(),
        }
