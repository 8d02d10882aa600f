"""Builders for affine transformation matrices.

All functions return 4x4 ``Matrix`` instances. Transforms compose by matrix
multiplication, and the rightmost matrix in a product is applied first.
``chain`` takes transforms in application order and builds that product.

Example:
    >>> import math
    >>> from whitted.core.transform import chain, rotation_x, scaling, translation
    >>> m = chain(rotation_x(math.pi / 2), scaling(5, 5, 5), translation(10, 5, 7))
"""

from __future__ import annotations

import math

from whitted.core.matrix import Matrix
from whitted.core.tuples import Tuple


def translation(x: float, y: float, z: float) -> Matrix:
    return Matrix(
        [
            [1.0, 0.0, 0.0, x],
            [0.0, 1.0, 0.0, y],
            [0.0, 0.0, 1.0, z],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def scaling(x: float, y: float | None = None, z: float | None = None) -> Matrix:
    """Scale per axis, or uniformly when only ``x`` is given."""
    if y is None and z is None:
        y = z = x
    elif y is None or z is None:
        raise ValueError("Pass either one uniform factor or all three axis factors")
    return Matrix(
        [
            [x, 0.0, 0.0, 0.0],
            [0.0, y, 0.0, 0.0],
            [0.0, 0.0, z, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def rotation_x(radians: float) -> Matrix:
    c, s = math.cos(radians), math.sin(radians)
    return Matrix(
        [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, c, -s, 0.0],
            [0.0, s, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def rotation_y(radians: float) -> Matrix:
    c, s = math.cos(radians), math.sin(radians)
    return Matrix(
        [
            [c, 0.0, s, 0.0],
            [0.0, 1.0, 0.0, 0.0],
            [-s, 0.0, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def rotation_z(radians: float) -> Matrix:
    c, s = math.cos(radians), math.sin(radians)
    return Matrix(
        [
            [c, -s, 0.0, 0.0],
            [s, c, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def shearing(xy: float, xz: float, yx: float, yz: float, zx: float, zy: float) -> Matrix:
    """Shear each axis in proportion to the other two.

    Args:
        xy: x moved in proportion to y.
        xz: x moved in proportion to z.
        yx: y moved in proportion to x.
        yz: y moved in proportion to z.
        zx: z moved in proportion to x.
        zy: z moved in proportion to y.
    """
    return Matrix(
        [
            [1.0, xy, xz, 0.0],
            [yx, 1.0, yz, 0.0],
            [zx, zy, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def view_transform(from_point: Tuple, to_point: Tuple, up: Tuple) -> Matrix:
    """Orient the world relative to an eye at ``from_point`` looking at ``to_point``.

    Args:
        from_point: Eye position (point).
        to_point: Point being looked at.
        up: Approximate up direction (vector); need not be normalized or
            exactly perpendicular to the view direction.

    Returns:
        The matrix mapping world space to camera space.
    """
    forward = (to_point - from_point).normalize()
    left = forward.cross(up.normalize())
    true_up = left.cross(forward)
    orientation = Matrix(
        [
            [left.x, left.y, left.z, 0.0],
            [true_up.x, true_up.y, true_up.z, 0.0],
            [-forward.x, -forward.y, -forward.z, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )
    return orientation @ translation(-from_point.x, -from_point.y, -from_point.z)


def chain(*transforms: Matrix) -> Matrix:
    """Compose transforms listed in the order they should be applied.

    ``chain(a, b, c)`` equals ``c @ b @ a``. With no arguments the identity
    is returned.
    """
    result = Matrix.identity(4)
    for m in transforms:
        result = m @ result
    return result
