"""Homogeneous points and vectors for scene construction.

A ``Tuple`` carries four components (x, y, z, w). The ``w`` component tags
the value: ``w = 1`` is a point, ``w = 0`` is a vector. Arithmetic that
would produce a meaningless tag (adding two points, subtracting a point
from a vector) raises ``TypeError`` since it is always a programming error.

All comparisons are approximate, using ``EPSILON``, because composing
transforms accumulates rounding error.

Example:
    >>> from whitted.core.tuples import point, vector
    >>> p = point(1.0, 2.0, 3.0)
    >>> v = vector(0.0, 0.0, 1.0)
    >>> (p + v * 2.0).z
    5.0
"""

from __future__ import annotations

import math

import numpy as np
import numpy.typing as npt

# Tolerance for all floating-point comparisons on the host side
EPSILON = 1e-5

POINT_W = 1.0
VECTOR_W = 0.0


def approx_eq(a: float, b: float, epsilon: float = EPSILON) -> bool:
    """Check whether two floats are equal within ``epsilon``."""
    return abs(a - b) < epsilon


class Tuple:
    """A homogeneous 4-component tuple (point or vector).

    Attributes:
        x: First spatial component.
        y: Second spatial component.
        z: Third spatial component.
        w: Tag component, 1.0 for points and 0.0 for vectors.
    """

    __slots__ = ("x", "y", "z", "w")

    def __init__(self, x: float, y: float, z: float, w: float) -> None:
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)
        self.w = float(w)

    @property
    def is_point(self) -> bool:
        return approx_eq(self.w, POINT_W)

    @property
    def is_vector(self) -> bool:
        return approx_eq(self.w, VECTOR_W)

    def __iter__(self):
        return iter((self.x, self.y, self.z, self.w))

    def __repr__(self) -> str:
        kind = "point" if self.is_point else "vector" if self.is_vector else "Tuple"
        if kind == "Tuple":
            return f"Tuple({self.x:g}, {self.y:g}, {self.z:g}, {self.w:g})"
        return f"{kind}({self.x:g}, {self.y:g}, {self.z:g})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tuple):
            return NotImplemented
        return (
            approx_eq(self.x, other.x)
            and approx_eq(self.y, other.y)
            and approx_eq(self.z, other.z)
            and approx_eq(self.w, other.w)
        )

    __hash__ = None  # type: ignore[assignment]

    def __add__(self, other: Tuple) -> Tuple:
        if not isinstance(other, Tuple):
            return NotImplemented
        if self.is_point and other.is_point:
            raise TypeError("Cannot add two points")
        return Tuple(self.x + other.x, self.y + other.y, self.z + other.z, self.w + other.w)

    def __sub__(self, other: Tuple) -> Tuple:
        if not isinstance(other, Tuple):
            return NotImplemented
        if self.is_vector and other.is_point:
            raise TypeError("Cannot subtract a point from a vector")
        return Tuple(self.x - other.x, self.y - other.y, self.z - other.z, self.w - other.w)

    def __neg__(self) -> Tuple:
        if self.is_point:
            raise TypeError("Cannot negate a point")
        return Tuple(-self.x, -self.y, -self.z, self.w)

    def __mul__(self, scalar: float) -> Tuple:
        if isinstance(scalar, Tuple):
            return NotImplemented
        return Tuple(self.x * scalar, self.y * scalar, self.z * scalar, self.w)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Tuple:
        if isinstance(scalar, Tuple):
            return NotImplemented
        return Tuple(self.x / scalar, self.y / scalar, self.z / scalar, self.w)

    def magnitude(self) -> float:
        """Euclidean length of the spatial part."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalize(self) -> Tuple:
        """Return a unit-length copy of this vector.

        A zero-length vector normalizes to the zero vector.
        """
        length = self.magnitude()
        if length < EPSILON:
            return Tuple(0.0, 0.0, 0.0, self.w)
        return Tuple(self.x / length, self.y / length, self.z / length, self.w)

    def dot(self, other: Tuple) -> float:
        _require_vectors("dot product", self, other)
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Tuple) -> Tuple:
        _require_vectors("cross product", self, other)
        return vector(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def reflect(self, normal: Tuple) -> Tuple:
        """Reflect this vector about ``normal`` (which should be unit length)."""
        return self - normal * (2.0 * self.dot(normal))

    def xyz(self) -> tuple[float, float, float]:
        """Return the spatial components as a plain tuple."""
        return (self.x, self.y, self.z)

    def to_numpy(self) -> npt.NDArray[np.float64]:
        return np.array([self.x, self.y, self.z, self.w], dtype=np.float64)


def _require_vectors(operation: str, a: Tuple, b: Tuple) -> None:
    if not (a.is_vector and b.is_vector):
        raise TypeError(f"The {operation} is only defined for vectors")


def point(x: float, y: float, z: float) -> Tuple:
    """Create a point (w = 1)."""
    return Tuple(x, y, z, POINT_W)


def vector(x: float, y: float, z: float) -> Tuple:
    """Create a vector (w = 0)."""
    return Tuple(x, y, z, VECTOR_W)


def dot(a: Tuple, b: Tuple) -> float:
    return a.dot(b)


def cross(a: Tuple, b: Tuple) -> Tuple:
    return a.cross(b)


def magnitude(v: Tuple) -> float:
    return v.magnitude()


def normalize(v: Tuple) -> Tuple:
    return v.normalize()


def reflect(v: Tuple, normal: Tuple) -> Tuple:
    return v.reflect(normal)
