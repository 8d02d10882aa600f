"""Procedural color patterns.

A pattern alternates or blends two colors as a function of a point in
pattern space. Pattern space is reached from world space through the shape
inverse and then the pattern inverse, so a pattern moves with its shape and
can be transformed on its own as well.

Host classes describe the pattern; ``pattern_at`` evaluates it inside
kernels given the kind tag and both colors.

Example:
    >>> from whitted.core.color import BLACK, WHITE
    >>> from whitted.core.transform import scaling
    >>> stripes = StripePattern(WHITE, BLACK, transform=scaling(0.25))
"""

from enum import IntEnum
from typing import Any, ClassVar

import taichi as ti
import taichi.math as tm

from whitted.core.color import Color
from whitted.core.matrix import Matrix

vec3 = tm.vec3


class PatternKind(IntEnum):
    """Enumeration of pattern kinds, used for dispatch inside kernels."""

    NONE = 0
    STRIPE = 1
    GRADIENT = 2
    RING = 3
    CHECKERS = 4


class Pattern:
    """Two colors and a pattern transform.

    Args:
        a: First color.
        b: Second color.
        transform: Object-to-pattern transform. Defaults to the identity.

    Raises:
        NotInvertibleError: If the transform is singular.
    """

    kind: ClassVar[PatternKind]

    def __init__(self, a: Color, b: Color, transform: Matrix | None = None) -> None:
        self.a = a
        self.b = b
        self._transform = transform if transform is not None else Matrix.identity()
        self._inverse = self._transform.inverse()

    @property
    def transform(self) -> Matrix:
        return self._transform

    @property
    def inverse(self) -> Matrix:
        return self._inverse

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.a!r}, {self.b!r})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind.name.lower(),
            "a": list(self.a.as_tuple()),
            "b": list(self.b.as_tuple()),
            "transform": self._transform.to_list(),
        }


class StripePattern(Pattern):
    """Alternates on the integer part of x."""

    kind = PatternKind.STRIPE


class GradientPattern(Pattern):
    """Linear blend from ``a`` to ``b`` over each unit of x."""

    kind = PatternKind.GRADIENT


class RingPattern(Pattern):
    """Concentric rings around the y axis."""

    kind = PatternKind.RING


class CheckersPattern(Pattern):
    """Alternating unit cubes in x, y and z."""

    kind = PatternKind.CHECKERS


PATTERN_TYPES: dict[str, type[Pattern]] = {
    "stripe": StripePattern,
    "gradient": GradientPattern,
    "ring": RingPattern,
    "checkers": CheckersPattern,
}


def pattern_from_dict(data: dict[str, Any]) -> Pattern:
    """Build a pattern from the dictionary produced by ``Pattern.to_dict``.

    Raises:
        ValueError: If the pattern type is unknown.
    """
    name = data.get("type")
    if name not in PATTERN_TYPES:
        raise ValueError(f"Unknown pattern type: {name!r}")
    transform = Matrix(data["transform"]) if "transform" in data else None
    return PATTERN_TYPES[name](
        Color.from_sequence(data["a"]),
        Color.from_sequence(data["b"]),
        transform=transform,
    )


@ti.func
def _is_even(value: ti.f32) -> ti.i32:
    # Python-style modulo keeps negative cells alternating
    return ti.cast(ti.floor(value), ti.i32) % 2 == 0


@ti.func
def pattern_at(kind: ti.i32, a: vec3, b: vec3, pattern_point: vec3) -> vec3:
    """Evaluate a pattern at a point in pattern space.

    Args:
        kind: A ``PatternKind`` value. ``NONE`` (or any unknown tag) yields ``a``.
        a: First color.
        b: Second color.
        pattern_point: The point, already transformed into pattern space.

    Returns:
        The pattern color at the point.
    """
    result = a
    x = pattern_point.x
    if kind == int(PatternKind.STRIPE):
        if not _is_even(x):
            result = b
    elif kind == int(PatternKind.GRADIENT):
        result = a + (b - a) * (x - ti.floor(x))
    elif kind == int(PatternKind.RING):
        if not _is_even(ti.sqrt(x * x + pattern_point.z * pattern_point.z)):
            result = b
    elif kind == int(PatternKind.CHECKERS):
        cells = ti.floor(x) + ti.floor(pattern_point.y) + ti.floor(pattern_point.z)
        if not _is_even(cells):
            result = b
    return result
