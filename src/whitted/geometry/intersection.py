"""Host-side intersection records and hit selection.

These are plain Python values produced when a ray is cast from the host
(``Shape.intersect`` or ``World.intersect``). Inside kernels the nearest hit
is tracked directly (see ``whitted.scene.intersection``) and never becomes
a list.

Example:
    >>> from whitted.geometry.sphere import Sphere
    >>> s = Sphere()
    >>> xs = intersections(Intersection(2.0, s), Intersection(-1.0, s))
    >>> hit(xs).t
    2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from whitted.geometry.shape import Shape


@dataclass(frozen=True)
class Intersection:
    """A root of a ray against a shape.

    Attributes:
        t: Ray parameter of the root.
        shape: The shape that was hit.
    """

    t: float
    shape: Shape


def intersections(*xs: Intersection) -> list[Intersection]:
    """Collect intersections into a list sorted by ascending t."""
    return sorted(xs, key=lambda i: i.t)


def hit(xs: Iterable[Intersection]) -> Intersection | None:
    """The visible intersection: the one with the smallest t >= 0.

    Returns:
        The hit, or None when every root lies behind the ray origin.
    """
    best = None
    for i in xs:
        if i.t >= 0.0 and (best is None or i.t < best.t):
            best = i
    return best


def refractive_indices(hit_: Intersection, xs: Iterable[Intersection]) -> tuple[float, float]:
    """Refractive indices on either side of a hit.

    Walks the sorted intersection list keeping the ordered list of shapes
    the ray is currently inside. Entering a shape appends it, leaving it
    removes it; the last entry is the innermost medium.

    Args:
        hit_: The intersection being shaded. Must be one of ``xs``.
        xs: All intersections along the ray, sorted by t.

    Returns:
        A tuple (n1, n2): the index of the medium being exited and the
        index of the medium being entered. Empty space is 1.0.
    """
    containers: list[Shape] = []
    n1 = 1.0
    n2 = 1.0
    for i in xs:
        if i == hit_:
            n1 = containers[-1].material.refractive_index if containers else 1.0

        if i.shape in containers:
            containers.remove(i.shape)
        else:
            containers.append(i.shape)

        if i == hit_:
            n2 = containers[-1].material.refractive_index if containers else 1.0
            break
    return n1, n2
