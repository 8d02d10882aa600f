"""RGB colors used by materials, lights and the canvas.

Channels are unbounded floats; values above 1.0 are legal during shading and
are only clamped when an image is encoded.
"""

from __future__ import annotations

from collections.abc import Sequence

from whitted.core.tuples import approx_eq


class Color:
    """An RGB color with float channels.

    Attributes:
        red: Red channel.
        green: Green channel.
        blue: Blue channel.
    """

    __slots__ = ("red", "green", "blue")

    def __init__(self, red: float, green: float, blue: float) -> None:
        self.red = float(red)
        self.green = float(green)
        self.blue = float(blue)

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> Color:
        """Build a color from any 3-element sequence (list, tuple, ti.Vector)."""
        if len(values) != 3:
            raise ValueError(f"Expected 3 color channels, got {len(values)}")
        return cls(float(values[0]), float(values[1]), float(values[2]))

    def __iter__(self):
        return iter((self.red, self.green, self.blue))

    def __repr__(self) -> str:
        return f"Color({self.red:g}, {self.green:g}, {self.blue:g})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Color):
            return NotImplemented
        return (
            approx_eq(self.red, other.red)
            and approx_eq(self.green, other.green)
            and approx_eq(self.blue, other.blue)
        )

    __hash__ = None  # type: ignore[assignment]

    def __add__(self, other: Color) -> Color:
        return Color(self.red + other.red, self.green + other.green, self.blue + other.blue)

    def __sub__(self, other: Color) -> Color:
        return Color(self.red - other.red, self.green - other.green, self.blue - other.blue)

    def __mul__(self, other: Color | float) -> Color:
        # Hadamard product for colors, uniform scaling for scalars
        if isinstance(other, Color):
            return Color(self.red * other.red, self.green * other.green, self.blue * other.blue)
        return Color(self.red * other, self.green * other, self.blue * other)

    def __rmul__(self, scalar: float) -> Color:
        return self * scalar

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.red, self.green, self.blue)

    def is_close(self, other: Color, tolerance: float) -> bool:
        """Compare with an explicit tolerance (device results are float32)."""
        return (
            abs(self.red - other.red) < tolerance
            and abs(self.green - other.green) < tolerance
            and abs(self.blue - other.blue) < tolerance
        )


BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
