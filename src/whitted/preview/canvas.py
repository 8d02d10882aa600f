"""Pixel canvas and plain PPM (P3) serialization.

The canvas is a float RGB buffer of shape (height, width, 3), indexed as
``(x, y)`` with (0, 0) at the top-left. Channel values are unbounded;
encoding scales by 255, rounds and clamps to [0, 255].

Example:
    >>> from whitted.core.color import Color
    >>> canvas = Canvas(5, 3)
    >>> canvas.set_pixel(0, 0, Color(1.5, 0, 0))
    >>> canvas.to_ppm().splitlines()[3]
    '255 0 0 0 0 0 0 0 0 0 0 0 0 0 0'
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from whitted.core.color import Color

# Longest line allowed in a PPM file
PPM_LINE_LENGTH = 70
PPM_MAX_VALUE = 255


class Canvas:
    """A rectangular grid of colors.

    Args:
        width: Width in pixels (> 0).
        height: Height in pixels (> 0).

    Raises:
        ValueError: If a dimension is not positive.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        self._pixels = np.zeros((height, width, 3), dtype=np.float64)

    @classmethod
    def from_array(cls, image: npt.ArrayLike) -> Canvas:
        """Build a canvas from an array of shape (height, width, 3)."""
        array = np.asarray(image, dtype=np.float64)
        if array.ndim != 3 or array.shape[2] != 3:
            raise ValueError(f"Expected an array of shape (H, W, 3), got {array.shape}")
        canvas = cls(array.shape[1], array.shape[0])
        canvas._pixels[...] = array
        return canvas

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} canvas")

    def set_pixel(self, x: int, y: int, color: Color) -> None:
        self._check_bounds(x, y)
        self._pixels[y, x] = color.as_tuple()

    def pixel_at(self, x: int, y: int) -> Color:
        self._check_bounds(x, y)
        return Color.from_sequence(self._pixels[y, x])

    def to_numpy(self) -> npt.NDArray[np.float64]:
        """A copy of the pixel buffer, shape (height, width, 3)."""
        return self._pixels.copy()

    def to_uint8(self) -> npt.NDArray[np.uint8]:
        """Channels scaled to 0..255, rounded and clamped."""
        scaled = np.rint(self._pixels * PPM_MAX_VALUE)
        return np.clip(scaled, 0, PPM_MAX_VALUE).astype(np.uint8)

    def to_ppm(self) -> str:
        """Serialize to a plain PPM (P3) document.

        Each image row starts a new line; long rows wrap so that no line
        exceeds 70 characters. The document ends with a newline.
        """
        lines = ["P3", f"{self.width} {self.height}", str(PPM_MAX_VALUE)]
        for row in self.to_uint8():
            line = ""
            for value in row.reshape(-1):
                token = str(int(value))
                if not line:
                    line = token
                elif len(line) + 1 + len(token) > PPM_LINE_LENGTH:
                    lines.append(line)
                    line = token
                else:
                    line = f"{line} {token}"
            lines.append(line)
        return "\n".join(lines) + "\n"
