"""Image export utilities for rendered canvases.

Supported formats:
    - PPM (plain P3 text)
    - PNG (8-bit RGB via Pillow, optional gamma correction)

Example:
    >>> from whitted.preview.export import save_canvas
    >>> canvas = camera.render(world)
    >>> save_canvas(canvas, "output.png")
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from whitted.preview.canvas import Canvas


def image_to_uint8(canvas: Canvas, *, gamma: float = 1.0) -> npt.NDArray[np.uint8]:
    """Convert a canvas to an 8-bit image array.

    Args:
        canvas: The canvas to convert.
        gamma: Gamma correction value; 1.0 keeps values linear.

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"gamma must be positive, got {gamma}")
    if gamma == 1.0:
        return canvas.to_uint8()

    image = np.clip(canvas.to_numpy(), 0.0, 1.0)
    image = np.power(image, 1.0 / gamma)
    return np.rint(image * 255).astype(np.uint8)


def save_ppm(canvas: Canvas, filepath: str | Path) -> None:
    """Write a canvas as a plain PPM (P3) file."""
    Path(filepath).write_text(canvas.to_ppm(), encoding="ascii")


def save_png(canvas: Canvas, filepath: str | Path, *, gamma: float = 1.0) -> None:
    """Save a canvas as an 8-bit PNG file.

    Args:
        canvas: The canvas to save.
        filepath: Output file path (should end in .png).
        gamma: Gamma correction value (1.0 writes linear values, as PPM does).
    """
    image_uint8 = image_to_uint8(canvas, gamma=gamma)

    # Save using Pillow
    pil_image = PILImage.fromarray(image_uint8)
    pil_image.save(filepath)


def save_canvas(canvas: Canvas, filepath: str | Path, *, gamma: float = 1.0) -> None:
    """Save a canvas, choosing the format from the file suffix.

    ``.ppm`` writes plain PPM; any other suffix goes through Pillow.

    Raises:
        ValueError: If the path has no suffix.
    """
    suffix = Path(filepath).suffix.lower()
    if not suffix:
        raise ValueError(f"Cannot infer image format from {str(filepath)!r}")
    if suffix == ".ppm":
        save_ppm(canvas, filepath)
    else:
        save_png(canvas, filepath, gamma=gamma)
