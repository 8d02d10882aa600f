"""Preview module for rendered output.

Components:
    canvas: Pixel buffer with PPM serialization
    export: PPM and PNG file export
"""

from .canvas import Canvas
from .export import image_to_uint8, save_canvas, save_png, save_ppm

__all__ = [
    "Canvas",
    "image_to_uint8",
    "save_canvas",
    "save_png",
    "save_ppm",
]
