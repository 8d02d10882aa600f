"""Pinhole camera: pixel grid geometry and primary ray generation.

The camera sits at the origin of its own space looking down -z, with the
canvas one unit in front of it at z = -1. The view transform positions the
camera in the world; primary rays are built in camera space and carried to
world space by the inverse view transform.

The canvas half extents follow from the field of view:
    half_view = tan(field_of_view / 2)
and are split between width and height by the aspect ratio so that the
longer side spans ``2 * half_view``. Pixel (0, 0) is the top-left corner;
rays pass through pixel centers.

Example:
    >>> import math
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.camera.pinhole import Camera
    >>> from whitted.core.transform import view_transform
    >>> from whitted.core.tuples import point, vector
    >>> camera = Camera(
    ...     hsize=320,
    ...     vsize=240,
    ...     field_of_view=math.pi / 3,
    ...     transform=view_transform(point(0, 1.5, -5), point(0, 1, 0), vector(0, 1, 0)),
    ... )
    >>> canvas = camera.render(world)
"""

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import taichi as ti
import taichi.math as tm

from whitted.core.matrix import Matrix
from whitted.core.ray import DeviceRay, Ray, transform_point, vec3
from whitted.core.tuples import point, vector

if TYPE_CHECKING:
    from whitted.preview.canvas import Canvas
    from whitted.scene.world import World


# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class Camera:
    """A pinhole camera with a pixel grid.

    Attributes:
        hsize: Horizontal size of the canvas in pixels.
        vsize: Vertical size of the canvas in pixels.
        field_of_view: Angle (radians) covered by the longer canvas side.
        transform: View transform (world to camera). Defaults to identity.
        half_width: Half the canvas width at z = -1 (derived).
        half_height: Half the canvas height at z = -1 (derived).
        pixel_size: World-space size of one pixel at z = -1 (derived).

    Raises:
        ValueError: If a dimension is not positive or the field of view is
            outside (0, pi).
        NotInvertibleError: If the view transform is singular.
    """

    hsize: int
    vsize: int
    field_of_view: float
    transform: Matrix = field(default_factory=Matrix.identity)
    half_width: float = field(init=False)
    half_height: float = field(init=False)
    pixel_size: float = field(init=False)

    def __post_init__(self) -> None:
        if self.hsize <= 0 or self.vsize <= 0:
            raise ValueError(f"Camera size must be positive, got {self.hsize}x{self.vsize}")
        if not 0.0 < self.field_of_view < math.pi:
            raise ValueError(f"Field of view must be in (0, pi), got {self.field_of_view}")
        self._inverse = self.transform.inverse()

        half_view = math.tan(self.field_of_view / 2.0)
        aspect = self.hsize / self.vsize
        if aspect >= 1.0:
            self.half_width = half_view
            self.half_height = half_view / aspect
        else:
            self.half_width = half_view * aspect
            self.half_height = half_view
        self.pixel_size = self.half_width * 2.0 / self.hsize

    @property
    def inverse(self) -> Matrix:
        return self._inverse

    def ray_for_pixel(self, px: int, py: int) -> Ray:
        """The world-space ray through the center of a pixel."""
        setup_camera(self)
        _ray_for_pixel_kernel(px, py)
        origin = _ray_result_origin.to_numpy()
        direction = _ray_result_direction.to_numpy()
        return Ray(point(*map(float, origin)), vector(*map(float, direction)))

    def render(self, world: "World", remaining: int | None = None) -> "Canvas":
        """Render a world into a new canvas.

        See ``whitted.core.integrator.render``.
        """
        from whitted.core.integrator import DEFAULT_REMAINING, render

        return render(self, world, DEFAULT_REMAINING if remaining is None else remaining)

    def to_dict(self) -> dict[str, Any]:
        return {
            "hsize": self.hsize,
            "vsize": self.vsize,
            "field_of_view": self.field_of_view,
            "transform": self.transform.to_list(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Camera":
        transform = Matrix(data["transform"]) if "transform" in data else Matrix.identity()
        return cls(
            hsize=int(data["hsize"]),
            vsize=int(data["vsize"]),
            field_of_view=float(data["field_of_view"]),
            transform=transform,
        )


# =============================================================================
# Taichi Fields for Camera State (GPU-accessible)
# =============================================================================

# Inverse view transform (camera to world)
_camera_inverse = ti.Matrix.field(4, 4, dtype=ti.f32, shape=())
_half_width = ti.field(dtype=ti.f32, shape=())
_half_height = ti.field(dtype=ti.f32, shape=())
_pixel_size = ti.field(dtype=ti.f32, shape=())

_ray_result_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_ray_result_direction = ti.Vector.field(3, dtype=ti.f32, shape=())


def setup_camera(camera: Camera) -> None:
    """Copy the derived camera geometry into the device fields.

    Args:
        camera: The camera to activate for subsequent ray generation.
    """
    _camera_inverse[None] = ti.Matrix(camera.inverse.to_list())
    _half_width[None] = camera.half_width
    _half_height[None] = camera.half_height
    _pixel_size[None] = camera.pixel_size


# =============================================================================
# Ray Generation (Taichi-compatible, GPU-callable)
# =============================================================================


@ti.func
def get_ray_for_pixel(px: ti.i32, py: ti.i32) -> DeviceRay:
    """Generate the primary ray through the center of pixel (px, py).

    Args:
        px: Pixel column (0 = left).
        py: Pixel row (0 = top).

    Returns:
        A DeviceRay in world space with a unit direction.
    """
    # Offset from the canvas edge to the pixel center
    xoffset = (ti.cast(px, ti.f32) + 0.5) * _pixel_size[None]
    yoffset = (ti.cast(py, ti.f32) + 0.5) * _pixel_size[None]

    # The camera looks toward -z, so +x is to the left
    world_x = _half_width[None] - xoffset
    world_y = _half_height[None] - yoffset

    inverse = _camera_inverse[None]
    pixel = transform_point(inverse, vec3(world_x, world_y, -1.0))
    origin = transform_point(inverse, vec3(0.0, 0.0, 0.0))
    return DeviceRay(origin=origin, direction=tm.normalize(pixel - origin))


@ti.kernel
def _ray_for_pixel_kernel(px: ti.i32, py: ti.i32):
    ray = get_ray_for_pixel(px, py)
    _ray_result_origin[None] = ray.origin
    _ray_result_direction[None] = ray.direction
