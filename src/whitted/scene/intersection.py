"""Shape arena and scene-level intersection queries.

Shapes are stored in Taichi fields using a Structure of Arrays layout and
addressed by slot. A slot holds the shape kind, its inverse transform and
the transpose of that inverse (the normal matrix); material data for the
same slot lives in ``whitted.materials.phong``. Slot ``SCRATCH_SLOT`` sits
past the last world slot and is used to evaluate one shape from Python
without touching the uploaded world.

Device functions here find the nearest hit along a ray, test shadows
against the light in ``whitted.scene.light`` and work out the refractive
indices on both sides of a hit. Python wrappers around small kernels make
the same queries available from the host.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.ray import Ray
    >>> from whitted.core.tuples import point, vector
    >>> from whitted.geometry.sphere import Sphere
    >>> [i.t for i in intersect_shape(Sphere(), Ray(point(0, 0, -5), vector(0, 0, 1)))]
    [4.0, 6.0]
"""

from typing import TYPE_CHECKING

import taichi as ti
import taichi.math as tm

from whitted.core.ray import DeviceRay, transform_point, transform_ray, transform_vector
from whitted.core.tuples import Tuple, vector
from whitted.geometry.dispatch import local_intersect, local_normal_at
from whitted.geometry.intersection import Intersection, intersections
from whitted.geometry.shape import ARENA_SIZE, MAX_SHAPES, SCRATCH_SLOT
from whitted.materials.phong import material_refractive_index, store_material
from whitted.scene.light import light_enabled, light_position

if TYPE_CHECKING:
    from whitted.core.ray import Ray
    from whitted.geometry.shape import Shape

vec3 = tm.vec3

# Largest value representable as f32, used as "no hit yet"
T_MAX = 3.4e38

# Roots closer than this to a hit count as the hit itself
ROOT_TOLERANCE = 1e-4


@ti.dataclass
class SceneHitRecord:
    """Nearest intersection of a ray with the uploaded world.

    Attributes:
        hit: 1 if some shape was hit at t >= 0, else 0.
        t: Ray parameter of the hit. Only valid if hit == 1.
        slot: Arena slot of the hit shape. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    slot: ti.i32


# Shape storage: Structure of Arrays layout for GPU efficiency
shape_kinds = ti.field(dtype=ti.i32, shape=ARENA_SIZE)
shape_inverses = ti.Matrix.field(4, 4, dtype=ti.f32, shape=ARENA_SIZE)
# Transpose of the inverse, maps object normals to world normals
shape_normal_matrices = ti.Matrix.field(4, 4, dtype=ti.f32, shape=ARENA_SIZE)
num_shapes = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove every shape from the arena.

    Resets the shape count to zero. The field data is overwritten when new
    shapes are added.
    """
    num_shapes[None] = 0


def store_shape(slot: int, shape: "Shape") -> None:
    """Write a shape and its material into an arena slot."""
    inverse = shape.inverse
    shape_kinds[slot] = int(shape.kind)
    shape_inverses[slot] = ti.Matrix(inverse.to_list())
    shape_normal_matrices[slot] = ti.Matrix(inverse.transpose().to_list())
    store_material(slot, shape.material, inverse)


def add_shape(shape: "Shape") -> int:
    """Append a shape to the arena.

    Args:
        shape: The shape to upload.

    Returns:
        The slot of the added shape.

    Raises:
        RuntimeError: If the maximum number of shapes is exceeded.
    """
    idx = num_shapes[None]
    if idx >= MAX_SHAPES:
        raise RuntimeError(f"Maximum number of shapes ({MAX_SHAPES}) exceeded")
    store_shape(idx, shape)
    num_shapes[None] = idx + 1
    return idx


@ti.func
def intersect_slot(slot: ti.i32, ray: DeviceRay):
    """Intersect a world-space ray with the shape in a slot.

    Returns:
        A tuple (count, t0, t1) in the world ray's parameterization.
    """
    local_ray = transform_ray(ray, shape_inverses[slot])
    count, t0, t1 = local_intersect(shape_kinds[slot], local_ray)
    return count, t0, t1


@ti.func
def normal_at_slot(slot: ti.i32, world_point: vec3) -> vec3:
    """Unit world-space normal of the shape in a slot at a world point."""
    object_point = transform_point(shape_inverses[slot], world_point)
    object_normal = local_normal_at(shape_kinds[slot], object_point)
    world_normal = transform_vector(shape_normal_matrices[slot], object_normal)
    return tm.normalize(world_normal)


@ti.func
def intersect_scene(ray: DeviceRay) -> SceneHitRecord:
    """Find the nearest intersection with t >= 0 among all uploaded shapes.

    Args:
        ray: The world-space ray.

    Returns:
        A SceneHitRecord; hit is 0 when the ray misses everything.
    """
    result = SceneHitRecord(hit=0, t=T_MAX, slot=-1)
    for slot in range(num_shapes[None]):
        count, t0, t1 = intersect_slot(slot, ray)
        if count > 0:
            if 0.0 <= t0 < result.t:
                result.hit = 1
                result.t = t0
                result.slot = slot
            elif count > 1 and 0.0 <= t1 < result.t:
                result.hit = 1
                result.t = t1
                result.slot = slot
    return result


@ti.func
def is_shadowed_at(position: vec3) -> ti.i32:
    """Whether some shape lies strictly between a point and the light.

    Returns:
        1 if shadowed, else 0. Always 0 when the world has no light.
    """
    shadowed = 0
    if light_enabled[None] == 1:
        v = light_position[None] - position
        distance = tm.length(v)
        ray = DeviceRay(origin=position, direction=v / distance)
        for slot in range(num_shapes[None]):
            count, t0, t1 = intersect_slot(slot, ray)
            if count > 0 and 0.0 < t0 < distance:
                shadowed = 1
            if count > 1 and 0.0 < t1 < distance:
                shadowed = 1
    return shadowed


@ti.func
def refractive_indices_at(ray: DeviceRay, t_hit: ti.f32, hit_slot: ti.i32):
    """Refractive indices on both sides of a hit.

    The ray is inside a shape just before the hit when an odd number of
    that shape's roots lie before ``t_hit``; its entry time is its first
    root. Among those containers the one entered last is the innermost.
    The hit either enters its shape (which becomes innermost) or leaves it
    (the next innermost container remains).

    Args:
        ray: The world-space ray that produced the hit.
        t_hit: Ray parameter of the hit.
        hit_slot: Slot of the hit shape.

    Returns:
        A tuple (n1, n2); empty space has index 1.0.
    """
    innermost = -1
    innermost_entry = -T_MAX
    # Innermost container other than the hit shape
    outer = -1
    outer_entry = -T_MAX
    hit_is_container = 0
    limit = t_hit - ROOT_TOLERANCE
    for slot in range(num_shapes[None]):
        count, t0, t1 = intersect_slot(slot, ray)
        before = 0
        if count > 0 and t0 < limit:
            before += 1
        if count > 1 and t1 < limit:
            before += 1
        if before % 2 == 1:
            if t0 > innermost_entry:
                innermost = slot
                innermost_entry = t0
            if slot == hit_slot:
                hit_is_container = 1
            elif t0 > outer_entry:
                outer = slot
                outer_entry = t0

    n1 = 1.0
    if innermost >= 0:
        n1 = material_refractive_index[innermost]
    n2 = material_refractive_index[hit_slot]
    if hit_is_container == 1:
        n2 = 1.0
        if outer >= 0:
            n2 = material_refractive_index[outer]
    return n1, n2


# =============================================================================
# Python-scope queries
# =============================================================================

# Root buffer: every root of every uploaded shape for one ray
_xs_t = ti.field(dtype=ti.f32, shape=2 * ARENA_SIZE)
_xs_slot = ti.field(dtype=ti.i32, shape=2 * ARENA_SIZE)
_xs_count = ti.field(dtype=ti.i32, shape=())
_normal_result = ti.Vector.field(3, dtype=ti.f32, shape=())
_shadow_result = ti.field(dtype=ti.i32, shape=())


@ti.func
def _append_roots(slot: ti.i32, ray: DeviceRay):
    count, t0, t1 = intersect_slot(slot, ray)
    if count > 0:
        n = _xs_count[None]
        _xs_t[n] = t0
        _xs_slot[n] = slot
        _xs_count[None] = n + 1
    if count > 1:
        n = _xs_count[None]
        _xs_t[n] = t1
        _xs_slot[n] = slot
        _xs_count[None] = n + 1


@ti.kernel
def _intersect_slot_kernel(
    slot: ti.i32, ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32
):
    for _ in range(1):
        _xs_count[None] = 0
        _append_roots(slot, DeviceRay(origin=vec3(ox, oy, oz), direction=vec3(dx, dy, dz)))


@ti.kernel
def _intersect_all_kernel(ox: ti.f32, oy: ti.f32, oz: ti.f32, dx: ti.f32, dy: ti.f32, dz: ti.f32):
    # Single iteration outer loop keeps the append order serial
    for _ in range(1):
        _xs_count[None] = 0
        ray = DeviceRay(origin=vec3(ox, oy, oz), direction=vec3(dx, dy, dz))
        for slot in range(num_shapes[None]):
            _append_roots(slot, ray)


@ti.kernel
def _normal_kernel(slot: ti.i32, px: ti.f32, py: ti.f32, pz: ti.f32):
    _normal_result[None] = normal_at_slot(slot, vec3(px, py, pz))


@ti.kernel
def _shadow_kernel(px: ti.f32, py: ti.f32, pz: ti.f32):
    for _ in range(1):
        _shadow_result[None] = is_shadowed_at(vec3(px, py, pz))


def _read_roots() -> list[tuple[float, int]]:
    count = int(_xs_count[None])
    ts = _xs_t.to_numpy()[:count]
    slots = _xs_slot.to_numpy()[:count]
    return [(float(t), int(s)) for t, s in zip(ts, slots)]


def intersect_shape(shape: "Shape", ray: "Ray") -> list[Intersection]:
    """Intersect a world-space ray with a single shape.

    The shape goes through the scratch slot, so an uploaded world is left
    untouched.

    Returns:
        The intersections sorted by t (possibly empty).
    """
    store_shape(SCRATCH_SLOT, shape)
    _intersect_slot_kernel(SCRATCH_SLOT, *ray.origin.xyz(), *ray.direction.xyz())
    return intersections(*(Intersection(t, shape) for t, _ in _read_roots()))


def shape_normal_at(shape: "Shape", world_point: Tuple) -> Tuple:
    """Unit world-space normal of a single shape at a world point."""
    store_shape(SCRATCH_SLOT, shape)
    _normal_kernel(SCRATCH_SLOT, *world_point.xyz())
    return vector(*(float(c) for c in _normal_result.to_numpy()))


def intersect_uploaded(ray: "Ray") -> list[tuple[float, int]]:
    """All roots of a ray against the uploaded shapes.

    Returns:
        (t, slot) pairs sorted by ascending t.
    """
    _intersect_all_kernel(*ray.origin.xyz(), *ray.direction.xyz())
    return sorted(_read_roots(), key=lambda pair: pair[0])


def is_shadowed_uploaded(position: Tuple) -> bool:
    """Shadow test of a world point against the uploaded shapes and light."""
    _shadow_kernel(*position.xyz())
    return bool(_shadow_result[None])
