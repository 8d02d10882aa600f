"""Phong reflection model and per-shape material storage.

Material parameters are stored per arena slot in Taichi fields using a
Structure of Arrays layout, parallel to the shape fields in
``whitted.scene.intersection``. Each slot also records the pattern kind,
the two pattern colors and the combined pattern inverse
(``pattern.inverse @ shape.inverse``), so a world point maps to pattern
space with a single matrix product.

The Phong model sums three terms:
    ambient  = effective_color * ambient
    diffuse  = effective_color * diffuse * dot(lightv, normalv)
    specular = intensity * specular * dot(reflectv, eyev) ^ shininess
where effective_color = surface_color * light_intensity. Diffuse and
specular are dropped when the point is in shadow or the light is behind the
surface; specular is also dropped when the reflection points away from the
eye. Nothing is clamped.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from whitted.core.color import Color
    >>> from whitted.core.tuples import point, vector
    >>> from whitted.materials.material import Material
    >>> from whitted.materials.phong import lighting
    >>> from whitted.scene.light import PointLight
    >>> light = PointLight(point(0, 0, -10), Color(1, 1, 1))
    >>> lighting(Material(), light, point(0, 0, 0), vector(0, 0, -1), vector(0, 0, -1))
    Color(1.9, 1.9, 1.9)
"""

from typing import TYPE_CHECKING

import taichi as ti
import taichi.math as tm

from whitted.core.color import BLACK, Color
from whitted.core.matrix import Matrix
from whitted.core.ray import reflect, transform_point
from whitted.core.tuples import Tuple
from whitted.geometry.shape import ARENA_SIZE, SCRATCH_SLOT
from whitted.materials.material import Material
from whitted.materials.pattern import PatternKind, pattern_at

if TYPE_CHECKING:
    from whitted.geometry.shape import Shape
    from whitted.scene.light import PointLight

vec3 = tm.vec3


@ti.dataclass
class PhongMaterial:
    """Phong material coefficients as seen by kernels.

    Attributes:
        ambient: Ambient coefficient.
        diffuse: Diffuse coefficient.
        specular: Specular coefficient.
        shininess: Specular exponent.
        reflective: Mirror weight.
        transparency: Transmission weight.
        refractive_index: Index of refraction.
    """

    ambient: ti.f32
    diffuse: ti.f32
    specular: ti.f32
    shininess: ti.f32
    reflective: ti.f32
    transparency: ti.f32
    refractive_index: ti.f32


# Material storage: Structure of Arrays layout, one entry per arena slot
material_colors = ti.Vector.field(3, dtype=ti.f32, shape=ARENA_SIZE)
material_ambient = ti.field(dtype=ti.f32, shape=ARENA_SIZE)
material_diffuse = ti.field(dtype=ti.f32, shape=ARENA_SIZE)
material_specular = ti.field(dtype=ti.f32, shape=ARENA_SIZE)
material_shininess = ti.field(dtype=ti.f32, shape=ARENA_SIZE)
material_reflective = ti.field(dtype=ti.f32, shape=ARENA_SIZE)
material_transparency = ti.field(dtype=ti.f32, shape=ARENA_SIZE)
material_refractive_index = ti.field(dtype=ti.f32, shape=ARENA_SIZE)

# Pattern storage; pattern_inverses maps world space straight to pattern space
pattern_kinds = ti.field(dtype=ti.i32, shape=ARENA_SIZE)
pattern_a = ti.Vector.field(3, dtype=ti.f32, shape=ARENA_SIZE)
pattern_b = ti.Vector.field(3, dtype=ti.f32, shape=ARENA_SIZE)
pattern_inverses = ti.Matrix.field(4, 4, dtype=ti.f32, shape=ARENA_SIZE)


def store_material(slot: int, material: Material, object_inverse: Matrix) -> None:
    """Write a material into an arena slot.

    Args:
        slot: Arena slot index.
        material: The material to store.
        object_inverse: The inverse transform of the shape owning the
            material, folded into the pattern inverse.
    """
    material_colors[slot] = vec3(*material.color.as_tuple())
    material_ambient[slot] = material.ambient
    material_diffuse[slot] = material.diffuse
    material_specular[slot] = material.specular
    material_shininess[slot] = material.shininess
    material_reflective[slot] = material.reflective
    material_transparency[slot] = material.transparency
    material_refractive_index[slot] = material.refractive_index

    pattern = material.pattern
    if pattern is None:
        pattern_kinds[slot] = int(PatternKind.NONE)
        pattern_inverses[slot] = ti.Matrix(Matrix.identity().to_list())
    else:
        pattern_kinds[slot] = int(pattern.kind)
        pattern_a[slot] = vec3(*pattern.a.as_tuple())
        pattern_b[slot] = vec3(*pattern.b.as_tuple())
        pattern_inverses[slot] = ti.Matrix((pattern.inverse @ object_inverse).to_list())


@ti.func
def get_material(slot: ti.i32) -> PhongMaterial:
    """Gather the coefficients of an arena slot into a PhongMaterial."""
    return PhongMaterial(
        ambient=material_ambient[slot],
        diffuse=material_diffuse[slot],
        specular=material_specular[slot],
        shininess=material_shininess[slot],
        reflective=material_reflective[slot],
        transparency=material_transparency[slot],
        refractive_index=material_refractive_index[slot],
    )


@ti.func
def surface_color(slot: ti.i32, world_point: vec3) -> vec3:
    """The unlit surface color of a slot at a world point (pattern or flat)."""
    color = material_colors[slot]
    kind = pattern_kinds[slot]
    if kind != int(PatternKind.NONE):
        pattern_point = transform_point(pattern_inverses[slot], world_point)
        color = pattern_at(kind, pattern_a[slot], pattern_b[slot], pattern_point)
    return color


@ti.func
def phong_lighting(
    mat: PhongMaterial,
    color: vec3,
    light_position: vec3,
    light_intensity: vec3,
    position: vec3,
    eyev: vec3,
    normalv: vec3,
    in_shadow: ti.i32,
) -> vec3:
    """Evaluate the Phong model for a single point light.

    Args:
        mat: Material coefficients.
        color: Surface color at the point (already pattern-sampled).
        light_position: Light position in world space.
        light_intensity: Light color.
        position: The shaded point.
        eyev: Unit vector toward the eye.
        normalv: Unit surface normal, on the eye's side.
        in_shadow: 1 if the light is occluded, else 0.

    Returns:
        The reflected color.
    """
    effective_color = color * light_intensity
    lightv = tm.normalize(light_position - position)
    ambient = effective_color * mat.ambient

    diffuse = vec3(0.0, 0.0, 0.0)
    specular = vec3(0.0, 0.0, 0.0)
    light_dot_normal = tm.dot(lightv, normalv)
    if in_shadow == 0 and light_dot_normal > 0.0:
        diffuse = effective_color * mat.diffuse * light_dot_normal
        reflectv = reflect(-lightv, normalv)
        reflect_dot_eye = tm.dot(reflectv, eyev)
        if reflect_dot_eye > 0.0:
            factor = ti.pow(reflect_dot_eye, mat.shininess)
            specular = light_intensity * mat.specular * factor

    return ambient + diffuse + specular


_lighting_result = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _lighting_kernel(
    slot: ti.i32,
    px: ti.f32,
    py: ti.f32,
    pz: ti.f32,
    ex: ti.f32,
    ey: ti.f32,
    ez: ti.f32,
    nx: ti.f32,
    ny: ti.f32,
    nz: ti.f32,
    lx: ti.f32,
    ly: ti.f32,
    lz: ti.f32,
    ir: ti.f32,
    ig: ti.f32,
    ib: ti.f32,
    in_shadow: ti.i32,
):
    position = vec3(px, py, pz)
    _lighting_result[None] = phong_lighting(
        get_material(slot),
        surface_color(slot, position),
        vec3(lx, ly, lz),
        vec3(ir, ig, ib),
        position,
        vec3(ex, ey, ez),
        vec3(nx, ny, nz),
        in_shadow,
    )


def lighting(
    material: Material,
    light: "PointLight | None",
    position: Tuple,
    eyev: Tuple,
    normalv: Tuple,
    in_shadow: bool = False,
    shape: "Shape | None" = None,
) -> Color:
    """Shade a single point from Python.

    The material is written to the scratch slot, so this never disturbs an
    uploaded world.

    Args:
        material: Surface material.
        light: The point light, or None for an unlit scene (black).
        position: The world-space point being shaded.
        eyev: Unit vector toward the eye.
        normalv: Unit surface normal.
        in_shadow: Whether the light is occluded.
        shape: Owner of the material; its transform positions the pattern.

    Returns:
        The shaded color.
    """
    if light is None:
        return BLACK
    object_inverse = shape.inverse if shape is not None else Matrix.identity()
    store_material(SCRATCH_SLOT, material, object_inverse)
    _lighting_kernel(
        SCRATCH_SLOT,
        *position.xyz(),
        *eyev.xyz(),
        *normalv.xyz(),
        *light.position.xyz(),
        *light.intensity.as_tuple(),
        int(in_shadow),
    )
    return Color.from_sequence(_lighting_result.to_numpy())


_pattern_result = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _surface_color_kernel(slot: ti.i32, px: ti.f32, py: ti.f32, pz: ti.f32):
    _pattern_result[None] = surface_color(slot, vec3(px, py, pz))


def pattern_at_shape(material: Material, shape: "Shape | None", world_point: Tuple) -> Color:
    """Sample a material's surface color at a world point on a shape.

    Returns:
        The pattern color, or the flat material color without a pattern.
    """
    object_inverse = shape.inverse if shape is not None else Matrix.identity()
    store_material(SCRATCH_SLOT, material, object_inverse)
    _surface_color_kernel(SCRATCH_SLOT, *world_point.xyz())
    return Color.from_sequence(_pattern_result.to_numpy())
