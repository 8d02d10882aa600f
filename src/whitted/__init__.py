"""Whitted-style recursive ray tracer built on Taichi.

Renders still images of spheres and planes with Phong shading, hard
shadows from a point light, mirror reflection and refraction.

Subpackages:
    core: Tuples, colors, matrices, transforms, rays and the integrator
    geometry: Shape primitives and intersection records
    materials: Materials, patterns and the Phong model
    scene: Shape arena, light, world and demo scenes
    camera: Pinhole camera with primary ray generation
    preview: Canvas and image export

Modules that hold Taichi fields (the arena, light, camera and integrator)
must be imported after ``ti.init``; the subpackage ``__init__`` files only
re-export host-side modules.
"""

__version__ = "0.1.0"
