"""Scene module: shape arena, light, world and demo scenes.

Components:
    intersection: Device shape storage and scene-level queries
    light: Point light and its device storage
    world: Host world description, upload and queries
    demos: Demo scene factories

Every module here declares or uses Taichi fields; import them directly
after ``ti.init``.
"""
