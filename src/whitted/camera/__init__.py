"""Camera module: pinhole camera and primary ray generation.

Components:
    pinhole: Camera geometry, device camera state and per-pixel rays
        (declares Taichi fields, import it directly after ``ti.init``)
"""
