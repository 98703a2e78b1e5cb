"""Geometry, lighting, light-field and meta-instancer helpers for baking global illumination."""

__version__ = "0.1.0"

__all__ = [
    "aabb",
    "vecmath",
    "light",
    "light_bvh",
    "mesh",
    "instance",
    "logger",
    "light_field",
    "meta_instancer",
]