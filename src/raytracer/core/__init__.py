"""Core rendering module.

This module contains the fundamental building blocks of the tracer:

Components:
    vector: Immutable Vector3/Color value type for Python-side math
    ray: Ray data structure for Taichi kernels
    pixels: Packing float colors into ABGR 32-bit pixel buffers
    shading: Background gradient and surface color strategies
    renderer: Per-pixel render pass and output buffers

Rendering is primary-ray only: one ray per pixel, closest hit, direct color.
"""

from .pixels import buffer_to_rgba, pack_abgr, to_channel_bytes, unpack_abgr
from .ray import Ray, make_ray, ray_at, vec3
from .shading import (
    DEFAULT_HORIZON_COLOR,
    DEFAULT_ZENITH_COLOR,
    ShadingMode,
    background_color,
    normal_color,
)
from .vector import Color, Vector3, cross, dot, normalize

# Note: renderer is NOT imported here to avoid circular imports with the camera
# package. Import it directly:
#   from src.raytracer.core.renderer import Renderer, RenderSettings

__all__ = [
    "Vector3",
    "Color",
    "dot",
    "cross",
    "normalize",
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "pack_abgr",
    "unpack_abgr",
    "buffer_to_rgba",
    "to_channel_bytes",
    "ShadingMode",
    "background_color",
    "normal_color",
    "DEFAULT_HORIZON_COLOR",
    "DEFAULT_ZENITH_COLOR",
]
