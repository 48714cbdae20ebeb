"""Interactive primary-ray sphere tracer built on Taichi.

This package renders scenes of analytic spheres by casting one ray per pixel
from a perspective camera, with support for:
- Cached per-pixel ray directions recomputed on resize or camera movement
- Closest-hit ray-sphere intersection over a linear list of spheres
- Normal-visualization and flat albedo shading with a sky gradient background
- Packed 32-bit ABGR pixel buffers for display and export

Subpackages:
    core: Vector math, rays, pixel packing, shading and the renderer
    geometry: Sphere primitive intersection
    scene: Scene model, GPU-side scene buffers and preset scenes
    camera: Fly-through camera with projection/view state
    preview: Interactive window, PNG export and still preview
"""

__version__ = "0.1.0"
