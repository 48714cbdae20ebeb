"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with analytic ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) so they can be called
from the parallel per-pixel render kernel.
"""

from .sphere import NO_HIT, Sphere, hit_sphere, make_sphere, sphere_normal

__all__ = [
    "Sphere",
    "NO_HIT",
    "hit_sphere",
    "make_sphere",
    "sphere_normal",
]
