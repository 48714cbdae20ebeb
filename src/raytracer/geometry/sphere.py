"""Analytic ray-sphere intersection.

The intersection is found by substituting the ray equation into the implicit
sphere equation:
    |origin + t * direction - center|^2 = radius^2

which expands to the quadratic a*t^2 + 2*h*t + c = 0 with
    a = dot(direction, direction)
    h = dot(origin - center, direction)   (half of the usual b)
    c = dot(origin - center, origin - center) - radius^2

Only the nearer root (-h - sqrt(h^2 - a*c)) / a is considered. A ray whose
origin lies inside the sphere therefore reports a negative distance and is
treated as a miss by the scene query, the same as a sphere behind the camera.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> @ti.kernel
    ... def nearest_hit() -> ti.f32:
    ...     sphere = make_sphere(vec3(0, 0, -3), 1.0)
    ...     return hit_sphere(vec3(0, 0, 0), vec3(0, 0, -1), sphere)
    >>> nearest_hit()
    2.0
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Returned by hit_sphere when the ray's line does not touch the sphere
NO_HIT = -1.0


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.func
def hit_sphere(ray_origin: vec3, ray_direction: vec3, sphere: Sphere) -> ti.f32:
    """Distance along the ray to the nearer intersection with a sphere.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray (need not be normalized).
        sphere: The sphere to test against.

    Returns:
        The nearer root t of the intersection quadratic, or NO_HIT when the
        discriminant is negative. The value may be <= 0 when the sphere is
        behind the origin or contains it; callers must check t > 0.
    """
    oc = ray_origin - sphere.center

    a = tm.dot(ray_direction, ray_direction)
    h = tm.dot(oc, ray_direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius

    discriminant = h * h - a * c

    t = NO_HIT
    if discriminant >= 0.0:
        t = (-h - ti.sqrt(discriminant)) / a
    return t


@ti.func
def sphere_normal(point: vec3, center: vec3) -> vec3:
    """Outward unit normal of a sphere at a surface point."""
    return tm.normalize(point - center)


@ti.func
def make_sphere(center: vec3, radius: ti.f32) -> Sphere:
    """Create a sphere from center and radius inside a kernel."""
    return Sphere(center=center, radius=radius)
