"""Sphere primitive with robust ray-sphere intersection.

This module provides the ray-sphere intersection routine. The ray
parametrization is substituted into the implicit sphere equation, giving

    a*t^2 + b*t + c = 0
    a = dot(d, d),  b = 2 * dot(o - center, d),  c = dot(o - center, o - center) - r^2

The roots are computed with the cancellation-free form
q = -(b + sign(b) * sqrt(disc)) / 2, t0 = q / a, t1 = c / q.

Intersection reports a distance or the NO_HIT sentinel; a miss is not an
error. A ray starting inside the sphere gets the far root, and a tangent ray
(zero discriminant) is handled by the same path.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.geometry.sphere import intersect_sphere, NO_HIT
    >>> # Use intersect_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import real, vec3

# Sentinel distance returned when a ray misses
NO_HIT = -1.0

# Smallest accepted hit distance; keeps secondary rays off their own surface
EPSILON = 1e-4

# Largest accepted hit distance
T_MAX = 1e20


@ti.func
def _solve_quadratic_robust(a: real, b: real, c: real, sqrt_d: real):
    """Solve a*t^2 + b*t + c = 0 given sqrt of the discriminant.

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    sign_b = ti.select(b < 0.0, -1.0, 1.0)
    q = -0.5 * (b + sign_b * sqrt_d)

    t0 = 0.0
    t1 = 0.0

    if ti.abs(q) < 1e-300:
        # b and the discriminant are both zero
        t0 = -sqrt_d / (2.0 * a)
        t1 = sqrt_d / (2.0 * a)
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        temp = t0
        t0 = t1
        t1 = temp

    return t0, t1


@ti.func
def intersect_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    center: vec3,
    radius: real,
    t_min: real,
    t_max: real,
) -> real:
    """Distance to the nearest intersection strictly inside (t_min, t_max).

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.
        center: Sphere center.
        radius: Sphere radius.
        t_min: Lower bound (exclusive) on accepted distances.
        t_max: Upper bound (exclusive) on accepted distances.

    Returns:
        The smaller root if it lies in range, else the larger root if it
        does, else NO_HIT. A NaN root never satisfies the range test, so
        degenerate input also yields NO_HIT.
    """
    oc = ray_origin - center
    a = tm.dot(ray_direction, ray_direction)
    b = 2.0 * tm.dot(oc, ray_direction)
    c = tm.dot(oc, oc) - radius * radius

    discriminant = b * b - 4.0 * a * c
    result = NO_HIT

    if discriminant >= 0.0:
        sqrt_d = ti.sqrt(discriminant)
        t0, t1 = _solve_quadratic_robust(a, b, c, sqrt_d)

        if t0 > t_min and t0 < t_max:
            result = t0
        elif t1 > t_min and t1 < t_max:
            result = t1

    return result


@ti.func
def sphere_normal(point: vec3, center: vec3) -> vec3:
    """Outward unit normal at a point on the sphere surface."""
    return tm.normalize(point - center)


@ti.func
def oriented_normal(normal: vec3, ray_direction: vec3) -> vec3:
    """Flip normal, if needed, so that it faces against the incoming ray."""
    result = normal
    if tm.dot(normal, ray_direction) >= 0.0:
        result = -normal
    return result
