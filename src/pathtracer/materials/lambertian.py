"""Lambertian (ideal diffuse) material implementation.

A Lambertian surface scatters light equally in all directions. The BRDF is
albedo / pi; sampling directions with a cosine-weighted density cancels the
cosine and the 1/pi, leaving a throughput weight of exactly the albedo.

Example:
    >>> # Use within a Taichi kernel:
    >>> # state, direction = scatter_lambertian(oriented_normal, state)
"""

import taichi as ti

from src.pathtracer.core.ray import sample_cosine_hemisphere, vec3
from src.pathtracer.core.rng import next_float


@ti.func
def scatter_lambertian(normal: vec3, state):
    """Sample a diffuse bounce direction.

    Args:
        normal: The surface normal oriented against the incoming ray.
        state: Random state of the current path.

    Returns:
        A tuple of (state, scattered_direction). The scattered direction is
        unit length and lies in the hemisphere of normal.
    """
    s, xi1 = next_float(state)
    s, xi2 = next_float(s)
    return s, sample_cosine_hemisphere(normal, xi1, xi2)
