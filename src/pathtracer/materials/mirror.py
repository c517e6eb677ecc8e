"""Mirror (perfect specular) material implementation.

The reflection formula is:
    R = I - 2(I . N)N

where I is the incident direction and N is the surface normal. The sign of N
does not matter. Mirrors tint reflected light by their albedo.
"""

import taichi as ti

from src.pathtracer.core.ray import reflect, vec3


@ti.func
def scatter_mirror(incident_direction: vec3, normal: vec3) -> vec3:
    """Deterministic mirror reflection of incident_direction about normal."""
    return reflect(incident_direction, normal)
