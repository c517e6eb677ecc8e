"""Glossy Phong material implementation.

Reflected rays are spread around the perfect mirror direction by a Phong
lobe. The throughput weight is the albedo, as for the other materials.
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import real, reflect, sample_phong_lobe, vec3
from src.pathtracer.core.rng import next_float

# Default Phong exponent
DEFAULT_PHONG_EXPONENT = 20.0


@ti.func
def scatter_glossy(incident_direction: vec3, normal: vec3, exponent: real, state):
    """Sample a glossy bounce direction around the mirror direction.

    Args:
        incident_direction: The incoming ray direction (normalized).
        normal: The geometric surface normal (either orientation).
        exponent: Phong exponent.
        state: Random state of the current path.

    Returns:
        A tuple of (state, scattered_direction).
    """
    s, xi1 = next_float(state)
    s, xi2 = next_float(s)
    w = tm.normalize(reflect(incident_direction, normal))
    return s, sample_phong_lobe(w, exponent, xi1, xi2)
