"""Dielectric (glass-like) material implementation.

This module implements a smooth dielectric interface that both reflects and
refracts. The fraction of light reflected is the Fresnel reflectance,
approximated with Schlick's formula:

    R(theta) = R0 + (1 - R0)(1 - cos(theta))^5
    R0 = ((n_inside - n_outside) / (n_inside + n_outside))^2

where cos(theta) is measured on the outside of the interface: the incident
angle when entering, the transmitted angle when leaving.

Refraction uses the relative index nnt (outside/inside when entering,
inside/outside when leaving). When cos^2 of the transmitted angle is
negative there is no transmitted ray (total internal reflection) and only
the mirror ray is followed, with weight 1.

Shallow hits (depth <= full split depth) follow both rays, weighted by the
reflectance and transmittance. Deeper hits pick one ray with probability
P = 0.25 + 0.5 * R for reflection and scale by R / P or T / (1 - P), which
keeps the estimator unbiased at a fraction of the cost.

Example:
    >>> # Use within a Taichi kernel:
    >>> # state, count, dir1, w1, dir2, w2 = scatter_dielectric(
    >>> #     direction, normal, oriented, depth, 1.0, 1.5, 2, state
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import real, reflect, vec3
from src.pathtracer.core.rng import next_float

# Default indices of refraction
DEFAULT_IOR_OUTSIDE = 1.0
DEFAULT_IOR_INSIDE = 1.5

# Default depth up to which both branches are followed
DEFAULT_FULL_SPLIT_DEPTH = 2


@ti.func
def schlick_reflectance(cosine: real, ior_outside: real, ior_inside: real) -> real:
    """Schlick's approximation of the Fresnel reflectance."""
    a = ior_inside - ior_outside
    b = ior_inside + ior_outside
    r0 = (a * a) / (b * b)
    c = 1.0 - cosine
    return r0 + (1.0 - r0) * c * c * c * c * c


@ti.func
def fresnel_terms(
    incident_direction: vec3,
    normal: vec3,
    oriented: vec3,
    ior_outside: real,
    ior_inside: real,
):
    """Compute the refracted direction and the Fresnel split at a hit.

    Args:
        incident_direction: The incoming ray direction (normalized).
        normal: Outward geometric normal of the sphere.
        oriented: normal flipped to face against the incoming ray.
        ior_outside: Index of refraction outside the sphere.
        ior_inside: Index of refraction inside the sphere.

    Returns:
        A tuple (into, tir, refracted, reflectance, transmittance):
        - into: 1 if the ray enters the sphere, 0 if it leaves.
        - tir: 1 on total internal reflection (refracted is zero, the
          reflectance is 1 and the transmittance 0).
        - refracted: Unit refracted direction.
        - reflectance: Schlick reflectance R.
        - transmittance: 1 - R.
    """
    into = 0
    if tm.dot(normal, oriented) > 0.0:
        into = 1

    nnt = ti.select(into == 1, ior_outside / ior_inside, ior_inside / ior_outside)
    ddn = tm.dot(incident_direction, oriented)
    cos2t = 1.0 - nnt * nnt * (1.0 - ddn * ddn)

    tir = 0
    refracted = vec3(0.0, 0.0, 0.0)
    reflectance = 1.0
    transmittance = 0.0

    if cos2t < 0.0:
        tir = 1
    else:
        sign = ti.select(into == 1, 1.0, -1.0)
        refracted = tm.normalize(
            incident_direction * nnt - normal * (sign * (ddn * nnt + ti.sqrt(cos2t)))
        )
        cosine = ti.select(into == 1, -ddn, tm.dot(refracted, normal))
        reflectance = schlick_reflectance(cosine, ior_outside, ior_inside)
        transmittance = 1.0 - reflectance

    return into, tir, refracted, reflectance, transmittance


@ti.func
def scatter_dielectric(
    incident_direction: vec3,
    normal: vec3,
    oriented: vec3,
    depth: ti.i32,
    ior_outside: real,
    ior_inside: real,
    full_split_depth: ti.i32,
    state,
):
    """Scatter a ray at a dielectric interface into one or two rays.

    Args:
        incident_direction: The incoming ray direction (normalized).
        normal: Outward geometric normal of the sphere.
        oriented: normal flipped to face against the incoming ray.
        depth: Depth of this hit (1 for the first surface a camera ray hits).
        ior_outside: Index of refraction outside the sphere.
        ior_inside: Index of refraction inside the sphere.
        full_split_depth: Hits at this depth or less follow both rays.
        state: Random state of the current path.

    Returns:
        A tuple (state, count, dir1, w1, dir2, w2). count is 1 or 2; the
        second ray is only meaningful when count == 2. Weights are scalars
        applied on top of the albedo.
    """
    reflected = reflect(incident_direction, normal)
    _, tir, refracted, reflectance, transmittance = fresnel_terms(
        incident_direction, normal, oriented, ior_outside, ior_inside
    )

    s = state
    count = 1
    dir1 = reflected
    w1 = 1.0
    dir2 = vec3(0.0, 0.0, 0.0)
    w2 = 0.0

    if tir == 0:
        if depth > full_split_depth:
            p = 0.25 + 0.5 * reflectance
            s, xi = next_float(s)
            if xi < p:
                w1 = reflectance / p
            else:
                dir1 = refracted
                w1 = transmittance / (1.0 - p)
        else:
            count = 2
            w1 = reflectance
            dir2 = refracted
            w2 = transmittance

    return s, count, dir1, w1, dir2, w2
