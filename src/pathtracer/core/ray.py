"""Ray data structure, vector utilities and sampling helpers.

This module provides the Ray dataclass, double precision vector aliases and
the direction sampling routines the materials and camera build on. All
operations are Taichi functions meant to be called from kernels.

Everything is 64-bit: the SmallPT box uses spheres of radius 1e5 as walls,
and single precision cannot resolve hit points on them.

Sampling routines take their uniform random numbers as arguments instead of
drawing them, so the caller decides which random state they come from (see
src.pathtracer.core.rng).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> origin = vec3(0.0, 0.0, 0.0)
    >>> direction = vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Scalar and vector types used throughout the renderer
real = ti.f64
vec3 = ti.types.vector(3, ti.f64)


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3), normalized.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: real) -> vec3:
    """Compute the point origin + t * direction."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> real:
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> real:
    """Squared length; avoids the square root when comparing magnitudes."""
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    return tm.normalize(v)


@ti.func
def dot(a: vec3, b: vec3) -> real:
    return tm.dot(a, b)


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    return tm.cross(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (unit length, either orientation).

    Returns:
        incident - 2 * dot(incident, normal) * normal.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def max_component(v: vec3) -> real:
    return ti.max(v.x, ti.max(v.y, v.z))


@ti.func
def is_finite(v: vec3) -> ti.i32:
    """1 if no component is NaN or infinite."""
    ok = 1
    for c in ti.static(range(3)):
        if tm.isnan(v[c]) or tm.isinf(v[c]):
            ok = 0
    return ok


# =============================================================================
# Orthonormal Bases
# =============================================================================


@ti.func
def build_onb_from_normal(w: vec3):
    """Build an orthonormal basis (u, v, w) around a unit normal.

    The helper axis is +y unless the normal leans toward x by less than 0.1,
    in which case +x is used; either choice keeps the cross product away
    from zero.

    Args:
        w: The surface normal (unit length).

    Returns:
        A tuple (u, v, w).
    """
    helper = vec3(1.0, 0.0, 0.0)
    if ti.abs(w.x) > 0.1:
        helper = vec3(0.0, 1.0, 0.0)
    u = tm.normalize(tm.cross(helper, w))
    v = tm.cross(w, u)
    return u, v, w


@ti.func
def perpendicular(w: vec3) -> vec3:
    """A unit vector perpendicular to w.

    The smallest component of w is dropped and the other two are swapped
    with one negated.
    """
    ax = ti.abs(w.x)
    ay = ti.abs(w.y)
    az = ti.abs(w.z)
    result = vec3(0.0, 0.0, 0.0)
    if ax < ay and ax < az:
        result = vec3(0.0, w.z, -w.y)
    elif ay < az:
        result = vec3(w.z, 0.0, -w.x)
    else:
        result = vec3(w.y, -w.x, 0.0)
    return tm.normalize(result)


@ti.func
def local_to_world(local_dir: vec3, u: vec3, v: vec3, w: vec3) -> vec3:
    """Transform a direction from a (u, v, w) frame to world coordinates."""
    return local_dir.x * u + local_dir.y * v + local_dir.z * w


# =============================================================================
# Direction Sampling
# =============================================================================


@ti.func
def sample_cosine_hemisphere(w: vec3, xi1: real, xi2: real) -> vec3:
    """Cosine-weighted direction in the hemisphere around w.

    Args:
        w: Hemisphere axis (unit length).
        xi1: Uniform random number mapped to the azimuth 2 * pi * xi1.
        xi2: Uniform random number; sqrt(xi2) is the disk radius.

    Returns:
        A unit direction with density cos(theta) / pi.
    """
    u, v, _ = build_onb_from_normal(w)
    r1 = 2.0 * tm.pi * xi1
    r2s = ti.sqrt(xi2)
    d = u * ti.cos(r1) * r2s + v * ti.sin(r1) * r2s + w * ti.sqrt(1.0 - xi2)
    return tm.normalize(d)


@ti.func
def sample_phong_lobe(w: vec3, exponent: real, xi1: real, xi2: real) -> vec3:
    """Sample a direction from a Phong lobe around the axis w.

    Uses cos(theta) = (1 - xi1) ^ (1 / (exponent + 1)) and phi = 2 * pi * xi2.

    Args:
        w: Lobe axis (unit length), typically the mirror direction.
        exponent: Phong exponent; larger values give a tighter lobe.
        xi1: Uniform random number for the polar angle.
        xi2: Uniform random number for the azimuth.

    Returns:
        A unit direction around w.
    """
    v = perpendicular(w)
    u = tm.cross(v, w)
    cos_theta = ti.pow(1.0 - xi1, 1.0 / (exponent + 1.0))
    sin_theta = ti.sqrt(ti.max(0.0, 1.0 - cos_theta * cos_theta))
    phi = 2.0 * tm.pi * xi2
    local_dir = vec3(ti.cos(phi) * sin_theta, ti.sin(phi) * sin_theta, cos_theta)
    return tm.normalize(local_to_world(local_dir, u, v, w))


@ti.func
def tent_filter(xi: real) -> real:
    """Map a uniform number in [0, 1) to a tent-distributed offset in [-1, 1).

    Draws 2 * xi and inverts the triangle CDF, so offsets cluster around 0.
    """
    x = 2.0 * xi
    result = 0.0
    if x < 1.0:
        result = ti.sqrt(x) - 1.0
    else:
        result = 1.0 - ti.sqrt(2.0 - x)
    return result
