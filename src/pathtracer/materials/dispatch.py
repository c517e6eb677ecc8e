"""Material dispatch.

Matches a sphere's MaterialType tag to the sampling function of that
material and normalises the results to a common shape: up to two child
directions, each with a scalar weight that multiplies the albedo.
"""

import taichi as ti

from src.pathtracer.core.ray import real, vec3
from src.pathtracer.materials.dielectric import scatter_dielectric
from src.pathtracer.materials.glossy import scatter_glossy
from src.pathtracer.materials.lambertian import scatter_lambertian
from src.pathtracer.materials.mirror import scatter_mirror
from src.pathtracer.materials.types import MaterialType


@ti.func
def dispatch_material(
    material: ti.i32,
    incident_direction: vec3,
    normal: vec3,
    oriented: vec3,
    depth: ti.i32,
    phong_exponent: real,
    ior_outside: real,
    ior_inside: real,
    full_split_depth: ti.i32,
    state,
):
    """Scatter a ray according to the material tag.

    Args:
        material: MaterialType value of the hit sphere.
        incident_direction: The incoming ray direction (normalized).
        normal: Outward geometric normal at the hit point.
        oriented: normal flipped to face against the incoming ray.
        depth: Depth of this hit.
        phong_exponent: Exponent for GLOSSY_PHONG.
        ior_outside: Outside index of refraction for dielectrics.
        ior_inside: Inside index of refraction for dielectrics.
        full_split_depth: Dielectric full-split depth.
        state: Random state of the current path.

    Returns:
        A tuple (state, count, dir1, w1, dir2, w2). count is the number of
        child rays (0 for an unknown tag, which ends the path).
    """
    s = state
    count = 1
    dir1 = vec3(0.0, 0.0, 0.0)
    w1 = 1.0
    dir2 = vec3(0.0, 0.0, 0.0)
    w2 = 0.0

    if material == int(MaterialType.DIFFUSE_LAMBERTIAN):
        s, dir1 = scatter_lambertian(oriented, s)

    elif material == int(MaterialType.GLOSSY_PHONG):
        s, dir1 = scatter_glossy(incident_direction, normal, phong_exponent, s)

    elif material == int(MaterialType.REFLECTIVE):
        dir1 = scatter_mirror(incident_direction, normal)

    elif material == int(MaterialType.REFLECTIVE_AND_REFRACTIVE):
        s, count, dir1, w1, dir2, w2 = scatter_dielectric(
            incident_direction,
            normal,
            oriented,
            depth,
            ior_outside,
            ior_inside,
            full_split_depth,
            s,
        )

    else:
        count = 0

    return s, count, dir1, w1, dir2, w2
