"""Materials module for the four SmallPT surface behaviours.

Components:
    types: MaterialType tag enumeration
    lambertian: Ideal diffuse reflection (cosine-weighted sampling)
    glossy: Phong lobe around the mirror direction
    mirror: Perfect specular reflection
    dielectric: Glass with Schlick Fresnel splitting
    dispatch: Tag-to-sampler matching used by the integrator

Each sampler is a Taichi function of (incoming direction, normal, random
state) returning new directions and weights; none of them hold per-material
state, since albedo and emission belong to the sphere.
"""

from .dielectric import (
    DEFAULT_FULL_SPLIT_DEPTH,
    DEFAULT_IOR_INSIDE,
    DEFAULT_IOR_OUTSIDE,
    fresnel_terms,
    scatter_dielectric,
    schlick_reflectance,
)
from .dispatch import dispatch_material
from .glossy import DEFAULT_PHONG_EXPONENT, scatter_glossy
from .lambertian import scatter_lambertian
from .mirror import scatter_mirror
from .types import MaterialType

__all__ = [
    "MaterialType",
    "dispatch_material",
    # Lambertian
    "scatter_lambertian",
    # Glossy
    "scatter_glossy",
    "DEFAULT_PHONG_EXPONENT",
    # Mirror
    "scatter_mirror",
    # Dielectric
    "scatter_dielectric",
    "fresnel_terms",
    "schlick_reflectance",
    "DEFAULT_IOR_OUTSIDE",
    "DEFAULT_IOR_INSIDE",
    "DEFAULT_FULL_SPLIT_DEPTH",
]
