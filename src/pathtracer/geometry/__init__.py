"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with robust ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) returning a hit
distance or the NO_HIT sentinel.
"""

from .sphere import (
    EPSILON,
    NO_HIT,
    T_MAX,
    intersect_sphere,
    oriented_normal,
    sphere_normal,
)

__all__ = [
    "intersect_sphere",
    "sphere_normal",
    "oriented_normal",
    "NO_HIT",
    "EPSILON",
    "T_MAX",
]
