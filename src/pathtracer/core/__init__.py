"""Core rendering module.

Components:
    ray: Ray data structure and vector/sampling helpers
    rng: Per-sample xorshift random states
    integrator: Path tracing estimator, render target and kernels
    progressive: Pass-by-pass renderer with deadlines and callbacks

The integrator implements the SmallPT estimator iteratively, with Russian
roulette and an explicit stack of pending dielectric branches.
"""

from .ray import (
    Ray,
    build_onb_from_normal,
    cross,
    dot,
    is_finite,
    length,
    length_squared,
    local_to_world,
    make_ray,
    max_component,
    normalize,
    perpendicular,
    ray_at,
    real,
    reflect,
    sample_cosine_hemisphere,
    sample_phong_lobe,
    tent_filter,
    vec3,
)
from .rng import next_float, seed_state, wang_hash, xorshift32

# Note: integrator and progressive declare Taichi fields and are NOT imported
# here. Import them from src.pathtracer.core.integrator or
# src.pathtracer.core.progressive after ti.init().

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "real",
    "vec3",
    "length",
    "length_squared",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "max_component",
    "is_finite",
    "build_onb_from_normal",
    "perpendicular",
    "local_to_world",
    "sample_cosine_hemisphere",
    "sample_phong_lobe",
    "tent_filter",
    # Random numbers
    "wang_hash",
    "xorshift32",
    "seed_state",
    "next_float",
]
