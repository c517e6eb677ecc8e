"""Taichi implementation of a SmallPT-style Monte Carlo path tracer.

This package renders scenes made of analytic spheres with four material
behaviours (diffuse, glossy Phong, mirror and glass), using an iterative
path integrator with Russian roulette and stratified, tent-filtered
sub-pixel sampling.

Subpackages:
    color: Color value model, gamma/tone mapping, integer pixel packing
    core: Vector utilities, random numbers, integrator and progressive loop
    geometry: Ray-sphere intersection
    materials: Material tags and per-material sampling
    scene: Scene records, Taichi scene storage and the default SmallPT box
    camera: Pinhole camera with tent-filtered primary rays
    preview: Tone mapping and PNG export for whole images

Modules that declare Taichi fields must be imported after ti.init().
"""

__version__ = "0.1.0"
