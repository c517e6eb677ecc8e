"""Scene-level sphere storage and nearest-hit queries.

The scene is an ordered list of spheres stored in Taichi fields
(structure-of-arrays) so kernels can scan them. It is written from Python
before rendering and only read by kernels.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere((0, 0, -10), 1.0, (0, 0, 0), (0.5, 0.5, 0.5), 0)
    0
    >>> # Use find_nearest_hit within a Taichi kernel
"""

import taichi as ti

from src.pathtracer.core.ray import vec3
from src.pathtracer.geometry.sphere import EPSILON, NO_HIT, T_MAX, intersect_sphere

# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f64, shape=MAX_SPHERES)
sphere_emission = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_albedo = ti.Vector.field(3, dtype=ti.f64, shape=MAX_SPHERES)
sphere_materials = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all spheres from the scene.

    Only the count is reset; stale entries are overwritten by later adds.
    """
    num_spheres[None] = 0


def add_sphere(center, radius: float, emission, albedo, material: int) -> int:
    """Append a sphere to the scene fields.

    No validation happens here; use SceneManager for checked input.

    Args:
        center: Sphere center (x, y, z).
        radius: Sphere radius.
        emission: Emitted radiance (r, g, b).
        albedo: Reflectance (r, g, b).
        material: MaterialType value.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = [float(c) for c in center]
    sphere_radii[idx] = float(radius)
    sphere_emission[idx] = [float(c) for c in emission]
    sphere_albedo[idx] = [float(c) for c in albedo]
    sphere_materials[idx] = int(material)
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def find_nearest_hit(ray_origin: vec3, ray_direction: vec3):
    """Find the closest sphere hit along a ray.

    Scans spheres in order, narrowing the accepted range to the closest hit
    found so far. Because acceptance is strict, a later sphere at exactly
    the same distance never replaces an earlier one.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The direction vector of the ray.

    Returns:
        A tuple (t, index): the hit distance and sphere index, or
        (NO_HIT, -1) when nothing is hit.
    """
    closest_t = T_MAX
    hit_index = -1

    for i in range(num_spheres[None]):
        t = intersect_sphere(
            ray_origin, ray_direction, sphere_centers[i], sphere_radii[i], EPSILON, closest_t
        )
        if t != NO_HIT and t < closest_t:
            closest_t = t
            hit_index = i

    result_t = NO_HIT
    if hit_index >= 0:
        result_t = closest_t
    return result_t, hit_index
