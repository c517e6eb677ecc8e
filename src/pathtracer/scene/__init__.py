"""Scene module for sphere storage and ray-scene queries.

Components:
    intersection: Taichi fields for spheres and the nearest-hit query
    manager: Validated SphereRecord entries and the SceneManager
    smallpt: Factory for the nine-sphere SmallPT box

Scene data is kept in Structure-of-Arrays Taichi fields, preallocated to
MAX_SPHERES, so kernels compile once for any scene size.
"""

from .intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    find_nearest_hit,
    get_sphere_count,
)
from .manager import SceneManager, SphereRecord
from .smallpt import SmallptParams, create_smallpt_scene

__all__ = [
    # Intersection module
    "add_sphere",
    "clear_scene",
    "get_sphere_count",
    "find_nearest_hit",
    "MAX_SPHERES",
    # Manager module
    "SceneManager",
    "SphereRecord",
    # SmallPT box
    "SmallptParams",
    "create_smallpt_scene",
]
