"""Camera module for primary ray generation.

Components:
    pinhole: SmallPT pinhole camera with 2x2 stratified, tent-filtered
        sub-pixel sampling

Sensor coordinates run from -0.5 to 0.5 across the image, left to right
and bottom to top.
"""

from .pinhole import (
    SUBPIXEL_GRID,
    PinholeCamera,
    generate_primary_ray,
    get_camera_info,
    get_ray,
    setup_camera,
    subpixel_position,
)

__all__ = [
    "PinholeCamera",
    "SUBPIXEL_GRID",
    "setup_camera",
    "get_ray",
    "subpixel_position",
    "generate_primary_ray",
    "get_camera_info",
]
