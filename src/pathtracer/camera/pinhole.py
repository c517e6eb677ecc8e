"""Pinhole camera with stratified, tent-filtered primary rays.

This module implements the SmallPT camera. A pixel is split into a 2x2 grid
of sub-pixel cells; every sample draws a tent-distributed offset inside its
cell, which biases samples toward the cell center.

The camera basis is:
- w: unit view direction
- u: right, scaled by fov * aspect ratio
- v: up, scaled by fov

so a sensor position (pu, pv) in [-0.5, 0.5]^2 maps to the direction
u * pu + v * pv + w. Ray origins are pushed forward along that direction by
a fixed offset (140 units for the SmallPT box), which starts primary rays
inside the box rather than at the eye.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.camera.pinhole import PinholeCamera, setup_camera
    >>> setup_camera(PinholeCamera(), 1024, 768)
    >>> # Use generate_primary_ray(px, py, sx, sy, state) within a kernel
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti
import taichi.math as tm

from src.pathtracer.core.ray import Ray, make_ray, real, tent_filter, vec3
from src.pathtracer.core.rng import next_float

# Sub-pixel stratification grid (per axis)
SUBPIXEL_GRID = 2

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for the SmallPT pinhole camera.

    Attributes:
        eye: Camera position in world space.
        direction: View direction (normalized on setup).
        fov: Half-extent of the image plane at unit distance, vertically.
        vup: Up vector used to build the basis.
        near_offset: Distance primary ray origins are moved along their
            (unnormalized) direction.
    """

    eye: tuple[float, float, float] = (50.0, 52.0, 295.6)
    direction: tuple[float, float, float] = (0.0, -0.042612, -1.0)
    fov: float = 0.5135
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    near_offset: float = 140.0


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_eye = ti.Vector.field(3, dtype=ti.f64, shape=())
_camera_u = ti.Vector.field(3, dtype=ti.f64, shape=())  # Right, scaled
_camera_v = ti.Vector.field(3, dtype=ti.f64, shape=())  # Up, scaled
_camera_w = ti.Vector.field(3, dtype=ti.f64, shape=())  # Forward, unit
_camera_near_offset = ti.field(dtype=ti.f64, shape=())
_camera_resolution = ti.Vector.field(2, dtype=ti.f64, shape=())


# =============================================================================
# Camera Setup
# =============================================================================


def setup_camera(camera: PinholeCamera, width: int, height: int) -> None:
    """Compute the camera basis and load it into the camera fields.

    Args:
        camera: Camera configuration.
        width: Image width in pixels.
        height: Image height in pixels.

    Raises:
        ValueError: If the image size is not positive, fov is not positive,
            or direction is zero or parallel to vup.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if not math.isfinite(camera.fov) or camera.fov <= 0.0:
        raise ValueError(f"Camera fov must be positive, got {camera.fov}")

    direction = np.array(camera.direction, dtype=np.float64)
    vup = np.array(camera.vup, dtype=np.float64)

    norm = np.linalg.norm(direction)
    if norm == 0.0:
        raise ValueError("Camera direction must be non-zero")
    w = direction / norm

    right = np.cross(w, vup)
    right_norm = np.linalg.norm(right)
    if right_norm < 1e-12:
        raise ValueError("Camera direction must not be parallel to vup")
    right = right / right_norm

    aspect = width / height
    u = right * camera.fov * aspect
    up = np.cross(right, w)
    v = up / np.linalg.norm(up) * camera.fov

    _camera_eye[None] = [float(c) for c in camera.eye]
    _camera_u[None] = u.tolist()
    _camera_v[None] = v.tolist()
    _camera_w[None] = w.tolist()
    _camera_near_offset[None] = float(camera.near_offset)
    _camera_resolution[None] = [float(width), float(height)]


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_ray(pu: real, pv: real) -> Ray:
    """Generate the primary ray through sensor position (pu, pv).

    Args:
        pu: Horizontal sensor coordinate, -0.5 (left) to 0.5 (right).
        pv: Vertical sensor coordinate, -0.5 (bottom) to 0.5 (top).

    Returns:
        A Ray with a normalized direction whose origin sits near_offset
        along the unnormalized direction from the eye.
    """
    d = _camera_u[None] * pu + _camera_v[None] * pv + _camera_w[None]
    origin = _camera_eye[None] + d * _camera_near_offset[None]
    return make_ray(origin, tm.normalize(d))


@ti.func
def subpixel_position(pixel: ti.i32, cell: ti.i32, offset: real, resolution: real) -> real:
    """Sensor coordinate of a tent-jittered sample inside a sub-pixel cell.

    Args:
        pixel: Pixel index along the axis.
        cell: Sub-pixel cell index along the axis (0 or 1).
        offset: Tent filter offset in [-1, 1).
        resolution: Image size along the axis.

    Returns:
        The coordinate in [-0.5, 0.5] (slightly beyond at the image border).
    """
    s = (ti.cast(cell, real) + 0.5 + offset) / 2.0
    return (s + ti.cast(pixel, real)) / resolution - 0.5


@ti.func
def generate_primary_ray(pixel_i: ti.i32, pixel_j: ti.i32, cell_x: ti.i32, cell_y: ti.i32, state):
    """Generate a tent-filtered primary ray for one sub-pixel sample.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        cell_x: Sub-pixel column (0 or 1).
        cell_y: Sub-pixel row (0 or 1).
        state: Random state of the current path.

    Returns:
        A tuple (state, ray).
    """
    s, xi1 = next_float(state)
    s, xi2 = next_float(s)
    res = _camera_resolution[None]
    pu = subpixel_position(pixel_i, cell_x, tent_filter(xi1), res[0])
    pv = subpixel_position(pixel_j, cell_y, tent_filter(xi2), res[1])
    return s, get_ray(pu, pv)


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, ...]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with eye, u, v, w, near_offset and resolution.
    """
    info = {}
    for name, fld in (
        ("eye", _camera_eye),
        ("u", _camera_u),
        ("v", _camera_v),
        ("w", _camera_w),
        ("resolution", _camera_resolution),
    ):
        vec = fld[None]
        info[name] = tuple(float(vec[k]) for k in range(fld.n))
    info["near_offset"] = (float(_camera_near_offset[None]),)
    return info
