"""Path tracing integrator for Monte Carlo light transport.

This module implements the SmallPT radiance estimator and the rendering
kernels built on it.

The estimator follows a path from the camera through the scene. At every
hit the surface emission, weighted by the path throughput, is added to the
result; then the material decides the next ray (or two rays, for a
shallow dielectric hit). The estimator is iterative: when a path ends, the
next pending branch is popped from a small fixed-size stack, so there is
no recursion and the work per path is bounded.

Key features:
    - Material dispatch (diffuse, glossy, mirror, dielectric)
    - Russian roulette once the depth exceeds the roulette start depth,
      with survival probability equal to the largest albedo channel
    - Hard depth cap independent of roulette
    - 2x2 stratified, tent-filtered pixel sampling
    - Accumulate-then-divide image buffer, so stopping between passes
      always leaves a valid image

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from src.pathtracer.core.integrator import render_image, setup_render_target
    >>> from src.pathtracer.scene.smallpt import create_smallpt_scene
    >>> from src.pathtracer.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_smallpt_scene()
    >>> setup_camera(camera, 256, 192)
    >>> setup_render_target(256, 192)
    >>> render_image(num_passes=1)
"""

import logging

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.pathtracer.camera.pinhole import SUBPIXEL_GRID, generate_primary_ray
from src.pathtracer.color.color import Color
from src.pathtracer.color.packing import PackedComponentOrder, pack_array
from src.pathtracer.config import MAX_BRANCH_STACK, MAX_IMAGE_HEIGHT, MAX_IMAGE_WIDTH
from src.pathtracer.core.ray import is_finite, max_component, vec3
from src.pathtracer.core.rng import next_float, seed_state
from src.pathtracer.geometry.sphere import oriented_normal, sphere_normal
from src.pathtracer.materials.dispatch import dispatch_material
from src.pathtracer.scene.intersection import (
    find_nearest_hit,
    sphere_albedo,
    sphere_centers,
    sphere_emission,
    sphere_materials,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Integrator Settings
# =============================================================================

_roulette_start_depth = ti.field(dtype=ti.i32, shape=())
_phong_exponent = ti.field(dtype=ti.f64, shape=())
_ior_outside = ti.field(dtype=ti.f64, shape=())
_ior_inside = ti.field(dtype=ti.f64, shape=())
_full_split_depth = ti.field(dtype=ti.i32, shape=())
_max_depth = ti.field(dtype=ti.i32, shape=())
_samples_per_pixel = ti.field(dtype=ti.i32, shape=())
_seed = ti.field(dtype=ti.i32, shape=())


def set_integrator_settings(
    roulette_start_depth: int = 5,
    phong_exponent: float = 20.0,
    ior_outside: float = 1.0,
    ior_inside: float = 1.5,
    dielectric_full_split_depth: int = 2,
    max_depth: int = 128,
    samples_per_pixel: int | None = None,
    seed: int | None = None,
) -> None:
    """Load integrator settings into their Taichi fields.

    RenderConfig.validate() is the fully checked path; here only the split
    depth is checked, as it bounds the branch stack. samples_per_pixel and
    seed are left unchanged when None.

    Raises:
        ValueError: If dielectric_full_split_depth is outside [0, MAX_BRANCH_STACK].
    """
    if not 0 <= dielectric_full_split_depth <= MAX_BRANCH_STACK:
        raise ValueError(
            f"dielectric_full_split_depth must be in [0, {MAX_BRANCH_STACK}], "
            f"got {dielectric_full_split_depth}"
        )
    _roulette_start_depth[None] = roulette_start_depth
    _phong_exponent[None] = phong_exponent
    _ior_outside[None] = ior_outside
    _ior_inside[None] = ior_inside
    _full_split_depth[None] = dielectric_full_split_depth
    _max_depth[None] = max_depth
    if samples_per_pixel is not None:
        _samples_per_pixel[None] = samples_per_pixel
    if seed is not None:
        _seed[None] = seed


def reset_integrator_settings() -> None:
    """Restore the default settings (SmallPT values, 1 sample, seed 0)."""
    set_integrator_settings(samples_per_pixel=1, seed=0)


def get_integrator_settings() -> dict[str, float]:
    """Current settings, for debugging and tests."""
    return {
        "roulette_start_depth": int(_roulette_start_depth[None]),
        "phong_exponent": float(_phong_exponent[None]),
        "ior_outside": float(_ior_outside[None]),
        "ior_inside": float(_ior_inside[None]),
        "dielectric_full_split_depth": int(_full_split_depth[None]),
        "max_depth": int(_max_depth[None]),
        "samples_per_pixel": int(_samples_per_pixel[None]),
        "seed": int(_seed[None]),
    }


reset_integrator_settings()

# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Sum of per-pass pixel values (preallocated to max size)
_color_sum = ti.Vector.field(3, dtype=ti.f64, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Number of completed passes
_pass_count = ti.field(dtype=ti.i32, shape=())

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())

# Scratch accumulator for estimate_radiance
_estimate_sum = ti.Vector.field(3, dtype=ti.f64, shape=())

# Scratch result for render_pixel
_pixel_scratch = ti.Vector.field(3, dtype=ti.f64, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Set the active image size and clear the buffers.

    The buffers are preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT so
    kernels compile once regardless of image size.

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1
    clear_render_target()


def clear_render_target() -> None:
    """Zero the accumulation buffer and pass count."""
    _color_sum.fill(0.0)
    _pass_count[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions as (width, height)."""
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def get_pass_count() -> int:
    """Number of passes accumulated since the last clear."""
    _check_render_target_initialized()
    return int(_pass_count[None])


# =============================================================================
# Path Tracing Core
# =============================================================================


@ti.func
def trace_path(origin: vec3, direction: vec3, start_depth: ti.i32, state):
    """Estimate the radiance arriving along a ray.

    Each loop iteration handles one path segment: find the nearest hit,
    add the hit emission times the throughput, then either continue with a
    child ray or pop a pending branch. A segment ends with no child when the
    ray escapes, the depth cap is hit, Russian roulette kills it, or every
    child would carry zero throughput.

    Args:
        origin: Ray origin.
        direction: Ray direction (normalized).
        start_depth: Depth of the ray; 0 for camera rays.
        state: Random state of this path.

    Returns:
        A tuple (radiance, state).
    """
    radiance = vec3(0.0, 0.0, 0.0)

    stack_origin = ti.Matrix.zero(ti.f64, MAX_BRANCH_STACK, 3)
    stack_direction = ti.Matrix.zero(ti.f64, MAX_BRANCH_STACK, 3)
    stack_throughput = ti.Matrix.zero(ti.f64, MAX_BRANCH_STACK, 3)
    stack_depth = ti.Vector.zero(ti.i32, MAX_BRANCH_STACK)
    top = 0

    s = state
    o = origin
    d = direction
    throughput = vec3(1.0, 1.0, 1.0)
    depth = start_depth

    roulette_start = _roulette_start_depth[None]
    max_depth = _max_depth[None]
    phong_exponent = _phong_exponent[None]
    ior_outside = _ior_outside[None]
    ior_inside = _ior_inside[None]
    full_split_depth = _full_split_depth[None]

    active = 1
    while active == 1:
        t, index = find_nearest_hit(o, d)
        has_next = 0

        if index >= 0:
            hit_point = o + d * t
            normal = sphere_normal(hit_point, sphere_centers[index])
            oriented = oriented_normal(normal, d)
            albedo = sphere_albedo[index]

            radiance += throughput * sphere_emission[index]

            next_depth = depth + 1
            survive = 1
            if next_depth > max_depth:
                survive = 0
            elif next_depth > roulette_start:
                p = max_component(albedo)
                s, xi = next_float(s)
                if xi < p:
                    albedo = albedo / p
                else:
                    survive = 0

            if survive == 1:
                s, count, dir1, w1, dir2, w2 = dispatch_material(
                    sphere_materials[index],
                    d,
                    normal,
                    oriented,
                    next_depth,
                    phong_exponent,
                    ior_outside,
                    ior_inside,
                    full_split_depth,
                    s,
                )

                if count == 2:
                    t2 = throughput * albedo * w2
                    if max_component(t2) > 0.0 and top < MAX_BRANCH_STACK:
                        for k in ti.static(range(3)):
                            stack_origin[top, k] = hit_point[k]
                            stack_direction[top, k] = dir2[k]
                            stack_throughput[top, k] = t2[k]
                        stack_depth[top] = next_depth
                        top += 1

                if count >= 1:
                    t1 = throughput * albedo * w1
                    if max_component(t1) > 0.0:
                        o = hit_point
                        d = dir1
                        throughput = t1
                        depth = next_depth
                        has_next = 1

        if has_next == 0:
            if top > 0:
                top -= 1
                o = vec3(stack_origin[top, 0], stack_origin[top, 1], stack_origin[top, 2])
                d = vec3(
                    stack_direction[top, 0], stack_direction[top, 1], stack_direction[top, 2]
                )
                throughput = vec3(
                    stack_throughput[top, 0], stack_throughput[top, 1], stack_throughput[top, 2]
                )
                depth = stack_depth[top]
            else:
                active = 0

    return radiance, s


@ti.func
def estimate_pixel(
    pixel_i: ti.i32, pixel_j: ti.i32, spp: ti.i32, pass_index: ti.i32, seed: ti.i32
) -> vec3:
    """One pass worth of samples for a pixel.

    For each of the 2x2 sub-pixel cells, averages spp path estimates,
    saturates the average to [0, 1] and adds a quarter of it.

    Args:
        pixel_i: Pixel x-coordinate (0 = left).
        pixel_j: Pixel y-coordinate (0 = bottom).
        spp: Samples per sub-pixel cell.
        pass_index: Index of this pass; selects fresh random states.
        seed: Base seed.

    Returns:
        The pixel value for this pass, each channel in [0, 1].
    """
    pixel = vec3(0.0, 0.0, 0.0)
    cells = SUBPIXEL_GRID * SUBPIXEL_GRID
    for cell_y in range(SUBPIXEL_GRID):
        for cell_x in range(SUBPIXEL_GRID):
            cell_sum = vec3(0.0, 0.0, 0.0)
            for s in range(spp):
                sample_index = (pass_index * cells + cell_y * SUBPIXEL_GRID + cell_x) * spp + s
                state = seed_state(pixel_i, pixel_j, sample_index, seed)
                state, ray = generate_primary_ray(pixel_i, pixel_j, cell_x, cell_y, state)
                sample, state = trace_path(ray.origin, ray.direction, 0, state)

                # Drop NaN/Inf samples
                if is_finite(sample) == 0:
                    sample = vec3(0.0, 0.0, 0.0)

                cell_sum += sample / ti.cast(spp, ti.f64)
            pixel += tm.clamp(cell_sum, 0.0, 1.0) / ti.cast(cells, ti.f64)
    return pixel


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_pass(width: ti.i32, height: ti.i32, spp: ti.i32, pass_index: ti.i32, seed: ti.i32):
    """Render one pass over every pixel and add it to the sum buffer."""
    for i, j in ti.ndrange(width, height):
        _color_sum[i, j] += estimate_pixel(i, j, spp, pass_index, seed)


@ti.kernel
def _render_single_pixel(
    pixel_i: ti.i32, pixel_j: ti.i32, spp: ti.i32, pass_index: ti.i32, seed: ti.i32
):
    # Single-iteration outer loop keeps the sub-pixel loops serial
    for _ in range(1):
        _pixel_scratch[None] = estimate_pixel(pixel_i, pixel_j, spp, pass_index, seed)


@ti.kernel
def _radiance_kernel(origin: vec3, direction: vec3, depth: ti.i32, seed: ti.i32) -> vec3:
    state = seed_state(0, 0, 0, seed)
    result, _ = trace_path(origin, tm.normalize(direction), depth, state)
    return result


@ti.kernel
def _estimate_kernel(origin: vec3, direction: vec3, num_samples: ti.i32, seed: ti.i32):
    d = tm.normalize(direction)
    for s in range(num_samples):
        state = seed_state(s, 0, 1, seed)
        sample, _ = trace_path(origin, d, 0, state)
        _estimate_sum[None] += sample


# =============================================================================
# Public Rendering API
# =============================================================================


def radiance(origin, direction, depth: int = 0, seed: int = 0) -> Color:
    """Trace a single path and return its radiance estimate.

    Args:
        origin: Ray origin (x, y, z).
        direction: Ray direction (normalized internally).
        depth: Starting depth of the ray.
        seed: Seed of the path's random state.

    Returns:
        The radiance estimate as a Color.
    """
    result = _radiance_kernel(vec3(*origin), vec3(*direction), depth, seed)
    return Color(float(result[0]), float(result[1]), float(result[2]))


def estimate_radiance(origin, direction, num_samples: int, seed: int = 0) -> Color:
    """Mean radiance over num_samples independent paths along one ray.

    Raises:
        ValueError: If num_samples is not positive.
    """
    if num_samples <= 0:
        raise ValueError(f"num_samples must be positive, got {num_samples}")
    _estimate_sum[None] = [0.0, 0.0, 0.0]
    _estimate_kernel(vec3(*origin), vec3(*direction), num_samples, seed)
    total = _estimate_sum[None]
    return Color(
        float(total[0]) / num_samples,
        float(total[1]) / num_samples,
        float(total[2]) / num_samples,
    )


def render_pixel(pixel_i: int, pixel_j: int, pass_index: int = 0) -> Color:
    """Render one pass for one pixel using the current settings and camera.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    _render_single_pixel(
        pixel_i, pixel_j, int(_samples_per_pixel[None]), pass_index, int(_seed[None])
    )
    value = _pixel_scratch[None]
    return Color(float(value[0]), float(value[1]), float(value[2]))


def render_pass() -> None:
    """Render one pass and add it to the render target.

    A pass traces 4 * samples_per_pixel paths per pixel with random states
    that no earlier pass used.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    spp = int(_samples_per_pixel[None])
    pass_index = int(_pass_count[None])
    _render_pass(width, height, spp, pass_index, int(_seed[None]))
    _pass_count[None] = pass_index + 1
    logger.debug("Finished pass %d (%dx%d, %d spp)", pass_index + 1, width, height, spp)


def render_image(num_passes: int = 1) -> None:
    """Accumulate num_passes passes into the render target.

    Can be called repeatedly to refine the image.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    for _ in range(num_passes):
        render_pass()


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the linear image as a NumPy array, top row first.

    The array shape is (height, width, 3). Before any pass it is all zero.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    passes = int(_pass_count[None])

    image = _color_sum.to_numpy()[:width, :height, :]
    if passes > 0:
        image = image / passes

    # (width, height, 3) -> (height, width, 3), then put row 0 at the top
    image = np.transpose(image, (1, 0, 2))
    image = np.flipud(image)

    image = np.clip(image, 0.0, 1.0)

    return image.astype(np.float32)


def get_packed_image(
    order: PackedComponentOrder = PackedComponentOrder.ARGB, encode_srgb: bool = True
) -> npt.NDArray[np.uint32]:
    """Get the image as packed integer pixels, top row first.

    Args:
        order: Bit layout of the packed pixels.
        encode_srgb: Apply the sRGB transfer curve before packing.

    Returns:
        A (height, width) uint32 array.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    from src.pathtracer.preview.display import srgb_encode

    image = get_image_numpy().astype(np.float64)
    if encode_srgb:
        image = srgb_encode(image)
    return pack_array(image, order)
