"""Image export utilities for rendered images.

Supported formats:
    - PNG (8-bit RGB or RGBA via Pillow)

Both float images (linear, run through the display pipeline) and packed
integer pixel arrays (unpacked with the given component order) can be
written.

Example:
    >>> from src.pathtracer.preview.export import save_png
    >>> save_png(renderer.get_image_numpy(), "output.png")
"""

import logging
import os

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from src.pathtracer.color.packing import PackedComponentOrder, unpack_array
from src.pathtracer.preview.display import (
    EncodingMethod,
    ToneMapMethod,
    process_image_for_display,
)

logger = logging.getLogger(__name__)


def prepare_for_export(
    image: npt.NDArray,
    *,
    tone_map: ToneMapMethod = "none",
    encoding: EncodingMethod = "srgb",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.uint8]:
    """Convert a linear float image to 8-bit display values.

    Channels are processed for display, then scaled to 0-255 with
    round-half-up, matching the scalar packing rule.

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.

    Raises:
        ValueError: If the image is not (H, W, 3) or contains NaN.
    """
    image = np.asarray(image)
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")
    if np.isnan(image).any():
        raise ValueError("Cannot export an image containing NaN values")

    processed = process_image_for_display(
        image, tone_map=tone_map, encoding=encoding, gamma=gamma, exposure=exposure
    )
    return (processed.astype(np.float64) * 255.0 + 0.5).astype(np.uint8)


def save_png(
    image: npt.NDArray,
    filepath: str | os.PathLike,
    *,
    tone_map: ToneMapMethod = "none",
    encoding: EncodingMethod = "srgb",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> None:
    """Save a linear float image as an 8-bit RGB PNG.

    Args:
        image: Linear image array of shape (H, W, 3), top row first.
        filepath: Output file path (should end in .png).
        tone_map: Tone mapping method applied before encoding.
        encoding: "srgb", "gamma" or "linear".
        gamma: Gamma value for the "gamma" encoding.
        exposure: Exposure multiplier for tone mapping.
    """
    image_uint8 = prepare_for_export(
        image, tone_map=tone_map, encoding=encoding, gamma=gamma, exposure=exposure
    )
    PILImage.fromarray(image_uint8).save(filepath)
    logger.info("Saved %dx%d PNG to %s", image_uint8.shape[1], image_uint8.shape[0], filepath)


def save_packed_png(
    packed: npt.NDArray,
    width: int,
    height: int,
    order: PackedComponentOrder,
    filepath: str | os.PathLike,
) -> None:
    """Save packed integer pixels as a PNG.

    Layouts with alpha are written as RGBA, the others as RGB.

    Args:
        packed: Packed pixels, either (height, width) or flat with
            width * height entries, top row first.
        width: Image width in pixels.
        height: Image height in pixels.
        order: Bit layout of the packed pixels.
        filepath: Output file path.

    Raises:
        ValueError: If the pixel count does not match width * height.
    """
    packed = np.asarray(packed)
    if packed.size != width * height:
        raise ValueError(
            f"Packed image has {packed.size} pixels, expected {width}x{height}"
        )
    rgba = unpack_array(packed.reshape(height, width), order)

    if order.has_alpha:
        pil_image = PILImage.fromarray(np.ascontiguousarray(rgba))
    else:
        pil_image = PILImage.fromarray(np.ascontiguousarray(rgba[..., :3]))
    pil_image.save(filepath)
    logger.info("Saved %dx%d packed %s PNG to %s", width, height, order.name, filepath)


def compute_rmse(image_a: npt.NDArray, image_b: npt.NDArray) -> float:
    """Root mean squared error between two images.

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(f"Image shapes must match: {image_a.shape} vs {image_b.shape}")

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
