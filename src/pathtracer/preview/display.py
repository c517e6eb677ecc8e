"""Tone mapping and display encoding for whole images.

These are the NumPy counterparts of the per-color curves in
src.pathtracer.color.transfer, applied to (H, W, 3) float arrays.

Features:
    - Tone mapping (Reinhard, exposure-based, ACES filmic)
    - sRGB encode/decode with the same constants as the scalar curve
    - Plain power-law gamma

Example:
    >>> from src.pathtracer.preview.display import process_image_for_display
    >>> image = renderer.get_image_numpy()
    >>> display = process_image_for_display(image, tone_map="reinhard")
"""

from typing import Literal

import numpy as np
import numpy.typing as npt

from src.pathtracer.color.transfer import (
    SRGB_BREAK_POINT,
    SRGB_GAMMA,
    SRGB_SEGMENT_OFFSET,
    SRGB_SLOPE,
    SRGB_SLOPE_MATCH,
)

# Type aliases for the processing options
ToneMapMethod = Literal["none", "reinhard", "exposure", "aces"]
EncodingMethod = Literal["srgb", "gamma", "linear"]


# =============================================================================
# Tone Mapping
# =============================================================================


def tone_map_reinhard(image: npt.NDArray, exposure: float = 1.0) -> npt.NDArray[np.float32]:
    """Apply Reinhard tone mapping: x / (1 + x) with x = c * exposure.

    Args:
        image: Linear HDR image array of shape (H, W, 3).
        exposure: Multiplier applied before the curve.

    Returns:
        Tone mapped image in [0, 1) range.
    """
    x = np.maximum(np.asarray(image, dtype=np.float64), 0.0) * exposure
    return (x / (1.0 + x)).astype(np.float32)


def tone_map_exposure(image: npt.NDArray, exposure: float = 1.0) -> npt.NDArray[np.float32]:
    """Apply exposure-based tone mapping: 1 - exp(-c * exposure)."""
    x = np.maximum(np.asarray(image, dtype=np.float64), 0.0)
    return (1.0 - np.exp(-x * exposure)).astype(np.float32)


def tone_map_aces(image: npt.NDArray, exposure: float = 1.0) -> npt.NDArray[np.float32]:
    """Apply Narkowicz's fitted ACES filmic curve, saturated to [0, 1]."""
    x = np.maximum(np.asarray(image, dtype=np.float64), 0.0) * exposure
    y = (x * (2.51 * x + 0.03)) / (x * (2.43 * x + 0.59) + 0.14)
    return np.clip(y, 0.0, 1.0).astype(np.float32)


# =============================================================================
# Display Encoding
# =============================================================================


def srgb_encode(image: npt.NDArray) -> npt.NDArray[np.float64]:
    """Encode linear values with the sRGB transfer curve.

    Negative values are clamped to zero first. The linear segment below
    the break point matches color.transfer.redo_gamma_channel.
    """
    x = np.maximum(np.asarray(image, dtype=np.float64), 0.0)
    return np.where(
        x <= SRGB_BREAK_POINT,
        x * SRGB_SLOPE,
        SRGB_SLOPE_MATCH * np.power(x, 1.0 / SRGB_GAMMA) - SRGB_SEGMENT_OFFSET,
    )


def srgb_decode(image: npt.NDArray) -> npt.NDArray[np.float64]:
    """Decode sRGB-encoded values back to linear."""
    y = np.maximum(np.asarray(image, dtype=np.float64), 0.0)
    return np.where(
        y <= SRGB_BREAK_POINT * SRGB_SLOPE,
        y / SRGB_SLOPE,
        np.power((y + SRGB_SEGMENT_OFFSET) / SRGB_SLOPE_MATCH, SRGB_GAMMA),
    )


def apply_gamma(image: npt.NDArray, gamma: float = 2.2) -> npt.NDArray[np.float32]:
    """Apply power-law gamma correction (out = in^(1/gamma)).

    Args:
        image: Linear image array of shape (H, W, 3) in [0, 1] range.
        gamma: Gamma value (default 2.2).

    Returns:
        Gamma corrected image.

    Raises:
        ValueError: If gamma is not positive.
    """
    if gamma <= 0.0:
        raise ValueError(f"gamma must be positive, got {gamma}")
    image = np.asarray(image, dtype=np.float32)
    if gamma == 1.0:
        return image

    # Clamp to [0, 1] before gamma to avoid NaN from negative values
    image = np.clip(image, 0.0, 1.0)
    return np.power(image, 1.0 / gamma).astype(np.float32)


def process_image_for_display(
    image: npt.NDArray,
    tone_map: ToneMapMethod = "none",
    encoding: EncodingMethod = "srgb",
    gamma: float = 2.2,
    exposure: float = 1.0,
) -> npt.NDArray[np.float32]:
    """Run the display pipeline: tone map, encode, clamp to [0, 1].

    Args:
        image: Linear image array of shape (H, W, 3).
        tone_map: "none", "reinhard", "exposure" or "aces".
        encoding: "srgb" for the sRGB curve, "gamma" for a power law with
            the given gamma, "linear" for no encoding.
        gamma: Gamma value used by the "gamma" encoding.
        exposure: Exposure multiplier for the tone mapping operators.

    Returns:
        Processed image ready for display, in [0, 1] range.

    Raises:
        ValueError: On an unknown tone mapping or encoding method.
    """
    result = np.array(image, dtype=np.float32)

    if tone_map == "reinhard":
        result = tone_map_reinhard(result, exposure)
    elif tone_map == "exposure":
        result = tone_map_exposure(result, exposure)
    elif tone_map == "aces":
        result = tone_map_aces(result, exposure)
    elif tone_map != "none":
        raise ValueError(f"Unknown tone mapping method: {tone_map}")

    if encoding == "srgb":
        result = srgb_encode(np.clip(result, 0.0, 1.0))
    elif encoding == "gamma":
        result = apply_gamma(result, gamma)
    elif encoding != "linear":
        raise ValueError(f"Unknown display encoding: {encoding}")

    return np.clip(result, 0.0, 1.0).astype(np.float32)
