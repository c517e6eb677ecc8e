"""Preview module for image output.

Components:
    display: NumPy tone mapping, sRGB and gamma encoding for whole images
    export: PNG export of float images and packed integer pixels (Pillow)

Example:
    >>> from src.pathtracer.preview import save_png
    >>> save_png(renderer.get_image_numpy(), "output.png", tone_map="reinhard")
"""

from src.pathtracer.preview.display import (
    EncodingMethod,
    ToneMapMethod,
    apply_gamma,
    process_image_for_display,
    srgb_decode,
    srgb_encode,
    tone_map_aces,
    tone_map_exposure,
    tone_map_reinhard,
)
from src.pathtracer.preview.export import (
    compute_rmse,
    prepare_for_export,
    save_packed_png,
    save_png,
)

__all__ = [
    # Tone mapping
    "tone_map_reinhard",
    "tone_map_exposure",
    "tone_map_aces",
    # Encoding
    "srgb_encode",
    "srgb_decode",
    "apply_gamma",
    "process_image_for_display",
    "ToneMapMethod",
    "EncodingMethod",
    # Export functions
    "save_png",
    "save_packed_png",
    "prepare_for_export",
    "compute_rmse",
]
