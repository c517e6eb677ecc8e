"""Color value model.

Components:
    color: Immutable Color type with blending, reductions and transforms
    transfer: sRGB and power gamma curves, tone mapping operators
    packing: PackedComponentOrder and integer pixel pack/unpack
    cache: ColorCache, an explicit interning table

Everything here is plain Python (plus NumPy for whole-image packing), so it
can be imported before Taichi is initialized.
"""

from .cache import ColorCache
from .color import (
    BLACK,
    BLUE,
    GREEN,
    RED,
    TRANSPARENT,
    WHITE,
    Color,
    average,
    blend,
    blend_bilinear,
    blend_over,
    grayscale_average,
    grayscale_b,
    grayscale_g,
    grayscale_lightness,
    grayscale_luminance,
    grayscale_r,
    invert,
    lightness,
    max_component,
    max_to_1,
    maximum,
    min_component,
    min_to_0,
    minimum,
    relative_luminance,
    saturate,
    sepia,
)
from .packing import (
    PackedComponentOrder,
    convert_array,
    pack,
    pack_array,
    pack_ints,
    unpack,
    unpack_array,
    unpack_ints,
)
from .transfer import (
    redo_gamma,
    redo_gamma_power,
    tone_map_exposure,
    tone_map_filmic_aces,
    tone_map_filmic_curve,
    tone_map_reinhard,
    tone_map_unreal3,
    undo_gamma,
    undo_gamma_power,
)

__all__ = [
    # Color type and constants
    "Color",
    "BLACK",
    "WHITE",
    "RED",
    "GREEN",
    "BLUE",
    "TRANSPARENT",
    # Blending
    "blend",
    "blend_bilinear",
    "blend_over",
    # Reductions
    "average",
    "min_component",
    "max_component",
    "lightness",
    "relative_luminance",
    "minimum",
    "maximum",
    # Transforms
    "invert",
    "sepia",
    "saturate",
    "max_to_1",
    "min_to_0",
    "grayscale_average",
    "grayscale_lightness",
    "grayscale_luminance",
    "grayscale_r",
    "grayscale_g",
    "grayscale_b",
    # Transfer and tone mapping
    "redo_gamma",
    "undo_gamma",
    "redo_gamma_power",
    "undo_gamma_power",
    "tone_map_reinhard",
    "tone_map_filmic_curve",
    "tone_map_filmic_aces",
    "tone_map_exposure",
    "tone_map_unreal3",
    # Packing
    "PackedComponentOrder",
    "pack",
    "unpack",
    "pack_ints",
    "unpack_ints",
    "pack_array",
    "unpack_array",
    "convert_array",
    # Interning
    "ColorCache",
]
