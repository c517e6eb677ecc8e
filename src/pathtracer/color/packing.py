"""Packing colors to and from fixed-width integer pixels.

A PackedComponentOrder names a bit layout for a 32-bit (or 24-bit) pixel.
Each channel has an optional shift; a channel without a shift is absent from
the packed value and unpacks to a fixed default (255 for alpha).

Packing saturates each channel to [0, 1], scales by 255, adds 0.5 and
truncates, so 0.5/255 rounds up. NaN channels cannot be packed.

Example:
    >>> from src.pathtracer.color.color import Color
    >>> from src.pathtracer.color.packing import PackedComponentOrder, pack, unpack
    >>> value = pack(Color(1.0, 0.0, 0.0), PackedComponentOrder.ARGB)
    >>> hex(value)
    '0xffff0000'
    >>> unpack(value, PackedComponentOrder.ARGB)
    Color(r=1.0, g=0.0, b=0.0, a=1.0)
"""

import math
from enum import Enum

import numpy as np
import numpy.typing as npt

from src.pathtracer.color.color import Color

# Default integer value for an alpha channel missing from the layout
DEFAULT_ALPHA = 255


class PackedComponentOrder(Enum):
    """Bit layouts for packed pixels.

    Each value is a tuple of shifts for (A, R, G, B); None means the channel
    is not stored.
    """

    ARGB = (24, 16, 8, 0)
    ABGR = (24, 0, 8, 16)
    RGB = (None, 16, 8, 0)
    BGR = (None, 0, 8, 16)

    @property
    def shift_a(self):
        return self.value[0]

    @property
    def shift_r(self):
        return self.value[1]

    @property
    def shift_g(self):
        return self.value[2]

    @property
    def shift_b(self):
        return self.value[3]

    @property
    def has_alpha(self) -> bool:
        return self.value[0] is not None

    @property
    def component_count(self) -> int:
        return 4 if self.has_alpha else 3

    @classmethod
    def from_name(cls, name: str) -> "PackedComponentOrder":
        """Look up an order by case-insensitive name.

        Raises:
            ValueError: If the name is not a known order.
        """
        try:
            return cls[name.upper()]
        except KeyError:
            valid = ", ".join(order.name for order in cls)
            raise ValueError(
                f"Unknown packed component order {name!r}; expected one of {valid}"
            ) from None


# =============================================================================
# Scalar Packing
# =============================================================================


def to_int_channel(value: float) -> int:
    """Convert a float channel to 0-255 using saturate, scale, round half up.

    Raises:
        ValueError: If value is NaN.
    """
    if math.isnan(value):
        raise ValueError("Cannot pack a NaN color channel")
    saturated = min(max(value, 0.0), 1.0)
    return int(saturated * 255.0 + 0.5)


def _check_int_channel(name: str, value: int) -> None:
    if not 0 <= value <= 255:
        raise ValueError(f"Channel {name} must be in [0, 255], got {value}")


def pack_ints(r: int, g: int, b: int, a: int, order: PackedComponentOrder) -> int:
    """Pack 0-255 integer channels into one integer pixel.

    The alpha value is dropped when the layout has no alpha slot.

    Raises:
        ValueError: If any channel is outside [0, 255].
    """
    for name, value in (("r", r), ("g", g), ("b", b), ("a", a)):
        _check_int_channel(name, value)

    packed = (r << order.shift_r) | (g << order.shift_g) | (b << order.shift_b)
    if order.has_alpha:
        packed |= a << order.shift_a
    return packed


def unpack_ints(value: int, order: PackedComponentOrder) -> tuple[int, int, int, int]:
    """Unpack an integer pixel into (r, g, b, a) 0-255 channels.

    Absent alpha reads as 255.
    """
    r = (value >> order.shift_r) & 0xFF
    g = (value >> order.shift_g) & 0xFF
    b = (value >> order.shift_b) & 0xFF
    a = (value >> order.shift_a) & 0xFF if order.has_alpha else DEFAULT_ALPHA
    return r, g, b, a


def pack(color: Color, order: PackedComponentOrder = PackedComponentOrder.ARGB) -> int:
    """Pack a Color into an integer pixel.

    Raises:
        ValueError: If any channel is NaN.
    """
    return pack_ints(
        to_int_channel(color.r),
        to_int_channel(color.g),
        to_int_channel(color.b),
        to_int_channel(color.a),
        order,
    )


def unpack(value: int, order: PackedComponentOrder = PackedComponentOrder.ARGB) -> Color:
    """Unpack an integer pixel into a Color (each channel divided by 255)."""
    return Color.from_ints(*unpack_ints(value, order))


# =============================================================================
# Array Packing (whole images)
# =============================================================================


def pack_array(
    image: npt.NDArray, order: PackedComponentOrder = PackedComponentOrder.ARGB
) -> npt.NDArray[np.uint32]:
    """Pack an (H, W, 3) or (H, W, 4) float image into a uint32 array.

    Three-channel images are treated as opaque.

    Raises:
        ValueError: If the array shape is wrong or contains NaN.
    """
    image = np.asarray(image, dtype=np.float64)
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError(f"Expected an (H, W, 3|4) image, got shape {image.shape}")
    if np.isnan(image).any():
        raise ValueError("Cannot pack an image containing NaN values")

    channels = (np.clip(image, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint32)
    packed = (
        (channels[..., 0] << np.uint32(order.shift_r))
        | (channels[..., 1] << np.uint32(order.shift_g))
        | (channels[..., 2] << np.uint32(order.shift_b))
    )
    if order.has_alpha:
        if image.shape[2] == 4:
            alpha = channels[..., 3]
        else:
            alpha = np.full(packed.shape, DEFAULT_ALPHA, dtype=np.uint32)
        packed |= alpha << np.uint32(order.shift_a)
    return packed.astype(np.uint32)


def unpack_array(
    packed: npt.NDArray, order: PackedComponentOrder = PackedComponentOrder.ARGB
) -> npt.NDArray[np.uint8]:
    """Unpack a uint32 pixel array into an (H, W, 4) uint8 RGBA array."""
    packed = np.asarray(packed, dtype=np.uint32)
    mask = np.uint32(0xFF)
    out = np.empty(packed.shape + (4,), dtype=np.uint8)
    out[..., 0] = (packed >> np.uint32(order.shift_r)) & mask
    out[..., 1] = (packed >> np.uint32(order.shift_g)) & mask
    out[..., 2] = (packed >> np.uint32(order.shift_b)) & mask
    if order.has_alpha:
        out[..., 3] = (packed >> np.uint32(order.shift_a)) & mask
    else:
        out[..., 3] = DEFAULT_ALPHA
    return out


def convert_array(
    packed: npt.NDArray, source: PackedComponentOrder, target: PackedComponentOrder
) -> npt.NDArray[np.uint32]:
    """Repack a uint32 pixel array from one layout to another.

    Alpha is dropped when target has no alpha slot and reads as 255 when
    source has none.
    """
    rgba = unpack_array(packed, source).astype(np.uint32)
    out = (
        (rgba[..., 0] << np.uint32(target.shift_r))
        | (rgba[..., 1] << np.uint32(target.shift_g))
        | (rgba[..., 2] << np.uint32(target.shift_b))
    )
    if target.has_alpha:
        out |= rgba[..., 3] << np.uint32(target.shift_a)
    return out.astype(np.uint32)
