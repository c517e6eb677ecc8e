"""Gamma transfer curves and tone mapping operators for single colors.

The sRGB curve here is the piecewise linear/power form parameterised by a
break point and an exponent, with the slope and offset of the linear segment
derived so that both pieces meet with matching value and slope.

Components:
    redo_gamma / undo_gamma: sRGB encode and decode
    redo_gamma_power / undo_gamma_power: plain power-law gamma
    tone_map_reinhard / tone_map_filmic_aces / tone_map_exposure /
    tone_map_unreal3: HDR to display range operators

Array versions for whole images live in src.pathtracer.preview.display.
"""

import math

from src.pathtracer.color.color import Color

# =============================================================================
# sRGB Transfer Constants
# =============================================================================

SRGB_GAMMA = 2.4
SRGB_BREAK_POINT = 0.00304

_inv_gamma = 1.0 / SRGB_GAMMA
SRGB_SLOPE = 1.0 / (
    SRGB_GAMMA / math.pow(SRGB_BREAK_POINT, _inv_gamma - 1.0)
    - SRGB_GAMMA * SRGB_BREAK_POINT
    + SRGB_BREAK_POINT
)
SRGB_SLOPE_MATCH = SRGB_GAMMA * SRGB_SLOPE / math.pow(SRGB_BREAK_POINT, _inv_gamma - 1.0)
SRGB_SEGMENT_OFFSET = (
    SRGB_SLOPE_MATCH * math.pow(SRGB_BREAK_POINT, _inv_gamma) - SRGB_SLOPE * SRGB_BREAK_POINT
)


def redo_gamma_channel(value: float) -> float:
    """Encode one linear channel value with the sRGB transfer curve."""
    if value <= SRGB_BREAK_POINT:
        return value * SRGB_SLOPE
    return SRGB_SLOPE_MATCH * math.pow(value, _inv_gamma) - SRGB_SEGMENT_OFFSET


def undo_gamma_channel(value: float) -> float:
    """Decode one sRGB-encoded channel value back to linear."""
    if value <= SRGB_BREAK_POINT * SRGB_SLOPE:
        return value / SRGB_SLOPE
    return math.pow((value + SRGB_SEGMENT_OFFSET) / SRGB_SLOPE_MATCH, SRGB_GAMMA)


def redo_gamma(color: Color) -> Color:
    """Apply the sRGB encode curve to r, g and b."""
    return Color(
        redo_gamma_channel(color.r),
        redo_gamma_channel(color.g),
        redo_gamma_channel(color.b),
        color.a,
    )


def undo_gamma(color: Color) -> Color:
    """Apply the sRGB decode curve to r, g and b."""
    return Color(
        undo_gamma_channel(color.r),
        undo_gamma_channel(color.g),
        undo_gamma_channel(color.b),
        color.a,
    )


def redo_gamma_power(color: Color, gamma: float = 2.2) -> Color:
    """Encode with a plain 1/gamma power. Negative channels become 0."""
    inv = 1.0 / gamma
    return Color(
        math.pow(max(color.r, 0.0), inv),
        math.pow(max(color.g, 0.0), inv),
        math.pow(max(color.b, 0.0), inv),
        color.a,
    )


def undo_gamma_power(color: Color, gamma: float = 2.2) -> Color:
    return Color(
        math.pow(max(color.r, 0.0), gamma),
        math.pow(max(color.g, 0.0), gamma),
        math.pow(max(color.b, 0.0), gamma),
        color.a,
    )


# =============================================================================
# Tone Mapping
# =============================================================================


def _map_rgb(color: Color, fn) -> Color:
    return Color(fn(color.r), fn(color.g), fn(color.b), color.a)


def tone_map_reinhard(color: Color, exposure: float = 1.0) -> Color:
    """Reinhard operator x / (1 + x) applied to the exposed color."""

    def op(c):
        x = c * exposure
        return x / (1.0 + x)

    return _map_rgb(color, op)


def tone_map_filmic_curve(
    color: Color,
    exposure: float,
    a: float,
    b: float,
    c: float,
    d: float,
    e: float,
    subtract: float = 0.0,
    minimum: float = 5e-324,
) -> Color:
    """Rational filmic curve (x(ax + b)) / (x(cx + d) + e), saturated.

    Args:
        color: Linear HDR color.
        exposure: Multiplier applied before the curve.
        a, b, c, d, e: Curve coefficients.
        subtract: Offset removed from each exposed channel.
        minimum: Lower bound applied after the offset.

    Returns:
        The tone mapped color with channels in [0, 1].
    """

    def op(channel):
        x = max(channel * exposure - subtract, minimum)
        y = (x * (a * x + b)) / (x * (c * x + d) + e)
        return min(max(y, 0.0), 1.0)

    return _map_rgb(color, op)


def tone_map_filmic_aces(color: Color, exposure: float = 1.0) -> Color:
    """Narkowicz's fitted ACES filmic curve."""
    return tone_map_filmic_curve(color, exposure, 2.51, 0.03, 2.43, 0.59, 0.14)


def tone_map_exposure(color: Color, exposure: float = 1.0) -> Color:
    """Exponential exposure operator 1 - exp(-x * exposure)."""
    return _map_rgb(color, lambda c: 1.0 - math.exp(-c * exposure))


def tone_map_unreal3(color: Color, exposure: float = 1.0) -> Color:
    """Unreal Engine 3 operator, which bakes in a display gamma."""

    def op(c):
        x = c * exposure
        return x / (x + 0.155) * 1.019

    return _map_rgb(color, op)
